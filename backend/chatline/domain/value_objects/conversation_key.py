"""
ConversationKey Value Object - canonical identifier of a two-party conversation.

The key is derived from the unordered pair of participant ids: the smaller id
first, joined by SEPARATOR ("3_7"). The format is persisted in the messages
table (chat_id column) and exposed in the history URL, so it must not change.
"""

from dataclasses import dataclass

from chatline.domain.value_objects.user_id import UserId

SEPARATOR = "_"


@dataclass(frozen=True)
class ConversationKey:
    value: str  # "<lower id>_<higher id>"

    def __post_init__(self):
        parts = self.value.split(SEPARATOR) if self.value else []
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid conversation key: {self.value!r}")
        low, high = int(parts[0]), int(parts[1])
        if low <= 0 or high <= 0 or low == high:
            raise ValueError(f"Invalid conversation participants: {self.value!r}")
        if low > high or self.value != f"{low}{SEPARATOR}{high}":
            raise ValueError(f"Conversation key is not canonical: {self.value!r}")

    @classmethod
    def of(cls, a: UserId, b: UserId) -> "ConversationKey":
        """Canonical key for the unordered pair {a, b}."""
        if a == b:
            raise ValueError("A conversation needs two distinct participants")
        low, high = sorted((a.value, b.value))
        return cls(f"{low}{SEPARATOR}{high}")

    @property
    def participants(self) -> tuple[UserId, UserId]:
        low, high = self.value.split(SEPARATOR)
        return UserId(int(low)), UserId(int(high))

    def includes(self, user_id: UserId) -> bool:
        return user_id in self.participants

    def counterpart_of(self, user_id: UserId) -> UserId:
        low, high = self.participants
        if user_id == low:
            return high
        if user_id == high:
            return low
        raise ValueError(f"User {user_id} is not part of conversation {self.value}")

    def __str__(self) -> str:
        return self.value
