"""
MessageId Value Object - server-assigned, auto-incrementing message sequence.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class MessageId:
    value: int  # messages.id (serial), doubles as the insertion sequence

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"MessageId must be an integer: {self.value!r}")
        if self.value <= 0:
            raise ValueError(f"MessageId must be positive: {self.value}")

    def __str__(self) -> str:
        return str(self.value)
