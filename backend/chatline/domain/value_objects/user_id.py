"""
UserId Value Object - numeric user identifier issued by the identity provider.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class UserId:
    value: int  # users.id (serial)

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"UserId must be an integer: {self.value!r}")
        if self.value <= 0:
            raise ValueError(f"UserId must be positive: {self.value}")

    @classmethod
    def parse(cls, raw) -> "UserId":
        """Build a UserId from an int or a decimal string (token claims, path params)."""
        if isinstance(raw, str):
            raw = raw.strip()
            if not raw.isdigit():
                raise ValueError(f"Invalid user id: {raw!r}")
            raw = int(raw)
        return cls(raw)

    def __str__(self) -> str:
        return str(self.value)
