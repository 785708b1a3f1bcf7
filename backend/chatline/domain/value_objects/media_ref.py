"""
MediaRef Value Object - opaque reference handed out by the blob store.

References are bare file names ("9f1c...e2.png"): no separators and no
leading dot, so they can never point outside the media directory.
"""

import re
from dataclasses import dataclass

_REF_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_\-]*(\.[A-Za-z0-9]{1,10})?$")


@dataclass(frozen=True)
class MediaRef:
    value: str

    def __post_init__(self):
        if not self.value or len(self.value) > 255:
            raise ValueError("Media reference cannot be empty or longer than 255 chars")
        if not _REF_PATTERN.match(self.value):
            raise ValueError(f"Invalid media reference: {self.value!r}")

    @property
    def extension(self) -> str:
        _, dot, ext = self.value.rpartition(".")
        return f".{ext}" if dot else ""

    def __str__(self) -> str:
        return self.value
