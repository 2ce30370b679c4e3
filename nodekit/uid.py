"""Random version 4 UUIDs and parsing of their string forms."""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass

_UUID_RE = re.compile(
    r"\{?([a-fA-F0-9]{8})-?([a-fA-F0-9]{4})-?([a-fA-F0-9]{4})-?"
    r"([a-fA-F0-9]{4})-?([a-fA-F0-9]{12})\}?"
)


@dataclass(frozen=True)
class UUID:
    """A 16-byte identifier."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != 16:
            raise ValueError("UUID must be exactly 16 bytes")

    @classmethod
    def random(cls) -> "UUID":
        """Generate a new random version 4 UUID."""
        raw = bytearray(secrets.token_bytes(16))
        raw[6] = (raw[6] & 0x0F) | 0x40
        raw[8] = (raw[8] & 0x3F) | 0x80
        return cls(bytes(raw))

    @classmethod
    def from_str(cls, text: str) -> "UUID":
        """Parse a UUID with or without dashes and braces."""
        if text == "":
            raise ValueError("Empty string")
        match = _UUID_RE.fullmatch(text)
        if match is None:
            raise ValueError("Invalid string format")
        return cls(bytes.fromhex("".join(match.groups())))

    def hex(self) -> str:
        """Return the xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx form."""
        h = self.data.hex()
        return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"

    def hex_ex(self) -> str:
        """Return the 32 hex digits without separators."""
        return self.data.hex()

    def __str__(self) -> str:
        return self.hex()