"""Small hashing helpers: CRC-32 numbers and MD5 hex digests."""

from __future__ import annotations

import hashlib
import zlib
from typing import Union


def _to_bytes(text: Union[str, bytes]) -> bytes:
    return text.encode("utf-8") if isinstance(text, str) else bytes(text)


def hash_number(text: Union[str, bytes]) -> int:
    """Return the IEEE CRC-32 checksum of ``text``."""
    return zlib.crc32(_to_bytes(text)) & 0xFFFFFFFF


def md5_hex(text: Union[str, bytes]) -> str:
    """Return the MD5 digest of ``text`` as lowercase hex."""
    return hashlib.md5(_to_bytes(text)).hexdigest()