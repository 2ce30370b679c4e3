"""AES-CFB string encryption keyed by a text key."""

from __future__ import annotations

from typing import Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

_BLOCK_SIZE = 16
_KEY_ERROR = "The length of res key shall not be less than 16"


class AesEncrypt:
    """Encrypt and decrypt text with AES in CFB mode.

    The key text is truncated to 32, 24 or 16 bytes, whichever is the longest
    it can fill; the first 16 key bytes also serve as the IV.
    """

    def __init__(self, key: str) -> None:
        if len(key.encode("utf-8")) < _BLOCK_SIZE:
            raise ValueError(_KEY_ERROR)
        self.key = key

    def _key_bytes(self) -> bytes:
        raw = self.key.encode("utf-8")
        if len(raw) < _BLOCK_SIZE:
            raise ValueError(_KEY_ERROR)
        if len(raw) >= 32:
            return raw[:32]
        if len(raw) >= 24:
            return raw[:24]
        return raw[:16]

    def _cipher(self) -> Cipher:
        key = self._key_bytes()
        return Cipher(algorithms.AES(key), modes.CFB(key[:_BLOCK_SIZE]))

    def encrypt(self, message: Union[str, bytes]) -> bytes:
        """Encrypt ``message`` and return the ciphertext bytes."""
        data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
        encryptor = self._cipher().encryptor()
        return encryptor.update(data) + encryptor.finalize()

    def decrypt(self, data: bytes) -> str:
        """Decrypt ``data`` and return the text; undecodable bytes are replaced."""
        decryptor = self._cipher().decryptor()
        plain = decryptor.update(bytes(data)) + decryptor.finalize()
        return plain.decode("utf-8", errors="replace")