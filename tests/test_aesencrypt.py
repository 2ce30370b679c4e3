import pytest

from nodekit.aesencrypt import AesEncrypt

KEY_18 = "secret" * 3
KEY_24 = "secret" * 4
KEY_36 = "secret" * 6


@pytest.mark.parametrize("key", [KEY_18, KEY_24, KEY_36])
def test_round_trip(key):
    aes = AesEncrypt(key)
    message = "hello, world — ünïcode too"
    encrypted = aes.encrypt(message)
    assert encrypted != message.encode("utf-8")
    assert aes.decrypt(encrypted) == message


def test_ciphertext_length_matches_plaintext():
    aes = AesEncrypt(KEY_24)
    message = "a" * 37
    assert len(aes.encrypt(message)) == 37


def test_short_key_rejected():
    with pytest.raises(ValueError, match="less than 16"):
        AesEncrypt("secret")


def test_key_is_truncated_to_supported_length():
    assert AesEncrypt(KEY_18).encrypt("payload") == AesEncrypt(KEY_18[:16]).encrypt("payload")
    assert AesEncrypt(KEY_36).encrypt("payload") == AesEncrypt(KEY_36[:32]).encrypt("payload")


def test_different_keys_give_different_ciphertext():
    assert AesEncrypt(KEY_18).encrypt("payload") != AesEncrypt(KEY_24).encrypt("payload")


def test_stream_prefix_property():
    aes = AesEncrypt(KEY_24)
    short = aes.encrypt("prefix")
    longer = aes.encrypt("prefix and more")
    assert longer.startswith(short)


def test_empty_message():
    aes = AesEncrypt(KEY_18)
    assert aes.encrypt("") == b""
    assert aes.decrypt(b"") == ""