import string

from nodekit.digest import hash_number, md5_hex


def test_crc32_check_value():
    assert hash_number("123456789") == 0xCBF43926


def test_md5_of_empty_string():
    assert md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"


def test_md5_known_sentence():
    text = "The quick brown fox jumps over the lazy dog"
    assert md5_hex(text) == "9e107d9d372bb6826bd81d3542a419d6"


def test_md5_shape():
    digest = md5_hex("anything at all")
    assert len(digest) == 32
    assert set(digest) <= set(string.hexdigits.lower())


def test_str_and_bytes_agree():
    assert md5_hex("hello") == md5_hex(b"hello")
    assert hash_number("hello") == hash_number(b"hello")


def test_hash_number_is_32_bit_and_stable():
    values = [hash_number(f"key-{i}") for i in range(50)]
    assert all(0 <= v < 2**32 for v in values)
    assert values == [hash_number(f"key-{i}") for i in range(50)]
    assert len(set(values)) == len(values)