import re

import pytest

from note_address import FILENAME_BYTES, crockford_b32encode, derive_address, note_stem


def test_known_addresses():
    assert derive_address("note", "s3cr3t", 8) == "5j185wenj20g"
    assert derive_address("hello", "s3cr3t", 8) == "cmxdv1941egg"


def test_default_truncation_is_filename_bytes():
    assert derive_address("hello", "s3cr3t") == derive_address("hello", "s3cr3t", FILENAME_BYTES)


def test_deterministic():
    assert derive_address("some note", "key", 8) == derive_address("some note", "key", 8)


def test_secret_changes_address():
    assert derive_address("note", "a", 8) != derive_address("note", "b", 8)


def test_stem_changes_address():
    assert derive_address("note", "a", 8) != derive_address("other", "a", 8)


def test_no_delimiter_between_stem_and_secret():
    # hashed as the plain concatenation of the two
    assert derive_address("ab", "c", 8) == derive_address("a", "bc", 8)


def test_truncation_drops_last_byte():
    # 8 requested bytes -> 7 encoded bytes -> 56 bits -> 12 characters
    assert len(derive_address("note", "x", 8)) == 12
    assert len(derive_address("note", "x", 10)) == 15


def test_zero_and_oversized_truncation_use_whole_digest():
    full = derive_address("note", "x", 0)
    assert full == "w415x5rrp6qbens64m83a8hqxv1pa6mf93jj6cjn8ar9jn7x9c"
    assert derive_address("note", "x", 1000) == full
    assert derive_address("note", "x", 33) == full
    assert derive_address("note", "x", 32) == full


def test_truncated_address_is_prefix_of_full():
    full = derive_address("note", "x", 0)
    assert full.startswith(derive_address("note", "x", 6)[:-1])


@pytest.mark.parametrize("stem", ["note", "Übersicht", "a b c", "x" * 300, ""])
def test_address_alphabet(stem):
    address = derive_address(stem, "secret", 8)
    assert re.fullmatch(r"[0-9a-hjkmnp-tv-z]+", address)
    assert "/" not in address and "." not in address
    assert address == address.lower()


def test_crockford_encoding():
    assert crockford_b32encode(b"") == ""
    assert crockford_b32encode(b"\x00") == "00"
    assert crockford_b32encode(b"\xff\xff\xff\xff\xff") == "ZZZZZZZZ"


def test_note_stem():
    assert note_stem("hello.md") == "hello"
    assert note_stem("archive.tar.md") == "archive.tar"
    assert note_stem("trailing.") == "trailing"
    assert note_stem("readme") == "readme"
    with pytest.raises(ValueError):
        note_stem("")


def test_truncating_to_one_byte_is_rejected():
    with pytest.raises(ValueError):
        derive_address("note", "x", 1)


def test_undecodable_filename_bytes_hash_as_replacement_character():
    # os.fsdecode(b"caf\xe9") on a UTF-8 system
    assert derive_address("caf\udce9", "k", 8) == derive_address("caf\ufffd", "k", 8)
    assert derive_address("café", "k", 8) != derive_address("caf\ufffd", "k", 8)
