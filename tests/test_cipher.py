import pytest
from app.cipher import Cipher, decrypt, derive_pattern


def test_derive_pattern_unknown_letters_are_wildcards():
    cipher = Cipher.from_mapping({"x": "c"})
    assert derive_pattern("xyz", cipher) == "c**"
    assert derive_pattern("yzy", Cipher()) == "***"


def test_derive_pattern_fully_resolved():
    cipher = Cipher.from_mapping({"x": "c", "y": "a", "z": "t"})
    assert derive_pattern("zyx", cipher) == "tac"


def test_decrypt_passes_through_unmapped():
    cipher = Cipher.from_mapping({"x": "c", "y": "a"})
    assert decrypt("xyz xy", cipher) == "caz ca"


def test_decrypt_accepts_plain_dict():
    assert decrypt("ab, ba!", {"a": "o", "b": "n"}) == "on, no!"


def test_extend_and_undo():
    cipher = Cipher.from_mapping({"a": "b"})
    new = {"c": "d", "e": "f"}
    cipher.extend(new)
    assert len(cipher) == 3
    assert cipher.is_taken("d")
    cipher.undo(new)
    assert len(cipher) == 1
    assert not cipher.is_taken("d")
    assert "c" not in cipher
    assert cipher.get("a") == "b"


def test_extend_rejects_duplicate_value():
    cipher = Cipher.from_mapping({"a": "b"})
    with pytest.raises(ValueError):
        cipher.extend({"c": "b"})
    # Nothing partially applied
    assert len(cipher) == 1


def test_extend_rejects_letter_repeated_within_call():
    cipher = Cipher()
    with pytest.raises(ValueError):
        cipher.extend({"a": "x", "b": "x"})
    assert len(cipher) == 0
    assert not cipher.is_taken("x")

    with pytest.raises(ValueError):
        Cipher.from_mapping({"a": "x", "b": "x"})


def test_extend_rejects_remapping():
    cipher = Cipher.from_mapping({"a": "b"})
    with pytest.raises(ValueError):
        cipher.extend({"a": "c"})


def test_snapshot_is_structural():
    one = Cipher.from_mapping({"b": "x", "a": "y"})
    two = Cipher()
    two.extend({"a": "y"})
    two.extend({"b": "x"})
    assert one.snapshot() == two.snapshot() == (("a", "y"), ("b", "x"))
