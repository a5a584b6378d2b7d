import pytest
from app.trie import Trie, load_trie


def _make_trie(words: list[str]) -> Trie:
    trie = Trie()
    for w in words:
        trie.insert(w)
    return trie


def test_insert_and_contains():
    trie = _make_trie(["cat"])
    assert trie.contains("cat")
    assert "cat" in trie
    assert not trie.contains("dog")


def test_prefix_is_not_a_word():
    trie = _make_trie(["cats"])
    assert not trie.contains("cat")
    assert not trie.contains("")


def test_contains_non_alpha_is_false():
    trie = _make_trie(["cat"])
    assert not trie.contains("c4t")
    assert not trie.contains("CAT")


def test_insert_is_idempotent():
    trie = _make_trie(["cat", "cat", "cot"])
    assert len(trie) == 2
    assert trie.find_by_pattern("c*t") == ["cat", "cot"]


def test_find_exact_pattern():
    trie = _make_trie(["cat", "cot"])
    assert trie.find_by_pattern("cat") == ["cat"]


def test_find_wildcard_pattern():
    trie = _make_trie(["cat", "cot", "dog"])
    assert trie.find_by_pattern("c*t") == ["cat", "cot"]
    assert trie.find_by_pattern("dog") == ["dog"]
    assert trie.find_by_pattern("x*z") == []


def test_find_is_lexicographic_regardless_of_insert_order():
    trie = _make_trie(["zed", "bed", "red", "bad", "ace"])
    assert trie.find_by_pattern("***") == ["ace", "bad", "bed", "red", "zed"]
    assert trie.find_by_pattern("*ed") == ["bed", "red", "zed"]


def test_children_kept_in_letter_order():
    trie = _make_trie(["zoo", "moo", "boo", "ant", "mat"])
    assert list(trie.root.children) == ["a", "b", "m", "z"]
    assert list(trie.root.children["m"].children) == ["a", "o"]
    assert trie.find_by_pattern("*o*") == ["boo", "moo", "zoo"]


def test_find_matches_length_exactly():
    trie = _make_trie(["a", "at", "ate", "ates"])
    assert trie.find_by_pattern("**") == ["at"]
    assert trie.find_by_pattern("a**") == ["ate"]
    assert trie.find_by_pattern("*") == ["a"]


def test_find_on_empty_trie():
    assert Trie().find_by_pattern("***") == []


def test_frozen_trie_rejects_inserts():
    trie = Trie.from_words(["cat"])
    assert trie.frozen
    with pytest.raises(RuntimeError):
        trie.insert("dog")
    assert trie.contains("cat")


def test_load_trie_filters_and_lowercases(tmp_path):
    dict_file = tmp_path / "words.txt"
    dict_file.write_text("Cat\ndog\ndon't\nnaïve\n  owl  \nx2\n\n", encoding="utf-8")
    trie = load_trie(str(dict_file))
    assert trie.frozen
    assert len(trie) == 3
    assert trie.contains("cat")
    assert trie.contains("owl")
    assert not trie.contains("dont")
    assert trie.find_by_pattern("***") == ["cat", "dog", "owl"]


def test_load_trie_min_length(tmp_path):
    dict_file = tmp_path / "words.txt"
    dict_file.write_text("a\nan\nant\n")
    trie = load_trie(str(dict_file), min_length=2)
    assert not trie.contains("a")
    assert trie.contains("an")


def test_load_trie_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_trie(str(tmp_path / "nope.txt"))
