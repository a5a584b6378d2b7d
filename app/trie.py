from __future__ import annotations

import logging
import time
from collections import defaultdict
from typing import Iterable

logger = logging.getLogger("cryptogram")

WILDCARD = "*"


class TrieNode:
    __slots__ = ("children", "is_word")

    def __init__(self):
        self.children: dict[str, TrieNode] = {}
        self.is_word: bool = False


class Trie:
    """Prefix tree over lowercase a-z words with wildcard pattern lookup.

    Built once (insert, then freeze) and read only afterwards, so a frozen
    trie can be shared by any number of solver calls.
    """

    def __init__(self):
        self.root = TrieNode()
        self._size = 0
        self._frozen = False

    @classmethod
    def from_words(cls, words: Iterable[str]) -> Trie:
        trie = cls()
        for word in words:
            trie.insert(word)
        trie.freeze()
        return trie

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        self._frozen = True

    def __len__(self) -> int:
        return self._size

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def insert(self, word: str):
        if self._frozen:
            raise RuntimeError("cannot insert into a frozen trie")
        node = self.root
        for ch in word:
            if ch not in node.children:
                out_of_order = bool(node.children) and ch < next(reversed(node.children))
                node.children[ch] = TrieNode()
                if out_of_order:
                    # Children stay in a-z order so wildcard fan-out needs no sort
                    node.children = dict(sorted(node.children.items()))
            node = node.children[ch]
        if not node.is_word:
            node.is_word = True
            self._size += 1

    def contains(self, word: str) -> bool:
        node = self.root
        for ch in word:
            node = node.children.get(ch)
            if node is None:
                return False
        return node.is_word

    def find_by_pattern(self, pattern: str) -> list[str]:
        """Return every word matching pattern, in lexicographic order.

        Letters must match exactly; WILDCARD matches any single letter.
        """
        matches: list[str] = []
        self._collect(self.root, pattern, 0, [], matches)
        return matches

    def _collect(self, node: TrieNode, pattern: str, pos: int, path: list[str], out: list[str]):
        if pos == len(pattern):
            if node.is_word:
                out.append("".join(path))
            return

        ch = pattern[pos]
        if ch == WILDCARD:
            branches = node.children.items()
        elif ch in node.children:
            branches = [(ch, node.children[ch])]
        else:
            return

        for letter, child in branches:
            path.append(letter)
            self._collect(child, pattern, pos + 1, path, out)
            path.pop()


def load_trie(path: str, min_length: int = 1) -> Trie:
    """Load a one-word-per-line file into a frozen trie.

    Lines are lowercased; anything that is not purely ASCII letters is skipped.
    """
    trie = Trie()
    counts: dict[int, int] = defaultdict(int)
    t0 = time.perf_counter()
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            word = line.strip().lower()
            if len(word) >= min_length and word.isascii() and word.isalpha():
                trie.insert(word)
                counts[len(word)] += 1
    trie.freeze()

    elapsed = (time.perf_counter() - t0) * 1000
    logger.info("Dictionary %s: %d words loaded in %.1fms", path, len(trie), elapsed)
    for length in sorted(counts):
        logger.debug("  length %d => %d", length, counts[length])
    return trie
