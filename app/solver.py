from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from app.cipher import Cipher, decrypt, derive_pattern
from app.trie import WILDCARD, Trie

logger = logging.getLogger("cryptogram")

_TOKEN_RE = re.compile(r"[a-z]+")


class MalformedCiphertextError(ValueError):
    """Ciphertext is empty or has a token that is not lowercase a-z only."""


@dataclass(frozen=True)
class Solution:
    plaintext: str
    mapping: tuple[tuple[str, str], ...]

    @property
    def cipher(self) -> dict[str, str]:
        return dict(self.mapping)


def _unique_words_by_length(tokens: list[str]) -> list[str]:
    # dict.fromkeys keeps first-occurrence order; sorted() is stable
    return sorted(dict.fromkeys(tokens), key=len)


class CryptogramSolver:
    """Enumerates every substitution cipher that decrypts a cryptogram into dictionary words.

    The search is a depth-first backtracking over the unique cipher words,
    shortest first. At each step the first word that still has unknown letters
    is turned into a pattern and every dictionary word matching it is tried as
    an extension of the cipher. Candidates that would map a letter to itself
    (unless allow_fixed_points) or reuse a plaintext letter are skipped.
    Solutions are yielded as soon as they are validated.
    """

    def __init__(self, trie: Trie, allow_fixed_points: bool = False):
        self.trie = trie
        self.allow_fixed_points = allow_fixed_points

    def iter_solutions(
        self,
        ciphertext: str,
        should_stop: Callable[[], bool] | None = None,
    ) -> Iterator[Solution]:
        tokens = ciphertext.split()
        if not tokens:
            raise MalformedCiphertextError("ciphertext has no words")
        for token in tokens:
            if not _TOKEN_RE.fullmatch(token):
                raise MalformedCiphertextError(f"token {token!r} is not lowercase a-z only")

        words = _unique_words_by_length(tokens)
        cipher_chars = {ch for word in words for ch in word}
        logger.debug("Solving %d unique words over %d symbols", len(words), len(cipher_chars))

        search = _Search(self, ciphertext, words, len(cipher_chars), should_stop)
        return search.run()

    def solve_ciphers(
        self,
        ciphertext: str,
        on_solution: Callable[[Solution], None] | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> list[Solution]:
        solutions: list[Solution] = []
        for solution in self.iter_solutions(ciphertext, should_stop):
            solutions.append(solution)
            if on_solution is not None:
                on_solution(solution)
        return solutions

    def solve(
        self,
        ciphertext: str,
        on_solution: Callable[[Solution], None] | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> list[str]:
        return [s.plaintext for s in self.solve_ciphers(ciphertext, on_solution, should_stop)]


class _Search:
    """State for one solve call: the shared cipher and the solutions seen so far."""

    def __init__(self, solver: CryptogramSolver, ciphertext: str, words: list[str],
                 num_symbols: int, should_stop: Callable[[], bool] | None):
        self.trie = solver.trie
        self.allow_fixed_points = solver.allow_fixed_points
        self.ciphertext = ciphertext
        self.words = words
        self.num_symbols = num_symbols
        self.should_stop = should_stop
        self.cipher = Cipher()
        self.seen: set[tuple[tuple[str, str], ...]] = set()

    def run(self) -> Iterator[Solution]:
        yield from self._descend(0)

    def _descend(self, pos: int) -> Iterator[Solution]:
        if self.should_stop is not None and self.should_stop():
            return

        if len(self.cipher) == self.num_symbols:
            solution = self._accept()
            if solution is not None:
                yield solution
            return

        if pos >= len(self.words):
            return

        # Skip past words the cipher already fully resolves; any that decrypt
        # to a non-word invalidate the whole branch.
        word = pattern = None
        while pos < len(self.words):
            word = self.words[pos]
            pos += 1
            pattern = derive_pattern(word, self.cipher)
            if WILDCARD in pattern:
                break
            if not self.trie.contains(pattern):
                return
            pattern = None

        if pattern is None:
            return

        for candidate in self.trie.find_by_pattern(pattern):
            mappings = self._new_mappings(word, pattern, candidate)
            if mappings is None:
                continue
            self.cipher.extend(mappings)
            try:
                yield from self._descend(pos)
            finally:
                self.cipher.undo(mappings)

    def _new_mappings(self, word: str, pattern: str, candidate: str) -> dict[str, str] | None:
        """Mappings candidate adds at the wildcard positions, or None if it is inconsistent."""
        mappings: dict[str, str] = {}
        claimed: set[str] = set()
        for symbol, slot, letter in zip(word, pattern, candidate):
            if slot != WILDCARD:
                continue
            if symbol == letter and not self.allow_fixed_points:
                return None
            if symbol in mappings:
                if mappings[symbol] != letter:
                    return None
                continue
            if letter in claimed or self.cipher.is_taken(letter):
                return None
            mappings[symbol] = letter
            claimed.add(letter)
        return mappings

    def _accept(self) -> Solution | None:
        plaintext = decrypt(self.ciphertext, self.cipher)
        for word in plaintext.split():
            if not self.trie.contains(word):
                return None

        key = self.cipher.snapshot()
        if key in self.seen:
            return None
        self.seen.add(key)
        logger.debug("Solution found: %s", plaintext)
        return Solution(plaintext=plaintext, mapping=key)


def solve(
    ciphertext: str,
    trie: Trie,
    on_solution: Callable[[Solution], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
    allow_fixed_points: bool = False,
) -> list[str]:
    """Solve a cryptogram against trie, returning every decryption in discovery order."""
    return CryptogramSolver(trie, allow_fixed_points).solve(ciphertext, on_solution, should_stop)
