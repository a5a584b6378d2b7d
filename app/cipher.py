from __future__ import annotations

from typing import Mapping

from app.trie import WILDCARD


class Cipher:
    """A partial, injective mapping from ciphertext letters to plaintext letters.

    The search mutates a single instance: extend() before descending into a
    branch and undo() the same mappings when it returns.
    """

    __slots__ = ("_mapping", "_taken")

    def __init__(self):
        self._mapping: dict[str, str] = {}
        self._taken: set[str] = set()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Cipher:
        cipher = cls()
        cipher.extend(dict(mapping))
        return cipher

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._mapping

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}->{v}" for k, v in self.snapshot())
        return f"Cipher({pairs})"

    def get(self, symbol: str, default: str | None = None) -> str | None:
        return self._mapping.get(symbol, default)

    def items(self):
        return self._mapping.items()

    def is_taken(self, letter: str) -> bool:
        return letter in self._taken

    def extend(self, mappings: dict[str, str]):
        seen: set[str] = set()
        for symbol, letter in mappings.items():
            if symbol in self._mapping:
                raise ValueError(f"{symbol!r} is already mapped to {self._mapping[symbol]!r}")
            if letter in self._taken or letter in seen:
                raise ValueError(f"{letter!r} is already the image of another symbol")
            seen.add(letter)
        for symbol, letter in mappings.items():
            self._mapping[symbol] = letter
            self._taken.add(letter)

    def undo(self, mappings: dict[str, str]):
        for symbol in mappings:
            self._taken.discard(self._mapping.pop(symbol))

    def snapshot(self) -> tuple[tuple[str, str], ...]:
        return tuple(sorted(self._mapping.items()))


def derive_pattern(word: str, cipher: Cipher) -> str:
    """Known letters resolved, unknown ones replaced by WILDCARD."""
    return "".join(cipher.get(ch, WILDCARD) for ch in word)


def decrypt(text: str, cipher: Cipher | Mapping[str, str]) -> str:
    # Characters the cipher does not cover (spaces included) pass through.
    return "".join(cipher.get(ch, ch) for ch in text)
