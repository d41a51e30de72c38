"""Fixed-length word chains."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from .words import Word

CHAIN_LENGTH = 4


@dataclass(frozen=True)
class Chain:
    """An ordered tuple of exactly :data:`CHAIN_LENGTH` words."""

    words: Tuple[Word, ...]

    def __post_init__(self) -> None:
        words = tuple(self.words)
        if len(words) != CHAIN_LENGTH:
            msg = f"incorrect number of words for chain: got {len(words)}, need {CHAIN_LENGTH}"
            raise ValueError(msg)
        object.__setattr__(self, "words", words)

    @classmethod
    def of(cls, words: Iterable[Word]) -> Chain:
        return cls(tuple(words))

    @property
    def first(self) -> Word:
        return self.words[0]

    @property
    def last(self) -> Word:
        return self.words[-1]

    def shift_left(self, word: Word) -> Chain:
        """Return the chain with ``word`` prepended and the last word dropped."""
        return Chain((word,) + self.words[:-1])

    def shift_right(self, word: Word) -> Chain:
        """Return the chain with ``word`` appended and the first word dropped."""
        return Chain(self.words[1:] + (word,))

    def __iter__(self) -> Iterator[Word]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __getitem__(self, index: int) -> Word:
        return self.words[index]

    def __contains__(self, word: object) -> bool:
        return word in self.words

    def __str__(self) -> str:
        return " ".join(word.text for word in self.words)


__all__ = ["CHAIN_LENGTH", "Chain"]
