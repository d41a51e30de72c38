"""Hash-set containers over words and chains with uniform random sampling."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Generic, Hashable, Iterable, Iterator, List, TypeVar

import numpy as np

if TYPE_CHECKING:
    from .chain import Chain
    from .words import Word

T = TypeVar("T", bound=Hashable)


class EmptySetError(LookupError):
    """Raised when sampling from an empty set."""


class IndexedSet(Generic[T]):
    """Insertion-ordered set backed by a list for O(1) random draws.

    Elements are never removed, which keeps the list and the position index
    in step. Random selection draws an explicit index from the supplied
    generator instead of relying on hash iteration order.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: List[T] = []
        self._positions: Dict[T, int] = {}
        for item in items:
            self.add(item)

    def add(self, item: T) -> None:
        if item not in self._positions:
            self._positions[item] = len(self._items)
            self._items.append(item)

    def update(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def __contains__(self, item: object) -> bool:
        return item in self._positions

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedSet):
            return NotImplemented
        return self._positions.keys() == other._positions.keys()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def union(self, *others: Iterable[T]):
        """Return a new set holding the members of this set and ``others``."""
        result = type(self)(self._items)
        for other in others:
            result.update(other)
        return result

    def choose_one(self, rng: np.random.Generator) -> T:
        """Return one member chosen uniformly at random."""
        if not self._items:
            msg = f"choose_one on empty {type(self).__name__}"
            raise EmptySetError(msg)
        return self._items[int(rng.integers(len(self._items)))]

    def choose(self, n: int, rng: np.random.Generator) -> List[T]:
        """Return up to ``n`` distinct members chosen without replacement."""
        count = min(max(n, 0), len(self._items))
        if count == 0:
            return []
        indices = rng.choice(len(self._items), size=count, replace=False)
        return [self._items[int(index)] for index in indices]


class WordSet(IndexedSet["Word"]):
    """A set of :class:`~chain_lexicon.words.Word` values."""

    def nouns(self) -> WordSet:
        return WordSet(word for word in self if word.is_noun)

    def proper_nouns(self) -> WordSet:
        return WordSet(word for word in self if word.is_proper_noun)


class ChainSet(IndexedSet["Chain"]):
    """A set of :class:`~chain_lexicon.chain.Chain` values."""


__all__ = ["ChainSet", "EmptySetError", "IndexedSet", "WordSet"]
