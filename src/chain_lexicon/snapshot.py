"""Binary snapshots of a brain.

A snapshot is the 4-byte magic ``QWOK`` followed by a MessagePack map::

    {"chainLen": 4,
     "words": [[text, tag], ...],
     "chains": [{"w": [i0, i1, i2, i3], "a": [...], "b": [...], "s": bool, "e": bool}, ...]}

Each distinct word is stored once in ``words`` and referenced by index
everywhere else. ``a`` and ``b`` list the words recorded after and before
the chain, ``s`` and ``e`` mark start and end chains.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

import msgpack

from .brain import Brain
from .chain import CHAIN_LENGTH, Chain
from .config import GenerationConfig
from .logging import get_logger
from .sets import ChainSet, WordSet
from .utils.random import SeedLike
from .words import Word

LOGGER = get_logger(__name__)

MAGIC = b"QWOK"


class SnapshotError(ValueError):
    """Base class for snapshot loading failures."""


class NotABrainFileError(SnapshotError):
    """The data does not start with the snapshot magic bytes."""


class InvalidBrainFileError(SnapshotError):
    """The payload after the magic bytes cannot be decoded."""


class ChainLengthError(SnapshotError):
    """The snapshot was written for a different chain length."""


class MalformedChainError(SnapshotError):
    """A chain record does not hold exactly one word index per position."""


class _WordTable:
    """Interns words in first-encounter order."""

    def __init__(self) -> None:
        self.indices: Dict[Word, int] = {}
        self.entries: List[List[str]] = []

    def index(self, word: Word) -> int:
        position = self.indices.get(word)
        if position is None:
            position = len(self.entries)
            self.indices[word] = position
            self.entries.append([word.text, word.tag])
        return position


def encode_brain(brain: Brain) -> Dict[str, Any]:
    """Return the snapshot record for ``brain``; the caller holds the read lock."""
    table = _WordTable()
    chains: List[Dict[str, Any]] = []
    for chain in brain.chains:
        chains.append(
            {
                "w": [table.index(word) for word in chain],
                "a": [table.index(word) for word in brain.words_after.get(chain, ())],
                "b": [table.index(word) for word in brain.words_before.get(chain, ())],
                "s": chain in brain.start_chains,
                "e": chain in brain.end_chains,
            }
        )
    return {"chainLen": CHAIN_LENGTH, "chains": chains, "words": table.entries}


def dumps(brain: Brain) -> bytes:
    """Serialise ``brain`` to snapshot bytes."""
    with brain.lock.read():
        record = encode_brain(brain)
    return MAGIC + msgpack.packb(record, use_bin_type=True)


def save_brain(brain: Brain, stream: BinaryIO) -> None:
    """Write a snapshot of ``brain`` to ``stream``."""
    stream.write(dumps(brain))


def _decode_words(raw_words: Any) -> List[Word]:
    if not isinstance(raw_words, list):
        msg = "invalid brain file: word table is not a list"
        raise InvalidBrainFileError(msg)
    words: List[Word] = []
    for position, entry in enumerate(raw_words):
        if not (isinstance(entry, list) and len(entry) == 2 and all(isinstance(part, str) for part in entry)):
            msg = f"invalid brain file: word {position} is not a [text, tag] pair"
            raise InvalidBrainFileError(msg)
        text, tag = entry
        words.append(Word(tag=tag, text=text))
    return words


def _indices(record: Dict[str, Any], key: str, position: int) -> List[int]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, int) and not isinstance(item, bool) for item in value):
        msg = f"chain {position} has a malformed {key!r} index list"
        raise MalformedChainError(msg)
    return value


def decode_brain(
    record: Any,
    config: Optional[GenerationConfig] = None,
    rng: SeedLike = None,
) -> Brain:
    """Rebuild a new :class:`Brain` from a decoded snapshot record."""
    if not isinstance(record, dict):
        msg = "invalid brain file: expected a map at the root"
        raise InvalidBrainFileError(msg)
    chain_len = record.get("chainLen")
    if chain_len != CHAIN_LENGTH:
        msg = f"wrong chain length {chain_len}; need {CHAIN_LENGTH}"
        raise ChainLengthError(msg)
    words = _decode_words(record.get("words") or [])
    raw_chains = record.get("chains") or []
    if not isinstance(raw_chains, list):
        msg = "invalid brain file: chain list is not a list"
        raise InvalidBrainFileError(msg)

    def word_at(index: int) -> Word:
        if 0 <= index < len(words):
            return words[index]
        return Word()

    brain = Brain(config=config, rng=rng)
    for position, raw_chain in enumerate(raw_chains):
        if not isinstance(raw_chain, dict):
            msg = f"chain {position} is not a map"
            raise MalformedChainError(msg)
        word_indices = _indices(raw_chain, "w", position)
        if len(word_indices) != CHAIN_LENGTH:
            msg = f"chain {position} has wrong length {len(word_indices)}; need {CHAIN_LENGTH}"
            raise MalformedChainError(msg)
        chain = Chain.of(word_at(index) for index in word_indices)
        brain.chains.add(chain)
        for word in chain:
            brain.word_chains.setdefault(word, ChainSet()).add(chain)
        after = _indices(raw_chain, "a", position)
        if after:
            brain.words_after.setdefault(chain, WordSet()).update(word_at(index) for index in after)
        before = _indices(raw_chain, "b", position)
        if before:
            brain.words_before.setdefault(chain, WordSet()).update(word_at(index) for index in before)
        if raw_chain.get("s"):
            brain.start_chains.add(chain)
        if raw_chain.get("e"):
            brain.end_chains.add(chain)
    return brain


def loads(
    data: bytes,
    config: Optional[GenerationConfig] = None,
    rng: SeedLike = None,
) -> Brain:
    """Rebuild a brain from snapshot bytes."""
    if len(data) < len(MAGIC) or data[: len(MAGIC)] != MAGIC:
        raise NotABrainFileError("not a brain file")
    try:
        record = msgpack.unpackb(data[len(MAGIC) :], raw=False, strict_map_key=False)
    except (msgpack.exceptions.UnpackException, ValueError, TypeError) as exc:
        msg = f"invalid brain file: {exc}"
        raise InvalidBrainFileError(msg) from exc
    brain = decode_brain(record, config=config, rng=rng)
    LOGGER.debug("Loaded brain with %d chains", len(brain))
    return brain


def load_brain(
    source: Union[BinaryIO, bytes],
    config: Optional[GenerationConfig] = None,
    rng: SeedLike = None,
) -> Brain:
    """Read a snapshot from a binary stream or bytes into a new brain."""
    data = source if isinstance(source, (bytes, bytearray)) else source.read()
    return loads(bytes(data), config=config, rng=rng)


def load_brain_file(
    path: Union[str, Path],
    config: Optional[GenerationConfig] = None,
    rng: SeedLike = None,
) -> Brain:
    """Like :func:`load_brain` but reads from the file at ``path``."""
    path = Path(path)
    with path.open("rb") as stream:
        brain = load_brain(stream, config=config, rng=rng)
    LOGGER.info("Loaded brain from %s", path)
    return brain


def save_brain_file(brain: Brain, path: Union[str, Path]) -> None:
    """Write a snapshot to ``path`` without ever leaving a half-written file.

    The snapshot goes to ``.<name>.new`` in the same directory first and then
    replaces ``path`` in one step.
    """
    path = Path(path)
    temp_path = path.with_name(f".{path.name}.new")
    data = dumps(brain)
    with temp_path.open("wb") as stream:
        stream.write(data)
    os.replace(temp_path, path)
    LOGGER.info("Saved brain snapshot to %s", path)


__all__ = [
    "ChainLengthError",
    "InvalidBrainFileError",
    "MAGIC",
    "MalformedChainError",
    "NotABrainFileError",
    "SnapshotError",
    "decode_brain",
    "dumps",
    "encode_brain",
    "load_brain",
    "load_brain_file",
    "loads",
    "save_brain",
    "save_brain_file",
]
