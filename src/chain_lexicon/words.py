"""Word model, tag classification and sentence helpers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Sequence

from .sets import WordSet
from .utils.text import normalise_word_text


class TagCategory(enum.Enum):
    """Closed set of tag categories the engine cares about."""

    PROPER_NOUN = "proper_noun"
    NOUN = "noun"
    PUNCTUATION = "punctuation"
    OTHER = "other"


_TAG_CATEGORIES = {
    "NNP": TagCategory.PROPER_NOUN,
    "NNPS": TagCategory.PROPER_NOUN,
    "NN": TagCategory.NOUN,
    "NNS": TagCategory.NOUN,
    ".": TagCategory.PUNCTUATION,
    ",": TagCategory.PUNCTUATION,
    ":": TagCategory.PUNCTUATION,
    "(": TagCategory.PUNCTUATION,
    ")": TagCategory.PUNCTUATION,
    "``": TagCategory.PUNCTUATION,
    "''": TagCategory.PUNCTUATION,
    "$": TagCategory.PUNCTUATION,
    "#": TagCategory.PUNCTUATION,
}

# Tags that attach to the previous token without a space.
_NO_SPACE_BEFORE = frozenset({".", ",", ":", ")", "''"})
# Tags after which the next token attaches without a space.
_NO_SPACE_AFTER = frozenset({"(", "``", "$"})


def classify_tag(tag: str) -> TagCategory:
    """Return the :class:`TagCategory` for a Penn Treebank style ``tag``."""
    return _TAG_CATEGORIES.get(tag, TagCategory.OTHER)


@dataclass(frozen=True)
class Word:
    """A single annotated token.

    ``text`` is normalised to NFC and lowercased on construction, so words
    read from different sources compare equal whenever they spell the same
    thing. ``Word()`` is the placeholder used for unresolvable references.
    """

    tag: str = ""
    text: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", normalise_word_text(self.text))

    @property
    def category(self) -> TagCategory:
        return classify_tag(self.tag)

    @property
    def is_noun(self) -> bool:
        return self.category in (TagCategory.NOUN, TagCategory.PROPER_NOUN)

    @property
    def is_proper_noun(self) -> bool:
        return self.category is TagCategory.PROPER_NOUN

    @property
    def is_hashtag(self) -> bool:
        return self.is_noun and self.text.startswith("#")

    @property
    def is_at_mention(self) -> bool:
        return self.is_noun and self.text.startswith("@")

    def to_pair(self) -> List[str]:
        """Return the ``[text, tag]`` pair used by the JSON utterance format."""
        return [self.text, self.tag]

    @classmethod
    def from_pair(cls, pair: Sequence[str]) -> Word:
        if len(pair) != 2:
            msg = f"Expected a [text, tag] pair, got {list(pair)!r}"
            raise ValueError(msg)
        text, tag = pair
        return cls(tag=str(tag), text=str(text))

    def __str__(self) -> str:
        return self.text


PERIOD = Word(".", ".")
QUESTION_MARK = Word(".", "?")
EXCLAMATION_MARK = Word(".", "!")

Sentence = List[Word]


def sentence_words(sentence: Sequence[Word]) -> WordSet:
    """Return the distinct words of ``sentence``."""
    return WordSet(sentence)


def sentence_nouns(sentence: Sequence[Word]) -> WordSet:
    """Return the distinct nouns (common or proper) of ``sentence``."""
    return WordSet(word for word in sentence if word.is_noun)


def sentence_proper_nouns(sentence: Sequence[Word]) -> WordSet:
    """Return the distinct proper nouns of ``sentence``."""
    return WordSet(word for word in sentence if word.is_proper_noun)


def trim_period(sentence: Sequence[Word]) -> Sentence:
    """Drop a single trailing period, emulating casual chat style.

    A trailing period preceded by another period is treated as part of an
    ellipsis and kept. Other terminal punctuation is never trimmed.
    """
    words = list(sentence)
    if not words or words[-1] != PERIOD:
        return words
    if len(words) > 1 and words[-2] == PERIOD:
        return words
    return words[:-1]


def render_sentence(sentence: Sequence[Word]) -> str:
    """Join the words of ``sentence`` into readable text."""
    parts: List[str] = []
    previous: Word | None = None
    for word in sentence:
        if previous is not None and not (
            word.tag in _NO_SPACE_BEFORE
            or previous.tag in _NO_SPACE_AFTER
            or "'" in word.text
        ):
            parts.append(" ")
        parts.append(word.text)
        previous = word
    return "".join(parts)


def render_tagged(sentence: Sequence[Word]) -> str:
    """Render ``sentence`` in the ``word/TAG`` notation."""
    return " ".join(f"{word.text}/{word.tag}" for word in sentence)


__all__ = [
    "EXCLAMATION_MARK",
    "PERIOD",
    "QUESTION_MARK",
    "Sentence",
    "TagCategory",
    "Word",
    "classify_tag",
    "render_sentence",
    "render_tagged",
    "sentence_nouns",
    "sentence_proper_nouns",
    "sentence_words",
    "trim_period",
]
