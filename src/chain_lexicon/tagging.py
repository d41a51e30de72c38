"""Part-of-speech tagging adapter that turns free text into sentences."""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, Tuple

import nltk

from .config import TaggingConfig
from .logging import get_logger
from .words import Sentence, Word

LOGGER = get_logger(__name__)

TaggedSentence = List[Tuple[str, str]]

OPEN_QUOTE = "``"
CLOSE_QUOTE = "''"

# Resources needed by sent_tokenize, word_tokenize and pos_tag.
NLTK_RESOURCES = {
    "punkt_tab": "tokenizers/punkt_tab",
    "averaged_perceptron_tagger_eng": "taggers/averaged_perceptron_tagger_eng",
}


class Tagger(Protocol):
    """Splits text into sentences of ``(token, tag)`` pairs."""

    def tag(self, text: str) -> List[TaggedSentence]:
        ...


class NltkTagger:
    """Tagger backed by NLTK's Punkt splitter and averaged perceptron tagger."""

    def __init__(self, config: Optional[TaggingConfig] = None) -> None:
        self.config = config or TaggingConfig()
        self._ready = False

    def ensure_resources(self) -> None:
        if self._ready:
            return
        for name, resource in NLTK_RESOURCES.items():
            try:
                nltk.data.find(resource)
            except LookupError:
                if not self.config.auto_download:
                    raise
                LOGGER.info("Downloading NLTK resource %s", name)
                nltk.download(name, quiet=True)
        self._ready = True

    def tag(self, text: str) -> List[TaggedSentence]:
        self.ensure_resources()
        return [nltk.pos_tag(nltk.word_tokenize(chunk)) for chunk in nltk.sent_tokenize(text)]


def fix_quotes(sentence: Sentence) -> Sentence:
    """Re-tag quote tokens so that opening and closing quotes are told apart.

    Taggers tend to leave bare ``"`` and ``'`` tokens with arbitrary tags.
    Bare quotes alternate between open and close, curly quotes carry their
    own direction, and tokens already tagged as quotes update the tracking
    state. Changes are applied in place; the sentence is also returned.
    """
    open_double = False
    open_single = False
    for i, word in enumerate(sentence):
        if word.tag == OPEN_QUOTE:
            if word.text in ('"', "“", "``"):
                open_double = True
            elif word.text in ("'", "‘"):
                open_single = True
            continue
        if word.tag == CLOSE_QUOTE:
            if word.text in ('"', "”", "''"):
                open_double = False
            elif word.text in ("'", "’"):
                open_single = False
            continue

        if word.text == '"':
            sentence[i] = Word(CLOSE_QUOTE if open_double else OPEN_QUOTE, word.text)
            open_double = not open_double
        elif word.text == "'":
            # apostrophes inside words are never separate tokens
            sentence[i] = Word(CLOSE_QUOTE if open_single else OPEN_QUOTE, word.text)
            open_single = not open_single
        elif word.text == "“":
            sentence[i] = Word(OPEN_QUOTE, word.text)
            open_double = True
        elif word.text == "”":
            sentence[i] = Word(CLOSE_QUOTE, word.text)
            open_double = False
        elif word.text == "‘":
            sentence[i] = Word(OPEN_QUOTE, word.text)
            open_single = True
        elif word.text == "’":
            sentence[i] = Word(CLOSE_QUOTE, word.text)
            open_single = False
    return sentence


def to_sentence(pairs: Sequence[Tuple[str, str]]) -> Sentence:
    """Build a sentence from ``(token, tag)`` pairs."""
    return [Word(tag=tag, text=token) for token, tag in pairs]


def parse_text(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Split ``text`` into tagged sentences.

    Input is lowercased before tagging by default. Taggers use case to spot
    proper nouns, so feeding them casual uncapitalised chat and edited prose
    alike keeps the tags consistent, at the cost of rarely detecting proper
    nouns at all.
    """
    config = config or TaggingConfig()
    if config.lowercase:
        text = text.lower()
    if not text.strip():
        return []
    return [fix_quotes(to_sentence(pairs)) for pairs in tagger.tag(text) if pairs]


__all__ = [
    "CLOSE_QUOTE",
    "NltkTagger",
    "OPEN_QUOTE",
    "Tagger",
    "TaggedSentence",
    "fix_quotes",
    "parse_text",
    "to_sentence",
]
