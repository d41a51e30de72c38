from __future__ import annotations

import logging
import re
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from chain_lexicon.brain import Brain
from chain_lexicon.config import GenerationConfig
from chain_lexicon.words import Sentence, Word

_TOKEN_RE = re.compile(r"[\w'#@]+|[^\w\s]")

DEFAULT_TAGS = {
    "why": "WRB",
    "the": "DT",
    "a": "DT",
    "on": "IN",
    "because": "IN",
    "sat": "VBD",
    "is": "VBZ",
    "and": "CC",
}


class StubTagger:
    """Splits on terminal punctuation and tags unknown words as nouns."""

    def __init__(self, tags: Optional[Dict[str, str]] = None) -> None:
        self.tags = {**DEFAULT_TAGS, **(tags or {})}
        self.calls: List[str] = []

    def tag(self, text: str) -> List[List[Tuple[str, str]]]:
        self.calls.append(text)
        sentences: List[List[Tuple[str, str]]] = []
        current: List[Tuple[str, str]] = []
        for token in _TOKEN_RE.findall(text):
            if token in {".", "?", "!"}:
                current.append((token, "."))
                sentences.append(current)
                current = []
            elif token in {",", ":", '"'}:
                current.append((token, token))
            else:
                current.append((token, self.tags.get(token, "NN")))
        if current:
            sentences.append(current)
        return sentences


def build_sentence(text: str, tag: str = "NN") -> Sentence:
    """Build a sentence from whitespace separated tokens.

    ``word/TAG`` sets an explicit tag; ``.``, ``?`` and ``!`` are tagged ``.``.
    """
    sentence: Sentence = []
    for token in text.split():
        if "/" in token and len(token) > 1:
            word_text, word_tag = token.rsplit("/", 1)
            sentence.append(Word(word_tag, word_text))
        elif token in {".", "?", "!"}:
            sentence.append(Word(".", token))
        else:
            sentence.append(Word(tag, token))
    return sentence


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("chain_lexicon")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_sentence() -> Callable[..., Sentence]:
    return build_sentence


@pytest.fixture
def tagger() -> StubTagger:
    return StubTagger()


@pytest.fixture
def brain() -> Brain:
    return Brain(rng=1234)


@pytest.fixture
def cat_dog_brain() -> Brain:
    brain = Brain(rng=7)
    brain.add_sentences(
        [
            build_sentence("the cat sat on the mat ."),
            build_sentence("the dog sat on the rug ."),
        ]
    )
    return brain


@pytest.fixture
def make_brain() -> Callable[..., Brain]:
    def factory(*texts: str, continue_chance: int = 128, max_sentence_length: Optional[int] = None, seed: int = 0) -> Brain:
        config = GenerationConfig(continue_chance=continue_chance, max_sentence_length=max_sentence_length)
        brain = Brain(config=config, rng=seed)
        brain.add_sentences(build_sentence(text) for text in texts)
        return brain

    return factory
