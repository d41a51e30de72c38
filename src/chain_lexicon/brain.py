"""The chain index: learning, sentence generation and reply construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .chain import CHAIN_LENGTH, Chain
from .config import GenerationConfig
from .locking import ReadWriteLock
from .logging import get_logger
from .sets import ChainSet, EmptySetError, WordSet
from .utils.random import SeedLike, ensure_rng
from .words import (
    QUESTION_MARK,
    Sentence,
    Word,
    render_sentence,
    sentence_nouns,
    sentence_proper_nouns,
    sentence_words,
)

LOGGER = get_logger(__name__)

PROPER_NOUN_POINTS = 2
INPUT_NOUN_POINTS = 3
INPUT_PROPER_NOUN_POINTS = 4
INPUT_WORD_POINTS = 1


class BrainConsistencyError(RuntimeError):
    """Raised when generation finds the brain's invariants broken."""


@dataclass(frozen=True)
class BrainStats:
    chains: int
    words: int
    start_chains: int
    end_chains: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "chains": self.chains,
            "words": self.words,
            "start_chains": self.start_chains,
            "end_chains": self.end_chains,
        }


class Brain:
    """All of the learned state for a single chatbot instance.

    ``word_chains`` maps each known word to the chains containing it,
    ``words_before``/``words_after`` record which words have preceded or
    followed each chain, and ``start_chains``/``end_chains`` hold the chains
    that have opened or closed a learned sentence.
    """

    def __init__(self, config: Optional[GenerationConfig] = None, rng: SeedLike = None) -> None:
        self.config = config or GenerationConfig()
        self.rng: np.random.Generator = ensure_rng(rng if rng is not None else self.config.seed)
        self.lock = ReadWriteLock()
        self.chains = ChainSet()
        self.word_chains: Dict[Word, ChainSet] = {}
        self.words_before: Dict[Chain, WordSet] = {}
        self.words_after: Dict[Chain, WordSet] = {}
        self.start_chains = ChainSet()
        self.end_chains = ChainSet()

    def __len__(self) -> int:
        return len(self.chains)

    # Learning --------------------------------------------------------------------
    def add_sentence(self, sentence: Sequence[Word]) -> None:
        """Index ``sentence`` so its chains can be used to build replies."""
        if len(sentence) < CHAIN_LENGTH:
            return
        with self.lock.write():
            self._index_sentence(sentence)

    def add_sentences(self, sentences: Iterable[Sequence[Word]]) -> None:
        for sentence in sentences:
            self.add_sentence(sentence)

    def _index_sentence(self, sentence: Sequence[Word]) -> None:
        window_count = len(sentence) - (CHAIN_LENGTH - 1)
        for i in range(window_count):
            chain = Chain.of(sentence[i : i + CHAIN_LENGTH])
            self.chains.add(chain)
            for word in chain:
                self.word_chains.setdefault(word, ChainSet()).add(chain)

            if i == 0:
                self.start_chains.add(chain)
            else:
                self.words_before.setdefault(chain, WordSet()).add(sentence[i - 1])

            if i == window_count - 1:
                self.end_chains.add(chain)
            else:
                self.words_after.setdefault(chain, WordSet()).add(sentence[i + CHAIN_LENGTH])

    # Generation ------------------------------------------------------------------
    def make_sentence_with_keyword(self, word: Word) -> Sentence:
        """Build a sentence containing ``word``, or ``[]`` if none can be built."""
        return self.make_sentence(word)

    def make_sentence_starting_keyword(self, word: Word) -> Sentence:
        """Like :meth:`make_sentence_with_keyword` but ``word`` must open the sentence."""
        return self.make_sentence(word, must_be_start=True)

    def make_question(self) -> Sentence:
        """Build a sentence ending with a question mark, or ``[]``."""
        LOGGER.debug("building a question sentence")
        return self.make_sentence(QUESTION_MARK, must_be_end=True)

    def make_reason(self) -> Sentence:
        """Build a "because"-style sentence opened by the question-mark word, or ``[]``."""
        LOGGER.debug("building a reason sentence")
        return self.make_sentence(QUESTION_MARK, must_be_start=True)

    def make_sentence(self, word: Word, must_be_start: bool = False, must_be_end: bool = False) -> Sentence:
        with self.lock.read():
            return self._build_sentence(word, must_be_start, must_be_end)

    def _build_sentence(self, word: Word, must_be_start: bool, must_be_end: bool) -> Sentence:
        LOGGER.debug("building a sentence for keyword %r", word.text)
        candidates = self.word_chains.get(word)
        if not candidates:
            return []

        seed = self._select_seed(word, candidates, must_be_start, must_be_end)
        if seed is None:
            return []
        LOGGER.debug("starting chain is %r", str(seed))

        limit = self.config.max_sentence_length
        before: List[Word] = []
        current = seed
        while self._should_extend(
            current in self.start_chains,
            self.words_before.get(current),
            limit is not None and len(before) + CHAIN_LENGTH >= limit,
        ):
            new_word = self._choose_neighbour(self.words_before, current, "before")
            before.append(new_word)
            current = current.shift_left(new_word)
        LOGGER.debug("before words are %s", [w.text for w in before])

        after: List[Word] = []
        current = seed
        while self._should_extend(
            current in self.end_chains,
            self.words_after.get(current),
            limit is not None and len(before) + CHAIN_LENGTH + len(after) >= limit,
        ):
            new_word = self._choose_neighbour(self.words_after, current, "after")
            after.append(new_word)
            current = current.shift_right(new_word)
        LOGGER.debug("after words are %s", [w.text for w in after])

        return list(reversed(before)) + list(seed) + after

    def _select_seed(
        self,
        word: Word,
        candidates: ChainSet,
        must_be_start: bool,
        must_be_end: bool,
    ) -> Optional[Chain]:
        if must_be_end:
            for chain in candidates:
                if chain.last == word and chain in self.end_chains:
                    return chain
            LOGGER.debug("no end chains finishing with %r", word.text)
            return None
        if must_be_start:
            for chain in candidates:
                if chain.first == word and chain in self.start_chains:
                    return chain
            LOGGER.debug("no start chains beginning with %r", word.text)
            return None
        return candidates.choose_one(self.rng)

    def _should_extend(self, at_boundary: bool, neighbours: Optional[WordSet], at_limit: bool) -> bool:
        if not at_boundary:
            return True
        if not neighbours or at_limit:
            return False
        # A boundary chain that also has recorded neighbours may keep growing.
        return int(self.rng.integers(256)) < self.config.continue_chance

    def _choose_neighbour(self, table: Dict[Chain, WordSet], chain: Chain, direction: str) -> Word:
        try:
            return table.get(chain, WordSet()).choose_one(self.rng)
        except EmptySetError as exc:
            msg = f"chain {str(chain)!r} is not a sentence boundary but has no words {direction} it"
            raise BrainConsistencyError(msg) from exc

    # Replies ---------------------------------------------------------------------
    def make_reply(self, *sentences: Sequence[Word]) -> Sentence:
        """Build the most relevant reply to ``sentences``, or ``[]``.

        A candidate sentence is generated for each keyword of the input and
        each candidate is scored by how strongly it overlaps the input,
        giving priority to proper nouns the user mentioned.
        """
        all_words = WordSet()
        nouns = WordSet()
        proper_nouns = WordSet()
        for sentence in sentences:
            all_words.update(sentence_words(sentence))
            nouns.update(sentence_nouns(sentence))
            proper_nouns.update(sentence_proper_nouns(sentence))

        keywords = proper_nouns
        if len(keywords) < 2:
            # A lone proper noun would make every reply predictable, so mix
            # in the common nouns; scoring still favours the proper noun.
            keywords = nouns
        if not keywords:
            return []

        LOGGER.debug("building replies with keywords: %s", [w.text for w in keywords])

        candidates = [reply for reply in map(self.make_sentence_with_keyword, keywords) if reply]
        if not candidates:
            LOGGER.debug("no sentences were generated")
            return []
        if len(candidates) == 1:
            LOGGER.debug("only one sentence generated, so it wins by default")
            return candidates[0]

        best: Sentence = []
        best_score = -1
        for candidate in candidates:
            score = score_reply(candidate, all_words, nouns, proper_nouns)
            if score > best_score:
                best, best_score = candidate, score
                LOGGER.debug("sentence %r scored %d, the new winner", render_sentence(candidate), score)
            else:
                LOGGER.debug("sentence %r scored %d, not enough to win", render_sentence(candidate), score)
        return best

    # Introspection ---------------------------------------------------------------
    def stats(self) -> BrainStats:
        with self.lock.read():
            return BrainStats(
                chains=len(self.chains),
                words=len(self.word_chains),
                start_chains=len(self.start_chains),
                end_chains=len(self.end_chains),
            )


def score_reply(candidate: Sequence[Word], all_words: WordSet, nouns: WordSet, proper_nouns: WordSet) -> int:
    """Score ``candidate`` by its overlap with the input word sets.

    Input proper nouns are also input nouns and proper nouns in their own
    right, so each occurrence collects 2 + 3 + 4 + 1 points.
    """
    score = 0
    for word in candidate:
        if word.is_proper_noun:
            score += PROPER_NOUN_POINTS
        if word in nouns:
            score += INPUT_NOUN_POINTS
        if word in proper_nouns:
            score += INPUT_PROPER_NOUN_POINTS
        if word in all_words:
            score += INPUT_WORD_POINTS
    return score


__all__ = ["Brain", "BrainConsistencyError", "BrainStats", "score_reply"]
