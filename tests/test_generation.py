from __future__ import annotations

import threading

import pytest

from chain_lexicon.brain import Brain, BrainConsistencyError, score_reply
from chain_lexicon.chain import CHAIN_LENGTH, Chain
from chain_lexicon.config import GenerationConfig
from chain_lexicon.sets import WordSet
from chain_lexicon.words import QUESTION_MARK, Word

from conftest import build_sentence

CAT = build_sentence("the cat sat on the mat .")
DOG = build_sentence("the dog sat on the rug .")


def _bigrams(*sentences):
    return {(a, b) for sentence in sentences for a, b in zip(sentence, sentence[1:])}


def test_unknown_keyword_gives_nothing(cat_dog_brain: Brain) -> None:
    assert cat_dog_brain.make_sentence_with_keyword(Word("NN", "zebra")) == []
    assert cat_dog_brain.make_sentence_with_keyword(Word("VBD", "sat")) == []


def test_empty_brain_gives_nothing(brain: Brain) -> None:
    assert brain.make_sentence_with_keyword(Word("NN", "cat")) == []
    assert brain.make_sentence_starting_keyword(Word("NN", "cat")) == []
    assert brain.make_question() == []
    assert brain.make_reason() == []
    assert brain.make_reply(build_sentence("the cat")) == []


def test_generated_sentences_follow_learned_chains(cat_dog_brain: Brain) -> None:
    sat = Word("NN", "sat")
    seen = _bigrams(CAT, DOG)
    results = set()
    for _ in range(50):
        sentence = cat_dog_brain.make_sentence_with_keyword(sat)
        assert len(sentence) >= 4
        assert sat in sentence
        assert _bigrams(sentence) <= seen
        results.add(tuple(sentence))
    assert results == {tuple(CAT), tuple(DOG)}


def test_starting_keyword_uses_first_start_chain(cat_dog_brain: Brain) -> None:
    for _ in range(10):
        assert cat_dog_brain.make_sentence_starting_keyword(Word("NN", "the")) == CAT


def test_starting_keyword_needs_a_start_chain(cat_dog_brain: Brain) -> None:
    assert cat_dog_brain.make_sentence_starting_keyword(Word("NN", "sat")) == []


def test_question_and_reason(make_brain) -> None:
    brain = make_brain("is it raining ?", "? because clouds are grey")
    assert brain.make_question() == build_sentence("is it raining ?")
    assert brain.make_reason() == build_sentence("? because clouds are grey")
    assert brain.make_sentence(QUESTION_MARK, must_be_end=True)[-1] == QUESTION_MARK


def test_question_needs_an_end_chain(make_brain) -> None:
    brain = make_brain("what ? said the cat")
    assert brain.make_question() == []


def test_zero_continue_chance_stops_at_first_boundary(make_brain) -> None:
    brain = make_brain("a b c d", "a b c d e f", continue_chance=0)
    for _ in range(10):
        assert brain.make_sentence_with_keyword(Word("NN", "a")) == build_sentence("a b c d")


def test_full_continue_chance_always_extends(make_brain) -> None:
    brain = make_brain("a b c d", "a b c d e f", continue_chance=256, max_sentence_length=10)
    for _ in range(10):
        assert brain.make_sentence_with_keyword(Word("NN", "a")) == build_sentence("a b c d e f")


def test_max_sentence_length_suppresses_optional_continuation(make_brain) -> None:
    brain = make_brain("a b c d", "a b c d e f", continue_chance=256, max_sentence_length=4)
    assert brain.make_sentence_with_keyword(Word("NN", "a")) == build_sentence("a b c d")


def test_max_sentence_length_never_truncates_mandatory_words(make_brain) -> None:
    brain = make_brain("a b c d e f g", max_sentence_length=4)
    assert brain.make_sentence_with_keyword(Word("NN", "d")) == build_sentence("a b c d e f g")


def test_broken_index_raises_consistency_error(make_brain) -> None:
    brain = make_brain("the cat sat on the mat .")
    del brain.words_after[Chain.of(build_sentence("the cat sat on"))]
    with pytest.raises(BrainConsistencyError):
        brain.make_sentence_starting_keyword(Word("NN", "the"))


def test_same_seed_gives_same_sentences(make_brain) -> None:
    texts = ("a b c d", "a b c d e f", "x b c d e g", "a b c d e h")
    first = make_brain(*texts, seed=42)
    second = make_brain(*texts, seed=42)
    keyword = Word("NN", "c")
    assert [first.make_sentence_with_keyword(keyword) for _ in range(20)] == [
        second.make_sentence_with_keyword(keyword) for _ in range(20)
    ]


def test_reply_needs_nouns(cat_dog_brain: Brain) -> None:
    assert cat_dog_brain.make_reply(build_sentence("sat/VBD on/IN")) == []
    assert cat_dog_brain.make_reply() == []


def test_reply_uses_input_nouns(cat_dog_brain: Brain) -> None:
    assert cat_dog_brain.make_reply(build_sentence("my/PRP$ cat")) == CAT
    assert cat_dog_brain.make_reply(build_sentence("a/DT rug")) == DOG


def test_reply_prefers_input_proper_nouns(make_brain) -> None:
    alice = "alice/NNP went/VBD to/TO the/DT park ."
    bob = "bob/NNP likes/VBZ the/DT park too/RB ."
    brain = make_brain(alice, bob, continue_chance=0, seed=3)
    for _ in range(10):
        reply = brain.make_reply(build_sentence("alice/NNP and/CC the/DT park"))
        assert reply == build_sentence(alice)


def test_score_reply_weights() -> None:
    alice = Word("NNP", "alice")
    park = Word("NN", "park")
    the = Word("DT", "the")
    bob = Word("NNP", "bob")
    all_words = WordSet([alice, park, the])
    nouns = WordSet([alice, park])
    proper_nouns = WordSet([alice])
    assert score_reply([alice], all_words, nouns, proper_nouns) == 10
    assert score_reply([park], all_words, nouns, proper_nouns) == 4
    assert score_reply([the], all_words, nouns, proper_nouns) == 1
    assert score_reply([bob], all_words, nouns, proper_nouns) == 2
    assert score_reply([alice, alice], all_words, nouns, proper_nouns) == 20
    assert score_reply([], all_words, nouns, proper_nouns) == 0


def test_full_continue_chance_needs_a_length_cap() -> None:
    with pytest.raises(ValueError, match="max_sentence_length"):
        GenerationConfig(continue_chance=256)


def test_cyclic_chains_stop_at_the_length_cap(make_brain) -> None:
    limit = 12
    brain = make_brain("a b c d a b c d", continue_chance=256, max_sentence_length=limit)
    results = []

    def generate() -> None:
        for _ in range(20):
            results.append(brain.make_sentence_with_keyword(Word("NN", "b")))

    worker = threading.Thread(target=generate, daemon=True)
    worker.start()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert len(results) == 20
    for sentence in results:
        # mandatory steps between boundary chains may overshoot the cap on each side
        assert limit <= len(sentence) <= limit + 2 * (CHAIN_LENGTH - 1)
        assert _bigrams(sentence) <= _bigrams(build_sentence("a b c d a b c d"))
