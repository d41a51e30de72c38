from __future__ import annotations

import numpy as np
import pytest

from chain_lexicon.utils import ensure_rng, load_json_array, seed_everything, strip_markdown


def test_strip_markdown_inline_markup() -> None:
    source = "See the [docs](http://x) and ![a chart](c.png), `code` and __strong__ _soft_ words."
    assert strip_markdown(source) == ["See the docs and a chart, code and strong soft words."]


def test_strip_markdown_blocks() -> None:
    source = "Intro line\ncontinues here.\n\n    indented code\n> quoted text\n\n***\n1. first\n2. second\n"
    assert strip_markdown(source) == ["Intro line continues here.", "quoted text", "first", "second"]


def test_load_json_array() -> None:
    assert load_json_array("  ") == []
    assert load_json_array("[1, 2]") == [1, 2]
    with pytest.raises(ValueError):
        load_json_array('"text"')


def test_ensure_rng() -> None:
    rng = np.random.default_rng(1)
    assert ensure_rng(rng) is rng
    assert ensure_rng(5).integers(1000) == ensure_rng(5).integers(1000)


def test_seed_everything_uses_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAIN_LEXICON_SEED", "abc")
    assert seed_everything() == seed_everything()
    assert seed_everything(7) == 7
