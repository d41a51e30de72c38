from __future__ import annotations

from pathlib import Path

import pytest

from chain_lexicon.config import ChainLexiconConfig, GenerationConfig, load_config


def test_defaults() -> None:
    config = load_config()
    assert config.generation.continue_chance == 128
    assert config.generation.max_sentence_length is None
    assert config.tagging.lowercase is True
    assert config.chat.brain_path == Path("chain_lexicon.brain")


def test_yaml_file_with_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "generation:\n  continue_chance: 64\n  seed: 9\nchat:\n  brain_path: bot.brain\n  learn: false\n",
        encoding="utf-8",
    )
    config = load_config(path, [{"generation": {"seed": 11}}])
    assert config.generation.continue_chance == 64
    assert config.generation.seed == 11
    assert config.chat.brain_path == Path("bot.brain")
    assert config.chat.learn is False


def test_json_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"tagging": {"auto_download": false}}', encoding="utf-8")
    assert load_config(path).tagging.auto_download is False


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ChainLexiconConfig()


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(path)


@pytest.mark.parametrize("kwargs", [{"continue_chance": -1}, {"continue_chance": 257}, {"continue_chance": 256}, {"max_sentence_length": 0}])
def test_generation_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        GenerationConfig(**kwargs)


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(TypeError):
        ChainLexiconConfig.from_dict({"generation": {"temperature": 1.0}})


def test_to_dict_round_trip() -> None:
    config = load_config(overrides=[{"chat": {"brain_path": "x.brain"}, "generation": {"max_sentence_length": 12}}])
    data = config.to_dict()
    assert data["chat"]["brain_path"] == "x.brain"
    assert ChainLexiconConfig.from_dict(data) == config
