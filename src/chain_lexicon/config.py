"""Configuration helpers for chain-lexicon."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

from .utils.io import load_yaml_or_json

# Chance out of 256 of continuing past a chain that could legally end a sentence.
CONTINUE_CHANCE = 128


@dataclass
class GenerationConfig:
    """Configuration for sentence generation."""

    continue_chance: int = CONTINUE_CHANCE
    max_sentence_length: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 <= self.continue_chance <= 256:
            msg = f"continue_chance must be between 0 and 256, got {self.continue_chance}"
            raise ValueError(msg)
        if self.max_sentence_length is not None and self.max_sentence_length < 1:
            msg = "max_sentence_length must be positive when set"
            raise ValueError(msg)
        # 256 always continues, so a cycle of chains would never end the walk.
        if self.continue_chance == 256 and self.max_sentence_length is None:
            msg = "continue_chance of 256 requires max_sentence_length"
            raise ValueError(msg)


@dataclass
class TaggingConfig:
    """Configuration for the part-of-speech tagging adapter."""

    auto_download: bool = True
    lowercase: bool = True


@dataclass
class ChatConfig:
    """Configuration for the chat and training front end."""

    brain_path: Path = Path("chain_lexicon.brain")
    trim_period: bool = True
    learn: bool = True
    sample_size: int = 5

    def __post_init__(self) -> None:
        self.brain_path = Path(self.brain_path)


@dataclass
class ChainLexiconConfig:
    """Top-level configuration."""

    generation: GenerationConfig = field(default_factory=GenerationConfig)
    tagging: TaggingConfig = field(default_factory=TaggingConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChainLexiconConfig:
        return cls(
            generation=GenerationConfig(**data.get("generation", {})),
            tagging=TaggingConfig(**data.get("tagging", {})),
            chat=ChatConfig(**data.get("chat", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["chat"]["brain_path"] = str(self.chat.brain_path)
        return data


def _merge_dict(base: dict[str, Any], overrides: Iterable[dict[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for override in overrides:
        for key, value in override.items():
            existing = result.get(key)
            if isinstance(value, dict) and isinstance(existing, dict):
                nested = _merge_dict(cast(dict[str, Any], existing), [value])
                result[key] = nested
            else:
                result[key] = value
    return result


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[dict[str, Any]]] = None,
) -> ChainLexiconConfig:
    """Load configuration from disk and merge overrides."""

    overrides = list(overrides or [])
    if path is None:
        base: dict[str, Any] = {}
    else:
        base = load_yaml_or_json(Path(path))

    merged = _merge_dict(base, overrides)
    return ChainLexiconConfig.from_dict(merged)
