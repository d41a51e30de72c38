"""Utility helpers shared across the chain-lexicon package."""

from .io import load_json_array, load_yaml_or_json
from .random import deterministic_hash, ensure_rng, seed_everything
from .text import normalise_word_text, strip_markdown

__all__ = [
    "deterministic_hash",
    "ensure_rng",
    "load_json_array",
    "load_yaml_or_json",
    "normalise_word_text",
    "seed_everything",
    "strip_markdown",
]
