"""I/O helpers for reading structured data."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml


def load_yaml_or_json(path: Path) -> Dict[str, Any]:
    """Load a mapping from YAML or JSON depending on the file suffix."""
    with path.open("r", encoding="utf-8") as stream:
        if path.suffix.lower() in {".yaml", ".yml"}:
            loaded = yaml.safe_load(stream)
        else:
            loaded = json.load(stream)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"Expected mapping at root of configuration file {path}"
        raise TypeError(msg)
    return loaded


def load_json_array(text: str) -> List[Any]:
    """Decode ``text`` as JSON and require an array at the root."""
    if not text.strip():
        return []
    loaded = json.loads(text)
    if not isinstance(loaded, list):
        msg = "JSON does not have array at root"
        raise ValueError(msg)
    return loaded
