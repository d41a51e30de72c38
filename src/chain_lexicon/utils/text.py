"""Text processing helpers used throughout the chain-lexicon package."""

from __future__ import annotations

import re
import unicodedata
from typing import List

_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+")
_QUOTE_RE = re.compile(r"^\s{0,3}>\s?")
_LIST_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
_RULE_RE = re.compile(r"^\s*(?:[-*_]\s*){3,}$")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_EMPHASIS_RE = re.compile(r"(\*\*|\*|`)(.+?)\1")
_UNDERSCORE_RE = re.compile(r"\b(__|_)(.+?)\1\b")
_HTML_TAG_RE = re.compile(r"<[^>]+>")


def normalise_word_text(value: str) -> str:
    """Normalise word text to NFC and lowercase it."""
    return unicodedata.normalize("NFC", value).lower()


def strip_markdown(value: str) -> List[str]:
    """Reduce Markdown source to a list of prose paragraphs.

    Code blocks and horizontal rules are dropped, inline markup is removed and
    link and image syntax is replaced by its label.
    """
    paragraphs: List[str] = []
    current: List[str] = []
    in_fence = False
    for raw_line in value.splitlines():
        if _FENCE_RE.match(raw_line):
            in_fence = not in_fence
            continue
        if in_fence or raw_line.startswith(("    ", "\t")):
            continue
        if not raw_line.strip() or _RULE_RE.match(raw_line):
            if current:
                paragraphs.append(" ".join(current))
                current = []
            continue
        line = _HEADING_RE.sub("", raw_line)
        line = _QUOTE_RE.sub("", line)
        line = _LIST_RE.sub("", line)
        line = _IMAGE_RE.sub(r"\1", line)
        line = _LINK_RE.sub(r"\1", line)
        line = _EMPHASIS_RE.sub(r"\2", line)
        line = _UNDERSCORE_RE.sub(r"\2", line)
        line = _HTML_TAG_RE.sub("", line)
        line = line.strip()
        if _HEADING_RE.match(raw_line) or _LIST_RE.match(raw_line):
            # headings and list items stand alone
            if current:
                paragraphs.append(" ".join(current))
                current = []
            if line:
                paragraphs.append(line)
            continue
        if line:
            current.append(line)
    if current:
        paragraphs.append(" ".join(current))
    return paragraphs
