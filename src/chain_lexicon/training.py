"""Extract training sentences from documents in various formats."""

from __future__ import annotations

import codecs
import enum
import warnings
from email.message import Message
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, NavigableString, Tag, XMLParsedAsHTMLWarning
from bs4.element import Comment, Doctype, ProcessingInstruction

from .config import TaggingConfig
from .logging import get_logger
from .tagging import Tagger, parse_text
from .utils.io import load_json_array
from .utils.text import strip_markdown
from .words import Sentence, Word

LOGGER = get_logger(__name__)


class TrainingFormat(enum.Enum):
    UNKNOWN = ""
    FEED = "feed"
    HTML = "html"
    MARKDOWN = "md"
    PLAIN = "txt"
    MEGAHAL = "mhtrn"
    JSON_UTTER = "json"


class UnknownFormatError(ValueError):
    """Raised when no parser can be chosen for a training input."""


_MEDIA_TYPES = {
    "text/html": TrainingFormat.HTML,
    "text/markdown": TrainingFormat.MARKDOWN,
    "text/x-markdown": TrainingFormat.MARKDOWN,
    "application/rss": TrainingFormat.FEED,
    "application/rss+xml": TrainingFormat.FEED,
    "text/rss": TrainingFormat.FEED,
    "application/atom+xml": TrainingFormat.FEED,
    "application/atom": TrainingFormat.FEED,
    "text/atom": TrainingFormat.FEED,
    # Not all XML is a feed, but the feed parser is the only XML parser.
    "application/xml": TrainingFormat.FEED,
    "text/xml": TrainingFormat.FEED,
    "text/plain": TrainingFormat.PLAIN,
    "application/json": TrainingFormat.JSON_UTTER,
}

_EXTENSIONS = {
    ".html": TrainingFormat.HTML,
    ".htm": TrainingFormat.HTML,
    ".md": TrainingFormat.MARKDOWN,
    ".rss": TrainingFormat.FEED,
    ".atom": TrainingFormat.FEED,
    ".xml": TrainingFormat.FEED,
    ".txt": TrainingFormat.PLAIN,
    ".trn": TrainingFormat.MEGAHAL,
    ".json": TrainingFormat.JSON_UTTER,
}

# Elements that never hold prose worth learning, even in their descendants.
_SKIPPED_ELEMENTS = frozenset(
    {
        "script", "style", "frameset", "frame", "applet", "object", "form",
        "label", "pre", "plaintext", "listing", "menu", "table", "td", "tr",
        "th", "map", "noframes", "iframe", "picture", "img", "canvas", "svg",
        "video", "audio", "blockquote", "nav", "figure",
    }
)
# Elements whose text content is taken to be prose.
_CONTENT_ELEMENTS = frozenset({"p", "li"})


def _format_from_media_type(media_type: str) -> Tuple[TrainingFormat, Optional[str]]:
    message = Message()
    message["content-type"] = media_type
    mime_type = message.get_content_type()
    charset = message.get_param("charset")
    encoding: Optional[str] = None
    if isinstance(charset, str):
        try:
            encoding = codecs.lookup(charset).name
        except LookupError:
            LOGGER.warning("Ignoring unknown charset %r", charset)
    return _MEDIA_TYPES.get(mime_type, TrainingFormat.UNKNOWN), encoding


def select_format(filename: Optional[str] = None, media_type: Optional[str] = None) -> Tuple[TrainingFormat, Optional[str]]:
    """Choose a training format and, if known, a character encoding.

    The media type wins over the filename when both identify a format. An
    encoding is only returned when the media type names a charset.
    """
    if media_type:
        fmt, encoding = _format_from_media_type(media_type)
        if fmt is not TrainingFormat.UNKNOWN:
            return fmt, encoding
    if filename:
        return _EXTENSIONS.get(Path(filename).suffix.lower(), TrainingFormat.UNKNOWN), None
    return TrainingFormat.UNKNOWN, None


def _decode(data: Union[bytes, str], encoding: Optional[str]) -> str:
    if isinstance(data, str):
        return data
    if encoding is None:
        return data.decode("utf-8-sig", errors="replace")
    return data.decode(encoding, errors="replace")


# HTML ------------------------------------------------------------------------
def _is_skipped(node: object) -> bool:
    return isinstance(node, Tag) and node.name in _SKIPPED_ELEMENTS


def _is_text(node: object) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, (Comment, Doctype, ProcessingInstruction))


def _text_content(node: object, parts: List[str]) -> None:
    if _is_skipped(node):
        return
    if _is_text(node):
        parts.append(str(node))
        parts.append(" ")
    elif isinstance(node, Tag):
        for child in node.children:
            _text_content(child, parts)


def _extract_node(node: object, tagger: Tagger, config: Optional[TaggingConfig]) -> List[Sentence]:
    if not isinstance(node, Tag) or _is_skipped(node):
        return []
    if node.name in _CONTENT_ELEMENTS:
        parts: List[str] = []
        _text_content(node, parts)
        return parse_text("".join(parts), tagger, config)
    sentences: List[Sentence] = []
    for child in node.children:
        sentences.extend(_extract_node(child, tagger, config))
    return sentences


def parse_html(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Extract sentences from the paragraphs and list items of a document."""
    soup = BeautifulSoup(text, "html.parser")
    return _extract_node(soup, tagger, config)


def parse_html_fragment(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Like :func:`parse_html` but for a fragment such as a feed item body.

    Text directly at the root of the fragment means we are already inside
    prose, so all of its text content is used.
    """
    soup = BeautifulSoup(text, "html.parser")
    if any(_is_text(child) and str(child).strip() for child in soup.children):
        parts: List[str] = []
        _text_content(soup, parts)
        return parse_text("".join(parts), tagger, config)
    return _extract_node(soup, tagger, config)


# Other formats -----------------------------------------------------------------
def parse_feed(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Extract sentences from the items of an RSS or Atom feed."""
    # html.parser keeps namespaced names such as content:encoded intact.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(text, "html.parser")
    items = soup.find_all(["item", "entry"])
    if not items and soup.find(["rss", "feed", "rdf:rdf"]) is None:
        msg = "error parsing feed: no rss or atom root element"
        raise ValueError(msg)
    sentences: List[Sentence] = []
    for item in items:
        title = item.find("title")
        if title is not None:
            sentences.extend(parse_text(title.get_text(), tagger, config))
        for name in ("content:encoded", "content", "description", "summary"):
            body = item.find(name)
            if body is not None:
                sentences.extend(parse_html_fragment(body.get_text(), tagger, config))
    return sentences


def parse_markdown(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Extract sentences from the prose paragraphs of a Markdown document."""
    sentences: List[Sentence] = []
    for paragraph in strip_markdown(text):
        sentences.extend(parse_text(paragraph, tagger, config))
    return sentences


def parse_plain(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    return parse_text(text, tagger, config)


def parse_megahal(text: str, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Parse MegaHAL training input: one utterance per line, ``#`` comments."""
    sentences: List[Sentence] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        sentences.extend(parse_text(line, tagger, config))
    return sentences


def parse_json_utterances(text: str) -> List[Sentence]:
    """Parse pre-tagged sentences: a JSON array of arrays of ``[text, tag]``.

    This skips tagging entirely, so it is the fast path for corpora that
    were tagged in a separate preprocessing step.
    """
    sentences: List[Sentence] = []
    for position, raw_sentence in enumerate(load_json_array(text)):
        if not isinstance(raw_sentence, list):
            msg = f"utterance {position} is not an array of words"
            raise ValueError(msg)
        sentences.append([Word.from_pair(pair) for pair in raw_sentence])
    return sentences


def parse_training_input(
    source: Union[bytes, str, BinaryIO],
    tagger: Tagger,
    filename: Optional[str] = None,
    media_type: Optional[str] = None,
    config: Optional[TaggingConfig] = None,
) -> List[Sentence]:
    """Extract sentences from ``source``, choosing a parser by type or name.

    Supported inputs are HTML, RSS or Atom feeds with HTML bodies, Markdown,
    plain text, MegaHAL ``.trn`` files and pre-tagged JSON utterances.
    """
    fmt, encoding = select_format(filename, media_type)
    if fmt is TrainingFormat.UNKNOWN:
        msg = "failed to detect file format from filename or media type"
        raise UnknownFormatError(msg)
    if not isinstance(source, (bytes, str)):
        source = source.read()
    text = _decode(source, encoding)
    LOGGER.debug("Parsing %s as %s", filename or media_type, fmt.name)

    if fmt is TrainingFormat.HTML:
        return parse_html(text, tagger, config)
    if fmt is TrainingFormat.FEED:
        return parse_feed(text, tagger, config)
    if fmt is TrainingFormat.MARKDOWN:
        return parse_markdown(text, tagger, config)
    if fmt is TrainingFormat.MEGAHAL:
        return parse_megahal(text, tagger, config)
    if fmt is TrainingFormat.JSON_UTTER:
        return parse_json_utterances(text)
    return parse_plain(text, tagger, config)


def parse_training_file(path: Path, tagger: Tagger, config: Optional[TaggingConfig] = None) -> List[Sentence]:
    """Read ``path`` and extract its sentences."""
    with Path(path).open("rb") as stream:
        return parse_training_input(stream, tagger, filename=str(path), config=config)


__all__ = [
    "TrainingFormat",
    "UnknownFormatError",
    "parse_feed",
    "parse_html",
    "parse_html_fragment",
    "parse_json_utterances",
    "parse_markdown",
    "parse_megahal",
    "parse_plain",
    "parse_training_file",
    "parse_training_input",
    "select_format",
]
