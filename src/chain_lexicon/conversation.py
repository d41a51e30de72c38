"""One turn of a chat with a brain."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .brain import Brain
from .config import ChatConfig, TaggingConfig
from .logging import get_logger
from .tagging import Tagger, parse_text
from .words import Sentence, Word, render_tagged, trim_period

LOGGER = get_logger(__name__)

WHY = Word("WRB", "why")


@dataclass
class ChatTurn:
    """The parsed input of a turn and the reply chosen for it."""

    sentences: List[Sentence] = field(default_factory=list)
    reply: Sentence = field(default_factory=list)

    @property
    def speechless(self) -> bool:
        return not self.reply


class Conversation:
    """Answers user input with generated sentences and learns from it."""

    def __init__(
        self,
        brain: Brain,
        tagger: Tagger,
        config: Optional[ChatConfig] = None,
        tagging: Optional[TaggingConfig] = None,
    ) -> None:
        self.brain = brain
        self.tagger = tagger
        self.config = config or ChatConfig()
        self.tagging = tagging or TaggingConfig()

    def opener(self) -> Sentence:
        """Return a question to open the conversation with, or ``[]``."""
        return self._finish(self.brain.make_question())

    def respond(self, text: str) -> ChatTurn:
        """Reply to ``text`` and then learn the sentences it contained.

        Nothing is learned from a turn that leaves the brain speechless.

        A "why" question is answered with a reason sentence when the brain
        has one; otherwise the reply is built from the input's keywords, and
        failing that a question is asked to change the subject.
        """
        sentences = parse_text(text, self.tagger, self.tagging)
        reply: Sentence = []
        if sentences and sentences[0] and sentences[0][0] == WHY:
            reply = self.brain.make_reason()
        if not reply:
            reply = self.brain.make_reply(*sentences)
        if not reply:
            reply = self.brain.make_question()
        turn = ChatTurn(sentences=sentences, reply=self._finish(reply))
        LOGGER.debug("reply to %r is %r", text, render_tagged(turn.reply))

        if self.config.learn and not turn.speechless:
            # Learned without trailing periods to keep the casual chat style.
            self.brain.add_sentences(trim_period(sentence) for sentence in sentences)
        return turn

    def _finish(self, sentence: Sentence) -> Sentence:
        return trim_period(sentence) if self.config.trim_period else sentence


__all__ = ["ChatTurn", "Conversation", "WHY"]
