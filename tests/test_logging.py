from __future__ import annotations

import io
import logging

from chain_lexicon.logging import configure_logging, get_logger


def test_package_records_use_the_package_format() -> None:
    stream = io.StringIO()
    configure_logging(logging.DEBUG, logging.StreamHandler(stream))
    get_logger("chain_lexicon.brain").debug("seed chain is %s", "a b c d")
    line = stream.getvalue().strip()
    assert "| chain-lexicon | DEBUG | chain_lexicon.brain | seed chain is a b c d" in line


def test_root_logger_is_left_alone() -> None:
    root_handlers = list(logging.getLogger().handlers)
    configure_logging()
    assert logging.getLogger().handlers == root_handlers
    assert logging.getLogger("chain_lexicon").propagate is False


def test_reconfiguring_replaces_the_handler() -> None:
    first, second = io.StringIO(), io.StringIO()
    configure_logging(logging.INFO, logging.StreamHandler(first))
    configure_logging(logging.WARNING, logging.StreamHandler(second))
    logger = get_logger("chain_lexicon.snapshot")
    logger.info("hidden")
    logger.warning("shown")
    assert first.getvalue() == ""
    assert "shown" in second.getvalue()
    assert "hidden" not in second.getvalue()
    assert len(logging.getLogger("chain_lexicon").handlers) == 1
