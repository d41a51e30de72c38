"""Command line interface for chain-lexicon."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from .brain import Brain
from .config import ChainLexiconConfig, TaggingConfig, load_config
from .conversation import Conversation
from .logging import configure_logging, get_logger
from .snapshot import SnapshotError, load_brain_file, save_brain_file
from .tagging import NltkTagger, Tagger
from .training import parse_training_file
from .utils.random import seed_everything
from .words import render_sentence, render_tagged

LOGGER = get_logger(__name__)

BRAIN_OPTION = typer.Option(
    None,
    "--brain",
    help="File to use to load/save the bot's brain.",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to a YAML or JSON configuration file.",
)
DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    help="Show verbose word tagging and generation details.",
)
SEED_OPTION = typer.Option(
    None,
    "--seed",
    help="Seed for reproducible sentence generation.",
)
CORPUS_ARGUMENT = typer.Argument(..., help="Training files (.html, .md, .rss, .txt, .trn, .json).")

EXIT_WORDS = {"exit", "quit"}

app = typer.Typer(help="Learn word chains from text and chat with the resulting brain.")


@dataclass
class CliState:
    config: ChainLexiconConfig
    debug: bool = False

    @property
    def brain_path(self) -> Path:
        return self.config.chat.brain_path


def build_tagger(config: TaggingConfig) -> Tagger:
    return NltkTagger(config)


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _load_brain(state: CliState) -> Brain:
    try:
        return load_brain_file(state.brain_path, config=state.config.generation)
    except (OSError, SnapshotError) as exc:
        _fail(f"Error loading brain from {str(state.brain_path)!r}: {exc}")


def _save_brain(brain: Brain, state: CliState) -> None:
    try:
        save_brain_file(brain, state.brain_path)
    except OSError as exc:
        _fail(f"Failed to save brain: {exc}")


@app.callback()
def main(
    ctx: typer.Context,
    brain: Optional[Path] = BRAIN_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
    seed: Optional[int] = SEED_OPTION,
) -> None:
    """Load configuration shared by every command."""

    configure_logging(logging.DEBUG if debug else logging.INFO)
    overrides = []
    if brain is not None:
        overrides.append({"chat": {"brain_path": str(brain)}})
    if seed is not None:
        seed_everything(seed)
        overrides.append({"generation": {"seed": seed}})
    try:
        config = load_config(config_path, overrides)
    except (OSError, TypeError, ValueError) as exc:
        _fail(f"Error loading configuration: {exc}")
    ctx.obj = CliState(config=config, debug=debug)


@app.command()
def chat(ctx: typer.Context) -> None:
    """Chat with the brain, learning from everything typed."""

    state = _state(ctx)
    brain = _load_brain(state)
    conversation = Conversation(
        brain,
        build_tagger(state.config.tagging),
        config=state.config.chat,
        tagging=state.config.tagging,
    )

    opener = conversation.opener()
    typer.echo(f"hello! {render_sentence(opener)}" if opener else "hello!")

    while True:
        try:
            line = typer.prompt(">", prompt_suffix=" ", default="", show_default=False)
        except typer.Abort:
            break
        if line.strip() in EXIT_WORDS:
            break
        try:
            turn = conversation.respond(line)
        except LookupError as exc:
            typer.echo(f"sorry... i'm afraid I can't make any sense of that :(\n{exc}")
            continue
        if state.debug:
            typer.echo("Here's how I understood your message:")
            for sentence in turn.sentences:
                typer.echo(f"- {render_tagged(sentence)}")
            typer.echo("")
        if turn.speechless:
            typer.echo("i am speechless :(")
        elif state.debug:
            typer.echo(f"My response:\n- {render_tagged(turn.reply)}")
        else:
            typer.echo(render_sentence(turn.reply))

    typer.echo("bye!")
    _save_brain(brain, state)


@app.command()
def train(ctx: typer.Context, corpus_files: List[Path] = CORPUS_ARGUMENT) -> None:
    """Learn the sentences found in one or more training files."""

    state = _state(ctx)
    try:
        brain = load_brain_file(state.brain_path, config=state.config.generation)
    except FileNotFoundError:
        LOGGER.info("Starting training with a new, empty brain")
        brain = Brain(config=state.config.generation)
    except (OSError, SnapshotError) as exc:
        _fail(f"Error loading brain from {str(state.brain_path)!r}: {exc}")

    tagger = build_tagger(state.config.tagging)
    sample_size = state.config.chat.sample_size
    for path in corpus_files:
        LOGGER.info("Reading training content from %s...", path)
        try:
            sentences = parse_training_file(path, tagger, state.config.tagging)
        except (OSError, LookupError, ValueError) as exc:
            _fail(f"Failed to read {path}: {exc}")

        LOGGER.info("Sentences found: %d", len(sentences))
        for sentence in sentences[:sample_size]:
            LOGGER.info("- %s", render_sentence(sentence))
        if len(sentences) > sample_size:
            LOGGER.info("- (etc...)")
        brain.add_sentences(sentences)

        # Overwrite the snapshot after each successful import.
        _save_brain(brain, state)

    LOGGER.info("All done! Updated brain saved in %s", state.brain_path)


@app.command()
def stats(ctx: typer.Context) -> None:
    """Print the size of the brain as JSON."""

    state = _state(ctx)
    brain = _load_brain(state)
    typer.echo(json.dumps(brain.stats().to_dict(), indent=2))


if __name__ == "__main__":
    app()
