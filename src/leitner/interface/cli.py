"""Leitner CLI: root commands and the config subgroup."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from leitner import VERSION
from leitner.application.config import AppConfig, resolve_config
from leitner.application.stats.progress_calculator import ProgressCalculator
from leitner.application.stats.service import ProgressService
from leitner.domain.errors import LeitnerError
from leitner.domain.models import AnswerDifficulty
from leitner.infrastructure.yaml_deck import YamlDeckRepository

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="leitner: Modified-Leitner flashcard scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage leitner configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

DeckArg = Annotated[
    Path | None,
    typer.Argument(help="Path to a YAML deck file. Defaults to 'deck_path' in config."),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context, **overrides) -> AppConfig:
    # A missing -v leaves verbosity to the environment and config file.
    verbose = ctx.obj.get("verbose") if ctx.obj else None
    config = resolve_config({"verbose": verbose or None, **overrides})
    _apply_verbosity(config)
    return config


def _apply_verbosity(config: AppConfig) -> None:
    if config.verbose >= 1:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug(f"Verbosity {config.verbose}: debug logging enabled")


def _service(config: AppConfig) -> ProgressService:
    if config.deck_path is None:
        typer.secho("No deck given and no 'deck_path' configured.", fg="red", err=True)
        raise typer.Exit(2)

    calculator = ProgressCalculator(
        window_days=config.review_window_days,
        max_challenging=config.max_challenging_cards,
    )
    return ProgressService(YamlDeckRepository(config.deck_path), calculator=calculator)


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for leitner."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def version():
    """Print the installed version."""
    typer.echo(VERSION)


@app.command()
def due(
    ctx: typer.Context,
    deck: DeckArg = None,
    day: Annotated[int, typer.Option(min=0, help="Day number, starting from 0.")] = 0,
):
    """List the cards to [bold green]practice[/bold green] on a given day."""
    service = _service(_config(ctx, deck_path=deck))
    try:
        cards = service.due_cards(day)
    except LeitnerError as e:
        _fail(str(e))

    if not cards:
        typer.echo(f"Nothing due on day {day}.")
        return
    for card in cards:
        typer.echo(card.front)


@app.command("range")
def range_(ctx: typer.Context, deck: DeckArg = None):
    """Show the lowest and highest buckets that hold cards."""
    service = _service(_config(ctx, deck_path=deck))
    try:
        result = service.bucket_range()
    except LeitnerError as e:
        _fail(str(e))

    if result is None:
        typer.echo("No cards in any bucket.")
        return
    typer.echo(f"Buckets {result.min_bucket}-{result.max_bucket}")


@app.command()
def hint(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key of the card in the deck.")],
    deck: DeckArg = None,
):
    """Print a hint for a card."""
    service = _service(_config(ctx, deck_path=deck))
    try:
        typer.echo(service.hint(key))
    except KeyError:
        _fail(f"Unknown card key: {key}")
    except LeitnerError as e:
        _fail(str(e))


@app.command()
def answer(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key of the card in the deck.")],
    outcome: Annotated[AnswerDifficulty, typer.Argument(help="How well you did.")],
    deck: DeckArg = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the move without saving it.")
    ] = False,
):
    """Record a review outcome and move the card to its new bucket."""
    service = _service(_config(ctx, deck_path=deck))
    try:
        before, after = service.record_answer(key, outcome, dry_run=dry_run)
    except KeyError:
        _fail(f"Unknown card key: {key}")
    except LeitnerError as e:
        _fail(str(e))

    if before is None:
        typer.echo(f"{key} is not in a reviewable bucket; nothing changed.")
    else:
        typer.echo(f"{key}: bucket {before} -> {after}")


@app.command()
def stats(ctx: typer.Context, deck: DeckArg = None):
    """Print progress statistics as JSON."""
    service = _service(_config(ctx, deck_path=deck))
    try:
        result = service.progress()
    except LeitnerError as e:
        _fail(str(e))

    typer.echo(json.dumps(result.to_dict(), indent=2))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Print the resolved configuration as JSON."""
    config = _config(ctx)
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))
