#!/usr/bin/env python3
"""Record or delete foosball matches for one organization."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cli_support import configure_logging, fail, load_calculator, open_ledger
from db import DB_URL_ENVVAR, DEFAULT_DB_URL
from domain.errors import InvalidMatchInput, MatchNotFound, OrganizationNotFound
from domain.ledger import ReversalStrategy, delete_match, submit_match
from domain.ratings.config import DEFAULT_SYSTEM_NAME
from domain.ratings.match_calculator import RatingVariant
from domain.ratings.validation import validate_match

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Match recording jobs.",
)


def _format_changes(changes: dict[str, int]) -> str:
    return " ".join(f"{name}={delta:+d}" for name, delta in changes.items())


@app.command("submit")
def submit(
    organization_id: Annotated[int, typer.Option("--organization-id", help="Owning organization.")],
    team1: Annotated[
        list[str],
        typer.Option("--team1", help="Team 1 player name (repeat for each player)."),
    ],
    team2: Annotated[
        list[str],
        typer.Option("--team2", help="Team 2 player name (repeat for each player)."),
    ],
    team1_score: Annotated[int, typer.Option("--team1-score", min=0)],
    team2_score: Annotated[int, typer.Option("--team2-score", min=0)],
    variant: Annotated[
        RatingVariant | None,
        typer.Option(
            "--variant",
            help="Force a rating variant. Defaults to balanced for equal-size teams.",
        ),
    ] = None,
    played_at: Annotated[
        datetime | None,
        typer.Option(
            "--played-at",
            formats=["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S"],
            help="When the match was played. Defaults to now (UTC).",
        ),
    ] = None,
    created_by: Annotated[int | None, typer.Option("--created-by")] = None,
    system_name: Annotated[
        str,
        typer.Option("--system-name", help="Elo system name from configs/ratings/elo."),
    ] = DEFAULT_SYSTEM_NAME,
    config_dir: Annotated[Path | None, typer.Option("--config-dir")] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
    log_level: Annotated[str, typer.Option("--log-level")] = "WARNING",
) -> None:
    """Validate, rate and store one match."""
    configure_logging(log_level)
    try:
        match_input = validate_match(team1, team2, team1_score, team2_score)
    except InvalidMatchInput as exc:
        raise typer.BadParameter(str(exc)) from exc

    calculator = load_calculator(system_name, config_dir)
    session_factory = open_ledger(db_url)
    try:
        result = submit_match(
            session_factory,
            organization_id=organization_id,
            match_input=match_input,
            calculator=calculator,
            variant=variant,
            played_on=None if played_at is None else played_at.date(),
            played_at=None if played_at is None else played_at.time(),
            created_by=created_by,
        )
    except OrganizationNotFound as exc:
        fail(str(exc))

    typer.echo(
        f"recorded match_id={result.match_id} winner={result.winner} "
        f"variant={result.variant.value} margin_factor={result.margin_factor:.2f}"
    )
    typer.echo(f"rating_changes {_format_changes(result.rating_changes)}")


@app.command("delete")
def delete(
    organization_id: Annotated[int, typer.Option("--organization-id")],
    match_id: Annotated[int, typer.Option("--match-id")],
    strategy: Annotated[
        ReversalStrategy,
        typer.Option(
            "--strategy",
            help="subtract: remove the stored deltas; replay: rebuild from remaining history.",
        ),
    ] = ReversalStrategy.SUBTRACT,
    system_name: Annotated[str, typer.Option("--system-name")] = DEFAULT_SYSTEM_NAME,
    config_dir: Annotated[Path | None, typer.Option("--config-dir")] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
    log_level: Annotated[str, typer.Option("--log-level")] = "WARNING",
) -> None:
    """Delete one match and reverse its rating effect."""
    configure_logging(log_level)
    calculator = load_calculator(system_name, config_dir)
    session_factory = open_ledger(db_url)
    try:
        result = delete_match(
            session_factory,
            organization_id=organization_id,
            match_id=match_id,
            strategy=strategy,
            calculator=calculator,
        )
    except (OrganizationNotFound, MatchNotFound) as exc:
        fail(str(exc))

    typer.echo(
        f"deleted match_id={result.match_id} strategy={result.strategy.value} "
        f"restored_players={len(result.players)} skipped_players={len(result.skipped_players)}"
    )


if __name__ == "__main__":
    app()
