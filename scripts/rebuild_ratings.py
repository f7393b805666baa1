#!/usr/bin/env python3
"""Rebuild or reset an organization's player ratings."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cli_support import configure_logging, fail, load_system, open_ledger
from db import DB_URL_ENVVAR, DEFAULT_DB_URL
from domain.errors import OrganizationNotFound
from domain.ledger import rebuild_organization_ratings, reset_organization
from domain.ratings.config import DEFAULT_SYSTEM_NAME
from domain.ratings.match_calculator import MatchRatingCalculator

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Player rating rebuild commands.",
)


@app.command()
def rebuild(
    organization_id: Annotated[int, typer.Option("--organization-id")],
    system_name: Annotated[
        str,
        typer.Option("--system-name", help="Elo system name from configs/ratings/elo."),
    ] = DEFAULT_SYSTEM_NAME,
    config_dir: Annotated[
        Path | None,
        typer.Option("--config-dir", help="Optional override for the config directory."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Replay matches without writing ratings."),
    ] = False,
    log_level: Annotated[str, typer.Option("--log-level")] = "INFO",
) -> None:
    """Replay all matches in chronological order and store the rebuilt ratings."""
    configure_logging(log_level)
    system = load_system(system_name, config_dir)
    calculator = MatchRatingCalculator(system.parameters)
    session_factory = open_ledger(db_url)
    try:
        summary = rebuild_organization_ratings(
            session_factory,
            organization_id=organization_id,
            calculator=calculator,
            dry_run=dry_run,
        )
    except OrganizationNotFound as exc:
        fail(str(exc))

    prefix = "[dry-run] " if dry_run else ""
    typer.echo(
        f"{prefix}organization_id={organization_id} "
        f"system={system_name} "
        f"processed_matches={summary.processed_matches} "
        f"skipped_matches={summary.skipped_matches} "
        f"updated_matches={summary.updated_matches} "
        f"tracked_players={summary.tracked_players}"
    )
    if dry_run:
        config = " ".join(f"{key}={value}" for key, value in system.as_config_json().items())
        typer.echo(f"[dry-run] config {config}")


@app.command()
def reset(
    organization_id: Annotated[int, typer.Option("--organization-id")],
    yes: Annotated[
        bool,
        typer.Option("--yes", help="Skip the confirmation prompt."),
    ] = False,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
    log_level: Annotated[str, typer.Option("--log-level")] = "INFO",
) -> None:
    """Delete every match and player of one organization."""
    configure_logging(log_level)
    if not yes:
        typer.confirm(
            f"Delete all matches and players of organization_id={organization_id}?",
            abort=True,
        )

    session_factory = open_ledger(db_url)
    try:
        summary = reset_organization(session_factory, organization_id=organization_id)
    except OrganizationNotFound as exc:
        fail(str(exc))

    typer.echo(
        f"reset organization_id={organization_id} "
        f"deleted_matches={summary.deleted_matches} "
        f"deleted_players={summary.deleted_players}"
    )


if __name__ == "__main__":
    app()
