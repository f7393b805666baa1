"""Shared plumbing for the typer jobs under scripts/."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from domain.ratings.config import (
    DEFAULT_CONFIG_DIR,
    EloSystemConfig,
    load_elo_system_config,
)
from domain.ratings.match_calculator import MatchRatingCalculator
from repositories import ensure_ledger_schema

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise typer.BadParameter(f"unknown log level: {level}", param_hint="--log-level")
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)


def open_ledger(db_url: str) -> sessionmaker[Session]:
    """Create the engine, make sure the ledger tables exist, return a session factory."""
    engine = create_db_engine(db_url)
    ensure_ledger_schema(engine)
    return create_session_factory(engine)


def load_system(
    system_name: str,
    config_dir: Path | None = None,
) -> EloSystemConfig:
    target_dir = config_dir or DEFAULT_CONFIG_DIR
    try:
        return load_elo_system_config(system_name, target_dir)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--system-name") from exc


def load_calculator(
    system_name: str,
    config_dir: Path | None = None,
) -> MatchRatingCalculator:
    return MatchRatingCalculator(load_system(system_name, config_dir).parameters)


def fail(message: str) -> None:
    """Print an error line and exit with status 1."""
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=1)
