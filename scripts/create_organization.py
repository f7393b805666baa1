#!/usr/bin/env python3
"""Create an organization that owns players and matches."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.exc import IntegrityError

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cli_support import configure_logging, fail, open_ledger
from db import DB_URL_ENVVAR, DEFAULT_DB_URL
from repositories import create_organization

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Organization jobs.",
)


@app.command("create")
def create(
    name: Annotated[str, typer.Argument(help="Unique organization name.")],
    domain: Annotated[
        str | None,
        typer.Option("--domain", help="Optional e-mail domain of the organization."),
    ] = None,
    created_by: Annotated[
        int | None,
        typer.Option("--created-by", help="User id of the creator."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
    log_level: Annotated[str, typer.Option("--log-level")] = "WARNING",
) -> None:
    """Insert one organization and print its id."""
    configure_logging(log_level)
    if not name.strip():
        raise typer.BadParameter("name must not be blank", param_hint="NAME")

    session_factory = open_ledger(db_url)
    try:
        with session_factory() as session, session.begin():
            organization = create_organization(
                session,
                name=name,
                domain=domain,
                created_by=created_by,
            )
            organization_id = organization.id
    except IntegrityError:
        fail(f"organization '{name.strip()}' already exists")

    typer.echo(f"created organization_id={organization_id} name={name.strip()}")


if __name__ == "__main__":
    app()
