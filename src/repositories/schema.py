"""Schema creation for the ledger tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Base, Match, Organization, Player


def ensure_ledger_schema(engine: Engine) -> None:
    """Create organizations, players and matches tables if they do not exist."""
    Base.metadata.create_all(
        bind=engine,
        tables=[Organization.__table__, Player.__table__, Match.__table__],
    )
