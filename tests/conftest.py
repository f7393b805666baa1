"""Shared fixtures for ledger tests backed by a throwaway SQLite database."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from repositories import create_organization, ensure_ledger_schema


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture()
def session_factory(db_url: str) -> Iterator[sessionmaker[Session]]:
    engine = create_db_engine(db_url)
    ensure_ledger_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def organization_id(session_factory: sessionmaker[Session]) -> int:
    with session_factory() as session, session.begin():
        organization = create_organization(session, name="Office")
        return organization.id
