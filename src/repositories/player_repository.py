"""Persistence helpers for organization-scoped players."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from domain.common import name_key
from models import Player


def fetch_players_by_names(
    session: Session,
    organization_id: int,
    names: Iterable[str],
    *,
    lock: bool = False,
) -> dict[str, Player]:
    """Return existing players keyed by lower-cased name."""
    keys = sorted({name_key(name) for name in names})
    if not keys:
        return {}

    statement = (
        select(Player)
        .where(
            Player.organization_id == organization_id,
            Player.name_key.in_(keys),
        )
        .order_by(Player.id)
    )
    if lock:
        statement = statement.with_for_update()

    players = session.execute(statement).scalars().all()
    return {player.name_key: player for player in players}


def get_or_create_players(
    session: Session,
    organization_id: int,
    names: Sequence[str],
    *,
    initial_rating: int = 1200,
) -> dict[str, Player]:
    """Resolve every name to a locked player row, creating missing ones.

    Matching is case-insensitive; new players keep the submitted spelling.
    """
    players = fetch_players_by_names(session, organization_id, names, lock=True)
    created = False
    for name in names:
        key = name_key(name)
        if key in players:
            continue
        player = Player(
            organization_id=organization_id,
            name=name.strip(),
            name_key=key,
            rating=initial_rating,
            matches_played=0,
            wins=0,
            losses=0,
        )
        session.add(player)
        players[key] = player
        created = True

    if created:
        session.flush()
    return players


def list_players(session: Session, organization_id: int, *, lock: bool = False) -> list[Player]:
    """All players of one organization, highest rating first."""
    statement = (
        select(Player)
        .where(Player.organization_id == organization_id)
        .order_by(Player.rating.desc(), Player.name_key, Player.id)
    )
    if lock:
        statement = statement.with_for_update()
    return list(session.execute(statement).scalars().all())


def find_player(session: Session, organization_id: int, name: str) -> Player | None:
    return fetch_players_by_names(session, organization_id, [name]).get(name_key(name))


def delete_players_for_organization(session: Session, organization_id: int) -> int:
    result = session.execute(delete(Player).where(Player.organization_id == organization_id))
    return int(result.rowcount or 0)


def count_players(session: Session, organization_id: int) -> int:
    statement = select(func.count(Player.id)).where(Player.organization_id == organization_id)
    return int(session.scalar(statement) or 0)
