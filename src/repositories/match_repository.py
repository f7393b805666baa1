"""Persistence helpers for organization-scoped matches."""

from __future__ import annotations

from datetime import date, time
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from domain.common import MatchInput, MatchRecord
from domain.errors import MatchNotFound
from models import Match


def insert_match(
    session: Session,
    organization_id: int,
    match_input: MatchInput,
    *,
    played_on: date,
    played_at: time,
    variant: str,
    rating_changes: dict[str, int],
    created_by: int | None = None,
) -> Match:
    """Insert one match row and flush to assign its id."""
    match = Match(
        organization_id=organization_id,
        date=played_on,
        time=played_at,
        team1=list(match_input.team1),
        team2=list(match_input.team2),
        team1_score=match_input.team1_score,
        team2_score=match_input.team2_score,
        winner=match_input.winner,
        variant=variant,
        rating_changes=dict(rating_changes),
        created_by=created_by,
    )
    session.add(match)
    session.flush()
    return match


def get_match(session: Session, organization_id: int, match_id: int) -> Match:
    statement = select(Match).where(
        Match.organization_id == organization_id,
        Match.id == match_id,
    )
    match = session.execute(statement).scalar_one_or_none()
    if match is None:
        raise MatchNotFound(
            f"match_id={match_id} does not exist in organization_id={organization_id}"
        )
    return match


def list_matches(session: Session, organization_id: int) -> list[Match]:
    """Matches in insertion order; replay re-sorts them chronologically."""
    statement = select(Match).where(Match.organization_id == organization_id).order_by(Match.id)
    return list(session.execute(statement).scalars().all())


def fetch_match_records(session: Session, organization_id: int) -> list[MatchRecord]:
    return [match.to_record() for match in list_matches(session, organization_id)]


def update_rating_changes(
    session: Session,
    matches: dict[int, Match],
    rating_changes: dict[int, dict[str, Any]],
    variants: dict[int, str],
) -> int:
    """Overwrite stored rating changes (and variants) for rebuilt matches."""
    updated = 0
    for match_id, changes in rating_changes.items():
        match = matches[match_id]
        if match.rating_changes != changes or match.variant != variants[match_id]:
            match.rating_changes = dict(changes)
            match.variant = variants[match_id]
            updated += 1
    session.flush()
    return updated


def delete_match_row(session: Session, match: Match) -> None:
    session.delete(match)
    session.flush()


def delete_matches_for_organization(session: Session, organization_id: int) -> int:
    result = session.execute(delete(Match).where(Match.organization_id == organization_id))
    return int(result.rowcount or 0)
