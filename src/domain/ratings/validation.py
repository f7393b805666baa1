"""Caller-side validation for match submissions."""

from __future__ import annotations

import numbers
from collections.abc import Iterable

from domain.common import MatchInput, name_key
from domain.errors import InvalidMatchInput


def _clean_team(label: str, names: Iterable[str]) -> tuple[str, ...]:
    cleaned = tuple(str(name).strip() for name in names)
    if not cleaned:
        raise InvalidMatchInput(f"{label} must have at least one player")
    if any(not name for name in cleaned):
        raise InvalidMatchInput(f"{label} contains a blank player name")

    keys = [name_key(name) for name in cleaned]
    if len(keys) != len(set(keys)):
        raise InvalidMatchInput(f"{label} lists the same player more than once: {list(cleaned)}")
    return cleaned


def validate_match(
    team1: Iterable[str],
    team2: Iterable[str],
    team1_score: int,
    team2_score: int,
) -> MatchInput:
    """Normalize a submission or raise InvalidMatchInput.

    Names are trimmed and compared case-insensitively. Draws are rejected
    because neither rating variant can represent them.
    """
    team1_names = _clean_team("team1", team1)
    team2_names = _clean_team("team2", team2)

    shared = {name_key(name) for name in team1_names} & {name_key(name) for name in team2_names}
    if shared:
        raise InvalidMatchInput(f"players appear on both teams: {sorted(shared)}")

    for score in (team1_score, team2_score):
        if isinstance(score, bool) or not isinstance(score, numbers.Integral):
            raise InvalidMatchInput(f"scores must be integers (got {score!r})")
    if team1_score < 0 or team2_score < 0:
        raise InvalidMatchInput("scores must be >= 0")
    if team1_score == team2_score:
        raise InvalidMatchInput(f"scores must differ (got {team1_score}-{team2_score})")

    return MatchInput(
        team1=team1_names,
        team2=team2_names,
        team1_score=int(team1_score),
        team2_score=int(team2_score),
    )


__all__ = ["validate_match"]
