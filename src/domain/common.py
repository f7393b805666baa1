"""Shared types for match and player rating state."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time

TEAM1 = "team1"
TEAM2 = "team2"


def name_key(name: str) -> str:
    """Case-insensitive lookup key for a player name."""
    return name.strip().lower()


@dataclass(frozen=True)
class PlayerState:
    """Rating and counters for one player at a point in time."""

    name: str
    rating: int = 1200
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    player_id: int | None = None

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def win_rate(self) -> float:
        """Win percentage in [0, 100]; 0 for players without matches."""
        if self.matches_played <= 0:
            return 0.0
        return self.wins / self.matches_played * 100.0

    def reset(self, initial_rating: int) -> PlayerState:
        return replace(self, rating=initial_rating, matches_played=0, wins=0, losses=0)


@dataclass(frozen=True)
class MatchInput:
    """A validated match submission: two rosters and a final score."""

    team1: tuple[str, ...]
    team2: tuple[str, ...]
    team1_score: int
    team2_score: int

    @property
    def winner(self) -> str:
        return TEAM1 if self.team1_score > self.team2_score else TEAM2

    @property
    def score_difference(self) -> int:
        return abs(self.team1_score - self.team2_score)

    @property
    def total_points(self) -> int:
        return self.team1_score + self.team2_score

    @property
    def participants(self) -> tuple[str, ...]:
        return self.team1 + self.team2


@dataclass(frozen=True)
class MatchRecord:
    """A stored match as seen by replay and statistics."""

    match_id: int
    date: date
    time: time
    team1: tuple[str, ...]
    team2: tuple[str, ...]
    team1_score: int
    team2_score: int
    winner: str
    variant: str | None = None
    rating_changes: dict[str, int] | None = None

    def as_input(self) -> MatchInput:
        return MatchInput(
            team1=self.team1,
            team2=self.team2,
            team1_score=self.team1_score,
            team2_score=self.team2_score,
        )

    def side_of(self, name: str) -> str | None:
        """Return TEAM1/TEAM2 for a participant (case-insensitive), else None."""
        key = name_key(name)
        if any(name_key(member) == key for member in self.team1):
            return TEAM1
        if any(name_key(member) == key for member in self.team2):
            return TEAM2
        return None


__all__ = [
    "MatchInput",
    "MatchRecord",
    "PlayerState",
    "TEAM1",
    "TEAM2",
    "name_key",
]
