"""Per-player statistics derived from match history."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from domain.common import TEAM1, MatchRecord, PlayerState, name_key


@dataclass(frozen=True)
class PairRecord:
    """Record of one player with (or against) another."""

    name: str
    wins: int
    losses: int

    @property
    def total(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.total * 100.0 if self.total > 0 else 0.0


@dataclass(frozen=True)
class PlayerStatistics:
    player: PlayerState
    matches: tuple[MatchRecord, ...]
    teammates: tuple[PairRecord, ...]
    opponents: tuple[PairRecord, ...]

    @property
    def win_rate(self) -> float:
        return self.player.win_rate

    @property
    def best_teammate(self) -> PairRecord | None:
        return self.teammates[0] if self.teammates else None

    @property
    def worst_teammate(self) -> PairRecord | None:
        return self.teammates[-1] if self.teammates else None

    @property
    def most_beaten_opponent(self) -> PairRecord | None:
        return self.opponents[0] if self.opponents else None

    @property
    def toughest_opponent(self) -> PairRecord | None:
        return self.opponents[-1] if self.opponents else None


def rank_players(players: Iterable[PlayerState]) -> list[PlayerState]:
    """Order players by rating, highest first; ties by name."""
    return sorted(players, key=lambda player: (-player.rating, player.key))


def _sorted_records(tally: dict[str, list[int]], display: dict[str, str]) -> tuple[PairRecord, ...]:
    records = [
        PairRecord(name=display[key], wins=wins, losses=losses)
        for key, (wins, losses) in tally.items()
        if wins + losses > 0
    ]
    records.sort(key=lambda record: (-record.win_rate, -record.total))
    return tuple(records)


def player_statistics(player: PlayerState, matches: Sequence[MatchRecord]) -> PlayerStatistics:
    """Collect a player's matches and their teammate/opponent records."""
    own_key = player.key
    teammate_tally: dict[str, list[int]] = {}
    opponent_tally: dict[str, list[int]] = {}
    display: dict[str, str] = {}
    played: list[MatchRecord] = []

    for match in matches:
        side = match.side_of(player.name)
        if side is None:
            continue
        played.append(match)
        won = match.winner == side
        teammates, opponents = (
            (match.team1, match.team2) if side == TEAM1 else (match.team2, match.team1)
        )

        for teammate in teammates:
            key = name_key(teammate)
            if key == own_key:
                continue
            display.setdefault(key, teammate)
            tally = teammate_tally.setdefault(key, [0, 0])
            tally[0 if won else 1] += 1

        for opponent in opponents:
            key = name_key(opponent)
            display.setdefault(key, opponent)
            tally = opponent_tally.setdefault(key, [0, 0])
            tally[0 if won else 1] += 1

    return PlayerStatistics(
        player=player,
        matches=tuple(played),
        teammates=_sorted_records(teammate_tally, display),
        opponents=_sorted_records(opponent_tally, display),
    )


@dataclass(frozen=True)
class MatchHistory:
    """Matches newest first, optionally narrowed to one player."""

    matches: tuple[MatchRecord, ...]
    total_matches: int
    player: str | None = None
    wins: int = 0

    @property
    def losses(self) -> int:
        return len(self.matches) - self.wins if self.player is not None else 0

    @property
    def win_rate(self) -> float:
        return self.wins / len(self.matches) * 100.0 if self.player is not None and self.matches else 0.0


def newest_first(matches: Iterable[MatchRecord]) -> list[MatchRecord]:
    """Latest (date, time) first; matches at the same moment by id, highest first."""
    return sorted(
        matches,
        key=lambda match: (match.date, match.time, match.match_id),
        reverse=True,
    )


def match_history(matches: Sequence[MatchRecord], player: str | None = None) -> MatchHistory:
    ordered = newest_first(matches)
    if player is None:
        return MatchHistory(matches=tuple(ordered), total_matches=len(matches))

    played: list[MatchRecord] = []
    wins = 0
    for match in ordered:
        side = match.side_of(player)
        if side is None:
            continue
        played.append(match)
        if match.winner == side:
            wins += 1
    return MatchHistory(
        matches=tuple(played),
        total_matches=len(matches),
        player=player,
        wins=wins,
    )


__all__ = [
    "MatchHistory",
    "PairRecord",
    "PlayerStatistics",
    "match_history",
    "newest_first",
    "player_statistics",
    "rank_players",
]
