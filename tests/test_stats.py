"""Tests for rankings and per-player statistics."""

from __future__ import annotations

from datetime import date, time

import pytest

from domain.common import MatchRecord, PlayerState
from domain.stats import match_history, newest_first, player_statistics, rank_players


def _record(match_id: int, team1: tuple[str, ...], team2: tuple[str, ...], winner: str) -> MatchRecord:
    return MatchRecord(
        match_id=match_id,
        date=date(2026, 4, match_id),
        time=time(18, 0),
        team1=team1,
        team2=team2,
        team1_score=10 if winner == "team1" else 6,
        team2_score=6 if winner == "team1" else 10,
        winner=winner,
    )


MATCHES = [
    _record(1, ("Alice", "Bob"), ("Carol", "Dave"), "team1"),
    _record(2, ("Alice", "Bob"), ("Carol", "Eve"), "team1"),
    _record(3, ("Alice", "Carol"), ("Bob", "Dave"), "team2"),
    _record(4, ("Dave", "Eve"), ("alice", "Carol"), "team1"),
    _record(5, ("Bob", "Carol"), ("Dave", "Eve"), "team1"),
]


def test_rank_players_orders_by_rating_then_name() -> None:
    ranked = rank_players(
        [PlayerState("bob", 1200), PlayerState("Alice", 1250), PlayerState("Carl", 1200)]
    )
    assert [player.name for player in ranked] == ["Alice", "bob", "Carl"]


def test_player_statistics_collects_teammates_and_opponents() -> None:
    alice = PlayerState("Alice", rating=1210, matches_played=4, wins=2, losses=2)
    stats = player_statistics(alice, MATCHES)

    assert [match.match_id for match in stats.matches] == [1, 2, 3, 4]
    assert stats.win_rate == pytest.approx(50.0)

    teammates = {record.name: (record.wins, record.losses) for record in stats.teammates}
    assert teammates == {"Bob": (2, 0), "Carol": (0, 2)}
    assert stats.best_teammate is not None and stats.best_teammate.name == "Bob"
    assert stats.worst_teammate is not None and stats.worst_teammate.name == "Carol"

    opponents = {record.name: (record.wins, record.losses) for record in stats.opponents}
    assert opponents == {
        "Carol": (2, 0),
        "Dave": (1, 2),
        "Eve": (1, 1),
        "Bob": (0, 1),
    }
    assert stats.most_beaten_opponent is not None
    assert stats.most_beaten_opponent.name == "Carol"
    assert stats.toughest_opponent is not None
    assert stats.toughest_opponent.name == "Bob"


def test_ties_in_win_rate_prefer_more_games() -> None:
    matches = [
        _record(1, ("Ann", "Bea"), ("Cid", "Dot"), "team1"),
        _record(2, ("Ann", "Bea"), ("Cid", "Dot"), "team2"),
        _record(3, ("Ann", "Eli"), ("Cid", "Dot"), "team1"),
        _record(4, ("Ann", "Eli"), ("Cid", "Dot"), "team2"),
        _record(5, ("Ann", "Eli"), ("Cid", "Dot"), "team1"),
        _record(6, ("Ann", "Eli"), ("Cid", "Dot"), "team2"),
    ]
    stats = player_statistics(PlayerState("Ann"), matches)
    assert [record.name for record in stats.teammates] == ["Eli", "Bea"]


def test_player_without_matches_has_empty_statistics() -> None:
    stats = player_statistics(PlayerState("Nobody"), MATCHES)
    assert stats.matches == ()
    assert stats.teammates == ()
    assert stats.best_teammate is None
    assert stats.win_rate == pytest.approx(0.0)


def test_match_history_lists_newest_first() -> None:
    result = match_history(MATCHES)
    assert [match.match_id for match in result.matches] == [5, 4, 3, 2, 1]
    assert result.total_matches == 5
    assert result.player is None
    assert result.losses == 0


def test_match_history_for_one_player_counts_wins_and_losses() -> None:
    result = match_history(MATCHES, "ALICE")
    assert [match.match_id for match in result.matches] == [4, 3, 2, 1]
    assert (result.wins, result.losses) == (2, 2)
    assert result.win_rate == pytest.approx(50.0)
    assert result.total_matches == 5


def test_same_moment_matches_show_latest_insert_first() -> None:
    early = MatchRecord(
        match_id=1,
        date=date(2026, 4, 1),
        time=time(18, 0),
        team1=("Ann",),
        team2=("Bea",),
        team1_score=10,
        team2_score=4,
        winner="team1",
    )
    late = MatchRecord(
        match_id=2,
        date=date(2026, 4, 1),
        time=time(18, 0),
        team1=("Ann",),
        team2=("Bea",),
        team1_score=3,
        team2_score=10,
        winner="team2",
    )
    assert [match.match_id for match in newest_first([early, late])] == [2, 1]
