"""Tests for chronological replay of match history."""

from __future__ import annotations

import logging
from datetime import date, time

import pytest

from domain.common import MatchRecord, PlayerState
from domain.ratings.match_calculator import MatchRatingCalculator
from domain.ratings.replay import chronological_order, replay_matches


def _record(
    match_id: int,
    day: int,
    team1: tuple[str, ...],
    team2: tuple[str, ...],
    team1_score: int,
    team2_score: int,
    *,
    at: time = time(12, 0),
    variant: str | None = None,
) -> MatchRecord:
    return MatchRecord(
        match_id=match_id,
        date=date(2026, 3, day),
        time=at,
        team1=team1,
        team2=team2,
        team1_score=team1_score,
        team2_score=team2_score,
        winner="team1" if team1_score > team2_score else "team2",
        variant=variant,
    )


ROSTER = [PlayerState(name) for name in ("Alice", "Bob", "Carol", "Dave", "Eve")]

HISTORY = [
    _record(1, 1, ("Alice", "Bob"), ("Carol", "Dave"), 10, 8),
    _record(2, 2, ("Alice", "Carol"), ("Bob", "Dave"), 4, 10),
    _record(3, 3, ("Eve",), ("Alice", "Bob"), 10, 6),
    _record(4, 4, ("Dave", "Eve"), ("Alice", "Carol"), 10, 9),
]


def test_replay_matches_sequential_engine_calls() -> None:
    calculator = MatchRatingCalculator()
    result = replay_matches(HISTORY, ROSTER, calculator=calculator)

    states = {player.name: player for player in ROSTER}
    for record in HISTORY:
        participants = {name: states[name] for name in record.team1 + record.team2}
        outcome = calculator.rate_match(record.as_input(), participants)
        states.update(outcome.players)
        assert result.rating_changes[record.match_id] == outcome.rating_changes

    assert result.players == states
    assert result.processed_match_ids == (1, 2, 3, 4)
    assert result.skipped_match_ids == ()


def test_replay_is_idempotent() -> None:
    first = replay_matches(HISTORY, ROSTER)
    rebuilt_roster = list(first.players.values())
    second = replay_matches(HISTORY, rebuilt_roster)

    assert first.players == second.players
    assert first.rating_changes == second.rating_changes


def test_replay_resets_roster_before_folding() -> None:
    stale = [
        PlayerState("Alice", rating=1500, matches_played=40, wins=30, losses=10),
        PlayerState("Bob", rating=900, matches_played=3, wins=0, losses=3),
        PlayerState("Zed", rating=1333, matches_played=2, wins=1, losses=1),
    ]
    result = replay_matches(
        [_record(1, 1, ("Alice",), ("Bob",), 10, 9)],
        stale,
    )

    assert result.players["Alice"] == PlayerState("Alice", 1220, 1, 1, 0)
    assert result.players["Bob"] == PlayerState("Bob", 1180, 1, 0, 1)
    assert result.players["Zed"] == PlayerState("Zed", 1200, 0, 0, 0)


def test_replay_sorts_chronologically_and_keeps_insertion_order_for_ties() -> None:
    late = _record(10, 5, ("Alice",), ("Bob",), 10, 0)
    tie_a = _record(11, 2, ("Carol",), ("Dave",), 10, 9, at=time(9, 30))
    early = _record(12, 1, ("Alice",), ("Carol",), 3, 10)
    tie_b = _record(13, 2, ("Dave",), ("Eve",), 10, 2, at=time(9, 30))

    ordered = chronological_order([late, tie_a, early, tie_b])
    assert [record.match_id for record in ordered] == [12, 11, 13, 10]

    result = replay_matches([late, tie_a, early, tie_b], ROSTER)
    assert result.processed_match_ids == (12, 11, 13, 10)


def test_replay_skips_matches_with_unknown_players(caplog: pytest.LogCaptureFixture) -> None:
    history = [
        _record(1, 1, ("Alice",), ("Ghost",), 10, 5),
        _record(2, 2, ("Alice",), ("Bob",), 10, 5),
    ]

    with caplog.at_level(logging.WARNING, logger="domain.ratings.replay"):
        result = replay_matches(history, ROSTER)

    assert result.skipped_match_ids == (1,)
    assert result.processed_match_ids == (2,)
    assert 1 not in result.rating_changes
    assert result.players["Alice"].matches_played == 1
    assert "Ghost" in caplog.text


def test_replay_resolves_names_case_insensitively() -> None:
    result = replay_matches(
        [_record(1, 1, ("alice",), ("BOB",), 10, 8)],
        ROSTER,
    )

    assert result.rating_changes[1] == {"Alice": 22, "Bob": -22}
    assert result.players["Alice"].rating == 1222


def test_replay_reuses_recorded_variant() -> None:
    history = [_record(1, 1, ("Alice",), ("Bob",), 9, 10, variant="unbalanced")]
    result = replay_matches(history, ROSTER)

    assert result.variants[1].value == "unbalanced"
    assert result.rating_changes[1] == {"Alice": -1, "Bob": 1}
