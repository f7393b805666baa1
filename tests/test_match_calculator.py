"""Unit tests for match-level rating updates."""

from __future__ import annotations

import pytest

from domain.common import MatchInput, PlayerState
from domain.errors import MissingPlayerInReplay
from domain.ratings.calculator import EloParameters
from domain.ratings.match_calculator import (
    MatchRatingCalculator,
    RatingVariant,
    select_variant,
)


def _players(*states: PlayerState) -> dict[str, PlayerState]:
    return {state.name: state for state in states}


def test_select_variant_by_team_size_uniformity() -> None:
    assert select_variant(["a", "b"], ["c", "d"]) is RatingVariant.BALANCED
    assert select_variant(["a"], ["b"]) is RatingVariant.BALANCED
    assert select_variant(["a"], ["b", "c", "d"]) is RatingVariant.UNBALANCED


def test_one_vs_one_scenario() -> None:
    calculator = MatchRatingCalculator()
    outcome = calculator.rate_match(
        MatchInput(team1=("Ann",), team2=("Ben",), team1_score=11, team2_score=9),
        _players(PlayerState("Ann"), PlayerState("Ben")),
    )

    assert outcome.variant is RatingVariant.BALANCED
    assert outcome.winner == "team1"
    assert outcome.margin_factor == pytest.approx(1.1)
    assert outcome.rating_changes == {"Ann": 22, "Ben": -22}
    assert outcome.players["Ann"].rating == 1222
    assert outcome.players["Ben"].rating == 1178
    for event in outcome.events:
        assert event.expected_score == pytest.approx(0.5)
        assert event.k_factor == 44


def test_balanced_two_vs_two_updates_counters() -> None:
    calculator = MatchRatingCalculator()
    outcome = calculator.rate_match(
        MatchInput(team1=("A", "B"), team2=("C", "D"), team1_score=3, team2_score=10),
        _players(
            PlayerState("A", rating=1250, matches_played=4, wins=2, losses=2),
            PlayerState("B", rating=1150),
            PlayerState("C", rating=1300, matches_played=30, wins=20, losses=10),
            PlayerState("D", rating=1100, matches_played=12, wins=6, losses=6),
        ),
    )

    assert outcome.winner == "team2"
    a, b, c, d = (outcome.players[name] for name in "ABCD")
    assert (a.matches_played, a.wins, a.losses) == (5, 2, 3)
    assert (b.matches_played, b.wins, b.losses) == (1, 0, 1)
    assert (c.matches_played, c.wins, c.losses) == (31, 21, 10)
    assert (d.matches_played, d.wins, d.losses) == (13, 7, 6)
    assert a.rating < 1250 and b.rating < 1150
    assert c.rating > 1300 and d.rating > 1100
    for state in outcome.players.values():
        assert state.matches_played == state.wins + state.losses


def test_balanced_opponent_rating_is_opposing_average() -> None:
    calculator = MatchRatingCalculator()
    outcome = calculator.rate_match(
        MatchInput(team1=("A", "B"), team2=("C", "D"), team1_score=10, team2_score=9),
        _players(
            PlayerState("A", rating=1200),
            PlayerState("B", rating=1200),
            PlayerState("C", rating=1100),
            PlayerState("D", rating=1300),
        ),
    )
    team1_events = [event for event in outcome.events if event.team == "team1"]
    team2_events = [event for event in outcome.events if event.team == "team2"]
    assert all(event.opponent_rating == pytest.approx(1200.0) for event in team1_events)
    assert all(event.opponent_rating == pytest.approx(1200.0) for event in team2_events)


def test_balanced_deltas_do_not_necessarily_sum_to_zero() -> None:
    calculator = MatchRatingCalculator()
    outcome = calculator.rate_match(
        MatchInput(team1=("A", "B"), team2=("C", "D"), team1_score=10, team2_score=9),
        _players(
            PlayerState("A", matches_played=0, wins=0, losses=0),
            PlayerState("B", matches_played=15, wins=8, losses=7),
            PlayerState("C", matches_played=25, wins=12, losses=13),
            PlayerState("D", matches_played=0),
        ),
    )

    assert outcome.rating_changes == {"A": 20, "B": 16, "C": -12, "D": -20}
    assert sum(outcome.rating_changes.values()) == 4


def test_unbalanced_one_vs_three_scenario() -> None:
    calculator = MatchRatingCalculator()
    outcome = calculator.rate_match(
        MatchInput(team1=("Solo",), team2=("X", "Y", "Z"), team1_score=5, team2_score=10),
        _players(PlayerState("Solo"), PlayerState("X"), PlayerState("Y"), PlayerState("Z")),
    )

    assert outcome.variant is RatingVariant.UNBALANCED
    assert outcome.margin_factor == pytest.approx(1.4)
    solo = next(event for event in outcome.events if event.name == "Solo")
    assert solo.actual_score == pytest.approx(1.0 / 3.0)
    assert solo.k_factor == 56
    assert solo.post_rating == 1191
    assert outcome.players["Solo"].losses == 1

    for name in ("X", "Y", "Z"):
        assert outcome.players[name].rating == 1214
        assert outcome.players[name].wins == 1


def test_variant_can_be_forced_by_caller() -> None:
    calculator = MatchRatingCalculator()
    match = MatchInput(team1=("A",), team2=("B",), team1_score=9, team2_score=10)
    players = _players(PlayerState("A"), PlayerState("B"))

    balanced = calculator.rate_match(match, players)
    share = calculator.rate_match(match, players, variant="unbalanced")

    assert balanced.rating_changes == {"A": -20, "B": 20}
    assert share.variant is RatingVariant.UNBALANCED
    assert share.rating_changes == {"A": -1, "B": 1}
    # the narrow loser still records a loss
    assert share.players["A"].losses == 1


def test_rate_match_does_not_mutate_inputs() -> None:
    calculator = MatchRatingCalculator()
    players = _players(PlayerState("A"), PlayerState("B"))
    snapshot = dict(players)

    calculator.rate_match(
        MatchInput(team1=("A",), team2=("B",), team1_score=10, team2_score=0),
        players,
    )
    assert players == snapshot


def test_missing_player_raises() -> None:
    calculator = MatchRatingCalculator()
    with pytest.raises(MissingPlayerInReplay, match="Ghost"):
        calculator.rate_match(
            MatchInput(team1=("A",), team2=("Ghost",), team1_score=10, team2_score=0),
            _players(PlayerState("A")),
        )


def test_custom_parameters_are_used() -> None:
    calculator = MatchRatingCalculator(EloParameters(initial_rating=1000, novice_k_factor=20))
    assert calculator.new_player("Neo").rating == 1000

    outcome = calculator.rate_match(
        MatchInput(team1=("A",), team2=("B",), team1_score=10, team2_score=9),
        _players(calculator.new_player("A"), calculator.new_player("B")),
    )
    assert outcome.rating_changes == {"A": 10, "B": -10}
