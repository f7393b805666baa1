"""Player Elo arithmetic for foosball matches."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class EloParameters:
    initial_rating: int = 1200
    scale_factor: float = 400.0
    novice_k_factor: int = 40
    intermediate_k_factor: int = 32
    veteran_k_factor: int = 24
    intermediate_after_matches: int = 10
    veteran_after_matches: int = 20
    margin_step: float = 0.1
    max_margin_factor: float = 2.0
    team_size_weight: float = 50.0


DEFAULT_PARAMETERS = EloParameters()


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (1.5 -> 2, -1.5 -> -1)."""
    return int(math.floor(value + 0.5))


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = DEFAULT_PARAMETERS.scale_factor,
) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_margin_factor(
    score_difference: int,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> float:
    """Scale rating movement by how decisive the result was.

    A one-point win leaves K untouched; every extra point adds ``margin_step``
    up to ``max_margin_factor``.
    """
    factor = 1.0 + (abs(score_difference) - 1) * params.margin_step
    return max(1.0, min(factor, params.max_margin_factor))


def base_k_factor(matches_played: int, params: EloParameters = DEFAULT_PARAMETERS) -> int:
    if matches_played < params.intermediate_after_matches:
        return params.novice_k_factor
    if matches_played < params.veteran_after_matches:
        return params.intermediate_k_factor
    return params.veteran_k_factor


def calculate_k_factor(
    matches_played: int,
    margin_factor: float = 1.0,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> int:
    """Experience-tiered K, scaled by the match margin factor."""
    return round_half_up(base_k_factor(matches_played, params) * margin_factor)


def average_rating(ratings: Sequence[float], params: EloParameters = DEFAULT_PARAMETERS) -> float:
    if not ratings:
        return float(params.initial_rating)
    return sum(ratings) / float(len(ratings))


def score_share(own_score: int, opponent_score: int) -> float:
    """Fraction of the match points won by one side."""
    total_points = own_score + opponent_score
    if total_points <= 0:
        total_points = 1
    return own_score / total_points


def update_rating(
    player_rating: float,
    opponent_rating: float,
    actual_score: float,
    k_factor: float,
    scale_factor: float = DEFAULT_PARAMETERS.scale_factor,
) -> int:
    """Return the player's new integer rating after one result."""
    expected = calculate_expected_score(player_rating, opponent_rating, scale_factor)
    return round_half_up(player_rating + k_factor * (actual_score - expected))


def team_size_modifier(
    team_size: int,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> float:
    return math.log(max(team_size, 1)) * params.team_size_weight


def adjusted_opponent_rating(
    opponent_ratings: Sequence[float],
    *,
    team_size: int = 1,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> float:
    return average_rating(opponent_ratings, params) + team_size_modifier(team_size, params)


def update_rating_unbalanced(
    player_rating: float,
    opponent_ratings: Sequence[float],
    actual_score: float,
    k_factor: float,
    *,
    team_size: int = 1,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> int:
    """Return the new rating for a player in an N-vs-M match.

    ``team_size`` is the size of the rated player's own side; the opponent
    average is raised by ``log(team_size) * team_size_weight``. A single
    player therefore faces the plain opponent average. ``actual_score`` is
    the continuous score share rather than a win/loss flag.
    """
    opponent_rating = adjusted_opponent_rating(
        opponent_ratings,
        team_size=team_size,
        params=params,
    )
    return update_rating(
        player_rating,
        opponent_rating,
        actual_score,
        k_factor,
        params.scale_factor,
    )


__all__ = [
    "DEFAULT_PARAMETERS",
    "EloParameters",
    "adjusted_opponent_rating",
    "average_rating",
    "base_k_factor",
    "calculate_expected_score",
    "calculate_k_factor",
    "calculate_margin_factor",
    "round_half_up",
    "score_share",
    "team_size_modifier",
    "update_rating",
    "update_rating_unbalanced",
]
