"""Foosball Elo rating engine."""

from domain.ratings.calculator import (
    EloParameters,
    calculate_expected_score,
    calculate_k_factor,
    calculate_margin_factor,
    update_rating,
    update_rating_unbalanced,
)
from domain.ratings.match_calculator import (
    MatchRatingCalculator,
    MatchRatingOutcome,
    PlayerRatingEvent,
    RatingVariant,
    select_variant,
)
from domain.ratings.replay import ReplayResult, replay_matches
from domain.ratings.validation import validate_match

__all__ = [
    "EloParameters",
    "MatchRatingCalculator",
    "MatchRatingOutcome",
    "PlayerRatingEvent",
    "RatingVariant",
    "ReplayResult",
    "calculate_expected_score",
    "calculate_k_factor",
    "calculate_margin_factor",
    "replay_matches",
    "select_variant",
    "update_rating",
    "update_rating_unbalanced",
    "validate_match",
]
