"""Rebuild player ratings by replaying match history in chronological order."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from domain.common import MatchInput, MatchRecord, PlayerState, name_key
from domain.errors import MissingPlayerInReplay
from domain.ratings.match_calculator import MatchRatingCalculator, RatingVariant, select_variant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """Rebuilt roster plus revised per-match rating changes."""

    players: dict[str, PlayerState]
    rating_changes: dict[int, dict[str, int]]
    variants: dict[int, RatingVariant]
    processed_match_ids: tuple[int, ...]
    skipped_match_ids: tuple[int, ...]


def chronological_order(matches: Iterable[MatchRecord]) -> list[MatchRecord]:
    """Sort by (date, time); equal timestamps keep their incoming order."""
    return sorted(matches, key=lambda match: (match.date, match.time))


def _canonical_input(
    match: MatchRecord,
    roster: dict[str, PlayerState],
) -> MatchInput:
    team1: list[str] = []
    team2: list[str] = []
    for names, target in ((match.team1, team1), (match.team2, team2)):
        for name in names:
            state = roster.get(name_key(name))
            if state is None:
                raise MissingPlayerInReplay(name, match_id=match.match_id)
            target.append(state.name)
    return MatchInput(
        team1=tuple(team1),
        team2=tuple(team2),
        team1_score=match.team1_score,
        team2_score=match.team2_score,
    )


def replay_matches(
    matches: Sequence[MatchRecord],
    roster: Iterable[PlayerState],
    *,
    calculator: MatchRatingCalculator | None = None,
) -> ReplayResult:
    """Reset every roster player and fold ``matches`` through the engine.

    ``matches`` should be in insertion order; they are re-sorted
    chronologically here. Matches naming a player missing from ``roster``
    are skipped and logged.
    """
    calculator = calculator or MatchRatingCalculator()
    initial_rating = calculator.params.initial_rating

    state_by_key: dict[str, PlayerState] = {}
    for player in roster:
        state_by_key[player.key] = player.reset(initial_rating)

    rating_changes: dict[int, dict[str, int]] = {}
    variants: dict[int, RatingVariant] = {}
    processed: list[int] = []
    skipped: list[int] = []

    for match in chronological_order(matches):
        try:
            match_input = _canonical_input(match, state_by_key)
        except MissingPlayerInReplay as exc:
            logger.warning("Skipping match during replay: %s", exc)
            skipped.append(match.match_id)
            continue

        variant = (
            RatingVariant(match.variant)
            if match.variant
            else select_variant(match_input.team1, match_input.team2)
        )
        players = {name: state_by_key[name_key(name)] for name in match_input.participants}
        outcome = calculator.rate_match(match_input, players, variant=variant)

        for state in outcome.players.values():
            state_by_key[state.key] = state
        rating_changes[match.match_id] = outcome.rating_changes
        variants[match.match_id] = outcome.variant
        processed.append(match.match_id)

    logger.debug(
        "Replayed %d matches (%d skipped) over %d players",
        len(processed),
        len(skipped),
        len(state_by_key),
    )
    return ReplayResult(
        players={state.name: state for state in state_by_key.values()},
        rating_changes=rating_changes,
        variants=variants,
        processed_match_ids=tuple(processed),
        skipped_match_ids=tuple(skipped),
    )


__all__ = ["ReplayResult", "chronological_order", "replay_matches"]
