"""Match-level rating updates for balanced and unbalanced team matches."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum

from domain.common import TEAM1, TEAM2, MatchInput, PlayerState
from domain.errors import MissingPlayerInReplay
from domain.ratings.calculator import (
    DEFAULT_PARAMETERS,
    EloParameters,
    adjusted_opponent_rating,
    average_rating,
    calculate_expected_score,
    calculate_k_factor,
    calculate_margin_factor,
    score_share,
    update_rating,
    update_rating_unbalanced,
)


class RatingVariant(str, Enum):
    """Which actual-score model rates a match."""

    BALANCED = "balanced"
    UNBALANCED = "unbalanced"


def select_variant(team1: Sequence[str], team2: Sequence[str]) -> RatingVariant:
    """Equal-size teams use binary win/loss scoring, others use score share."""
    if len(team1) == len(team2):
        return RatingVariant.BALANCED
    return RatingVariant.UNBALANCED


@dataclass(frozen=True)
class PlayerRatingEvent:
    name: str
    team: str
    won: bool
    actual_score: float
    expected_score: float
    opponent_rating: float
    pre_rating: int
    rating_delta: int
    post_rating: int
    k_factor: int


@dataclass(frozen=True)
class MatchRatingOutcome:
    """Everything the ledger needs to persist one rated match."""

    winner: str
    variant: RatingVariant
    margin_factor: float
    events: tuple[PlayerRatingEvent, ...]
    players: dict[str, PlayerState]

    @property
    def rating_changes(self) -> dict[str, int]:
        return {event.name: event.rating_delta for event in self.events}


class MatchRatingCalculator:
    """Stateless match rater; holds only immutable parameters."""

    def __init__(self, params: EloParameters = DEFAULT_PARAMETERS) -> None:
        self.params = params

    def new_player(self, name: str, *, player_id: int | None = None) -> PlayerState:
        return PlayerState(name=name, rating=self.params.initial_rating, player_id=player_id)

    def rate_match(
        self,
        match: MatchInput,
        players: Mapping[str, PlayerState],
        *,
        variant: RatingVariant | str | None = None,
    ) -> MatchRatingOutcome:
        """Rate one match.

        ``players`` maps every name in ``match.team1``/``match.team2`` to its
        current state. The returned outcome carries the post-match state of
        each participant; ``players`` itself is never mutated.
        """
        resolved_variant = (
            select_variant(match.team1, match.team2) if variant is None else RatingVariant(variant)
        )
        team1_pre = self._side_states(match.team1, players)
        team2_pre = self._side_states(match.team2, players)
        margin_factor = calculate_margin_factor(match.score_difference, self.params)
        winner = match.winner

        if resolved_variant is RatingVariant.BALANCED:
            team1_actual = 1.0 if winner == TEAM1 else 0.0
            team2_actual = 1.0 - team1_actual
        else:
            team1_actual = score_share(match.team1_score, match.team2_score)
            team2_actual = score_share(match.team2_score, match.team1_score)

        events = self._side_events(
            team=TEAM1,
            own=team1_pre,
            opponents=team2_pre,
            actual_score=team1_actual,
            won=winner == TEAM1,
            margin_factor=margin_factor,
            variant=resolved_variant,
        ) + self._side_events(
            team=TEAM2,
            own=team2_pre,
            opponents=team1_pre,
            actual_score=team2_actual,
            won=winner == TEAM2,
            margin_factor=margin_factor,
            variant=resolved_variant,
        )

        updated: dict[str, PlayerState] = {}
        for event, state in zip(events, team1_pre + team2_pre):
            updated[event.name] = replace(
                state,
                rating=event.post_rating,
                matches_played=state.matches_played + 1,
                wins=state.wins + (1 if event.won else 0),
                losses=state.losses + (0 if event.won else 1),
            )

        return MatchRatingOutcome(
            winner=winner,
            variant=resolved_variant,
            margin_factor=margin_factor,
            events=events,
            players=updated,
        )

    @staticmethod
    def _side_states(
        names: Sequence[str],
        players: Mapping[str, PlayerState],
    ) -> tuple[PlayerState, ...]:
        states: list[PlayerState] = []
        for name in names:
            state = players.get(name)
            if state is None:
                raise MissingPlayerInReplay(name)
            states.append(state)
        return tuple(states)

    def _side_events(
        self,
        *,
        team: str,
        own: tuple[PlayerState, ...],
        opponents: tuple[PlayerState, ...],
        actual_score: float,
        won: bool,
        margin_factor: float,
        variant: RatingVariant,
    ) -> tuple[PlayerRatingEvent, ...]:
        opponent_ratings = [state.rating for state in opponents]
        if variant is RatingVariant.BALANCED:
            opponent_rating = average_rating(opponent_ratings, self.params)
        else:
            opponent_rating = adjusted_opponent_rating(
                opponent_ratings,
                team_size=len(own),
                params=self.params,
            )

        events: list[PlayerRatingEvent] = []
        for state in own:
            k_factor = calculate_k_factor(state.matches_played, margin_factor, self.params)
            if variant is RatingVariant.BALANCED:
                post_rating = update_rating(
                    state.rating,
                    opponent_rating,
                    actual_score,
                    k_factor,
                    self.params.scale_factor,
                )
            else:
                post_rating = update_rating_unbalanced(
                    state.rating,
                    opponent_ratings,
                    actual_score,
                    k_factor,
                    team_size=len(own),
                    params=self.params,
                )

            events.append(
                PlayerRatingEvent(
                    name=state.name,
                    team=team,
                    won=won,
                    actual_score=actual_score,
                    expected_score=calculate_expected_score(
                        state.rating,
                        opponent_rating,
                        self.params.scale_factor,
                    ),
                    opponent_rating=opponent_rating,
                    pre_rating=state.rating,
                    rating_delta=post_rating - state.rating,
                    post_rating=post_rating,
                    k_factor=k_factor,
                )
            )
        return tuple(events)


__all__ = [
    "MatchRatingCalculator",
    "MatchRatingOutcome",
    "PlayerRatingEvent",
    "RatingVariant",
    "select_variant",
]
