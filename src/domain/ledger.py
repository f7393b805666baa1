"""Transactional match ledger: submit, delete, rebuild and reset per organization.

Every write runs in one transaction that first locks the organization row,
so writes for the same organization are applied strictly one after another.
The rating engine itself is called with plain values and never touches the
session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from enum import Enum

from sqlalchemy.orm import Session, sessionmaker

from domain.common import MatchInput, PlayerState, name_key
from domain.errors import PlayerNotFound
from domain.ratings.match_calculator import MatchRatingCalculator, RatingVariant
from domain.ratings.replay import replay_matches
from domain.stats import (
    MatchHistory,
    PlayerStatistics,
    match_history,
    player_statistics,
    rank_players,
)
from models import Match, Player
from repositories import (
    delete_match_row,
    delete_matches_for_organization,
    delete_players_for_organization,
    fetch_match_records,
    fetch_players_by_names,
    find_player,
    get_match,
    get_or_create_players,
    get_organization,
    insert_match,
    list_matches,
    list_players,
    update_rating_changes,
)

logger = logging.getLogger(__name__)


class ReversalStrategy(str, Enum):
    """How a deleted match is taken back out of player ratings."""

    SUBTRACT = "subtract"
    REPLAY = "replay"


@dataclass(frozen=True)
class SubmittedMatch:
    match_id: int
    organization_id: int
    winner: str
    variant: RatingVariant
    margin_factor: float
    rating_changes: dict[str, int]
    players: tuple[PlayerState, ...]


@dataclass(frozen=True)
class DeletedMatch:
    match_id: int
    organization_id: int
    strategy: ReversalStrategy
    players: tuple[PlayerState, ...]
    skipped_players: tuple[str, ...]


@dataclass(frozen=True)
class RebuildSummary:
    """Outcome of replaying one organization's match history."""

    organization_id: int
    processed_matches: int
    skipped_matches: int
    updated_matches: int
    tracked_players: int
    players: tuple[PlayerState, ...]
    dry_run: bool


@dataclass(frozen=True)
class ResetSummary:
    organization_id: int
    deleted_matches: int
    deleted_players: int


def _now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def submit_match(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
    match_input: MatchInput,
    calculator: MatchRatingCalculator | None = None,
    variant: RatingVariant | str | None = None,
    played_on: date | None = None,
    played_at: time | None = None,
    created_by: int | None = None,
) -> SubmittedMatch:
    """Resolve players, rate the match and persist everything atomically.

    ``match_input`` must already be validated (see ``validate_match``).
    """
    calculator = calculator or MatchRatingCalculator()
    now = _now()
    played_on = played_on or now.date()
    played_at = played_at or now.time().replace(microsecond=0)

    with session_factory() as session, session.begin():
        get_organization(session, organization_id, lock=True)
        players = get_or_create_players(
            session,
            organization_id,
            match_input.participants,
            initial_rating=calculator.params.initial_rating,
        )

        canonical = MatchInput(
            team1=tuple(players[name_key(name)].name for name in match_input.team1),
            team2=tuple(players[name_key(name)].name for name in match_input.team2),
            team1_score=match_input.team1_score,
            team2_score=match_input.team2_score,
        )
        states = {player.name: player.to_state() for player in players.values()}
        outcome = calculator.rate_match(canonical, states, variant=variant)

        for state in outcome.players.values():
            players[state.key].apply_state(state)

        match = insert_match(
            session,
            organization_id,
            canonical,
            played_on=played_on,
            played_at=played_at,
            variant=outcome.variant.value,
            rating_changes=outcome.rating_changes,
            created_by=created_by,
        )

        logger.info(
            "Recorded match_id=%s organization_id=%s winner=%s variant=%s changes=%s",
            match.id,
            organization_id,
            outcome.winner,
            outcome.variant.value,
            outcome.rating_changes,
        )
        return SubmittedMatch(
            match_id=match.id,
            organization_id=organization_id,
            winner=outcome.winner,
            variant=outcome.variant,
            margin_factor=outcome.margin_factor,
            rating_changes=outcome.rating_changes,
            players=tuple(outcome.players.values()),
        )


def _subtract_match(session: Session, match: Match) -> tuple[list[Player], list[str]]:
    record = match.to_record()
    changes = record.rating_changes or {}
    players = fetch_players_by_names(
        session,
        match.organization_id,
        record.team1 + record.team2,
        lock=True,
    )

    restored: list[Player] = []
    skipped: list[str] = []
    for name in record.team1 + record.team2:
        player = players.get(name_key(name))
        if player is None:
            logger.warning(
                "Cannot reverse match_id=%s for %r: player no longer exists",
                match.id,
                name,
            )
            skipped.append(name)
            continue

        won = record.side_of(name) == record.winner
        player.rating -= changes.get(name, 0)
        player.matches_played = max(player.matches_played - 1, 0)
        if won:
            player.wins = max(player.wins - 1, 0)
        else:
            player.losses = max(player.losses - 1, 0)
        restored.append(player)
    return restored, skipped


def delete_match(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
    match_id: int,
    strategy: ReversalStrategy | str = ReversalStrategy.SUBTRACT,
    calculator: MatchRatingCalculator | None = None,
) -> DeletedMatch:
    """Delete one match and take its effect back out of the roster.

    ``SUBTRACT`` removes the stored deltas and counters of the participants
    only. ``REPLAY`` drops the match and rebuilds the whole organization from
    the remaining history, which can shift other players by rounding.
    """
    strategy = ReversalStrategy(strategy)

    with session_factory() as session, session.begin():
        get_organization(session, organization_id, lock=True)
        match = get_match(session, organization_id, match_id)

        if strategy is ReversalStrategy.SUBTRACT:
            restored, skipped = _subtract_match(session, match)
            delete_match_row(session, match)
            states = tuple(player.to_state() for player in restored)
        else:
            delete_match_row(session, match)
            summary = _rebuild(session, organization_id, calculator or MatchRatingCalculator())
            states = summary.players
            skipped = []

        logger.info(
            "Deleted match_id=%s organization_id=%s strategy=%s",
            match_id,
            organization_id,
            strategy.value,
        )
        return DeletedMatch(
            match_id=match_id,
            organization_id=organization_id,
            strategy=strategy,
            players=states,
            skipped_players=tuple(skipped),
        )


def _rebuild(
    session: Session,
    organization_id: int,
    calculator: MatchRatingCalculator,
    *,
    dry_run: bool = False,
) -> RebuildSummary:
    players = list_players(session, organization_id, lock=True)
    matches = list_matches(session, organization_id)
    result = replay_matches(
        [match.to_record() for match in matches],
        [player.to_state() for player in players],
        calculator=calculator,
    )

    updated_matches = 0
    if not dry_run:
        for player in players:
            state = result.players.get(player.name) or player.to_state().reset(
                calculator.params.initial_rating
            )
            player.apply_state(state)
        updated_matches = update_rating_changes(
            session,
            {match.id: match for match in matches},
            result.rating_changes,
            {match_id: variant.value for match_id, variant in result.variants.items()},
        )

    return RebuildSummary(
        organization_id=organization_id,
        processed_matches=len(result.processed_match_ids),
        skipped_matches=len(result.skipped_match_ids),
        updated_matches=updated_matches,
        tracked_players=len(result.players),
        players=tuple(rank_players(result.players.values())),
        dry_run=dry_run,
    )


def rebuild_organization_ratings(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
    calculator: MatchRatingCalculator | None = None,
    dry_run: bool = False,
) -> RebuildSummary:
    """Replay an organization's history and store the rebuilt ratings."""
    calculator = calculator or MatchRatingCalculator()

    with session_factory() as session, session.begin():
        get_organization(session, organization_id, lock=True)
        summary = _rebuild(session, organization_id, calculator, dry_run=dry_run)

    logger.info(
        "Rebuilt organization_id=%s processed=%d skipped=%d updated=%d dry_run=%s",
        organization_id,
        summary.processed_matches,
        summary.skipped_matches,
        summary.updated_matches,
        dry_run,
    )
    return summary


def reset_organization(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
) -> ResetSummary:
    """Delete every match and player of one organization."""
    with session_factory() as session, session.begin():
        get_organization(session, organization_id, lock=True)
        deleted_matches = delete_matches_for_organization(session, organization_id)
        deleted_players = delete_players_for_organization(session, organization_id)

    logger.info(
        "Reset organization_id=%s deleted_matches=%d deleted_players=%d",
        organization_id,
        deleted_matches,
        deleted_players,
    )
    return ResetSummary(
        organization_id=organization_id,
        deleted_matches=deleted_matches,
        deleted_players=deleted_players,
    )


def rankings(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
) -> list[PlayerState]:
    with session_factory() as session:
        get_organization(session, organization_id)
        return rank_players(player.to_state() for player in list_players(session, organization_id))


def player_report(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
    name: str,
) -> PlayerStatistics:
    """Statistics for one player, with matches in chronological order."""
    with session_factory() as session:
        get_organization(session, organization_id)
        player = find_player(session, organization_id, name)
        if player is None:
            raise PlayerNotFound(
                f"player {name!r} does not exist in organization_id={organization_id}"
            )
        records = fetch_match_records(session, organization_id)

    records.sort(key=lambda record: (record.date, record.time))
    return player_statistics(player.to_state(), records)


def history(
    session_factory: sessionmaker[Session],
    *,
    organization_id: int,
    player: str | None = None,
) -> MatchHistory:
    """An organization's matches newest first, optionally only one player's.

    The player name is resolved case-insensitively against the roster and
    reported in its stored spelling.
    """
    with session_factory() as session:
        get_organization(session, organization_id)
        player_name = None
        if player is not None:
            row = find_player(session, organization_id, player)
            if row is None:
                raise PlayerNotFound(
                    f"player {player!r} does not exist in organization_id={organization_id}"
                )
            player_name = row.name
        records = fetch_match_records(session, organization_id)

    return match_history(records, player_name)


__all__ = [
    "DeletedMatch",
    "RebuildSummary",
    "ResetSummary",
    "ReversalStrategy",
    "SubmittedMatch",
    "delete_match",
    "history",
    "player_report",
    "rankings",
    "rebuild_organization_ratings",
    "reset_organization",
    "submit_match",
]
