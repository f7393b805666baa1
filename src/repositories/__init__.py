"""Database repository helpers."""

from repositories.match_repository import (
    delete_match_row,
    delete_matches_for_organization,
    fetch_match_records,
    get_match,
    insert_match,
    list_matches,
    update_rating_changes,
)
from repositories.organization_repository import create_organization, get_organization
from repositories.player_repository import (
    count_players,
    delete_players_for_organization,
    fetch_players_by_names,
    find_player,
    get_or_create_players,
    list_players,
)
from repositories.schema import ensure_ledger_schema

__all__ = [
    "count_players",
    "create_organization",
    "delete_match_row",
    "delete_matches_for_organization",
    "delete_players_for_organization",
    "ensure_ledger_schema",
    "fetch_match_records",
    "fetch_players_by_names",
    "find_player",
    "get_match",
    "get_or_create_players",
    "get_organization",
    "insert_match",
    "list_matches",
    "list_players",
    "update_rating_changes",
]
