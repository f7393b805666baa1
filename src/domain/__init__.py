"""Rating and match-ledger domain modules."""

from domain.common import MatchInput, MatchRecord, PlayerState
from domain.errors import (
    InvalidMatchInput,
    MatchNotFound,
    MissingPlayerInReplay,
    OrganizationNotFound,
    PlayerNotFound,
)

__all__ = [
    "InvalidMatchInput",
    "MatchInput",
    "MatchNotFound",
    "MatchRecord",
    "MissingPlayerInReplay",
    "OrganizationNotFound",
    "PlayerNotFound",
    "PlayerState",
]
