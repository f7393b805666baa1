"""Domain exceptions for match validation, replay, and the ledger."""

from __future__ import annotations


class InvalidMatchInput(ValueError):
    """A submitted match is malformed and must not reach the rating engine."""


class MissingPlayerInReplay(LookupError):
    """A match references a player that has no rating state."""

    def __init__(self, name: str, *, match_id: int | None = None) -> None:
        self.name = name
        self.match_id = match_id
        location = "" if match_id is None else f" in match_id={match_id}"
        super().__init__(f"player {name!r}{location} is not on the roster")


class OrganizationNotFound(LookupError):
    """No organization exists with the requested id."""


class MatchNotFound(LookupError):
    """No match exists with the requested id inside the organization."""


class PlayerNotFound(LookupError):
    """No player with the requested name exists inside the organization."""


__all__ = [
    "InvalidMatchInput",
    "MatchNotFound",
    "MissingPlayerInReplay",
    "OrganizationNotFound",
    "PlayerNotFound",
]
