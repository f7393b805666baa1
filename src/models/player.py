"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from domain.common import PlayerState
from models.base import Base


class Player(Base):
    """Current rating and win/loss counters for one player in one organization."""

    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("organization_id", "name_key", name="uq_players_organization_name_key"),
        CheckConstraint("matches_played >= 0", name="ck_players_matches_played"),
        CheckConstraint("wins >= 0", name="ck_players_wins"),
        CheckConstraint("losses >= 0", name="ck_players_losses"),
        CheckConstraint("matches_played = wins + losses", name="ck_players_counters"),
        Index("idx_players_organization_rating", "organization_id", "rating"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organizations.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # name_key(name), computed in Python.
    name_key: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1200)
    matches_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    def to_state(self) -> PlayerState:
        return PlayerState(
            name=self.name,
            rating=self.rating,
            matches_played=self.matches_played,
            wins=self.wins,
            losses=self.losses,
            player_id=self.id,
        )

    def apply_state(self, state: PlayerState) -> None:
        self.rating = state.rating
        self.matches_played = state.matches_played
        self.wins = state.wins
        self.losses = state.losses
