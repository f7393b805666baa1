"""matches table model."""

from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from domain.common import MatchRecord
from models.base import Base, JSONType


class Match(Base):
    """One completed match and the rating change it applied to each participant."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("team1_score >= 0 AND team2_score >= 0", name="ck_matches_scores"),
        CheckConstraint("team1_score <> team2_score", name="ck_matches_no_draw"),
        CheckConstraint("winner IN ('team1', 'team2')", name="ck_matches_winner"),
        CheckConstraint("variant IN ('balanced', 'unbalanced')", name="ck_matches_variant"),
        Index("idx_matches_organization_played", "organization_id", "date", "time", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organizations.id"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    team1: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    team2: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    winner: Mapped[str] = mapped_column(String(8), nullable=False)
    variant: Mapped[str] = mapped_column(String(16), nullable=False)
    rating_changes: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    def to_record(self) -> MatchRecord:
        return MatchRecord(
            match_id=self.id,
            date=self.date,
            time=self.time,
            team1=tuple(self.team1),
            team2=tuple(self.team2),
            team1_score=self.team1_score,
            team2_score=self.team2_score,
            winner=self.winner,
            variant=self.variant,
            rating_changes={name: int(delta) for name, delta in self.rating_changes.items()},
        )
