from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.player import Player


class RatingHistory(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    event_type: str
    old_rating: int
    new_rating: int
    rating_change: int  # new_rating - old_rating
    match_id: int = Field(foreign_key="match.id", index=True)
    opponent_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    result: str  # "win" | "loss"
    expected_outcome: str  # "win" | "loss" | "even"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    player: "Player" = Relationship(back_populates="rating_histories")
