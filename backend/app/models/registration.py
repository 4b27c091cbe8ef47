from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.play_session import PlaySession
    from app.models.player import Player


class Registration(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("session_id", "player_id", name="uq_session_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="playsession.id", index=True)
    player_id: int = Field(foreign_key="player.id")
    # Event category labels as entered (e.g. ["Singles", "Mixed Doubles"])
    selected_events: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    play_session: "PlaySession" = Relationship(back_populates="registrations")
    player: "Player" = Relationship(back_populates="registrations")
