from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.match import Match
    from app.models.registration import Registration


class PlaySession(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    session_date: Optional[date] = None
    courts_available: int
    number_of_rounds: int
    status: str = Field(default="upcoming")  # "upcoming" | "active" | "completed"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    registrations: List["Registration"] = Relationship(back_populates="play_session")
    matches: List["Match"] = Relationship(back_populates="play_session")
