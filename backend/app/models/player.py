from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.rating_history import RatingHistory
    from app.models.registration import Registration


class Gender(str, Enum):
    male = "Male"
    female = "Female"


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    gender: Gender = Field(sa_column=Column(String, nullable=False))
    club: Optional[str] = None
    notes: Optional[str] = None

    # Category ratings (nullable - unset reads as the default rating)
    singles_rating: Optional[int] = Field(default=None)
    mens_doubles_rating: Optional[int] = Field(default=None)
    womens_doubles_rating: Optional[int] = Field(default=None)
    mixed_doubles_rating: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    registrations: List["Registration"] = Relationship(back_populates="player")
    rating_histories: List["RatingHistory"] = Relationship(back_populates="player")
