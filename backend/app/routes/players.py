from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session, select

from app.database import get_session
from app.models.event import normalize_event_type
from app.models.player import Gender, Player
from app.models.registration import Registration
from app.services.rating_rules import RATING_CONFIG
from app.services.storage import SqlRatingStore

router = APIRouter()


def _validate_rating(v):
    floor, ceiling = RATING_CONFIG.rating_floor, RATING_CONFIG.rating_ceiling
    if v is not None and not (floor <= v <= ceiling):
        raise ValueError(f"rating must be between {floor} and {ceiling}")
    return v


class PlayerCreate(BaseModel):
    name: str
    gender: Gender
    club: Optional[str] = None
    notes: Optional[str] = None
    singles_rating: Optional[int] = None
    mens_doubles_rating: Optional[int] = None
    womens_doubles_rating: Optional[int] = None
    mixed_doubles_rating: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("singles_rating", "mens_doubles_rating", "womens_doubles_rating", "mixed_doubles_rating")
    @classmethod
    def validate_rating(cls, v):
        return _validate_rating(v)


class PlayerUpdate(BaseModel):
    name: Optional[str] = None
    gender: Optional[Gender] = None
    club: Optional[str] = None
    notes: Optional[str] = None
    singles_rating: Optional[int] = None
    mens_doubles_rating: Optional[int] = None
    womens_doubles_rating: Optional[int] = None
    mixed_doubles_rating: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and (not v or not v.strip()):
            raise ValueError("name cannot be empty")
        return v.strip() if v else v

    @field_validator("singles_rating", "mens_doubles_rating", "womens_doubles_rating", "mixed_doubles_rating")
    @classmethod
    def validate_rating(cls, v):
        return _validate_rating(v)


class PlayerResponse(BaseModel):
    id: int
    name: str
    gender: Gender
    club: Optional[str] = None
    notes: Optional[str] = None
    singles_rating: Optional[int] = None
    mens_doubles_rating: Optional[int] = None
    womens_doubles_rating: Optional[int] = None
    mixed_doubles_rating: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RatingHistoryResponse(BaseModel):
    id: int
    player_id: int
    event_type: str
    old_rating: int
    new_rating: int
    rating_change: int
    match_id: int
    opponent_ids: List[int]
    result: str
    expected_outcome: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("/players", response_model=List[PlayerResponse])
def list_players(session: Session = Depends(get_session)):
    """Get all players"""
    return session.exec(select(Player).order_by(Player.name, Player.id)).all()


@router.get("/players/{player_id}", response_model=PlayerResponse)
def get_player(player_id: int, session: Session = Depends(get_session)):
    """Get a player"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.post("/players", response_model=PlayerResponse, status_code=201)
def create_player(player_data: PlayerCreate, session: Session = Depends(get_session)):
    """Create a new player"""
    player = Player(**player_data.model_dump())
    session.add(player)
    session.commit()
    session.refresh(player)

    return player


@router.patch("/players/{player_id}", response_model=PlayerResponse)
def update_player(player_id: int, player_data: PlayerUpdate, session: Session = Depends(get_session)):
    """Update a player"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    for field, value in player_data.model_dump(exclude_unset=True).items():
        setattr(player, field, value)

    session.add(player)
    session.commit()
    session.refresh(player)

    return player


@router.delete("/players/{player_id}", status_code=204)
def delete_player(player_id: int, session: Session = Depends(get_session)):
    """Delete a player with no session registrations"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    registered = session.exec(select(Registration).where(Registration.player_id == player_id)).first()
    if registered:
        raise HTTPException(status_code=409, detail="Player is registered for a session and cannot be deleted")

    session.delete(player)
    session.commit()

    return None


@router.get("/players/{player_id}/rating-history", response_model=List[RatingHistoryResponse])
def get_player_rating_history(
    player_id: int,
    event_type: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """Rating history for a player, oldest first. Optional event_type filter (any label spelling)."""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    category = None
    if event_type is not None:
        category = normalize_event_type(event_type)
        if category is None:
            raise HTTPException(status_code=422, detail=f"Unknown event type: {event_type}")

    store = SqlRatingStore(session)
    return store.list_player_rating_history(player_id, category.value if category else None)
