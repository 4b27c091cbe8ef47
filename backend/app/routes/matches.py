"""
Match status + score entry.

Every update re-applies the rating engine for the match inside the same
commit: earlier rating changes for the match are rolled back and the
changes implied by the current score (if completed) are applied.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session

from app.database import get_session
from app.models.match import MATCH_COMPLETED, MATCH_STATUSES, Match
from app.services.rating_engine import RatingUpdate, apply_match_rating_changes
from app.services.rating_rules import RATING_CONFIG
from app.services.storage import SqlRatingStore

logger = logging.getLogger(__name__)

router = APIRouter()

SCORE_FIELDS = (
    "team1_set1",
    "team1_set2",
    "team1_set3",
    "team2_set1",
    "team2_set2",
    "team2_set3",
)


class MatchResponse(BaseModel):
    id: int
    session_id: int
    event_type: str
    round_number: int
    court_number: int
    team1_player1_id: int
    team1_player2_id: Optional[int] = None
    team2_player1_id: int
    team2_player2_id: Optional[int] = None
    team1_set1: Optional[int] = None
    team1_set2: Optional[int] = None
    team1_set3: Optional[int] = None
    team2_set1: Optional[int] = None
    team2_set2: Optional[int] = None
    team2_set3: Optional[int] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class MatchUpdate(BaseModel):
    status: Optional[str] = None
    team1_set1: Optional[int] = None
    team1_set2: Optional[int] = None
    team1_set3: Optional[int] = None
    team2_set1: Optional[int] = None
    team2_set2: Optional[int] = None
    team2_set3: Optional[int] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in MATCH_STATUSES:
            raise ValueError(f"status must be one of {', '.join(MATCH_STATUSES)}")
        return v

    @field_validator(*SCORE_FIELDS)
    @classmethod
    def validate_score(cls, v):
        if v is not None and v < 0:
            raise ValueError("set scores must be >= 0")
        return v


class RatingUpdateResponse(BaseModel):
    player_id: int
    event_type: str
    old_rating: int
    new_rating: int
    rating_change: int
    opponent_ids: List[int]
    result: str
    expected_outcome: str


class MatchUpdateResponse(BaseModel):
    match: MatchResponse
    rating_updates: List[RatingUpdateResponse] = []


def _validate_status_transition(current: str, new: str) -> None:
    """Status only moves forward; completed -> completed is allowed for score edits."""
    if MATCH_STATUSES.index(new) < MATCH_STATUSES.index(current):
        raise HTTPException(status_code=422, detail=f"Cannot move match from {current} back to {new}")


@router.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(match_id: int, session: Session = Depends(get_session)):
    """Get a match"""
    match = session.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


@router.patch("/matches/{match_id}", response_model=MatchUpdateResponse)
def update_match(match_id: int, payload: MatchUpdate, session: Session = Depends(get_session)):
    """Update match status and/or set scores, then re-apply ratings for the match."""
    match = session.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    update_data = payload.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)
    if new_status is not None:
        _validate_status_transition(match.status, new_status)
        match.status = new_status

    for field, value in update_data.items():
        setattr(match, field, value)

    if match.status == MATCH_COMPLETED and (match.team1_set1 is None or match.team2_set1 is None):
        logger.info("Match %s completed without set-1 scores; ratings not applied", match_id)

    store = SqlRatingStore(session)
    try:
        session.add(match)
        session.flush()
        updates: List[RatingUpdate] = apply_match_rating_changes(store, match, RATING_CONFIG)
        session.commit()
    except ValueError as e:
        session.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except Exception:
        session.rollback()
        logger.exception("Match update failed for match %s, transaction rolled back", match_id)
        raise

    session.refresh(match)
    return MatchUpdateResponse(
        match=MatchResponse.model_validate(match),
        rating_updates=[RatingUpdateResponse(**u.to_dict()) for u in updates],
    )
