"""
Play sessions: registrations and draw generation.

POST /sessions/{id}/draws regenerates the whole draw: previous matches are
deleted and the new ones inserted in one commit.
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session, select

from app.database import get_session
from app.models.event import normalize_event_type
from app.models.match import MATCH_SCHEDULED
from app.models.play_session import PlaySession
from app.models.player import Player
from app.models.registration import Registration
from app.routes.matches import MatchResponse
from app.services.draw_generator import RegistrationEntry, SessionDescriptor, generate_draws
from app.services.rating_rules import RATING_CONFIG
from app.services.storage import SqlRatingStore

logger = logging.getLogger(__name__)

router = APIRouter()


class PlaySessionCreate(BaseModel):
    name: str
    session_date: Optional[date] = None
    courts_available: int
    number_of_rounds: int
    status: str = "upcoming"

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("courts_available")
    @classmethod
    def validate_courts(cls, v):
        if v < 1:
            raise ValueError("courts_available must be >= 1")
        return v

    @field_validator("number_of_rounds")
    @classmethod
    def validate_rounds(cls, v):
        if v < 1:
            raise ValueError("number_of_rounds must be >= 1")
        return v


class PlaySessionResponse(BaseModel):
    id: int
    name: str
    session_date: Optional[date] = None
    courts_available: int
    number_of_rounds: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class RegistrationCreate(BaseModel):
    player_id: int
    selected_events: List[str]

    @field_validator("selected_events")
    @classmethod
    def validate_events(cls, v):
        if not v:
            raise ValueError("selected_events cannot be empty")
        unknown = [label for label in v if normalize_event_type(label) is None]
        if unknown:
            raise ValueError(f"unknown event categories: {', '.join(unknown)}")
        return v


class RegistrationResponse(BaseModel):
    id: int
    session_id: int
    player_id: int
    selected_events: List[str]
    created_at: datetime

    class Config:
        from_attributes = True


class DrawWarningResponse(BaseModel):
    code: str
    message: str
    event_type: Optional[str] = None


class DrawGenerationResponse(BaseModel):
    session_id: int
    matches_generated: int
    matches_by_event: Dict[str, int]
    warnings: List[DrawWarningResponse]
    matches: List[MatchResponse]


def _get_play_session_or_404(session: Session, session_id: int) -> PlaySession:
    play_session = SqlRatingStore(session).get_play_session(session_id)
    if not play_session:
        raise HTTPException(status_code=404, detail="Session not found")
    return play_session


@router.post("/sessions", response_model=PlaySessionResponse, status_code=201)
def create_play_session(session_data: PlaySessionCreate, session: Session = Depends(get_session)):
    """Create a new play session"""
    play_session = PlaySession(**session_data.model_dump())
    session.add(play_session)
    session.commit()
    session.refresh(play_session)

    return play_session


@router.get("/sessions", response_model=List[PlaySessionResponse])
def list_play_sessions(session: Session = Depends(get_session)):
    """Get all play sessions, newest first"""
    return session.exec(select(PlaySession).order_by(PlaySession.id.desc())).all()


@router.get("/sessions/{session_id}", response_model=PlaySessionResponse)
def get_play_session(session_id: int, session: Session = Depends(get_session)):
    """Get a play session"""
    return _get_play_session_or_404(session, session_id)


@router.post("/sessions/{session_id}/registrations", response_model=RegistrationResponse, status_code=201)
def register_player(session_id: int, registration_data: RegistrationCreate, session: Session = Depends(get_session)):
    """Register a player for one or more event categories of a session"""
    _get_play_session_or_404(session, session_id)

    if not session.get(Player, registration_data.player_id):
        raise HTTPException(status_code=404, detail="Player not found")

    existing = session.exec(
        select(Registration).where(
            Registration.session_id == session_id, Registration.player_id == registration_data.player_id
        )
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Player is already registered for this session")

    registration = Registration(session_id=session_id, **registration_data.model_dump())
    session.add(registration)
    session.commit()
    session.refresh(registration)

    return registration


@router.get("/sessions/{session_id}/registrations", response_model=List[RegistrationResponse])
def list_registrations(session_id: int, session: Session = Depends(get_session)):
    """Get all registrations for a session"""
    _get_play_session_or_404(session, session_id)
    return SqlRatingStore(session).list_registrations(session_id)


@router.post("/sessions/{session_id}/draws", response_model=DrawGenerationResponse)
def generate_session_draws(session_id: int, session: Session = Depends(get_session)):
    """
    Regenerate the session's draw.

    Refused once any match has left "scheduled" (results would be orphaned).
    Refused without changes when no category can produce a match.
    """
    play_session = _get_play_session_or_404(session, session_id)
    store = SqlRatingStore(session)

    started = [m for m in store.list_session_matches(session_id) if m.status != MATCH_SCHEDULED]
    if started:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot regenerate draws: {len(started)} match(es) already started or completed",
        )

    registrations = store.list_registrations(session_id)
    player_map = store.get_players(r.player_id for r in registrations)
    descriptor = SessionDescriptor(
        number_of_rounds=play_session.number_of_rounds,
        courts_available=play_session.courts_available,
        session_id=session_id,
    )

    try:
        draw = generate_draws(
            descriptor,
            [RegistrationEntry(player_id=r.player_id, selected_events=r.selected_events) for r in registrations],
            player_map,
            RATING_CONFIG,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not draw.matches:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "No matches could be generated for this session",
                "warnings": [w.to_dict() for w in draw.warnings],
            },
        )

    try:
        store.replace_session_matches(session_id, draw.matches)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Draw regeneration failed for session %s, transaction rolled back", session_id)
        raise

    return DrawGenerationResponse(
        session_id=session_id,
        matches_generated=len(draw.matches),
        matches_by_event=draw.matches_by_event,
        warnings=[DrawWarningResponse(**w.to_dict()) for w in draw.warnings],
        matches=[MatchResponse.model_validate(m) for m in store.list_session_matches(session_id)],
    )


@router.get("/sessions/{session_id}/matches", response_model=List[MatchResponse])
def list_session_matches(session_id: int, session: Session = Depends(get_session)):
    """Get all matches for a session, ordered by round then court"""
    _get_play_session_or_404(session, session_id)
    return SqlRatingStore(session).list_session_matches(session_id)
