from app.models.event import EventCategory, normalize_event_type
from app.models.match import MATCH_COMPLETED, MATCH_IN_PROGRESS, MATCH_SCHEDULED, Match
from app.models.play_session import PlaySession
from app.models.player import Gender, Player
from app.models.rating_history import RatingHistory
from app.models.registration import Registration

__all__ = [
    "EventCategory",
    "normalize_event_type",
    "Gender",
    "Player",
    "PlaySession",
    "Registration",
    "Match",
    "MATCH_SCHEDULED",
    "MATCH_IN_PROGRESS",
    "MATCH_COMPLETED",
    "RatingHistory",
]
