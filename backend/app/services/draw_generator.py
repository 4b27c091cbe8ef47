"""
Draw Generator - Session Draw Orchestration

Turns a session's registrations into the full list of scheduled matches:
1. Group registrants by normalized event category (first-seen order)
2. Generate each category's rounds (singles / fixed doubles / mixer doubles)
3. Assign courts per round across all categories

Pure: no persistence. Returned matches have no ids; the caller persists them
(and removes the session's previous matches in the same transaction).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from app.models.event import EventCategory, normalize_event_type
from app.models.match import Match
from app.models.player import Player
from app.services.court_assignment import assign_courts
from app.services.doubles_builder import generate_fixed_partnership_matches, generate_mixed_doubles_matches
from app.services.draw_entries import RatedPlayer
from app.services.rating_accessor import rating_for
from app.services.rating_rules import DEFAULT_CONFIG, RatingConfig
from app.services.singles_scheduler import generate_singles_matches
from app.utils.pairing_history import PairingHistory

logger = logging.getLogger(__name__)


# ============================================================================
# Inputs / Result
# ============================================================================


@dataclass(frozen=True)
class SessionDescriptor:
    number_of_rounds: int
    courts_available: int
    session_id: Optional[int] = None


@dataclass(frozen=True)
class RegistrationEntry:
    player_id: int
    selected_events: Sequence[str]


@dataclass
class DrawWarning:
    code: str
    message: str
    event_type: Optional[str] = None

    def to_dict(self):
        return {"code": self.code, "message": self.message, "event_type": self.event_type}


@dataclass
class DrawResult:
    matches: List[Match] = field(default_factory=list)
    matches_by_event: Dict[str, int] = field(default_factory=dict)
    warnings: List[DrawWarning] = field(default_factory=list)


# ============================================================================
# Grouping
# ============================================================================


def group_by_category(
    registrations: Iterable[RegistrationEntry],
    warnings: Optional[List[DrawWarning]] = None,
) -> Dict[EventCategory, List[int]]:
    """
    Player ids per category, in registration order. A player listed twice for
    one category (e.g. "Singles" and "singles") appears once.
    """
    groups: Dict[EventCategory, List[int]] = {}
    for registration in registrations:
        for label in registration.selected_events:
            category = normalize_event_type(label)
            if category is None:
                logger.warning("Skipping unknown event category %r for player %s", label, registration.player_id)
                if warnings is not None:
                    warnings.append(
                        DrawWarning(code="UNKNOWN_EVENT_TYPE", message=f"Unknown event category: {label}", event_type=label)
                    )
                continue
            player_ids = groups.setdefault(category, [])
            if registration.player_id not in player_ids:
                player_ids.append(registration.player_id)
    return groups


def _rated_players(
    category: EventCategory,
    player_ids: Sequence[int],
    player_map: Mapping[int, Player],
    default_rating: int,
) -> List[RatedPlayer]:
    rated = []
    for player_id in player_ids:
        player = player_map.get(player_id)
        if player is None:
            raise ValueError(f"Player {player_id} is registered but was not found")
        rating = rating_for(player, category.value, default_rating)
        rated.append(RatedPlayer(id=player_id, rating=rating, gender=player.gender))
    return rated


# ============================================================================
# Per-category generation
# ============================================================================


def generate_event_matches(
    session: SessionDescriptor,
    category: EventCategory,
    players: Sequence[RatedPlayer],
    history: Optional[PairingHistory] = None,
) -> List[Match]:
    """Dispatch one category to its scheduler. Courts are not assigned here."""
    if not category.is_doubles:
        return generate_singles_matches(session.session_id, players, session.number_of_rounds)
    if category is EventCategory.mixed_doubles:
        return generate_mixed_doubles_matches(session.session_id, players, session.number_of_rounds, history=history)
    return generate_fixed_partnership_matches(session.session_id, category.value, players, session.number_of_rounds)


def generate_draws(
    session: SessionDescriptor,
    registrations: Iterable[RegistrationEntry],
    player_map: Mapping[int, Player],
    config: RatingConfig = DEFAULT_CONFIG,
) -> DrawResult:
    """
    Generate all matches for a session.

    Categories without enough players produce no matches and a warning; that
    is not an error. Raises ValueError for invalid session settings or a
    registration referencing an unknown player. Unset ratings seed the draw
    at config.default_rating.
    """
    if session.number_of_rounds < 1:
        raise ValueError(f"number_of_rounds must be >= 1, got {session.number_of_rounds}")
    if session.courts_available < 1:
        raise ValueError(f"courts_available must be >= 1, got {session.courts_available}")

    result = DrawResult()
    groups = group_by_category(registrations, result.warnings)

    for category, player_ids in groups.items():
        players = _rated_players(category, player_ids, player_map, config.default_rating)
        event_matches = generate_event_matches(session, category, players)
        result.matches.extend(event_matches)
        result.matches_by_event[category.value] = len(event_matches)

        if not event_matches:
            logger.warning("No matches generated for %s (%d players)", category.value, len(players))
            result.warnings.append(
                DrawWarning(
                    code="INSUFFICIENT_PLAYERS",
                    message=f"Not enough eligible players for {category.value} ({len(players)} registered)",
                    event_type=category.value,
                )
            )
        else:
            logger.info(
                "Generated %d matches for %s (%d players, %d rounds)",
                len(event_matches),
                category.value,
                len(players),
                session.number_of_rounds,
            )

    assign_courts(result.matches, session.courts_available)
    return result
