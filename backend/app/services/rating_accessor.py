"""
Per-category rating lookup and write-back.

Unset ratings read as the default rating. Unknown categories read as the
default and are a no-op on write.
"""
from typing import TYPE_CHECKING, Dict, Optional

from app.models.event import EventCategory, normalize_event_type
from app.models.player import Player
from app.services.rating_rules import DEFAULT_RATING

if TYPE_CHECKING:
    from app.services.storage import RatingStore

RATING_FIELD_BY_CATEGORY: Dict[EventCategory, str] = {
    EventCategory.singles: "singles_rating",
    EventCategory.mens_doubles: "mens_doubles_rating",
    EventCategory.womens_doubles: "womens_doubles_rating",
    EventCategory.mixed_doubles: "mixed_doubles_rating",
}


def rating_field(event_type: str) -> Optional[str]:
    """Player attribute holding the rating for event_type, or None if unknown."""
    category = normalize_event_type(event_type)
    if category is None:
        return None
    return RATING_FIELD_BY_CATEGORY[category]


def rating_for(player: Player, event_type: str, default: int = DEFAULT_RATING) -> int:
    field = rating_field(event_type)
    if field is None:
        return default
    value = getattr(player, field, None)
    return default if value is None else int(value)


def set_rating(store: "RatingStore", player_id: int, event_type: str, new_rating: int) -> None:
    field = rating_field(event_type)
    if field is None:
        return
    store.update_player(player_id, {field: new_rating})
