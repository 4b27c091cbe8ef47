import re
from enum import Enum
from typing import Optional


class EventCategory(str, Enum):
    singles = "singles"
    mens_doubles = "mens_doubles"
    womens_doubles = "womens_doubles"
    mixed_doubles = "mixed_doubles"

    @property
    def is_doubles(self) -> bool:
        return self is not EventCategory.singles


# Keys are labels with case, whitespace and punctuation removed
_CATEGORY_BY_KEY = {
    "singles": EventCategory.singles,
    "mensdoubles": EventCategory.mens_doubles,
    "womensdoubles": EventCategory.womens_doubles,
    "mixeddoubles": EventCategory.mixed_doubles,
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_event_type(label: Optional[str]) -> Optional[EventCategory]:
    """
    Map an event label to its canonical category.

    "Men's Doubles", "mens_doubles" and "MENS-DOUBLES" all resolve to
    EventCategory.mens_doubles. Returns None for unknown labels.
    """
    if label is None:
        return None
    if isinstance(label, EventCategory):
        return label
    key = _NON_ALNUM.sub("", str(label).lower())
    return _CATEGORY_BY_KEY.get(key)
