"""
Singles Scheduler

Bye-rotated round robin over one flat pool. Players are sorted once by
rating (descending) so the draw is deterministic; ratings do not otherwise
constrain pairing.
"""
import logging
from typing import List, Optional, Sequence

from app.models.event import EventCategory
from app.models.match import Match
from app.services.draw_entries import RatedPlayer, new_scheduled_match, sort_by_rating
from app.services.draw_rules import MIN_SINGLES_PLAYERS, round_robin_round

logger = logging.getLogger(__name__)


def generate_singles_matches(
    session_id: Optional[int],
    players: Sequence[RatedPlayer],
    number_of_rounds: int,
    event_type: str = EventCategory.singles.value,
) -> List[Match]:
    """
    Generate singles matches for rounds 1..number_of_rounds.

    Odd pools: player at index (round - 1) mod n sits out. The remaining even
    pool is paired with the circle method. Beyond n-1 rounds pairings repeat.

    Returns an empty list when fewer than two players are registered.
    """
    ordered = sort_by_rating(players)
    if len(ordered) < MIN_SINGLES_PLAYERS:
        return []

    matches: List[Match] = []
    for round_number in range(1, number_of_rounds + 1):
        pairs, bye = round_robin_round(ordered, round_number)
        if bye is not None:
            logger.debug("Singles round %d: player %s has a bye", round_number, bye.id)
        for player_a, player_b in pairs:
            matches.append(new_scheduled_match(session_id, event_type, round_number, [player_a.id], [player_b.id]))
    return matches
