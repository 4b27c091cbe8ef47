"""
Doubles Partnership Builder

Two formats:

1. Same-gender doubles (men's / women's): partnerships are fixed for the whole
   session by a snake draft (strongest with weakest), then the partnerships
   rotate against each other with the same circle method and bye formula as
   singles.

2. Mixed doubles ("mixer"): partnerships are rebuilt every round from seeded
   shuffles of the male and female pools, avoiding repeat partners, then
   matched against partnerships they have not faced yet.

Partner and opponent matching are greedy and non-backtracking. When no novel
option remains the first available one is taken, so a repeat can survive
even where an exhaustive search would have avoided it.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from app.models.event import EventCategory
from app.models.match import Match
from app.models.player import Gender
from app.services.draw_entries import (
    Partnership,
    RatedPlayer,
    new_scheduled_match,
    sort_by_combined_rating,
    sort_by_rating,
)
from app.services.draw_rules import MIN_DOUBLES_PLAYERS, MIXER_FEMALE_SEED_OFFSET, round_robin_round
from app.utils.pairing_history import PairingHistory
from app.utils.seeded_random import seeded_shuffle

logger = logging.getLogger(__name__)


# ============================================================================
# Same-gender doubles: fixed snake-draft partnerships
# ============================================================================


def snake_draft_partnerships(players: Sequence[RatedPlayer]) -> List[Partnership]:
    """
    Pair position i with position n-1-i of the rating-sorted pool.

    With an odd pool the middle player is left without a partner.
    """
    ordered = sort_by_rating(players)
    n = len(ordered)
    if n % 2 == 1:
        logger.info("Snake draft: odd pool of %d, player %s left unpartnered", n, ordered[n // 2].id)
    return [Partnership((ordered[i], ordered[n - 1 - i])) for i in range(n // 2)]


def generate_fixed_partnership_matches(
    session_id: Optional[int],
    event_type: str,
    players: Sequence[RatedPlayer],
    number_of_rounds: int,
) -> List[Match]:
    """Men's / women's doubles: fixed partnerships rotated round robin, byes for odd counts."""
    if len(players) < MIN_DOUBLES_PLAYERS:
        return []

    partnerships = sort_by_combined_rating(snake_draft_partnerships(players))
    matches: List[Match] = []
    for round_number in range(1, number_of_rounds + 1):
        pairs, bye = round_robin_round(partnerships, round_number)
        if bye is not None:
            logger.debug("%s round %d: partnership %s has a bye", event_type, round_number, bye.ids)
        for side_a, side_b in pairs:
            matches.append(new_scheduled_match(session_id, event_type, round_number, side_a.ids, side_b.ids))
    return matches


# ============================================================================
# Mixed doubles: per-round mixer partnerships
# ============================================================================


def build_mixer_partnerships(
    males: Sequence[RatedPlayer],
    females: Sequence[RatedPlayer],
    round_number: int,
    history: PairingHistory,
) -> List[Partnership]:
    """
    Build this round's male/female partnerships.

    Each pool is shuffled with a seed derived from the round number (the female
    pool with an offset). Every male, in shuffled order, takes the first unused
    female not yet partnered with that male, or the first unused female if all
    remaining ones are repeats. Surplus players of either gender stay unpaired.
    """
    shuffled_males = seeded_shuffle(males, round_number)
    shuffled_females = seeded_shuffle(females, round_number + MIXER_FEMALE_SEED_OFFSET)

    used_female_ids = set()
    partnerships: List[Partnership] = []
    for male in shuffled_males:
        available = [f for f in shuffled_females if f.id not in used_female_ids]
        if not available:
            break
        partner = next((f for f in available if not history.has_partnered(male.id, f.id)), available[0])
        used_female_ids.add(partner.id)
        partnerships.append(Partnership((male, partner)))
    return partnerships


def match_partnerships(
    partnerships: Sequence[Partnership],
    history: PairingHistory,
) -> List[Tuple[Partnership, Partnership]]:
    """
    Greedy opponent matching within one round.

    Walk partnerships by combined rating (descending). Each unused partnership
    takes the first later unused partnership none of whose players it has
    faced, falling back to the first later unused partnership. An odd one out
    gets no match this round.
    """
    ordered = sort_by_combined_rating(partnerships)
    used = [False] * len(ordered)
    pairs: List[Tuple[Partnership, Partnership]] = []

    for i, side_a in enumerate(ordered):
        if used[i]:
            continue
        fallback: Optional[int] = None
        chosen: Optional[int] = None
        for j in range(i + 1, len(ordered)):
            if used[j]:
                continue
            if fallback is None:
                fallback = j
            if not history.teams_have_faced(side_a.ids, ordered[j].ids):
                chosen = j
                break
        if chosen is None:
            chosen = fallback
        if chosen is None:
            continue
        used[i] = used[chosen] = True
        pairs.append((side_a, ordered[chosen]))
    return pairs


def generate_mixed_doubles_matches(
    session_id: Optional[int],
    players: Sequence[RatedPlayer],
    number_of_rounds: int,
    history: Optional[PairingHistory] = None,
    event_type: str = EventCategory.mixed_doubles.value,
) -> List[Match]:
    """
    Mixer-format mixed doubles for rounds 1..number_of_rounds.

    Each round's matches are recorded in history before the next round is
    built. Returns an empty list unless at least two male/female partnerships
    can be formed.
    """
    ordered = sort_by_rating(players)
    males = [p for p in ordered if p.gender == Gender.male]
    females = [p for p in ordered if p.gender == Gender.female]
    if len(ordered) < MIN_DOUBLES_PLAYERS or min(len(males), len(females)) < 2:
        return []

    if history is None:
        history = PairingHistory()

    matches: List[Match] = []
    for round_number in range(1, number_of_rounds + 1):
        partnerships = build_mixer_partnerships(males, females, round_number, history)
        round_pairs = match_partnerships(partnerships, history)
        for side_a, side_b in round_pairs:
            matches.append(new_scheduled_match(session_id, event_type, round_number, side_a.ids, side_b.ids))
        for side_a, side_b in round_pairs:
            history.record_match(side_a.ids, side_b.ids)
    return matches
