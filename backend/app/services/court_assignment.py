"""
Court assignment: round-robin distribution of each round's matches over the
available courts. Courts are reused every round; no court affinity is kept.
"""
from collections import defaultdict
from typing import Dict, List, Sequence

from app.models.match import Match


def court_for_index(index: int, courts_available: int) -> int:
    """1-based court for the 0-based index of a match within its round."""
    return (index % courts_available) + 1


def assign_courts(matches: Sequence[Match], courts_available: int) -> None:
    """
    Set court_number in place. Within each round, the i-th match in
    generation order gets court (i mod courts_available) + 1.
    """
    if courts_available < 1:
        raise ValueError(f"courts_available must be >= 1, got {courts_available}")

    rounds: Dict[int, List[Match]] = defaultdict(list)
    for match in matches:
        rounds[match.round_number].append(match)

    for round_matches in rounds.values():
        for index, match in enumerate(round_matches):
            match.court_number = court_for_index(index, courts_available)
