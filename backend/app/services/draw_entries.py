"""
Entries the draw generator works with: rated players and partnerships,
plus the constructor for an unpersisted scheduled Match.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from app.models.match import MATCH_SCHEDULED, Match


@dataclass(frozen=True)
class RatedPlayer:
    id: int
    rating: int
    gender: str


@dataclass(frozen=True)
class Partnership:
    players: Tuple[RatedPlayer, RatedPlayer]

    @property
    def ids(self) -> Tuple[int, int]:
        return (self.players[0].id, self.players[1].id)

    @property
    def combined_rating(self) -> int:
        return self.players[0].rating + self.players[1].rating


def sort_by_rating(players: Sequence[RatedPlayer]) -> List[RatedPlayer]:
    """Descending rating; ties keep their input order."""
    return sorted(players, key=lambda p: -p.rating)


def sort_by_combined_rating(partnerships: Sequence[Partnership]) -> List[Partnership]:
    return sorted(partnerships, key=lambda p: -p.combined_rating)


def new_scheduled_match(
    session_id: Optional[int],
    event_type: str,
    round_number: int,
    team1: Sequence[int],
    team2: Sequence[int],
) -> Match:
    """Unpersisted Match with null scores; court_number is filled in by court assignment."""
    if len(team1) != len(team2) or len(team1) not in (1, 2):
        raise ValueError(f"Teams must both have 1 or 2 players, got {len(team1)} and {len(team2)}")
    return Match(
        session_id=session_id,
        event_type=event_type,
        round_number=round_number,
        court_number=0,
        team1_player1_id=team1[0],
        team1_player2_id=team1[1] if len(team1) > 1 else None,
        team2_player1_id=team2[0],
        team2_player2_id=team2[1] if len(team2) > 1 else None,
        status=MATCH_SCHEDULED,
    )
