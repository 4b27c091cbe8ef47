from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional, Tuple

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.play_session import PlaySession

MATCH_SCHEDULED = "scheduled"
MATCH_IN_PROGRESS = "in-progress"
MATCH_COMPLETED = "completed"

MATCH_STATUSES = (MATCH_SCHEDULED, MATCH_IN_PROGRESS, MATCH_COMPLETED)


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="playsession.id", index=True)
    event_type: str = Field(default="singles")  # EventCategory value
    round_number: int
    court_number: int = Field(default=0)  # 0 until courts are assigned

    # Teams: player 2 is null for singles
    team1_player1_id: int = Field(foreign_key="player.id")
    team1_player2_id: Optional[int] = Field(default=None, foreign_key="player.id")
    team2_player1_id: int = Field(foreign_key="player.id")
    team2_player2_id: Optional[int] = Field(default=None, foreign_key="player.id")

    # Per-set scores (null until entered)
    team1_set1: Optional[int] = Field(default=None)
    team1_set2: Optional[int] = Field(default=None)
    team1_set3: Optional[int] = Field(default=None)
    team2_set1: Optional[int] = Field(default=None)
    team2_set2: Optional[int] = Field(default=None)
    team2_set3: Optional[int] = Field(default=None)

    status: str = Field(default=MATCH_SCHEDULED)  # "scheduled" | "in-progress" | "completed"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    play_session: "PlaySession" = Relationship(back_populates="matches")

    @property
    def team1_ids(self) -> List[int]:
        return [pid for pid in (self.team1_player1_id, self.team1_player2_id) if pid is not None]

    @property
    def team2_ids(self) -> List[int]:
        return [pid for pid in (self.team2_player1_id, self.team2_player2_id) if pid is not None]

    @property
    def set_scores(self) -> List[Tuple[Optional[int], Optional[int]]]:
        """(team1, team2) score pair per set index, unset sets included."""
        return [
            (self.team1_set1, self.team2_set1),
            (self.team1_set2, self.team2_set2),
            (self.team1_set3, self.team2_set3),
        ]
