"""
Persistence collaborator for the draw generator and rating engine.

RatingStore is the read/write surface the rating engine depends on.
SqlRatingStore implements it over a SQLModel session and adds the
session/registration reads the draw generator needs.

The store never commits. Callers commit once per operation so that
"replace a session's matches" and "roll back then recompute ratings" are
each applied as one transaction.
"""
from typing import Any, Dict, Iterable, List, Optional, Protocol

from sqlmodel import Session, select

from app.models.match import Match
from app.models.play_session import PlaySession
from app.models.player import Player
from app.models.rating_history import RatingHistory
from app.models.registration import Registration


class RatingStore(Protocol):
    def get_player(self, player_id: int) -> Optional[Player]: ...

    def update_player(self, player_id: int, fields: Dict[str, Any]) -> Optional[Player]: ...

    def get_rating_histories_by_match(self, match_id: int) -> List[RatingHistory]: ...

    def delete_rating_histories_by_match(self, match_id: int) -> int: ...

    def create_rating_history(self, row: RatingHistory) -> RatingHistory: ...


class SqlRatingStore:
    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def get_player(self, player_id: int) -> Optional[Player]:
        return self.session.get(Player, player_id)

    def get_players(self, player_ids: Iterable[int]) -> Dict[int, Player]:
        ids = list(set(player_ids))
        if not ids:
            return {}
        players = self.session.exec(select(Player).where(Player.id.in_(ids))).all()
        return {p.id: p for p in players}

    def update_player(self, player_id: int, fields: Dict[str, Any]) -> Optional[Player]:
        player = self.session.get(Player, player_id)
        if player is None:
            return None
        for key, value in fields.items():
            setattr(player, key, value)
        self.session.add(player)
        self.session.flush()
        return player

    # ------------------------------------------------------------------
    # Rating history
    # ------------------------------------------------------------------

    def get_rating_histories_by_match(self, match_id: int) -> List[RatingHistory]:
        return list(
            self.session.exec(
                select(RatingHistory).where(RatingHistory.match_id == match_id).order_by(RatingHistory.id)
            ).all()
        )

    def delete_rating_histories_by_match(self, match_id: int) -> int:
        rows = self.get_rating_histories_by_match(match_id)
        for row in rows:
            self.session.delete(row)
        self.session.flush()
        return len(rows)

    def create_rating_history(self, row: RatingHistory) -> RatingHistory:
        self.session.add(row)
        self.session.flush()
        return row

    def list_player_rating_history(self, player_id: int, event_type: Optional[str] = None) -> List[RatingHistory]:
        stmt = select(RatingHistory).where(RatingHistory.player_id == player_id)
        if event_type is not None:
            stmt = stmt.where(RatingHistory.event_type == event_type)
        return list(self.session.exec(stmt.order_by(RatingHistory.created_at, RatingHistory.id)).all())

    # ------------------------------------------------------------------
    # Sessions, registrations, matches
    # ------------------------------------------------------------------

    def get_play_session(self, session_id: int) -> Optional[PlaySession]:
        return self.session.get(PlaySession, session_id)

    def list_registrations(self, session_id: int) -> List[Registration]:
        return list(
            self.session.exec(
                select(Registration).where(Registration.session_id == session_id).order_by(Registration.id)
            ).all()
        )

    def list_session_matches(self, session_id: int) -> List[Match]:
        return list(
            self.session.exec(
                select(Match)
                .where(Match.session_id == session_id)
                .order_by(Match.round_number, Match.court_number, Match.id)
            ).all()
        )

    def replace_session_matches(self, session_id: int, matches: List[Match]) -> List[Match]:
        """Delete every existing match of the session (and its rating rows), then insert matches."""
        for existing in self.list_session_matches(session_id):
            self.delete_rating_histories_by_match(existing.id)
            self.session.delete(existing)
        self.session.flush()
        for match in matches:
            self.session.add(match)
        self.session.flush()
        return matches
