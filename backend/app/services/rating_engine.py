"""
Rating Engine - ELO-style per-category rating updates for completed matches.

apply_match_rating_changes() is idempotent per match: any rating history
already recorded for the match is rolled back (ratings restored to each
row's old_rating, rows deleted) before ratings are recomputed from the
match's current scores. Editing a score and re-applying therefore converges
to the ratings implied by the current score only.

The engine does no locking. Callers must run rollback + recompute for one
match inside a single transaction and serialize concurrent edits to it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Literal, Optional, Sequence, Tuple

from app.models.match import MATCH_COMPLETED, Match
from app.models.player import Player
from app.models.rating_history import RatingHistory
from app.services.rating_accessor import rating_for, set_rating
from app.services.rating_rules import (
    DEFAULT_CONFIG,
    ExpectedOutcome,
    RatingConfig,
    classify_expectation,
    clamp_rating,
    expected_score,
    rating_delta,
)
from app.services.storage import RatingStore

logger = logging.getLogger(__name__)

MatchResult = Literal["win", "loss"]


@dataclass
class RatingUpdate:
    player_id: int
    event_type: str
    old_rating: int
    new_rating: int
    opponent_ids: List[int] = field(default_factory=list)
    result: MatchResult = "loss"
    expected_outcome: ExpectedOutcome = "even"

    @property
    def rating_change(self) -> int:
        return self.new_rating - self.old_rating

    def to_history(self, match_id: int) -> RatingHistory:
        return RatingHistory(
            player_id=self.player_id,
            event_type=self.event_type,
            old_rating=self.old_rating,
            new_rating=self.new_rating,
            rating_change=self.rating_change,
            match_id=match_id,
            opponent_ids=list(self.opponent_ids),
            result=self.result,
            expected_outcome=self.expected_outcome,
            created_at=datetime.now(timezone.utc),
        )

    def to_dict(self):
        return {
            "player_id": self.player_id,
            "event_type": self.event_type,
            "old_rating": self.old_rating,
            "new_rating": self.new_rating,
            "rating_change": self.rating_change,
            "opponent_ids": list(self.opponent_ids),
            "result": self.result,
            "expected_outcome": self.expected_outcome,
        }


# ============================================================================
# Match Helpers
# ============================================================================


def is_rateable(match: Match) -> bool:
    """Completed, with set-1 scores entered for both teams."""
    return match.status == MATCH_COMPLETED and match.team1_set1 is not None and match.team2_set1 is not None


def count_sets_won(set_scores: Sequence[Tuple[Optional[int], Optional[int]]]) -> Tuple[int, int]:
    """
    (team1_sets, team2_sets). A set goes to the strictly higher score; sets
    with either side unset are ignored and tied sets count for neither.
    """
    team1_sets = 0
    team2_sets = 0
    for team1_score, team2_score in set_scores:
        if team1_score is None or team2_score is None:
            continue
        if team1_score > team2_score:
            team1_sets += 1
        elif team2_score > team1_score:
            team2_sets += 1
    return team1_sets, team2_sets


def team1_won(match: Match) -> bool:
    """Team 1 wins only with strictly more sets; otherwise team 2 is credited."""
    team1_sets, team2_sets = count_sets_won(match.set_scores)
    return team1_sets > team2_sets


def team_rating(ratings: Sequence[int]) -> float:
    """Average of member ratings (the direct rating for singles)."""
    return sum(ratings) / len(ratings)


# ============================================================================
# Computation
# ============================================================================


def _load_team(store: RatingStore, player_ids: Sequence[int]) -> List[Player]:
    players = []
    for player_id in player_ids:
        player = store.get_player(player_id)
        if player is None:
            raise ValueError(f"Player {player_id} not found")
        players.append(player)
    return players


def _team_updates(
    players: Sequence[Player],
    ratings: Sequence[int],
    event_type: str,
    opponent_ids: List[int],
    won: bool,
    expected: float,
    config: RatingConfig,
) -> List[RatingUpdate]:
    actual = 1.0 if won else 0.0
    outcome = classify_expectation(expected, config)
    updates = []
    for player, old_rating in zip(players, ratings):
        new_rating = clamp_rating(old_rating + rating_delta(old_rating, actual, expected, config), config)
        updates.append(
            RatingUpdate(
                player_id=player.id,
                event_type=event_type,
                old_rating=old_rating,
                new_rating=new_rating,
                opponent_ids=list(opponent_ids),
                result="win" if won else "loss",
                expected_outcome=outcome,
            )
        )
    return updates


def calculate_match_rating_changes(
    store: RatingStore,
    match: Match,
    config: RatingConfig = DEFAULT_CONFIG,
) -> List[RatingUpdate]:
    """
    Rating updates implied by the match's current scores. Reads only.

    Returns [] for matches that are not completed or lack set-1 scores.
    Raises ValueError when a team's first player is missing (contract
    violation) or a referenced player does not exist.
    """
    if not is_rateable(match):
        return []
    if match.team1_player1_id is None or match.team2_player1_id is None:
        raise ValueError(f"Match {match.id} is missing a required player on one team")

    team1_ids = match.team1_ids
    team2_ids = match.team2_ids
    team1_players = _load_team(store, team1_ids)
    team2_players = _load_team(store, team2_ids)

    default = config.default_rating
    team1_ratings = [rating_for(p, match.event_type, default) for p in team1_players]
    team2_ratings = [rating_for(p, match.event_type, default) for p in team2_players]

    team1_expected = expected_score(team_rating(team1_ratings), team_rating(team2_ratings))
    team2_expected = 1 - team1_expected
    won = team1_won(match)

    return _team_updates(
        team1_players, team1_ratings, match.event_type, team2_ids, won, team1_expected, config
    ) + _team_updates(
        team2_players, team2_ratings, match.event_type, team1_ids, not won, team2_expected, config
    )


# ============================================================================
# Persistence (rollback / apply)
# ============================================================================


def rollback_match_ratings(store: RatingStore, match_id: int) -> int:
    """
    Restore every player's rating to the old_rating recorded for this match,
    then delete the match's history rows. Returns the number of rows removed.
    """
    histories = store.get_rating_histories_by_match(match_id)
    for history in histories:
        set_rating(store, history.player_id, history.event_type, history.old_rating)
    removed = store.delete_rating_histories_by_match(match_id)
    if histories:
        logger.info("Rolled back %d rating changes for match %s", len(histories), match_id)
    return removed


def apply_match_rating_changes(
    store: RatingStore,
    match: Match,
    config: RatingConfig = DEFAULT_CONFIG,
) -> List[RatingUpdate]:
    """
    Roll back any previous rating changes for the match, then apply the
    changes implied by its current scores (none if it is not rateable).
    """
    if match.id is None:
        raise ValueError("Match must be persisted before ratings are applied")

    if store.get_rating_histories_by_match(match.id):
        rollback_match_ratings(store, match.id)

    updates = calculate_match_rating_changes(store, match, config)
    for update in updates:
        set_rating(store, update.player_id, update.event_type, update.new_rating)
        store.create_rating_history(update.to_history(match.id))

    if updates:
        logger.info(
            "Applied %d rating changes for match %s (%s)",
            len(updates),
            match.id,
            ", ".join(f"{u.player_id}:{u.rating_change:+d}" for u in updates),
        )
    return updates
