"""
Partner / opponent history for one draw generation.

Each player maps to the set of player ids they have already partnered with
and already played against. The tracker is built incrementally round by
round and owned by the caller, so every draw starts from a clean slate.
"""
from collections import defaultdict
from typing import Dict, Hashable, Iterable, Set


class PairingHistory:
    def __init__(self):
        self.partners: Dict[Hashable, Set[Hashable]] = defaultdict(set)
        self.opponents: Dict[Hashable, Set[Hashable]] = defaultdict(set)

    def has_partnered(self, player_a: Hashable, player_b: Hashable) -> bool:
        return player_b in self.partners.get(player_a, ())

    def has_faced(self, player_a: Hashable, player_b: Hashable) -> bool:
        return player_b in self.opponents.get(player_a, ())

    def teams_have_faced(self, team_a: Iterable[Hashable], team_b: Iterable[Hashable]) -> bool:
        """True if any player on team_a has already played any player on team_b."""
        team_b = list(team_b)
        return any(self.has_faced(a, b) for a in team_a for b in team_b)

    def record_partnership(self, team: Iterable[Hashable]) -> None:
        members = list(team)
        for player in members:
            for partner in members:
                if partner != player:
                    self.partners[player].add(partner)

    def record_match(self, team_a: Iterable[Hashable], team_b: Iterable[Hashable]) -> None:
        """Record both partnerships and every cross-team opponent pairing."""
        team_a = list(team_a)
        team_b = list(team_b)
        self.record_partnership(team_a)
        self.record_partnership(team_b)
        for a in team_a:
            for b in team_b:
                self.opponents[a].add(b)
                self.opponents[b].add(a)
