"""
Singles scheduling: bye rotation + circle-method round robin.
"""
from collections import Counter, defaultdict

from app.models.match import MATCH_SCHEDULED
from app.services.draw_entries import RatedPlayer
from app.services.singles_scheduler import generate_singles_matches


def _players(ratings):
    return [RatedPlayer(id=i, rating=r, gender="Male") for i, r in enumerate(ratings)]


def _round_pairs(matches, round_number):
    return [
        (m.team1_player1_id, m.team2_player1_id) for m in matches if m.round_number == round_number
    ]


def test_four_players_round_one_pairs_top_with_bottom():
    """Players rated [2000, 1800, 1600, 1400] = p0..p3: round 1 is p0-p3, p1-p2."""
    matches = generate_singles_matches(1, _players([2000, 1800, 1600, 1400]), 2)

    assert _round_pairs(matches, 1) == [(0, 3), (1, 2)]
    round_2 = {frozenset(p) for p in _round_pairs(matches, 2)}
    assert round_2 != {frozenset((0, 3)), frozenset((1, 2))}


def test_players_are_sorted_by_rating_before_pairing():
    shuffled = [
        RatedPlayer(id=2, rating=1600, gender="Male"),
        RatedPlayer(id=0, rating=2000, gender="Male"),
        RatedPlayer(id=3, rating=1400, gender="Male"),
        RatedPlayer(id=1, rating=1800, gender="Male"),
    ]
    matches = generate_singles_matches(1, shuffled, 1)
    assert _round_pairs(matches, 1) == [(0, 3), (1, 2)]


def test_generated_matches_are_unscored_and_scheduled():
    matches = generate_singles_matches(9, _players([1500, 1500]), 1)
    assert len(matches) == 1
    match = matches[0]
    assert match.session_id == 9
    assert match.event_type == "singles"
    assert match.status == MATCH_SCHEDULED
    assert match.round_number == 1
    assert match.team1_player2_id is None
    assert match.team2_player2_id is None
    assert all(score is None for pair in match.set_scores for score in pair)
    assert match.id is None


def test_even_pool_each_player_once_per_round_and_no_rematches():
    n = 8
    matches = generate_singles_matches(1, _players([2000 - 50 * i for i in range(n)]), n - 1)

    assert len(matches) == (n // 2) * (n - 1)
    seen = set()
    for round_number in range(1, n):
        pairs = _round_pairs(matches, round_number)
        players = [p for pair in pairs for p in pair]
        assert sorted(players) == list(range(n))
        for pair in pairs:
            assert frozenset(pair) not in seen
            seen.add(frozenset(pair))


def test_odd_pool_every_player_sits_out_exactly_once():
    n = 5
    players = _players([1900, 1800, 1700, 1600, 1500])
    matches = generate_singles_matches(1, players, n)

    byes = {}
    for round_number in range(1, n + 1):
        playing = {p for pair in _round_pairs(matches, round_number) for p in pair}
        sitting = set(range(n)) - playing
        assert len(sitting) == 1
        byes[round_number] = sitting.pop()

    # Sorted order equals id order here, so round r sits out id (r - 1) mod n
    assert byes == {r: (r - 1) % n for r in range(1, n + 1)}
    assert Counter(byes.values()) == Counter(range(n))


def test_more_rounds_than_unique_pairings_is_allowed():
    matches = generate_singles_matches(1, _players([1500, 1500, 1500, 1500]), 5)
    assert len(matches) == 10
    by_pair = defaultdict(int)
    for m in matches:
        by_pair[frozenset((m.team1_player1_id, m.team2_player1_id))] += 1
    # Only 6 distinct pairings exist among 4 players
    assert len(by_pair) == 6


def test_too_few_players_yields_no_matches():
    assert generate_singles_matches(1, [], 3) == []
    assert generate_singles_matches(1, _players([1500]), 3) == []
