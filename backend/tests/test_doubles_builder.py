"""
Doubles: snake-draft fixed partnerships and per-round mixer partnerships.
"""
from app.models.player import Gender
from app.services.doubles_builder import (
    build_mixer_partnerships,
    generate_fixed_partnership_matches,
    generate_mixed_doubles_matches,
    match_partnerships,
    snake_draft_partnerships,
)
from app.services.draw_entries import Partnership, RatedPlayer
from app.utils.pairing_history import PairingHistory


def _male(pid, rating=1500):
    return RatedPlayer(id=pid, rating=rating, gender=Gender.male.value)


def _female(pid, rating=1500):
    return RatedPlayer(id=pid, rating=rating, gender=Gender.female.value)


def _teams(match):
    return (frozenset(match.team1_ids), frozenset(match.team2_ids))


# ============================================================================
# Snake draft
# ============================================================================


def test_snake_draft_pairs_strongest_with_weakest():
    players = [_male(i, 2000 - 100 * i) for i in range(8)]
    partnerships = snake_draft_partnerships(list(reversed(players)))
    assert [p.ids for p in partnerships] == [(0, 7), (1, 6), (2, 5), (3, 4)]


def test_snake_draft_odd_pool_leaves_middle_player_out():
    players = [_male(i, 2000 - 100 * i) for i in range(5)]
    partnerships = snake_draft_partnerships(players)
    assert [p.ids for p in partnerships] == [(0, 4), (1, 3)]


def test_fixed_partnerships_rotate_with_byes_for_odd_partnership_count():
    # Snake: A=(1:2000, 6:1200)=3200, B=(2:1900, 5:1500)=3400, C=(3:1700, 4:1600)=3300
    players = [
        _male(1, 2000),
        _male(2, 1900),
        _male(3, 1700),
        _male(4, 1600),
        _male(5, 1500),
        _male(6, 1200),
    ]
    matches = generate_fixed_partnership_matches(1, "mens_doubles", players, 3)

    b, c, a = frozenset((2, 5)), frozenset((3, 4)), frozenset((1, 6))
    by_round = {m.round_number: _teams(m) for m in matches}
    assert len(matches) == 3
    # Sorted by combined rating: [B, C, A]; round r sits out index (r - 1) mod 3
    assert set(by_round[1]) == {c, a}
    assert set(by_round[2]) == {b, a}
    assert set(by_round[3]) == {b, c}
    assert all(m.event_type == "mens_doubles" for m in matches)


def test_fixed_partnerships_keep_partners_all_session():
    players = [_female(i, 2000 - 60 * i) for i in range(8)]
    matches = generate_fixed_partnership_matches(1, "womens_doubles", players, 3)

    allowed = {frozenset(p.ids) for p in snake_draft_partnerships(players)}
    assert len(matches) == 6
    seen_matchups = set()
    for m in matches:
        team1, team2 = _teams(m)
        assert team1 in allowed and team2 in allowed
        matchup = frozenset((team1, team2))
        assert matchup not in seen_matchups
        seen_matchups.add(matchup)


def test_fixed_partnerships_need_four_players():
    players = [_male(i) for i in range(3)]
    assert generate_fixed_partnership_matches(1, "mens_doubles", players, 3) == []


# ============================================================================
# Mixer partnerships
# ============================================================================


def test_mixer_avoids_previous_partners():
    males = [_male(1), _male(2)]
    females = [_female(11), _female(12)]
    history = PairingHistory()
    history.record_partnership([1, 11])
    history.record_partnership([2, 12])

    partnerships = build_mixer_partnerships(males, females, round_number=4, history=history)
    assert {p.ids for p in partnerships} == {(1, 12), (2, 11)}


def test_mixer_falls_back_to_repeat_partner_when_no_new_one_left():
    history = PairingHistory()
    history.record_partnership([1, 11])
    partnerships = build_mixer_partnerships([_male(1)], [_female(11)], round_number=2, history=history)
    assert [p.ids for p in partnerships] == [(1, 11)]


def test_mixer_leaves_surplus_gender_unpaired():
    males = [_male(1), _male(2), _male(3)]
    females = [_female(11), _female(12)]
    partnerships = build_mixer_partnerships(males, females, round_number=1, history=PairingHistory())
    assert len(partnerships) == 2
    assert len({p.ids[0] for p in partnerships}) == 2
    assert {p.ids[1] for p in partnerships} == {11, 12}


def test_mixer_partnerships_are_reproducible_per_round():
    males = [_male(i) for i in range(1, 7)]
    females = [_female(i) for i in range(11, 17)]
    first = build_mixer_partnerships(males, females, round_number=3, history=PairingHistory())
    second = build_mixer_partnerships(males, females, round_number=3, history=PairingHistory())
    assert [p.ids for p in first] == [p.ids for p in second]


# ============================================================================
# Opponent matching
# ============================================================================


def _partnership(male_id, male_rating, female_id, female_rating):
    return Partnership((_male(male_id, male_rating), _female(female_id, female_rating)))


def test_opponent_matching_pairs_by_combined_rating():
    p1 = _partnership(1, 1900, 11, 1900)
    p2 = _partnership(2, 1800, 12, 1800)
    p3 = _partnership(3, 1700, 13, 1700)
    p4 = _partnership(4, 1600, 14, 1600)

    pairs = match_partnerships([p4, p2, p3, p1], PairingHistory())
    assert [(a.ids, b.ids) for a, b in pairs] == [(p1.ids, p2.ids), (p3.ids, p4.ids)]


def test_opponent_matching_skips_already_faced_partnership():
    p1 = _partnership(1, 1900, 11, 1900)
    p2 = _partnership(2, 1800, 12, 1800)
    p3 = _partnership(3, 1700, 13, 1700)
    p4 = _partnership(4, 1600, 14, 1600)
    history = PairingHistory()
    # Only one player of each side met before
    history.record_match([1, 99], [12, 98])

    pairs = match_partnerships([p1, p2, p3, p4], history)
    assert [(a.ids, b.ids) for a, b in pairs] == [(p1.ids, p3.ids), (p2.ids, p4.ids)]


def test_opponent_matching_falls_back_when_everyone_has_met():
    p1 = _partnership(1, 1900, 11, 1900)
    p2 = _partnership(2, 1800, 12, 1800)
    history = PairingHistory()
    history.record_match(p1.ids, p2.ids)

    pairs = match_partnerships([p1, p2], history)
    assert [(a.ids, b.ids) for a, b in pairs] == [(p1.ids, p2.ids)]


def test_opponent_matching_leaves_odd_partnership_out():
    partnerships = [_partnership(i, 1500, 10 + i, 1500) for i in range(1, 4)]
    pairs = match_partnerships(partnerships, PairingHistory())
    assert len(pairs) == 1


# ============================================================================
# Mixed doubles rounds
# ============================================================================


def _mixed_pool():
    males = [_male(i, 1900 - 50 * i) for i in range(1, 5)]
    females = [_female(10 + i, 1850 - 50 * i) for i in range(1, 5)]
    return males + females


def test_mixed_doubles_teams_are_one_male_one_female():
    pool = _mixed_pool()
    genders = {p.id: p.gender for p in pool}
    matches = generate_mixed_doubles_matches(1, pool, 3)

    assert len(matches) == 6
    for m in matches:
        assert m.event_type == "mixed_doubles"
        for team in (m.team1_ids, m.team2_ids):
            assert len(team) == 2
            assert sorted(genders[pid] for pid in team) == ["Female", "Male"]


def test_mixed_doubles_players_appear_once_per_round():
    matches = generate_mixed_doubles_matches(1, _mixed_pool(), 3)
    for round_number in (1, 2, 3):
        players = [
            pid for m in matches if m.round_number == round_number for pid in m.team1_ids + m.team2_ids
        ]
        assert len(players) == 8
        assert len(set(players)) == 8


def test_mixed_doubles_is_deterministic():
    first = generate_mixed_doubles_matches(1, _mixed_pool(), 4)
    second = generate_mixed_doubles_matches(1, _mixed_pool(), 4)
    assert [(m.round_number, m.team1_ids, m.team2_ids) for m in first] == [
        (m.round_number, m.team1_ids, m.team2_ids) for m in second
    ]


def test_mixed_doubles_records_rounds_into_supplied_history():
    history = PairingHistory()
    matches = generate_mixed_doubles_matches(1, _mixed_pool(), 2, history=history)
    for m in matches:
        assert history.has_partnered(m.team1_ids[0], m.team1_ids[1])
        assert history.has_faced(m.team1_ids[0], m.team2_ids[0])


def test_mixed_doubles_second_round_changes_partners_when_possible():
    matches = generate_mixed_doubles_matches(1, _mixed_pool(), 2)
    round_1 = {frozenset(t) for m in matches if m.round_number == 1 for t in (m.team1_ids, m.team2_ids)}
    round_2 = {frozenset(t) for m in matches if m.round_number == 2 for t in (m.team1_ids, m.team2_ids)}
    # With 4 females, at least the first males in the shuffle get a new partner
    assert round_1 != round_2


def test_mixed_doubles_needs_two_of_each_gender():
    pool = [_male(1), _male(2), _male(3), _female(11)]
    assert generate_mixed_doubles_matches(1, pool, 3) == []
    assert generate_mixed_doubles_matches(1, [_male(1), _female(11)], 3) == []
