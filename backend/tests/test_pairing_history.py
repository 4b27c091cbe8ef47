from app.utils.pairing_history import PairingHistory


def test_empty_history_has_no_pairings():
    history = PairingHistory()
    assert not history.has_partnered(1, 2)
    assert not history.has_faced(1, 2)
    assert not history.teams_have_faced([1, 2], [3, 4])


def test_record_match_tracks_partners_and_opponents_symmetrically():
    history = PairingHistory()
    history.record_match([1, 2], [3, 4])

    assert history.has_partnered(1, 2)
    assert history.has_partnered(2, 1)
    assert history.has_partnered(3, 4)
    assert not history.has_partnered(1, 3)

    for a in (1, 2):
        for b in (3, 4):
            assert history.has_faced(a, b)
            assert history.has_faced(b, a)
    assert not history.has_faced(1, 2)


def test_teams_have_faced_if_any_player_met():
    history = PairingHistory()
    history.record_match([1, 2], [3, 4])
    assert history.teams_have_faced([1, 5], [6, 4])
    assert not history.teams_have_faced([1, 2], [5, 6])


def test_singles_match_records_no_partners():
    history = PairingHistory()
    history.record_match([1], [2])
    assert history.has_faced(1, 2)
    assert history.partners.get(1, set()) == set()


def test_histories_are_independent():
    first = PairingHistory()
    second = PairingHistory()
    first.record_match([1, 2], [3, 4])
    assert not second.has_partnered(1, 2)
