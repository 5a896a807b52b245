"""
Tests for court/slot assignment (first-fit, generator order).
"""

from collections import defaultdict
from datetime import datetime, timedelta

import pytest

from app.services.court_slots import assign_courts_and_slots, slot_start_time
from app.services.round_robin import Pairing, generate_round_robin_pairings

START = datetime(2026, 3, 1, 9, 0)


def _layout(assignments):
    return [(a.home_team_id, a.away_team_id, a.slot_index, a.court) for a in assignments]


def test_slot_start_time():
    assert slot_start_time(START, 0, 30) == START
    assert slot_start_time(START, 3, 45) == START + timedelta(minutes=135)


def test_four_teams_two_courts_layout():
    """(1,4) and (2,3) share slot 0; (2,4) conflicts and opens slot 1; and so on."""
    pairings = generate_round_robin_pairings([1, 2, 3, 4])
    assignments = assign_courts_and_slots(pairings, num_courts=2, match_duration_minutes=30, start_datetime=START)

    assert _layout(assignments) == [
        (1, 4, 0, 1),
        (2, 3, 0, 2),
        (2, 4, 1, 1),
        (3, 1, 1, 2),
        (3, 4, 2, 1),
        (1, 2, 2, 2),
    ]
    assert [a.starts_at for a in assignments] == [
        START,
        START,
        START + timedelta(minutes=30),
        START + timedelta(minutes=30),
        START + timedelta(minutes=60),
        START + timedelta(minutes=60),
    ]
    assert all(a.ends_at - a.starts_at == timedelta(minutes=30) for a in assignments)


def test_single_court_one_game_per_slot():
    pairings = generate_round_robin_pairings([1, 2, 3, 4])
    assignments = assign_courts_and_slots(pairings, num_courts=1, match_duration_minutes=20, start_datetime=START)

    assert [a.slot_index for a in assignments] == [0, 1, 2, 3, 4, 5]
    assert all(a.court == 1 for a in assignments)


def test_full_slot_closes_even_without_conflict():
    pairings = [Pairing(1, 2), Pairing(3, 4), Pairing(5, 6)]
    assignments = assign_courts_and_slots(pairings, num_courts=2, match_duration_minutes=30, start_datetime=START)

    assert _layout(assignments) == [(1, 2, 0, 1), (3, 4, 0, 2), (5, 6, 1, 1)]


def test_bye_occupies_a_court_but_blocks_only_home_team():
    pairings = [Pairing(1, None), Pairing(2, 3), Pairing(1, 3)]
    assignments = assign_courts_and_slots(pairings, num_courts=3, match_duration_minutes=30, start_datetime=START)

    assert _layout(assignments) == [(1, None, 0, 1), (2, 3, 0, 2), (1, 3, 1, 1)]
    assert assignments[0].is_bye


def test_conflict_only_checks_current_slot():
    """First-fit never goes back to an earlier slot, even if it has room."""
    pairings = [Pairing(1, 2), Pairing(1, 3), Pairing(4, 5)]
    assignments = assign_courts_and_slots(pairings, num_courts=4, match_duration_minutes=30, start_datetime=START)

    assert _layout(assignments) == [(1, 2, 0, 1), (1, 3, 1, 1), (4, 5, 1, 2)]


def test_empty_pairings():
    assert assign_courts_and_slots([], num_courts=2, match_duration_minutes=30, start_datetime=START) == []


@pytest.mark.parametrize("num_courts,duration", [(0, 30), (-1, 30), (2, 0)])
def test_invalid_court_count_or_duration_rejected(num_courts, duration):
    with pytest.raises(ValueError):
        assign_courts_and_slots([Pairing(1, 2)], num_courts=num_courts, match_duration_minutes=duration, start_datetime=START)


@pytest.mark.parametrize("team_count", [2, 3, 4, 5, 6, 7, 8, 11, 16])
@pytest.mark.parametrize("num_courts", [1, 2, 3, 4])
def test_no_team_double_booked_and_courts_in_range(team_count, num_courts):
    pairings = generate_round_robin_pairings(list(range(1, team_count + 1)))
    assignments = assign_courts_and_slots(pairings, num_courts=num_courts, match_duration_minutes=25, start_datetime=START)

    assert len(assignments) == len(pairings)
    assert all(1 <= a.court <= num_courts for a in assignments)

    by_team = defaultdict(list)
    for a in assignments:
        by_team[a.home_team_id].append(a)
        if a.away_team_id is not None:
            by_team[a.away_team_id].append(a)

    for games in by_team.values():
        games.sort(key=lambda a: a.starts_at)
        for current, following in zip(games, games[1:]):
            assert current.ends_at <= following.starts_at

    # courts within a slot are 1..k without gaps or repeats
    by_slot = defaultdict(list)
    for a in assignments:
        by_slot[a.slot_index].append(a.court)
    for courts in by_slot.values():
        assert courts == list(range(1, len(courts) + 1))
