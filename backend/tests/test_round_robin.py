"""
Tests for round-robin pairing generation (circle method).
"""

from collections import Counter
from itertools import combinations

import pytest

from app.services.round_robin import (
    BYE,
    Pairing,
    generate_round_robin_pairings,
    prepare_team_ids,
)


def test_prepare_team_ids_appends_bye_for_odd_roster():
    assert prepare_team_ids([1, 2, 3]) == [1, 2, 3, BYE]
    assert prepare_team_ids([1, 2, 3, 4]) == [1, 2, 3, 4]


def test_prepare_team_ids_does_not_mutate_input():
    roster = [7, 8, 9]
    prepare_team_ids(roster)
    assert roster == [7, 8, 9]


def test_four_team_generation_order():
    """Exact emission order for 4 teams: fixed team 4 plays first in every round."""
    pairings = generate_round_robin_pairings([1, 2, 3, 4])

    assert pairings == [
        Pairing(1, 4),
        Pairing(2, 3),
        Pairing(2, 4),
        Pairing(3, 1),
        Pairing(3, 4),
        Pairing(1, 2),
    ]


def test_three_team_byes_only_on_away_side():
    """Odd roster: BYE is the fixed position, so it only ever appears as away."""
    pairings = generate_round_robin_pairings([1, 2, 3])

    assert pairings == [
        Pairing(1, None),
        Pairing(2, 3),
        Pairing(2, None),
        Pairing(3, 1),
        Pairing(3, None),
        Pairing(1, 2),
    ]
    assert all(p.home_team_id is not None for p in pairings)
    assert sum(1 for p in pairings if p.is_bye) == 3


def test_two_teams_single_pairing():
    assert generate_round_robin_pairings([10, 20]) == [Pairing(10, 20)]


@pytest.mark.parametrize("roster", [[], [1]])
def test_fewer_than_two_teams_yields_nothing(roster):
    assert generate_round_robin_pairings(roster) == []


@pytest.mark.parametrize("team_count", [2, 4, 6, 8, 10, 20])
def test_even_roster_every_pair_exactly_once(team_count):
    team_ids = list(range(1, team_count + 1))
    pairings = generate_round_robin_pairings(team_ids)

    assert len(pairings) == team_count * (team_count - 1) // 2
    assert not any(p.is_bye for p in pairings)

    unordered = Counter(frozenset((p.home_team_id, p.away_team_id)) for p in pairings)
    assert set(unordered) == {frozenset(pair) for pair in combinations(team_ids, 2)}
    assert all(count == 1 for count in unordered.values())


@pytest.mark.parametrize("team_count", [3, 5, 7, 9, 11])
def test_odd_roster_every_team_gets_one_bye(team_count):
    team_ids = list(range(1, team_count + 1))
    pairings = generate_round_robin_pairings(team_ids)

    assert len(pairings) == (team_count + 1) * team_count // 2
    byes = [p for p in pairings if p.is_bye]
    assert sorted(p.home_team_id for p in byes) == team_ids

    real = [p for p in pairings if not p.is_bye]
    assert len(real) == team_count * (team_count - 1) // 2
    assert {frozenset((p.home_team_id, p.away_team_id)) for p in real} == {
        frozenset(pair) for pair in combinations(team_ids, 2)
    }

    appearances = Counter()
    for p in pairings:
        appearances[p.home_team_id] += 1
        if p.away_team_id is not None:
            appearances[p.away_team_id] += 1
    assert all(appearances[t] == team_count for t in team_ids)


@pytest.mark.parametrize("team_count", range(2, 16))
def test_no_team_paired_with_itself(team_count):
    pairings = generate_round_robin_pairings(list(range(100, 100 + team_count)))
    assert all(p.home_team_id != p.away_team_id for p in pairings)


def test_generation_is_deterministic_for_team_order():
    roster = [42, 7, 19, 3, 88]
    assert generate_round_robin_pairings(roster) == generate_round_robin_pairings(list(roster))


def test_generation_follows_team_order():
    """Different registration order gives a different (but still complete) layout."""
    forward = generate_round_robin_pairings([1, 2, 3, 4])
    backward = generate_round_robin_pairings([4, 3, 2, 1])
    assert forward != backward
    assert {frozenset(p) for p in forward} == {frozenset(p) for p in backward}


@pytest.mark.parametrize("team_count,expected", [(0, 0), (1, 0), (2, 1), (4, 6), (5, 15), (20, 190)])
def test_row_count_including_byes(team_count, expected):
    assert len(generate_round_robin_pairings(list(range(1, team_count + 1)))) == expected
