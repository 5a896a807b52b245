"""
Round-robin pairing generation (circle method).

The last position is fixed and plays in the first match of every round; the
remaining positions rotate. For an odd roster a BYE sentinel is appended so
the working size is even.

Emission order is part of the contract: court/slot assignment consumes the
pairings in exactly this order, so the same team order always yields the
same schedule.
"""

from typing import List, NamedTuple, Optional, Sequence

# Sentinel for the bye position (never a real team id)
BYE = None


class Pairing(NamedTuple):
    home_team_id: int
    away_team_id: Optional[int]  # None = bye

    @property
    def is_bye(self) -> bool:
        return self.away_team_id is None


def prepare_team_ids(team_ids: Sequence[int]) -> List[Optional[int]]:
    """Copy the roster, appending BYE if the team count is odd."""
    prepared: List[Optional[int]] = list(team_ids)
    if len(prepared) % 2 != 0:
        prepared.append(BYE)
    return prepared


def generate_round_robin_pairings(team_ids: Sequence[int]) -> List[Pairing]:
    """
    Generate every round-robin pairing for the given roster.

    Round r, match m (n = working size, BYE included):
        home = teams[(r + m) % (n - 1)]
        away = teams[(n - 1 - m + r) % (n - 1)], or teams[n - 1] when m == 0

    A pairing whose home side resolves to BYE is dropped, never flipped, so a
    bye only ever shows up on the away side.

    Args:
        team_ids: Team ids in registration order

    Returns:
        Pairings in round order, then match order within the round.
        Even roster: n*(n-1)/2 pairings. Odd roster: (n+1)*n/2 rows, n of them byes.
    """
    if len(team_ids) < 2:
        return []

    teams = prepare_team_ids(team_ids)
    n = len(teams)
    rounds = n - 1
    matches_per_round = n // 2
    pairings: List[Pairing] = []

    for round_index in range(rounds):
        for match_index in range(matches_per_round):
            home = (round_index + match_index) % (n - 1)
            away = (n - 1 - match_index + round_index) % (n - 1)

            # Fixed position plays in the first match of each round
            if match_index == 0:
                away = n - 1

            home_team_id = teams[home]
            away_team_id = teams[away]

            if home_team_id is BYE:
                continue

            pairings.append(Pairing(home_team_id=home_team_id, away_team_id=away_team_id))

    return pairings
