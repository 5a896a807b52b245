"""
Court/slot assignment: deterministic first-fit packing of pairings into
time slots and courts.

Pairings are consumed in generator order. A slot is closed as soon as the
next pairing would double-book a team or the slot already holds one fixture
per court. This does not minimise the number of slots; it reproduces a fixed,
order-dependent layout.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Set

from app.services.round_robin import Pairing


@dataclass(frozen=True)
class SlotAssignment:
    """One pairing placed on a court at a kickoff time"""

    home_team_id: int
    away_team_id: Optional[int]
    slot_index: int  # 0-based
    court: int  # 1-based, <= num_courts
    starts_at: datetime
    ends_at: datetime

    @property
    def is_bye(self) -> bool:
        return self.away_team_id is None


def slot_start_time(base_start: datetime, slot_index: int, match_duration_minutes: int) -> datetime:
    """Kickoff time of a slot: base + slot_index * duration."""
    return base_start + timedelta(minutes=slot_index * match_duration_minutes)


def assign_courts_and_slots(
    pairings: Sequence[Pairing],
    num_courts: int,
    match_duration_minutes: int,
    start_datetime: datetime,
) -> List[SlotAssignment]:
    """
    Assign each pairing to a (slot, court), in order.

    Args:
        pairings: Pairings in generator order
        num_courts: Courts available per slot (>= 1)
        match_duration_minutes: Length of one slot (>= 1)
        start_datetime: Kickoff of slot 0

    Returns:
        One SlotAssignment per pairing, same order as the input

    Raises:
        ValueError: If num_courts or match_duration_minutes is below 1
    """
    if num_courts < 1:
        raise ValueError(f"num_courts must be >= 1, got {num_courts}")
    if match_duration_minutes < 1:
        raise ValueError(f"match_duration_minutes must be >= 1, got {match_duration_minutes}")

    assignments: List[SlotAssignment] = []
    current_slot = 0
    games_in_slot = 0
    busy_teams: Set[int] = set()

    for pairing in pairings:
        home_id = pairing.home_team_id
        away_id = pairing.away_team_id

        has_conflict = home_id in busy_teams or (away_id is not None and away_id in busy_teams)
        slot_full = games_in_slot >= num_courts

        if has_conflict or slot_full:
            current_slot += 1
            games_in_slot = 0
            busy_teams = set()

        starts_at = slot_start_time(start_datetime, current_slot, match_duration_minutes)
        assignments.append(
            SlotAssignment(
                home_team_id=home_id,
                away_team_id=away_id,
                slot_index=current_slot,
                court=games_in_slot + 1,
                starts_at=starts_at,
                ends_at=starts_at + timedelta(minutes=match_duration_minutes),
            )
        )

        games_in_slot += 1
        busy_teams.add(home_id)
        if away_id is not None:
            busy_teams.add(away_id)

    return assignments
