"""
Tie-break resolution for equal-points teams.

Teams on equal points go through an ordered pipeline of stages. Each stage
sorts the still-tied group on one key and splits it into runs of equal key;
only runs of two or more teams move on to the next stage.

    1. Head-to-head mini-league (points, goal difference, goals for), counting
       only games between members of the tied group. No such games: no-op.
    2. Overall goal difference (desc)
    3. Overall goals for (desc)
    4. Average kickoff time of finalized non-bye games (asc, none = last)

Teams still tied after stage 4 keep their input order.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Set

from app.models.game import Game
from app.services.team_stats import TeamStats, goals_for_team, is_scored_game, result_points

# A stage takes a tied group and returns it split into ordered sub-groups
TiebreakStage = Callable[[List[TeamStats], Sequence[Game]], List[List[TeamStats]]]


@dataclass(frozen=True)
class HeadToHeadRecord:
    points: int = 0
    goal_difference: int = 0
    goals_for: int = 0

    def key(self):
        return (self.points, self.goal_difference, self.goals_for)


# ============================================================================
# Grouping helpers
# ============================================================================


def partition_runs(items: Sequence[TeamStats], key: Callable[[TeamStats], Hashable]) -> List[List[TeamStats]]:
    """Split an already-sorted sequence into maximal runs of equal key."""
    runs: List[List[TeamStats]] = []
    previous = object()
    for item in items:
        current = key(item)
        if runs and current == previous:
            runs[-1].append(item)
        else:
            runs.append([item])
        previous = current
    return runs


def sort_and_partition(
    group: Sequence[TeamStats], key: Callable[[TeamStats], Hashable], descending: bool
) -> List[List[TeamStats]]:
    # sorted() is stable with reverse=True as well
    return partition_runs(sorted(group, key=key, reverse=descending), key)


# ============================================================================
# Stages
# ============================================================================


def head_to_head_records(team_ids: Set[int], games: Sequence[Game]) -> Optional[Dict[int, HeadToHeadRecord]]:
    """
    Mini-league among the given teams.

    Returns None when the teams have not played each other at all.
    """
    h2h_games = [
        g for g in games if is_scored_game(g) and g.home_team_id in team_ids and g.away_team_id in team_ids
    ]
    if not h2h_games:
        return None

    records: Dict[int, HeadToHeadRecord] = {}
    for team_id in team_ids:
        points = goal_difference = goals_for = 0
        for game in h2h_games:
            if team_id not in (game.home_team_id, game.away_team_id):
                continue
            own, opponent = goals_for_team(game, team_id)
            goals_for += own
            goal_difference += own - opponent
            points += result_points(own, opponent)
        records[team_id] = HeadToHeadRecord(points=points, goal_difference=goal_difference, goals_for=goals_for)
    return records


def head_to_head_stage(group: List[TeamStats], games: Sequence[Game]) -> List[List[TeamStats]]:
    records = head_to_head_records({s.team_id for s in group}, games)
    if records is None:
        return [group]
    return sort_and_partition(group, key=lambda s: records[s.team_id].key(), descending=True)


def goal_difference_stage(group: List[TeamStats], games: Sequence[Game]) -> List[List[TeamStats]]:
    return sort_and_partition(group, key=lambda s: s.goal_difference, descending=True)


def goals_for_stage(group: List[TeamStats], games: Sequence[Game]) -> List[List[TeamStats]]:
    return sort_and_partition(group, key=lambda s: s.goals_for, descending=True)


def _epoch_seconds(value: datetime) -> float:
    # Stored kickoffs are naive UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def average_kickoff(team_id: int, games: Sequence[Game]) -> Optional[float]:
    """Mean kickoff (epoch seconds) of the team's scored games, or None if it has none."""
    kickoffs = [
        _epoch_seconds(g.starts_at)
        for g in games
        if is_scored_game(g) and team_id in (g.home_team_id, g.away_team_id)
    ]
    if not kickoffs:
        return None
    return sum(kickoffs) / len(kickoffs)


def average_kickoff_stage(group: List[TeamStats], games: Sequence[Game]) -> List[List[TeamStats]]:
    averages = {s.team_id: average_kickoff(s.team_id, games) for s in group}

    def sort_key(stats: TeamStats):
        avg = averages[stats.team_id]
        # earliest first, teams without games last
        return (avg is None, avg if avg is not None else 0.0)

    return sort_and_partition(group, key=sort_key, descending=False)


TIEBREAK_STAGES: List[TiebreakStage] = [
    head_to_head_stage,
    goal_difference_stage,
    goals_for_stage,
    average_kickoff_stage,
]


# ============================================================================
# Resolution
# ============================================================================


def resolve_tied_group(
    group: List[TeamStats],
    games: Sequence[Game],
    stages: Sequence[TiebreakStage] = TIEBREAK_STAGES,
    stage_index: int = 0,
) -> List[TeamStats]:
    """Order a group of equal-points teams by running the remaining stages."""
    if len(group) <= 1 or stage_index >= len(stages):
        return list(group)

    ordered: List[TeamStats] = []
    for sub_group in stages[stage_index](list(group), games):
        ordered.extend(resolve_tied_group(sub_group, games, stages, stage_index + 1))
    return ordered


def resolve_tiebreaks(standings: Sequence[TeamStats], finalized_games: Sequence[Game]) -> List[TeamStats]:
    """
    Order standings by points, breaking ties within each equal-points run.

    Args:
        standings: Team statistics (normally already sorted by points desc)
        finalized_games: Finalized games of the tournament

    Returns:
        Fully ordered standings, highest points first
    """
    by_points = sort_and_partition(standings, key=lambda s: s.points, descending=True)

    ordered: List[TeamStats] = []
    for run in by_points:
        ordered.extend(resolve_tied_group(run, finalized_games))
    return ordered
