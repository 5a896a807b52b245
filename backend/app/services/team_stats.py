"""
Per-team statistics from finalized games.

Win = 3 points, draw = 1, loss = 0. Bye games (no away team) never count
towards any statistic, finalized or not.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from app.models.game import Game
from app.models.team import Team

POINTS_WIN = 3
POINTS_DRAW = 1
POINTS_LOSS = 0


@dataclass(frozen=True)
class TeamStats:
    team_id: int
    team_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
        }


def is_scored_game(game: Game) -> bool:
    """True for a real (non-bye) game with both goals recorded."""
    return game.home_team_id is not None and not game.is_bye and game.has_result()


def goals_for_team(game: Game, team_id: int) -> Tuple[int, int]:
    """(own goals, opponent goals) from the given team's point of view."""
    if game.home_team_id == team_id:
        return game.home_goals, game.away_goals
    return game.away_goals, game.home_goals


def result_points(own_goals: int, opponent_goals: int) -> int:
    if own_goals > opponent_goals:
        return POINTS_WIN
    if own_goals == opponent_goals:
        return POINTS_DRAW
    return POINTS_LOSS


def index_games_by_team(games: Iterable[Game]) -> Dict[int, List[Game]]:
    """Map team id -> scored games it took part in (bye games skipped)."""
    index: Dict[int, List[Game]] = {}
    for game in games:
        if not is_scored_game(game):
            continue
        index.setdefault(game.home_team_id, []).append(game)
        index.setdefault(game.away_team_id, []).append(game)
    return index


def calculate_team_stats(team: Team, team_games: Iterable[Game]) -> TeamStats:
    """Fold one team's finalized games into a TeamStats record."""
    played = won = drawn = lost = goals_for = goals_against = points = 0

    for game in team_games:
        if not is_scored_game(game):
            continue

        own, opponent = goals_for_team(game, team.id)
        played += 1
        goals_for += own
        goals_against += opponent

        if own > opponent:
            won += 1
        elif own == opponent:
            drawn += 1
        else:
            lost += 1
        points += result_points(own, opponent)

    return TeamStats(
        team_id=team.id,
        team_name=team.name,
        played=played,
        won=won,
        drawn=drawn,
        lost=lost,
        goals_for=goals_for,
        goals_against=goals_against,
        goal_difference=goals_for - goals_against,
        points=points,
    )


def aggregate_team_stats(teams: Sequence[Team], finalized_games: Iterable[Game]) -> List[TeamStats]:
    """
    Build one TeamStats per team, sorted by points descending.

    Teams without finalized games appear with all-zero stats. The sort is
    stable, so equal-points teams keep roster order.
    """
    games_index = index_games_by_team(finalized_games)
    standings = [calculate_team_stats(team, games_index.get(team.id, [])) for team in teams]
    return sorted(standings, key=lambda s: s.points, reverse=True)
