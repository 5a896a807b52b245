"""
Leaderboard: team statistics from finalized games, ordered by points with
cascading tie-breaks, ranked 1..N.

Read-only. Roster and finalized games are read inside one transaction so a
single call never mixes results from before and after a concurrent update.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from sqlmodel import Session

from app.repositories import SqlGameRepository, SqlTeamRepository, SqlTournamentRepository, transaction_scope
from app.services.errors import InternalError, InvalidArgumentError
from app.services.team_stats import TeamStats, aggregate_team_stats
from app.services.tiebreak import resolve_tiebreaks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardRow:
    stats: TeamStats
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        row = self.stats.to_dict()
        row["rank"] = self.rank
        return row


def rank_standings(ordered: List[TeamStats]) -> List[LeaderboardRow]:
    """Rank = 1-based position in the fully ordered standings."""
    return [LeaderboardRow(stats=stats, rank=index + 1) for index, stats in enumerate(ordered)]


def calculate_leaderboard(session: Session, tournament_id: int) -> List[LeaderboardRow]:
    """
    CalculateLeaderboard for a tournament.

    Raises:
        InvalidArgumentError: Tournament not found
        InternalError: Unexpected failure while reading
    """
    try:
        with transaction_scope(session):
            tournament = SqlTournamentRepository(session).get(tournament_id)
            if tournament is None:
                raise InvalidArgumentError(f"Tournament {tournament_id} not found")

            teams = SqlTeamRepository(session).list_teams(tournament_id)
            if not teams:
                return []
            finalized_games = SqlGameRepository(session).list_finalized_fixtures(tournament_id)

            standings = aggregate_team_stats(teams, finalized_games)
            ordered = resolve_tiebreaks(standings, finalized_games)
    except InvalidArgumentError:
        raise
    except Exception as e:
        logger.exception("Leaderboard calculation failed: tournament_id=%s", tournament_id)
        raise InternalError("Leaderboard calculation failed") from e

    return rank_standings(ordered)
