"""
Schedule Orchestrator Service - Round-Robin Schedule Generation

Orchestrates the complete schedule generation pipeline:
1. Validate (tournament exists, no finalized games, at least 1 court)
2. Clear existing non-finalized games
3. Load teams (at least 2), append BYE for odd rosters
4. Generate round-robin pairings
5. Assign courts and time slots
6. Insert games

Steps 1-6 run in a single transaction: either the new schedule is visible in
full or the previous one is left untouched. Generation for one tournament is
serialized; concurrent requests for the same tournament run one after another.
"""

import logging
import threading
import weakref
from contextlib import AbstractContextManager
from datetime import datetime
from functools import partial
from typing import Callable, Dict, List, MutableMapping, Optional

from sqlmodel import Session

from app.models.game import Game
from app.repositories import (
    GameRepository,
    SqlGameRepository,
    SqlTeamRepository,
    SqlTournamentRepository,
    TeamRepository,
    TournamentRepository,
    transaction_scope,
)
from app.services.court_slots import assign_courts_and_slots
from app.services.errors import InternalError, InvalidArgumentError
from app.services.round_robin import generate_round_robin_pairings

logger = logging.getLogger(__name__)

BYE_LABEL = "BYE"

FINALIZED_GAMES_EXIST = "Cannot regenerate schedule: tournament has finalized games"
NOT_ENOUGH_COURTS = "Tournament must have at least 1 court"
INVALID_MATCH_DURATION = "Tournament match duration must be at least 1 minute"
NOT_ENOUGH_TEAMS = "Cannot generate schedule: tournament must have at least 2 teams"

# ============================================================================
# Response Models
# ============================================================================


class ScheduledFixture:
    """One generated fixture as exposed to callers"""

    def __init__(
        self,
        match_id: int,
        home_team: str,
        away_team: str,
        court: int,
        starts_at: datetime,
        ends_at: datetime,
    ):
        self.match_id = match_id
        self.home_team = home_team
        self.away_team = away_team
        self.court = court
        self.starts_at = starts_at
        self.ends_at = ends_at

    def to_dict(self):
        return {
            "match_id": self.match_id,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "court": self.court,
            "starts_at": self.starts_at.isoformat(),
            "ends_at": self.ends_at.isoformat(),
        }


class ScheduleBuildSummary:
    """Counters for one generation run (logged, not returned to callers)"""

    def __init__(self):
        self.deleted_games = 0
        self.teams_count = 0
        self.games_created = 0
        self.bye_games = 0
        self.slots_used = 0

    def to_dict(self):
        return {
            "deleted_games": self.deleted_games,
            "teams_count": self.teams_count,
            "games_created": self.games_created,
            "bye_games": self.bye_games,
            "slots_used": self.slots_used,
        }


# ============================================================================
# Per-tournament serialization
# ============================================================================

_locks_guard = threading.Lock()
# Entries vanish once no caller holds the lock any more
_tournament_locks: MutableMapping[int, threading.Lock] = weakref.WeakValueDictionary()


def _tournament_lock(tournament_id: int) -> threading.Lock:
    with _locks_guard:
        lock = _tournament_locks.get(tournament_id)
        if lock is None:
            lock = threading.Lock()
            _tournament_locks[tournament_id] = lock
        return lock


# ============================================================================
# Orchestrator
# ============================================================================


class ScheduleOrchestrator:
    """
    Generates a full round-robin schedule for a tournament.

    Collaborators are injected so the pipeline can run against any storage:
        tournaments/teams/games: repositories (no commits of their own)
        transaction: zero-argument callable returning the unit-of-work context
    """

    def __init__(
        self,
        tournaments: TournamentRepository,
        teams: TeamRepository,
        games: GameRepository,
        transaction: Callable[[], AbstractContextManager],
    ):
        self.tournaments = tournaments
        self.teams = teams
        self.games = games
        self.transaction = transaction

    def generate_schedule(self, tournament_id: int) -> List[ScheduledFixture]:
        """
        Replace the tournament's schedule with a freshly generated round robin.

        Returns:
            The new fixtures ordered by match id

        Raises:
            InvalidArgumentError: Unknown tournament, finalized games exist,
                fewer than 1 court or fewer than 2 teams
            InternalError: Any unexpected failure (transaction rolled back)
        """
        summary = ScheduleBuildSummary()
        failed_step: Optional[str] = None

        with _tournament_lock(tournament_id):
            logger.info("Schedule generation started: tournament_id=%s", tournament_id)
            try:
                with self.transaction():
                    # ========================================================
                    # Step 1: Validate (before any mutation)
                    # ========================================================
                    failed_step = "VALIDATE"

                    tournament = self.tournaments.get(tournament_id, for_update=True)
                    if tournament is None:
                        raise InvalidArgumentError(f"Tournament {tournament_id} not found")

                    if self.games.count_finalized_fixtures(tournament_id) > 0:
                        raise InvalidArgumentError(FINALIZED_GAMES_EXIST)

                    if tournament.num_courts < 1:
                        raise InvalidArgumentError(NOT_ENOUGH_COURTS)

                    if tournament.match_duration_minutes < 1:
                        raise InvalidArgumentError(INVALID_MATCH_DURATION)

                    # ========================================================
                    # Step 2: Clear existing non-finalized games
                    # ========================================================
                    failed_step = "CLEAR_EXISTING"
                    summary.deleted_games = self.games.delete_non_finalized_fixtures(tournament_id)

                    # ========================================================
                    # Step 3: Load teams
                    # ========================================================
                    failed_step = "LOAD_TEAMS"
                    teams = self.teams.list_teams(tournament_id)
                    if len(teams) < 2:
                        raise InvalidArgumentError(NOT_ENOUGH_TEAMS)
                    summary.teams_count = len(teams)
                    team_names = {team.id: team.name for team in teams}

                    # ========================================================
                    # Step 4: Generate pairings
                    # ========================================================
                    failed_step = "GENERATE_PAIRINGS"
                    pairings = generate_round_robin_pairings([team.id for team in teams])

                    # ========================================================
                    # Step 5: Assign courts and slots
                    # ========================================================
                    failed_step = "ASSIGN_COURTS"
                    assignments = assign_courts_and_slots(
                        pairings,
                        num_courts=tournament.num_courts,
                        match_duration_minutes=tournament.match_duration_minutes,
                        start_datetime=tournament.start_datetime,
                    )

                    # ========================================================
                    # Step 6: Insert games
                    # ========================================================
                    failed_step = "INSERT_GAMES"
                    games = [
                        Game(
                            tournament_id=tournament_id,
                            home_team_id=a.home_team_id,
                            away_team_id=a.away_team_id,
                            court=a.court,
                            starts_at=a.starts_at,
                            ends_at=a.ends_at,
                            is_finalized=False,
                            unfinalize_count=0,
                        )
                        for a in assignments
                    ]
                    self.games.bulk_insert_fixtures(games)

                    fixtures = [_to_scheduled_fixture(game, team_names) for game in games]
                    fixtures.sort(key=lambda f: f.match_id)

                    summary.games_created = len(games)
                    summary.bye_games = sum(1 for a in assignments if a.is_bye)
                    summary.slots_used = (assignments[-1].slot_index + 1) if assignments else 0
                    failed_step = None

            except InvalidArgumentError as e:
                logger.warning("Schedule generation rejected: tournament_id=%s reason=%s", tournament_id, e.reason)
                raise
            except Exception as e:
                logger.exception(
                    "Schedule generation failed at step %s, transaction rolled back: tournament_id=%s",
                    failed_step,
                    tournament_id,
                )
                raise InternalError(f"Schedule generation failed at step {failed_step}") from e

        logger.info("Schedule generation finished: tournament_id=%s summary=%s", tournament_id, summary.to_dict())
        return fixtures


def _to_scheduled_fixture(game: Game, team_names: Dict[int, str]) -> ScheduledFixture:
    return ScheduledFixture(
        match_id=game.id,
        home_team=team_names[game.home_team_id],
        away_team=BYE_LABEL if game.is_bye else team_names[game.away_team_id],
        court=game.court,
        starts_at=game.starts_at,
        ends_at=game.ends_at,
    )


# ============================================================================
# Session wiring
# ============================================================================


def build_schedule_orchestrator(session: Session) -> ScheduleOrchestrator:
    """Wire the orchestrator to SQLModel repositories sharing one session."""
    return ScheduleOrchestrator(
        tournaments=SqlTournamentRepository(session),
        teams=SqlTeamRepository(session),
        games=SqlGameRepository(session),
        transaction=partial(transaction_scope, session),
    )


def generate_schedule(session: Session, tournament_id: int) -> List[ScheduledFixture]:
    """GenerateSchedule entry point used by the API layer."""
    return build_schedule_orchestrator(session).generate_schedule(tournament_id)
