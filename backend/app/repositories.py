"""
Persistence interfaces for tournaments, teams and games, plus the SQLModel
implementations and the transaction scope used by the services.

Repositories do reads and writes only; business rules live in app.services.
None of the repository methods commit: the caller owns the transaction.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol, Sequence

from sqlmodel import Session, func, select

from app.models.game import Game
from app.models.team import Team
from app.models.tournament import Tournament

# ============================================================================
# Interfaces
# ============================================================================


class TournamentRepository(Protocol):
    def get(self, tournament_id: int, for_update: bool = False) -> Optional[Tournament]: ...


class TeamRepository(Protocol):
    def list_teams(self, tournament_id: int) -> List[Team]: ...


class GameRepository(Protocol):
    def get(self, game_id: int) -> Optional[Game]: ...

    def list_fixtures(self, tournament_id: int) -> List[Game]: ...

    def list_finalized_fixtures(self, tournament_id: int) -> List[Game]: ...

    def count_finalized_fixtures(self, tournament_id: int) -> int: ...

    def delete_non_finalized_fixtures(self, tournament_id: int) -> int: ...

    def bulk_insert_fixtures(self, games: Sequence[Game]) -> None: ...

    def save(self, game: Game) -> None: ...


# ============================================================================
# Transaction scope
# ============================================================================


@contextmanager
def transaction_scope(session: Session) -> Iterator[Session]:
    """
    Run a unit of work: commit if the block succeeds, roll back on any exception.

    Everything written inside the block becomes visible together or not at all.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


# ============================================================================
# SQLModel implementations
# ============================================================================


class SqlTournamentRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, tournament_id: int, for_update: bool = False) -> Optional[Tournament]:
        """Load a tournament; for_update takes a row lock where the backend supports it."""
        query = select(Tournament).where(Tournament.id == tournament_id)
        if for_update:
            query = query.with_for_update()
        return self.session.exec(query).first()


class SqlTeamRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_teams(self, tournament_id: int) -> List[Team]:
        """Teams in registration order (id ascending)."""
        return list(self.session.exec(select(Team).where(Team.tournament_id == tournament_id).order_by(Team.id)).all())


class SqlGameRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, game_id: int) -> Optional[Game]:
        return self.session.get(Game, game_id)

    def list_fixtures(self, tournament_id: int) -> List[Game]:
        return list(self.session.exec(select(Game).where(Game.tournament_id == tournament_id).order_by(Game.id)).all())

    def list_finalized_fixtures(self, tournament_id: int) -> List[Game]:
        return list(
            self.session.exec(
                select(Game)
                .where(Game.tournament_id == tournament_id, Game.is_finalized == True)  # noqa: E712
                .order_by(Game.id)
            ).all()
        )

    def count_finalized_fixtures(self, tournament_id: int) -> int:
        count = self.session.exec(
            select(func.count(Game.id)).where(
                Game.tournament_id == tournament_id,
                Game.is_finalized == True,  # noqa: E712
            )
        ).one()
        return int(count)

    def delete_non_finalized_fixtures(self, tournament_id: int) -> int:
        """Delete every non-finalized game of the tournament. Returns the number deleted."""
        pending = self.session.exec(
            select(Game).where(
                Game.tournament_id == tournament_id,
                Game.is_finalized == False,  # noqa: E712
            )
        ).all()
        for game in pending:
            self.session.delete(game)
        self.session.flush()
        return len(pending)

    def bulk_insert_fixtures(self, games: Sequence[Game]) -> None:
        self.session.add_all(games)
        # Force DB validation inside the caller's transaction
        self.session.flush()

    def save(self, game: Game) -> None:
        self.session.add(game)
        self.session.flush()
