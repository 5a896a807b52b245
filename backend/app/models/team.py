from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.game import Game
    from app.models.tournament import Tournament


class Team(SQLModel, table=True):
    __table_args__ = (
        # Team names are unique within a tournament
        SAUniqueConstraint("tournament_id", "name", name="uq_tournament_team_name"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="teams")
    home_games: List["Game"] = Relationship(
        back_populates="home_team", sa_relationship_kwargs={"foreign_keys": "Game.home_team_id"}
    )
    away_games: List["Game"] = Relationship(
        back_populates="away_team", sa_relationship_kwargs={"foreign_keys": "Game.away_team_id"}
    )
