from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.team import Team
    from app.models.tournament import Tournament

# A finalized result may be reverted exactly once
MAX_UNFINALIZE_COUNT = 1


class Game(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    home_team_id: int = Field(foreign_key="team.id", index=True)

    # Null away team means the home team has a bye in this slot
    away_team_id: Optional[int] = Field(default=None, foreign_key="team.id", index=True)

    court: int  # 1..tournament.num_courts
    starts_at: datetime
    ends_at: datetime

    # Result (null until submitted; required once finalized)
    home_goals: Optional[int] = Field(default=None)
    away_goals: Optional[int] = Field(default=None)
    is_finalized: bool = Field(default=False, index=True)
    unfinalize_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="games")
    home_team: "Team" = Relationship(
        back_populates="home_games", sa_relationship_kwargs={"foreign_keys": "Game.home_team_id"}
    )
    away_team: Optional["Team"] = Relationship(
        back_populates="away_games", sa_relationship_kwargs={"foreign_keys": "Game.away_team_id"}
    )

    @property
    def is_bye(self) -> bool:
        return self.away_team_id is None

    def has_result(self) -> bool:
        return self.home_goals is not None and self.away_goals is not None

    def can_be_unfinalized(self) -> bool:
        return self.unfinalize_count < MAX_UNFINALIZE_COUNT
