from app.models.game import Game
from app.models.team import Team
from app.models.tournament import Tournament

__all__ = [
    "Tournament",
    "Team",
    "Game",
]
