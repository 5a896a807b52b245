"""
Leaderboard API Routes
Read-only standings computed from finalized games.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from app.database import get_session
from app.models.tournament import Tournament
from app.services.errors import InternalError, InvalidArgumentError
from app.services.leaderboard import calculate_leaderboard

logger = logging.getLogger(__name__)

router = APIRouter()


class LeaderboardEntry(BaseModel):
    team_id: int
    team_name: str
    played: int
    won: int
    drawn: int
    lost: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int
    rank: int


class LeaderboardResponse(BaseModel):
    tournament_id: int
    tournament_name: str
    leaderboard: List[LeaderboardEntry]


@router.get("/tournaments/{tournament_id}/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(tournament_id: int, session: Session = Depends(get_session)) -> LeaderboardResponse:
    """Standings ordered by points, then head-to-head, goal difference, goals for, average kickoff."""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    tournament_name = tournament.name

    try:
        rows = calculate_leaderboard(session, tournament_id)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=e.reason)
    except InternalError:
        raise HTTPException(status_code=500, detail="Failed to calculate leaderboard")

    return LeaderboardResponse(
        tournament_id=tournament_id,
        tournament_name=tournament_name,
        leaderboard=[LeaderboardEntry(**row.to_dict()) for row in rows],
    )
