"""
Match result routes: submit a final score, revert it once.
No schedule mutation; slots and courts are left as generated.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import Session

from app.database import get_session
from app.models.game import Game
from app.services.errors import InvalidArgumentError
from app.services.results import submit_result, unfinalize_result

router = APIRouter()


class GameResultRequest(BaseModel):
    home_goals: int = Field(ge=0)
    away_goals: int = Field(ge=0)


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    home_team_id: int
    away_team_id: Optional[int] = None
    court: int
    starts_at: datetime
    ends_at: datetime
    home_goals: Optional[int] = None
    away_goals: Optional[int] = None
    is_finalized: bool
    unfinalize_count: int


def _require_game(session: Session, game_id: int) -> Game:
    game = session.get(Game, game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Match not found")
    return game


@router.post("/matches/{game_id}/result", response_model=GameResponse)
def store_game_result(game_id: int, payload: GameResultRequest, session: Session = Depends(get_session)):
    """Record the final score. The game becomes finalized."""
    _require_game(session, game_id)
    try:
        return submit_result(session, game_id, payload.home_goals, payload.away_goals)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=e.reason)


@router.post("/matches/{game_id}/unfinalize", response_model=GameResponse)
def unfinalize_game_result(game_id: int, session: Session = Depends(get_session)):
    """Revert a finalized result (goals cleared). Allowed once per game."""
    _require_game(session, game_id)
    try:
        return unfinalize_result(session, game_id)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=e.reason)
