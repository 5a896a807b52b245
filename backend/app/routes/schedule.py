"""
Schedule API Routes
Round-robin schedule generation for a tournament.
"""

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from app.database import get_session
from app.models.tournament import Tournament
from app.services.errors import InternalError, InvalidArgumentError
from app.services.schedule_orchestrator import generate_schedule

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class FixtureResponse(BaseModel):
    match_id: int
    home_team: str
    away_team: str  # team name or "BYE"
    court: int
    starts_at: datetime
    ends_at: datetime


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/tournaments/{tournament_id}/schedule/generate",
    response_model=List[FixtureResponse],
    status_code=201,
)
def generate_tournament_schedule(tournament_id: int, session: Session = Depends(get_session)):
    """
    Generate (or regenerate) the full round-robin schedule.

    Replaces all non-finalized games. Refused once any game is finalized.
    """
    try:
        tournament = session.get(Tournament, tournament_id)
        if not tournament:
            raise HTTPException(status_code=404, detail="Tournament not found")

        fixtures = generate_schedule(session, tournament_id)
        return [FixtureResponse(**vars(f)) for f in fixtures]
    except HTTPException:
        raise
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=e.reason)
    except InternalError:
        raise HTTPException(status_code=500, detail="Failed to generate schedule")
    except Exception:
        logger.exception("Unexpected error generating schedule: tournament_id=%s", tournament_id)
        raise HTTPException(status_code=500, detail="Failed to generate schedule")
