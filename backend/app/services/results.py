"""
Game results: submit a final score, or revert a finalized score once.

Submitting sets both goals and finalizes the game. Unfinalizing clears the
goals and bumps unfinalize_count; a game can be unfinalized at most once
(unfinalize_count is capped at MAX_UNFINALIZE_COUNT).
"""

import logging

from sqlmodel import Session

from app.models.game import Game
from app.repositories import SqlGameRepository, transaction_scope
from app.services.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

GAME_ALREADY_FINALIZED = "Game is already finalized."
GAME_NOT_FINALIZED = "Game is not finalized."
GAME_ALREADY_UNFINALIZED = "Game has already been unfinalized once."


def _validate_goals(field: str, value) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{field} must be an integer")
    if value < 0:
        raise InvalidArgumentError(f"{field} must be at least 0")


def _load_game(session: Session, game_id: int) -> Game:
    game = SqlGameRepository(session).get(game_id)
    if game is None:
        raise InvalidArgumentError(f"Game {game_id} not found")
    return game


def submit_result(session: Session, game_id: int, home_goals: int, away_goals: int) -> Game:
    """
    Record a final score and finalize the game.

    Raises:
        InvalidArgumentError: Game not found, negative/non-integer goals, or already finalized
    """
    _validate_goals("home_goals", home_goals)
    _validate_goals("away_goals", away_goals)

    with transaction_scope(session):
        game = _load_game(session, game_id)
        if game.is_finalized:
            raise InvalidArgumentError(GAME_ALREADY_FINALIZED)

        game.home_goals = home_goals
        game.away_goals = away_goals
        game.is_finalized = True
        SqlGameRepository(session).save(game)

    session.refresh(game)
    logger.info("Result finalized: game_id=%s score=%s-%s", game_id, home_goals, away_goals)
    return game


def unfinalize_result(session: Session, game_id: int) -> Game:
    """
    Revert a finalized result. Allowed once per game.

    Raises:
        InvalidArgumentError: Game not found, not finalized, or already unfinalized once
    """
    with transaction_scope(session):
        game = _load_game(session, game_id)
        if not game.is_finalized:
            raise InvalidArgumentError(GAME_NOT_FINALIZED)
        if not game.can_be_unfinalized():
            raise InvalidArgumentError(GAME_ALREADY_UNFINALIZED)

        game.home_goals = None
        game.away_goals = None
        game.is_finalized = False
        game.unfinalize_count += 1
        SqlGameRepository(session).save(game)

    session.refresh(game)
    logger.info("Result unfinalized: game_id=%s unfinalize_count=%s", game_id, game.unfinalize_count)
    return game
