"""FastAPI driver exposing the tic-tac-toe engine over HTTP."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import AIs, STRATEGIES, MoveList, create_strategy, strategy_name
from .codec import decode, encode
from .config import get_settings
from .errors import CodecError, NoLegalMoves, OccupiedCell
from .game import TicTacToe

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """An active game together with the strategies driving each side."""

    game: TicTacToe
    ais: AIs
    move_log: MoveList = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-tac-toe", description="Tic-tac-toe engine with pluggable AIs")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    x_strategy: Optional[str] = Field(default=None, alias="xStrategy")
    o_strategy: Optional[str] = Field(default=None, alias="oStrategy")

    @field_validator("x_strategy", "o_strategy")
    @classmethod
    def ensure_known_strategy(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy {value!r}. Choose one of {', '.join(STRATEGIES)}."
            )
        return value


class MoveRequest(BaseModel):
    """Request payload for placing the current mark on a cell."""

    row: int = Field(ge=0, le=2)
    col: int = Field(ge=0, le=2)


def _create_session(x_strategy: str, o_strategy: str) -> Tuple[str, GameSession]:
    ais = AIs(x_ai=create_strategy(x_strategy), o_ai=create_strategy(o_strategy))
    session = GameSession(game=TicTacToe(), ais=ais)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s (X=%s, O=%s)", session_id, x_strategy, o_strategy)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_game(game: TicTacToe) -> Dict[str, object]:
    result = game.game_result()
    board: List[List[str]] = [
        [cell.to_char() if cell else "" for cell in row]
        for row in game.board_snapshot()
    ]
    return {
        "board": board,
        "currentPlayer": game.current_player.to_char(),
        "result": result.name,
        "terminal": result.is_terminal,
        "winner": result.winner.to_char() if result.winner else None,
        "encoded": encode(game),
    }


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = _serialize_game(session.game)
        state["id"] = game_id
        state["moveLog"] = [
            {"player": player.to_char(), "row": row, "col": col}
            for (row, col), player in session.move_log
        ]
        state["strategies"] = {
            "X": strategy_name(session.ais.x_ai),
            "O": strategy_name(session.ais.o_ai),
        }
        return state


def _apply_move(game_id: str, session: GameSession, row: Optional[int], col: Optional[int]) -> None:
    """Play (row, col), or let the side to move's strategy choose when omitted."""
    with session.lock:
        game = session.game
        if game.is_terminal():
            logger.info("Rejected move on finished game %s", game_id)
            raise HTTPException(status_code=400, detail="Game already finished")

        player = game.current_player
        if row is None or col is None:
            try:
                row, col = session.ais.make_move(game)
            except NoLegalMoves as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            game.make_move(row, col)
        except OccupiedCell as exc:
            logger.info("Rejected move (%d, %d) in game %s: %s", row, col, game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append(((row, col), player))
        logger.debug("Game %s: %s played (%d, %d)\n%s", game_id, player.value, row, col, game.render())

        if game.is_terminal():
            session.ais.notify_game_over(game, list(session.move_log))
            logger.info("Game %s finished: %s", game_id, game.game_result().name)


@app.post("/api/game")
def create_game(request: Optional[NewGameRequest] = None) -> Dict[str, object]:
    settings = get_settings()
    request = request or NewGameRequest()
    game_id, session = _create_session(
        request.x_strategy or settings.x_strategy,
        request.o_strategy or settings.o_strategy,
    )
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_move(game_id, session, request.row, request.col)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/auto")
def auto_move(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_move(game_id, session, None, None)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.game.reset()
        session.move_log.clear()
    logger.info("Reset game %s", game_id)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}/board", response_class=PlainTextResponse)
def render_board(game_id: str) -> str:
    session = _get_session(game_id)
    with session.lock:
        return session.game.render()


@app.get("/api/decode/{packed}")
def decode_state(packed: int) -> Dict[str, object]:
    try:
        unpacked = decode(packed)
    except CodecError as exc:
        logger.info("Rejected packed state %d: %s", packed, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialize_game(unpacked.game)
