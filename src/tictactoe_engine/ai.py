"""Move-selection strategies: exhaustive minimax and uniform random play."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Type
import random

from .errors import NoLegalMoves
from .game import SIZE, WINNING_LINES, Cell, GameResult, Move, Player, TicTacToe

MoveList = List[Tuple[Move, Player]]

# Flat row-major indices of WINNING_LINES, for the search hot loop.
_FLAT_LINES: Tuple[Tuple[int, int, int], ...] = tuple(
    tuple(r * SIZE + c for r, c in line) for line in WINNING_LINES  # type: ignore[misc]
)


class TicTacToeAI(ABC):
    """Contract shared by every strategy a driver can plug in."""

    @abstractmethod
    def get_move(self, game: TicTacToe) -> Move:
        """Pick a move for the side to move in ``game``. Never mutates it."""

    def update(self, game: TicTacToe, move_list: MoveList, win: bool) -> None:
        """Hook called once a game ends. Does nothing for stateless strategies."""


# ---------- Minimax ----------


def check_win(grid: Sequence[Sequence[Cell]]) -> bool:
    """True if any row, column or diagonal is completed by one mark."""
    return _check_win_flat([cell for row in grid for cell in row])


def _check_win_flat(cells: List[Cell]) -> bool:
    for a, b, c in _FLAT_LINES:
        v = cells[a]
        if v is not None and v == cells[b] == cells[c]:
            return True
    return False


def _negamax(cells: List[Cell], player: Player) -> Tuple[int, Optional[int]]:
    # Score is from the point of view of ``player``: +1 win, 0 tie, -1 loss.
    best_score = -2
    best_index: Optional[int] = None

    for index in range(SIZE * SIZE):
        if cells[index] is not None:
            continue
        child = cells.copy()
        child[index] = player
        if _check_win_flat(child):
            score = 1
        else:
            child_score, _ = _negamax(child, player.other())
            score = -child_score

        if score > best_score:
            best_score, best_index = score, index
            if best_score == 1:
                # Nothing scores higher; later cells could only tie.
                break

    if best_index is None:
        return 0, None
    return best_score, best_index


def minimax(
    grid: Sequence[Sequence[Cell]], player: Player
) -> Tuple[int, Optional[Move]]:
    """Full-depth search returning ``(score, move)`` for ``player``.

    The score is from X's point of view, so X maximises it and O minimises
    it. Every empty cell is tried in row-major order and the first move
    reaching the best score is kept; there is no depth preference and no
    cache. ``move`` is None when the grid has no empty cell.
    """
    cells = [cell for row in grid for cell in row]
    score, index = _negamax(cells, player)
    if player is Player.O:
        score = -score
    if index is None:
        return score, None
    return score, divmod(index, SIZE)


def best_move(grid: Sequence[Sequence[Cell]], player: Player) -> Optional[Move]:
    return minimax(grid, player)[1]


class MinimaxAI(TicTacToeAI):
    """Plays the move found by exhaustive minimax search."""

    def get_move(self, game: TicTacToe) -> Move:
        move = best_move(game.board_snapshot(), game.current_player)
        if move is None:
            raise NoLegalMoves("No valid moves available")
        return move


# ---------- Random ----------


class RandomAI(TicTacToeAI):
    """Picks uniformly among the empty cells."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def get_move(self, game: TicTacToe) -> Move:
        moves = game.empty_cells()
        if not moves:
            raise NoLegalMoves("No valid moves available")
        return self._rng.choice(moves)


# ---------- Drivers ----------


STRATEGIES: Dict[str, Type[TicTacToeAI]] = {
    "minimax": MinimaxAI,
    "random": RandomAI,
}


def create_strategy(name: str) -> TicTacToeAI:
    try:
        return STRATEGIES[name]()
    except KeyError as exc:
        raise ValueError(
            f"Unknown strategy {name!r}. Choose one of {', '.join(STRATEGIES)}."
        ) from exc


def strategy_name(ai: TicTacToeAI) -> str:
    for name, cls in STRATEGIES.items():
        if type(ai) is cls:
            return name
    return type(ai).__name__


@dataclass
class AIs:
    """One strategy per side; X defaults to minimax and O to random."""

    x_ai: TicTacToeAI = field(default_factory=MinimaxAI)
    o_ai: TicTacToeAI = field(default_factory=RandomAI)

    def for_player(self, player: Player) -> TicTacToeAI:
        return self.x_ai if player is Player.X else self.o_ai

    def make_move(self, game: TicTacToe) -> Move:
        return self.for_player(game.current_player).get_move(game)

    def notify_game_over(self, game: TicTacToe, move_list: MoveList) -> None:
        winner = game.game_result().winner
        for player in (Player.X, Player.O):
            self.for_player(player).update(game, move_list, winner is player)


@dataclass
class GameRecord:
    game: TicTacToe
    result: GameResult
    moves: MoveList


def play_game(
    x_ai: TicTacToeAI, o_ai: TicTacToeAI, game: Optional[TicTacToe] = None
) -> GameRecord:
    """Let two strategies play ``game`` (a fresh one by default) to the end."""
    ais = AIs(x_ai=x_ai, o_ai=o_ai)
    game = game if game is not None else TicTacToe()
    moves: MoveList = []
    while not game.is_terminal():
        player = game.current_player
        row, col = ais.make_move(game)
        game.make_move(row, col)
        moves.append(((row, col), player))
    ais.notify_game_over(game, moves)
    return GameRecord(game=game, result=game.game_result(), moves=moves)
