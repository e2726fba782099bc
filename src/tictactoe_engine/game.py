"""Core rules for classic 3x3 tic-tac-toe: marks, outcomes and board state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidMark, InvalidOutcomeTag, OccupiedCell, OutOfRange

SIZE = 3

Cell = Optional["Player"]
Grid = Tuple[Tuple[Cell, ...], ...]
Move = Tuple[int, int]

WINNING_LINES: Tuple[Tuple[Move, Move, Move], ...] = (
    # rows
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    # columns
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    # diagonals
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)

ROW_SEPARATOR = "---+---+---"


# ---------- Marks ----------


class Player(str, Enum):
    X = "X"
    O = "O"

    def other(self) -> "Player":
        return Player.O if self is Player.X else Player.X

    def to_char(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, c: str) -> "Player":
        if c == "X":
            return cls.X
        if c == "O":
            return cls.O
        raise InvalidMark(f"Invalid player char {c!r}")


# ---------- Outcomes ----------


class GameResult(Enum):
    """Classification of a position.

    Values are the 3-bit tags used by the packed encoding. Ties and
    in-progress results remember whose move is next so the encoding can
    restore the turn without a separate field.
    """

    IN_PROGRESS_X = 0b000
    X = 0b001
    O = 0b010
    TIE_X = 0b011
    IN_PROGRESS_O = 0b100
    TIE_O = 0b111

    @classmethod
    def from_tag(cls, tag: int) -> "GameResult":
        try:
            return cls(tag)
        except ValueError as exc:
            raise InvalidOutcomeTag(f"Invalid game result tag {tag:#05b}") from exc

    @classmethod
    def from_winner(cls, player: Player) -> "GameResult":
        return cls.X if player is Player.X else cls.O

    @classmethod
    def for_state(cls, player: Player, full: bool) -> "GameResult":
        """Tie or in-progress result with ``player`` to move next."""
        if full:
            return cls.TIE_X if player is Player.X else cls.TIE_O
        return cls.IN_PROGRESS_X if player is Player.X else cls.IN_PROGRESS_O

    @property
    def tag(self) -> int:
        return self.value

    @property
    def winner(self) -> Optional[Player]:
        if self is GameResult.X:
            return Player.X
        if self is GameResult.O:
            return Player.O
        return None

    @property
    def is_tie(self) -> bool:
        return self in (GameResult.TIE_X, GameResult.TIE_O)

    @property
    def is_terminal(self) -> bool:
        return self not in (GameResult.IN_PROGRESS_X, GameResult.IN_PROGRESS_O)

    @property
    def next_player(self) -> Optional[Player]:
        if self in (GameResult.IN_PROGRESS_X, GameResult.TIE_X):
            return Player.X
        if self in (GameResult.IN_PROGRESS_O, GameResult.TIE_O):
            return Player.O
        return None


# ---------- Classifier ----------


def winning_line(grid: Sequence[Sequence[Cell]]) -> Optional[Tuple[Move, Move, Move]]:
    """First completed line in rows, columns, diagonals order, if any."""
    for line in WINNING_LINES:
        (ar, ac), (br, bc), (cr, cc) = line
        v = grid[ar][ac]
        if v is not None and v == grid[br][bc] == grid[cr][cc]:
            return line
    return None


def is_full(grid: Sequence[Sequence[Cell]]) -> bool:
    return all(cell is not None for row in grid for cell in row)


def classify(grid: Sequence[Sequence[Cell]], player: Player) -> GameResult:
    """Outcome of ``grid`` with ``player`` to move. Pure, callable any time."""
    line = winning_line(grid)
    if line is not None:
        r, c = line[0]
        return GameResult.from_winner(grid[r][c])
    return GameResult.for_state(player, is_full(grid))


# ---------- Board state ----------


def _empty_board() -> List[List[Cell]]:
    return [[None] * SIZE for _ in range(SIZE)]


def _check_index(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise OutOfRange(f"Invalid position ({row}, {col}). Must be 0-{SIZE - 1}.")


@dataclass
class TicTacToe:
    """A 3x3 board plus the mark to move. X always moves first."""

    _board: List[List[Cell]] = field(default_factory=_empty_board)
    _current: Player = Player.X

    @classmethod
    def from_grid(
        cls, grid: Iterable[Iterable[Cell]], player: Player = Player.X
    ) -> "TicTacToe":
        board = [list(row) for row in grid]
        if len(board) != SIZE or any(len(row) != SIZE for row in board):
            raise OutOfRange(f"Grid must be {SIZE}x{SIZE}")
        for row in board:
            for cell in row:
                if cell is not None and not isinstance(cell, Player):
                    raise InvalidMark(f"Invalid cell value {cell!r}")
        return cls(_board=board, _current=Player(player))

    # ---- mutation ----

    def reset(self) -> None:
        self._board = _empty_board()
        self._current = Player.X

    def make_move(self, row: int, col: int) -> None:
        """Place the current mark at (row, col) and pass the turn."""
        _check_index(row, col)
        if self._board[row][col] is not None:
            raise OccupiedCell(f"Cell ({row}, {col}) is already taken")
        self._board[row][col] = self._current
        self._current = self._current.other()

    # ---- queries ----

    @property
    def current_player(self) -> Player:
        return self._current

    def board_snapshot(self) -> Grid:
        return tuple(tuple(row) for row in self._board)

    def cell(self, row: int, col: int) -> Cell:
        _check_index(row, col)
        return self._board[row][col]

    def empty_cells(self) -> List[Move]:
        return [
            (row, col)
            for row in range(SIZE)
            for col in range(SIZE)
            if self._board[row][col] is None
        ]

    def game_result(self) -> GameResult:
        return classify(self._board, self._current)

    def is_terminal(self) -> bool:
        return self.game_result().is_terminal

    def copy(self) -> "TicTacToe":
        return TicTacToe(_board=[row.copy() for row in self._board], _current=self._current)

    # ---- diagnostics ----

    def render(self) -> str:
        rows = [
            "|".join(f" {cell.to_char() if cell else ' '} " for cell in row)
            for row in self._board
        ]
        return f"\n{ROW_SEPARATOR}\n".join(rows)

    def __str__(self) -> str:
        return self.render()
