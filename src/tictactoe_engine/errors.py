"""Exception types raised by the tic-tac-toe core."""

from __future__ import annotations


class TicTacToeError(Exception):
    """Base class for every error the engine raises."""


class InvalidMark(TicTacToeError, ValueError):
    """A character or value that is neither 'X' nor 'O'."""


class OutOfRange(TicTacToeError, ValueError):
    """Row or column outside 0..2."""


class OccupiedCell(TicTacToeError, ValueError):
    """Move targets a cell that already holds a mark."""


class NoLegalMoves(TicTacToeError, RuntimeError):
    """A strategy was asked for a move on a full board."""


class CodecError(TicTacToeError, ValueError):
    """A game state and a 32-bit word could not be converted."""


class InvalidCellEncoding(CodecError):
    """A 2-bit cell field holds the unused pattern ``11``."""


class InvalidOutcomeTag(CodecError):
    """The outcome field holds an unassigned tag."""


class ResultMismatch(CodecError):
    """The outcome stored with a grid is not the grid's real outcome."""
