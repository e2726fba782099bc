"""Self-checking 32-bit packing of a board and its result.

Layout, most significant first::

    bits 31..21  zero
    bits 20..18  result tag (see ``GameResult``)
    bits 17..0   nine 2-bit cells in row-major order, (0, 0) highest

Cells are ``00`` empty, ``01`` X, ``10`` O; ``11`` is invalid. Decoding
re-derives the result from the unpacked grid and refuses the word unless it
matches the stored tag, so a successful decode is always a consistent game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .errors import InvalidCellEncoding, InvalidOutcomeTag, ResultMismatch
from .game import SIZE, Cell, GameResult, Player, TicTacToe

CELL_BITS = 2
TAG_BITS = 3
GRID_BITS = CELL_BITS * SIZE * SIZE
PACKED_BITS = GRID_BITS + TAG_BITS

_CELL_MASK = (1 << CELL_BITS) - 1
_TAG_MASK = (1 << TAG_BITS) - 1

_CELL_TO_BITS = {None: 0b00, Player.X: 0b01, Player.O: 0b10}
_BITS_TO_CELL = {0b00: None, 0b01: Player.X, 0b10: Player.O}


@dataclass(frozen=True)
class PackedGame:
    game: TicTacToe
    result: GameResult


def _turn_for(result: GameResult) -> Player:
    # Wins carry no next mover; the winner is stored as a placeholder.
    player = result.next_player
    if player is None:
        player = result.winner
    assert player is not None
    return player


def encode(game: TicTacToe, result: Optional[GameResult] = None) -> int:
    """Pack ``game`` into a 32-bit integer.

    ``result`` defaults to the game's own result; passing one that disagrees
    with it raises ``ResultMismatch``.
    """
    actual = game.game_result()
    if result is not None and result is not actual:
        raise ResultMismatch(
            f"Result {result.name} does not match the board ({actual.name})"
        )

    packed = actual.tag
    for row in game.board_snapshot():
        for cell in row:
            packed <<= CELL_BITS
            packed |= _CELL_TO_BITS[cell]
    return packed


def decode(packed: int) -> PackedGame:
    """Unpack a 32-bit integer produced by ``encode``.

    Raises ``InvalidCellEncoding``, ``InvalidOutcomeTag`` or
    ``ResultMismatch``; nothing is built unless the word is fully valid.
    """
    if packed < 0 or packed >> PACKED_BITS:
        raise InvalidOutcomeTag(f"Packed state {packed:#x} has bits above bit {PACKED_BITS - 1}")

    cells: List[Cell] = [None] * (SIZE * SIZE)
    p = packed
    for index in reversed(range(SIZE * SIZE)):
        bits = p & _CELL_MASK
        if bits not in _BITS_TO_CELL:
            row, col = divmod(index, SIZE)
            raise InvalidCellEncoding(f"Invalid cell encoding {bits:#04b} at ({row}, {col})")
        cells[index] = _BITS_TO_CELL[bits]
        p >>= CELL_BITS

    result = GameResult.from_tag(p & _TAG_MASK)

    grid = [cells[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]
    game = TicTacToe.from_grid(grid, _turn_for(result))
    actual = game.game_result()
    if actual is not result:
        raise ResultMismatch(
            f"Result and encoded game do not match ({result.name} vs {actual.name})"
        )
    return PackedGame(game=game, result=result)
