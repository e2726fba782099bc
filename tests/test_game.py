"""Unit tests for board state and result classification."""

import itertools

import pytest

from tictactoe_engine.errors import InvalidMark, InvalidOutcomeTag, OccupiedCell, OutOfRange
from tictactoe_engine.game import (
    WINNING_LINES,
    GameResult,
    Player,
    TicTacToe,
    classify,
)

X, O, _ = Player.X, Player.O, None


def play(*moves):
    game = TicTacToe()
    for row, col in moves:
        game.make_move(row, col)
    return game


def test_new_game_is_empty_with_x_to_move():
    game = TicTacToe()
    assert game.current_player is Player.X
    assert game.board_snapshot() == ((None,) * 3,) * 3
    assert game.game_result() is GameResult.IN_PROGRESS_X
    assert not game.is_terminal()


def test_make_move_places_mark_and_flips_turn():
    game = TicTacToe()
    game.make_move(0, 0)
    assert game.cell(0, 0) is Player.X
    assert game.current_player is Player.O
    assert game.game_result() is GameResult.IN_PROGRESS_O


def test_occupied_cell_is_rejected_without_changing_state():
    game = play((0, 0))
    before = game.copy()
    with pytest.raises(OccupiedCell):
        game.make_move(0, 0)
    assert game == before
    game.make_move(0, 1)
    game.make_move(1, 1)
    game.make_move(2, 2)
    with pytest.raises(OccupiedCell):
        game.make_move(2, 2)


@pytest.mark.parametrize("row, col", [(-1, 0), (0, 3), (3, 3), (1, -2)])
def test_out_of_range_move(row, col):
    game = TicTacToe()
    with pytest.raises(OutOfRange):
        game.make_move(row, col)
    assert game == TicTacToe()


def test_turn_alternates_over_random_sequences():
    for cells in itertools.islice(itertools.permutations(range(9)), 0, 40320, 997):
        game = TicTacToe()
        expected = Player.X
        for index in cells:
            assert game.current_player is expected
            game.make_move(*divmod(index, 3))
            expected = expected.other()
        assert game.current_player is expected


def test_reset_restores_new_game():
    game = play((0, 0), (1, 1), (2, 2))
    game.reset()
    assert game == TicTacToe()


def test_snapshot_is_a_copy():
    game = play((1, 1))
    snapshot = game.board_snapshot()
    with pytest.raises(TypeError):
        snapshot[1][1] = Player.O  # type: ignore[index]
    clone = game.copy()
    clone.make_move(0, 0)
    assert game.cell(0, 0) is None


def test_top_row_win():
    game = play((0, 0), (1, 0), (0, 1), (1, 1))
    assert not game.is_terminal()
    game.make_move(0, 2)
    assert game.is_terminal()
    assert game.game_result() is GameResult.X


def test_column_win_after_seventh_move():
    game = play((0, 0), (0, 1), (1, 1), (2, 2), (2, 0))
    assert not game.is_terminal()
    game.make_move(2, 1)
    game.make_move(1, 0)
    assert game.game_result() is GameResult.X


def test_o_can_win():
    game = play((0, 0), (1, 0), (0, 1), (1, 1), (2, 2), (1, 2))
    assert game.game_result() is GameResult.O
    assert game.game_result().winner is Player.O


def test_full_board_without_line_is_tie():
    game = play((0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (1, 2), (2, 1), (2, 0), (2, 2))
    assert game.board_snapshot() == ((X, O, X), (X, O, O), (O, X, X))
    assert game.is_terminal()
    assert game.game_result() is GameResult.TIE_O


def test_row_major_fill_is_over():
    game = play(*[divmod(i, 3) for i in range(9)])
    assert game.is_terminal()
    assert game.game_result() is GameResult.X


def test_tie_records_next_mover():
    grid = ((X, O, X), (X, O, O), (O, X, X))
    assert classify(grid, Player.X) is GameResult.TIE_X
    assert classify(grid, Player.O) is GameResult.TIE_O


def _brute_force(grid, player):
    for line in WINNING_LINES:
        marks = {grid[r][c] for r, c in line}
        if len(marks) == 1 and None not in marks:
            return GameResult.X if marks == {X} else GameResult.O
    full = all(cell is not None for row in grid for cell in row)
    if player is X:
        return GameResult.TIE_X if full else GameResult.IN_PROGRESS_X
    return GameResult.TIE_O if full else GameResult.IN_PROGRESS_O


def test_classifier_matches_line_inspection_on_reachable_positions():
    seen = set()
    stack = [TicTacToe()]
    while stack:
        game = stack.pop()
        key = (game.board_snapshot(), game.current_player)
        if key in seen:
            continue
        seen.add(key)
        assert game.game_result() is _brute_force(*key)
        if game.is_terminal():
            continue
        for move in game.empty_cells():
            child = game.copy()
            child.make_move(*move)
            stack.append(child)
    # 5478 distinct legal positions in tic-tac-toe
    assert len(seen) == 5478


def test_render_uses_separator_rows():
    game = play((0, 0), (1, 1))
    assert game.render() == (
        " X |   |   \n"
        "---+---+---\n"
        "   | O |   \n"
        "---+---+---\n"
        "   |   |   "
    )
    assert str(game) == game.render()


def test_player_helpers():
    assert Player.X.other() is Player.O
    assert Player.O.other().other() is Player.O
    assert Player.from_char("O") is Player.O
    assert Player.X.to_char() == "X"
    with pytest.raises(InvalidMark):
        Player.from_char("Z")


def test_result_tags():
    assert [r.tag for r in GameResult] == [0, 1, 2, 3, 4, 7]
    for bad in (5, 6, 8):
        with pytest.raises(InvalidOutcomeTag):
            GameResult.from_tag(bad)
    assert GameResult.TIE_O.next_player is Player.O
    assert GameResult.X.next_player is None
    assert GameResult.IN_PROGRESS_O.is_terminal is False


def test_from_grid_validates_cells():
    game = TicTacToe.from_grid([[X, _, _], [_, O, _], [_, _, _]], Player.X)
    assert game.cell(1, 1) is Player.O
    with pytest.raises(InvalidMark):
        TicTacToe.from_grid([["X", _, _], [_, _, _], [_, _, _]])
    with pytest.raises(OutOfRange):
        TicTacToe.from_grid([[_, _], [_, _]])
