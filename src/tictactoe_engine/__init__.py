"""Tic-tac-toe engine: board rules, minimax and random AIs, and a 32-bit codec."""

from .ai import MinimaxAI, RandomAI, TicTacToeAI, best_move, play_game
from .codec import PackedGame, decode, encode
from .game import GameResult, Player, TicTacToe

__all__ = [
    "GameResult",
    "MinimaxAI",
    "PackedGame",
    "Player",
    "RandomAI",
    "TicTacToe",
    "TicTacToeAI",
    "best_move",
    "decode",
    "encode",
    "play_game",
]
