"""
Minefield game module.

Provides the board engine, its tile model, and the terminal and
Gymnasium front ends that drive it.
"""
from .tile import Tile, TileState, Symbol
from .board import (
    Action,
    Board,
    BoardConfig,
    BoardError,
    BoardSnapshot,
    Difficulty,
    InvalidConfiguration,
    OutOfBounds,
    Outcome,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    PRESETS,
    mines_for_density,
)
from .clock import GameClock, SharedCursor
from .environment import MinesweeperEnv

__all__ = [
    "Tile",
    "TileState",
    "Symbol",
    "Action",
    "Board",
    "BoardConfig",
    "BoardError",
    "BoardSnapshot",
    "Difficulty",
    "InvalidConfiguration",
    "OutOfBounds",
    "Outcome",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "PRESETS",
    "mines_for_density",
    "GameClock",
    "SharedCursor",
    "MinesweeperEnv",
]
