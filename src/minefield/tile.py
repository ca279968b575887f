"""
Tile module for the minefield engine.

Represents individual tiles on the board with their state
(covered/uncovered/flagged/flag-revealed) and content (mine/number).
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class TileState(Enum):
    """Possible visual states of a tile."""

    COVERED = auto()
    UNCOVERED = auto()
    FLAGGED = auto()
    FLAG_REVEALED = auto()


class Symbol(Enum):
    """Rendering class of a tile, derived from its state and content."""

    COVERED = auto()
    EMPTY = auto()
    NUMBER = auto()
    MINE = auto()
    FLAG = auto()
    FLAG_CORRECT = auto()
    FLAG_WRONG = auto()


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass
class Tile:
    """
    Represents a single tile in the minefield grid.

    Attributes:
        is_mine: Whether this tile contains a mine.
        adjacent_mines: Count of mines in neighboring tiles (0-8).
        state: Current visual state.
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: TileState = TileState.COVERED

    def uncover(self) -> bool:
        """
        Uncover this tile.

        Returns:
            True if the tile went from covered to uncovered, False if it
            was already uncovered or is flagged.
        """
        if self.state != TileState.COVERED:
            return False
        self.state = TileState.UNCOVERED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this tile.

        Returns:
            True if flag was toggled, False if tile is not covered or flagged.
        """
        if self.state == TileState.COVERED:
            self.state = TileState.FLAGGED
            return True
        if self.state == TileState.FLAGGED:
            self.state = TileState.COVERED
            return True
        return False

    def expose(self) -> None:
        """Force the end-of-game state: flags are revealed, the rest uncovered."""
        if self.state in (TileState.FLAGGED, TileState.FLAG_REVEALED):
            self.state = TileState.FLAG_REVEALED
        else:
            self.state = TileState.UNCOVERED

    @property
    def is_covered(self) -> bool:
        """Check if tile is covered."""
        return self.state == TileState.COVERED

    @property
    def is_uncovered(self) -> bool:
        """Check if tile is uncovered."""
        return self.state == TileState.UNCOVERED

    @property
    def is_flagged(self) -> bool:
        """Check if tile carries a live flag."""
        return self.state == TileState.FLAGGED

    @property
    def symbol(self) -> Symbol:
        """Rendering class for this tile."""
        if self.state == TileState.COVERED:
            return Symbol.COVERED
        if self.state == TileState.FLAGGED:
            return Symbol.FLAG
        if self.state == TileState.FLAG_REVEALED:
            return Symbol.FLAG_CORRECT if self.is_mine else Symbol.FLAG_WRONG
        if self.is_mine:
            return Symbol.MINE
        if self.adjacent_mines > 0:
            return Symbol.NUMBER
        return Symbol.EMPTY

    def to_observation(self) -> int:
        """
        Convert tile to an integer observation.

        Returns:
            -1: Covered tile
            -2: Flagged (or flag-revealed) tile
            0-8: Uncovered tile with adjacent mine count
            9: Uncovered mine
        """
        if self.state == TileState.COVERED:
            return -1
        if self.state in (TileState.FLAGGED, TileState.FLAG_REVEALED):
            return -2
        if self.is_mine:
            return 9
        return self.adjacent_mines
