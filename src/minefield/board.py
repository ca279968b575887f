"""
Board module for the minefield engine.

Implements the game board with mine placement, first-click relocation,
flood-fill reveal, chording, flagging, and win/loss determination.
"""
import logging
import random
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Deque, List, Optional, Sequence, Tuple

import numpy as np

from .tile import Symbol, Tile


logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================

class BoardError(Exception):
    """Base class for errors raised by the board engine."""


class InvalidConfiguration(BoardError, ValueError):
    """Raised when a board cannot be built with the requested geometry."""


class OutOfBounds(BoardError, IndexError):
    """Raised when a coordinate falls outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(
            f"Position ({x}, {y}) is outside the {width}x{height} board"
        )
        self.x = x
        self.y = y


# ============================================================================
# Constants
# ============================================================================

class Outcome(Enum):
    """Possible outcomes of a game."""

    UNRESOLVED = auto()
    WON = auto()
    LOST = auto()


class Action(Enum):
    """Commands accepted by Board.apply."""

    REVEAL = auto()
    FLAG = auto()


class Difficulty(Enum):
    """Preset difficulties; the value is the mine density ratio."""

    BEGINNER = 0.1235
    INTERMEDIATE = 0.1563
    EXPERT = 0.2062


@dataclass
class BoardConfig:
    """
    Configuration for a minefield board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 22
    height: int = 12
    num_mines: int = 41

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise InvalidConfiguration("Board dimensions must be positive")
        if self.num_mines < 0:
            raise InvalidConfiguration("Number of mines cannot be negative")
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise InvalidConfiguration(
                f"Too many mines (max {max_mines}): at least one tile must be safe"
            )

    @property
    def total_tiles(self) -> int:
        """Number of tiles on the board."""
        return self.width * self.height


# Preset difficulty levels
BEGINNER = BoardConfig(22, 4, 11)
INTERMEDIATE = BoardConfig(22, 12, 41)
EXPERT = BoardConfig(22, 22, 100)

PRESETS = {
    Difficulty.BEGINNER: BEGINNER,
    Difficulty.INTERMEDIATE: INTERMEDIATE,
    Difficulty.EXPERT: EXPERT,
}


def mines_for_density(width: int, height: int, difficulty: Difficulty) -> int:
    """Mine count for a board of the given size at a preset density."""
    total = width * height
    return max(0, min(int(total * difficulty.value), total - 1))


# ============================================================================
# Snapshot
# ============================================================================

@dataclass(frozen=True)
class BoardSnapshot:
    """
    Read-only view of a board for rendering.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        mine_total: Mines on the board.
        flag_total: Live flags placed.
        outcome: Game outcome at the time of the snapshot.
        symbols: Row-major rendering class of every tile.
        counts: Row-major adjacency counts, 0 for tiles that are not
            uncovered safe tiles.
    """

    width: int
    height: int
    mine_total: int
    flag_total: int
    outcome: Outcome
    symbols: Tuple[Symbol, ...]
    counts: Tuple[int, ...]

    @property
    def mines_remaining(self) -> int:
        return self.mine_total - self.flag_total

    def symbol_at(self, x: int, y: int) -> Symbol:
        return self.symbols[y * self.width + x]

    def count_at(self, x: int, y: int) -> int:
        return self.counts[y * self.width + x]


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Tiles are stored row-major, index ``y * width + x``. All mutation goes
    through ``apply``; everything else is a read-only accessor.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    seed: Optional[int] = None
    _tiles: List[Tile] = field(default_factory=list, repr=False)
    _outcome: Outcome = Outcome.UNRESOLVED
    _first_uncover_pending: bool = True
    _flag_total: int = 0
    _flag_correct: int = 0

    def __post_init__(self) -> None:
        """Build the neighbor table and place mines."""
        self._rng = random.Random(self.seed)
        self._neighbors = self._build_neighbor_table()
        self._init_tiles(self._shuffled_mines())

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        mine_total: int,
        seed: Optional[int] = None,
    ) -> "Board":
        """Create a board with randomly placed mines."""
        return cls(BoardConfig(width, height, mine_total), seed=seed)

    @classmethod
    def from_layout(
        cls, rows: Sequence[str], seed: Optional[int] = None
    ) -> "Board":
        """
        Create a board from a fixed layout.

        Args:
            rows: One string per row; ``*`` marks a mine, anything else
                is a safe tile.
            seed: Seed used if the first reveal has to relocate a mine.

        Returns:
            A fresh, unresolved board with the given mines.
        """
        if not rows or any(len(row) != len(rows[0]) for row in rows):
            raise InvalidConfiguration("Layout rows must be non-empty and equal length")
        markers = [char == "*" for row in rows for char in row]
        board = cls(BoardConfig(len(rows[0]), len(rows), sum(markers)), seed=seed)
        board._init_tiles(markers)
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _shuffled_mines(self) -> List[bool]:
        """Return a uniformly shuffled list of mine markers."""
        mine_count = self.config.num_mines
        markers = [True] * mine_count
        markers.extend([False] * (self.config.total_tiles - mine_count))
        self._rng.shuffle(markers)
        return markers

    def _init_tiles(self, markers: List[bool]) -> None:
        """Create covered tiles from mine markers and count adjacency."""
        self._tiles = [Tile(is_mine=marker) for marker in markers]
        for index, tile in enumerate(self._tiles):
            tile.adjacent_mines = self._count_adjacent_mines(index)
        self._outcome = Outcome.UNRESOLVED
        self._first_uncover_pending = True
        self._flag_total = 0
        self._flag_correct = 0
        logger.debug(
            "New %dx%d board with %d mines",
            self.config.width, self.config.height, self.config.num_mines,
        )

    def _count_adjacent_mines(self, index: int) -> int:
        """Count mines adjacent to a specific tile."""
        return sum(1 for n in self._neighbors[index] if self._tiles[n].is_mine)

    def _set_mine(self, index: int, is_mine: bool) -> None:
        """Add or remove a mine and keep neighbor counts in step."""
        self._tiles[index].is_mine = is_mine
        delta = 1 if is_mine else -1
        for neighbor in self._neighbors[index]:
            self._tiles[neighbor].adjacent_mines += delta

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _build_neighbor_table(self) -> List[List[int]]:
        """Precompute the Moore neighborhood of every tile."""
        return [
            self._get_neighbors(*self._coords(index))
            for index in range(self.config.total_tiles)
        ]

    def _get_neighbors(self, x: int, y: int) -> List[int]:
        """
        Get indices of valid neighboring tiles.

        Args:
            x: Column of center tile.
            y: Row of center tile.

        Returns:
            Row-major indices of the up to 8 neighbors inside the grid.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self._is_valid_position(new_x, new_y):
                    neighbors.append(self._index(new_x, new_y))
        return neighbors

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def _index(self, x: int, y: int) -> int:
        return y * self.config.width + x

    def _coords(self, index: int) -> Tuple[int, int]:
        return index % self.config.width, index // self.config.width

    def _checked_index(self, x: int, y: int) -> int:
        """Convert a coordinate to an index, raising OutOfBounds if invalid."""
        if not self._is_valid_position(x, y):
            raise OutOfBounds(x, y, self.config.width, self.config.height)
        return self._index(x, y)

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def apply(self, x: int, y: int, action: Action) -> None:
        """
        Apply a command to the tile at (x, y).

        Revealing a covered tile uncovers it (with flood fill); revealing
        or flagging an uncovered tile chords; flagging a covered or flagged
        tile toggles the flag. Commands on a finished game do nothing.

        Args:
            x: Column, 0 <= x < width.
            y: Row, 0 <= y < height.
            action: Action.REVEAL or Action.FLAG.

        Raises:
            OutOfBounds: If (x, y) is outside the grid.
            ValueError: If action is not an Action member.
        """
        index = self._checked_index(x, y)
        if action not in (Action.REVEAL, Action.FLAG):
            raise ValueError(f"Unknown action: {action!r}")
        if self._outcome != Outcome.UNRESOLVED:
            return

        tile = self._tiles[index]
        if tile.is_uncovered:
            self._chord(index)
        elif action == Action.REVEAL:
            if tile.is_covered:
                self._reveal(index)
        else:
            self._toggle_flag(index)

        self._check_win_condition()

    def reveal(self, x: int, y: int) -> None:
        """Shorthand for ``apply(x, y, Action.REVEAL)``."""
        self.apply(x, y, Action.REVEAL)

    def flag(self, x: int, y: int) -> None:
        """Shorthand for ``apply(x, y, Action.FLAG)``."""
        self.apply(x, y, Action.FLAG)

    def _reveal(self, index: int) -> None:
        """Reveal a covered tile, applying first-click safety."""
        if self._first_uncover_pending:
            self._first_uncover_pending = False
            if self._tiles[index].is_mine:
                self._relocate_mine(index)
        self._uncover(index)

    def _relocate_mine(self, index: int) -> None:
        """Move the mine at index to a random safe tile elsewhere."""
        self._set_mine(index, False)
        candidates = [
            i for i, tile in enumerate(self._tiles)
            if not tile.is_mine and i != index
        ]
        target = self._rng.choice(candidates)
        self._set_mine(target, True)
        if self._tiles[target].is_flagged:
            self._flag_correct += 1
        logger.debug(
            "First reveal hit a mine at %s, moved to %s",
            self._coords(index), self._coords(target),
        )

    def _uncover(self, index: int) -> None:
        """Uncover a single covered tile and handle consequences."""
        tile = self._tiles[index]
        if tile.is_mine:
            self._end_game(Outcome.LOST)
            return

        tile.uncover()
        if tile.adjacent_mines == 0:
            self._flood_fill(index)

    def _flood_fill(self, start: int) -> None:
        """Breadth-first uncover of the zero region around start."""
        queue: Deque[int] = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in self._neighbors[current]:
                tile = self._tiles[neighbor]
                # Only covered tiles change; each is uncovered exactly once
                if not tile.uncover():
                    continue
                if tile.adjacent_mines == 0:
                    queue.append(neighbor)

    def _chord(self, index: int) -> None:
        """Reveal covered neighbors if the flag count matches."""
        tile = self._tiles[index]
        neighbors = self._neighbors[index]
        if self._count_adjacent_flags(index) != tile.adjacent_mines:
            return

        for neighbor in neighbors:
            if self._outcome != Outcome.UNRESOLVED:
                return
            if self._tiles[neighbor].is_covered:
                self._uncover(neighbor)

    def _count_adjacent_flags(self, index: int) -> int:
        """Count flagged tiles adjacent to index."""
        return sum(1 for n in self._neighbors[index] if self._tiles[n].is_flagged)

    def _toggle_flag(self, index: int) -> None:
        """Place or remove a flag, respecting the flag quota."""
        tile = self._tiles[index]
        if tile.is_flagged:
            tile.toggle_flag()
            self._flag_total -= 1
            if tile.is_mine:
                self._flag_correct -= 1
        elif tile.is_covered and self._flag_total < self.config.num_mines:
            tile.toggle_flag()
            self._flag_total += 1
            if tile.is_mine:
                self._flag_correct += 1

    def _check_win_condition(self) -> None:
        """Win when every mine is flagged or every safe tile is uncovered."""
        if self._outcome != Outcome.UNRESOLVED:
            return
        safe_tiles = self.config.total_tiles - self.config.num_mines
        if (
            self._flag_correct == self.config.num_mines
            or self._count_uncovered_safe() == safe_tiles
        ):
            self._end_game(Outcome.WON)

    def _count_uncovered_safe(self) -> int:
        return sum(
            1 for tile in self._tiles if tile.is_uncovered and not tile.is_mine
        )

    def _end_game(self, outcome: Outcome) -> None:
        """Record the outcome and expose the whole board."""
        self._outcome = outcome
        for tile in self._tiles:
            tile.expose()
        logger.debug("Game over: %s", outcome.name)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def mine_total(self) -> int:
        return self.config.num_mines

    @property
    def flag_total(self) -> int:
        return self._flag_total

    @property
    def flag_correct(self) -> int:
        return self._flag_correct

    @property
    def outcome(self) -> Outcome:
        """Get current game outcome."""
        return self._outcome

    @property
    def first_uncover_pending(self) -> bool:
        return self._first_uncover_pending

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        """Row-major tuple of tile copies; editing them does not touch the board."""
        return tuple(replace(tile) for tile in self._tiles)

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._outcome == Outcome.UNRESOLVED

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._outcome == Outcome.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._outcome == Outcome.LOST

    def get_tile(self, x: int, y: int) -> Tile:
        """Get a copy of the tile at position, raising OutOfBounds if invalid."""
        return replace(self._tiles[self._checked_index(x, y)])

    def snapshot(self) -> BoardSnapshot:
        """Capture the current state for rendering."""
        return BoardSnapshot(
            width=self.config.width,
            height=self.config.height,
            mine_total=self.config.num_mines,
            flag_total=self._flag_total,
            outcome=self._outcome,
            symbols=tuple(tile.symbol for tile in self._tiles),
            counts=tuple(
                tile.adjacent_mines if tile.symbol == Symbol.NUMBER else 0
                for tile in self._tiles
            ),
        )

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D array indexed [y, x] where:
                -1 = covered
                -2 = flagged
                0-8 = uncovered with adjacent count
                9 = uncovered mine
        """
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for index, tile in enumerate(self._tiles):
            x, y = self._coords(index)
            obs[y, x] = tile.to_observation()
        return obs

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of covered tiles.

        Returns:
            List of (x, y) positions that can still be revealed.
        """
        return [
            self._coords(index)
            for index, tile in enumerate(self._tiles)
            if tile.is_covered
        ]

    def reset(self) -> None:
        """Start a new game with the same configuration."""
        self._init_tiles(self._shuffled_mines())
