"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, Tile


# ============================================================================
# Layouts
# ============================================================================

# Two mines in the top corners; the bottom row is a zero region.
TWO_CORNERS = [
    "*.*",
    "...",
    "...",
]

# A column of mines splitting the board into two unconnected halves.
WALL = [
    "..*..",
    "..*..",
    "..*..",
]


def brute_force_count(board: Board, x: int, y: int) -> int:
    """Count mines around (x, y) without using the board's neighbor table."""
    count = 0
    for neighbor_y in range(y - 1, y + 2):
        for neighbor_x in range(x - 1, x + 2):
            if (neighbor_x, neighbor_y) == (x, y):
                continue
            if 0 <= neighbor_x < board.width and 0 <= neighbor_y < board.height:
                if board.get_tile(neighbor_x, neighbor_y).is_mine:
                    count += 1
    return count


def mine_positions(board: Board):
    """Set of (x, y) positions holding a mine."""
    return {
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if board.get_tile(x, y).is_mine
    }


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default intermediate board."""
    return Board(seed=1234)


@pytest.fixture
def small_board() -> Board:
    """Create a 9x9 board with 10 mines."""
    return Board(BoardConfig(9, 9, 10), seed=42)


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0))


@pytest.fixture
def corners_board() -> Board:
    """Create the two-corner-mines layout."""
    return Board.from_layout(TWO_CORNERS, seed=7)


@pytest.fixture
def wall_board() -> Board:
    """Create the mine-wall layout."""
    return Board.from_layout(WALL, seed=7)


# ============================================================================
# Tile Fixtures
# ============================================================================

@pytest.fixture
def covered_tile() -> Tile:
    """Create a covered tile."""
    return Tile()


@pytest.fixture
def mine_tile() -> Tile:
    """Create a tile containing a mine."""
    return Tile(is_mine=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
