"""
Rendering module for the terminal front end.

Turns a BoardSnapshot into box-drawn rich Text or plain strings.
"""
from typing import Optional, Tuple

from rich.text import Text

from .board import BoardSnapshot, Outcome
from .tile import Symbol


# ============================================================================
# Constants
# ============================================================================

HEADER_WIDTH = 12
COUNTER_MAX = 999

# Line of the framed board holding the counters
CLOCK_ROW = 1

GLYPHS = {
    Symbol.COVERED: ("░", "default"),
    Symbol.EMPTY: (" ", "default"),
    Symbol.MINE: ("Ø", "bold red"),
    Symbol.FLAG: ("Þ", "green"),
    Symbol.FLAG_CORRECT: ("Þ", "green"),
    Symbol.FLAG_WRONG: ("Þ", "yellow"),
}

NUMBER_STYLES = [
    "default",  # 0
    "blue",  # 1
    "green",  # 2
    "red",  # 3
    "cyan",  # 4
    "yellow3",  # 5
    "magenta",  # 6
    "purple",  # 7
    "red",  # 8
]


# ============================================================================
# Tile Glyphs
# ============================================================================

def tile_glyph(symbol: Symbol, count: int = 0) -> Tuple[str, str]:
    """
    Get the character and rich style for a tile.

    Args:
        symbol: Rendering class of the tile.
        count: Adjacent mine count, used for NUMBER tiles.

    Returns:
        Tuple of (character, style).
    """
    if symbol == Symbol.NUMBER:
        return str(count), NUMBER_STYLES[count]
    return GLYPHS[symbol]


def format_counter(value: int) -> str:
    """Format a counter as three digits, clamped to 0-999."""
    return f"{min(max(value, 0), COUNTER_MAX):03d}"


def clock_column(width: int) -> int:
    """Column where the clock digits start for a board of the given width."""
    return max(width, HEADER_WIDTH) - 3


def banner(outcome: Outcome) -> Optional[str]:
    """Game-over message for a finished game, None while playing."""
    if outcome == Outcome.WON:
        return "YOU WON"
    if outcome == Outcome.LOST:
        return "YOU LOST"
    return None


# ============================================================================
# Board Rendering
# ============================================================================

def plain_board(snapshot: BoardSnapshot) -> str:
    """Render the grid without frame or colors, one line per row."""
    lines = []
    for y in range(snapshot.height):
        lines.append("".join(
            tile_glyph(snapshot.symbol_at(x, y), snapshot.count_at(x, y))[0]
            for x in range(snapshot.width)
        ))
    return "\n".join(lines)


def render_board(
    snapshot: BoardSnapshot,
    elapsed: int = 0,
    cursor: Optional[Tuple[int, int]] = None,
) -> Text:
    """
    Render the framed board with its mine counter and clock.

    Args:
        snapshot: Board state to draw.
        elapsed: Seconds shown in the clock field.
        cursor: (x, y) tile to highlight while the game is unresolved.

    Returns:
        Styled text ready for a rich Console.
    """
    inner = max(snapshot.width, HEADER_WIDTH)
    fill = inner - HEADER_WIDTH
    padding = " " * (inner - snapshot.width)

    text = Text()
    text.append("╔═════╦" + "═" * fill + "╦═════╗\n")
    text.append("║ ")
    text.append(format_counter(snapshot.mines_remaining), style="bold red")
    text.append(" ║" + " " * fill + "║ ")
    text.append(format_counter(elapsed), style="bold red")
    text.append(" ║\n")
    text.append("╠═════╩" + "═" * fill + "╩═════╣\n")

    highlight = cursor if snapshot.outcome == Outcome.UNRESOLVED else None
    for y in range(snapshot.height):
        text.append("║")
        for x in range(snapshot.width):
            char, style = tile_glyph(snapshot.symbol_at(x, y), snapshot.count_at(x, y))
            if highlight == (x, y):
                style = f"{style} reverse"
            text.append(char, style=style)
        text.append(padding + "║\n")
    text.append("╚" + "═" * inner + "╝")

    message = banner(snapshot.outcome)
    if message is not None:
        style = "bold green" if snapshot.outcome == Outcome.WON else "bold red"
        text.append("\n")
        text.append(message.center(inner + 2).rstrip(), style=style)
    return text
