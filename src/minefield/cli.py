"""
Terminal front end for the minefield engine.

Parses board options, then runs a line-oriented command loop that moves a
cursor over the board, sends commands to the engine and redraws it.
"""
import argparse
import logging
import shutil
import threading
from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.control import Control

from .board import (
    INTERMEDIATE,
    PRESETS,
    Action,
    Board,
    BoardConfig,
    Difficulty,
    InvalidConfiguration,
    OutOfBounds,
    mines_for_density,
)
from .clock import GameClock, SharedCursor
from .render import CLOCK_ROW, clock_column, format_counter, render_board


# ============================================================================
# Constants
# ============================================================================

DIFFICULTY_NAMES = [difficulty.name.lower() for difficulty in Difficulty]

MOVES = {
    "w": (0, -1),
    "a": (-1, 0),
    "s": (0, 1),
    "d": (1, 0),
}

QUIT_COMMANDS = {"x", "quit", "exit"}

# Save and restore the cursor around clock repaints (DECSC / DECRC)
SAVE_CURSOR = "\x1b7"
RESTORE_CURSOR = "\x1b8"

HELP = (
    "w/a/s/d [n] move | q reveal | e flag | "
    "r X Y reveal at | f X Y flag at | x quit"
)


# ============================================================================
# Argument Parsing
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="minefield",
        description="Minefield - minesweeper in the terminal",
    )

    width_group = parser.add_mutually_exclusive_group()
    width_group.add_argument(
        "-W", "--width", type=int, default=None,
        help="Board width (at most 2 less than the terminal width)",
    )
    width_group.add_argument(
        "--max-width", action="store_true",
        help="Use the widest board that fits the terminal",
    )

    height_group = parser.add_mutually_exclusive_group()
    height_group.add_argument(
        "-H", "--height", type=int, default=None,
        help="Board height (at most 5 less than the terminal height)",
    )
    height_group.add_argument(
        "--max-height", action="store_true",
        help="Use the tallest board that fits the terminal",
    )

    parser.add_argument(
        "-m", "--mines", type=int, default=None,
        help="Number of mines (must be less than the number of tiles)",
    )
    parser.add_argument(
        "-d", "--difficulty", choices=DIFFICULTY_NAMES, type=str.lower,
        help="Preset board size and mine count",
    )
    parser.add_argument(
        "-s", "--smart-difficulty", choices=DIFFICULTY_NAMES, type=str.lower,
        help="Derive the mine count from a preset density",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for mine placement"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log engine events"
    )
    return parser


def check_conflicts(args: argparse.Namespace) -> Optional[str]:
    """Return an error message for incompatible options, None if fine."""
    if args.difficulty and (
        args.width is not None or args.height is not None
        or args.max_width or args.max_height
    ):
        return "--difficulty cannot be combined with size options"
    if args.smart_difficulty and (args.mines is not None or args.difficulty):
        return "--smart-difficulty cannot be combined with --mines or --difficulty"
    return None


def resolve_config(
    args: argparse.Namespace, terminal_size: Tuple[int, int]
) -> BoardConfig:
    """
    Turn parsed options into a board configuration.

    Args:
        args: Parsed command-line options.
        terminal_size: (columns, lines) of the terminal.

    Returns:
        Validated board configuration.

    Raises:
        InvalidConfiguration: If the board does not fit the terminal or the
            mine count is impossible.
    """
    max_width = terminal_size[0] - 2
    max_height = terminal_size[1] - 5

    if args.difficulty:
        preset = PRESETS[Difficulty[args.difficulty.upper()]]
        width, height, mines = preset.width, preset.height, preset.num_mines
    else:
        width = max_width if args.max_width else args.width
        height = max_height if args.max_height else args.height
        width = INTERMEDIATE.width if width is None else width
        height = INTERMEDIATE.height if height is None else height
        mines = INTERMEDIATE.num_mines if args.mines is None else args.mines

    if args.smart_difficulty:
        mines = mines_for_density(
            width, height, Difficulty[args.smart_difficulty.upper()]
        )

    if width > max_width:
        raise InvalidConfiguration(
            "Width cannot be larger than the terminal width - 2"
        )
    if height > max_height:
        raise InvalidConfiguration(
            "Height cannot be larger than the terminal height - 5"
        )
    return BoardConfig(width, height, mines)


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    Interactive game driven by text commands.

    Only this object mutates the board. The clock thread reads the shared
    cursor, updates the terminal title and, on a real terminal, repaints
    the clock field of the drawn header once per second.
    """

    def __init__(
        self,
        board: Board,
        console: Optional[Console] = None,
        clock_interval: float = 1.0,
    ) -> None:
        self.board = board
        self.console = console or Console()
        self.cursor = SharedCursor()
        self.clock = GameClock(
            self.cursor, on_tick=self._on_tick, interval=clock_interval
        )
        self.message = HELP
        self._draw_lock = threading.Lock()

    def run(self, lines: Optional[Sequence[str]] = None) -> None:
        """
        Play until the game ends or the player quits.

        Args:
            lines: Scripted commands; read from the console when omitted.
        """
        pending: Optional[List[str]] = list(lines) if lines is not None else None
        self.clock.start()
        self.draw()
        try:
            while self.board.is_playing:
                line = self._next_line(pending)
                if line is None or not self.handle(line):
                    break
                self.draw()
        finally:
            self.clock.stop(timeout=1.0)

    def _next_line(self, pending: Optional[List[str]]) -> Optional[str]:
        if pending is not None:
            return pending.pop(0) if pending else None
        try:
            return self.console.input("> ")
        except EOFError:
            return None

    def handle(self, line: str) -> bool:
        """
        Process one command line.

        Returns:
            False if the player asked to quit, True otherwise.
        """
        parts = line.split()
        if not parts:
            return True

        command, params = parts[0].lower(), parts[1:]
        self.message = ""

        if command in QUIT_COMMANDS:
            return False

        try:
            if command in MOVES:
                steps = int(params[0]) if params else 1
                delta_x, delta_y = MOVES[command]
                self.cursor.move(
                    delta_x * steps, delta_y * steps,
                    self.board.width, self.board.height,
                )
            elif command in ("q", "e"):
                x, y = self.cursor.get()
                self.command(x, y, Action.REVEAL if command == "q" else Action.FLAG)
            elif command in ("r", "f") and len(params) == 2:
                x, y = int(params[0]), int(params[1])
                self.command(x, y, Action.REVEAL if command == "r" else Action.FLAG)
            else:
                self.message = f"Unknown command: {line.strip()} ({HELP})"
        except ValueError:
            self.message = f"Expected numbers in: {line.strip()}"
        except OutOfBounds as exc:
            self.message = str(exc)
        return True

    def command(self, x: int, y: int, action: Action) -> None:
        """Send a command to the board and update the cursor and clock."""
        self.board.apply(x, y, action)
        self.cursor.set(x, y)
        self.clock.signal(self.board.is_playing)

    def draw(self) -> None:
        """Redraw the board and the last message."""
        text = render_board(
            self.board.snapshot(), self.clock.elapsed, self.cursor.get()
        )
        with self._draw_lock:
            if self.console.is_terminal:
                self.console.clear()
            self.console.print(text)
            if self.message:
                self.console.print(self.message, markup=False)

    def _on_tick(self, elapsed: int, position: Tuple[int, int]) -> None:
        x, y = position
        self.console.set_window_title(
            f"minefield {format_counter(elapsed)} ({x}, {y})"
        )
        if self.console.is_terminal:
            self._repaint_clock(elapsed)

    def _repaint_clock(self, elapsed: int) -> None:
        """Overwrite the clock digits of the board drawn at the top of the screen."""
        column = clock_column(self.board.width)
        with self._draw_lock:
            self.console.file.write(SAVE_CURSOR)
            self.console.control(Control.move_to(column, CLOCK_ROW))
            self.console.print(
                format_counter(elapsed), style="bold red", end="", highlight=False
            )
            self.console.file.write(RESTORE_CURSOR)
            self.console.file.flush()


# ============================================================================
# Entry Point
# ============================================================================

def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse arguments and play a game."""
    parser = build_parser()
    args = parser.parse_args(argv)

    conflict = check_conflicts(args)
    if conflict:
        parser.error(conflict)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    try:
        config = resolve_config(args, shutil.get_terminal_size())
        board = Board(config, seed=args.seed)
    except InvalidConfiguration as exc:
        parser.error(str(exc))

    session = GameSession(board)
    session.run()
    if not board.is_playing:
        print(f"Game over: {board.outcome.name.lower()}")
