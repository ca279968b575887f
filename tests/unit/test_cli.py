"""
Unit tests for the terminal front end.
"""
import io
import os

import pytest
from rich.console import Console

from minefield import Board, Outcome
from minefield import cli
from minefield.cli import (
    GameSession,
    build_parser,
    check_conflicts,
    resolve_config,
)


TERMINAL = (80, 30)


def parse(*argv: str):
    return build_parser().parse_args(list(argv))


@pytest.fixture
def console() -> Console:
    """Console writing to memory."""
    return Console(file=io.StringIO(), width=80, color_system=None)


# ============================================================================
# Option Tests
# ============================================================================

class TestOptions:
    """Test option parsing and board configuration."""

    def test_defaults_are_intermediate(self) -> None:
        config = resolve_config(parse(), TERMINAL)
        assert (config.width, config.height, config.num_mines) == (22, 12, 41)

    def test_explicit_size(self) -> None:
        config = resolve_config(parse("-W", "10", "-H", "5", "-m", "7"), TERMINAL)
        assert (config.width, config.height, config.num_mines) == (10, 5, 7)

    def test_max_size_follows_terminal(self) -> None:
        config = resolve_config(parse("--max-width", "--max-height"), TERMINAL)
        assert (config.width, config.height) == (78, 25)

    @pytest.mark.parametrize(
        "name,expected", [("beginner", (22, 4, 11)), ("EXPERT", (22, 22, 100))]
    )
    def test_difficulty_preset(self, name: str, expected) -> None:
        config = resolve_config(parse("-d", name), TERMINAL)
        assert (config.width, config.height, config.num_mines) == expected

    def test_smart_difficulty(self) -> None:
        config = resolve_config(parse("-W", "10", "-H", "10", "-s", "expert"), TERMINAL)
        assert config.num_mines == 20

    def test_width_conflicts_with_max_width(self) -> None:
        with pytest.raises(SystemExit):
            parse("-W", "10", "--max-width")

    def test_difficulty_conflicts_with_size(self) -> None:
        assert check_conflicts(parse("-d", "expert", "-W", "10")) is not None

    def test_smart_difficulty_conflicts_with_mines(self) -> None:
        assert check_conflicts(parse("-s", "expert", "-m", "10")) is not None
        assert check_conflicts(parse("-s", "expert", "-d", "beginner")) is not None
        assert check_conflicts(parse("-s", "expert")) is None

    def test_board_must_fit_terminal(self) -> None:
        with pytest.raises(cli.InvalidConfiguration, match="terminal width"):
            resolve_config(parse("-W", "79"), TERMINAL)
        with pytest.raises(cli.InvalidConfiguration, match="terminal height"):
            resolve_config(parse("-H", "26"), TERMINAL)

    def test_too_many_mines(self) -> None:
        with pytest.raises(cli.InvalidConfiguration):
            resolve_config(parse("-W", "5", "-H", "5", "-m", "25"), TERMINAL)

    def test_main_reports_bad_configuration(self, monkeypatch) -> None:
        monkeypatch.setattr(
            cli.shutil, "get_terminal_size", lambda: os.terminal_size(TERMINAL)
        )
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["-W", "5", "-H", "5", "-m", "25"])
        assert excinfo.value.code == 2

    def test_main_reports_conflicts(self) -> None:
        with pytest.raises(SystemExit):
            cli.main(["-s", "expert", "-m", "3"])


# ============================================================================
# Session Tests
# ============================================================================

class TestGameSession:
    """Test the command loop with scripted input."""

    def make_session(self, console: Console) -> GameSession:
        board = Board.from_layout(["*.*", "...", "..."])
        return GameSession(board, console=console, clock_interval=0.01)

    def test_cursor_commands(self, console: Console) -> None:
        session = self.make_session(console)
        session.run(["s 2", "q", "d 2", "w 2", "e"])
        board = session.board
        assert board.get_tile(0, 2).is_uncovered
        assert board.get_tile(2, 0).is_flagged
        assert session.cursor.get() == (2, 0)
        assert board.is_playing
        assert not session.clock.is_running

    def test_coordinate_commands_win(self, console: Console) -> None:
        session = self.make_session(console)
        session.run(["f 0 0", "f 2 0", "r 1 1"])
        assert session.board.outcome == Outcome.WON
        assert "YOU WON" in console.file.getvalue()

    def test_loss_ends_loop(self, console: Console) -> None:
        session = self.make_session(console)
        session.run(["r 0 2", "r 0 0", "r 1 0"])
        assert session.board.outcome == Outcome.LOST
        assert "YOU LOST" in console.file.getvalue()

    def test_quit(self, console: Console) -> None:
        session = self.make_session(console)
        session.run(["x", "r 0 2"])
        assert session.board.first_uncover_pending is True

    def test_out_of_bounds_is_reported(self, console: Console) -> None:
        session = self.make_session(console)
        assert session.handle("r 9 9") is True
        assert "outside" in session.message
        assert session.board.is_playing

    def test_bad_numbers_are_reported(self, console: Console) -> None:
        session = self.make_session(console)
        session.handle("r a b")
        assert "Expected numbers" in session.message

    def test_unknown_command(self, console: Console) -> None:
        session = self.make_session(console)
        assert session.handle("jump") is True
        assert session.message.startswith("Unknown command")

    def test_blank_line_is_ignored(self, console: Console) -> None:
        session = self.make_session(console)
        assert session.handle("   ") is True
        assert session.board.first_uncover_pending is True


# ============================================================================
# Clock Repaint Tests
# ============================================================================

class TestClockRepaint:
    """Test the per-tick header update."""

    def make_session(self, console: Console) -> GameSession:
        board = Board.from_layout(["*.*", "...", "..."])
        return GameSession(board, console=console)

    def test_tick_repaints_clock_field(self) -> None:
        terminal = Console(
            file=io.StringIO(), width=80, color_system=None, force_terminal=True
        )
        session = self.make_session(terminal)
        session._on_tick(7, (0, 0))
        output = terminal.file.getvalue()
        # Row 1, column 9 of the framed header, 1-based in the escape code
        assert "\x1b[2;10H" in output
        assert "007" in output
        assert output.index(cli.SAVE_CURSOR) < output.index("007")
        assert output.index("007") < output.rindex(cli.RESTORE_CURSOR)

    def test_drawn_header_matches_repaint_position(self) -> None:
        session = self.make_session(
            Console(file=io.StringIO(), width=80, color_system=None)
        )
        session.draw()
        lines = session.console.file.getvalue().splitlines()
        column = cli.clock_column(session.board.width)
        assert lines[cli.CLOCK_ROW][column:column + 3] == "000"

    def test_no_repaint_without_terminal(self, console: Console) -> None:
        session = self.make_session(console)
        session._on_tick(7, (0, 0))
        assert console.file.getvalue() == ""
