"""
Unit tests for the demo script's option handling.
"""
import importlib.util
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def demo(monkeypatch):
    """Load demo.py from the repository root."""
    monkeypatch.syspath_prepend(str(ROOT))
    spec = importlib.util.spec_from_file_location("demo", ROOT / "demo.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestDemoOptions:
    """Test demo argument parsing."""

    def test_default_mines_use_beginner_density(self, demo) -> None:
        args = demo.parse_args([])
        assert args.mines == 10

    def test_zero_mines_is_kept(self, demo) -> None:
        args = demo.parse_args(["--mines", "0"])
        assert args.mines == 0

    def test_explicit_mines(self, demo) -> None:
        args = demo.parse_args(["--width", "5", "--height", "5", "--mines", "7"])
        assert (args.width, args.height, args.mines) == (5, 5, 7)
