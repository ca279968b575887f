"""
Clock module for the terminal front end.

Provides the elapsed-seconds ticker that runs beside the command loop and
the lock-guarded cursor position it reads when repainting.
"""
import logging
import queue
import threading
import time
from typing import Callable, Optional, Tuple


logger = logging.getLogger(__name__)

Position = Tuple[int, int]
TickCallback = Callable[[int, Position], None]


# ============================================================================
# Shared Cursor
# ============================================================================

class SharedCursor:
    """Cursor position shared between the command loop and the clock."""

    def __init__(self, x: int = 0, y: int = 0) -> None:
        self._position = (x, y)
        self._lock = threading.Lock()

    def get(self) -> Position:
        """Return the current (x, y) position."""
        with self._lock:
            return self._position

    def set(self, x: int, y: int) -> None:
        """Replace the current position."""
        with self._lock:
            self._position = (x, y)

    def move(self, delta_x: int, delta_y: int, width: int, height: int) -> Position:
        """
        Move the cursor, clamped to a width x height grid.

        Returns:
            The new (x, y) position.
        """
        with self._lock:
            x, y = self._position
            x = min(max(x + delta_x, 0), width - 1)
            y = min(max(y + delta_y, 0), height - 1)
            self._position = (x, y)
            return self._position


# ============================================================================
# Game Clock
# ============================================================================

class GameClock:
    """
    Background ticker counting elapsed seconds.

    The thread idles until the first signal. A ``True`` signal starts (or
    keeps) it ticking, a ``False`` signal makes it exit. While ticking it
    calls ``on_tick(elapsed, cursor_position)`` once per interval and stops
    by itself once ``limit`` is reached.
    """

    def __init__(
        self,
        cursor: SharedCursor,
        on_tick: Optional[TickCallback] = None,
        interval: float = 1.0,
        limit: int = 999,
    ) -> None:
        """
        Initialize the clock.

        Args:
            cursor: Cursor read on every tick.
            on_tick: Called from the clock thread after each tick.
            interval: Seconds between ticks.
            limit: Highest value the counter reaches.
        """
        self.cursor = cursor
        self.on_tick = on_tick
        self.interval = interval
        self.limit = limit

        self._signals: "queue.Queue[bool]" = queue.Queue()
        self._elapsed = 0
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def elapsed(self) -> int:
        """Seconds counted so far."""
        with self._lock:
            return self._elapsed

    @property
    def is_running(self) -> bool:
        """Check if the clock thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Spawn the clock thread; it waits for the first signal."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="game-clock", daemon=True
        )
        self._thread.start()

    def signal(self, running: bool) -> None:
        """Send a keep-running (True) or stop (False) signal."""
        self._signals.put(running)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the thread to exit and wait for it."""
        self.signal(False)
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        """Thread body."""
        if not self._signals.get():
            return

        deadline = time.monotonic() + self.interval
        while True:
            remaining = max(0.0, deadline - time.monotonic())
            try:
                running = self._signals.get(timeout=remaining)
            except queue.Empty:
                if not self._tick():
                    return
                deadline += self.interval
                continue
            if not running:
                logger.debug("Clock stopped at %d", self.elapsed)
                return

    def _tick(self) -> bool:
        """Advance the counter; return False once the limit is reached."""
        with self._lock:
            self._elapsed = min(self._elapsed + 1, self.limit)
            elapsed = self._elapsed
        if self.on_tick is not None:
            self.on_tick(elapsed, self.cursor.get())
        return elapsed < self.limit
