"""
Gymnasium environment wrapper for the minefield engine.

Provides a standard RL interface so scripted or learned players can drive
the board through flat action indices.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Action, Board, BoardConfig, BoardSnapshot
from .render import plain_board


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for the minefield board.

    Observation:
        2D array indexed [y, x] where:
        - -1 = covered tile
        - -2 = flagged tile
        - 0-8 = uncovered tile with adjacent mine count
        - 9 = uncovered mine (only once the game is over)

    Actions:
        Discrete action space of size 2 * width * height.
        Action i < width * height reveals tile (i % width, i // width);
        the remaining actions flag the tile i - width * height.

    Rewards:
        - +1 for a command that changed the board
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for a command that changed nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            config: Board configuration (default: intermediate preset).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode

        self._tile_count = self.config.width * self.config.height

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        # Reveal actions first, then flag actions
        self.action_space = spaces.Discrete(2 * self._tile_count)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Seed for mine placement; a new board is built when given.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.board = Board(self.config, seed=seed)
        else:
            self.board.reset()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Flat action index (see class docstring).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        x, y, board_action = self.decode_action(action)
        self._steps += 1

        before = self.board.snapshot()
        self.board.apply(x, y, board_action)
        reward = self._calculate_reward(before)

        observation = self.board.get_observation()
        terminated = not self.board.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[int, int, Action]:
        """Convert a flat action index to (x, y, Action)."""
        action = int(action)
        if not 0 <= action < 2 * self._tile_count:
            raise ValueError(f"Action {action} outside the action space")
        board_action = Action.REVEAL if action < self._tile_count else Action.FLAG
        index = action % self._tile_count
        return index % self.config.width, index // self.config.width, board_action

    def encode_action(self, x: int, y: int, board_action: Action) -> int:
        """Convert (x, y, Action) to a flat action index."""
        index = y * self.config.width + x
        if board_action == Action.FLAG:
            index += self._tile_count
        return index

    def _calculate_reward(self, before: BoardSnapshot) -> float:
        """Reward for the command that turned ``before`` into the current board."""
        if self.board.is_won:
            return 10.0
        if self.board.is_lost:
            return -10.0
        if self.board.snapshot() == before:
            return -0.1
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "flags": self.board.flag_total,
            "mines": self.board.mine_total,
            "game_state": self.board.outcome.name,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return plain_board(self.board.snapshot())
        if self.render_mode == "human":
            print(plain_board(self.board.snapshot()))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that can change the board.

        Returns:
            Boolean array where True = useful action. Reveals are allowed on
            covered tiles, flag toggles on covered tiles while flags remain
            and on flagged tiles.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if not self.board.is_playing:
            return mask
        flags_left = self.board.flag_total < self.board.mine_total
        for index, tile in enumerate(self.board.tiles):
            if tile.is_covered:
                mask[index] = True
                mask[index + self._tile_count] = flags_left
            elif tile.is_flagged:
                mask[index + self._tile_count] = True
        return mask
