#!/usr/bin/env python3
"""Watch a random player clear (or blow up) minefields."""
import argparse
import time
import os

from src.minefield.board import BoardConfig, Difficulty, mines_for_density
from src.minefield.environment import MinesweeperEnv


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 5, width: int = 9, height: int = 9,
         mines: int = 10, seed: int = None):
    """Run demo games with visualization."""
    config = BoardConfig(width=width, height=height, num_mines=mines)
    env = MinesweeperEnv(config=config, render_mode="ansi")
    env.action_space.seed(seed)

    print(f"Board: {width}x{height} with {mines} mines ({100*mines/(width*height):.1f}% density)")
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        obs, _ = env.reset(seed=None if seed is None else seed + game)

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            # Reveal-only random play: flags would just burn moves
            mask = env.get_action_mask()
            mask[width * height:] = False
            action = env.action_space.sample(mask=mask.astype("int8"))
            x, y, _ = env.decode_action(action)

            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: ({x}, {y})\n")
            print(env.render())

            if done:
                if info.get("game_state") == "WON":
                    wins += 1
                    print(f"\n*** WIN! ***")
                else:
                    print(f"\n*** LOST (hit mine) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


def parse_args(argv=None):
    """Parse demo options; an omitted --mines uses the beginner density."""
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--width", type=int, default=9, help="Board width")
    parser.add_argument("--height", type=int, default=9, help="Board height")
    parser.add_argument("--mines", type=int, default=None, help="Number of mines (default: ~12%% of tiles)")
    parser.add_argument("--seed", type=int, default=None, help="Base seed for boards and moves")
    args = parser.parse_args(argv)
    if args.mines is None:
        args.mines = mines_for_density(args.width, args.height, Difficulty.BEGINNER)
    return args


if __name__ == "__main__":
    args = parse_args()
    demo(delay=args.delay, games=args.games, width=args.width, height=args.height,
         mines=args.mines, seed=args.seed)
