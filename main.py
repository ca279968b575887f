#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py [-W WIDTH] [-H HEIGHT] [-m MINES] [-d DIFFICULTY]
    python main.py --max-width --max-height -s expert
"""
from src.minefield.cli import main


if __name__ == "__main__":
    main()
