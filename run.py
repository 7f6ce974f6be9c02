#!/usr/bin/env python3
"""
BREAK BLOCK BUILD Launcher
===========================
Run this script to start the game.
"""

from break_block_build.main import main

if __name__ == "__main__":
    main()
