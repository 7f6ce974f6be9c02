#!/usr/bin/env python3
"""
BREAK BLOCK BUILD - Terminal Block Breaker
===========================================
Scavenge a falling wall of blocks for upgrades, then spend them on the boss.

Controls:
    WASD/Arrows - Move
    SPACE       - Hold to charge, release to dash (fires the beam once owned)
    P           - Pause
    R           - Restart
    Q/ESC       - Quit
"""

import argparse
import logging
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .components import NEON_CYAN, NEON_GREEN, NEON_RED, NEON_YELLOW, Outcome
from .config import GameConfig, setup_logging
from .controls import InputHandler
from .engine import GameRenderer, HUD_ROWS
from .game import Game, RunResult

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MAX_TICKS_PER_FRAME = 4
MIN_WIDTH = 60
MIN_HEIGHT = 20

# Pixels represented by one terminal cell
CELL_WIDTH_PX = 10
CELL_HEIGHT_PX = 20

WIN_ART = [
    r'__   _____  _   _  __        _____ _   _ ',
    r'\ \ / / _ \| | | | \ \      / /_ _| \ | |',
    r' \ V / (_) | |_| |  \ \/\/ / | ||  \| |',
    r'  |_| \___/ \___/    \_/\_/ |___|_|\__|',
]
LOSE_ART = [
    r' ___   _   __  __ ___    _____   _____ ___ ',
    r'/ __| /_\ |  \/  | __|  / _ \ \ / / __| _ \ ',
    r'| (_ |/ _ \| |\/| | _|  | (_) \ V /| _||   /',
    r' \___/_/ \_\_|  |_|___|  \___/ \_/ |___|_|_\ ',
]


def viewport_for(term_width: int, term_height: int):
    """World size in pixels for a terminal of the given cell size."""
    return (term_width * CELL_WIDTH_PX,
            (term_height - HUD_ROWS) * CELL_HEIGHT_PX)


# =============================================================================
# SCREENS
# =============================================================================

def render_pause_overlay(renderer: GameRenderer):
    renderer.draw_banner(['[ PAUSED ]', 'P:Resume  R:Restart  Q:Quit'], NEON_CYAN)


def render_too_small(term, size) -> str:
    return (term.home + term.clear +
            f'Terminal too small: {size[0]}x{size[1]}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}')


def render_result_screen(renderer: GameRenderer, result: RunResult, frame: int):
    """Outcome art, final stats and the restart prompt."""
    won = result.outcome is Outcome.WIN
    art = WIN_ART if won else LOSE_ART
    top = max(0, renderer.game_height // 2 - 6)
    renderer.draw_banner(art, NEON_GREEN if won else NEON_RED, y=top)

    stats = [
        f'FINAL SCORE: {result.score}',
        f'MAX COMBO: {result.max_combo}',
        f'TIME: {result.elapsed:.1f}s',
    ]
    renderer.draw_banner(stats, NEON_YELLOW, y=top + len(art) + 1)

    if (frame // 30) % 2 == 0:
        renderer.draw_banner(['[ R - RESTART ]    [ Q - QUIT ]'], NEON_CYAN,
                             y=top + len(art) + len(stats) + 2)


# =============================================================================
# MAIN LOOP
# =============================================================================

def run_loop(game: Game, renderer: GameRenderer, input_handler: InputHandler,
             term, clock=time.perf_counter, sleep=time.sleep):
    """
    Fixed-timestep loop: drain input, tick the game at FRAME_TIME, draw.

    The clock and sleep are injected so the loop can be driven without a
    real terminal. Returns the RunResult, or None if the player quit mid-run.
    """
    last_time = clock()
    accumulator = 0.0
    frame = 0
    size = (term.width, term.height)
    too_small = False

    while True:
        now = clock()
        delta = now - last_time
        last_time = now

        # Clamp delta to prevent spiral of death
        accumulator += min(delta, FRAME_TIME * 5)

        key = term.inkey(timeout=0)
        while key:
            input_handler.process_key(key)
            key = term.inkey(timeout=0)

        if input_handler.consume_quit():
            break
        if input_handler.consume_restart():
            logger.info('Restart requested')
            game.reset()
            accumulator = 0.0
        if input_handler.consume_pause() and game.running:
            game.paused = not game.paused

        if (term.width, term.height) != size:
            size = (term.width, term.height)
            too_small = size[0] < MIN_WIDTH or size[1] < MIN_HEIGHT
            if too_small:
                logger.warning('Terminal shrank to %dx%d; simulation on hold', *size)
                print(render_too_small(term, size), end='', flush=True)
            else:
                world_w, world_h = viewport_for(*size)
                game.resize(world_w, world_h)
                renderer.resize(size[0], size[1], world_w, world_h)
                print(term.home + term.clear, end='', flush=True)

        # Hold the simulation until the terminal is large enough again
        if too_small:
            accumulator = 0.0
            sleep(FRAME_TIME)
            continue

        ticks = 0
        while accumulator >= FRAME_TIME and ticks < MAX_TICKS_PER_FRAME:
            input_handler.update(FRAME_TIME)
            if not game.paused:
                game.update(FRAME_TIME, input_handler.snapshot())
            accumulator -= FRAME_TIME
            ticks += 1

        renderer.draw_frame(game.snapshot())
        if game.paused:
            render_pause_overlay(renderer)
        elif game.result is not None:
            render_result_screen(renderer, game.result, frame)
        print(renderer.present(), end='', flush=True)
        frame += 1

        sleep_time = FRAME_TIME - (clock() - now)
        if sleep_time > 0.001:
            sleep(sleep_time * 0.9)

    return game.result


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='break-block-build',
        description='Terminal block breaker with a boss fight.',
    )
    parser.add_argument('--seed', type=int, default=None,
                        help='seed for the run RNG (default: random)')
    parser.add_argument('--duration', type=float, default=60.0,
                        help='scavenge phase length in seconds (default: 60)')
    parser.add_argument('--log-file', default=None,
                        help='write logs to this file (default: logging disabled)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='log level (default: INFO)')
    return parser.parse_args(argv)


def main(argv=None):
    """Entry point. Sets up logging and the terminal, then runs the game loop."""
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    try:
        world_w, world_h = viewport_for(term.width, term.height)
        config = GameConfig(width=world_w, height=world_h,
                            scavenge_duration=args.duration, seed=args.seed)
    except ValueError as exc:
        print(f'ERROR: {exc}')
        sys.exit(2)

    logger.info('Starting run: viewport %dx%d, seed %s', world_w, world_h, args.seed)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = Game(config)
        renderer = GameRenderer(term, config.width, config.height)
        print(term.home + term.clear, end='', flush=True)
        result = run_loop(game, renderer, InputHandler(), term)
        print(term.normal, end='', flush=True)

    if result is not None:
        print(f'{result.outcome.value.upper()} - score {result.score}, '
              f'max combo {result.max_combo}')


if __name__ == '__main__':
    main()
