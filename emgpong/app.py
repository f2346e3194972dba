"""Runs the game in a terminal, steered by values arriving over UDP."""

from __future__ import annotations

import argparse
import itertools
import logging
import math
import sys
import time

from emgpong.pong import PongGame, Rect, sine_events
from emgpong.udp import LOCALHOST, RECEIVER_PORT, UdpReceiver

log = logging.getLogger(__name__)

TICK_INTERVAL = 0.012
COLUMNS = 70
ROWS = 32


def run_game(game: PongGame, receiver=None, ticks: int = 1, interval: float = TICK_INTERVAL) -> int:
    """Apply pending UDP values and advance the game for a number of ticks; return the score."""
    for _ in range(ticks):
        if receiver is not None:
            for value in receiver.receive_values(timeout=0):
                game.handle_udp_value(value)
        game.tick()
        if interval > 0:
            time.sleep(interval)
    return game.score


def _cells(start: float, end: float, scale: float, limit: int) -> range:
    first = min(max(int(math.floor(start * scale)), 0), limit - 1)
    last = min(max(int(math.ceil(end * scale)) - 1, first), limit - 1)
    return range(first, last + 1)


def render(game: PongGame, columns: int = COLUMNS, rows: int = ROWS) -> str:
    """Draw the field as text: a score line, then the grid."""
    if columns < 1 or rows < 1:
        raise ValueError("columns and rows must be positive")
    sx = columns / game.scene.width
    sy = rows / game.scene.height
    grid = [[" "] * columns for _ in range(rows)]

    def draw(rect: Rect, char: str) -> None:
        for row in _cells(rect.top, rect.bottom, sy, rows):
            for col in _cells(rect.left, rect.right, sx, columns):
                grid[row][col] = char

    draw(game.p1, "=")
    draw(game.p2, "#")
    draw(game.ball, "o")
    lines = [f"score: {game.score}"]
    lines.extend("".join(row) for row in grid)
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Play the game, steered by values received over UDP."""
    parser = argparse.ArgumentParser(description="Pong steered by UDP control values.")
    parser.add_argument("--host", default=LOCALHOST)
    parser.add_argument("--port", type=int, default=RECEIVER_PORT)
    parser.add_argument("--no-udp", action="store_true")
    parser.add_argument("--ticks", type=int)
    parser.add_argument("--interval", type=float, default=TICK_INTERVAL)
    parser.add_argument("--demo-events", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args(argv)

    game = PongGame()
    if args.demo_events:
        for event in sine_events():
            game.handle_signal_event(event)

    receiver = None
    if not args.no_udp:
        try:
            receiver = UdpReceiver(args.host, args.port)
            log.info("bind success")
        except OSError as exc:
            log.warning("bind failed: %s", exc)

    clear = "\x1b[H\x1b[2J" if sys.stdout.isatty() else ""
    steps = itertools.count() if args.ticks is None else range(args.ticks)
    try:
        for _ in steps:
            run_game(game, receiver, 1, args.interval)
            if not args.quiet:
                print(clear + render(game), flush=True)
    except KeyboardInterrupt:
        pass
    finally:
        if receiver is not None:
            receiver.close()
    print(f"final score: {game.score}")
    return 0