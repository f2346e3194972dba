"""Pong rules: ball and paddle movement, scoring, and control inputs."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

log = logging.getLogger(__name__)

SCENE_WIDTH = 350.0
SCENE_HEIGHT = 320.0
PADDLE_WIDTH = 80.0
PADDLE_HEIGHT = 20.0
BALL_SIZE = 15.0

P1_START = (135.0, 5.0)
P2_START = (135.0, 300.0)
BALL_START = (150.0, 150.0)
BALL_SPEED = 3.0

KEY_STEP = 5.0
UDP_STEP = 2.0
P2_STEP = 5.0
P2_REACTION_ODDS = 10


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def moved(self, dx: float, dy: float) -> Rect:
        """A copy of the rectangle shifted by (dx, dy)."""
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def intersects(self, other: Rect) -> bool:
        """True if the two rectangles overlap; touching edges do not count."""
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )


class Key(Enum):
    """Keys that steer the player's paddle."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class SignalEvent:
    """A control sample from one input channel."""

    channel: int
    value: float


def _toggle(current: float, step: float) -> float:
    return step if current == 0 else 0.0


class PongGame:
    """The playing field: a player paddle at the top, a computer paddle at the bottom."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()
        self.scene = Rect(0.0, 0.0, SCENE_WIDTH, SCENE_HEIGHT)
        self.p1 = Rect(*P1_START, PADDLE_WIDTH, PADDLE_HEIGHT)
        self.p2 = Rect(*P2_START, PADDLE_WIDTH, PADDLE_HEIGHT)
        self.ball = Rect(*BALL_START, BALL_SIZE, BALL_SIZE)
        self.ball_dx = -BALL_SPEED
        self.ball_dy = -BALL_SPEED
        self.p1_direction = 0.0
        self.p2_direction = 0.0
        self.score = 0

    def _ball_collides(self, paddle: Rect) -> bool:
        """True if the round ball overlaps the paddle."""
        radius_x = self.ball.width / 2
        radius_y = self.ball.height / 2
        cx = self.ball.x + radius_x
        cy = self.ball.y + radius_y
        nearest_x = min(max(cx, paddle.left), paddle.right)
        nearest_y = min(max(cy, paddle.top), paddle.bottom)
        nx = (cx - nearest_x) / radius_x
        ny = (cy - nearest_y) / radius_y
        return nx * nx + ny * ny < 1.0

    def tick(self) -> int | None:
        """Advance one frame; return -1 or 1 when the ball hits the top or bottom wall."""
        new_x = self.ball.x + self.ball_dx
        new_y = self.ball.y + self.ball_dy
        p1_new_x = self.p1.x + self.p1_direction
        p2_new_x = self.p2.x + self.p2_direction
        goal = None

        if new_x < 0 or new_x + self.ball.width > self.scene.right:
            self.ball_dx *= -1

        if new_y < 0 or new_y + self.ball.height > self.scene.bottom:
            goal = -1 if new_y < 0 else 1
            self.add_score(goal)
            self.ball_dy *= -1

        if p1_new_x < 0 or p1_new_x + self.p1.width > self.scene.right:
            self.p1_direction = 0.0

        if p2_new_x < 0 or p2_new_x + self.p1.width > self.scene.right:
            self.p2_direction = 0.0

        if self._ball_collides(self.p1) and self.ball_dy < 0:
            self.ball_dy *= -1

        if self._ball_collides(self.p2) and self.ball_dy > 0:
            self.ball_dy *= -1

        if self.rng.randrange(P2_REACTION_ODDS) == 0:
            self.p2_direction = self.calculate_p2_direction()

        self.ball = self.ball.moved(self.ball_dx, self.ball_dy)
        self.p1 = self.p1.moved(self.p1_direction, 0.0)
        self.p2 = self.p2.moved(self.p2_direction, 0.0)
        return goal

    def calculate_p2_direction(self) -> float:
        """Step for the computer paddle: towards the ball, or 0 when under it."""
        next_x = self.ball.x + self.ball_dx
        if next_x > self.p2.right:
            return P2_STEP
        if next_x < self.p2.left:
            return -P2_STEP
        return 0.0

    def p1_move_left(self) -> None:
        """Start moving the player left, or stop if already moving."""
        self.p1_direction = _toggle(self.p1_direction, -UDP_STEP)
        log.debug("move left")

    def p1_move_right(self) -> None:
        """Start moving the player right, or stop if already moving."""
        self.p1_direction = _toggle(self.p1_direction, UDP_STEP)
        log.debug("move right")

    def handle_key(self, key: Key) -> bool:
        """Steer with the arrow keys; return True if the key was used."""
        if key is Key.LEFT:
            self.p1_direction = _toggle(self.p1_direction, -KEY_STEP)
            return True
        if key is Key.RIGHT:
            self.p1_direction = _toggle(self.p1_direction, KEY_STEP)
            return True
        return False

    def handle_signal_event(self, event: SignalEvent) -> bool:
        """Steer from a signal sample: positive moves left, negative moves right."""
        if event.value > 0:
            self.p1_direction = _toggle(self.p1_direction, -KEY_STEP)
            log.debug("sg driven left")
        elif event.value < 0:
            self.p1_direction = _toggle(self.p1_direction, KEY_STEP)
            log.debug("sg driven right")
        return True

    def handle_udp_value(self, value: float) -> None:
        """Steer from a received value: negative moves left, positive moves right."""
        if value < 0:
            self.p1_move_left()
        elif value > 0:
            self.p1_move_right()

    def add_score(self, count: int) -> None:
        self.score += count


def sine_events(count: int = 1000, channel: int = 1) -> Iterator[SignalEvent]:
    """Yield a slow sine wave of signal events on one channel."""
    for i in range(count):
        yield SignalEvent(channel, math.sin(0.005 * i * 3.1415926 / 2))