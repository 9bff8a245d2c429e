"""Breakout - bounce the ball off the paddle and clear the brick wall.

Every level rebuilds the 5x9 wall and serves the ball a little faster.
"""

import math
import logging
from dataclasses import dataclass, replace
from typing import NamedTuple, Tuple

from pocket_arcade.core.events import notification_event
from pocket_arcade.core.input import ACTION_KEYS, Action
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame
from pocket_arcade.graphics.primitives import Buffer, draw_circle, draw_rect, fill

logger = logging.getLogger(__name__)


# Game constants
CANVAS_WIDTH, CANVAS_HEIGHT = 600, 400
PADDLE_WIDTH = 80
PADDLE_HEIGHT = 10
PADDLE_Y = CANVAS_HEIGHT - 30
PADDLE_SPEED = 6
BALL_SIZE = 8
BRICK_WIDTH = 60
BRICK_HEIGHT = 20
BRICK_ROWS = 5
BRICK_COLS = 9
BRICK_SCORE = 10
LEVEL_BONUS = 100
START_LIVES = 3
MAX_BOUNCE_ANGLE = math.pi / 6

BRICK_COLORS = [
    (255, 107, 107),
    (255, 217, 61),
    (107, 207, 127),
    (78, 205, 196),
    (69, 183, 209),
]


@dataclass(frozen=True)
class Ball:
    x: float
    y: float
    dx: float
    dy: float


@dataclass(frozen=True)
class Brick:
    x: int
    y: int
    row: int
    destroyed: bool = False

    def overlaps(self, ball: Ball) -> bool:
        return (
            ball.x + BALL_SIZE >= self.x
            and ball.x <= self.x + BRICK_WIDTH
            and ball.y + BALL_SIZE >= self.y
            and ball.y <= self.y + BRICK_HEIGHT
        )


@dataclass(frozen=True)
class BreakoutState:
    paddle_x: float = CANVAS_WIDTH / 2 - PADDLE_WIDTH / 2
    ball: Ball = Ball(CANVAS_WIDTH / 2, CANVAS_HEIGHT / 2, 3, -3)
    bricks: Tuple[Brick, ...] = ()
    score: int = 0
    lives: int = START_LIVES
    level: int = 1

    @property
    def bricks_left(self) -> int:
        return sum(1 for b in self.bricks if not b.destroyed)


class TickResult(NamedTuple):
    state: BreakoutState
    level_cleared: bool
    life_lost: bool


def create_bricks() -> Tuple[Brick, ...]:
    return tuple(
        Brick(
            x=col * (BRICK_WIDTH + 5) + 35,
            y=row * (BRICK_HEIGHT + 5) + 50,
            row=row,
        )
        for row in range(BRICK_ROWS)
        for col in range(BRICK_COLS)
    )


def serve_speed(level: int) -> float:
    return 3 + (level - 1)


def bounce_speed(level: int) -> float:
    return 4 + (level - 1)


def serve_ball(level: int) -> Ball:
    speed = serve_speed(level)
    return Ball(CANVAS_WIDTH / 2, CANVAS_HEIGHT / 2, speed, -speed)


def paddle_bounce(ball: Ball, paddle_x: float, level: int) -> Ball:
    """Reflect off the paddle; the hit offset picks an angle within +-30 degrees."""
    hit_pos = (ball.x - paddle_x) / PADDLE_WIDTH
    hit_pos = max(0.0, min(1.0, hit_pos))
    angle = (hit_pos - 0.5) * 2 * MAX_BOUNCE_ANGLE
    speed = bounce_speed(level)
    return replace(ball, dx=math.sin(angle) * speed, dy=-math.cos(angle) * speed)


def move_paddle(paddle_x: float, direction: int) -> float:
    x = paddle_x + direction * PADDLE_SPEED
    return max(0.0, min(float(CANVAS_WIDTH - PADDLE_WIDTH), x))


def step(state: BreakoutState, direction: int = 0) -> TickResult:
    """One simulation tick. ``direction`` is -1, 0 or 1 for the held paddle key."""
    paddle_x = move_paddle(state.paddle_x, direction) if direction else state.paddle_x

    ball = state.ball
    ball = replace(ball, x=ball.x + ball.dx, y=ball.y + ball.dy)

    # Walls
    if ball.x <= 0:
        ball = replace(ball, x=0.0, dx=abs(ball.dx))
    elif ball.x >= CANVAS_WIDTH - BALL_SIZE:
        ball = replace(ball, x=float(CANVAS_WIDTH - BALL_SIZE), dx=-abs(ball.dx))
    if ball.y <= 0:
        ball = replace(ball, y=0.0, dy=abs(ball.dy))

    # Paddle
    if (
        ball.dy > 0
        and ball.y + BALL_SIZE >= PADDLE_Y
        and ball.y <= PADDLE_Y + PADDLE_HEIGHT
        and ball.x + BALL_SIZE >= paddle_x
        and ball.x <= paddle_x + PADDLE_WIDTH
    ):
        ball = paddle_bounce(ball, paddle_x, state.level)

    # First live brick only
    bricks = state.bricks
    score = state.score
    for index, brick in enumerate(bricks):
        if not brick.destroyed and brick.overlaps(ball):
            bricks = bricks[:index] + (replace(brick, destroyed=True),) + bricks[index + 1:]
            ball = replace(ball, dy=-ball.dy)
            score += BRICK_SCORE
            break

    new_state = replace(state, paddle_x=paddle_x, ball=ball, bricks=bricks, score=score)

    level_cleared = bool(bricks) and new_state.bricks_left == 0
    if level_cleared:
        level = state.level + 1
        new_state = replace(
            new_state,
            level=level,
            bricks=create_bricks(),
            score=new_state.score + LEVEL_BONUS,
            ball=serve_ball(level),
        )

    life_lost = new_state.ball.y > CANVAS_HEIGHT
    if life_lost:
        lives = new_state.lives - 1
        new_state = replace(new_state, lives=max(0, lives))
        if lives > 0:
            new_state = replace(new_state, ball=serve_ball(new_state.level))

    return TickResult(new_state, level_cleared, life_lost)


class BreakoutGame(BaseGame):
    key = "breakout"
    display_name = "Breakout"
    description = "Break every brick with the ball"
    icon = "B"

    best_score_key = "breakout-best-score"
    tick_ms = 1000 / 60

    CANVAS = (CANVAS_WIDTH, CANVAS_HEIGHT)
    KEY_BINDINGS = {
        "ArrowLeft": Action.LEFT,
        "a": Action.LEFT,
        "A": Action.LEFT,
        "ArrowRight": Action.RIGHT,
        "d": Action.RIGHT,
        "D": Action.RIGHT,
        **ACTION_KEYS,
    }

    def initial_state(self) -> BreakoutState:
        return BreakoutState()

    def on_start(self) -> None:
        self.state = BreakoutState(bricks=create_bricks(), ball=serve_ball(1))

    def on_action(self, action: Action) -> bool:
        # Movement happens on the tick while the key is held
        return action in (Action.LEFT, Action.RIGHT)

    def on_tick(self) -> None:
        direction = int(self.is_held(Action.RIGHT)) - int(self.is_held(Action.LEFT))
        result = step(self.state, direction)
        self.state = result.state

        if result.level_cleared:
            logger.info(f"Breakout level {result.state.level - 1} cleared")
            self.context.event_bus.emit(notification_event(
                f"Level {result.state.level - 1} Complete!",
                f"+{LEVEL_BONUS} bonus points!",
                source=self.key,
            ))

        if result.life_lost and result.state.lives <= 0:
            self.finish(GameStatus.GAME_OVER)

    def points_earned(self, status: GameStatus) -> int:
        return self.score // 15

    def award_reason(self, status: GameStatus) -> str:
        return f"Breakout - scored {self.score} points"

    def result_data(self) -> dict:
        return {"level": self.state.level, "lives": self.state.lives}

    def status_text(self) -> str:
        return (
            f"{super().status_text()}  Lives {self.state.lives}  Level {self.state.level}"
        )

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (26, 26, 46))
        for brick in self.state.bricks:
            if brick.destroyed:
                continue
            color = BRICK_COLORS[brick.row % len(BRICK_COLORS)]
            draw_rect(buffer, brick.x, brick.y, BRICK_WIDTH, BRICK_HEIGHT, color)

        draw_rect(buffer, self.state.paddle_x, PADDLE_Y, PADDLE_WIDTH, PADDLE_HEIGHT, (231, 76, 60))

        ball = self.state.ball
        half = BALL_SIZE / 2
        draw_circle(buffer, ball.x + half, ball.y + half, half, (241, 196, 15))
