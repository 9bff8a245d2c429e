"""Snake - classic grid snake on a 20x20 board."""

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple

from pocket_arcade.core.input import ACTION_KEYS, ARROWS_ONLY, DIRECTION_VECTORS, Action
from pocket_arcade.core.rng import RandomSource, pick
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame
from pocket_arcade.graphics.primitives import Buffer, draw_rect, fill

GRID_SIZE = 20
FOOD_SCORE = 10

Cell = Tuple[int, int]


@dataclass(frozen=True)
class SnakeState:
    snake: Tuple[Cell, ...] = ((10, 10),)
    food: Optional[Cell] = (15, 15)
    direction: Cell = (0, 0)
    next_direction: Cell = (0, 0)
    score: int = 0


class StepResult(NamedTuple):
    state: SnakeState
    ate: bool
    collided: bool


def free_cells(snake: Tuple[Cell, ...], size: int = GRID_SIZE) -> list:
    occupied = set(snake)
    return [(x, y) for y in range(size) for x in range(size) if (x, y) not in occupied]


def generate_food(snake: Tuple[Cell, ...], rng: RandomSource, size: int = GRID_SIZE) -> Optional[Cell]:
    """Uniform random free cell, None once the snake fills the board."""
    cells = free_cells(snake, size)
    if not cells:
        return None
    return pick(rng, cells)


def is_reversal(current: Cell, new: Cell) -> bool:
    return current != (0, 0) and new == (-current[0], -current[1])


def step(state: SnakeState, rng: RandomSource, size: int = GRID_SIZE) -> StepResult:
    """Move the snake one cell in its pending direction."""
    direction = state.next_direction
    head_x, head_y = state.snake[0]
    head = (head_x + direction[0], head_y + direction[1])

    if not (0 <= head[0] < size and 0 <= head[1] < size):
        return StepResult(state, ate=False, collided=True)
    if head in state.snake:
        return StepResult(state, ate=False, collided=True)

    if head == state.food:
        snake = (head,) + state.snake
        new_state = replace(
            state,
            snake=snake,
            food=generate_food(snake, rng, size),
            direction=direction,
            score=state.score + FOOD_SCORE,
        )
        return StepResult(new_state, ate=True, collided=False)

    snake = (head,) + state.snake[:-1]
    return StepResult(replace(state, snake=snake, direction=direction), ate=False, collided=False)


class SnakeGame(BaseGame):
    key = "snake"
    display_name = "Snake"
    description = "Eat the food, avoid the walls and your own tail"
    icon = "S"

    best_score_key = "snake-best-score"
    tick_ms = 150

    CELL = 20
    CANVAS = (GRID_SIZE * CELL, GRID_SIZE * CELL)
    KEY_BINDINGS = {**ARROWS_ONLY, **ACTION_KEYS}

    def initial_state(self) -> SnakeState:
        return SnakeState()

    def on_start(self) -> None:
        snake = self.state.snake
        self.state = replace(
            self.state,
            food=generate_food(snake, self.rng),
            direction=(1, 0),
            next_direction=(1, 0),
        )

    def on_action(self, action: Action) -> bool:
        vector = DIRECTION_VECTORS.get(action)
        if vector is None:
            return False
        return self.turn(vector)

    def turn(self, vector: Cell) -> bool:
        """Queue a new heading. Reversing into the last moved direction is ignored."""
        if self.status != GameStatus.PLAYING or is_reversal(self.state.direction, vector):
            return False
        self.state = replace(self.state, next_direction=vector)
        return True

    def on_tick(self) -> None:
        result = step(self.state, self.rng)
        if result.collided:
            self.finish(GameStatus.GAME_OVER)
            return
        self.state = result.state
        if result.state.food is None:
            self.finish(GameStatus.VICTORY)

    def points_earned(self, status: GameStatus) -> int:
        return self.score // 3

    def award_reason(self, status: GameStatus) -> str:
        return f"Snake game - scored {self.score} points"

    def result_data(self) -> dict:
        return {"length": len(self.state.snake)}

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (26, 26, 26))
        size = self.CELL - 2
        if self.state.food is not None:
            fx, fy = self.state.food
            draw_rect(buffer, fx * self.CELL, fy * self.CELL, size, size, (239, 68, 68))
        for index, (x, y) in enumerate(self.state.snake):
            color = (34, 197, 94) if index == 0 else (74, 222, 128)
            draw_rect(buffer, x * self.CELL, y * self.CELL, size, size, color)
