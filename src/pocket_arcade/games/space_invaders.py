"""Space Invaders - shoot down the descending alien waves."""

import logging
from dataclasses import dataclass, replace
from typing import NamedTuple, Tuple

from pocket_arcade.core.events import notification_event
from pocket_arcade.core.input import ACTION_KEYS, ARROWS_ONLY, Action
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame
from pocket_arcade.graphics.primitives import Buffer, draw_rect, fill

logger = logging.getLogger(__name__)


# Game constants
CANVAS_WIDTH, CANVAS_HEIGHT = 600, 400
PLAYER_WIDTH = 30
PLAYER_HEIGHT = 20
PLAYER_SPEED = 5
BULLET_SPEED = 8
ALIEN_SPEED = 0.5
ALIEN_COLS = 8
MAX_ALIEN_ROWS = 6
ALIEN_SCORE = 10
WAVE_BONUS = 100
START_LIVES = 3
# Aliens below this line have reached the ship
INVASION_LINE = CANVAS_HEIGHT - 80


@dataclass(frozen=True)
class Bullet:
    x: float
    y: float


@dataclass(frozen=True)
class Alien:
    x: float
    y: float
    alive: bool = True

    def hit_by(self, bullet: Bullet) -> bool:
        return (
            self.alive
            and self.x - 15 < bullet.x < self.x + 30
            and self.y - 15 < bullet.y < self.y + 30
        )


@dataclass(frozen=True)
class InvadersState:
    player_x: float = CANVAS_WIDTH / 2 - PLAYER_WIDTH / 2
    player_y: float = CANVAS_HEIGHT - 40
    bullets: Tuple[Bullet, ...] = ()
    aliens: Tuple[Alien, ...] = ()
    score: int = 0
    lives: int = START_LIVES
    wave: int = 1


class TickResult(NamedTuple):
    state: InvadersState
    wave_cleared: bool
    life_lost: bool


def create_aliens(wave: int) -> Tuple[Alien, ...]:
    rows = min(3 + wave, MAX_ALIEN_ROWS)
    return tuple(
        Alien(x=60 + col * 60, y=50 + row * 40)
        for row in range(rows)
        for col in range(ALIEN_COLS)
    )


def move_player(x: float, direction: int) -> float:
    x = x + direction * PLAYER_SPEED
    return max(0.0, min(float(CANVAS_WIDTH - PLAYER_WIDTH), x))


def fire(state: InvadersState) -> InvadersState:
    bullet = Bullet(state.player_x + PLAYER_WIDTH / 2, state.player_y)
    return replace(state, bullets=state.bullets + (bullet,))


def step(state: InvadersState, direction: int = 0) -> TickResult:
    """One simulation tick. ``direction`` is -1, 0 or 1 for the held key."""
    player_x = move_player(state.player_x, direction) if direction else state.player_x

    bullets = [Bullet(b.x, b.y - BULLET_SPEED) for b in state.bullets]
    bullets = [b for b in bullets if b.y > 0]
    aliens = [replace(a, y=a.y + ALIEN_SPEED) for a in state.aliens]

    # Each bullet takes out at most one alien
    score = state.score
    survivors = []
    for bullet in bullets:
        for index, alien in enumerate(aliens):
            if alien.hit_by(bullet):
                aliens[index] = replace(alien, alive=False)
                score += ALIEN_SCORE
                break
        else:
            survivors.append(bullet)

    new_state = replace(
        state,
        player_x=player_x,
        bullets=tuple(survivors),
        aliens=tuple(aliens),
        score=score,
    )

    wave_cleared = not any(a.alive for a in aliens)
    if wave_cleared:
        wave = state.wave + 1
        new_state = replace(
            new_state,
            wave=wave,
            aliens=create_aliens(wave),
            score=new_state.score + WAVE_BONUS,
        )

    life_lost = any(a.alive and a.y > INVASION_LINE for a in new_state.aliens)
    if life_lost:
        lives = max(0, new_state.lives - 1)
        new_state = replace(new_state, lives=lives)
        if lives > 0:
            new_state = replace(new_state, aliens=create_aliens(new_state.wave))

    return TickResult(new_state, wave_cleared, life_lost)


class SpaceInvadersGame(BaseGame):
    key = "space-invaders"
    display_name = "Space Invaders"
    description = "Defend Earth from the alien waves"
    icon = "A"

    best_score_key = "space-invaders-best-score"
    tick_ms = 1000 / 60

    CANVAS = (CANVAS_WIDTH, CANVAS_HEIGHT)
    KEY_BINDINGS = {**ARROWS_ONLY, **ACTION_KEYS}

    def initial_state(self) -> InvadersState:
        return InvadersState()

    def on_start(self) -> None:
        self.state = InvadersState(aliens=create_aliens(1))

    def on_action(self, action: Action) -> bool:
        if action == Action.FIRE:
            self.state = fire(self.state)
            return True
        return action in (Action.LEFT, Action.RIGHT)

    def on_tick(self) -> None:
        direction = int(self.is_held(Action.RIGHT)) - int(self.is_held(Action.LEFT))
        result = step(self.state, direction)
        self.state = result.state

        if result.wave_cleared:
            logger.info(f"Space Invaders wave {result.state.wave - 1} cleared")
            self.context.event_bus.emit(notification_event(
                f"Wave {result.state.wave - 1} Complete!",
                f"+{WAVE_BONUS} bonus points!",
                source=self.key,
            ))

        if result.life_lost and result.state.lives <= 0:
            self.finish(GameStatus.GAME_OVER)

    def points_earned(self, status: GameStatus) -> int:
        return self.score // 10

    def award_reason(self, status: GameStatus) -> str:
        return f"Space Invaders - scored {self.score} points"

    def result_data(self) -> dict:
        return {"wave": self.state.wave, "lives": self.state.lives}

    def status_text(self) -> str:
        return f"{super().status_text()}  Lives {self.state.lives}  Wave {self.state.wave}"

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (0, 0, 17))

        state = self.state
        draw_rect(buffer, state.player_x, state.player_y, PLAYER_WIDTH, PLAYER_HEIGHT, (0, 255, 0))
        for bullet in state.bullets:
            draw_rect(buffer, bullet.x - 1, bullet.y - 5, 3, 10, (255, 255, 0))
        for alien in state.aliens:
            if alien.alive:
                draw_rect(buffer, alien.x, alien.y, 30, 20, (255, 0, 255))
