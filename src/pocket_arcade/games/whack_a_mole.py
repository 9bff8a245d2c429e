"""Whack-a-Mole - hit the moles before they duck, keep the combo going."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from pocket_arcade.core.events import notification_event
from pocket_arcade.core.input import ACTION_KEYS
from pocket_arcade.core.rng import RandomSource, chance, pick, uniform
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame
from pocket_arcade.graphics.primitives import Buffer, draw_circle, fill

HOLES = 9
GAME_TIME_S = 60
SPAWN_INTERVAL_MS = 800
SPAWN_CHANCE = 0.6
MOLE_MIN_MS = 1000
MOLE_MAX_MS = 3000
MOLE_TICK_MS = 100
HIT_SCORE = 10
COMBO_STEP = 5


@dataclass(frozen=True)
class Mole:
    active: bool = False
    time_left: float = 0


@dataclass(frozen=True)
class WhackState:
    moles: Tuple[Mole, ...] = tuple(Mole() for _ in range(HOLES))
    score: int = 0
    time_left: int = GAME_TIME_S
    combo: int = 0
    max_combo: int = 0


def multiplier(combo: int) -> int:
    """Score multiplier, one step up every five hits in a row."""
    return combo // COMBO_STEP + 1


def spawn(state: WhackState, rng: RandomSource) -> WhackState:
    """Maybe raise one mole from a random empty hole."""
    if not chance(rng, SPAWN_CHANCE):
        return state
    empty = [i for i, mole in enumerate(state.moles) if not mole.active]
    if not empty:
        return state
    hole = pick(rng, empty)
    duration = uniform(rng, MOLE_MIN_MS, MOLE_MAX_MS)
    return _set_mole(state, hole, Mole(active=True, time_left=duration))


def whack(state: WhackState, hole: int) -> WhackState:
    """Hit a hole. A miss resets the combo."""
    if not 0 <= hole < len(state.moles) or not state.moles[hole].active:
        return replace(state, combo=0)
    combo = state.combo + 1
    return replace(
        _set_mole(state, hole, Mole()),
        score=state.score + HIT_SCORE * multiplier(combo),
        combo=combo,
        max_combo=max(state.max_combo, combo),
    )


def age_moles(state: WhackState, elapsed_ms: float = MOLE_TICK_MS) -> WhackState:
    """Count down every raised mole; any that escape break the combo."""
    escaped = False
    moles = []
    for mole in state.moles:
        if not mole.active:
            moles.append(mole)
        elif mole.time_left <= elapsed_ms:
            escaped = True
            moles.append(Mole())
        else:
            moles.append(Mole(active=True, time_left=mole.time_left - elapsed_ms))
    return replace(state, moles=tuple(moles), combo=0 if escaped else state.combo)


def _set_mole(state: WhackState, hole: int, mole: Mole) -> WhackState:
    moles = state.moles[:hole] + (mole,) + state.moles[hole + 1:]
    return replace(state, moles=moles)


class WhackAMoleGame(BaseGame):
    key = "whack-a-mole"
    display_name = "Whack-a-Mole"
    description = "Whack the moles before they hide"
    icon = "W"

    best_score_key = "whack-a-mole-best-score"

    CELL = 110
    GAP = 15
    CANVAS = (3 * CELL + 4 * GAP, 3 * CELL + 4 * GAP)
    KEY_BINDINGS = dict(ACTION_KEYS)

    @property
    def game_time(self) -> int:
        return self.context.games.whack_time_s

    def initial_state(self) -> WhackState:
        return WhackState(time_left=self.game_time)

    def on_start(self) -> None:
        self.state = WhackState(time_left=self.game_time)
        self.scheduler.call_every(1000, self._countdown, group="clock")
        self.scheduler.call_every(SPAWN_INTERVAL_MS, self._spawn, group="spawn")
        self.scheduler.call_every(MOLE_TICK_MS, self._age, group="moles")

    def _countdown(self) -> None:
        time_left = max(0, self.state.time_left - 1)
        self.state = replace(self.state, time_left=time_left)
        if time_left == 0:
            self.finish(GameStatus.GAME_OVER)

    def _spawn(self) -> None:
        self.state = spawn(self.state, self.rng)

    def _age(self) -> None:
        self.state = age_moles(self.state)

    def on_tap(self, index: int) -> bool:
        return self.hit(index)

    def on_key(self, key: str) -> bool:
        # Number pad layout, 7-8-9 on the top row
        if len(key) == 1 and key in "123456789":
            digit = int(key)
            row = 2 - (digit - 1) // 3
            return self.hit(row * 3 + (digit - 1) % 3)
        return False

    def hit(self, hole: int) -> bool:
        if self.status != GameStatus.PLAYING or not 0 <= hole < HOLES:
            return False
        previous = self.state
        self.state = whack(previous, hole)

        combo = self.state.combo
        if combo > previous.max_combo and combo % COMBO_STEP == 0:
            self.context.event_bus.emit(notification_event(
                f"{combo} Hit Combo!",
                f"Score multiplier: x{multiplier(combo)}",
                source=self.key,
            ))
        return True

    def points_earned(self, status: GameStatus) -> int:
        return self.score // 8

    def award_reason(self, status: GameStatus) -> str:
        return f"Whack-a-Mole - scored {self.score} points"

    def result_data(self) -> dict:
        return {"max_combo": self.state.max_combo}

    def status_text(self) -> str:
        if self.status == GameStatus.PLAYING:
            return (
                f"{self.display_name}  Time {self.state.time_left}s  Score {self.score}  "
                f"Combo {self.state.combo}"
            )
        return super().status_text()

    def cell_at(self, x: float, y: float) -> Optional[int]:
        pitch = self.CELL + self.GAP
        col = int((x - self.GAP) // pitch)
        row = int((y - self.GAP) // pitch)
        if not (0 <= col < 3 and 0 <= row < 3):
            return None
        return row * 3 + col

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (101, 163, 13))
        radius = self.CELL / 2 - 6
        for hole, mole in enumerate(self.state.moles):
            row, col = divmod(hole, 3)
            cx = self.GAP + col * (self.CELL + self.GAP) + self.CELL / 2
            cy = self.GAP + row * (self.CELL + self.GAP) + self.CELL / 2
            draw_circle(buffer, cx, cy, radius, (68, 41, 22))
            if mole.active:
                draw_circle(buffer, cx, cy, radius * 0.7, (146, 98, 57))
