"""Simon Says - repeat an ever-growing colour sequence.

Playback runs in the SHOWING status; input is only accepted once the
sequence has been shown in full.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from pocket_arcade.core.events import notification_event
from pocket_arcade.core.input import ACTION_KEYS
from pocket_arcade.core.rng import pick_index
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame
from pocket_arcade.graphics.primitives import Buffer, dim, draw_rect, fill

PADS = ["red", "blue", "green", "yellow"]

STEP_INTERVAL_MS = 800
FLASH_MS = 600
PRESS_FLASH_MS = 200
NEXT_ROUND_DELAY_MS = 1000
REPLAY_DELAY_MS = 500

PLAYBACK_GROUP = "playback"
FLASH_GROUP = "flash"


@dataclass(frozen=True)
class SimonState:
    sequence: Tuple[int, ...] = ()
    step: int = 0
    round: int = 0
    score: int = 0
    lit: Tuple[int, ...] = ()


def add_step(state: SimonState, pad: int) -> SimonState:
    """Append one pad; the score grows by ten per previous round."""
    return replace(
        state,
        sequence=state.sequence + (pad,),
        round=state.round + 1,
        score=state.score + state.round * 10,
        step=0,
    )


class SimonSaysGame(BaseGame):
    key = "simon-says"
    display_name = "Simon Says"
    description = "Repeat the colour sequence"
    icon = "?"

    best_score_key = "simon-says-best-score"

    CELL = 150
    GAP = 20
    CANVAS = (2 * CELL + 3 * GAP, 2 * CELL + 3 * GAP)
    KEY_BINDINGS = dict(ACTION_KEYS)

    PAD_COLORS = [
        (239, 68, 68),
        (59, 130, 246),
        (34, 197, 94),
        (234, 179, 8),
    ]

    def initial_state(self) -> SimonState:
        return SimonState()

    def on_start(self) -> None:
        self._add_step()
        self.play_sequence()

    def _add_step(self) -> None:
        self.state = add_step(self.state, pick_index(self.rng, len(PADS)))

    def play_sequence(self) -> None:
        """Flash the whole sequence, one pad per interval, then hand over to the player."""
        if self.status == GameStatus.PLAYING:
            self.machine.transition(GameStatus.SHOWING)
        if self.status != GameStatus.SHOWING:
            return

        self.state = replace(self.state, step=0)
        for index, pad in enumerate(self.state.sequence):
            self.scheduler.call_later(
                (index + 1) * STEP_INTERVAL_MS,
                lambda pad=pad: self._flash(pad, FLASH_MS),
                group=PLAYBACK_GROUP,
            )
        self.scheduler.call_later(
            len(self.state.sequence) * STEP_INTERVAL_MS,
            self._await_player,
            group=PLAYBACK_GROUP,
        )

    def _await_player(self) -> None:
        if self.machine.transition(GameStatus.PLAYING):
            self.state = replace(self.state, step=0)

    def _flash(self, pad: int, duration_ms: float) -> None:
        self.state = replace(self.state, lit=self.state.lit + (pad,))
        self.scheduler.call_later(duration_ms, lambda: self._unflash(pad), group=FLASH_GROUP)

    def _unflash(self, pad: int) -> None:
        lit = list(self.state.lit)
        if pad in lit:
            lit.remove(pad)
        self.state = replace(self.state, lit=tuple(lit))

    def on_tap(self, index: int) -> bool:
        return self.press(index)

    def on_key(self, key: str) -> bool:
        if len(key) == 1 and key.isdigit() and 1 <= int(key) <= len(PADS):
            return self.press(int(key) - 1)
        return False

    def press(self, pad: int) -> bool:
        """Player presses a pad. Ignored unless PLAYING."""
        if self.status != GameStatus.PLAYING or not 0 <= pad < len(PADS):
            return False

        self._flash(pad, PRESS_FLASH_MS)
        state = self.state
        if pad != state.sequence[state.step]:
            self.context.event_bus.emit(notification_event(
                "Wrong Color!",
                f"You reached round {state.round}",
                variant="destructive",
                source=self.key,
            ))
            self.finish(GameStatus.GAME_OVER)
            return True

        step = state.step + 1
        self.state = replace(state, step=step)
        if step == len(state.sequence):
            self.context.event_bus.emit(notification_event(
                f"Round {state.round} Complete!",
                "Watch the new sequence!",
                source=self.key,
            ))
            self.machine.transition(GameStatus.SHOWING)
            self.scheduler.call_later(NEXT_ROUND_DELAY_MS, self._next_round, group=PLAYBACK_GROUP)
        return True

    def _next_round(self) -> None:
        self._add_step()
        self.scheduler.call_later(REPLAY_DELAY_MS, self.play_sequence, group=PLAYBACK_GROUP)

    def points_earned(self, status: GameStatus) -> int:
        return self.score // 6

    def award_reason(self, status: GameStatus) -> str:
        return f"Simon Says - reached round {self.state.round}"

    def result_data(self) -> dict:
        return {"round": self.state.round, "sequence": [PADS[p] for p in self.state.sequence]}

    def status_text(self) -> str:
        if self.status == GameStatus.SHOWING:
            return f"{self.display_name}  Round {self.state.round}  Watch the sequence..."
        if self.status == GameStatus.PLAYING:
            return (
                f"{self.display_name}  Round {self.state.round}  Your turn "
                f"({self.state.step}/{len(self.state.sequence)})  Score {self.score}"
            )
        return super().status_text()

    def cell_at(self, x: float, y: float) -> Optional[int]:
        pitch = self.CELL + self.GAP
        col = int((x - self.GAP) // pitch)
        row = int((y - self.GAP) // pitch)
        if not (0 <= col < 2 and 0 <= row < 2):
            return None
        return row * 2 + col

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (17, 24, 39))
        for pad, color in enumerate(self.PAD_COLORS):
            row, col = divmod(pad, 2)
            x = self.GAP + col * (self.CELL + self.GAP)
            y = self.GAP + row * (self.CELL + self.GAP)
            shade = color if pad in self.state.lit else dim(color, 0.45)
            draw_rect(buffer, x, y, self.CELL, self.CELL, shade)
