"""Memory Match - find all eight pairs before the clock runs out."""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from pocket_arcade.core.input import ACTION_KEYS
from pocket_arcade.core.rng import RandomSource, shuffled
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame, Label
from pocket_arcade.graphics.primitives import Buffer, draw_circle, draw_rect, fill

SYMBOLS = ["gamepad", "target", "dice", "circus", "palette", "masks", "guitar", "trumpet"]
GAME_TIME_S = 120
FLIP_BACK_MS = 1000

CLOCK_GROUP = "clock"
FLIP_GROUP = "flip"


@dataclass(frozen=True)
class Card:
    id: int
    symbol: str
    flipped: bool = False
    matched: bool = False


@dataclass(frozen=True)
class MemoryState:
    cards: Tuple[Card, ...] = ()
    pending: Tuple[int, ...] = ()  # positions of face-up, unresolved cards
    moves: int = 0
    matches: int = 0
    time_left: int = GAME_TIME_S

    @property
    def score(self) -> int:
        return max(0, self.matches * 10 + self.time_left - self.moves * 2)

    @property
    def all_matched(self) -> bool:
        return bool(self.cards) and all(card.matched for card in self.cards)


def create_cards(rng: RandomSource) -> Tuple[Card, ...]:
    pairs = []
    for index, symbol in enumerate(SYMBOLS):
        pairs.append(Card(id=index * 2, symbol=symbol))
        pairs.append(Card(id=index * 2 + 1, symbol=symbol))
    return tuple(shuffled(rng, pairs))


def _update(cards: Tuple[Card, ...], positions, **changes) -> Tuple[Card, ...]:
    return tuple(
        replace(card, **changes) if i in positions else card
        for i, card in enumerate(cards)
    )


class MemoryMatchGame(BaseGame):
    key = "memory-match"
    display_name = "Memory Match"
    description = "Flip cards and match the pairs"
    icon = "M"

    best_score_key = "memory-match-best-score"
    lower_is_better = True

    GRID = 4
    CELL = 80
    GAP = 10
    CANVAS = (GRID * CELL + (GRID + 1) * GAP, GRID * CELL + (GRID + 1) * GAP)
    KEY_BINDINGS = dict(ACTION_KEYS)

    SYMBOL_COLORS = {
        "gamepad": (99, 102, 241),
        "target": (239, 68, 68),
        "dice": (255, 255, 255),
        "circus": (236, 72, 153),
        "palette": (245, 158, 11),
        "masks": (168, 85, 247),
        "guitar": (234, 88, 12),
        "trumpet": (250, 204, 21),
    }

    @property
    def game_time(self) -> int:
        return self.context.games.memory_time_s

    def initial_state(self) -> MemoryState:
        return MemoryState(time_left=self.game_time)

    def on_start(self) -> None:
        self.state = MemoryState(cards=create_cards(self.rng), time_left=self.game_time)
        self.scheduler.call_every(1000, self._countdown, group=CLOCK_GROUP)

    def on_tap(self, index: int) -> bool:
        return self.flip(index)

    def flip(self, position: int) -> bool:
        """Turn a card face up. Anything not allowed right now is a no-op."""
        state = self.state
        if self.status != GameStatus.PLAYING or len(state.pending) >= 2:
            return False
        if not 0 <= position < len(state.cards):
            return False
        card = state.cards[position]
        if card.flipped or card.matched:
            return False

        cards = _update(state.cards, {position}, flipped=True)
        pending = state.pending + (position,)

        if len(pending) < 2:
            self.state = replace(state, cards=cards, pending=pending)
            return True

        first, second = pending
        moves = state.moves + 1
        if cards[first].symbol == cards[second].symbol:
            self.state = replace(
                state,
                cards=_update(cards, {first, second}, matched=True),
                pending=(),
                moves=moves,
                matches=state.matches + 1,
            )
            if self.state.all_matched:
                self.finish(GameStatus.VICTORY)
            return True

        self.state = replace(state, cards=cards, pending=pending, moves=moves)
        self.scheduler.call_later(FLIP_BACK_MS, self._flip_back, group=FLIP_GROUP)
        return True

    def _flip_back(self) -> None:
        state = self.state
        self.state = replace(
            state,
            cards=_update(state.cards, set(state.pending), flipped=False),
            pending=(),
        )

    def _countdown(self) -> None:
        time_left = max(0, self.state.time_left - 1)
        self.state = replace(self.state, time_left=time_left)
        if time_left == 0:
            self.finish(GameStatus.GAME_OVER)

    def points_earned(self, status: GameStatus) -> int:
        if status != GameStatus.VICTORY:
            return 0
        return max(1, 50 // max(1, self.moves))

    def award_reason(self, status: GameStatus) -> str:
        return f"Memory Match - completed in {self.moves} moves"

    def best_candidate(self, status: GameStatus) -> Optional[int]:
        # Fewest moves, only for a completed board
        return self.moves if status == GameStatus.VICTORY else None

    def result_data(self) -> dict:
        return {"matches": self.state.matches, "time_left": self.state.time_left}

    def status_text(self) -> str:
        if self.status == GameStatus.PLAYING:
            return (
                f"{self.display_name}  Time {self.state.time_left}s  "
                f"Moves {self.moves}  Matches {self.state.matches}/{len(SYMBOLS)}"
            )
        if self.status == GameStatus.GAME_OVER:
            return f"{self.display_name}  Time's up! Matches {self.state.matches}/{len(SYMBOLS)}"
        if self.status == GameStatus.VICTORY:
            return f"{self.display_name}  All pairs in {self.moves} moves! Score {self.score}"
        return super().status_text()

    def cell_at(self, x: float, y: float) -> Optional[int]:
        pitch = self.CELL + self.GAP
        col = int((x - self.GAP) // pitch)
        row = int((y - self.GAP) // pitch)
        if not (0 <= col < self.GRID and 0 <= row < self.GRID):
            return None
        # Gaps between cards are dead space
        if (x - self.GAP) % pitch >= self.CELL or (y - self.GAP) % pitch >= self.CELL:
            return None
        return row * self.GRID + col

    def labels(self) -> List[Label]:
        result = []
        for position, card in enumerate(self.state.cards):
            if not (card.flipped or card.matched):
                continue
            row, col = divmod(position, self.GRID)
            x = self.GAP + col * (self.CELL + self.GAP) + self.CELL / 2
            y = self.GAP + row * (self.CELL + self.GAP) + self.CELL - 12
            result.append((x, y, card.symbol))
        return result

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (30, 27, 75))
        for position, card in enumerate(self.state.cards):
            row, col = divmod(position, self.GRID)
            x = self.GAP + col * (self.CELL + self.GAP)
            y = self.GAP + row * (self.CELL + self.GAP)
            if card.matched:
                draw_rect(buffer, x, y, self.CELL, self.CELL, (22, 101, 52))
            elif card.flipped:
                draw_rect(buffer, x, y, self.CELL, self.CELL, (241, 245, 249))
            else:
                draw_rect(buffer, x, y, self.CELL, self.CELL, (79, 70, 229))
                continue
            color = self.SYMBOL_COLORS.get(card.symbol, (200, 200, 200))
            draw_circle(buffer, x + self.CELL / 2, y + self.CELL / 2, self.CELL / 4, color)
