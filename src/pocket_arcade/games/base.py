"""Base class for all arcade mini-games."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple
import logging

from pocket_arcade.config.settings import GameSettings, Settings
from pocket_arcade.core.events import Event, EventBus, EventType
from pocket_arcade.core.input import (
    DEFAULT_BINDINGS,
    Action,
    event_key,
    map_key,
    tap_index,
)
from pocket_arcade.core.rng import RandomSource, create_random
from pocket_arcade.core.scheduler import Scheduler
from pocket_arcade.core.state import GameStatus, SessionStateMachine
from pocket_arcade.graphics.primitives import Buffer, create_buffer
from pocket_arcade.wallet.awards import AwardDispatcher
from pocket_arcade.wallet.best_scores import BestScoreStore
from pocket_arcade.wallet.demo import DemoContext

logger = logging.getLogger(__name__)

# Timer group for the fixed-rate simulation tick
PLAY_GROUP = "play"

# Actions that stay active while their key is held down
HOLDABLE = (Action.LEFT, Action.RIGHT, Action.UP, Action.DOWN)

# (x, y, text)
Label = Tuple[float, float, str]


@dataclass
class GameContext:
    """Collaborators shared by every game session."""

    event_bus: EventBus
    rng: RandomSource = field(default_factory=create_random)
    awards: Optional[AwardDispatcher] = None
    best_scores: BestScoreStore = field(default_factory=BestScoreStore)
    settings: Optional[Settings] = None
    demo: DemoContext = field(default_factory=DemoContext)

    @property
    def games(self) -> GameSettings:
        """Game tunables, defaults when no settings were supplied."""
        if self.settings is None:
            return GameSettings()
        return self.settings.games


@dataclass
class GameResult:
    """Outcome of a finished session."""

    game_key: str
    status: GameStatus
    score: int = 0
    moves: int = 0
    points_earned: int = 0
    best_score: Optional[int] = None
    new_best: bool = False
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def won(self) -> bool:
        return self.status == GameStatus.VICTORY


class BaseGame(ABC):
    """Abstract base for one mini-game session.

    The session owns a status machine, a scheduler and one immutable state
    value. Input and timer callbacks both run on the host loop and replace
    ``self.state`` in a single assignment, so a session has exactly one
    writer.

    Lifecycle:
        1. start() - WAITING -> PLAYING, build the arena, arm timers
        2. update(delta_ms) / handle_input(event) - transitions
        3. finish(status) - terminal status, award, best score
        4. reset() - cancel timers, discard state, back to WAITING
    """

    # Game metadata (override in subclasses)
    key: str = "base"
    display_name: str = "Base Game"
    description: str = "Base game class"
    icon: str = "?"

    best_score_key: Optional[str] = None
    lower_is_better: bool = False

    # Fixed tick interval, None for event-driven games
    tick_ms: Optional[float] = None

    # Drawing surface (width, height)
    CANVAS: Tuple[int, int] = (400, 400)
    KEY_BINDINGS: Mapping[str, Action] = DEFAULT_BINDINGS

    def __init__(self, context: GameContext):
        self.context = context
        self.rng = context.rng
        self.scheduler = Scheduler(name=self.key)
        self.machine = SessionStateMachine(name=self.display_name)
        self.machine.add_listener(self._on_status_changed)
        self.state = self.initial_state()

        self._held: Set[Action] = set()
        self._result: Optional[GameResult] = None
        self._on_complete: Optional[Callable[[GameResult], None]] = None

        logger.debug(f"Game created: {self.key}")

    # Properties
    @property
    def status(self) -> GameStatus:
        return self.machine.status

    @property
    def score(self) -> int:
        return getattr(self.state, "score", 0)

    @property
    def moves(self) -> int:
        return getattr(self.state, "moves", 0)

    @property
    def result(self) -> Optional[GameResult]:
        """Result of the last finished session, None while running."""
        return self._result

    @property
    def best_score(self) -> Optional[int]:
        if self.best_score_key is None or not self.context.best_scores.has(self.best_score_key):
            return None
        return self.context.best_scores.read(self.best_score_key)

    def is_held(self, action: Action) -> bool:
        return action in self._held

    def set_on_complete(self, callback: Callable[[GameResult], None]) -> None:
        """Set callback for when a session reaches a terminal status."""
        self._on_complete = callback

    # Lifecycle
    def start(self) -> bool:
        """Begin a session from WAITING. Returns False from any other status."""
        if not self.machine.transition(GameStatus.PLAYING):
            return False

        self._result = None
        self._held.clear()
        self.state = self.initial_state()
        self.on_start()

        if self.tick_ms and self.status.is_running:
            self.scheduler.call_every(self.tick_ms, self._tick, group=PLAY_GROUP)

        self.context.event_bus.emit(Event(
            EventType.GAME_STARTED,
            data={"game": self.key},
            source=self.key,
        ))
        return True

    def reset(self) -> None:
        """Discard the session and return to WAITING."""
        cancelled = self.scheduler.cancel_all()
        if cancelled:
            logger.debug(f"{self.key}: dropped {cancelled} pending timer(s)")
        self._held.clear()
        self.machine.reset()
        self.state = self.initial_state()

    def restart(self) -> bool:
        self.reset()
        return self.start()

    def update(self, delta_ms: float) -> None:
        """Advance session time; every due timer fires here."""
        self.scheduler.advance(delta_ms)

    def finish(self, status: GameStatus) -> Optional[GameResult]:
        """Enter a terminal status and settle the session.

        Cancels every timer, issues at most one award and submits the
        best score. Returns None if the transition was rejected.
        """
        if not status.is_terminal or not self.machine.transition(status):
            return None

        self.scheduler.cancel_all()
        self._held.clear()

        points = self.points_earned(status)
        if points > 0:
            self.award(points, self.award_reason(status))

        new_best = self.record_best(status)
        result = GameResult(
            game_key=self.key,
            status=status,
            score=self.score,
            moves=self.moves,
            points_earned=max(0, points),
            best_score=self.best_score,
            new_best=new_best,
            data=self.result_data(),
        )
        self._result = result

        self.context.event_bus.emit(Event(
            EventType.GAME_ENDED,
            data={
                "game": self.key,
                "status": status.name,
                "score": result.score,
                "points": result.points_earned,
                "new_best": new_best,
            },
            source=self.key,
        ))

        if self._on_complete:
            self._on_complete(result)
        return result

    # Input
    def handle_input(self, event: Event) -> bool:
        """Process an input event.

        Returns:
            True if the event changed something
        """
        if event.type == EventType.KEY_UP:
            action = map_key(event_key(event) or "", self.KEY_BINDINGS)
            if action in self._held:
                self._held.discard(action)
                return True
            return False

        if event.type == EventType.POINTER_TAP:
            index = tap_index(event)
            if index is None or self.status != GameStatus.PLAYING:
                return False
            return self.on_tap(index)

        if event.type != EventType.KEY_DOWN:
            return False

        key = event_key(event) or ""
        action = map_key(key, self.KEY_BINDINGS)

        if action == Action.RESET:
            self.reset()
            return True

        if action == Action.START:
            if self.status == GameStatus.WAITING:
                return self.start()
            if self.status.is_terminal:
                return self.restart()

        if self.status != GameStatus.PLAYING:
            return False

        if action is None:
            return self.on_key(key)

        if action in HOLDABLE:
            self._held.add(action)
        return self.on_action(action)

    def award(self, points: int, reason: str) -> bool:
        """Fire-and-forget award through the wallet collaborator."""
        if points <= 0 or self.context.awards is None:
            return False
        logger.info(f"{self.key}: awarding {points} points ({reason})")
        return self.context.awards.award(points, reason, source=self.key)

    # Abstract methods (must be implemented by subclasses)
    @abstractmethod
    def initial_state(self) -> Any:
        """State of a session that has not started yet."""

    @abstractmethod
    def on_start(self) -> None:
        """Build the arena once the session is PLAYING."""

    @abstractmethod
    def render(self, buffer: Buffer) -> None:
        """Draw the current state. Must not mutate it."""

    # Optional overrides
    def on_tick(self) -> None:
        """One fixed-rate simulation step while PLAYING."""

    def on_action(self, action: Action) -> bool:
        return False

    def on_key(self, key: str) -> bool:
        """Unbound key while PLAYING (digits, letters)."""
        return False

    def on_tap(self, index: int) -> bool:
        return False

    def cell_at(self, x: float, y: float) -> Optional[int]:
        """Tap index under a canvas position, None outside any target."""
        return None

    def points_earned(self, status: GameStatus) -> int:
        return 0

    def award_reason(self, status: GameStatus) -> str:
        return f"{self.display_name} - scored {self.score} points"

    def best_candidate(self, status: GameStatus) -> Optional[int]:
        """Value offered to the best-score store when a session ends."""
        return self.score

    def record_best(self, status: GameStatus) -> bool:
        if self.best_score_key is None:
            return False
        value = self.best_candidate(status)
        if value is None:
            return False
        updated = self.context.best_scores.submit(
            self.best_score_key, value, lower_is_better=self.lower_is_better
        )
        if updated:
            self.context.event_bus.emit(Event(
                EventType.BEST_SCORE_UPDATED,
                data={"game": self.key, "key": self.best_score_key, "value": value},
                source=self.key,
            ))
        return updated

    def result_data(self) -> Dict[str, Any]:
        return {}

    def labels(self) -> List[Label]:
        """Text drawn by the host on top of the frame, centred at canvas positions."""
        return []

    def status_text(self) -> str:
        """One-line HUD text."""
        label = {
            GameStatus.WAITING: "Press Enter to start",
            GameStatus.PLAYING: f"Score {self.score}",
            GameStatus.SHOWING: f"Score {self.score}  Watch...",
            GameStatus.GAME_OVER: f"Game Over! Score {self.score}",
            GameStatus.VICTORY: f"You win! Score {self.score}",
        }[self.status]
        return f"{self.display_name}  {label}"

    def create_frame(self) -> Buffer:
        width, height = self.CANVAS
        return create_buffer(width, height)

    # Internals
    def _tick(self) -> None:
        if self.status == GameStatus.PLAYING:
            self.on_tick()

    def _on_status_changed(self, old: GameStatus, new: GameStatus) -> None:
        self.context.event_bus.emit(Event(
            EventType.STATUS_CHANGED,
            data={"game": self.key, "old": old.name, "new": new.name},
            source=self.key,
        ))
