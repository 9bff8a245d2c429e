"""Arcade manager - game registration, selection and event routing."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Type
import logging

from pocket_arcade.core.errors import UnknownGameError
from pocket_arcade.core.events import Event, EventBus, EventType
from pocket_arcade.core.input import Action, event_key, map_key
from pocket_arcade.games.base import BaseGame, GameContext, GameResult, Label
from pocket_arcade.graphics.primitives import Buffer, create_buffer, draw_rect, fill

logger = logging.getLogger(__name__)

# Leaves the running game for the selection menu
EXIT_KEY = "Backspace"

MENU_CANVAS = (400, 400)


class ManagerState(Enum):
    """Manager states."""
    MENU = auto()
    IN_GAME = auto()


@dataclass
class GameInfo:
    """Information about a registered game."""

    cls: Type[BaseGame]
    key: str
    display_name: str
    icon: str
    description: str
    enabled: bool = True


class ArcadeManager:
    """Owns the single active game session.

    Input Flow:
    - MENU: Left/Right to browse, Enter to start the selected game
    - IN_GAME: the game handles input, Backspace returns to the menu
    """

    def __init__(self, context: GameContext, subscribe: bool = True):
        self.context = context
        self.event_bus: EventBus = context.event_bus

        self._state = ManagerState.MENU
        self._registered: Dict[str, GameInfo] = {}
        self._order: List[str] = []
        self._selected_index = 0
        self._current: Optional[BaseGame] = None
        self._last_result: Optional[GameResult] = None
        self._balance: Optional[int] = None
        self._unsubscribers: List[Callable[[], None]] = []

        # Callbacks
        self._on_game_complete: Optional[Callable[[GameResult], None]] = None

        if subscribe:
            self._setup_event_handlers()

        logger.info("ArcadeManager initialized")

    def _setup_event_handlers(self) -> None:
        """Register event handlers."""
        for event_type, handler in (
            (EventType.KEY_DOWN, self._on_input),
            (EventType.KEY_UP, self._on_input),
            (EventType.POINTER_TAP, self._on_input),
            (EventType.TICK, self._on_tick),
            (EventType.POINTS_AWARDED, self._on_points_awarded),
        ):
            self._unsubscribers.append(self.event_bus.subscribe(event_type, handler))

    def close(self) -> None:
        """Detach from the event bus and drop the active game."""
        self.exit_game()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # Registration
    def register_game(self, game_cls: Type[BaseGame], enabled: bool = True) -> None:
        """Register a game class under its key."""
        info = GameInfo(
            cls=game_cls,
            key=game_cls.key,
            display_name=game_cls.display_name,
            icon=game_cls.icon,
            description=game_cls.description,
            enabled=enabled,
        )
        self._registered[game_cls.key] = info
        if enabled and game_cls.key not in self._order:
            self._order.append(game_cls.key)

        logger.info(f"Registered game: {game_cls.key} (enabled={enabled})")

    def available_games(self) -> List[GameInfo]:
        """Enabled games in arcade order."""
        return [
            self._registered[key]
            for key in self._order
            if key in self._registered and self._registered[key].enabled
        ]

    def get_selected_game(self) -> Optional[GameInfo]:
        games = self.available_games()
        if not games:
            return None
        return games[self._selected_index % len(games)]

    def select_next(self) -> None:
        self._selected_index += 1

    def select_previous(self) -> None:
        self._selected_index -= 1

    # State
    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def current_game(self) -> Optional[BaseGame]:
        return self._current

    @property
    def balance(self) -> Optional[int]:
        """Last known wallet balance, None until one has been read."""
        return self._balance

    @balance.setter
    def balance(self, value: Optional[int]) -> None:
        self._balance = value

    @property
    def last_result(self) -> Optional[GameResult]:
        return self._last_result

    def set_on_game_complete(self, callback: Callable[[GameResult], None]) -> None:
        self._on_game_complete = callback

    # Lifecycle
    def start_game(self, key: str, auto_start: bool = True) -> BaseGame:
        """Open a session of game ``key``, replacing any active one.

        Raises:
            UnknownGameError: no enabled game is registered under ``key``
        """
        info = self._registered.get(key)
        if info is None or not info.enabled:
            raise UnknownGameError(key)

        self.exit_game()

        game = info.cls(self.context)
        game.set_on_complete(self._on_game_complete_internal)
        self._current = game
        self._state = ManagerState.IN_GAME
        logger.info(f"Opened game: {key}")

        if auto_start:
            game.start()
        return game

    def exit_game(self) -> None:
        """Close the active session; its timers are cancelled first."""
        if self._current is None:
            return
        logger.info(f"Closing game: {self._current.key}")
        self._current.reset()
        self._current = None
        self._state = ManagerState.MENU

    def _on_game_complete_internal(self, result: GameResult) -> None:
        self._last_result = result
        logger.info(
            f"{result.game_key} finished: {result.status.name}, score {result.score}, "
            f"{result.points_earned} points"
        )
        if self._on_game_complete:
            self._on_game_complete(result)

    # Event routing
    def handle_event(self, event: Event) -> bool:
        """Route one input event. Returns True if it was consumed."""
        if self._current is not None:
            if event.type == EventType.KEY_DOWN and event_key(event) == EXIT_KEY:
                self.exit_game()
                return True
            return self._current.handle_input(event)

        if event.type != EventType.KEY_DOWN:
            return False

        action = map_key(event_key(event) or "")
        if action in (Action.LEFT, Action.UP):
            self.select_previous()
            return True
        if action in (Action.RIGHT, Action.DOWN):
            self.select_next()
            return True
        if action in (Action.START, Action.FIRE):
            selected = self.get_selected_game()
            if selected:
                self.start_game(selected.key)
                return True
        return False

    def _on_input(self, event: Event) -> None:
        self.handle_event(event)

    def _on_points_awarded(self, event: Event) -> None:
        balance = event.data.get("balance")
        if balance is not None:
            self._balance = balance
            logger.info(f"Balance now {balance} points")

    def _on_tick(self, event: Event) -> None:
        delta = event.data.get("delta", 0.0)
        self.update(delta * 1000.0)

    def update(self, delta_ms: float) -> None:
        """Advance the active game's clock."""
        if self._current is not None:
            self._current.update(delta_ms)

    # Rendering
    def create_frame(self) -> Buffer:
        if self._current is not None:
            return self._current.create_frame()
        return create_buffer(*MENU_CANVAS)

    def render(self, buffer: Buffer) -> None:
        if self._current is not None:
            self._current.render(buffer)
            return
        self._render_menu(buffer)

    def _menu_row_height(self, games: List[GameInfo]) -> int:
        return min(48, MENU_CANVAS[1] // max(1, len(games)))

    def _render_menu(self, buffer: Buffer) -> None:
        fill(buffer, (15, 23, 42))
        games = self.available_games()
        if not games:
            return
        selected = self.get_selected_game()
        row_height = self._menu_row_height(games)
        for index, info in enumerate(games):
            color = (99, 102, 241) if info is selected else (51, 65, 85)
            draw_rect(buffer, 20, index * row_height + 4, buffer.shape[1] - 40, row_height - 8, color)

    def labels(self) -> List[Label]:
        """Overlay text for the host, game labels or the menu entries."""
        if self._current is not None:
            return self._current.labels()
        games = self.available_games()
        row_height = self._menu_row_height(games)
        return [
            (MENU_CANVAS[0] / 2, index * row_height + row_height / 2, info.display_name)
            for index, info in enumerate(games)
        ]

    def balance_text(self) -> str:
        if self._balance is None:
            return ""
        return f"{self._balance} pts"

    def status_text(self) -> str:
        if self._current is not None:
            return self._current.status_text()
        selected = self.get_selected_game()
        if selected is None:
            return "No games registered"
        return f"< {selected.display_name} >  {selected.description}  (Enter to play)"
