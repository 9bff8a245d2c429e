"""
Session state machine shared by every mini-game.

States:
    WAITING: Session created, arena not yet initialized
    PLAYING: Accepting input and timer ticks
    SHOWING: Non-interactive playback between rounds (sequence games)
    GAME_OVER: Terminal, loss or time up
    VICTORY: Terminal, win condition reached

Any state may be reset back to WAITING.
"""

from enum import Enum, auto
from typing import Callable
import logging

from pocket_arcade.core.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Session states."""
    WAITING = auto()
    PLAYING = auto()
    SHOWING = auto()
    GAME_OVER = auto()
    VICTORY = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.GAME_OVER, GameStatus.VICTORY)

    @property
    def is_running(self) -> bool:
        return self in (GameStatus.PLAYING, GameStatus.SHOWING)


StatusListener = Callable[[GameStatus, GameStatus], None]


class SessionStateMachine:
    """
    Tracks the status of one game session.

    Transitions outside the table are rejected, so a session only
    ever moves forward along waiting -> playing -> terminal.
    """

    VALID_TRANSITIONS: list[tuple[GameStatus, GameStatus]] = [
        # From WAITING
        (GameStatus.WAITING, GameStatus.PLAYING),

        # From PLAYING
        (GameStatus.PLAYING, GameStatus.SHOWING),
        (GameStatus.PLAYING, GameStatus.GAME_OVER),
        (GameStatus.PLAYING, GameStatus.VICTORY),

        # From SHOWING
        (GameStatus.SHOWING, GameStatus.PLAYING),
        (GameStatus.SHOWING, GameStatus.GAME_OVER),

        # Reset
        (GameStatus.PLAYING, GameStatus.WAITING),
        (GameStatus.SHOWING, GameStatus.WAITING),
        (GameStatus.GAME_OVER, GameStatus.WAITING),
        (GameStatus.VICTORY, GameStatus.WAITING),
    ]

    def __init__(self, name: str = "session", initial: GameStatus = GameStatus.WAITING) -> None:
        self.name = name
        self._status = initial
        self._listeners: list[StatusListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)

    @property
    def status(self) -> GameStatus:
        """Get current status."""
        return self._status

    def can_transition(self, to_status: GameStatus) -> bool:
        """Check if transition to given status is valid."""
        return (self._status, to_status) in self._valid_transitions

    def transition(self, to_status: GameStatus) -> bool:
        """
        Attempt to transition to a new status.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_status):
            logger.warning(
                f"{self.name}: invalid transition {self._status.name} -> {to_status.name}"
            )
            return False

        old_status = self._status
        self._status = to_status
        logger.info(f"{self.name}: {old_status.name} -> {to_status.name}")

        for listener in list(self._listeners):
            try:
                listener(old_status, to_status)
            except Exception as e:
                logger.error(f"Error in status listener: {e}")

        return True

    def require_transition(self, to_status: GameStatus) -> None:
        """Transition or raise ``InvalidTransitionError``."""
        if not self.can_transition(to_status):
            raise InvalidTransitionError(self._status, to_status)
        self.transition(to_status)

    def reset(self) -> bool:
        """Return to WAITING. A session already waiting is left alone."""
        if self._status == GameStatus.WAITING:
            return False
        return self.transition(GameStatus.WAITING)

    def add_listener(self, callback: StatusListener) -> None:
        """Add a status change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StatusListener) -> None:
        """Remove a status change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
