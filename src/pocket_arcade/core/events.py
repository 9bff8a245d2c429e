"""
Event bus system for the arcade.

Provides pub/sub messaging between the host loop, the game manager
and the wallet collaborator, with async support.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Awaitable
from enum import Enum, auto
import asyncio
import inspect
import logging
import time
from collections import defaultdict

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Input events
    KEY_DOWN = auto()
    KEY_UP = auto()
    POINTER_TAP = auto()

    # Session events
    GAME_STARTED = auto()
    GAME_ENDED = auto()
    STATUS_CHANGED = auto()

    # Wallet events
    POINTS_AWARDED = auto()
    POINTS_AWARD_FAILED = auto()
    BEST_SCORE_UPDATED = auto()

    # User-visible toast
    NOTIFICATION = auto()

    # System events
    TICK = auto()  # Frame tick
    SHUTDOWN = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type (EventType enum or custom string)
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


# Type aliases for handlers
SyncHandler = Callable[[Event], None]
AsyncHandler = Callable[[Event], Awaitable[None]]
Handler = SyncHandler | AsyncHandler


class EventBus:
    """
    Central event bus for component communication.

    Supports both synchronous and asynchronous handlers.
    Events can be emitted immediately or queued for batch processing.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
        self._queue: asyncio.Queue[Event] | None = None
        self._event_history: list[Event] = []
        self._history_limit = history_limit

    @property
    def queue(self) -> asyncio.Queue[Event]:
        # Created lazily so the bus can be built outside a running loop
        if self._queue is None:
            self._queue = asyncio.Queue()
        return self._queue

    def subscribe(
        self,
        event_type: EventType | str,
        handler: Handler
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function (sync or async)

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to all events. Returns an unsubscribe function."""
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """
        Emit an event immediately (synchronous handlers only).

        For async handlers, use emit_async or queue_event.
        """
        self._add_to_history(event)
        self._dispatch_sync(event)

    async def emit_async(self, event: Event) -> None:
        """Emit an event and await all handlers (sync and async)."""
        self._add_to_history(event)
        await self._dispatch_async(event)

    def queue_event(self, event: Event) -> None:
        """Queue an event for later processing."""
        self.queue.put_nowait(event)

    async def process_queue(self) -> int:
        """Process all queued events. Returns the number processed."""
        processed = 0
        while not self.queue.empty():
            event = await self.queue.get()
            self._add_to_history(event)
            await self._dispatch_async(event)
            self.queue.task_done()
            processed += 1
        return processed

    def _dispatch_sync(self, event: Event) -> None:
        """Dispatch event to synchronous handlers only."""
        handlers = self._handlers.get(event.type, []) + self._global_handlers

        for handler in handlers:
            if inspect.iscoroutinefunction(handler):
                continue  # Skip async handlers
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")

    async def _dispatch_async(self, event: Event) -> None:
        """Dispatch event to all handlers (sync and async)."""
        handlers = self._handlers.get(event.type, []) + self._global_handlers

        tasks = []
        for handler in handlers:
            if inspect.iscoroutinefunction(handler):
                tasks.append(asyncio.create_task(handler(event)))
            else:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(f"Error in sync handler for {event.type}: {e}")

        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Error in async handler: {result}")

    def _add_to_history(self, event: Event) -> None:
        """Add event to history, maintaining limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = self._event_history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._event_history.clear()


# Convenience functions for creating common events
def key_down_event(key: str, source: str = "keyboard") -> Event:
    """Create a key-down event. ``key`` uses DOM key names (``ArrowLeft``, ``a``, `` ``)."""
    return Event(EventType.KEY_DOWN, data={"key": key}, source=source)


def key_up_event(key: str, source: str = "keyboard") -> Event:
    """Create a key-up event."""
    return Event(EventType.KEY_UP, data={"key": key}, source=source)


def tap_event(index: int, source: str = "pointer") -> Event:
    """Create a pointer/touch tap on a cell, column or button index."""
    return Event(EventType.POINTER_TAP, data={"index": index}, source=source)


def tick_event(delta: float, frame: int) -> Event:
    """Create a frame tick event (``delta`` in seconds)."""
    return Event(EventType.TICK, data={"delta": delta, "frame": frame})


def notification_event(title: str, description: str = "", variant: str = "default",
                       source: str = "system") -> Event:
    """Create a transient user-visible notification."""
    return Event(
        EventType.NOTIFICATION,
        data={"title": title, "description": description, "variant": variant},
        source=source,
    )
