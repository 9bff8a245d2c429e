"""Core framework components for the arcade."""

from .state import GameStatus, SessionStateMachine
from .events import EventBus, Event, EventType
from .scheduler import Scheduler, TimerHandle

__all__ = [
    "GameStatus",
    "SessionStateMachine",
    "EventBus",
    "Event",
    "EventType",
    "Scheduler",
    "TimerHandle",
]
