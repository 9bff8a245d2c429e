"""Input mapping from raw key names to discrete game actions.

Key names follow the DOM ``KeyboardEvent.key`` convention used by the
web client (``ArrowLeft``, ``a``, ``A``, `` ``, ``Enter``). The pygame host
translates its key codes into the same names.
"""

from enum import Enum, auto
from typing import Dict, Mapping, Optional

from pocket_arcade.core.events import Event, EventType


class Action(Enum):
    """Discrete actions a game may accept."""

    LEFT = auto()
    RIGHT = auto()
    UP = auto()
    DOWN = auto()
    FIRE = auto()
    START = auto()
    RESET = auto()


KeyBindings = Mapping[str, Action]

# Arrow keys plus WASD in both cases
DIRECTION_KEYS: Dict[str, Action] = {
    "ArrowLeft": Action.LEFT,
    "a": Action.LEFT,
    "A": Action.LEFT,
    "ArrowRight": Action.RIGHT,
    "d": Action.RIGHT,
    "D": Action.RIGHT,
    "ArrowUp": Action.UP,
    "w": Action.UP,
    "W": Action.UP,
    "ArrowDown": Action.DOWN,
    "s": Action.DOWN,
    "S": Action.DOWN,
}

ACTION_KEYS: Dict[str, Action] = {
    " ": Action.FIRE,
    "Enter": Action.START,
    "Escape": Action.RESET,
    "r": Action.RESET,
    "R": Action.RESET,
}

ARROWS_ONLY: Dict[str, Action] = {
    key: action for key, action in DIRECTION_KEYS.items() if key.startswith("Arrow")
}

DEFAULT_BINDINGS: Dict[str, Action] = {**DIRECTION_KEYS, **ACTION_KEYS}

# Unit vectors in screen coordinates (y grows downwards)
DIRECTION_VECTORS: Dict[Action, tuple] = {
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
}


def map_key(key: str, bindings: KeyBindings = DEFAULT_BINDINGS) -> Optional[Action]:
    """Translate a key name, or None when the key is unbound."""
    return bindings.get(key)


def event_key(event: Event) -> Optional[str]:
    if event.type in (EventType.KEY_DOWN, EventType.KEY_UP):
        return event.data.get("key")
    return None


def tap_index(event: Event) -> Optional[int]:
    """Index carried by a POINTER_TAP event, or None."""
    if event.type != EventType.POINTER_TAP:
        return None
    index = event.data.get("index")
    if isinstance(index, bool) or not isinstance(index, int):
        return None
    return index
