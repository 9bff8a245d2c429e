"""Tests for key and tap mapping."""

import pytest

from pocket_arcade.core.events import key_down_event, tap_event, tick_event
from pocket_arcade.core.input import (
    ARROWS_ONLY,
    DEFAULT_BINDINGS,
    Action,
    event_key,
    map_key,
    tap_index,
)


class TestMapKey:
    @pytest.mark.parametrize(
        "key,action",
        [
            ("ArrowLeft", Action.LEFT),
            ("a", Action.LEFT),
            ("A", Action.LEFT),
            ("d", Action.RIGHT),
            ("W", Action.UP),
            ("s", Action.DOWN),
            (" ", Action.FIRE),
            ("Enter", Action.START),
            ("Escape", Action.RESET),
            ("r", Action.RESET),
        ],
    )
    def test_default_bindings(self, key: str, action: Action) -> None:
        assert map_key(key) == action

    def test_unbound_key(self) -> None:
        assert map_key("x") is None

    def test_every_action_has_a_key(self) -> None:
        assert set(DEFAULT_BINDINGS.values()) == set(Action)

    def test_arrows_only_drops_wasd(self) -> None:
        assert map_key("ArrowUp", ARROWS_ONLY) == Action.UP
        assert map_key("w", ARROWS_ONLY) is None


class TestEventFields:
    def test_event_key(self) -> None:
        assert event_key(key_down_event("Enter")) == "Enter"
        assert event_key(tick_event(0.1, 0)) is None

    def test_tap_index(self) -> None:
        assert tap_index(tap_event(5)) == 5
        assert tap_index(key_down_event("5")) is None

    def test_tap_index_rejects_non_int(self) -> None:
        event = tap_event(0)
        event.data["index"] = True
        assert tap_index(event) is None
        event.data["index"] = "3"
        assert tap_index(event) is None
