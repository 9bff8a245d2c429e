"""Tests for game registration, selection and event routing."""

import asyncio

import pytest

from pocket_arcade.core.errors import UnknownGameError
from pocket_arcade.core.events import Event, EventType, key_down_event, tap_event, tick_event
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games import GAME_REGISTRY, create_manager
from pocket_arcade.games.manager import ManagerState
from pocket_arcade.games.snake import SnakeGame


@pytest.fixture
def manager(make_context):
    manager = create_manager(make_context())
    yield manager
    manager.close()


class TestRegistry:
    def test_eight_games_in_order(self, manager) -> None:
        keys = [info.key for info in manager.available_games()]
        assert keys == [
            "snake",
            "2048",
            "breakout",
            "connect-four",
            "memory-match",
            "simon-says",
            "whack-a-mole",
            "space-invaders",
        ]
        assert len(GAME_REGISTRY) == 8

    def test_disabled_game_hidden(self, make_context) -> None:
        manager = create_manager(make_context(), subscribe=False)
        manager.register_game(SnakeGame, enabled=False)
        assert "snake" not in [info.key for info in manager.available_games()]
        with pytest.raises(UnknownGameError):
            manager.start_game("snake")

    def test_unknown_key(self, manager) -> None:
        with pytest.raises(UnknownGameError) as excinfo:
            manager.start_game("pong")
        assert "pong" in str(excinfo.value)


class TestSessions:
    def test_start_game(self, manager) -> None:
        game = manager.start_game("2048")
        assert manager.state == ManagerState.IN_GAME
        assert manager.current_game is game
        assert game.status == GameStatus.PLAYING

    def test_start_without_auto_start(self, manager) -> None:
        game = manager.start_game("snake", auto_start=False)
        assert game.status == GameStatus.WAITING

    def test_switching_games_cancels_previous(self, manager) -> None:
        snake = manager.start_game("snake")
        manager.start_game("memory-match")
        assert snake.status == GameStatus.WAITING
        assert snake.scheduler.pending() == 0

    def test_completion_is_recorded(self, manager) -> None:
        results = []
        manager.set_on_game_complete(results.append)
        game = manager.start_game("connect-four")
        game.finish(GameStatus.GAME_OVER)
        assert manager.last_result is results[0]
        assert results[0].game_key == "connect-four"


class TestRouting:
    def test_menu_navigation(self, manager, event_bus) -> None:
        event_bus.emit(key_down_event("ArrowRight"))
        assert manager.get_selected_game().key == "2048"
        event_bus.emit(key_down_event("Enter"))
        assert manager.current_game.key == "2048"

    def test_menu_wraps(self, manager) -> None:
        manager.select_previous()
        assert manager.get_selected_game().key == "space-invaders"

    def test_tick_reaches_active_game(self, manager, event_bus) -> None:
        game = manager.start_game("snake")
        event_bus.emit(tick_event(0.15, 1))
        assert game.state.snake == ((11, 10),)

    def test_taps_reach_active_game(self, manager, event_bus) -> None:
        game = manager.start_game("memory-match")
        event_bus.emit(tap_event(3))
        assert game.state.cards[3].flipped

    def test_backspace_returns_to_menu(self, manager, event_bus) -> None:
        game = manager.start_game("whack-a-mole")
        event_bus.emit(key_down_event("Backspace"))
        assert manager.state == ManagerState.MENU
        assert manager.current_game is None
        assert game.scheduler.pending() == 0

    def test_close_unsubscribes(self, make_context, event_bus) -> None:
        manager = create_manager(make_context())
        manager.close()
        event_bus.emit(key_down_event("Enter"))
        assert manager.current_game is None


class TestHostSurface:
    def test_menu_frame_and_labels(self, manager) -> None:
        frame = manager.create_frame()
        manager.render(frame)
        assert frame.shape == (400, 400, 3)
        assert [text for _, _, text in manager.labels()][0] == "Snake"
        assert "Snake" in manager.status_text()

    def test_game_frame(self, manager) -> None:
        manager.start_game("breakout")
        frame = manager.create_frame()
        manager.render(frame)
        assert frame.shape == (400, 600, 3)
        assert "Lives 3" in manager.status_text()


class TestBalance:
    def test_unknown_until_awarded(self, manager) -> None:
        assert manager.balance is None
        assert manager.balance_text() == ""

    def test_award_refreshes_balance(self, manager, event_bus, make_dispatcher) -> None:
        dispatcher, _ = make_dispatcher()

        async def run() -> None:
            dispatcher.award(25, "Snake game - scored 75 points", source="snake")
            await dispatcher.wait_idle()

        asyncio.run(run())

        assert manager.balance == 125
        assert manager.balance_text() == "125 pts"

    def test_award_without_balance_keeps_last(self, manager, event_bus) -> None:
        manager.balance = 900
        event_bus.emit(Event(EventType.POINTS_AWARDED, data={"amount": 5, "reason": "x", "balance": None}))
        assert manager.balance == 900
