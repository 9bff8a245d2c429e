"""Tests for the shared session lifecycle, using Snake as the concrete game."""

from dataclasses import replace

from pocket_arcade.core.events import EventType, key_down_event, key_up_event, tap_event
from pocket_arcade.core.input import Action
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import PLAY_GROUP, GameContext
from pocket_arcade.games.snake import SnakeGame, SnakeState


class TestLifecycle:
    def test_start_only_from_waiting(self, make_context) -> None:
        game = SnakeGame(make_context())
        assert game.start()
        assert not game.start()
        assert game.scheduler.pending(PLAY_GROUP) == 1

    def test_start_emits_events(self, make_context, event_bus) -> None:
        game = SnakeGame(make_context())
        game.start()
        assert event_bus.get_history(EventType.GAME_STARTED)[-1].data == {"game": "snake"}
        change = event_bus.get_history(EventType.STATUS_CHANGED)[-1].data
        assert (change["old"], change["new"]) == ("WAITING", "PLAYING")

    def test_reset_cancels_timers_and_state(self, make_context) -> None:
        game = SnakeGame(make_context())
        game.start()
        game.update(300)
        game.reset()

        assert game.status == GameStatus.WAITING
        assert game.scheduler.pending() == 0
        assert game.state == SnakeState()
        game.update(10_000)
        assert game.state == SnakeState()

    def test_held_keys_cleared_on_reset(self, make_context) -> None:
        game = SnakeGame(make_context())
        game.start()
        game.handle_input(key_down_event("ArrowUp"))
        assert game.is_held(Action.UP)
        game.reset()
        assert not game.is_held(Action.UP)

    def test_key_up_releases(self, make_context) -> None:
        game = SnakeGame(make_context())
        game.start()
        game.handle_input(key_down_event("ArrowUp"))
        assert game.handle_input(key_up_event("ArrowUp"))
        assert not game.is_held(Action.UP)
        assert not game.handle_input(key_up_event("ArrowUp"))


class TestFinish:
    def test_finish_settles_once(self, make_context, awards, event_bus) -> None:
        completed = []
        game = SnakeGame(make_context())
        game.set_on_complete(completed.append)
        game.start()
        game.state = replace(game.state, score=60)

        result = game.finish(GameStatus.GAME_OVER)

        assert result is not None
        assert result.points_earned == 20
        assert result.new_best and result.best_score == 60
        assert game.finish(GameStatus.VICTORY) is None
        assert len(awards.calls) == 1
        assert completed == [result]
        ended = event_bus.get_history(EventType.GAME_ENDED)
        assert len(ended) == 1
        assert ended[0].data["points"] == 20

    def test_finish_rejects_non_terminal(self, make_context) -> None:
        game = SnakeGame(make_context())
        game.start()
        assert game.finish(GameStatus.SHOWING) is None
        assert game.status == GameStatus.PLAYING

    def test_zero_points_no_award(self, make_context, awards) -> None:
        game = SnakeGame(make_context())
        game.start()
        game.state = replace(game.state, score=2)
        game.finish(GameStatus.GAME_OVER)
        assert awards.calls == []

    def test_lower_score_keeps_best(self, make_context, score_store, event_bus) -> None:
        score_store.write("snake-best-score", 100)
        game = SnakeGame(make_context())
        game.start()
        game.state = replace(game.state, score=50)
        result = game.finish(GameStatus.GAME_OVER)

        assert not result.new_best
        assert score_store.read("snake-best-score") == 100
        assert event_bus.get_history(EventType.BEST_SCORE_UPDATED) == []

    def test_no_wallet_still_finishes(self, event_bus) -> None:
        game = SnakeGame(GameContext(event_bus=event_bus))
        game.start()
        game.state = replace(game.state, score=30)
        assert game.finish(GameStatus.GAME_OVER).points_earned == 10


class TestInputGating:
    def test_input_ignored_while_waiting(self, make_context) -> None:
        game = SnakeGame(make_context())
        assert not game.handle_input(key_down_event("ArrowUp"))
        assert not game.handle_input(tap_event(0))

    def test_enter_starts_and_restarts(self, make_context) -> None:
        game = SnakeGame(make_context())
        assert game.handle_input(key_down_event("Enter"))
        assert game.status == GameStatus.PLAYING

        game.finish(GameStatus.GAME_OVER)
        assert game.handle_input(key_down_event("Enter"))
        assert game.status == GameStatus.PLAYING
        assert game.result is None

    def test_escape_resets(self, make_context) -> None:
        game = SnakeGame(make_context())
        game.start()
        assert game.handle_input(key_down_event("Escape"))
        assert game.status == GameStatus.WAITING

    def test_input_ignored_after_game_over(self, make_context) -> None:
        game = SnakeGame(make_context())
        game.start()
        game.finish(GameStatus.GAME_OVER)
        state = game.state
        assert not game.handle_input(key_down_event("ArrowUp"))
        assert game.state is state


def test_frame_matches_canvas(make_context) -> None:
    game = SnakeGame(make_context())
    game.start()
    frame = game.create_frame()
    game.render(frame)
    assert frame.shape == (400, 400, 3)
    assert tuple(frame[0, 0]) == (239, 68, 68)
