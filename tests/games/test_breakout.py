"""Tests for Breakout physics and level flow."""

import math
import random
from dataclasses import replace

import pytest

from pocket_arcade.core.events import EventType, key_down_event, key_up_event
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.breakout import (
    PADDLE_Y,
    Ball,
    BreakoutGame,
    BreakoutState,
    Brick,
    create_bricks,
    move_paddle,
    paddle_bounce,
    serve_ball,
    step,
)

TICK = 1000 / 60


class TestLayout:
    def test_brick_grid(self) -> None:
        bricks = create_bricks()
        assert len(bricks) == 45
        assert (bricks[0].x, bricks[0].y) == (35, 50)
        assert (bricks[-1].x, bricks[-1].y) == (555, 150)

    def test_serve_speeds_up_per_level(self) -> None:
        assert serve_ball(1) == Ball(300, 200, 3, -3)
        assert serve_ball(3) == Ball(300, 200, 5, -5)

    def test_paddle_is_clamped(self) -> None:
        assert move_paddle(2, -1) == 0
        assert move_paddle(518, 1) == 520


class TestPaddleBounce:
    def test_centre_goes_straight_up(self) -> None:
        ball = paddle_bounce(Ball(300, 365, 2, 3), paddle_x=260, level=1)
        assert ball.dx == pytest.approx(0)
        assert ball.dy == pytest.approx(-4)

    def test_edge_is_thirty_degrees(self) -> None:
        ball = paddle_bounce(Ball(260, 365, 2, 3), paddle_x=260, level=2)
        assert ball.dx == pytest.approx(-5 * math.sin(math.pi / 6))
        assert ball.dy == pytest.approx(-5 * math.cos(math.pi / 6))

    def test_offset_beyond_paddle_is_clamped(self) -> None:
        far = paddle_bounce(Ball(345, 365, 0, 3), paddle_x=260, level=1)
        edge = paddle_bounce(Ball(340, 365, 0, 3), paddle_x=260, level=1)
        assert far.dx == pytest.approx(edge.dx)


class TestStep:
    def test_left_wall_reflects(self) -> None:
        state = BreakoutState(ball=Ball(1, 200, -3, -3))
        ball = step(state).state.ball
        assert ball.x == 0 and ball.dx == 3

    def test_ceiling_reflects(self) -> None:
        state = BreakoutState(ball=Ball(100, 1, 3, -3))
        assert step(state).state.ball.dy == 3

    def test_paddle_contact(self) -> None:
        state = BreakoutState(paddle_x=260, ball=Ball(296, 362, 0, 3))
        ball = step(state).state.ball
        assert ball.y + 8 >= PADDLE_Y
        assert ball.dy < 0

    def test_destroys_one_brick(self) -> None:
        state = BreakoutState(bricks=create_bricks(), ball=Ball(40, 75, 0, -3))
        result = step(state)
        assert result.state.bricks_left == 44
        assert result.state.bricks[9].destroyed
        assert result.state.ball.dy == 3
        assert result.state.score == 10

    def test_only_first_overlapping_brick(self) -> None:
        state = BreakoutState(bricks=create_bricks(), ball=Ball(94, 80, 0, -1))
        result = step(state)
        assert result.state.bricks_left == 44

    def test_level_clear(self) -> None:
        state = BreakoutState(bricks=(Brick(35, 50, 0),), ball=Ball(40, 72, 0, -3), score=20)
        result = step(state)
        assert result.level_cleared
        assert result.state.level == 2
        assert result.state.bricks_left == 45
        assert result.state.score == 20 + 10 + 100
        assert result.state.ball == serve_ball(2)

    def test_ball_lost(self) -> None:
        state = BreakoutState(bricks=create_bricks(), ball=Ball(300, 399, 0, 3))
        result = step(state)
        assert result.life_lost
        assert result.state.lives == 2
        assert result.state.ball == serve_ball(1)


class TestBreakoutGame:
    def test_start_builds_wall(self, make_context) -> None:
        game = BreakoutGame(make_context())
        game.start()
        assert game.state.bricks_left == 45
        assert game.state.lives == 3

    def test_held_key_moves_paddle_every_tick(self, make_context) -> None:
        game = BreakoutGame(make_context())
        game.start()
        x = game.state.paddle_x

        game.handle_input(key_down_event("d"))
        game.update(TICK)
        game.update(TICK)
        assert game.state.paddle_x == x + 12

        game.handle_input(key_up_event("d"))
        game.update(TICK)
        assert game.state.paddle_x == x + 12

    def test_last_life_ends_game(self, make_context, awards) -> None:
        game = BreakoutGame(make_context())
        game.start()
        game.state = replace(game.state, lives=1, score=45, ball=Ball(300, 399, 0, 3))
        game.update(TICK)

        assert game.status == GameStatus.GAME_OVER
        assert game.state.lives == 0
        assert awards.calls == [(3, "Breakout - scored 45 points", "breakout")]

    def test_level_clear_notifies(self, make_context, event_bus) -> None:
        game = BreakoutGame(make_context())
        game.start()
        game.state = replace(game.state, bricks=(Brick(35, 50, 0),), ball=Ball(40, 72, 0, -3))
        game.update(TICK)

        titles = [e.data["title"] for e in event_bus.get_history(EventType.NOTIFICATION)]
        assert titles == ["Level 1 Complete!"]
        assert game.status == GameStatus.PLAYING


class TestLongRun:
    def test_counters_stay_non_negative(self, make_context) -> None:
        game = BreakoutGame(make_context())
        game.start()
        driver = random.Random(11)
        held = None

        for frame in range(20_000):
            if frame % 30 == 0:
                if held:
                    game.handle_input(key_up_event(held))
                held = driver.choice(["ArrowLeft", "ArrowRight", None])
                if held:
                    game.handle_input(key_down_event(held))
            game.update(TICK)
            assert game.score >= 0
            assert game.state.lives >= 0
            if game.status == GameStatus.GAME_OVER:
                break

        if game.status == GameStatus.PLAYING:
            game.state = replace(game.state, lives=1, ball=Ball(300, 399, 0, 3))
            game.update(TICK)
        assert game.status == GameStatus.GAME_OVER

        final = game.state
        for _ in range(120):
            game.update(TICK)
        assert game.state == final
        assert game.state.lives == 0
        assert game.score >= 0
