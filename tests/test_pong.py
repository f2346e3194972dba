import math
import random

import pytest

from emgpong.pong import Key, PongGame, Rect, SignalEvent, sine_events


class NeverReacts:
    def randrange(self, n):
        return n - 1


class AlwaysReacts:
    def randrange(self, n):
        return 0


def make_game(rng=None):
    return PongGame(rng if rng is not None else NeverReacts())


def test_initial_layout():
    game = make_game()
    assert game.p1 == Rect(135, 5, 80, 20)
    assert game.p2 == Rect(135, 300, 80, 20)
    assert game.ball == Rect(150, 150, 15, 15)
    assert (game.ball_dx, game.ball_dy) == (-3, -3)
    assert game.score == 0


def test_rect_moved_and_edges():
    r = Rect(1, 2, 10, 5).moved(3, -2)
    assert r == Rect(4, 0, 10, 5)
    assert r.right == 14
    assert r.bottom == 5


def test_rect_intersects():
    a = Rect(0, 0, 10, 10)
    assert a.intersects(Rect(5, 5, 10, 10))
    assert not a.intersects(Rect(10, 0, 5, 5))
    assert not a.intersects(Rect(20, 20, 1, 1))


def test_tick_moves_ball():
    game = make_game()
    assert game.tick() is None
    assert game.ball == Rect(147, 147, 15, 15)


def test_ball_bounces_off_side_wall():
    game = make_game()
    game.ball = Rect(1, 150, 15, 15)
    game.tick()
    assert game.ball_dx == 3
    assert game.ball.x == 4


def test_top_wall_scores_minus_one():
    game = make_game()
    game.ball = Rect(10, 1, 15, 15)
    goal = game.tick()
    assert goal == -1
    assert game.score == -1
    assert game.ball_dy == 3


def test_bottom_wall_scores_plus_one():
    game = make_game()
    game.ball = Rect(10, 304, 15, 15)
    game.ball_dy = 3
    goal = game.tick()
    assert goal == 1
    assert game.score == 1
    assert game.ball_dy == -3


def test_player_paddle_returns_ball():
    game = make_game()
    game.ball = Rect(150, 20, 15, 15)
    assert game.tick() is None
    assert game.ball_dy == 3


def test_paddle_stops_at_wall():
    game = make_game()
    game.p1 = Rect(0, 5, 80, 20)
    game.p1_direction = -5
    game.tick()
    assert game.p1_direction == 0
    assert game.p1.x == 0


def test_calculate_p2_direction():
    game = make_game()
    assert game.calculate_p2_direction() == 0
    game.ball = Rect(300, 150, 15, 15)
    assert game.calculate_p2_direction() == 5
    game.ball = Rect(50, 150, 15, 15)
    assert game.calculate_p2_direction() == -5


def test_computer_reacts_when_rng_allows():
    game = make_game(AlwaysReacts())
    game.ball = Rect(300, 150, 15, 15)
    game.tick()
    assert game.p2_direction == 5
    assert game.p2.x == 140


def test_udp_moves_toggle():
    game = make_game()
    game.p1_move_left()
    assert game.p1_direction == -2
    game.p1_move_left()
    assert game.p1_direction == 0
    game.p1_move_right()
    assert game.p1_direction == 2


def test_handle_udp_value_sign():
    game = make_game()
    game.handle_udp_value(-1.5)
    assert game.p1_direction == -2
    game.handle_udp_value(0.0)
    assert game.p1_direction == -2
    game.handle_udp_value(20.0)
    assert game.p1_direction == 0


def test_handle_key():
    game = make_game()
    assert game.handle_key(Key.LEFT) is True
    assert game.p1_direction == -5
    assert game.handle_key(Key.LEFT) is True
    assert game.p1_direction == 0
    game.handle_key(Key.RIGHT)
    assert game.p1_direction == 5


def test_handle_signal_event():
    game = make_game()
    assert game.handle_signal_event(SignalEvent(1, 0.5)) is True
    assert game.p1_direction == -5
    game.handle_signal_event(SignalEvent(1, 0.5))
    assert game.p1_direction == 0
    game.handle_signal_event(SignalEvent(1, -0.5))
    assert game.p1_direction == 5
    assert game.handle_signal_event(SignalEvent(1, 0.0)) is True
    assert game.p1_direction == 5


def test_add_score():
    game = make_game()
    game.add_score(1)
    game.add_score(-1)
    game.add_score(1)
    assert game.score == 1


def test_sine_events():
    events = list(sine_events(1000, 2))
    assert len(events) == 1000
    assert all(e.channel == 2 for e in events)
    assert events[0].value == 0.0
    assert all(-1.0 <= e.value <= 1.0 for e in events)
    assert events[1].value == pytest.approx(math.sin(0.005 * 3.1415926 / 2))


def test_long_run_invariants():
    game = PongGame(random.Random(1))
    goals = []
    for _ in range(3000):
        goal = game.tick()
        if goal is not None:
            goals.append(goal)
        assert 0 <= game.ball.x
        assert game.ball.right <= game.scene.right
        assert 0 <= game.p1.x
    assert game.score == sum(goals)
    assert goals