from snakejudge.grid import Direction
from snakejudge.simulator import Outcome, apply_turn, judge_unreachable

SNAKE = ((4, 4), (4, 3), (4, 2), (4, 1))


def test_snake_moves_without_collision():
    result = apply_turn(SNAKE, [(1, 1)], set(), Direction.RIGHT)
    assert result.terminal is None
    assert result.snake == ((5, 4), (4, 4), (4, 3), (4, 2))
    assert result.foods == ((1, 1),)
    assert not result.consumed


def test_invalid_direction_leaves_state_untouched():
    for code in (-1, 4, 99):
        result = apply_turn(SNAKE, [(1, 1)], set(), code)
        assert result.terminal is Outcome.INVALID_DIRECTION
        assert result.snake == SNAKE
        assert result.foods == ((1, 1),)


def test_out_of_bounds():
    snake = ((1, 4), (1, 3), (1, 2), (1, 1))
    result = apply_turn(snake, [(5, 5)], set(), Direction.LEFT)
    assert result.terminal is Outcome.OUT_OF_BOUNDS


def test_hit_barrier():
    result = apply_turn(SNAKE, [(1, 1)], {(5, 4)}, Direction.RIGHT)
    assert result.terminal is Outcome.HIT_BARRIER


def test_bounds_checked_before_barriers():
    snake = ((8, 4), (7, 4), (6, 4), (5, 4))
    result = apply_turn(snake, [(1, 1)], {(9, 4)}, Direction.RIGHT)
    assert result.terminal is Outcome.OUT_OF_BOUNDS


def test_eating_removes_only_that_item_and_keeps_order():
    foods = [(2, 2), (4, 5), (7, 7)]
    result = apply_turn(SNAKE, foods, set(), Direction.UP)
    assert result.consumed
    assert result.foods == ((2, 2), (7, 7))
    assert len(result.snake) == 4
    assert foods == [(2, 2), (4, 5), (7, 7)]


def test_apply_turn_is_deterministic():
    args = (SNAKE, [(4, 5), (1, 1)], {(5, 4)}, Direction.UP)
    assert apply_turn(*args) == apply_turn(*args)


def test_judge_unreachable():
    assert judge_unreachable(-1) is Outcome.UNREACHABLE_CONFIRMED
    assert judge_unreachable(0) is Outcome.UNREACHABLE_VIOLATION
    assert judge_unreachable(7) is Outcome.UNREACHABLE_VIOLATION
