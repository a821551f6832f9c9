from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Collection, Optional, Sequence, Tuple

from snakejudge.grid import BOARD_SIZE, DIRECTIONS, NO_PATH, Vec2, add_pos, in_bounds, is_direction


class Outcome(Enum):
    SUCCESS = "success"
    OUT_OF_BOUNDS = "out_of_bounds"
    HIT_BARRIER = "hit_barrier"
    TIMEOUT = "timeout"
    INVALID_DIRECTION = "invalid_direction"
    UNREACHABLE_CONFIRMED = "unreachable_confirmed"
    UNREACHABLE_VIOLATION = "unreachable_violation"
    ERROR = "error"


@dataclass(frozen=True)
class TurnResult:
    snake: Tuple[Vec2, ...]
    foods: Tuple[Vec2, ...]
    consumed: bool
    terminal: Optional[Outcome]


def apply_turn(
    snake: Sequence[Vec2],
    foods: Sequence[Vec2],
    barriers: Collection[Vec2],
    direction: int,
    size: int = BOARD_SIZE,
) -> TurnResult:
    """Move the snake one cell and classify the result.

    The snake keeps its length: the new head is prepended and the old tail
    dropped. Inputs are never modified.
    """
    if not is_direction(direction):
        return TurnResult(tuple(snake), tuple(foods), False, Outcome.INVALID_DIRECTION)

    new_head = add_pos(snake[0], DIRECTIONS[direction])
    new_snake = (new_head,) + tuple(snake[:-1])

    if not in_bounds(new_head, size):
        return TurnResult(new_snake, tuple(foods), False, Outcome.OUT_OF_BOUNDS)
    if new_head in barriers:
        return TurnResult(new_snake, tuple(foods), False, Outcome.HIT_BARRIER)

    remaining = list(foods)
    consumed = new_head in remaining
    if consumed:
        del remaining[remaining.index(new_head)]
    return TurnResult(new_snake, tuple(remaining), consumed, None)


def judge_unreachable(direction: int) -> Outcome:
    """A walled-in snake must answer ``NO_PATH`` straight away."""
    if direction == NO_PATH:
        return Outcome.UNREACHABLE_CONFIRMED
    return Outcome.UNREACHABLE_VIOLATION
