from __future__ import annotations

from enum import IntEnum
from numbers import Integral
from typing import Iterable, Iterator, List, Sequence, Tuple

Vec2 = Tuple[int, int]

BOARD_SIZE = 8
SNAKE_LENGTH = 4
NUM_BARRIERS = 12
MAX_TURNS = 200

NO_BARRIER: Vec2 = (-1, -1)
NO_PATH = -1


class Direction(IntEnum):
    UP = 0
    LEFT = 1
    DOWN = 2
    RIGHT = 3


DIRECTIONS = {
    Direction.UP: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.DOWN: (0, -1),
    Direction.RIGHT: (1, 0),
}


def add_pos(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


def in_bounds(pos: Vec2, size: int = BOARD_SIZE) -> bool:
    x, y = pos
    return 1 <= x <= size and 1 <= y <= size


def is_direction(code: int) -> bool:
    """True only for the four integer codes; bools and floats are rejected."""
    return isinstance(code, Integral) and not isinstance(code, bool) and code in (0, 1, 2, 3)


def neighbours(pos: Vec2) -> Iterator[Vec2]:
    """Orthogonal neighbours in direction-code order, bounds not checked."""
    for code in Direction:
        yield add_pos(pos, DIRECTIONS[code])


def pairs(flat: Sequence[int]) -> List[Vec2]:
    """Split a flat ``[x0, y0, x1, y1, ...]`` list into coordinates."""
    if len(flat) % 2:
        raise ValueError(f"Expected an even number of values, got {len(flat)}")
    return [(flat[i], flat[i + 1]) for i in range(0, len(flat), 2)]


def flatten(cells: Iterable[Vec2]) -> List[int]:
    return [v for cell in cells for v in cell]
