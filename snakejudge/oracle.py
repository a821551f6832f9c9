from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Sequence, Set

import numpy as np

from snakejudge.grid import BOARD_SIZE, NO_BARRIER, Vec2, in_bounds, neighbours


def snake_obstacles(snake: Sequence[Vec2]) -> Set[Vec2]:
    """Interior body cells only: the head moves away and the tail is dropped."""
    return set(snake[1:-1])


def barrier_cells(barriers: Iterable[Vec2]) -> Set[Vec2]:
    return {cell for cell in barriers if cell != NO_BARRIER and -1 not in cell}


def _blocked_grid(obstacles: Iterable[Vec2], size: int) -> np.ndarray:
    # Indexed [x, y] with a one-cell margin so board coordinates map directly.
    blocked = np.zeros((size + 2, size + 2), dtype=bool)
    for x, y in obstacles:
        if in_bounds((x, y), size):
            blocked[x, y] = True
    return blocked


def is_reachable(
    source: Vec2,
    target: Vec2,
    obstacles: Iterable[Vec2],
    size: int = BOARD_SIZE,
) -> bool:
    """Breadth-first search over the 4-connected board.

    Cells in ``obstacles`` and cells off the board are impassable. Only
    reachability is reported, never the path itself.
    """
    if source == target:
        return True
    if not in_bounds(source, size):
        return False

    seen = _blocked_grid(obstacles, size)
    seen[source] = True
    queue: Deque[Vec2] = deque([source])

    while queue:
        pos = queue.popleft()
        if pos == target:
            return True
        for nxt in neighbours(pos):
            if in_bounds(nxt, size) and not seen[nxt]:
                seen[nxt] = True
                queue.append(nxt)
    return False


def scenario_reachable(
    snake: Sequence[Vec2],
    food: Vec2,
    barriers: Iterable[Vec2],
    size: int = BOARD_SIZE,
) -> bool:
    obstacles = snake_obstacles(snake) | barrier_cells(barriers)
    return is_reachable(snake[0], food, obstacles, size)
