from __future__ import annotations

from collections import deque

import pytest

from snakejudge.grid import (
    BOARD_SIZE,
    DIRECTIONS,
    NO_BARRIER,
    NO_PATH,
    Direction,
    add_pos,
    in_bounds,
    pairs,
)


def bfs_move(snake, foods, barriers):
    """Reference decision function: first step of a shortest path to any food."""
    body = pairs(snake)
    targets = set(pairs(foods))
    blocked = set(body[1:-1]) | {cell for cell in pairs(barriers) if cell != NO_BARRIER}
    head = body[0]
    queue = deque([(head, None)])
    seen = {head}
    while queue:
        pos, first = queue.popleft()
        if pos in targets:
            return NO_PATH if first is None else first
        for code in Direction:
            nxt = add_pos(pos, DIRECTIONS[code])
            if in_bounds(nxt, BOARD_SIZE) and nxt not in blocked and nxt not in seen:
                seen.add(nxt)
                queue.append((nxt, int(code) if first is None else first))
    return NO_PATH


def greedy_arena_player(n, snake, snake_num, other_snakes, food_num, foods, round):
    head = (snake[0], snake[1])
    blocked = set(pairs(snake)[:-1]) | {cell for cell in pairs(other_snakes) if cell != NO_BARRIER}
    food_cells = pairs(foods)
    best = None
    for code in Direction:
        nxt = add_pos(head, DIRECTIONS[code])
        if not in_bounds(nxt, n) or nxt in blocked:
            continue
        dist = min((abs(nxt[0] - fx) + abs(nxt[1] - fy) for fx, fy in food_cells), default=0)
        if best is None or dist < best[0]:
            best = (dist, int(code))
    return best[1] if best else int(Direction.UP)


@pytest.fixture
def bfs_decide():
    return bfs_move


@pytest.fixture
def greedy_player():
    return greedy_arena_player
