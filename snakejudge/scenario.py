from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from snakejudge.grid import (
    BOARD_SIZE,
    DIRECTIONS,
    NO_BARRIER,
    NUM_BARRIERS,
    SNAKE_LENGTH,
    Vec2,
    flatten,
    in_bounds,
    neighbours,
    pairs,
)
from snakejudge.oracle import scenario_reachable

logger = logging.getLogger(__name__)


class ScenarioError(RuntimeError):
    """Raised when random sampling cannot produce a valid layout."""


@dataclass(frozen=True)
class Scenario:
    snake: Tuple[Vec2, ...]
    foods: Tuple[Vec2, ...]
    barriers: Tuple[Vec2, ...]
    reachable: bool = True

    @classmethod
    def from_flat(
        cls,
        snake: List[int],
        foods: List[int],
        barriers: List[int],
        reachable: bool = True,
    ) -> "Scenario":
        return cls(tuple(pairs(snake)), tuple(pairs(foods)), tuple(pairs(barriers)), reachable)

    def flat(self) -> Tuple[List[int], List[int], List[int]]:
        """Fresh flattened copies in the decision function's argument order."""
        return flatten(self.snake), flatten(self.foods), flatten(self.barriers)


class ScenarioGenerator:
    """Seeded generator of single-snake scenarios with a known reachability."""

    def __init__(
        self,
        size: int = BOARD_SIZE,
        num_barriers: int = NUM_BARRIERS,
        seed: Optional[int] = None,
        barrier_attempts: int = 1000,
        slot_retries: int = 20,
        max_attempts: int = 1000,
    ) -> None:
        if size < SNAKE_LENGTH + 2:
            raise ValueError(f"Board size {size} is too small for a snake of length {SNAKE_LENGTH}")
        if num_barriers < 4:
            raise ValueError("At least 4 barrier slots are needed to wall in a snake head")
        self.size = size
        self.num_barriers = num_barriers
        self.barrier_attempts = barrier_attempts
        self.slot_retries = slot_retries
        self.max_attempts = max_attempts
        self.random = random.Random(seed)

    def _random_cell(self, low: int = 1, high: Optional[int] = None) -> Vec2:
        high = self.size if high is None else high
        return self.random.randint(low, high), self.random.randint(low, high)

    def random_snake(self) -> Tuple[Vec2, ...]:
        """Straight snake whose head has a two-cell margin from the edges."""
        for _ in range(self.max_attempts):
            head = self._random_cell(3, self.size - 2)
            dx, dy = self.random.choice(list(DIRECTIONS.values()))
            body = tuple((head[0] - dx * i, head[1] - dy * i) for i in range(SNAKE_LENGTH))
            if all(in_bounds(cell, self.size) for cell in body):
                return body
        raise ScenarioError(f"No in-bounds snake found after {self.max_attempts} attempts")

    def random_food(self, occupied: Iterable[Vec2]) -> Vec2:
        taken = set(occupied)
        available = [
            (x, y)
            for x in range(1, self.size + 1)
            for y in range(1, self.size + 1)
            if (x, y) not in taken
        ]
        if not available:
            raise ScenarioError("No free cell left for food")
        return self.random.choice(available)

    def _barrier_layout(self, used: Set[Vec2]) -> List[Vec2]:
        barriers: List[Vec2] = []
        for _ in range(self.num_barriers):
            for _ in range(self.slot_retries):
                cell = self._random_cell()
                if cell not in used:
                    used.add(cell)
                    barriers.append(cell)
                    break
            else:
                barriers.append(NO_BARRIER)
        return barriers

    def reachable_barriers(self, snake: Tuple[Vec2, ...], foods: Tuple[Vec2, ...]) -> Tuple[Vec2, ...]:
        """Random barriers that leave every food reachable from the head.

        Falls back to an empty layout once ``barrier_attempts`` is spent.
        """
        reserved = set(snake) | set(foods)
        for _ in range(self.barrier_attempts):
            barriers = self._barrier_layout(set(reserved))
            if all(scenario_reachable(snake, food, barriers, self.size) for food in foods):
                return tuple(barriers)
        logger.debug("No reachable barrier layout for snake %s, using an empty board", snake)
        return (NO_BARRIER,) * self.num_barriers

    def unreachable_barriers(self, snake: Tuple[Vec2, ...]) -> Tuple[Vec2, ...]:
        """Wall in every on-board neighbour of the head."""
        walls = [cell for cell in neighbours(snake[0]) if in_bounds(cell, self.size)]
        return tuple(walls) + (NO_BARRIER,) * (self.num_barriers - len(walls))

    def generate(self, reachable: bool = True, food_count: int = 1) -> Scenario:
        if food_count < 1:
            raise ValueError("A scenario needs at least one food item")
        snake = self.random_snake()
        # Walled-in scenarios keep food off the wall cells around the head.
        blocked = set(snake) if reachable else set(snake) | set(neighbours(snake[0]))
        foods: List[Vec2] = []
        for _ in range(food_count):
            foods.append(self.random_food(blocked | set(foods)))
        if reachable:
            barriers = self.reachable_barriers(snake, tuple(foods))
        else:
            barriers = self.unreachable_barriers(snake)
        return Scenario(snake, tuple(foods), barriers, reachable)


def fixed_scenarios() -> List[Scenario]:
    """Hand-written regression cases: two reachable, one walled off."""
    return [
        Scenario.from_flat(
            [4, 4, 4, 3, 4, 2, 4, 1],
            [4, 5],
            [5, 4, 8, 8, 8, 7, 8, 6, 8, 5, 8, 4, 8, 3, 8, 2, 8, 1, 7, 8, 7, 7, 7, 6],
        ),
        Scenario.from_flat(
            [1, 4, 1, 3, 1, 2, 1, 1],
            [5, 5],
            [2, 7, 2, 6, 3, 7, 3, 6, 4, 6, 5, 6, 6, 6, 7, 6, 4, 5, 4, 4, 4, 3, 5, 4],
        ),
        Scenario.from_flat(
            [1, 4, 1, 3, 1, 2, 1, 1],
            [1, 7],
            [2, 7, 2, 6, 3, 7, 3, 6, 4, 7, 4, 6, 5, 7, 5, 6, 1, 6, 6, 6, 7, 6, 8, 6],
            reachable=False,
        ),
    ]
