from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field, replace
from time import perf_counter
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

from snakejudge.grid import (
    DIRECTIONS,
    SNAKE_LENGTH,
    Vec2,
    add_pos,
    flatten,
    in_bounds,
    is_direction,
)
from snakejudge.scenario import ScenarioError


@dataclass(frozen=True)
class ArenaMode:
    snakes: int
    size: int
    foods: int
    max_rounds: int


ARENA_MODES: Dict[str, ArenaMode] = {
    "1v1": ArenaMode(snakes=2, size=5, foods=5, max_rounds=50),
    "4p": ArenaMode(snakes=4, size=8, foods=10, max_rounds=100),
}


class ArenaPlayer(Protocol):
    def __call__(
        self,
        n: int,
        snake: List[int],
        snake_num: int,
        other_snakes: List[int],
        food_num: int,
        foods: List[int],
        round: int,
    ) -> int:
        ...


@dataclass(frozen=True)
class ArenaState:
    mode: str
    size: int
    food_num: int
    max_rounds: int
    seed: int
    players: Tuple[ArenaPlayer, ...]
    snakes: Tuple[Tuple[Vec2, ...], ...]
    foods: Tuple[Vec2, ...]
    scores: Tuple[int, ...]
    alive: Tuple[bool, ...]
    dead_round: Tuple[Optional[int], ...]
    elapsed: Tuple[float, ...]
    rng_state: tuple = field(repr=False)
    round: int = 0

    @property
    def snake_num(self) -> int:
        return len(self.snakes)


@dataclass(frozen=True)
class TurnReport:
    state: ArenaState
    warnings: List[str]
    errors: List[str]


@dataclass(frozen=True)
class FinalResults:
    scores: List[int]
    alive: List[bool]
    dead_round: List[Optional[int]]
    time: List[float]


class GameEngine(Protocol):
    def initialize(self, mode: str, participants: Sequence[Callable[..., int]], seed: int):
        ...

    def process_turn(self, state) -> TurnReport:
        ...

    def is_over(self, state) -> bool:
        ...

    def final_results(self, state) -> FinalResults:
        ...


def _free_cells(size: int, taken: Set[Vec2]) -> List[Vec2]:
    return [
        (x, y)
        for x in range(1, size + 1)
        for y in range(1, size + 1)
        if (x, y) not in taken
    ]


class ArenaEngine:
    """Simultaneous-move multi-snake game on a square board.

    Snakes keep their length. A snake dies when it answers with an invalid
    direction, raises, leaves the board, or ends the move with its head on
    any body cell (head-to-head included). Surviving snakes score a point
    per food eaten and eaten food is respawned on a free cell.
    """

    def __init__(self, clock: Callable[[], float] = perf_counter, max_attempts: int = 1000) -> None:
        self.clock = clock
        self.max_attempts = max_attempts

    def _place_snake(self, rng: random.Random, size: int, taken: Set[Vec2]) -> Tuple[Vec2, ...]:
        for _ in range(self.max_attempts):
            head = (rng.randint(1, size), rng.randint(1, size))
            dx, dy = rng.choice(list(DIRECTIONS.values()))
            body = tuple((head[0] - dx * i, head[1] - dy * i) for i in range(SNAKE_LENGTH))
            if all(in_bounds(cell, size) and cell not in taken for cell in body):
                return body
        raise ScenarioError(f"Could not place a snake on a {size}x{size} board")

    @staticmethod
    def _spawn_foods(rng: random.Random, size: int, foods: List[Vec2], count: int, taken: Set[Vec2]) -> None:
        free = _free_cells(size, taken | set(foods))
        while len(foods) < count and free:
            cell = free.pop(rng.randrange(len(free)))
            foods.append(cell)

    def initialize(self, mode: str, participants: Sequence[ArenaPlayer], seed: int) -> ArenaState:
        if mode not in ARENA_MODES:
            raise ValueError(f"Unknown arena mode {mode!r}; expected one of {sorted(ARENA_MODES)}")
        settings = ARENA_MODES[mode]
        if len(participants) != settings.snakes:
            raise ValueError(f"Mode {mode!r} needs {settings.snakes} participants, got {len(participants)}")

        rng = random.Random(seed)
        snakes: List[Tuple[Vec2, ...]] = []
        taken: Set[Vec2] = set()
        for _ in participants:
            body = self._place_snake(rng, settings.size, taken)
            snakes.append(body)
            taken.update(body)
        foods: List[Vec2] = []
        self._spawn_foods(rng, settings.size, foods, settings.foods, taken)

        count = len(participants)
        return ArenaState(
            mode=mode,
            size=settings.size,
            food_num=settings.foods,
            max_rounds=settings.max_rounds,
            seed=seed,
            players=tuple(participants),
            snakes=tuple(snakes),
            foods=tuple(foods),
            scores=(0,) * count,
            alive=(True,) * count,
            dead_round=(None,) * count,
            elapsed=(0.0,) * count,
            rng_state=rng.getstate(),
        )

    def _others(self, state: ArenaState, index: int) -> List[int]:
        others: List[int] = []
        for j, body in enumerate(state.snakes):
            if j == index:
                continue
            others.extend(flatten(body) if state.alive[j] else [-1] * (2 * SNAKE_LENGTH))
        return others

    def process_turn(self, state: ArenaState) -> TurnReport:
        rnd = state.round + 1
        warnings: List[str] = []
        errors: List[str] = []
        elapsed = list(state.elapsed)
        answers: Dict[int, Optional[int]] = {}

        for i, player in enumerate(state.players):
            if not state.alive[i]:
                continue
            start = self.clock()
            try:
                answers[i] = player(
                    state.size,
                    flatten(state.snakes[i]),
                    state.snake_num,
                    self._others(state, i),
                    len(state.foods),
                    flatten(state.foods),
                    rnd,
                )
            except Exception as exc:
                errors.append(f"Snake {i + 1} raised {exc!r} in round {rnd}")
                answers[i] = None
            finally:
                elapsed[i] += (self.clock() - start) * 1000.0

        snakes = list(state.snakes)
        dying: Set[int] = set()
        for i, direction in answers.items():
            if direction is None:
                dying.add(i)
                continue
            if not is_direction(direction):
                warnings.append(f"Snake {i + 1} returned invalid direction {direction!r} in round {rnd}")
                dying.add(i)
                continue
            head = add_pos(snakes[i][0], DIRECTIONS[direction])
            snakes[i] = (head,) + snakes[i][:-1]
            if not in_bounds(head, state.size):
                warnings.append(f"Snake {i + 1} left the board in round {rnd}")
                dying.add(i)

        movers = [i for i in answers if i not in dying]
        cells = Counter(cell for i in movers for cell in snakes[i])
        for i in movers:
            if cells[snakes[i][0]] > 1:
                warnings.append(f"Snake {i + 1} collided in round {rnd}")
                dying.add(i)

        alive = list(state.alive)
        dead_round = list(state.dead_round)
        for i in dying:
            alive[i] = False
            dead_round[i] = rnd

        scores = list(state.scores)
        foods = list(state.foods)
        for i in movers:
            if alive[i] and snakes[i][0] in foods:
                foods.remove(snakes[i][0])
                scores[i] += 1

        rng = random.Random()
        rng.setstate(state.rng_state)
        taken = {cell for i, body in enumerate(snakes) if alive[i] for cell in body}
        self._spawn_foods(rng, state.size, foods, state.food_num, taken)

        new_state = replace(
            state,
            round=rnd,
            snakes=tuple(snakes),
            foods=tuple(foods),
            scores=tuple(scores),
            alive=tuple(alive),
            dead_round=tuple(dead_round),
            elapsed=tuple(elapsed),
            rng_state=rng.getstate(),
        )
        return TurnReport(new_state, warnings, errors)

    def is_over(self, state: ArenaState) -> bool:
        return state.round >= state.max_rounds or not any(state.alive)

    def final_results(self, state: ArenaState) -> FinalResults:
        return FinalResults(
            scores=list(state.scores),
            alive=list(state.alive),
            dead_round=list(state.dead_round),
            time=list(state.elapsed),
        )
