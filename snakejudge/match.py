from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from snakejudge.grid import BOARD_SIZE, MAX_TURNS, NO_BARRIER, SNAKE_LENGTH, flatten
from snakejudge.scenario import Scenario
from snakejudge.simulator import Outcome, apply_turn, judge_unreachable

# Numeric result codes; a successful match reports its turn count instead.
RESULT_CODES = {
    Outcome.OUT_OF_BOUNDS: -1,
    Outcome.HIT_BARRIER: -2,
    Outcome.TIMEOUT: -3,
    Outcome.INVALID_DIRECTION: -4,
    Outcome.UNREACHABLE_VIOLATION: -5,
    Outcome.UNREACHABLE_CONFIRMED: 1,
}


class DecisionFunction(Protocol):
    def __call__(self, snake: List[int], foods: List[int], barriers: List[int]) -> int:
        ...


@dataclass(frozen=True)
class MatchResult:
    outcome: Outcome
    turns: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.UNREACHABLE_CONFIRMED)

    @property
    def code(self) -> int:
        if self.outcome is Outcome.SUCCESS:
            return self.turns
        if self.outcome is Outcome.ERROR:
            raise ValueError("Errored matches have no numeric result code")
        return RESULT_CODES[self.outcome]


def run_match(
    decide: DecisionFunction,
    scenario: Scenario,
    max_turns: int = MAX_TURNS,
    size: int = BOARD_SIZE,
) -> MatchResult:
    """Play one scenario with ``decide`` until it ends.

    Exceptions raised by ``decide`` propagate to the caller.
    """
    if max_turns < 1:
        raise ValueError("max_turns must be positive")
    if len(scenario.snake) != SNAKE_LENGTH:
        raise ValueError(f"Expected a snake of {SNAKE_LENGTH} segments, got {len(scenario.snake)}")

    snake = scenario.snake
    foods = scenario.foods
    barriers = frozenset(cell for cell in scenario.barriers if cell != NO_BARRIER)
    flat_barriers = flatten(scenario.barriers)

    for turn in range(1, max_turns + 1):
        direction = decide(flatten(snake), flatten(foods), list(flat_barriers))

        if not scenario.reachable:
            return MatchResult(judge_unreachable(direction), turn)

        result = apply_turn(snake, foods, barriers, direction, size)
        if result.terminal is not None:
            return MatchResult(result.terminal, turn)
        if not result.foods:
            return MatchResult(Outcome.SUCCESS, turn)

        snake, foods = result.snake, result.foods

    return MatchResult(Outcome.TIMEOUT, max_turns)
