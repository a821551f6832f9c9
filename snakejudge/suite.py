from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from snakejudge.grid import BOARD_SIZE, MAX_TURNS
from snakejudge.match import DecisionFunction, MatchResult, run_match
from snakejudge.scenario import Scenario, ScenarioGenerator, fixed_scenarios
from snakejudge.simulator import Outcome

logger = logging.getLogger(__name__)


@dataclass
class SuiteReport:
    counts: Counter = field(default_factory=Counter)
    turns: List[int] = field(default_factory=list)
    failures: List[Tuple[Scenario, MatchResult]] = field(default_factory=list)
    cases: int = 0
    max_failures: int = 20

    def add(self, scenario: Scenario, result: MatchResult) -> None:
        self.cases += 1
        self.counts[result.outcome] += 1
        if result.outcome is Outcome.SUCCESS:
            self.turns.append(result.turns)
        expected = Outcome.SUCCESS if scenario.reachable else Outcome.UNREACHABLE_CONFIRMED
        if result.outcome is not expected and len(self.failures) < self.max_failures:
            self.failures.append((scenario, result))

    @property
    def failed(self) -> int:
        return self.cases - self.counts[Outcome.SUCCESS] - self.counts[Outcome.UNREACHABLE_CONFIRMED]

    @property
    def passed(self) -> bool:
        return self.cases > 0 and self.failed == 0

    def turn_stats(self) -> Dict[str, float]:
        if not self.turns:
            return {"mean": 0.0, "median": 0.0, "max": 0.0, "std": 0.0}
        arr = np.array(self.turns, dtype=np.float32)
        return {
            "mean": float(arr.mean()),
            "median": float(np.median(arr)),
            "max": float(arr.max()),
            "std": float(arr.std()),
        }


def check_scenario(
    decide: DecisionFunction,
    scenario: Scenario,
    max_turns: int = MAX_TURNS,
    size: int = BOARD_SIZE,
) -> MatchResult:
    """Like ``run_match`` but a raising decision function becomes an ERROR result."""
    try:
        return run_match(decide, scenario, max_turns=max_turns, size=size)
    except Exception as exc:
        logger.exception("Decision function raised on scenario %s", scenario)
        return MatchResult(Outcome.ERROR, 0, error=repr(exc))


def random_scenarios(
    reachable_cases: int,
    unreachable_cases: int,
    seed: Optional[int] = None,
    size: int = BOARD_SIZE,
    food_count: int = 1,
) -> Iterable[Scenario]:
    generator = ScenarioGenerator(size=size, seed=seed)
    for _ in range(reachable_cases):
        yield generator.generate(reachable=True, food_count=food_count)
    for _ in range(unreachable_cases):
        yield generator.generate(reachable=False, food_count=food_count)


def run_suite(
    decide: DecisionFunction,
    reachable_cases: int = 1000,
    unreachable_cases: int = 1000,
    seed: Optional[int] = None,
    max_turns: int = MAX_TURNS,
    include_fixed: bool = True,
    size: int = BOARD_SIZE,
) -> SuiteReport:
    """Run the regression scenarios and a batch of random ones against ``decide``."""
    report = SuiteReport()
    scenarios: List[Iterable[Scenario]] = []
    if include_fixed and size == BOARD_SIZE:
        scenarios.append(fixed_scenarios())
    scenarios.append(random_scenarios(reachable_cases, unreachable_cases, seed=seed, size=size))

    for batch in scenarios:
        for scenario in batch:
            result = check_scenario(decide, scenario, max_turns=max_turns, size=size)
            logger.debug("%s -> %s in %d turns", scenario, result.outcome.value, result.turns)
            report.add(scenario, result)
    return report
