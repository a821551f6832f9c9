from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from snakejudge.arena import FinalResults, GameEngine

logger = logging.getLogger(__name__)

SEED_MODULUS = 2 ** 64


@dataclass(frozen=True)
class TrialRecord:
    participant: int
    score: float
    time: float
    alive: bool
    dead_round: Optional[int]
    rank: int


def trial_seed(base_seed: int, index: int) -> int:
    """Per-trial seed, wrapped to 64 bits like the engine's seed register."""
    return (base_seed + index) % SEED_MODULUS


def rank_trial(results: FinalResults) -> List[TrialRecord]:
    """Order participants by score (high first), then compute time (low first)."""
    count = len(results.scores)
    order = sorted(range(count), key=lambda i: (-results.scores[i], results.time[i]))
    records = [None] * count
    for rank, i in enumerate(order):
        records[i] = TrialRecord(
            participant=i,
            score=results.scores[i],
            time=results.time[i],
            alive=results.alive[i],
            dead_round=results.dead_round[i],
            rank=rank,
        )
    return records


@dataclass
class Standings:
    participants: int
    wins: List[int] = field(default_factory=list)
    runner_ups: List[int] = field(default_factory=list)
    total_scores: List[float] = field(default_factory=list)
    total_time: List[float] = field(default_factory=list)
    points: List[int] = field(default_factory=list)
    trials: int = 0
    failed_trials: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in ("wins", "runner_ups", "total_scores", "total_time", "points"):
            values = getattr(self, name)
            if not values:
                setattr(self, name, [0] * self.participants)
            elif len(values) != self.participants:
                raise ValueError(f"{name} has {len(values)} entries for {self.participants} participants")

    def record(self, trial: Sequence[TrialRecord]) -> None:
        if len(trial) != self.participants:
            raise ValueError(f"Trial has {len(trial)} records for {self.participants} participants")
        if sorted(rec.participant for rec in trial) != list(range(self.participants)):
            raise ValueError("Trial records must cover every participant exactly once")
        for rec in trial:
            i = rec.participant
            if rec.rank == 0:
                self.wins[i] += 1
            elif rec.rank == 1:
                self.runner_ups[i] += 1
            self.total_scores[i] += rec.score
            self.total_time[i] += rec.time
            self.points[i] += self.participants - rec.rank
        self.trials += 1

    def merge(self, other: "Standings") -> "Standings":
        if other.participants != self.participants:
            raise ValueError("Cannot merge standings with different participant counts")
        return Standings(
            participants=self.participants,
            wins=[a + b for a, b in zip(self.wins, other.wins)],
            runner_ups=[a + b for a, b in zip(self.runner_ups, other.runner_ups)],
            total_scores=[a + b for a, b in zip(self.total_scores, other.total_scores)],
            total_time=[a + b for a, b in zip(self.total_time, other.total_time)],
            points=[a + b for a, b in zip(self.points, other.points)],
            trials=self.trials + other.trials,
            failed_trials=sorted(self.failed_trials + other.failed_trials),
        )

    def leaderboard(self) -> List[int]:
        """Participant indices by wins, then points; ties keep index order."""
        return sorted(range(self.participants), key=lambda i: (-self.wins[i], -self.points[i]))

    def summary(self) -> List[Dict[str, float]]:
        trials = max(self.trials, 1)
        avg_score = np.asarray(self.total_scores, dtype=np.float64) / trials
        avg_time = np.asarray(self.total_time, dtype=np.float64) / trials
        return [
            {
                "participant": i,
                "wins": self.wins[i],
                "runner_ups": self.runner_ups[i],
                "points": self.points[i],
                "avg_score": float(avg_score[i]),
                "avg_time": float(avg_time[i]),
            }
            for i in self.leaderboard()
        ]


def play_trial(
    engine: GameEngine,
    mode: str,
    participants: Sequence[Callable[..., int]],
    seed: int,
) -> List[TrialRecord]:
    state = engine.initialize(mode, participants, seed)
    while not engine.is_over(state):
        report = engine.process_turn(state)
        for warning in report.warnings:
            logger.warning("Seed %d: %s", seed, warning)
        for error in report.errors:
            logger.error("Seed %d: %s", seed, error)
        state = report.state
    return rank_trial(engine.final_results(state))


def run_tournament(
    engine: GameEngine,
    participants: Sequence[Callable[..., int]],
    mode: str,
    base_seed: int = 0,
    trials: int = 10000,
    on_trial: Optional[Callable[[int, List[TrialRecord]], None]] = None,
) -> Standings:
    """Play ``trials`` seeded games and accumulate the standings.

    A trial that raises is logged and skipped without touching the
    standings collected so far.
    """
    if not participants:
        raise ValueError("A tournament needs at least one participant")
    standings = Standings(participants=len(participants))
    for index in range(trials):
        seed = trial_seed(base_seed, index)
        try:
            records = play_trial(engine, mode, participants, seed)
            standings.record(records)
        except Exception:
            logger.exception("Trial %d (seed %#018x) failed", index, seed)
            standings.failed_trials.append(index)
            continue
        if on_trial is not None:
            try:
                on_trial(index, records)
            except Exception:
                logger.exception("Trial %d callback failed", index)
    return standings
