from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Callable, List

from snakejudge.arena import ARENA_MODES, ArenaEngine
from snakejudge.grid import BOARD_SIZE, MAX_TURNS
from snakejudge.suite import run_suite
from snakejudge.tournament import TrialRecord, run_tournament


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Judge snake decision functions")
    parser.add_argument("--log-level", type=str, default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Run fixed and random scenarios against one decision function")
    check.add_argument("--player", type=str, required=True, help="Decision function as module:function")
    check.add_argument("--reachable", type=int, default=20000)
    check.add_argument("--unreachable", type=int, default=20000)
    check.add_argument("--max-turns", type=int, default=MAX_TURNS)
    check.add_argument("--grid", type=int, default=BOARD_SIZE)
    check.add_argument("--seed", type=int, default=None)

    tour = sub.add_parser("tournament", help="Rank several arena players over many seeded games")
    tour.add_argument("--player", type=str, action="append", required=True, help="Repeat once per snake")
    tour.add_argument("--mode", type=str, default="4p", choices=sorted(ARENA_MODES))
    tour.add_argument("--trials", type=int, default=10000)
    tour.add_argument("--seed", type=lambda s: int(s, 0), default=0, help="Base seed, decimal or 0x-prefixed")
    tour.add_argument(
        "--fixed-clock",
        action="store_true",
        help="Charge zero compute time to every player so results repeat exactly for a given seed",
    )
    tour.add_argument("--quiet", action="store_true", help="Only print the final summary")
    return parser.parse_args()


def load_player(path: str) -> Callable[..., int]:
    module_name, _, attr = path.partition(":")
    if not attr:
        raise ValueError(f"Expected module:function, got {path!r}")
    return getattr(importlib.import_module(module_name), attr)


def check(args: argparse.Namespace) -> int:
    decide = load_player(args.player)
    report = run_suite(
        decide,
        reachable_cases=args.reachable,
        unreachable_cases=args.unreachable,
        seed=args.seed,
        max_turns=args.max_turns,
        size=args.grid,
    )
    for outcome, count in sorted(report.counts.items(), key=lambda item: item[0].value):
        print(f"{outcome.value:>22}: {count}")
    stats = report.turn_stats()
    print(
        f"Turns to success - mean: {stats['mean']:.2f} median: {stats['median']:.2f} "
        f"max: {stats['max']:.0f} std: {stats['std']:.2f}"
    )
    for scenario, result in report.failures:
        snake, foods, barriers = scenario.flat()
        print(f"FAILED {result.outcome.value}: snake={snake} foods={foods} barriers={barriers}")
    print(f"{report.cases - report.failed}/{report.cases} cases passed")
    return 0 if report.passed else 1


def zero_clock() -> float:
    return 0.0


def make_engine(fixed_clock: bool) -> ArenaEngine:
    if fixed_clock:
        return ArenaEngine(clock=zero_clock)
    return ArenaEngine()


def format_trial(index: int, records: List[TrialRecord]) -> str:
    order = sorted(records, key=lambda rec: rec.rank)
    placings = ", ".join(
        f"{rec.rank + 1}. Snake {rec.participant + 1} ({rec.score:g} pts, {rec.time:.3f}ms"
        + ("" if rec.alive else f", died round {rec.dead_round}")
        + ")"
        for rec in order
    )
    return f"Game {index + 1}: {placings}"


def print_trial(index: int, records: List[TrialRecord]) -> None:
    print(format_trial(index, records))


def tournament(args: argparse.Namespace) -> int:
    players = [load_player(path) for path in args.player]
    mode = ARENA_MODES[args.mode]
    print(
        f"Starting {args.mode} mode with {mode.snakes} snakes, board size {mode.size}x{mode.size}, "
        f"{mode.foods} foods, {mode.max_rounds} rounds"
    )
    print(f"Game seed: {args.seed:#018x}")

    standings = run_tournament(
        make_engine(args.fixed_clock),
        players,
        args.mode,
        base_seed=args.seed,
        trials=args.trials,
        on_trial=None if args.quiet else print_trial,
    )

    print(f"\n=== {standings.trials} GAMES SUMMARY ===")
    for row in standings.summary():
        print(
            f"Snake {row['participant'] + 1}: {row['wins']} wins, {row['runner_ups']} runner-up, "
            f"{row['points']} points (avg score: {row['avg_score']:.2f}, avg time: {row['avg_time']:.3f}ms)"
        )
    if standings.failed_trials:
        print(f"{len(standings.failed_trials)} trials failed, see log for details")
    return 0


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    if args.command == "check":
        return check(args)
    return tournament(args)


if __name__ == "__main__":
    sys.exit(main())
