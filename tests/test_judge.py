import argparse

import judge
from snakejudge.tournament import TrialRecord


def tournament_args(**overrides):
    values = dict(player=["a:b", "c:d"], mode="1v1", trials=3, seed=7, fixed_clock=True, quiet=False)
    values.update(overrides)
    return argparse.Namespace(**values)


def test_format_trial_lists_placings_in_rank_order():
    records = [
        TrialRecord(participant=0, score=2, time=0.5, alive=False, dead_round=12, rank=1),
        TrialRecord(participant=1, score=4, time=1.25, alive=True, dead_round=None, rank=0),
    ]
    line = judge.format_trial(0, records)
    assert line == "Game 1: 1. Snake 2 (4 pts, 1.250ms), 2. Snake 1 (2 pts, 0.500ms, died round 12)"


def test_fixed_clock_engine_charges_no_time():
    assert judge.make_engine(True).clock() == 0.0
    assert judge.make_engine(False).clock is not judge.zero_clock


def test_tournament_prints_every_game(greedy_player, monkeypatch, capsys):
    monkeypatch.setattr(judge, "load_player", lambda path: greedy_player)
    assert judge.tournament(tournament_args()) == 0
    out = capsys.readouterr().out
    assert "Game seed: 0x0000000000000007" in out
    games = [line for line in out.splitlines() if line.startswith("Game ") and "pts" in line]
    assert [line.split(":")[0] for line in games] == ["Game 1", "Game 2", "Game 3"]
    assert "=== 3 GAMES SUMMARY ===" in out


def test_fixed_clock_tournament_output_repeats(greedy_player, monkeypatch, capsys):
    monkeypatch.setattr(judge, "load_player", lambda path: greedy_player)
    judge.tournament(tournament_args(trials=5))
    first = capsys.readouterr().out
    judge.tournament(tournament_args(trials=5))
    assert capsys.readouterr().out == first


def test_quiet_tournament_skips_per_game_lines(greedy_player, monkeypatch, capsys):
    monkeypatch.setattr(judge, "load_player", lambda path: greedy_player)
    judge.tournament(tournament_args(quiet=True))
    out = capsys.readouterr().out
    assert not any("pts" in line for line in out.splitlines())
    assert "=== 3 GAMES SUMMARY ===" in out
