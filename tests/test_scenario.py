import pytest

from snakejudge.grid import NO_BARRIER, NUM_BARRIERS, in_bounds, neighbours
from snakejudge.oracle import scenario_reachable
from snakejudge.scenario import Scenario, ScenarioGenerator, fixed_scenarios


def test_reachable_scenarios_satisfy_oracle():
    generator = ScenarioGenerator(seed=7)
    for _ in range(200):
        scenario = generator.generate(reachable=True)
        assert len(scenario.barriers) == NUM_BARRIERS
        assert scenario_reachable(scenario.snake, scenario.foods[0], scenario.barriers)


def test_reachable_scenarios_never_share_cells():
    generator = ScenarioGenerator(seed=11)
    for _ in range(200):
        scenario = generator.generate(reachable=True, food_count=2)
        cells = list(scenario.snake) + list(scenario.foods)
        cells += [cell for cell in scenario.barriers if cell != NO_BARRIER]
        assert len(cells) == len(set(cells))


def test_unreachable_scenarios_wall_in_the_head():
    generator = ScenarioGenerator(seed=3)
    for _ in range(200):
        scenario = generator.generate(reachable=False)
        head = scenario.snake[0]
        for cell in neighbours(head):
            if in_bounds(cell):
                assert cell in scenario.barriers
        assert scenario.foods[0] not in scenario.barriers
        assert not scenario_reachable(scenario.snake, scenario.foods[0], scenario.barriers)


def test_snake_is_straight_and_in_bounds():
    generator = ScenarioGenerator(seed=5)
    for _ in range(100):
        snake = generator.random_snake()
        assert len(snake) == 4
        assert all(in_bounds(cell) for cell in snake)
        assert 3 <= snake[0][0] <= 6 and 3 <= snake[0][1] <= 6
        steps = {(a[0] - b[0], a[1] - b[1]) for a, b in zip(snake, snake[1:])}
        assert len(steps) == 1


def test_food_not_on_snake():
    generator = ScenarioGenerator(seed=42)
    for _ in range(100):
        scenario = generator.generate()
        assert scenario.foods[0] not in scenario.snake


def test_same_seed_same_scenarios():
    first = [ScenarioGenerator(seed=123).generate() for _ in range(3)]
    second = [ScenarioGenerator(seed=123).generate() for _ in range(3)]
    assert first == second


def test_exhausted_barrier_search_falls_back_to_empty_board():
    generator = ScenarioGenerator(seed=1, barrier_attempts=0)
    scenario = generator.generate(reachable=True)
    assert scenario.barriers == (NO_BARRIER,) * NUM_BARRIERS


def test_exhausted_slot_becomes_sentinel():
    generator = ScenarioGenerator(seed=1, slot_retries=0)
    scenario = generator.generate(reachable=True)
    assert scenario.barriers == (NO_BARRIER,) * NUM_BARRIERS


def test_board_too_small_is_rejected():
    with pytest.raises(ValueError):
        ScenarioGenerator(size=5)


def test_flat_round_trip():
    scenario = Scenario.from_flat([4, 4, 4, 3, 4, 2, 4, 1], [4, 5], [5, 4, -1, -1])
    assert scenario.flat() == ([4, 4, 4, 3, 4, 2, 4, 1], [4, 5], [5, 4, -1, -1])
    assert scenario.barriers == ((5, 4), NO_BARRIER)


def test_fixed_scenarios_match_their_reachability():
    for scenario in fixed_scenarios():
        assert scenario_reachable(scenario.snake, scenario.foods[0], scenario.barriers) is scenario.reachable
