import pytest

from scheduler import Direction, InvalidFloor
from simulation import Action, Controller, Simulation


@pytest.fixture
def simulation():
    return Simulation(Controller(0, 10, 0, door_dwell_ticks=1))


def test_run_until_idle_reports_ticks(simulation):
    simulation.submit_car_call(3)
    ticks = simulation.run_until_idle(50)

    assert ticks == 7
    assert simulation.current_time == 7
    assert simulation.controller.is_idle()
    assert simulation.controller.cab.current_floor == 3


def test_run_until_idle_respects_limit(simulation):
    simulation.submit_car_call(9)
    assert simulation.run_until_idle(3) == 3
    assert not simulation.controller.is_idle()


def test_run_until_idle_without_work_does_nothing(simulation):
    assert simulation.run_until_idle(10) == 0
    assert simulation.current_time == 0


def test_run_advances_time(simulation):
    simulation.run(4)
    assert simulation.current_time == 4


def test_step_returns_action(simulation):
    simulation.submit_car_call(0)
    assert simulation.step() == Action.OPEN_DOORS
    assert simulation.step() == Action.CLOSE_DOORS


def test_wait_times_measured_per_call(simulation):
    simulation.submit_car_call(3)
    simulation.submit_hall_call(3, Direction.UP)
    simulation.run_until_idle(50)

    metrics = simulation.metrics.snapshot(simulation.current_time)
    assert metrics.calls_served == 2
    assert metrics.average_wait == 4.0
    assert metrics.max_wait == 4
    assert metrics.stops == 1
    assert metrics.floors_travelled == 3


def test_resubmitted_call_keeps_first_submission_time(simulation):
    simulation.submit_car_call(5)
    simulation.run(2)
    simulation.submit_car_call(5)
    simulation.run_until_idle(50)
    assert simulation.metrics.wait_times == [6]


def test_stop_and_tick_events(simulation):
    stops = []
    ticks = []
    simulation.on_event("stop", stops.append)
    simulation.on_event("tick", ticks.append)

    simulation.submit_car_call(2)
    simulation.run_until_idle(50)

    assert stops == [{"time": 3, "floor": 2, "served": [{"type": "car", "floor": 2, "wait": 3}]}]
    assert [t["time"] for t in ticks] == list(range(6))
    assert ticks[0]["action"] == Action.PICK_DIRECTION
    assert ticks[-2]["action"] == Action.CLOSE_DOORS
    assert ticks[-1]["action"] == Action.GO_IDLE
    assert ticks[-1]["snapshot"].door_open is False


def test_rejected_call_is_not_tracked(simulation):
    with pytest.raises(InvalidFloor):
        simulation.submit_car_call(11)
    simulation.run(3)
    assert simulation.metrics.snapshot(simulation.current_time).calls_served == 0


def test_metrics_percentile():
    simulation = Simulation(Controller(0, 10, 0))
    for wait in (1, 2, 3, 4, 10):
        simulation.metrics.record_wait_time(wait)
    metrics = simulation.metrics.snapshot(0)
    assert metrics.average_wait == 4.0
    assert metrics.wait_p95 == pytest.approx(8.8)
    assert metrics.max_wait == 10


def test_empty_metrics():
    simulation = Simulation(Controller(0, 10, 0))
    metrics = simulation.metrics.snapshot(0)
    assert metrics.average_wait == 0.0
    assert metrics.wait_p95 == 0.0
    assert metrics.max_wait == 0
    assert metrics.calls_served == 0


def test_hall_call_direction_given_as_name(simulation):
    simulation.submit_hall_call(2, "up")
    simulation.run_until_idle(50)
    assert simulation.metrics.wait_times == [3]


def test_hall_call_floor_checked_before_direction(simulation):
    with pytest.raises(InvalidFloor):
        simulation.submit_hall_call(11, "sideways")
