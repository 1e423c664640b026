import json
from pathlib import Path

import pytest

from scheduler import InvalidDirection, InvalidFloor
from simulation.scenario import build_simulation, parse_calls, run_scenario

SCENARIO_DIR = Path(__file__).resolve().parent.parent / "scenarios"

LOBBY_RIDER = {
    "building": {"min_floor": 0, "max_floor": 10, "start_floor": 0, "door_dwell_ticks": 1},
    "max_ticks": 30,
    "calls": [
        {"type": "hall", "floor": 3, "direction": "UP"},
        {"type": "hall", "floor": 8, "direction": "DOWN"},
        {"type": "car", "floor": 9, "when_open_at": 3},
    ],
}


def test_build_simulation_uses_building_block():
    simulation = build_simulation({"building": {"min_floor": 1, "max_floor": 6, "start_floor": 4}})
    controller = simulation.controller
    assert (controller.min_floor, controller.max_floor) == (1, 6)
    assert controller.cab.current_floor == 4
    assert controller.door_dwell_ticks == 1


def test_build_simulation_defaults():
    simulation = build_simulation({})
    assert simulation.controller.max_floor == 10


def test_rider_presses_destination_when_doors_open():
    simulation = build_simulation(LOBBY_RIDER)
    stops = []
    simulation.on_event("stop", lambda payload: stops.append(payload["floor"]))

    snapshots = run_scenario(simulation, LOBBY_RIDER)

    assert stops == [3, 9, 8]
    assert simulation.controller.is_idle()
    assert len(snapshots) == simulation.current_time == 20
    assert snapshots[4]["car"] == []
    assert snapshots[5]["car"] == [9]
    assert snapshots[5]["door_open"] is True


def test_timed_calls_keep_idle_cab_running():
    config = {"calls": [{"type": "car", "floor": 4, "time": 5}]}
    simulation = build_simulation(config)
    snapshots = run_scenario(simulation, config)

    assert snapshots[4]["car"] == []
    assert snapshots[5]["car"] == [4]
    assert simulation.controller.cab.current_floor == 4
    assert simulation.controller.is_idle()


def test_stop_when_idle_disabled_runs_full_length():
    config = {"max_ticks": 7, "stop_when_idle": False}
    simulation = build_simulation(config)
    assert len(run_scenario(simulation, config)) == 7


def test_on_snapshot_callback():
    config = {"calls": [{"type": "car", "floor": 1}]}
    simulation = build_simulation(config)
    seen = []
    snapshots = run_scenario(simulation, config, on_snapshot=lambda t, snap: seen.append((t, snap.floor)))
    assert seen == [(s["time"], s["floor"]) for s in snapshots]


def test_unknown_call_type_rejected():
    simulation = build_simulation({})
    with pytest.raises(ValueError):
        parse_calls([{"type": "teleport", "floor": 2}], simulation.controller)


def test_calls_are_validated_up_front():
    simulation = build_simulation({})
    with pytest.raises(InvalidFloor):
        parse_calls([{"type": "car", "floor": 40, "time": 90}], simulation.controller)
    with pytest.raises(InvalidDirection):
        parse_calls([{"type": "hall", "floor": 4}], simulation.controller)


@pytest.mark.parametrize("path", sorted(SCENARIO_DIR.glob("*.json")), ids=lambda p: p.stem)
def test_shipped_scenarios_finish_idle(path):
    config = json.loads(path.read_text())
    simulation = build_simulation(config)
    run_scenario(simulation, config)
    assert simulation.controller.is_idle()
