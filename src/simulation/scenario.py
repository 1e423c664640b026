"""Build and run simulations from JSON-style scenario dictionaries."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from scheduler import Direction, InvalidDirection

from .config import CabConfig
from .controller import CabSnapshot, Controller
from .simulation import Simulation

logger = logging.getLogger(__name__)

CALL_TYPES = ("hall", "car")


@dataclass
class ScheduledCall:
    """A call submitted at a fixed tick or when the doors open at a floor."""

    call_type: str
    floor: int
    direction: Optional[Direction] = None
    time: int = 0
    when_open_at: Optional[int] = None
    fired: bool = False

    def submit(self, simulation: Simulation) -> None:
        if self.call_type == "hall":
            simulation.submit_hall_call(self.floor, self.direction)
        else:
            simulation.submit_car_call(self.floor)
        self.fired = True


def build_simulation(config: Dict) -> Simulation:
    building_cfg = config.get("building", {})
    cab_config = CabConfig(**building_cfg)
    controller = Controller.from_config(cab_config)
    return Simulation(controller)


def parse_calls(entries: Iterable[Dict], controller: Controller) -> List[ScheduledCall]:
    calls: List[ScheduledCall] = []
    for entry in entries:
        call_type = str(entry.get("type", "car")).lower()
        if call_type not in CALL_TYPES:
            raise ValueError(f"Unknown call type '{call_type}'. Available: {', '.join(CALL_TYPES)}")
        floor = entry["floor"]
        controller.requests.validate_floor(floor)
        direction = None
        if call_type == "hall":
            direction = Direction.parse(entry.get("direction", "IDLE"))
            if direction == Direction.IDLE:
                raise InvalidDirection("Hall call must be UP or DOWN")
        calls.append(
            ScheduledCall(
                call_type=call_type,
                floor=floor,
                direction=direction,
                time=entry.get("time", 0),
                when_open_at=entry.get("when_open_at"),
            )
        )
    return calls


def _apply_scheduled_calls(simulation: Simulation, calls: Iterable[ScheduledCall]) -> None:
    snapshot = simulation.controller.snapshot()
    for call in calls:
        if call.fired:
            continue
        if call.when_open_at is not None:
            if snapshot.door_open and snapshot.floor == call.when_open_at:
                logger.debug("doors open at %d, submitting %s call to %d", snapshot.floor, call.call_type, call.floor)
                call.submit(simulation)
        elif call.time <= simulation.current_time:
            call.submit(simulation)


def _future_calls_remain(calls: Iterable[ScheduledCall], current_time: int) -> bool:
    return any(not c.fired and c.when_open_at is None and c.time >= current_time for c in calls)


def run_scenario(
    simulation: Simulation,
    config: Dict,
    on_snapshot: Optional[Callable[[int, CabSnapshot], None]] = None,
) -> List[Dict]:
    """Run a scenario and return the snapshot seen before every tick."""

    max_ticks = config.get("max_ticks", 100)
    stop_when_idle = config.get("stop_when_idle", True)
    calls = parse_calls(config.get("calls", []), simulation.controller)
    snapshots: List[Dict] = []

    for _ in range(max_ticks):
        _apply_scheduled_calls(simulation, calls)
        snapshot = simulation.controller.snapshot()
        if on_snapshot is not None:
            on_snapshot(simulation.current_time, snapshot)
        state = snapshot.as_dict()
        state["time"] = simulation.current_time
        snapshots.append(state)
        simulation.step()
        if (
            stop_when_idle
            and simulation.controller.is_idle()
            and not _future_calls_remain(calls, simulation.current_time)
        ):
            break
    return snapshots
