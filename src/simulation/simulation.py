from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple, Union

from scheduler import CallType, Direction

from .controller import Action, Controller

logger = logging.getLogger(__name__)


@dataclass
class MetricsSnapshot:
    time_step: int
    average_wait: float
    wait_p95: float
    max_wait: int
    calls_served: int
    stops: int
    floors_travelled: int


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.stops: int = 0
        self.floors_travelled: int = 0

    def record_wait_time(self, ticks: int) -> None:
        self.wait_times.append(ticks)

    def record_action(self, action: Action) -> None:
        if action == Action.OPEN_DOORS:
            self.stops += 1
        elif action in (Action.MOVE, Action.REVERSE):
            self.floors_travelled += 1

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            max_wait=max(self.wait_times, default=0),
            calls_served=len(self.wait_times),
            stops=self.stops,
            floors_travelled=self.floors_travelled,
        )


class Simulation:
    """Discrete-tick driver around a :class:`Controller`.

    Keeps the tick counter, notifies event hooks and measures how long
    each call waited before the cab served it.
    """

    def __init__(self, controller: Controller) -> None:
        self.controller = controller
        self.current_time: int = 0
        self.metrics = MetricsTracker()
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._submitted_at: Dict[Tuple[CallType, int], int] = {}

    def submit_hall_call(self, floor: int, direction: Union[Direction, str, int]) -> None:
        self.controller.requests.validate_floor(floor)
        direction = Direction.parse(direction)
        self.controller.submit_hall_call(floor, direction)
        call_type = CallType.HALL_UP if direction == Direction.UP else CallType.HALL_DOWN
        self._submitted_at.setdefault((call_type, floor), self.current_time)

    def submit_car_call(self, floor: int) -> None:
        self.controller.submit_car_call(floor)
        self._submitted_at.setdefault((CallType.CAR, floor), self.current_time)

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def run_until_idle(self, max_ticks: int) -> int:
        """Step until the cab is idle with nothing pending; returns ticks used."""

        ticks = 0
        while ticks < max_ticks and not self.controller.is_idle():
            self.step()
            ticks += 1
        if not self.controller.is_idle():
            logger.info("Stopped after %d ticks with work still pending", ticks)
        else:
            logger.info("Cab idle after %d ticks (t=%d)", ticks, self.current_time)
        return ticks

    def step(self) -> Action:
        action = self.controller.tick()
        self.metrics.record_action(action)
        snapshot = self.controller.snapshot()

        if action == Action.OPEN_DOORS:
            served = self._record_served()
            self._emit(
                "stop",
                {"time": self.current_time, "floor": snapshot.floor, "served": served},
            )
        self._emit("tick", {"time": self.current_time, "action": action, "snapshot": snapshot})

        self.current_time += 1
        return action

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _record_served(self) -> List[Dict[str, object]]:
        pending = self.controller.requests.pending()
        served: List[Dict[str, object]] = []
        for key, submitted_at in list(self._submitted_at.items()):
            call_type, floor = key
            if floor in pending[call_type]:
                continue
            del self._submitted_at[key]
            wait = self.current_time - submitted_at
            self.metrics.record_wait_time(wait)
            served.append({"type": call_type.value, "floor": floor, "wait": wait})
        return served

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
