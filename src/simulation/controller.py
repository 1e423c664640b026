from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from scheduler import Direction, InvalidBounds, RequestStore

from .cab import Cab
from .config import CabConfig

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """What a single tick did."""

    DWELL = "dwell"
    CLOSE_DOORS = "close_doors"
    OPEN_DOORS = "open_doors"
    PICK_DIRECTION = "pick_direction"
    REMAIN_IDLE = "remain_idle"
    MOVE = "move"
    REVERSE = "reverse"
    GO_IDLE = "go_idle"


@dataclass(frozen=True)
class CabSnapshot:
    """Read-only view of the cab and its pending requests between ticks."""

    floor: int
    direction: Direction
    door_open: bool
    door_dwell_remaining: int
    up: Tuple[int, ...]
    down: Tuple[int, ...]
    car: Tuple[int, ...]

    def as_dict(self) -> dict:
        return {
            "floor": self.floor,
            "direction": self.direction.name,
            "door_open": self.door_open,
            "door_dwell_remaining": self.door_dwell_remaining,
            "up": list(self.up),
            "down": list(self.down),
            "car": list(self.car),
        }

    def __str__(self) -> str:
        return "floor=%d dir=%s door=%s | up=%s down=%s car=%s" % (
            self.floor,
            self.direction.name,
            "OPEN" if self.door_open else "CLOSED",
            list(self.up),
            list(self.down),
            list(self.car),
        )


class Controller:
    """Tick-driven state machine for one cab under SCAN scheduling.

    Each call to :meth:`tick` performs exactly one of: a door action, a
    stop, a direction choice, or a single-floor move. Door dwelling beats
    stopping, stopping beats moving, continuing beats reversing and
    reversing beats going idle.

    Hall calls for the opposite direction never count as work ahead. When
    they are all that is left on one side of the cab, the plain rules
    above would leave it flipping between idle and the same direction, or
    reversing back and forth between two floors. In exactly those states
    the cab keeps sweeping towards the furthest such call, or turns in
    place when one is waiting at its floor, so every finite set of calls
    is eventually served.
    """

    def __init__(
        self,
        min_floor: int,
        max_floor: int,
        start_floor: int,
        door_dwell_ticks: int = 1,
        requests: Optional[RequestStore] = None,
    ) -> None:
        self._cab = Cab(min_floor, max_floor, start_floor)
        if requests is None:
            requests = RequestStore(min_floor, max_floor)
        elif (requests.min_floor, requests.max_floor) != (min_floor, max_floor):
            raise InvalidBounds(
                f"Request store bounds {requests.min_floor}..{requests.max_floor} "
                f"do not match cab bounds {min_floor}..{max_floor}"
            )
        self._requests = requests
        self._door_dwell_ticks = max(1, door_dwell_ticks)

    @classmethod
    def from_config(cls, config: CabConfig, requests: Optional[RequestStore] = None) -> "Controller":
        return cls(
            min_floor=config.min_floor,
            max_floor=config.max_floor,
            start_floor=config.start_floor,
            door_dwell_ticks=config.door_dwell_ticks,
            requests=requests,
        )

    @property
    def cab(self) -> Cab:
        return self._cab

    @property
    def requests(self) -> RequestStore:
        return self._requests

    @property
    def door_dwell_ticks(self) -> int:
        return self._door_dwell_ticks

    @property
    def min_floor(self) -> int:
        return self._cab.min_floor

    @property
    def max_floor(self) -> int:
        return self._cab.max_floor

    def submit_hall_call(self, floor: int, direction: Union[Direction, str, int]) -> None:
        self._requests.submit_hall_call(floor, direction)

    def submit_car_call(self, floor: int) -> None:
        self._requests.submit_car_call(floor)

    def tick(self) -> Action:
        """Advance the cab by one logical time unit."""

        cab = self._cab
        requests = self._requests

        if cab.door_open:
            if cab.count_down_dwell():
                logger.debug("doors closed at floor %d", cab.current_floor)
                return Action.CLOSE_DOORS
            return Action.DWELL

        floor = cab.current_floor
        if requests.should_stop_here(floor, cab.direction):
            requests.clear_at(floor)
            cab.open_doors(self._door_dwell_ticks)
            logger.debug("stopping at floor %d, doors open for %d ticks", floor, self._door_dwell_ticks)
            return Action.OPEN_DOORS

        if cab.direction == Direction.IDLE:
            chosen = requests.pick_from_idle(floor)
            if chosen == Direction.IDLE:
                return Action.REMAIN_IDLE
            cab.set_direction(chosen)
            logger.debug("leaving idle at floor %d heading %s", floor, chosen.name)
            return Action.PICK_DIRECTION

        return self._travel(floor, cab.direction)

    def _travel(self, floor: int, direction: Direction) -> Action:
        cab = self._cab
        requests = self._requests

        if requests.has_ahead(floor, direction):
            cab.move_one_floor(direction)
            return Action.MOVE

        reverse = direction.reverse()
        if requests.has_behind(floor, direction):
            if requests.has_ahead(floor, reverse):
                return self._reverse(floor, reverse, move=True)
            # Nothing to do after reversing except hall calls for this direction.
            if requests.should_stop_here(floor, reverse):
                return self._reverse(floor, reverse, move=False)
            if requests.has_any_beyond(floor, direction):
                cab.move_one_floor(direction)
                return Action.MOVE
            return self._reverse(floor, reverse, move=True)

        if (
            requests.has_any_beyond(floor, direction)
            and requests.pick_from_idle(floor) == direction
            and not requests.should_stop_here(floor, Direction.IDLE)
        ):
            # Only opposite-direction hall calls remain, further along.
            cab.move_one_floor(direction)
            return Action.MOVE

        cab.set_direction(Direction.IDLE)
        logger.debug("no work left, idle at floor %d", floor)
        return Action.GO_IDLE

    def _reverse(self, floor: int, direction: Direction, move: bool) -> Action:
        self._cab.set_direction(direction)
        if move:
            self._cab.move_one_floor(direction)
        logger.debug("reversing at floor %d, now heading %s", floor, direction.name)
        return Action.REVERSE

    def is_idle(self) -> bool:
        return (
            not self._requests.has_any_requests()
            and self._cab.direction == Direction.IDLE
            and not self._cab.door_open
        )

    def snapshot(self) -> CabSnapshot:
        return CabSnapshot(
            floor=self._cab.current_floor,
            direction=self._cab.direction,
            door_open=self._cab.door_open,
            door_dwell_remaining=self._cab.door_dwell_remaining,
            up=self._requests.up_hall,
            down=self._requests.down_hall,
            car=self._requests.car_stops,
        )
