from __future__ import annotations

import logging
from typing import Dict, List, Set, Tuple, Union

from .errors import InvalidBounds, InvalidDirection, InvalidFloor
from .interface import CallType, Direction
from .utils import contains_floor, discard_floor, first_above, first_below, insert_floor

logger = logging.getLogger(__name__)


class RequestStore:
    """Pending hall and car calls for a single cab.

    Hall calls are split by the direction the rider wants to travel; car
    calls are destinations pressed inside the cab. Each set is kept sorted
    so nearest-neighbour lookups are binary searches.
    """

    def __init__(self, min_floor: int, max_floor: int) -> None:
        if min_floor > max_floor:
            raise InvalidBounds(f"min_floor {min_floor} > max_floor {max_floor}")
        self.min_floor = min_floor
        self.max_floor = max_floor
        self._up_hall: List[int] = []
        self._down_hall: List[int] = []
        self._car_stops: List[int] = []

    def submit_hall_call(self, floor: int, direction: Union[Direction, str, int]) -> None:
        self.validate_floor(floor)
        direction = Direction.parse(direction)
        if direction == Direction.UP:
            added = insert_floor(self._up_hall, floor)
        elif direction == Direction.DOWN:
            added = insert_floor(self._down_hall, floor)
        else:
            raise InvalidDirection("Hall call must be UP or DOWN")
        if added:
            logger.debug("hall call %s at floor %d", direction.name, floor)

    def submit_car_call(self, floor: int) -> None:
        self.validate_floor(floor)
        if insert_floor(self._car_stops, floor):
            logger.debug("car call to floor %d", floor)

    def should_stop_here(self, floor: int, direction: Direction) -> bool:
        """Car stops always count; hall calls only when they match travel direction.

        An idle cab opens for a hall call in either direction.
        """

        if contains_floor(self._car_stops, floor):
            return True
        if direction == Direction.UP:
            return contains_floor(self._up_hall, floor)
        if direction == Direction.DOWN:
            return contains_floor(self._down_hall, floor)
        return contains_floor(self._up_hall, floor) or contains_floor(self._down_hall, floor)

    def clear_at(self, floor: int) -> Set[CallType]:
        """Drop every request at ``floor`` and report which kinds were pending."""

        cleared: Set[CallType] = set()
        if discard_floor(self._car_stops, floor):
            cleared.add(CallType.CAR)
        if discard_floor(self._up_hall, floor):
            cleared.add(CallType.HALL_UP)
        if discard_floor(self._down_hall, floor):
            cleared.add(CallType.HALL_DOWN)
        return cleared

    def has_any_requests(self) -> bool:
        return bool(self._up_hall or self._down_hall or self._car_stops)

    def has_ahead(self, floor: int, direction: Direction) -> bool:
        """Requests strictly ahead of ``floor`` in the travel direction."""

        if direction == Direction.UP:
            return (
                first_above(self._up_hall, floor) is not None
                or first_above(self._car_stops, floor) is not None
            )
        if direction == Direction.DOWN:
            return (
                first_below(self._down_hall, floor) is not None
                or first_below(self._car_stops, floor) is not None
            )
        return False

    def has_behind(self, floor: int, direction: Direction) -> bool:
        """Requests strictly behind ``floor`` relative to the travel direction.

        Only the hall set of the current direction is consulted; calls for
        the opposite direction are picked up once the cab has reversed.
        """

        if direction == Direction.UP:
            return (
                first_below(self._up_hall, floor) is not None
                or first_below(self._car_stops, floor) is not None
            )
        if direction == Direction.DOWN:
            return (
                first_above(self._down_hall, floor) is not None
                or first_above(self._car_stops, floor) is not None
            )
        return False

    def has_any_beyond(self, floor: int, direction: Direction) -> bool:
        """Any request of any kind strictly ahead of ``floor``."""

        if direction == Direction.UP:
            nearest = first_above
        elif direction == Direction.DOWN:
            nearest = first_below
        else:
            return False
        everything = (self._up_hall, self._down_hall, self._car_stops)
        return any(nearest(floors, floor) is not None for floors in everything)

    def pick_from_idle(self, floor: int) -> Direction:
        """Choose a direction for an idle cab, preferring requests above."""

        if self.has_any_beyond(floor, Direction.UP):
            return Direction.UP
        if self.has_any_beyond(floor, Direction.DOWN):
            return Direction.DOWN
        return Direction.IDLE

    @property
    def up_hall(self) -> Tuple[int, ...]:
        return tuple(self._up_hall)

    @property
    def down_hall(self) -> Tuple[int, ...]:
        return tuple(self._down_hall)

    @property
    def car_stops(self) -> Tuple[int, ...]:
        return tuple(self._car_stops)

    def pending(self) -> Dict[CallType, Tuple[int, ...]]:
        return {
            CallType.HALL_UP: self.up_hall,
            CallType.HALL_DOWN: self.down_hall,
            CallType.CAR: self.car_stops,
        }

    def validate_floor(self, floor: int) -> None:
        if floor < self.min_floor or floor > self.max_floor:
            raise InvalidFloor(floor, self.min_floor, self.max_floor)
