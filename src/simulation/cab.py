from __future__ import annotations

from scheduler import Direction, InvalidBounds, InvalidStart


class Cab:
    """Physical state of the cab: position, travel direction and doors.

    Fields are read-only from the outside; the controller drives every
    change through the methods below.
    """

    def __init__(self, min_floor: int, max_floor: int, start_floor: int) -> None:
        if min_floor > max_floor:
            raise InvalidBounds(f"min_floor {min_floor} > max_floor {max_floor}")
        if start_floor < min_floor or start_floor > max_floor:
            raise InvalidStart(f"Start floor {start_floor} outside {min_floor}..{max_floor}")
        self.min_floor = min_floor
        self.max_floor = max_floor
        self._current_floor = start_floor
        self._direction = Direction.IDLE
        self._door_open = False
        self._door_dwell_remaining = 0

    @property
    def current_floor(self) -> int:
        return self._current_floor

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def door_open(self) -> bool:
        return self._door_open

    @property
    def door_dwell_remaining(self) -> int:
        return self._door_dwell_remaining

    def at_top(self) -> bool:
        return self._current_floor == self.max_floor

    def at_bottom(self) -> bool:
        return self._current_floor == self.min_floor

    def move_one_floor(self, direction: Direction) -> None:
        # Clamped at the shaft ends; never an error.
        if direction == Direction.UP and not self.at_top():
            self._current_floor += 1
        elif direction == Direction.DOWN and not self.at_bottom():
            self._current_floor -= 1

    def set_direction(self, direction: Direction) -> None:
        self._direction = direction

    def open_doors(self, dwell_ticks: int) -> None:
        self._door_open = True
        self._door_dwell_remaining = dwell_ticks

    def count_down_dwell(self) -> bool:
        """Spend one tick of dwell. Returns True when the doors closed."""

        self._door_dwell_remaining -= 1
        if self._door_dwell_remaining <= 0:
            self._door_dwell_remaining = 0
            self._door_open = False
            return True
        return False

    def __repr__(self) -> str:  # pragma: no cover - convenience
        return (
            f"Cab(floor={self._current_floor}, direction={self._direction.name}, "
            f"door_open={self._door_open}, dwell={self._door_dwell_remaining})"
        )
