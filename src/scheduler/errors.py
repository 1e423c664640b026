from __future__ import annotations


class ElevatorError(ValueError):
    """Base class for rejected elevator operations."""


class InvalidFloor(ElevatorError):
    def __init__(self, floor: int, min_floor: int, max_floor: int) -> None:
        super().__init__(f"Floor out of range: {floor} (valid {min_floor}..{max_floor})")
        self.floor = floor
        self.min_floor = min_floor
        self.max_floor = max_floor


class InvalidDirection(ElevatorError):
    pass


class InvalidBounds(ElevatorError):
    pass


class InvalidStart(ElevatorError):
    pass
