from __future__ import annotations

from enum import Enum, IntEnum
from typing import Union

from .errors import InvalidDirection


class Direction(IntEnum):
    """Travel direction of the cab; the value is the floor step."""

    UP = 1
    DOWN = -1
    IDLE = 0

    @classmethod
    def parse(cls, value: Union["Direction", str, int]) -> "Direction":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidDirection(f"Unknown direction '{value}'") from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise InvalidDirection(f"Unknown direction {value}") from None
        raise InvalidDirection(f"Unknown direction {value!r}")

    def reverse(self) -> "Direction":
        return Direction(-self.value)


class CallType(str, Enum):
    """Kind of pending request held by the request store."""

    HALL_UP = "up"
    HALL_DOWN = "down"
    CAR = "car"
