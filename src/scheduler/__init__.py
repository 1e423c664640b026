"""Request bookkeeping for a single SCAN-scheduled cab."""

from .errors import ElevatorError, InvalidBounds, InvalidDirection, InvalidFloor, InvalidStart
from .interface import CallType, Direction
from .requests import RequestStore

__all__ = [
    "CallType",
    "Direction",
    "ElevatorError",
    "InvalidBounds",
    "InvalidDirection",
    "InvalidFloor",
    "InvalidStart",
    "RequestStore",
]
