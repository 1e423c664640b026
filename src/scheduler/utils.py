from __future__ import annotations

from bisect import bisect_left, bisect_right, insort
from typing import List, Optional


def insert_floor(floors: List[int], floor: int) -> bool:
    """Insert into a sorted list unless already present. Returns True if added."""

    index = bisect_left(floors, floor)
    if index < len(floors) and floors[index] == floor:
        return False
    insort(floors, floor)
    return True


def discard_floor(floors: List[int], floor: int) -> bool:
    index = bisect_left(floors, floor)
    if index < len(floors) and floors[index] == floor:
        del floors[index]
        return True
    return False


def contains_floor(floors: List[int], floor: int) -> bool:
    index = bisect_left(floors, floor)
    return index < len(floors) and floors[index] == floor


def first_above(floors: List[int], floor: int) -> Optional[int]:
    """Smallest element strictly greater than ``floor``."""

    index = bisect_right(floors, floor)
    if index < len(floors):
        return floors[index]
    return None


def first_below(floors: List[int], floor: int) -> Optional[int]:
    """Largest element strictly less than ``floor``."""

    index = bisect_left(floors, floor)
    if index > 0:
        return floors[index - 1]
    return None
