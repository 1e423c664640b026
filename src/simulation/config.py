from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CabConfig:
    """Building bounds and door timing for one cab."""

    min_floor: int = 0
    max_floor: int = 10
    start_floor: int = 0
    door_dwell_ticks: int = 1
