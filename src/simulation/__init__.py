"""Simulation primitives for a single SCAN-scheduled cab."""

from .cab import Cab
from .config import CabConfig
from .controller import Action, CabSnapshot, Controller
from .simulation import MetricsSnapshot, MetricsTracker, Simulation

__all__ = [
    "Action",
    "Cab",
    "CabConfig",
    "CabSnapshot",
    "Controller",
    "MetricsSnapshot",
    "MetricsTracker",
    "Simulation",
]
