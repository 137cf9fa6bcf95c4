from .engine import TickEngine
from .hooks import JsonSnapshotPersister, MetricsRecorder
from .world import (
    Allocation,
    PlayerAction,
    SimulationState,
    TickParams,
    make_world_state,
    tick,
)

__all__ = [
    "Allocation",
    "JsonSnapshotPersister",
    "MetricsRecorder",
    "PlayerAction",
    "SimulationState",
    "TickEngine",
    "TickParams",
    "make_world_state",
    "tick",
]
