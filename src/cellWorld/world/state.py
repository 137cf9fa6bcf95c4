"""World state for the tick engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence

from .params import WorldConfig

EventType = Literal["anomaly", "festival", "repair"]
EVENT_TYPES: tuple[str, ...] = ("anomaly", "festival", "repair")


@dataclass
class OrganelleState:
    """A resource-producing unit.

    Attributes:
        capacity: Fixed output ceiling, set at world creation.
        efficiency: Fixed output multiplier.
        utilization: Player-controlled share of capacity in ``[0, 1]``.
    """

    capacity: float
    efficiency: float
    utilization: float = 0.0


@dataclass
class Resources:
    energy: float = 0.0
    nutrients: float = 0.0


@dataclass
class Metrics:
    """Derived per-world metrics.

    ``coherence`` and ``stability`` live in ``[0, 1]``; ``warmth`` is an
    unbounded log-ratio score.
    """

    warmth: float = 0.0
    coherence: float = 0.0
    stability: float = 0.0


@dataclass(frozen=True)
class Allocation:
    organelle_id: str
    delta: float


@dataclass(frozen=True)
class PlayerAction:
    """One player's submission for the upcoming tick."""

    player_id: str
    allocations: Sequence[Allocation] = ()
    harmony: Optional[float] = None


@dataclass(frozen=True)
class EventImpact:
    """Partial set of deltas; ``None`` means the field is untouched."""

    energy: Optional[float] = None
    nutrients: Optional[float] = None
    coherence: Optional[float] = None
    stability: Optional[float] = None


@dataclass(frozen=True)
class SimulationEvent:
    id: str
    type: EventType
    impact: EventImpact


@dataclass
class SimulationState:
    """Authoritative snapshot of one world, mutated in place tick by tick."""

    tick: int = 0
    tier: int = 0
    metrics: Metrics = field(default_factory=Metrics)
    resources: Resources = field(default_factory=Resources)
    organelles: dict[str, OrganelleState] = field(default_factory=dict)
    strain: float = 0.0
    blah: float = 0.0
    pending_actions: list[PlayerAction] = field(default_factory=list)
    active_events: list[SimulationEvent] = field(default_factory=list)


def make_world_state(config: WorldConfig | None = None) -> SimulationState:
    """Provision a fresh world at tick 0 from ``config``."""
    cfg = config if config is not None else WorldConfig()
    organelles = {
        oid: OrganelleState(
            capacity=float(spec.capacity),
            efficiency=float(spec.efficiency),
            utilization=float(spec.utilization),
        )
        for oid, spec in cfg.organelles.items()
    }
    return SimulationState(
        metrics=Metrics(
            warmth=cfg.warmth,
            coherence=cfg.coherence,
            stability=cfg.stability,
        ),
        resources=Resources(energy=cfg.energy, nutrients=cfg.nutrients),
        organelles=organelles,
        strain=cfg.strain,
        blah=cfg.blah,
    )


__all__ = [
    "EventType",
    "EVENT_TYPES",
    "OrganelleState",
    "Resources",
    "Metrics",
    "Allocation",
    "PlayerAction",
    "EventImpact",
    "SimulationEvent",
    "SimulationState",
    "make_world_state",
]
