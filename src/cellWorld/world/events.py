"""World event spawning and application."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .params import TickParams
from .state import EventImpact, SimulationEvent, SimulationState

ANOMALY_IMPACT = EventImpact(stability=-0.2, energy=-2.0)
FESTIVAL_IMPACT = EventImpact(coherence=0.1, energy=1.0)
REPAIR_IMPACT = EventImpact(nutrients=2.0, stability=0.1)


def _event(kind: str, tick: int, impact: EventImpact) -> SimulationEvent:
    return SimulationEvent(id=f"{kind}-{tick}", type=kind, impact=impact)


def spawn_events(state: SimulationState, params: TickParams) -> list[SimulationEvent]:
    """Evaluate the independent event triggers against ``state``.

    Runs after strain and resources have been updated for this tick but
    before coherence is recomputed, so the festival trigger reads the
    previous tick's coherence. Any combination of events may fire.
    """
    events: list[SimulationEvent] = []
    if state.strain > params.anomaly_strain_threshold:
        events.append(_event("anomaly", state.tick, ANOMALY_IMPACT))
    if state.metrics.coherence > params.festival_coherence_threshold:
        events.append(_event("festival", state.tick, FESTIVAL_IMPACT))
    if state.resources.nutrients < params.repair_nutrient_threshold:
        events.append(_event("repair", state.tick, REPAIR_IMPACT))
    return events


def apply_events(state: SimulationState, events: Sequence[SimulationEvent]) -> None:
    """Apply event impacts and replace ``active_events``.

    Resource deltas are summed without intermediate clamping, then both
    stocks are floored at zero once all events are in. Coherence and
    stability are clamped after every addition.
    """
    res = state.resources
    metrics = state.metrics
    for event in events:
        impact = event.impact
        if impact.energy:
            res.energy += impact.energy
        if impact.nutrients:
            res.nutrients += impact.nutrients
        if impact.coherence:
            metrics.coherence = float(np.clip(metrics.coherence + impact.coherence, 0.0, 1.0))
        if impact.stability:
            metrics.stability = float(np.clip(metrics.stability + impact.stability, 0.0, 1.0))
    res.energy = max(0.0, res.energy)
    res.nutrients = max(0.0, res.nutrients)
    state.active_events = list(events)
