"""Plain-dict encoding of world state for snapshots and broadcast payloads."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping

from .state import (
    EVENT_TYPES,
    Allocation,
    EventImpact,
    Metrics,
    OrganelleState,
    PlayerAction,
    Resources,
    SimulationEvent,
    SimulationState,
)


def _encode_action(action: PlayerAction) -> dict[str, Any]:
    return {
        "player_id": action.player_id,
        "allocations": [asdict(a) for a in action.allocations or ()],
        "harmony": action.harmony,
    }


def _encode_event(event: SimulationEvent) -> dict[str, Any]:
    impact = {k: v for k, v in asdict(event.impact).items() if v is not None}
    return {"id": event.id, "type": event.type, "impact": impact}


def state_to_dict(state: SimulationState) -> dict[str, Any]:
    """Encode ``state`` as a JSON-serialisable dictionary."""
    return {
        "tick": int(state.tick),
        "tier": int(state.tier),
        "metrics": asdict(state.metrics),
        "resources": asdict(state.resources),
        "organelles": {oid: asdict(o) for oid, o in state.organelles.items()},
        "strain": float(state.strain),
        "blah": float(state.blah),
        "pending_actions": [_encode_action(a) for a in state.pending_actions],
        "active_events": [_encode_event(e) for e in state.active_events],
    }


def action_from_dict(raw: Mapping[str, Any]) -> PlayerAction:
    harmony = raw.get("harmony")
    return PlayerAction(
        player_id=str(raw["player_id"]),
        allocations=tuple(
            Allocation(organelle_id=str(a["organelle_id"]), delta=float(a["delta"]))
            for a in raw.get("allocations") or ()
        ),
        harmony=None if harmony is None else float(harmony),
    )


def _event_from_dict(raw: Mapping[str, Any]) -> SimulationEvent:
    kind = str(raw["type"])
    if kind not in EVENT_TYPES:
        raise ValueError(f"event type must be one of {EVENT_TYPES}, got {kind!r}")
    impact = {k: float(v) for k, v in dict(raw.get("impact") or {}).items()}
    return SimulationEvent(id=str(raw["id"]), type=kind, impact=EventImpact(**impact))


def state_from_dict(raw: Mapping[str, Any]) -> SimulationState:
    """Rebuild a :class:`SimulationState` produced by :func:`state_to_dict`."""
    return SimulationState(
        tick=int(raw.get("tick", 0)),
        tier=int(raw.get("tier", 0)),
        metrics=Metrics(**{k: float(v) for k, v in dict(raw.get("metrics") or {}).items()}),
        resources=Resources(
            **{k: float(v) for k, v in dict(raw.get("resources") or {}).items()}
        ),
        organelles={
            str(oid): OrganelleState(**{k: float(v) for k, v in dict(o).items()})
            for oid, o in dict(raw.get("organelles") or {}).items()
        },
        strain=float(raw.get("strain", 0.0)),
        blah=float(raw.get("blah", 0.0)),
        pending_actions=[action_from_dict(a) for a in raw.get("pending_actions") or ()],
        active_events=[_event_from_dict(e) for e in raw.get("active_events") or ()],
    )


__all__ = ["state_to_dict", "state_from_dict", "action_from_dict"]
