"""Player allocation handling."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .state import PlayerAction, SimulationState


def drain_actions(
    state: SimulationState,
    extra: Iterable[PlayerAction] | None = None,
) -> list[PlayerAction]:
    """Return queued actions in arrival order, followed by ``extra``.

    The queue itself is left untouched; the stepper clears it once the tick
    has been fully computed.
    """
    actions = list(state.pending_actions)
    if extra is not None:
        actions.extend(extra)
    return actions


def apply_allocations(state: SimulationState, actions: Iterable[PlayerAction]) -> None:
    """Add each allocation delta to its organelle, clamping to ``[0, 1]``.

    Clamping happens after every single addition, so the result only depends
    on order when a running sum crosses a boundary. Unknown organelle ids and
    non-finite deltas are skipped.
    """
    organelles = state.organelles
    for action in actions:
        for alloc in action.allocations or ():
            organelle = organelles.get(alloc.organelle_id)
            if organelle is None:
                continue
            delta = float(alloc.delta)
            if not np.isfinite(delta):
                continue
            organelle.utilization = float(
                np.clip(organelle.utilization + delta, 0.0, 1.0)
            )
