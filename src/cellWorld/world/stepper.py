"""One-tick orchestration."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from .allocation import apply_allocations, drain_actions
from .events import apply_events, spawn_events
from .flows import compute_resource_flows, compute_strain, consume_flows
from .metrics import (
    calculate_warmth,
    compute_coherence,
    compute_gain_cost,
    update_blah,
    update_stability,
)
from .params import TickParams
from .state import PlayerAction, SimulationState
from .tier import maybe_progress_tier

logger = logging.getLogger(__name__)

StateHook = Callable[[SimulationState], object]

_DEFAULT_PARAMS = TickParams()


def tick(
    state: SimulationState,
    actions: Optional[Iterable[PlayerAction]] = None,
    *,
    params: Optional[TickParams] = None,
    persist: Optional[StateHook] = None,
    broadcast: Optional[StateHook] = None,
) -> SimulationState:
    """Advance ``state`` by one tick in place and return it.

    ``actions`` are processed after anything already queued in
    ``state.pending_actions``. ``persist`` and ``broadcast`` are called, in
    that order, with the final state; their exceptions are not caught.
    """
    p = params if params is not None else _DEFAULT_PARAMS
    processed = drain_actions(state, actions)

    apply_allocations(state, processed)
    flows = compute_resource_flows(state, p)
    state.strain = compute_strain(state, flows, p)
    consume_flows(state, flows)

    gain, cost = compute_gain_cost(flows, state.strain, p)
    metrics = state.metrics
    metrics.warmth = calculate_warmth(
        gain, cost, epsilon=p.warmth_epsilon, offset=p.warmth_offset
    )

    # Festival trigger must see last tick's coherence.
    events = spawn_events(state, p)
    metrics.coherence = compute_coherence(processed, events)
    metrics.stability = update_stability(metrics.stability, metrics.coherence, state.strain, p)
    state.blah = update_blah(metrics, state.blah, p)

    apply_events(state, events)
    maybe_progress_tier(state, p)

    logger.debug(
        "tick %d: actions=%d strain=%.4f warmth=%.4f events=%s",
        state.tick,
        len(processed),
        state.strain,
        metrics.warmth,
        [e.id for e in events],
    )

    state.pending_actions.clear()
    state.tick += 1

    if persist is not None:
        persist(state)
    if broadcast is not None:
        broadcast(state)
    return state
