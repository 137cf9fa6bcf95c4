"""One-way tier progression."""

from __future__ import annotations

import logging

from .params import TickParams
from .state import SimulationState

logger = logging.getLogger(__name__)


def maybe_progress_tier(state: SimulationState, params: TickParams) -> bool:
    """Advance ``tier`` by one when stability and warmth both clear their thresholds.

    Returns ``True`` if the tier advanced. Tiers never go down.
    """
    metrics = state.metrics
    if (
        metrics.stability > params.tier_stability_threshold
        and metrics.warmth > params.tier_warmth_threshold
    ):
        state.tier += 1
        logger.info("world reached tier %d at tick %d", state.tier, state.tick)
        return True
    return False
