"""Warmth, coherence, stability and composite score formulas."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .flows import ResourceFlows
from .params import WARMTH_EPSILON, WARMTH_OFFSET, TickParams
from .state import Metrics, PlayerAction, SimulationEvent


def compute_gain_cost(
    flows: ResourceFlows,
    strain: float,
    params: TickParams,
) -> tuple[float, float]:
    """Return ``(gain, cost)`` for this tick.

    Gain is the positive part of the energy flow; cost is the nutrient
    drain plus a strain surcharge.
    """
    gain = max(0.0, flows.energy)
    cost = max(0.0, -flows.nutrients) + strain * params.strain_cost_weight
    return gain, cost


def calculate_warmth(
    gain: float,
    cost: float,
    *,
    epsilon: float = WARMTH_EPSILON,
    offset: float = WARMTH_OFFSET,
) -> float:
    """Log-ratio health score ``ln((gain + eps) / (cost + eps)) - offset``.

    Unbounded in both directions. A gain/cost ratio below ``exp(offset)``
    gives a negative score; ``epsilon`` keeps zero gain or cost finite.

    Example:
        >>> round(calculate_warmth(0.0, 0.0), 6)
        -0.1
    """
    return float(np.log((gain + epsilon) / (cost + epsilon))) - offset


def compute_coherence(
    actions: Sequence[PlayerAction],
    events: Sequence[SimulationEvent],
) -> float:
    """Mean player harmony plus same-tick event bonuses, clamped to ``[0, 1]``."""
    if actions:
        harmony = np.fromiter(
            (0.0 if a.harmony is None else a.harmony for a in actions),
            dtype=np.float64,
            count=len(actions),
        )
        # Non-finite harmony counts as absent.
        harmony[~np.isfinite(harmony)] = 0.0
        base = float(np.mean(harmony))
    else:
        base = 0.0
    bonus = sum(
        e.impact.coherence for e in events if e.impact.coherence is not None
    )
    return float(np.clip(base + bonus, 0.0, 1.0))


def update_stability(
    stability: float,
    coherence: float,
    strain: float,
    params: TickParams,
) -> float:
    return float(
        np.clip(
            stability
            + coherence * params.stability_coherence_weight
            - strain * params.stability_strain_weight,
            0.0,
            1.0,
        )
    )


def update_blah(metrics: Metrics, blah: float, params: TickParams) -> float:
    """Move the composite score a fixed fraction toward the metric mean."""
    target = (metrics.warmth + metrics.stability + metrics.coherence) / 3.0
    return blah + (target - blah) * params.blah_rate
