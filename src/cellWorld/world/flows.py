"""Resource flow, strain and consumption dynamics."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .params import TickParams
from .state import SimulationState


@dataclass(frozen=True)
class ResourceFlows:
    """Per-tick resource deltas; recomputed every tick and never stored."""

    energy: float
    nutrients: float


def _organelle_arrays(state: SimulationState) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    organelles = list(state.organelles.values())
    if not organelles:
        empty = np.zeros(0, dtype=np.float64)
        return empty, empty, empty
    table = np.asarray(
        [(o.capacity, o.efficiency, o.utilization) for o in organelles],
        dtype=np.float64,
    )
    return table[:, 0], table[:, 1], table[:, 2]


def compute_resource_flows(state: SimulationState, params: TickParams) -> ResourceFlows:
    """Sum ``capacity * efficiency * utilization`` over all organelles."""
    capacity, efficiency, utilization = _organelle_arrays(state)
    output = float(np.sum(capacity * efficiency * utilization))
    return ResourceFlows(
        energy=output,
        nutrients=-params.nutrient_cost_ratio * output,
    )


def utilization_load(state: SimulationState) -> float:
    """Sum of utilization across organelles; grows with organelle count."""
    _, _, utilization = _organelle_arrays(state)
    return float(np.sum(utilization))


def compute_strain(
    state: SimulationState,
    flows: ResourceFlows,
    params: TickParams,
) -> float:
    """Return the next strain value.

    Nutrient debt is measured against the projected, not yet clamped,
    nutrient level so a shortfall is visible even when consumption floors
    the stock at zero.
    """
    nutrient_debt = max(0.0, -(state.resources.nutrients + flows.nutrients))
    return (
        state.strain * params.strain_decay
        + nutrient_debt * params.strain_debt_weight
        + utilization_load(state) * params.strain_load_weight
    )


def consume_flows(state: SimulationState, flows: ResourceFlows) -> None:
    """Commit ``flows`` to the resource stock and floor both at zero."""
    res = state.resources
    res.energy = max(0.0, res.energy + flows.energy)
    res.nutrients = max(0.0, res.nutrients + flows.nutrients)
