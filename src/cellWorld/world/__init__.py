"""Per-world tick core: state, formulas and the one-tick stepper."""

from .encoding import action_from_dict, state_from_dict, state_to_dict
from .flows import ResourceFlows
from .params import (
    DEFAULT_ORGANELLES,
    OrganelleSpec,
    TickParams,
    WorldConfig,
    load_params,
    load_world_config,
)
from .state import (
    Allocation,
    EventImpact,
    Metrics,
    OrganelleState,
    PlayerAction,
    Resources,
    SimulationEvent,
    SimulationState,
    make_world_state,
)
from .stepper import tick

__all__ = [
    "Allocation",
    "DEFAULT_ORGANELLES",
    "EventImpact",
    "Metrics",
    "OrganelleSpec",
    "OrganelleState",
    "PlayerAction",
    "ResourceFlows",
    "Resources",
    "SimulationEvent",
    "SimulationState",
    "TickParams",
    "WorldConfig",
    "action_from_dict",
    "load_params",
    "load_world_config",
    "make_world_state",
    "state_from_dict",
    "state_to_dict",
    "tick",
]
