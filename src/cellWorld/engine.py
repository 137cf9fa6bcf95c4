"""Per-world tick engine."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from .world.params import TickParams, WorldConfig, load_params, load_world_config
from .world.state import PlayerAction, SimulationState, make_world_state
from .world.stepper import StateHook, tick

logger = logging.getLogger(__name__)

ActionSource = Callable[[SimulationState], Iterable[PlayerAction]]


class TickEngine:
    """Own one world's state and advance it one tick at a time.

    The engine is not thread-safe; callers must serialise ``submit`` and
    ``step`` for a given world.
    """

    def __init__(
        self,
        state: SimulationState | None = None,
        *,
        params: TickParams | None = None,
        persist: Optional[StateHook] = None,
        broadcast: Optional[StateHook] = None,
    ):
        self.state = state if state is not None else make_world_state()
        self.params = params if params is not None else TickParams()
        self.persist = persist
        self.broadcast = broadcast

    @classmethod
    def from_config(
        cls,
        *,
        world: Mapping[str, Any] | WorldConfig | None = None,
        params: Mapping[str, Any] | TickParams | None = None,
        persist: Optional[StateHook] = None,
        broadcast: Optional[StateHook] = None,
    ) -> "TickEngine":
        """Build an engine from plain config mappings."""
        world_cfg = world if isinstance(world, WorldConfig) else load_world_config(world)
        tick_params = params if isinstance(params, TickParams) else load_params(params)
        return cls(
            make_world_state(world_cfg),
            params=tick_params,
            persist=persist,
            broadcast=broadcast,
        )

    def submit(self, action: PlayerAction) -> None:
        """Queue ``action`` for the next tick."""
        if not isinstance(action, PlayerAction):
            raise TypeError(f"expected PlayerAction, got {type(action).__name__}")
        self.state.pending_actions.append(action)

    def step(self) -> SimulationState:
        """Run one tick over everything queued so far."""
        logger.debug(
            "dispatching tick %d with %d queued actions",
            self.state.tick,
            len(self.state.pending_actions),
        )
        return tick(
            self.state,
            params=self.params,
            persist=self.persist,
            broadcast=self.broadcast,
        )

    def run(self, n_ticks: int, action_source: ActionSource | None = None) -> SimulationState:
        """Run ``n_ticks`` ticks, queuing ``action_source(state)`` before each."""
        if n_ticks < 0:
            raise ValueError("n_ticks must be >= 0")
        for _ in range(n_ticks):
            if action_source is not None:
                for action in action_source(self.state):
                    self.submit(action)
            self.step()
        return self.state


__all__ = ["TickEngine", "ActionSource"]
