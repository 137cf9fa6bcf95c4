from __future__ import annotations

import json

import numpy as np
import pytest

from cellWorld.world.params import TickParams, WorldConfig
from cellWorld.world.state import (
    Allocation,
    Metrics,
    OrganelleState,
    PlayerAction,
    Resources,
    SimulationState,
    make_world_state,
)
from cellWorld.world.stepper import tick


def _bare_state(**overrides: object) -> SimulationState:
    base = {
        "resources": Resources(energy=5.0, nutrients=10.0),
        "metrics": Metrics(warmth=0.0, coherence=0.5, stability=0.5),
    }
    base.update(overrides)
    return SimulationState(**base)


def _random_actions(rng: np.random.Generator, organelle_ids: list[str], n: int) -> list[PlayerAction]:
    actions = []
    for p in range(n):
        allocations = tuple(
            Allocation(organelle_id=oid, delta=float(rng.normal(0.0, 0.6)))
            for oid in organelle_ids + ["unknown"]
            if rng.random() < 0.6
        )
        harmony = float(rng.uniform(-0.5, 1.5)) if rng.random() < 0.7 else None
        actions.append(PlayerAction(player_id=f"p{p}", allocations=allocations, harmony=harmony))
    return actions


def test_tick_invariants_hold_over_random_session() -> None:
    rng = np.random.default_rng(3)
    state = make_world_state(WorldConfig(energy=2.0, nutrients=1.5))
    organelle_ids = sorted(state.organelles)
    capacities = {oid: o.capacity for oid, o in state.organelles.items()}

    for step in range(150):
        prev_tier = state.tier
        state.pending_actions.extend(_random_actions(rng, organelle_ids, int(rng.integers(0, 5))))
        returned = tick(state)

        assert returned is state
        assert state.tick == step + 1
        assert state.tier >= prev_tier
        assert state.pending_actions == []
        assert state.resources.energy >= 0.0
        assert state.resources.nutrients >= 0.0
        assert 0.0 <= state.metrics.coherence <= 1.0
        assert 0.0 <= state.metrics.stability <= 1.0
        assert state.strain >= 0.0
        for oid, organelle in state.organelles.items():
            assert 0.0 <= organelle.utilization <= 1.0
            assert organelle.capacity == capacities[oid]
        assert all(e.id.endswith(f"-{step}") for e in state.active_events)


def test_empty_tick_only_decays_strain() -> None:
    state = _bare_state(strain=1.0)
    tick(state)
    assert state.strain == pytest.approx(0.6)
    tick(state)
    assert state.strain == pytest.approx(0.36)
    assert state.active_events == []
    assert state.metrics.coherence == 0.0
    assert state.metrics.warmth == pytest.approx(
        np.log(1e-4 / (0.18 + 1e-4)) - 0.1
    )


def test_tick_anomaly_scenario() -> None:
    state = _bare_state(tick=12, strain=3.0)
    tick(state)

    # 3.0 decays to 1.8 before triggers are evaluated
    assert state.strain == pytest.approx(1.8)
    assert [e.id for e in state.active_events] == ["anomaly-12"]
    assert state.resources.energy == pytest.approx(3.0)
    assert state.metrics.stability == 0.0
    assert state.tick == 13


def test_anomaly_energy_floor() -> None:
    state = _bare_state(strain=3.0, resources=Resources(energy=1.0, nutrients=10.0))
    tick(state)
    assert state.resources.energy == 0.0


def test_festival_coherence_applies_same_tick() -> None:
    state = _bare_state(metrics=Metrics(warmth=0.0, coherence=0.8, stability=0.5))
    tick(state, [PlayerAction(player_id="a", harmony=0.5)])

    assert [e.type for e in state.active_events] == ["festival"]
    # 0.5 harmony + 0.1 bonus, then +0.1 again when impacts are applied
    assert state.metrics.coherence == pytest.approx(0.7)
    assert state.resources.energy == pytest.approx(6.0)


def test_festival_uses_previous_coherence() -> None:
    state = _bare_state(metrics=Metrics(warmth=0.0, coherence=0.2, stability=0.5))
    tick(state, [PlayerAction(player_id="a", harmony=1.0)])
    assert state.active_events == []
    assert state.metrics.coherence == 1.0

    tick(state)
    assert [e.id for e in state.active_events] == ["festival-1"]


def test_repair_on_low_nutrients() -> None:
    state = _bare_state(resources=Resources(energy=0.0, nutrients=0.5))
    tick(state)
    assert [e.id for e in state.active_events] == ["repair-0"]
    assert state.resources.nutrients == pytest.approx(2.5)
    assert state.metrics.stability == pytest.approx(0.6)


def test_strain_sees_projected_nutrient_debt() -> None:
    state = _bare_state(
        organelles={"m": OrganelleState(capacity=10.0, efficiency=1.0, utilization=1.0)},
        resources=Resources(energy=0.0, nutrients=2.0),
    )
    tick(state)
    # debt 4.0 * 0.4 + load 1.0 * 0.2
    assert state.strain == pytest.approx(1.8)
    assert [e.type for e in state.active_events] == ["anomaly", "repair"]
    assert state.resources.energy == pytest.approx(8.0)
    assert state.resources.nutrients == pytest.approx(2.0)


def test_tick_advances_tier() -> None:
    state = _bare_state(
        organelles={"m": OrganelleState(capacity=10.0, efficiency=1.0, utilization=1.0)},
        resources=Resources(energy=0.0, nutrients=100.0),
        metrics=Metrics(warmth=0.0, coherence=0.5, stability=0.9),
    )
    params = TickParams(nutrient_cost_ratio=0.2)
    tick(state, [PlayerAction(player_id="a", harmony=1.0)], params=params)

    assert state.metrics.warmth > 0.5
    assert state.metrics.stability == 1.0
    assert state.tier == 1


def test_actions_argument_follows_queue() -> None:
    state = _bare_state(organelles={"m": OrganelleState(1.0, 1.0, 0.9)})
    state.pending_actions.append(
        PlayerAction(player_id="queued", allocations=(Allocation("m", 0.5),))
    )
    tick(state, [PlayerAction(player_id="late", allocations=(Allocation("m", -0.5),))])
    assert state.organelles["m"].utilization == pytest.approx(0.5)
    assert state.pending_actions == []


def test_hooks_called_in_order_with_final_state() -> None:
    calls: list[tuple[str, int, int]] = []
    state = _bare_state(pending_actions=[PlayerAction(player_id="a")])

    def persist(s: SimulationState) -> None:
        calls.append(("persist", id(s), s.tick))
        assert s.pending_actions == []

    def broadcast(s: SimulationState) -> None:
        calls.append(("broadcast", id(s), s.tick))

    tick(state, persist=persist, broadcast=broadcast)
    assert calls == [("persist", id(state), 1), ("broadcast", id(state), 1)]


def test_hook_failure_propagates_after_state_update() -> None:
    broadcasts: list[int] = []

    def persist(s: SimulationState) -> None:
        raise RuntimeError("storage down")

    state = _bare_state()
    with pytest.raises(RuntimeError, match="storage down"):
        tick(state, persist=persist, broadcast=lambda s: broadcasts.append(s.tick))
    assert state.tick == 1
    assert broadcasts == []


def test_non_finite_action_values_are_ignored() -> None:
    from cellWorld.world.encoding import action_from_dict

    state = make_world_state()
    before = {oid: o.utilization for oid, o in state.organelles.items()}
    actions = [
        action_from_dict(
            json.loads(
                '{"player_id": "p", "harmony": NaN,'
                ' "allocations": [{"organelle_id": "mitochondria", "delta": NaN}]}'
            )
        ),
        PlayerAction(
            player_id="q",
            allocations=(Allocation("ribosome", float("inf")), Allocation("chloroplast", float("-inf"))),
            harmony=float("-inf"),
        ),
    ]
    tick(state, actions)
    assert {oid: o.utilization for oid, o in state.organelles.items()} == before
    assert state.metrics.coherence == 0.0

    for _ in range(5):
        tick(state)
        for organelle in state.organelles.values():
            assert 0.0 <= organelle.utilization <= 1.0
        assert 0.0 <= state.metrics.coherence <= 1.0
        assert 0.0 <= state.metrics.stability <= 1.0
        values = [state.strain, state.blah, state.metrics.warmth,
                  state.resources.energy, state.resources.nutrients]
        assert np.all(np.isfinite(values))


def test_queue_list_is_reused_across_ticks() -> None:
    state = _bare_state(organelles={"m": OrganelleState(1.0, 1.0, 0.0)})
    queue = state.pending_actions
    queue.append(PlayerAction(player_id="a", allocations=(Allocation("m", 0.2),)))
    tick(state)
    assert state.pending_actions is queue
    assert queue == []

    queue.append(PlayerAction(player_id="b", allocations=(Allocation("m", 0.3),)))
    tick(state)
    assert state.organelles["m"].utilization == pytest.approx(0.5)
    assert queue == []
