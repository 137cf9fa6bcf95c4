"""Command-line entry point for a scripted local world run.

Run:
    cellworld-run --ticks 200 --players 4 --seed 0 --out runs/demo --plot
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

import numpy as np

from .engine import TickEngine
from .hooks import JsonSnapshotPersister, MetricsRecorder
from .world.state import Allocation, PlayerAction, SimulationState


def make_random_actions(
    rng: np.random.Generator,
    *,
    n_players: int,
    allocation_scale: float = 0.15,
    harmony_prob: float = 0.8,
):
    """Return an action source producing one random action per player per tick."""

    def source(state: SimulationState) -> list[PlayerAction]:
        organelle_ids = sorted(state.organelles)
        actions: list[PlayerAction] = []
        for p in range(n_players):
            allocations: tuple[Allocation, ...] = ()
            if organelle_ids:
                oid = organelle_ids[int(rng.integers(0, len(organelle_ids)))]
                delta = float(rng.normal(0.0, allocation_scale))
                allocations = (Allocation(organelle_id=oid, delta=delta),)
            harmony = float(rng.uniform(0.0, 1.0)) if rng.random() < harmony_prob else None
            actions.append(
                PlayerAction(player_id=f"player-{p}", allocations=allocations, harmony=harmony)
            )
        return actions

    return source


def run_session(
    *,
    ticks: int,
    players: int,
    seed: int,
    out_dir: Path,
    plot: bool = False,
) -> dict:
    rng = np.random.default_rng(seed)
    recorder = MetricsRecorder()
    persister = JsonSnapshotPersister(out_dir / "snapshot.json")
    engine = TickEngine(persist=persister, broadcast=recorder)
    engine.run(ticks, make_random_actions(rng, n_players=players))

    state = engine.state
    summary = {
        "config": {"ticks": ticks, "players": players, "seed": seed},
        "final": {
            "tick": state.tick,
            "tier": state.tier,
            "warmth": state.metrics.warmth,
            "coherence": state.metrics.coherence,
            "stability": state.metrics.stability,
            "energy": state.resources.energy,
            "nutrients": state.resources.nutrients,
            "strain": state.strain,
            "blah": state.blah,
        },
        "event_counts": recorder.event_counts(),
        "timeseries": {k: v.tolist() for k, v in recorder.as_arrays().items()},
    }
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "summary.json").write_text(json.dumps(summary, indent=2), encoding="utf-8")

    if plot and ticks > 0:
        from .plot_utils import plot_metric_history

        plot_metric_history(recorder, out_dir)
    return summary


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a scripted cellWorld session.")
    parser.add_argument("--ticks", type=int, default=100)
    parser.add_argument("--players", type=int, default=3)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--out", type=Path, default=Path("runs/cellworld"))
    parser.add_argument("--plot", action="store_true", help="write PNG time series")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.ticks < 0 or args.players < 0:
        parser.error("--ticks and --players must be >= 0")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    summary = run_session(
        ticks=args.ticks,
        players=args.players,
        seed=args.seed,
        out_dir=args.out,
        plot=args.plot,
    )
    final = summary["final"]
    print(
        f"tick={final['tick']} tier={final['tier']} "
        f"warmth={final['warmth']:.3f} coherence={final['coherence']:.3f} "
        f"stability={final['stability']:.3f} blah={final['blah']:.3f}"
    )
    print("Events:", summary["event_counts"])
    print("Saved:", args.out / "summary.json")


if __name__ == "__main__":
    main()
