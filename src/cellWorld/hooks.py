"""Persist/broadcast hook strategies invoked at the end of each tick.

The tick core only needs a callable taking the final state. The classes
here are small concrete strategies for local runs and tests; real storage
and transport layers plug in by providing the same call signature.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from .world.encoding import state_to_dict
from .world.state import SimulationState


class JsonSnapshotPersister:
    """Write the latest state to a JSON file, overwriting the previous tick."""

    def __init__(self, path: str | Path, *, indent: int | None = 2):
        self.path = Path(path)
        self.indent = indent
        self.writes = 0

    def __call__(self, state: SimulationState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Dump beside the target and swap it in, so readers never see a partial file.
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(state_to_dict(state), f, indent=self.indent)
            tmp.replace(self.path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        self.writes += 1

    def load(self) -> Dict[str, Any]:
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)


HISTORY_FIELDS = (
    "tick",
    "tier",
    "warmth",
    "coherence",
    "stability",
    "energy",
    "nutrients",
    "strain",
    "blah",
)


@dataclass
class MetricsRecorder:
    """Keep a per-tick history of scalar world values.

    Used as a broadcast hook: every call appends one row copied out of the
    state, so later mutation of the state does not affect recorded rows.
    """

    rows: List[Dict[str, float]] = field(default_factory=list)
    events: List[List[str]] = field(default_factory=list)

    def __call__(self, state: SimulationState) -> None:
        self.rows.append(
            {
                "tick": float(state.tick),
                "tier": float(state.tier),
                "warmth": state.metrics.warmth,
                "coherence": state.metrics.coherence,
                "stability": state.metrics.stability,
                "energy": state.resources.energy,
                "nutrients": state.resources.nutrients,
                "strain": state.strain,
                "blah": state.blah,
            }
        )
        self.events.append([e.id for e in state.active_events])

    def __len__(self) -> int:
        return len(self.rows)

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Return one float64 array per history field, aligned by tick."""
        return {
            key: np.asarray([row[key] for row in self.rows], dtype=np.float64)
            for key in HISTORY_FIELDS
        }

    def event_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for ids in self.events:
            for event_id in ids:
                kind = event_id.rsplit("-", 1)[0]
                counts[kind] = counts.get(kind, 0) + 1
        return counts


__all__ = [
    "JsonSnapshotPersister",
    "MetricsRecorder",
    "HISTORY_FIELDS",
]
