"""Configuration parsing for the tick engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


WARMTH_EPSILON = 1e-4
WARMTH_OFFSET = 0.1


@dataclass(frozen=True)
class TickParams:
    """Tuning constants for one simulation tick."""

    # Nutrient cost is a fixed fraction of energy output.
    nutrient_cost_ratio: float = 0.6
    strain_decay: float = 0.6
    strain_debt_weight: float = 0.4
    strain_load_weight: float = 0.2
    strain_cost_weight: float = 0.5
    warmth_epsilon: float = WARMTH_EPSILON
    warmth_offset: float = WARMTH_OFFSET
    stability_coherence_weight: float = 0.4
    stability_strain_weight: float = 0.3
    blah_rate: float = 0.2
    anomaly_strain_threshold: float = 1.5
    festival_coherence_threshold: float = 0.7
    repair_nutrient_threshold: float = 1.0
    tier_stability_threshold: float = 0.75
    tier_warmth_threshold: float = 0.5

    def __post_init__(self) -> None:
        if self.nutrient_cost_ratio < 0.0:
            raise ValueError("nutrient_cost_ratio must be >= 0")
        for key in ("strain_decay", "blah_rate"):
            if not (0.0 <= getattr(self, key) <= 1.0):
                raise ValueError(f"{key} must be in [0, 1]")
        for key in (
            "strain_debt_weight",
            "strain_load_weight",
            "strain_cost_weight",
            "stability_coherence_weight",
            "stability_strain_weight",
        ):
            if getattr(self, key) < 0.0:
                raise ValueError(f"{key} must be >= 0")
        if self.warmth_epsilon <= 0.0:
            raise ValueError("warmth_epsilon must be > 0")


@dataclass(frozen=True)
class OrganelleSpec:
    """Initial provisioning of one organelle."""

    capacity: float
    efficiency: float
    utilization: float = 0.0

    def __post_init__(self) -> None:
        if self.capacity < 0.0:
            raise ValueError("organelle capacity must be >= 0")
        if self.efficiency < 0.0:
            raise ValueError("organelle efficiency must be >= 0")
        if not (0.0 <= self.utilization <= 1.0):
            raise ValueError("organelle utilization must be in [0, 1]")


DEFAULT_ORGANELLES: dict[str, OrganelleSpec] = {
    "mitochondria": OrganelleSpec(capacity=4.0, efficiency=1.0, utilization=0.5),
    "chloroplast": OrganelleSpec(capacity=3.0, efficiency=0.8, utilization=0.25),
    "ribosome": OrganelleSpec(capacity=2.0, efficiency=1.2, utilization=0.0),
}


@dataclass(frozen=True)
class WorldConfig:
    """Initial world values used by :func:`~cellWorld.world.state.make_world_state`."""

    energy: float = 10.0
    nutrients: float = 10.0
    warmth: float = 0.0
    coherence: float = 0.5
    stability: float = 0.5
    strain: float = 0.0
    blah: float = 0.0
    organelles: Mapping[str, OrganelleSpec] = field(
        default_factory=lambda: dict(DEFAULT_ORGANELLES)
    )

    def __post_init__(self) -> None:
        if self.energy < 0.0 or self.nutrients < 0.0:
            raise ValueError("initial energy and nutrients must be >= 0")
        if not (0.0 <= self.coherence <= 1.0):
            raise ValueError("coherence must be in [0, 1]")
        if not (0.0 <= self.stability <= 1.0):
            raise ValueError("stability must be in [0, 1]")
        if self.strain < 0.0:
            raise ValueError("strain must be >= 0")


def load_params(config: Mapping[str, Any] | None) -> TickParams:
    """Parse a plain mapping into :class:`TickParams`.

    Missing keys keep their defaults; unknown keys raise ``ValueError``.
    """
    cfg = dict(config or {})
    known = set(TickParams.__dataclass_fields__)
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise ValueError(f"unknown tick params: {unknown}")
    return TickParams(**{key: float(value) for key, value in cfg.items()})


def _coerce_organelle(organelle_id: str, raw: Any) -> OrganelleSpec:
    if isinstance(raw, OrganelleSpec):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"organelle {organelle_id!r} must be a mapping")
    if "capacity" not in raw or "efficiency" not in raw:
        raise ValueError(
            f"organelle {organelle_id!r} requires 'capacity' and 'efficiency'"
        )
    return OrganelleSpec(
        capacity=float(raw["capacity"]),
        efficiency=float(raw["efficiency"]),
        utilization=float(raw.get("utilization", 0.0)),
    )


def load_world_config(config: Mapping[str, Any] | None) -> WorldConfig:
    """Parse initial world values; ``organelles`` defaults to the stock cell."""
    cfg = dict(config or {})

    raw_organelles = cfg.pop("organelles", None)
    if raw_organelles is None:
        organelles = dict(DEFAULT_ORGANELLES)
    else:
        if not isinstance(raw_organelles, Mapping):
            raise ValueError("organelles must be a mapping of id -> spec")
        organelles = {
            str(oid): _coerce_organelle(str(oid), raw)
            for oid, raw in raw_organelles.items()
        }

    known = set(WorldConfig.__dataclass_fields__) - {"organelles"}
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise ValueError(f"unknown world config keys: {unknown}")

    return WorldConfig(
        organelles=organelles,
        **{key: float(value) for key, value in cfg.items()},
    )


__all__ = [
    "TickParams",
    "OrganelleSpec",
    "WorldConfig",
    "DEFAULT_ORGANELLES",
    "WARMTH_EPSILON",
    "WARMTH_OFFSET",
    "load_params",
    "load_world_config",
]
