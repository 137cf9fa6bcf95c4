"""Time-series plots of a recorded world history."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .hooks import MetricsRecorder


def plot_metric_history(recorder: MetricsRecorder, out_dir: str | Path) -> list[Path]:
    """Save metric, resource and strain plots for ``recorder`` into ``out_dir``.

    Returns the written file paths.
    """
    if len(recorder) == 0:
        raise ValueError("recorder has no ticks to plot")
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    series = recorder.as_arrays()
    t = series["tick"]
    written: list[Path] = []

    plt.figure(figsize=(10, 4.5))
    for key in ("coherence", "stability"):
        plt.plot(t, series[key], label=key)
    plt.xlabel("tick")
    plt.ylabel("bounded metric")
    plt.ylim(-0.05, 1.05)
    plt.title("Coherence and stability")
    plt.grid(True, alpha=0.25)
    plt.legend()
    plt.tight_layout()
    path = out / "bounded_metrics.png"
    plt.savefig(path, dpi=180)
    plt.close()
    written.append(path)

    plt.figure(figsize=(10, 4.5))
    plt.plot(t, series["warmth"], label="warmth")
    plt.plot(t, series["blah"], label="blah", linestyle="--")
    plt.step(t, series["tier"], label="tier", where="post")
    plt.xlabel("tick")
    plt.ylabel("score")
    plt.title("Warmth, composite score and tier")
    plt.grid(True, alpha=0.25)
    plt.legend()
    plt.tight_layout()
    path = out / "warmth_and_tier.png"
    plt.savefig(path, dpi=180)
    plt.close()
    written.append(path)

    plt.figure(figsize=(10, 4.5))
    plt.plot(t, series["energy"], label="energy")
    plt.plot(t, series["nutrients"], label="nutrients")
    plt.plot(t, series["strain"], label="strain", linestyle="--")
    plt.xlabel("tick")
    plt.ylabel("amount")
    plt.title("Resources and strain")
    plt.grid(True, alpha=0.25)
    plt.legend()
    plt.tight_layout()
    path = out / "resources_and_strain.png"
    plt.savefig(path, dpi=180)
    plt.close()
    written.append(path)

    return written
