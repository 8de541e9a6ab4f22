"""Deterministic run summaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Mapping

import numpy as np

from ..core.types import RunResult


def summarize(result: RunResult) -> Mapping[str, object]:
    """Collapse a run's history into min/max/mean/last per split and metric."""

    series: Dict[str, Dict[str, list[float]]] = {}
    for report in result.history:
        bucket = series.setdefault(report.split, {})
        for name, value in report.metrics.items():
            bucket.setdefault(name, []).append(float(value))

    splits: Dict[str, Dict[str, Mapping[str, float]]] = {}
    for split, metrics in series.items():
        splits[split] = {}
        for name, values in metrics.items():
            arr = np.asarray(values, dtype=np.float64)
            splits[split][name] = {
                "min": float(np.min(arr)),
                "max": float(np.max(arr)),
                "mean": float(np.mean(arr)),
                "last": float(arr[-1]),
            }

    return {
        "version": 1,
        "epochs": result.epochs,
        "batches": result.batches,
        "samples": result.samples,
        "stopped": result.stopped,
        "splits": splits,
    }


def write_summary(result: RunResult, out_path: str | Path) -> str:
    """Write :func:`summarize` output as sorted JSON and return the path."""

    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summarize(result), sort_keys=True, indent=2))
    return str(path)


__all__ = ["summarize", "write_summary"]
