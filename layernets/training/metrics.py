"""Metric helpers for held-out evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.types import Array

METRICS = ("accuracy", "binary_accuracy", "mae", "rmse", "r2")


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def default_metrics(task_type: str) -> List[str]:
    if task_type == "regression":
        return ["mae", "rmse"]
    if task_type == "multiclass":
        return ["accuracy"]
    if task_type == "binary":
        return ["binary_accuracy"]
    raise ValueError(f"Unknown task type: {task_type}")


def _class_indices(values: Array, n: int) -> Array:
    flat = values.reshape(n, -1)
    if flat.shape[1] == 1:
        return flat[:, 0].astype(int)
    return np.argmax(flat, axis=1)


def compute_metric(name: str, predictions: Array, targets: Array) -> MetricResult:
    """Compute ``name`` over stacked per-sample predictions and targets."""

    key = name.lower()
    preds = np.asarray(predictions, dtype=np.float64)
    targs = np.asarray(targets, dtype=np.float64)
    n = preds.shape[0]
    if key == "accuracy":
        pred_idx = np.argmax(preds.reshape(n, -1), axis=1)
        targ_idx = _class_indices(targs, n)
        value = float(np.mean(pred_idx == targ_idx))
    elif key == "binary_accuracy":
        # Scores above 0.5 count as positive.
        pred_pos = preds.reshape(n, -1)[:, 0] > 0.5
        targ_pos = targs.reshape(n, -1)[:, 0] > 0.5
        value = float(np.mean(pred_pos == targ_pos))
    elif key == "mae":
        value = float(np.mean(np.abs(preds - targs)))
    elif key == "rmse":
        value = float(np.sqrt(np.mean((preds - targs) ** 2)))
    elif key == "r2":
        mean = np.mean(targs, axis=0, keepdims=True)
        ss_res = float(np.sum((targs - preds) ** 2))
        ss_tot = float(np.sum((targs - mean) ** 2))
        value = 1.0 if ss_tot == 0 else float(1 - ss_res / (ss_tot + 1e-9))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str],
    predictions: Array,
    targets: Array,
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


__all__ = ["METRICS", "MetricResult", "default_metrics", "compute_metric", "compute_metrics"]
