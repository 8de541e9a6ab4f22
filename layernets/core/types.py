"""Core typing contracts for layernets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

Array = np.ndarray

Sample = Tuple[Array, Array]
"""A single ``(input, target)`` pair drawn from a data stream."""

Gradients = Dict[str, Array]
"""Parameter gradients of one layer, keyed by parameter name."""

GradientBundle = List[Optional[Gradients]]
"""Per-layer gradients, index-aligned with a network's layers."""


@dataclass(frozen=True)
class EpochReport:
    """Metrics observed at the end of one epoch for one split."""

    epoch: int
    split: str
    metrics: Mapping[str, float]

    def record(self) -> Dict[str, object]:
        """Flat ``{"epoch", "split", <metric>: float}`` row; non-numeric metrics are dropped."""

        row: Dict[str, object] = {"epoch": int(self.epoch), "split": self.split}
        for name, value in self.metrics.items():
            if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
                row[name] = float(value)
        return row


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`layernets.training.trainer.BatchedTrainer.train`."""

    epochs: int
    batches: int
    samples: int
    stopped: bool = False
    history: List[EpochReport] = field(default_factory=list)

    def last(self, split: str = "train") -> Mapping[str, float]:
        for report in reversed(self.history):
            if report.split == split:
                return report.metrics
        return {}


__all__ = ["Array", "Sample", "Gradients", "GradientBundle", "EpochReport", "RunResult"]
