"""Loss functions and the registry used by the trainer."""

from __future__ import annotations

from typing import Dict, Iterable

import numpy as np

from ..core.types import Array

LOG_MIN = 1e-5
DERIVATIVE_CAP = 100.0


class Loss:
    """Pure map from ``(prediction, target)`` to a scalar and to dL/dprediction."""

    name: str = ""
    task_type: str = "regression"

    def evaluate(self, prediction: Array, target: Array) -> float:
        raise NotImplementedError

    def gradient(self, prediction: Array, target: Array) -> Array:
        raise NotImplementedError

    def __call__(self, prediction: Array, target: Array) -> tuple[float, Array]:
        return self.evaluate(prediction, target), self.gradient(prediction, target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _pair(prediction: Array, target: Array) -> tuple[Array, Array]:
    return np.asarray(prediction, dtype=np.float64), np.asarray(target, dtype=np.float64)


class MeanSquaredError(Loss):
    name = "mse"

    def evaluate(self, prediction: Array, target: Array) -> float:
        p, t = _pair(prediction, target)
        return float(np.mean(np.square(p - t)))

    def gradient(self, prediction: Array, target: Array) -> Array:
        p, t = _pair(prediction, target)
        diff = p - t
        return 2.0 * diff / diff.size


class Euclidean(Loss):
    """Half the squared Euclidean distance, ``0.5 * sum((p - t)^2)``."""

    name = "euclidean"

    def evaluate(self, prediction: Array, target: Array) -> float:
        p, t = _pair(prediction, target)
        return float(0.5 * np.sum(np.square(p - t)))

    def gradient(self, prediction: Array, target: Array) -> Array:
        p, t = _pair(prediction, target)
        return p - t


class CrossEntropy(Loss):
    """Cross-entropy ``-sum(t * log(p))`` over probabilities.

    ``prediction`` must already be a distribution (typically the output of a
    softmax layer); the target need not be one-hot. Probabilities are clamped
    at ``LOG_MIN`` inside the logarithm and the derivative magnitude is capped
    at ``DERIVATIVE_CAP``.
    """

    name = "ce"
    task_type = "multiclass"

    def evaluate(self, prediction: Array, target: Array) -> float:
        p, t = _pair(prediction, target)
        return float(-np.sum(t * np.log(np.maximum(p, LOG_MIN))))

    def gradient(self, prediction: Array, target: Array) -> Array:
        p, t = _pair(prediction, target)
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio = np.where(t == 0, 0.0, t / p)
        return -np.minimum(ratio, DERIVATIVE_CAP)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, loss: Loss) -> None:
        self._registry[name] = loss

    def get(self, name: str) -> Loss:
        try:
            return self._registry[name]
        except KeyError as exc:
            raise KeyError(f"Unknown loss: {name}") from exc

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def resolve(self, name: str) -> Loss:
        """Like :meth:`get`, but the error lists the registered names."""

        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown loss {name!r}. Available losses: {available}")
        return self._registry[name]


REGISTRY = LossRegistry()
REGISTRY.register("mse", MeanSquaredError())
REGISTRY.register("euclidean", Euclidean())
REGISTRY.register("ce", CrossEntropy())
# Long-form alias
REGISTRY.register("cross_entropy", REGISTRY.get("ce"))

__all__ = [
    "Loss",
    "MeanSquaredError",
    "Euclidean",
    "CrossEntropy",
    "LossRegistry",
    "REGISTRY",
]
