"""Weight penalties whose gradients are folded into each batch update."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Array


class Regularizer:
    """Penalty on a layer's weights (biases are never penalised)."""

    def penalty(self, weights: Array) -> float:
        raise NotImplementedError

    def derivative(self, weights: Array) -> Array:
        raise NotImplementedError


class L0(Regularizer):
    """No regularization."""

    def penalty(self, weights: Array) -> float:
        return 0.0

    def derivative(self, weights: Array) -> Array:
        return np.zeros_like(weights)

    def __repr__(self) -> str:
        return "L0()"


@dataclass(frozen=True)
class L1(Regularizer):
    factor: float

    def penalty(self, weights: Array) -> float:
        return float(self.factor * np.sum(np.abs(weights)))

    def derivative(self, weights: Array) -> Array:
        return self.factor * np.sign(weights)


@dataclass(frozen=True)
class L2(Regularizer):
    factor: float

    def penalty(self, weights: Array) -> float:
        return float(0.5 * self.factor * np.sum(weights * weights))

    def derivative(self, weights: Array) -> Array:
        return self.factor * weights


@dataclass(frozen=True)
class Elastic(Regularizer):
    l1: float
    l2: float

    def penalty(self, weights: Array) -> float:
        return L1(self.l1).penalty(weights) + L2(self.l2).penalty(weights)

    def derivative(self, weights: Array) -> Array:
        return L1(self.l1).derivative(weights) + L2(self.l2).derivative(weights)


__all__ = ["Regularizer", "L0", "L1", "L2", "Elastic"]
