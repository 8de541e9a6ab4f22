"""Elementwise activation functions with their derivatives."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Array


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def sigmoid(x: Array) -> Array:
    return 1.0 / (1.0 + np.exp(-x))


class Activation:
    """Differentiable elementwise function applied after a dense transform.

    ``variance_hint`` and ``bias_hint`` tune the initial weight spread and
    bias of the dense layer the activation belongs to.
    """

    variance_hint: float = 1.0
    bias_hint: float = 0.0

    def __call__(self, x: Array) -> Array:
        raise NotImplementedError

    def derivative(self, x: Array) -> Array:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Linear(Activation):
    def __call__(self, x: Array) -> Array:
        return x

    def derivative(self, x: Array) -> Array:
        return np.ones_like(x)


class Relu(Activation):
    variance_hint = 2.0
    bias_hint = 0.1

    def __call__(self, x: Array) -> Array:
        return relu(x)

    def derivative(self, x: Array) -> Array:
        return (x > 0).astype(np.float64)


@dataclass(frozen=True, repr=False)
class LeakyRelu(Activation):
    slope: float = 0.01

    variance_hint = 2.0
    bias_hint = 0.1

    def __call__(self, x: Array) -> Array:
        return np.where(x > 0, x, self.slope * x)

    def derivative(self, x: Array) -> Array:
        return np.where(x > 0, 1.0, self.slope)

    def __repr__(self) -> str:
        return f"LeakyRelu({self.slope})"


class Tanh(Activation):
    def __call__(self, x: Array) -> Array:
        return np.tanh(x)

    def derivative(self, x: Array) -> Array:
        y = np.tanh(x)
        return 1.0 - y * y


class Sigmoid(Activation):
    def __call__(self, x: Array) -> Array:
        return sigmoid(x)

    def derivative(self, x: Array) -> Array:
        y = sigmoid(x)
        return y * (1.0 - y)


__all__ = [
    "Activation",
    "Linear",
    "Relu",
    "LeakyRelu",
    "Tanh",
    "Sigmoid",
    "relu",
    "sigmoid",
]
