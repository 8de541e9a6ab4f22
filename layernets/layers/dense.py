"""Fully-connected layer with an elementwise activation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..core.activations import Activation, Linear
from ..core.regularize import L0, Regularizer
from ..core.shapes import Shape, Vector, resolve
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


class DenseLayer(Layer):
    """Affine map of the flattened input followed by ``activation``.

    ``weights`` has shape ``(units, inputs)`` and ``bias`` shape ``(units,)``.
    """

    def __init__(
        self,
        input_shape: Shape,
        weights: Array,
        bias: Array,
        activation: Optional[Activation] = None,
        regularizer: Optional[Regularizer] = None,
    ) -> None:
        super().__init__(input_shape)
        weights = np.array(weights, dtype=np.float64)
        bias = np.array(bias, dtype=np.float64).reshape(-1)
        if weights.ndim != 2 or weights.shape[1] != input_shape.size:
            raise ValueError(
                f"weights must have shape (units, {input_shape.size}), got {weights.shape}"
            )
        if bias.shape[0] != weights.shape[0]:
            raise ValueError("bias length must match the number of units")
        self.weights = weights
        self.bias = bias
        self.activation = activation or Linear()
        self.regularizer = regularizer or L0()

    @property
    def units(self) -> int:
        return int(self.weights.shape[0])

    def output_shape(self) -> Shape:
        return Vector(self.units)

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        x = np.asarray(inputs, dtype=np.float64).reshape(-1)
        z = self.weights @ x + self.bias
        return self.activation(z), (np.shape(inputs), x, z)

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        input_dims, x, z = cache
        delta = np.asarray(output_gradient, dtype=np.float64).reshape(-1)
        delta = delta * self.activation.derivative(z)
        grads: Gradients = {"weights": np.outer(delta, x), "bias": delta}
        input_gradient = (self.weights.T @ delta).reshape(input_dims)
        return input_gradient, grads

    def parameters(self) -> Dict[str, Array]:
        return {"weights": self.weights, "bias": self.bias}

    def regularization_gradient(self) -> Optional[Gradients]:
        return {
            "weights": self.regularizer.derivative(self.weights),
            "bias": np.zeros_like(self.bias),
        }

    def __repr__(self) -> str:
        return (
            f"DenseLayer({self.input_shape.size} -> {self.units}, "
            f"activation={self.activation!r})"
        )


@dataclass(frozen=True)
class Dense(Blueprint):
    """Blueprint of a :class:`DenseLayer` with ``units`` outputs.

    Dense layers accept any input shape and flatten it; a declared
    ``input_shape`` only has to match the element count.
    """

    units: int
    activation: Activation = field(default_factory=Linear)
    regularizer: Regularizer = field(default_factory=L0)
    input_shape: Optional[Shape] = None

    def __post_init__(self) -> None:
        if int(self.units) <= 0:
            raise ValueError("units must be positive")

    def build(self, input_shape: Shape, rng: np.random.Generator) -> DenseLayer:
        shape = resolve(self.input_shape, input_shape, exact=False)
        fan_in = shape.size
        std = np.sqrt(self.activation.variance_hint * 2.0 / (fan_in + self.units))
        weights = rng.normal(0.0, std, size=(self.units, fan_in))
        bias = np.full(self.units, self.activation.bias_hint, dtype=np.float64)
        return DenseLayer(shape, weights, bias, self.activation, self.regularizer)


__all__ = ["Dense", "DenseLayer"]
