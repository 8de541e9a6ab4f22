"""Softmax normalization along the final axis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..core.shapes import Shape, resolve
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


def softmax(x: Array) -> Array:
    z = np.asarray(x, dtype=np.float64)
    z = z - z.max(axis=-1, keepdims=True)
    e = np.exp(z)
    return e / e.sum(axis=-1, keepdims=True)


class SoftmaxLayer(Layer):
    """Turn each row of the input into a probability distribution.

    The backward pass multiplies the incoming gradient by the full softmax
    Jacobian, ``diag(s) - s s^T``; it does not assume any particular loss.
    """

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        s = softmax(inputs)
        return s, s

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        s = cache
        g = np.asarray(output_gradient, dtype=np.float64)
        weighted = np.sum(s * g, axis=-1, keepdims=True)
        return s * (g - weighted), None


@dataclass(frozen=True)
class Softmax(Blueprint):
    input_shape: Optional[Shape] = None

    def build(self, input_shape: Shape, rng: np.random.Generator) -> SoftmaxLayer:
        return SoftmaxLayer(resolve(self.input_shape, input_shape, exact=True))


__all__ = ["Softmax", "SoftmaxLayer", "softmax"]
