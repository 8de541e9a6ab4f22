"""Select a contiguous slice of a vector input."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..core.errors import ShapeError
from ..core.shapes import Shape, Vector
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


class IsolateLayer(Layer):
    """Forward ``x[start:end]``; backward scatters into a zero vector."""

    def __init__(self, input_shape: Shape, start: int, end: int) -> None:
        super().__init__(input_shape)
        self.start = start
        self.end = end

    def output_shape(self) -> Shape:
        return Vector(self.end - self.start)

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        return np.asarray(inputs)[self.start:self.end], None

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        grad = np.zeros(self.input_shape.dims, dtype=np.float64)
        grad[self.start:self.end] = output_gradient
        return grad, None

    def __repr__(self) -> str:
        return f"IsolateLayer([{self.start}, {self.end}) of {self.input_shape})"


@dataclass(frozen=True)
class Isolate(Blueprint):
    """Keep the entries ``start`` (inclusive) to ``end`` (exclusive) of a vector."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if int(self.start) < 0:
            raise ValueError("isolate start must be non-negative")

    def build(self, input_shape: Shape, rng: np.random.Generator) -> IsolateLayer:
        if not isinstance(input_shape, Vector):
            raise ShapeError(input_shape.flattened(), input_shape, reason="incompatible")
        if self.start >= self.end:
            raise ShapeError(
                Vector(max(self.end, 1)), input_shape, reason="out of order"
            )
        if self.end > input_shape.length:
            raise ShapeError(Vector(self.end), input_shape, reason="out of bound")
        return IsolateLayer(input_shape, int(self.start), int(self.end))


__all__ = ["Isolate", "IsolateLayer"]
