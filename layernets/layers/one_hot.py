"""Soft one-hot encoding of real-valued category indices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..core.errors import ShapeError
from ..core.shapes import Shape, Vector
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


class OneHotLayer(Layer):
    """Encode each input value ``x`` over ``categories`` slots.

    ``x`` splits between the slots ``low = clip(floor(x), 0, C - 2)`` and
    ``low + 1`` with weights ``1 - a`` and ``a``, ``a = clip(x - low, 0, 1)``,
    so integer inputs give exact one-hot rows and values in between
    interpolate. Out-of-range inputs saturate at the first or last slot.
    """

    def __init__(self, input_shape: Shape, categories: int) -> None:
        super().__init__(input_shape)
        self.categories = categories

    def output_shape(self) -> Shape:
        return Vector(self.input_shape.size * self.categories)

    def _split(self, inputs: Array) -> Tuple[Array, Array, Array]:
        x = np.asarray(inputs, dtype=np.float64).reshape(-1)
        low = np.clip(np.floor(x), 0, self.categories - 2).astype(np.int64)
        offset = x - low
        return low, np.clip(offset, 0.0, 1.0), offset

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        low, amount, offset = self._split(inputs)
        out = np.zeros((low.size, self.categories), dtype=np.float64)
        rows = np.arange(low.size)
        out[rows, low] = 1.0 - amount
        out[rows, low + 1] = amount
        return out.reshape(-1), (low, offset)

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        low, offset = cache
        g = np.asarray(output_gradient, dtype=np.float64).reshape(low.size, self.categories)
        rows = np.arange(low.size)
        # Saturated inputs have zero slope.
        inside = (offset > 0.0) & (offset < 1.0)
        grad = np.where(inside, g[rows, low + 1] - g[rows, low], 0.0)
        return grad.reshape(self.input_shape.dims), None


@dataclass(frozen=True)
class OneHot(Blueprint):
    """Blueprint of a :class:`OneHotLayer` over ``categories`` classes."""

    categories: int

    def __post_init__(self) -> None:
        if int(self.categories) < 2:
            raise ValueError("one-hot encoding needs at least two categories")

    def build(self, input_shape: Shape, rng: np.random.Generator) -> OneHotLayer:
        if not isinstance(input_shape, Vector):
            raise ShapeError(input_shape.flattened(), input_shape, reason="incompatible")
        return OneHotLayer(input_shape, int(self.categories))


__all__ = ["OneHot", "OneHotLayer"]
