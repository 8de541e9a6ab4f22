"""Per-sample standardization layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..core.shapes import Shape, resolve
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


class NormalizeLayer(Layer):
    """Centre the input and divide by its (population) standard deviation.

    A constant input has zero deviation and yields NaN, like any other
    numeric degeneracy.
    """

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        x = np.asarray(inputs, dtype=np.float64)
        centred = x - x.mean()
        std = np.sqrt(np.mean(centred * centred))
        y = centred / std
        return y, (y, std)

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        y, std = cache
        g = np.asarray(output_gradient, dtype=np.float64)
        return (g - g.mean() - y * np.mean(g * y)) / std, None


@dataclass(frozen=True)
class Normalize(Blueprint):
    input_shape: Optional[Shape] = None

    def build(self, input_shape: Shape, rng: np.random.Generator) -> NormalizeLayer:
        return NormalizeLayer(resolve(self.input_shape, input_shape, exact=True))


__all__ = ["Normalize", "NormalizeLayer"]
