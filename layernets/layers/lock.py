"""Freeze a layer so that training leaves its parameters untouched."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..core.shapes import Shape
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


class LockedLayer(Layer):
    """Delegates evaluation and gradient flow to ``layer`` but never trains it."""

    def __init__(self, layer: Layer) -> None:
        super().__init__(layer.input_shape)
        self.layer = layer

    def output_shape(self) -> Shape:
        return self.layer.output_shape()

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        return self.layer.forward(inputs, training, rng)

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        input_gradient, _ = self.layer.backward(output_gradient, cache)
        return input_gradient, None

    def unlock(self) -> Layer:
        return self.layer

    def __repr__(self) -> str:
        return f"LockedLayer({self.layer!r})"


@dataclass(frozen=True)
class Lock(Blueprint):
    inner: Blueprint

    def build(self, input_shape: Shape, rng: np.random.Generator) -> LockedLayer:
        return LockedLayer(self.inner.build(input_shape, rng))


__all__ = ["Lock", "LockedLayer"]
