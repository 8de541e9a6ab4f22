"""Layers that reinterpret the layout of their input without touching values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.shapes import Shape, resolve, shape_of
from ..core.types import Array, Gradients
from .base import Blueprint, Layer


class ReshapeLayer(Layer):
    def __init__(self, input_shape: Shape, target: Shape) -> None:
        super().__init__(input_shape)
        self.target = target

    def output_shape(self) -> Shape:
        return self.target

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        return np.reshape(inputs, self.target.dims), None

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        return np.reshape(output_gradient, self.input_shape.dims), None


@dataclass(frozen=True)
class Flatten(Blueprint):
    """Flatten any input into a vector of the same element count."""

    def build(self, input_shape: Shape, rng: np.random.Generator) -> ReshapeLayer:
        return ReshapeLayer(input_shape, input_shape.flattened())


@dataclass(frozen=True)
class Reshape(Blueprint):
    """Reshape the input into ``target``; element counts must agree."""

    target: Union[Shape, Sequence[int]]

    def build(self, input_shape: Shape, rng: np.random.Generator) -> ReshapeLayer:
        target = self.target if isinstance(self.target, Shape) else shape_of(self.target)
        shape = resolve(target, input_shape, exact=False)
        return ReshapeLayer(shape, target)


__all__ = ["Flatten", "Reshape", "ReshapeLayer"]
