"""Inverted dropout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..core.shapes import Shape, resolve
from ..core.types import Array, Gradients
from .base import Blueprint, Layer, child_rng


class DropoutLayer(Layer):
    """Zero each input with probability ``rate`` while training.

    Surviving entries are scaled by ``1 / (1 - rate)`` so the expected
    activation is unchanged; in inference mode the input is returned as is.
    """

    def __init__(self, input_shape: Shape, rate: float, rng: np.random.Generator) -> None:
        super().__init__(input_shape)
        self.rate = float(rate)
        self.rng = rng

    @property
    def retention(self) -> float:
        return 1.0 - self.rate

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        if not training or self.rate == 0.0:
            return inputs, None
        generator = rng if rng is not None else self.rng
        keep = self.retention
        mask = (generator.random(np.shape(inputs)) < keep) / keep
        return inputs * mask, mask

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        if cache is None:
            return output_gradient, None
        return output_gradient * cache, None

    def clone(self) -> "DropoutLayer":
        copy = super().clone()
        copy.rng = child_rng(self.rng)
        return copy

    def __repr__(self) -> str:
        return f"DropoutLayer(rate={self.rate}, shape={self.input_shape})"


@dataclass(frozen=True)
class Dropout(Blueprint):
    """Blueprint of a :class:`DropoutLayer`; ``rate`` is the drop probability."""

    rate: float
    input_shape: Optional[Shape] = None

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.rate) < 1.0:
            raise ValueError("dropout rate must be in [0, 1)")

    def build(self, input_shape: Shape, rng: np.random.Generator) -> DropoutLayer:
        shape = resolve(self.input_shape, input_shape, exact=True)
        return DropoutLayer(shape, self.rate, child_rng(rng))


__all__ = ["Dropout", "DropoutLayer"]
