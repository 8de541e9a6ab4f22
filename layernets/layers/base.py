"""Layer and blueprint contracts shared by every layer variant."""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..core.shapes import Shape
from ..core.types import Array, Gradients


def child_rng(rng: np.random.Generator) -> np.random.Generator:
    """Derive an independent generator from ``rng`` (advances ``rng``)."""

    return np.random.default_rng(int(rng.integers(0, np.iinfo(np.int64).max)))


class Layer:
    """A constructed layer: resolved shapes plus the parameters it owns.

    ``forward`` returns the output together with a cache holding what
    ``backward`` needs; neither call modifies the parameters. Parameters
    change only through ``apply_gradient``.
    """

    def __init__(self, input_shape: Shape) -> None:
        self.input_shape = input_shape

    def output_shape(self) -> Shape:
        return self.input_shape

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, Any]:
        raise NotImplementedError

    def backward(self, output_gradient: Array, cache: Any) -> Tuple[Array, Optional[Gradients]]:
        raise NotImplementedError

    def parameters(self) -> Dict[str, Array]:
        return {}

    def apply_gradient(self, gradient: Optional[Gradients], step: float) -> None:
        """Descend along ``gradient``: ``param -= step * gradient[name]``."""

        if gradient is None:
            return
        for name, param in self.parameters().items():
            grad = gradient.get(name)
            if grad is None:
                continue
            param -= step * grad

    def zero_gradient(self) -> Optional[Gradients]:
        params = self.parameters()
        if not params:
            return None
        return {name: np.zeros_like(param) for name, param in params.items()}

    def regularization_gradient(self) -> Optional[Gradients]:
        return None

    def parameter_count(self) -> int:
        return int(sum(int(param.size) for param in self.parameters().values()))

    def clone(self) -> "Layer":
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.input_shape} -> {self.output_shape()})"


class Blueprint:
    """Declarative, unresolved description of a layer.

    ``build`` resolves the blueprint against the shape produced by the
    preceding layer and materializes the layer, raising
    :class:`~layernets.core.errors.ShapeError` when the shapes disagree.
    """

    def build(self, input_shape: Shape, rng: np.random.Generator) -> Layer:
        raise NotImplementedError


__all__ = ["Layer", "Blueprint", "child_rng"]
