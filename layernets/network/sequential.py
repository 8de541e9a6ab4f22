"""Sequential composition: blueprint lists, shape inference and constructed networks."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.errors import ConstructError, ShapeError
from ..core.shapes import Shape
from ..core.types import Array, GradientBundle
from ..layers.base import Blueprint, Layer


class Network:
    """An ordered stack of constructed layers.

    Built by :meth:`Sequential.construct`, which guarantees that each layer's
    output shape equals the next layer's input shape. The passes below rely
    on that and do not re-check shapes.
    """

    def __init__(self, input_shape: Shape, layers: Sequence[Layer]) -> None:
        self.input_shape = input_shape
        self.layers: List[Layer] = list(layers)

    def output_shape(self) -> Shape:
        if not self.layers:
            return self.input_shape
        return self.layers[-1].output_shape()

    def forward(
        self,
        inputs: Array,
        training: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Array, List[Any]]:
        caches: List[Any] = []
        activation = inputs
        for layer in self.layers:
            activation, cache = layer.forward(activation, training, rng)
            caches.append(cache)
        return activation, caches

    def backward(self, output_gradient: Array, caches: Sequence[Any]) -> GradientBundle:
        gradients: GradientBundle = [None] * len(self.layers)
        epsilon = output_gradient
        for idx in reversed(range(len(self.layers))):
            epsilon, gradients[idx] = self.layers[idx].backward(epsilon, caches[idx])
        return gradients

    def apply_gradients(
        self,
        gradients: GradientBundle,
        steps: Union[float, Sequence[float]],
    ) -> None:
        if np.isscalar(steps):
            steps = [float(steps)] * len(self.layers)
        for layer, gradient, step in zip(self.layers, gradients, steps):
            layer.apply_gradient(gradient, step)

    def predict(self, inputs: Array) -> Array:
        output, _ = self.forward(inputs, training=False)
        return output

    def zero_gradients(self) -> GradientBundle:
        return [layer.zero_gradient() for layer in self.layers]

    def regularization_gradients(self) -> GradientBundle:
        return [layer.regularization_gradient() for layer in self.layers]

    def parameter_count(self) -> int:
        return int(sum(layer.parameter_count() for layer in self.layers))

    def clone(self) -> "Network":
        return Network(self.input_shape, [layer.clone() for layer in self.layers])

    def summary(self) -> str:
        header = f"{'Layer':<40} {'Output Shape':<20} {'# Params':>10}"
        lines = [header, "=" * len(header), f"{'Input':<40} {str(self.input_shape):<20} {0:>10,}"]
        for layer in self.layers:
            lines.append(
                f"{type(layer).__name__:<40} {str(layer.output_shape()):<20} "
                f"{layer.parameter_count():>10,}"
            )
        lines.append("=" * len(header))
        lines.append(f"Total trainable params: {self.parameter_count():,}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def __getitem__(self, index: int) -> Layer:
        return self.layers[index]

    def __repr__(self) -> str:
        inner = ",\n  ".join(repr(layer) for layer in self.layers)
        return f"Network(\n  {inner}\n)"


class Sequential:
    """Ordered list of layer blueprints awaiting construction."""

    def __init__(self, blueprints: Iterable[Blueprint] = ()) -> None:
        self._blueprints: List[Blueprint] = list(blueprints)

    def add(self, blueprint: Blueprint) -> "Sequential":
        """Append a blueprint and return self (for chaining)."""
        self._blueprints.append(blueprint)
        return self

    @property
    def blueprints(self) -> List[Blueprint]:
        return list(self._blueprints)

    def construct(
        self,
        input_shape: Shape,
        rng: Optional[np.random.Generator] = None,
    ) -> Network:
        """Resolve every blueprint left to right and materialize the network.

        Raises :class:`ConstructError` naming the first blueprint whose
        input shape cannot be satisfied; nothing is returned in that case.
        """

        rng = rng if rng is not None else np.random.default_rng()
        current = input_shape
        layers: List[Layer] = []
        for index, blueprint in enumerate(self._blueprints):
            try:
                layer = blueprint.build(current, rng)
            except ShapeError as exc:
                raise ConstructError(index, exc.expected, exc.found, exc.reason) from exc
            layers.append(layer)
            current = layer.output_shape()
        return Network(input_shape, layers)

    def __len__(self) -> int:
        return len(self._blueprints)

    def __iter__(self) -> Iterator[Blueprint]:
        return iter(self._blueprints)

    def __repr__(self) -> str:
        inner = ", ".join(repr(blueprint) for blueprint in self._blueprints)
        return f"Sequential([{inner}])"


def construct(
    blueprints: Iterable[Blueprint],
    input_shape: Shape,
    rng: Optional[np.random.Generator] = None,
) -> Network:
    """Shortcut for ``Sequential(blueprints).construct(input_shape, rng)``."""

    return Sequential(blueprints).construct(input_shape, rng)


__all__ = ["Network", "Sequential", "construct"]
