"""Forward-forward gradient solver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.activations import Activation
from ..core.types import Array, GradientBundle
from ..network.sequential import Network
from .backprop import SampleGradient

# Below this activated floor the goodness is rescaled onto [0, 1].
_RESCALE_MARGIN = 0.01


def is_positive(target: object) -> bool:
    """Read a forward-forward target (``bool`` or a one-element array)."""

    return bool(np.asarray(target, dtype=np.float64).reshape(-1)[0] > 0.5)


@dataclass
class ForwardForward:
    """Train every layer locally on the goodness ``sum(y**2)`` of its output.

    Positive samples (truthy target) push each parametrised layer's goodness
    above ``threshold`` and negative samples push it below, by descending
    ``-activation(+-(goodness - threshold))``. Gradients never cross layer
    boundaries; each layer only sees the output it produced itself.
    """

    activation: Activation
    threshold: float

    task_type = "binary"

    def goodness_gradient(self, output: Array, positive: bool) -> Array:
        y = np.asarray(output, dtype=np.float64)
        excess = float(np.sum(y * y)) - self.threshold
        if not positive:
            excess = -excess
        slope = float(self.activation.derivative(np.asarray(excess)))
        grad = 2.0 * slope * y
        return -grad if positive else grad

    def goodness(self, output: Array) -> float:
        """Activated goodness of ``output``, rescaled to ``[0, 1]`` when possible."""

        y = np.asarray(output, dtype=np.float64)
        value = float(self.activation(np.asarray(float(np.sum(y * y)) - self.threshold)))
        floor = float(self.activation(np.asarray(-self.threshold)))
        if floor < 1.0 - _RESCALE_MARGIN:
            value = (value - floor) / (1.0 - floor)
        return value

    def _loss(self, output: Array, positive: bool) -> float:
        value = self.goodness(output)
        return 1.0 - value if positive else value

    def gradient(
        self,
        network: Network,
        inputs: Array,
        target: Array,
        rng: Optional[np.random.Generator] = None,
    ) -> SampleGradient:
        positive = is_positive(target)
        gradients: GradientBundle = [None] * len(network)
        activation = inputs
        for idx, layer in enumerate(network):
            output, cache = layer.forward(activation, True, rng)
            if layer.parameters():
                _, gradients[idx] = layer.backward(self.goodness_gradient(output, positive), cache)
            activation = output
        return SampleGradient(
            prediction=activation,
            loss=self._loss(activation, positive),
            gradients=gradients,
        )

    def score(self, network: Network, inputs: Array, target: Array) -> tuple[float, Array]:
        output = network.predict(inputs)
        value = self.goodness(output)
        loss = 1.0 - value if is_positive(target) else value
        return loss, np.array([value])


__all__ = ["ForwardForward", "is_positive"]
