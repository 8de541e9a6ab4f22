"""Backpropagation: per-sample loss and parameter gradients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from ..core.types import Array, GradientBundle
from ..network.sequential import Network
from .losses import Loss


@dataclass(frozen=True)
class SampleGradient:
    """Result of one forward/backward pass over a single sample."""

    prediction: Array
    loss: float
    gradients: GradientBundle


def compute_sample_gradient(
    network: Network,
    loss: Loss,
    inputs: Array,
    target: Array,
    rng: Optional[np.random.Generator] = None,
) -> SampleGradient:
    """Run a training-mode forward pass, the loss, and the backward pass.

    The network's parameters are only read, so independent samples can be
    evaluated concurrently; ``rng`` drives stochastic layers such as dropout.
    """

    prediction, caches = network.forward(inputs, training=True, rng=rng)
    loss_value, epsilon = loss(prediction, target)
    gradients = network.backward(epsilon, caches)
    return SampleGradient(prediction=prediction, loss=loss_value, gradients=gradients)


class GradientSolver(Protocol):
    """Protocol implemented by gradient-producing training strategies.

    ``task_type`` picks the default evaluation metrics of a training run.
    """

    task_type: str

    def gradient(
        self,
        network: Network,
        inputs: Array,
        target: Array,
        rng: Optional[np.random.Generator] = None,
    ) -> SampleGradient:
        """Return the loss and parameter gradients of one sample."""

    def score(self, network: Network, inputs: Array, target: Array) -> tuple[float, Array]:
        """Return the inference-mode loss and prediction of one sample."""


@dataclass
class Backprop:
    """Gradient solver that backpropagates ``loss`` through the network."""

    loss: Loss

    @property
    def task_type(self) -> str:
        return self.loss.task_type

    def gradient(
        self,
        network: Network,
        inputs: Array,
        target: Array,
        rng: Optional[np.random.Generator] = None,
    ) -> SampleGradient:
        return compute_sample_gradient(network, self.loss, inputs, target, rng)

    def score(self, network: Network, inputs: Array, target: Array) -> tuple[float, Array]:
        prediction = network.predict(inputs)
        return self.loss.evaluate(prediction, target), prediction


__all__ = ["SampleGradient", "compute_sample_gradient", "GradientSolver", "Backprop"]
