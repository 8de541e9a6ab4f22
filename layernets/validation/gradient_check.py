"""
Gradient checking
=================

Compares analytic gradients from ``backward`` with centred finite
differences

.. math::
    \\frac{\\partial L}{\\partial \\theta_i}
    \\approx \\frac{L(\\theta_i + \\varepsilon) - L(\\theta_i - \\varepsilon)}{2 \\varepsilon}

and reports the relative error

.. math::
    \\frac{\\|g_a - g_n\\|_2}{\\|g_a\\|_2 + \\|g_n\\|_2 + 10^{-15}}

Values below ``1e-5`` indicate a correct backward pass; values above ``1e-3``
almost certainly point at a bug. Layers are evaluated in inference mode, so
stochastic layers such as dropout are checked as the identity.
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from ..core.types import Array
from ..layers.base import Layer
from ..network.sequential import Network
from ..training.losses import Loss


def relative_error(analytic: Array, numeric: Array) -> float:
    diff = np.linalg.norm(np.asarray(analytic) - np.asarray(numeric))
    norm_sum = np.linalg.norm(analytic) + np.linalg.norm(numeric) + 1e-15
    return float(diff / norm_sum)


def numeric_gradient(
    fn: Callable[[], float],
    array: Array,
    epsilon: float = 1e-6,
) -> Array:
    """Centred-difference gradient of ``fn()`` w.r.t. ``array``.

    ``array`` is perturbed in place one element at a time and restored.
    """

    numeric = np.zeros_like(array, dtype=np.float64)
    it = np.nditer(array, flags=["multi_index"], op_flags=["readwrite"])
    while not it.finished:
        idx = it.multi_index
        original = array[idx]
        array[idx] = original + epsilon
        loss_plus = fn()
        array[idx] = original - epsilon
        loss_minus = fn()
        array[idx] = original
        numeric[idx] = (loss_plus - loss_minus) / (2.0 * epsilon)
        it.iternext()
    return numeric


def check_layer(
    layer: Layer,
    inputs: Array,
    upstream: Array,
    epsilon: float = 1e-6,
) -> Dict[str, float]:
    """Relative errors for ``inputs`` and every parameter of ``layer``.

    Uses the proxy loss ``sum(layer(inputs) * upstream)``, whose gradient with
    respect to the layer output is exactly ``upstream``.
    """

    x = np.array(inputs, dtype=np.float64)

    def proxy() -> float:
        out, _ = layer.forward(x, training=False)
        return float(np.sum(out * upstream))

    _, cache = layer.forward(x, training=False)
    input_grad, param_grads = layer.backward(upstream, cache)

    errors = {"inputs": relative_error(input_grad, numeric_gradient(proxy, x, epsilon))}
    for name, param in layer.parameters().items():
        analytic = (param_grads or {}).get(name, np.zeros_like(param))
        errors[name] = relative_error(analytic, numeric_gradient(proxy, param, epsilon))
    return errors


def check_network(
    network: Network,
    loss: Loss,
    inputs: Array,
    target: Array,
    epsilon: float = 1e-6,
) -> Dict[str, float]:
    """Relative errors keyed ``"<layer index>.<parameter>"`` for a whole network."""

    def objective() -> float:
        return loss.evaluate(network.predict(inputs), target)

    prediction, caches = network.forward(inputs, training=False)
    gradients = network.backward(loss.gradient(prediction, target), caches)

    errors: Dict[str, float] = {}
    for index, layer in enumerate(network):
        grads = gradients[index] or {}
        for name, param in layer.parameters().items():
            analytic = grads.get(name, np.zeros_like(param))
            errors[f"{index}.{name}"] = relative_error(
                analytic, numeric_gradient(objective, param, epsilon)
            )
    return errors


__all__ = ["relative_error", "numeric_gradient", "check_layer", "check_network"]
