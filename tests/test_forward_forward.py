import numpy as np
import pytest

from layernets.core.activations import Sigmoid, Tanh
from layernets.core.shapes import Vector
from layernets.data import cycle_shuffling
from layernets.layers import Dense, Normalize
from layernets.network import Sequential
from layernets.training import BatchedTrainer, ForwardForward
from layernets.validation import numeric_gradient, relative_error


def _network(seed: int = 0):
    return Sequential([Dense(4, Tanh()), Normalize(), Dense(3, Tanh())]).construct(
        Vector(3), np.random.default_rng(seed)
    )


def _goodness(layer, inputs) -> float:
    out, _ = layer.forward(inputs)
    return float(np.sum(out * out))


def test_only_parametrised_layers_receive_gradients():
    solver = ForwardForward(Sigmoid(), threshold=1.0)
    result = solver.gradient(_network(), np.array([0.5, -0.2, 0.1]), np.array([1.0]))
    assert result.gradients[0] is not None
    assert result.gradients[1] is None
    assert set(result.gradients[2]) == {"weights", "bias"}
    assert 0.0 <= result.loss <= 1.0


@pytest.mark.parametrize("positive", [True, False])
def test_layer_gradient_matches_finite_differences(positive):
    solver = ForwardForward(Sigmoid(), threshold=1.5)
    network = _network(seed=3)
    first = network[0]
    x = np.array([0.3, -0.8, 0.6])
    sign = 1.0 if positive else -1.0

    def objective() -> float:
        excess = _goodness(first, x) - solver.threshold
        return -float(solver.activation(np.asarray(sign * excess)))

    result = solver.gradient(network, x, np.array([float(positive)]))
    for name, param in first.parameters().items():
        numeric = numeric_gradient(objective, param)
        assert relative_error(result.gradients[0][name], numeric) < 1e-5


def test_positive_step_raises_goodness_and_negative_step_lowers_it():
    solver = ForwardForward(Sigmoid(), threshold=2.0)
    x = np.array([0.4, 0.1, -0.5])
    for target, direction in ((np.array([1.0]), 1.0), (np.array([0.0]), -1.0)):
        network = _network(seed=5)
        before = _goodness(network[0], x)
        result = solver.gradient(network, x, target)
        network.apply_gradients(result.gradients, 0.05)
        after = _goodness(network[0], x)
        assert direction * (after - before) > 0


def test_goodness_is_rescaled_onto_unit_interval():
    solver = ForwardForward(Sigmoid(), threshold=3.0)
    assert solver.goodness(np.zeros(4)) == pytest.approx(0.0)
    assert solver.goodness(np.full(4, 10.0)) == pytest.approx(1.0)
    loss, prediction = solver.score(_network(), np.zeros(3), np.array([1.0]))
    assert loss == pytest.approx(1.0 - float(prediction[0]))


def test_trainer_reports_binary_accuracy_for_forward_forward():
    rng = np.random.default_rng(0)
    positives = [(rng.normal(size=3) + 2.0, np.array([1.0])) for _ in range(4)]
    negatives = [(rng.normal(size=3) * 0.1, np.array([0.0])) for _ in range(4)]
    samples = positives + negatives
    trainer = BatchedTrainer(batch_size=4, epoch_count=2, samples_per_epoch=8, seed=0)
    result = trainer.train(
        ForwardForward(Sigmoid(), threshold=1.0),
        _network(),
        cycle_shuffling(samples, np.random.default_rng(1)),
        test_data=samples,
    )
    assert result.epochs == 2
    metrics = result.last("test")
    assert set(metrics) == {"loss", "binary_accuracy"}
    assert 0.0 <= metrics["binary_accuracy"] <= 1.0
