import numpy as np
import pytest

from layernets.layers.softmax import SoftmaxLayer, softmax
from layernets.core.shapes import Vector
from layernets.training.losses import (
    DERIVATIVE_CAP,
    LOG_MIN,
    REGISTRY,
    CrossEntropy,
    Euclidean,
    MeanSquaredError,
)
from layernets.training.metrics import compute_metric, compute_metrics, default_metrics


def test_cross_entropy_value_and_gradient():
    loss = CrossEntropy()
    p = np.array([0.7, 0.2, 0.1])
    t = np.array([1.0, 0.0, 0.0])
    assert loss.evaluate(p, t) == pytest.approx(-np.log(0.7))
    np.testing.assert_allclose(loss.gradient(p, t), [-1.0 / 0.7, 0.0, 0.0])


def test_cross_entropy_clamps_log_and_caps_derivative():
    loss = CrossEntropy()
    p = np.array([0.0, 1.0])
    t = np.array([1.0, 0.0])
    value, grad = loss(p, t)
    assert value == pytest.approx(-np.log(LOG_MIN))
    np.testing.assert_array_equal(grad, [-DERIVATIVE_CAP, 0.0])


def test_cross_entropy_accepts_plain_list_targets():
    loss = CrossEntropy()
    p = np.array([0.0, 1.0])
    grad = loss.gradient(p, [0.0, 1.0])
    assert np.all(np.isfinite(grad))
    np.testing.assert_array_equal(grad, [0.0, -1.0])
    assert loss.evaluate(p, [0.0, 1.0]) == pytest.approx(loss.evaluate(p, np.array([0.0, 1.0])))
    np.testing.assert_array_equal(loss.gradient(p, (1, 0)), [-DERIVATIVE_CAP, 0.0])


def test_softmax_then_cross_entropy_gradient_is_difference():
    layer = SoftmaxLayer(Vector(3))
    logits = np.array([0.5, -0.3, 1.2])
    s, cache = layer.forward(logits)
    t = np.array([0.0, 1.0, 0.0])
    grad, _ = layer.backward(CrossEntropy().gradient(s, t), cache)
    np.testing.assert_allclose(grad, softmax(logits) - t, atol=1e-12)


def test_euclidean_and_mse():
    p = np.array([1.0, 2.0])
    t = np.zeros(2)
    assert Euclidean().evaluate(p, t) == pytest.approx(2.5)
    np.testing.assert_allclose(Euclidean().gradient(p, t), [1.0, 2.0])
    assert MeanSquaredError().evaluate(p, t) == pytest.approx(2.5)
    np.testing.assert_allclose(MeanSquaredError().gradient(p, t), [1.0, 2.0])


def test_registry_resolution():
    assert isinstance(REGISTRY.resolve("ce"), CrossEntropy)
    assert REGISTRY.get("cross_entropy") is REGISTRY.get("ce")
    assert "euclidean" in REGISTRY.names()
    with pytest.raises(KeyError, match="Available losses"):
        REGISTRY.resolve("hinge")
    assert CrossEntropy.task_type == "multiclass"
    assert Euclidean.task_type == "regression"


def test_metrics():
    preds = np.array([[0.9, 0.1], [0.2, 0.8], [0.6, 0.4]])
    targets = np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 1.0]])
    assert compute_metric("accuracy", preds, targets).value == pytest.approx(2 / 3)
    labels = np.array([[0], [1], [0]])
    assert compute_metric("accuracy", preds, labels).value == pytest.approx(1.0)
    results = compute_metrics(["mae", "RMSE"], np.array([1.0, 3.0]), np.array([2.0, 3.0]))
    assert results["mae"] == pytest.approx(0.5)
    assert results["rmse"] == pytest.approx(np.sqrt(0.5))
    assert default_metrics("multiclass") == ["accuracy"]
    assert default_metrics("binary") == ["binary_accuracy"]
    scores = np.array([[0.9], [0.2], [0.7]])
    labels01 = np.array([[1.0], [0.0], [0.0]])
    assert compute_metric("binary_accuracy", scores, labels01).value == pytest.approx(2 / 3)
    with pytest.raises(KeyError):
        compute_metric("f1", preds, targets)
