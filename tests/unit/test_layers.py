import numpy as np
import pytest

from layernets.core.activations import Relu, Tanh
from layernets.core.errors import ShapeError
from layernets.core.regularize import L1, L2
from layernets.core.shapes import Matrix, Vector
from layernets.layers import (
    Dense,
    Dropout,
    Flatten,
    Isolate,
    Lock,
    Normalize,
    OneHot,
    Reshape,
    Softmax,
)
from layernets.network import Sequential
from layernets.validation import check_layer


def test_dense_forward_shape_and_flattening():
    rng = np.random.default_rng(0)
    layer = Dense(3).build(Matrix(2, 2), rng)
    assert layer.output_shape() == Vector(3)
    out, cache = layer.forward(np.ones((2, 2)))
    assert out.shape == (3,)
    grad_in, grads = layer.backward(np.ones(3), cache)
    assert grad_in.shape == (2, 2)
    assert grads["weights"].shape == (3, 4)
    assert grads["bias"].shape == (3,)


def test_dense_initialisation_follows_activation_hints():
    layer = Dense(50, Relu()).build(Vector(50), np.random.default_rng(1))
    np.testing.assert_allclose(layer.bias, 0.1)
    expected_std = np.sqrt(2.0 * 2.0 / 100)
    assert abs(float(np.std(layer.weights)) - expected_std) < 0.02


def test_dense_rejects_non_positive_units():
    with pytest.raises(ValueError):
        Dense(0)


def test_dense_gradients_match_finite_differences():
    rng = np.random.default_rng(2)
    layer = Dense(4, Tanh()).build(Vector(3), rng)
    errors = check_layer(layer, rng.normal(size=3), rng.normal(size=4))
    assert set(errors) == {"inputs", "weights", "bias"}
    assert max(errors.values()) < 1e-5


def test_softmax_gradients_match_finite_differences():
    rng = np.random.default_rng(3)
    layer = Softmax().build(Vector(5), rng)
    errors = check_layer(layer, rng.normal(size=5), rng.normal(size=5))
    assert errors["inputs"] < 1e-5


def test_normalize_gradients_match_finite_differences():
    rng = np.random.default_rng(4)
    layer = Normalize().build(Vector(6), rng)
    errors = check_layer(layer, rng.normal(size=6), rng.normal(size=6))
    assert errors["inputs"] < 1e-5
    out, _ = layer.forward(rng.normal(size=6))
    assert abs(float(out.mean())) < 1e-12
    assert abs(float(out.std()) - 1.0) < 1e-12


def test_softmax_outputs_are_distributions():
    layer = Softmax().build(Vector(3), np.random.default_rng(0))
    for inputs in (np.array([1.0, 2.0, 3.0]), np.array([1000.0, 1001.0, 999.0]), np.zeros(3)):
        out, _ = layer.forward(inputs)
        assert np.all(out > 0) and np.all(out < 1)
        assert out.sum() == pytest.approx(1.0)


def test_dropout_is_identity_at_inference():
    layer = Dropout(0.5).build(Vector(8), np.random.default_rng(0))
    x = np.arange(8, dtype=float)
    out, cache = layer.forward(x, training=False)
    np.testing.assert_array_equal(out, x)
    grad, grads = layer.backward(np.ones(8), cache)
    np.testing.assert_array_equal(grad, np.ones(8))
    assert grads is None


def test_dropout_statistics_while_training():
    layer = Dropout(0.5).build(Vector(20000), np.random.default_rng(5))
    out, mask = layer.forward(np.ones(20000), training=True)
    dropped = float(np.mean(out == 0.0))
    assert abs(dropped - 0.5) < 0.03
    assert abs(float(out.mean()) - 1.0) < 0.05
    grad, _ = layer.backward(np.ones(20000), mask)
    np.testing.assert_array_equal(grad == 0.0, out == 0.0)


def test_dropout_rng_override_is_reproducible():
    layer = Dropout(0.3).build(Vector(50), np.random.default_rng(0))
    first, _ = layer.forward(np.ones(50), training=True, rng=np.random.default_rng(9))
    second, _ = layer.forward(np.ones(50), training=True, rng=np.random.default_rng(9))
    np.testing.assert_array_equal(first, second)


@pytest.mark.parametrize("rate", [-0.1, 1.0])
def test_dropout_rate_bounds(rate):
    with pytest.raises(ValueError):
        Dropout(rate)


def test_reshape_and_flatten_round_trip_gradients():
    rng = np.random.default_rng(0)
    reshape = Reshape((2, 3)).build(Vector(6), rng)
    assert reshape.output_shape() == Matrix(2, 3)
    out, cache = reshape.forward(np.arange(6.0))
    assert out.shape == (2, 3)
    grad, _ = reshape.backward(np.ones((2, 3)), cache)
    assert grad.shape == (6,)

    flatten = Flatten().build(Matrix(2, 3), rng)
    assert flatten.output_shape() == Vector(6)
    grad, _ = flatten.backward(np.ones(6), None)
    assert grad.shape == (2, 3)


def test_reshape_rejects_element_count_mismatch():
    with pytest.raises(ShapeError):
        Reshape((4,)).build(Vector(6), np.random.default_rng(0))


def test_locked_layer_passes_gradient_but_never_trains():
    network = Sequential([Lock(Dense(2)), Dense(1)]).construct(Vector(2), np.random.default_rng(0))
    locked = network[0].unlock()
    before = locked.weights.copy()
    output, caches = network.forward(np.array([1.0, -1.0]), training=True)
    gradients = network.backward(np.ones_like(output), caches)
    assert gradients[0] is None
    assert gradients[1] is not None
    network.apply_gradients(gradients, 0.5)
    np.testing.assert_array_equal(locked.weights, before)
    assert network[0].parameter_count() == 0


def test_regularization_gradients():
    rng = np.random.default_rng(0)
    layer = Dense(3, regularizer=L2(0.5)).build(Vector(2), rng)
    grads = layer.regularization_gradient()
    np.testing.assert_allclose(grads["weights"], 0.5 * layer.weights)
    np.testing.assert_array_equal(grads["bias"], np.zeros(3))

    layer = Dense(3, regularizer=L1(0.2)).build(Vector(2), rng)
    np.testing.assert_allclose(layer.regularization_gradient()["weights"], 0.2 * np.sign(layer.weights))


def test_apply_gradient_descends_in_place():
    layer = Dense(2).build(Vector(2), np.random.default_rng(0))
    weights = layer.weights
    expected = weights - 0.1 * np.ones_like(weights)
    layer.apply_gradient({"weights": np.ones_like(weights)}, 0.1)
    assert layer.weights is weights
    np.testing.assert_allclose(layer.weights, expected)


def test_dense_apply_gradients_accepts_numpy_scalar_step():
    network = Sequential([Dense(2)]).construct(Vector(2), np.random.default_rng(0))
    weights = network[0].weights.copy()
    network.apply_gradients([{"weights": np.ones_like(weights)}], np.float32(0.5))
    np.testing.assert_allclose(network[0].weights, weights - 0.5)


def test_cloned_dropout_draws_its_own_masks():
    layer = Dropout(0.5).build(Vector(64), np.random.default_rng(0))
    copy = layer.clone()
    assert copy.rng is not layer.rng
    first, _ = layer.forward(np.ones(64), training=True)
    second, _ = copy.forward(np.ones(64), training=True)
    assert not np.array_equal(first, second)


def test_isolate_selects_slice_and_scatters_gradient():
    rng = np.random.default_rng(0)
    layer = Isolate(1, 4).build(Vector(6), rng)
    assert layer.output_shape() == Vector(3)
    out, cache = layer.forward(np.arange(6.0))
    np.testing.assert_array_equal(out, [1.0, 2.0, 3.0])
    grad, grads = layer.backward(np.array([1.0, 2.0, 3.0]), cache)
    np.testing.assert_array_equal(grad, [0.0, 1.0, 2.0, 3.0, 0.0, 0.0])
    assert grads is None
    errors = check_layer(layer, rng.normal(size=6), rng.normal(size=3))
    assert errors["inputs"] < 1e-5


@pytest.mark.parametrize(
    "blueprint, shape, reason",
    [
        (Isolate(3, 3), Vector(6), "out of order"),
        (Isolate(4, 2), Vector(6), "out of order"),
        (Isolate(2, 7), Vector(6), "out of bound"),
        (Isolate(0, 2), Matrix(2, 3), "incompatible"),
    ],
)
def test_isolate_rejects_bad_ranges(blueprint, shape, reason):
    with pytest.raises(ShapeError) as excinfo:
        blueprint.build(shape, np.random.default_rng(0))
    assert excinfo.value.reason == reason
    assert excinfo.value.found == shape


def test_isolate_rejects_negative_start():
    with pytest.raises(ValueError):
        Isolate(-1, 2)


def test_one_hot_encodes_and_interpolates():
    layer = OneHot(3).build(Vector(3), np.random.default_rng(0))
    assert layer.output_shape() == Vector(9)
    out, _ = layer.forward(np.array([0.0, 2.0, 0.25]))
    np.testing.assert_allclose(
        out.reshape(3, 3),
        [[1.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.75, 0.25, 0.0]],
    )
    saturated, _ = layer.forward(np.array([-3.0, 7.0, 1.0]))
    np.testing.assert_allclose(
        saturated.reshape(3, 3),
        [[1.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.0, 1.0, 0.0]],
    )


def test_one_hot_gradients_match_finite_differences():
    rng = np.random.default_rng(6)
    layer = OneHot(4).build(Vector(3), rng)
    errors = check_layer(layer, np.array([0.3, 1.6, 2.25]), rng.normal(size=12))
    assert errors["inputs"] < 1e-5
    _, cache = layer.forward(np.array([-1.0, 5.0, 1.5]))
    grad, _ = layer.backward(np.arange(12.0), cache)
    np.testing.assert_allclose(grad, [0.0, 0.0, 1.0])


def test_one_hot_requires_vector_input_and_two_categories():
    with pytest.raises(ShapeError):
        OneHot(3).build(Matrix(2, 2), np.random.default_rng(0))
    with pytest.raises(ValueError):
        OneHot(1)
