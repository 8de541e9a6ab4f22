"""layernets public API."""

from .core import activations, regularize, types  # noqa: F401
from .core.activations import Linear, LeakyRelu, Relu, Sigmoid, Tanh
from .core.errors import ConfigError, ConstructError, LayernetsError, ShapeError
from .core.regularize import L0, L1, L2, Elastic
from .core.shapes import Matrix, Shape, Tensor, Vector
from .core.types import RunResult
from .data.streams import argmax, cycle_shuffling, one_hot
from .layers import Dense, Dropout, Flatten, Isolate, Lock, Normalize, OneHot, Reshape, Softmax
from .network.sequential import Network, Sequential, construct
from .training.backprop import Backprop
from .training.config import TrainerConfig, load_config
from .training.forward_forward import ForwardForward
from .training.losses import CrossEntropy, Euclidean, MeanSquaredError
from .training.trainer import BatchedTrainer

__version__ = "0.3.0"

__all__ = [
    "activations",
    "regularize",
    "types",
    "Linear",
    "LeakyRelu",
    "Relu",
    "Sigmoid",
    "Tanh",
    "ConfigError",
    "ConstructError",
    "LayernetsError",
    "ShapeError",
    "L0",
    "L1",
    "L2",
    "Elastic",
    "Shape",
    "Vector",
    "Matrix",
    "Tensor",
    "RunResult",
    "argmax",
    "cycle_shuffling",
    "one_hot",
    "Dense",
    "Dropout",
    "Flatten",
    "Isolate",
    "Lock",
    "Normalize",
    "OneHot",
    "Reshape",
    "Softmax",
    "Network",
    "Sequential",
    "construct",
    "Backprop",
    "ForwardForward",
    "TrainerConfig",
    "load_config",
    "CrossEntropy",
    "Euclidean",
    "MeanSquaredError",
    "BatchedTrainer",
]
