"""Training utilities for layernets."""

from .backprop import Backprop, GradientSolver, SampleGradient, compute_sample_gradient
from .config import TrainerConfig, load_config
from .forward_forward import ForwardForward
from .losses import REGISTRY, CrossEntropy, Euclidean, Loss, LossRegistry, MeanSquaredError
from .metrics import compute_metrics, default_metrics
from .trainer import BatchedTrainer, MomentumState, as_solver

__all__ = [
    "Backprop",
    "GradientSolver",
    "SampleGradient",
    "compute_sample_gradient",
    "ForwardForward",
    "TrainerConfig",
    "load_config",
    "REGISTRY",
    "Loss",
    "LossRegistry",
    "MeanSquaredError",
    "Euclidean",
    "CrossEntropy",
    "compute_metrics",
    "default_metrics",
    "BatchedTrainer",
    "MomentumState",
    "as_solver",
]
