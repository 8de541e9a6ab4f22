"""Core numerical primitives for layernets."""

from . import activations, errors, regularize, shapes, types

__all__ = ["activations", "errors", "regularize", "shapes", "types"]
