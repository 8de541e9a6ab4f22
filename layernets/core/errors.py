"""Exception taxonomy for layernets."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .shapes import Shape


class LayernetsError(Exception):
    """Base class for every error raised by layernets."""


class ShapeError(LayernetsError):
    """A layer cannot accept the shape produced by its predecessor."""

    def __init__(self, expected: "Shape", found: "Shape", reason: str = "") -> None:
        self.expected = expected
        self.found = found
        self.reason = reason
        message = f"expected {expected}, found {found}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ConstructError(LayernetsError):
    """Construction of a sequential network failed at ``layer_index``."""

    def __init__(
        self, layer_index: int, expected: "Shape", found: "Shape", reason: str = ""
    ) -> None:
        self.layer_index = layer_index
        self.expected = expected
        self.found = found
        self.reason = reason
        message = f"layer {layer_index}: expected input shape {expected}, found {found}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ConfigError(LayernetsError, ValueError):
    """Invalid trainer configuration, rejected before training starts."""


__all__ = ["LayernetsError", "ShapeError", "ConstructError", "ConfigError"]
