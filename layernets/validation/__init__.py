"""Numerical validation helpers."""

from .gradient_check import check_layer, check_network, numeric_gradient, relative_error

__all__ = ["check_layer", "check_network", "numeric_gradient", "relative_error"]
