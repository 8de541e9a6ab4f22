"""Network composition."""

from .sequential import Network, Sequential, construct

__all__ = ["Network", "Sequential", "construct"]
