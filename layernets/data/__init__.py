"""Data streams for layernets."""

from .streams import argmax, cycle_shuffling, one_hot, split_samples

__all__ = ["argmax", "cycle_shuffling", "one_hot", "split_samples"]
