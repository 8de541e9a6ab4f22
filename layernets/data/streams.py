"""Sample streams and encoding helpers for training data."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from ..core.types import Array, Sample


def cycle_shuffling(
    samples: Iterable[Sample],
    rng: np.random.Generator | None = None,
) -> Iterator[Sample]:
    """Yield ``samples`` forever, reshuffled at the start of every pass."""

    pool: List[Sample] = list(samples)
    if not pool:
        raise ValueError("cycle_shuffling requires at least one sample")
    rng = rng if rng is not None else np.random.default_rng()
    while True:
        for index in rng.permutation(len(pool)):
            yield pool[int(index)]


def one_hot(index: int, num_classes: int) -> Array:
    if not 0 <= index < num_classes:
        raise ValueError(f"index {index} out of range for {num_classes} classes")
    encoded = np.zeros(num_classes, dtype=np.float64)
    encoded[index] = 1.0
    return encoded


def argmax(vector: Array) -> int:
    """Index of the largest entry of ``vector``; the first wins on ties."""

    return int(np.argmax(np.asarray(vector).reshape(-1)))


def split_samples(
    samples: Sequence[Sample],
    *,
    test_split: float = 0.2,
    seed: int = 0,
) -> Tuple[List[Sample], List[Sample]]:
    """Return a deterministic ``(train, test)`` partition of ``samples``."""

    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")
    rng = np.random.default_rng(seed)
    order = rng.permutation(len(samples))
    test_size = int(round(len(samples) * test_split))
    test_size = min(max(test_size, 1 if test_split > 0 else 0), len(samples))
    test = [samples[int(i)] for i in order[:test_size]]
    train = [samples[int(i)] for i in order[test_size:]]
    if not train:
        raise ValueError("Not enough samples for the requested split")
    return train, test


__all__ = ["cycle_shuffling", "one_hot", "argmax", "split_samples"]
