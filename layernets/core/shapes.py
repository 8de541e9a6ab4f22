"""Abstract tensor shapes and the compatibility rules used during construction."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional, Tuple

import numpy as np

from .errors import ShapeError


class Shape:
    """Base class of the ``Vector`` / ``Matrix`` / ``Tensor`` variants."""

    dims: Tuple[int, ...]

    @property
    def size(self) -> int:
        return int(reduce(lambda acc, dim: acc * dim, self.dims, 1))

    @property
    def rank(self) -> int:
        return len(self.dims)

    @staticmethod
    def of_array(array: np.ndarray) -> "Shape":
        return shape_of(np.shape(array))

    def flattened(self) -> "Vector":
        return Vector(self.size)

    def __str__(self) -> str:
        inner = ", ".join(str(dim) for dim in self.dims)
        return f"{type(self).__name__}({inner})"


def _check_dims(dims: Iterable[int]) -> Tuple[int, ...]:
    checked = tuple(int(dim) for dim in dims)
    if not checked:
        raise ValueError("shapes need at least one dimension")
    if any(dim <= 0 for dim in checked):
        raise ValueError(f"shape dimensions must be positive, got {checked}")
    return checked


@dataclass(frozen=True)
class Vector(Shape):
    length: int

    def __post_init__(self) -> None:
        _check_dims((self.length,))

    @property
    def dims(self) -> Tuple[int, ...]:  # type: ignore[override]
        return (self.length,)


@dataclass(frozen=True)
class Matrix(Shape):
    rows: int
    cols: int

    def __post_init__(self) -> None:
        _check_dims((self.rows, self.cols))

    @property
    def dims(self) -> Tuple[int, ...]:  # type: ignore[override]
        return (self.rows, self.cols)


@dataclass(frozen=True)
class Tensor(Shape):
    dims: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "dims", _check_dims(self.dims))


def shape_of(dims: Iterable[int]) -> Shape:
    """Return the most specific shape variant for ``dims``."""

    checked = _check_dims(dims)
    if len(checked) == 1:
        return Vector(checked[0])
    if len(checked) == 2:
        return Matrix(*checked)
    return Tensor(checked)


def compatible(produced: Shape, expected: Shape, *, exact: bool = True) -> bool:
    """Return whether ``produced`` can be fed to a consumer expecting ``expected``.

    Exact consumers need identical dimensions; shape-agnostic consumers only
    need the element counts to agree (the data is reinterpreted, not lost).
    """

    if exact:
        return tuple(produced.dims) == tuple(expected.dims)
    return produced.size == expected.size


def resolve(declared: Optional[Shape], inferred: Shape, *, exact: bool = True) -> Shape:
    """Check ``inferred`` against an optional declared shape.

    Returns the shape the layer will actually receive, which is always the
    inferred one; the declaration only constrains it.
    """

    if declared is not None and not compatible(inferred, declared, exact=exact):
        reason = "dimension mismatch" if exact else "element count mismatch"
        raise ShapeError(expected=declared, found=inferred, reason=reason)
    return inferred


__all__ = [
    "Shape",
    "Vector",
    "Matrix",
    "Tensor",
    "shape_of",
    "compatible",
    "resolve",
]
