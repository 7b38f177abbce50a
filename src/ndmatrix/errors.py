# src/ndmatrix/errors.py
from __future__ import annotations
from typing import Sequence, Tuple

__all__ = [
    "NdMatrixError",
    "DimError",
    "OutOfBoundsError",
    "ReshapeError",
    "BroadcastError",
    "InsufficientDataError",
    "ConfigError",
]

class NdMatrixError(Exception):
    """Base error for the ndmatrix package."""


class DimError(NdMatrixError):
    """Raised when a multi-index has a different rank than the matrix."""
    def __init__(self, index: Sequence[int], ndim: int):
        self.index = tuple(index)
        self.ndim = ndim
        super().__init__(
            f"Index {self.index} has {len(self.index)} components; expected {ndim}"
        )


class OutOfBoundsError(NdMatrixError):
    """Raised when an index component falls outside its dimension."""
    def __init__(self, index: Sequence[int], shape: Sequence[int]):
        self.index = tuple(index)
        self.shape = tuple(shape)
        msg = f"Index {self.index} out of bounds for shape {self.shape}"
        bad = [
            f"  - axis {axis}: {i} not in [0, {dim})"
            for axis, (i, dim) in enumerate(zip(self.index, self.shape))
            if i < 0 or i >= dim
        ]
        if bad:
            msg += "\n" + "\n".join(bad)
        super().__init__(msg)


class ReshapeError(NdMatrixError):
    """Raised when a new shape does not conserve the element count."""
    def __init__(self, old_size: int, new_shape: Tuple[int, ...]):
        self.old_size = old_size
        self.new_shape = new_shape
        super().__init__(
            f"Cannot reshape {old_size} elements into shape {new_shape}"
        )


class BroadcastError(NdMatrixError):
    """Raised when two shapes cannot be aligned for broadcasting."""
    def __init__(self, shape_a: Tuple[int, ...], shape_b: Tuple[int, ...], axis: int):
        self.shape_a = shape_a
        self.shape_b = shape_b
        self.axis = axis
        super().__init__(
            f"Shapes {shape_a} and {shape_b} are not broadcast-compatible "
            f"(trailing axis -{axis + 1})"
        )


class InsufficientDataError(NdMatrixError):
    """Raised when a value source runs out before filling the buffer."""
    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Value source exhausted: needed {required} values, got {available}"
        )


class ConfigError(NdMatrixError):
    """Raised when configuration file is malformed or invalid."""
    def __init__(self, message: str):
        super().__init__(message)
