# src/ndmatrix/broadcast.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

import numpy as np

from .errors import BroadcastError
from .kernels import broadcast_offsets
from .layout import Layout
from .resolver import physical_offset
from .strides import Shape, Strides, as_shape, derive_strides, shape_size

__all__ = ["BroadcastPlan", "broadcast", "broadcast_shapes"]


@dataclass(frozen=True)
class BroadcastPlan:
    """
    Addressing plan for an elementwise binary operation.

    Fields:
      - shape: combined (broadcast) shape
      - strides_a, strides_b: per-operand strides over ``shape``; 0 on every
        axis the operand is broadcast along (expanded size-1 axes and
        leading axes the operand lacks)

    The plan copies no data and runs no operation.
    """
    shape: Shape
    strides_a: Strides
    strides_b: Strides

    def size(self) -> int:
        return shape_size(self.shape)

    def offsets(self, index: Iterable[int]) -> Tuple[int, int]:
        """(offset_a, offset_b) for one bounds-checked combined index."""
        idx = tuple(index)
        return (
            physical_offset(self.shape, self.strides_a, idx),
            physical_offset(self.shape, self.strides_b, idx),
        )

    def offset_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Offsets of both operands for every combined index, row-major order."""
        return broadcast_offsets(self.shape, self.strides_a, self.strides_b)

    def iter_offsets(self) -> Iterator[Tuple[int, int]]:
        out_a, out_b = self.offset_arrays()
        for a, b in zip(out_a.tolist(), out_b.tolist()):
            yield a, b


def broadcast_shapes(shape_a: Iterable[int], shape_b: Iterable[int]) -> Shape:
    """Combined shape under trailing-axis alignment (NumPy rules)."""
    a = as_shape(shape_a)
    b = as_shape(shape_b)
    ndim = max(len(a), len(b))
    out = [0] * ndim
    for k in range(ndim):
        # k counts from the trailing axis
        da = a[-1 - k] if k < len(a) else None
        db = b[-1 - k] if k < len(b) else None
        if da is None:
            out[-1 - k] = db
        elif db is None or da == db:
            out[-1 - k] = da
        elif da == 1:
            out[-1 - k] = db
        elif db == 1:
            out[-1 - k] = da
        else:
            raise BroadcastError(a, b, k)
    return tuple(out)


def _adjust(shape: Shape, layout: Layout, combined: Shape) -> Strides:
    own = derive_strides(shape, layout)
    lead = len(combined) - len(shape)
    adjusted = [0] * len(combined)
    for axis, (d, s) in enumerate(zip(shape, own)):
        if d == 1 and combined[lead + axis] != 1:
            continue  # expanded: re-read the same element
        adjusted[lead + axis] = s
    return tuple(adjusted)


def broadcast(
    shape_a: Iterable[int],
    layout_a: Layout | str,
    shape_b: Iterable[int],
    layout_b: Layout | str,
) -> BroadcastPlan:
    """
    Broadcast two (shape, layout) operands against each other.

    Raises BroadcastError when an aligned pair of dimensions is neither
    equal nor has a 1 on either side.

    Example:
        >>> plan = broadcast([3], "column", [3, 1], "row")
        >>> plan.shape, plan.strides_a, plan.strides_b
        ((3, 3), (0, 1), (1, 0))
    """
    a = as_shape(shape_a)
    b = as_shape(shape_b)
    combined = broadcast_shapes(a, b)
    return BroadcastPlan(
        shape=combined,
        strides_a=_adjust(a, Layout.parse(layout_a), combined),
        strides_b=_adjust(b, Layout.parse(layout_b), combined),
    )
