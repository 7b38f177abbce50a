# src/ndmatrix/matrix.py
from __future__ import annotations
from typing import Any, Callable, Iterable, Iterator, Tuple
import numpy as np

from .broadcast import BroadcastPlan, broadcast
from .buffers import allocate_flat, carve_view, copy_flat, fill_flat
from .config import get_config
from .errors import ReshapeError
from .layout import Layout
from .resolver import check_bounds, physical_offset, physical_offsets, unravel_offset
from .strides import Shape, Strides, as_shape, derive_strides, shape_size

__all__ = ["Matrix"]


class Matrix:
    """
    Dense N-dimensional array over a flat, owned numpy buffer.

    State:
      - shape:   tuple of dimension sizes (rank >= 1); replaced only by reshape()
      - strides: derived from (shape, layout); never set directly
      - layout:  ROW_MAJOR or COLUMN_MAJOR; fixed for the object's lifetime
      - data:    1D buffer with exactly prod(shape) elements

    The element type is the numpy dtype of the buffer; use ``dtype=object``
    to hold arbitrary Python values. ``layout``/``dtype`` left as None fall
    back to the active ``MatrixConfig``.

    Every indexed access is validated by the resolver before the buffer is
    touched: either the whole access succeeds, or nothing changes and
    DimError / OutOfBoundsError is raised.
    """

    __slots__ = ("_shape", "_strides", "_layout", "_data")
    __hash__ = None  # mutable

    def __init__(
        self,
        shape: int | Iterable[int],
        layout: Layout | str | None = None,
        *,
        dtype: Any = None,
        default: Any = None,
    ) -> None:
        cfg = get_config()
        self._layout = Layout.parse(layout) if layout is not None else cfg.default_layout
        self._shape = as_shape(shape)
        self._strides = derive_strides(self._shape, self._layout)
        dt = np.dtype(dtype if dtype is not None else cfg.default_dtype)
        self._data = allocate_flat(shape_size(self._shape), dt, default)

    # ---- construction ---------------------------------------------------------

    @classmethod
    def _adopt(cls, shape: Shape, layout: Layout, data: np.ndarray) -> Matrix:
        obj = cls.__new__(cls)
        obj._layout = layout
        obj._shape = shape
        obj._strides = derive_strides(shape, layout)
        obj._data = data
        return obj

    @classmethod
    def from_iter(
        cls,
        shape: int | Iterable[int],
        source: Iterable[Any],
        layout: Layout | str | None = None,
        *,
        dtype: Any = None,
    ) -> Matrix:
        """
        Fill from ``source`` (finite or unbounded), taking exactly prod(shape)
        values in flat storage order. For COLUMN_MAJOR matrices the n-th value
        therefore lands at the n-th *physical* slot, not the n-th
        lexicographic index.

        Raises InsufficientDataError if ``source`` runs out early.
        """
        shp = as_shape(shape)
        lay = Layout.parse(layout) if layout is not None else get_config().default_layout
        data = fill_flat(source, shape_size(shp), None if dtype is None else np.dtype(dtype))
        return cls._adopt(shp, lay, data)

    @classmethod
    def from_buffer(
        cls,
        shape: int | Iterable[int],
        buffer: Any,
        layout: Layout | str | None = None,
        *,
        dtype: Any = None,
    ) -> Matrix:
        """Copy a flat buffer whose length must equal prod(shape) (else ReshapeError)."""
        shp = as_shape(shape)
        lay = Layout.parse(layout) if layout is not None else get_config().default_layout
        data = copy_flat(buffer, None if dtype is None else np.dtype(dtype))
        if data.size != shape_size(shp):
            raise ReshapeError(int(data.size), shp)
        return cls._adopt(shp, lay, data)

    def copy(self) -> Matrix:
        return type(self)._adopt(self._shape, self._layout, self._data.copy())

    # ---- metadata -------------------------------------------------------------

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def strides(self) -> Strides:
        """Element (not byte) strides."""
        return self._strides

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def data(self) -> np.ndarray:
        """The flat backing buffer (not a copy)."""
        return self._data

    def size(self) -> int:
        return shape_size(self._shape)

    # ---- addressing -----------------------------------------------------------

    def check_bounds(self, index: Iterable[int]) -> None:
        check_bounds(self._shape, index)

    def physical_offset(self, index: Iterable[int]) -> int:
        return physical_offset(self._shape, self._strides, index)

    def physical_offsets(self, indices) -> np.ndarray:
        """Bulk ``physical_offset`` over an (n, ndim) array of indices."""
        return physical_offsets(self._shape, self._strides, indices)

    def unravel(self, offset: int) -> Tuple[int, ...]:
        """Logical index stored at flat ``offset``."""
        return unravel_offset(self._shape, self._layout, offset)

    def reshape(self, new_shape: int | Iterable[int]) -> None:
        """
        Reinterpret the buffer under ``new_shape`` (same layout, zero-copy).
        Raises ReshapeError unless prod(new_shape) == size().
        """
        shp = as_shape(new_shape)
        if shape_size(shp) != self.size():
            raise ReshapeError(self.size(), shp)
        self._shape = shp
        self._strides = derive_strides(shp, self._layout)

    # ---- element access -------------------------------------------------------

    def get(self, index: Iterable[int]) -> Any:
        return self._data[self.physical_offset(index)]

    def get_mut(self, index: Iterable[int]) -> np.ndarray:
        """
        Writable one-element view onto the addressed slot::

            cell = m.get_mut((0, 0))
            cell[0] = 5
        """
        return carve_view(self._data, self.physical_offset(index), 1)

    def set(self, index: Iterable[int], value: Any) -> None:
        off = self.physical_offset(index)
        self._data[off] = value

    def apply(self, fn: Callable[[Any], Any]) -> None:
        """Call ``fn(element)`` once per element in flat storage order."""
        for value in self._data:
            fn(value)

    def apply_mut(self, fn: Callable[[Any], Any]) -> None:
        """Replace every element with ``fn(element)``, in flat storage order."""
        data = self._data
        for i in range(data.size):
            data[i] = fn(data[i])

    # ---- views / iteration ----------------------------------------------------

    def indices(self) -> Iterator[Tuple[int, ...]]:
        """Logical multi-indices in row-major lexicographic order."""
        return np.ndindex(*self._shape)

    def to_numpy(self) -> np.ndarray:
        """Logical ndarray view of the buffer (shares memory)."""
        return self._data.reshape(self._shape, order=self._layout.numpy_order)

    def broadcast_with(self, other: Matrix) -> BroadcastPlan:
        return broadcast(self._shape, self._layout, other._shape, other._layout)

    # ---- python protocol ------------------------------------------------------

    def __getitem__(self, index) -> Any:
        return self.get(index)

    def __setitem__(self, index, value: Any) -> None:
        self.set(index, value)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self._layout is other._layout
            and self._shape == other._shape
            and bool(np.array_equal(self._data, other._data))
        )

    def __repr__(self) -> str:
        return (
            f"Matrix(shape={self._shape}, strides={self._strides}, "
            f"layout={self._layout.name}, dtype={self._data.dtype})"
        )
