# tests/unit/test_kernels_jit.py
from __future__ import annotations

import numpy as np
import pytest

from ndmatrix import DimError, Layout, OutOfBoundsError, derive_strides, physical_offsets
from ndmatrix import jit as jit_mod
from ndmatrix.kernels import (
    DIM_MISMATCH, OK, OUT_OF_BOUNDS, broadcast_offsets, configure_jit, jit_enabled,
    resolve_offsets,
)


@pytest.fixture
def python_kernels():
    configure_jit(False)
    yield
    configure_jit(False)


def test_resolve_status_codes(python_kernels):
    shape = (3, 4)
    strides = derive_strides(shape, Layout.ROW_MAJOR)
    status, out, bad = resolve_offsets(shape, strides, [(0, 1), (2, 3)])
    assert status == OK and bad == -1
    np.testing.assert_array_equal(out, [1, 11])

    status, _, bad = resolve_offsets(shape, strides, [(0, 1), (2, 4)])
    assert status == OUT_OF_BOUNDS and bad == 1

    status, _, bad = resolve_offsets(shape, strides, [(0, 1, 0)])
    assert status == DIM_MISMATCH


def test_resolve_rejects_non_2d(python_kernels):
    with pytest.raises(ValueError, match="must be 2D"):
        resolve_offsets((3,), (1,), [1, 2])


def test_broadcast_offsets_row_major_walk(python_kernels):
    out_a, out_b = broadcast_offsets((2, 3), (3, 1), (0, 1))
    np.testing.assert_array_equal(out_a, [0, 1, 2, 3, 4, 5])
    np.testing.assert_array_equal(out_b, [0, 1, 2, 0, 1, 2])


def test_broadcast_offsets_empty(python_kernels):
    out_a, out_b = broadcast_offsets((2, 0), (0, 1), (0, 1))
    assert out_a.size == 0 and out_b.size == 0


def test_jit_disabled_returns_original():
    def f(x):
        return x + 1

    wrapped = jit_mod.jit_compile(f, jit=False)
    assert wrapped.fn is f
    assert wrapped.jitted is False


def test_missing_numba_warns_and_falls_back(monkeypatch):
    monkeypatch.setattr(jit_mod, "_NUMBA_OK", False)

    def f(x):
        return x

    with pytest.warns(RuntimeWarning, match="Numba not found"):
        wrapped = jit_mod.jit_compile(f, jit=True)
    assert wrapped.fn is f


@pytest.mark.skipif(not jit_mod.numba_available(), reason="numba not installed")
def test_numba_kernels_agree_with_python():
    shape = (4, 3, 7)
    strides = derive_strides(shape, Layout.COLUMN_MAJOR)
    rows = [(0, 0, 0), (1, 2, 3), (3, 2, 6)]
    try:
        configure_jit(False)
        expected = physical_offsets(shape, strides, rows)
        configure_jit(True)
        assert jit_enabled()
        np.testing.assert_array_equal(physical_offsets(shape, strides, rows), expected)
        with pytest.raises(OutOfBoundsError):
            physical_offsets(shape, strides, [(4, 0, 0)])
        with pytest.raises(DimError):
            physical_offsets(shape, strides, [(0, 0)])
        out_a, out_b = broadcast_offsets((2, 3), (3, 1), (0, 1))
        np.testing.assert_array_equal(out_b, [0, 1, 2, 0, 1, 2])
    finally:
        configure_jit(False)
