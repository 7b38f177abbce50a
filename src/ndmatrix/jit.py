# src/ndmatrix/jit.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import warnings

# JIT toggle applied *only here*.
# If numba missing or jit=False, we return original Python callables.

__all__ = ["JittedCallable", "jit_compile", "numba_available"]


@dataclass(frozen=True)
class JittedCallable:
    fn: Callable
    jitted: bool
    name: str

try:
    from numba import njit
    _NUMBA_OK = True
except ImportError:
    _NUMBA_OK = False
    njit = None  # type: ignore


def numba_available() -> bool:
    return _NUMBA_OK


def jit_compile(fn: Callable, *, jit: bool = True, cache: bool = False) -> JittedCallable:
    """
    Centralized JIT compilation with consistent error handling.

    Behavior:
        - If jit=False: returns original Python function
        - If jit=True and numba not installed: warns and returns original function
        - If jit=True and numba installed but compilation fails: raises RuntimeError

    Args:
        fn: Function to compile
        jit: Whether to apply JIT compilation (default True)
        cache: Forwarded to ``numba.njit(cache=...)``

    Returns:
        JittedCallable wrapping the compiled (or original) function
    """
    name = getattr(fn, "__name__", repr(fn))
    if not jit:
        return JittedCallable(fn=fn, jitted=False, name=name)

    if not _NUMBA_OK:
        warnings.warn(
            "Numba not found; offset kernels fall back to pure Python (slower). "
            "Install numba for compiled kernels: pip install numba",
            RuntimeWarning,
            stacklevel=3,
        )
        return JittedCallable(fn=fn, jitted=False, name=name)

    try:
        compiled = njit(cache=cache)(fn)
    except Exception as e:
        raise RuntimeError(
            f"JIT compilation of {name} with numba failed: {type(e).__name__}: {e}"
        ) from e
    return JittedCallable(fn=compiled, jitted=True, name=name)
