# src/ndmatrix/__init__.py
from __future__ import annotations

# Re-export the public surface for stable imports
from .layout import Layout, ROW_MAJOR, COLUMN_MAJOR
from .strides import as_shape, shape_size, derive_strides
from .resolver import check_bounds, physical_offset, physical_offsets, unravel_offset
from .broadcast import BroadcastPlan, broadcast, broadcast_shapes
from .matrix import Matrix
from .config import MatrixConfig, load_config, get_config, set_config
from .kernels import configure_jit, jit_enabled
from .errors import (
    NdMatrixError, DimError, OutOfBoundsError, ReshapeError, BroadcastError,
    InsufficientDataError, ConfigError,
)

__version__ = "0.1.0"

__all__ = [
    # Core types
    "Matrix", "Layout", "ROW_MAJOR", "COLUMN_MAJOR",
    # Addressing
    "as_shape", "shape_size", "derive_strides",
    "check_bounds", "physical_offset", "physical_offsets", "unravel_offset",
    # Broadcasting
    "BroadcastPlan", "broadcast", "broadcast_shapes",
    # Configuration
    "MatrixConfig", "load_config", "get_config", "set_config",
    "configure_jit", "jit_enabled",
    # Errors
    "NdMatrixError", "DimError", "OutOfBoundsError", "ReshapeError",
    "BroadcastError", "InsufficientDataError", "ConfigError",
]
