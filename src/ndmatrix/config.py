# src/ndmatrix/config.py
"""
Package-wide defaults loaded from TOML.

Search order for the config file:
  1. explicit ``path`` argument
  2. $NDMATRIX_CONFIG
  3. platform config dir: %APPDATA%/ndmatrix/config.toml on Windows,
     otherwise $XDG_CONFIG_HOME/ndmatrix/config.toml (default ~/.config)

Example file::

    [matrix]
    layout = "column"
    dtype = "int64"
    jit = true
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional
import os
import sys
import warnings

import numpy as np

try:  # pragma: no cover - Python >=3.11
    import tomllib  # type: ignore
except ImportError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from .errors import ConfigError
from .kernels import configure_jit
from .layout import Layout

__all__ = ["MatrixConfig", "load_config", "get_config", "set_config", "ENV_VAR"]

ENV_VAR = "NDMATRIX_CONFIG"
_KNOWN_KEYS = ("layout", "dtype", "jit")


@dataclass(frozen=True)
class MatrixConfig:
    default_layout: Layout = Layout.ROW_MAJOR
    default_dtype: str = "float64"
    jit: bool = False

    def with_overrides(self, **kwargs: Any) -> MatrixConfig:
        return replace(self, **kwargs)


def _get_config_path() -> Path:
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
    else:
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
    return root / "ndmatrix" / "config.toml"


def _parse_table(data: Dict[str, Any], source: Path) -> MatrixConfig:
    table = data.get("matrix", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{source}: [matrix] must be a table")

    unknown = sorted(set(table) - set(_KNOWN_KEYS))
    if unknown:
        warnings.warn(
            f"{source}: ignoring unknown [matrix] keys: {', '.join(unknown)}",
            UserWarning,
            stacklevel=3,
        )

    cfg = MatrixConfig()
    if "layout" in table:
        try:
            cfg = cfg.with_overrides(default_layout=Layout.parse(table["layout"]))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{source}: invalid layout: {e}") from e
    if "dtype" in table:
        try:
            cfg = cfg.with_overrides(default_dtype=np.dtype(table["dtype"]).name)
        except TypeError as e:
            raise ConfigError(f"{source}: invalid dtype {table['dtype']!r}: {e}") from e
    if "jit" in table:
        if not isinstance(table["jit"], bool):
            raise ConfigError(f"{source}: jit must be true or false; got {table['jit']!r}")
        cfg = cfg.with_overrides(jit=table["jit"])
    return cfg


def load_config(path: Optional[str | os.PathLike] = None) -> MatrixConfig:
    """
    Load configuration from TOML.

    A missing file at the default platform location yields defaults; a missing
    file named explicitly (argument or $NDMATRIX_CONFIG) raises ConfigError.
    """
    explicit = path if path is not None else os.environ.get(ENV_VAR)
    cfg_path = Path(explicit).expanduser() if explicit else _get_config_path()
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {cfg_path}")
        return MatrixConfig()
    try:
        with open(cfg_path, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config {cfg_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
    return _parse_table(data, cfg_path)


_active: MatrixConfig = MatrixConfig()


def get_config() -> MatrixConfig:
    return _active


def set_config(cfg: MatrixConfig) -> MatrixConfig:
    """Install ``cfg`` as the active config and apply its jit flag. Returns the previous one."""
    global _active
    if not isinstance(cfg, MatrixConfig):
        raise TypeError(f"expected MatrixConfig; got {type(cfg).__name__}")
    previous = _active
    _active = cfg
    configure_jit(cfg.jit)
    return previous
