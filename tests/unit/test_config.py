# tests/unit/test_config.py
"""
Unit tests for configuration loading.

Tests cover:
- Defaults when no config file exists
- $NDMATRIX_CONFIG override and explicit paths
- Validation of layout / dtype / jit values
- Unknown keys produce a warning
- Active config drives Matrix defaults
"""
from __future__ import annotations

import pytest

from ndmatrix import ConfigError, Layout, Matrix, MatrixConfig, load_config, set_config
from ndmatrix.config import ENV_VAR, get_config


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    previous = get_config()
    yield
    set_config(previous)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_file():
    cfg = load_config()
    assert cfg == MatrixConfig()
    assert cfg.default_layout is Layout.ROW_MAJOR
    assert cfg.default_dtype == "float64"
    assert cfg.jit is False


def test_env_var_override(tmp_path, monkeypatch):
    path = _write(tmp_path / "cfg.toml", '[matrix]\nlayout = "column"\ndtype = "int64"\n')
    monkeypatch.setenv(ENV_VAR, str(path))
    cfg = load_config()
    assert cfg.default_layout is Layout.COLUMN_MAJOR
    assert cfg.default_dtype == "int64"


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.toml")


def test_malformed_toml(tmp_path):
    path = _write(tmp_path / "bad.toml", "[matrix\nlayout = ")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(path)


@pytest.mark.parametrize("body,match", [
    ('layout = "diagonal"', "invalid layout"),
    ('dtype = "not-a-dtype"', "invalid dtype"),
    ('jit = "yes"', "jit must be"),
])
def test_invalid_values(tmp_path, body, match):
    path = _write(tmp_path / "cfg.toml", f"[matrix]\n{body}\n")
    with pytest.raises(ConfigError, match=match):
        load_config(path)


def test_unknown_keys_warn(tmp_path):
    path = _write(tmp_path / "cfg.toml", '[matrix]\nlayout = "row"\ncolour = "blue"\n')
    with pytest.warns(UserWarning, match="colour"):
        cfg = load_config(path)
    assert cfg.default_layout is Layout.ROW_MAJOR


def test_active_config_drives_matrix_defaults():
    set_config(MatrixConfig(default_layout=Layout.COLUMN_MAJOR, default_dtype="int32"))
    mat = Matrix([3, 4])
    assert mat.layout is Layout.COLUMN_MAJOR
    assert mat.strides == (1, 3)
    assert mat.dtype.name == "int32"
    # explicit arguments win
    assert Matrix([3, 4], "row").layout is Layout.ROW_MAJOR


def test_set_config_type_checked():
    with pytest.raises(TypeError):
        set_config({"jit": True})
