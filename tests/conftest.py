"""Pytest configuration and fixtures for sandlevel tests."""

from pathlib import Path

import pytest
import yaml


@pytest.fixture(autouse=True)
def _isolate_config_path(tmp_path, monkeypatch):
    """Point $SANDLEVEL_CONFIG at a temp path so tests never read ~/.sandlevel."""
    isolated = tmp_path / "isolated" / "config.yaml"
    monkeypatch.setenv("SANDLEVEL_CONFIG", str(isolated))
    yield isolated


@pytest.fixture
def write_config(tmp_path):
    """Write a dict as YAML and return the path."""

    def _write(data, name: str = "config.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                yaml.safe_dump(data, f, default_flow_style=False)
        return path

    return _write
