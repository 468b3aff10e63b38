"""sandlevel configuration module."""

from pathlib import Path

from .models import (
    Config,
    ConfigDocument,
    ConfigProfile,
    FeaturesToml,
    Permissions,
    SandboxMode,
    WindowsSettings,
)

SANDLEVEL_HOME = Path.home() / ".sandlevel"
DEFAULT_CONFIG_PATH = SANDLEVEL_HOME / "config.yaml"

__all__ = [
    "Config", "ConfigDocument", "ConfigProfile", "FeaturesToml",
    "Permissions", "SandboxMode", "WindowsSettings",
    "SANDLEVEL_HOME", "DEFAULT_CONFIG_PATH",
    "ConfigError", "load_config", "load_document", "build_config",
]


# Lazy imports for the loader to avoid a cycle with sandlevel.sandbox.mode
def __getattr__(name):
    if name in ("ConfigError", "load_config", "load_document", "build_config"):
        from sandlevel.config import loader
        return getattr(loader, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
