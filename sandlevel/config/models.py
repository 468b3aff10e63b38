"""
Pydantic models for sandlevel configuration.

These models define the schema of config.yaml:

    windows:
      sandbox: elevated          # or "unelevated"
    features:
      windows_sandbox: true
    profile: work                # default profile
    profiles:
      work:
        windows:
          sandbox: unelevated
        features:
          windows_sandbox_elevated: false

ConfigDocument and ConfigProfile are the raw layers as parsed. Config is the
fully merged runtime configuration produced by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from sandlevel.features import Features


# ============================================================================
# Enums
# ============================================================================


class SandboxMode(str, Enum):
    """Structured two-valued Windows sandbox setting."""
    ELEVATED = "elevated"
    UNELEVATED = "unelevated"


# ============================================================================
# Raw Configuration Layers
# ============================================================================


class FeaturesToml(BaseModel):
    """Feature flag entries exactly as written by the user."""
    entries: Dict[str, bool] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def wrap_plain_mapping(cls, data: Any) -> Any:
        """Accept `features: {key: bool}` without an `entries` wrapper."""
        if isinstance(data, dict) and not (
            set(data) == {"entries"} and isinstance(data["entries"], dict)
        ):
            return {"entries": data}
        return data


class WindowsSettings(BaseModel):
    """The `windows:` section."""
    sandbox: Optional[SandboxMode] = None

    model_config = {"extra": "allow", "frozen": True}

    @field_validator("sandbox", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ConfigProfile(BaseModel):
    """A named override layer under `profiles:`."""
    windows: Optional[WindowsSettings] = None
    features: Optional[FeaturesToml] = None

    model_config = {"extra": "allow", "frozen": True}

    @property
    def sandbox_mode(self) -> Optional[SandboxMode]:
        return self.windows.sandbox if self.windows else None


class ConfigDocument(ConfigProfile):
    """
    Root model for config.yaml.

    Carries the global `windows` and `features` sections plus the named
    profiles. Uses extra="allow" to stay forward-compatible with keys
    added in future versions.
    """
    version: Optional[int] = None
    profile: Optional[str] = None
    profiles: Dict[str, ConfigProfile] = Field(default_factory=dict)


# ============================================================================
# Merged Runtime Configuration
# ============================================================================


@dataclass(frozen=True)
class Permissions:
    """Resolved permission settings."""
    windows_sandbox_mode: Optional[SandboxMode] = None


@dataclass(frozen=True)
class Config:
    """Fully merged configuration consumed by the sandbox layer."""
    permissions: Permissions = field(default_factory=Permissions)
    features: Features = field(default_factory=Features.with_defaults)
    active_profile: Optional[str] = None
