"""
sandlevel - Windows sandbox level resolution.

Picks the one effective sandbox isolation level from layered configuration:
- Structured `windows.sandbox` settings (per profile and global)
- Current feature flags (windows_sandbox, windows_sandbox_elevated)
- Legacy feature flags (enable_experimental_windows_sandbox)

Resolution never raises and never falls back to a weaker level silently.
"""

__version__ = "0.2.1"

from sandlevel.sandbox.levels import (
    ELEVATED_SANDBOX_NUX_ENABLED,
    SandboxLevel,
    resolve_level,
    resolve_level_from_flags,
)
from sandlevel.sandbox.mode import (
    SandboxMode,
    legacy_mode_from_flags,
    resolve_mode,
)

__all__ = [
    "ELEVATED_SANDBOX_NUX_ENABLED",
    "SandboxLevel",
    "SandboxMode",
    "legacy_mode_from_flags",
    "resolve_level",
    "resolve_level_from_flags",
    "resolve_mode",
]
