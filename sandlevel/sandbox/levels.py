"""
sandlevel Sandbox Levels

Defines the effective Windows sandbox level and how it is derived from a
merged Config.

Level 0: Disabled         - No sandbox, commands run with the user's token
Level 1: RestrictedToken  - Restricted token, no elevation required
Level 2: Elevated         - Dedicated sandbox users set up with elevation

Derivation is one-directional (mode/flags -> level) and total.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Dict, Set

from sandlevel.config.models import Config, SandboxMode
from sandlevel.features import Feature, Features

logger = logging.getLogger(__name__)

# Keep legacy toggle wiring intact for the elevated-sandbox onboarding prompt.
ELEVATED_SANDBOX_NUX_ENABLED = True


class SandboxLevel(IntEnum):
    """Sandbox levels ordered by increasing isolation."""

    DISABLED = 0
    RESTRICTED_TOKEN = 1
    ELEVATED = 2


_MODE_TO_LEVEL: Dict[SandboxMode, SandboxLevel] = {
    SandboxMode.ELEVATED: SandboxLevel.ELEVATED,
    SandboxMode.UNELEVATED: SandboxLevel.RESTRICTED_TOKEN,
}


def resolve_level_from_flags(features: Features) -> SandboxLevel:
    """Derive the level from feature flags alone.

    The elevated flag implies and overrides the base flag, so it is checked
    first and the base flag is not consulted when it is on.
    """
    if features.enabled(Feature.WINDOWS_SANDBOX_ELEVATED):
        return SandboxLevel.ELEVATED
    if features.enabled(Feature.WINDOWS_SANDBOX):
        return SandboxLevel.RESTRICTED_TOKEN
    return SandboxLevel.DISABLED


def resolve_level(config: Config) -> SandboxLevel:
    """Derive the effective level from a merged Config.

    A structured sandbox mode wins outright; feature flags are only read
    when no mode is set.
    """
    mode = config.permissions.windows_sandbox_mode
    if mode is not None:
        mode = SandboxMode(mode)
        level = _MODE_TO_LEVEL[mode]
        logger.debug("Sandbox level %s from windows_sandbox_mode=%s", level.name, mode.value)
        return level
    level = resolve_level_from_flags(config.features)
    logger.debug("Sandbox level %s from feature flags", level.name)
    return level


# Capability matrix: what each level applies
LEVEL_CAPABILITIES: Dict[SandboxLevel, Set[str]] = {
    SandboxLevel.DISABLED: set(),
    SandboxLevel.RESTRICTED_TOKEN: {
        "restricted_token",
        "filesystem_acls",
        "network_block",
    },
    SandboxLevel.ELEVATED: {
        "restricted_token",
        "filesystem_acls",
        "network_block",
        "sandbox_users",
        "firewall_rules",
    },
}


def get_level_description(level: SandboxLevel) -> str:
    """Human-readable description of what a level provides."""
    descriptions = {
        SandboxLevel.DISABLED: (
            "No sandbox. Commands run with the full privileges of the current user."
        ),
        SandboxLevel.RESTRICTED_TOKEN: (
            "Commands run under a restricted token with write access limited "
            "to the workspace. Does not require elevation."
        ),
        SandboxLevel.ELEVATED: (
            "Commands run as dedicated sandbox users with firewall rules. "
            "Requires a one-time elevated setup; strongest isolation."
        ),
    }
    return descriptions.get(level, "Unknown level")
