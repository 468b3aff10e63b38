"""
sandlevel Sandbox Mode Resolution

Resolves the optional structured SandboxMode while config layers are merged,
before a final Config exists. Legacy boolean feature flags are honored
alongside the structured `windows.sandbox` setting.

Precedence (first match wins):

    #  Source                                         Result
    1  legacy flags on the profile                    that mode
    2  profile carries any legacy key (even false)    None, stop here
    3  profile windows.sandbox                        that mode
    4  document windows.sandbox                       that mode
    5  legacy flags on the document                   that mode
    6  nothing matched                                None

Step 2 treats "legacy keys present but disabled" on a profile as an explicit
opt-out, so a document-level setting can never re-enable a sandbox mode the
profile turned off. Key presence and key truth are separate checks.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional, Tuple, Union

from sandlevel.config.models import ConfigDocument, ConfigProfile, FeaturesToml, SandboxMode
from sandlevel.features import Feature, LEGACY_EXPERIMENTAL_SANDBOX_KEY

logger = logging.getLogger(__name__)

FlagSource = Union[FeaturesToml, Mapping[str, bool], None]

LEGACY_SANDBOX_KEYS: Tuple[str, ...] = (
    Feature.WINDOWS_SANDBOX_ELEVATED.key,
    Feature.WINDOWS_SANDBOX.key,
    LEGACY_EXPERIMENTAL_SANDBOX_KEY,
)


class _Stop:
    """Marker returned by a probe to end resolution with no mode."""

    def __repr__(self) -> str:
        return "STOP"


STOP = _Stop()

ProbeResult = Union[SandboxMode, _Stop, None]
Probe = Callable[[ConfigDocument, ConfigProfile], ProbeResult]


def _flag_entries(features: FlagSource) -> Mapping[str, bool]:
    if features is None:
        return {}
    if isinstance(features, FeaturesToml):
        return features.entries
    return features


def legacy_mode_from_flags(features: FlagSource) -> Optional[SandboxMode]:
    """Map legacy boolean flags onto a SandboxMode.

    Elevated wins over the base and experimental keys. Missing keys count
    as false.
    """
    entries = _flag_entries(features)
    if entries.get(Feature.WINDOWS_SANDBOX_ELEVATED.key, False):
        return SandboxMode.ELEVATED
    if entries.get(Feature.WINDOWS_SANDBOX.key, False) or entries.get(
        LEGACY_EXPERIMENTAL_SANDBOX_KEY, False
    ):
        return SandboxMode.UNELEVATED
    return None


def legacy_keys_present(features: FlagSource) -> bool:
    """True if any legacy sandbox key is set, whatever its value."""
    entries = _flag_entries(features)
    return any(key in entries for key in LEGACY_SANDBOX_KEYS)


# ============================================================================
# Probes, in precedence order
# ============================================================================


def _profile_legacy_flags(document: ConfigDocument, profile: ConfigProfile) -> ProbeResult:
    return legacy_mode_from_flags(profile.features)


def _profile_legacy_opt_out(document: ConfigDocument, profile: ConfigProfile) -> ProbeResult:
    if legacy_keys_present(profile.features):
        return STOP
    return None


def _profile_setting(document: ConfigDocument, profile: ConfigProfile) -> ProbeResult:
    return profile.sandbox_mode


def _document_setting(document: ConfigDocument, profile: ConfigProfile) -> ProbeResult:
    return document.sandbox_mode


def _document_legacy_flags(document: ConfigDocument, profile: ConfigProfile) -> ProbeResult:
    return legacy_mode_from_flags(document.features)


MODE_PROBES: List[Tuple[str, Probe]] = [
    ("profile legacy flags", _profile_legacy_flags),
    ("profile legacy opt-out", _profile_legacy_opt_out),
    ("profile windows.sandbox", _profile_setting),
    ("document windows.sandbox", _document_setting),
    ("document legacy flags", _document_legacy_flags),
]


def explain_mode(
    document: ConfigDocument, profile: ConfigProfile
) -> List[Tuple[str, ProbeResult]]:
    """Evaluate every probe, without short-circuiting, for diagnostics."""
    return [(name, probe(document, profile)) for name, probe in MODE_PROBES]


def resolve_mode_with_source(
    document: ConfigDocument, profile: ConfigProfile
) -> Tuple[Optional[SandboxMode], Optional[str]]:
    """Resolve the mode and name the probe that decided it.

    The source is None when no probe matched.
    """
    for name, probe in MODE_PROBES:
        result = probe(document, profile)
        if result is STOP:
            logger.debug("Sandbox mode not set: %s", name)
            return None, name
        if result is not None:
            logger.debug("Sandbox mode %s from %s", result.value, name)
            return result, name
    return None, None


def resolve_mode(
    document: ConfigDocument, profile: ConfigProfile
) -> Optional[SandboxMode]:
    """Resolve the structured sandbox mode for a profile and its document."""
    mode, _ = resolve_mode_with_source(document, profile)
    return mode
