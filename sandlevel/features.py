"""
sandlevel Feature Registry

Known feature flags, their stable configuration keys, and the resolved
`Features` set that consumers query with `enabled()`.

Feature keys are written by users under `features:` in config.yaml:

    features:
      windows_sandbox: true
      windows_sandbox_elevated: false

Deprecated spellings are accepted through LEGACY_FEATURE_ALIASES and
mapped onto their canonical feature with a warning.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Maturity stage of a feature."""
    EXPERIMENTAL = "experimental"
    BETA = "beta"
    STABLE = "stable"
    DEPRECATED = "deprecated"


class Feature(Enum):
    """Registered features. Value is (key, stage, default_enabled)."""

    WINDOWS_SANDBOX = ("windows_sandbox", Stage.EXPERIMENTAL, False)
    WINDOWS_SANDBOX_ELEVATED = ("windows_sandbox_elevated", Stage.EXPERIMENTAL, False)

    @property
    def key(self) -> str:
        return self.value[0]

    @property
    def stage(self) -> Stage:
        return self.value[1]

    @property
    def default_enabled(self) -> bool:
        return self.value[2]


# Legacy key literal that predates the `windows_sandbox` feature.
LEGACY_EXPERIMENTAL_SANDBOX_KEY = "enable_experimental_windows_sandbox"

LEGACY_FEATURE_ALIASES: Dict[str, Feature] = {
    LEGACY_EXPERIMENTAL_SANDBOX_KEY: Feature.WINDOWS_SANDBOX,
    "experimental_windows_sandbox": Feature.WINDOWS_SANDBOX,
    "elevated_windows_sandbox": Feature.WINDOWS_SANDBOX_ELEVATED,
}

_FEATURES_BY_KEY: Dict[str, Feature] = {f.key: f for f in Feature}


def feature_for_key(key: str) -> Optional[Feature]:
    """Look up a feature by canonical key or legacy alias."""
    feature = _FEATURES_BY_KEY.get(key)
    if feature is not None:
        return feature
    return LEGACY_FEATURE_ALIASES.get(key)


class Features:
    """Immutable set of enabled features.

    Built from registry defaults and then layered config entries, where a
    later layer overrides an earlier one key by key.
    """

    __slots__ = ("_enabled",)

    def __init__(self, enabled: Iterable[Feature] = ()):
        self._enabled: FrozenSet[Feature] = frozenset(enabled)

    @classmethod
    def with_defaults(cls) -> "Features":
        return cls(f for f in Feature if f.default_enabled)

    @classmethod
    def from_layers(cls, *layers) -> "Features":
        """Apply feature mappings over the registry defaults, in order.

        Each layer may be None, a plain mapping of key -> bool, or an object
        with an `entries` mapping (FeaturesToml). Within one layer a
        canonical key and its aliases are OR-ed, regardless of key order.
        """
        enabled = set(cls.with_defaults()._enabled)
        for layer in layers:
            for feature, value in _layer_values(_entries_of(layer)).items():
                if value:
                    enabled.add(feature)
                else:
                    enabled.discard(feature)
        return cls(enabled)

    def enabled(self, feature: Feature) -> bool:
        return feature in self._enabled

    def enable(self, feature: Feature) -> "Features":
        return Features(self._enabled | {feature})

    def disable(self, feature: Feature) -> "Features":
        return Features(self._enabled - {feature})

    def enabled_features(self) -> List[Feature]:
        """Enabled features in registry order."""
        return [f for f in Feature if f in self._enabled]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Features):
            return NotImplemented
        return self._enabled == other._enabled

    def __hash__(self) -> int:
        return hash(self._enabled)

    def __repr__(self) -> str:
        keys = ", ".join(f.key for f in self.enabled_features())
        return f"Features({keys})"


def _layer_values(entries: Mapping[str, bool]) -> Dict[Feature, bool]:
    """Collapse one layer's keys onto features, OR-ing aliases together."""
    values: Dict[Feature, bool] = {}
    for key, value in entries.items():
        feature = feature_for_key(key)
        if feature is None:
            logger.debug("Ignoring unknown feature key %r", key)
            continue
        if key in LEGACY_FEATURE_ALIASES:
            logger.warning(
                "Feature key %r is deprecated; use %r instead",
                key, feature.key,
            )
        values[feature] = values.get(feature, False) or bool(value)
    return values


def _entries_of(layer) -> Mapping[str, bool]:
    if layer is None:
        return {}
    entries = getattr(layer, "entries", layer)
    return entries or {}
