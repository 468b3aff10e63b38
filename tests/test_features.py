"""Tests for the sandlevel feature registry."""

import logging

import pytest

pytestmark = pytest.mark.config

from sandlevel.config.models import FeaturesToml
from sandlevel.features import (
    LEGACY_EXPERIMENTAL_SANDBOX_KEY,
    LEGACY_FEATURE_ALIASES,
    Feature,
    Features,
    Stage,
    feature_for_key,
)


class TestFeature:

    def test_keys(self):
        assert Feature.WINDOWS_SANDBOX.key == "windows_sandbox"
        assert Feature.WINDOWS_SANDBOX_ELEVATED.key == "windows_sandbox_elevated"

    def test_defaults_disabled(self):
        for feature in Feature:
            assert feature.default_enabled is False

    def test_stage(self):
        assert Feature.WINDOWS_SANDBOX.stage == Stage.EXPERIMENTAL

    def test_legacy_key_literal(self):
        assert LEGACY_EXPERIMENTAL_SANDBOX_KEY == "enable_experimental_windows_sandbox"


class TestFeatureForKey:

    def test_canonical(self):
        assert feature_for_key("windows_sandbox") is Feature.WINDOWS_SANDBOX

    def test_alias(self):
        assert feature_for_key("enable_experimental_windows_sandbox") is Feature.WINDOWS_SANDBOX
        assert feature_for_key("elevated_windows_sandbox") is Feature.WINDOWS_SANDBOX_ELEVATED

    def test_unknown(self):
        assert feature_for_key("nope") is None

    def test_aliases_point_at_registered_features(self):
        for feature in LEGACY_FEATURE_ALIASES.values():
            assert feature in Feature


class TestFeatures:

    def test_with_defaults_empty(self):
        assert Features.with_defaults().enabled_features() == []

    def test_from_layers_plain_mapping(self):
        features = Features.from_layers({"windows_sandbox": True})
        assert features.enabled(Feature.WINDOWS_SANDBOX)
        assert not features.enabled(Feature.WINDOWS_SANDBOX_ELEVATED)

    def test_from_layers_features_toml(self):
        features = Features.from_layers(FeaturesToml(entries={"windows_sandbox_elevated": True}))
        assert features.enabled(Feature.WINDOWS_SANDBOX_ELEVATED)

    def test_later_layer_overrides(self):
        features = Features.from_layers(
            {"windows_sandbox": True},
            {"windows_sandbox": False},
        )
        assert not features.enabled(Feature.WINDOWS_SANDBOX)

    def test_none_layers_skipped(self):
        features = Features.from_layers(None, {"windows_sandbox": True}, None)
        assert features.enabled(Feature.WINDOWS_SANDBOX)

    def test_unknown_keys_ignored(self):
        features = Features.from_layers({"something_else": True})
        assert features == Features.with_defaults()

    def test_alias_enables_canonical_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sandlevel.features"):
            features = Features.from_layers({"enable_experimental_windows_sandbox": True})
        assert features.enabled(Feature.WINDOWS_SANDBOX)
        assert "deprecated" in caplog.text
        assert "windows_sandbox" in caplog.text

    def test_alias_and_canonical_in_one_layer_are_ored(self):
        for entries in (
            {"windows_sandbox": True, "enable_experimental_windows_sandbox": False},
            {"enable_experimental_windows_sandbox": False, "windows_sandbox": True},
            {"windows_sandbox": False, "enable_experimental_windows_sandbox": True},
        ):
            features = Features.from_layers(entries)
            assert features.enabled(Feature.WINDOWS_SANDBOX), entries

    def test_alias_and_canonical_both_false(self):
        features = Features.from_layers(
            {"windows_sandbox": True},
            {"windows_sandbox": False, "experimental_windows_sandbox": False},
        )
        assert not features.enabled(Feature.WINDOWS_SANDBOX)

    def test_enable_disable_return_new(self):
        base = Features()
        enabled = base.enable(Feature.WINDOWS_SANDBOX)
        assert enabled.enabled(Feature.WINDOWS_SANDBOX)
        assert not base.enabled(Feature.WINDOWS_SANDBOX)
        assert not enabled.disable(Feature.WINDOWS_SANDBOX).enabled(Feature.WINDOWS_SANDBOX)

    def test_enabled_features_registry_order(self):
        features = Features([Feature.WINDOWS_SANDBOX_ELEVATED, Feature.WINDOWS_SANDBOX])
        assert features.enabled_features() == [
            Feature.WINDOWS_SANDBOX,
            Feature.WINDOWS_SANDBOX_ELEVATED,
        ]

    def test_repr_lists_keys(self):
        assert "windows_sandbox" in repr(Features([Feature.WINDOWS_SANDBOX]))
