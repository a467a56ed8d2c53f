from dataclasses import FrozenInstanceError

import pytest

from augmentql import AugmentConfig, LegacyAliases
from augmentql.config import DEFAULT_AGGREGATABLE_KINDS


def test_defaults_emit_every_legacy_family():
    config = AugmentConfig()
    assert config.subscriptions
    assert all(vars(config.legacy).values())
    assert config.aggregatable_kinds == DEFAULT_AGGREGATABLE_KINDS


def test_default_aggregatable_kinds():
    assert {"String", "Int", "Float", "BigInt", "DateTime", "Duration"} <= DEFAULT_AGGREGATABLE_KINDS
    assert "Boolean" not in DEFAULT_AGGREGATABLE_KINDS
    assert "ID" not in DEFAULT_AGGREGATABLE_KINDS


def test_disabled_legacy_aliases():
    legacy = LegacyAliases.disabled()
    assert not any(vars(legacy).values())
    assert AugmentConfig().without_legacy().legacy == legacy


def test_from_features_reads_excluded_families():
    config = AugmentConfig.from_features({
        "excludeDeprecatedFields": {"aggregationFilters": True, "mutation_operations": True, "relationshipFilters": False},
        "subscriptions": False,
    })
    assert not config.legacy.aggregation_filters
    assert not config.legacy.mutation_operations
    assert config.legacy.relationship_filters
    assert config.legacy.attribute_filters
    assert not config.subscriptions


def test_from_features_aggregatable_kinds():
    config = AugmentConfig.from_features({"aggregatableKinds": ["Int", "Float"]})
    assert config.aggregatable_kinds == frozenset({"Int", "Float"})


def test_from_features_empty():
    assert AugmentConfig.from_features(None) == AugmentConfig()


def test_unknown_feature_raises():
    with pytest.raises(ValueError, match="Unknown feature settings: magic"):
        AugmentConfig.from_features({"magic": True})


def test_unknown_legacy_family_raises():
    with pytest.raises(ValueError, match="Unknown deprecated field family: negationFilters"):
        LegacyAliases.from_excluded({"negationFilters": True})


def test_config_is_immutable():
    config = AugmentConfig()
    with pytest.raises(FrozenInstanceError):
        config.subscriptions = False  # type: ignore[misc]
