"""Run-wide configuration consumed by the augmentation engine.

The engine never loads or owns configuration; the host builds an
:class:`AugmentConfig` (directly or from its feature mapping via
:meth:`AugmentConfig.from_features`) and passes it to :func:`augmentql.augment`.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, FrozenSet, Mapping, Optional

from .naming import camel_to_snake

__all__ = ["LegacyAliases", "AugmentConfig", "DEFAULT_AGGREGATABLE_KINDS"]

DEFAULT_AGGREGATABLE_KINDS: FrozenSet[str] = frozenset({
    "String",
    "Int",
    "Float",
    "BigInt",
    "DateTime",
    "LocalDateTime",
    "Time",
    "LocalTime",
    "Duration",
})


@dataclass(frozen=True)
class LegacyAliases:
    """Toggles for each family of deprecated alias fields.

    All families default to being emitted. Each toggle is global for a run.
    """

    attribute_filters: bool = True
    relationship_filters: bool = True
    aggregation_filters: bool = True
    aggregation_filters_outside_connection: bool = True
    mutation_operations: bool = True
    subscription_filters: bool = True

    @classmethod
    def disabled(cls) -> "LegacyAliases":
        return cls(**{f.name: False for f in fields(cls)})

    @classmethod
    def from_excluded(cls, excluded: Mapping[str, Any]) -> "LegacyAliases":
        """Build toggles from an ``excludeDeprecatedFields`` style mapping.

        Keys may be camelCase (``aggregationFilters``) or snake_case. A truthy
        value excludes the family.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, exclude in excluded.items():
            name = camel_to_snake(key)
            if name not in known:
                raise ValueError(f"Unknown deprecated field family: {key}")
            values[name] = not bool(exclude)
        return cls(**values)


@dataclass(frozen=True)
class AugmentConfig:
    """Configuration for one augmentation run.

    Attributes:
        legacy: Which legacy alias families are emitted.
        subscriptions: Generate SubscriptionWhere types and Subscription root fields.
        aggregatable_kinds: Scalar kind names that may take part in aggregation
            filters and aggregate selections.
    """

    legacy: LegacyAliases = field(default_factory=LegacyAliases)
    subscriptions: bool = True
    aggregatable_kinds: FrozenSet[str] = DEFAULT_AGGREGATABLE_KINDS

    @classmethod
    def from_features(cls, features: Optional[Mapping[str, Any]] = None) -> "AugmentConfig":
        """Build a config from a host feature mapping.

        Example:
            AugmentConfig.from_features({
                "excludeDeprecatedFields": {"aggregationFilters": True},
                "subscriptions": False,
            })
        """
        features = dict(features or {})
        legacy = LegacyAliases.from_excluded(features.pop("excludeDeprecatedFields", None) or {})
        cfg = cls(legacy=legacy)
        if "subscriptions" in features:
            cfg = replace(cfg, subscriptions=bool(features.pop("subscriptions")))
        kinds = features.pop("aggregatableKinds", None)
        if kinds is not None:
            cfg = replace(cfg, aggregatable_kinds=frozenset(kinds))
        if features:
            raise ValueError(f"Unknown feature settings: {', '.join(sorted(features))}")
        return cfg

    def without_legacy(self) -> "AugmentConfig":
        return replace(self, legacy=LegacyAliases.disabled())
