"""Field classification: target kind and effective filter policy.

``FilterPolicy`` is resolved once per field; builders switch on it instead of
re-reading annotation metadata.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..config import AugmentConfig
from ..errors import AugmentationError
from ..model import (
    DomainModel,
    DomainType,
    Field,
    FilterableAnnotation,
    InterfaceType,
    NodeType,
    ReferenceTarget,
    RelationshipProperties,
    UnionType,
)
from .scalars import ResolvedScalar, resolve_scalar

__all__ = [
    "FieldKind",
    "FilterPolicy",
    "DEFAULT_POLICY",
    "resolve_policy",
    "Classification",
    "classify",
]


class FieldKind(str, Enum):
    SCALAR = "scalar"
    CONCRETE = "concrete"
    INTERFACE = "interface"
    UNION = "union"

    @property
    def is_relationship(self) -> bool:
        return self is not FieldKind.SCALAR


class FilterPolicy(Enum):
    NONE = (False, False)
    BY_VALUE = (True, False)
    BY_AGGREGATE = (False, True)
    BY_VALUE_AND_AGGREGATE = (True, True)

    @property
    def by_value(self) -> bool:
        return self.value[0]

    @property
    def by_aggregate(self) -> bool:
        return self.value[1]

    @classmethod
    def from_flags(cls, by_value: bool, by_aggregate: bool) -> "FilterPolicy":
        return cls((bool(by_value), bool(by_aggregate)))

    def without_aggregate(self) -> "FilterPolicy":
        return FilterPolicy.from_flags(self.by_value, False)


DEFAULT_POLICY = FilterPolicy.BY_VALUE


def resolve_policy(annotation: Optional[FilterableAnnotation]) -> FilterPolicy:
    """Resolve an annotation against the default, argument by argument."""
    if annotation is None:
        return DEFAULT_POLICY
    by_value = DEFAULT_POLICY.by_value if annotation.by_value is None else annotation.by_value
    by_aggregate = DEFAULT_POLICY.by_aggregate if annotation.by_aggregate is None else annotation.by_aggregate
    return FilterPolicy.from_flags(by_value, by_aggregate)


@dataclass(frozen=True)
class Classification:
    """Result of classifying one field.

    Exactly one of ``scalar`` and ``target`` is set.
    """

    field: Field
    kind: FieldKind
    policy: FilterPolicy
    scalar: Optional[ResolvedScalar] = None
    target: Optional[DomainType] = None
    properties: Optional[RelationshipProperties] = None

    @property
    def aggregatable(self) -> bool:
        """Scalar field that takes part in aggregation filters."""
        return self.kind is FieldKind.SCALAR and self.policy.by_aggregate


def _classify_scalar(
    field: Field,
    owner_name: str,
    model: DomainModel,
    config: AugmentConfig,
) -> Classification:
    scalar = resolve_scalar(field.type_name, model)
    if scalar is None:
        if field.type_name in model.types:
            raise AugmentationError(
                f"'{field.type_name}' is a domain type; declare the field as a relationship",
                type_name=owner_name,
                field_name=field.name,
            )
        raise AugmentationError(
            f"unknown scalar type '{field.type_name}'", type_name=owner_name, field_name=field.name
        )
    policy = resolve_policy(field.filterable)
    if policy.by_aggregate:
        if field.is_list:
            raise AugmentationError(
                "list fields cannot be aggregated", type_name=owner_name, field_name=field.name
            )
        if scalar.type_name not in config.aggregatable_kinds:
            raise AugmentationError(
                f"aggregation requested over non-aggregatable scalar kind '{scalar.type_name}'",
                type_name=owner_name,
                field_name=field.name,
            )
    return Classification(field=field, kind=FieldKind.SCALAR, policy=policy, scalar=scalar)


def classify(
    field: Field,
    owner: Union[DomainType, RelationshipProperties],
    model: DomainModel,
    config: Optional[AugmentConfig] = None,
) -> Classification:
    """Classify ``field`` declared on ``owner``.

    Raises:
        AugmentationError: unknown target or scalar type, missing relationship
            properties type, or aggregation over a list or non-aggregatable kind.
    """
    config = config or AugmentConfig()
    if not isinstance(field.target, ReferenceTarget):
        return _classify_scalar(field, owner.name, model, config)
    if isinstance(owner, RelationshipProperties):
        raise AugmentationError(
            "relationship properties may only declare scalar fields", type_name=owner.name, field_name=field.name
        )
    target = model.get(field.target.target)
    if target is None:
        if resolve_scalar(field.target.target, model) is not None:
            raise AugmentationError(
                f"relationship target '{field.target.target}' is a scalar type",
                type_name=owner.name,
                field_name=field.name,
            )
        raise AugmentationError(
            f"relationship target type '{field.target.target}' does not exist",
            type_name=owner.name,
            field_name=field.name,
        )
    properties = None
    props_name = field.target.relationship.properties
    if props_name is not None:
        properties = model.relationship_properties.get(props_name)
        if properties is None:
            raise AugmentationError(
                f"relationship properties type '{props_name}' does not exist",
                type_name=owner.name,
                field_name=field.name,
            )
    policy = resolve_policy(field.filterable)
    if isinstance(target, UnionType):
        kind = FieldKind.UNION
        policy = policy.without_aggregate()
    elif isinstance(target, InterfaceType):
        kind = FieldKind.INTERFACE
    elif isinstance(target, NodeType):
        kind = FieldKind.CONCRETE
    else:  # pragma: no cover - DomainType is closed
        raise AugmentationError(f"unsupported target {target!r}", type_name=owner.name, field_name=field.name)
    return Classification(field=field, kind=kind, policy=policy, target=target, properties=properties)

