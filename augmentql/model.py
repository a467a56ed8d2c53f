"""Domain model consumed by the augmentation engine.

The model is pure, read-only data. It is normally produced by
:class:`augmentql.registry.AugmentSchema` (or any external parser) and handed
to :func:`augmentql.augment`. Nothing in here knows about generated types.
"""
from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

__all__ = [
    "Direction",
    "FilterableAnnotation",
    "ScalarTarget",
    "RelationshipMeta",
    "ReferenceTarget",
    "Field",
    "NodeType",
    "InterfaceType",
    "UnionType",
    "RelationshipProperties",
    "EnumType",
    "DomainType",
    "DomainModel",
]


class Direction(str, Enum):
    OUT = "OUT"
    IN = "IN"
    UNDIRECTED = "UNDIRECTED"


@dataclass(frozen=True)
class FilterableAnnotation:
    """Raw filter annotation as written on a field.

    ``None`` means the argument was omitted and the default applies.
    """

    by_value: Optional[bool] = None
    by_aggregate: Optional[bool] = None


@dataclass(frozen=True)
class ScalarTarget:
    """Scalar value type: a built-in scalar, a domain enum or a custom scalar name."""

    type_name: str


@dataclass(frozen=True)
class RelationshipMeta:
    edge_label: str
    direction: Direction = Direction.OUT
    # name of a RelationshipProperties type carried on the edge
    properties: Optional[str] = None


@dataclass(frozen=True)
class ReferenceTarget:
    target: str
    relationship: RelationshipMeta


@dataclass(frozen=True)
class Field:
    """A field declared on exactly one domain type."""

    name: str
    target: Union[ScalarTarget, ReferenceTarget]
    is_list: bool = False
    is_required: bool = False
    filterable: Optional[FilterableAnnotation] = None
    sortable: bool = True
    description: Optional[str] = None

    @property
    def is_reference(self) -> bool:
        return isinstance(self.target, ReferenceTarget)

    @property
    def type_name(self) -> str:
        """Name of the scalar type or of the referenced domain type."""
        if isinstance(self.target, ReferenceTarget):
            return self.target.target
        return self.target.type_name


@dataclass(frozen=True)
class NodeType:
    name: str
    fields: Tuple[Field, ...] = ()
    description: Optional[str] = None

    def get_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class InterfaceType:
    """Interface with its own declared fields and the names of its implementers."""

    name: str
    fields: Tuple[Field, ...] = ()
    implementations: Tuple[str, ...] = ()
    description: Optional[str] = None

    def get_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class UnionType:
    name: str
    members: Tuple[str, ...] = ()
    description: Optional[str] = None

    @property
    def fields(self) -> Tuple[Field, ...]:
        return ()


@dataclass(frozen=True)
class RelationshipProperties:
    """Properties stored on relationship edges. Only scalar fields are allowed."""

    name: str
    fields: Tuple[Field, ...] = ()
    description: Optional[str] = None


@dataclass(frozen=True)
class EnumType:
    name: str
    values: Tuple[str, ...] = ()
    description: Optional[str] = None


DomainType = Union[NodeType, InterfaceType, UnionType]


@dataclass
class DomainModel:
    """Annotated domain model: the engine's sole input.

    Attributes:
        types: Node, interface and union types keyed by name, in declaration order.
        enums: Domain enums keyed by name.
        scalars: Names of custom scalars declared by the model.
        relationship_properties: Edge property types keyed by name.
    """

    types: Dict[str, DomainType] = dc_field(default_factory=dict)
    enums: Dict[str, EnumType] = dc_field(default_factory=dict)
    scalars: Tuple[str, ...] = ()
    relationship_properties: Dict[str, RelationshipProperties] = dc_field(default_factory=dict)

    @classmethod
    def of(cls, *items, scalars: Tuple[str, ...] = ()) -> "DomainModel":
        """Build a model from a flat list of types, enums and properties types."""
        model = cls(scalars=tuple(scalars))
        for item in items:
            if isinstance(item, EnumType):
                model.enums[item.name] = item
            elif isinstance(item, RelationshipProperties):
                model.relationship_properties[item.name] = item
            else:
                model.types[item.name] = item
        return model

    def get(self, name: str) -> Optional[DomainType]:
        return self.types.get(name)

    def nodes(self) -> Iterator[NodeType]:
        for t in self.types.values():
            if isinstance(t, NodeType):
                yield t

    def interfaces(self) -> Iterator[InterfaceType]:
        for t in self.types.values():
            if isinstance(t, InterfaceType):
                yield t

    def unions(self) -> Iterator[UnionType]:
        for t in self.types.values():
            if isinstance(t, UnionType):
                yield t

    def interfaces_of(self, node_name: str) -> List[InterfaceType]:
        return [i for i in self.interfaces() if node_name in i.implementations]
