from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..model import (
    Direction,
    Field,
    FilterableAnnotation,
    ReferenceTarget,
    RelationshipMeta,
    ScalarTarget,
)
from ..naming import camel_to_snake

@dataclass
class FieldDef:
    """Internal, normalized field description collected by the registry.

    Attributes:
        name: The attribute name on the declaring type (e.g. "actors").
        kind: One of "scalar", "relation".
        meta: Metadata captured from the descriptor factory. Keys vary by
            kind (type, target, edge_type, direction, list, required,
            properties, filterable, sortable, description).
    """

    name: str
    kind: str
    meta: Dict[str, Any]

    def to_field(self) -> Field:
        """Convert to the domain model :class:`~augmentql.model.Field`."""
        m = self.meta
        if self.kind == 'relation':
            target = ReferenceTarget(
                target=m['target'],
                relationship=RelationshipMeta(
                    edge_label=m.get('edge_type') or _edge_label(self.name),
                    direction=m.get('direction', Direction.OUT),
                    properties=m.get('properties'),
                ),
            )
        else:
            target = ScalarTarget(m['type'])
        return Field(
            name=self.name,
            target=target,
            is_list=bool(m.get('list', False)),
            is_required=bool(m.get('required', False)),
            filterable=m.get('filterable'),
            sortable=bool(m.get('sortable', True)),
            description=m.get('description'),
        )

def _edge_label(field_name: str) -> str:
    return camel_to_snake(field_name).upper()

def _type_name(value: Any) -> str:
    return value.__name__ if hasattr(value, '__name__') and not isinstance(value, str) else value

class FieldDescriptor:
    """Descriptor placed on augment types to declare fields.

    Users normally use the helper factories :func:`field` and :func:`relation`
    which return a ``FieldDescriptor`` instance. The registry inspects the
    descriptor and converts it to a :class:`FieldDef` with normalized metadata.
    """

    def __init__(self, *, kind: str, **meta):
        self.kind = kind
        self.meta = dict(meta)
        self.name: str | None = None

    def __set_name__(self, owner, name):  # pragma: no cover - simple
        self.name = name

    def build(self, parent_name: str) -> FieldDef:
        """Build a :class:`FieldDef` consumed by the registry.

        Args:
            parent_name: Name of the declaring type, used in error messages.

        Returns:
            FieldDef: Normalized representation for this field.
        """
        if not self.name:
            raise ValueError(f"Field descriptor on {parent_name} has no attribute name")
        return FieldDef(name=self.name, kind=self.kind, meta=self.meta)

def filterable(by_value: Optional[bool] = None, by_aggregate: Optional[bool] = None) -> FilterableAnnotation:
    """Filter annotation for :func:`field` and :func:`relation`.

    Omitted arguments keep their defaults (``by_value=True``,
    ``by_aggregate=False``); ``filterable()`` alone therefore changes nothing.

    Examples:
        # filter Movies by aggregated titles only
        title = field('String', filterable=filterable(by_value=False, by_aggregate=True))
        # no filter surface at all for this relationship
        actors = relation('Person', filterable=filterable(by_value=False, by_aggregate=False))
    """
    return FilterableAnnotation(by_value=by_value, by_aggregate=by_aggregate)

def field(type_name: Any, /, **meta) -> FieldDescriptor:
    """Declare a scalar field on an augment type.

    Place this as a class attribute inside a ``@schema.node()``,
    ``@schema.interface()`` or ``@schema.relationship_properties()`` class.

    Common metadata keys:
    - required: Non-null field (``String!``).
    - list: List field (``[String!]``).
    - filterable: A :func:`filterable` annotation.
    - sortable: False removes the field from Sort types.
    - description: Optional GraphQL field description.

    Args:
        type_name: Scalar name (``'String'``, ``'BigInt'``...), a custom scalar
            registered via ``schema.scalar`` or an enum registered via
            ``schema.enum`` (the Python enum class is accepted too).

    Examples:
        class Movie(AugmentType):
            title = field('String', required=True)
            tags = field('String', list=True, sortable=False)
            runtime = field('Int', filterable=filterable(by_aggregate=True))

    Returns:
        FieldDescriptor: A descriptor captured by the registry.
    """
    return FieldDescriptor(kind='scalar', type=_type_name(type_name), **meta)

def relation(target: Any, *, type: str | None = None, direction: Any = 'OUT', single: bool = False, **meta) -> FieldDescriptor:
    """Declare a relationship to another node, interface or union.

    Args:
        target: Target type, either as the class itself or its name (string).
        type: Edge label stored on the relationship (``'ACTED_IN'``). Defaults
            to the upper snake case field name.
        direction: ``'OUT'``, ``'IN'`` or ``'UNDIRECTED'``.
        single: When True the relationship holds at most one node.
        **meta: Extra options. Common keys:
            - required: Non-null single relationship.
            - properties: Name (or class) of a relationship properties type.
            - filterable: A :func:`filterable` annotation.
            - description: Optional GraphQL field description.

    Examples:
        class Movie(AugmentType):
            actors = relation('Actor', type='ACTED_IN', direction='IN', properties='ActedIn')
            director = relation('Person', type='DIRECTED', direction='IN', single=True)

    Returns:
        FieldDescriptor: A descriptor captured by the registry.
    """
    m = dict(meta)
    m['target'] = _type_name(target)
    if m.get('properties') is not None:
        m['properties'] = _type_name(m['properties'])
    m['edge_type'] = type
    m['direction'] = direction if isinstance(direction, Direction) else Direction(str(direction).upper())
    m['list'] = not single
    return FieldDescriptor(kind='relation', **m)
