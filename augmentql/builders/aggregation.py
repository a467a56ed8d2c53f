"""Aggregation builder.

Two unrelated products live here:

* filter-time aggregation inputs (``{Owner}{Field}NodeAggregationWhereInput``
  and ``{Props}AggregationWhereInput``) holding nested aggregation operators
  and their flattened legacy aliases, built only for scalar fields whose own
  policy enables aggregation;
* read-only aggregate selections (``{Owner}{Target}{Field}AggregateSelection``
  and ``{Type}AggregateSelection``) exposing statistics for every aggregatable
  scalar, independent of any filter policy.

Only the legal field set of a target is considered: every field of a node,
only the interface's own fields for an interface, nothing for a union.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from ..config import AugmentConfig
from ..core.classifier import Classification, FieldKind, classify
from ..core.legacy import AGGREGATION_COMPARATORS, aggregation_alias
from ..core.scalars import AGGREGATE_SELECTIONS, AGGREGATION_FILTERS, ResolvedScalar, resolve_scalar
from ..graph import GeneratedType, TypeGraph, TypeKind, TypeRef
from ..model import DomainModel, DomainType, Field, RelationshipProperties, UnionType
from ..naming import EntityNames, PropertiesNames, RelationshipNames, pluralize
from .scalar_filters import ensure_filters_type, ensure_scalar

__all__ = [
    "COUNT_CONNECTION",
    "legal_fields",
    "aggregation_candidates",
    "ensure_aggregation_filters_type",
    "ensure_aggregate_selection_type",
    "build_node_aggregation_where_input",
    "ensure_edge_aggregation_where_input",
    "build_selection_aggregate",
    "build_root_aggregate_selection",
]

_logger = logging.getLogger("augmentql")

COUNT_CONNECTION = "CountConnection"


def legal_fields(target: Union[DomainType, RelationshipProperties]) -> Tuple[Field, ...]:
    """Fields an aggregation over ``target`` may use.

    Interfaces only carry their own declared fields, so implementer-only
    fields never show up here.
    """
    if isinstance(target, UnionType):
        return ()
    return target.fields


def aggregation_candidates(
    target: Union[DomainType, RelationshipProperties],
    model: DomainModel,
    config: AugmentConfig,
    *,
    filtering: bool,
) -> List[Classification]:
    """Scalar fields of ``target`` that take part in aggregation.

    Args:
        filtering: When True only fields whose own policy enables aggregation
            are returned (filter inputs); otherwise every non-list scalar of an
            aggregatable kind (selections).
    """
    result: List[Classification] = []
    for f in legal_fields(target):
        if f.is_reference or f.is_list:
            continue
        c = classify(f, target, model, config)
        if c.kind is not FieldKind.SCALAR:
            continue
        if filtering:
            if c.aggregatable:
                result.append(c)
        elif c.scalar.type_name in config.aggregatable_kinds and c.scalar.kind in AGGREGATE_SELECTIONS:
            result.append(c)
    return result


def _resolved(type_name: str) -> ResolvedScalar:
    scalar = resolve_scalar(type_name)
    if scalar is None:  # pragma: no cover - operator tables only name built-in scalars
        raise ValueError(f"Operator operand {type_name!r} is not a built-in scalar")
    return scalar


def ensure_aggregation_filters_type(graph: TypeGraph, scalar: ResolvedScalar) -> str:
    """``{T}ScalarAggregationFilters`` with one nested filter per aggregation operator."""
    name = scalar.aggregation_filters_type

    def build(gtype: GeneratedType) -> None:
        for op in AGGREGATION_FILTERS.get(scalar.kind, ()):
            nested = ensure_filters_type(graph, _resolved(op.operand_name(scalar.type_name)))
            gtype.add_field(op.name, nested)

    article = "an" if scalar.type_name[:1].lower() in "aeiou" else "a"
    graph.ensure(name, build, description=f"Filters for an aggregation of {article} {scalar.type_name.lower()} field")
    return name


def ensure_aggregate_selection_type(graph: TypeGraph, scalar: ResolvedScalar) -> str:
    """``{T}AggregateSelection`` object with read-only statistics."""
    name = scalar.aggregate_selection_type

    def build(gtype: GeneratedType) -> None:
        for op in AGGREGATE_SELECTIONS.get(scalar.kind, ()):
            operand = op.operand_ref(scalar.type_name)
            ensure_scalar(graph, operand.name)
            gtype.add_field(op.name, operand)

    graph.ensure(name, build, kind=TypeKind.OBJECT)
    return name


def _add_aggregation_filter_fields(
    gtype: GeneratedType,
    candidates: List[Classification],
    graph: TypeGraph,
    *,
    legacy: bool,
) -> None:
    for c in candidates:
        name = c.field.name
        gtype.add_field(name, ensure_aggregation_filters_type(graph, c.scalar))
        if not legacy:
            continue
        for op in AGGREGATION_FILTERS.get(c.scalar.kind, ()):
            operand = op.operand_ref(c.scalar.type_name)
            for comparator in AGGREGATION_COMPARATORS:
                alias = aggregation_alias(op.name, comparator)
                gtype.add_field(alias.field_name(name), operand, deprecation_reason=alias.reason(name))


def build_node_aggregation_where_input(
    graph: TypeGraph,
    names: RelationshipNames,
    target: DomainType,
    model: DomainModel,
    config: AugmentConfig,
) -> Optional[str]:
    """Create ``{Owner}{Field}NodeAggregationWhereInput`` for a relationship.

    Returns None for union targets. The type may end up holding only the
    logical combinators, in which case pruning removes it.
    """
    if isinstance(target, UnionType):
        return None
    gtype = graph.create(names.node_aggregation_where_input)
    gtype.add_logical_fields()
    candidates = aggregation_candidates(target, model, config, filtering=True)
    _add_aggregation_filter_fields(gtype, candidates, graph, legacy=config.legacy.aggregation_filters)
    _logger.debug("augmentql: %s aggregates %d field(s) of %s", gtype.name, len(candidates), target.name)
    return gtype.name


def ensure_edge_aggregation_where_input(
    graph: TypeGraph,
    props: RelationshipProperties,
    model: DomainModel,
    config: AugmentConfig,
) -> str:
    """Shared ``{Props}AggregationWhereInput`` over relationship properties."""

    def build(gtype: GeneratedType) -> None:
        gtype.add_logical_fields()
        candidates = aggregation_candidates(props, model, config, filtering=True)
        _add_aggregation_filter_fields(gtype, candidates, graph, legacy=config.legacy.aggregation_filters)

    return graph.ensure(PropertiesNames(props.name).aggregation_where_input, build).name


def _ensure_count_connection(graph: TypeGraph) -> str:
    def build(gtype: GeneratedType) -> None:
        gtype.add_field("edges", "Int!")
        gtype.add_field("nodes", "Int!")

    graph.ensure(COUNT_CONNECTION, build, kind=TypeKind.OBJECT)
    return COUNT_CONNECTION


def _selection_fields(
    name: str,
    source: Union[DomainType, RelationshipProperties],
    graph: TypeGraph,
    model: DomainModel,
    config: AugmentConfig,
) -> GeneratedType:
    gtype = graph.create(name, TypeKind.OBJECT)
    for c in aggregation_candidates(source, model, config, filtering=False):
        gtype.add_field(c.field.name, TypeRef(ensure_aggregate_selection_type(graph, c.scalar), non_null=True))
    return gtype


def build_selection_aggregate(
    graph: TypeGraph,
    names: RelationshipNames,
    target: DomainType,
    props: Optional[RelationshipProperties],
    model: DomainModel,
    config: AugmentConfig,
) -> Optional[str]:
    """Create the connection selection aggregate, ignoring the filter policy.

    Shape: ``{ count: CountConnection!, node: ...NodeAggregateSelection,
    edge: ...EdgeAggregateSelection }``. Union targets get nothing.
    """
    if isinstance(target, UnionType):
        return None
    selection = graph.create(names.selection_aggregate, TypeKind.OBJECT)
    selection.add_field("count", TypeRef(_ensure_count_connection(graph), non_null=True))
    node = _selection_fields(names.node_aggregate_selection, target, graph, model, config)
    selection.add_field("node", node.name)
    if props is not None:
        edge = _selection_fields(names.edge_aggregate_selection, props, graph, model, config)
        selection.add_field("edge", edge.name)
    return selection.name


def build_root_aggregate_selection(
    graph: TypeGraph,
    target: DomainType,
    model: DomainModel,
    config: AugmentConfig,
) -> str:
    """``{Type}AggregateSelection { count: Int!, <field>: <Kind>AggregateSelection! }``."""
    names = EntityNames(target.name)
    gtype = graph.create(
        names.aggregate_selection,
        TypeKind.OBJECT,
        description=f"Aggregate statistics over {pluralize(target.name)}",
    )
    gtype.add_field("count", "Int!")
    for c in aggregation_candidates(target, model, config, filtering=False):
        gtype.add_field(c.field.name, TypeRef(ensure_aggregate_selection_type(graph, c.scalar), non_null=True))
    return gtype.name
