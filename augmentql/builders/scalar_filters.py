"""Scalar filter builder.

Contributes grouped operator fields (``title: StringScalarFilters``), their
legacy aliases (``title_CONTAINS``) and sort fields for scalar fields. The
shared operator types are created on first use.
"""
from __future__ import annotations

from ..core.classifier import Classification
from ..core.legacy import FILTER_ALIASES
from ..core.scalars import COMPARATORS, EXTENDED_SCALARS, LIST_COMPARATORS, ResolvedScalar
from ..graph import GeneratedType, TypeGraph, TypeKind

__all__ = [
    "ensure_scalar",
    "ensure_filters_type",
    "ensure_sort_direction",
    "add_where_fields",
    "add_sort_field",
]

SORT_DIRECTION = "SortDirection"


def ensure_scalar(graph: TypeGraph, type_name: str) -> str:
    """Register an extended scalar definition (``BigInt``, ``DateTime``...) when referenced."""
    description = EXTENDED_SCALARS.get(type_name)
    if description is not None:
        graph.ensure(type_name, kind=TypeKind.SCALAR, description=description)
    return type_name


def ensure_filters_type(graph: TypeGraph, scalar: ResolvedScalar, is_list: bool = False) -> str:
    """Return the shared grouped-operator filter type for ``scalar``."""
    ensure_scalar(graph, scalar.type_name)
    if is_list:
        name, operators, description = scalar.list_filters_type, LIST_COMPARATORS, f"{scalar.type_name} list filters"
    else:
        name, operators, description = scalar.filters_type, COMPARATORS[scalar.kind], f"{scalar.type_name} filters"

    def build(gtype: GeneratedType) -> None:
        for op in operators:
            gtype.add_field(op.name, op.operand_ref(scalar.type_name))

    graph.ensure(name, build, description=description)
    return name


def ensure_sort_direction(graph: TypeGraph) -> str:
    def build(gtype: GeneratedType) -> None:
        gtype.values.extend(["ASC", "DESC"])

    graph.ensure(
        SORT_DIRECTION,
        build,
        kind=TypeKind.ENUM,
        description="An enum for sorting in either ascending or descending order.",
    )
    return SORT_DIRECTION


def add_where_fields(where: GeneratedType, c: Classification, graph: TypeGraph, *, legacy: bool) -> None:
    """Add the filter surface of scalar field ``c`` to a Where-like type.

    Nothing is added when the field is not filterable by value. Legacy aliases
    mirror the operators of the grouped field one to one.
    """
    if not c.policy.by_value:
        return
    f = c.field
    scalar = c.scalar
    where.add_field(f.name, ensure_filters_type(graph, scalar, f.is_list))
    if not legacy:
        return
    operators = LIST_COMPARATORS if f.is_list else COMPARATORS[scalar.kind]
    for op in operators:
        alias = FILTER_ALIASES[op.name]
        where.add_field(alias.field_name(f.name), op.operand_ref(scalar.type_name), deprecation_reason=alias.reason(f.name))


def add_sort_field(sort: GeneratedType, c: Classification, graph: TypeGraph) -> None:
    """Sorting ignores the filter policy; only list fields and ``sortable=False`` are skipped."""
    if c.field.is_list or not c.field.sortable:
        return
    sort.add_field(c.field.name, ensure_sort_direction(graph))
