"""Mutation input builders: CreateInput / UpdateInput fields.

Scalar fields become plain values on create inputs and grouped mutation
operators (``set``, ``add``...) on update inputs, with ``_SET`` style legacy
aliases. Relationship fields get nested ``FieldInput`` types for connecting,
creating, disconnecting and deleting related nodes.
"""
from __future__ import annotations

from typing import Optional

from ..core.classifier import Classification, FieldKind
from ..core.legacy import mutation_aliases
from ..core.scalars import LIST_MUTATIONS, MUTATIONS, ResolvedScalar
from ..graph import GeneratedType, TypeGraph, TypeRef
from ..naming import EntityNames, RelationshipNames
from .scalar_filters import ensure_scalar

__all__ = [
    "ensure_mutations_type",
    "add_create_field",
    "add_update_fields",
    "add_relationship_create_field",
    "add_relationship_update_field",
]


def ensure_mutations_type(graph: TypeGraph, scalar: ResolvedScalar, is_list: bool = False) -> str:
    ensure_scalar(graph, scalar.type_name)
    if is_list:
        name, operators = scalar.list_mutations_type, LIST_MUTATIONS
        description = f"Mutations for a list for {scalar.type_name}"
    else:
        name, operators = scalar.mutations_type, MUTATIONS[scalar.kind]
        description = f"{scalar.type_name} mutations"

    def build(gtype: GeneratedType) -> None:
        for op in operators:
            gtype.add_field(op.name, op.operand_ref(scalar.type_name))

    graph.ensure(name, build, description=description)
    return name


def add_create_field(create: GeneratedType, c: Classification, graph: TypeGraph) -> None:
    f = c.field
    ensure_scalar(graph, c.scalar.type_name)
    create.add_field(
        f.name,
        TypeRef(c.scalar.type_name, non_null=f.is_required, is_list=f.is_list, item_non_null=f.is_list),
    )


def add_update_fields(update: GeneratedType, c: Classification, graph: TypeGraph, *, legacy: bool) -> None:
    f = c.field
    scalar = c.scalar
    update.add_field(f.name, ensure_mutations_type(graph, scalar, f.is_list))
    if not legacy:
        return
    operators = {op.name: op for op in (LIST_MUTATIONS if f.is_list else MUTATIONS[scalar.kind])}
    for alias in mutation_aliases(scalar.kind, f.is_list).values():
        op = operators[alias.operator]
        update.add_field(
            alias.field_name(f.name),
            op.operand_ref(scalar.type_name),
            deprecation_reason=alias.reason(f.name),
        )


def _many(name: str, is_list: bool) -> TypeRef:
    if is_list:
        return TypeRef(name, is_list=True, item_non_null=True)
    return TypeRef(name)


def _field_input(
    graph: TypeGraph,
    names: RelationshipNames,
    target: str,
    *,
    can_create: bool,
    is_list: bool,
    edge_create: Optional[str],
) -> str:
    """Build ``{Owner}{Field}FieldInput`` and its create / connect inputs."""
    target_names = EntityNames(target)
    connect = graph.create(names.connect_field_input)
    connect.add_field("where", target_names.connect_where)
    if edge_create:
        connect.add_field("edge", edge_create)
    field_input = graph.create(names.field_input)
    if can_create:
        create = graph.create(names.create_field_input)
        create.add_field("node", TypeRef(target_names.create_input, non_null=True))
        if edge_create:
            create.add_field("edge", edge_create)
        field_input.add_field("create", _many(create.name, is_list))
    field_input.add_field("connect", _many(connect.name, is_list))
    return field_input.name


def _update_field_input(
    graph: TypeGraph,
    names: RelationshipNames,
    *,
    can_create: bool,
    is_list: bool,
) -> str:
    """Build ``{Owner}{Field}UpdateFieldInput``; reuses the create / connect inputs."""
    disconnect = graph.create(names.disconnect_field_input)
    disconnect.add_field("where", names.connection_where)
    delete = graph.create(names.delete_field_input)
    delete.add_field("where", names.connection_where)
    update = graph.create(names.update_field_input)
    update.add_field("connect", _many(names.connect_field_input, is_list))
    update.add_field("disconnect", _many(disconnect.name, is_list))
    if can_create:
        update.add_field("create", _many(names.create_field_input, is_list))
    update.add_field("delete", _many(delete.name, is_list))
    return update.name


def add_relationship_create_field(
    create: GeneratedType,
    c: Classification,
    names: RelationshipNames,
    graph: TypeGraph,
    edge_create: Optional[str] = None,
) -> None:
    f = c.field
    if c.kind is FieldKind.UNION:
        container = graph.create(names.union_create_input)
        for member in c.target.members:
            member_input = _field_input(
                graph, names.for_member(member), member, can_create=True, is_list=f.is_list, edge_create=edge_create
            )
            container.add_field(member, member_input)
        create.add_field(f.name, container.name)
        return
    field_input = _field_input(
        graph,
        names,
        c.target.name,
        can_create=c.kind is FieldKind.CONCRETE,
        is_list=f.is_list,
        edge_create=edge_create,
    )
    create.add_field(f.name, field_input)


def add_relationship_update_field(
    update: GeneratedType,
    c: Classification,
    names: RelationshipNames,
    graph: TypeGraph,
) -> None:
    """Must run after :func:`add_relationship_create_field` for the same field."""
    f = c.field
    if c.kind is FieldKind.UNION:
        container = graph.create(names.union_update_input)
        for member in c.target.members:
            member_update = _update_field_input(graph, names.for_member(member), can_create=True, is_list=f.is_list)
            container.add_field(member, TypeRef(member_update, is_list=True, item_non_null=True))
        update.add_field(f.name, container.name)
        return
    field_update = _update_field_input(graph, names, can_create=c.kind is FieldKind.CONCRETE, is_list=f.is_list)
    update.add_field(f.name, TypeRef(field_update, is_list=True, item_non_null=True))
