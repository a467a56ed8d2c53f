"""Relationship filter builder.

For one relationship field this builds two independent products:

* the selection side: connection / edge object types, connection sort and
  the connection's aggregate selection, produced for every relationship no
  matter what its filter policy says;
* the filter side on the owner's Where type, driven by the field's
  :class:`~augmentql.core.classifier.FilterPolicy`.

Connection filter types are always created and may stay empty; the assembler's
prune step removes them together with the Where field that points at them.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from ..config import AugmentConfig
from ..core.classifier import Classification, FieldKind, FilterPolicy, classify
from ..core.legacy import AGGREGATE_OUTSIDE_CONNECTION, CONNECTION_ALIASES, COUNT_ALIASES, RELATIONSHIP_ALIASES
from ..core.scalars import COMPARATORS, ScalarKind, resolve_scalar
from ..graph import Argument, GeneratedType, TypeGraph, TypeKind, TypeRef
from ..model import DomainModel, DomainType, InterfaceType, RelationshipProperties
from ..naming import EntityNames, PropertiesNames, RelationshipNames, pluralize
from . import aggregation, mutations, scalar_filters

__all__ = ["PAGE_INFO", "COUNT_FILTER_INPUT", "ensure_page_info", "RelationshipFilterBuilder"]

_logger = logging.getLogger("augmentql")

PAGE_INFO = "PageInfo"
COUNT_FILTER_INPUT = "ConnectionAggregationCountFilterInput"

_QUANTIFIERS = {
    "all": "all",
    "none": "none",
    "single": "one",
    "some": "some",
}


def ensure_page_info(graph: TypeGraph) -> str:
    def build(gtype: GeneratedType) -> None:
        gtype.add_field("hasNextPage", "Boolean!")
        gtype.add_field("hasPreviousPage", "Boolean!")
        gtype.add_field("startCursor", "String")
        gtype.add_field("endCursor", "String")

    graph.ensure(PAGE_INFO, build, kind=TypeKind.OBJECT, description="Pagination information (Relay)")
    return PAGE_INFO


def _list_of(name: str) -> TypeRef:
    return TypeRef(name, is_list=True, item_non_null=True)


class RelationshipFilterBuilder:
    """Builds every generated type hanging off relationship fields."""

    def __init__(self, graph: TypeGraph, model: DomainModel, config: AugmentConfig):
        self.graph = graph
        self.model = model
        self.config = config
        self._int_filters: Optional[str] = None

    # ---------- shared helpers ----------

    def _int_scalar_filters(self) -> str:
        if self._int_filters is None:
            self._int_filters = scalar_filters.ensure_filters_type(self.graph, resolve_scalar("Int"))
        return self._int_filters

    def _count_filter_input(self) -> str:
        def build(gtype: GeneratedType) -> None:
            gtype.add_field("edges", self._int_scalar_filters())
            gtype.add_field("nodes", self._int_scalar_filters())

        return self.graph.ensure(COUNT_FILTER_INPUT, build).name

    def ensure_properties(self, props: RelationshipProperties) -> PropertiesNames:
        """Object, Where, Sort, CreateInput and UpdateInput for an edge properties type."""
        names = PropertiesNames(props.name)
        if props.name in self.graph:
            return names
        legacy = self.config.legacy
        obj = self.graph.create(props.name, TypeKind.OBJECT, description=props.description)
        where = self.graph.create(names.where)
        where.add_logical_fields()
        sort = self.graph.create(names.sort)
        create = self.graph.create(names.create_input)
        update = self.graph.create(names.update_input)
        for f in props.fields:
            c = classify(f, props, self.model, self.config)
            scalar_filters.ensure_scalar(self.graph, c.scalar.type_name)
            obj.add_field(
                f.name,
                TypeRef(c.scalar.type_name, non_null=f.is_required, is_list=f.is_list, item_non_null=f.is_list),
                description=f.description,
            )
            scalar_filters.add_where_fields(where, c, self.graph, legacy=legacy.attribute_filters)
            scalar_filters.add_sort_field(sort, c, self.graph)
            mutations.add_create_field(create, c, self.graph)
            mutations.add_update_fields(update, c, self.graph, legacy=legacy.mutation_operations)
        return names

    # ---------- entry point ----------

    def build(
        self,
        owner: DomainType,
        c: Classification,
        *,
        where: GeneratedType,
        obj: GeneratedType,
        declared_on: Optional[InterfaceType] = None,
    ) -> RelationshipNames:
        """Contribute relationship field ``c`` of ``owner``.

        Args:
            owner: Node or interface declaring the field.
            c: Classification of a relationship field.
            where: The owner's Where type.
            obj: The owner's object (or interface) type.
            declared_on: Interface that also declares this relationship. The
                owner's object fields then reuse the interface's connection
                types so the implementation stays compatible with it.
        """
        target = c.target
        names = RelationshipNames(owner.name, c.field.name, target.name)
        props = c.properties
        props_names = self.ensure_properties(props) if props is not None else None
        if c.kind is FieldKind.UNION:
            self._build_union_connection_where(names, c, props_names)
        else:
            self._build_connection_where(names, target.name, props_names)
        self._build_selection(c, names, obj, props, props_names, declared_on)
        self._build_filters(owner, c, names, where, props)
        _logger.debug(
            "augmentql: relationship %s.%s -> %s (%s, %s)",
            owner.name, c.field.name, target.name, c.kind.value, c.policy.name,
        )
        return names

    # ---------- connection where ----------

    def _build_connection_where(
        self,
        names: RelationshipNames,
        target_name: str,
        props_names: Optional[PropertiesNames],
    ) -> GeneratedType:
        gtype = self.graph.create(names.connection_where)
        gtype.add_logical_fields()
        gtype.add_field("node", EntityNames(target_name).where)
        if props_names is not None:
            gtype.add_field("edge", props_names.where)
        return gtype

    def _build_union_connection_where(
        self,
        names: RelationshipNames,
        c: Classification,
        props_names: Optional[PropertiesNames],
    ) -> GeneratedType:
        """Per-member map; each member slot is a regular connection where."""
        container = self.graph.create(names.connection_where)
        for member in c.target.members:
            member_where = self._build_connection_where(names.for_member(member), member, props_names)
            container.add_field(member, member_where.name)
        return container

    # ---------- selection side ----------

    def _build_selection(
        self,
        c: Classification,
        names: RelationshipNames,
        obj: GeneratedType,
        props: Optional[RelationshipProperties],
        props_names: Optional[PropertiesNames],
        declared_on: Optional[InterfaceType],
    ) -> None:
        f = c.field
        target = c.target
        target_names = EntityNames(target.name)
        is_union = c.kind is FieldKind.UNION

        if f.is_list:
            field_ref = TypeRef(target.name, non_null=True, is_list=True, item_non_null=True)
            args = [Argument("where", TypeRef(target_names.where))]
            if not is_union:
                args.append(Argument("sort", _list_of(target_names.sort)))
            args.extend([Argument("limit", TypeRef("Int")), Argument("offset", TypeRef("Int"))])
        else:
            field_ref = TypeRef(target.name, non_null=f.is_required)
            args = [Argument("where", TypeRef(target_names.where))]
        obj.add_field(f.name, field_ref, description=f.description, args=args)

        if declared_on is not None:
            # the interface builds these types and the selection aggregate; the
            # implementation only points at them
            shared = RelationshipNames(declared_on.name, f.name, target.name)
            conn_args = [Argument("where", TypeRef(shared.connection_where))]
            if not is_union:
                conn_args.append(Argument("sort", _list_of(shared.connection_sort)))
            conn_args.extend([Argument("first", TypeRef("Int")), Argument("after", TypeRef("String"))])
            obj.add_field(names.connection_field, TypeRef(shared.connection_type, non_null=True), args=conn_args)
            return

        edge = self.graph.create(names.relationship_type, TypeKind.OBJECT)
        edge.add_field("cursor", "String!")
        edge.add_field("node", TypeRef(target.name, non_null=True))
        if props_names is not None:
            edge.add_field("properties", TypeRef(props_names.name, non_null=True))

        connection = self.graph.create(names.connection_type, TypeKind.OBJECT)
        connection.add_field("edges", TypeRef(edge.name, non_null=True, is_list=True, item_non_null=True))
        connection.add_field("totalCount", "Int!")
        connection.add_field("pageInfo", TypeRef(ensure_page_info(self.graph), non_null=True))
        selection = aggregation.build_selection_aggregate(self.graph, names, target, props, self.model, self.config)
        if selection is not None:
            connection.add_field("aggregate", TypeRef(selection, non_null=True))

        conn_args = [Argument("where", TypeRef(names.connection_where))]
        if not is_union:
            sort = self.graph.create(names.connection_sort)
            sort.add_field("node", target_names.sort)
            if props_names is not None:
                sort.add_field("edge", props_names.sort)
            conn_args.append(Argument("sort", _list_of(sort.name)))
        conn_args.extend([Argument("first", TypeRef("Int")), Argument("after", TypeRef("String"))])
        obj.add_field(names.connection_field, TypeRef(connection.name, non_null=True), args=conn_args)

    # ---------- filter side ----------

    def _build_filters(
        self,
        owner: DomainType,
        c: Classification,
        names: RelationshipNames,
        where: GeneratedType,
        props: Optional[RelationshipProperties],
    ) -> None:
        policy: FilterPolicy = c.policy
        if c.kind is FieldKind.UNION:
            # branch is chosen statically: no quantifiers, no aggregate
            if policy.by_value:
                where.add_field(c.field.name, EntityNames(c.target.name).where)
                where.add_field(names.connection_field, names.connection_where)
            return
        if not policy.by_value and not policy.by_aggregate:
            return
        if policy.by_value:
            self._add_relationship_filters(owner, c, names, where)
        filters = self.graph.create(names.connection_filters)
        owner_plural = pluralize(owner.name)
        related = pluralize(names.connection_type)
        if policy.by_value:
            for quantifier, wording in _QUANTIFIERS.items():
                filters.add_field(
                    quantifier,
                    names.connection_where,
                    description=f"Return {owner_plural} where {wording} of the related {related} match this filter",
                )
        if policy.by_aggregate:
            aggregate_input = self._build_connection_aggregation_input(c, names, props)
            filters.add_field(
                "aggregate",
                aggregate_input,
                description=f"Filter {owner_plural} by aggregating results on related {related}",
            )
            if self.config.legacy.aggregation_filters_outside_connection:
                legacy_input = self._build_legacy_aggregate_input(c, names, props)
                where.add_field(
                    names.aggregate_field,
                    legacy_input,
                    deprecation_reason=AGGREGATE_OUTSIDE_CONNECTION.format(field=c.field.name),
                )
        where.add_field(names.connection_field, filters.name)

    def _add_relationship_filters(
        self,
        owner: DomainType,
        c: Classification,
        names: RelationshipNames,
        where: GeneratedType,
    ) -> None:
        target_names = EntityNames(c.target.name)
        target_plural = pluralize(c.target.name)

        def build(gtype: GeneratedType) -> None:
            for quantifier, wording in _QUANTIFIERS.items():
                gtype.add_field(
                    quantifier,
                    target_names.where,
                    description=f"Filter type where {wording} of the related {target_plural} match this filter",
                )

        filters = self.graph.ensure(target_names.relationship_filters, build)
        where.add_field(c.field.name, filters.name)
        if not self.config.legacy.relationship_filters:
            return
        owner_plural = pluralize(owner.name)
        related = pluralize(names.connection_type)
        for quantifier, wording in _QUANTIFIERS.items():
            alias = RELATIONSHIP_ALIASES[quantifier]
            where.add_field(
                alias.field_name(c.field.name),
                target_names.where,
                description=f"Return {owner_plural} where {wording} of the related {target_plural} match this filter",
                deprecation_reason=alias.reason(c.field.name),
            )
        for quantifier, wording in _QUANTIFIERS.items():
            alias = CONNECTION_ALIASES[quantifier]
            where.add_field(
                alias.field_name(names.connection_field),
                names.connection_where,
                description=f"Return {owner_plural} where {wording} of the related {related} match this filter",
                deprecation_reason=alias.reason(c.field.name),
            )

    def _edge_aggregation(self, props: Optional[RelationshipProperties]) -> Optional[str]:
        if props is None:
            return None
        return aggregation.ensure_edge_aggregation_where_input(self.graph, props, self.model, self.config)

    def _build_connection_aggregation_input(
        self,
        c: Classification,
        names: RelationshipNames,
        props: Optional[RelationshipProperties],
    ) -> str:
        gtype = self.graph.create(names.connection_aggregation_input)
        gtype.add_logical_fields()
        gtype.add_field("count", self._count_filter_input())
        node = aggregation.build_node_aggregation_where_input(self.graph, names, c.target, self.model, self.config)
        if node is not None:
            gtype.add_field("node", node)
        edge = self._edge_aggregation(props)
        if edge is not None:
            gtype.add_field("edge", edge)
        return gtype.name

    def _build_legacy_aggregate_input(
        self,
        c: Classification,
        names: RelationshipNames,
        props: Optional[RelationshipProperties],
    ) -> str:
        """Deprecated ``{Owner}{Field}AggregateInput`` used outside the connection filter."""
        gtype = self.graph.create(names.aggregate_input)
        gtype.add_logical_fields()
        gtype.add_field("count", self._int_scalar_filters())
        int_ops: Dict[str, TypeRef] = {
            op.name: op.operand_ref("Int") for op in COMPARATORS[ScalarKind.INT]
        }
        for operator, alias in COUNT_ALIASES.items():
            gtype.add_field(
                alias.field_name("count"),
                int_ops[operator],
                deprecation_reason=alias.reason("count"),
            )
        # shares the node aggregation input built for the connection filter
        gtype.add_field("node", names.node_aggregation_where_input)
        edge = self._edge_aggregation(props)
        if edge is not None:
            gtype.add_field("edge", edge)
        return gtype.name
