"""Type assembler: turns a domain model into the derived type graph.

The run has two phases. The first builds a candidate graph in which some
types may be empty. The second is :meth:`TypeGraph.prune`, a fixed-point
removal of empty types and of every field or argument that referenced them.
Any :class:`~augmentql.errors.AugmentationError` raised while building aborts
the run; no partial graph escapes.
"""
from __future__ import annotations

import logging
from typing import Optional

from .builders import aggregation, mutations, scalar_filters
from .builders.relationships import RelationshipFilterBuilder, ensure_page_info
from .config import AugmentConfig
from .core.classifier import Classification, FieldKind, classify
from .errors import AugmentationError
from .graph import Argument, GeneratedType, TypeGraph, TypeKind, TypeRef
from .model import DomainModel, InterfaceType, NodeType, UnionType
from .naming import EntityNames, PropertiesNames

__all__ = ["TypeAssembler", "augment"]

_logger = logging.getLogger("augmentql")

EVENT_TYPE = "EventType"


def _list_of(name: str, non_null: bool = False) -> TypeRef:
    return TypeRef(name, non_null=non_null, is_list=True, item_non_null=True)


def _scalar_ref(c: Classification) -> TypeRef:
    f = c.field
    return TypeRef(c.scalar.type_name, non_null=f.is_required, is_list=f.is_list, item_non_null=f.is_list)


class TypeAssembler:
    """Builds the full :class:`TypeGraph` for one domain model.

    Example:
        graph = TypeAssembler(model, AugmentConfig()).assemble()
        graph["MovieWhere"].field_names()
    """

    def __init__(self, model: DomainModel, config: Optional[AugmentConfig] = None):
        self.model = model
        self.config = config or AugmentConfig()
        self.graph = TypeGraph()
        self.relationships = RelationshipFilterBuilder(self.graph, model, self.config)

    def assemble(self) -> TypeGraph:
        self._validate()
        self._register_domain_scalars()
        for dtype in self.model.types.values():
            if isinstance(dtype, NodeType):
                self._build_node(dtype)
            elif isinstance(dtype, InterfaceType):
                self._build_interface(dtype)
            else:
                self._build_union(dtype)
        self._build_query()
        self._build_mutation()
        if self.config.subscriptions:
            self._build_subscription()
        generated = len(self.graph)
        removed = self.graph.prune()
        _logger.info(
            "augmentql: derived %d types from %d domain types (%d pruned)",
            len(self.graph), len(self.model.types), len(removed),
        )
        _logger.debug("augmentql: candidate graph had %d types", generated)
        return self.graph

    # ---------- validation ----------

    def _validate(self) -> None:
        for iface in self.model.interfaces():
            for impl in iface.implementations:
                if not isinstance(self.model.get(impl), NodeType):
                    raise AugmentationError(f"implementation '{impl}' is not a node type", type_name=iface.name)
                self._check_implements(self.model.get(impl), iface)
        for union in self.model.unions():
            if not union.members:
                raise AugmentationError("union has no members", type_name=union.name)
            for member in union.members:
                if not isinstance(self.model.get(member), NodeType):
                    raise AugmentationError(f"member '{member}' is not a node type", type_name=union.name)

    def _check_implements(self, node: NodeType, iface: InterfaceType) -> None:
        for declared in iface.fields:
            own = node.get_field(declared.name)
            if own is None:
                raise AugmentationError(
                    f"missing field required by interface '{iface.name}'",
                    type_name=node.name,
                    field_name=declared.name,
                )
            if own.is_reference != declared.is_reference or own.type_name != declared.type_name:
                raise AugmentationError(
                    f"field type '{own.type_name}' does not match '{declared.type_name}' on interface '{iface.name}'",
                    type_name=node.name,
                    field_name=declared.name,
                )

    def _register_domain_scalars(self) -> None:
        for enum in self.model.enums.values():
            gtype = self.graph.create(enum.name, TypeKind.ENUM, description=enum.description)
            gtype.values.extend(enum.values)
        for name in self.model.scalars:
            self.graph.create(name, TypeKind.SCALAR)

    # ---------- per domain type ----------

    def _declaring_interface(self, node: NodeType, field_name: str) -> Optional[InterfaceType]:
        for iface in self.model.interfaces_of(node.name):
            declared = iface.get_field(field_name)
            if declared is not None and declared.is_reference:
                return iface
        return None

    def _build_node(self, node: NodeType) -> None:
        names = EntityNames(node.name)
        legacy = self.config.legacy
        obj = self.graph.create(node.name, TypeKind.OBJECT, description=node.description)
        obj.interfaces.extend(i.name for i in self.model.interfaces_of(node.name))
        where = self._create_where(names)
        sort = self._create_sort(names)
        create = self.graph.create(names.create_input)
        update = self.graph.create(names.update_input)
        connect = self.graph.create(names.connect_where)
        connect.add_field("node", TypeRef(names.where, non_null=True))
        subscription_where = None
        payload = None
        if self.config.subscriptions:
            subscription_where = self.graph.create(names.subscription_where)
            subscription_where.add_logical_fields()
            payload = self.graph.create(names.event_payload, TypeKind.OBJECT)

        for f in node.fields:
            c = classify(f, node, self.model, self.config)
            if c.kind is FieldKind.SCALAR:
                obj.add_field(f.name, _scalar_ref(c), description=f.description)
                scalar_filters.add_where_fields(where, c, self.graph, legacy=legacy.attribute_filters)
                scalar_filters.add_sort_field(sort, c, self.graph)
                mutations.add_create_field(create, c, self.graph)
                mutations.add_update_fields(update, c, self.graph, legacy=legacy.mutation_operations)
                if subscription_where is not None:
                    scalar_filters.add_where_fields(
                        subscription_where, c, self.graph, legacy=legacy.subscription_filters
                    )
                    payload.add_field(f.name, _scalar_ref(c))
                continue
            rel_names = self.relationships.build(
                node, c, where=where, obj=obj, declared_on=self._declaring_interface(node, f.name)
            )
            edge_create = PropertiesNames(c.properties.name).create_input if c.properties else None
            mutations.add_relationship_create_field(create, c, rel_names, self.graph, edge_create)
            mutations.add_relationship_update_field(update, c, rel_names, self.graph)

        aggregation.build_root_aggregate_selection(self.graph, node, self.model, self.config)
        _logger.debug("augmentql: built node %s (%d fields)", node.name, len(node.fields))

    def _build_interface(self, iface: InterfaceType) -> None:
        names = EntityNames(iface.name)
        obj = self.graph.create(iface.name, TypeKind.INTERFACE, description=iface.description)
        where = self._create_where(names)
        sort = self._create_sort(names)
        connect = self.graph.create(names.connect_where)
        connect.add_field("node", TypeRef(names.where, non_null=True))
        implementations = self.graph.create(names.implementation_enum, TypeKind.ENUM)
        implementations.values.extend(iface.implementations)
        where.add_field("typename", _list_of(implementations.name))
        for f in iface.fields:
            c = classify(f, iface, self.model, self.config)
            if c.kind is FieldKind.SCALAR:
                obj.add_field(f.name, _scalar_ref(c), description=f.description)
                scalar_filters.add_where_fields(where, c, self.graph, legacy=self.config.legacy.attribute_filters)
                scalar_filters.add_sort_field(sort, c, self.graph)
            else:
                self.relationships.build(iface, c, where=where, obj=obj)
        aggregation.build_root_aggregate_selection(self.graph, iface, self.model, self.config)
        _logger.debug("augmentql: built interface %s (%d implementations)", iface.name, len(iface.implementations))

    def _build_union(self, union: UnionType) -> None:
        names = EntityNames(union.name)
        gtype = self.graph.create(union.name, TypeKind.UNION, description=union.description)
        gtype.members.extend(union.members)
        # per-member map, no combinators
        where = self.graph.create(names.where)
        for member in union.members:
            where.add_field(member, EntityNames(member).where)

    def _create_where(self, names: EntityNames) -> GeneratedType:
        where = self.graph.create(names.where)
        where.add_logical_fields()
        return where

    def _create_sort(self, names: EntityNames) -> GeneratedType:
        return self.graph.create(
            names.sort,
            description=(
                f"Fields to sort {names.plural} by. The order in which sorts are applied is not "
                f"guaranteed when specifying many fields in one {names.sort} object."
            ),
        )

    # ---------- root operations ----------

    def _root(self, name: str) -> GeneratedType:
        return self.graph.create(name, TypeKind.OBJECT)

    def _build_query(self) -> None:
        query = self._root("Query")
        for dtype in self.model.types.values():
            names = EntityNames(dtype.name)
            if isinstance(dtype, UnionType):
                query.add_field(
                    names.root_list,
                    _list_of(dtype.name, non_null=True),
                    args=[
                        Argument("where", TypeRef(names.where)),
                        Argument("limit", TypeRef("Int")),
                        Argument("offset", TypeRef("Int")),
                    ],
                )
                continue
            query.add_field(
                names.root_list,
                _list_of(dtype.name, non_null=True),
                args=[
                    Argument("where", TypeRef(names.where)),
                    Argument("sort", _list_of(names.sort)),
                    Argument("limit", TypeRef("Int")),
                    Argument("offset", TypeRef("Int")),
                ],
            )
            edge = self.graph.create(names.edge_type, TypeKind.OBJECT)
            edge.add_field("cursor", "String!")
            edge.add_field("node", TypeRef(dtype.name, non_null=True))
            connection = self.graph.create(names.connection_type, TypeKind.OBJECT)
            connection.add_field("edges", _list_of(edge.name, non_null=True))
            connection.add_field("totalCount", "Int!")
            connection.add_field("pageInfo", TypeRef(ensure_page_info(self.graph), non_null=True))
            query.add_field(
                names.root_connection,
                TypeRef(connection.name, non_null=True),
                args=[
                    Argument("where", TypeRef(names.where)),
                    Argument("sort", _list_of(names.sort)),
                    Argument("first", TypeRef("Int")),
                    Argument("after", TypeRef("String")),
                ],
            )
            query.add_field(
                names.root_aggregate,
                TypeRef(names.aggregate_selection, non_null=True),
                args=[Argument("where", TypeRef(names.where))],
            )

    def _info_type(self, name: str, *counters: str) -> str:
        def build(gtype: GeneratedType) -> None:
            for counter in counters:
                gtype.add_field(counter, "Int!")

        return self.graph.ensure(name, build, kind=TypeKind.OBJECT).name

    def _build_mutation(self) -> None:
        mutation = self._root("Mutation")
        create_info = self._info_type("CreateInfo", "nodesCreated", "relationshipsCreated")
        update_info = self._info_type(
            "UpdateInfo", "nodesCreated", "nodesDeleted", "relationshipsCreated", "relationshipsDeleted"
        )
        delete_info = self._info_type("DeleteInfo", "nodesDeleted", "relationshipsDeleted")
        for node in self.model.nodes():
            names = EntityNames(node.name)
            created = self.graph.create(names.create_response, TypeKind.OBJECT)
            created.add_field("info", TypeRef(create_info, non_null=True))
            created.add_field(names.root_list, _list_of(node.name, non_null=True))
            updated = self.graph.create(names.update_response, TypeKind.OBJECT)
            updated.add_field("info", TypeRef(update_info, non_null=True))
            updated.add_field(names.root_list, _list_of(node.name, non_null=True))
            mutation.add_field(
                names.create_mutation,
                TypeRef(created.name, non_null=True),
                args=[Argument("input", _list_of(names.create_input, non_null=True))],
            )
            mutation.add_field(
                names.update_mutation,
                TypeRef(updated.name, non_null=True),
                args=[
                    Argument("where", TypeRef(names.where)),
                    Argument("update", TypeRef(names.update_input)),
                ],
            )
            mutation.add_field(
                names.delete_mutation,
                TypeRef(delete_info, non_null=True),
                args=[Argument("where", TypeRef(names.where))],
            )

    def _build_subscription(self) -> None:
        subscription = self._root("Subscription")
        event_type = self.graph.create(EVENT_TYPE, TypeKind.ENUM)
        event_type.values.extend(["CREATE", "UPDATE", "DELETE"])
        for node in self.model.nodes():
            names = EntityNames(node.name)
            payload = TypeRef(names.event_payload, non_null=True)
            events = (
                (names.created_event, names.created_subscription, {f"created{node.name}": payload}),
                (
                    names.updated_event,
                    names.updated_subscription,
                    {"previousState": payload, f"updated{node.name}": payload},
                ),
                (names.deleted_event, names.deleted_subscription, {f"deleted{node.name}": payload}),
            )
            for event_name, field_name, extra in events:
                event = self.graph.create(event_name, TypeKind.OBJECT)
                event.add_field("event", TypeRef(EVENT_TYPE, non_null=True))
                event.add_field("timestamp", "Float!")
                for key, ref in extra.items():
                    event.add_field(key, ref)
                subscription.add_field(
                    field_name,
                    TypeRef(event_name, non_null=True),
                    args=[Argument("where", TypeRef(names.subscription_where))],
                )


def augment(model: DomainModel, config: Optional[AugmentConfig] = None) -> TypeGraph:
    """Derive the full type graph for ``model``.

    Raises:
        AugmentationError: The domain model is malformed. Nothing is returned.
    """
    return TypeAssembler(model, config).assemble()
