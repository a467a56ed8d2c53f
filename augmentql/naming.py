"""Naming utilities and the generated-type naming resolver.

Every generated name is synthesized from an (owner, field, role) tuple so the
same input always yields the same name. Plurals come from ``inflection``.
"""
from __future__ import annotations

import re
from typing import Optional

import inflection

__all__ = [
    "camel_to_snake",
    "upper_first",
    "lower_first",
    "pluralize",
    "EntityNames",
    "RelationshipNames",
    "PropertiesNames",
]


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase identifier to snake_case.

    Idempotent for already snake_case input. Handles sequences of capitals.
    """
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()


def upper_first(name: str) -> str:
    """Capitalize only the first letter: ``upper_first("acted_in") == "Acted_in"``."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def lower_first(name: str) -> str:
    if not name:
        return name
    return name[0].lower() + name[1:]


def pluralize(name: str) -> str:
    """Pluralize a type name keeping its casing (``Person`` -> ``People``)."""
    return inflection.pluralize(name)


class EntityNames:
    """Names derived from a node, interface or union type."""

    def __init__(self, name: str):
        self.name = name

    @property
    def plural(self) -> str:
        return pluralize(self.name)

    @property
    def where(self) -> str:
        return f"{self.name}Where"

    @property
    def sort(self) -> str:
        return f"{self.name}Sort"

    @property
    def create_input(self) -> str:
        return f"{self.name}CreateInput"

    @property
    def update_input(self) -> str:
        return f"{self.name}UpdateInput"

    @property
    def subscription_where(self) -> str:
        return f"{self.name}SubscriptionWhere"

    @property
    def connect_where(self) -> str:
        return f"{self.name}ConnectWhere"

    @property
    def relationship_filters(self) -> str:
        return f"{self.name}RelationshipFilters"

    @property
    def implementation_enum(self) -> str:
        return f"{self.name}Implementation"

    @property
    def aggregate_selection(self) -> str:
        return f"{self.name}AggregateSelection"

    @property
    def connection_type(self) -> str:
        return f"{self.plural}Connection"

    @property
    def edge_type(self) -> str:
        return f"{self.name}Edge"

    @property
    def event_payload(self) -> str:
        return f"{self.name}EventPayload"

    @property
    def created_event(self) -> str:
        return f"{self.name}CreatedEvent"

    @property
    def updated_event(self) -> str:
        return f"{self.name}UpdatedEvent"

    @property
    def deleted_event(self) -> str:
        return f"{self.name}DeletedEvent"

    @property
    def create_response(self) -> str:
        return f"Create{self.plural}MutationResponse"

    @property
    def update_response(self) -> str:
        return f"Update{self.plural}MutationResponse"

    # root operation fields

    @property
    def root_list(self) -> str:
        return lower_first(self.plural)

    @property
    def root_connection(self) -> str:
        return f"{self.root_list}Connection"

    @property
    def root_aggregate(self) -> str:
        return f"{self.root_list}Aggregate"

    @property
    def create_mutation(self) -> str:
        return f"create{self.plural}"

    @property
    def update_mutation(self) -> str:
        return f"update{self.plural}"

    @property
    def delete_mutation(self) -> str:
        return f"delete{self.plural}"

    @property
    def created_subscription(self) -> str:
        return f"{lower_first(self.name)}Created"

    @property
    def updated_subscription(self) -> str:
        return f"{lower_first(self.name)}Updated"

    @property
    def deleted_subscription(self) -> str:
        return f"{lower_first(self.name)}Deleted"


class RelationshipNames:
    """Names derived from a relationship field.

    Most names are ``{Owner}{Field}{Role}``; selection aggregates also encode the
    target type: ``{Owner}{Target}{Field}AggregateSelection``. When ``member`` is
    given (union targets) the member name is appended to the prefix.
    """

    def __init__(self, owner: str, field_name: str, target: str, member: Optional[str] = None):
        self.owner = owner
        self.field_name = field_name
        self.target = target
        self.member = member
        self.capitalized = upper_first(field_name)
        self.prefix = f"{owner}{self.capitalized}{member or ''}"

    def for_member(self, member: str) -> "RelationshipNames":
        return RelationshipNames(self.owner, self.field_name, self.target, member=member)

    # owner Where field names

    @property
    def connection_field(self) -> str:
        return f"{self.field_name}Connection"

    @property
    def aggregate_field(self) -> str:
        return f"{self.field_name}Aggregate"

    # filter side

    @property
    def connection_where(self) -> str:
        return f"{self.prefix}ConnectionWhere"

    @property
    def connection_filters(self) -> str:
        return f"{self.prefix}ConnectionFilters"

    @property
    def connection_aggregation_input(self) -> str:
        return f"{self.prefix}ConnectionAggregationInput"

    @property
    def node_aggregation_where_input(self) -> str:
        return f"{self.prefix}NodeAggregationWhereInput"

    @property
    def aggregate_input(self) -> str:
        return f"{self.prefix}AggregateInput"

    # selection side

    @property
    def connection_type(self) -> str:
        return f"{self.prefix}Connection"

    @property
    def relationship_type(self) -> str:
        return f"{self.prefix}Relationship"

    @property
    def connection_sort(self) -> str:
        return f"{self.prefix}ConnectionSort"

    @property
    def selection_aggregate(self) -> str:
        return f"{self.owner}{self.target}{self.capitalized}AggregateSelection"

    @property
    def node_aggregate_selection(self) -> str:
        return f"{self.owner}{self.target}{self.capitalized}NodeAggregateSelection"

    @property
    def edge_aggregate_selection(self) -> str:
        return f"{self.owner}{self.target}{self.capitalized}EdgeAggregateSelection"

    # nested mutation inputs

    @property
    def field_input(self) -> str:
        return f"{self.prefix}FieldInput"

    @property
    def create_field_input(self) -> str:
        return f"{self.prefix}CreateFieldInput"

    @property
    def connect_field_input(self) -> str:
        return f"{self.prefix}ConnectFieldInput"

    @property
    def update_field_input(self) -> str:
        return f"{self.prefix}UpdateFieldInput"

    @property
    def disconnect_field_input(self) -> str:
        return f"{self.prefix}DisconnectFieldInput"

    @property
    def delete_field_input(self) -> str:
        return f"{self.prefix}DeleteFieldInput"

    @property
    def union_create_input(self) -> str:
        return f"{self.prefix}UnionCreateInput"

    @property
    def union_update_input(self) -> str:
        return f"{self.prefix}UnionUpdateInput"


class PropertiesNames:
    """Names derived from a relationship properties type."""

    def __init__(self, name: str):
        self.name = name

    @property
    def where(self) -> str:
        return f"{self.name}Where"

    @property
    def sort(self) -> str:
        return f"{self.name}Sort"

    @property
    def create_input(self) -> str:
        return f"{self.name}CreateInput"

    @property
    def update_input(self) -> str:
        return f"{self.name}UpdateInput"

    @property
    def aggregation_where_input(self) -> str:
        return f"{self.name}AggregationWhereInput"
