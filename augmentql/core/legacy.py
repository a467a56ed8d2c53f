"""Declarative legacy alias tables.

Every grouped operator field can have a flattened, deprecated twin. The
tables below map operator names to the legacy suffix and the deprecation
message template; builders apply them uniformly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .scalars import ScalarKind
from ..naming import camel_to_snake

__all__ = [
    "LegacyAlias",
    "FILTER_ALIASES",
    "AGGREGATION_COMPARATORS",
    "RELATIONSHIP_ALIASES",
    "CONNECTION_ALIASES",
    "COUNT_ALIASES",
    "mutation_aliases",
    "aggregation_alias",
    "AGGREGATE_OUTSIDE_CONNECTION",
]


@dataclass(frozen=True)
class LegacyAlias:
    operator: str
    suffix: str
    template: str

    def field_name(self, field_name: str) -> str:
        return f"{field_name}_{self.suffix}"

    def reason(self, field_name: str, **extra) -> str:
        return self.template.format(field=field_name, operator=self.operator, **extra)


_FILTER = "Please use the relevant generic filter {field}: {{ {operator}: ... }}"
_AGGREGATION = "Please use the relevant generic filter '{field}: {{ {aggregation}: {{ {operator}: ... }} }} }}' instead."
_RELATIONSHIP = "Please use the relevant generic filter '{field}: {{ {operator}: ... }}' instead."
_CONNECTION = "Please use the relevant generic filter '{field}Connection: {{ {operator}: {{ node: ... }} }} }}' instead."
_COUNT = "Please use the relevant generic filter '{{ count: {{ {operator}: ... }} }} }}' instead."
_MUTATION_SET = "Please use the generic mutation '{field}: {{ set: ... }} }}' instead."
_MUTATION = "Please use the relevant generic mutation '{field}: {{ {operator}: ... }} }}' instead."

AGGREGATE_OUTSIDE_CONNECTION = (
    "Aggregate filters are moved inside the {field}Connection filter, "
    "please use {{ {field}Connection: {{ aggregate: {{...}} }} }} instead"
)


def _aliases(template: str, *pairs: Tuple[str, str]) -> Dict[str, LegacyAlias]:
    return {op: LegacyAlias(op, suffix, template) for op, suffix in pairs}


FILTER_ALIASES: Dict[str, LegacyAlias] = _aliases(
    _FILTER,
    ("eq", "EQ"),
    ("in", "IN"),
    ("contains", "CONTAINS"),
    ("startsWith", "STARTS_WITH"),
    ("endsWith", "ENDS_WITH"),
    ("lt", "LT"),
    ("lte", "LTE"),
    ("gt", "GT"),
    ("gte", "GTE"),
    ("includes", "INCLUDES"),
)

# comparators flattened under every aggregation operator
AGGREGATION_COMPARATORS: Dict[str, str] = {
    "eq": "EQUAL",
    "gt": "GT",
    "gte": "GTE",
    "lt": "LT",
    "lte": "LTE",
}

RELATIONSHIP_ALIASES: Dict[str, LegacyAlias] = _aliases(
    _RELATIONSHIP, ("all", "ALL"), ("none", "NONE"), ("single", "SINGLE"), ("some", "SOME")
)

CONNECTION_ALIASES: Dict[str, LegacyAlias] = _aliases(
    _CONNECTION, ("all", "ALL"), ("none", "NONE"), ("single", "SINGLE"), ("some", "SOME")
)

COUNT_ALIASES: Dict[str, LegacyAlias] = _aliases(
    _COUNT, ("eq", "EQ"), ("gt", "GT"), ("gte", "GTE"), ("lt", "LT"), ("lte", "LTE")
)

_INTEGER_MUTATIONS = (
    LegacyAlias("set", "SET", _MUTATION_SET),
    LegacyAlias("add", "INCREMENT", _MUTATION),
    LegacyAlias("subtract", "DECREMENT", _MUTATION),
)
_FLOAT_MUTATIONS = (
    LegacyAlias("set", "SET", _MUTATION_SET),
    LegacyAlias("add", "ADD", _MUTATION),
    LegacyAlias("subtract", "SUBTRACT", _MUTATION),
    LegacyAlias("multiply", "MULTIPLY", _MUTATION),
    LegacyAlias("divide", "DIVIDE", _MUTATION),
)
_LIST_MUTATIONS = (
    LegacyAlias("set", "SET", _MUTATION_SET),
    LegacyAlias("push", "PUSH", _MUTATION),
    LegacyAlias("pop", "POP", _MUTATION),
)


def mutation_aliases(kind: ScalarKind, is_list: bool) -> Dict[str, LegacyAlias]:
    if is_list:
        aliases = _LIST_MUTATIONS
    elif kind in (ScalarKind.INT, ScalarKind.BIGINT):
        aliases = _INTEGER_MUTATIONS
    elif kind is ScalarKind.FLOAT:
        aliases = _FLOAT_MUTATIONS
    else:
        aliases = _INTEGER_MUTATIONS[:1]
    return {a.operator: a for a in aliases}


def aggregation_alias(aggregation: str, comparator: str) -> LegacyAlias:
    """Alias for ``{field}_{AGGREGATION}_{COMPARATOR}``, e.g. ``title_AVERAGE_LENGTH_EQUAL``."""
    suffix = f"{camel_to_snake(aggregation).upper()}_{AGGREGATION_COMPARATORS[comparator]}"
    template = _AGGREGATION.replace("{aggregation}", aggregation)
    return LegacyAlias(comparator, suffix, template)
