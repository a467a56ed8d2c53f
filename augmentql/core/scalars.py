"""Scalar kinds and declarative operator tables.

Each table maps a :class:`ScalarKind` to the operators it supports. An
operator's operand is a type-reference template in which ``{T}`` stands for
the field's own scalar type name, so ``"[{T}!]"`` on a ``String`` field is
``[String!]``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from ..graph import TypeRef

if TYPE_CHECKING:  # pragma: no cover
    from ..model import DomainModel

__all__ = [
    "ScalarKind",
    "EXTENDED_SCALARS",
    "TEXT_KINDS",
    "NUMERIC_KINDS",
    "TEMPORAL_KINDS",
    "Operator",
    "ResolvedScalar",
    "resolve_scalar",
    "COMPARATORS",
    "LIST_COMPARATORS",
    "MUTATIONS",
    "LIST_MUTATIONS",
    "AGGREGATION_FILTERS",
    "AGGREGATE_SELECTIONS",
]


class ScalarKind(str, Enum):
    ID = "ID"
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BIGINT = "BigInt"
    BOOLEAN = "Boolean"
    DATE = "Date"
    DATETIME = "DateTime"
    LOCAL_DATETIME = "LocalDateTime"
    TIME = "Time"
    LOCAL_TIME = "LocalTime"
    DURATION = "Duration"
    ENUM = "Enum"
    CUSTOM = "Custom"


# Scalars beyond the GraphQL built-ins that the engine always knows about.
EXTENDED_SCALARS: Dict[str, str] = {
    "BigInt": "A BigInt value up to 64 bits in size, which can be a number or a string if used inline, or a string only if used as a variable. Always returned as a string.",
    "Date": "A date, represented as a 'yyyy-mm-dd' string",
    "DateTime": "A date and time, represented as an ISO-8601 string",
    "LocalDateTime": "A local datetime, represented as 'YYYY-MM-DDTHH:MM:SS'",
    "Time": "A time, represented as an RFC3339 time string",
    "LocalTime": "A local time, represented as a time string without timezone information",
    "Duration": "A duration, represented as an ISO 8601 duration string",
}

TEXT_KINDS = (ScalarKind.ID, ScalarKind.STRING)
NUMERIC_KINDS = (ScalarKind.INT, ScalarKind.FLOAT, ScalarKind.BIGINT)
TEMPORAL_KINDS = (
    ScalarKind.DATE,
    ScalarKind.DATETIME,
    ScalarKind.LOCAL_DATETIME,
    ScalarKind.TIME,
    ScalarKind.LOCAL_TIME,
    ScalarKind.DURATION,
)

_BUILTIN_KINDS = {k.value: k for k in ScalarKind if k not in (ScalarKind.ENUM, ScalarKind.CUSTOM)}


@dataclass(frozen=True)
class Operator:
    """One grouped operator, e.g. ``contains`` or ``averageLength``.

    Attributes:
        name: Field name inside the grouped operator type.
        operand: Type-reference template; ``{T}`` is the field's scalar type.
    """

    name: str
    operand: str = "{T}"

    def operand_ref(self, type_name: str) -> TypeRef:
        return TypeRef.parse(self.operand.format(T=type_name))

    def operand_name(self, type_name: str) -> str:
        return self.operand_ref(type_name).name


@dataclass(frozen=True)
class ResolvedScalar:
    """A scalar field's kind together with its GraphQL type name."""

    kind: ScalarKind
    type_name: str

    @property
    def filters_type(self) -> str:
        if self.kind is ScalarKind.ENUM:
            return f"{self.type_name}EnumScalarFilters"
        return f"{self.type_name}ScalarFilters"

    @property
    def list_filters_type(self) -> str:
        if self.kind is ScalarKind.ENUM:
            return f"{self.type_name}EnumListFilters"
        return f"{self.type_name}ListFilters"

    @property
    def mutations_type(self) -> str:
        if self.kind is ScalarKind.ENUM:
            return f"{self.type_name}EnumScalarMutations"
        return f"{self.type_name}ScalarMutations"

    @property
    def list_mutations_type(self) -> str:
        if self.kind is ScalarKind.ENUM:
            return f"{self.type_name}EnumListMutations"
        return f"{self.type_name}ListMutations"

    @property
    def aggregation_filters_type(self) -> str:
        return f"{self.type_name}ScalarAggregationFilters"

    @property
    def aggregate_selection_type(self) -> str:
        return f"{self.type_name}AggregateSelection"

    @property
    def is_builtin(self) -> bool:
        return self.kind not in (ScalarKind.ENUM, ScalarKind.CUSTOM)


def resolve_scalar(type_name: str, model: Optional["DomainModel"] = None) -> Optional[ResolvedScalar]:
    """Resolve a scalar type name to its kind, or None when it is not a scalar."""
    kind = _BUILTIN_KINDS.get(type_name)
    if kind is not None:
        return ResolvedScalar(kind, type_name)
    if model is not None:
        if type_name in model.enums:
            return ResolvedScalar(ScalarKind.ENUM, type_name)
        if type_name in model.scalars:
            return ResolvedScalar(ScalarKind.CUSTOM, type_name)
    return None


def _table(**groups) -> Dict[ScalarKind, Tuple[Operator, ...]]:
    return {k: tuple(v) for k, v in groups.items()}


_EQ = Operator("eq")
_IN = Operator("in", "[{T}!]")
_ORDERED = (_EQ, _IN, Operator("lt"), Operator("lte"), Operator("gt"), Operator("gte"))
_TEXT = (_EQ, _IN, Operator("contains"), Operator("startsWith"), Operator("endsWith"))

COMPARATORS: Dict[ScalarKind, Tuple[Operator, ...]] = {
    ScalarKind.ID: _TEXT,
    ScalarKind.STRING: _TEXT,
    ScalarKind.BOOLEAN: (_EQ,),
    ScalarKind.ENUM: (_EQ, _IN),
    ScalarKind.CUSTOM: (_EQ, _IN),
}
for _k in NUMERIC_KINDS + TEMPORAL_KINDS:
    COMPARATORS[_k] = _ORDERED

LIST_COMPARATORS: Tuple[Operator, ...] = (Operator("eq", "[{T}!]"), Operator("includes"))

_SET = Operator("set")
MUTATIONS: Dict[ScalarKind, Tuple[Operator, ...]] = {k: (_SET,) for k in ScalarKind}
MUTATIONS[ScalarKind.INT] = (_SET, Operator("add"), Operator("subtract"))
MUTATIONS[ScalarKind.BIGINT] = (_SET, Operator("add"), Operator("subtract"))
MUTATIONS[ScalarKind.FLOAT] = (
    _SET,
    Operator("add"),
    Operator("subtract"),
    Operator("multiply"),
    Operator("divide"),
)

LIST_MUTATIONS: Tuple[Operator, ...] = (
    Operator("set", "[{T}!]"),
    Operator("push", "[{T}!]"),
    Operator("pop", "Int"),
)

# Aggregation filter operators: operand names the scalar whose filters are nested.
_MIN_MAX = (Operator("max"), Operator("min"))
AGGREGATION_FILTERS: Dict[ScalarKind, Tuple[Operator, ...]] = {
    ScalarKind.STRING: (
        Operator("averageLength", "Float"),
        Operator("longestLength", "Int"),
        Operator("shortestLength", "Int"),
    ),
    ScalarKind.INT: (Operator("average", "Float"), Operator("max"), Operator("min"), Operator("sum")),
    ScalarKind.FLOAT: (Operator("average"), Operator("max"), Operator("min"), Operator("sum")),
    ScalarKind.BIGINT: (Operator("average"), Operator("max"), Operator("min"), Operator("sum")),
    ScalarKind.DURATION: (Operator("average"), Operator("max"), Operator("min")),
    ScalarKind.DATETIME: _MIN_MAX,
    ScalarKind.LOCAL_DATETIME: _MIN_MAX,
    ScalarKind.TIME: _MIN_MAX,
    ScalarKind.LOCAL_TIME: _MIN_MAX,
}

# Read-only statistics exposed on aggregate selections.
AGGREGATE_SELECTIONS: Dict[ScalarKind, Tuple[Operator, ...]] = {
    ScalarKind.STRING: (Operator("longest"), Operator("shortest")),
    ScalarKind.INT: (Operator("average", "Float"), Operator("max"), Operator("min"), Operator("sum")),
    ScalarKind.FLOAT: (Operator("average"), Operator("max"), Operator("min"), Operator("sum")),
    ScalarKind.BIGINT: (Operator("average"), Operator("max"), Operator("min"), Operator("sum")),
    ScalarKind.DURATION: (Operator("average"), Operator("max"), Operator("min")),
    ScalarKind.DATETIME: _MIN_MAX,
    ScalarKind.LOCAL_DATETIME: _MIN_MAX,
    ScalarKind.TIME: _MIN_MAX,
    ScalarKind.LOCAL_TIME: _MIN_MAX,
}
