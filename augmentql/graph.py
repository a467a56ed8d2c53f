"""Derived type graph produced by an augmentation run.

The graph is the engine's only output: generated types keyed by synthesized
name, each with an ordered field list whose entries carry a :class:`TypeRef`
and an optional deprecation notice. :meth:`TypeGraph.prune` implements the
fixed-point removal of empty types and the fields that reference them.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional

__all__ = [
    "BUILTIN_SCALARS",
    "TypeKind",
    "TypeRef",
    "Argument",
    "GeneratedField",
    "GeneratedType",
    "Reference",
    "TypeGraph",
]

_logger = logging.getLogger("augmentql")

BUILTIN_SCALARS = ("ID", "String", "Int", "Float", "Boolean")

_REF_RE = re.compile(r"^(\[)?\s*([A-Za-z_][A-Za-z0-9_]*)\s*(!)?\s*(\])?\s*(!)?$")


class TypeKind(str, Enum):
    INPUT = "input"
    OBJECT = "type"
    INTERFACE = "interface"
    UNION = "union"
    ENUM = "enum"
    SCALAR = "scalar"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a named type with list / non-null wrappers.

    ``item_non_null`` only matters for lists and marks ``[X!]``.
    """

    name: str
    non_null: bool = False
    is_list: bool = False
    item_non_null: bool = False

    @classmethod
    def parse(cls, notation: str) -> "TypeRef":
        """Parse ``X``, ``X!``, ``[X]``, ``[X!]`` or ``[X!]!`` notation."""
        m = _REF_RE.match(notation.strip())
        if not m or bool(m.group(1)) != bool(m.group(4)):
            raise ValueError(f"Invalid type reference: {notation!r}")
        if m.group(1):
            return cls(m.group(2), non_null=bool(m.group(5)), is_list=True, item_non_null=bool(m.group(3)))
        if m.group(5):
            raise ValueError(f"Invalid type reference: {notation!r}")
        return cls(m.group(2), non_null=bool(m.group(3)))

    def __str__(self) -> str:
        if self.is_list:
            inner = self.name + ("!" if self.item_non_null else "")
            return f"[{inner}]" + ("!" if self.non_null else "")
        return self.name + ("!" if self.non_null else "")


def _ref(value) -> TypeRef:
    if isinstance(value, TypeRef):
        return value
    return TypeRef.parse(value)


@dataclass
class Argument:
    name: str
    type: TypeRef
    description: Optional[str] = None


@dataclass
class GeneratedField:
    """A field (or input field) of a generated type.

    Attributes:
        logical: True for the AND/OR/NOT combinators. They do not count as
            filterable surface when deciding whether a type is empty.
    """

    name: str
    type: TypeRef
    description: Optional[str] = None
    deprecation_reason: Optional[str] = None
    args: Dict[str, Argument] = field(default_factory=dict)
    logical: bool = False

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None


@dataclass
class GeneratedType:
    name: str
    kind: TypeKind = TypeKind.INPUT
    description: Optional[str] = None
    fields: Dict[str, GeneratedField] = field(default_factory=dict)
    values: List[str] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    interfaces: List[str] = field(default_factory=list)

    def add_field(
        self,
        name: str,
        type_ref,
        *,
        description: Optional[str] = None,
        deprecation_reason: Optional[str] = None,
        args: Optional[List[Argument]] = None,
        logical: bool = False,
    ) -> GeneratedField:
        if name in self.fields:
            raise ValueError(f"Duplicate field {name!r} on generated type {self.name!r}")
        gf = GeneratedField(
            name=name,
            type=_ref(type_ref),
            description=description,
            deprecation_reason=deprecation_reason,
            args={a.name: a for a in (args or [])},
            logical=logical,
        )
        self.fields[name] = gf
        return gf

    def add_logical_fields(self) -> None:
        """Add the AND / OR / NOT combinators referencing this type."""
        self.add_field("AND", TypeRef(self.name, is_list=True, item_non_null=True), logical=True)
        self.add_field("OR", TypeRef(self.name, is_list=True, item_non_null=True), logical=True)
        self.add_field("NOT", TypeRef(self.name), logical=True)

    def is_empty(self) -> bool:
        if self.kind is TypeKind.SCALAR:
            return False
        if self.kind is TypeKind.ENUM:
            return not self.values
        if self.kind is TypeKind.UNION:
            return not self.members
        return not any(not f.logical for f in self.fields.values())

    def field_names(self) -> List[str]:
        return list(self.fields)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.fields

    def __getitem__(self, field_name: str) -> GeneratedField:
        return self.fields[field_name]


class Reference(NamedTuple):
    """One place where a type name is referenced.

    ``field_name`` is None for union members and implemented interfaces;
    ``arg_name`` is set when the reference is an argument type.
    """

    type_name: str
    field_name: Optional[str]
    arg_name: Optional[str] = None


class TypeGraph:
    """Generated types keyed by name, in generation order."""

    def __init__(self):
        self.types: Dict[str, GeneratedType] = {}

    def add(self, gtype: GeneratedType) -> GeneratedType:
        if gtype.name in self.types:
            raise ValueError(f"Duplicate generated type name: {gtype.name}")
        self.types[gtype.name] = gtype
        return gtype

    def create(self, name: str, kind: TypeKind = TypeKind.INPUT, description: Optional[str] = None) -> GeneratedType:
        return self.add(GeneratedType(name=name, kind=kind, description=description))

    def ensure(
        self,
        name: str,
        build: Optional[Callable[[GeneratedType], None]] = None,
        *,
        kind: TypeKind = TypeKind.INPUT,
        description: Optional[str] = None,
    ) -> GeneratedType:
        """Return the type named ``name``, creating and building it on first use.

        The new type is registered before ``build`` runs so self references
        and cycles resolve to the same instance.
        """
        existing = self.types.get(name)
        if existing is not None:
            return existing
        gtype = self.create(name, kind, description)
        if build is not None:
            build(gtype)
        return gtype

    def get(self, name: str) -> Optional[GeneratedType]:
        return self.types.get(name)

    def __getitem__(self, name: str) -> GeneratedType:
        return self.types[name]

    def __contains__(self, name: str) -> bool:
        return name in self.types

    def __iter__(self) -> Iterator[GeneratedType]:
        return iter(self.types.values())

    def __len__(self) -> int:
        return len(self.types)

    def names(self) -> List[str]:
        return list(self.types)

    def of_kind(self, kind: TypeKind) -> List[GeneratedType]:
        return [t for t in self.types.values() if t.kind is kind]

    def referencing_fields(self) -> Dict[str, List[Reference]]:
        """Index of type name to every field, argument, member or interface slot naming it."""
        index: Dict[str, List[Reference]] = {}
        for t in self.types.values():
            for f in t.fields.values():
                index.setdefault(f.type.name, []).append(Reference(t.name, f.name))
                for a in f.args.values():
                    index.setdefault(a.type.name, []).append(Reference(t.name, f.name, a.name))
            for m in t.members:
                index.setdefault(m, []).append(Reference(t.name, None))
            for i in t.interfaces:
                index.setdefault(i, []).append(Reference(t.name, None))
        return index

    def _is_known(self, name: str) -> bool:
        return name in self.types or name in BUILTIN_SCALARS

    def _detach(self, name: str, ref: Reference) -> None:
        owner = self.types.get(ref.type_name)
        if owner is None:
            return
        if ref.field_name is None:
            if name in owner.members:
                owner.members.remove(name)
            if name in owner.interfaces:
                owner.interfaces.remove(name)
            return
        gf = owner.fields.get(ref.field_name)
        if gf is None:
            return
        if ref.arg_name is None:
            del owner.fields[ref.field_name]
            return
        arg = gf.args.pop(ref.arg_name, None)
        # a field cannot be called without its required argument
        if arg is not None and arg.type.non_null:
            del owner.fields[ref.field_name]

    def prune(self) -> List[str]:
        """Delete empty types and every reference to them until stable.

        References to names that are neither generated nor built-in scalars
        are treated as dangling and removed too.

        Returns:
            Names of the deleted types, in deletion order.
        """
        removed: List[str] = []
        while True:
            index = self.referencing_fields()
            doomed = [t.name for t in self.types.values() if t.is_empty()]
            dangling = [n for n in index if not self._is_known(n)]
            if not doomed and not dangling:
                break
            for name in doomed:
                del self.types[name]
                removed.append(name)
                _logger.debug("augmentql: pruned empty type %s", name)
            for name in doomed + dangling:
                for ref in index.get(name, ()):
                    self._detach(name, ref)
        return removed
