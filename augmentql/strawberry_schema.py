"""Render a derived :class:`~augmentql.graph.TypeGraph` as a Strawberry schema.

Every generated type becomes a dynamically built Strawberry class. Plain
classes are created first so self references and cycles resolve to the
same objects; decoration happens once all annotations are in place.
Resolvers only carry the argument surface: they return nothing, the schema
is meant for SDL export and introspection.
"""
from __future__ import annotations

import datetime
import keyword
import logging
from enum import Enum as PyEnum
from typing import Annotated, Any, AsyncGenerator, Dict, List, NewType, Optional, Union

import strawberry
from strawberry.schema.config import StrawberryConfig

from .graph import GeneratedField, GeneratedType, TypeGraph, TypeKind, TypeRef

__all__ = ["build_strawberry_schema"]

_logger = logging.getLogger("augmentql")

_QUERY = "Query"
_MUTATION = "Mutation"
_SUBSCRIPTION = "Subscription"
_ROOTS = (_QUERY, _MUTATION, _SUBSCRIPTION)

_BUILTIN_PY: Dict[str, Any] = {
    "ID": strawberry.ID,
    "String": str,
    "Int": int,
    "Float": float,
    "Boolean": bool,
    # Strawberry ships these three under the same GraphQL names
    "Date": datetime.date,
    "DateTime": datetime.datetime,
    "Time": datetime.time,
}

# (serialize, parse_value) for the remaining extended scalars
_SCALAR_CODECS = {
    "BigInt": (str, int),
    "LocalDateTime": (str, str),
    "LocalTime": (str, str),
    "Duration": (str, str),
}


def _identity(value):
    return value


def _py_name(name: str) -> str:
    return f"{name}_" if keyword.iskeyword(name) else name


class _StrawberryBridge:
    def __init__(self, graph: TypeGraph):
        self.graph = graph
        self._st_types: Dict[str, Any] = {}
        self._unions: Dict[str, Any] = {}

    # ---------- leaf types ----------

    def _build_scalar(self, gtype: GeneratedType) -> None:
        if gtype.name in _BUILTIN_PY:
            self._st_types[gtype.name] = _BUILTIN_PY[gtype.name]
            return
        serialize, parse_value = _SCALAR_CODECS.get(gtype.name, (_identity, _identity))
        self._st_types[gtype.name] = strawberry.scalar(
            NewType(gtype.name, object),
            name=gtype.name,
            description=gtype.description,
            serialize=serialize,
            parse_value=parse_value,
        )

    def _build_enum(self, gtype: GeneratedType) -> None:
        py_enum = PyEnum(gtype.name, [(v, v) for v in gtype.values])
        self._st_types[gtype.name] = strawberry.enum(py_enum, name=gtype.name, description=gtype.description)

    def _union(self, gtype: GeneratedType):
        cached = self._unions.get(gtype.name)
        if cached is not None:
            return cached
        members = tuple(self._st_types[m] for m in gtype.members)
        if len(members) == 1:
            # a one-member Union collapses to the member itself
            annotation = members[0]
        else:
            annotation = Annotated[
                Union[members],  # type: ignore[valid-type]
                strawberry.union(gtype.name, description=gtype.description),
            ]
        self._unions[gtype.name] = annotation
        return annotation

    # ---------- annotations ----------

    def _named(self, name: str):
        if name in _BUILTIN_PY and name not in self._st_types:
            return _BUILTIN_PY[name]
        gtype = self.graph.get(name)
        if gtype is not None and gtype.kind is TypeKind.UNION:
            return self._union(gtype)
        try:
            return self._st_types[name]
        except KeyError:
            raise ValueError(f"Type graph references unknown type {name!r}") from None

    def _annotation(self, ref: TypeRef):
        base = self._named(ref.name)
        if ref.is_list:
            annotation = List[base if ref.item_non_null else Optional[base]]  # type: ignore[valid-type]
        else:
            annotation = base
        return annotation if ref.non_null else Optional[annotation]

    # ---------- composite types ----------

    def _plain(self, gtype: GeneratedType) -> None:
        bases = tuple(self._st_types[i] for i in gtype.interfaces if i in self._st_types)
        cls = type(gtype.name, bases, {'__doc__': gtype.description})
        cls.__module__ = __name__
        self._st_types[gtype.name] = cls

    def _resolver(self, owner: str, gf: GeneratedField, *, subscription: bool = False):
        params = ['self'] + [f"{_py_name(a)}=UNSET" for a in gf.args]
        fn_name = f"_{owner}_{gf.name}"
        if subscription:
            src = f"async def {fn_name}({', '.join(params)}):\n    return\n    yield\n"
        else:
            src = f"def {fn_name}({', '.join(params)}):\n    return None\n"
        env: Dict[str, Any] = {'UNSET': strawberry.UNSET}
        exec(src, env)
        fn = env[fn_name]
        fn.__module__ = __name__
        anns: Dict[str, Any] = {}
        for arg in gf.args.values():
            anns[_py_name(arg.name)] = Annotated[
                self._annotation(arg.type),
                strawberry.argument(name=arg.name, description=arg.description),
            ]
        returns = self._annotation(gf.type)
        anns['return'] = AsyncGenerator[returns, None] if subscription else returns
        fn.__annotations__ = anns
        return fn

    def _populate(self, gtype: GeneratedType) -> None:
        cls = self._st_types[gtype.name]
        anns: Dict[str, Any] = {}
        fields = list(gtype.fields.values())
        if gtype.kind is TypeKind.INPUT:
            # required input fields first, they carry no default
            fields.sort(key=lambda f: not f.type.non_null)
        for gf in fields:
            attr = _py_name(gf.name)
            common = dict(name=gf.name, description=gf.description, deprecation_reason=gf.deprecation_reason)
            if gf.args or gtype.name == _SUBSCRIPTION:
                if gtype.name == _SUBSCRIPTION:
                    fn = self._resolver(gtype.name, gf, subscription=True)
                    setattr(cls, attr, strawberry.subscription(resolver=fn, **common))
                else:
                    fn = self._resolver(gtype.name, gf)
                    setattr(cls, attr, strawberry.field(resolver=fn, **common))
                continue
            anns[attr] = self._annotation(gf.type)
            if gtype.kind is TypeKind.INPUT and not gf.type.non_null:
                setattr(cls, attr, strawberry.field(default=strawberry.UNSET, **common))
            else:
                setattr(cls, attr, strawberry.field(**common))
        cls.__annotations__ = anns

    def _decorate(self, gtype: GeneratedType) -> None:
        cls = self._st_types[gtype.name]
        if gtype.kind is TypeKind.INPUT:
            decorator = strawberry.input
        elif gtype.kind is TypeKind.INTERFACE:
            decorator = strawberry.interface
        else:
            decorator = strawberry.type
        self._st_types[gtype.name] = decorator(cls, name=gtype.name, description=gtype.description)  # type: ignore[call-overload]

    def build(self, strawberry_config: Optional[StrawberryConfig] = None) -> strawberry.Schema:
        if _QUERY not in self.graph:
            raise ValueError("Type graph has no Query type")
        for gtype in self.graph.of_kind(TypeKind.SCALAR):
            self._build_scalar(gtype)
        for gtype in self.graph.of_kind(TypeKind.ENUM):
            self._build_enum(gtype)
        # interfaces before objects so implementers can subclass them
        interfaces = self.graph.of_kind(TypeKind.INTERFACE)
        objects = self.graph.of_kind(TypeKind.OBJECT)
        inputs = self.graph.of_kind(TypeKind.INPUT)
        composites = interfaces + objects + inputs
        for gtype in composites:
            self._plain(gtype)
        for gtype in composites:
            self._populate(gtype)
        for gtype in composites:
            self._decorate(gtype)

        extra = [self._st_types[t.name] for t in objects if t.name not in _ROOTS]
        schema = strawberry.Schema(
            query=self._st_types[_QUERY],
            mutation=self._st_types.get(_MUTATION),
            subscription=self._st_types.get(_SUBSCRIPTION),
            types=extra,
            config=strawberry_config or StrawberryConfig(auto_camel_case=False),
        )
        _logger.info("augmentql: built Strawberry schema with %d generated types", len(self.graph))
        return schema


def build_strawberry_schema(
    graph: TypeGraph,
    *,
    strawberry_config: Optional[StrawberryConfig] = None,
) -> strawberry.Schema:
    """Build a :class:`strawberry.Schema` exposing every type of ``graph``.

    Input types that no field or argument references are not part of the
    printed schema; object types always are.

    Example:
        schema = build_strawberry_schema(augment(model))
        print(schema.as_str())
    """
    return _StrawberryBridge(graph).build(strawberry_config)
