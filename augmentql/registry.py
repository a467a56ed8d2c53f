from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

import strawberry
from strawberry.schema.config import StrawberryConfig

from .assembler import augment
from .config import AugmentConfig
from .core.fields import FieldDef, FieldDescriptor
from .errors import AugmentationError
from .graph import TypeGraph
from .model import (
    DomainModel,
    EnumType,
    InterfaceType,
    NodeType,
    RelationshipProperties,
    UnionType,
)
from .strawberry_schema import build_strawberry_schema

__all__ = ["AugmentTypeMeta", "AugmentType", "AugmentSchema"]

_logger = logging.getLogger("augmentql")

_NODE = 'node'
_INTERFACE = 'interface'
_PROPERTIES = 'properties'


class AugmentTypeMeta(type):
    def __new__(mcls, name, bases, namespace):
        fdefs: Dict[str, FieldDef] = {}
        # inherited declarations first so interface fields keep their order
        for base in bases:
            fdefs.update(getattr(base, '__augment_fields__', {}) or {})
        for k, v in list(namespace.items()):
            if isinstance(v, FieldDescriptor):
                v.__set_name__(None, k)
                fdefs[k] = v.build(name)
        namespace['__augment_fields__'] = fdefs
        return super().__new__(mcls, name, bases, namespace)


class AugmentType(metaclass=AugmentTypeMeta):
    """Base class for declared nodes, interfaces and relationship properties.

    Subclassing an interface class inherits its field declarations; the
    ``@schema.node()`` decorator then also records the implementation.
    """


def _name_of(value: Any) -> str:
    return value.__name__ if hasattr(value, '__name__') and not isinstance(value, str) else value


class AugmentSchema:
    """Registry of declared domain types.

    Collects nodes, interfaces, unions, enums, scalars and relationship
    properties, then produces the :class:`~augmentql.model.DomainModel`, the
    derived :class:`~augmentql.graph.TypeGraph` or a Strawberry schema.

    Example:
        schema = AugmentSchema()

        @schema.node()
        class Movie(AugmentType):
            title = field('String', required=True)
            actors = relation('Actor', type='ACTED_IN', direction='IN')

        graph = schema.augment()
    """

    def __init__(self):
        # name -> (kind, class, options)
        self.types: Dict[str, Tuple[str, Type[Any], Dict[str, Any]]] = {}
        self.unions: Dict[str, UnionType] = {}
        self.enums: Dict[str, EnumType] = {}
        self.scalars: List[str] = []
        self._order: List[str] = []

    def register(self, cls: Type[Any], kind: str, **options):
        name = options.pop('name', None) or cls.__name__
        if name in self.types or name in self.unions:
            raise ValueError(f"Type {name} is already registered")
        if not hasattr(cls, '__augment_fields__'):
            raise TypeError(f"{cls.__name__} must subclass AugmentType")
        self.types[name] = (kind, cls, options)
        self._order.append(name)
        return cls

    def node(self, *, name: Optional[str] = None, implements: Iterable[Any] = (), description: Optional[str] = None):
        """Decorator declaring a node type.

        Interfaces are taken from ``implements`` and from registered interface
        base classes.
        """
        def deco(cls: Type[AugmentType]):
            declared = [_name_of(i) for i in implements]
            for base in cls.__mro__[1:]:
                entry = self._entry_for_class(base)
                if entry is not None and entry[0] == _INTERFACE and entry[1] not in declared:
                    declared.append(entry[1])
            return self.register(cls, _NODE, name=name, implements=tuple(declared), description=description)
        return deco

    def interface(self, *, name: Optional[str] = None, description: Optional[str] = None):
        def deco(cls: Type[AugmentType]):
            return self.register(cls, _INTERFACE, name=name, description=description)
        return deco

    def relationship_properties(self, *, name: Optional[str] = None, description: Optional[str] = None):
        """Decorator declaring the properties carried on relationship edges."""
        def deco(cls: Type[AugmentType]):
            return self.register(cls, _PROPERTIES, name=name, description=description)
        return deco

    def union(self, name: str, members: Iterable[Any], *, description: Optional[str] = None) -> UnionType:
        if name in self.types or name in self.unions:
            raise ValueError(f"Type {name} is already registered")
        union = UnionType(name=name, members=tuple(_name_of(m) for m in members), description=description)
        self.unions[name] = union
        self._order.append(name)
        return union

    def enum(self, enum: Any, values: Optional[Iterable[str]] = None, *, description: Optional[str] = None):
        """Register a domain enum from a Python ``Enum`` class or a name plus values.

        Returns the argument unchanged so it can be used as a class decorator.
        """
        if isinstance(enum, type) and issubclass(enum, Enum):
            name = enum.__name__
            vals = tuple(m.name for m in enum)
            description = description or (enum.__doc__ if enum.__doc__ != Enum.__doc__ else None)
        else:
            name = enum
            vals = tuple(values or ())
        if not vals:
            raise ValueError(f"Enum {name} has no values")
        self.enums[name] = EnumType(name=name, values=vals, description=description)
        return enum

    def scalar(self, name: str) -> str:
        if name not in self.scalars:
            self.scalars.append(name)
        return name

    def _entry_for_class(self, cls: Type[Any]) -> Optional[Tuple[str, str]]:
        for name, (kind, registered, _opts) in self.types.items():
            if registered is cls:
                return kind, name
        return None

    def _fields(self, cls: Type[Any]):
        return tuple(fdef.to_field() for fdef in cls.__augment_fields__.values())

    def _description(self, cls: Type[Any], options: Dict[str, Any]) -> Optional[str]:
        return options.get('description') or (cls.__doc__.strip() if cls.__doc__ else None)

    def model(self) -> DomainModel:
        """Build the :class:`DomainModel` from everything registered so far."""
        implementations: Dict[str, List[str]] = {}
        for name, (kind, _cls, options) in self.types.items():
            if kind != _NODE:
                continue
            for iface in options.get('implements', ()):
                entry = self.types.get(iface)
                if entry is None or entry[0] != _INTERFACE:
                    raise AugmentationError(f"implements unknown interface '{iface}'", type_name=name)
                implementations.setdefault(iface, []).append(name)

        model = DomainModel(enums=dict(self.enums), scalars=tuple(self.scalars))
        for name in self._order:
            if name in self.unions:
                model.types[name] = self.unions[name]
                continue
            kind, cls, options = self.types[name]
            description = self._description(cls, options)
            if kind == _NODE:
                model.types[name] = NodeType(name=name, fields=self._fields(cls), description=description)
            elif kind == _INTERFACE:
                model.types[name] = InterfaceType(
                    name=name,
                    fields=self._fields(cls),
                    implementations=tuple(implementations.get(name, ())),
                    description=description,
                )
            else:
                model.relationship_properties[name] = RelationshipProperties(
                    name=name, fields=self._fields(cls), description=description
                )
        _logger.debug("augmentql: registry produced %d domain types", len(model.types))
        return model

    def augment(self, config: Optional[AugmentConfig] = None) -> TypeGraph:
        return augment(self.model(), config)

    def to_strawberry(
        self,
        config: Optional[AugmentConfig] = None,
        *,
        strawberry_config: Optional[StrawberryConfig] = None,
    ) -> strawberry.Schema:
        return build_strawberry_schema(self.augment(config), strawberry_config=strawberry_config)
