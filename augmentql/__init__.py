"""AugmentQL public API and lightweight lazy exports.

Importing the package stays cheap; Strawberry is only loaded once the
registry or the schema bridge is touched.

Exposes:
- Lazy attributes: AugmentSchema, AugmentType, AugmentConfig, LegacyAliases,
  AugmentationError, TypeGraph, DomainModel, augment, build_strawberry_schema
- Lazy functions: field, relation, filterable
"""
from __future__ import annotations

_EXPORTS = {
    'AugmentSchema': 'registry',
    'AugmentType': 'registry',
    'AugmentConfig': 'config',
    'LegacyAliases': 'config',
    'AugmentationError': 'errors',
    'TypeGraph': 'graph',
    'DomainModel': 'model',
    'augment': 'assembler',
    'build_strawberry_schema': 'strawberry_schema',
    'field': 'core.fields',
    'relation': 'core.fields',
    'filterable': 'core.fields',
}


def __getattr__(name: str):  # PEP 562 lazy exports
    import importlib as _importlib
    if name in {'registry', 'assembler', 'graph', 'model', 'config'}:
        return _importlib.import_module(__name__ + '.' + name)
    module = _EXPORTS.get(name)
    if module is None:
        raise AttributeError(name)
    return getattr(_importlib.import_module(__name__ + '.' + module), name)


__all__ = list(_EXPORTS) + ['registry', 'assembler', 'graph', 'model', 'config']
