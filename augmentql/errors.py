"""Errors raised while augmenting a domain model."""
from __future__ import annotations

from typing import Optional

__all__ = ["AugmentationError"]


class AugmentationError(ValueError):
    """Malformed domain model detected during augmentation.

    Raised from field classification or aggregation build. The whole run is
    aborted; a partially derived type graph is never returned.

    Attributes:
        type_name: Name of the offending domain type, when known.
        field_name: Name of the offending field, when known.
        reason: Human readable description without the location prefix.
    """

    def __init__(self, reason: str, *, type_name: Optional[str] = None, field_name: Optional[str] = None):
        self.reason = reason
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(self._format())

    def _format(self) -> str:
        if self.type_name and self.field_name:
            return f"{self.type_name}.{self.field_name}: {self.reason}"
        if self.type_name:
            return f"{self.type_name}: {self.reason}"
        return self.reason
