# File: luxgen/errors.py
"""
Lux Generator - Exception hierarchy.

Every rejection of a schema document is a ``SchemaRejected`` (a
``ValueError``), raised before a single artifact exists.  The subclasses
let callers tell the three failure families apart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from luxgen.validators import ValidationResult


class LuxgenError(Exception):
    """Base class for all generator errors."""


class SchemaRejected(LuxgenError, ValueError):
    """A schema document cannot be turned into artifacts."""

    code: str = "SCHEMA_REJECTED"

    def __init__(
        self,
        message: str,
        *,
        entity: Optional[str] = None,
        field: Optional[str] = None,
        result: Optional["ValidationResult"] = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.entity: Optional[str] = entity
        self.field: Optional[str] = field
        self.result: Optional["ValidationResult"] = result

    def __str__(self) -> str:
        if self.result is not None and self.result.error_count > 1:
            return f"{self.message}\n{self.result.format_report()}"
        return self.message


class MalformedSchemaError(SchemaRejected):
    """Missing keys, missing ui entries, incomplete descriptors."""

    code = "MALFORMED_SCHEMA"


class UnknownFieldTypeError(SchemaRejected):
    """A type descriptor outside the supported grammar."""

    code = "UNKNOWN_FIELD_TYPE"


class NamingCollisionError(SchemaRejected):
    """A derived identifier clashes with a reserved word or another entity."""

    code = "NAMING_COLLISION"


__all__: List[str] = [
    "LuxgenError",
    "SchemaRejected",
    "MalformedSchemaError",
    "UnknownFieldTypeError",
    "NamingCollisionError",
]
