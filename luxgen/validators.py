# File: luxgen/validators.py
"""
Lux Generator - Schema Document Validators
===========================================
Pydantic takes care of the document's *shape* (required keys, the entity
name pattern, value types).  This module adds the semantic checks that
need the whole document at once: every field has a UI entry, every type
descriptor parses, relationship targets do not collide with the entity
itself or with reserved words, and so on.

Each ``validate_*`` function is a pure single pass that returns a
``ValidationResult``; ``validate_document`` runs them all and
``ensure_valid`` turns a failing result into a ``SchemaRejected``.

Usage:
    from luxgen.validators import ensure_valid
    result = ensure_valid(document)     # raises on any error
    for warning in result.warnings:
        ...
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Type

from luxgen.errors import (
    MalformedSchemaError,
    NamingCollisionError,
    SchemaRejected,
    UnknownFieldTypeError,
)
from luxgen.fields import find_relationships, parse_type_descriptor
from luxgen.models import (
    IDENTITY_FIELD,
    EnumType,
    PrimitiveKind,
    PrimitiveType,
    RelationshipType,
    SchemaDocument,
    TIMESTAMP_FIELDS,
    is_entity_name,
)
from luxgen.utils import derive_names, is_reserved_word, names_for_document

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """One finding of the validation pass."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationError`` findings, in discovery order."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return f"Validation: {self.error_count} error(s), {self.warning_count} warning(s)."

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for item in self._items:
            prefix: str = "✗" if item.is_error else "⚠"
            lines.append(f"  {prefix} [{item.code}] {item.message}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_FIELD_KEY_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PATH_RE: re.Pattern[str] = re.compile(r"^[a-z0-9][a-z0-9\-_/]*$")

# Relationship widget hints and the cardinality they imply.
_UI_CARDINALITY: Dict[str, str] = {
    "relationship-single": "single",
    "relationship-multiple": "array",
    "relationship-array": "array",
}

# Error code → exception raised by ``ensure_valid`` when it is the first error.
_CODE_EXCEPTIONS: Dict[str, Type[SchemaRejected]] = {
    "UNKNOWN_FIELD_TYPE": UnknownFieldTypeError,
    "ENTITY_NAME_RESERVED": NamingCollisionError,
    "RELATED_ENTITY_IS_SELF": NamingCollisionError,
    "RELATED_NAME_COLLISION": NamingCollisionError,
    "RELATED_ENTITY_RESERVED": NamingCollisionError,
}


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_entity_names(document: SchemaDocument) -> ValidationResult:
    """
    The entity's derived identifiers must be usable in generated code:
    no reserved words, overrides must be valid identifiers, the path must
    be a plain URL segment.
    """
    result = ValidationResult()
    ctx: Dict[str, Any] = {"entity": document.name}

    for label, value in (
        ("Name", document.capitalized),
        ("namePlural", document.name_plural),
        ("NamePlural", document.capitalized_plural),
    ):
        if value is not None and not _IDENTIFIER_RE.match(value):
            result.add_error(
                "INVALID_NAME_OVERRIDE",
                f"Entity '{document.name}': '{label}' override '{value}' is not a valid identifier.",
                ctx,
            )

    if document.path is not None and not _PATH_RE.match(document.path):
        result.add_error(
            "INVALID_PATH",
            f"Entity '{document.name}': path '{document.path}' is not a valid URL segment.",
            ctx,
        )

    if result.has_errors:
        return result

    names = names_for_document(document)
    for value in dict.fromkeys((names.name, names.plural)):
        if is_reserved_word(value):
            result.add_error(
                "ENTITY_NAME_RESERVED",
                f"Entity '{document.name}': '{value}' is a reserved word in generated code.",
                ctx,
            )
    return result


def validate_field_keys(document: SchemaDocument) -> ValidationResult:
    """Field keys must be identifiers and must not shadow the identity field."""
    result = ValidationResult()
    for key in document.field_types:
        ctx: Dict[str, Any] = {"entity": document.name, "field": key}
        if key == IDENTITY_FIELD:
            result.add_error(
                "FIELD_KEY_RESERVED",
                f"Entity '{document.name}': '{IDENTITY_FIELD}' is assigned by the database "
                f"and cannot be declared as a field.",
                ctx,
            )
        elif not _FIELD_KEY_RE.match(key):
            result.add_error(
                "INVALID_FIELD_KEY",
                f"Entity '{document.name}': field key '{key}' is not a valid identifier.",
                ctx,
            )
    return result


def validate_ui_coverage(document: SchemaDocument) -> ValidationResult:
    """Every non-timestamp field has a UI entry and every UI entry has a field."""
    result = ValidationResult()
    for key in document.field_types:
        if key in TIMESTAMP_FIELDS:
            continue
        if key not in document.ui:
            result.add_error(
                "MISSING_UI_ENTRY",
                f"Field '{key}' of entity '{document.name}' has no 'ui' entry.",
                {"entity": document.name, "field": key},
            )
    for key in document.ui:
        if key not in document.field_types:
            result.add_error(
                "ORPHAN_UI_ENTRY",
                f"'ui' entry '{key}' of entity '{document.name}' has no matching 'schema' field.",
                {"entity": document.name, "field": key},
            )
    return result


def validate_field_types(document: SchemaDocument) -> ValidationResult:
    """Every descriptor parses; timestamps stay plain strings."""
    result = ValidationResult()
    for key, descriptor in document.field_types.items():
        ctx: Dict[str, Any] = {"entity": document.name, "field": key, "type": descriptor}
        try:
            field_type = parse_type_descriptor(key, descriptor, document.ui.get(key), document.name)
        except UnknownFieldTypeError as exc:
            result.add_error("UNKNOWN_FIELD_TYPE", exc.message, ctx)
            continue
        except MalformedSchemaError as exc:
            result.add_error("MALFORMED_FIELD_TYPE", exc.message, ctx)
            continue

        if key in TIMESTAMP_FIELDS and not (
            isinstance(field_type, PrimitiveType) and field_type.kind == PrimitiveKind.STRING
        ):
            result.add_error(
                "TIMESTAMP_TYPE",
                f"Timestamp field '{key}' of entity '{document.name}' must be declared as 'string'.",
                ctx,
            )
    return result


def validate_relationships(document: SchemaDocument) -> ValidationResult:
    """
    Relationship targets must be well-formed entity names that neither
    equal the primary entity, share an identifier form with it, nor produce
    reserved identifiers.
    """
    result = ValidationResult()
    primary = names_for_document(document)
    primary_forms = {primary.name, primary.plural, primary.capitalized, primary.capitalized_plural}
    try:
        targets: List[str] = find_relationships(document.field_types, document.name)
    except (MalformedSchemaError, UnknownFieldTypeError):
        # Reported per field by validate_field_types.
        return result

    for target in targets:
        ctx: Dict[str, Any] = {"entity": document.name, "related": target}
        if not is_entity_name(target):
            result.add_error(
                "INVALID_RELATED_ENTITY",
                f"Entity '{document.name}' references '{target}', which is not a valid "
                f"entity name (lower-case letters and digits).",
                ctx,
            )
            continue
        if target == document.name:
            result.add_error(
                "RELATED_ENTITY_IS_SELF",
                f"Entity '{document.name}' references itself; its generated service and "
                f"store would overwrite the primary ones.",
                ctx,
            )
            continue
        related = derive_names(target)
        clashes = sorted(
            primary_forms
            & {related.name, related.plural, related.capitalized, related.capitalized_plural}
        )
        if clashes:
            result.add_error(
                "RELATED_NAME_COLLISION",
                f"Entity '{document.name}' references '{target}', whose generated name "
                f"'{clashes[0]}' is already used by the primary entity.",
                ctx,
            )
            continue
        for value in dict.fromkeys((related.name, related.plural)):
            if is_reserved_word(value):
                result.add_error(
                    "RELATED_ENTITY_RESERVED",
                    f"Entity '{document.name}' references '{target}': '{value}' is a "
                    f"reserved word in generated code.",
                    ctx,
                )
    return result


def validate_ui_hints(document: SchemaDocument) -> ValidationResult:
    """Non-fatal inconsistencies between descriptors and UI hints."""
    result = ValidationResult()
    for key, ui in document.ui.items():
        descriptor = document.field_types.get(key)
        if descriptor is None:
            continue
        ctx: Dict[str, Any] = {"entity": document.name, "field": key}
        try:
            field_type = parse_type_descriptor(key, descriptor, ui, document.name)
        except SchemaRejected:
            continue

        if ui.options and not isinstance(field_type, EnumType):
            result.add_warning(
                "OPTIONS_IGNORED",
                f"Field '{key}' of entity '{document.name}' lists options but is not an enum.",
                ctx,
            )
        if isinstance(field_type, RelationshipType):
            hinted: Optional[str] = _UI_CARDINALITY.get(ui.type)
            if hinted is not None and hinted != field_type.cardinality.value:
                result.add_warning(
                    "CARDINALITY_MISMATCH",
                    f"Field '{key}' of entity '{document.name}' has ui type '{ui.type}' "
                    f"but is declared '{field_type}'.",
                    ctx,
                )
            if ui.api_ref and ui.api_ref.strip("/") not in {
                field_type.entity,
                derive_names(field_type.entity).plural,
            }:
                result.add_warning(
                    "API_REF_MISMATCH",
                    f"Field '{key}' of entity '{document.name}' has api-ref '{ui.api_ref}' "
                    f"but references '{field_type.entity}'.",
                    ctx,
                )
        if key in TIMESTAMP_FIELDS:
            result.add_warning(
                "TIMESTAMP_IN_FORM",
                f"Timestamp field '{key}' of entity '{document.name}' has a 'ui' entry; "
                f"it is shown in the table but never edited.",
                ctx,
            )
    return result


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

_DOCUMENT_VALIDATORS: List[Callable[[SchemaDocument], ValidationResult]] = [
    validate_entity_names,
    validate_field_keys,
    validate_ui_coverage,
    validate_field_types,
    validate_relationships,
    validate_ui_hints,
]


def validate_document(document: SchemaDocument) -> ValidationResult:
    """Run every document validator and merge the findings."""
    result = ValidationResult()
    for validator_fn in _DOCUMENT_VALIDATORS:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(document))

    if result.has_errors:
        logger.error("Entity '%s' rejected. %s", document.name, result.summary())
    else:
        logger.info("Entity '%s' validated. %s", document.name, result.summary())
    return result


def ensure_valid(document: SchemaDocument) -> ValidationResult:
    """
    Validate *document* and raise if anything is wrong.

    The raised exception's class follows the first error found; the full
    result travels along on ``exc.result``.

    Raises:
        SchemaRejected: (or one of its subclasses) on any error.
    """
    result: ValidationResult = validate_document(document)
    if result.is_valid:
        for warning in result.warnings:
            logger.warning("%s", warning.message)
        return result

    first = result.errors[0]
    exc_cls: Type[SchemaRejected] = _CODE_EXCEPTIONS.get(first.code, MalformedSchemaError)
    raise exc_cls(
        first.message,
        entity=document.name,
        field=first.context.get("field"),
        result=result,
    )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_entity_names",
    "validate_field_keys",
    "validate_ui_coverage",
    "validate_field_types",
    "validate_relationships",
    "validate_ui_hints",
    "validate_document",
    "ensure_valid",
]

logger.debug("luxgen.validators loaded: %d public symbols.", len(__all__))
