# File: luxgen/fields.py
"""
Lux Generator - Field type parsing, relationship resolution and mapping
=======================================================================

Type descriptor grammar::

    string | number | boolean | enum
    relationship:<entity>
    relationship:<entity>:single
    relationship:<entity>:array

``parse_type_descriptor`` turns one descriptor into a tagged ``FieldType``;
``map_field`` turns a parsed ``FieldSpec`` into the ``FieldMapping`` every
template renders from.  Anything outside the grammar is rejected here,
before any template runs.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from luxgen.errors import MalformedSchemaError, UnknownFieldTypeError
from luxgen.models import (
    Cardinality,
    ControlKind,
    EntityNames,
    EnumType,
    FieldMapping,
    FieldSpec,
    FieldType,
    ParsedEntity,
    PrimitiveKind,
    PrimitiveType,
    RelationshipType,
    SchemaDocument,
    TIMESTAMP_FIELDS,
    UIDescriptor,
)
from luxgen.utils import derive_names, names_for_document, ts_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.fields")

# ---------------------------------------------------------------------------
# Grammar constants
# ---------------------------------------------------------------------------

RELATIONSHIP_PREFIX: str = "relationship"

_PRIMITIVE_KINDS: Dict[str, PrimitiveKind] = {kind.value: kind for kind in PrimitiveKind}

_CARDINALITIES: Dict[str, Cardinality] = {c.value: c for c in Cardinality}

# Primitive kind → (client annotation, document annotation, persistence type)
_PRIMITIVE_TYPE_MAP: Dict[PrimitiveKind, Tuple[str, str, str]] = {
    PrimitiveKind.STRING: ("string", "string", "String"),
    PrimitiveKind.NUMBER: ("number", "number", "Number"),
    PrimitiveKind.BOOLEAN: ("boolean", "boolean", "Boolean"),
}

_PRIMITIVE_DEFAULTS: Dict[PrimitiveKind, str] = {
    PrimitiveKind.STRING: '""',
    PrimitiveKind.NUMBER: "0",
    PrimitiveKind.BOOLEAN: "false",
}

# UI widget hints with their own datatable column renderer
_TYPED_COLUMNS = frozenset({"number", "boolean", "picture"})


# ---------------------------------------------------------------------------
# Descriptor parsing
# ---------------------------------------------------------------------------


def _is_relationship(descriptor: str) -> bool:
    return descriptor == RELATIONSHIP_PREFIX or descriptor.startswith(RELATIONSHIP_PREFIX + ":")


def _split_relationship(key: str, descriptor: str, entity: str) -> Tuple[str, Cardinality]:
    segments: List[str] = descriptor.split(":")
    if len(segments) < 2 or not segments[1].strip():
        raise MalformedSchemaError(
            f"Field '{key}' of entity '{entity}' declares a relationship without "
            f"a target entity: '{descriptor}'.",
            entity=entity,
            field=key,
        )
    if len(segments) > 3:
        raise UnknownFieldTypeError(
            f"Field '{key}' of entity '{entity}' has an unrecognised relationship "
            f"descriptor '{descriptor}'.",
            entity=entity,
            field=key,
        )

    target: str = segments[1].strip()
    if len(segments) == 2:
        return target, Cardinality.SINGLE

    raw_cardinality: str = segments[2].strip()
    if raw_cardinality not in _CARDINALITIES:
        raise UnknownFieldTypeError(
            f"Field '{key}' of entity '{entity}' has unknown relationship "
            f"cardinality '{raw_cardinality}' (expected one of "
            f"{sorted(_CARDINALITIES)}).",
            entity=entity,
            field=key,
        )
    return target, _CARDINALITIES[raw_cardinality]


def parse_type_descriptor(
    key: str,
    descriptor: str,
    ui: Optional[UIDescriptor] = None,
    entity: str = "",
) -> FieldType:
    """
    Parse one schema type descriptor into its tagged variant.

    Enum options come from the field's UI descriptor; an enum without a
    non-empty option list is malformed.

    Raises:
        MalformedSchemaError: relationship without entity, enum without options.
        UnknownFieldTypeError: anything outside the descriptor grammar.
    """
    if not isinstance(descriptor, str):
        raise UnknownFieldTypeError(
            f"Field '{key}' of entity '{entity}' has a non-string type descriptor "
            f"{descriptor!r}.",
            entity=entity,
            field=key,
        )

    raw: str = descriptor.strip()

    if raw in _PRIMITIVE_KINDS:
        return PrimitiveType(kind=_PRIMITIVE_KINDS[raw])

    if raw == "enum":
        options: Tuple[str, ...] = tuple(ui.options or ()) if ui is not None else ()
        if not options:
            raise MalformedSchemaError(
                f"Enum field '{key}' of entity '{entity}' has no options.",
                entity=entity,
                field=key,
            )
        if len(set(options)) != len(options):
            raise MalformedSchemaError(
                f"Enum field '{key}' of entity '{entity}' repeats an option: {list(options)}.",
                entity=entity,
                field=key,
            )
        return EnumType(options=options)

    if _is_relationship(raw):
        target, cardinality = _split_relationship(key, raw, entity)
        return RelationshipType(entity=target, cardinality=cardinality)

    raise UnknownFieldTypeError(
        f"Field '{key}' of entity '{entity}' has unknown type '{descriptor}'.",
        entity=entity,
        field=key,
    )


# ---------------------------------------------------------------------------
# Relationship resolution
# ---------------------------------------------------------------------------


def find_relationships(field_types: Mapping[str, str], entity: str = "") -> List[str]:
    """
    Distinct related entity names in first-seen declaration order.

    Examples:
        >>> find_relationships({"a": "relationship:category", "b": "string",
        ...                     "c": "relationship:tag:array",
        ...                     "d": "relationship:category:array"})
        ['category', 'tag']
    """
    seen: Dict[str, None] = {}
    for key, descriptor in field_types.items():
        if not isinstance(descriptor, str) or not _is_relationship(descriptor.strip()):
            continue
        target, _ = _split_relationship(key, descriptor.strip(), entity)
        seen.setdefault(target, None)
    return list(seen)


# ---------------------------------------------------------------------------
# Field mapping
# ---------------------------------------------------------------------------


def _ui_type(spec: FieldSpec) -> str:
    return spec.ui.type if spec.ui is not None else ""


def _form_control(spec: FieldSpec) -> ControlKind:
    field_type = spec.field_type
    ui_type: str = _ui_type(spec)

    if isinstance(field_type, RelationshipType):
        return ControlKind.RELATIONSHIP
    if isinstance(field_type, EnumType):
        return ControlKind.SELECT
    if ui_type == "boolean" or (
        isinstance(field_type, PrimitiveType) and field_type.kind == PrimitiveKind.BOOLEAN
    ):
        return ControlKind.CHECKBOX
    if ui_type == "textarea":
        return ControlKind.TEXTAREA
    if ui_type == "number" or (
        isinstance(field_type, PrimitiveType) and field_type.kind == PrimitiveKind.NUMBER
    ):
        return ControlKind.NUMBER
    return ControlKind.TEXT


def _column_type(spec: FieldSpec) -> str:
    if isinstance(spec.field_type, RelationshipType):
        return "relationship"
    ui_type: str = _ui_type(spec)
    if ui_type in _TYPED_COLUMNS:
        return ui_type
    return "string"


def map_field(spec: FieldSpec) -> FieldMapping:
    """Map one parsed field to its client, server, view and doc renderings."""
    field_type = spec.field_type
    common = {
        "key": spec.key,
        "label": spec.label,
        "placeholder": spec.ui.placeholder if spec.ui is not None else "",
        "required": spec.required,
        "is_timestamp": spec.is_timestamp,
        "field_type": field_type,
        "control": _form_control(spec),
        "column_type": _column_type(spec),
    }

    if isinstance(field_type, RelationshipType):
        related: EntityNames = derive_names(field_type.entity)
        suffix: str = "[]" if field_type.is_array else ""
        document_type: str = (
            "(mongoose.Types.ObjectId | string)[]"
            if field_type.is_array
            else "mongoose.Types.ObjectId | string"
        )
        return FieldMapping(
            **common,
            ts_type=f"{related.capitalized}{suffix}",
            document_type=document_type,
            persistence_type="Schema.Types.ObjectId",
            persistence_ref=related.name,
            is_array=field_type.is_array,
            default_literal="[]" if field_type.is_array else "undefined",
            related=related,
            api_type="array" if field_type.is_array else "string",
            api_format=None if field_type.is_array else "objectId",
        )

    if isinstance(field_type, EnumType):
        return FieldMapping(
            **common,
            ts_type="string",
            document_type="string",
            persistence_type="String",
            enum_values=field_type.options,
            default_literal=ts_string(field_type.options[0]),
            api_type="string",
        )

    if spec.is_timestamp:
        return FieldMapping(
            **common,
            ts_type="string",
            document_type="Date",
            persistence_type="Date",
            api_type="string",
            api_format="date-time",
        )

    ts_type, document_type, persistence_type = _PRIMITIVE_TYPE_MAP[field_type.kind]
    return FieldMapping(
        **common,
        ts_type=ts_type,
        document_type=document_type,
        persistence_type=persistence_type,
        default_literal=_PRIMITIVE_DEFAULTS[field_type.kind],
        api_type=field_type.kind.value,
    )


# ---------------------------------------------------------------------------
# Entity assembly
# ---------------------------------------------------------------------------


def parse_fields(document: SchemaDocument) -> List[FieldSpec]:
    """Parse every schema entry of *document*, in declaration order."""
    specs: List[FieldSpec] = []
    for key, descriptor in document.field_types.items():
        ui: Optional[UIDescriptor] = document.ui.get(key)
        field_type: FieldType = parse_type_descriptor(key, descriptor, ui, document.name)
        specs.append(FieldSpec(key=key, field_type=field_type, ui=ui))
    return specs


def build_entity(document: SchemaDocument) -> ParsedEntity:
    """
    Derive names, parse fields, map them and resolve relationships.

    Expects a document that already passed ``luxgen.validators.ensure_valid``;
    parse errors still surface as ``SchemaRejected`` subclasses.
    """
    specs: List[FieldSpec] = parse_fields(document)
    mappings: List[FieldMapping] = [map_field(spec) for spec in specs]
    related: List[EntityNames] = [
        derive_names(target) for target in find_relationships(document.field_types, document.name)
    ]
    entity = ParsedEntity(
        document=document,
        names=names_for_document(document),
        fields=tuple(specs),
        mappings=tuple(mappings),
        relationships=tuple(related),
    )
    logger.debug(
        "Built entity '%s': %d fields (%d timestamps), %d relationship(s).",
        document.name,
        len(specs),
        sum(1 for key in document.field_types if key in TIMESTAMP_FIELDS),
        len(related),
    )
    return entity


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RELATIONSHIP_PREFIX",
    "parse_type_descriptor",
    "find_relationships",
    "map_field",
    "parse_fields",
    "build_entity",
]

logger.debug("luxgen.fields loaded.")
