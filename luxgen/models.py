# File: luxgen/models.py
"""
Lux Generator - Core Data Models
=================================
Pydantic V2 models for the whole pipeline:

    SchemaDocument → (validation) → ParsedEntity → templates → GeneratedArtifact

``SchemaDocument`` is the raw, structurally checked input.  Field type
descriptors (``"string"``, ``"relationship:category:array"`` ...) are parsed
exactly once into the tagged variants ``PrimitiveType`` / ``EnumType`` /
``RelationshipType``; every template downstream reads those variants and
never re-splits a descriptor string.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import PurePosixPath
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class PrimitiveKind(str, Enum):
    """Scalar field kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


class Cardinality(str, Enum):
    """Multiplicity of a relationship field."""

    SINGLE = "single"
    ARRAY = "array"


class ControlKind(str, Enum):
    """Form control chosen for a field in the generated views."""

    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    SELECT = "select"
    RELATIONSHIP = "relationship"


class ArtifactRoot(str, Enum):
    """Which module root a generated artifact belongs under."""

    FRONTEND = "frontend"
    BACKEND = "backend"


class ThemeName(str, Enum):
    """UI themes every view is rendered in."""

    BOOTSTRAP = "bootstrap"
    FOMANTIC = "fomantic"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Maintained by the persistence layer; never part of a create/update payload.
TIMESTAMP_FIELDS: Tuple[str, ...] = ("createdAt", "updatedAt")

IDENTITY_FIELD: str = "_id"

# ``relationship:<entity>`` without a third segment.
DEFAULT_CARDINALITY: Cardinality = Cardinality.SINGLE

ENTITY_NAME_PATTERN: str = r"^[a-z][a-z0-9]*$"
_ENTITY_NAME_RE: re.Pattern[str] = re.compile(ENTITY_NAME_PATTERN)


# ---------------------------------------------------------------------------
# Shared model config
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Field type variants
# ---------------------------------------------------------------------------


class PrimitiveType(BaseModel):
    """``string`` / ``number`` / ``boolean``."""

    model_config = _SHARED_CONFIG

    tag: Literal["primitive"] = "primitive"
    kind: PrimitiveKind

    def __str__(self) -> str:
        return self.kind.value


class EnumType(BaseModel):
    """Closed set of string options, taken from the field's UI descriptor."""

    model_config = _SHARED_CONFIG

    tag: Literal["enum"] = "enum"
    options: Tuple[str, ...]

    @field_validator("options")
    @classmethod
    def _non_empty(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("Enum field requires at least one option.")
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate enum options: {list(v)}")
        return v

    def __str__(self) -> str:
        return "enum"


class RelationshipType(BaseModel):
    """Reference to another entity, single or array valued."""

    model_config = _SHARED_CONFIG

    tag: Literal["relationship"] = "relationship"
    entity: str
    cardinality: Cardinality = DEFAULT_CARDINALITY

    @property
    def is_array(self) -> bool:
        return self.cardinality == Cardinality.ARRAY

    def __str__(self) -> str:
        return f"relationship:{self.entity}:{self.cardinality.value}"


FieldType = Annotated[
    Union[PrimitiveType, EnumType, RelationshipType],
    Field(discriminator="tag"),
]


# ---------------------------------------------------------------------------
# Schema document (raw input)
# ---------------------------------------------------------------------------


class UIDescriptor(BaseModel):
    """Presentation hints for one field."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    type: str = Field(default="text", description="Widget hint: text, textarea, number ...")
    label: str = Field(default="")
    placeholder: str = Field(default="")
    required: bool = Field(default=False)
    options: Optional[Tuple[str, ...]] = Field(default=None)
    api_ref: Optional[str] = Field(default=None, alias="api-ref")

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, (list, tuple)):
            return tuple(str(item) for item in v)
        return v


class SchemaDocument(BaseModel):
    """
    One declarative entity description, as found in a runner file.

    Key order of ``schema`` and ``ui`` is significant: interfaces, the
    persistence model and form defaults follow ``schema`` order; form
    fields and table columns follow ``ui`` order.
    """

    model_config = _SHARED_CONFIG

    version: Optional[str] = Field(default=None)
    name: str = Field(..., pattern=ENTITY_NAME_PATTERN, description="Lower-case entity name.")
    capitalized: Optional[str] = Field(default=None, alias="Name")
    name_plural: Optional[str] = Field(default=None, alias="namePlural")
    capitalized_plural: Optional[str] = Field(default=None, alias="NamePlural")
    path: Optional[str] = Field(default=None, description="URL segment of the resource.")
    field_types: Dict[str, str] = Field(..., alias="schema")
    ui: Dict[str, UIDescriptor] = Field(...)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_str(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("field_types")
    @classmethod
    def _non_empty_schema(cls, v: Dict[str, str]) -> Dict[str, str]:
        if not v:
            raise ValueError("'schema' must declare at least one field.")
        return v

    @property
    def field_count(self) -> int:
        return len(self.field_types)


# ---------------------------------------------------------------------------
# Parsed / derived models
# ---------------------------------------------------------------------------


class EntityNames(BaseModel):
    """Every identifier form of one entity, derived once and shared."""

    model_config = _SHARED_CONFIG

    name: str
    capitalized: str
    plural: str
    capitalized_plural: str
    path: str

    def __repr__(self) -> str:
        return f"<EntityNames {self.name}/{self.plural}>"


class FieldSpec(BaseModel):
    """A schema entry after its type descriptor has been parsed."""

    model_config = _SHARED_CONFIG

    key: str
    field_type: FieldType
    ui: Optional[UIDescriptor] = None

    @property
    def is_timestamp(self) -> bool:
        return self.key in TIMESTAMP_FIELDS

    @property
    def required(self) -> bool:
        return bool(self.ui is not None and self.ui.required)

    @property
    def label(self) -> str:
        if self.ui is not None and self.ui.label:
            return self.ui.label
        return self.key[:1].upper() + self.key[1:]


class FieldMapping(BaseModel):
    """
    Everything the templates need to know about one field.

    Produced by ``luxgen.fields.map_field``; all artifacts of an entity are
    rendered from the same tuple of mappings, so the interface, the
    persistence model, the API doc and the views cannot disagree.
    """

    model_config = _SHARED_CONFIG

    key: str
    label: str
    placeholder: str = ""
    required: bool = False
    is_timestamp: bool = False
    field_type: FieldType

    # Client-side type annotation (read model / payloads)
    ts_type: str
    # Server-side document interface type
    document_type: str
    # Persistence descriptor
    persistence_type: str
    persistence_ref: Optional[str] = None
    enum_values: Tuple[str, ...] = ()
    is_array: bool = False

    # Views
    control: ControlKind = ControlKind.TEXT
    default_literal: str = '""'
    column_type: str = "string"
    related: Optional[EntityNames] = None

    # API documentation
    api_type: str = "string"
    api_format: Optional[str] = None

    @property
    def in_payload(self) -> bool:
        return not self.is_timestamp


class ParsedEntity(BaseModel):
    """A validated document together with everything derived from it."""

    model_config = _SHARED_CONFIG

    document: SchemaDocument
    names: EntityNames
    fields: Tuple[FieldSpec, ...]
    mappings: Tuple[FieldMapping, ...]
    relationships: Tuple[EntityNames, ...] = ()

    @property
    def payload_mappings(self) -> List[FieldMapping]:
        """Mappings in schema order, timestamps excluded."""
        return [m for m in self.mappings if m.in_payload]

    @property
    def ui_mappings(self) -> List[FieldMapping]:
        """Mappings in ``ui`` order; drives form fields and table columns."""
        by_key: Dict[str, FieldMapping] = {m.key: m for m in self.mappings}
        return [by_key[key] for key in self.document.ui if key in by_key]

    @property
    def required_keys(self) -> List[str]:
        return [m.key for m in self.payload_mappings if m.required]


class GeneratedArtifact(BaseModel):
    """One output file: module root, path relative to it, and content."""

    model_config = _SHARED_CONFIG

    root: ArtifactRoot
    path: str
    content: str

    @computed_field  # type: ignore[misc]
    @property
    def line_count(self) -> int:
        if not self.content:
            return 0
        return self.content.count("\n") + (0 if self.content.endswith("\n") else 1)

    def __repr__(self) -> str:
        return f"<GeneratedArtifact {self.root.value}:{self.path} ({len(self.content)} chars)>"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings that shape the generated module without changing the entity.

    Passed explicitly to every template and to the exporter.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    # Output layout
    frontend_root: str = Field(default="src/_frontends/dashboard")
    backend_root: str = Field(default="src/modules")
    generate_frontend: bool = Field(default=True)
    generate_backend: bool = Field(default=True)

    # Client side
    api_url_env: str = Field(default="VITE_API_URL")
    ui_framework_env: str = Field(default="VITE_UI_FRAMEWORK")
    default_theme: ThemeName = Field(default=ThemeName.BOOTSTRAP)
    token_storage_key: str = Field(default="idToken")
    dashboard_layout: str = Field(default="DashboardLayout")
    nav_order: int = Field(default=1, ge=0)
    nav_icon: str = Field(default="list")

    # Server side
    admin_role: str = Field(default="ADMIN")
    auth_middleware: str = Field(default="validateFirebaseToken")
    role_guard: str = Field(default="roleGuard")

    # Export
    overwrite_existing: bool = Field(default=True)
    max_workers: int = Field(default=4, ge=1, le=64)

    @field_validator("frontend_root", "backend_root")
    @classmethod
    def _relative_root(cls, v: str) -> str:
        path = PurePosixPath(v)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"Module root must be a relative path inside the project: '{v}'")
        return str(path)

    @field_validator("api_url_env", "ui_framework_env")
    @classmethod
    def _env_name(cls, v: str) -> str:
        if not re.match(r"^[A-Z][A-Z0-9_]*$", v):
            raise ValueError(f"Invalid environment variable name: '{v}'")
        return v

    @field_validator("admin_role", "auth_middleware", "role_guard", "dashboard_layout")
    @classmethod
    def _identifier(cls, v: str) -> str:
        if not re.match(r"^[A-Za-z_$][A-Za-z0-9_$]*$", v):
            raise ValueError(f"Not a valid identifier: '{v}'")
        return v


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_entity_name(value: str) -> bool:
    """True when *value* is usable as an entity name."""
    return bool(_ENTITY_NAME_RE.match(value))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "PrimitiveKind",
    "Cardinality",
    "ControlKind",
    "ArtifactRoot",
    "ThemeName",
    "TIMESTAMP_FIELDS",
    "IDENTITY_FIELD",
    "DEFAULT_CARDINALITY",
    "ENTITY_NAME_PATTERN",
    "PrimitiveType",
    "EnumType",
    "RelationshipType",
    "FieldType",
    "UIDescriptor",
    "SchemaDocument",
    "EntityNames",
    "FieldSpec",
    "FieldMapping",
    "ParsedEntity",
    "GeneratedArtifact",
    "GenerationConfig",
    "is_entity_name",
]

logger.debug("luxgen.models loaded: %d public symbols.", len(__all__))
