# File: luxgen/__init__.py
"""
Lux Generator - CRUD Module Scaffolding
=========================================

Turns a single entity schema document (JSON/YAML) into a complete CRUD
module: a Vue dashboard slice (interface, service, store, route config and
two themed views) and an Express + mongoose API slice (model, controller,
routes, OpenAPI fragment).

Architecture overview::

    ┌──────────────┐     ┌─────────────────┐     ┌───────────────────┐
    │  CLI / Entry │────▶│ ModuleGenerator  │────▶│ TemplateGenerator │
    │   (cli.py)   │     │  (generator.py)  │     │ ViewRenderer      │
    └──────────────┘     └────────┬────────┘     └───────────────────┘
                                  │
                    ┌─────────────┼─────────────┐
                    ▼             ▼             ▼
             ┌──────────┐  ┌───────────┐  ┌───────────┐
             │validators│  │  fields   │  │ exporters │
             └──────────┘  └───────────┘  └───────────┘

Usage::

    from luxgen import assemble, GenerationConfig
    artifacts = assemble(document_dict, GenerationConfig())

    python -m luxgen --schema book.json --output .
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from luxgen.errors import (
    LuxgenError,
    MalformedSchemaError,
    NamingCollisionError,
    SchemaRejected,
    UnknownFieldTypeError,
)
from luxgen.models import (
    ArtifactRoot,
    Cardinality,
    ControlKind,
    EntityNames,
    FieldMapping,
    GeneratedArtifact,
    GenerationConfig,
    ParsedEntity,
    PrimitiveKind,
    SchemaDocument,
    ThemeName,
)
from luxgen.fields import build_entity, map_field, parse_type_descriptor
from luxgen.validators import ValidationResult, ensure_valid, validate_document
from luxgen.templates import TemplateGenerator
from luxgen.views import BootstrapRenderer, FomanticRenderer, render_views
from luxgen.exporters import ArtifactExporter, ExportResult
from luxgen.generator import (
    GenerationReport,
    ModuleGenerator,
    assemble,
    load_schema_file,
    parse_document,
)

__all__ = [
    "__version__",
    "LuxgenError",
    "SchemaRejected",
    "MalformedSchemaError",
    "UnknownFieldTypeError",
    "NamingCollisionError",
    "ArtifactRoot",
    "Cardinality",
    "ControlKind",
    "EntityNames",
    "FieldMapping",
    "GeneratedArtifact",
    "GenerationConfig",
    "ParsedEntity",
    "PrimitiveKind",
    "SchemaDocument",
    "ThemeName",
    "build_entity",
    "map_field",
    "parse_type_descriptor",
    "ValidationResult",
    "ensure_valid",
    "validate_document",
    "TemplateGenerator",
    "BootstrapRenderer",
    "FomanticRenderer",
    "render_views",
    "ArtifactExporter",
    "ExportResult",
    "GenerationReport",
    "ModuleGenerator",
    "assemble",
    "load_schema_file",
    "parse_document",
]
