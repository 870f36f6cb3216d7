"""
tests/conftest.py
Shared fixtures for the luxgen test suite.

No external mocking libraries are used; file output goes to pytest's
tmp_path directories.
"""

from __future__ import annotations

import copy
import json
import pathlib
from typing import Any, Dict

import pytest
import yaml

from luxgen.fields import build_entity
from luxgen.generator import parse_document
from luxgen.models import GenerationConfig, ParsedEntity, SchemaDocument


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
SCHEMA_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "schema_example.yaml"


# ---------------------------------------------------------------------------
# Raw schema data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_book_dict() -> Dict[str, Any]:
    """Load the reference schema_example.yaml once per session."""
    assert SCHEMA_EXAMPLE_PATH.exists(), (
        f"Reference schema not found at {SCHEMA_EXAMPLE_PATH}. "
        "Make sure schema_example.yaml is in the project root."
    )
    with open(SCHEMA_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def book_dict(raw_book_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy of the book schema; tests may mutate it freely."""
    return copy.deepcopy(raw_book_dict)


@pytest.fixture()
def product_dict() -> Dict[str, Any]:
    """Every control kind: enum, boolean, number, textarea, array relationship."""
    return {
        "name": "product",
        "schema": {
            "name": "string",
            "description": "string",
            "price": "number",
            "active": "boolean",
            "status": "enum",
            "tags": "relationship:tag:array",
            "supplier": "relationship:supplier",
            "createdAt": "string",
            "updatedAt": "string",
        },
        "ui": {
            "name": {"type": "text", "label": "Name", "placeholder": "Product name", "required": True},
            "status": {"type": "select", "label": "Status", "options": ["draft", "published", "archived"]},
            "price": {"type": "number", "label": "Price", "required": True},
            "description": {"type": "textarea", "label": "Description"},
            "active": {"type": "boolean", "label": "Active"},
            "tags": {"type": "relationship-multiple", "label": "Tags", "api-ref": "tags"},
            "supplier": {"type": "relationship-single", "label": "Supplier", "api-ref": "supplier"},
            "createdAt": {"type": "text", "label": "Created"},
        },
    }


@pytest.fixture()
def minimal_dict() -> Dict[str, Any]:
    """One string field, no relationships, no timestamps."""
    return {
        "name": "note",
        "schema": {"body": "string"},
        "ui": {"body": {"type": "text", "label": "Body", "required": True}},
    }


# ---------------------------------------------------------------------------
# Parsed fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def book_document(book_dict: Dict[str, Any]) -> SchemaDocument:
    return parse_document(book_dict)


@pytest.fixture()
def book_entity(book_document: SchemaDocument) -> ParsedEntity:
    return build_entity(book_document)


@pytest.fixture()
def product_entity(product_dict: Dict[str, Any]) -> ParsedEntity:
    return build_entity(parse_document(product_dict))


@pytest.fixture()
def minimal_entity(minimal_dict: Dict[str, Any]) -> ParsedEntity:
    return build_entity(parse_document(minimal_dict))


@pytest.fixture()
def config() -> GenerationConfig:
    return GenerationConfig()


# ---------------------------------------------------------------------------
# Files on disk
# ---------------------------------------------------------------------------


@pytest.fixture()
def book_yaml_path(book_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "book.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(book_dict, fh, default_flow_style=False, sort_keys=False)
    return path


@pytest.fixture()
def product_json_path(product_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "product.json"
    path.write_text(json.dumps(product_dict, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "project"
    path.mkdir()
    return path
