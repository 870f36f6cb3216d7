"""
tests/test_validators.py
Unit tests for luxgen.validators.

Tests cover:
- ValidationResult accumulation and reporting
- Entity name / override checks
- Field key checks
- UI coverage (missing and orphan entries, timestamp exemption)
- Type descriptor checks
- Relationship target checks
- Non-fatal UI hint warnings
- ensure_valid exception mapping
"""

from __future__ import annotations

from typing import Any, Dict

import pytest

from luxgen.errors import (
    MalformedSchemaError,
    NamingCollisionError,
    SchemaRejected,
    UnknownFieldTypeError,
)
from luxgen.generator import parse_document
from luxgen.models import SchemaDocument
from luxgen.validators import (
    ValidationResult,
    ensure_valid,
    validate_document,
    validate_entity_names,
    validate_field_keys,
    validate_field_types,
    validate_relationships,
    validate_ui_coverage,
    validate_ui_hints,
)


def _doc(raw: Dict[str, Any]) -> SchemaDocument:
    return parse_document(raw)


# ===========================================================================
# ValidationResult
# ===========================================================================


class TestValidationResult:
    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert bool(result)
        assert len(result) == 0

    def test_errors_and_warnings_are_separated(self) -> None:
        result = ValidationResult()
        result.add_warning("W", "careful")
        result.add_error("E", "broken", {"field": "x"})
        assert not result.is_valid
        assert result.error_count == 1
        assert result.warning_count == 1
        assert result.codes == ["W", "E"]
        assert result.errors[0].context == {"field": "x"}

    def test_merge_keeps_order(self) -> None:
        first, second = ValidationResult(), ValidationResult()
        first.add_error("A", "a")
        second.add_error("B", "b")
        first.merge(second)
        assert first.codes == ["A", "B"]

    def test_format_report(self) -> None:
        result = ValidationResult()
        result.add_error("E", "broken")
        result.add_warning("W", "careful")
        report = result.format_report()
        assert "1 error(s), 1 warning(s)" in report
        assert "✗ [E] broken" in report
        assert "⚠ [W] careful" in report


# ===========================================================================
# Individual validators
# ===========================================================================


class TestEntityNames:
    def test_book_is_clean(self, book_document: SchemaDocument) -> None:
        assert validate_entity_names(book_document).is_valid

    def test_reserved_entity_name(self, book_dict: Dict[str, Any]) -> None:
        book_dict["name"] = "class"
        result = validate_entity_names(_doc(book_dict))
        assert "ENTITY_NAME_RESERVED" in result.codes

    def test_generated_identifier_clash(self, book_dict: Dict[str, Any]) -> None:
        book_dict["name"] = "error"
        assert "ENTITY_NAME_RESERVED" in validate_entity_names(_doc(book_dict)).codes

    def test_bad_override(self, book_dict: Dict[str, Any]) -> None:
        book_dict["namePlural"] = "book list"
        assert "INVALID_NAME_OVERRIDE" in validate_entity_names(_doc(book_dict)).codes

    def test_bad_path(self, book_dict: Dict[str, Any]) -> None:
        book_dict["path"] = "/Books?"
        assert "INVALID_PATH" in validate_entity_names(_doc(book_dict)).codes


class TestFieldKeys:
    def test_identity_field_is_reserved(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["_id"] = "string"
        book_dict["ui"]["_id"] = {"label": "Id"}
        assert "FIELD_KEY_RESERVED" in validate_field_keys(_doc(book_dict)).codes

    def test_non_identifier_key(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["page-count"] = "number"
        book_dict["ui"]["page-count"] = {"label": "Pages"}
        assert "INVALID_FIELD_KEY" in validate_field_keys(_doc(book_dict)).codes


class TestUiCoverage:
    def test_timestamps_need_no_ui(self, book_document: SchemaDocument) -> None:
        assert validate_ui_coverage(book_document).is_valid

    def test_missing_ui_entry(self, book_dict: Dict[str, Any]) -> None:
        del book_dict["ui"]["author"]
        result = validate_ui_coverage(_doc(book_dict))
        assert result.codes == ["MISSING_UI_ENTRY"]
        assert result.errors[0].context["field"] == "author"

    def test_orphan_ui_entry(self, book_dict: Dict[str, Any]) -> None:
        book_dict["ui"]["isbn"] = {"label": "ISBN"}
        assert validate_ui_coverage(_doc(book_dict)).codes == ["ORPHAN_UI_ENTRY"]


class TestFieldTypes:
    def test_unknown_type(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["title"] = "text"
        assert validate_field_types(_doc(book_dict)).codes == ["UNKNOWN_FIELD_TYPE"]

    def test_relationship_without_entity(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["category"] = "relationship:"
        assert validate_field_types(_doc(book_dict)).codes == ["MALFORMED_FIELD_TYPE"]

    def test_enum_without_options(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["title"] = "enum"
        assert validate_field_types(_doc(book_dict)).codes == ["MALFORMED_FIELD_TYPE"]

    def test_timestamp_must_be_string(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["createdAt"] = "number"
        assert validate_field_types(_doc(book_dict)).codes == ["TIMESTAMP_TYPE"]

    def test_reports_every_bad_field(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["title"] = "text"
        book_dict["schema"]["author"] = "person"
        assert len(validate_field_types(_doc(book_dict)).errors) == 2


class TestRelationships:
    def test_self_reference(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["category"] = "relationship:book"
        book_dict["ui"]["category"]["api-ref"] = "book"
        assert validate_relationships(_doc(book_dict)).codes == ["RELATED_ENTITY_IS_SELF"]

    def test_target_shares_capitalized_name(self, book_dict: Dict[str, Any]) -> None:
        book_dict["Name"] = "Category"
        assert validate_relationships(_doc(book_dict)).codes == ["RELATED_NAME_COLLISION"]

    def test_target_shares_plural(self, book_dict: Dict[str, Any]) -> None:
        book_dict["namePlural"] = "categories"
        result = validate_relationships(_doc(book_dict))
        assert result.codes == ["RELATED_NAME_COLLISION"]
        assert result.errors[0].context["related"] == "category"

    def test_invalid_target_name(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["category"] = "relationship:BookCategory"
        assert validate_relationships(_doc(book_dict)).codes == ["INVALID_RELATED_ENTITY"]

    def test_reserved_target(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["category"] = "relationship:data"
        assert "RELATED_ENTITY_RESERVED" in validate_relationships(_doc(book_dict)).codes

    def test_malformed_descriptor_left_to_field_types(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["category"] = "relationship:"
        assert validate_relationships(_doc(book_dict)).is_valid


class TestUiHints:
    def test_options_on_non_enum(self, book_dict: Dict[str, Any]) -> None:
        book_dict["ui"]["title"]["options"] = ["a", "b"]
        result = validate_ui_hints(_doc(book_dict))
        assert result.is_valid
        assert result.codes == ["OPTIONS_IGNORED"]

    def test_api_ref_mismatch(self, book_dict: Dict[str, Any]) -> None:
        book_dict["ui"]["category"]["api-ref"] = "genres"
        assert validate_ui_hints(_doc(book_dict)).codes == ["API_REF_MISMATCH"]

    def test_api_ref_plural_is_accepted(self, book_dict: Dict[str, Any]) -> None:
        book_dict["ui"]["category"]["api-ref"] = "/categories"
        assert validate_ui_hints(_doc(book_dict)).codes == []

    def test_cardinality_hint_mismatch(self, book_dict: Dict[str, Any]) -> None:
        book_dict["ui"]["category"]["type"] = "relationship-multiple"
        result = validate_ui_hints(_doc(book_dict))
        assert result.is_valid
        assert result.codes == ["CARDINALITY_MISMATCH"]

    def test_timestamp_in_form(self, product_dict: Dict[str, Any]) -> None:
        assert "TIMESTAMP_IN_FORM" in validate_ui_hints(_doc(product_dict)).codes


# ===========================================================================
# Orchestration
# ===========================================================================


class TestEnsureValid:
    def test_valid_documents(self, book_document: SchemaDocument, product_dict: Dict[str, Any]) -> None:
        assert ensure_valid(book_document).is_valid
        result = ensure_valid(_doc(product_dict))
        assert result.is_valid
        assert result.warning_count >= 1

    def test_missing_ui_raises_malformed(self, book_dict: Dict[str, Any]) -> None:
        del book_dict["ui"]["title"]
        with pytest.raises(MalformedSchemaError) as exc_info:
            ensure_valid(_doc(book_dict))
        assert exc_info.value.entity == "book"
        assert exc_info.value.field == "title"

    def test_unknown_type_raises_unknown(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["title"] = "blob"
        with pytest.raises(UnknownFieldTypeError):
            ensure_valid(_doc(book_dict))

    def test_reserved_name_raises_collision(self, book_dict: Dict[str, Any]) -> None:
        book_dict["name"] = "class"
        with pytest.raises(NamingCollisionError):
            ensure_valid(_doc(book_dict))

    def test_related_name_clash_raises_collision(self, book_dict: Dict[str, Any]) -> None:
        book_dict["Name"] = "Category"
        with pytest.raises(NamingCollisionError):
            ensure_valid(_doc(book_dict))

    def test_identity_field_raises_malformed(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["_id"] = "string"
        book_dict["ui"]["_id"] = {"label": "Id"}
        with pytest.raises(MalformedSchemaError) as exc_info:
            ensure_valid(_doc(book_dict))
        assert exc_info.value.field == "_id"

    def test_result_travels_with_exception(self, book_dict: Dict[str, Any]) -> None:
        del book_dict["ui"]["title"]
        book_dict["schema"]["author"] = "blob"
        with pytest.raises(SchemaRejected) as exc_info:
            ensure_valid(_doc(book_dict))
        result = exc_info.value.result
        assert result is not None
        assert result.error_count == 2
        assert "UNKNOWN_FIELD_TYPE" in str(exc_info.value)

    def test_validate_document_merges_everything(self, book_dict: Dict[str, Any]) -> None:
        book_dict["name"] = "class"
        del book_dict["ui"]["author"]
        result = validate_document(_doc(book_dict))
        assert {"ENTITY_NAME_RESERVED", "MISSING_UI_ENTRY"} <= set(result.codes)


class TestParseDocument:
    def test_missing_schema_key(self, book_dict: Dict[str, Any]) -> None:
        del book_dict["schema"]
        with pytest.raises(MalformedSchemaError):
            parse_document(book_dict)

    def test_empty_schema(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"] = {}
        with pytest.raises(MalformedSchemaError):
            parse_document(book_dict)

    def test_bad_entity_name(self, book_dict: Dict[str, Any]) -> None:
        book_dict["name"] = "Book"
        with pytest.raises(MalformedSchemaError) as exc_info:
            parse_document(book_dict)
        assert exc_info.value.entity == "Book"

    def test_unknown_top_level_key(self, book_dict: Dict[str, Any]) -> None:
        book_dict["tables"] = []
        with pytest.raises(MalformedSchemaError):
            parse_document(book_dict)

    def test_aliases(self, book_dict: Dict[str, Any]) -> None:
        book_dict.update({"Name": "Volume", "namePlural": "books", "NamePlural": "Volumes", "path": "library"})
        doc = parse_document(book_dict)
        assert doc.capitalized == "Volume"
        assert doc.capitalized_plural == "Volumes"
        assert doc.path == "library"
        assert doc.version == "1"
