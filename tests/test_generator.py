"""
tests/test_generator.py
End-to-end tests of the assembly pipeline and the ModuleGenerator
orchestrator.

Covers:
- the reference book scenario
- artifact order and determinism
- relationship completeness and field coverage across artifacts
- rejected documents produce nothing
- idempotent regeneration (checksums)
- schema file loading (YAML / JSON) and batch generation
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict, List

import pytest

from luxgen.errors import (
    MalformedSchemaError,
    NamingCollisionError,
    SchemaRejected,
    UnknownFieldTypeError,
)
from luxgen.generator import (
    GenerationReport,
    ModuleGenerator,
    assemble,
    load_config_file,
    load_schema_file,
)
from luxgen.models import ArtifactRoot, GeneratedArtifact, GenerationConfig

FRONTEND = "src/_frontends/dashboard"
BACKEND = "src/modules"


def _by_path(artifacts: List[GeneratedArtifact]) -> Dict[str, str]:
    return {f"{a.root.value}:{a.path}": a.content for a in artifacts}


# ===========================================================================
# assemble()
# ===========================================================================


class TestAssemble:
    def test_book_artifact_order(self, book_dict: Dict[str, Any]) -> None:
        artifacts = assemble(book_dict)
        assert [(a.root, a.path) for a in artifacts] == [
            (ArtifactRoot.FRONTEND, "interfaces/book.interface.ts"),
            (ArtifactRoot.FRONTEND, "services/book.service.ts"),
            (ArtifactRoot.FRONTEND, "stores/book.store.ts"),
            (ArtifactRoot.FRONTEND, "config.ts"),
            (ArtifactRoot.FRONTEND, "views/BookBootstrap.vue"),
            (ArtifactRoot.FRONTEND, "views/BookFomantic.vue"),
            (ArtifactRoot.BACKEND, "model.ts"),
            (ArtifactRoot.BACKEND, "controller.ts"),
            (ArtifactRoot.BACKEND, "routes.ts"),
            (ArtifactRoot.BACKEND, "swagger.ts"),
            (ArtifactRoot.FRONTEND, "services/category.service.ts"),
            (ArtifactRoot.FRONTEND, "stores/category.store.ts"),
        ]

    def test_deterministic(self, book_dict: Dict[str, Any], product_dict: Dict[str, Any]) -> None:
        assert assemble(book_dict) == assemble(book_dict)
        assert assemble(product_dict) == assemble(product_dict)

    def test_accepts_parsed_document(self, book_document, book_dict: Dict[str, Any]) -> None:
        assert assemble(book_document) == assemble(book_dict)

    def test_every_related_entity_gets_a_pair(self, product_dict: Dict[str, Any]) -> None:
        paths = [a.path for a in assemble(product_dict)]
        for related in ("tag", "supplier"):
            assert paths.count(f"services/{related}.service.ts") == 1
            assert paths.count(f"stores/{related}.store.ts") == 1

    def test_shared_related_entity_generated_once(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["genres"] = "relationship:category:array"
        book_dict["ui"]["genres"] = {"type": "relationship-multiple", "label": "Genres", "api-ref": "categories"}
        artifacts = assemble(book_dict)
        paths = [a.path for a in artifacts]
        assert paths.count("services/category.service.ts") == 1
        assert paths.count("stores/category.store.ts") == 1
        interface = _by_path(artifacts)["frontend:interfaces/book.interface.ts"]
        assert interface.count("export interface Category {") == 1

    def test_no_relationships_no_extra_pairs(self, minimal_dict: Dict[str, Any]) -> None:
        assert len(assemble(minimal_dict)) == 10

    def test_every_payload_field_in_every_artifact(self, product_dict: Dict[str, Any]) -> None:
        contents = _by_path(assemble(product_dict))
        checked = [
            "frontend:interfaces/product.interface.ts",
            "frontend:views/ProductBootstrap.vue",
            "frontend:views/ProductFomantic.vue",
            "backend:model.ts",
            "backend:swagger.ts",
        ]
        for key in ("name", "description", "price", "active", "status", "tags", "supplier"):
            for path in checked:
                assert f"{key}" in contents[path], f"{key} missing from {path}"
            assert f"  {key}: {{" in contents["backend:model.ts"]

    def test_frontend_only(self, book_dict: Dict[str, Any]) -> None:
        artifacts = assemble(book_dict, GenerationConfig(generate_backend=False))
        assert {a.root for a in artifacts} == {ArtifactRoot.FRONTEND}
        assert len(artifacts) == 8

    def test_backend_only(self, book_dict: Dict[str, Any]) -> None:
        artifacts = assemble(book_dict, GenerationConfig(generate_frontend=False))
        assert [a.path for a in artifacts] == ["model.ts", "controller.ts", "routes.ts", "swagger.ts"]

    def test_config_changes_output(self, book_dict: Dict[str, Any]) -> None:
        default = _by_path(assemble(book_dict))
        custom = _by_path(assemble(book_dict, GenerationConfig(admin_role="OWNER")))
        assert default["backend:routes.ts"] != custom["backend:routes.ts"]
        assert default["backend:model.ts"] == custom["backend:model.ts"]


class TestRejection:
    def test_unknown_type(self, book_dict: Dict[str, Any]) -> None:
        book_dict["schema"]["title"] = "date"
        with pytest.raises(UnknownFieldTypeError):
            assemble(book_dict)

    def test_missing_ui(self, book_dict: Dict[str, Any]) -> None:
        del book_dict["ui"]["category"]
        with pytest.raises(MalformedSchemaError):
            assemble(book_dict)

    def test_missing_name(self, book_dict: Dict[str, Any]) -> None:
        del book_dict["name"]
        with pytest.raises(SchemaRejected):
            assemble(book_dict)

    @pytest.mark.parametrize("raw", [["x"], None, "name: book"])
    def test_non_mapping_document(self, raw: Any) -> None:
        with pytest.raises(MalformedSchemaError):
            assemble(raw)

    def test_related_name_clash(self, book_dict: Dict[str, Any]) -> None:
        book_dict["Name"] = "Category"
        with pytest.raises(NamingCollisionError):
            assemble(book_dict)

    def test_rejected_document_writes_nothing(
        self, book_dict: Dict[str, Any], output_dir: pathlib.Path
    ) -> None:
        book_dict["schema"]["category"] = "relationship:"
        report = ModuleGenerator().generate(book_dict, output_dir)
        assert not report.success
        assert report.validation_errors
        assert report.artifacts == []
        assert list(output_dir.iterdir()) == []


# ===========================================================================
# ModuleGenerator
# ===========================================================================


class TestModuleGenerator:
    def test_generate_writes_all_files(self, book_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        report = ModuleGenerator().generate(book_dict, output_dir)
        assert report.success, report.summary()
        assert report.entity_name == "book"
        assert report.total_files == 12
        assert (output_dir / FRONTEND / "book/views/BookFomantic.vue").is_file()
        assert (output_dir / FRONTEND / "book/stores/category.store.ts").is_file()
        assert (output_dir / BACKEND / "book/swagger.ts").is_file()

    def test_regeneration_is_idempotent(self, book_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        generator = ModuleGenerator()
        first = generator.generate(book_dict, output_dir)
        second = generator.generate(book_dict, output_dir)
        assert {f.relative_path: f.sha256 for f in first.files} == {
            f.relative_path: f.sha256 for f in second.files
        }

    def test_dry_run(self, book_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        report = ModuleGenerator(dry_run=True).generate(book_dict, output_dir)
        assert report.success
        assert report.total_files == 12
        assert list(output_dir.iterdir()) == []

    def test_fail_on_warnings(self, product_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        report = ModuleGenerator(fail_on_warnings=True).generate(product_dict, output_dir)
        assert not report.success
        assert report.validation_warnings
        assert list(output_dir.iterdir()) == []

    def test_step_metrics(self, book_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        report = ModuleGenerator().generate_from_file(book_yaml_path, output_dir)
        assert [s.step_name for s in report.step_metrics] == [
            "Load Schema File", "Validate", "Assemble", "Export",
        ]
        assert all(s.success for s in report.step_metrics)

    def test_missing_file(self, tmp_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        report = ModuleGenerator().generate_from_file(tmp_path / "nope.yaml", output_dir)
        assert not report.success
        assert report.input_errors

    def test_summary_mentions_entity_and_status(self, book_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        summary = ModuleGenerator().generate(book_dict, output_dir).summary()
        assert "book" in summary
        assert "SUCCESS" in summary

    def test_failed_summary_lists_errors(self, book_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        book_dict["schema"]["title"] = "date"
        summary = ModuleGenerator().generate(book_dict, output_dir).summary()
        assert "FAILED" in summary
        assert "Validation Errors" in summary

    def test_generate_many(
        self,
        book_yaml_path: pathlib.Path,
        product_json_path: pathlib.Path,
        output_dir: pathlib.Path,
    ) -> None:
        reports = ModuleGenerator(GenerationConfig(max_workers=2)).generate_many(
            [book_yaml_path, product_json_path], output_dir
        )
        assert [r.entity_name for r in reports] == ["book", "product"]
        assert all(isinstance(r, GenerationReport) and r.success for r in reports)
        assert (output_dir / BACKEND / "product/model.ts").is_file()

    def test_generate_many_isolates_failures(
        self,
        book_yaml_path: pathlib.Path,
        tmp_path: pathlib.Path,
        output_dir: pathlib.Path,
    ) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text(json.dumps({"name": "bad", "schema": {"x": "blob"}, "ui": {"x": {}}}), encoding="utf-8")
        reports = ModuleGenerator().generate_many([broken, book_yaml_path], output_dir)
        assert [r.success for r in reports] == [False, True]
        assert not (output_dir / BACKEND / "bad").exists()


# ===========================================================================
# Loading
# ===========================================================================


class TestLoading:
    def test_yaml(self, book_yaml_path: pathlib.Path) -> None:
        assert load_schema_file(book_yaml_path)["name"] == "book"

    def test_json(self, product_json_path: pathlib.Path) -> None:
        assert load_schema_file(product_json_path)["name"] == "product"

    def test_yaml_keeps_key_order(self, book_yaml_path: pathlib.Path) -> None:
        data = load_schema_file(book_yaml_path)
        assert list(data["schema"]) == ["title", "author", "category", "createdAt", "updatedAt"]

    def test_invalid_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_schema_file(path)

    def test_top_level_must_be_mapping(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_schema_file(path)

    def test_missing(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_schema_file(tmp_path / "missing.yaml")

    def test_config_file_with_overrides(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "luxgen.yaml"
        path.write_text("admin_role: OWNER\nnav_order: 3\n", encoding="utf-8")
        config = load_config_file(path, {"nav_order": 9})
        assert config.admin_role == "OWNER"
        assert config.nav_order == 9

    def test_config_file_rejects_unknown_keys(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "luxgen.yaml"
        path.write_text("database_url: sqlite://\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config_file(path)
