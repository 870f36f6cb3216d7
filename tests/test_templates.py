"""
tests/test_templates.py
Content checks for every non-view artifact produced by TemplateGenerator.
"""

from __future__ import annotations

import re

import pytest

from luxgen.models import ArtifactRoot, GenerationConfig, ParsedEntity
from luxgen.templates import (
    CONFIG_PATH,
    MODEL_PATH,
    ROUTES_PATH,
    SWAGGER_PATH,
    TemplateGenerator,
)


@pytest.fixture()
def templates(config: GenerationConfig) -> TemplateGenerator:
    return TemplateGenerator(config)


# ===========================================================================
# Interfaces
# ===========================================================================


class TestInterface:
    def test_book_interface(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_interface(book_entity)
        assert "export interface Book {" in content
        assert "  title: string;" in content
        assert "  author: string;" in content
        assert "  category: Category;" in content
        assert "export interface CreateBookDto {" in content
        assert "export interface UpdateBookDto {" in content

    def test_related_placeholder_comes_first(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_interface(book_entity)
        assert content.index("export interface Category {") < content.index("export interface Book {")

    def test_payloads_exclude_timestamps(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_interface(book_entity)
        create_block = content.split("export interface CreateBookDto {")[1].split("}")[0]
        assert "createdAt" not in create_block
        assert "updatedAt" not in create_block

    def test_optional_create_fields(self, templates: TemplateGenerator, product_entity: ParsedEntity) -> None:
        content = templates.generate_interface(product_entity)
        create_block = content.split("export interface CreateProductDto {")[1].split("}")[0]
        assert "  name: string;" in create_block
        assert "  description?: string;" in create_block
        assert "  tags?: Tag[];" in create_block

    def test_update_fields_all_optional(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_interface(book_entity)
        update_block = content.split("export interface UpdateBookDto {")[1].split("}")[0]
        fields = [line for line in update_block.splitlines() if line.strip()]
        assert fields and all("?:" in line for line in fields)


# ===========================================================================
# Service / store
# ===========================================================================


class TestService:
    def test_crud_functions(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_service(book_entity)
        for fn in ("getBooks", "getBookById", "createBook", "updateBook", "deleteBook", "updateField"):
            assert f"const {fn} = async" in content
        assert "export const useBookService = () => {" in content

    def test_token_read_per_call(self, book_entity: ParsedEntity) -> None:
        content = TemplateGenerator(GenerationConfig(token_storage_key="jwt")).generate_service(book_entity)
        assert "const authHeaders = () => ({" in content
        assert "localStorage.getItem('jwt')" in content

    def test_path_override_used_in_urls(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        from luxgen.fields import build_entity
        from luxgen.generator import parse_document

        raw = book_entity.document.model_dump(by_alias=True, exclude_none=True)
        raw["path"] = "library"
        entity = build_entity(parse_document(raw))
        content = templates.generate_service(entity)
        assert "${API_URL}/library`" in content

    def test_related_service(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        category = book_entity.relationships[0]
        content = templates.generate_related_service(book_entity, category)
        assert "import type { Category } from '../interfaces/book.interface'" in content
        assert "${API_URL}/categories`" in content
        assert "createCategory = async (data: Partial<Category>)" in content


class TestStore:
    def test_store_loads_related_stores(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_store(book_entity)
        assert "import { useCategoryStore } from './category.store'" in content
        assert "await Promise.all([" in content
        assert "categoryStore.fetchCategories()" in content

    def test_store_without_relationships(self, templates: TemplateGenerator, minimal_entity: ParsedEntity) -> None:
        content = templates.generate_store(minimal_entity)
        assert "Promise.all" not in content
        assert "notes.value = await noteService.getNotes()" in content

    def test_mutations_rethrow(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_store(book_entity)
        assert content.count("      throw e") == 3

    def test_related_store_has_no_related_imports(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_related_store(book_entity, book_entity.relationships[0])
        assert "defineStore('category'" in content
        assert "Store()" not in content


# ===========================================================================
# Config
# ===========================================================================


class TestConfig:
    def test_route_and_theme_switch(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_config(book_entity)
        assert "path: '/books'" in content
        assert "import.meta.env.VITE_UI_FRAMEWORK || 'bootstrap'" in content
        assert "./views/BookFomantic.vue" in content
        assert "./views/BookBootstrap.vue" in content
        assert "name: 'Books Management'" in content

    def test_nav_settings(self, book_entity: ParsedEntity) -> None:
        cfg = GenerationConfig(nav_order=7, nav_icon="book")
        content = TemplateGenerator(cfg).generate_config(book_entity)
        assert "order: 7" in content
        assert "icon: 'book'" in content


# ===========================================================================
# Backend
# ===========================================================================


class TestModel:
    def test_book_model(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_model(book_entity)
        assert "export interface IBook extends Document {" in content
        assert "const bookSchema = new Schema({" in content
        assert "required: [true, 'title is required']" in content
        assert "required: [true, 'author is required']" in content
        assert "type: Schema.Types.ObjectId," in content
        assert "ref: 'category'," in content
        assert "timestamps: true" in content
        assert "mongoose.model<IBook>('Book', bookSchema)" in content

    def test_timestamps_only_in_document_interface(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_model(book_entity)
        schema_block = content.split("new Schema({")[1].split("}, {")[0]
        assert "createdAt" not in schema_block
        interface_block = content.split("extends Document {")[1].split("}")[0]
        assert "createdAt: Date" in interface_block
        assert "updatedAt: Date" in interface_block

    def test_document_interface_without_declared_timestamps(
        self, templates: TemplateGenerator, minimal_entity: ParsedEntity
    ) -> None:
        content = templates.generate_model(minimal_entity)
        assert "createdAt: Date" in content

    def test_array_relationship_and_enum(self, templates: TemplateGenerator, product_entity: ParsedEntity) -> None:
        content = templates.generate_model(product_entity)
        assert "type: [{ type: Schema.Types.ObjectId, ref: 'tag' }]," in content
        assert "enum: ['draft', 'published', 'archived']," in content
        assert "tags: (mongoose.Types.ObjectId | string)[]" in content


class TestRoutes:
    def test_auth_everywhere(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_routes(book_entity)
        assert "router.use(validateFirebaseToken);" in content

    def test_reads_open_writes_admin(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_routes(book_entity)
        assert "router.get('/', apiato.getMany(BookModel, populationObject));" in content
        assert "router.get('/:id', apiato.getOneById(BookModel, populationObject));" in content
        guarded = [line for line in content.splitlines() if line.startswith("router.") and "roleGuard" in line]
        verbs = {re.match(r"router\.(\w+)\('([^']*)'", line).groups() for line in guarded}
        assert {("post", "/datatable"), ("post", "/"), ("put", "/:id"), ("delete", "/:id")} <= verbs

    def test_admin_role_is_configurable(self, book_entity: ParsedEntity) -> None:
        content = TemplateGenerator(GenerationConfig(admin_role="OWNER")).generate_routes(book_entity)
        assert "roleGuard([UserRole.OWNER])" in content
        assert "UserRole.ADMIN" not in content


class TestSwagger:
    def test_schema_and_operations(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        content = templates.generate_swagger(book_entity)
        assert " *     Book:" in content
        assert " *         - title" in content
        assert " * /books:" in content
        assert " * /books/{id}:" in content
        for verb in ("get:", "post:", "put:", "delete:"):
            assert f" *   {verb}" in content
        assert " *       204:" in content

    def test_properties_match_model(self, templates: TemplateGenerator, product_entity: ParsedEntity) -> None:
        content = templates.generate_swagger(product_entity)
        assert 'enum: ["draft", "published", "archived"]' in content
        assert " *           type: array" in content
        assert " *           format: date-time" in content

    def test_enum_values_are_escaped(self, templates: TemplateGenerator, product_dict) -> None:
        from luxgen.fields import build_entity
        from luxgen.generator import parse_document

        product_dict["ui"]["status"]["options"] = ['say "hi"', "c"]
        content = templates.generate_swagger(build_entity(parse_document(product_dict)))
        assert 'enum: ["say \\"hi\\"", "c"]' in content

    def test_no_required_block_when_nothing_required(self, templates: TemplateGenerator, book_dict) -> None:
        from luxgen.fields import build_entity
        from luxgen.generator import parse_document

        for ui in book_dict["ui"].values():
            ui["required"] = False
        content = templates.generate_swagger(build_entity(parse_document(book_dict)))
        component = content.split(" *       properties:")[0]
        assert " *       required:" not in component
        assert " *       required: true" in content


# ===========================================================================
# Aggregates
# ===========================================================================


class TestAggregates:
    def test_frontend_paths(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        artifacts = templates.frontend_artifacts(book_entity)
        assert [a.path for a in artifacts] == [
            "interfaces/book.interface.ts",
            "services/book.service.ts",
            "stores/book.store.ts",
            CONFIG_PATH,
        ]
        assert all(a.root == ArtifactRoot.FRONTEND for a in artifacts)

    def test_backend_paths(self, templates: TemplateGenerator, book_entity: ParsedEntity) -> None:
        artifacts = templates.backend_artifacts(book_entity)
        assert [a.path for a in artifacts] == [MODEL_PATH, "controller.ts", ROUTES_PATH, SWAGGER_PATH]
        assert all(a.root == ArtifactRoot.BACKEND for a in artifacts)

    def test_related_pairs(self, templates: TemplateGenerator, product_entity: ParsedEntity) -> None:
        artifacts = templates.related_artifacts(product_entity)
        assert [a.path for a in artifacts] == [
            "services/tag.service.ts",
            "stores/tag.store.ts",
            "services/supplier.service.ts",
            "stores/supplier.store.ts",
        ]

    def test_every_file_ends_with_one_newline(self, templates: TemplateGenerator, product_entity: ParsedEntity) -> None:
        for artifact in templates.frontend_artifacts(product_entity) + templates.backend_artifacts(product_entity):
            assert artifact.content.endswith("\n")
            assert not artifact.content.endswith("\n\n")
