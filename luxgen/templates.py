# File: luxgen/templates.py
"""
Lux Generator - Code Template Engine
=====================================
Turns a ``ParsedEntity`` plus a ``GenerationConfig`` into source text for:

    Client side
        1. Type interfaces (read model, create / update payloads)
        2. Data-access service (axios, bearer token read per call)
        3. Reactive store (pinia)
        4. Micro-frontend route config
    Server side
        5. Persistence model (mongoose)
        6. Controller stub
        7. HTTP routes (express + apiato)
        8. API documentation (swagger JSDoc)
    Related entities
        9. One service and one store per related entity

The two themed UI views live in ``luxgen.views``.

All string assembly uses the ``List[str]`` + ``"\\n".join()`` pattern and
every method is a pure function of its arguments, so one generator can be
shared between threads.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from luxgen.models import (
    ArtifactRoot,
    EntityNames,
    FieldMapping,
    GeneratedArtifact,
    GenerationConfig,
    ParsedEntity,
)
from luxgen.utils import doc_yaml_string, join_lines, ts_string, ts_string_list

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.templates")


# ---------------------------------------------------------------------------
# Artifact paths (relative to the module root)
# ---------------------------------------------------------------------------


def interface_path(names: EntityNames) -> str:
    return f"interfaces/{names.name}.interface.ts"


def service_path(names: EntityNames) -> str:
    return f"services/{names.name}.service.ts"


def store_path(names: EntityNames) -> str:
    return f"stores/{names.name}.store.ts"


CONFIG_PATH: str = "config.ts"
MODEL_PATH: str = "model.ts"
CONTROLLER_PATH: str = "controller.ts"
ROUTES_PATH: str = "routes.ts"
SWAGGER_PATH: str = "swagger.ts"


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless code-generation engine for the non-view artifacts.

    Each ``generate_*`` method returns complete file content; the
    ``*_artifacts`` methods wrap them into ``GeneratedArtifact`` lists in
    their fixed output order.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        logger.debug(
            "TemplateGenerator initialised (admin_role=%s, token_key=%s).",
            config.admin_role,
            config.token_storage_key,
        )

    # ===================================================================
    # 1. Type interfaces
    # ===================================================================

    def generate_interface(self, entity: ParsedEntity) -> str:
        """
        Read model, create payload and update payload, plus a minimal
        placeholder interface for every related entity.
        """
        names: EntityNames = entity.names
        lines: List[str] = []

        for related in entity.relationships:
            lines.extend([
                f"export interface {related.capitalized} {{",
                "  _id: string;",
                "  name: string;",
                "  description?: string;",
                "}",
                "",
            ])

        lines.append(f"export interface {names.capitalized} {{")
        lines.append("  _id: string;")
        for mapping in entity.mappings:
            lines.append(f"  {mapping.key}: {mapping.ts_type};")
        lines.append("}")
        lines.append("")

        lines.append(f"export interface Create{names.capitalized}Dto {{")
        for mapping in entity.payload_mappings:
            optional: str = "" if mapping.required else "?"
            lines.append(f"  {mapping.key}{optional}: {mapping.ts_type};")
        lines.append("}")
        lines.append("")

        lines.append(f"export interface Update{names.capitalized}Dto {{")
        for mapping in entity.payload_mappings:
            lines.append(f"  {mapping.key}?: {mapping.ts_type};")
        lines.append("}")

        content: str = join_lines(lines)
        logger.debug("Generated interface for '%s': %d lines.", names.name, len(lines))
        return content

    # ===================================================================
    # 2. Data-access service
    # ===================================================================

    def _render_service(
        self,
        names: EntityNames,
        *,
        type_import: str,
        entity_type: str,
        create_type: str,
        update_type: str,
        interface_module: str,
    ) -> str:
        cap: str = names.capitalized
        cap_plural: str = names.capitalized_plural
        endpoint: str = f"${{API_URL}}/{names.path}"
        item_endpoint: str = f"${{API_URL}}/{names.path}/${{id}}"
        token_key: str = ts_string(self._config.token_storage_key)

        lines: List[str] = [
            f"import type {{ {type_import} }} from '{interface_module}'",
            "import axios from 'axios'",
            "",
            f"const API_URL = import.meta.env.{self._config.api_url_env}",
            "",
            "const authHeaders = () => ({",
            "  headers: {",
            f"    Authorization: `Bearer ${{localStorage.getItem({token_key})}}`",
            "  }",
            "})",
            "",
            f"export const use{cap}Service = () => {{",
            f"  const get{cap_plural} = async (): Promise<{entity_type}[]> => {{",
            f"    const response = await axios.get(`{endpoint}`, authHeaders())",
            "    return response.data.data",
            "  }",
            "",
            f"  const get{cap}ById = async (id: string): Promise<{entity_type}> => {{",
            f"    const response = await axios.get(`{item_endpoint}`, authHeaders())",
            "    return response.data.data",
            "  }",
            "",
            f"  const create{cap} = async (data: {create_type}): Promise<{entity_type}> => {{",
            f"    const response = await axios.post(`{endpoint}`, data, authHeaders())",
            "    return response.data.data",
            "  }",
            "",
            f"  const update{cap} = async (id: string, data: {update_type}): Promise<{entity_type}> => {{",
            f"    const response = await axios.put(`{item_endpoint}`, data, authHeaders())",
            "    return response.data.data",
            "  }",
            "",
            f"  const delete{cap} = async (id: string): Promise<void> => {{",
            f"    await axios.delete(`{item_endpoint}`, authHeaders())",
            "  }",
            "",
            f"  const updateField = async (id: string, field: string, value: unknown): Promise<{entity_type}> => {{",
            "    const updateData = {",
            "      [field]: value",
            "    }",
            f"    const response = await axios.put(`{item_endpoint}`, updateData, authHeaders())",
            "    return response.data.data",
            "  }",
            "",
            "  return {",
            f"    get{cap_plural},",
            f"    get{cap}ById,",
            f"    create{cap},",
            f"    update{cap},",
            f"    delete{cap},",
            "    updateField",
            "  }",
            "}",
        ]
        return join_lines(lines)

    def generate_service(self, entity: ParsedEntity) -> str:
        names: EntityNames = entity.names
        cap: str = names.capitalized
        content: str = self._render_service(
            names,
            type_import=f"{cap}, Create{cap}Dto, Update{cap}Dto",
            entity_type=cap,
            create_type=f"Create{cap}Dto",
            update_type=f"Update{cap}Dto",
            interface_module=f"../interfaces/{names.name}.interface",
        )
        logger.debug("Generated service for '%s'.", names.name)
        return content

    def generate_related_service(self, entity: ParsedEntity, related: EntityNames) -> str:
        """
        Same contract as the primary service, typed against the placeholder
        interface declared in the primary entity's interface file.
        """
        cap: str = related.capitalized
        content: str = self._render_service(
            related,
            type_import=cap,
            entity_type=cap,
            create_type=f"Partial<{cap}>",
            update_type=f"Partial<{cap}>",
            interface_module=f"../interfaces/{entity.names.name}.interface",
        )
        logger.debug("Generated related service '%s' for '%s'.", related.name, entity.names.name)
        return content

    # ===================================================================
    # 3. Reactive store
    # ===================================================================

    def _render_store(
        self,
        names: EntityNames,
        *,
        type_import: str,
        entity_type: str,
        create_type: str,
        update_type: str,
        interface_module: str,
        related: Sequence[EntityNames] = (),
    ) -> str:
        name: str = names.name
        cap: str = names.capitalized
        plural: str = names.plural
        cap_plural: str = names.capitalized_plural

        lines: List[str] = [
            "import { defineStore } from 'pinia'",
            "import { ref } from 'vue'",
            f"import type {{ {type_import} }} from '{interface_module}'",
            f"import {{ use{cap}Service }} from '../services/{name}.service'",
        ]
        for rel in related:
            lines.append(f"import {{ use{rel.capitalized}Store }} from './{rel.name}.store'")
        lines.extend([
            "",
            f"export const use{cap}Store = defineStore('{name}', () => {{",
            f"  const {plural} = ref<{entity_type}[]>([])",
            f"  const current{cap} = ref<{entity_type} | null>(null)",
            "  const loading = ref(false)",
            "  const error = ref<string | null>(null)",
            "",
            f"  const {name}Service = use{cap}Service()",
        ])
        for rel in related:
            lines.append(f"  const {rel.name}Store = use{rel.capitalized}Store()")
        lines.append("")

        # fetch all
        lines.extend([
            f"  const fetch{cap_plural} = async () => {{",
            "    loading.value = true",
            "    error.value = null",
            "    try {",
        ])
        if related:
            lines.extend([
                "      await Promise.all([",
                f"        {name}Service.get{cap_plural}().then(data => {{",
                f"          {plural}.value = data",
                "        }),",
            ])
            fetches: List[str] = [
                f"        {rel.name}Store.fetch{rel.capitalized_plural}()" for rel in related
            ]
            lines.append(",\n".join(fetches))
            lines.append("      ])")
        else:
            lines.append(f"      {plural}.value = await {name}Service.get{cap_plural}()")
        lines.extend(self._store_catch(f"Failed to fetch {plural}"))
        lines.append("")

        # fetch one
        lines.extend([
            f"  const fetch{cap}ById = async (id: string) => {{",
            "    loading.value = true",
            "    error.value = null",
            "    try {",
            f"      current{cap}.value = await {name}Service.get{cap}ById(id)",
            "    } catch (e) {",
            f"      error.value = e instanceof Error ? e.message : 'Failed to fetch {name}'",
            f"      current{cap}.value = null",
            "    } finally {",
            "      loading.value = false",
            "    }",
            "  }",
            "",
        ])

        # create
        lines.extend([
            f"  const create{cap} = async (data: {create_type}) => {{",
            "    loading.value = true",
            "    error.value = null",
            "    try {",
            f"      const new{cap} = await {name}Service.create{cap}(data)",
            f"      {plural}.value.push(new{cap})",
            f"      return new{cap}",
        ])
        lines.extend(self._store_catch(f"Failed to create {name}", rethrow=True))
        lines.append("")

        # update
        lines.extend([
            f"  const update{cap} = async (id: string, data: {update_type}) => {{",
            "    loading.value = true",
            "    error.value = null",
            "    try {",
            f"      const updated{cap} = await {name}Service.update{cap}(id, data)",
            f"      const index = {plural}.value.findIndex(item => item._id === id)",
            "      if (index !== -1) {",
            f"        {plural}.value[index] = updated{cap}",
            "      }",
            f"      if (current{cap}.value?._id === id) {{",
            f"        current{cap}.value = updated{cap}",
            "      }",
            f"      return updated{cap}",
        ])
        lines.extend(self._store_catch(f"Failed to update {name}", rethrow=True))
        lines.append("")

        # delete
        lines.extend([
            f"  const delete{cap} = async (id: string) => {{",
            "    loading.value = true",
            "    error.value = null",
            "    try {",
            f"      await {name}Service.delete{cap}(id)",
            f"      {plural}.value = {plural}.value.filter(item => item._id !== id)",
            f"      if (current{cap}.value?._id === id) {{",
            f"        current{cap}.value = null",
            "      }",
        ])
        lines.extend(self._store_catch(f"Failed to delete {name}", rethrow=True))
        lines.append("")

        lines.extend([
            "  return {",
            f"    {plural},",
            f"    current{cap},",
            "    loading,",
            "    error,",
            f"    fetch{cap_plural},",
            f"    fetch{cap}ById,",
            f"    create{cap},",
            f"    update{cap},",
            f"    delete{cap}",
            "  }",
            "})",
        ])
        return join_lines(lines)

    @staticmethod
    def _store_catch(fallback: str, rethrow: bool = False) -> List[str]:
        lines: List[str] = [
            "    } catch (e) {",
            f"      error.value = e instanceof Error ? e.message : {ts_string(fallback)}",
        ]
        if rethrow:
            lines.append("      throw e")
        lines.extend([
            "    } finally {",
            "      loading.value = false",
            "    }",
            "  }",
        ])
        return lines

    def generate_store(self, entity: ParsedEntity) -> str:
        names: EntityNames = entity.names
        cap: str = names.capitalized
        content: str = self._render_store(
            names,
            type_import=f"{cap}, Create{cap}Dto, Update{cap}Dto",
            entity_type=cap,
            create_type=f"Create{cap}Dto",
            update_type=f"Update{cap}Dto",
            interface_module=f"../interfaces/{names.name}.interface",
            related=entity.relationships,
        )
        logger.debug(
            "Generated store for '%s' (%d related store(s)).",
            names.name,
            len(entity.relationships),
        )
        return content

    def generate_related_store(self, entity: ParsedEntity, related: EntityNames) -> str:
        cap: str = related.capitalized
        return self._render_store(
            related,
            type_import=cap,
            entity_type=cap,
            create_type=f"Partial<{cap}>",
            update_type=f"Partial<{cap}>",
            interface_module=f"../interfaces/{entity.names.name}.interface",
        )

    # ===================================================================
    # 4. Micro-frontend config
    # ===================================================================

    def generate_config(self, entity: ParsedEntity) -> str:
        """Route registration; picks the themed view from an env switch."""
        names: EntityNames = entity.names
        cfg: GenerationConfig = self._config
        default_theme: str = cfg.default_theme.value

        lines: List[str] = [
            "import type { RouteRecordRaw } from 'vue-router'",
            "",
            f"const UI_FRAMEWORK = import.meta.env.{cfg.ui_framework_env} || '{default_theme}'",
            "",
            "export interface MicroFrontendConfig {",
            "    name: string",
            "    routes: RouteRecordRaw[]",
            "    layout?: string",
            "    menu?: string",
            "    type?: string",
            "    navItem?: {",
            "        label: string",
            "        order?: number",
            "        icon?: string",
            "    }",
            "}",
            "",
            "export const config: MicroFrontendConfig = {",
            f"    name: {ts_string(names.capitalized_plural + ' Management')},",
            f"    layout: '{cfg.dashboard_layout}',",
            "    type: 'dashboard',",
            "    navItem: {",
            f"        label: {ts_string(names.capitalized_plural)},",
            f"        order: {cfg.nav_order},",
            f"        icon: {ts_string(cfg.nav_icon)}",
            "    },",
            "    routes: [",
            "        {",
            f"            path: '/{names.plural}',",
            f"            name: '{names.plural}',",
            "            component: UI_FRAMEWORK === 'fomantic'",
            f"                ? /* @vite-ignore */ () => import('./views/{names.capitalized}Fomantic.vue')",
            f"                : /* @vite-ignore */ () => import('./views/{names.capitalized}Bootstrap.vue'),",
            "            meta: {",
            f"                title: {ts_string(names.capitalized_plural + ' List')}",
            "            }",
            "        }",
            "    ]",
            "}",
        ]
        return join_lines(lines)

    # ===================================================================
    # 5. Persistence model
    # ===================================================================

    @staticmethod
    def _persistence_block(mapping: FieldMapping) -> List[str]:
        lines: List[str] = [f"  {mapping.key}: {{"]
        if mapping.related is not None and mapping.is_array:
            lines.append(
                f"    type: [{{ type: Schema.Types.ObjectId, ref: '{mapping.persistence_ref}' }}],"
            )
        else:
            lines.append(f"    type: {mapping.persistence_type},")
            if mapping.persistence_ref:
                lines.append(f"    ref: '{mapping.persistence_ref}',")
        if mapping.enum_values:
            lines.append(f"    enum: {ts_string_list(mapping.enum_values)},")
        if mapping.required:
            lines.append(f"    required: [true, {ts_string(mapping.key + ' is required')}],")
        lines.append("  },")
        return lines

    def generate_model(self, entity: ParsedEntity) -> str:
        """
        Document interface, schema with one descriptor per payload field,
        automatic timestamps, exported model.
        """
        names: EntityNames = entity.names
        interface_fields: List[str] = [
            f"  {m.key}: {m.document_type}" for m in entity.payload_mappings
        ]
        interface_fields.extend(["  createdAt: Date", "  updatedAt: Date"])

        lines: List[str] = [
            "import mongoose, { Document, Schema } from 'mongoose';",
            "",
            f"export interface I{names.capitalized} extends Document {{",
            ",\n".join(interface_fields),
            "}",
            "",
            f"const {names.name}Schema = new Schema({{",
        ]
        for mapping in entity.payload_mappings:
            lines.extend(self._persistence_block(mapping))
        lines.extend([
            "}, {",
            "  timestamps: true",
            "});",
            "",
            f"export const {names.capitalized}Model = mongoose.model<I{names.capitalized}>"
            f"('{names.capitalized}', {names.name}Schema);",
        ])
        logger.debug(
            "Generated model for '%s': %d persisted field(s).",
            names.name,
            len(entity.payload_mappings),
        )
        return join_lines(lines)

    # ===================================================================
    # 6. Controller stub
    # ===================================================================

    def generate_controller(self, entity: ParsedEntity) -> str:
        cap: str = entity.names.capitalized
        lines: List[str] = [
            "import { Request, Response } from 'express';",
            f"import {{ {cap}Model, I{cap} }} from './model';",
            "",
            "interface ApiError {",
            "  message: string,",
            "  [key: string]: any",
            "}",
            "",
            f"export class {cap}Controller {{",
            "  // Add custom controller methods here",
            "}",
        ]
        return join_lines(lines)

    # ===================================================================
    # 7. HTTP routes
    # ===================================================================

    def generate_routes(self, entity: ParsedEntity) -> str:
        """
        Router with bearer-token auth on every route.  Plain listing and
        lookup by id are open to any authenticated caller; the datatable
        listing and every mutating operation require the admin role.
        """
        names: EntityNames = entity.names
        cfg: GenerationConfig = self._config
        model: str = f"{names.capitalized}Model"
        validation: str = f"{names.name}Validation"
        admin: str = f"{cfg.role_guard}([UserRole.{cfg.admin_role}])"

        lines: List[str] = [
            "import { Router } from 'express';",
            f"import {{ {model} }} from './model';",
            "import { ApiatoNoSQL } from '../../libs/apiato/no-sql/apiato';",
            f"import {{ {cfg.auth_middleware}, {cfg.role_guard} }} from '../../middleware/auth.middleware';",
            "import { UserRole } from '../../types/user';",
            f"import {{ {names.capitalized}Controller }} from './controller';",
            "",
            "const router = Router();",
            "const apiato = new ApiatoNoSQL();",
            "",
            "// Authentication for every route",
            f"router.use({cfg.auth_middleware});",
            "",
            f"const {validation} = {{}};",
            "const populationObject = {};",
            "",
            "// Server-side paginated / searchable listing",
            f"router.post('/datatable', {admin}, apiato.datatable_aggregate({model}, [], '', "
            "{ allowDiskUse: true, search_by_field: true }));",
            "",
            "// List",
            f"router.get('/', apiato.getMany({model}, populationObject));",
            "",
            "// Get one by id",
            f"router.get('/:id', apiato.getOneById({model}, populationObject));",
            "",
            "// Create",
            f"router.post('/', {admin}, apiato.createOne({model}, {validation}, populationObject, "
            "{ customValidationCode: 400 }));",
            "",
            "// Update by id",
            f"router.put('/:id', {admin}, apiato.updateById({model}, {validation}, populationObject, "
            "{ updateFieldName: 'updatedAt' }));",
            "",
            "// Delete by id",
            f"router.delete('/:id', {admin}, apiato.findIdAndDelete({model}));",
            "",
            "// Find-and-update helpers",
            f"router.post('/find-update-create', {admin}, apiato.findUpdateOrCreate({model}, {validation}, "
            "populationObject, { updateFieldName: 'updatedAt' }));",
            "",
            f"router.put('/find-update', {admin}, apiato.findUpdate({model}, {validation}, "
            "populationObject, { updateFieldName: 'updatedAt' }));",
            "",
            f"router.get('/where/first', {admin}, apiato.getOneWhere({model}, populationObject));",
            "",
            "export default router;",
        ]
        return join_lines(lines)

    # ===================================================================
    # 8. API documentation
    # ===================================================================

    @staticmethod
    def _swagger_property(mapping: FieldMapping) -> List[str]:
        lines: List[str] = [f" *         {mapping.key}:"]
        lines.append(f" *           type: {mapping.api_type}")
        if mapping.api_type == "array":
            lines.append(" *           items:")
            lines.append(" *             type: string")
            lines.append(" *             format: objectId")
        if mapping.api_format:
            lines.append(f" *           format: {mapping.api_format}")
        if mapping.enum_values:
            enum_list: str = ", ".join(doc_yaml_string(v) for v in mapping.enum_values)
            lines.append(f" *           enum: [{enum_list}]")
        return lines

    def generate_swagger(self, entity: ParsedEntity) -> str:
        """
        Component schema plus the five primary CRUD operations.  Properties
        come from the same mappings as the model and the interfaces.
        """
        names: EntityNames = entity.names
        cap: str = names.capitalized
        tag: str = names.capitalized_plural
        ref: str = f"'#/components/schemas/{cap}'"
        security: List[str] = [
            " *     security:",
            " *       - bearerAuth: []",
        ]
        id_param: List[str] = [
            " *     parameters:",
            " *       - in: path",
            " *         name: id",
            " *         required: true",
            " *         schema:",
            " *           type: string",
        ]
        body: List[str] = [
            " *     requestBody:",
            " *       required: true",
            " *       content:",
            " *         application/json:",
            " *           schema:",
            f" *             $ref: {ref}",
        ]

        lines: List[str] = [
            "/**",
            " * @swagger",
            " * components:",
            " *   schemas:",
            f" *     {cap}:",
            " *       type: object",
        ]
        required: List[str] = entity.required_keys
        if required:
            lines.append(" *       required:")
            lines.extend(f" *         - {key}" for key in required)
        lines.extend([
            " *       properties:",
            " *         _id:",
            " *           type: string",
            " *           format: objectId",
            " *           description: Auto-generated MongoDB ID",
        ])
        for mapping in entity.payload_mappings:
            lines.extend(self._swagger_property(mapping))
        lines.extend([
            " *         createdAt:",
            " *           type: string",
            " *           format: date-time",
            " *         updatedAt:",
            " *           type: string",
            " *           format: date-time",
            " */",
            "",
        ])

        # GET list
        lines.extend([
            "/**",
            " * @swagger",
            f" * /{names.path}:",
            " *   get:",
            f" *     summary: Get all {names.plural}",
            f" *     tags: [{tag}]",
            *security,
            " *     parameters:",
            " *       - in: query",
            " *         name: page",
            " *         schema:",
            " *           type: integer",
            " *         description: Page number",
            " *       - in: query",
            " *         name: limit",
            " *         schema:",
            " *           type: integer",
            " *         description: Items per page",
            " *     responses:",
            " *       200:",
            f" *         description: List of {names.plural}",
            " *         content:",
            " *           application/json:",
            " *             schema:",
            " *               type: object",
            " *               properties:",
            " *                 data:",
            " *                   type: array",
            " *                   items:",
            f" *                     $ref: {ref}",
            " *                 pagination:",
            " *                   type: object",
            " *                   properties:",
            " *                     total:",
            " *                       type: integer",
            " *                     page:",
            " *                       type: integer",
            " *                     pages:",
            " *                       type: integer",
            " */",
            "",
        ])

        # GET by id
        lines.extend([
            "/**",
            " * @swagger",
            f" * /{names.path}/{{id}}:",
            " *   get:",
            f" *     summary: Get a {names.name} by ID",
            f" *     tags: [{tag}]",
            *security,
            *id_param,
            " *     responses:",
            " *       200:",
            f" *         description: The {names.name}",
            " *         content:",
            " *           application/json:",
            " *             schema:",
            f" *               $ref: {ref}",
            " *       404:",
            f" *         description: {cap} not found",
            " */",
            "",
        ])

        # POST
        lines.extend([
            "/**",
            " * @swagger",
            f" * /{names.path}:",
            " *   post:",
            f" *     summary: Create a new {names.name}",
            f" *     tags: [{tag}]",
            *security,
            *body,
            " *     responses:",
            " *       201:",
            f" *         description: {cap} created",
            " *         content:",
            " *           application/json:",
            " *             schema:",
            f" *               $ref: {ref}",
            " *       400:",
            " *         description: Validation error",
            " */",
            "",
        ])

        # PUT
        lines.extend([
            "/**",
            " * @swagger",
            f" * /{names.path}/{{id}}:",
            " *   put:",
            f" *     summary: Update a {names.name}",
            f" *     tags: [{tag}]",
            *security,
            *id_param,
            *body,
            " *     responses:",
            " *       200:",
            f" *         description: {cap} updated",
            " *         content:",
            " *           application/json:",
            " *             schema:",
            f" *               $ref: {ref}",
            " *       404:",
            f" *         description: {cap} not found",
            " */",
            "",
        ])

        # DELETE
        lines.extend([
            "/**",
            " * @swagger",
            f" * /{names.path}/{{id}}:",
            " *   delete:",
            f" *     summary: Delete a {names.name}",
            f" *     tags: [{tag}]",
            *security,
            *id_param,
            " *     responses:",
            " *       204:",
            f" *         description: {cap} deleted",
            " *       404:",
            f" *         description: {cap} not found",
            " */",
        ])

        logger.debug("Generated swagger for '%s': %d lines.", names.name, len(lines))
        return join_lines(lines)

    # ===================================================================
    # Aggregates
    # ===================================================================

    def frontend_artifacts(self, entity: ParsedEntity) -> List[GeneratedArtifact]:
        """Interface, service, store, config (views are added by the assembler)."""
        names: EntityNames = entity.names
        root = ArtifactRoot.FRONTEND
        return [
            GeneratedArtifact(root=root, path=interface_path(names), content=self.generate_interface(entity)),
            GeneratedArtifact(root=root, path=service_path(names), content=self.generate_service(entity)),
            GeneratedArtifact(root=root, path=store_path(names), content=self.generate_store(entity)),
            GeneratedArtifact(root=root, path=CONFIG_PATH, content=self.generate_config(entity)),
        ]

    def backend_artifacts(self, entity: ParsedEntity) -> List[GeneratedArtifact]:
        root = ArtifactRoot.BACKEND
        return [
            GeneratedArtifact(root=root, path=MODEL_PATH, content=self.generate_model(entity)),
            GeneratedArtifact(root=root, path=CONTROLLER_PATH, content=self.generate_controller(entity)),
            GeneratedArtifact(root=root, path=ROUTES_PATH, content=self.generate_routes(entity)),
            GeneratedArtifact(root=root, path=SWAGGER_PATH, content=self.generate_swagger(entity)),
        ]

    def related_artifacts(
        self,
        entity: ParsedEntity,
        related: Optional[EntityNames] = None,
    ) -> List[GeneratedArtifact]:
        """Service + store pairs for one related entity, or all of them."""
        targets: Sequence[EntityNames] = (related,) if related is not None else entity.relationships
        root = ArtifactRoot.FRONTEND
        artifacts: List[GeneratedArtifact] = []
        for rel in targets:
            artifacts.append(GeneratedArtifact(
                root=root,
                path=service_path(rel),
                content=self.generate_related_service(entity, rel),
            ))
            artifacts.append(GeneratedArtifact(
                root=root,
                path=store_path(rel),
                content=self.generate_related_store(entity, rel),
            ))
        return artifacts


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TemplateGenerator",
    "interface_path",
    "service_path",
    "store_path",
    "CONFIG_PATH",
    "MODEL_PATH",
    "CONTROLLER_PATH",
    "ROUTES_PATH",
    "SWAGGER_PATH",
]

logger.debug("luxgen.templates loaded.")
