# File: luxgen/views.py
"""
Lux Generator - Themed UI views
================================
The list + modal-form view is built in two steps:

1. ``build_view_spec`` turns a ``ParsedEntity`` into a theme-neutral
   ``ViewSpec``: form nodes in ``ui`` order, table columns 1:1 with the
   ``ui`` order, form defaults and payload keys in schema order, and the
   related stores the form selects read from.
2. A ``ViewRenderer`` subclass renders that spec.  Each renderer owns its
   class-name table (semantic token → CSS classes) and the few module
   paths that differ per UI framework; the markup and the script are
   shared, so two renderings differ only in those tokens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Type

from luxgen.models import (
    ArtifactRoot,
    ControlKind,
    EntityNames,
    GeneratedArtifact,
    GenerationConfig,
    ParsedEntity,
    ThemeName,
)
from luxgen.utils import html_attr, html_text, join_lines, ts_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.views")


# ---------------------------------------------------------------------------
# Theme-neutral view description
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FormNode:
    """One form control."""

    key: str
    control: ControlKind
    label: str
    placeholder: str = ""
    required: bool = False
    options: Tuple[str, ...] = ()
    multiple: bool = False
    related: Optional[EntityNames] = None


@dataclass(frozen=True, slots=True)
class TableColumn:
    """One datatable column definition."""

    data: str
    title: str
    column_type: str
    reference_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ViewSpec:
    """Everything a renderer needs; contains no theme information."""

    names: EntityNames
    form: Tuple[FormNode, ...]
    columns: Tuple[TableColumn, ...]
    defaults: Tuple[Tuple[str, str], ...]
    payload_keys: Tuple[str, ...]
    related: Tuple[EntityNames, ...] = field(default_factory=tuple)


def build_view_spec(entity: ParsedEntity) -> ViewSpec:
    """Derive the theme-neutral view description of *entity*."""
    form: List[FormNode] = []
    columns: List[TableColumn] = []

    for mapping in entity.ui_mappings:
        if mapping.column_type == "relationship":
            columns.append(TableColumn(mapping.key, mapping.label, "relationship", "name"))
        else:
            columns.append(TableColumn(mapping.key, mapping.label, mapping.column_type))

        if mapping.is_timestamp:
            continue
        form.append(FormNode(
            key=mapping.key,
            control=mapping.control,
            label=mapping.label,
            placeholder=mapping.placeholder,
            required=mapping.required,
            options=mapping.enum_values,
            multiple=mapping.is_array,
            related=mapping.related,
        ))

    payload = entity.payload_mappings
    spec = ViewSpec(
        names=entity.names,
        form=tuple(form),
        columns=tuple(columns),
        defaults=tuple((m.key, m.default_literal) for m in payload),
        payload_keys=tuple(m.key for m in payload),
        related=entity.relationships,
    )
    logger.debug(
        "View spec for '%s': %d form node(s), %d column(s).",
        entity.names.name,
        len(spec.form),
        len(spec.columns),
    )
    return spec


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

# Semantic tokens every class table must define.
CLASS_TOKENS: Tuple[str, ...] = (
    "header_row",
    "header_title",
    "header_actions",
    "subtitle",
    "icon_list",
    "icon_plus",
    "icon_check",
    "button_primary",
    "button_secondary",
    "button_close",
    "modal",
    "modal_dialog",
    "modal_content",
    "modal_header",
    "modal_title",
    "modal_body",
    "modal_footer",
    "form",
    "field",
    "label",
    "input",
    "textarea",
    "select",
    "checkbox",
    "checkbox_input",
    "checkbox_label",
    "help_text",
    "divider",
)


class ViewRenderer:
    """
    Renders a ``ViewSpec`` into a Vue single-file component.

    Subclasses provide ``THEME``, ``CLASS_TABLE``, ``COMPONENT_DIR`` and
    ``MODAL_MODULE``; nothing else varies between themes.
    """

    THEME: ThemeName
    CLASS_TABLE: Mapping[str, str] = {}
    COMPONENT_DIR: str = ""
    MODAL_MODULE: str = ""

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        missing = [token for token in CLASS_TOKENS if token not in self.CLASS_TABLE]
        if missing:
            raise ValueError(f"{type(self).__name__} class table lacks tokens: {missing}")

    # -- helpers ------------------------------------------------------------

    @property
    def file_suffix(self) -> str:
        return self.THEME.value.capitalize()

    def view_path(self, names: EntityNames) -> str:
        return f"views/{names.capitalized}{self.file_suffix}.vue"

    def cls(self, token: str) -> str:
        """`` class="..."`` for *token*, or nothing when the theme leaves it bare."""
        value: str = self.CLASS_TABLE[token]
        return f' class="{value}"' if value else ""

    # -- template -----------------------------------------------------------

    def _form_node(self, spec: ViewSpec, node: FormNode) -> List[str]:
        model: str = f"{spec.names.name}Form.{node.key}"
        label: str = html_text(node.label)
        required: str = " required" if node.required else ""
        placeholder: str = html_attr(node.placeholder)

        if node.control == ControlKind.CHECKBOX:
            return [
                f"<div{self.cls('field')}>",
                f"  <div{self.cls('checkbox')}>",
                f'    <input type="checkbox"{self.cls("checkbox_input")} v-model="{model}" id="{node.key}">',
                f'    <label{self.cls("checkbox_label")} for="{node.key}">{label}</label>',
                "  </div>",
                "</div>",
            ]

        lines: List[str] = [
            f"<div{self.cls('field')}>",
            f'  <label{self.cls("label")} for="{node.key}">{label}</label>',
        ]
        if node.control == ControlKind.RELATIONSHIP and node.related is not None:
            rel: EntityNames = node.related
            multiple: str = " multiple" if node.multiple else ""
            lines.append(
                f'  <select{self.cls("select")} id="{node.key}" v-model="{model}"{multiple}{required}>'
            )
            if not node.multiple:
                lines.append(f'    <option :value="undefined">Select {label}</option>')
            lines.extend([
                f'    <option v-for="{rel.name} in {rel.name}Store.{rel.plural}" '
                f':key="{rel.name}._id" :value="{rel.name}">{{{{ {rel.name}.name }}}}</option>',
                "  </select>",
            ])
            if node.multiple:
                lines.append(f"  <small{self.cls('help_text')}>Hold Ctrl/Cmd to select multiple items</small>")
        elif node.control == ControlKind.SELECT:
            lines.append(f'  <select{self.cls("select")} id="{node.key}" v-model="{model}"{required}>')
            for option in node.options:
                lines.append(f'    <option value="{html_attr(option)}">{html_text(option)}</option>')
            lines.append("  </select>")
        elif node.control == ControlKind.TEXTAREA:
            lines.append(
                f'  <textarea{self.cls("textarea")} id="{node.key}" v-model="{model}" '
                f'placeholder="{placeholder}"{required}></textarea>'
            )
        else:
            input_type: str = "number" if node.control == ControlKind.NUMBER else "text"
            modifier: str = ".number" if node.control == ControlKind.NUMBER else ""
            lines.append(
                f'  <input type="{input_type}"{self.cls("input")} id="{node.key}" '
                f'v-model{modifier}="{model}" placeholder="{placeholder}"{required}>'
            )
        lines.append("</div>")
        return lines

    def _template(self, spec: ViewSpec) -> List[str]:
        names: EntityNames = spec.names
        cap: str = names.capitalized
        form_lines: List[str] = []
        for index, node in enumerate(spec.form):
            if index:
                form_lines.append("")
            form_lines.extend("              " + line for line in self._form_node(spec, node))

        return [
            "<template>",
            f'  <div class="{names.name}-list">',
            "    <!-- Page header -->",
            f"    <div{self.cls('header_row')}>",
            f"      <div{self.cls('header_title')}>",
            "        <h2>",
            f"          <i{self.cls('icon_list')}></i>",
            f"          {names.capitalized_plural}",
            f"          <small{self.cls('subtitle')}>Manage your {names.plural}</small>",
            "        </h2>",
            "      </div>",
            "",
            f"      <div{self.cls('header_actions')}>",
            f'        <button type="button"{self.cls("button_primary")} @click="openCreateModal">',
            f"          <i{self.cls('icon_plus')}></i>",
            f"          Create {cap}",
            "        </button>",
            "      </div>",
            "    </div>",
            "",
            f"    <!-- {cap} modal -->",
            f'    <div{self.cls("modal")} ref="{names.name}Modal" tabindex="-1">',
            f"      <div{self.cls('modal_dialog')}>",
            f"        <div{self.cls('modal_content')}>",
            f"          <div{self.cls('modal_header')}>",
            f"            <h5{self.cls('modal_title')}>{{{{ isEditing ? 'Edit {cap}' : 'Create {cap}' }}}}</h5>",
            f'            <button type="button"{self.cls("button_close")} aria-label="Close" @click="closeModal"></button>',
            "          </div>",
            f"          <div{self.cls('modal_body')}>",
            f'            <form{self.cls("form")} @submit.prevent="handleSubmit">',
            *form_lines,
            "            </form>",
            "          </div>",
            f"          <div{self.cls('modal_footer')}>",
            f'            <button type="button"{self.cls("button_secondary")} @click="closeModal">Cancel</button>',
            f'            <button type="button"{self.cls("button_primary")} @click="handleSubmit">',
            "              {{ isEditing ? 'Update' : 'Create' }}",
            f"              <i{self.cls('icon_check')}></i>",
            "            </button>",
            "          </div>",
            "        </div>",
            "      </div>",
            "    </div>",
            "",
            f"    <!-- {names.capitalized_plural} table -->",
            f"    <hr{self.cls('divider')}>",
            '    <datatable-component ref="datatableRef" v-if="columns.length"',
            f'      uri="/{names.path}/datatable" :columns="columns"',
            '      @edit="handleEdit" @delete="handleDelete" @checkbox="handleCheckbox" />',
            "  </div>",
            "</template>",
        ]

    # -- script -------------------------------------------------------------

    def _script(self, spec: ViewSpec) -> List[str]:
        names: EntityNames = spec.names
        name: str = names.name
        cap: str = names.capitalized
        form: str = f"{name}Form"

        defaults: List[str] = [f"{key}: {literal}" for key, literal in spec.defaults]
        payload: List[str] = [f"{key}: {form}.value.{key}" for key in spec.payload_keys]
        loaded: List[str] = [f"{key}: data.{key}" for key in spec.payload_keys]

        lines: List[str] = [
            '<script setup lang="ts">',
            "import { ref, onMounted } from 'vue'",
            "import type { TableColumn } from '../../../../types/datatable'",
            f"import type {{ Create{cap}Dto, Update{cap}Dto, {cap} }} from '../interfaces/{name}.interface'",
            f"import DatatableComponent from '@/components/dashboard/{self.COMPONENT_DIR}/DatatableComponent.vue'",
            f"import {{ use{cap}Service }} from '../services/{name}.service'",
        ]
        for rel in spec.related:
            lines.append(f"import {{ use{rel.capitalized}Store }} from '../stores/{rel.name}.store'")
        lines.extend([
            "// @ts-ignore - No type definitions available",
            "import Swal from 'sweetalert2'",
            "// @ts-ignore - No type definitions available",
            f"import {{ Modal }} from '{self.MODAL_MODULE}'",
            "",
            "const datatableRef = ref()",
            f"const {name}Modal = ref()",
            "let modal: any = null",
            f"const {name}Service = use{cap}Service()",
        ])
        for rel in spec.related:
            lines.append(f"const {rel.name}Store = use{rel.capitalized}Store()")
        lines.extend([
            "const isEditing = ref(false)",
            "const editingId = ref('')",
            "",
            f"const {form} = ref<Create{cap}Dto & Update{cap}Dto>({{",
            *self._object_body(defaults, 2),
            "})",
            "",
            "const resetForm = () => {",
            f"  {form}.value = {{",
            *self._object_body(defaults, 4),
            "  }",
            "  isEditing.value = false",
            "  editingId.value = ''",
            "}",
            "",
            "onMounted(() => {",
            f"  modal = new Modal({name}Modal.value)",
        ])
        for rel in spec.related:
            lines.append(f"  {rel.name}Store.fetch{rel.capitalized_plural}()")
        lines.extend([
            "})",
            "",
            "const openCreateModal = () => {",
            "  resetForm()",
            "  modal.show()",
            "}",
            "",
            "const closeModal = () => {",
            "  modal.hide()",
            "}",
            "",
            "const refreshTable = () => {",
            "  datatableRef.value?.forceRedraw()",
            "}",
            "",
            "const handleSubmit = async () => {",
            "  try {",
            "    if (isEditing.value) {",
            f"      const updateData: Update{cap}Dto = {{",
            *self._object_body(payload, 8),
            "      }",
            f"      await {name}Service.update{cap}(editingId.value, updateData)",
            "    } else {",
            f"      const createData: Create{cap}Dto = {{",
            *self._object_body(payload, 8),
            "      }",
            f"      await {name}Service.create{cap}(createData)",
            "    }",
            "    modal.hide()",
            "    resetForm()",
            "    refreshTable()",
            "  } catch (error) {",
            f"    console.error('Error saving {name}:', error)",
            "  }",
            "}",
            "",
            "const handleEdit = async (id: string) => {",
            "  try {",
            f"    const data: {cap} = await {name}Service.get{cap}ById(id)",
            f"    {form}.value = {{",
            *self._object_body(loaded, 6),
            "    }",
            "    isEditing.value = true",
            "    editingId.value = id",
            "    modal.show()",
            "  } catch (error) {",
            f"    console.error('Error fetching {name}:', error)",
            "  }",
            "}",
            "",
            "const handleDelete = async (id: string) => {",
            "  try {",
            "    const result = await Swal.fire({",
            f"      title: {ts_string('Delete this ' + name + '?')},",
            "      text: 'This action cannot be undone',",
            "      icon: 'warning',",
            "      showCancelButton: true,",
            "      confirmButtonText: 'Delete',",
            "      confirmButtonColor: '#27b30d',",
            "      cancelButtonText: 'Cancel',",
            "      cancelButtonColor: '#dd1111',",
            "      reverseButtons: true",
            "    })",
            "",
            "    if (result.isConfirmed) {",
            f"      await {name}Service.delete{cap}(id)",
            "      refreshTable()",
            "    }",
            "  } catch (error) {",
            f"    console.error('Error deleting {name}:', error)",
            "  }",
            "}",
            "",
            "const handleCheckbox = async (id: string, field: string, isChecked: boolean) => {",
            "  try {",
            f"    await {name}Service.updateField(id, field, isChecked)",
            "    refreshTable()",
            "  } catch (error) {",
            f"    console.error('Error updating {name}:', error)",
            "  }",
            "}",
            "",
            "const columns = ref<TableColumn[]>([",
        ])
        column_blocks: List[str] = []
        for column in spec.columns:
            block: List[str] = [
                "  {",
                f"    data: '{column.data}',",
                f"    title: {ts_string(column.title)},",
                f"    type: '{column.column_type}'" + ("," if column.reference_name else ""),
            ]
            if column.reference_name:
                block.append(f"    referenceName: '{column.reference_name}'")
            block.append("  }")
            column_blocks.append("\n".join(block))
        if column_blocks:
            lines.append(",\n".join(column_blocks))
        lines.extend([
            "])",
            "</script>",
        ])
        return lines

    @staticmethod
    def _object_body(entries: Sequence[str], indent: int) -> List[str]:
        prefix: str = " " * indent
        return [
            f"{prefix}{entry}{',' if i < len(entries) - 1 else ''}"
            for i, entry in enumerate(entries)
        ]

    @staticmethod
    def _style() -> List[str]:
        return [
            "<style scoped>",
            "h2 i {",
            "  vertical-align: middle;",
            "  margin-right: 0.5rem;",
            "}",
            "</style>",
        ]

    # -- public -------------------------------------------------------------

    def render(self, spec: ViewSpec) -> str:
        lines: List[str] = [*self._template(spec), "", *self._script(spec), "", *self._style()]
        content: str = join_lines(lines)
        logger.debug(
            "Rendered %s view for '%s': %d lines.",
            self.THEME.value,
            spec.names.name,
            content.count("\n"),
        )
        return content

    def artifact(self, spec: ViewSpec) -> GeneratedArtifact:
        return GeneratedArtifact(
            root=ArtifactRoot.FRONTEND,
            path=self.view_path(spec.names),
            content=self.render(spec),
        )


class BootstrapRenderer(ViewRenderer):
    """Bootstrap 5 markup."""

    THEME = ThemeName.BOOTSTRAP
    COMPONENT_DIR = "bootstrap"
    MODAL_MODULE = "bootstrap"
    CLASS_TABLE: Mapping[str, str] = {
        "header_row": "row mb-4",
        "header_title": "col-md-6",
        "header_actions": "col-md-6 text-end",
        "subtitle": "text-muted d-block",
        "icon_list": "bi bi-list",
        "icon_plus": "bi bi-plus",
        "icon_check": "bi bi-check",
        "button_primary": "btn btn-primary",
        "button_secondary": "btn btn-secondary",
        "button_close": "btn-close",
        "modal": "modal fade",
        "modal_dialog": "modal-dialog modal-lg",
        "modal_content": "modal-content",
        "modal_header": "modal-header",
        "modal_title": "modal-title",
        "modal_body": "modal-body",
        "modal_footer": "modal-footer",
        "form": "",
        "field": "mb-3",
        "label": "form-label",
        "input": "form-control",
        "textarea": "form-control",
        "select": "form-select",
        "checkbox": "form-check",
        "checkbox_input": "form-check-input",
        "checkbox_label": "form-check-label",
        "help_text": "text-muted",
        "divider": "my-4",
    }


class FomanticRenderer(ViewRenderer):
    """Fomantic UI markup."""

    THEME = ThemeName.FOMANTIC
    COMPONENT_DIR = "fomantic"
    MODAL_MODULE = "fomantic"
    CLASS_TABLE: Mapping[str, str] = {
        "header_row": "ui two column grid",
        "header_title": "column",
        "header_actions": "right aligned column",
        "subtitle": "sub header",
        "icon_list": "list icon",
        "icon_plus": "plus icon",
        "icon_check": "check icon",
        "button_primary": "ui primary button",
        "button_secondary": "ui button",
        "button_close": "close icon",
        "modal": "ui modal",
        "modal_dialog": "content",
        "modal_content": "description",
        "modal_header": "header",
        "modal_title": "ui header",
        "modal_body": "content",
        "modal_footer": "actions",
        "form": "ui form",
        "field": "field",
        "label": "ui label",
        "input": "ui input",
        "textarea": "ui input",
        "select": "ui dropdown",
        "checkbox": "ui checkbox",
        "checkbox_input": "",
        "checkbox_label": "",
        "help_text": "ui small text",
        "divider": "ui divider",
    }


RENDERERS: Dict[ThemeName, Type[ViewRenderer]] = {
    ThemeName.BOOTSTRAP: BootstrapRenderer,
    ThemeName.FOMANTIC: FomanticRenderer,
}


def render_views(entity: ParsedEntity, config: GenerationConfig) -> List[GeneratedArtifact]:
    """One view artifact per theme, Bootstrap first."""
    spec: ViewSpec = build_view_spec(entity)
    return [renderer_cls(config).artifact(spec) for renderer_cls in RENDERERS.values()]


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FormNode",
    "TableColumn",
    "ViewSpec",
    "build_view_spec",
    "CLASS_TOKENS",
    "ViewRenderer",
    "BootstrapRenderer",
    "FomanticRenderer",
    "RENDERERS",
    "render_views",
]

logger.debug("luxgen.views loaded.")
