# File: luxgen/generator.py
"""
Lux Generator - Module Assembly Pipeline (Orchestrator)
=========================================================

Connects every phase together:

    Schema file → SchemaDocument → validation → ParsedEntity
        → templates / views → GeneratedArtifact list → ArtifactExporter

``assemble`` is the pure core: same document and config in, byte-identical
artifacts out, and nothing at all when the document is rejected.
``ModuleGenerator`` wraps it with file loading, timing, reporting and
export, and can process several schema files in parallel.

Artifact order is fixed:

    frontend  interface, service, store, config, Bootstrap view, Fomantic view
    backend   model, controller, routes, swagger
    related   service, store   (per related entity, first-seen order)
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from luxgen.errors import MalformedSchemaError, SchemaRejected
from luxgen.exporters import ArtifactExporter, ExportResult, FileRecord
from luxgen.fields import build_entity
from luxgen.models import GeneratedArtifact, GenerationConfig, ParsedEntity, SchemaDocument
from luxgen.templates import TemplateGenerator
from luxgen.utils import Timer
from luxgen.validators import ValidationResult, ensure_valid
from luxgen.views import render_views

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """What happened to one schema document."""

    success: bool = False
    entity_name: str = ""
    source: str = ""
    output_directory: str = ""
    dry_run: bool = False

    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)

    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    files: List[FileRecord] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files) if self.files else len(self.artifacts)

    @property
    def total_lines(self) -> int:
        return sum(a.line_count for a in self.artifacts)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append("=" * 60)
        lines.append(f"  Lux Generator: {self.entity_name or self.source}")
        lines.append("=" * 60)
        lines.append(f"  Status:           {status}")
        if self.source:
            lines.append(f"  Source:           {self.source}")
        if self.output_directory:
            lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Files:            {self.total_files}{' (dry run)' if self.dry_run else ''}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")

        if self.step_metrics:
            lines.append("─" * 60)
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<20s} {step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        for title, items, icon in (
            ("Input Errors", self.input_errors, "✗"),
            ("Validation Errors", self.validation_errors, "✗"),
            ("Validation Warnings", self.validation_warnings, "⚠"),
            ("Generation Errors", self.generation_errors, "✗"),
            ("Export Errors", self.export_errors, "✗"),
        ):
            if items:
                lines.append("─" * 60)
                lines.append(f"  {title} ({len(items)}):")
                lines.extend(f"    {icon} {item}" for item in items)

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Schema / config loading
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at top level, got {type(data).__name__}.")
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at top level, got {type(data).__name__}.")
    return data


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Load a runner / schema file (JSON or YAML), dispatching on extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Schema path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s': trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_document(raw: Mapping[str, Any]) -> SchemaDocument:
    """
    Turn raw mapping data into a ``SchemaDocument``.

    Raises:
        MalformedSchemaError: missing keys, wrong value types, bad entity name.
    """
    if not isinstance(raw, Mapping):
        raise MalformedSchemaError(
            f"Schema document must be a mapping, got {type(raw).__name__}."
        )
    entity: Optional[str] = raw.get("name") if isinstance(raw.get("name"), str) else None
    try:
        return SchemaDocument.model_validate(dict(raw))
    except PydanticValidationError as exc:
        problems: List[str] = []
        for error in exc.errors():
            location: str = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
            problems.append(f"{location}: {error.get('msg', 'invalid')}")
        raise MalformedSchemaError(
            f"Malformed schema document{f' for entity {entity!r}' if entity else ''}: "
            + "; ".join(problems),
            entity=entity,
        ) from exc


def load_config_file(path: Path, overrides: Optional[Mapping[str, Any]] = None) -> GenerationConfig:
    """Load a ``GenerationConfig`` from JSON/YAML and apply *overrides* on top."""
    data: Dict[str, Any] = load_schema_file(path)
    if overrides:
        data.update(overrides)
    try:
        return GenerationConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed for {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Pure assembly
# ---------------------------------------------------------------------------

DocumentInput = Union[SchemaDocument, Mapping[str, Any]]


def _as_document(document: DocumentInput) -> SchemaDocument:
    if isinstance(document, SchemaDocument):
        return document
    return parse_document(document)


def prepare_entity(document: DocumentInput) -> ParsedEntity:
    """
    Validate *document* and derive its ``ParsedEntity``.

    Raises:
        SchemaRejected: (or a subclass) when the document is not usable.
    """
    doc: SchemaDocument = _as_document(document)
    ensure_valid(doc)
    return build_entity(doc)


def assemble(
    document: DocumentInput,
    config: Optional[GenerationConfig] = None,
) -> List[GeneratedArtifact]:
    """
    Produce the complete, ordered artifact list for one entity.

    Nothing is produced when the document is rejected: validation runs to
    completion before the first template is rendered.

    Raises:
        SchemaRejected: (or a subclass) when the document is not usable.
    """
    cfg: GenerationConfig = config or GenerationConfig()
    return render_entity(prepare_entity(document), cfg)


def render_entity(entity: ParsedEntity, cfg: GenerationConfig) -> List[GeneratedArtifact]:
    """Render every artifact of an already validated entity, in output order."""
    templates = TemplateGenerator(cfg)

    artifacts: List[GeneratedArtifact] = []
    if cfg.generate_frontend:
        artifacts.extend(templates.frontend_artifacts(entity))
        artifacts.extend(render_views(entity, cfg))
    if cfg.generate_backend:
        artifacts.extend(templates.backend_artifacts(entity))
    if cfg.generate_frontend:
        artifacts.extend(templates.related_artifacts(entity))

    logger.info(
        "Assembled '%s': %d artifact(s), %d related entit%s.",
        entity.names.name,
        len(artifacts),
        len(entity.relationships),
        "y" if len(entity.relationships) == 1 else "ies",
    )
    return artifacts


# ---------------------------------------------------------------------------
# ModuleGenerator: orchestrator
# ---------------------------------------------------------------------------


class ModuleGenerator:
    """
    Pipeline orchestrator for one or many schema documents.

    Usage::

        generator = ModuleGenerator(GenerationConfig())

        report = generator.generate_from_file(Path("book.json"), Path("./project"))
        print(report.summary())

        reports = generator.generate_many([Path("book.json"), Path("author.yaml")],
                                          Path("./project"))

    The generator keeps no per-run state and may be reused.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        *,
        dry_run: bool = False,
        fail_on_warnings: bool = False,
    ) -> None:
        self._config: GenerationConfig = config or GenerationConfig()
        self._dry_run: bool = dry_run
        self._fail_on_warnings: bool = fail_on_warnings
        logger.debug(
            "ModuleGenerator initialised: dry_run=%s, fail_on_warnings=%s, frontend=%s, backend=%s.",
            dry_run,
            fail_on_warnings,
            self._config.generate_frontend,
            self._config.generate_backend,
        )

    @property
    def config(self) -> GenerationConfig:
        return self._config

    # -----------------------------------------------------------------
    # Validation only
    # -----------------------------------------------------------------

    def validate(self, document: DocumentInput) -> ValidationResult:
        """
        Validate without generating.

        Raises:
            SchemaRejected: exactly as ``assemble`` would.
        """
        return ensure_valid(_as_document(document))

    # -----------------------------------------------------------------
    # Single document
    # -----------------------------------------------------------------

    def generate(
        self,
        document: DocumentInput,
        output_dir: Path,
        *,
        source: str = "",
    ) -> GenerationReport:
        """Validate, assemble and export one document."""
        report = GenerationReport(
            source=source,
            output_directory=str(output_dir.resolve()),
            dry_run=self._dry_run,
        )

        with Timer("generate") as total:
            entity = self._step_validate(document, report)
            if entity is not None:
                artifacts = self._step_assemble(entity, report)
                if artifacts is not None:
                    self._step_export(entity.names.name, artifacts, output_dir, report)

        report.total_elapsed_seconds = total.elapsed
        report.success = not (
            report.input_errors
            or report.validation_errors
            or report.generation_errors
            or report.export_errors
        )
        return report

    def generate_from_file(self, schema_path: Path, output_dir: Path) -> GenerationReport:
        """Load *schema_path* and run ``generate`` on it."""
        with Timer("load_schema") as t_load:
            try:
                raw: Dict[str, Any] = load_schema_file(schema_path)
            except (FileNotFoundError, ValueError) as exc:
                report = GenerationReport(
                    source=str(schema_path),
                    output_directory=str(output_dir.resolve()),
                    dry_run=self._dry_run,
                )
                report.input_errors.append(str(exc))
                report.step_metrics.append(
                    GenerationStepMetric("Load Schema File", False, t_load.elapsed, str(exc))
                )
                logger.error("Failed to load %s: %s", schema_path, exc)
                return report

        report = self.generate(raw, output_dir, source=str(schema_path))
        report.step_metrics.insert(
            0,
            GenerationStepMetric("Load Schema File", True, t_load.elapsed, f"from {schema_path.name}"),
        )
        report.total_elapsed_seconds += t_load.elapsed
        return report

    # -----------------------------------------------------------------
    # Batch
    # -----------------------------------------------------------------

    def generate_many(
        self,
        schema_paths: Sequence[Path],
        output_dir: Path,
    ) -> List[GenerationReport]:
        """
        Process several schema files concurrently.

        Every document is all-or-nothing on its own; one rejected document
        does not stop the others.  Reports come back in input order.
        """
        if len(schema_paths) <= 1:
            return [self.generate_from_file(path, output_dir) for path in schema_paths]

        reports: Dict[int, GenerationReport] = {}
        workers: int = min(self._config.max_workers, len(schema_paths))
        logger.info("Generating %d schema file(s) with %d worker(s).", len(schema_paths), workers)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.generate_from_file, path, output_dir): index
                for index, path in enumerate(schema_paths)
            }
            for future in as_completed(futures):
                reports[futures[future]] = future.result()

        ordered: List[GenerationReport] = [reports[i] for i in range(len(schema_paths))]
        names: List[str] = [r.entity_name for r in ordered if r.entity_name]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            logger.warning(
                "Entities generated more than once in this batch (last writer wins): %s",
                ", ".join(duplicates),
            )
        return ordered

    # -----------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------

    def _step_validate(
        self,
        document: DocumentInput,
        report: GenerationReport,
    ) -> Optional[ParsedEntity]:
        with Timer("validate") as t:
            try:
                doc: SchemaDocument = _as_document(document)
                report.entity_name = doc.name
                result: ValidationResult = ensure_valid(doc)
                entity: Optional[ParsedEntity] = build_entity(doc)
            except SchemaRejected as exc:
                if exc.result is not None:
                    report.validation_errors.extend(e.message for e in exc.result.errors)
                    report.validation_warnings.extend(w.message for w in exc.result.warnings)
                else:
                    report.validation_errors.append(exc.message)
                if exc.entity and not report.entity_name:
                    report.entity_name = exc.entity
                entity = None
            else:
                report.validation_warnings.extend(w.message for w in result.warnings)
                if self._fail_on_warnings and result.warnings:
                    report.validation_errors.append(
                        f"{len(result.warnings)} warning(s) treated as errors."
                    )
                    entity = None

        report.step_metrics.append(GenerationStepMetric(
            "Validate",
            entity is not None,
            t.elapsed,
            f"{len(report.validation_errors)} error(s), {len(report.validation_warnings)} warning(s)",
        ))
        return entity

    def _step_assemble(
        self,
        entity: ParsedEntity,
        report: GenerationReport,
    ) -> Optional[List[GeneratedArtifact]]:
        with Timer("assemble") as t:
            try:
                artifacts: Optional[List[GeneratedArtifact]] = render_entity(entity, self._config)
            except SchemaRejected as exc:
                report.validation_errors.append(exc.message)
                artifacts = None
            except (KeyError, ValueError, TypeError) as exc:
                message: str = f"{type(exc).__name__}: {exc}"
                report.generation_errors.append(message)
                logger.error("Generation failed for '%s': %s", entity.names.name, message, exc_info=True)
                artifacts = None

        if artifacts is not None:
            report.artifacts = artifacts
        report.step_metrics.append(GenerationStepMetric(
            "Assemble",
            artifacts is not None,
            t.elapsed,
            f"{len(artifacts or [])} artifact(s)",
        ))
        return artifacts

    def _step_export(
        self,
        entity_name: str,
        artifacts: List[GeneratedArtifact],
        output_dir: Path,
        report: GenerationReport,
    ) -> ExportResult:
        exporter = ArtifactExporter(output_dir, self._config, dry_run=self._dry_run)
        result: ExportResult = exporter.export(entity_name, artifacts)
        report.files = result.files
        report.export_errors.extend(result.errors)
        report.step_metrics.append(GenerationStepMetric(
            "Export",
            result.success,
            result.elapsed_seconds,
            f"{result.total_files} file(s), {result.total_bytes:,} bytes",
        ))
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "GenerationStepMetric",
    "GenerationReport",
    "load_schema_file",
    "load_config_file",
    "parse_document",
    "prepare_entity",
    "assemble",
    "render_entity",
    "ModuleGenerator",
]

logger.debug("luxgen.generator loaded.")
