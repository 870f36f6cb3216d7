# File: luxgen/exporters.py
"""
Lux Generator - Artifact Exporter (File-System Manager)
========================================================

Responsible for:
    1. Mapping each ``GeneratedArtifact`` to its location under the output
       directory (``<root>/<entity>/<path>``).
    2. Writing files atomically (write-to-temp then rename) on a thread
       pool; artifacts never depend on each other.
    3. Returning ``FileRecord``s with checksums so regeneration can be
       compared byte for byte.

Regeneration is a full overwrite: whatever the module directories held
before is replaced file by file.  With ``overwrite_existing`` disabled the
exporter refuses to touch an entity whose module directory already exists.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from luxgen.models import ArtifactRoot, GeneratedArtifact, GenerationConfig
from luxgen.utils import Timer, count_lines, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportResult:
    """Outcome of one ``ArtifactExporter.export`` call."""

    success: bool = False
    entity_name: str = ""
    dry_run: bool = False
    files: List[FileRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)

    def checksums(self) -> Dict[str, str]:
        """relative path → sha256, for comparing two exports."""
        return {f.relative_path: f.sha256 for f in self.files}


# ---------------------------------------------------------------------------
# ArtifactExporter
# ---------------------------------------------------------------------------


class ArtifactExporter:
    """
    Writes the artifacts of one entity under an output directory.

    Usage::

        exporter = ArtifactExporter(Path("./project"), config)
        result = exporter.export("book", artifacts)
        if not result.success:
            print(result.errors)
    """

    def __init__(
        self,
        output_dir: Path,
        config: GenerationConfig,
        *,
        dry_run: bool = False,
    ) -> None:
        self._output_dir: Path = output_dir.resolve()
        self._config: GenerationConfig = config
        self._dry_run: bool = dry_run
        logger.debug(
            "ArtifactExporter initialised: output=%s, dry_run=%s, workers=%d.",
            self._output_dir,
            dry_run,
            config.max_workers,
        )

    # -----------------------------------------------------------------
    # Paths
    # -----------------------------------------------------------------

    def module_root(self, root: ArtifactRoot, entity_name: str) -> Path:
        base: str = (
            self._config.frontend_root
            if root == ArtifactRoot.FRONTEND
            else self._config.backend_root
        )
        return self._output_dir / base / entity_name

    def relative_path(self, artifact: GeneratedArtifact, entity_name: str) -> str:
        base: str = (
            self._config.frontend_root
            if artifact.root == ArtifactRoot.FRONTEND
            else self._config.backend_root
        )
        return f"{base}/{entity_name}/{artifact.path}"

    def target_path(self, artifact: GeneratedArtifact, entity_name: str) -> Path:
        return self._output_dir / self.relative_path(artifact, entity_name)

    # -----------------------------------------------------------------
    # Public: export
    # -----------------------------------------------------------------

    def export(
        self,
        entity_name: str,
        artifacts: Sequence[GeneratedArtifact],
    ) -> ExportResult:
        """
        Write every artifact of *entity_name*.

        Returns:
            ExportResult with one FileRecord per artifact, in artifact order.
        """
        result = ExportResult(entity_name=entity_name, dry_run=self._dry_run)

        with Timer(f"export {entity_name}") as timer:
            conflicts: List[str] = self._existing_module_roots(entity_name, artifacts)
            if conflicts and not self._config.overwrite_existing:
                for path in conflicts:
                    result.errors.append(
                        f"Module directory already exists and overwriting is disabled: {path}"
                    )
            elif self._dry_run:
                result.files = [self._describe(a, entity_name) for a in artifacts]
            else:
                result.files, write_errors = self._write_all(entity_name, artifacts)
                result.errors.extend(write_errors)

        result.elapsed_seconds = timer.elapsed
        result.success = not result.errors

        if result.success:
            logger.info(
                "Exported '%s': %d files, %d bytes, %.3fs%s.",
                entity_name,
                result.total_files,
                result.total_bytes,
                timer.elapsed,
                " (dry run)" if self._dry_run else "",
            )
        else:
            logger.error(
                "Export of '%s' finished with %d error(s).",
                entity_name,
                len(result.errors),
            )
        return result

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    def _existing_module_roots(
        self,
        entity_name: str,
        artifacts: Sequence[GeneratedArtifact],
    ) -> List[str]:
        roots: Dict[ArtifactRoot, None] = dict.fromkeys(a.root for a in artifacts)
        return [
            str(self.module_root(root, entity_name))
            for root in roots
            if self.module_root(root, entity_name).exists()
        ]

    def _describe(self, artifact: GeneratedArtifact, entity_name: str) -> FileRecord:
        content: str = artifact.content
        return FileRecord(
            relative_path=self.relative_path(artifact, entity_name),
            absolute_path=str(self.target_path(artifact, entity_name)),
            size_bytes=len(content.encode("utf-8")),
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )

    def _write_one(self, artifact: GeneratedArtifact, entity_name: str) -> FileRecord:
        target: Path = self.target_path(artifact, entity_name)
        write_file(target, artifact.content)
        record: FileRecord = self._describe(artifact, entity_name)
        logger.debug(
            "Wrote file: %s (%d bytes, %d lines).",
            record.relative_path,
            record.size_bytes,
            record.line_count,
        )
        return record

    def _write_all(
        self,
        entity_name: str,
        artifacts: Sequence[GeneratedArtifact],
    ) -> Tuple[List[FileRecord], List[str]]:
        records: Dict[int, FileRecord] = {}
        errors: List[str] = []
        workers: int = max(1, min(self._config.max_workers, len(artifacts)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: Dict[Future[FileRecord], Tuple[int, GeneratedArtifact]] = {
                executor.submit(self._write_one, artifact, entity_name): (index, artifact)
                for index, artifact in enumerate(artifacts)
            }
            for future in as_completed(futures):
                index, artifact = futures[future]
                try:
                    records[index] = future.result()
                except OSError as exc:
                    message: str = (
                        f"Failed to write {self.relative_path(artifact, entity_name)}: "
                        f"{type(exc).__name__}: {exc}"
                    )
                    errors.append(message)
                    logger.error(message)

        ordered: List[FileRecord] = [records[i] for i in sorted(records)]
        return ordered, sorted(errors)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FileRecord",
    "ExportResult",
    "ArtifactExporter",
]

logger.debug("luxgen.exporters loaded.")
