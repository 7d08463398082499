# File: pothosgen/exporters.py
"""
pothosgen - Output Exporter (File-System Manager)
=================================================

Responsible for:
    1. Clearing the previous output tree (optional).
    2. Creating the output directory layout.
    3. Writing generated TypeScript files atomically (write-to-temp then rename).
    4. Producing an export manifest with checksums.

A failed write is recorded on the result and the remaining files are still
written; each individual file is atomic.

Complexity: O(F) where F = total number of output files.
"""

from __future__ import annotations

import json
import logging
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from pothosgen.utils import Timer, count_lines, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.exporters")


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
class ExportManifest:
    """Every file written by one export run."""

    output_directory: str = ""
    generator_version: str = ""
    export_timestamp: str = ""
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert manifest to a JSON-serialisable dictionary."""
        return {
            "output_directory": self.output_directory,
            "generator_version": self.generator_version,
            "export_timestamp": self.export_timestamp,
            "total_files": self.total_files,
            "total_bytes": self.total_bytes,
            "total_lines": self.total_lines,
            "files": [
                {
                    "relative_path": f.relative_path,
                    "size_bytes": f.size_bytes,
                    "line_count": f.line_count,
                    "sha256": f.sha256,
                }
                for f in self.files
            ],
        }

    def to_json(self, indent_size: int = 2) -> str:
        """Serialise manifest to pretty-printed JSON."""
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Result returned by ``ProjectExporter.export()``."""

    success: bool
    manifest: ExportManifest
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# Directory layout
# ---------------------------------------------------------------------------

OUTPUT_DIRECTORIES: Tuple[str, ...] = (
    "",
    "models",
    "enums",
    "inputs",
    "resolvers",
)

# Entries never removed when clearing the output directory
_PRESERVED_NAMES: Tuple[str, ...] = (".git", ".gitignore", ".gitkeep")


# ---------------------------------------------------------------------------
# ProjectExporter class
# ---------------------------------------------------------------------------


class ProjectExporter:
    """
    Writes generated files under one output directory.

    Usage::

        exporter = ProjectExporter(Path("./src/generated"))
        result = exporter.export(generated_files)
        print(result.manifest.to_json())

    Thread-safety: NOT thread-safe.  Use one exporter per output directory.
    """

    def __init__(
        self,
        output_dir: Path,
        clean_before_export: bool = True,
    ) -> None:
        self._output_dir: Path = Path(output_dir).resolve()
        self._clean_before_export: bool = clean_before_export

        self._errors: List[str] = []
        self._warnings: List[str] = []
        self._file_records: List[FileRecord] = []

        logger.debug(
            "ProjectExporter initialised: output_dir=%s, clean=%s.",
            self._output_dir,
            self._clean_before_export,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(self, generated_files: Dict[str, str]) -> ExportResult:
        """
        Export all generated files to the filesystem.

        Args:
            generated_files: Mapping of relative_path → file_content.

        Returns:
            ExportResult with success flag, manifest, and error details.
        """
        self._errors = []
        self._warnings = []
        self._file_records = []

        with Timer("export") as timer:
            try:
                self._pre_export_cleanup()
                self._create_directory_structure()
                self._write_generated_files(generated_files)
            except OSError as exc:
                error_msg: str = f"Fatal export error: {type(exc).__name__}: {exc}"
                self._errors.append(error_msg)
                logger.error(error_msg, exc_info=True)

        manifest: ExportManifest = self._build_manifest()
        success: bool = len(self._errors) == 0

        result = ExportResult(
            success=success,
            manifest=manifest,
            errors=tuple(self._errors),
            warnings=tuple(self._warnings),
            elapsed_seconds=timer.elapsed,
        )

        if success:
            logger.info(
                "Export completed successfully: %d files, %d bytes, %.3fs.",
                manifest.total_files,
                manifest.total_bytes,
                timer.elapsed,
            )
        else:
            logger.error(
                "Export completed with %d error(s) in %.3fs.",
                len(self._errors),
                timer.elapsed,
            )

        return result

    # -----------------------------------------------------------------
    # Internal: directory management
    # -----------------------------------------------------------------

    def _pre_export_cleanup(self) -> None:
        """Clear the output directory if configured to do so."""
        if not self._clean_before_export or not self._output_dir.exists():
            return

        logger.info("Cleaning output directory: %s", self._output_dir)
        for item in self._output_dir.iterdir():
            if item.name in _PRESERVED_NAMES:
                continue
            try:
                if item.is_dir():
                    shutil.rmtree(item)
                else:
                    item.unlink()
            except OSError as exc:
                warning_msg: str = f"Could not remove {item}: {exc}"
                self._warnings.append(warning_msg)
                logger.warning(warning_msg)

    def _create_directory_structure(self) -> None:
        """Create the output root and its sub-directories."""
        for rel_dir in OUTPUT_DIRECTORIES:
            dir_path: Path = self._output_dir / rel_dir if rel_dir else self._output_dir
            try:
                dir_path.mkdir(parents=True, exist_ok=True)
                logger.debug("Created directory: %s", dir_path)
            except OSError as exc:
                error_msg: str = f"Failed to create directory {dir_path}: {exc}"
                self._errors.append(error_msg)
                logger.error(error_msg)

    # -----------------------------------------------------------------
    # Internal: file writing
    # -----------------------------------------------------------------

    def _write_generated_files(self, generated_files: Dict[str, str]) -> None:
        """Write all generated files, recording failures per file."""
        for rel_path, content in generated_files.items():
            full_path: Path = self._output_dir / rel_path
            try:
                write_file(full_path, content, atomic=True)
            except OSError as exc:
                error_msg: str = (
                    f"Failed to write {rel_path}: {type(exc).__name__}: {exc}"
                )
                self._errors.append(error_msg)
                logger.error(error_msg)
                continue

            self._file_records.append(
                FileRecord(
                    relative_path=rel_path,
                    absolute_path=str(full_path),
                    size_bytes=len(content.encode("utf-8")),
                    line_count=count_lines(content),
                    sha256=sha256_hex(content),
                )
            )

        logger.info(
            "Wrote %d generated files to %s.",
            len(self._file_records),
            self._output_dir,
        )

    # -----------------------------------------------------------------
    # Internal: manifest
    # -----------------------------------------------------------------

    def _build_manifest(self) -> ExportManifest:
        """Build the export manifest from collected file records."""
        import pothosgen

        return ExportManifest(
            output_directory=str(self._output_dir),
            generator_version=pothosgen.__version__,
            export_timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
            total_files=len(self._file_records),
            total_bytes=sum(r.size_bytes for r in self._file_records),
            total_lines=sum(r.line_count for r in self._file_records),
            files=list(self._file_records),
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "OUTPUT_DIRECTORIES",
    "ProjectExporter",
    "ExportManifest",
    "ExportResult",
    "FileRecord",
]

logger.debug("pothosgen.exporters loaded.")
