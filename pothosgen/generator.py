# File: pothosgen/generator.py
"""
pothosgen - Master Generation Pipeline (Orchestrator)
=====================================================

Connects every phase together:

    Schema Input → Validation → Template Generation → File Export

The ``PothosGenerator`` class provides both a programmatic API and the
backend for the CLI and the generator-process protocol.

Workflow::

    1. Load a Prisma schema file, or a DMMF document (JSON/YAML).
    2. Ingest into a ``ParsedSchema`` (parser.py / dmmf.py).
    3. Run the validation pipeline (validators.py).
    4. Feed the schema to ``TemplateGenerator`` (templates.py).
    5. Hand the generated files to ``ProjectExporter`` (exporters.py).
    6. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - Input errors (missing or undecodable files) stop the pipeline and are
      recorded on the report.
    - Validation errors are recorded; they stop the pipeline only in strict
      mode.
    - Export errors are recorded per file.
    - The final report gives a clear pass/fail verdict.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import ValidationError as PydanticValidationError

from pothosgen.dmmf import import_document, load_document
from pothosgen.exporters import ExportManifest, ExportResult, ProjectExporter
from pothosgen.models import GeneratorConfig, ParsedSchema
from pothosgen.naming import derive_names
from pothosgen.parser import parse_schema_file
from pothosgen.scanner import ManualResolvers
from pothosgen.templates import RESOLVER_KINDS, TemplateGenerator
from pothosgen.utils import Timer, count_lines
from pothosgen.validators import ValidationResult, validate_schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.generator")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_FILE: str = ".gpothosrc.json"

# Inputs with these suffixes are DMMF documents; anything else is schema text
DOCUMENT_SUFFIXES: FrozenSet[str] = frozenset({".json", ".yaml", ".yml"})


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
    """
    Report produced by every ``PothosGenerator`` entry point.

    Contains timing information, file counts, validation results,
    and any errors/warnings encountered.
    """

    success: bool = False
    source: str = ""
    output_directory: str = ""

    # Metrics
    total_models: int = 0
    total_enums: int = 0
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)
    skipped_resolvers: List[str] = field(default_factory=list)

    # Export manifest reference
    manifest: Optional[ExportManifest] = None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  pothosgen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Source:           {self.source}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Models:           {self.total_models}")
        lines.append(f"  Enums:            {self.total_enums}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        sections = (
            ("Input Errors", self.input_errors, "✗"),
            ("Validation Errors", self.validation_errors, "✗"),
            ("Validation Warnings", self.validation_warnings, "⚠"),
            ("Generation Errors", self.generation_errors, "✗"),
            ("Export Errors", self.export_errors, "✗"),
            ("Skipped Resolvers (hand-written)", self.skipped_resolvers, "⊘"),
        )
        for title, items, icon in sections:
            if not items:
                continue
            lines.append(f"{'─'*60}")
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Configuration loader
# ---------------------------------------------------------------------------


def load_config(path: Optional[Path] = None) -> GeneratorConfig:
    """
    Load generator settings from ``.gpothosrc.json`` (or *path*).

    A missing file yields the defaults.

    Raises:
        ValueError: If the file cannot be read, is not valid JSON, or does
            not describe a valid configuration.
    """
    config_path: Path = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILE)
    if not config_path.exists():
        logger.debug("No config file at %s; using defaults.", config_path)
        return GeneratorConfig()

    try:
        raw: Any = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Invalid config file {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(
            f"Config file {config_path} must contain a JSON object, "
            f"got {type(raw).__name__}."
        )

    try:
        config = GeneratorConfig.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed for {config_path}: {exc}") from exc

    logger.info("Loaded config from %s.", config_path)
    return config


# ---------------------------------------------------------------------------
# PothosGenerator — Master orchestrator
# ---------------------------------------------------------------------------


class PothosGenerator:
    """
    Master pipeline orchestrator.

    Usage::

        generator = PothosGenerator()

        # From a Prisma schema (or a DMMF .json/.yaml document)
        report = generator.generate_from_file(
            schema_path=Path("prisma/schema.prisma"),
            output_dir=Path("./src/generated"),
        )

        # From an already-ingested schema
        report = generator.generate(schema, output_dir=Path("./src/generated"))

        print(report.summary())

    The generator is reusable — create once, call generate() many times.
    """

    def __init__(
        self,
        strict: bool = False,
        clean_output: bool = True,
    ) -> None:
        """
        Args:
            strict: If True, abort before emission on any validation error.
            clean_output: If True, clear the output directory before writing.
        """
        self._strict: bool = strict
        self._clean_output: bool = clean_output

        logger.debug(
            "PothosGenerator initialised: strict=%s, clean=%s.",
            strict,
            clean_output,
        )

    # -----------------------------------------------------------------
    # Public: ingestion
    # -----------------------------------------------------------------

    @staticmethod
    def load_schema(schema_path: Path) -> ParsedSchema:
        """
        Ingest *schema_path*: DMMF documents by extension, schema text otherwise.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file can't be decoded.
        """
        schema_path = Path(schema_path)
        if schema_path.suffix.lower() in DOCUMENT_SUFFIXES:
            return import_document(load_document(schema_path))
        return parse_schema_file(schema_path)

    # -----------------------------------------------------------------
    # Public: generate from file / document
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        schema_path: Path,
        output_dir: Path,
        manual_resolvers: Optional[ManualResolvers] = None,
    ) -> GenerationReport:
        """Full pipeline: load file → validate → generate → export."""
        schema_path = Path(schema_path)
        report = GenerationReport(
            source=str(schema_path),
            output_directory=str(Path(output_dir).resolve()),
        )

        schema: Optional[ParsedSchema] = None
        with Timer("load_schema") as t_load:
            try:
                schema = self.load_schema(schema_path)
            except (FileNotFoundError, ValueError) as exc:
                report.input_errors.append(str(exc))
                logger.error("Could not load %s: %s", schema_path, exc)

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Load Schema",
                success=schema is not None,
                elapsed_seconds=t_load.elapsed,
                detail=(
                    f"from {schema_path.name}"
                    if schema is not None
                    else report.input_errors[-1]
                ),
            )
        )
        if schema is None:
            return self._finalise_report(report, t_load.elapsed)

        return self._run_pipeline(schema, Path(output_dir), manual_resolvers, report)

    def generate_from_document(
        self,
        document: Dict[str, Any],
        output_dir: Path,
        manual_resolvers: Optional[ManualResolvers] = None,
    ) -> GenerationReport:
        """Full pipeline from an in-memory DMMF document."""
        report = GenerationReport(
            source="<dmmf>",
            output_directory=str(Path(output_dir).resolve()),
        )

        schema: Optional[ParsedSchema] = None
        with Timer("import_document") as t_import:
            try:
                schema = import_document(document)
            except ValueError as exc:
                report.input_errors.append(str(exc))
                logger.error("Could not import DMMF document: %s", exc)

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Import Document",
                success=schema is not None,
                elapsed_seconds=t_import.elapsed,
            )
        )
        if schema is None:
            return self._finalise_report(report, t_import.elapsed)

        return self._run_pipeline(schema, Path(output_dir), manual_resolvers, report)

    # -----------------------------------------------------------------
    # Public: generate from an ingested schema
    # -----------------------------------------------------------------

    def generate(
        self,
        schema: ParsedSchema,
        output_dir: Path,
        manual_resolvers: Optional[ManualResolvers] = None,
    ) -> GenerationReport:
        """Full pipeline from a pre-ingested ``ParsedSchema``."""
        report = GenerationReport(
            source="<schema>",
            output_directory=str(Path(output_dir).resolve()),
        )
        return self._run_pipeline(schema, Path(output_dir), manual_resolvers, report)

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        schema: ParsedSchema,
        output_dir: Path,
        manual_resolvers: Optional[ManualResolvers],
        report: GenerationReport,
    ) -> GenerationReport:
        """Execute the core generation pipeline."""
        pipeline_start: float = time.perf_counter()
        manual: ManualResolvers = manual_resolvers or ManualResolvers()

        report.total_models = len(schema.models)
        report.total_enums = len(schema.enums)

        validation_ok: bool = self._step_validate(schema, report)
        if not validation_ok and self._strict:
            logger.error("Strict mode: aborting before emission.")
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        generated_files: Dict[str, str] = self._step_generate(schema, manual, report)
        if not generated_files:
            report.generation_errors.append("No files were generated — aborting export.")
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        self._step_export(generated_files, output_dir, report)

        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(self, schema: ParsedSchema, report: GenerationReport) -> bool:
        """Run the validation pipeline.  Returns True when there are no errors."""
        with Timer("validation") as t:
            result: ValidationResult = validate_schema(schema)

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.errors:
            detail: str = f"{len(result.errors)} error(s)"
        elif result.warnings:
            detail = f"{len(result.warnings)} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Validate Schema",
                success=result.is_valid,
                elapsed_seconds=t.elapsed,
                detail=detail,
            )
        )

        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)
        for err in result.errors:
            logger.error("  ✗ %s", err)

        return result.is_valid

    # -----------------------------------------------------------------
    # Pipeline step: Code generation
    # -----------------------------------------------------------------

    def _step_generate(
        self,
        schema: ParsedSchema,
        manual: ManualResolvers,
        report: GenerationReport,
    ) -> Dict[str, str]:
        """Run the template engine to generate all output files."""
        generated_files: Dict[str, str] = {}

        with Timer("code_generation") as t:
            template_gen = TemplateGenerator(schema)
            generated_files.update(template_gen.generate_all(manual))

            for model in schema.models:
                names = derive_names(model.name)
                for kind, _ in RESOLVER_KINDS:
                    if template_gen.is_resolver_skipped(kind, names, manual):
                        report.skipped_resolvers.append(f"{kind}{model.name}")

        total_lines: int = sum(count_lines(c) for c in generated_files.values())
        detail_str: str = (
            f"{len(generated_files)} files, ~{total_lines:,} lines, "
            f"{len(schema.models)} models"
        )

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Code Generation",
                success=True,
                elapsed_seconds=t.elapsed,
                detail=detail_str,
            )
        )
        logger.info("Code generation complete: %s in %.3fs.", detail_str, t.elapsed)
        return generated_files

    # -----------------------------------------------------------------
    # Pipeline step: Export
    # -----------------------------------------------------------------

    def _step_export(
        self,
        generated_files: Dict[str, str],
        output_dir: Path,
        report: GenerationReport,
    ) -> None:
        """Write all generated files to the filesystem."""
        with Timer("export") as t:
            exporter = ProjectExporter(
                output_dir=output_dir,
                clean_before_export=self._clean_output,
            )
            export_result: ExportResult = exporter.export(generated_files)

        report.total_files = export_result.manifest.total_files
        report.total_bytes = export_result.manifest.total_bytes
        report.total_lines = export_result.manifest.total_lines
        report.export_errors.extend(export_result.errors)
        report.manifest = export_result.manifest

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Export to Filesystem",
                success=export_result.success,
                elapsed_seconds=t.elapsed,
                detail=(
                    f"{export_result.manifest.total_files} files, "
                    f"{export_result.manifest.total_bytes:,} bytes"
                ),
            )
        )

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        """Set final status and timing on the report."""
        report.total_elapsed_seconds = total_elapsed

        blocking_validation: bool = self._strict and bool(report.validation_errors)
        report.success = not (
            report.input_errors
            or report.generation_errors
            or report.export_errors
            or blocking_validation
        )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_CONFIG_FILE",
    "DOCUMENT_SUFFIXES",
    "PothosGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "load_config",
]

logger.debug("pothosgen.generator loaded.")
