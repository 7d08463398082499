# File: pothosgen/__init__.py
"""
pothosgen — Pothos GraphQL Code Generator for Prisma
=====================================================

Reads a Prisma schema (text, or the DMMF document Prisma hands to its
generators) and writes a TypeScript tree of Pothos object types, enums,
filter and CRUD input types and resolvers.

Architecture overview::

    ┌──────────────┐     ┌─────────────────┐     ┌──────────────────┐
    │  CLI / RPC   │────▶│ PothosGenerator │────▶│ TemplateGenerator│
    │ (cli/rpc.py) │     │ (generator.py)  │     │  (templates.py)  │
    └──────────────┘     └────────┬────────┘     └──────────────────┘
                                  │
            ┌──────────┬──────────┼───────────┬───────────┐
            ▼          ▼          ▼           ▼           ▼
       ┌────────┐ ┌────────┐ ┌──────────┐ ┌────────┐ ┌───────────┐
       │ parser │ │  dmmf  │ │validators│ │ models │ │ exporters │
       └────────┘ └────────┘ └──────────┘ └────────┘ └───────────┘

Usage::

    # As a library
    from pothosgen import PothosGenerator, parse_schema
    schema = parse_schema(open("prisma/schema.prisma").read())
    PothosGenerator().generate(schema, output_dir=Path("./src/generated"))

    # From the command line
    python -m pothosgen -s prisma/schema.prisma -o ./src/generated -v
"""

from __future__ import annotations

__version__: str = "0.1.0"
__author__: str = "Diegoproggramer"
__license__: str = "MIT"

from pothosgen.models import (
    EnumInfo,
    EnumValueInfo,
    FieldInfo,
    FieldKind,
    FieldType,
    GeneratorConfig,
    ModelInfo,
    ParsedSchema,
    PrimaryKeyInfo,
    RelationInfo,
    ScalarType,
)
from pothosgen.parser import parse_schema, parse_schema_file
from pothosgen.dmmf import export_document, import_document, load_document
from pothosgen.naming import DerivedNames, derive_names
from pothosgen.scanner import ManualResolvers, scan_for_manual_resolvers
from pothosgen.validators import ValidationResult, validate_schema
from pothosgen.templates import TemplateGenerator
from pothosgen.exporters import ExportManifest, ExportResult, ProjectExporter
from pothosgen.generator import GenerationReport, PothosGenerator, load_config
from pothosgen.rpc import run_rpc_loop

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core orchestrator
    "PothosGenerator",
    "GenerationReport",
    "load_config",
    # Models
    "EnumInfo",
    "EnumValueInfo",
    "FieldInfo",
    "FieldKind",
    "FieldType",
    "GeneratorConfig",
    "ModelInfo",
    "ParsedSchema",
    "PrimaryKeyInfo",
    "RelationInfo",
    "ScalarType",
    # Ingestion
    "parse_schema",
    "parse_schema_file",
    "import_document",
    "export_document",
    "load_document",
    # Naming
    "DerivedNames",
    "derive_names",
    # Scanner
    "ManualResolvers",
    "scan_for_manual_resolvers",
    # Validation
    "validate_schema",
    "ValidationResult",
    # Templates
    "TemplateGenerator",
    # Exporters
    "ProjectExporter",
    "ExportManifest",
    "ExportResult",
    # Generator protocol
    "run_rpc_loop",
]
