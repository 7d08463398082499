# File: pothosgen/cli.py
"""
pothosgen - Command-Line Interface
==================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Generate from the default ./prisma/schema.prisma into ./src/generated
    python -m pothosgen

    # Explicit schema and output, verbose
    python -m pothosgen -s prisma/schema.prisma -o ./src/graphql -v

    # Generate from a DMMF document, no manual-resolver scan
    python -m pothosgen -s dmmf.json --no-scan

    # Validate only (no file output)
    python -m pothosgen -s prisma/schema.prisma --validate-only

    # Run as a Prisma generator (JSON-RPC over stdin/stdout)
    python -m pothosgen --prisma-generator

Exit codes:
    0 — success
    1 — validation error
    2 — generation error
    3 — export error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from pothosgen.models import GeneratorConfig

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4

DEFAULT_SCHEMA_PATH: str = "./prisma/schema.prisma"
DEFAULT_OUTPUT_DIR: str = "./src/generated"


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root pothosgen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # stdout stays reserved for reports and JSON-RPC responses
    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("pothosgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from pothosgen import __version__
    from pothosgen.generator import DEFAULT_CONFIG_FILE

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="pothosgen",
        description=(
            "pothosgen — Pothos GraphQL code generator for Prisma.\n\n"
            "Reads a Prisma schema (or a DMMF document) and writes Pothos "
            "object types, inputs, filters and CRUD resolvers in TypeScript."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s prisma/schema.prisma -o ./src/generated\n"
            "  %(prog)s -s dmmf.json --no-scan -v\n"
            "  %(prog)s --validate-only\n"
            "  %(prog)s --prisma-generator\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"pothosgen v{__version__}",
    )

    # --- Input / output ---
    io_group = parser.add_argument_group("input and output")
    io_group.add_argument(
        "-s", "--schema",
        type=str,
        default=DEFAULT_SCHEMA_PATH,
        metavar="PATH",
        help=(
            "Prisma schema file, or a DMMF document (.json/.yaml). "
            f"Default: {DEFAULT_SCHEMA_PATH}"
        ),
    )
    io_group.add_argument(
        "-o", "--output",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        metavar="DIR",
        help=f"Output directory for generated files. Default: {DEFAULT_OUTPUT_DIR}",
    )
    io_group.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        metavar="PATH",
        help=f"Generator config file. Default: {DEFAULT_CONFIG_FILE}",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the schema without generating code.",
    )
    mode_group.add_argument(
        "--prisma-generator",
        action="store_true",
        default=False,
        help="Serve the Prisma generator protocol (JSON-RPC on stdin/stdout).",
    )

    # --- Manual resolvers ---
    scan_group = parser.add_argument_group("manual resolvers")
    scan_group.add_argument(
        "--scan-dir",
        dest="scan_dirs",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory to scan for hand-written resolvers (repeatable).",
    )
    scan_group.add_argument(
        "--no-scan",
        action="store_true",
        default=False,
        help="Do not scan for hand-written resolvers.",
    )

    # --- Behaviour flags ---
    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--no-clean",
        action="store_true",
        default=False,
        help="Keep existing files in the output directory.",
    )
    behaviour_group.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Abort before writing anything on any validation error.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all log output.",
    )

    return parser


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(schema_path: Path) -> int:
    """
    Run validation only (no code generation).

    Returns the appropriate exit code.
    """
    from pothosgen.generator import PothosGenerator
    from pothosgen.utils import Timer
    from pothosgen.validators import validate_schema

    logger.info("Running validation-only mode for: %s", schema_path)

    try:
        schema = PothosGenerator.load_schema(schema_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load schema: %s", exc)
        return EXIT_INPUT_ERROR

    with Timer("validation") as t:
        result = validate_schema(schema)

    print(f"\n{'='*50}")
    print("  Schema Validation Report")
    print(f"{'='*50}")
    print(f"  File:     {schema_path.name}")
    print(f"  Models:   {len(schema.models)}")
    print(f"  Enums:    {len(schema.enums)}")
    print(f"  Time:     {t.elapsed:.3f}s")
    print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

    if len(result):
        print()
        print(result.format_report())
    else:
        print("\n  ✅ All validations passed!")

    print(f"{'='*50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Generator-protocol mode
# ---------------------------------------------------------------------------


def _run_prisma_generator(args: argparse.Namespace) -> int:
    """Serve JSON-RPC requests until stdin closes."""
    from pothosgen.generator import PothosGenerator
    from pothosgen.rpc import GenerationFailedError, run_rpc_loop

    generator = PothosGenerator(strict=args.strict, clean_output=not args.no_clean)
    try:
        run_rpc_loop(sys.stdin, sys.stdout, generator)
    except ValueError as exc:
        logger.error("Protocol error: %s", exc)
        return EXIT_INPUT_ERROR
    except GenerationFailedError as exc:
        return _exit_code_for(exc.report)
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _exit_code_for(report) -> int:
    """Map a finished ``GenerationReport`` to an exit code."""
    if report.success:
        return EXIT_SUCCESS
    if report.input_errors:
        return EXIT_INPUT_ERROR
    if report.export_errors:
        return EXIT_EXPORT_ERROR
    if report.generation_errors:
        return EXIT_GENERATION_ERROR
    if report.validation_errors:
        return EXIT_VALIDATION_ERROR
    return EXIT_GENERATION_ERROR


def _collect_manual_resolvers(config: GeneratorConfig, args: argparse.Namespace):
    """Scan configured directories for hand-written resolvers, if enabled."""
    from pothosgen.scanner import ManualResolvers, scan_for_manual_resolvers

    if args.no_scan or not config.auto_scan:
        logger.info("Manual-resolver scan disabled.")
        return ManualResolvers()

    scan_dirs: List[Path] = [Path(d) for d in list(config.scan_dirs) + args.scan_dirs]
    if not scan_dirs:
        logger.info("No scan directories configured.")
        return ManualResolvers()
    return scan_for_manual_resolvers(scan_dirs)


def _run_generation(
    schema_path: Path,
    output_dir: Path,
    config: GeneratorConfig,
    args: argparse.Namespace,
) -> int:
    """
    Run the full generation pipeline.

    Returns the appropriate exit code.
    """
    from pothosgen.generator import GenerationReport, PothosGenerator

    manual = _collect_manual_resolvers(config, args)

    generator: PothosGenerator = PothosGenerator(
        strict=args.strict,
        clean_output=not args.no_clean,
    )
    report: GenerationReport = generator.generate_from_file(
        schema_path=schema_path,
        output_dir=output_dir,
        manual_resolvers=manual,
    )

    print(report.summary())
    return _exit_code_for(report)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    from pothosgen.generator import load_config

    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    # --- Config ---
    try:
        config: GeneratorConfig = load_config(Path(args.config))
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_INPUT_ERROR)

    if config.verbose and not args.quiet and verbosity < 1:
        _setup_logging(1)

    # --- Generator-protocol mode ---
    if args.prisma_generator:
        sys.exit(_run_prisma_generator(args))

    # --- Schema path ---
    schema_path: Path = Path(args.schema).resolve()

    if not schema_path.exists():
        logger.error("Schema file not found: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if not schema_path.is_file():
        logger.error("Schema path is not a file: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    # --- Validate-only mode ---
    if args.validate_only:
        sys.exit(_run_validate_only(schema_path))

    output_dir: Path = Path(args.output).resolve()

    logger.info("Schema:  %s", schema_path)
    logger.info("Output:  %s", output_dir)
    logger.info("Clean:   %s", not args.no_clean)
    logger.info("Strict:  %s", args.strict)

    exit_code: int = _run_generation(schema_path, output_dir, config, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("pothosgen.cli loaded.")
