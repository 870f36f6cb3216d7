# File: luxgen/cli.py
"""
Lux Generator - Command-Line Interface
========================================

Built on the standard-library ``argparse`` module.

Usage examples::

    # Generate one entity into the current project
    python -m luxgen --schema book.json --output .

    # Several entities at once, four writer threads
    python -m luxgen -s book.json -s author.yaml -o ./project --workers 4

    # Backend only, custom admin role
    python -m luxgen -s book.json -o ./project --backend-only --admin-role OWNER

    # Validate only (no file output)
    python -m luxgen -s book.json --validate-only

Exit codes:
    0 - success
    1 - validation error
    2 - generation error
    3 - export error
    4 - input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``luxgen`` logger.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root_logger: logging.Logger = logging.getLogger("luxgen")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from luxgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="luxgen",
        description=(
            "Lux Generator: CRUD module scaffolding.\n\n"
            "Turns an entity schema (JSON/YAML) into a Vue dashboard module "
            "and an Express + mongoose API module."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s book.json -o .\n"
            "  %(prog)s -s book.json -s author.yaml -o ./project --workers 4\n"
            "  %(prog)s -s book.json --validate-only\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Lux Generator v{__version__}",
    )

    parser.add_argument(
        "-s", "--schema",
        dest="schemas",
        action="append",
        required=True,
        metavar="PATH",
        help="Schema document (JSON or YAML). Repeat for several entities.",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Project root to write into. Required unless --validate-only is set.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Generation settings file (JSON or YAML). Flags below override it.",
    )

    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the schema documents.",
    )
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Run the whole pipeline but write nothing.",
    )
    sides = mode_group.add_mutually_exclusive_group()
    sides.add_argument(
        "--frontend-only",
        action="store_true",
        default=False,
        help="Emit only the dashboard module.",
    )
    sides.add_argument(
        "--backend-only",
        action="store_true",
        default=False,
        help="Emit only the API module.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--frontend-root",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory holding dashboard modules (relative to --output).",
    )
    config_group.add_argument(
        "--backend-root",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory holding API modules (relative to --output).",
    )
    config_group.add_argument(
        "--admin-role",
        type=str,
        default=None,
        metavar="ROLE",
        help="Role required by the mutating routes.",
    )
    config_group.add_argument(
        "--token-key",
        type=str,
        default=None,
        metavar="KEY",
        help="localStorage key the client reads the bearer token from.",
    )
    config_group.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help="Thread pool size for batch generation and file writes.",
    )

    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--no-overwrite",
        action="store_true",
        default=False,
        help="Refuse to touch module directories that already exist.",
    )
    behaviour_group.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=False,
        help="Treat validation warnings as errors.",
    )

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
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.frontend_only:
        overrides["generate_backend"] = False
    if args.backend_only:
        overrides["generate_frontend"] = False

    if args.frontend_root is not None:
        overrides["frontend_root"] = args.frontend_root
    if args.backend_root is not None:
        overrides["backend_root"] = args.backend_root
    if args.admin_role is not None:
        overrides["admin_role"] = args.admin_role
    if args.token_key is not None:
        overrides["token_storage_key"] = args.token_key
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.no_overwrite:
        overrides["overwrite_existing"] = False

    return overrides


def _resolve_config(args: argparse.Namespace):
    """
    Build the ``GenerationConfig`` from ``--config`` plus flag overrides.

    Raises:
        ValueError: bad config file or out-of-range override.
        FileNotFoundError: ``--config`` points nowhere.
    """
    from luxgen.generator import load_config_file
    from luxgen.models import GenerationConfig

    overrides: Dict[str, Any] = _build_config_overrides(args)
    if args.config is not None:
        return load_config_file(Path(args.config).resolve(), overrides)
    try:
        return GenerationConfig(**overrides)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid option: {exc}") from exc


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(schema_paths: Sequence[Path]) -> int:
    """Validate every document and print one report per file."""
    from luxgen.errors import SchemaRejected
    from luxgen.generator import load_schema_file, parse_document
    from luxgen.utils import Timer
    from luxgen.validators import ValidationResult, validate_document

    exit_code: int = EXIT_SUCCESS

    for schema_path in schema_paths:
        logger.info("Validating: %s", schema_path)
        try:
            document = parse_document(load_schema_file(schema_path))
        except (FileNotFoundError, ValueError) as exc:
            if isinstance(exc, SchemaRejected):
                print(f"  ✗ {schema_path.name}: {exc}")
                exit_code = max(exit_code, EXIT_VALIDATION_ERROR)
            else:
                logger.error("Failed to load schema: %s", exc)
                exit_code = EXIT_INPUT_ERROR
            continue

        with Timer("validation") as t:
            result: ValidationResult = validate_document(document)

        print(f"\n{'=' * 50}")
        print("  Schema Validation Report")
        print(f"{'=' * 50}")
        print(f"  File:     {schema_path.name}")
        print(f"  Entity:   {document.name}")
        print(f"  Fields:   {document.field_count}")
        print(f"  Time:     {t.elapsed:.3f}s")
        print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

        if result.errors:
            print(f"\n  Errors ({len(result.errors)}):")
            for err in result.errors:
                print(f"    ✗ {err}")
        if result.warnings:
            print(f"\n  Warnings ({len(result.warnings)}):")
            for warn in result.warnings:
                print(f"    ⚠ {warn}")
        if result.is_valid and not result.warnings:
            print("\n  ✅ All validations passed!")
        print(f"{'=' * 50}\n")

        if not result.is_valid and exit_code != EXIT_INPUT_ERROR:
            exit_code = EXIT_VALIDATION_ERROR

    return exit_code


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _exit_code_for(reports) -> int:
    """Worst outcome across all reports, by the order of the exit codes."""
    code: int = EXIT_SUCCESS
    for report in reports:
        if report.success:
            continue
        if report.input_errors:
            code = max(code, EXIT_INPUT_ERROR)
        elif report.validation_errors:
            code = max(code, EXIT_VALIDATION_ERROR)
        elif report.export_errors:
            code = max(code, EXIT_EXPORT_ERROR)
        else:
            code = max(code, EXIT_GENERATION_ERROR)
    return code


def _run_generation(
    schema_paths: Sequence[Path],
    output_dir: Path,
    args: argparse.Namespace,
    config,
) -> int:
    """Run the full pipeline for every schema file and print the summaries."""
    from luxgen.generator import GenerationReport, ModuleGenerator

    generator = ModuleGenerator(
        config,
        dry_run=args.dry_run,
        fail_on_warnings=args.fail_on_warnings,
    )
    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    reports: List[GenerationReport] = generator.generate_many(schema_paths, output_dir)
    for report in reports:
        print(report.summary())

    return _exit_code_for(reports)


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
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    schema_paths: List[Path] = [Path(p).resolve() for p in args.schemas]
    for schema_path in schema_paths:
        if not schema_path.is_file():
            logger.error("Schema file not found: %s", schema_path)
            sys.exit(EXIT_INPUT_ERROR)

    if args.validate_only:
        sys.exit(_run_validate_only(schema_paths))

    if args.output is None:
        logger.error(
            "Output directory is required for generation. "
            "Use -o/--output or --validate-only."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(EXIT_INPUT_ERROR)

    output_dir: Path = Path(args.output).resolve()
    logger.info("Schemas: %s", ", ".join(str(p) for p in schema_paths))
    logger.info("Output:  %s", output_dir)
    logger.info(
        "Emit:    frontend=%s backend=%s",
        config.generate_frontend,
        config.generate_backend,
    )

    exit_code: int = _run_generation(schema_paths, output_dir, args, config)

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

logger.debug("luxgen.cli loaded.")
