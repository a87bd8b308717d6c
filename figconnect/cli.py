"""CLI entrypoints for figconnect commands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .analysis import create_parser_registry
from .config import ConfigError, FigConnectConfig, load_config
from .emitters import create_emitter_registry
from .logging import configure_logging, get_logger
from .pipeline import ConnectOptions, Pipeline
from .registry import format_target_options, parse_emit_targets
from .report import GenerationReport, ReportStatus, format_report_summary

DEFAULT_EMIT = "all"


def _add_connect_parser(subparsers: argparse._SubParsersAction, targets: List[str]) -> None:
    connect_parser = subparsers.add_parser(
        "connect",
        help="Generate or update Figma Code Connect files for components.",
    )
    connect_parser.add_argument(
        "-p",
        "--path",
        required=True,
        help="Component file or directory to scan.",
    )
    connect_parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        default=None,
        help="Scan subdirectories for component files.",
    )
    connect_parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Run the full pipeline without writing any files.",
    )
    connect_parser.add_argument(
        "-e",
        "--emit",
        default=None,
        help=f"Comma separated emit targets ({format_target_options(targets)}).",
    )
    connect_parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Treat unresolved base classes as errors (default: on).",
    )
    connect_parser.add_argument(
        "--continue-on-error",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep processing remaining files after a failure (default: on).",
    )
    connect_parser.add_argument(
        "--base-import-path",
        default=None,
        help="Package path used for generated component imports.",
    )
    connect_parser.add_argument(
        "--force",
        action="store_true",
        default=None,
        help="Rewrite existing Code Connect files instead of patching generated sections.",
    )


def _build_parser(targets: List[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figconnect",
        description="Generate Figma Code Connect files from web component sources.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a .figconnect.yml file (defaults to one next to --path).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_connect_parser(subparsers, targets)
    return parser


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def _load_config(args: argparse.Namespace, input_path: str) -> FigConnectConfig:
    if args.config:
        config_path = Path(args.config).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {args.config}")
        if not config_path.is_file():
            raise FileNotFoundError(f"Config path is not a file: {args.config}")
        return load_config(config_path)
    return load_config(Path(input_path))


def build_connect_options(
    args: argparse.Namespace,
    config: FigConnectConfig,
    targets: List[str],
) -> ConnectOptions:
    """Merge CLI flags over config values over built-in defaults."""
    if not args.path or not args.path.strip():
        raise ValueError("Missing required value for --path.")
    input_path = os.path.abspath(args.path)
    if not os.path.exists(input_path):
        raise FileNotFoundError(f"Path not found: {args.path}")

    connect = config.connect
    emit_targets = parse_emit_targets(_first(args.emit, connect.emit, DEFAULT_EMIT), targets)
    return ConnectOptions(
        input_path=input_path,
        recursive=bool(_first(args.recursive, connect.recursive, False)),
        dry_run=bool(args.dry_run),
        emit_targets=emit_targets,
        strict=bool(_first(args.strict, connect.strict, True)),
        continue_on_error=bool(_first(args.continue_on_error, connect.continue_on_error, True)),
        base_import_path=_first(args.base_import_path, connect.base_import_path),
        force=bool(_first(args.force, connect.force, False)),
        exclude_dirs=tuple(config.discovery.exclude_dirs),
        suffix=config.discovery.suffix,
        platform_globals=tuple(config.analysis.platform_globals),
        templates_dir=str(config.templates_dir) if config.templates_dir else None,
    )


def log_report(logger: logging.Logger, report: GenerationReport, *, dry_run: bool) -> None:
    logger.info("")
    logger.info("=== Generation Summary ===")
    for line in format_report_summary(report).splitlines():
        logger.info(line)

    if dry_run and report.component_results:
        logger.info("")
        logger.info("=== Dry Run Details ===")
        for component in report.component_results:
            name = component.component_name or (component.model.class_name if component.model else None)
            logger.info(
                "%s: created %d, updated %d, unchanged %d",
                name or "UnknownComponent",
                len(component.created),
                len(component.updated),
                len(component.unchanged),
            )
            for change in component.file_changes:
                logger.info("  - %s: %s (%s)", _relativize(change.file_path), change.status.value, change.reason.value)

    if report.warnings:
        logger.warning("Warnings: %d", len(report.warnings))
        for warning in report.warnings:
            logger.warning("  - %s", warning)
    if report.errors:
        logger.error("Errors: %d", len(report.errors))
        for error in report.errors:
            logger.error("  - %s", error)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for figconnect commands."""
    emitter_registry = create_emitter_registry()
    targets = emitter_registry.targets()
    parser = _build_parser(targets)
    args = parser.parse_args(argv)

    if args.verbose and args.quiet:
        parser.exit(1, "Cannot use --verbose and --quiet together.\n")
    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    try:
        config = _load_config(args, args.path)
        options = build_connect_options(args, config, targets)
    except (ValueError, ConfigError, FileNotFoundError) as exc:
        parser.exit(1, f"{exc}\n")

    logger.debug(
        "Resolved options: path=%s recursive=%s emit=%s strict=%s continue_on_error=%s force=%s",
        options.input_path,
        options.recursive,
        ",".join(options.emit_targets),
        options.strict,
        options.continue_on_error,
        options.force,
    )
    if options.dry_run:
        logger.info("Dry run enabled. No files will be written.")
    if options.force:
        logger.info("Force enabled. Connect files will be fully rewritten.")

    pipeline = Pipeline(
        emitter_registry=emitter_registry,
        parser_registry=create_parser_registry(config.analysis.annotations),
    )
    report = pipeline.run(options)
    log_report(logger, report, dry_run=options.dry_run)

    if report.status is ReportStatus.ERROR:
        sys.exit(1)


def _relativize(path: str) -> str:
    try:
        return str(Path(path).relative_to(Path.cwd()))
    except ValueError:
        return path


if __name__ == "__main__":
    main(sys.argv[1:])
