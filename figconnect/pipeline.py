"""Batch pipeline: discover, parse, emit and write Code Connect files."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .analysis import Parser, ParserMetadata, ParseContext, SourceTree, create_parser_registry
from .emitters import EmitOptions, Emitter, EmitterMetadata, create_emitter_registry
from .logging import get_logger
from .models import EmitResult
from .postproc.markers import SectionPatcher
from .postproc.writer import WriteResult, WriteStatus, write_file
from .registry import Registry
from .report import (
    ComponentResult,
    FileChange,
    FileChangeReason,
    FileChangeStatus,
    FileStage,
    GenerationReport,
    merge_results,
)
from .scanner import COMPONENT_SUFFIX, DEFAULT_EXCLUDE_DIRS, ComponentScanner, DiscoveredFile
from .storage import FileStorage, Storage


@dataclass
class ConnectOptions:
    """Effective options for one ``connect`` run."""

    input_path: str
    recursive: bool = False
    dry_run: bool = False
    emit_targets: Sequence[str] = ("webcomponent", "react")
    strict: bool = True
    continue_on_error: bool = True
    base_import_path: Optional[str] = None
    force: bool = False
    exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS
    suffix: str = COMPONENT_SUFFIX
    platform_globals: Sequence[str] = ()
    templates_dir: Optional[str] = None
    parser_target: Optional[str] = None


@dataclass
class _WriteOutcome:
    result: WriteResult
    change: FileChange
    warning: Optional[str] = None


def build_file_change(
    status: WriteStatus,
    existed: bool,
    reason: FileChangeReason,
    file_path: str,
) -> FileChange:
    if status is WriteStatus.CREATED:
        return FileChange(file_path, FileChangeStatus.CREATED, FileChangeReason.NEW_FILE)
    if status is WriteStatus.UNCHANGED:
        return FileChange(file_path, FileChangeStatus.UNCHANGED, FileChangeReason.UNCHANGED)
    if not existed:
        return FileChange(file_path, FileChangeStatus.UPDATED, FileChangeReason.NEW_FILE)
    return FileChange(file_path, FileChangeStatus.UPDATED, reason)


@dataclass
class _Batch:
    tree: SourceTree
    parser: Parser
    emitters: List[Emitter]
    options: ConnectOptions
    results: List[ComponentResult] = field(default_factory=list)


class Pipeline:
    """Runs the connect flow over every discovered component file.

    Each file moves through source resolution, parsing, emission and
    writing. Failures are recorded on that file's result; the batch stops
    early only when ``continue_on_error`` is off.
    """

    def __init__(
        self,
        storage: Optional[Storage] = None,
        emitter_registry: Optional[Registry[Emitter, EmitterMetadata]] = None,
        parser_registry: Optional[Registry[Parser, ParserMetadata]] = None,
        scanner: Optional[ComponentScanner] = None,
        patcher: Optional[SectionPatcher] = None,
    ) -> None:
        self.storage = storage or FileStorage()
        self.emitter_registry = emitter_registry or create_emitter_registry()
        self.parser_registry = parser_registry or create_parser_registry()
        self.scanner = scanner
        self.patcher = patcher or SectionPatcher()
        self.logger = get_logger("pipeline")

    def run(self, options: ConnectOptions) -> GenerationReport:
        started = time.monotonic()
        self.logger.info("Discovering component files under %s", options.input_path)
        discovered = self._scanner_for(options).discover(options.input_path, recursive=options.recursive)
        if not discovered:
            warning = f"No component files found at: {options.input_path}"
            self.logger.debug(warning)
            return merge_results([], _elapsed_ms(started), warnings=[warning], include_components=False)
        self.logger.info("Found %d component file(s)", len(discovered))

        batch = _Batch(
            tree=SourceTree(self.storage, platform_globals=options.platform_globals),
            parser=self._create_parser(options),
            emitters=[self.emitter_registry.create(target) for target in options.emit_targets],
            options=options,
        )
        batch.tree.preload(item.file_path for item in discovered)

        run_warnings: List[str] = []
        if not batch.emitters:
            run_warnings.append("No emitters selected. Use --emit to specify targets.")

        for item in discovered:
            result, should_continue = self._process_file(item, batch)
            batch.results.append(result)
            if not should_continue:
                self.logger.warning("Stopping after %s; continue-on-error is disabled", item.relative_path)
                break

        return merge_results(batch.results, _elapsed_ms(started), warnings=run_warnings)

    def _scanner_for(self, options: ConnectOptions) -> ComponentScanner:
        if self.scanner is not None:
            return self.scanner
        return ComponentScanner(self.storage, exclude_dirs=options.exclude_dirs, suffix=options.suffix)

    def _create_parser(self, options: ConnectOptions) -> Parser:
        return self.parser_registry.create(options.parser_target or self.parser_registry.default_target())

    # ------------------------------------------------------------------
    # Per-file stages
    # ------------------------------------------------------------------
    def _process_file(self, item: DiscoveredFile, batch: _Batch) -> Tuple[ComponentResult, bool]:
        options = batch.options
        result = ComponentResult(file_path=item.file_path, component_name=item.component_name)

        module = batch.tree.load(item.file_path)
        if module is None:
            reason = batch.tree.load_error(item.file_path)
            if reason:
                result.errors.append(f"Failed to read source file {item.file_path}: {reason}")
            else:
                result.errors.append(f"Source file not found in program: {item.file_path}")
            return result, options.continue_on_error
        result.stage = FileStage.SOURCE_RESOLVED

        self.logger.debug("Parsing component %s (%s)", item.component_name, item.file_path)
        parsed = batch.parser.parse(
            ParseContext(
                tree=batch.tree,
                module=module,
                file_path=item.file_path,
                component_dir=item.dir_path,
                strict=options.strict,
            )
        )
        result.warnings.extend(parsed.warnings)
        result.errors.extend(parsed.errors)
        if parsed.value is None:
            return result, options.continue_on_error
        result.model = parsed.value
        result.stage = FileStage.PARSED

        emit_options = EmitOptions(
            base_import_path=options.base_import_path,
            dry_run=options.dry_run,
            templates_dir=options.templates_dir,
        )
        emissions = [emitter.emit(parsed.value, emit_options) for emitter in batch.emitters]
        result.stage = FileStage.EMITTED

        for emission in emissions:
            result.warnings.extend(emission.warnings)
            try:
                outcome = self._write_emission(emission, options)
            except (OSError, ValueError) as exc:
                result.errors.append(f"Failed to write {emission.file_path}: {exc}")
                return result, options.continue_on_error
            if outcome.warning:
                result.warnings.append(outcome.warning)
            result.record(outcome.change)
            result.stage = FileStage.WRITTEN
            self.logger.debug(
                "%s: %s (%s)", emission.file_path, outcome.change.status.value, outcome.change.reason.value
            )

        self.logger.debug("Finished %s", item.relative_path)
        result.stage = FileStage.DONE
        return result, True

    def _write_emission(self, emission: EmitResult, options: ConnectOptions) -> _WriteOutcome:
        path = emission.file_path
        exists = self.storage.exists(path)

        if (options.force and exists) or not emission.sections:
            return self._write(path, emission.content, options, exists, FileChangeReason.CONTENT_UPDATED)
        if not exists:
            return self._write(path, emission.content, options, exists, FileChangeReason.NEW_FILE)

        patched = self.patcher.apply(self.storage.read_text(path), emission.sections)
        if patched is None:
            result = WriteResult(path, WriteStatus.UNCHANGED)
            return _WriteOutcome(
                result=result,
                change=build_file_change(result.status, exists, FileChangeReason.SECTION_UPDATED, path),
                warning=(
                    f"Generated section markers not found in {path}. "
                    "Skipping update to preserve manual edits."
                ),
            )
        return self._write(path, patched, options, exists, FileChangeReason.SECTION_UPDATED)

    def _write(
        self,
        path: str,
        content: str,
        options: ConnectOptions,
        exists: bool,
        reason: FileChangeReason,
    ) -> _WriteOutcome:
        result = write_file(self.storage, path, content, dry_run=options.dry_run)
        return _WriteOutcome(result=result, change=build_file_change(result.status, exists, reason, path))


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


__all__ = ["ConnectOptions", "Pipeline", "build_file_change"]
