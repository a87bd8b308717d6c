"""Per-component results and the aggregated generation report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .models import ComponentModel


class FileChangeStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class FileChangeReason(str, Enum):
    NEW_FILE = "new-file"
    SECTION_UPDATED = "section-updated"
    CONTENT_UPDATED = "content-updated"
    UNCHANGED = "unchanged"


class FileStage(str, Enum):
    """How far a single component file progressed through the pipeline."""

    START = "start"
    SOURCE_RESOLVED = "source-resolved"
    PARSED = "parsed"
    EMITTED = "emitted"
    WRITTEN = "written"
    DONE = "done"


class ReportStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FileChange:
    file_path: str
    status: FileChangeStatus
    reason: FileChangeReason


@dataclass
class ComponentResult:
    """Diagnostics and file changes gathered for one component source file."""

    file_path: str
    component_name: Optional[str] = None
    model: Optional[ComponentModel] = None
    stage: FileStage = FileStage.START
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    file_changes: List[FileChange] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def record(self, change: FileChange) -> None:
        self.file_changes.append(change)
        if change.status is FileChangeStatus.CREATED:
            self.created.append(change.file_path)
        elif change.status is FileChangeStatus.UPDATED:
            self.updated.append(change.file_path)
        else:
            self.unchanged.append(change.file_path)


@dataclass
class GenerationReport:
    status: ReportStatus = ReportStatus.SUCCESS
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    duration_ms: int = 0
    component_results: Optional[List[ComponentResult]] = None


def determine_status(errors: int, warnings: int) -> ReportStatus:
    if errors:
        return ReportStatus.ERROR
    if warnings:
        return ReportStatus.WARNING
    return ReportStatus.SUCCESS


def merge_results(
    results: Iterable[ComponentResult],
    duration_ms: int = 0,
    *,
    warnings: Iterable[str] = (),
    include_components: bool = True,
) -> GenerationReport:
    """Fold component results (plus run-level warnings) into one report."""
    collected = list(results)
    report = GenerationReport(duration_ms=duration_ms, warnings=list(warnings))
    for result in collected:
        report.created.extend(result.created)
        report.updated.extend(result.updated)
        report.unchanged.extend(result.unchanged)
        report.warnings.extend(result.warnings)
        report.errors.extend(result.errors)
    report.status = determine_status(len(report.errors), len(report.warnings))
    if include_components:
        report.component_results = collected
    return report


def format_report_summary(report: GenerationReport) -> str:
    lines = [
        f"Status: {report.status.value}",
        f"Duration: {report.duration_ms}ms",
        f"Created: {len(report.created)}",
        f"Updated: {len(report.updated)}",
        f"Unchanged: {len(report.unchanged)}",
    ]
    if report.warnings:
        lines.append(f"Warnings: {len(report.warnings)}")
    if report.errors:
        lines.append(f"Errors: {len(report.errors)}")
    return "\n".join(lines)


__all__ = [
    "ComponentResult",
    "FileChange",
    "FileChangeReason",
    "FileChangeStatus",
    "FileStage",
    "GenerationReport",
    "ReportStatus",
    "determine_status",
    "format_report_summary",
    "merge_results",
]
