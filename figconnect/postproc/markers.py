"""Managed marker utilities for generated Code Connect sections."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..models import GeneratedSection, SectionMarkers, SectionName

CRLF = "\r\n"
LF = "\n"
GENERATED_MARKERS = SectionMarkers(start="// BEGIN GENERATED", end="// END GENERATED")

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def default_markers(name: Union[SectionName, str, None] = None) -> SectionMarkers:
    """Return the marker pair for a named section, or the bare pair."""
    if name is None:
        return GENERATED_MARKERS
    key = name.value if isinstance(name, SectionName) else name
    return SectionMarkers(
        start=f"{GENERATED_MARKERS.start}: {key}",
        end=f"{GENERATED_MARKERS.end}: {key}",
    )


def markers_for(section: GeneratedSection) -> SectionMarkers:
    if section.markers is not None:
        return section.markers
    return default_markers(section.name)


def detect_line_ending(text: str) -> str:
    return CRLF if CRLF in text else LF


def normalize_line_endings(text: str, line_ending: str) -> str:
    return _LINE_BREAKS.sub(line_ending, text)


@dataclass(frozen=True)
class SectionRange:
    """Offsets of a marker-delimited region inside a document."""

    start_line_start: int
    inner_start: int
    inner_end: int
    end_line_end: int
    indent: str


def find_section_range(text: str, markers: SectionMarkers) -> Optional[SectionRange]:
    """Locate ``markers`` as whole lines; surrounding whitespace is ignored."""
    offset = 0
    start: Optional[tuple[int, int, str]] = None
    for line in text.splitlines(keepends=True):
        stripped = line.strip()
        if start is None:
            if stripped == markers.start:
                indent = line[: len(line) - len(line.lstrip())]
                start = (offset, offset + len(line), indent)
        elif stripped == markers.end:
            start_line_start, inner_start, indent = start
            return SectionRange(
                start_line_start=start_line_start,
                inner_start=inner_start,
                inner_end=offset,
                end_line_end=offset + len(line),
                indent=indent,
            )
        offset += len(line)
    return None


def build_section_block(
    content: str,
    markers: SectionMarkers,
    indent: str = "",
    line_ending: str = LF,
) -> str:
    """Render ``content`` between its markers, every line prefixed by ``indent``."""
    normalized = normalize_line_endings(content, line_ending).rstrip()
    lines = normalized.split(line_ending) if normalized else []
    block = [f"{indent}{markers.start}", *(f"{indent}{line}" for line in lines), f"{indent}{markers.end}"]
    return line_ending.join(block) + line_ending


class SectionPatcher:
    """Applies generated sections onto existing text, idempotently."""

    def has_section(self, text: str, markers: SectionMarkers) -> bool:
        return find_section_range(text, markers) is not None

    def extract(self, text: str, markers: SectionMarkers) -> Optional[str]:
        """Return the current body of a section without its markers."""
        found = find_section_range(text, markers)
        if found is None:
            return None
        return text[found.inner_start : found.inner_end].rstrip()

    def replace(self, text: str, content: str, markers: SectionMarkers) -> Optional[str]:
        found = find_section_range(text, markers)
        if found is None:
            return None
        block = build_section_block(content, markers, found.indent, detect_line_ending(text))
        return f"{text[: found.start_line_start]}{block}{text[found.end_line_end :]}"

    def apply(self, existing: str, sections: Sequence[GeneratedSection]) -> Optional[str]:
        """Replace every section in ``existing``.

        Returns ``None`` when there is nothing to apply or when any section's
        marker pair is missing; no partial update is ever produced.
        """
        if not sections:
            return None
        resolved: List[tuple[GeneratedSection, SectionMarkers]] = [
            (section, markers_for(section)) for section in sections
        ]
        if not all(self.has_section(existing, markers) for _, markers in resolved):
            return None

        updated = existing
        for section, markers in resolved:
            replaced = self.replace(updated, section.content, markers)
            if replaced is None:
                return None
            updated = replaced
        return updated


__all__ = [
    "GENERATED_MARKERS",
    "SectionPatcher",
    "SectionRange",
    "build_section_block",
    "default_markers",
    "detect_line_ending",
    "find_section_range",
    "markers_for",
    "normalize_line_endings",
]
