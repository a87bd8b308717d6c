"""Tests for generated section patching and file writes."""

from __future__ import annotations

from figconnect.models import GeneratedSection, SectionMarkers, SectionName
from figconnect.postproc.markers import (
    SectionPatcher,
    build_section_block,
    default_markers,
    detect_line_ending,
)
from figconnect.postproc.writer import WriteStatus, write_file
from figconnect.storage import MemoryStorage

EXISTING = (
    "import figma from '@figma/code-connect';\n"
    "\n"
    "// hand-written helper\n"
    "figma.connect('<FIGMA_BUTTON_URL>', {\n"
    "  // BEGIN GENERATED: props\n"
    "  props: {},\n"
    "  // END GENERATED: props\n"
    "  variant: { hand: 'written' },\n"
    "  // BEGIN GENERATED: example\n"
    "  example: () => null,\n"
    "  // END GENERATED: example\n"
    "});\n"
)

SECTIONS = [
    GeneratedSection(
        content="props: {\n  open: figma.boolean('Open'),\n},",
        name=SectionName.PROPS,
        markers=default_markers(SectionName.PROPS),
    ),
    GeneratedSection(content="example: props => html`<x-a></x-a>`,", name=SectionName.EXAMPLE),
]


def test_default_markers() -> None:
    assert default_markers() == SectionMarkers("// BEGIN GENERATED", "// END GENERATED")
    assert default_markers(SectionName.PROPS) == SectionMarkers(
        "// BEGIN GENERATED: props", "// END GENERATED: props"
    )


def test_apply_replaces_sections_and_keeps_manual_code() -> None:
    updated = SectionPatcher().apply(EXISTING, SECTIONS)
    assert updated is not None
    assert "  props: {\n    open: figma.boolean('Open'),\n  },\n" in updated
    assert "  example: props => html`<x-a></x-a>`,\n" in updated
    assert "// hand-written helper\n" in updated
    assert "  variant: { hand: 'written' },\n" in updated
    assert updated.count("// BEGIN GENERATED: props") == 1
    assert updated.count("// END GENERATED: example") == 1


def test_apply_is_idempotent() -> None:
    patcher = SectionPatcher()
    once = patcher.apply(EXISTING, SECTIONS)
    assert once is not None
    assert patcher.apply(once, SECTIONS) == once


def test_missing_marker_pair_aborts_whole_patch() -> None:
    without_example = EXISTING.replace("  // END GENERATED: example\n", "")
    assert SectionPatcher().apply(without_example, SECTIONS) is None
    assert SectionPatcher().apply(EXISTING, []) is None


def test_crlf_documents_stay_crlf() -> None:
    crlf = EXISTING.replace("\n", "\r\n")
    assert detect_line_ending(crlf) == "\r\n"
    updated = SectionPatcher().apply(crlf, SECTIONS)
    assert updated is not None
    assert "\n" not in updated.replace("\r\n", "")
    assert "    open: figma.boolean('Open'),\r\n" in updated


def test_markers_must_occupy_whole_lines() -> None:
    inline = EXISTING.replace(
        "  // BEGIN GENERATED: props\n", "  const note = '// BEGIN GENERATED: props';\n"
    )
    assert SectionPatcher().apply(inline, SECTIONS) is None


def test_captured_indentation_is_reused() -> None:
    text = "a\n      // BEGIN GENERATED: props\nold\n// END GENERATED: props\nz\n"
    updated = SectionPatcher().replace(text, "one\ntwo", default_markers(SectionName.PROPS))
    assert updated == (
        "a\n"
        "      // BEGIN GENERATED: props\n"
        "      one\n"
        "      two\n"
        "      // END GENERATED: props\n"
        "z\n"
    )


def test_extract_returns_section_body() -> None:
    patcher = SectionPatcher()
    assert patcher.extract(EXISTING, default_markers(SectionName.PROPS)) == "  props: {},"
    assert patcher.extract(EXISTING, default_markers("missing")) is None


def test_build_section_block_trims_trailing_whitespace() -> None:
    block = build_section_block("x\n\n", default_markers(), indent="  ")
    assert block == "  // BEGIN GENERATED\n  x\n  // END GENERATED\n"


def test_write_file_statuses_and_dry_run() -> None:
    storage = MemoryStorage()
    assert write_file(storage, "/out/a.ts", "one", dry_run=True).status is WriteStatus.CREATED
    assert not storage.exists("/out/a.ts")

    assert write_file(storage, "/out/a.ts", "one").status is WriteStatus.CREATED
    assert write_file(storage, "/out/a.ts", "one").status is WriteStatus.UNCHANGED
    assert write_file(storage, "/out/a.ts", "two", dry_run=True).status is WriteStatus.UPDATED
    assert storage.read_text("/out/a.ts") == "one"
    assert write_file(storage, "/out/a.ts", "two").status is WriteStatus.UPDATED
    assert storage.read_text("/out/a.ts") == "two"
