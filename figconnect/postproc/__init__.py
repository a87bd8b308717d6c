"""Post-processing: generated section patching and file writes."""

from .markers import SectionPatcher, build_section_block, default_markers
from .writer import WriteResult, WriteStatus, write_file

__all__ = [
    "SectionPatcher",
    "WriteResult",
    "WriteStatus",
    "build_section_block",
    "default_markers",
    "write_file",
]
