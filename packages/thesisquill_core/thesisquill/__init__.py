"""
ThesisQuill - structured thesis export to DOCX.

This package serializes a thesis snapshot (metadata, front matter, chapters
of sections, back matter) into a paginated word-processor document.

Features:
- Minimal markdown conversion (headings, single-level lists, paragraphs)
- Figure embedding from data-URI payloads with captions
- Grid and pre-rendered tables reduced to one canonical grid
- Citation formatting (fixed export format; APA, MLA, Chicago previews)
- Title page, abstract, table of contents, running head and page numbers
- Deterministic DOCX packages and an HTML preview

Quick Start:
    from thesisquill import load_thesis, export_full

    artifact = export_full(load_thesis(snapshot))
    Path(artifact.filename).write_bytes(artifact.content)
"""

from .version import __version__, __version_info__

from .exceptions import (
    CitationStyleError,
    ExportError,
    MediaError,
    SnapshotError,
    TableMarkupError,
    TableValidationError,
    ThesisQuillError,
    ThesisValidationError,
)
from .config import ExportOptions
from .models import ThesisDocument, load_thesis, load_thesis_file
from .api import ExportArtifact, PreviewArtifact, export_full, export_preview, suggested_filename

__all__ = [
    "__version__",
    "__version_info__",
    "CitationStyleError",
    "ExportError",
    "MediaError",
    "SnapshotError",
    "TableMarkupError",
    "TableValidationError",
    "ThesisQuillError",
    "ThesisValidationError",
    "ExportOptions",
    "ThesisDocument",
    "load_thesis",
    "load_thesis_file",
    "ExportArtifact",
    "PreviewArtifact",
    "export_full",
    "export_preview",
    "suggested_filename",
]
