"""

Simple high-level API for ThesisQuill.

Usage example:
>>> from thesisquill import export_full, export_preview, load_thesis
>>>
>>> thesis = load_thesis(snapshot_dict)
>>>
>>> # Downloadable DOCX
>>> artifact = export_full(thesis)
>>> Path(artifact.filename).write_bytes(artifact.content)
>>>
>>> # In-app preview
>>> preview = export_preview(thesis)
>>> preview.html

Both operations are pure: the snapshot is never modified and no state
survives between calls.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from .assembly.builder import DocumentStructuralBuilder, PageLayout
from .config import ExportOptions
from .export.docx_exporter import DOCX_MEDIA_TYPE, DOCXExporter
from .export.html_exporter import HTMLExporter
from .models.blocks import Block
from .models.loader import load_thesis
from .models.thesis import ThesisDocument

logger = logging.getLogger(__name__)

__all__ = [
    "ExportArtifact",
    "PreviewArtifact",
    "export_full",
    "export_preview",
    "suggested_filename",
]

DEFAULT_FILENAME_STEM = "thesis"
_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(frozen=True)
class ExportArtifact:
    """Serialized DOCX package plus the block stream it was written from."""

    content: bytes = field(repr=False)
    blocks: Tuple[Block, ...]
    layout: PageLayout
    filename: str
    media_type: str = DOCX_MEDIA_TYPE


@dataclass(frozen=True)
class PreviewArtifact:
    """Reduced in-memory rendering for on-screen preview."""

    blocks: Tuple[Block, ...]
    layout: PageLayout
    html: str = field(repr=False)


def suggested_filename(title: Optional[str], extension: str = "docx") -> str:
    """
    Derive a download filename from the thesis title.

    Characters that are invalid in file names are dropped and whitespace is
    collapsed; an empty result falls back to ``thesis``.
    """
    stem = _UNSAFE_FILENAME_CHARS.sub("", title or "")
    stem = " ".join(stem.split()).strip(" .")
    return f"{stem or DEFAULT_FILENAME_STEM}.{extension}"


def _as_thesis(thesis: Union[ThesisDocument, Mapping[str, Any]]) -> ThesisDocument:
    if isinstance(thesis, ThesisDocument):
        return thesis
    return load_thesis(thesis)


def export_full(thesis: Union[ThesisDocument, Mapping[str, Any]],
                options: Optional[ExportOptions] = None) -> ExportArtifact:
    """
    Export a thesis to a DOCX package.

    Args:
        thesis: Thesis snapshot, or its JSON-shaped mapping
        options: Export options

    Returns:
        ExportArtifact with the package bytes

    Raises:
        SnapshotError: If a mapping does not match the data model
        ThesisValidationError: If the thesis fails structural validation
        ExportError: If the package cannot be serialized
    """
    options = options or ExportOptions()
    document = DocumentStructuralBuilder(options).build(_as_thesis(thesis), preview=False)
    content = DOCXExporter(document, options).export_to_bytes()
    artifact = ExportArtifact(
        content=content,
        blocks=document.blocks,
        layout=document.layout,
        filename=suggested_filename(document.title),
    )
    logger.info(f"Exported {artifact.filename}: {len(content)} bytes, {len(document.blocks)} blocks")
    return artifact


def export_preview(thesis: Union[ThesisDocument, Mapping[str, Any]],
                   options: Optional[ExportOptions] = None) -> PreviewArtifact:
    """
    Build the reduced preview of a thesis.

    The preview omits the table of contents and the back matter and is
    rendered as HTML rather than packaged.
    """
    options = options or ExportOptions()
    document = DocumentStructuralBuilder(options).build(_as_thesis(thesis), preview=True)
    html = HTMLExporter(document, options).export_to_string()
    return PreviewArtifact(blocks=document.blocks, layout=document.layout, html=html)
