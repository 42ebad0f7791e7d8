"""Utility helpers shared across ThesisQuill."""

from .enums import (
    AlignmentType,
    BlockKind,
    CellTag,
    CitationStyle,
    HeaderStyle,
    PageSize,
    ParagraphStyle,
)
from .units import UnitsConverter

__all__ = [
    "AlignmentType",
    "BlockKind",
    "CellTag",
    "CitationStyle",
    "HeaderStyle",
    "PageSize",
    "ParagraphStyle",
    "UnitsConverter",
]
