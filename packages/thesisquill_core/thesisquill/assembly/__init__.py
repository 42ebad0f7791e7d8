"""Section, chapter and whole-document assembly."""

from .builder import DocumentStructuralBuilder, PageLayout, StructuredDocument
from .sections import ChapterAssembler, SectionAssembler

__all__ = [
    "DocumentStructuralBuilder",
    "PageLayout",
    "StructuredDocument",
    "ChapterAssembler",
    "SectionAssembler",
]
