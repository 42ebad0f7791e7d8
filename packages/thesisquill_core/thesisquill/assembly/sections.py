"""
Section and chapter assembly.

A section contributes, in order: its title heading, its markdown content,
its figures, its tables, its citations and footnotes, and for a
references section a "References" heading followed by the bibliography.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..config import ExportOptions
from ..converters.citations import CitationFormatter
from ..converters.figures import FigureEmbedder
from ..converters.markdown import MarkdownBlockConverter
from ..converters.tables import TableRenderer
from ..models.blocks import Block, HeadingBlock, ParagraphBlock
from ..models.thesis import Chapter, Footnote, Section, SectionType
from ..utils.enums import ParagraphStyle

logger = logging.getLogger(__name__)

CHAPTER_HEADING_LEVEL = 1
SECTION_HEADING_LEVEL = 2
REFERENCES_HEADING = "References"


def footnote_block(footnote: Footnote) -> ParagraphBlock:
    return ParagraphBlock(text=f"{footnote.number}. {footnote.content}", style=ParagraphStyle.FOOTNOTE)


class SectionAssembler:
    """Produce the ordered block list of one section."""

    def __init__(self, options: Optional[ExportOptions] = None):
        self.options = options or ExportOptions()
        self.figures = FigureEmbedder(self.options)
        self.tables = TableRenderer()
        self.citations = CitationFormatter()

    def markdown(self, content: str) -> List[Block]:
        """Convert markdown content; blank content contributes nothing."""
        if not content or not content.strip():
            return []
        return MarkdownBlockConverter().convert(content)

    def assemble(self, section: Section, heading_level: int = SECTION_HEADING_LEVEL) -> List[Block]:
        """
        Assemble one section.

        Raises:
            TableValidationError: If a grid table has no columns
        """
        blocks: List[Block] = []
        if section.title and section.title.strip():
            blocks.append(HeadingBlock(level=heading_level, text=section.title))

        blocks.extend(self.markdown(section.content))

        for position, figure in enumerate(section.figures, start=1):
            blocks.extend(self.figures.embed(figure, number=position))

        for position, table in enumerate(section.tables, start=1):
            table_id = f"{section.id or 'section'}-table-{position}"
            blocks.extend(self.tables.render(table, number=position, table_id=table_id))

        for citation in section.citations:
            blocks.append(self.citations.citation_block(citation))

        for footnote in section.footnotes:
            blocks.append(footnote_block(footnote))

        if section.type == SectionType.REFERENCES:
            blocks.append(HeadingBlock(level=heading_level, text=REFERENCES_HEADING))
            for reference in section.references:
                blocks.append(self.citations.reference_block(reference))
        elif section.references:
            logger.debug(f"Ignoring {len(section.references)} references in {section.type.value} section {section.id}")

        return blocks


class ChapterAssembler:
    """Produce the ordered block list of one chapter."""

    def __init__(self, section_assembler: Optional[SectionAssembler] = None):
        self.sections = section_assembler or SectionAssembler()

    def assemble(self, chapter: Chapter) -> List[Block]:
        blocks: List[Block] = [HeadingBlock(level=CHAPTER_HEADING_LEVEL, text=chapter.title)]
        blocks.extend(self.sections.markdown(chapter.content))
        # sorted() is stable, so equal orders keep snapshot order
        for section in sorted(chapter.sections, key=lambda s: s.order):
            blocks.extend(self.sections.assemble(section))
        return blocks
