"""
Document structural builder.

Walks a thesis snapshot in a fixed order and produces one block stream
plus page layout metadata:

    title page -> abstract -> other front matter -> table of contents
    -> chapters -> back matter

Every division after the title page starts with a forced page break. The
preview variant leaves out the table of contents and the back matter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import ExportOptions
from ..exceptions import TableValidationError, ThesisValidationError
from ..models.blocks import Block, HeadingBlock, PageBreakBlock, ParagraphBlock
from ..models.thesis import GridTable, Section, SectionType, ThesisDocument, ThesisMetadata
from ..utils.enums import AlignmentType, ParagraphStyle
from .sections import ChapterAssembler, SectionAssembler

logger = logging.getLogger(__name__)

TITLE_HEADING_LEVEL = 0
ABSTRACT_HEADING = "Abstract"
ABSTRACT_PLACEHOLDER = "[Abstract not provided]"
TOC_HEADING = "Table of Contents"
DEGREE_STATEMENT = "A thesis submitted in partial fulfillment of the requirements for the degree of {degree}"

# Front-matter tags with a fixed slot of their own in the document
_PLACED_FRONT_MATTER = (SectionType.TITLE, SectionType.ABSTRACT, SectionType.TABLE_OF_CONTENTS)


@dataclass(frozen=True)
class PageLayout:
    """
    Page setup shared by every page of the document.

    Attributes:
        running_head: Text shown in the page header, if any
        page_number_in_header: Add a PAGE field to the header
        page_number_in_footer: Add a centered PAGE field to the footer
        page_width: Page width in inches
        page_height: Page height in inches
        margin: Uniform page margin in inches
    """

    running_head: Optional[str]
    page_number_in_header: bool
    page_number_in_footer: bool
    page_width: float
    page_height: float
    margin: float

    @property
    def has_header(self) -> bool:
        return bool(self.running_head) or self.page_number_in_header

    @property
    def has_footer(self) -> bool:
        return self.page_number_in_footer


@dataclass(frozen=True)
class StructuredDocument:
    """Ordered block stream with its page layout."""

    title: str
    blocks: Tuple[Block, ...]
    layout: PageLayout
    metadata: ThesisMetadata = field(default_factory=ThesisMetadata)

    @property
    def page_break_positions(self) -> Tuple[int, ...]:
        return tuple(i for i, block in enumerate(self.blocks) if isinstance(block, PageBreakBlock))


def _centered(text: str, style: ParagraphStyle = ParagraphStyle.TITLE_LINE) -> ParagraphBlock:
    return ParagraphBlock(text=text, style=style, alignment=AlignmentType.CENTER)


class DocumentStructuralBuilder:
    """Build the full or preview block stream of a thesis."""

    def __init__(self, options: Optional[ExportOptions] = None):
        self.options = options or ExportOptions()
        self.sections = SectionAssembler(self.options)
        self.chapters = ChapterAssembler(self.sections)

    def validate(self, thesis: ThesisDocument) -> Section:
        """
        Check structural invariants before anything is emitted.

        Returns:
            The single title section

        Raises:
            ThesisValidationError: If the front matter does not hold exactly
                one title section
            TableValidationError: If a grid table has no columns
        """
        titles = thesis.front_matter_of_type(SectionType.TITLE)
        if not titles:
            raise ThesisValidationError("Thesis has no title section")
        if len(titles) > 1:
            raise ThesisValidationError("Thesis has more than one title section",
                                        ", ".join(s.id or s.title for s in titles))

        for section in thesis.iter_sections():
            for table in section.tables:
                if isinstance(table, GridTable) and not table.headers:
                    raise TableValidationError(
                        "Table has no columns",
                        f"section {section.id or section.title!r}, table {table.id or table.caption!r}",
                    )
        return titles[0]

    def build(self, thesis: ThesisDocument, preview: bool = False) -> StructuredDocument:
        """
        Build the document block stream.

        Args:
            thesis: Snapshot to serialize; never modified
            preview: Build the reduced preview variant

        Returns:
            StructuredDocument with blocks and page layout
        """
        title_section = self.validate(thesis)
        blocks: List[Block] = []

        blocks.extend(self.title_page(title_section, thesis.metadata))

        blocks.append(PageBreakBlock())
        blocks.extend(self.abstract(thesis))

        for section in thesis.front_matter:
            if section.type in _PLACED_FRONT_MATTER:
                continue
            blocks.append(PageBreakBlock())
            blocks.extend(self.sections.assemble(section))

        if not preview:
            blocks.append(PageBreakBlock())
            blocks.append(HeadingBlock(level=1, text=TOC_HEADING))

        for chapter in sorted(thesis.chapters, key=lambda c: c.order):
            blocks.append(PageBreakBlock())
            blocks.extend(self.chapters.assemble(chapter))

        if not preview:
            for section in thesis.back_matter:
                blocks.append(PageBreakBlock())
                blocks.extend(self.sections.assemble(section))

        document = StructuredDocument(
            title=title_section.title,
            blocks=tuple(blocks),
            layout=self.layout(title_section, thesis.metadata),
            metadata=thesis.metadata,
        )
        logger.debug(
            f"Built {'preview' if preview else 'full'} document: {len(document.blocks)} blocks, "
            f"{len(document.page_break_positions)} page breaks"
        )
        return document

    def title_page(self, section: Section, metadata: ThesisMetadata) -> List[Block]:
        """Title line, metadata lines and the title section's own content."""
        blocks: List[Block] = [
            HeadingBlock(level=TITLE_HEADING_LEVEL, text=section.title.upper(), alignment=AlignmentType.CENTER)
        ]
        if metadata.author_name:
            blocks.append(_centered("By"))
            blocks.append(_centered(metadata.author_name))
        for line in (metadata.university_name, metadata.department_name):
            if line:
                blocks.append(_centered(line))
        if metadata.degree:
            blocks.append(_centered(DEGREE_STATEMENT.format(degree=metadata.degree)))
        if metadata.thesis_date:
            blocks.append(_centered(metadata.thesis_date))
        if metadata.supervisors:
            blocks.append(_centered(f"Supervised by: {', '.join(metadata.supervisors)}"))
        if metadata.committee_members:
            blocks.append(_centered(f"Committee: {', '.join(metadata.committee_members)}"))
        blocks.extend(self.sections.markdown(section.content))
        return blocks

    def abstract(self, thesis: ThesisDocument) -> List[Block]:
        abstracts = thesis.front_matter_of_type(SectionType.ABSTRACT)
        if not abstracts:
            return [
                HeadingBlock(level=1, text=ABSTRACT_HEADING),
                ParagraphBlock(text=ABSTRACT_PLACEHOLDER, style=ParagraphStyle.PLACEHOLDER),
            ]
        if len(abstracts) > 1:
            logger.warning(f"Thesis has {len(abstracts)} abstract sections; using the first")
        return self.sections.assemble(abstracts[0], heading_level=1)

    def layout(self, title_section: Section, metadata: ThesisMetadata) -> PageLayout:
        running_head = None
        if self.options.running_head:
            running_head = metadata.short_title or title_section.title or None
        width, height = self.options.page_dimensions
        return PageLayout(
            running_head=running_head,
            page_number_in_header=self.options.header_page_number,
            page_number_in_footer=self.options.footer_page_number,
            page_width=width,
            page_height=height,
            margin=self.options.margin_inches,
        )
