"""
Thesis snapshot models.

The editing surface hands the export pipeline one immutable snapshot of a
thesis. Every entity here is a frozen dataclass and every collection a
tuple, so converters can share the snapshot without copying it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from ..utils.enums import AlignmentType, HeaderStyle


class SectionType(str, Enum):
    """Closed set of section tags used by the authoring surface."""

    TITLE = "title"
    ABSTRACT = "abstract"
    ACKNOWLEDGMENTS = "acknowledgments"
    PREFACE = "preface"
    TABLE_OF_CONTENTS = "table-of-contents"
    LIST_OF_FIGURES = "list-of-figures"
    LIST_OF_TABLES = "list-of-tables"
    ABBREVIATIONS = "abbreviations"
    GLOSSARY = "glossary"
    GENERAL_INTRODUCTION = "general_introduction"
    INTRODUCTION = "introduction"
    CHAPTER = "chapter"
    LITERATURE_REVIEW = "literature-review"
    THEORETICAL_FRAMEWORK = "theoretical-framework"
    METHODOLOGY = "methodology"
    RESULTS = "results"
    DISCUSSION = "discussion"
    CONCLUSION = "conclusion"
    GENERAL_CONCLUSION = "general_conclusion"
    RECOMMENDATIONS = "recommendations"
    POSTFACE = "postface"
    REFERENCES = "references"
    APPENDIX = "appendix"
    CUSTOM = "custom"


class CitationType(str, Enum):
    """Bibliographic record kinds."""

    BOOK = "book"
    ARTICLE = "article"
    CONFERENCE = "conference"
    WEBSITE = "website"
    OTHER = "other"


@dataclass(frozen=True)
class Dimensions:
    """Requested render size of a figure, in pixels."""

    width: float
    height: float

    @property
    def is_usable(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Figure:
    id: str
    caption: str = ""
    image_data: str = ""
    alt_text: str = ""
    number: Optional[int] = None
    dimensions: Optional[Dimensions] = None


@dataclass(frozen=True)
class CellFormat:
    """Per-cell formatting flags set in the table editor."""

    align: AlignmentType = AlignmentType.LEFT
    bold: bool = False
    italic: bool = False
    underline: bool = False
    header_style: Optional[HeaderStyle] = None


@dataclass(frozen=True)
class TableCellInput:
    text: str = ""
    format: CellFormat = field(default_factory=CellFormat)


@dataclass(frozen=True)
class GridTable:
    """Table authored as headers plus rows of cells."""

    id: str
    headers: Tuple[TableCellInput, ...]
    rows: Tuple[Tuple[TableCellInput, ...], ...] = ()
    caption: str = ""
    number: Optional[int] = None
    header_style: HeaderStyle = HeaderStyle.PRIMARY


@dataclass(frozen=True)
class OpaqueTable:
    """Table stored as pre-rendered markup; formatting is not recoverable."""

    id: str
    markup: str
    caption: str = ""
    title: str = ""
    number: Optional[int] = None


Table = Union[GridTable, OpaqueTable]


@dataclass(frozen=True)
class Citation:
    id: str
    text: str
    authors: Tuple[str, ...]
    year: str = ""
    source: str = ""
    type: CitationType = CitationType.OTHER
    doi: Optional[str] = None
    url: Optional[str] = None
    journal: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    publisher: Optional[str] = None


@dataclass(frozen=True)
class Reference(Citation):
    """A bibliography entry; only meaningful inside a references section."""

    title: str = ""


@dataclass(frozen=True)
class Footnote:
    id: str
    number: int
    content: str


@dataclass(frozen=True)
class Section:
    id: str
    title: str
    type: SectionType
    required: bool = False
    order: int = 0
    content: str = ""
    figures: Tuple[Figure, ...] = ()
    tables: Tuple[Table, ...] = ()
    citations: Tuple[Citation, ...] = ()
    references: Tuple[Reference, ...] = ()
    footnotes: Tuple[Footnote, ...] = ()


@dataclass(frozen=True)
class Chapter:
    id: str
    title: str
    order: int = 0
    sections: Tuple[Section, ...] = ()
    content: str = ""


@dataclass(frozen=True)
class ThesisMetadata:
    description: str = ""
    keywords: Tuple[str, ...] = ()
    created_at: str = ""
    university_name: Optional[str] = None
    department_name: Optional[str] = None
    author_name: Optional[str] = None
    thesis_date: Optional[str] = None
    committee_members: Tuple[str, ...] = ()
    supervisors: Tuple[str, ...] = ()
    degree: Optional[str] = None
    short_title: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class ThesisDocument:
    """Root of a thesis snapshot."""

    metadata: ThesisMetadata = field(default_factory=ThesisMetadata)
    front_matter: Tuple[Section, ...] = ()
    chapters: Tuple[Chapter, ...] = ()
    back_matter: Tuple[Section, ...] = ()

    def front_matter_of_type(self, section_type: SectionType) -> Tuple[Section, ...]:
        """Front-matter sections carrying the given tag, in snapshot order."""
        return tuple(s for s in self.front_matter if s.type == section_type)

    def iter_sections(self):
        """Yield every section of the thesis in document order."""
        yield from self.front_matter
        for chapter in self.chapters:
            yield from chapter.sections
        yield from self.back_matter
