"""Common enumerations used across the ThesisQuill models and converters."""

from __future__ import annotations

from enum import Enum


class AlignmentType(str, Enum):
    """Paragraph and cell alignment modes."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"


class BlockKind(str, Enum):
    """Kinds of content blocks produced by the converters."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    IMAGE = "image"
    TABLE_ROW = "table_row"
    PAGE_BREAK = "page_break"


class ParagraphStyle(str, Enum):
    """Role of a paragraph block; maps onto a WordprocessingML style."""

    NORMAL = "normal"
    TITLE_LINE = "title_line"
    CAPTION = "caption"
    CITATION = "citation"
    BIBLIOGRAPHY = "bibliography"
    FOOTNOTE = "footnote"
    PLACEHOLDER = "placeholder"


class HeaderStyle(str, Enum):
    """Header-row emphasis for grid tables."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    NONE = "none"


class CellTag(str, Enum):
    """Resolved style tags carried by rendered table cells."""

    SHADED = "shaded"
    LIGHT_SHADED = "light-shaded"
    BOLD = "bold"
    SEMIBOLD = "semibold"
    UPPERCASE = "uppercase"
    ITALIC = "italic"
    UNDERLINE = "underline"


class CitationStyle(str, Enum):
    """Preview citation styles."""

    APA = "apa"
    MLA = "mla"
    CHICAGO = "chicago"


class PageSize(str, Enum):
    """Supported page sizes."""

    LETTER = "letter"
    A4 = "a4"
