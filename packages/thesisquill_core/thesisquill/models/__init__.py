"""Thesis snapshot models and content blocks."""

from .blocks import (
    Block,
    HeadingBlock,
    ImageBlock,
    ListItemBlock,
    PageBreakBlock,
    ParagraphBlock,
    TableCell,
    TableRowBlock,
    block_text,
    continues_table,
)
from .loader import load_thesis, load_thesis_file, normalize_content
from .thesis import (
    CellFormat,
    Chapter,
    Citation,
    CitationType,
    Dimensions,
    Figure,
    Footnote,
    GridTable,
    OpaqueTable,
    Reference,
    Section,
    SectionType,
    Table,
    TableCellInput,
    ThesisDocument,
    ThesisMetadata,
)

__all__ = [
    "Block",
    "HeadingBlock",
    "ImageBlock",
    "ListItemBlock",
    "PageBreakBlock",
    "ParagraphBlock",
    "TableCell",
    "TableRowBlock",
    "block_text",
    "continues_table",
    "load_thesis",
    "load_thesis_file",
    "normalize_content",
    "CellFormat",
    "Chapter",
    "Citation",
    "CitationType",
    "Dimensions",
    "Figure",
    "Footnote",
    "GridTable",
    "OpaqueTable",
    "Reference",
    "Section",
    "SectionType",
    "Table",
    "TableCellInput",
    "ThesisDocument",
    "ThesisMetadata",
]
