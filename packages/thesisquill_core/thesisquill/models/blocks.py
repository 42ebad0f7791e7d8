"""
Content blocks.

A block is a typed unit of document content prior to serialization. The
converters emit blocks, the assembler orders them and the exporters turn
a block stream into WordprocessingML or HTML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..utils.enums import AlignmentType, BlockKind, CellTag, ParagraphStyle


@dataclass(frozen=True)
class HeadingBlock:
    """Heading; level 0 is the title line, 1 and 2 map to Heading 1/2."""

    level: int
    text: str
    alignment: Optional[AlignmentType] = None
    kind: BlockKind = field(default=BlockKind.HEADING, init=False)


@dataclass(frozen=True)
class ParagraphBlock:
    text: str
    style: ParagraphStyle = ParagraphStyle.NORMAL
    alignment: Optional[AlignmentType] = None
    kind: BlockKind = field(default=BlockKind.PARAGRAPH, init=False)


@dataclass(frozen=True)
class ListItemBlock:
    """
    List item produced by the markdown converter.

    ``index`` is the 1-based position within an ordered run and None for
    unordered items.
    """

    ordered: bool
    level: int
    text: str
    index: Optional[int] = None
    kind: BlockKind = field(default=BlockKind.LIST_ITEM, init=False)


@dataclass(frozen=True)
class ImageBlock:
    """Embeddable raster image placed at a render size in pixels."""

    data: bytes = field(repr=False)
    content_type: str
    extension: str
    width: int
    height: int
    description: str
    name: str = ""
    alignment: AlignmentType = AlignmentType.CENTER
    kind: BlockKind = field(default=BlockKind.IMAGE, init=False)


@dataclass(frozen=True)
class TableCell:
    text: str
    align: AlignmentType = AlignmentType.LEFT
    tags: Tuple[CellTag, ...] = ()

    def has(self, tag: CellTag) -> bool:
        return tag in self.tags


@dataclass(frozen=True)
class TableRowBlock:
    """
    One row of a rendered table.

    Consecutive rows sharing ``table_id`` form one table in the output; a
    header row always starts a new table.
    """

    table_id: str
    cells: Tuple[TableCell, ...]
    is_header: bool = False
    kind: BlockKind = field(default=BlockKind.TABLE_ROW, init=False)

    @property
    def column_count(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class PageBreakBlock:
    kind: BlockKind = field(default=BlockKind.PAGE_BREAK, init=False)


Block = Union[HeadingBlock, ParagraphBlock, ListItemBlock, ImageBlock, TableRowBlock, PageBreakBlock]


def block_text(block: Block) -> str:
    """Plain text of a block; empty for images and page breaks."""
    if isinstance(block, TableRowBlock):
        return "\t".join(cell.text for cell in block.cells)
    return getattr(block, "text", "")


def continues_table(block: Block, row: TableRowBlock) -> bool:
    """Whether ``block`` is a body row of the same table as ``row``."""
    return isinstance(block, TableRowBlock) and block.table_id == row.table_id and not block.is_header
