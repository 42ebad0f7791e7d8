"""
Table normalizer and renderer.

Both table shapes of the snapshot are reduced to one canonical grid:

- ``GridTable`` cells keep their formatting flags, which resolve to style
  tags on the rendered cells,
- ``OpaqueTable`` markup is parsed structurally and degrades to an
  unstyled grid whose first row is the header row.

The renderer then emits a header row block, the data row blocks and an
optional caption.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import List, Optional, Tuple

from ..exceptions import TableMarkupError, TableValidationError
from ..models.blocks import Block, ParagraphBlock, TableCell, TableRowBlock
from ..models.thesis import CellFormat, GridTable, OpaqueTable, Table, TableCellInput
from ..utils.enums import AlignmentType, CellTag, HeaderStyle, ParagraphStyle

logger = logging.getLogger(__name__)

HEADER_STYLE_TAGS = {
    HeaderStyle.PRIMARY: (CellTag.SHADED, CellTag.BOLD, CellTag.UPPERCASE),
    HeaderStyle.SECONDARY: (CellTag.LIGHT_SHADED, CellTag.SEMIBOLD),
    HeaderStyle.NONE: (),
}

_WHITESPACE = re.compile(r"\s+")


class OpaqueTableParser(HTMLParser):
    """Extract the cell texts of the first table found in HTML markup."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.rows: List[List[str]] = []
        self._table_depth = 0
        self._done = False
        self._row: Optional[List[str]] = None
        self._cell: Optional[List[str]] = None

    def handle_starttag(self, tag: str, attrs: list) -> None:
        tag = tag.lower()
        if self._done:
            return
        if tag == "table":
            self._table_depth += 1
            return
        # Nested tables are flattened into the enclosing cell
        if self._table_depth != 1:
            return
        if tag == "tr":
            self._finish_row()
            self._row = []
        elif tag in ("td", "th"):
            if self._row is None:
                self._row = []
            self._finish_cell()
            self._cell = []
        elif tag == "br" and self._cell is not None:
            self._cell.append(" ")

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if self._done:
            return
        if tag == "table":
            self._table_depth -= 1
            if self._table_depth <= 0:
                self._finish_row()
                self._done = True
            return
        if self._table_depth != 1:
            return
        if tag in ("td", "th"):
            self._finish_cell()
        elif tag == "tr":
            self._finish_row()

    def handle_data(self, data: str) -> None:
        if self._cell is not None and not self._done:
            self._cell.append(data)

    def close(self) -> None:
        super().close()
        if not self._done:
            self._finish_row()

    def _finish_cell(self) -> None:
        if self._cell is None:
            return
        text = _WHITESPACE.sub(" ", "".join(self._cell)).strip()
        if self._row is None:
            self._row = []
        self._row.append(text)
        self._cell = None

    def _finish_row(self) -> None:
        self._finish_cell()
        if self._row:
            self.rows.append(self._row)
        self._row = None


def parse_table_markup(markup: str) -> List[List[str]]:
    """
    Parse pre-rendered table markup into rows of cell texts.

    Raises:
        TableMarkupError: If the markup yields no rows or no columns
    """
    parser = OpaqueTableParser()
    try:
        parser.feed(markup or "")
        parser.close()
    except (AssertionError, ValueError) as e:
        raise TableMarkupError("Unparseable table markup", str(e)) from e

    if not parser.rows:
        raise TableMarkupError("Table markup contains no rows")
    if max(len(row) for row in parser.rows) == 0:
        raise TableMarkupError("Table markup contains no columns")
    return parser.rows


@dataclass(frozen=True)
class CanonicalGrid:
    """Shape-independent table: one header row plus data rows of equal width."""

    header: Tuple[TableCell, ...]
    rows: Tuple[Tuple[TableCell, ...], ...]
    caption: str = ""

    @property
    def column_count(self) -> int:
        return len(self.header)


def _flag_tags(fmt: CellFormat) -> Tuple[CellTag, ...]:
    tags = []
    if fmt.bold:
        tags.append(CellTag.BOLD)
    if fmt.italic:
        tags.append(CellTag.ITALIC)
    if fmt.underline:
        tags.append(CellTag.UNDERLINE)
    return tuple(tags)


def header_cell(cell: TableCellInput, table_style: HeaderStyle) -> TableCell:
    """Resolve a header cell; a cell-level header style overrides the table's."""
    style = cell.format.header_style or table_style
    tags = list(HEADER_STYLE_TAGS[style])
    for tag in _flag_tags(cell.format):
        if tag not in tags:
            tags.append(tag)
    return TableCell(text=cell.text, align=cell.format.align, tags=tuple(tags))


def body_cell(cell: TableCellInput) -> TableCell:
    return TableCell(text=cell.text, align=cell.format.align, tags=_flag_tags(cell.format))


def _fit(cells: List[TableCell], width: int) -> Tuple[TableCell, ...]:
    if len(cells) < width:
        cells = cells + [TableCell(text="") for _ in range(width - len(cells))]
    return tuple(cells[:width])


class TableNormalizer:
    """Reduce either table shape to a ``CanonicalGrid``."""

    def normalize(self, table: Table) -> CanonicalGrid:
        """
        Raises:
            TableValidationError: For a grid table without columns
            TableMarkupError: For opaque markup that yields no grid
        """
        if isinstance(table, GridTable):
            return self._from_grid(table)
        if isinstance(table, OpaqueTable):
            return self._from_markup(table)
        raise TypeError(f"Unsupported table type: {type(table).__name__}")

    def _from_grid(self, table: GridTable) -> CanonicalGrid:
        width = len(table.headers)
        if width == 0:
            raise TableValidationError("Table has no columns", table.id or table.caption or None)
        header = tuple(header_cell(cell, table.header_style) for cell in table.headers)
        rows = tuple(_fit([body_cell(cell) for cell in row], width) for row in table.rows)
        return CanonicalGrid(header=header, rows=rows, caption=table.caption)

    def _from_markup(self, table: OpaqueTable) -> CanonicalGrid:
        parsed = parse_table_markup(table.markup)
        width = max(len(row) for row in parsed)
        cells = [_fit([TableCell(text=text) for text in row], width) for row in parsed]
        return CanonicalGrid(header=cells[0], rows=tuple(cells[1:]), caption=table.caption or table.title)


def table_caption(number: int, caption: str) -> str:
    return f"Table {number}: {caption.strip()}"


class TableRenderer:
    """Render tables into row blocks followed by an optional caption."""

    def __init__(self, normalizer: Optional[TableNormalizer] = None):
        self.normalizer = normalizer or TableNormalizer()

    def render(self, table: Table, number: Optional[int] = None,
               table_id: Optional[str] = None) -> List[Block]:
        """
        Render one table.

        Args:
            table: Grid or opaque table from the snapshot
            number: Fallback number used when the table carries none
            table_id: Row group id, unique within the block stream

        Returns:
            Header row, data rows and caption blocks; a placeholder
            paragraph when opaque markup cannot be parsed

        Raises:
            TableValidationError: For a grid table without columns
        """
        number = table.number if table.number is not None else (number or 1)
        try:
            grid = self.normalizer.normalize(table)
        except TableMarkupError as e:
            logger.warning(f"Failed to render table {table.id or number}: {e}")
            return [self.placeholder(table)]

        table_id = table_id or f"table-{number}"
        blocks: List[Block] = [TableRowBlock(table_id=table_id, cells=grid.header, is_header=True)]
        for row in grid.rows:
            blocks.append(TableRowBlock(table_id=table_id, cells=row))
        if grid.caption and grid.caption.strip():
            blocks.append(ParagraphBlock(
                text=table_caption(number, grid.caption),
                style=ParagraphStyle.CAPTION,
                alignment=AlignmentType.CENTER,
            ))
        return blocks

    @staticmethod
    def placeholder(table: Table) -> ParagraphBlock:
        label = (table.caption or getattr(table, "title", "") or "").strip() or "Untitled"
        return ParagraphBlock(
            text=f"[Error loading table: {label}]",
            style=ParagraphStyle.PLACEHOLDER,
            alignment=AlignmentType.CENTER,
        )
