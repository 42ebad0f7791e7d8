"""
HTML exporter for structured theses.

Renders a block stream as a self-contained HTML page for on-screen
preview: images are inlined as data URIs and page breaks become visual
separators.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..assembly.builder import StructuredDocument
from ..config import ExportOptions
from ..exceptions import ExportError
from ..models.blocks import (
    Block,
    HeadingBlock,
    ImageBlock,
    ListItemBlock,
    PageBreakBlock,
    ParagraphBlock,
    TableCell,
    TableRowBlock,
    continues_table,
)
from ..utils.enums import AlignmentType, CellTag, ParagraphStyle

logger = logging.getLogger(__name__)

PARAGRAPH_CLASSES = {
    ParagraphStyle.NORMAL: "paragraph",
    ParagraphStyle.TITLE_LINE: "title-line",
    ParagraphStyle.CAPTION: "caption",
    ParagraphStyle.CITATION: "citation",
    ParagraphStyle.BIBLIOGRAPHY: "bibliography",
    ParagraphStyle.FOOTNOTE: "footnote",
    ParagraphStyle.PLACEHOLDER: "placeholder",
}

CELL_TAG_CLASSES = {
    CellTag.SHADED: "cell-shaded",
    CellTag.LIGHT_SHADED: "cell-light-shaded",
    CellTag.BOLD: "cell-bold",
    CellTag.SEMIBOLD: "cell-semibold",
    CellTag.UPPERCASE: "cell-uppercase",
    CellTag.ITALIC: "cell-italic",
    CellTag.UNDERLINE: "cell-underline",
}


class HTMLExporter:
    """
    Exports a StructuredDocument to preview HTML.
    """

    def __init__(self, document: StructuredDocument, options: Optional[ExportOptions] = None):
        """
        Initialize HTML exporter.

        Args:
            document: Built document to render
            options: Export options (preview font, page geometry)
        """
        self.document = document
        self.options = options or ExportOptions()
        logger.debug("HTML exporter initialized")

    def export(self, output_path: Union[str, Path]) -> Path:
        """
        Export document to an HTML file.

        Raises:
            ExportError: If the file cannot be written
        """
        output_path = Path(output_path)
        html_content = self.export_to_string()
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html_content, encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Failed to write HTML file {output_path}", str(e)) from e
        logger.info(f"Document exported to HTML: {output_path}")
        return output_path

    def export_to_string(self) -> str:
        return self._generate_html()

    def _generate_html(self) -> str:
        """Generate complete HTML document."""
        html_parts = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="UTF-8">',
            f"<title>{self._escape_html(self.document.title) or 'Thesis'}</title>",
            f"<style>\n{self.generate_css_styles()}\n</style>",
            "</head>",
            "<body>",
            "<div class='document'>",
        ]
        if self.document.layout.running_head:
            html_parts.append(
                f"<header class='running-head'>{self._escape_html(self.document.layout.running_head.upper())}</header>"
            )
        html_parts.append(self.export_blocks(self.document.blocks))
        html_parts.extend(["</div>", "</body>", "</html>"])
        return "\n".join(html_parts)

    def export_blocks(self, blocks: Sequence[Block]) -> str:
        """Render a block stream; list items and table rows are grouped."""
        html_parts: List[str] = []
        index = 0
        while index < len(blocks):
            block = blocks[index]
            if isinstance(block, ListItemBlock):
                items = [block]
                index += 1
                while (index < len(blocks) and isinstance(blocks[index], ListItemBlock)
                       and blocks[index].ordered == block.ordered
                       and not (block.ordered and blocks[index].index == 1)):
                    items.append(blocks[index])
                    index += 1
                html_parts.append(self.export_list(items))
                continue
            if isinstance(block, TableRowBlock):
                rows = [block]
                index += 1
                while index < len(blocks) and continues_table(blocks[index], block):
                    rows.append(blocks[index])
                    index += 1
                html_parts.append(self.export_table(rows))
                continue

            if isinstance(block, HeadingBlock):
                html_parts.append(self.export_heading(block))
            elif isinstance(block, ParagraphBlock):
                html_parts.append(self.export_paragraph(block))
            elif isinstance(block, ImageBlock):
                html_parts.append(self._export_image(block))
            elif isinstance(block, PageBreakBlock):
                html_parts.append("<div class='page-break'></div>")
            index += 1
        return "\n".join(html_parts)

    @staticmethod
    def _align_style(alignment: Optional[AlignmentType]) -> str:
        if alignment is None:
            return ""
        return f' style="text-align: {alignment.value}"'

    def export_heading(self, heading: HeadingBlock) -> str:
        if heading.level <= 0:
            return f'<h1 class="document-title"{self._align_style(heading.alignment)}>{self._escape_html(heading.text)}</h1>'
        level = min(heading.level, 6)
        return f'<h{level} class="heading"{self._align_style(heading.alignment)}>{self._escape_html(heading.text)}</h{level}>'

    def export_paragraph(self, paragraph: ParagraphBlock) -> str:
        css_class = PARAGRAPH_CLASSES[paragraph.style]
        return f"<p class='{css_class}'{self._align_style(paragraph.alignment)}>{self._escape_html(paragraph.text)}</p>"

    def export_list(self, items: Sequence[ListItemBlock]) -> str:
        tag = "ol" if items[0].ordered else "ul"
        html_parts = [f"<{tag} class='list'>"]
        for item in items:
            html_parts.append(f'<li class="list-item">{self._escape_html(item.text)}</li>')
        html_parts.append(f"</{tag}>")
        return "\n".join(html_parts)

    def export_table(self, rows: Sequence[TableRowBlock]) -> str:
        """
        Export consecutive rows of one table.

        Args:
            rows: Header row first, then data rows

        Returns:
            HTML formatted table
        """
        html_parts = ["<table class='table'>"]
        header_rows = [row for row in rows if row.is_header]
        body_rows = [row for row in rows if not row.is_header]
        if header_rows:
            html_parts.append("<thead>")
            for row in header_rows:
                html_parts.append("<tr>" + "".join(self._export_cell(cell, "th") for cell in row.cells) + "</tr>")
            html_parts.append("</thead>")
        html_parts.append("<tbody>")
        for row in body_rows:
            html_parts.append("<tr>" + "".join(self._export_cell(cell, "td") for cell in row.cells) + "</tr>")
        html_parts.append("</tbody>")
        html_parts.append("</table>")
        return "\n".join(html_parts)

    def _export_cell(self, cell: TableCell, tag: str) -> str:
        classes = ["table-cell"] + [CELL_TAG_CLASSES[t] for t in cell.tags]
        return (f'<{tag} class="{" ".join(classes)}" style="text-align: {cell.align.value}">'
                f"{self._escape_html(cell.text)}</{tag}>")

    def _export_image(self, image: ImageBlock) -> str:
        """Export image inlined as a data URI."""
        payload = base64.b64encode(image.data).decode("ascii")
        return (
            f'<img src="data:{image.content_type};base64,{payload}" '
            f'alt="{self._escape_html(image.description)}" '
            f'width="{image.width}" height="{image.height}" class="image">'
        )

    def _escape_html(self, text: str) -> str:
        """Escape HTML special characters."""
        if not text:
            return ""

        text = text.replace("&", "&amp;")
        text = text.replace("<", "&lt;")
        text = text.replace(">", "&gt;")
        text = text.replace('"', "&quot;")
        text = text.replace("'", "&#x27;")

        return text

    def generate_css_styles(self) -> str:
        """CSS for the preview page; page width follows the export options."""
        width = self.document.layout.page_width
        return f"""
body {{
    font-family: "{self.options.preview_font_name}", sans-serif;
    font-size: {self.options.font_size}pt;
    line-height: {self.options.line_spacing / 240:.2f};
    margin: 0;
    padding: 20px;
    background-color: #f3f4f6;
    color: #111827;
}}

.document {{
    max-width: {width}in;
    margin: 0 auto;
    background-color: #ffffff;
    padding: {self.document.layout.margin}in;
    box-sizing: border-box;
    box-shadow: 0 0 10px rgba(0,0,0,0.1);
}}

.running-head {{
    font-size: {self.options.caption_font_size}pt;
    color: #6b7280;
    margin-bottom: 20px;
}}

.document-title {{
    font-size: {self.options.title_font_size}pt;
    text-transform: uppercase;
    text-align: center;
    margin-top: 120px;
}}

.title-line {{
    text-align: center;
    margin: 6px 0;
}}

.heading {{
    margin-top: 30px;
    margin-bottom: 15px;
}}

h1.heading {{ font-size: {self.options.heading1_font_size}pt; }}
h2.heading {{ font-size: {self.options.heading2_font_size}pt; }}

.paragraph {{
    margin: 0 0 12px 0;
    min-height: 1em;
}}

.caption {{
    font-size: {self.options.caption_font_size}pt;
    font-style: italic;
    text-align: center;
}}

.citation {{ margin: 0 0 6px 0; }}

.bibliography {{
    padding-left: 0.5in;
    text-indent: -0.5in;
    margin: 0 0 6px 0;
}}

.footnote {{
    font-size: {self.options.caption_font_size}pt;
    margin: 0 0 4px 0;
}}

.placeholder {{
    font-style: italic;
    color: #808080;
}}

.page-break {{
    border-top: 1px dashed #d1d5db;
    margin: 40px 0;
}}

.table {{
    width: 100%;
    border-collapse: collapse;
    margin: 20px 0;
}}

.table-cell {{
    border: 1px solid #d1d5db;
    padding: 6px 8px;
}}

.cell-shaded {{ background-color: #e5e7eb; }}
.cell-light-shaded {{ background-color: #f3f4f6; }}
.cell-bold {{ font-weight: bold; }}
.cell-semibold {{ font-weight: 600; }}
.cell-uppercase {{ text-transform: uppercase; }}
.cell-italic {{ font-style: italic; }}
.cell-underline {{ text-decoration: underline; }}

.list-item {{
    margin-bottom: 5px;
}}

.image {{
    max-width: 100%;
    height: auto;
    display: block;
    margin: 20px auto 6px auto;
}}
"""
