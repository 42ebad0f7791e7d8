"""
WordprocessingML writer.

Serializes a block stream and its page layout into the XML parts of a
DOCX package: document, styles, numbering, settings, header and footer.
Package assembly (relationships, content types, ZIP) lives in
``docx_exporter``.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional, Sequence

from ..assembly.builder import PageLayout
from ..config import ExportOptions
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
from ..utils.units import UnitsConverter

logger = logging.getLogger(__name__)

NAMESPACES = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "wp": "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "pic": "http://schemas.openxmlformats.org/drawingml/2006/picture",
}
XML_NS = "http://www.w3.org/XML/1998/namespace"

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)

W = f"{{{NAMESPACES['w']}}}"
R = f"{{{NAMESPACES['r']}}}"
WP = f"{{{NAMESPACES['wp']}}}"
A = f"{{{NAMESPACES['a']}}}"
PIC = f"{{{NAMESPACES['pic']}}}"

PARAGRAPH_STYLE_IDS = {
    ParagraphStyle.NORMAL: "Normal",
    ParagraphStyle.TITLE_LINE: "TitleLine",
    ParagraphStyle.CAPTION: "Caption",
    ParagraphStyle.CITATION: "Citation",
    ParagraphStyle.BIBLIOGRAPHY: "Bibliography",
    ParagraphStyle.FOOTNOTE: "FootnoteText",
    ParagraphStyle.PLACEHOLDER: "Placeholder",
}

JUSTIFICATION = {
    AlignmentType.LEFT: "left",
    AlignmentType.RIGHT: "right",
    AlignmentType.CENTER: "center",
    AlignmentType.JUSTIFY: "both",
}

SHADING_FILLS = {
    CellTag.SHADED: "E5E7EB",
    CellTag.LIGHT_SHADED: "F3F4F6",
}

BULLET_NUM_ID = 1
BULLET_ABSTRACT_ID = 0
DECIMAL_ABSTRACT_ID = 1

# XML 1.0 forbids most control characters
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def clean_text(text: str) -> str:
    return _INVALID_XML_CHARS.sub("", text or "")


def heading_style_id(level: int) -> str:
    if level <= 0:
        return "Title"
    return f"Heading{min(level, 2)}"


def _serialize(root: ET.Element) -> bytes:
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


class WordMLWriter:
    """
    Writes the WordprocessingML parts of one document.

    One writer instance serves one export: it allocates a numbering
    instance per ordered list run while writing ``document.xml`` and emits
    the matching ``numbering.xml`` afterwards.
    """

    def __init__(self, options: Optional[ExportOptions] = None, units: Optional[UnitsConverter] = None):
        self.options = options or ExportOptions()
        self.units = units or UnitsConverter()
        self._ordered_num_ids: List[int] = []
        self._drawing_id = 0

    # ------------------------------------------------------------------
    # document.xml

    def document_xml(self, blocks: Sequence[Block], layout: PageLayout,
                     media_rel_ids: Dict[int, str],
                     header_rel_id: Optional[str] = None,
                     footer_rel_id: Optional[str] = None) -> bytes:
        """
        Generate ``word/document.xml``.

        Args:
            blocks: Block stream in document order
            layout: Page layout for the section properties
            media_rel_ids: Block index of each image mapped to its relationship id
            header_rel_id: Relationship id of the header part, if any
            footer_rel_id: Relationship id of the footer part, if any

        Returns:
            Serialized XML
        """
        self._ordered_num_ids = []
        self._drawing_id = 0

        root = ET.Element(f"{W}document")
        body = ET.SubElement(root, f"{W}body")

        index = 0
        previous: Optional[Block] = None
        while index < len(blocks):
            block = blocks[index]
            if isinstance(block, TableRowBlock):
                rows = [block]
                index += 1
                while index < len(blocks) and continues_table(blocks[index], block):
                    rows.append(blocks[index])
                    index += 1
                body.append(self.table(rows, layout))
                previous = rows[-1]
                continue

            if isinstance(block, HeadingBlock):
                body.append(self.heading(block))
            elif isinstance(block, ParagraphBlock):
                body.append(self.paragraph(block.text, PARAGRAPH_STYLE_IDS[block.style], block.alignment))
            elif isinstance(block, ListItemBlock):
                body.append(self.list_item(block, previous))
            elif isinstance(block, ImageBlock):
                body.append(self.image(block, media_rel_ids[index]))
            elif isinstance(block, PageBreakBlock):
                body.append(self.page_break())
            else:
                raise TypeError(f"Unsupported block type: {type(block).__name__}")
            previous = block
            index += 1

        body.append(self.section_properties(layout, header_rel_id, footer_rel_id))
        return _serialize(root)

    def _paragraph_properties(self, p: ET.Element, style_id: Optional[str],
                              alignment: Optional[AlignmentType] = None) -> ET.Element:
        pPr = ET.SubElement(p, f"{W}pPr")
        if style_id and style_id != "Normal":
            ET.SubElement(pPr, f"{W}pStyle", {f"{W}val": style_id})
        if alignment is not None:
            ET.SubElement(pPr, f"{W}jc", {f"{W}val": JUSTIFICATION[alignment]})
        return pPr

    def _run(self, parent: ET.Element, text: str, tags: Iterable[CellTag] = ()) -> ET.Element:
        r = ET.SubElement(parent, f"{W}r")
        tags = set(tags)
        if tags & {CellTag.BOLD, CellTag.SEMIBOLD, CellTag.ITALIC, CellTag.UNDERLINE, CellTag.UPPERCASE}:
            rPr = ET.SubElement(r, f"{W}rPr")
            # No semibold weight in WordprocessingML
            if CellTag.BOLD in tags or CellTag.SEMIBOLD in tags:
                ET.SubElement(rPr, f"{W}b")
            if CellTag.ITALIC in tags:
                ET.SubElement(rPr, f"{W}i")
            if CellTag.UPPERCASE in tags:
                ET.SubElement(rPr, f"{W}caps")
            if CellTag.UNDERLINE in tags:
                ET.SubElement(rPr, f"{W}u", {f"{W}val": "single"})
        t = ET.SubElement(r, f"{W}t")
        t.text = clean_text(text)
        t.set(f"{{{XML_NS}}}space", "preserve")
        return r

    def paragraph(self, text: str, style_id: Optional[str] = None,
                  alignment: Optional[AlignmentType] = None) -> ET.Element:
        p = ET.Element(f"{W}p")
        self._paragraph_properties(p, style_id, alignment)
        if text:
            self._run(p, text)
        return p

    def heading(self, block: HeadingBlock) -> ET.Element:
        return self.paragraph(block.text, heading_style_id(block.level), block.alignment)

    def list_item(self, block: ListItemBlock, previous: Optional[Block]) -> ET.Element:
        if block.ordered:
            continues_run = (isinstance(previous, ListItemBlock) and previous.ordered
                             and block.index != 1)
            if not continues_run or not self._ordered_num_ids:
                self._ordered_num_ids.append(BULLET_NUM_ID + 1 + len(self._ordered_num_ids))
            num_id = self._ordered_num_ids[-1]
        else:
            num_id = BULLET_NUM_ID

        p = ET.Element(f"{W}p")
        pPr = self._paragraph_properties(p, "ListParagraph")
        numPr = ET.SubElement(pPr, f"{W}numPr")
        ET.SubElement(numPr, f"{W}ilvl", {f"{W}val": str(max(block.level - 1, 0))})
        ET.SubElement(numPr, f"{W}numId", {f"{W}val": str(num_id)})
        if block.text:
            self._run(p, block.text)
        return p

    def page_break(self) -> ET.Element:
        p = ET.Element(f"{W}p")
        r = ET.SubElement(p, f"{W}r")
        ET.SubElement(r, f"{W}br", {f"{W}type": "page"})
        return p

    def image(self, block: ImageBlock, rel_id: str) -> ET.Element:
        """Inline picture paragraph referencing an embedded media part."""
        self._drawing_id += 1
        cx = str(self.units.pixels_to_emu(block.width))
        cy = str(self.units.pixels_to_emu(block.height))
        name = block.name or f"Picture {self._drawing_id}"

        p = ET.Element(f"{W}p")
        self._paragraph_properties(p, None, block.alignment)
        r = ET.SubElement(p, f"{W}r")
        drawing = ET.SubElement(r, f"{W}drawing")
        inline = ET.SubElement(drawing, f"{WP}inline", {"distT": "0", "distB": "0", "distL": "0", "distR": "0"})
        ET.SubElement(inline, f"{WP}extent", {"cx": cx, "cy": cy})
        ET.SubElement(inline, f"{WP}effectExtent", {"l": "0", "t": "0", "r": "0", "b": "0"})
        ET.SubElement(inline, f"{WP}docPr", {
            "id": str(self._drawing_id),
            "name": clean_text(name),
            "descr": clean_text(block.description),
        })
        frame_pr = ET.SubElement(inline, f"{WP}cNvGraphicFramePr")
        ET.SubElement(frame_pr, f"{A}graphicFrameLocks", {"noChangeAspect": "1"})

        graphic = ET.SubElement(inline, f"{A}graphic")
        graphic_data = ET.SubElement(graphic, f"{A}graphicData",
                                     {"uri": "http://schemas.openxmlformats.org/drawingml/2006/picture"})
        pic = ET.SubElement(graphic_data, f"{PIC}pic")
        nv_pic_pr = ET.SubElement(pic, f"{PIC}nvPicPr")
        ET.SubElement(nv_pic_pr, f"{PIC}cNvPr", {
            "id": "0",
            "name": clean_text(name),
            "descr": clean_text(block.description),
        })
        ET.SubElement(nv_pic_pr, f"{PIC}cNvPicPr")
        blip_fill = ET.SubElement(pic, f"{PIC}blipFill")
        ET.SubElement(blip_fill, f"{A}blip", {f"{R}embed": rel_id})
        stretch = ET.SubElement(blip_fill, f"{A}stretch")
        ET.SubElement(stretch, f"{A}fillRect")
        sp_pr = ET.SubElement(pic, f"{PIC}spPr")
        xfrm = ET.SubElement(sp_pr, f"{A}xfrm")
        ET.SubElement(xfrm, f"{A}off", {"x": "0", "y": "0"})
        ET.SubElement(xfrm, f"{A}ext", {"cx": cx, "cy": cy})
        geom = ET.SubElement(sp_pr, f"{A}prstGeom", {"prst": "rect"})
        ET.SubElement(geom, f"{A}avLst")
        return p

    def table(self, rows: Sequence[TableRowBlock], layout: PageLayout) -> ET.Element:
        """One ``w:tbl`` built from consecutive rows of the same table."""
        columns = max(row.column_count for row in rows)
        text_width = self.units.inches_to_twips(layout.page_width - 2 * layout.margin)
        column_width = text_width // max(columns, 1)

        tbl = ET.Element(f"{W}tbl")
        tblPr = ET.SubElement(tbl, f"{W}tblPr")
        ET.SubElement(tblPr, f"{W}tblStyle", {f"{W}val": "TableGrid"})
        ET.SubElement(tblPr, f"{W}tblW", {f"{W}w": str(column_width * columns), f"{W}type": "dxa"})
        ET.SubElement(tblPr, f"{W}jc", {f"{W}val": "center"})
        ET.SubElement(tblPr, f"{W}tblLook", {
            f"{W}val": "04A0", f"{W}firstRow": "1", f"{W}lastRow": "0",
            f"{W}firstColumn": "0", f"{W}lastColumn": "0", f"{W}noHBand": "0", f"{W}noVBand": "1",
        })
        grid = ET.SubElement(tbl, f"{W}tblGrid")
        for _ in range(columns):
            ET.SubElement(grid, f"{W}gridCol", {f"{W}w": str(column_width)})

        for row in rows:
            tr = ET.SubElement(tbl, f"{W}tr")
            if row.is_header:
                trPr = ET.SubElement(tr, f"{W}trPr")
                ET.SubElement(trPr, f"{W}tblHeader")
            cells = list(row.cells) + [TableCell(text="")] * (columns - row.column_count)
            for cell in cells:
                tr.append(self.table_cell(cell, column_width))
        return tbl

    def table_cell(self, cell: TableCell, width: int) -> ET.Element:
        tc = ET.Element(f"{W}tc")
        tcPr = ET.SubElement(tc, f"{W}tcPr")
        ET.SubElement(tcPr, f"{W}tcW", {f"{W}w": str(width), f"{W}type": "dxa"})
        for tag, fill in SHADING_FILLS.items():
            if cell.has(tag):
                ET.SubElement(tcPr, f"{W}shd", {f"{W}val": "clear", f"{W}color": "auto", f"{W}fill": fill})
                break
        p = ET.SubElement(tc, f"{W}p")
        self._paragraph_properties(p, "TableText", cell.align)
        if cell.text:
            self._run(p, cell.text, cell.tags)
        return tc

    def section_properties(self, layout: PageLayout, header_rel_id: Optional[str],
                           footer_rel_id: Optional[str]) -> ET.Element:
        sectPr = ET.Element(f"{W}sectPr")
        if header_rel_id:
            ET.SubElement(sectPr, f"{W}headerReference", {f"{W}type": "default", f"{R}id": header_rel_id})
        if footer_rel_id:
            ET.SubElement(sectPr, f"{W}footerReference", {f"{W}type": "default", f"{R}id": footer_rel_id})
        ET.SubElement(sectPr, f"{W}pgSz", {
            f"{W}w": str(self.units.inches_to_twips(layout.page_width)),
            f"{W}h": str(self.units.inches_to_twips(layout.page_height)),
        })
        margin = str(self.units.inches_to_twips(layout.margin))
        half_inch = str(self.units.inches_to_twips(0.5))
        ET.SubElement(sectPr, f"{W}pgMar", {
            f"{W}top": margin, f"{W}right": margin, f"{W}bottom": margin, f"{W}left": margin,
            f"{W}header": half_inch, f"{W}footer": half_inch, f"{W}gutter": "0",
        })
        ET.SubElement(sectPr, f"{W}pgNumType", {f"{W}start": "1"})
        return sectPr

    # ------------------------------------------------------------------
    # header / footer

    def _page_field(self, p: ET.Element) -> None:
        fld = ET.SubElement(p, f"{W}fldSimple", {f"{W}instr": " PAGE "})
        r = ET.SubElement(fld, f"{W}r")
        t = ET.SubElement(r, f"{W}t")
        t.text = "1"

    def header_xml(self, layout: PageLayout) -> bytes:
        """Running head at the left margin, page number at the right."""
        root = ET.Element(f"{W}hdr")
        p = ET.SubElement(root, f"{W}p")
        pPr = self._paragraph_properties(p, "Header")
        tabs = ET.SubElement(pPr, f"{W}tabs")
        text_width = self.units.inches_to_twips(layout.page_width - 2 * layout.margin)
        ET.SubElement(tabs, f"{W}tab", {f"{W}val": "right", f"{W}pos": str(text_width)})
        if layout.running_head:
            self._run(p, layout.running_head.upper())
        if layout.page_number_in_header:
            r = ET.SubElement(p, f"{W}r")
            ET.SubElement(r, f"{W}tab")
            self._page_field(p)
        return _serialize(root)

    def footer_xml(self, layout: PageLayout) -> bytes:
        root = ET.Element(f"{W}ftr")
        p = ET.SubElement(root, f"{W}p")
        self._paragraph_properties(p, "Footer", AlignmentType.CENTER)
        if layout.page_number_in_footer:
            self._page_field(p)
        return _serialize(root)

    # ------------------------------------------------------------------
    # styles.xml

    def _style(self, root: ET.Element, style_id: str, name: str, style_type: str = "paragraph",
               based_on: Optional[str] = "Normal", size: Optional[float] = None,
               bold: bool = False, italic: bool = False, align: Optional[str] = None,
               color: Optional[str] = None, outline_level: Optional[int] = None,
               before: Optional[float] = None, after: Optional[float] = None,
               spacing: Optional[Dict[str, str]] = None, indent: Optional[Dict[str, str]] = None,
               keep_next: bool = False) -> ET.Element:
        # before/after are in points; spacing carries raw attributes such as line
        spacing_attrs: Dict[str, str] = {}
        if before is not None:
            spacing_attrs["before"] = str(self.units.points_to_twips(before))
        if after is not None:
            spacing_attrs["after"] = str(self.units.points_to_twips(after))
        spacing_attrs.update(spacing or {})
        style = ET.SubElement(root, f"{W}style", {f"{W}type": style_type, f"{W}styleId": style_id})
        ET.SubElement(style, f"{W}name", {f"{W}val": name})
        if based_on:
            ET.SubElement(style, f"{W}basedOn", {f"{W}val": based_on})
        if style_type == "paragraph":
            ET.SubElement(style, f"{W}qFormat")
            pPr = ET.SubElement(style, f"{W}pPr")
            if keep_next:
                ET.SubElement(pPr, f"{W}keepNext")
            if spacing_attrs:
                ET.SubElement(pPr, f"{W}spacing", {f"{W}{k}": v for k, v in spacing_attrs.items()})
            if indent:
                ET.SubElement(pPr, f"{W}ind", {f"{W}{k}": v for k, v in indent.items()})
            if align:
                ET.SubElement(pPr, f"{W}jc", {f"{W}val": align})
            if outline_level is not None:
                ET.SubElement(pPr, f"{W}outlineLvl", {f"{W}val": str(outline_level)})
        rPr = ET.SubElement(style, f"{W}rPr")
        if bold:
            ET.SubElement(rPr, f"{W}b")
        if italic:
            ET.SubElement(rPr, f"{W}i")
        if color:
            ET.SubElement(rPr, f"{W}color", {f"{W}val": color})
        if size is not None:
            half_points = str(self.units.points_to_half_points(size))
            ET.SubElement(rPr, f"{W}sz", {f"{W}val": half_points})
            ET.SubElement(rPr, f"{W}szCs", {f"{W}val": half_points})
        return style

    def styles_xml(self) -> bytes:
        """Generate ``word/styles.xml`` from the export options."""
        options = self.options
        root = ET.Element(f"{W}styles")

        defaults = ET.SubElement(root, f"{W}docDefaults")
        rpr_default = ET.SubElement(ET.SubElement(defaults, f"{W}rPrDefault"), f"{W}rPr")
        ET.SubElement(rpr_default, f"{W}rFonts", {
            f"{W}ascii": options.font_name, f"{W}hAnsi": options.font_name,
            f"{W}eastAsia": options.font_name, f"{W}cs": options.font_name,
        })
        body_size = str(self.units.points_to_half_points(options.font_size))
        ET.SubElement(rpr_default, f"{W}sz", {f"{W}val": body_size})
        ET.SubElement(rpr_default, f"{W}szCs", {f"{W}val": body_size})
        ppr_default = ET.SubElement(ET.SubElement(defaults, f"{W}pPrDefault"), f"{W}pPr")
        ET.SubElement(ppr_default, f"{W}spacing", {
            f"{W}after": "0", f"{W}line": str(options.line_spacing), f"{W}lineRule": "auto",
        })

        normal = self._style(root, "Normal", "Normal", based_on=None)
        normal.set(f"{W}default", "1")
        self._style(root, "Title", "Title", size=options.title_font_size, bold=True, align="center",
                    before=144, after=24)
        self._style(root, "Heading1", "heading 1", size=options.heading1_font_size, bold=True,
                    outline_level=0, keep_next=True, before=24, after=12)
        self._style(root, "Heading2", "heading 2", size=options.heading2_font_size, bold=True,
                    outline_level=1, keep_next=True, before=18, after=6)
        self._style(root, "TitleLine", "Title Line", align="center", after=6)
        self._style(root, "Caption", "caption", size=options.caption_font_size, italic=True, align="center",
                    before=6, after=12)
        self._style(root, "Citation", "Citation", after=6)
        self._style(root, "Bibliography", "Bibliography", after=6,
                    indent={"left": "720", "hanging": "720"})
        self._style(root, "FootnoteText", "footnote text", size=options.caption_font_size,
                    after=3, spacing={"line": "240", "lineRule": "auto"})
        self._style(root, "Placeholder", "Placeholder", italic=True, color="808080")
        self._style(root, "ListParagraph", "List Paragraph", indent={"left": "720"})
        self._style(root, "TableText", "Table Text", spacing={"line": "240", "lineRule": "auto"})
        self._style(root, "Header", "header", spacing={"line": "240", "lineRule": "auto"})
        self._style(root, "Footer", "footer", spacing={"line": "240", "lineRule": "auto"})

        table_style = ET.SubElement(root, f"{W}style", {f"{W}type": "table", f"{W}styleId": "TableGrid"})
        ET.SubElement(table_style, f"{W}name", {f"{W}val": "Table Grid"})
        tblPr = ET.SubElement(table_style, f"{W}tblPr")
        borders = ET.SubElement(tblPr, f"{W}tblBorders")
        for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
            ET.SubElement(borders, f"{W}{edge}", {
                f"{W}val": "single", f"{W}sz": "4", f"{W}space": "0", f"{W}color": "auto",
            })
        margins = ET.SubElement(tblPr, f"{W}tblCellMar")
        ET.SubElement(margins, f"{W}left", {f"{W}w": "108", f"{W}type": "dxa"})
        ET.SubElement(margins, f"{W}right", {f"{W}w": "108", f"{W}type": "dxa"})
        return _serialize(root)

    # ------------------------------------------------------------------
    # numbering.xml

    def _abstract_num(self, root: ET.Element, abstract_id: int, fmt: str, text: str) -> None:
        abstract = ET.SubElement(root, f"{W}abstractNum", {f"{W}abstractNumId": str(abstract_id)})
        ET.SubElement(abstract, f"{W}multiLevelType", {f"{W}val": "singleLevel"})
        lvl = ET.SubElement(abstract, f"{W}lvl", {f"{W}ilvl": "0"})
        ET.SubElement(lvl, f"{W}start", {f"{W}val": "1"})
        ET.SubElement(lvl, f"{W}numFmt", {f"{W}val": fmt})
        ET.SubElement(lvl, f"{W}lvlText", {f"{W}val": text})
        ET.SubElement(lvl, f"{W}lvlJc", {f"{W}val": "left"})
        pPr = ET.SubElement(lvl, f"{W}pPr")
        ET.SubElement(pPr, f"{W}ind", {f"{W}left": "720", f"{W}hanging": "360"})

    def numbering_xml(self) -> bytes:
        """
        Generate ``word/numbering.xml``.

        Must run after ``document_xml``: every ordered list run allocated
        there gets its own ``w:num`` restarting at 1.
        """
        root = ET.Element(f"{W}numbering")
        self._abstract_num(root, BULLET_ABSTRACT_ID, "bullet", "•")
        self._abstract_num(root, DECIMAL_ABSTRACT_ID, "decimal", "%1.")

        bullet = ET.SubElement(root, f"{W}num", {f"{W}numId": str(BULLET_NUM_ID)})
        ET.SubElement(bullet, f"{W}abstractNumId", {f"{W}val": str(BULLET_ABSTRACT_ID)})
        for num_id in self._ordered_num_ids:
            num = ET.SubElement(root, f"{W}num", {f"{W}numId": str(num_id)})
            ET.SubElement(num, f"{W}abstractNumId", {f"{W}val": str(DECIMAL_ABSTRACT_ID)})
            override = ET.SubElement(num, f"{W}lvlOverride", {f"{W}ilvl": "0"})
            ET.SubElement(override, f"{W}startOverride", {f"{W}val": "1"})
        return _serialize(root)

    @property
    def ordered_list_runs(self) -> int:
        return len(self._ordered_num_ids)

    # ------------------------------------------------------------------
    # settings.xml

    def settings_xml(self) -> bytes:
        root = ET.Element(f"{W}settings")
        ET.SubElement(root, f"{W}zoom", {f"{W}percent": "100"})
        ET.SubElement(root, f"{W}defaultTabStop", {f"{W}val": "720"})
        ET.SubElement(root, f"{W}characterSpacingControl", {f"{W}val": "doNotCompress"})
        compat = ET.SubElement(root, f"{W}compat")
        ET.SubElement(compat, f"{W}compatSetting", {
            f"{W}name": "compatibilityMode",
            f"{W}uri": "http://schemas.microsoft.com/office/word",
            f"{W}val": "15",
        })
        return _serialize(root)
