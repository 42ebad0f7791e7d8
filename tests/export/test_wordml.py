"""
Tests for the WordprocessingML writer.
"""

import xml.etree.ElementTree as ET

import pytest

from thesisquill.assembly.builder import PageLayout
from thesisquill.config import ExportOptions
from thesisquill.export.wordml import NAMESPACES, WordMLWriter, clean_text, heading_style_id
from thesisquill.models.blocks import (
    HeadingBlock,
    ImageBlock,
    ListItemBlock,
    PageBreakBlock,
    ParagraphBlock,
    TableCell,
    TableRowBlock,
)
from thesisquill.utils.enums import AlignmentType, CellTag, ParagraphStyle

W = f"{{{NAMESPACES['w']}}}"


@pytest.fixture
def layout():
    return PageLayout(
        running_head="Short Title",
        page_number_in_header=True,
        page_number_in_footer=True,
        page_width=8.5,
        page_height=11.0,
        margin=1.0,
    )


@pytest.fixture
def writer():
    return WordMLWriter(ExportOptions())


def body_of(xml: bytes) -> ET.Element:
    return ET.fromstring(xml).find(f"{W}body")


def style_of(p: ET.Element):
    style = p.find(f"{W}pPr/{W}pStyle")
    return style.get(f"{W}val") if style is not None else None


def num_id_of(p: ET.Element) -> str:
    return p.find(f"{W}pPr/{W}numPr/{W}numId").get(f"{W}val")


class TestHelpers:
    """Test module helpers."""

    def test_heading_style_ids(self):
        assert heading_style_id(0) == "Title"
        assert heading_style_id(1) == "Heading1"
        assert heading_style_id(2) == "Heading2"
        assert heading_style_id(5) == "Heading2"

    def test_writer_leaves_namespace_registry_alone(self, layout, monkeypatch):
        def fail(prefix, uri):
            raise AssertionError(f"register_namespace({prefix!r}) during export")

        monkeypatch.setattr(ET, "register_namespace", fail)
        xml = WordMLWriter().document_xml([ParagraphBlock(text="x")], layout, {})

        assert xml.startswith(b"<?xml")
        assert b"<w:document" in xml

    def test_clean_text_strips_control_characters(self):
        assert clean_text("a\x00b\x0bc\td") == "abc\td"


class TestDocumentXML:
    """Test document.xml generation."""

    def test_paragraph_styles(self, writer, layout):
        blocks = [
            HeadingBlock(level=0, text="TITLE", alignment=AlignmentType.CENTER),
            HeadingBlock(level=1, text="Chapter"),
            ParagraphBlock(text="Body"),
            ParagraphBlock(text="Figure 1: x", style=ParagraphStyle.CAPTION, alignment=AlignmentType.CENTER),
            ParagraphBlock(text="[Error loading figure: x]", style=ParagraphStyle.PLACEHOLDER),
        ]
        body = body_of(writer.document_xml(blocks, layout, {}))
        paragraphs = body.findall(f"{W}p")

        assert [style_of(p) for p in paragraphs] == ["Title", "Heading1", None, "Caption", "Placeholder"]
        assert paragraphs[0].find(f"{W}pPr/{W}jc").get(f"{W}val") == "center"
        assert paragraphs[2].find(f".//{W}t").text == "Body"

    def test_page_break(self, writer, layout):
        body = body_of(writer.document_xml([PageBreakBlock()], layout, {}))
        br = body.find(f"{W}p/{W}r/{W}br")

        assert br.get(f"{W}type") == "page"

    def test_section_properties_last(self, writer, layout):
        body = body_of(writer.document_xml([ParagraphBlock(text="x")], layout, {}, "rId7", "rId8"))
        sect = list(body)[-1]

        assert sect.tag == f"{W}sectPr"
        assert sect.find(f"{W}headerReference") is not None
        assert sect.find(f"{W}pgSz").get(f"{W}w") == "12240"
        assert sect.find(f"{W}pgMar").get(f"{W}left") == "1440"

    def test_bullets_share_numbering(self, writer, layout):
        blocks = [ListItemBlock(ordered=False, level=1, text=t) for t in "abc"]
        body = body_of(writer.document_xml(blocks, layout, {}))

        assert {num_id_of(p) for p in body.findall(f"{W}p")} == {"1"}
        assert writer.ordered_list_runs == 0

    def test_each_ordered_run_restarts(self, writer, layout):
        blocks = [
            ListItemBlock(ordered=True, level=1, text="a", index=1),
            ListItemBlock(ordered=True, level=1, text="b", index=2),
            ParagraphBlock(text="c"),
            ListItemBlock(ordered=True, level=1, text="d", index=1),
        ]
        body = body_of(writer.document_xml(blocks, layout, {}))
        items = [p for p in body.findall(f"{W}p") if p.find(f"{W}pPr/{W}numPr") is not None]

        ids = [num_id_of(p) for p in items]
        assert ids[0] == ids[1]
        assert ids[2] != ids[0]
        assert writer.ordered_list_runs == 2

        numbering = ET.fromstring(writer.numbering_xml())
        overrides = numbering.findall(f"{W}num/{W}lvlOverride/{W}startOverride")
        assert [o.get(f"{W}val") for o in overrides] == ["1", "1"]

    def test_table_rows_grouped(self, writer, layout):
        header = TableRowBlock(
            table_id="t-1",
            cells=(TableCell(text="A", tags=(CellTag.SHADED, CellTag.BOLD, CellTag.UPPERCASE)),
                   TableCell(text="B", align=AlignmentType.RIGHT)),
            is_header=True,
        )
        row = TableRowBlock(table_id="t-1", cells=(TableCell(text="1"), TableCell(text="2")))
        other = TableRowBlock(table_id="t-2", cells=(TableCell(text="x"),), is_header=True)
        body = body_of(writer.document_xml([header, row, other], layout, {}))

        tables = body.findall(f"{W}tbl")
        assert len(tables) == 2
        first = tables[0]
        assert len(first.findall(f"{W}tr")) == 2
        assert len(first.findall(f"{W}tblGrid/{W}gridCol")) == 2
        assert first.find(f"{W}tr/{W}trPr/{W}tblHeader") is not None

        cell = first.find(f"{W}tr/{W}tc")
        assert cell.find(f"{W}tcPr/{W}shd").get(f"{W}fill") == "E5E7EB"
        run_props = cell.find(f".//{W}rPr")
        assert run_props.find(f"{W}b") is not None
        assert run_props.find(f"{W}caps") is not None

        second_cell = first.findall(f"{W}tr/{W}tc")[1]
        assert second_cell.find(f"{W}p/{W}pPr/{W}jc").get(f"{W}val") == "right"

    def test_header_row_starts_new_table(self, writer, layout):
        blocks = [
            TableRowBlock(table_id="t", cells=(TableCell(text="A"), TableCell(text="B")), is_header=True),
            TableRowBlock(table_id="t", cells=(TableCell(text="X"), TableCell(text="Y"),
                                               TableCell(text="Z")), is_header=True),
        ]
        tables = body_of(writer.document_xml(blocks, layout, {})).findall(f"{W}tbl")

        assert len(tables) == 2
        assert len(tables[1].findall(f"{W}tblGrid/{W}gridCol")) == 3

    def test_image(self, writer, layout, png_bytes):
        block = ImageBlock(data=png_bytes, content_type="image/png", extension="png",
                           width=96, height=48, description="A red square", name="Figure 1")
        xml = writer.document_xml([block], layout, {0: "rId9"})
        root = ET.fromstring(xml)

        extent = root.find(f".//{{{NAMESPACES['wp']}}}extent")
        assert extent.get("cx") == "914400"
        assert extent.get("cy") == "457200"
        doc_pr = root.find(f".//{{{NAMESPACES['wp']}}}docPr")
        assert doc_pr.get("descr") == "A red square"
        blip = root.find(f".//{{{NAMESPACES['a']}}}blip")
        assert blip.get(f"{{{NAMESPACES['r']}}}embed") == "rId9"


class TestOtherParts:
    """Test styles, header and footer parts."""

    def test_header(self, writer, layout):
        root = ET.fromstring(writer.header_xml(layout))
        texts = [t.text for t in root.iter(f"{W}t")]

        assert "SHORT TITLE" in texts
        assert root.find(f".//{W}fldSimple").get(f"{W}instr").strip() == "PAGE"

    def test_footer(self, writer, layout):
        root = ET.fromstring(writer.footer_xml(layout))

        assert root.find(f".//{W}fldSimple") is not None
        assert root.find(f".//{W}jc").get(f"{W}val") == "center"

    def test_styles_follow_options(self, layout):
        writer = WordMLWriter(ExportOptions(font_name="Garamond", font_size=11))
        root = ET.fromstring(writer.styles_xml())

        fonts = root.find(f"{W}docDefaults/{W}rPrDefault/{W}rPr/{W}rFonts")
        assert fonts.get(f"{W}ascii") == "Garamond"
        size = root.find(f"{W}docDefaults/{W}rPrDefault/{W}rPr/{W}sz")
        assert size.get(f"{W}val") == "22"
        style_ids = {s.get(f"{W}styleId") for s in root.findall(f"{W}style")}
        assert {"Normal", "Title", "Heading1", "Heading2", "Caption", "Placeholder", "TableGrid"} <= style_ids

    def test_style_spacing_in_twips(self):
        root = ET.fromstring(WordMLWriter().styles_xml())
        styles = {s.get(f"{W}styleId"): s for s in root.findall(f"{W}style")}

        heading = styles["Heading1"].find(f"{W}pPr/{W}spacing")
        assert heading.get(f"{W}before") == "480"
        assert heading.get(f"{W}after") == "240"
        footnote = styles["FootnoteText"].find(f"{W}pPr/{W}spacing")
        assert footnote.get(f"{W}after") == "60"
        assert footnote.get(f"{W}line") == "240"
