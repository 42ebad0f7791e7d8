"""
Tests for the HTML preview exporter.
"""

import pytest

from thesisquill.assembly.builder import DocumentStructuralBuilder
from thesisquill.config import ExportOptions
from thesisquill.export.html_exporter import HTMLExporter
from thesisquill.models import load_thesis
from thesisquill.models.blocks import ListItemBlock, ParagraphBlock, TableCell, TableRowBlock
from thesisquill.utils.enums import CellTag, ParagraphStyle


@pytest.fixture
def exporter(full_snapshot):
    document = DocumentStructuralBuilder().build(load_thesis(full_snapshot), preview=True)
    return HTMLExporter(document)


class TestHTMLExporter:
    """Test preview rendering."""

    def test_document_shell(self, exporter):
        html = exporter.export_to_string()

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>On Things</title>" in html
        assert "<header class='running-head'>THINGS</header>" in html
        assert html.rstrip().endswith("</html>")

    def test_title_and_page_breaks(self, exporter):
        html = exporter.export_to_string()

        assert '<h1 class="document-title" style="text-align: center">ON THINGS</h1>' in html
        assert html.count("<div class='page-break'></div>") == len(exporter.document.page_break_positions)

    def test_inline_image(self, exporter):
        assert 'src="data:image/png;base64,' in exporter.export_to_string()

    def test_escaping(self, exporter):
        html = exporter.export_paragraph(ParagraphBlock(text='<b>"R&D"</b>'))

        assert html == "<p class='paragraph'>&lt;b&gt;&quot;R&amp;D&quot;&lt;/b&gt;</p>"

    def test_paragraph_classes(self, exporter):
        html = exporter.export_paragraph(ParagraphBlock(text="x", style=ParagraphStyle.PLACEHOLDER))

        assert "class='placeholder'" in html

    def test_lists_grouped(self, exporter):
        blocks = [
            ListItemBlock(ordered=True, level=1, text="a", index=1),
            ListItemBlock(ordered=True, level=1, text="b", index=2),
            ListItemBlock(ordered=False, level=1, text="c"),
        ]
        html = exporter.export_blocks(blocks)

        assert html.count("<ol class='list'>") == 1
        assert html.count("<ul class='list'>") == 1
        assert html.count("<li") == 3

    def test_ordered_run_restart_starts_new_list(self, exporter):
        blocks = [
            ListItemBlock(ordered=True, level=1, text="a", index=1),
            ListItemBlock(ordered=True, level=1, text="b", index=1),
        ]

        assert exporter.export_blocks(blocks).count("<ol class='list'>") == 2

    def test_table(self, exporter):
        rows = [
            TableRowBlock(table_id="t", cells=(TableCell(text="A", tags=(CellTag.SHADED, CellTag.BOLD)),),
                          is_header=True),
            TableRowBlock(table_id="t", cells=(TableCell(text="1"),)),
        ]
        html = exporter.export_blocks(rows)

        assert html.count("<table") == 1
        assert '<th class="table-cell cell-shaded cell-bold" style="text-align: left">A</th>' in html
        assert '<td class="table-cell" style="text-align: left">1</td>' in html

    def test_header_row_starts_new_table(self, exporter):
        rows = [
            TableRowBlock(table_id="t", cells=(TableCell(text="A"),), is_header=True),
            TableRowBlock(table_id="t", cells=(TableCell(text="1"),)),
            TableRowBlock(table_id="t", cells=(TableCell(text="X"), TableCell(text="Y")), is_header=True),
        ]

        assert exporter.export_blocks(rows).count("<table") == 2

    def test_css_uses_preview_font(self, full_snapshot):
        options = ExportOptions(preview_font_name="Helvetica")
        document = DocumentStructuralBuilder(options).build(load_thesis(full_snapshot), preview=True)

        assert 'font-family: "Helvetica"' in HTMLExporter(document, options).generate_css_styles()

    def test_export_to_file(self, exporter, temp_dir):
        output_path = exporter.export(temp_dir / "preview.html")

        assert output_path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
