"""
Tests for the high-level API.
"""

import io
import xml.etree.ElementTree as ET
import zipfile

import pytest

from thesisquill import (
    ExportOptions,
    SnapshotError,
    ThesisValidationError,
    export_full,
    export_preview,
    load_thesis,
    suggested_filename,
)
from thesisquill.export import DOCX_MEDIA_TYPE
from thesisquill.models.blocks import HeadingBlock, ListItemBlock, PageBreakBlock

W = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"


class TestExportFull:
    """Test full export."""

    def test_minimal_export(self, minimal_snapshot):
        artifact = export_full(minimal_snapshot)

        assert artifact.media_type == DOCX_MEDIA_TYPE
        assert artifact.filename == "T1.docx"
        assert zipfile.is_zipfile(io.BytesIO(artifact.content))

    def test_end_to_end_block_order(self, minimal_snapshot):
        blocks = export_full(minimal_snapshot).blocks

        assert blocks[-6:] == (
            PageBreakBlock(),
            HeadingBlock(level=1, text="C1"),
            HeadingBlock(level=2, text="S1"),
            HeadingBlock(level=1, text="H"),
            ListItemBlock(ordered=False, level=1, text="a"),
            ListItemBlock(ordered=False, level=1, text="b"),
        )

    def test_accepts_loaded_thesis(self, full_snapshot):
        thesis = load_thesis(full_snapshot)

        assert export_full(thesis).content == export_full(full_snapshot).content

    def test_deterministic(self, full_snapshot):
        first = export_full(full_snapshot)
        second = export_full(full_snapshot)

        assert first.blocks == second.blocks
        assert first.content == second.content

    def test_bad_figure_still_exports(self, minimal_snapshot):
        minimal_snapshot["chapters"][0]["sections"][0]["figures"] = [
            {"id": "f", "caption": "Chart", "imageData": "data:image/png;base64,!!!"}
        ]
        artifact = export_full(minimal_snapshot)

        assert artifact.blocks[-1].text == "[Error loading figure: Chart]"
        assert zipfile.is_zipfile(io.BytesIO(artifact.content))

    def test_tables_without_ids_stay_separate(self, minimal_snapshot):
        minimal_snapshot["chapters"][0]["sections"][0]["tables"] = [
            {"headers": ["A", "B"], "number": 1},
            {"headers": ["X", "Y", "Z"], "number": 1},
        ]
        artifact = export_full(minimal_snapshot)

        with zipfile.ZipFile(io.BytesIO(artifact.content)) as package:
            document = ET.fromstring(package.read("word/document.xml"))
        assert len(document.findall(f"{W}body/{W}tbl")) == 2
        assert export_preview(minimal_snapshot).html.count("<table") == 2

    def test_options_applied(self, minimal_snapshot):
        artifact = export_full(minimal_snapshot, ExportOptions(page_size="a4"))

        assert artifact.layout.page_width == 8.27

    def test_missing_title(self, minimal_snapshot):
        minimal_snapshot["frontMatter"] = []

        with pytest.raises(ThesisValidationError):
            export_full(minimal_snapshot)

    def test_malformed_snapshot(self):
        with pytest.raises(SnapshotError):
            export_full({"chapters": "not a list"})


class TestExportPreview:
    """Test preview export."""

    def test_preview(self, full_snapshot):
        preview = export_preview(full_snapshot)

        assert "Table of Contents" not in preview.html
        assert "Bibliography" not in preview.html
        assert "Findings" in preview.html

    def test_preview_is_subset_of_full(self, full_snapshot):
        full = export_full(full_snapshot).blocks
        preview = export_preview(full_snapshot).blocks

        assert len(preview) < len(full)
        assert preview[0] == full[0]


class TestSuggestedFilename:
    """Test download filename derivation."""

    @pytest.mark.parametrize("title, expected", [
        ("On Things", "On Things.docx"),
        ('A/B: "C"?', "AB C.docx"),
        ("  spaced   out  ", "spaced out.docx"),
        ("", "thesis.docx"),
        (None, "thesis.docx"),
        ("///", "thesis.docx"),
    ])
    def test_filenames(self, title, expected):
        assert suggested_filename(title) == expected

    def test_extension(self):
        assert suggested_filename("X", extension="html") == "X.html"
