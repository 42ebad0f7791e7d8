"""
Tests for the snapshot loader.
"""

import json

import pytest

from thesisquill.exceptions import SnapshotError
from thesisquill.models import (
    CitationType,
    GridTable,
    OpaqueTable,
    SectionType,
    load_thesis,
    load_thesis_file,
)
from thesisquill.models.loader import (
    load_citation,
    load_metadata,
    load_section,
    load_table,
    normalize_content,
)
from thesisquill.utils.enums import AlignmentType, HeaderStyle


class TestNormalizeContent:
    """Test section content normalization."""

    def test_string_passthrough(self):
        assert normalize_content("# H\ntext") == "# H\ntext"

    def test_none_is_empty(self):
        assert normalize_content(None) == ""

    def test_block_list_joined_with_blank_lines(self):
        content = [{"type": "paragraph", "content": "one"}, {"type": "paragraph", "content": "two"}]
        assert normalize_content(content) == "one\n\ntwo"

    def test_plain_string_list(self):
        assert normalize_content(["a", "b"]) == "a\n\nb"

    def test_unsupported_content(self):
        with pytest.raises(SnapshotError):
            normalize_content(42)


class TestLoadTable:
    """Test resolution of the two table shapes."""

    def test_grid_table(self):
        table = load_table({"id": "t", "headers": ["A", "B"], "rows": [["1", "2"]], "caption": "T"})

        assert isinstance(table, GridTable)
        assert [h.text for h in table.headers] == ["A", "B"]
        assert [c.text for c in table.rows[0]] == ["1", "2"]
        assert table.header_style == HeaderStyle.PRIMARY

    def test_grid_table_under_data_key(self):
        table = load_table({"id": "t", "data": {"headers": ["A"], "rows": [["1"]]}})

        assert isinstance(table, GridTable)
        assert table.headers[0].text == "A"

    def test_cell_formatting(self):
        table = load_table({
            "id": "t",
            "headers": [{"text": "A", "format": {"align": "center", "headerStyle": "secondary"}}],
            "rows": [[{"text": "1", "bold": True, "italic": True}]],
        })

        header = table.headers[0]
        assert header.format.align == AlignmentType.CENTER
        assert header.format.header_style == HeaderStyle.SECONDARY
        cell = table.rows[0][0]
        assert cell.format.bold is True
        assert cell.format.italic is True
        assert cell.format.underline is False

    def test_opaque_table(self):
        table = load_table({"id": "t", "content": "<table><tr><td>x</td></tr></table>", "title": "Old"})

        assert isinstance(table, OpaqueTable)
        assert table.title == "Old"

    def test_both_shapes_rejected(self):
        with pytest.raises(SnapshotError):
            load_table({"id": "t", "headers": ["A"], "rows": [], "content": "<table></table>"})

    def test_neither_shape_rejected(self):
        with pytest.raises(SnapshotError):
            load_table({"id": "t", "caption": "empty"})

    def test_unknown_alignment(self):
        with pytest.raises(SnapshotError):
            load_table({"id": "t", "headers": [{"text": "A", "align": "diagonal"}], "rows": []})


class TestLoadCitation:
    """Test citation loading."""

    def test_fields(self):
        citation = load_citation({
            "id": "c", "text": "T", "authors": ["A B"], "year": 2020,
            "type": "Article", "journal": "J", "volume": "3",
        })

        assert citation.year == "2020"
        assert citation.type == CitationType.ARTICLE
        assert citation.journal == "J"
        assert citation.issue is None

    def test_blank_optional_fields_are_none(self):
        citation = load_citation({"id": "c", "text": "T", "authors": ["A"], "doi": "  "})
        assert citation.doi is None

    def test_no_authors_rejected(self):
        with pytest.raises(SnapshotError):
            load_citation({"id": "c", "text": "T", "authors": []})

    def test_unknown_type_rejected(self):
        with pytest.raises(SnapshotError):
            load_citation({"id": "c", "text": "T", "authors": ["A"], "type": "podcast"})


class TestLoadSection:
    """Test section loading."""

    def test_defaults(self):
        section = load_section({"id": "s", "title": "S"})

        assert section.type == SectionType.CUSTOM
        assert section.content == ""
        assert section.figures == ()
        assert section.order == 0

    def test_footnote_numbers_fall_back_to_position(self):
        section = load_section({
            "id": "s", "title": "S", "type": "custom",
            "footnotes": [{"content": "one"}, {"content": "two", "number": 7}],
        })

        assert [f.number for f in section.footnotes] == [1, 7]

    def test_unknown_type_rejected(self):
        with pytest.raises(SnapshotError):
            load_section({"id": "s", "title": "S", "type": "epilogue"})

    def test_list_instead_of_object(self):
        with pytest.raises(SnapshotError):
            load_section(["not", "a", "section"])


class TestLoadThesis:
    """Test whole-snapshot loading."""

    def test_minimal(self, minimal_snapshot):
        thesis = load_thesis(minimal_snapshot)

        assert len(thesis.front_matter) == 1
        assert thesis.front_matter[0].type == SectionType.TITLE
        assert thesis.chapters[0].sections[0].content == "# H\n- a\n- b"
        assert thesis.back_matter == ()

    def test_record_wrapping_content(self, minimal_snapshot):
        record = {"id": "thesis-1", "metadata": {"authorName": "Ada"}, "content": minimal_snapshot}
        thesis = load_thesis(record)

        assert thesis.metadata.author_name == "Ada"
        assert thesis.chapters[0].title == "C1"

    def test_snake_case_keys(self):
        thesis = load_thesis({
            "front_matter": [{"type": "title", "title": "T"}],
            "back_matter": [{"type": "appendix", "title": "A"}],
        })

        assert thesis.back_matter[0].type == SectionType.APPENDIX

    def test_metadata_author_objects(self):
        metadata = load_metadata({
            "authors": [{"firstName": "Ada", "lastName": "Lovelace"}, {"firstName": "Alan", "lastName": "Turing"}],
            "supervisors": [{"firstName": "Charles", "lastName": "Babbage"}],
        })

        assert metadata.author_name == "Ada Lovelace, Alan Turing"
        assert metadata.supervisors == ("Charles Babbage",)

    def test_full_snapshot(self, full_snapshot):
        thesis = load_thesis(full_snapshot)

        assert thesis.metadata.short_title == "Things"
        assert thesis.metadata.keywords == ("things", "study")
        assert len(list(thesis.iter_sections())) == 7
        assert thesis.back_matter[0].references[0].title == "A Book"

    def test_load_file(self, minimal_snapshot, temp_dir):
        path = temp_dir / "thesis.json"
        path.write_text(json.dumps(minimal_snapshot), encoding="utf-8")

        thesis = load_thesis_file(path)
        assert thesis.chapters[0].title == "C1"

    def test_load_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotError):
            load_thesis_file(path)

    def test_load_non_utf8_file(self, temp_dir):
        path = temp_dir / "thesis.json"
        path.write_bytes(b"\xff\xfe{}")

        with pytest.raises(SnapshotError, match="not UTF-8"):
            load_thesis_file(path)

    def test_load_directory(self, temp_dir):
        with pytest.raises(SnapshotError, match="Cannot read snapshot"):
            load_thesis_file(temp_dir)
