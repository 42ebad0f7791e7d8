"""
Tests for the markdown block converter.
"""

from thesisquill.converters.markdown import MarkdownBlockConverter, markdown_to_blocks
from thesisquill.models.blocks import HeadingBlock, ListItemBlock, ParagraphBlock


class TestMarkdownBlockConverter:
    """Test line-oriented markdown conversion."""

    def test_heading(self):
        blocks = markdown_to_blocks("# Heading")

        assert blocks == [HeadingBlock(level=1, text="Heading")]

    def test_only_level_one_heading_recognized(self):
        blocks = markdown_to_blocks("## Not a heading")

        assert blocks == [ParagraphBlock(text="## Not a heading")]

    def test_hash_without_space_is_paragraph(self):
        assert markdown_to_blocks("#tag") == [ParagraphBlock(text="#tag")]

    def test_unordered_items(self):
        blocks = markdown_to_blocks("- a\n* b")

        assert blocks == [
            ListItemBlock(ordered=False, level=1, text="a"),
            ListItemBlock(ordered=False, level=1, text="b"),
        ]

    def test_ordered_items_count_from_one(self):
        blocks = markdown_to_blocks("7. a\n3. b")

        assert [b.index for b in blocks] == [1, 2]
        assert [b.text for b in blocks] == ["a", "b"]

    def test_paragraph_resets_ordered_counter(self):
        blocks = markdown_to_blocks("1. a\n2. b\nc\n1. d")

        assert isinstance(blocks[0], ListItemBlock) and blocks[0].index == 1
        assert isinstance(blocks[1], ListItemBlock) and blocks[1].index == 2
        assert blocks[2] == ParagraphBlock(text="c")
        assert isinstance(blocks[3], ListItemBlock) and blocks[3].index == 1

    def test_switching_list_type_resets_counter(self):
        blocks = markdown_to_blocks("1. a\n- b\n1. c")

        assert blocks[0].index == 1
        assert blocks[1].ordered is False
        assert blocks[2].index == 1

    def test_heading_closes_list(self):
        blocks = markdown_to_blocks("1. a\n# H\n1. b")

        assert blocks[2].index == 1

    def test_one_block_per_line(self):
        text = "# H\n\n- a\nplain\n\n2. x"
        blocks = markdown_to_blocks(text)

        assert len(blocks) == len(text.split("\n"))

    def test_blank_line_is_empty_paragraph(self):
        blocks = markdown_to_blocks("a\n\nb")

        assert blocks[1] == ParagraphBlock(text="")

    def test_crlf_line_endings(self):
        blocks = markdown_to_blocks("# H\r\n- a")

        assert blocks == [HeadingBlock(level=1, text="H"), ListItemBlock(ordered=False, level=1, text="a")]

    def test_leading_whitespace_is_literal(self):
        blocks = markdown_to_blocks("  - not a list")

        assert blocks == [ParagraphBlock(text="  - not a list")]

    def test_none_input(self):
        assert markdown_to_blocks(None) == [ParagraphBlock(text="")]

    def test_converter_is_reusable(self):
        converter = MarkdownBlockConverter()
        converter.convert("1. a\n2. b")

        blocks = converter.convert("1. c")
        assert blocks[0].index == 1
