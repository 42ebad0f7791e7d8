"""
Markdown block converter.

A deliberately minimal, line-oriented converter: only ``# `` headings and
single-level ``-``/``*``/``N.`` list items are recognized. Everything else,
blank lines included, becomes a literal paragraph. Every input line yields
exactly one block and conversion never raises.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..models.blocks import Block, HeadingBlock, ListItemBlock, ParagraphBlock

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_ORDERED_MARKER = re.compile(r"^\d+\.\s")
_UNORDERED_MARKERS = ("- ", "* ")
_HEADING_MARKER = "# "


class MarkdownBlockConverter:
    """
    Convert a section's markdown text into content blocks.

    The converter keeps the state of the list currently open (its type and
    running counter) while scanning; a non-list line closes it.
    """

    def __init__(self):
        self._list_ordered: Optional[bool] = None
        self._list_level: int = 0
        self._counter: int = 0

    def convert(self, text: Optional[str]) -> List[Block]:
        """
        Convert markdown text to blocks.

        Args:
            text: Markdown string; None is treated as empty

        Returns:
            One block per input line, in line order
        """
        self._close_list()
        blocks: List[Block] = []
        for line in _LINE_SPLIT.split(text or ""):
            blocks.append(self._convert_line(line))
        self._close_list()
        return blocks

    def _convert_line(self, line: str) -> Block:
        if line.startswith(_HEADING_MARKER):
            self._close_list()
            return HeadingBlock(level=1, text=line[len(_HEADING_MARKER):])

        if line.startswith(_UNORDERED_MARKERS):
            self._open_list(ordered=False)
            return ListItemBlock(ordered=False, level=self._list_level, text=line[2:])

        if _ORDERED_MARKER.match(line):
            self._open_list(ordered=True)
            self._counter += 1
            # Text after the "N. " marker
            text = line[line.index(".") + 2:]
            return ListItemBlock(ordered=True, level=self._list_level, text=text, index=self._counter)

        self._close_list()
        return ParagraphBlock(text=line)

    def _open_list(self, ordered: bool) -> None:
        if self._list_ordered is ordered:
            return
        self._list_ordered = ordered
        self._list_level = 1
        self._counter = 0

    def _close_list(self) -> None:
        self._list_ordered = None
        self._list_level = 0
        self._counter = 0


def markdown_to_blocks(text: Optional[str]) -> List[Block]:
    """Convert markdown text using a fresh converter."""
    return MarkdownBlockConverter().convert(text)
