"""
Citation and reference formatter.

Two renderings exist:

- the fixed export format used inside the document,
  ``(Authors, Year): text, source``,
- preview styles (APA, MLA, Chicago) for on-screen display.

The preview styles share one formatter driven by a ``StyleConfig``; each
optional field is emitted together with its connecting punctuation or not
at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple, Union

from ..exceptions import CitationStyleError
from ..models.blocks import ParagraphBlock
from ..models.thesis import Citation, CitationType, Reference
from ..utils.enums import CitationStyle, ParagraphStyle

logger = logging.getLogger(__name__)

Record = Union[Citation, Reference]


def split_name(author: str) -> Tuple[str, str]:
    """Split a display name into (given names, surname)."""
    parts = author.split()
    if not parts:
        return "", ""
    return " ".join(parts[:-1]), parts[-1]


def apa_authors(authors: Sequence[str]) -> str:
    """``Surname, I. I.`` per author, comma-separated."""
    rendered = []
    for author in authors:
        given, surname = split_name(author)
        initials = " ".join(f"{name[0]}." for name in given.split())
        rendered.append(f"{surname}, {initials}" if initials else surname)
    return ", ".join(rendered)


def inverted_first_authors(authors: Sequence[str]) -> str:
    """First author ``Surname, Given``; the rest ``Given Surname``."""
    rendered = []
    for index, author in enumerate(authors):
        given, surname = split_name(author)
        if not given:
            rendered.append(surname)
        elif index == 0:
            rendered.append(f"{surname}, {given}")
        else:
            rendered.append(f"{given} {surname}")
    return ", ".join(rendered)


@dataclass(frozen=True)
class StyleConfig:
    """
    Per-style rendering rules.

    Attributes:
        format_authors: Name-ordering rule for the author list
        separator: Joiner between the top-level pieces of an entry
        year_after_authors: Put ``(year)`` right after the authors
        quote_title: Render the text as ``"text."``
        quote_book_title: Whether books also get a quoted title
        volume_template: Template for the volume after the journal
        issue_template: Template for the issue after the volume
        pages_template: Template for the page range
        year_in_source: Put `` (year)`` in the journal chain
        publisher_with_year: Render ``publisher, year`` for non-journal sources
        doi: Append ``https://doi.org/{doi}``
    """

    format_authors: Callable[[Sequence[str]], str]
    separator: str
    year_after_authors: bool
    quote_title: bool
    quote_book_title: bool
    volume_template: str
    issue_template: str
    pages_template: str
    year_in_source: bool
    publisher_with_year: bool
    doi: bool


STYLES: Dict[CitationStyle, StyleConfig] = {
    CitationStyle.APA: StyleConfig(
        format_authors=apa_authors,
        separator=". ",
        year_after_authors=True,
        quote_title=False,
        quote_book_title=False,
        volume_template=", {}",
        issue_template="({})",
        pages_template=", {}",
        year_in_source=False,
        publisher_with_year=False,
        doi=True,
    ),
    CitationStyle.MLA: StyleConfig(
        format_authors=inverted_first_authors,
        separator=" ",
        year_after_authors=False,
        quote_title=True,
        quote_book_title=True,
        volume_template=" {}",
        issue_template=".{}",
        pages_template=": {}",
        year_in_source=True,
        publisher_with_year=True,
        doi=False,
    ),
    CitationStyle.CHICAGO: StyleConfig(
        format_authors=inverted_first_authors,
        separator=" ",
        year_after_authors=False,
        quote_title=True,
        quote_book_title=False,
        volume_template=" {}",
        issue_template=", no. {}",
        pages_template=": {}",
        year_in_source=True,
        publisher_with_year=True,
        doi=False,
    ),
}


def resolve_style(style: Union[str, CitationStyle]) -> CitationStyle:
    if isinstance(style, CitationStyle):
        return style
    try:
        return CitationStyle(str(style).strip().lower())
    except ValueError as e:
        raise CitationStyleError("Unknown citation style", repr(style)) from e


def record_text(record: Record) -> str:
    """Display text of a record; references fall back to their title."""
    text = (record.text or "").strip()
    if not text and isinstance(record, Reference):
        text = (record.title or "").strip()
    return text


def _terminate(text: str) -> str:
    return text if text.endswith((".", "?", "!")) else f"{text}."


def _join(pieces: List[str], separator: str) -> str:
    result = ""
    for piece in pieces:
        if not result:
            result = piece
        elif separator.startswith(".") and result.endswith((".", "?", "!")):
            # No doubled period after initials
            result += separator[1:] + piece
        else:
            result += separator + piece
    return result


class CitationFormatter:
    """Format citation and reference records."""

    def format_export(self, record: Record) -> str:
        """
        Render the fixed in-document format.

        Returns:
            ``({authors}, {year}): {text}, {source}`` with absent parts and
            their punctuation omitted
        """
        lead = ", ".join(part for part in (", ".join(record.authors), record.year) if part)
        body = ", ".join(part for part in (record_text(record), record.source) if part)
        if lead and body:
            return f"({lead}): {body}"
        if lead:
            return f"({lead})"
        return body

    def format_preview(self, record: Record, style: Union[str, CitationStyle]) -> str:
        """
        Render a record under a preview style.

        Raises:
            CitationStyleError: For unknown style tags
        """
        config = STYLES[resolve_style(style)]
        pieces: List[str] = []

        lead = config.format_authors(record.authors)
        if config.year_after_authors and record.year:
            lead = f"{lead} ({record.year})" if lead else f"({record.year})"
        if lead:
            pieces.append(lead if config.separator.startswith(".") else _terminate(lead))

        text = record_text(record)
        if text:
            quoted = config.quote_title and (record.type != CitationType.BOOK or config.quote_book_title)
            if quoted:
                pieces.append(f'"{_terminate(text)}"')
            elif config.separator.startswith("."):
                pieces.append(text)
            else:
                pieces.append(_terminate(text))

        source = self._source(record, config)
        if source:
            pieces.append(source)
        if config.doi and record.doi:
            pieces.append(f"https://doi.org/{record.doi}")

        return _join(pieces, config.separator)

    def _source(self, record: Record, config: StyleConfig) -> str:
        if record.journal:
            chain = record.journal
            if record.volume:
                chain += config.volume_template.format(record.volume)
            if record.issue:
                chain += config.issue_template.format(record.issue)
            if config.year_in_source and record.year:
                chain += f" ({record.year})"
            if record.pages:
                chain += config.pages_template.format(record.pages)
            return chain
        if config.publisher_with_year:
            return ", ".join(part for part in (record.publisher, record.year) if part)
        return record.publisher or ""

    def citation_block(self, citation: Citation) -> ParagraphBlock:
        return ParagraphBlock(text=self.format_export(citation), style=ParagraphStyle.CITATION)

    def reference_block(self, reference: Reference) -> ParagraphBlock:
        return ParagraphBlock(text=self.format_export(reference), style=ParagraphStyle.BIBLIOGRAPHY)


_default_formatter = CitationFormatter()


def format_export(record: Record) -> str:
    return _default_formatter.format_export(record)


def format_preview(record: Record, style: Union[str, CitationStyle]) -> str:
    return _default_formatter.format_preview(record, style)
