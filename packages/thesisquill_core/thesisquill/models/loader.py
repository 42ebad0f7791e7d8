"""
Snapshot loader.

Turns the JSON-shaped thesis record produced by the authoring surface into
the frozen models of ``thesis.py``. Shape ambiguities in the record are
resolved here, once:

- section ``content`` may be a string or a list of ``{type, content}``
  blocks; lists are joined with blank lines,
- a table is either a grid (``headers`` + ``rows``) or pre-rendered markup
  (``content``/``markup``), never both,
- keys are accepted in camelCase or snake_case.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..exceptions import SnapshotError
from ..utils.enums import AlignmentType, HeaderStyle
from .thesis import (
    CellFormat,
    Chapter,
    Citation,
    CitationType,
    Dimensions,
    Figure,
    Footnote,
    GridTable,
    OpaqueTable,
    Reference,
    Section,
    SectionType,
    Table,
    TableCellInput,
    ThesisDocument,
    ThesisMetadata,
)

logger = logging.getLogger(__name__)

_MISSING = object()


def _get(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key among camelCase/snake_case aliases."""
    for key in keys:
        value = data.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any, where: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid number in {where}", repr(value)) from e


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SnapshotError(f"Expected an object for {where}", type(value).__name__)
    return value


def _sequence(value: Any, where: str) -> Sequence[Any]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise SnapshotError(f"Expected a list for {where}", type(value).__name__)
    return value


def _enum(enum_cls, value: Any, where: str, default=None):
    if value is None or value == "":
        if default is None:
            raise SnapshotError(f"Missing value for {where}")
        return default
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        raise SnapshotError(f"Unknown {where}", repr(value)) from e


def normalize_content(content: Any) -> str:
    """
    Normalize section content to one markdown string.

    Args:
        content: A string, or a list of blocks (``{"type", "content"}``
            mappings or plain strings), or None

    Returns:
        Markdown string; list items are joined with blank-line separators
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, Sequence):
        parts: List[str] = []
        for item in content:
            if isinstance(item, Mapping):
                parts.append(_text(item.get("content")))
            else:
                parts.append(_text(item))
        return "\n\n".join(parts)
    raise SnapshotError("Unsupported section content", type(content).__name__)


def _load_dimensions(value: Any) -> Optional[Dimensions]:
    if not isinstance(value, Mapping):
        return None
    try:
        width = float(value.get("width") or 0)
        height = float(value.get("height") or 0)
    except (TypeError, ValueError):
        return None
    return Dimensions(width=width, height=height)


def load_figure(data: Mapping[str, Any]) -> Figure:
    data = _mapping(data, "figure")
    return Figure(
        id=_text(_get(data, "id", default="")),
        caption=_text(_get(data, "caption", default="")),
        image_data=_text(_get(data, "imageData", "image_data", "imageUrl", "url", default="")),
        alt_text=_text(_get(data, "altText", "alt_text", default="")),
        number=_optional_int(_get(data, "number"), "figure number"),
        dimensions=_load_dimensions(_get(data, "dimensions")),
    )


def _load_cell_format(data: Mapping[str, Any], where: str) -> CellFormat:
    header_style = _get(data, "headerStyle", "header_style")
    return CellFormat(
        align=_enum(AlignmentType, _get(data, "align", "alignment"), f"{where} alignment",
                    default=AlignmentType.LEFT),
        bold=bool(data.get("bold", False)),
        italic=bool(data.get("italic", False)),
        underline=bool(data.get("underline", False)),
        header_style=_enum(HeaderStyle, header_style, f"{where} header style")
        if header_style is not None else None,
    )


def _load_cell(value: Any, where: str) -> TableCellInput:
    if isinstance(value, Mapping):
        fmt = _get(value, "format", default=value)
        return TableCellInput(
            text=_text(_get(value, "text", "value", default="")),
            format=_load_cell_format(_mapping(fmt, where), where),
        )
    return TableCellInput(text=_text(value))


def load_table(data: Mapping[str, Any]) -> Table:
    """
    Resolve a table record into a grid or opaque table.

    Raises:
        SnapshotError: If both or neither shape is populated
    """
    data = _mapping(data, "table")
    grid = _get(data, "data", default=data)
    if not isinstance(grid, Mapping):
        grid = data
    headers = _get(grid, "headers")
    rows = _get(grid, "rows")
    markup = _get(data, "content", "markup", "html")
    table_id = _text(_get(data, "id", default=""))
    number = _optional_int(_get(data, "number"), "table number")
    caption = _text(_get(data, "caption", default=""))

    has_grid = headers is not None or rows is not None
    has_markup = isinstance(markup, str) and markup.strip() != ""
    if has_grid and has_markup:
        raise SnapshotError("Table carries both grid data and markup", table_id or None)
    if has_grid:
        return GridTable(
            id=table_id,
            headers=tuple(_load_cell(h, "table header") for h in _sequence(headers, "table headers")),
            rows=tuple(
                tuple(_load_cell(c, "table cell") for c in _sequence(row, "table row"))
                for row in _sequence(rows, "table rows")
            ),
            caption=caption,
            number=number,
            header_style=_enum(HeaderStyle, _get(data, "headerStyle", "header_style"),
                               "table header style", default=HeaderStyle.PRIMARY),
        )
    if has_markup:
        return OpaqueTable(
            id=table_id,
            markup=markup,
            caption=caption,
            title=_text(_get(data, "title", default="")),
            number=number,
        )
    raise SnapshotError("Table has neither grid data nor markup", table_id or None)


def _citation_fields(data: Mapping[str, Any], where: str) -> Dict[str, Any]:
    authors = tuple(
        a.strip() for a in (_text(a) for a in _sequence(_get(data, "authors"), f"{where} authors")) if a.strip()
    )
    if not authors:
        raise SnapshotError(f"{where.capitalize()} has no authors", _text(_get(data, "id", default="")) or None)
    return dict(
        id=_text(_get(data, "id", default="")),
        text=_text(_get(data, "text", default="")),
        authors=authors,
        year=_text(_get(data, "year", default="")).strip(),
        source=_text(_get(data, "source", default="")).strip(),
        type=_enum(CitationType, _get(data, "type"), f"{where} type", default=CitationType.OTHER),
        doi=_optional_text(_get(data, "doi")),
        url=_optional_text(_get(data, "url")),
        journal=_optional_text(_get(data, "journal")),
        volume=_optional_text(_get(data, "volume")),
        issue=_optional_text(_get(data, "issue")),
        pages=_optional_text(_get(data, "pages")),
        publisher=_optional_text(_get(data, "publisher")),
    )


def load_citation(data: Mapping[str, Any]) -> Citation:
    return Citation(**_citation_fields(_mapping(data, "citation"), "citation"))


def load_reference(data: Mapping[str, Any]) -> Reference:
    data = _mapping(data, "reference")
    return Reference(title=_text(_get(data, "title", default="")), **_citation_fields(data, "reference"))


def load_footnote(data: Mapping[str, Any], position: int) -> Footnote:
    data = _mapping(data, "footnote")
    number = _optional_int(_get(data, "number"), "footnote number")
    return Footnote(
        id=_text(_get(data, "id", default="")),
        number=number if number is not None else position,
        content=_text(_get(data, "content", "text", default="")),
    )


def load_section(data: Mapping[str, Any]) -> Section:
    data = _mapping(data, "section")
    return Section(
        id=_text(_get(data, "id", default="")),
        title=_text(_get(data, "title", default="")),
        type=_enum(SectionType, _get(data, "type"), "section type", default=SectionType.CUSTOM),
        required=bool(_get(data, "required", default=False)),
        order=_optional_int(_get(data, "order"), "section order") or 0,
        content=normalize_content(_get(data, "content")),
        figures=tuple(load_figure(f) for f in _sequence(_get(data, "figures"), "figures")),
        tables=tuple(load_table(t) for t in _sequence(_get(data, "tables"), "tables")),
        citations=tuple(load_citation(c) for c in _sequence(_get(data, "citations"), "citations")),
        references=tuple(load_reference(r) for r in _sequence(_get(data, "references"), "references")),
        footnotes=tuple(
            load_footnote(f, i) for i, f in enumerate(_sequence(_get(data, "footnotes"), "footnotes"), start=1)
        ),
    )


def load_chapter(data: Mapping[str, Any]) -> Chapter:
    data = _mapping(data, "chapter")
    return Chapter(
        id=_text(_get(data, "id", default="")),
        title=_text(_get(data, "title", default="")),
        order=_optional_int(_get(data, "order"), "chapter order") or 0,
        sections=tuple(load_section(s) for s in _sequence(_get(data, "sections"), "sections")),
        content=normalize_content(_get(data, "content")),
    )


def _names(value: Any, where: str) -> Tuple[str, ...]:
    names = []
    for item in _sequence(value, where):
        if isinstance(item, Mapping):
            first = _text(_get(item, "firstName", "first_name", default="")).strip()
            last = _text(_get(item, "lastName", "last_name", default="")).strip()
            name = " ".join(part for part in (first, last) if part)
        else:
            name = _text(item).strip()
        if name:
            names.append(name)
    return tuple(names)


def load_metadata(data: Optional[Mapping[str, Any]]) -> ThesisMetadata:
    if data is None:
        return ThesisMetadata()
    data = _mapping(data, "metadata")
    author = _optional_text(_get(data, "authorName", "author_name"))
    if author is None:
        authors = _names(_get(data, "authors"), "metadata authors")
        author = ", ".join(authors) or None
    return ThesisMetadata(
        description=_text(_get(data, "description", default="")),
        keywords=tuple(_text(k) for k in _sequence(_get(data, "keywords"), "keywords")),
        created_at=_text(_get(data, "createdAt", "created_at", default="")),
        university_name=_optional_text(_get(data, "universityName", "university_name")),
        department_name=_optional_text(_get(data, "departmentName", "department_name")),
        author_name=author,
        thesis_date=_optional_text(_get(data, "thesisDate", "thesis_date")),
        committee_members=_names(_get(data, "committeeMembers", "committee_members"), "committee members"),
        supervisors=_names(_get(data, "supervisors"), "supervisors"),
        degree=_optional_text(_get(data, "degree")),
        short_title=_optional_text(_get(data, "shortTitle", "short_title")),
        language=_optional_text(_get(data, "language")),
    )


def load_thesis(data: Mapping[str, Any]) -> ThesisDocument:
    """
    Build a ThesisDocument from a JSON-shaped mapping.

    Accepts either the thesis content object itself or a thesis record
    whose ``content`` key holds it.

    Raises:
        SnapshotError: If the record does not match the data model
    """
    data = _mapping(data, "thesis")
    content = data.get("content")
    if isinstance(content, Mapping) and ("frontMatter" in content or "front_matter" in content
                                         or "chapters" in content):
        record = content
        metadata = _get(content, "metadata", default=_get(data, "metadata"))
    else:
        record = data
        metadata = _get(data, "metadata")

    thesis = ThesisDocument(
        metadata=load_metadata(metadata),
        front_matter=tuple(load_section(s) for s in _sequence(_get(record, "frontMatter", "front_matter"),
                                                              "front matter")),
        chapters=tuple(load_chapter(c) for c in _sequence(_get(record, "chapters"), "chapters")),
        back_matter=tuple(load_section(s) for s in _sequence(_get(record, "backMatter", "back_matter"),
                                                             "back matter")),
    )
    logger.debug(
        f"Loaded thesis snapshot: {len(thesis.front_matter)} front, "
        f"{len(thesis.chapters)} chapters, {len(thesis.back_matter)} back"
    )
    return thesis


def load_thesis_file(path: Union[str, Path]) -> ThesisDocument:
    """Load a thesis snapshot from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in {path}", str(e)) from e
    except UnicodeDecodeError as e:
        raise SnapshotError(f"Snapshot is not UTF-8 text: {path}", str(e)) from e
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}", str(e)) from e
    return load_thesis(data)
