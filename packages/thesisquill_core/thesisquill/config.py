"""
Export options for ThesisQuill.

Options are plain values; nothing here reads the environment. The CLI
builds an ``ExportOptions`` from an optional JSON file plus flag overrides.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

from .exceptions import SnapshotError
from .utils.enums import PageSize

# Page geometry in inches (width, height)
PAGE_DIMENSIONS: Dict[PageSize, Tuple[float, float]] = {
    PageSize.LETTER: (8.5, 11.0),
    PageSize.A4: (8.27, 11.69),
}


@dataclass(frozen=True)
class ExportOptions:
    """Formatting options applied when building and serializing a thesis."""

    font_name: str = "Times New Roman"
    preview_font_name: str = "Arial"
    font_size: float = 12.0
    caption_font_size: float = 10.0
    title_font_size: float = 16.0
    heading1_font_size: float = 16.0
    heading2_font_size: float = 14.0
    # 1.5 lines, in 240ths of a line
    line_spacing: int = 360
    default_figure_width: int = 400
    default_figure_height: int = 300
    page_size: PageSize = PageSize.LETTER
    margin_inches: float = 1.0
    running_head: bool = True
    header_page_number: bool = True
    footer_page_number: bool = True

    def __post_init__(self):
        if not isinstance(self.page_size, PageSize):
            object.__setattr__(self, "page_size", PageSize(str(self.page_size).lower()))
        if self.default_figure_width <= 0 or self.default_figure_height <= 0:
            raise ValueError("Default figure dimensions must be positive")
        if self.margin_inches < 0:
            raise ValueError("Margins cannot be negative")

    @property
    def page_dimensions(self) -> Tuple[float, float]:
        """Page (width, height) in inches."""
        return PAGE_DIMENSIONS[self.page_size]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExportOptions":
        """
        Create options from a mapping.

        Args:
            data: Option names mapped to values

        Returns:
            ExportOptions instance

        Raises:
            SnapshotError: If the mapping contains unknown or invalid options
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SnapshotError("Unknown export options", ", ".join(unknown))
        try:
            return cls(**dict(data))
        except (TypeError, ValueError) as e:
            raise SnapshotError("Invalid export options", str(e)) from e

    def with_overrides(self, **overrides: Any) -> "ExportOptions":
        """Return a copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes)
