"""Element converters: markdown, figures, tables and citations."""

from .citations import CitationFormatter, StyleConfig, format_export, format_preview
from .figures import DecodedImage, FigureEmbedder, decode_image, place_image
from .markdown import MarkdownBlockConverter, markdown_to_blocks
from .tables import CanonicalGrid, OpaqueTableParser, TableNormalizer, TableRenderer, parse_table_markup

__all__ = [
    "CitationFormatter",
    "StyleConfig",
    "format_export",
    "format_preview",
    "DecodedImage",
    "FigureEmbedder",
    "decode_image",
    "place_image",
    "MarkdownBlockConverter",
    "markdown_to_blocks",
    "CanonicalGrid",
    "OpaqueTableParser",
    "TableNormalizer",
    "TableRenderer",
    "parse_table_markup",
]
