"""Exporters: DOCX package and HTML preview."""

from .docx_exporter import DOCX_MEDIA_TYPE, DOCXExporter
from .html_exporter import HTMLExporter
from .wordml import WordMLWriter

__all__ = ["DOCX_MEDIA_TYPE", "DOCXExporter", "HTMLExporter", "WordMLWriter"]
