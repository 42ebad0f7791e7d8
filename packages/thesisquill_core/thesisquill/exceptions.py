"""Custom exceptions for ThesisQuill."""

from typing import Optional


class ThesisQuillError(Exception):
    """Base exception for ThesisQuill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class SnapshotError(ThesisQuillError):
    """Exception raised when a thesis snapshot does not match the data model."""

    pass


class ThesisValidationError(ThesisQuillError):
    """Exception raised when a thesis fails structural validation."""

    pass


class TableValidationError(ThesisValidationError):
    """Exception raised for tables that cannot form a valid grid."""

    pass


class MediaError(ThesisQuillError):
    """Exception raised while decoding figure payloads."""

    pass


class TableMarkupError(ThesisQuillError):
    """Exception raised while parsing pre-rendered table markup."""

    pass


class CitationStyleError(ThesisQuillError):
    """Exception raised for unknown citation style tags."""

    pass


class ExportError(ThesisQuillError):
    """Exception raised while serializing the document package."""

    pass
