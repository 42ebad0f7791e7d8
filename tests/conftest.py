"""
Pytest configuration for ThesisQuill
"""

import base64
import io
import logging
import sys
import tempfile
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid leaking handlers between tests."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


def _image_bytes(fmt: str, size=(8, 6), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def _data_uri(content_type: str, data: bytes) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def png_bytes():
    return _image_bytes("PNG")


@pytest.fixture
def png_data_uri(png_bytes):
    """8x6 red PNG as a data URI."""
    return _data_uri("image/png", png_bytes)


@pytest.fixture
def jpeg_data_uri():
    return _data_uri("image/jpeg", _image_bytes("JPEG", size=(10, 4)))


@pytest.fixture
def tiff_data_uri():
    """A format that is not embedded as-is and gets re-encoded."""
    return _data_uri("image/tiff", _image_bytes("TIFF", size=(5, 5)))


@pytest.fixture
def minimal_snapshot():
    """Smallest valid thesis: one title section, one chapter with one section."""
    return {
        "frontMatter": [{"id": "fm-title", "type": "title", "title": "T1", "content": ""}],
        "chapters": [{
            "id": "ch-1",
            "title": "C1",
            "order": 0,
            "sections": [{
                "id": "s-1",
                "type": "custom",
                "title": "S1",
                "content": "# H\n- a\n- b",
                "figures": [],
                "tables": [],
                "citations": [],
                "references": [],
            }],
        }],
        "backMatter": [],
    }


@pytest.fixture
def full_snapshot(png_data_uri):
    """Thesis exercising every content kind."""
    return {
        "metadata": {
            "description": "A study of things",
            "keywords": ["things", "study"],
            "createdAt": "2024-03-01T10:00:00Z",
            "universityName": "Example University",
            "departmentName": "Department of Examples",
            "authorName": "Ada Lovelace",
            "thesisDate": "May 2024",
            "committeeMembers": ["Alan Turing", "Grace Hopper"],
            "supervisors": ["Charles Babbage"],
            "degree": "Doctor of Philosophy",
            "shortTitle": "Things",
            "language": "en",
        },
        "frontMatter": [
            {"id": "fm-title", "type": "title", "title": "On Things", "content": ""},
            {"id": "fm-abstract", "type": "abstract", "title": "Abstract",
             "content": "This thesis studies things."},
            {"id": "fm-ack", "type": "acknowledgments", "title": "Acknowledgments",
             "content": "Thanks to everyone."},
            {"id": "fm-toc", "type": "table-of-contents", "title": "Contents", "content": ""},
        ],
        "chapters": [
            {
                "id": "ch-2",
                "title": "Results",
                "order": 2,
                "sections": [{
                    "id": "s-2",
                    "type": "results",
                    "title": "Findings",
                    "order": 0,
                    "content": "1. first\n2. second",
                    "tables": [{
                        "id": "t-1",
                        "caption": "Measurements",
                        "headers": ["A", "B"],
                        "rows": [["1", "2"], ["3", "4"]],
                    }],
                }],
            },
            {
                "id": "ch-1",
                "title": "Introduction",
                "order": 1,
                "sections": [{
                    "id": "s-1",
                    "type": "introduction",
                    "title": "Background",
                    "order": 0,
                    "content": "Some background.",
                    "figures": [{"id": "f-1", "caption": "A red square", "imageData": png_data_uri}],
                    "citations": [{
                        "id": "c-1",
                        "text": "A paper",
                        "authors": ["John Smith"],
                        "year": "2020",
                        "source": "Journal of Things",
                        "type": "article",
                    }],
                    "footnotes": [{"id": "fn-1", "content": "A note."}],
                }],
            },
        ],
        "backMatter": [{
            "id": "bm-refs",
            "type": "references",
            "title": "Bibliography",
            "content": "",
            "references": [{
                "id": "r-1",
                "title": "A Book",
                "text": "",
                "authors": ["Jane Doe"],
                "year": "2019",
                "type": "book",
                "publisher": "Big Press",
            }],
        }],
    }
