"""Test suite for ThesisQuill."""
