"""Converter tests."""
