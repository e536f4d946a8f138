"""Batched field-rename migrations for document databases."""

__version__ = "0.1.0"
