"""Grounded question answering over ingested documents."""

__version__ = "0.1.0"
