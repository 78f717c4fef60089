"""Fuzzpaint document thumbnailer."""

__version__ = "0.1.0"
