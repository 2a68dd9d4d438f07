"""Draftflow - gather material, summarize it, seed a draft."""

__version__ = "0.1.0"
