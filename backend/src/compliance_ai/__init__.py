"""Compliance document ingestion and multi-provider AI analysis service."""

__version__ = "0.1.0"
