"""Functions host discovery module."""

from blob_text_extractor.function_app import app

__all__ = ["app"]
