"""Event-driven text extraction for newly created storage blobs."""

__version__ = "0.1.0"
