"""Data models for blob-text-extractor."""

from blob_text_extractor.models.event import (
    BlobCreatedEvent,
    EventPayloadError,
    derive_base_name,
    parse_blob_event,
)
from blob_text_extractor.models.job import (
    ExtractionResult,
    ExtractionStatus,
    TranslationStatus,
)
from blob_text_extractor.models.read import (
    ReadLine,
    ReadOperationResult,
    ReadOperationStatus,
    ReadPage,
    assemble_text,
)

__all__ = [
    "BlobCreatedEvent",
    "EventPayloadError",
    "ExtractionResult",
    "ExtractionStatus",
    "ReadLine",
    "ReadOperationResult",
    "ReadOperationStatus",
    "ReadPage",
    "TranslationStatus",
    "assemble_text",
    "derive_base_name",
    "parse_blob_event",
]
