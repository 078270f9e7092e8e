"""Pipeline services."""

from blob_text_extractor.services.extraction_service import (
    ExtractionService,
    TranslationStep,
)
from blob_text_extractor.services.poller import RetryPolicy, poll_until_terminal

__all__ = [
    "ExtractionService",
    "RetryPolicy",
    "TranslationStep",
    "poll_until_terminal",
]
