"""Adapters for the read service, blob storage and completion endpoint."""

from blob_text_extractor.adapters.base import (
    BaseReadClient,
    CompletionError,
    OCRError,
    ReadAuthenticationError,
    ReadOperationFailed,
    ReadTimeoutError,
    StorageError,
)
from blob_text_extractor.adapters.blob_store import BlobStore
from blob_text_extractor.adapters.completion_client import (
    CompletionClient,
    CompletionResponse,
)
from blob_text_extractor.adapters.factory import ReadClientFactory
from blob_text_extractor.adapters.mock_client import MockReadClient
from blob_text_extractor.adapters.vision_client import AzureVisionReadClient

__all__ = [
    "AzureVisionReadClient",
    "BaseReadClient",
    "BlobStore",
    "CompletionClient",
    "CompletionError",
    "CompletionResponse",
    "MockReadClient",
    "OCRError",
    "ReadAuthenticationError",
    "ReadClientFactory",
    "ReadOperationFailed",
    "ReadTimeoutError",
    "StorageError",
]
