"""Pytest configuration and shared fixtures."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from blob_text_extractor.adapters.blob_store import BlobStore
from blob_text_extractor.adapters.mock_client import MockReadClient
from blob_text_extractor.config import Settings, get_settings
from blob_text_extractor.services.poller import RetryPolicy

BLOB_URL = "https://acct.blob.core.windows.net/images/photo.jpg"
OPERATION_ID = "0b5f2c7e-3d0f-4a7c-9a44-12c8a0f3d9e1"


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set up test environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("OCR_CLIENT", "mock")
    get_settings.cache_clear()


@pytest.fixture
def blob_url() -> str:
    return BLOB_URL


@pytest.fixture
def event_grid_event() -> dict[str, Any]:
    """A blob-created event in Event Grid schema."""
    return {
        "id": "831e1650-001e-001b-66ab-eeb76e069631",
        "topic": "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Storage/storageAccounts/acct",
        "subject": "/blobServices/default/containers/images/blobs/photo.jpg",
        "eventType": "Microsoft.Storage.BlobCreated",
        "eventTime": "2024-01-01T00:00:00.000Z",
        "data": {
            "api": "PutBlob",
            "contentType": "image/jpeg",
            "contentLength": 524288,
            "blobType": "BlockBlob",
            "url": BLOB_URL,
        },
        "dataVersion": "",
        "metadataVersion": "1",
    }


@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory pipeline run."""
    return Settings(
        ocr_client="mock",
        storage_connection_string="UseDevelopmentStorage=true",
        extracted_text_container="extractedtext",
        translated_text_container="translatedtext",
        ocr_language="fr",
    )


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Retry policy without real waiting."""
    return RetryPolicy(initial_delay=0, max_delay=0, max_attempts=10, timeout=None)


@pytest.fixture
def read_client() -> MockReadClient:
    return MockReadClient(config={"pages": [["A", "B"], ["C"]], "pending_polls": 2})


@pytest.fixture
def blob_store() -> MagicMock:
    """Blob store whose uploads are recorded instead of sent."""
    store = MagicMock(spec=BlobStore)
    store.upload_text = AsyncMock(
        side_effect=lambda container, name, text: f"https://acct.blob.core.windows.net/{container}/{name}"
    )
    store.close = AsyncMock()
    return store
