"""Blob-created trigger payload models."""

import json
from pathlib import PurePosixPath
from typing import Any, Optional, Union
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError

BLOB_CREATED_EVENT_TYPE = "Microsoft.Storage.BlobCreated"

EXTRACTED_BLOB_SUFFIX = ".json"
TRANSLATION_BLOB_SUFFIX = "_tranlation.json"


class EventPayloadError(ValueError):
    """Raised when a trigger payload cannot be turned into a blob event."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class BlobCreatedEvent(BaseModel):
    """Data of a blob-created notification."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str = Field(..., min_length=1, description="URL of the created blob")
    blob_type: Optional[str] = Field(None, alias="blobType")
    content_type: Optional[str] = Field(None, alias="contentType")
    content_length: Optional[int] = Field(None, alias="contentLength")
    api: Optional[str] = None

    # Envelope fields, filled when the payload carried them
    event_id: Optional[str] = None
    event_type: Optional[str] = None
    subject: Optional[str] = None


def parse_blob_event(payload: Union[str, bytes, dict[str, Any], list[Any]]) -> BlobCreatedEvent:
    """
    Parse a trigger payload into a BlobCreatedEvent.

    Accepts the bare event data, an Event Grid schema event, a CloudEvents
    structured event, a JSON string/bytes of any of these, or a batch holding
    exactly one event.

    Args:
        payload: Raw trigger payload.

    Returns:
        Parsed blob event.

    Raises:
        EventPayloadError: If the payload has no usable url field or a
            field of the wrong type.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise EventPayloadError("Trigger payload is not valid JSON", original_error=e)

    if isinstance(payload, list):
        if len(payload) != 1:
            raise EventPayloadError(
                f"Expected exactly one event in batch, got {len(payload)}"
            )
        payload = payload[0]

    if not isinstance(payload, dict):
        raise EventPayloadError(
            f"Trigger payload must be an object, got {type(payload).__name__}"
        )

    envelope: dict[str, Any] = {}
    data = payload
    if isinstance(payload.get("data"), dict):
        data = payload["data"]
        envelope = {
            "event_id": payload.get("id"),
            "event_type": payload.get("eventType") or payload.get("type"),
            "subject": payload.get("subject"),
        }
    elif isinstance(payload.get("data"), str):
        return parse_blob_event(payload["data"])

    url = data.get("url")
    if not isinstance(url, str) or not url.strip():
        raise EventPayloadError("Trigger payload has no 'url' field")

    try:
        return BlobCreatedEvent.model_validate({**data, **envelope})
    except ValidationError as e:
        raise EventPayloadError(
            f"Trigger payload is not a valid blob event: {e.error_count()} invalid field(s)",
            original_error=e,
        )


def derive_base_name(blob_url: str) -> str:
    """
    Derive the base name of a blob from its URL.

    ``https://acct.blob.core.windows.net/container/photo.jpg`` gives ``photo``.

    Raises:
        EventPayloadError: If the URL has no file name to derive from.
    """
    path = unquote(urlparse(blob_url).path)
    base_name = PurePosixPath(path).stem
    if not base_name:
        raise EventPayloadError(f"Cannot derive a blob name from url: {blob_url}")
    return base_name


def blob_extension(blob_url: str) -> str:
    """Lower-case extension of the blob, without the leading dot."""
    path = unquote(urlparse(blob_url).path)
    return PurePosixPath(path).suffix.lstrip(".").lower()


def extracted_blob_name(base_name: str) -> str:
    """Name of the blob holding the extracted text."""
    return f"{base_name}{EXTRACTED_BLOB_SUFFIX}"


def translation_blob_name(base_name: str) -> str:
    """Name of the blob holding the translated text."""
    return f"{base_name}{TRANSLATION_BLOB_SUFFIX}"
