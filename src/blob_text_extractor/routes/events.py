"""FastAPI webhook receiving Event Grid blob-created notifications."""

import json
from functools import partial
from typing import Any, Callable, Optional

import structlog
from cloudevents.http import from_dict, from_http
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from blob_text_extractor.config import Settings, get_settings
from blob_text_extractor.models.event import BLOB_CREATED_EVENT_TYPE, EventPayloadError
from blob_text_extractor.models.job import ExtractionResult
from blob_text_extractor.services.extraction_service import ExtractionService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["events"])

SUBSCRIPTION_VALIDATION_EVENT_TYPE = "Microsoft.EventGrid.SubscriptionValidationEvent"


class SubscriptionValidationResponse(BaseModel):
    """Answer to the Event Grid subscription handshake."""

    validationResponse: str


class EventsResponse(BaseModel):
    """Outcome of a webhook delivery."""

    processed: list[ExtractionResult] = Field(default_factory=list)
    ignored: int = 0


def get_service_factory(
    settings: Settings = Depends(get_settings),
) -> Callable[[], ExtractionService]:
    """
    Dependency providing a factory for the extraction service.

    Args:
        settings: Application settings.

    Returns:
        Callable building a configured extraction service.
    """
    return partial(ExtractionService.from_settings, settings)


def _is_cloud_event(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.startswith("application/cloudevents") or "ce-specversion" in request.headers


def _normalize_cloud_events(request: Request, body: bytes) -> list[dict[str, Any]]:
    """Turn CloudEvents (single, batch or binary mode) into plain event dicts."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/cloudevents-batch"):
        decoded = json.loads(body)
        if not isinstance(decoded, list):
            raise ValueError("A CloudEvents batch must be an array")
        events = [from_dict(item) for item in decoded]
    else:
        events = [from_http(dict(request.headers), body)]

    return [
        {
            "id": event["id"],
            "type": event["type"],
            "subject": event.get("subject"),
            "data": event.data,
        }
        for event in events
    ]


def _normalize_event_grid(body: bytes) -> list[dict[str, Any]]:
    """Decode an Event Grid schema delivery (an array of events)."""
    decoded = json.loads(body)
    events = decoded if isinstance(decoded, list) else [decoded]

    for event in events:
        if not isinstance(event, dict):
            raise ValueError(f"Event must be an object, got {type(event).__name__}")

    return events


def _event_type(event: dict[str, Any]) -> Optional[str]:
    return event.get("eventType") or event.get("type")


@router.options("/events")
async def webhook_handshake(request: Request) -> Response:
    """CloudEvents webhook abuse-protection handshake."""
    origin = request.headers.get("webhook-request-origin")
    if not origin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing WebHook-Request-Origin header",
        )

    logger.info("webhook_handshake", origin=origin)

    return Response(
        status_code=status.HTTP_200_OK,
        headers={"WebHook-Allowed-Origin": origin, "WebHook-Allowed-Rate": "*"},
    )


@router.post("/events", response_model=None)
async def receive_events(
    request: Request,
    service_factory: Callable[[], ExtractionService] = Depends(get_service_factory),
) -> Any:
    """
    Receive blob-created events and run the extraction pipeline.

    Subscription validation events are answered with their validation code;
    event types other than blob-created are acknowledged and ignored. The
    extraction service is only built once a blob-created event arrives.

    Raises:
        HTTPException: 400 for malformed payloads, 500 when processing fails
            so the delivery is retried.
    """
    body = await request.body()

    try:
        if _is_cloud_event(request):
            events = _normalize_cloud_events(request, body)
        else:
            events = _normalize_event_grid(body)
    except Exception as e:
        logger.error("webhook_payload_invalid", error=str(e), error_type=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid event payload: {str(e)}",
        )

    service: Optional[ExtractionService] = None
    response = EventsResponse()

    try:
        for event in events:
            event_type = _event_type(event)

            if event_type == SUBSCRIPTION_VALIDATION_EVENT_TYPE:
                data = event.get("data")
                if not isinstance(data, dict) or not data.get("validationCode"):
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Subscription validation event has no validationCode",
                    )
                logger.info("subscription_validation_received", event_id=event.get("id"))
                return SubscriptionValidationResponse(validationResponse=data["validationCode"])

            if event_type != BLOB_CREATED_EVENT_TYPE:
                logger.info("event_ignored", event_type=event_type, event_id=event.get("id"))
                response.ignored += 1
                continue

            try:
                if service is None:
                    service = service_factory()
                with structlog.contextvars.bound_contextvars(event_id=event.get("id")):
                    result = await service.process_event(event)
            except EventPayloadError as e:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=str(e),
                )
            except Exception as e:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=f"Extraction failed: {str(e)}",
                )

            response.processed.append(result)

        return response

    finally:
        if service is not None:
            await service.cleanup()
