"""Azure Functions entry point (Python v2 programming model)."""

from typing import Any

import azure.functions as func
import structlog

from blob_text_extractor.config import Settings, get_settings
from blob_text_extractor.log_config import configure_logging
from blob_text_extractor.models.job import ExtractionResult
from blob_text_extractor.services.extraction_service import ExtractionService

logger = structlog.get_logger(__name__)

app = func.FunctionApp()


def event_to_payload(event: func.EventGridEvent) -> dict[str, Any]:
    """Rebuild the Event Grid envelope the extraction service understands."""
    return {
        "id": event.id,
        "eventType": event.event_type,
        "subject": event.subject,
        "data": event.get_json(),
    }


async def handle_event(event: func.EventGridEvent, settings: Settings) -> ExtractionResult:
    """
    Run the extraction pipeline for one blob-created event.

    Errors propagate so the Functions host applies its retry policy.
    """
    logger.info(
        "event_grid_event_received",
        event_id=event.id,
        event_type=event.event_type,
        subject=event.subject,
    )

    with structlog.contextvars.bound_contextvars(event_id=event.id):
        async with ExtractionService.from_settings(settings) as service:
            return await service.process_event(event_to_payload(event))


@app.function_name(name="TextExtractor")
@app.event_grid_trigger(arg_name="event")
async def text_extractor(event: func.EventGridEvent) -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.app_name)
    await handle_event(event, settings)
