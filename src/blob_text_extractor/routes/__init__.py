"""HTTP routes."""

from blob_text_extractor.routes.events import router as events_router

__all__ = ["events_router"]
