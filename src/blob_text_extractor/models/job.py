"""Extraction run result models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ExtractionStatus(str, Enum):
    """Outcome of one extraction run."""

    COMPLETED = "completed"
    SKIPPED = "skipped"


class TranslationStatus(str, Enum):
    """Outcome of the optional translation pass."""

    DISABLED = "disabled"
    COMPLETED = "completed"
    FAILED = "failed"


class ExtractionResult(BaseModel):
    """Result of processing one blob-created event."""

    blob_url: str = Field(..., description="URL of the source blob")
    base_name: str = Field(..., description="Blob name without extension")
    status: ExtractionStatus = Field(..., description="Processing status")
    extracted_blob_name: Optional[str] = Field(None, description="Name of the extracted text blob")
    translation_blob_name: Optional[str] = Field(None, description="Name of the translated text blob")
    translation_status: TranslationStatus = Field(default=TranslationStatus.DISABLED)
    operation_id: Optional[str] = Field(None, description="Read operation identifier")
    page_count: int = Field(default=0, description="Number of pages recognized")
    line_count: int = Field(default=0, description="Number of lines recognized")
    text_length: int = Field(default=0, description="Length of the extracted text")
    processing_time_ms: Optional[int] = Field(None, description="Processing time in milliseconds")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")
