"""Read (OCR) operation data models."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

OPERATION_ID_LENGTH = 36


class ReadOperationStatus(str, Enum):
    """Status of an asynchronous read operation."""

    NOT_STARTED = "notStarted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can happen from this status."""
        return self not in (ReadOperationStatus.NOT_STARTED, ReadOperationStatus.RUNNING)


class ReadLine(BaseModel):
    """A single recognized line of text."""

    text: str
    bounding_box: list[float] = Field(default_factory=list)


class ReadPage(BaseModel):
    """Recognized lines of one page, in document order."""

    page: int = 1
    lines: list[ReadLine] = Field(default_factory=list)


class ReadOperationResult(BaseModel):
    """Snapshot of a read operation as returned by a status query."""

    status: ReadOperationStatus
    pages: list[ReadPage] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    last_updated_at: Optional[datetime] = None

    @property
    def line_count(self) -> int:
        return sum(len(page.lines) for page in self.pages)

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "ReadOperationResult":
        """
        Build a result from a Read API response body.

        Args:
            body: Decoded JSON of an ``analyzeResults`` response.

        Returns:
            Parsed operation result.
        """
        analyze_result = body.get("analyzeResult") or {}
        pages = [
            ReadPage(
                page=read_result.get("page", index + 1),
                lines=[
                    ReadLine(
                        text=line.get("text", ""),
                        bounding_box=line.get("boundingBox") or [],
                    )
                    for line in read_result.get("lines") or []
                ],
            )
            for index, read_result in enumerate(analyze_result.get("readResults") or [])
        ]

        return cls(
            status=ReadOperationStatus(body["status"]),
            pages=pages,
            created_at=body.get("createdDateTime"),
            last_updated_at=body.get("lastUpdatedDateTime"),
        )


def assemble_text(pages: Iterable[ReadPage]) -> str:
    """
    Concatenate recognized lines into one text.

    Every line is followed by a newline; page and line order is preserved.
    """
    buffer: list[str] = []
    for page in pages:
        for line in page.lines:
            buffer.append(line.text)
            buffer.append("\n")
    return "".join(buffer)


def operation_id_from_location(operation_location: str) -> str:
    """
    Extract the operation id from an Operation-Location header value.

    The id is the trailing 36 characters (a canonical UUID).

    Raises:
        ValueError: If the trailing characters are not a UUID.
    """
    candidate = operation_location.strip()[-OPERATION_ID_LENGTH:]
    try:
        uuid.UUID(candidate)
    except ValueError as e:
        raise ValueError(
            f"Operation-Location does not end with an operation id: {operation_location}"
        ) from e
    return candidate
