"""Mock read client for testing and local development."""

import uuid
from typing import Any, Optional

from blob_text_extractor.adapters.base import BaseReadClient, OCRError
from blob_text_extractor.models.read import (
    ReadLine,
    ReadOperationResult,
    ReadOperationStatus,
    ReadPage,
)

DEFAULT_PAGES = [["Mock OCR Result", "Lorem ipsum dolor sit amet"]]


class MockReadClient(BaseReadClient):
    """Read client that simulates the asynchronous job without a network."""

    def __init__(self, config: dict[str, Any]) -> None:
        """
        Initialize the mock read client.

        Args:
            config: Configuration dictionary. Supports:
                - pages: Lines per page, e.g. [["A", "B"], ["C"]]
                - pending_polls: Status checks answered with running (default: 1)
                - final_status: Terminal status (default: succeeded)
                - fail_submit: Reject every submission (default: False)
        """
        super().__init__(config)
        self.pages: list[list[str]] = config.get("pages", DEFAULT_PAGES)
        self.pending_polls = config.get("pending_polls", 1)
        self.final_status = ReadOperationStatus(
            config.get("final_status", ReadOperationStatus.SUCCEEDED)
        )
        self.fail_submit = config.get("fail_submit", False)

        self.submit_count = 0
        self.poll_count = 0
        self.submitted: list[tuple[str, Optional[str]]] = []
        self._polls: dict[str, int] = {}

    async def submit_read(self, image_url: str, language: Optional[str] = None) -> str:
        """Record the submission and hand out a fresh operation id."""
        if self.fail_submit:
            raise OCRError("Simulated read submission failure")

        self.submit_count += 1
        self.submitted.append((image_url, language))

        operation_id = str(uuid.uuid4())
        self._polls[operation_id] = 0
        return operation_id

    async def get_read_result(self, operation_id: str) -> ReadOperationResult:
        """Report not-started/running until pending_polls is used up."""
        if operation_id not in self._polls:
            raise OCRError(f"Unknown operation id: {operation_id}")

        self.poll_count += 1
        seen = self._polls[operation_id]
        self._polls[operation_id] = seen + 1

        if seen < self.pending_polls:
            status = ReadOperationStatus.NOT_STARTED if seen == 0 else ReadOperationStatus.RUNNING
            return ReadOperationResult(status=status)

        if self.final_status == ReadOperationStatus.FAILED:
            return ReadOperationResult(status=ReadOperationStatus.FAILED)

        return ReadOperationResult(
            status=self.final_status,
            pages=[
                ReadPage(page=index + 1, lines=[ReadLine(text=text) for text in lines])
                for index, lines in enumerate(self.pages)
            ],
        )
