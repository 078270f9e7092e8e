"""Base read client interface and error types."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from blob_text_extractor.models.read import ReadOperationResult


class BaseReadClient(ABC):
    """Abstract base class for asynchronous read (OCR) services."""

    def __init__(self, config: dict[str, Any]) -> None:
        """
        Initialize the read client.

        Args:
            config: Configuration dictionary for the client.
        """
        self.config = config

    @abstractmethod
    async def submit_read(self, image_url: str, language: Optional[str] = None) -> str:
        """
        Submit an image URL to the read operation.

        Args:
            image_url: URL of the image the service fetches itself.
            language: Optional language hint.

        Returns:
            Operation identifier of the started job.

        Raises:
            OCRError: If the submission is rejected.
        """
        pass

    @abstractmethod
    async def get_read_result(self, operation_id: str) -> ReadOperationResult:
        """
        Query the status (and, once terminal, the result) of a read operation.

        Args:
            operation_id: Identifier returned by submit_read.

        Returns:
            Current snapshot of the operation.

        Raises:
            OCRError: If the query fails.
        """
        pass

    async def cleanup(self) -> None:
        """
        Clean up resources used by the client.

        Override this method if your client holds connections.
        """
        pass

    async def __aenter__(self) -> "BaseReadClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.cleanup()


class OCRError(Exception):
    """Base exception for read-service errors."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        """
        Initialize OCR error.

        Args:
            message: Error message.
            original_error: Original exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error


class ReadAuthenticationError(OCRError):
    """The read service rejected the configured credentials."""


class ReadOperationFailed(OCRError):
    """The read operation reached the terminal failed status."""

    def __init__(self, operation_id: str) -> None:
        super().__init__(f"Read operation {operation_id} failed")
        self.operation_id = operation_id


class ReadTimeoutError(OCRError):
    """The read operation did not reach a terminal status in time."""

    def __init__(self, attempts: int, elapsed: float) -> None:
        super().__init__(
            f"Read operation still pending after {attempts} checks ({elapsed:.1f}s)"
        )
        self.attempts = attempts
        self.elapsed = elapsed


class CompletionError(Exception):
    """The completion endpoint answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error


class StorageError(Exception):
    """Writing to blob storage failed."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error
