"""Azure Computer Vision Read API client."""

from typing import Any, Optional

import httpx
import structlog

from blob_text_extractor.adapters.base import (
    BaseReadClient,
    OCRError,
    ReadAuthenticationError,
)
from blob_text_extractor.models.read import (
    ReadOperationResult,
    operation_id_from_location,
)

logger = structlog.get_logger(__name__)


class AzureVisionReadClient(BaseReadClient):
    """Read client that talks to the Computer Vision Read REST API."""

    def __init__(self, config: dict[str, Any]) -> None:
        """
        Initialize the Azure read client.

        Args:
            config: Configuration with:
                - endpoint: Vision resource endpoint (required)
                - key: Subscription key (required)
                - api_version: Read API version (default: v3.2)
                - timeout: Request timeout in seconds (default: 30)
                - transport: Optional httpx transport (tests)

        Raises:
            ReadAuthenticationError: If endpoint or key is missing.
        """
        super().__init__(config)

        self.endpoint = (config.get("endpoint") or "").rstrip("/")
        self.key = config.get("key") or ""
        self.api_version = config.get("api_version", "v3.2")
        self.timeout = config.get("timeout", 30)
        self._transport: Optional[httpx.AsyncBaseTransport] = config.get("transport")

        if not self.endpoint or not self.key:
            raise ReadAuthenticationError(
                "Vision endpoint and key must both be configured"
            )

        self.analyze_url = f"{self.endpoint}/vision/{self.api_version}/read/analyze"
        self.results_url = f"{self.endpoint}/vision/{self.api_version}/read/analyzeResults"

        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "azure_read_client_initialized",
            endpoint=self.endpoint,
            api_version=self.api_version,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Ocp-Apim-Subscription-Key": self.key},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def submit_read(self, image_url: str, language: Optional[str] = None) -> str:
        """
        Start a read operation on an image URL.

        Args:
            image_url: URL the vision service downloads the image from.
            language: Optional language hint (e.g. "fr").

        Returns:
            Operation identifier taken from the Operation-Location header.
        """
        client = await self._get_client()
        params = {"language": language} if language else None

        logger.info("submitting_read_operation", image_url=image_url[:100], language=language)

        try:
            response = await client.post(
                self.analyze_url,
                params=params,
                json={"url": image_url},
            )
        except httpx.HTTPError as e:
            logger.error("read_submission_failed", error=str(e))
            raise OCRError(f"HTTP error submitting read: {str(e)}", original_error=e)

        self._raise_for_status(response, "read_submission_rejected")

        operation_location = response.headers.get("Operation-Location")
        if not operation_location:
            raise OCRError("Read response did not include an Operation-Location header")

        try:
            operation_id = operation_id_from_location(operation_location)
        except ValueError as e:
            raise OCRError(str(e), original_error=e)

        logger.info(
            "read_operation_submitted",
            operation_location=operation_location,
            operation_id=operation_id,
        )

        return operation_id

    async def get_read_result(self, operation_id: str) -> ReadOperationResult:
        """
        Fetch the current state of a read operation.

        Args:
            operation_id: Operation identifier.

        Returns:
            Parsed operation result.
        """
        client = await self._get_client()

        try:
            response = await client.get(f"{self.results_url}/{operation_id}")
        except httpx.HTTPError as e:
            logger.error("read_result_fetch_failed", error=str(e), operation_id=operation_id)
            raise OCRError(f"HTTP error fetching read result: {str(e)}", original_error=e)

        self._raise_for_status(response, "read_result_rejected")

        try:
            return ReadOperationResult.from_response(response.json())
        except (KeyError, ValueError) as e:
            raise OCRError(f"Unexpected read result format: {str(e)}", original_error=e)

    def _raise_for_status(self, response: httpx.Response, event: str) -> None:
        """Translate an error response into the matching OCRError."""
        if response.is_success:
            return

        logger.error(event, status=response.status_code, body=response.text[:500])

        if response.status_code in (401, 403):
            raise ReadAuthenticationError(
                f"Vision service rejected credentials (HTTP {response.status_code})"
            )
        raise OCRError(
            f"Vision service returned HTTP {response.status_code}: {response.text[:200]}"
        )

    async def cleanup(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("azure_read_client_closed")
