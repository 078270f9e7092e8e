"""Text completion client used for the translation pass."""

from typing import Any, Optional

import httpx
import structlog
from pydantic import BaseModel

from blob_text_extractor.adapters.base import CompletionError

logger = structlog.get_logger(__name__)

COMPLETION_MODES = ("completions", "chat")

SYSTEM_MESSAGE = "You are a careful proofreader and translator."


class CompletionResponse(BaseModel):
    """Completion endpoint response model."""

    text: str
    """Generated text."""

    raw: str
    """Undecoded response body."""

    status_code: int = 200


def build_translation_prompt(template: str, text: str) -> str:
    """Embed the extracted text in the prompt template."""
    if "{text}" in template:
        return template.replace("{text}", text)
    return f"{template}{text}"


class CompletionClient:
    """Client for an OpenAI-style completion or chat completion endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        mode: str = "completions",
        model: Optional[str] = None,
        max_tokens: int = 200,
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the completion client.

        Args:
            endpoint: Full URL of the completion endpoint.
            api_key: Bearer token.
            mode: "completions" posts a prompt, "chat" posts messages.
            model: Optional model name included in the request body.
            max_tokens: Maximum tokens to generate.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests).
        """
        if mode not in COMPLETION_MODES:
            raise ValueError(
                f"Unknown completion mode: {mode}. "
                f"Available modes: {', '.join(COMPLETION_MODES)}"
            )
        if not endpoint:
            raise ValueError("Completion endpoint must be configured")

        self.endpoint = endpoint
        self.api_key = api_key
        self.mode = mode
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

        logger.info("completion_client_initialized", endpoint=endpoint, mode=mode)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"

            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        """Build the request body for the configured mode."""
        if self.mode == "chat":
            payload: dict[str, Any] = {
                "messages": [
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                "max_tokens": self.max_tokens,
            }
        else:
            payload = {"prompt": prompt, "max_tokens": self.max_tokens}

        if self.model:
            payload["model"] = self.model
        return payload

    def _extract_text(self, result: dict[str, Any]) -> str:
        """Pull the generated text out of a response body."""
        choices = result.get("choices") or []
        if not choices:
            raise CompletionError("Unexpected response format: no choices")

        choice = choices[0]
        if self.mode == "chat":
            return (choice.get("message") or {}).get("content") or ""
        return choice.get("text") or ""

    async def complete(self, prompt: str) -> CompletionResponse:
        """
        Send a prompt and wait for the generated text.

        Args:
            prompt: Prompt text.

        Returns:
            Completion response with generated and raw text.

        Raises:
            CompletionError: If the endpoint answers with a non-success status.
            httpx.HTTPError: If the request cannot be sent.
        """
        client = await self._get_client()

        logger.info("calling_completion_endpoint", mode=self.mode, prompt_length=len(prompt))

        response = await client.post(self.endpoint, json=self._build_payload(prompt))

        if not response.is_success:
            logger.error(
                "completion_request_failed",
                status=response.status_code,
                body=response.text[:500],
            )
            raise CompletionError(
                f"Completion endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            text = self._extract_text(response.json())
        except ValueError as e:
            raise CompletionError(
                "Completion response is not valid JSON",
                status_code=response.status_code,
                original_error=e,
            )

        logger.info("completion_received", text_length=len(text))

        return CompletionResponse(
            text=text,
            raw=response.text,
            status_code=response.status_code,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("completion_client_closed")

    async def __aenter__(self) -> "CompletionClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
