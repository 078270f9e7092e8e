"""Extraction service that orchestrates the complete pipeline."""

import asyncio
import time
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable, Optional

import structlog

from blob_text_extractor.adapters.base import (
    BaseReadClient,
    CompletionError,
    ReadOperationFailed,
)
from blob_text_extractor.adapters.blob_store import BlobStore
from blob_text_extractor.adapters.completion_client import (
    CompletionClient,
    build_translation_prompt,
)
from blob_text_extractor.adapters.factory import ReadClientFactory
from blob_text_extractor.config import Settings
from blob_text_extractor.models.event import (
    blob_extension,
    derive_base_name,
    extracted_blob_name,
    parse_blob_event,
    translation_blob_name,
)
from blob_text_extractor.models.job import (
    ExtractionResult,
    ExtractionStatus,
    TranslationStatus,
)
from blob_text_extractor.models.read import (
    ReadOperationResult,
    ReadOperationStatus,
    assemble_text,
)
from blob_text_extractor.services.poller import RetryPolicy, poll_until_terminal

logger = structlog.get_logger(__name__)


class TranslationStep:
    """Optional pass sending extracted text to a completion endpoint."""

    def __init__(
        self,
        completion_client: CompletionClient,
        prompt_template: str,
        store_raw: bool = False,
    ) -> None:
        self.completion_client = completion_client
        self.prompt_template = prompt_template
        self.store_raw = store_raw

    async def translate(self, text: str) -> str:
        """
        Run the completion for the extracted text.

        Returns:
            Generated text, or the raw response body when store_raw is set.

        Raises:
            CompletionError: If the endpoint answers with a non-success status.
        """
        prompt = build_translation_prompt(self.prompt_template, text)
        response = await self.completion_client.complete(prompt)
        return response.raw if self.store_raw else response.text

    async def cleanup(self) -> None:
        await self.completion_client.close()


class ExtractionService:
    """Service for orchestrating the blob text extraction pipeline."""

    def __init__(
        self,
        read_client: BaseReadClient,
        blob_store: BlobStore,
        settings: Settings,
        translator: Optional[TranslationStep] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the extraction service.

        Args:
            read_client: Client for the read (OCR) service.
            blob_store: Writer for the output containers.
            settings: Application settings.
            translator: Translation pass; None disables it.
            retry_policy: Polling policy; defaults to the one in settings.
            sleep: Awaitable sleep used between status checks.
        """
        self.read_client = read_client
        self.blob_store = blob_store
        self.settings = settings
        self.translator = translator
        self.retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        self._sleep = sleep

        logger.info(
            "extraction_service_initialized",
            read_client=type(read_client).__name__,
            translation_enabled=translator is not None,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractionService":
        """
        Build the service and its collaborators from settings.

        Args:
            settings: Application settings.

        Returns:
            Configured extraction service.
        """
        read_client = ReadClientFactory.create_from_settings(settings)
        blob_store = BlobStore(connection_string=settings.storage_connection_string)

        translator = None
        if settings.translation_enabled:
            translator = TranslationStep(
                CompletionClient(
                    endpoint=settings.completion_endpoint,
                    api_key=settings.completion_key,
                    mode=settings.completion_mode,
                    model=settings.completion_model,
                    max_tokens=settings.completion_max_tokens,
                    timeout=settings.completion_timeout,
                ),
                prompt_template=settings.translation_prompt,
                store_raw=settings.store_raw_completion,
            )

        return cls(
            read_client=read_client,
            blob_store=blob_store,
            settings=settings,
            translator=translator,
        )

    async def process_event(self, payload: Any) -> ExtractionResult:
        """
        Process one blob-created event through the complete pipeline.

        Pipeline steps:
        1. Parse the trigger payload and derive the base name
        2. Submit the blob URL to the read operation
        3. Poll until the operation is terminal
        4. Assemble the recognized lines into one text
        5. Upload the text to the extracted-text container
        6. Optionally translate the text and upload the response

        Args:
            payload: Raw trigger payload.

        Returns:
            ExtractionResult describing the written blobs.

        Raises:
            EventPayloadError: If the payload has no usable blob URL.
            OCRError: If the read operation cannot be completed.
            StorageError: If the extracted text cannot be written.
        """
        start_time = time.time()

        try:
            # Step 1: Parse payload and derive output names
            event = parse_blob_event(payload)
            base_name = derive_base_name(event.url)

            logger.info(
                "processing_blob_event",
                blob_url=event.url,
                base_name=base_name,
                event_id=event.event_id,
                blob_type=event.blob_type,
            )

            extension = blob_extension(event.url)
            if (
                self.settings.skip_unsupported_formats
                and extension not in self.settings.supported_image_formats
            ):
                logger.info("unsupported_blob_format_skipped", blob_url=event.url, extension=extension)
                return ExtractionResult(
                    blob_url=event.url,
                    base_name=base_name,
                    status=ExtractionStatus.SKIPPED,
                    processing_time_ms=int((time.time() - start_time) * 1000),
                    completed_at=datetime.now(UTC),
                )

            # Steps 2-4: Read the text
            operation_id, read_result = await self.read_text(event.url)
            text = assemble_text(read_result.pages)

            logger.info(
                "text_assembled",
                operation_id=operation_id,
                page_count=len(read_result.pages),
                line_count=read_result.line_count,
                text_length=len(text),
            )

            # Step 5: Upload extracted text
            extracted_name = extracted_blob_name(base_name)
            await self.blob_store.upload_text(
                self.settings.extracted_text_container, extracted_name, text
            )

            # Step 6: Optional translation pass
            translation_status = TranslationStatus.DISABLED
            translated_name: Optional[str] = None
            if self.translator is not None:
                translated_name = await self._translate(base_name, text)
                translation_status = (
                    TranslationStatus.COMPLETED if translated_name else TranslationStatus.FAILED
                )

            processing_time_ms = int((time.time() - start_time) * 1000)

            logger.info(
                "extraction_completed",
                base_name=base_name,
                extracted_blob=extracted_name,
                translation_status=translation_status.value,
                processing_time_ms=processing_time_ms,
            )

            return ExtractionResult(
                blob_url=event.url,
                base_name=base_name,
                status=ExtractionStatus.COMPLETED,
                extracted_blob_name=extracted_name,
                translation_blob_name=translated_name,
                translation_status=translation_status,
                operation_id=operation_id,
                page_count=len(read_result.pages),
                line_count=read_result.line_count,
                text_length=len(text),
                processing_time_ms=processing_time_ms,
                completed_at=datetime.now(UTC),
            )

        except Exception as e:
            logger.error(
                "extraction_failed",
                error=str(e),
                error_type=type(e).__name__,
                processing_time_ms=int((time.time() - start_time) * 1000),
            )
            raise

    async def read_text(self, image_url: str) -> tuple[str, ReadOperationResult]:
        """
        Run a read operation on an image URL until it succeeds.

        Args:
            image_url: URL of the image.

        Returns:
            The operation id and the succeeded operation result.

        Raises:
            ReadOperationFailed: If the operation ends in the failed status.
            ReadTimeoutError: If the retry policy runs out first.
        """
        operation_id = await self.read_client.submit_read(
            image_url, self.settings.ocr_language
        )

        logger.info("waiting_for_read_result", operation_id=operation_id)

        result = await poll_until_terminal(
            lambda: self.read_client.get_read_result(operation_id),
            self.retry_policy,
            sleep=self._sleep,
        )

        if result.status == ReadOperationStatus.FAILED:
            logger.error("read_operation_failed", operation_id=operation_id)
            raise ReadOperationFailed(operation_id)

        for page in result.pages:
            for line in page.lines:
                logger.debug("line_recognized", page=page.page, text=line.text)

        return operation_id, result

    async def _translate(self, base_name: str, text: str) -> Optional[str]:
        """Translate and store the text; returns the blob name, or None on failure."""
        try:
            translated = await self.translator.translate(text)
        except CompletionError as e:
            logger.error(
                "translation_failed",
                base_name=base_name,
                status=e.status_code,
                error=str(e),
            )
            return None

        blob_name = translation_blob_name(base_name)
        await self.blob_store.upload_text(
            self.settings.translated_text_container, blob_name, translated
        )
        return blob_name

    async def cleanup(self) -> None:
        """Clean up service resources."""
        logger.info("cleaning_up_extraction_service")
        await self.read_client.cleanup()
        await self.blob_store.close()
        if self.translator is not None:
            await self.translator.cleanup()

    async def __aenter__(self) -> "ExtractionService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.cleanup()
