"""Blob storage writer for extraction outputs."""

from typing import Any, Optional

import structlog
from azure.core.exceptions import AzureError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from blob_text_extractor.adapters.base import StorageError

logger = structlog.get_logger(__name__)

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class BlobStore:
    """Writes text blobs into storage account containers."""

    def __init__(
        self,
        connection_string: str = "",
        service_client: Optional[BlobServiceClient] = None,
    ) -> None:
        """
        Initialize the blob store.

        Args:
            connection_string: Storage account connection string.
            service_client: Pre-built service client, used instead of the
                connection string when given.
        """
        if service_client is None and not connection_string:
            raise StorageError("A storage connection string must be configured")

        self.connection_string = connection_string
        self._service_client = service_client

    def _get_service_client(self) -> BlobServiceClient:
        """Get or create the service client."""
        if self._service_client is None:
            self._service_client = BlobServiceClient.from_connection_string(
                self.connection_string
            )
        return self._service_client

    async def upload_text(self, container: str, blob_name: str, text: str) -> str:
        """
        Upload text as a UTF-8 blob, replacing any existing blob of that name.

        Args:
            container: Destination container name.
            blob_name: Destination blob name.
            text: Text content.

        Returns:
            URL of the written blob.

        Raises:
            StorageError: If the upload fails.
        """
        data = text.encode("utf-8")
        container_client = self._get_service_client().get_container_client(container)

        logger.info(
            "uploading_blob",
            container=container,
            blob_name=blob_name,
            size_bytes=len(data),
        )

        try:
            blob_client = await container_client.upload_blob(
                name=blob_name,
                data=data,
                overwrite=True,
                content_settings=ContentSettings(content_type=TEXT_CONTENT_TYPE),
            )
        except AzureError as e:
            logger.error(
                "blob_upload_failed",
                container=container,
                blob_name=blob_name,
                error=str(e),
            )
            raise StorageError(
                f"Failed to upload {container}/{blob_name}: {str(e)}", original_error=e
            )

        logger.info("blob_uploaded", container=container, blob_name=blob_name)

        return blob_client.url

    async def close(self) -> None:
        """Close the service client."""
        if self._service_client is not None:
            await self._service_client.close()
            self._service_client = None
            logger.info("blob_store_closed")

    async def __aenter__(self) -> "BlobStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
