"""Factory for creating read client instances."""

from typing import Any, Dict

import structlog

from blob_text_extractor.adapters.base import BaseReadClient
from blob_text_extractor.adapters.mock_client import MockReadClient
from blob_text_extractor.adapters.vision_client import AzureVisionReadClient
from blob_text_extractor.config import Settings

logger = structlog.get_logger(__name__)


class ReadClientFactory:
    """Factory for creating read clients based on configuration."""

    # Registry of available clients
    _clients: Dict[str, type[BaseReadClient]] = {
        "azure": AzureVisionReadClient,
        "mock": MockReadClient,
    }

    @classmethod
    def create(cls, client_type: str, config: dict[str, Any]) -> BaseReadClient:
        """
        Create a read client instance.

        Args:
            client_type: Type of client to create (azure, mock, etc.).
            config: Configuration dictionary for the client.

        Returns:
            Initialized read client.

        Raises:
            ValueError: If client type is not supported.
        """
        client_type = client_type.lower()

        if client_type not in cls._clients:
            available = ", ".join(cls._clients.keys())
            raise ValueError(
                f"Unknown read client type: {client_type}. "
                f"Available clients: {available}"
            )

        client_class = cls._clients[client_type]
        logger.info(
            "creating_read_client",
            client_type=client_type,
            client_class=client_class.__name__,
        )

        return client_class(config)

    @classmethod
    def create_from_settings(cls, settings: Settings) -> BaseReadClient:
        """
        Create a read client from application settings.

        Args:
            settings: Application settings object.

        Returns:
            Initialized read client.
        """
        config: dict[str, Any] = {}

        if settings.ocr_client.lower() == "azure":
            config = {
                "endpoint": settings.vision_endpoint,
                "key": settings.vision_key,
                "api_version": settings.vision_api_version,
                "timeout": settings.http_timeout,
            }

        return cls.create(settings.ocr_client, config)

    @classmethod
    def register_client(cls, name: str, client_class: type[BaseReadClient]) -> None:
        """
        Register a custom read client.

        Args:
            name: Name to register the client under.
            client_class: Client class (must inherit from BaseReadClient).

        Raises:
            TypeError: If client_class doesn't inherit from BaseReadClient.
        """
        if not issubclass(client_class, BaseReadClient):
            raise TypeError(
                f"{client_class.__name__} must inherit from BaseReadClient"
            )

        logger.info(
            "registering_custom_read_client",
            name=name,
            client_class=client_class.__name__,
        )

        cls._clients[name.lower()] = client_class

    @classmethod
    def list_clients(cls) -> list[str]:
        """List all registered client types."""
        return list(cls._clients.keys())
