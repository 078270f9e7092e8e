"""Basic usage examples for the extraction pipeline."""

import asyncio

from blob_text_extractor.adapters import ReadClientFactory
from blob_text_extractor.config import get_settings
from blob_text_extractor.models.read import assemble_text
from blob_text_extractor.services import RetryPolicy, poll_until_terminal


async def example_mock_read() -> None:
    """Example using the mock read client."""
    print("=" * 60)
    print("Example 1: Mock Read Client")
    print("=" * 60)

    client = ReadClientFactory.create(
        "mock", {"pages": [["Bonjour", "le monde"], ["Fin"]], "pending_polls": 2}
    )

    operation_id = await client.submit_read(
        "https://acct.blob.core.windows.net/images/photo.jpg", "fr"
    )
    result = await poll_until_terminal(
        lambda: client.get_read_result(operation_id),
        RetryPolicy(initial_delay=0.1, max_delay=0.5),
    )

    print(f"Operation: {operation_id}")
    print(f"Status: {result.status.value}")
    print(f"Pages: {len(result.pages)}, lines: {result.line_count}")
    print(assemble_text(result.pages))


async def example_azure_read(image_url: str) -> None:
    """Example reading a public image with the configured vision resource."""
    print("=" * 60)
    print("Example 2: Azure Read API")
    print("=" * 60)

    settings = get_settings()

    async with ReadClientFactory.create_from_settings(settings) as client:
        operation_id = await client.submit_read(image_url, settings.ocr_language)
        result = await poll_until_terminal(
            lambda: client.get_read_result(operation_id),
            RetryPolicy.from_settings(settings),
        )

    print(f"Status: {result.status.value}")
    print(assemble_text(result.pages))


async def main() -> None:
    await example_mock_read()

    settings = get_settings()
    if settings.ocr_client == "azure" and settings.vision_key:
        await example_azure_read(
            "https://upload.wikimedia.org/wikipedia/commons/a/af/Atomist_quote_from_Democritus.png"
        )


if __name__ == "__main__":
    asyncio.run(main())
