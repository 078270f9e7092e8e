"""Configuration management for blob-text-extractor."""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TRANSLATION_PROMPT = (
    "In the french text below, fix all spelling mistakes and fill in any "
    "missing words. Output the results in french and english. Text: {text}"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application Settings
    app_name: str = Field(default="blob-text-extractor", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(default="development", description="Environment name")

    # Storage Configuration
    storage_connection_string: str = Field(
        default="",
        validation_alias=AliasChoices(
            "storage_connection_string", "AzureWebJobsStorage"
        ),
        description="Storage account connection string",
    )
    extracted_text_container: str = Field(
        default="extractedtext",
        validation_alias=AliasChoices(
            "extracted_text_container", "EXTRACTEDTEXT_CONTAINER_NAME"
        ),
        description="Container receiving the extracted text blobs",
    )
    translated_text_container: str = Field(
        default="translatedtext",
        validation_alias=AliasChoices(
            "translated_text_container", "TRANSLATEDTEXT_CONTAINER_NAME"
        ),
        description="Container receiving the translated text blobs",
    )

    # Read (OCR) Service Configuration
    ocr_client: str = Field(default="azure", description="Read client to use")
    vision_endpoint: str = Field(default="", description="Vision service endpoint")
    vision_key: str = Field(default="", description="Vision service subscription key")
    vision_api_version: str = Field(default="v3.2", description="Read API version")
    ocr_language: Optional[str] = Field(
        default=None,
        description="Language hint passed to the read operation",
    )
    http_timeout: int = Field(default=30, description="HTTP timeout in seconds")

    # Polling Policy
    poll_initial_delay: float = Field(
        default=2.0,
        description="Delay in seconds before the first status check",
    )
    poll_max_delay: float = Field(
        default=16.0,
        description="Upper bound for the delay between status checks",
    )
    poll_backoff_factor: float = Field(
        default=2.0,
        description="Multiplier applied to the delay after each check",
    )
    poll_max_attempts: Optional[int] = Field(
        default=60,
        description="Maximum number of status checks, empty for no limit",
    )
    poll_timeout: Optional[float] = Field(
        default=300.0,
        description="Wall-clock limit in seconds for polling, empty for no limit",
    )

    # Completion (translation) Configuration
    translation_enabled: bool = Field(
        default=False,
        description="Send extracted text to the completion endpoint",
    )
    completion_endpoint: str = Field(
        default="",
        validation_alias=AliasChoices("completion_endpoint", "OPENAI_ENDPOINT"),
        description="Completion endpoint URL",
    )
    completion_key: str = Field(
        default="",
        validation_alias=AliasChoices("completion_key", "OPENAI_KEY"),
        description="Bearer token for the completion endpoint",
    )
    completion_mode: str = Field(
        default="completions",
        description="Request shape: 'completions' (prompt) or 'chat' (messages)",
    )
    completion_model: Optional[str] = Field(
        default=None,
        description="Model name sent in the request body",
    )
    completion_max_tokens: int = Field(default=200, description="Max tokens to generate")
    completion_timeout: int = Field(
        default=60,
        description="Completion request timeout in seconds",
    )
    translation_prompt: str = Field(
        default=DEFAULT_TRANSLATION_PROMPT,
        description="Prompt template; {text} is replaced by the extracted text",
    )
    store_raw_completion: bool = Field(
        default=False,
        description="Store the raw response body instead of the generated text",
    )

    # Processing Configuration
    supported_image_formats: List[str] = Field(
        default=["jpg", "jpeg", "png", "gif", "bmp", "tiff", "tif", "pdf"],
        description="Supported image formats",
    )
    skip_unsupported_formats: bool = Field(
        default=False,
        description="Skip blobs whose extension is not a supported format",
    )

    @field_validator("poll_max_attempts", "poll_timeout", mode="before")
    @classmethod
    def empty_bound_means_unlimited(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() in ("", "none"):
            return None
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
