"""Configuration management using Pydantic settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Local Lovdata document source
    lovdata_data_dir: str = Field(
        default="data/nl",
        description="Directory containing Lovdata HTML/XML law files (e.g. data/nl/)",
    )
    lovdata_base_url: str = Field(
        default="https://lovdata.no",
        description="Base URL used when building links for search results",
    )
    paragraph_content_max_chars: int = Field(
        default=500,
        ge=50,
        le=20000,
        description="Maximum characters of paragraph text kept in raw document payloads.",
    )

    # Structure parsing
    placeholder_title: str = Field(
        default="Hovedmeny",
        description=(
            "Title scraped when the real document title was not found. "
            "Laws carrying it get their display names replaced by a known name."
        ),
    )

    # Selector / search behaviour
    search_min_query_length: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Minimum query length before a remote law search is issued.",
    )
    search_max_results: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum number of search hits fetched and parsed per remote search.",
    )
    search_debounce_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=10.0,
        description="Quiet period callers should wait after the last keystroke before searching.",
    )

    # Fetch fan-out
    fetch_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Max number of concurrent document fetches.",
    )
    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Timeout per document fetch in seconds.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("placeholder_title")
    @classmethod
    def validate_placeholder_title(cls, v: str) -> str:
        """A blank placeholder would match every untitled law."""
        if not v or v.strip() == "":
            raise ValueError("PLACEHOLDER_TITLE must not be blank.")
        return v.strip()


# Singleton instance
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings instance (singleton pattern).

    Returns:
        Settings instance (cached after first call)
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
