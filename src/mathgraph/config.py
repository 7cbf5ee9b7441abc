"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Search Parameters (relevance score: 0 = perfect, lower is better)
    search_fuzzy_threshold: float = Field(
        default=0.3,
        description="Maximum relevance score accepted in fuzzy mode"
    )
    search_exact_threshold: float = Field(
        default=0.0,
        description="Maximum relevance score accepted in exact mode"
    )
    search_min_match_chars: int = Field(
        default=2,
        description="Queries shorter than this only match as exact substrings"
    )
    search_fields: list[str] = Field(
        default_factory=lambda: ["label", "title", "key", "document_id"],
        description="Node fields scored by text search"
    )

    # Fusion Parameters
    fusion_traversal_weight: float = 0.6
    fusion_search_weight: float = 0.4

    # Statistics Parameters
    histogram_buckets: int = 10

    # Store Parameters
    prune_dangling_edges: bool = Field(
        default=True,
        description="Drop edges whose endpoints do not resolve at ingestion"
    )
    dataset_path: str | None = Field(
        default=None,
        description="JSON dataset loaded by the API at startup (demo graph if unset)"
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        dataset_path=None,
        api_debug=False,
        log_level="DEBUG",
    )


# Global settings instance
settings = Settings()
