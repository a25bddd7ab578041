"""Application configuration from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Storage
    state_dir: str = Field(
        default="./var/docledger",
        description="Directory holding documents.json, ledger.json and ledger_mappings.json",
    )

    # Pipeline
    min_content_length: int = Field(
        default=50,
        ge=0,
        description="Extracted text shorter than this is flagged for review",
    )
    default_posting_amount: float = Field(
        default=1000.0,
        gt=0,
        description="Amount used when a posting request carries none",
    )

    # Classifier API (OpenAI compatible)
    classifier_api_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible chat completions API URL",
    )
    classifier_api_key: str = Field(default="", description="Classifier API key")
    classifier_model: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for document classification",
    )
    classifier_excerpt_chars: int = Field(
        default=500,
        gt=0,
        description="Number of leading content characters sent to the classifier",
    )

    # Application
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
