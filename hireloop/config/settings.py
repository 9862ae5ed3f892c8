"""
HireLoop settings: oracle endpoint, retry policy, and pipeline rules.

Values come from environment variables or a .env file via pydantic-settings.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the screening service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "HireLoop"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Grading oracle (OpenAI-compatible chat completions endpoint)
    oracle_base_url: str = "https://api.groq.com/openai/v1"
    oracle_api_key: str = ""
    oracle_model: str = "llama-3.3-70b-versatile"
    oracle_temperature: float = 0.7
    oracle_max_tokens: int = 8000
    oracle_timeout_seconds: float = 60.0

    # Rate-limit retries: delays of base, 2*base, 4*base...
    oracle_rate_limit_retries: int = 3
    oracle_backoff_base_seconds: float = 1.5

    # Pipeline rules
    gatekeeper_min_match: int = Field(
        default=30, ge=0, le=100,
        description="Baseline match percentage the evidence must demonstrate"
    )
    conversation_min_questions: int = Field(
        default=6, ge=6,
        description="Questions required before a conversational round may finish"
    )

    # Read from CORS_ORIGINS as a comma-separated list
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Allowed origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
