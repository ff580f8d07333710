"""Application settings and configuration."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # AWS CONFIG (falls back to the boto credential chain when unset)
    aws_api_key_id: str | None = Field(
        default=None,
        description="AWS API key ID",
        validation_alias="AWS_ACCESS_KEY_ID",
    )
    aws_api_key_secret: str | None = Field(
        default=None,
        description="AWS API key",
        validation_alias="AWS_SECRET_ACCESS_KEY",
    )
    aws_default_region: str = Field(
        default="us-east-1",
        description="AWS API region",
        validation_alias="AWS_DEFAULT_REGION",
    )

    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key for the secondary provider",
        validation_alias="ANTHROPIC_API_KEY",
    )

    # Primary provider: bulk per-type generation
    primary_model_name: str = Field(
        default="anthropic.claude-3-7-sonnet-20250219-v1:0",
        description="Primary generation model (AWS Bedrock model ID)",
        validation_alias="PRIMARY_MODEL_NAME",
    )
    primary_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Temperature for primary question generation",
        validation_alias="PRIMARY_TEMPERATURE",
    )
    primary_max_tokens: int = Field(
        default=3000,
        ge=1,
        description="Max output tokens per primary call",
        validation_alias="PRIMARY_MAX_TOKENS",
    )

    # Secondary provider: fills deficits only
    secondary_model_name: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Secondary (validator) model (Anthropic model ID)",
        validation_alias="SECONDARY_MODEL_NAME",
    )
    secondary_temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Temperature for deficit filling",
        validation_alias="SECONDARY_TEMPERATURE",
    )
    secondary_max_tokens: int = Field(
        default=2500,
        ge=1,
        description="Max output tokens per secondary call",
        validation_alias="SECONDARY_MAX_TOKENS",
    )

    # Answer checking and tutoring run on the primary model
    checker_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Temperature for answer checking",
        validation_alias="CHECKER_TEMPERATURE",
    )
    checker_max_tokens: int = Field(
        default=100,
        ge=1,
        description="Max output tokens for answer checking",
        validation_alias="CHECKER_MAX_TOKENS",
    )
    tutor_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Temperature for the study tutor",
        validation_alias="TUTOR_TEMPERATURE",
    )
    tutor_max_tokens: int = Field(
        default=800,
        ge=1,
        description="Max output tokens for the study tutor",
        validation_alias="TUTOR_MAX_TOKENS",
    )

    # Provider call behaviour
    request_timeout_seconds: float = Field(
        default=45.0,
        ge=1.0,
        le=300.0,
        description="Per-call provider timeout in seconds",
        validation_alias="REQUEST_TIMEOUT",
    )
    provider_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Client-level retries per provider call",
        validation_alias="PROVIDER_MAX_RETRIES",
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Max concurrent provider calls per batch",
        validation_alias="MAX_CONCURRENCY",
    )

    # Generation Settings
    max_generation_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Full generate/validate/fill cycles before best-effort return",
        validation_alias="MAX_GENERATION_ATTEMPTS",
    )
    source_char_limit: int = Field(
        default=3000,
        ge=100,
        description="Source text prefix sent to the primary provider",
        validation_alias="SOURCE_CHAR_LIMIT",
    )
    secondary_source_char_limit: int = Field(
        default=2500,
        ge=100,
        description="Source text prefix sent to the secondary provider",
        validation_alias="SECONDARY_SOURCE_CHAR_LIMIT",
    )
    tutor_source_char_limit: int = Field(
        default=2000,
        ge=100,
        description="Source text prefix given to the study tutor",
        validation_alias="TUTOR_SOURCE_CHAR_LIMIT",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level for the study_royale logger",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Loaded once and shared by the providers and the workflow
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
