"""
Configuration management for the Study Buddy backend.
Loads environment variables and provides typed configuration access.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict, NoDecode
from pydantic import BeforeValidator
from typing import Optional, List, Annotated
from enum import Enum


def parse_comma_separated(v):
    """Parse comma-separated string into list."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(',') if item.strip()]
    return v


class Environment(str, Enum):
    """Deployment environment types."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class StoreBackend(str, Enum):
    """Session store backends."""
    MEMORY = "memory"  # Development/testing
    FILE = "file"      # One JSON document per session


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: str = "INFO"
    service_name: str = "AI Study Buddy"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8787
    allowed_origins: Annotated[List[str], NoDecode, BeforeValidator(parse_comma_separated)] = ["*"]

    # LLM Configuration (any OpenAI-compatible chat completions API)
    llm_api_key: Optional[str] = None
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "meta-llama/llama-3.3-70b-instruct"
    llm_fallback_models: Annotated[List[str], NoDecode, BeforeValidator(parse_comma_separated)] = [
        "openai/gpt-4o-mini"
    ]
    llm_timeout_seconds: float = 30.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024
    llm_top_p: float = 0.95

    # Session Store Configuration
    session_store: StoreBackend = StoreBackend.MEMORY
    session_store_dir: str = "data/sessions"

    # Actor Configuration
    actor_idle_seconds: int = 900  # Drop idle actors from memory after 15 minutes
    actor_sweep_interval_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
