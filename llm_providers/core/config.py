"""
Provider configuration using pydantic-settings.

WHAT: Centralized config for provider selection, local engine and HTTP providers
WHY: Type-safe, validated config with sensible defaults
HOW: Pydantic BaseSettings reads from .env and environment
"""

from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Literal, Optional


class Settings(BaseSettings):
    """Provider settings loaded from environment."""

    # App metadata
    APP_NAME: str = "llm-providers"
    APP_VERSION: str = "0.1.0"

    # LLM Provider Selection
    LLM_PROVIDER: Literal["red_candle", "lm_studio"] = "red_candle"

    # Red Candle (local, in-process engine)
    RED_CANDLE_DEVICE: Optional[str] = None  # cpu | metal | cuda, falls back to cpu
    RED_CANDLE_DEFAULT_MODEL: Optional[str] = None
    RED_CANDLE_ENGINE_MODULE: str = "candle"
    RED_CANDLE_CACHE_MODELS: bool = True

    # LM Studio Configuration
    LM_STUDIO_BASE_URL: str = "http://localhost:1234/v1"
    LM_STUDIO_DEFAULT_MODEL: str = "qwen/qwen3-1.7b"
    LM_STUDIO_TIMEOUT: int = 30  # seconds

    # LLM Request Configuration
    LLM_MAX_RETRIES: int = 3
    LLM_RETRY_DELAY: float = 2  # seconds, base for exponential backoff

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @field_validator("RED_CANDLE_DEVICE", "RED_CANDLE_DEFAULT_MODEL", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty strings from the environment as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Singleton instance
settings = Settings()
