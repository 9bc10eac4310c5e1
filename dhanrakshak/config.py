"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "dhanrakshak-core"
    log_level: str = "INFO"

    # AI collaborator (OpenAI-compatible chat completions)
    ai_enabled: bool = False
    ai_api_base: str = "https://api.groq.com/openai/v1"
    ai_api_key: Optional[str] = None
    ai_model: str = "llama-3.3-70b-versatile"
    ai_timeout_seconds: float = 10.0

    # SMS batch parsing
    batch_max_workers: int = 4
    batch_max_messages: int = 500


settings = Settings()
