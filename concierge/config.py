"""Configuration management using pydantic-settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=7788, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Database Configuration
    database_path: str = Field(default="./data/concierge.db", description="DuckDB database file")

    # Text Generation Configuration
    generation_enabled: bool = Field(default=True, description="Use the text-generation service when configured")
    generation_api_base: str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible API base URL")
    generation_api_key: Optional[str] = Field(default=None, description="Text-generation API key")
    generation_model: str = Field(default="gpt-4", description="Chat model name")
    generation_max_tokens: int = Field(default=2000, ge=1, le=4000, description="Maximum tokens per reply")
    generation_temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    generation_timeout: float = Field(default=30.0, gt=0, description="Text-generation request timeout in seconds")

    # Conversation Context Configuration
    context_recent_messages: int = Field(default=5, ge=1, description="Recent messages loaded per pass")
    context_recent_interactions: int = Field(default=3, ge=1, description="Recent interactions loaded per pass")

    # Chat Configuration
    chat_max_message_length: int = Field(default=1000, ge=1, le=5000, description="Maximum guest message length")
    chat_session_timeout_minutes: int = Field(default=30, ge=1, le=1440, description="Idle session timeout reported to clients")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: str = Field(default="./logs/concierge.log", description="Log file path")

    def generation_configured(self) -> bool:
        """Whether a text-generation client should be created."""
        return self.generation_enabled and bool(self.generation_api_key)


# Global settings instance
settings = Settings()
