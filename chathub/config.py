"""12-factor configuration for the chat hub, read from the environment."""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import LOG_LEVEL


class Settings(BaseSettings):
    """Server settings; every field can be overridden by an env var of the same name."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")
    log_level: str = Field(default=LOG_LEVEL, description="Log level for the chathub logger")
    static_dir: str = Field(default="public", description="Directory with client assets")
    cors_origins: str = Field(default="*", description="Comma separated list of allowed origins")
    ws_ping_interval: float = Field(default=20.0, description="WebSocket ping interval in seconds")
    ws_ping_timeout: float = Field(default=10.0, description="WebSocket ping timeout in seconds")

    @property
    def cors_origin_list(self) -> List[str]:
        origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
