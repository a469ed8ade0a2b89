"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment presets."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Environment = Environment.DEV

    # Archive API (the Go server's /api root)
    api_base_url: str = "http://localhost:8080/api"
    api_token: str = ""
    api_timeout: float = 30.0
    api_max_retries: int = Field(
        default=2,
        description="urllib3 retries for idempotent GET requests"
    )

    # Graph loading
    graph_limit: int = Field(
        default=60,
        description="Maximum concepts requested per graph load"
    )

    # Playback: the whole time range is traversed in playback_ticks ticks
    playback_interval: float = 0.1  # seconds between ticks
    playback_ticks: int = 60

    # Selection cache
    detail_freshness: float = Field(
        default=300.0,
        description="Seconds a cached concept detail is served without refetch"
    )
    detail_cache_size: int = Field(
        default=128,
        description="Max cached concept details (least recently used evicted first)"
    )

    # Extraction
    extraction_error_ttl: float = Field(
        default=8.0,
        description="Seconds before an extraction error banner clears itself"
    )

    # Viewport clamp ranges
    graph_min_zoom: float = 0.15
    graph_max_zoom: float = 4.0
    diagram_min_zoom: float = 0.3
    diagram_max_zoom: float = 3.0
    wheel_zoom_in: float = 1.1
    wheel_zoom_out: float = 0.9
    button_zoom_step: float = 1.3  # zoom in multiplies, zoom out divides
    fit_padding: float = 40.0

    # Concept panel
    panel_max_connections: int = 10


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        environment=Environment.DEV,
        api_base_url="http://localhost:8080/api",
        api_max_retries=0,
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        environment=Environment.TEST,
        api_base_url="http://testserver/api",
        api_token="",
        api_max_retries=0,
        detail_cache_size=16,
    )


# Global settings instance
settings = Settings()
