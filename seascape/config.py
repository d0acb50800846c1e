"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SEASCAPE"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Booking ledger
    ledger_backend: Literal["supabase", "memory"] = "memory"
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: Optional[str] = None
    ledger_timeout_seconds: float = 10.0

    @computed_field
    @property
    def supabase_rest_url(self) -> str:
        """PostgREST base URL of the ledger."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    # JWT Authentication (tokens are issued by the ledger's auth service)
    jwt_secret_key: str = Field(default="your-super-secret-jwt-token-with-at-least-32-characters")
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # Booking
    platform_fee_percent: float = 5.0
    currency: str = "EGP"
    time_slots: List[str] = [
        "08:00", "09:00", "10:00", "11:00", "12:00",
        "13:00", "14:00", "15:00", "16:00", "17:00",
    ]
    occupancy_days: int = 30  # Bookable days per yacht in the occupancy estimate
    timezone: str = "Africa/Cairo"  # Calendar used for "today" in date checks

    # QR rendering
    qr_renderer_url_template: str = (
        "https://api.qrserver.com/v1/create-qr-code/?size={size}x{size}&data={data}"
    )
    qr_image_size: int = 200

    # CORS
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:8080"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
