from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Upstream / RailRadar ---
    RAIL_RADAR_API_KEY: str | None = None
    RAIL_RADAR_BASE_URL: str = "https://railradar.in/api/v1"
    RAIL_RADAR_HTTP_TIMEOUT: float = 10.0

    # Used when an upstream error carries no usable status code.
    DEFAULT_ERROR_STATUS_CODE: int = 401

    # --- HTTP surface ---
    CORS_ALLOW_ORIGINS: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    STATIC_DIR: str = "static"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


settings = Settings()
