from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./dogcare.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "http://localhost:5173,http://127.0.0.1:5173"
    CORS_ORIGINS: str = "*"

    # Seconds between background display refreshes. 0 disables the refresher.
    REFRESH_INTERVAL_SECONDS: int = 60

    # IANA zone used for human-readable date/time text.
    DISPLAY_TIMEZONE: str = "UTC"

    # Create the kv_store table at startup (local installs without Alembic).
    AUTO_CREATE_TABLES: bool = True

    @field_validator("DISPLAY_TIMEZONE")
    @classmethod
    def check_timezone_exists(cls, v: str) -> str:
        name = v.strip()
        if name.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            raise ValueError(f"unknown time zone: {v!r}")
        return name

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
