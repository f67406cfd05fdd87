from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from datetime import time
from typing import List
import pytz


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # AI - Gemini text generation (optional, advice falls back when empty)
    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-3-flash-preview", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL"
    )
    advice_timeout_seconds: float = Field(default=10.0, alias="ADVICE_TIMEOUT_SECONDS")

    # Operations
    timezone: str = Field(default="Europe/London", alias="TIMEZONE")
    turnover_deadline_time: str = Field(default="15:00", alias="TURNOVER_DEADLINE_TIME")
    notification_limit: int = Field(default=10, alias="NOTIFICATION_LIMIT")

    # First admin, created when the store starts empty (blank id disables)
    bootstrap_admin_id: str = Field(default="admin", alias="BOOTSTRAP_ADMIN_ID")
    bootstrap_admin_name: str = Field(default="Operations Admin", alias="BOOTSTRAP_ADMIN_NAME")
    bootstrap_admin_email: str = Field(default="admin@lumina.local", alias="BOOTSTRAP_ADMIN_EMAIL")

    # CORS - Frontend URLs (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
        alias="ALLOWED_ORIGINS"
    )

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezones pytz does not know about"""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator('turnover_deadline_time')
    @classmethod
    def validate_turnover_time(cls, v: str) -> str:
        """Turnover deadline must be HH:MM"""
        try:
            time.fromisoformat(v)
        except ValueError:
            raise ValueError("TURNOVER_DEADLINE_TIME must be in HH:MM format")
        return v

    @field_validator('notification_limit')
    @classmethod
    def validate_notification_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("NOTIFICATION_LIMIT must be at least 1")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def tzinfo(self):
        return pytz.timezone(self.timezone)

    @property
    def turnover_time(self) -> time:
        return time.fromisoformat(self.turnover_deadline_time)

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        if not self.allowed_origins:
            return ["http://localhost:5173"]

        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)

        return origins if origins else ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
