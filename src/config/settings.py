"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./mentorship.db"

    # JWT
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # Bookings
    BOOKING_CONFLICT_WINDOW_MINUTES: int = 30

    # Realtime
    WS_AUTH_TIMEOUT_SECONDS: float = 5.0
    WS_OUTBOX_MAX_FRAMES: int = 256

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Rate limiting
    RATE_LIMIT_AUTH: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("BOOKING_CONFLICT_WINDOW_MINUTES")
    @classmethod
    def window_must_be_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("BOOKING_CONFLICT_WINDOW_MINUTES must be a positive number of minutes")
        return value

    @field_validator("WS_AUTH_TIMEOUT_SECONDS")
    @classmethod
    def timeout_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("WS_AUTH_TIMEOUT_SECONDS must be positive")
        return value

    @field_validator("WS_OUTBOX_MAX_FRAMES")
    @classmethod
    def outbox_must_be_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("WS_OUTBOX_MAX_FRAMES must be positive")
        return value

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
