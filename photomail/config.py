from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # "smtp" or "http"
    MAIL_TRANSPORT: str = "smtp"

    # SMTP_USER/SMTP_PASS may stay empty for an unauthenticated relay
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_SECURE: bool = False
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_TIMEOUT_SECONDS: int = 30

    # HTTP mail API (JSON POST with bearer key)
    MAIL_API_URL: str = ""
    MAIL_API_KEY: str = ""
    MAIL_API_TIMEOUT_SECONDS: int = 30

    FROM_EMAIL: str = ""
    TO_EMAIL: str = ""

    MAX_UPLOAD_SIZE_MB: int = 15
    TIMEZONE: str = "Europe/Vilnius"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {value!r}") from exc
        return value


@lru_cache()
def get_settings() -> Settings:
    return Settings()
