"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from riding_school.domain.riders import ROLES, Principal

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_tokens: str | None = None
    lesson_backend: str = "memory"
    email_api_key: str | None = None
    email_api_url: str = "https://api.resend.com/emails"
    email_from: str = "Riding School <lessons@ridingschool.example>"
    single_rider_lessons: bool = False
    require_lesson_description: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_api_tokens(raw: str | None) -> dict[str, Principal]:
    """Parse ``token:username:role`` entries into a token table."""
    if raw is None:
        return {}
    tokens: dict[str, Principal] = {}
    for chunk in raw.split(","):
        parts = [part.strip() for part in chunk.split(":")]
        if len(parts) != 3 or not all(parts):  # noqa: PLR2004
            continue
        token, username, role = parts
        if role not in ROLES:
            continue
        tokens[token] = Principal(username=username, role=role)
    return tokens
