from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./summarizer.db"
    # Empty REDIS_URL keeps sessions in process memory
    redis_url: Optional[str] = "redis://localhost:6379/0"

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 30.0
    llm_temperature: float = 0.7
    summary_max_tokens: int = 400
    questions_max_tokens: int = 600

    max_text_length: int = 12000
    max_upload_bytes: int = 10 * 1024 * 1024

    session_cookie_name: str = "session_id"
    session_idle_minutes: int = 60 * 24 * 7
    session_absolute_hours: int = 24 * 30
    cookie_secure: bool = False
    cookie_samesite: str = "lax"

    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # Prefer DATABASE_URL (e.g., Postgres in production). Fallback to local SQLite.
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            redis_url=os.getenv("REDIS_URL", cls.redis_url) or None,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", cls.openai_model),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", cls.llm_timeout_seconds)),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", cls.llm_temperature)),
            summary_max_tokens=int(os.getenv("SUMMARY_MAX_TOKENS", cls.summary_max_tokens)),
            questions_max_tokens=int(os.getenv("QUESTIONS_MAX_TOKENS", cls.questions_max_tokens)),
            max_text_length=int(os.getenv("MAX_TEXT_LENGTH", cls.max_text_length)),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", cls.max_upload_bytes)),
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", cls.session_cookie_name),
            session_idle_minutes=int(os.getenv("SESSION_IDLE_MINUTES", cls.session_idle_minutes)),
            session_absolute_hours=int(os.getenv("SESSION_ABSOLUTE_HOURS", cls.session_absolute_hours)),
            cookie_secure=_env_bool("COOKIE_SECURE", cls.cookie_secure),
            cookie_samesite=os.getenv("COOKIE_SAMESITE", cls.cookie_samesite).lower(),
            cors_origins=_env_list("CORS_ORIGINS", "http://localhost:5173"),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
