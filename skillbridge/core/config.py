"""Application configuration.

Only deployment knobs live here. Learning rules (pass threshold, XP per pass,
XP per level, history size, layout spacing) are constants next to the code
that applies them.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_NAME: str = "SkillBridge"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENV: str = "development"
    LOG_JSON: bool | None = None  # default: JSON unless DEBUG

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: list[str] = []

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./skillbridge.db"
    DATABASE_ECHO: bool = False

    # Identity used when a request carries no X-User-Id header
    DEMO_USER_ID: int = 1

    # AI
    OPENAI_API_KEY: str | None = None
    OPENAI_API_BASE_URL: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_FAST_MODEL: str | None = None  # chat replies; falls back to OPENAI_MODEL
    OPENAI_TEMPERATURE: float = 0.7
    LLM_TIMEOUT_SECONDS: float = 60.0

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "development"

    @property
    def allowed_origins(self) -> list[str]:
        """Origins accepted by the CORS middleware."""
        if self.CORS_ORIGINS:
            return self.CORS_ORIGINS
        return ["*"] if self.is_development else []


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
