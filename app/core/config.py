"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Re-analysis window for unchanged text; 0 disables rate limiting
    RATE_LIMIT_HOURS: float = 0

    # Theme catalog cache lifetime; 0 keeps it for the process lifetime
    THEME_CACHE_TTL_SECONDS: int = 0

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()  # type: ignore[call-arg]
