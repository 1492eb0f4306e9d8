"""
Configuration module - centralized settings for the calendar service.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export DB_HOST=db.internal DB_PASSWORD=...
        export GOOGLE_CLIENT_ID=... GOOGLE_CLIENT_SECRET=...
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",        # Load from .env file in the working directory
        env_file_encoding="utf-8",
        extra="ignore",         # Ignore extra env vars not defined here
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    APP_NAME: str = "Google Calendar Service"
    DEBUG: bool = False

    # LOG_LEVEL: Root level for the "calendar_service" logger tree
    LOG_LEVEL: str = "INFO"

    # HOST / PORT: Where scripts/run_server.py binds uvicorn
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # ---------------------------------------------------------------------------
    # DATABASE SETTINGS
    # ---------------------------------------------------------------------------
    # The connection is assembled from the individual DB_* parts.
    # DATABASE_URL, when set, wins over the parts (used by tests and sqlite dev setups).
    DB_HOST: str = "localhost"
    DB_NAME: str = "calendar"
    DB_USER: str = "postgres"
    DB_PORT: int = 5432
    DB_PASSWORD: str = ""
    DATABASE_URL: Optional[str] = None

    # ---------------------------------------------------------------------------
    # GOOGLE OAUTH SETTINGS
    # ---------------------------------------------------------------------------
    # Google Cloud Console: https://console.cloud.google.com/apis/credentials
    # The YOUR_CLIENT_* names are accepted for older .env files.
    GOOGLE_CLIENT_ID: str = Field(
        default="",
        validation_alias=AliasChoices("GOOGLE_CLIENT_ID", "YOUR_CLIENT_ID"),
    )
    GOOGLE_CLIENT_SECRET: str = Field(
        default="",
        validation_alias=AliasChoices("GOOGLE_CLIENT_SECRET", "YOUR_CLIENT_SECRET"),
    )

    # REDIRECT_URL: Where Google sends users after authorization
    # - Must match exactly what's configured in Google Cloud Console
    REDIRECT_URL: str = "http://localhost:8000/google/redirect"

    # OAUTH_STATE: Anti-forgery value sent with the authorization request.
    # It is a fixed value and the callback does not check it (see DESIGN.md).
    OAUTH_STATE: str = "state-token"

    # CALENDAR_UI_URL: Where the browser lands after a successful login
    CALENDAR_UI_URL: str = "https://calendar.google.com"

    # CALENDAR_ID: Calendar that receives created events
    CALENDAR_ID: str = "primary"

    # HTTP_TIMEOUT: Seconds per call to Google endpoints
    HTTP_TIMEOUT: float = 30.0

    # ---------------------------------------------------------------------------
    # SESSION SETTINGS
    # ---------------------------------------------------------------------------
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_TTL_MINUTES: int = 60 * 24  # 24 hours

    @property
    def database_url(self) -> str:
        """Connection string for SQLAlchemy, built from DB_* unless DATABASE_URL is set."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            "postgresql+psycopg",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Default instance used when the app is created without explicit settings.
# Request handlers receive settings through app.deps.get_settings instead.
settings = Settings()
