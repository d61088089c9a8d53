import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _lookback_months(raw: str | None) -> int:
    """Parse TOGGL_LOOKBACK_MONTHS, falling back to 6 and never below 1."""
    try:
        value = int(float(raw)) if raw is not None else 6
    except (ValueError, OverflowError):
        return 6
    return max(1, value)


def _csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Google Books
    google_books_api_url: str = os.getenv(
        "GOOGLE_BOOKS_API_URL", "https://www.googleapis.com/books/v1/volumes"
    )
    google_books_reject_unauthorized: str | None = os.getenv("GOOGLE_BOOKS_REJECT_UNAUTHORIZED")
    google_books_ca_file: str | None = os.getenv("GOOGLE_BOOKS_CA_FILE")
    google_books_ca_cert: str | None = os.getenv("GOOGLE_BOOKS_CA_CERT")
    google_books_timeout: float = float(os.getenv("GOOGLE_BOOKS_TIMEOUT", "5"))

    # Search result cache
    books_cache_ttl: float = float(os.getenv("BOOKS_CACHE_TTL", "60"))  # seconds

    # Cover proxy
    cover_allowed_hosts: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("COVER_ALLOWED_HOSTS", "books.google.com,books.googleusercontent.com")
        )
    )
    cover_max_bytes: int = int(os.getenv("COVER_MAX_BYTES", str(2 * 1024 * 1024)))

    # Toggl Track
    toggl_api_url: str = os.getenv("TOGGL_API_URL", "https://api.track.toggl.com/api/v9")
    toggl_api_token: str | None = os.getenv("TOGGL_API_TOKEN")
    toggl_workspace_id: str | None = os.getenv("TOGGL_WORKSPACE_ID")
    toggl_project_id: str | None = os.getenv("TOGGL_PROJECT_ID")
    toggl_lookback_months: int = _lookback_months(os.getenv("TOGGL_LOOKBACK_MONTHS"))
    toggl_reject_unauthorized: str | None = os.getenv("TOGGL_REJECT_UNAUTHORIZED")
    toggl_ca_file: str | None = os.getenv("TOGGL_CA_FILE")
    toggl_ca_cert: str | None = os.getenv("TOGGL_CA_CERT")
    toggl_timeout: float = float(os.getenv("TOGGL_TIMEOUT", "10"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "3001"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    cors_origins: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
        )
    )

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str | None = os.getenv("LOG_FILE")

    @property
    def toggl_configured(self) -> bool:
        """Check whether the Toggl Track credentials are present.

        Returns:
            True if both the API token and the workspace id are set
        """
        return bool(self.toggl_api_token and self.toggl_workspace_id)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.google_books_timeout <= 0:
            raise ValueError("GOOGLE_BOOKS_TIMEOUT must be a positive number of seconds")

        if self.toggl_timeout <= 0:
            raise ValueError("TOGGL_TIMEOUT must be a positive number of seconds")

        if self.books_cache_ttl < 0:
            raise ValueError(f"BOOKS_CACHE_TTL must not be negative, got {self.books_cache_ttl}")

        if self.cover_max_bytes <= 0:
            raise ValueError("COVER_MAX_BYTES must be a positive number of bytes")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
