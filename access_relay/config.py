"""
Configuration settings for the Repo Access Relay.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from .utils.exceptions import ConfigurationException


class Settings(BaseSettings):
    """Application settings."""

    # Server settings
    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(default=3001, description="Port to bind to")
    debug: bool = Field(default=False, description="Enable debug mode")
    reload: bool = Field(default=False, description="Enable auto-reload")

    # Mail settings
    email_user: str = Field(default="", description="Mail account used as sender and SMTP login")
    email_pass: str = Field(default="", description="Mail account password")
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server host")
    smtp_port: int = Field(default=465, description="SMTP server port")
    smtp_use_ssl: bool = Field(default=True, description="Use SMTP over SSL instead of STARTTLS")
    smtp_timeout: int = Field(default=30, description="SMTP timeout in seconds")
    to_email: str = Field(default="", description="Recipient of access request notifications")

    # Link settings
    backend_url: str = Field(default="http://localhost:3001", description="Public base URL used in emailed links")

    # Security settings
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"], description="Allowed CORS origins"
    )
    rate_limit_max: int = Field(default=20, description="Requests allowed per client per window")
    rate_limit_window_seconds: int = Field(default=900, description="Rate limit window in seconds")  # 15 minutes

    # GitHub settings
    owner: str = Field(default="", description="Repository owner or organisation")
    github_token: str = Field(default="", description="GitHub token used to manage collaborators")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub API base URL")
    github_timeout: int = Field(default=30, description="GitHub API timeout in seconds")

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="", description="Log file path")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def cors_origins(self) -> list[str]:
        """Allowed origins plus the backend itself, without duplicates."""
        origins = [*self.allowed_origins, self.backend_url.rstrip("/")]
        return [origin for index, origin in enumerate(origins) if origin and origin not in origins[:index]]


def check_settings(settings: Settings) -> None:
    """
    Reject settings the relay cannot run with.

    Raises:
        ConfigurationException: Listing every problem found
    """
    problems = []
    if not settings.backend_url.startswith(("http://", "https://")):
        problems.append(f"BACKEND_URL is not an http(s) URL: {settings.backend_url}")
    if not settings.github_api_url.startswith(("http://", "https://")):
        problems.append(f"GITHUB_API_URL is not an http(s) URL: {settings.github_api_url}")
    if settings.rate_limit_max < 1:
        problems.append("RATE_LIMIT_MAX must be at least 1")
    if settings.rate_limit_window_seconds < 1:
        problems.append("RATE_LIMIT_WINDOW_SECONDS must be at least 1")

    if problems:
        raise ConfigurationException("Invalid configuration", details={"problems": problems})


@lru_cache
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
