"""Configuration management for the ghcomments client."""

from typing import cast

from pydantic import AnyHttpUrl, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_prefix="GHCOMMENTS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    github_api_base: AnyHttpUrl = Field(
        default=cast("AnyHttpUrl", "https://api.github.com"),
        description="Base URL for the GitHub REST API.",
    )
    github_token: SecretStr = Field(
        default=SecretStr(""),
        description="Personal access token used to authenticate GitHub API calls.",
    )
    api_version: str = Field(
        default="2022-11-28",
        description="Value sent in the X-GitHub-Api-Version header.",
    )
    user_agent: str = Field(
        default="ghcomments/0.1",
        description="User-Agent header sent with every request.",
    )
    per_page: int = Field(
        default=30,
        ge=1,
        le=100,
        description="Number of items to request per GitHub API page.",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="HTTP timeout in seconds for a single request.",
    )
    max_attempts: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Maximum number of attempts for retryable requests.",
    )

    @model_validator(mode="after")
    def _enforce_required_fields(self) -> "AppSettings":
        if not self.github_token.get_secret_value():
            msg = "GHCOMMENTS_GITHUB_TOKEN must be configured"
            raise ValueError(msg)
        return self


def load_settings() -> AppSettings:
    """Load application settings from supported sources."""
    return AppSettings()
