"""Autoloader configuration using Pydantic settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AutoLoadSettings(BaseSettings):
    """Autoloader settings loaded from ``AUTOLOAD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Log the per-category summary once all loads have finished
    print_summary: bool = True

    # Source tree: <plugin file>/<source_dir>/<root package>/...
    source_dir: str = "src"
    file_extension: str = ".py"

    # Fallback prefix commands are registered under in the command map
    command_prefix: str = "auto-load"

    @field_validator("file_extension")
    @classmethod
    def _leading_dot(cls, value: str) -> str:
        return value if value.startswith(".") else f".{value}"


settings = AutoLoadSettings()
