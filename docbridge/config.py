"""
Application configuration management.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Settings loaded from environment variables, read once at startup."""

    model_config = SettingsConfigDict(
        env_prefix="DOCBRIDGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Plugin
    enable: bool = True

    # Downstream compiler; None runs esbuild through npx
    transpile_command: Optional[List[str]] = None

    # Application
    log_level: str = "INFO"
