"""Configuration management for Image Weaver.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the WEAVER_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (WEAVER_* prefix)
2. .env file in the project root
3. Default values defined in WeaverConfig

Example .env file:
    WEAVER_DEFAULT_PROVIDER=gemini
    WEAVER_GEMINI_MODEL=gemini-2.0-flash
    WEAVER_MAX_UPLOAD_BYTES=10485760
    WEAVER_SERVER_PORT=7860

Provider credentials are read from ``WEAVER_GEMINI_API_KEY`` and, for
compatibility with the Google SDK conventions, from ``GEMINI_API_KEY`` or
``GOOGLE_API_KEY`` as well.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from image_weaver.core.config import config

    print(config.default_provider)
    print(config.gemini_model)
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Bounds and default for the number of variations a single request may ask for.
# The default is fixed; it is not a setting.
MIN_VARIATIONS = 1
MAX_VARIATIONS = 5
DEFAULT_VARIATIONS = 3


class WeaverConfig(BaseSettings):
    """Main configuration for Image Weaver.

    Values are loaded from environment variables with the WEAVER_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Provider Settings:
        default_provider : str
            Name of the registered model provider used by the prompt flow
        gemini_api_key : str | None
            API key for the Gemini provider
        gemini_model : str
            Gemini model used for the variation prompt

    Flow Settings:
        max_upload_bytes : int
            Largest image file accepted by the intake filter

    Server Settings:
        server_host : str
            Bind address for the FastAPI server
        server_port : int
            Port for the FastAPI server (1024-65535)
        gradio_server_name : str
            Bind address for the standalone Gradio UI
        gradio_server_port : int
            Port for the standalone Gradio UI (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)
        log_level : str
            Root logging level applied by the entry points

    Examples
    --------
    Create a custom configuration:

        >>> custom_config = WeaverConfig(
        ...     gemini_model="gemini-1.5-pro",
        ...     max_upload_bytes=2 * 1024 * 1024,
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WEAVER_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Provider settings
    default_provider: str = Field(
        default="gemini",
        description="Registered model provider used by the prompt flow",
    )
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "WEAVER_GEMINI_API_KEY",
            "GEMINI_API_KEY",
            "GOOGLE_API_KEY",
        ),
        description="API key for the Gemini provider",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model used for the variation prompt",
    )

    # Flow settings
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Largest image file accepted by the intake filter",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Bind address for the FastAPI server",
    )
    server_port: int = Field(default=7860, ge=1024, le=65535)

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(default=7861, ge=1024, le=65535)
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


# Global configuration instance, loaded from WEAVER_* variables and .env.
config = WeaverConfig()
