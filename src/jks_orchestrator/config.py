"""
Service configuration and environment variables.

This module unifies service configuration using pydantic-settings.
Variables can come from:
1. .env file
2. System environment variables (have priority)
3. Default values

The per-job orchestrator settings (sudo, pre-run script, upload paths...)
live in a separate JSON file, see ``jks_orchestrator.models.config``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Unified service configuration.

    Example:
        # In .env or as environment variable:
        LOG_LEVEL=DEBUG
        ORCHESTRATOR_CONFIG_FILE=/etc/jks-orchestrator/config.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================================================
    # PROJECT SETTINGS
    # ============================================================================
    project_name: str = Field(default="JKS Orchestrator", description="Project name")
    project_description: str = Field(
        default="Remote Java keystore discovery, inventory and management",
        description="Project description",
    )

    # ============================================================================
    # SERVER SETTINGS
    # ============================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    enable_docs: bool = Field(
        default=False, description="Enable API documentation (Swagger/ReDoc)"
    )

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | trace_id={extra[trace_id]} | {name}:{function}:{line} - {message}",  # noqa: E501
        description="Log format",
    )
    logger_enqueue: bool = Field(
        default=False, description="Enqueue logs using multiprocessing"
    )

    # ============================================================================
    # ORCHESTRATOR SETTINGS
    # ============================================================================
    orchestrator_config_file: str = Field(
        default="config.json",
        description="Path of the JSON file holding the keystore job settings",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get service settings (LRU cached).

    This function is cached, so the .env file is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Service configuration instance.
    """
    return Settings()


settings = get_settings()
