"""
Sender configuration.
"""

from typing import Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nsca.common.constants import (
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    DEFAULT_SOCKET_TIMEOUT_MS,
    DEFAULT_CORE_WORKERS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_QUEUE_CAPACITY,
    DEFAULT_KEEP_ALIVE,
    DEFAULT_REDELIVERY_INTERVAL,
)
from nsca.common.proto import ObfuscationMethod, Severity
from nsca.exceptions import InvalidConfigurationError


class Settings(BaseSettings):
    """Sender settings."""

    model_config = SettingsConfigDict(
        env_prefix="NSCA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # NSCA daemon
    host: str = "localhost"
    port: int = DEFAULT_PORT
    service_name: str = DEFAULT_SERVICE_NAME
    obfuscation_method: ObfuscationMethod = ObfuscationMethod.NONE
    shared_secret: str = ""
    socket_timeout_ms: int = DEFAULT_SOCKET_TIMEOUT_MS

    # Worker pool
    core_workers: int = DEFAULT_CORE_WORKERS
    max_workers: int = DEFAULT_MAX_WORKERS
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    keep_alive_seconds: float = DEFAULT_KEEP_ALIVE

    # Redelivery (0 = fire-and-forget)
    retry_buffer_size: int = 0
    redelivery_interval_seconds: float = DEFAULT_REDELIVERY_INTERVAL
    buffer_failed_sends: bool = False

    # Startup message
    startup_message: str = ""
    startup_message_level: Severity = Severity.OK

    # Logging
    logging_level: str = "INFO"
    logging_on_file: bool = False
    logs_dir: str = "logs"

    @field_validator("obfuscation_method", mode="before")
    @classmethod
    def _parse_obfuscation(cls, value):
        return ObfuscationMethod.parse(value)

    @field_validator("startup_message_level", mode="before")
    @classmethod
    def _parse_level(cls, value):
        return Severity.parse(value)


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """
    Load settings from the environment and an optional .env file.

    Raises:
        InvalidConfigurationError: If any value is invalid
    """
    kwargs = dict(overrides)
    if env_file is not None:
        kwargs["_env_file"] = env_file

    try:
        return Settings(**kwargs)
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid settings: {e}") from e
