"""
NSCA Channel Module
Immutable destination and policy shared by many sends.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..common.constants import DEFAULT_PORT, DEFAULT_SERVICE_NAME, DEFAULT_SOCKET_TIMEOUT_MS
from ..common.proto import ObfuscationMethod
from ..common.utils import resolve_reporting_host, substitute_names
from ..exceptions import InvalidConfigurationError


class Channel(BaseModel):
    """
    NSCA channel.

    Bundles the daemon address, the service name alerts are reported for,
    and the obfuscation settings. Instances are frozen and can be shared
    between threads.

    Example usage:
        channel = Channel(host="nagios.local", service_name="billing")
        client = Client(channel)
        client.send(Severity.WARNING, "Queue is backing up")

    Raises:
        InvalidConfigurationError: On empty host/service name, bad port or timeout
        UnsupportedObfuscationMethodError: On an unknown obfuscation method
    """

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    service_name: str = DEFAULT_SERVICE_NAME
    obfuscation_method: ObfuscationMethod = ObfuscationMethod.NONE
    shared_secret: str = ""
    reporting_host: Optional[str] = Field(default_factory=resolve_reporting_host)
    socket_timeout_ms: int = Field(default=DEFAULT_SOCKET_TIMEOUT_MS, gt=0)

    def __init__(self, **data: Any):
        if data.get("obfuscation_method") is not None:
            data["obfuscation_method"] = ObfuscationMethod.parse(data["obfuscation_method"])

        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid channel configuration: {e}") from e

    @field_validator("host", "service_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def timeout(self) -> float:
        """Socket timeout in seconds."""
        return self.socket_timeout_ms / 1000.0

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_settings(cls, settings, owner: Optional[type] = None) -> 'Channel':
        """
        Build a channel from application settings.

        %packageName% and %className% in host and service name are
        replaced with the owner's names.
        """
        return cls(
            host=substitute_names(settings.host, owner),
            port=settings.port,
            service_name=substitute_names(settings.service_name, owner),
            obfuscation_method=settings.obfuscation_method,
            shared_secret=settings.shared_secret,
            socket_timeout_ms=settings.socket_timeout_ms,
        )

    def __repr__(self) -> str:
        return (
            f"Channel({self.address}, service={self.service_name!r}, "
            f"obfuscation={self.obfuscation_method.name})"
        )
