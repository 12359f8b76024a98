"""
Runtime configuration models for the tasklink agent.

The agent keeps exactly one AgentConfig for its whole lifetime. Remote
``set`` instructions replace individual fields of it; everything else only
reads it.
"""

from datetime import timedelta
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_SERVER_ADDRESS = "127.0.0.1"
DEFAULT_SERVER_PORT = 6247
DEFAULT_TIMEOUT_MS = 1000
DEFAULT_SILENT = False

# Upper bounds keep values usable by time.sleep() and socket timeouts
MAX_PERIOD = timedelta(days=100_000)
MAX_TIMEOUT_MS = 2**31 - 1


class TimeUnit(str, Enum):
    """Units accepted for the poll period."""

    MILLISECONDS = "ms"
    SECONDS = "s"
    MINUTES = "m"
    HOURS = "h"
    DAYS = "d"

    @classmethod
    def from_token(cls, token: str) -> "TimeUnit":
        """Resolve a unit token, falling back to seconds for unknown units."""
        try:
            return cls(token)
        except ValueError:
            return cls.SECONDS


_UNIT_KWARGS = {
    TimeUnit.MILLISECONDS: "milliseconds",
    TimeUnit.SECONDS: "seconds",
    TimeUnit.MINUTES: "minutes",
    TimeUnit.HOURS: "hours",
    TimeUnit.DAYS: "days",
}


class Period(BaseModel):
    """Delay between two connection attempts."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., ge=0, description="Number of units")
    unit: TimeUnit = Field(default=TimeUnit.SECONDS, description="Time unit")

    @model_validator(mode="after")
    def check_bounds(self) -> "Period":
        """Reject periods longer than MAX_PERIOD."""
        try:
            duration = self.to_timedelta()
        except OverflowError:
            duration = None
        if duration is None or duration > MAX_PERIOD:
            raise ValueError(f"Period {self} is too large")
        return self

    def to_timedelta(self) -> timedelta:
        return timedelta(**{_UNIT_KWARGS[self.unit]: self.value})

    @property
    def seconds(self) -> float:
        return self.to_timedelta().total_seconds()

    def __str__(self) -> str:
        return f"{self.value} {self.unit.value}"


class ServerInfo(BaseModel):
    """Address of the control server the agent polls."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1, description="Host name or IP address")
    port: int = Field(..., ge=0, le=65535, description="TCP port")

    @field_validator("address")
    @classmethod
    def check_resolvable_name(cls, v: str) -> str:
        """Reject names socket.create_connection() cannot encode (IDNA)."""
        try:
            v.encode("idna")
        except UnicodeError as e:
            raise ValueError(f"invalid host name {v!r}: {e}") from e
        return v

    @property
    def full_address(self) -> Tuple[str, int]:
        """Address tuple suitable for socket.create_connection()."""
        return (self.address, self.port)

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


class AgentConfig(BaseModel):
    """Mutable agent configuration."""

    model_config = ConfigDict(validate_assignment=True)

    server: ServerInfo
    timeout_ms: int = Field(
        ..., ge=0, le=MAX_TIMEOUT_MS, description="Connect timeout in milliseconds (connect only)"
    )
    period: Period
    silent: bool = Field(default=DEFAULT_SILENT, description="Suppress informational logs")

    @property
    def address(self) -> str:
        return self.server.address

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def timeout(self) -> float:
        """Connect timeout in seconds."""
        return self.timeout_ms / 1000


def default_config() -> AgentConfig:
    """Build a config holding the built-in defaults."""
    return AgentConfig(
        server=ServerInfo(address=DEFAULT_SERVER_ADDRESS, port=DEFAULT_SERVER_PORT),
        timeout_ms=DEFAULT_TIMEOUT_MS,
        period=Period(value=1, unit=TimeUnit.SECONDS),
        silent=DEFAULT_SILENT,
    )
