"""
Config Module - Black Box Interface

Purpose: Mutable runtime configuration of the agent
Interface: AgentConfig, ServerInfo, Period, TimeUnit, default_config()
Hidden: Field validation, unit conversion

The connection loop owns the single AgentConfig and passes it into dispatch;
this module holds no instance of its own.
"""

from .store import (
    DEFAULT_SERVER_ADDRESS,
    DEFAULT_SERVER_PORT,
    DEFAULT_SILENT,
    DEFAULT_TIMEOUT_MS,
    AgentConfig,
    Period,
    ServerInfo,
    TimeUnit,
    default_config,
)

__all__ = [
    "AgentConfig",
    "Period",
    "ServerInfo",
    "TimeUnit",
    "default_config",
    "DEFAULT_SERVER_ADDRESS",
    "DEFAULT_SERVER_PORT",
    "DEFAULT_SILENT",
    "DEFAULT_TIMEOUT_MS",
]
