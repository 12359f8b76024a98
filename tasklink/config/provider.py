"""Startup configuration provider following Black Box Design principles."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

import yaml

from tasklink.modules.config import AgentConfig, default_config
from tasklink.modules.settings import SettingValidationError, apply_setting, parse_period

logger = logging.getLogger("tasklink-agent.config")

ENV_TIMEOUT = "TASKLINK_TIMEOUT_MS"
ENV_PERIOD = "TASKLINK_PERIOD"
ENV_SILENT = "TASKLINK_SILENT"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_agent_config(self) -> AgentConfig:
        """Get the startup agent configuration."""
        ...

    def get_log_level(self) -> str:
        """Get the configured log level."""
        ...


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML config file.

    Example file:

        server:
          address: 10.0.0.1
          port: 9000
        timeout_ms: 2000
        period: 30 s
        silent: false

    Raises:
        ValueError: If the file is not a YAML mapping
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _merge_file_config(config: AgentConfig, data: Mapping[str, Any]) -> AgentConfig:
    """Overlay file values on a config; period may be a mapping or "N unit"."""
    merged = config.model_dump()
    for key in ("timeout_ms", "silent"):
        if key in data:
            merged[key] = data[key]

    if "server" in data:
        if not isinstance(data["server"], dict):
            raise ValueError("'server' must be a mapping with address and port")
        merged["server"] = {**merged["server"], **data["server"]}

    if "period" in data:
        period = data["period"]
        merged["period"] = parse_period(period) if isinstance(period, str) else period

    return AgentConfig.model_validate(merged)


class EnvConfigProvider:
    """
    Environment-based configuration provider.

    Precedence: built-in defaults, then the YAML file named by
    ``TASKLINK_CONFIG`` (or ``config_path``), then ``TASKLINK_*`` variables.
    Environment values use the same grammar as ``set`` instructions.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.config_path = config_path or self.environ.get("TASKLINK_CONFIG")

    def get_agent_config(self) -> AgentConfig:
        """
        Build the startup config.

        Raises:
            ValueError: If the file or an environment variable is invalid
        """
        config = default_config()

        if self.config_path:
            path = Path(self.config_path)
            if path.exists():
                try:
                    config = _merge_file_config(config, load_config_file(path))
                except (ValueError, yaml.YAMLError) as e:
                    raise ValueError(f"Invalid config file {path}: {e}") from e
                logger.info(f"Loaded configuration from {path}")
            else:
                logger.warning(f"Config file not found: {path}, using defaults")

        try:
            self._apply_env(config)
        except SettingValidationError as e:
            raise ValueError(f"Invalid environment configuration: {e}") from e

        return config

    def _apply_env(self, config: AgentConfig) -> None:
        env = self.environ

        address = env.get("TASKLINK_SERVER_ADDRESS")
        port = env.get("TASKLINK_SERVER_PORT")
        if address or port:
            apply_setting("server", f"{address or config.address} {port or config.port}", config)

        for name, key in ((ENV_TIMEOUT, "timeout"), (ENV_PERIOD, "period")):
            if env.get(name):
                apply_setting(key, env[name].strip(), config)

        if env.get(ENV_SILENT):
            apply_setting("silent", env[ENV_SILENT].strip().lower(), config)

    def get_log_level(self) -> str:
        """Get log level from the LOG_LEVEL environment variable."""
        level = self.environ.get("LOG_LEVEL", "INFO").upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid LOG_LEVEL: {level} (expected one of: {', '.join(LOG_LEVELS)})")
        return level
