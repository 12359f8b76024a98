#!/usr/bin/env python3
"""
tasklink - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration (defaults, config file, environment, command line)
2. Configures logging
3. Runs the polling agent

All business logic is in the modules, following black box principles.
"""

import logging
from typing import Optional

import click
from dotenv import load_dotenv

from tasklink.config.provider import LOG_LEVELS, ConfigProvider, EnvConfigProvider
from tasklink.logging_config import configure_logging
from tasklink.modules.agent import PollingAgent
from tasklink.modules.config import AgentConfig
from tasklink.modules.settings import SettingValidationError, apply_setting

logger = logging.getLogger("tasklink-agent.main")


def build_config(
    provider: ConfigProvider,
    server: Optional[str] = None,
    port: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    period: Optional[str] = None,
    silent: Optional[bool] = None,
) -> AgentConfig:
    """
    Build the startup config from a provider plus command line overrides.

    Raises:
        ValueError: If any source holds an invalid value
    """
    config = provider.get_agent_config()

    overrides = []
    if server is not None or port is not None:
        overrides.append(
            ("server", f"{server or config.address} {config.port if port is None else port}")
        )
    if timeout_ms is not None:
        overrides.append(("timeout", str(timeout_ms)))
    if period is not None:
        overrides.append(("period", period))
    if silent is not None:
        overrides.append(("silent", "true" if silent else "false"))

    for key, value in overrides:
        try:
            apply_setting(key, value, config)
        except SettingValidationError as e:
            raise ValueError(f"Invalid --{key} option: {e}") from e

    return config


@click.command()
@click.option("--config", "config_path", default=None, help="YAML configuration file")
@click.option("--server", default=None, help="Control server address")
@click.option("--port", type=int, default=None, help="Control server port")
@click.option("--timeout-ms", type=int, default=None, help="Connect timeout in milliseconds")
@click.option("--period", default=None, help='Poll period, e.g. "5 s" or "1 m"')
@click.option("--silent/--verbose", default=None, help="Suppress informational logs")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: LOG_LEVEL or INFO)",
)
def main(
    config_path: Optional[str],
    server: Optional[str],
    port: Optional[int],
    timeout_ms: Optional[int],
    period: Optional[str],
    silent: Optional[bool],
    log_level: Optional[str],
):
    """Poll a control server and execute the instructions it sends."""
    load_dotenv()

    provider = EnvConfigProvider(config_path=config_path)
    try:
        level = (log_level or provider.get_log_level()).upper()
        config = build_config(provider, server, port, timeout_ms, period, silent)
    except ValueError as e:
        raise click.UsageError(str(e))

    configure_logging(level)
    logger.info(f"tasklink agent starting (server {config.server}, timeout {config.timeout_ms} ms)")

    PollingAgent(config, log_level=level).run()


if __name__ == "__main__":
    main()
