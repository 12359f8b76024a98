#!/usr/bin/env python3
"""
Setting applier for the tasklink agent.

Grammar of the value part of ``set <key> <value...>``:

    period   <uint> <unit>      unit one of ms, s, m, h, d (unknown -> s)
    server   <address> <port>   port 0-65535
    timeout  <uint>             milliseconds
    silent   true | false
"""

import logging
import re
from typing import Any, Callable, Dict, Tuple

from pydantic import ValidationError

from tasklink.modules.config import AgentConfig, Period, ServerInfo, TimeUnit

logger = logging.getLogger("tasklink-agent.settings")

_UINT_RE = re.compile(r"[0-9]+")


class SettingValidationError(ValueError):
    """Raised when a setting value does not match its grammar."""


def _parse_uint(token: str, what: str) -> int:
    if not _UINT_RE.fullmatch(token):
        raise SettingValidationError(f"Invalid {what} value: {token!r}")
    return int(token)


def parse_period(value: str) -> Period:
    """Parse ``"<uint> <unit>"``; extra tokens are ignored."""
    parts = value.split()
    if not parts:
        raise SettingValidationError("Invalid period value: missing")

    amount = _parse_uint(parts[0], "period")

    if len(parts) < 2:
        raise SettingValidationError("Invalid period unit: missing")

    try:
        return Period(value=amount, unit=TimeUnit.from_token(parts[1]))
    except ValidationError as e:
        raise SettingValidationError(f"Invalid period: {e.errors()[0]['msg']}") from e


def parse_server(value: str) -> ServerInfo:
    """Parse ``"<address> <port>"``."""
    parts = value.split()
    if not parts:
        raise SettingValidationError("Invalid server address: missing")
    if len(parts) < 2:
        raise SettingValidationError("Invalid server port: missing")

    port = _parse_uint(parts[1], "port")

    try:
        return ServerInfo(address=parts[0], port=port)
    except ValidationError as e:
        if e.errors()[0]["loc"][0] == "address":
            raise SettingValidationError(f"Invalid server address: {parts[0]!r}") from e
        raise SettingValidationError(f"Invalid port value: {parts[1]!r}") from e


def parse_timeout(value: str) -> int:
    """Parse a timeout in milliseconds."""
    return _parse_uint(value, "timeout")


def parse_silent(value: str) -> bool:
    """Accept exactly ``true`` or ``false``."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise SettingValidationError(f"Invalid silent mode value: {value!r}")


# key -> (value parser, AgentConfig attribute)
_SETTINGS: Dict[str, Tuple[Callable[[str], Any], str]] = {
    "period": (parse_period, "period"),
    "server": (parse_server, "server"),
    "timeout": (parse_timeout, "timeout_ms"),
    "silent": (parse_silent, "silent"),
}

SETTING_KEYS = tuple(_SETTINGS)


def apply_setting(key: str, value: str, config: AgentConfig) -> str:
    """
    Apply one setting to the config.

    Args:
        key: Setting name
        value: Raw value text
        config: Config to mutate

    Returns:
        Confirmation text ``"Setting {key} to {value}"``

    Raises:
        SettingValidationError: If the key is unknown or the value is
            malformed; the config is left unchanged
    """
    if key not in _SETTINGS:
        raise SettingValidationError(
            f"Unknown setting '{key}' (expected one of: {', '.join(SETTING_KEYS)})"
        )

    parser, attribute = _SETTINGS[key]
    parsed = parser(value)

    try:
        setattr(config, attribute, parsed)
    except ValidationError as e:
        raise SettingValidationError(f"Invalid {key} value: {e.errors()[0]['msg']}") from e

    logger.info(f"Setting {key} changed to {parsed}")
    return f"Setting {key} to {value}"
