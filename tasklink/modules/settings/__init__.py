"""
Settings Module - Black Box Interface

Purpose: Validate remote setting changes and apply them to the agent config
Interface: apply_setting(), parse_period(), parse_server(), parse_timeout(), parse_silent()
Hidden: Value grammars, conversion to config models

A setting is applied completely or not at all.
"""

from .applier import (
    SETTING_KEYS,
    SettingValidationError,
    apply_setting,
    parse_period,
    parse_server,
    parse_silent,
    parse_timeout,
)

__all__ = [
    "SETTING_KEYS",
    "SettingValidationError",
    "apply_setting",
    "parse_period",
    "parse_server",
    "parse_silent",
    "parse_timeout",
]
