#!/usr/bin/env python3
"""
Instruction parsing for the tasklink agent.

One connection carries one instruction line:

    cmd <pipeline text>
    set <key> <value...>

Anything that does not fit either shape becomes an empty command, so a
malformed instruction still gets a (error) response instead of crashing the
agent.
"""

import logging
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger("tasklink-agent.instruction")

# Size of the single read performed per connection
RECEIVE_BUFFER_SIZE = 1024


@dataclass(frozen=True)
class CommandInstruction:
    """Run a pipeline of processes."""

    text: str


@dataclass(frozen=True)
class SettingInstruction:
    """Change one runtime setting."""

    key: str
    value: str


Instruction = Union[CommandInstruction, SettingInstruction]


def decode_payload(data: bytes) -> str:
    """Decode a receive buffer as lossy UTF-8 and strip NUL padding."""
    return data.decode("utf-8", errors="replace").strip("\x00")


def parse_instruction(raw: str) -> Instruction:
    """
    Parse instruction text.

    Args:
        raw: Decoded instruction text

    Returns:
        CommandInstruction or SettingInstruction. Unknown modes, empty input
        and a ``set`` without a key all yield ``CommandInstruction("")``.
    """
    tokens = raw.split()

    if not tokens:
        logger.debug("Empty instruction, falling back to empty command")
        return CommandInstruction("")

    mode = tokens[0]
    if mode == "cmd":
        return CommandInstruction(" ".join(tokens[1:]))

    if mode == "set" and len(tokens) >= 2:
        return SettingInstruction(key=tokens[1], value=" ".join(tokens[2:]))

    logger.warning(f"Malformed instruction starting with '{mode}', falling back to empty command")
    return CommandInstruction("")
