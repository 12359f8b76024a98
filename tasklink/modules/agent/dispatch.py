"""Route an instruction to the pipeline executor or the setting applier."""

import logging
from typing import Optional

from tasklink.modules.config import AgentConfig
from tasklink.modules.instruction import CommandInstruction, Instruction, SettingInstruction
from tasklink.modules.pipeline import PipelineExecutor, execute_command
from tasklink.modules.settings import SettingValidationError, apply_setting

logger = logging.getLogger("tasklink-agent.dispatch")


def dispatch(
    instruction: Instruction,
    config: AgentConfig,
    executor: Optional[PipelineExecutor] = None,
) -> str:
    """
    Execute an instruction and return the response text.

    Args:
        instruction: Parsed instruction
        config: Agent config, mutated by setting instructions
        executor: Pipeline executor to use for commands

    Returns:
        Response body to write back on the connection
    """
    if isinstance(instruction, CommandInstruction):
        return execute_command(instruction.text, executor)

    if isinstance(instruction, SettingInstruction):
        try:
            confirmation = apply_setting(instruction.key, instruction.value, config)
        except SettingValidationError as e:
            logger.warning(f"Rejected setting {instruction.key}={instruction.value!r}: {e}")
            return f"failed to apply setting {instruction.key} to {instruction.value}: {e}\n"
        return f"{confirmation}\n"

    raise TypeError(f"Unsupported instruction type: {type(instruction).__name__}")
