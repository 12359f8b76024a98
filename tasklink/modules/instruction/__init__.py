"""
Instruction Module - Black Box Interface

Purpose: Turn the raw bytes received from the control server into an instruction
Interface: decode_payload(), parse_instruction(), CommandInstruction, SettingInstruction
Hidden: Tokenisation rules, fallback for malformed input
"""

from .parser import (
    RECEIVE_BUFFER_SIZE,
    CommandInstruction,
    Instruction,
    SettingInstruction,
    decode_payload,
    parse_instruction,
)

__all__ = [
    "RECEIVE_BUFFER_SIZE",
    "CommandInstruction",
    "Instruction",
    "SettingInstruction",
    "decode_payload",
    "parse_instruction",
]
