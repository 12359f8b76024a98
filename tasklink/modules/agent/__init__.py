"""
Agent Module - Black Box Interface

Purpose: Poll the control server and answer one instruction per connection
Interface: PollingAgent, dispatch()
Hidden: Socket handling, retry cadence, response encoding

Exactly one instruction is read and one response written per connection.
Instruction failures become response text; they never stop the loop.
"""

from .agent import PollingAgent
from .dispatch import dispatch

__all__ = ["PollingAgent", "dispatch"]
