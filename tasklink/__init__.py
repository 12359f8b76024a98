"""
tasklink - Polling Remote Execution Agent

An agent that periodically connects out to a control server, reads one
instruction, runs it and writes the result back on the same connection.

Architecture:
- Each module is self-contained with clear interfaces
- Configuration is a single object passed explicitly through dispatch
- No module knows the internals of another

Modules:
- config: Mutable runtime configuration (server, timeout, period, silent)
- instruction: Decoding of raw payloads into instructions
- pipeline: Building and executing pipe-connected process stages
- settings: Validation and application of setting instructions
- agent: Instruction dispatch and the connection loop
"""

__version__ = "1.0.0"
