"""
Pipeline Module - Black Box Interface

Purpose: Run a command line of pipe-connected processes and collect its output
Interface: build_pipeline(), parse_stage(), PipelineExecutor, execute_command()
Hidden: Process spawning, pipe hand-off between stages, output formatting

Commands are split on a literal "|" only; there is no quoting, escaping or
shell involved. No stage has an execution timeout.
"""

from .builder import PipelineStage, build_pipeline, parse_stage
from .executor import PipelineExecutor, execute_command, format_output

__all__ = [
    "PipelineStage",
    "PipelineExecutor",
    "build_pipeline",
    "execute_command",
    "format_output",
    "parse_stage",
]
