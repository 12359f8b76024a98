"""Split a command line into pipeline stages."""

from dataclasses import dataclass, field
from typing import List, Tuple

PIPE_DELIMITER = "|"


@dataclass(frozen=True)
class PipelineStage:
    """One process of a pipeline."""

    program: str
    args: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)


def parse_stage(segment: str) -> PipelineStage:
    """Parse one pipe segment; a blank segment gives an empty program."""
    parts = segment.split()
    if not parts:
        return PipelineStage(program="")
    return PipelineStage(program=parts[0], args=tuple(parts[1:]))


def build_pipeline(raw: str) -> Tuple[PipelineStage, ...]:
    """
    Build the stages of a command line.

    Always returns at least one stage. A blank final segment, as left by a
    command ending in "|", is dropped; blank segments elsewhere become stages
    with an empty program.

    Examples:
        >>> build_pipeline("ls -l | grep test")
        (PipelineStage(program='ls', args=('-l',)), PipelineStage(program='grep', args=('test',)))
        >>> build_pipeline("")
        (PipelineStage(program='', args=()),)
    """
    segments = raw.strip().split(PIPE_DELIMITER)

    if len(segments) > 1 and not segments[-1].strip():
        segments.pop()

    return tuple(parse_stage(segment) for segment in segments)
