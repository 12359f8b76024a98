#!/usr/bin/env python3
"""
Pipeline executor for the tasklink agent.

Runs the stages produced by the builder as real processes connected
stdout-to-stdin, the way a shell runs ``a | b | c``:

- every stage but the last is started with its stdout on a new pipe;
- the read end of that pipe is handed to the next stage as stdin and the
  agent closes its own copy right after the hand-off, so each pipe has one
  writer and one reader;
- the last stage is waited for (without timeout) and both of its output
  streams are collected.

Execution never raises for a failing command. Whatever happens is turned into
the response text sent back to the control server.
"""

import logging
import subprocess
import time
from typing import IO, List, Optional, Sequence

from .builder import PipelineStage, build_pipeline

logger = logging.getLogger("tasklink-agent.pipeline")

# Errors subprocess raises when a stage cannot be started
SPAWN_ERRORS = (OSError, ValueError)


def format_output(stdout: bytes, stderr: bytes) -> str:
    """Render collected streams as the response body."""
    return "\n{}\n{}\n".format(
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


def _take_stdout(process: subprocess.Popen) -> Optional[IO[bytes]]:
    """Move the stdout pipe out of a process so only the taker may close it."""
    pipe = process.stdout
    process.stdout = None
    return pipe


class PipelineExecutor:
    """Executes pipelines stage by stage."""

    def execute(self, stages: Sequence[PipelineStage]) -> str:
        """
        Execute a pipeline.

        Args:
            stages: Stages in pipeline order; an empty sequence is treated as
                a single stage with an empty program

        Returns:
            ``"\\n{stdout}\\n{stderr}\\n"`` of the last stage, or the error
            message of the last stage followed by a newline
        """
        if not stages:
            stages = (PipelineStage(program=""),)

        *upstream, final = stages
        started: List[subprocess.Popen] = []
        pending: Optional[IO[bytes]] = None

        start_time = time.time()
        try:
            for index, stage in enumerate(upstream):
                process = self._spawn_upstream(index, stage, pending)
                pending = None
                if process is not None:
                    started.append(process)
                    pending = _take_stdout(process)

            output = self._run_final(final, pending)
            pending = None
        finally:
            if pending is not None:
                pending.close()
            self._reap(started)

        logger.debug(
            f"Pipeline of {len(stages)} stage(s) finished in "
            f"{int((time.time() - start_time) * 1000)} ms"
        )
        return output

    def _spawn_upstream(
        self, index: int, stage: PipelineStage, stdin: Optional[IO[bytes]]
    ) -> Optional[subprocess.Popen]:
        """
        Start a non-final stage with its stdout on a pipe.

        The stdin pipe is always consumed. If the stage cannot be started the
        next stage reads from an empty input instead of aborting the pipeline.
        """
        try:
            return subprocess.Popen(
                stage.argv,
                stdin=stdin if stdin is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
            )
        except SPAWN_ERRORS as e:
            logger.warning(f"Failed to start stage {index} '{stage}': {e}; next stage gets empty input")
            return None
        finally:
            if stdin is not None:
                stdin.close()

    def _run_final(self, stage: PipelineStage, stdin: Optional[IO[bytes]]) -> str:
        """Run the last stage to completion and render its output."""
        try:
            try:
                process = subprocess.Popen(
                    stage.argv,
                    stdin=stdin if stdin is not None else subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            finally:
                if stdin is not None:
                    stdin.close()

            # No timeout: a stage that never exits blocks the agent
            stdout, stderr = process.communicate()
        except SPAWN_ERRORS as e:
            logger.error(f"Failed to run '{stage}': {e}")
            return f"{e}\n"

        logger.debug(f"'{stage}' exited with code {process.returncode}")
        return format_output(stdout, stderr)

    @staticmethod
    def _reap(processes: List[subprocess.Popen]) -> None:
        """Collect exit status of finished upstream stages without blocking."""
        for process in processes:
            if process.poll() is None:
                logger.debug(f"Upstream process {process.pid} still running, not waiting for it")


def execute_command(text: str, executor: Optional[PipelineExecutor] = None) -> str:
    """Build and execute a command line."""
    if executor is None:
        executor = PipelineExecutor()
    logger.info(f"Executing command: {text!r}")
    return executor.execute(build_pipeline(text))
