#!/usr/bin/env python3
"""
tasklink polling agent.

Every cycle the agent sleeps for the configured period, connects to the
control server, reads a single instruction, executes it and writes the
response back before closing the connection. Connection failures are logged
and retried on the next cycle, forever.

Period, server address and timeout are read from the config at the start of
every cycle, so a ``set`` instruction takes effect on the next cycle.
"""

import logging
import socket
import time
from typing import Callable, Optional

from tasklink.logging_config import apply_silent_mode
from tasklink.modules.config import AgentConfig
from tasklink.modules.instruction import RECEIVE_BUFFER_SIZE, decode_payload, parse_instruction
from tasklink.modules.pipeline import PipelineExecutor

from .dispatch import dispatch

logger = logging.getLogger("tasklink-agent.agent")


class PollingAgent:
    """Agent that polls the control server for instructions."""

    def __init__(
        self,
        config: AgentConfig,
        executor: Optional[PipelineExecutor] = None,
        log_level: str = "INFO",
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the agent.

        Args:
            config: Runtime config; owned by this agent from now on
            executor: Pipeline executor for command instructions
            log_level: Log level restored when silent mode is switched off
            sleep: Sleep function, replaceable in tests
        """
        self.config = config
        self.executor = executor if executor is not None else PipelineExecutor()
        self.log_level = log_level
        self._sleep = sleep

    def run(self, max_cycles: Optional[int] = None) -> None:
        """
        Main agent loop.

        Args:
            max_cycles: Stop after this many cycles; run forever if None
        """
        apply_silent_mode(self.config.silent, self.log_level)
        logger.info(f"Starting agent, polling {self.config.server} every {self.config.period}")

        cycles = 0
        try:
            while max_cycles is None or cycles < max_cycles:
                self._sleep(self.config.period.seconds)
                try:
                    self.poll_once()
                except Exception as e:
                    logger.exception(f"Error in agent cycle: {e}")
                cycles += 1
        except KeyboardInterrupt:
            logger.info("Agent stopped by user")

    def poll_once(self) -> bool:
        """
        Run one connect/handle cycle.

        Returns:
            True if a connection was established
        """
        server = self.config.server
        logger.info(f"Connecting to server at {server}")

        try:
            sock = socket.create_connection(server.full_address, timeout=self.config.timeout)
        except (OSError, UnicodeError) as e:
            logger.info(f"Failed to connect to server at {server}: {e}")
            return False

        with sock:
            # The timeout applies to the connect only; the exchange blocks
            sock.settimeout(None)
            logger.info(f"Connected to server at {server}")
            self.handle_connection(sock)
        return True

    def handle_connection(self, sock: socket.socket) -> Optional[str]:
        """
        Read one instruction from a connected socket and answer it.

        Args:
            sock: Connected socket

        Returns:
            The response text, or None if no instruction could be read
        """
        try:
            data = sock.recv(RECEIVE_BUFFER_SIZE)
        except OSError as e:
            logger.error(f"Failed to read instruction: {e}")
            return None

        raw = decode_payload(data)
        logger.info(f"Received instruction: {raw}")

        try:
            response = dispatch(parse_instruction(raw), self.config, self.executor)
        except Exception as e:
            logger.exception(f"Error processing instruction: {e}")
            response = f"{e}\n"

        apply_silent_mode(self.config.silent, self.log_level)

        try:
            sock.sendall(response.encode("utf-8", errors="replace"))
        except OSError as e:
            # The response for this exchange is lost; the next cycle reconnects
            logger.error(f"Failed to send response: {e}")

        return response
