"""
Shared pytest fixtures for tasklink tests.

This module provides common fixtures including:
- OneShotServer: a loopback control server that sends one instruction and
  records the agent's response
- Fresh agent configs pointing at such a server
"""

import os
import socket
import sys
import threading
import time
from typing import List, Optional

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tasklink.modules.config import AgentConfig, Period, ServerInfo, TimeUnit, default_config


# =============================================================================
# Control Server Stub
# =============================================================================

class OneShotServer:
    """
    Minimal control server for a single exchange.

    Accepts one connection, waits ``delay`` seconds, sends the instruction,
    then reads until the agent closes the connection.

    Usage:
        def test_exchange(one_shot_server):
            server = one_shot_server(b"cmd echo hi")
            agent = PollingAgent(config_for(server))
            agent.poll_once()
            assert server.wait() == b"\\nhi\\n\\n\\n"
    """

    def __init__(self, instruction: bytes, delay: float = 0):
        self.instruction = instruction
        self.delay = delay
        self.response: Optional[bytes] = None
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._sock.settimeout(10)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "OneShotServer":
        self._thread.start()
        return self

    def _serve(self) -> None:
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return

        with conn:
            conn.settimeout(10)
            time.sleep(self.delay)
            conn.sendall(self.instruction)
            chunks: List[bytes] = []
            while True:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
            self.response = b"".join(chunks)

    def wait(self, timeout: float = 10) -> Optional[bytes]:
        """Wait for the exchange to finish and return the raw response."""
        self._thread.join(timeout)
        return self.response

    def close(self) -> None:
        self._sock.close()


@pytest.fixture
def one_shot_server():
    """Factory fixture creating started OneShotServer instances."""
    servers: List[OneShotServer] = []

    def _factory(instruction: bytes, delay: float = 0) -> OneShotServer:
        server = OneShotServer(instruction, delay).start()
        servers.append(server)
        return server

    yield _factory

    for server in servers:
        server.close()


def config_for(port: int, address: str = "127.0.0.1") -> AgentConfig:
    """Config pointing at a local port with a generous timeout and no delay."""
    return AgentConfig(
        server=ServerInfo(address=address, port=port),
        timeout_ms=5000,
        period=Period(value=0, unit=TimeUnit.MILLISECONDS),
        silent=False,
    )


@pytest.fixture
def config() -> AgentConfig:
    """Fresh config with built-in defaults."""
    return default_config()


@pytest.fixture
def closed_port() -> int:
    """A local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests using real sockets and processes end to end"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
