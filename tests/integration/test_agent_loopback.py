"""
End-to-end tests: a real agent talking to a loopback control server and
running real processes.

Usage:
    pytest tests/integration/test_agent_loopback.py -v
"""

import os
import sys
from pathlib import Path

import pytest

# Add tasklink root to path for imports
TASKLINK_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(TASKLINK_ROOT))

from conftest import config_for

from tasklink.modules.agent import PollingAgent

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(os.name != "posix", reason="requires POSIX utilities"),
]


class TestLoopbackExchange:
    """One instruction per connection over a real TCP socket."""

    def test_command(self, one_shot_server):
        server = one_shot_server(b"cmd echo hi")
        agent = PollingAgent(config_for(server.port))

        assert agent.poll_once() is True
        assert server.wait() == b"\nhi\n\n\n"

    def test_pipeline(self, one_shot_server):
        server = one_shot_server(b"cmd echo tasklink | tr a-z A-Z |")
        agent = PollingAgent(config_for(server.port))

        agent.poll_once()

        assert server.wait() == b"\nTASKLINK\n\n\n"

    def test_setting(self, one_shot_server):
        server = one_shot_server(b"set timeout 250")
        agent = PollingAgent(config_for(server.port))

        agent.poll_once()

        assert server.wait() == b"Setting timeout to 250\n"
        assert agent.config.timeout_ms == 250

    def test_server_change_redirects_next_cycle(self, one_shot_server):
        """Test that 'set server' makes the next cycle connect elsewhere."""
        second = one_shot_server(b"cmd echo moved")
        first = one_shot_server(f"set server 127.0.0.1 {second.port}".encode())
        agent = PollingAgent(config_for(first.port))

        agent.run(max_cycles=2)

        assert first.wait() == f"Setting server to 127.0.0.1 {second.port}\n".encode()
        assert second.wait() == b"\nmoved\n\n\n"

    def test_garbage_instruction(self, one_shot_server):
        """Test that an unparseable instruction still gets an error response."""
        server = one_shot_server(b"\xff\xfe hello")
        agent = PollingAgent(config_for(server.port))

        agent.poll_once()

        assert server.wait().startswith(b"[Errno")

    def test_late_instruction_still_answered(self, one_shot_server):
        """Test that the connect timeout does not limit the exchange."""
        server = one_shot_server(b"cmd echo hi", delay=0.5)
        config = config_for(server.port)
        config.timeout_ms = 100
        agent = PollingAgent(config)

        agent.poll_once()

        assert server.wait() == b"\nhi\n\n\n"
