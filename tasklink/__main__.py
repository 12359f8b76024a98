"""Allow running the agent with ``python -m tasklink``."""
from tasklink.main import main

main()
