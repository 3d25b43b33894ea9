"""CLI command groups registered on the top-level `cli` in agent.py."""
