"""CLI command modules."""

from foundry_agents.cli.commands import agent, context, file, thread

__all__ = ["agent", "context", "file", "thread"]
