"""
Foundry Agents - command-driven client for Azure AI agents and assistants.

Manages agent/assistant lifecycle, conversation threads, messages, runs and
file uploads against both the unified Foundry project surface and the legacy
agent/assistant surfaces:
- Tool configuration reconciliation (code interpreter, search, functions, MCP)
- Endpoint and API version resolution per backend generation
"""

__version__ = "1.0.0"
__author__ = "Microsoft"
