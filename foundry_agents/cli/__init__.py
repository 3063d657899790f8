"""Command-line interface for the Foundry Agents client."""
