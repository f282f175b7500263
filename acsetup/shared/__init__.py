"""Helpers shared between the backend and the CLI frontend."""
