"""Command-line tools for secret store configurations."""

from connection_secrets.tools.cli import describe_handle, main

__all__ = ["describe_handle", "main"]
