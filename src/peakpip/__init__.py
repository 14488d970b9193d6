"""
peakpip - A thin command-line wrapper around pip.

Package operations are delegated to the pip executable found on PATH;
metadata lookups go straight to the package index JSON API.

Modules:
- cli: Command-line interface entry point.
- operations: Verb dispatch and pip argument construction.
- index_client: Package index JSON API client.
- executor: Subprocess runner for the wrapped pip executable.
- models: Package metadata records.
- config: Configuration management.
"""

from .cli import main

__all__ = ["main"]
