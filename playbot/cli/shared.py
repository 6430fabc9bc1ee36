"""Shared utilities for Playbot CLI commands."""

from rich.console import Console

console = Console()
