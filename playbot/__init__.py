"""Playbot — run Rust snippets on the Rust Playground from Telegram."""

__version__ = "0.3.0"
