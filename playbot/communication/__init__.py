"""Communication sub-core — channel-agnostic error reporting."""

from .errors import classify_error

__all__ = ["classify_error"]
