"""Playground error hierarchy.

Every failure a command can hit maps to one of these, so the channel layer
can turn it into a user-facing message instead of crashing.
"""


class PlaygroundError(Exception):
    """Base class for all playground command errors."""
    pass


class ParseError(PlaygroundError):
    """User-supplied flag, count or code block could not be parsed."""
    pass


class ServiceError(PlaygroundError):
    """Playground or paste service failed (transport, HTTP status, bad JSON)."""
    pass


class FormatToolError(PlaygroundError):
    """Local rustfmt could not be run (missing binary, timeout).

    Soft failure: callers log it and fall back to unformatted output.
    """
    pass


class NoCandidatesError(PlaygroundError):
    """Benchmark snippet has no public functions to measure."""
    pass
