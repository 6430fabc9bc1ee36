"""Playground sub-core — everything between a snippet and a chat reply.

- Extract: carve relevant lines out of compiler/tool output
- Wrap: add a fn main to bare snippets
- Flags: channel/mode/edition modifiers and code block extraction
- Client: Rust Playground HTTP endpoints and gist upload
- Tools: per-tool request/response shaping and the shared pipeline
- Reply: inline vs. playground-link replies
"""

from .errors import FormatToolError, NoCandidatesError, ParseError, PlaygroundError, ServiceError
from .extract import ExtractionSpec, extract_relevant_lines
from .flags import extract_code, parse_command_args, parse_flags
from .models import Channel, CommandFlags, Edition, Mode, ResultHandling, ToolResult
from .wrap import maybe_wrap, strip_main_boilerplate

__all__ = [
    # Errors
    "PlaygroundError",
    "ParseError",
    "ServiceError",
    "FormatToolError",
    "NoCandidatesError",
    # Text shaping
    "ExtractionSpec",
    "extract_relevant_lines",
    "maybe_wrap",
    "strip_main_boilerplate",
    # Arguments
    "parse_flags",
    "parse_command_args",
    "extract_code",
    # Model
    "Channel",
    "CommandFlags",
    "Edition",
    "Mode",
    "ResultHandling",
    "ToolResult",
]
