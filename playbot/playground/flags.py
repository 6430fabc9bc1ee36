"""Command argument parsing — `key=value` modifiers and code blocks.

Multi-line strings produced here (diagnostics) always end with a newline
unless empty, so several of them can be concatenated safely.
"""

import re
from typing import Mapping

from .errors import ParseError
from .models import Channel, CommandFlags, Edition, Mode

_PARAM_RE = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)=([^\s`]+)")
_FENCED_RE = re.compile(r"```(?:[A-Za-z0-9_+-]*\n)?(.*?)```", re.DOTALL)
_INLINE_RE = re.compile(r"`([^`]+)`")


def parse_flags(params: Mapping[str, str]) -> tuple[CommandFlags, str]:
    """Parse channel/mode/edition modifiers.

    Never fails as a whole: a value that doesn't parse leaves the default in
    place and adds a line to the returned diagnostics.

    Returns:
        Tuple of (flags, diagnostics)
    """
    errors = ""
    flags = CommandFlags()

    if "channel" in params:
        try:
            flags.channel = Channel.parse(params["channel"])
        except ParseError as e:
            errors += f"{e}\n"

    if "mode" in params:
        try:
            flags.mode = Mode.parse(params["mode"])
        except ParseError as e:
            errors += f"{e}\n"

    if "edition" in params:
        try:
            flags.edition = Edition.parse(params["edition"])
        except ParseError as e:
            errors += f"{e}\n"

    return flags, errors


def parse_command_args(text: str) -> tuple[dict[str, str], str]:
    """Split leading `key=value` tokens off a command body.

    >>> parse_command_args("mode=release ```fn main() {}```")
    ({'mode': 'release'}, '```fn main() {}```')
    """
    params = {}
    pos = 0
    while True:
        match = _PARAM_RE.match(text, pos)
        if not match:
            break
        end = match.end()
        if end < len(text) and not text[end].isspace():
            break
        params[match.group(1)] = match.group(2)
        pos = end
    return params, text[pos:].strip()


def extract_code(body: str) -> str:
    """Pull the code out of a message body.

    Prefers the first fenced block (language tag dropped), then the first
    inline code span, then the whole body.
    """
    match = _FENCED_RE.search(body) or _INLINE_RE.search(body)
    code = match.group(1).strip("\n") if match else body.strip()

    if not code.strip():
        raise ParseError("missing code block")
    return code
