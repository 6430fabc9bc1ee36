"""Playground chat commands — platform-agnostic.

The channel layer turns an incoming message into CommandArgs (body, modifier
params, and the reply primitives) and calls one of the handlers here.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from .formatting import Reply
from .playground.bench import BLACK_BOX_HINT, build_harness, needs_black_box_hint
from .playground.errors import NoCandidatesError
from .playground.flags import extract_code, parse_flags
from .playground.models import Channel, CommandFlags, Mode
from .playground.reply import SendFn
from .playground.tools import (
    CLIPPY,
    EVAL,
    EXPAND,
    FMT,
    MICROBENCH,
    MIRI,
    PLAY,
    PlaygroundServices,
    PlaygroundTool,
    run_tool,
)

logger = logging.getLogger("playbot.commands")

ReplyFn = Callable[[str], Awaitable[Any]]


@dataclass
class CommandArgs:
    """One command invocation.

    `code` is set when the platform already delivered the snippet as a code
    entity; otherwise it is pulled out of `body`.
    """

    body: str
    reply: ReplyFn
    send: SendFn
    params: dict[str, str] = field(default_factory=dict)
    code: Optional[str] = None

    def wants_help(self) -> bool:
        if self.code is not None:
            return False
        return self.body.strip() in ("", "help")

    def source(self) -> str:
        if self.code is not None:
            return self.code
        return extract_code(self.body)


def generic_help(cmd: str, desc: str, full: bool, example_code: str) -> str:
    """Static help text shared by all playground commands."""
    reply = f"{desc}. All code is executed on https://play.rust-lang.org.\n"

    flags = "mode={} channel={} " if full else ""
    example = example_code.strip("\n").replace("\n", "\n    ")
    reply += f"    /{cmd} {flags}edition={{}} ```{example}```\n"

    reply += "Optional arguments:\n"
    if full:
        reply += "    mode: debug, release (default: debug)\n"
        reply += "    channel: stable, beta, nightly (default: nightly)\n"
    reply += "    edition: 2015, 2018 (default: 2018)\n"
    return reply


MICROBENCH_EXAMPLE = """
pub fn snippet_a() { /* code */ }
pub fn snippet_b() { /* code */ }
"""

HELP_TEXTS = {
    "play": generic_help("play", "Compile and run Rust code", True, "code"),
    "eval": generic_help("eval", "Compile and run Rust code", True, "code"),
    "miri": generic_help(
        "miri",
        "Execute this program in the Miri interpreter to detect certain cases of "
        "undefined behavior (like out-of-bounds memory access)",
        False,
        "code",
    ),
    "expand": generic_help("expand", "Expand macros to their raw desugared form", False, "code"),
    "clippy": generic_help(
        "clippy", "Catch common mistakes and improve the code using the Clippy linter", False, "code",
    ),
    "fmt": generic_help("fmt", "Format code using rustfmt", False, "code"),
    "microbench": generic_help(
        "microbench",
        "Benchmark small snippets of code by running them repeatedly. The public function "
        "snippets are run in chunks, interleaved: Snippet A is ran 10000 times, then snippet B "
        "is ran 10000 times, then snippet A again, and so on until a certain time has passed. "
        "After that, the measurements are averaged and the standard deviation is calculated "
        "for each",
        False,
        MICROBENCH_EXAMPLE,
    ),
}


class PlaygroundCommands:
    """Handlers for /play, /eval, /miri, /expand, /clippy, /fmt and /microbench."""

    def __init__(self, services: PlaygroundServices):
        self.services = services

    def handlers(self) -> dict[str, Callable[[CommandArgs], Awaitable[Optional[Reply]]]]:
        return {
            "play": self.play,
            "eval": self.evaluate,
            "miri": self.miri,
            "expand": self.expand,
            "clippy": self.clippy,
            "fmt": self.fmt,
            "microbench": self.microbench,
        }

    async def _run(self, tool: PlaygroundTool, args: CommandArgs) -> Optional[Reply]:
        if args.wants_help():
            await args.reply(HELP_TEXTS[tool.name])
            return None

        code = args.source()
        flags, flag_parse_errors = parse_flags(args.params)
        return await run_tool(
            tool, code, flags, flag_parse_errors, services=self.services, send=args.send,
        )

    async def play(self, args: CommandArgs) -> Optional[Reply]:
        return await self._run(PLAY, args)

    async def evaluate(self, args: CommandArgs) -> Optional[Reply]:
        return await self._run(EVAL, args)

    async def miri(self, args: CommandArgs) -> Optional[Reply]:
        return await self._run(MIRI, args)

    async def expand(self, args: CommandArgs) -> Optional[Reply]:
        return await self._run(EXPAND, args)

    async def clippy(self, args: CommandArgs) -> Optional[Reply]:
        return await self._run(CLIPPY, args)

    async def fmt(self, args: CommandArgs) -> Optional[Reply]:
        return await self._run(FMT, args)

    async def microbench(self, args: CommandArgs) -> Optional[Reply]:
        if args.wants_help():
            await args.reply(HELP_TEXTS["microbench"])
            return None

        user_code = args.source()
        try:
            harness = build_harness(user_code)
        except NoCandidatesError as e:
            await args.reply(str(e))
            return None

        parsed, flag_parse_errors = parse_flags(args.params)
        # benchmarks always run on nightly in release mode
        flags = CommandFlags(channel=Channel.NIGHTLY, mode=Mode.RELEASE, edition=parsed.edition)
        if needs_black_box_hint(user_code):
            flag_parse_errors += BLACK_BOX_HINT

        return await run_tool(
            MICROBENCH, harness, flags, flag_parse_errors,
            services=self.services, send=args.send, paste_code=harness,
        )
