"""Playground data model — request enums, flags and the uniform tool result."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from .errors import ParseError


class Channel(str, Enum):
    """Rust release channel."""

    STABLE = "stable"
    BETA = "beta"
    NIGHTLY = "nightly"

    @classmethod
    def parse(cls, value: str) -> "Channel":
        try:
            return cls(value)
        except ValueError:
            raise ParseError(f"invalid release channel `{value}`") from None


class Edition(str, Enum):
    """Rust language edition."""

    E2015 = "2015"
    E2018 = "2018"

    @classmethod
    def parse(cls, value: str) -> "Edition":
        try:
            return cls(value)
        except ValueError:
            raise ParseError(f"invalid edition `{value}`") from None


class Mode(str, Enum):
    """Compilation mode."""

    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: str) -> "Mode":
        try:
            return cls(value)
        except ValueError:
            raise ParseError(f"invalid compilation mode `{value}`") from None


class CrateType(str, Enum):
    BINARY = "bin"
    LIBRARY = "lib"

    @classmethod
    def for_code(cls, code: str) -> "CrateType":
        """Binary if the code defines an entry point (substring check)."""
        return cls.BINARY if "fn main" in code else cls.LIBRARY


class ResultHandling(Enum):
    """How a wrapped snippet's trailing expression is consumed."""

    NONE = "none"          # no consumption; rustc errors if the value isn't ()
    DISCARD = "discard"    # let _ = { ... };
    PRINT = "print"        # println!("{:?}", { ... });


@dataclass
class CommandFlags:
    """User-selectable playground options, mutated by the flag parser."""

    channel: Channel = Channel.NIGHTLY
    mode: Mode = Mode.DEBUG
    edition: Edition = Edition.E2018


@dataclass(frozen=True)
class ExecutionRequest:
    """Body of a POST /execute request."""

    code: str
    channel: Channel
    edition: Edition
    mode: Mode
    tests: bool = False

    @property
    def crate_type(self) -> CrateType:
        return CrateType.for_code(self.code)

    def to_payload(self) -> dict:
        return {
            "channel": self.channel.value,
            "edition": self.edition.value,
            "code": self.code,
            "crateType": self.crate_type.value,
            "mode": self.mode.value,
            "tests": self.tests,
        }


class ToolResult(BaseModel):
    """Uniform {success, stdout, stderr} result of a playground tool."""

    success: bool
    stdout: str = ""
    stderr: str = ""


class FormatResponse(BaseModel):
    """Response of POST /format — the formatted program comes back in `code`."""

    success: bool
    code: str = ""
    stdout: str = ""
    stderr: str = ""

    def to_result(self) -> ToolResult:
        return ToolResult(
            success=self.success,
            stdout=self.code or self.stdout,
            stderr=self.stderr,
        )


class GistResponse(BaseModel):
    id: str
