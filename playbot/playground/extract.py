"""Carve the interesting part out of noisy compiler and tool output."""

from dataclasses import dataclass
from typing import Sequence


def extract_relevant_lines(
    text: str,
    start_tokens: Sequence[str],
    end_tokens: Sequence[str],
) -> str:
    """Keep only the lines between a start token line and an end token line.

    Each token is located by its last occurrence. Of the start tokens the one
    furthest into the text wins, so repeated banners are skipped; everything
    up to and including its line is dropped. Of the end tokens (searched in
    what remains) the one closest to the front wins, and everything from the
    start of its line is dropped. A token that does not occur is ignored; if
    none occur, that side is left untouched.

    Leading empty lines are removed and trailing empty lines collapse into a
    single trailing newline.

    Don't pass "Finished dev" as an end token, it doesn't match in release mode.
    """
    start_positions = [pos for pos in (text.rfind(t) for t in start_tokens) if pos != -1]
    if start_positions:
        start = max(start_positions)
        line_end = text.find("\n", start)
        text = text[line_end + 1:] if line_end != -1 else ""

    end_positions = [pos for pos in (text.rfind(t) for t in end_tokens) if pos != -1]
    if end_positions:
        end = min(end_positions)
        prev_line_end = text.rfind("\n", 0, end)
        text = text[:prev_line_end + 1] if prev_line_end != -1 else ""

    text = text.lstrip("\n")
    while text.endswith("\n\n"):
        text = text[:-1]
    return text


@dataclass(frozen=True)
class ExtractionSpec:
    """Start/end token pair describing where a tool's useful output lives."""

    start_tokens: tuple[str, ...] = ()
    end_tokens: tuple[str, ...] = ()

    def apply(self, text: str) -> str:
        return extract_relevant_lines(text, self.start_tokens, self.end_tokens)


# rustc warnings/errors printed while building the playground crate
COMPILER_OUTPUT = ExtractionSpec(
    start_tokens=("Compiling playground",),
    end_tokens=("warning emitted", "warnings emitted", "error: aborting", "Finished "),
)

# whatever the program itself wrote to stderr
PROGRAM_STDERR = ExtractionSpec(start_tokens=("Running `target",))

MIRI_OUTPUT = ExtractionSpec(
    start_tokens=("Running `/playground",),
    end_tokens=("error: aborting",),
)

MACRO_EXPANSION_OUTPUT = ExtractionSpec(
    start_tokens=("Finished ", "Compiling playground"),
    end_tokens=("error: aborting",),
)

CLIPPY_OUTPUT = ExtractionSpec(
    start_tokens=("Checking playground", "Running `/playground"),
    end_tokens=("error: aborting", "1 warning emitted", "warnings emitted", "Finished "),
)


def format_compiler_stderr(stderr: str) -> str:
    """Merge compiler warnings and program stderr of an /execute result."""
    compiler_warnings = COMPILER_OUTPUT.apply(stderr)
    program_stderr = ""
    if "Running `target" in stderr:
        program_stderr = PROGRAM_STDERR.apply(stderr)

    if compiler_warnings and program_stderr:
        return f"{compiler_warnings}\n{program_stderr}"
    return compiler_warnings or program_stderr
