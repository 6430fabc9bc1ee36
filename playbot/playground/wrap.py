"""Wrap bare snippets in a `fn main` so the playground can run them.

Entry point and crate attribute detection are plain substring checks, not
parsing. A `fn main` inside a comment or string counts as an entry point.
"""

from .extract import extract_relevant_lines
from .models import ResultHandling

_HEADERS = {
    ResultHandling.NONE: "fn main() {\n",
    ResultHandling.DISCARD: "fn main() { let _ = {\n",
    ResultHandling.PRINT: 'fn main() { println!("{:?}", {\n',
}

_FOOTERS = {
    ResultHandling.NONE: "}",
    ResultHandling.DISCARD: "}; }",
    ResultHandling.PRINT: "}); }",
}


def maybe_wrap(code: str, result_handling: ResultHandling) -> tuple[str, bool]:
    """Wrap `code` in a `fn main` unless it already has one.

    Returns:
        Tuple of (code, was_wrapped). Unwrapped code is returned as-is.
    """
    if "fn main" in code:
        return code, False

    # split on \n only, dropping \r of \r\n endings
    lines = [line.removesuffix("\r") for line in code.split("\n")]
    if lines[-1] == "":
        lines.pop()
    output = []

    # Crate attributes must stay at the top of the file, so the leading run
    # of them is hoisted above the generated fn main
    index = 0
    while index < len(lines):
        line = lines[index].strip()
        if line.startswith("#!["):
            output.append(line + "\n")
        elif line:
            break
        index += 1

    output.append(_HEADERS[result_handling])
    for line in lines[index:]:
        output.append(line + "\n")
    output.append(_FOOTERS[result_handling])

    return "".join(output), True


def strip_main_boilerplate(text: str) -> str:
    """Remove a generated fn main from rustfmt output and undo its indent."""
    output = []
    for line in extract_relevant_lines(text, ["fn main() {"], ["}"]).splitlines():
        output.append(line[4:] if line.startswith("    ") else line)
        output.append("\n")
    return "".join(output)
