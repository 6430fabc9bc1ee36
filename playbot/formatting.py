"""Reply rendering for Telegram HTML and plain text.

Telegram supports a limited HTML subset; playbot only needs:
  <pre><code class="language-rust">code block</code></pre>, <code>inline</code>,
  <a href="url">link</a>

Telegram's length limit applies to the text left after entity parsing, so
sizes are measured on the visible text, not the markup, in UTF-16 code
units.
"""

import html as _html
from dataclasses import dataclass
from typing import Optional


def _escape(text: str) -> str:
    """Escape HTML special characters in plain text segments."""
    return _html.escape(text, quote=False)


def utf16_length(text: str) -> int:
    """Length as Telegram counts it: in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def code_block(text: str, language: str = "") -> str:
    """Render a <pre> block. Telegram rejects empty entities, so an empty
    block carries a zero-width space."""
    content = _escape(text) if text else "\u200b"
    if language:
        return f'<pre><code class="language-{language}">{content}</code></pre>'
    return f"<pre>{content}</pre>"


@dataclass(frozen=True)
class Reply:
    """A chat reply: diagnostics, then either a code block or a link."""

    diagnostics: str = ""
    body: str = ""
    link: Optional[str] = None
    language: str = "rust"

    @property
    def visible_length(self) -> int:
        if self.link is not None:
            return utf16_length(self.diagnostics) + utf16_length(self.link_text)
        return utf16_length(self.diagnostics) + max(utf16_length(self.body), 1)

    @property
    def link_text(self) -> str:
        return f"Output too large. Playground link: {self.link}"

    def to_html(self) -> str:
        if self.link is not None:
            href = _html.escape(self.link, quote=True)
            return (
                f"{_escape(self.diagnostics)}Output too large. Playground link: "
                f'<a href="{href}">{_escape(self.link)}</a>'
            )
        language = self.language if self.body else ""
        return _escape(self.diagnostics) + code_block(self.body, language)

    def to_text(self) -> str:
        if self.link is not None:
            return self.diagnostics + self.link_text
        return f"{self.diagnostics}```{self.language}\n{self.body}\n```"


def help_html(text: str) -> str:
    """Render help text: lines indented by four spaces become <code> lines."""
    lines = []
    for line in text.splitlines():
        if line.startswith("    "):
            lines.append(f"<code>{_escape(line.strip())}</code>")
        else:
            lines.append(_escape(line))
    return "\n".join(lines)
