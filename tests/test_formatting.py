"""Tests for Telegram reply rendering."""

from playbot.formatting import Reply, code_block, help_html, utf16_length


class TestCodeBlock:
    def test_escapes_html(self):
        assert code_block("a < b && c", "rust") == (
            '<pre><code class="language-rust">a &lt; b &amp;&amp; c</code></pre>'
        )

    def test_no_language(self):
        assert code_block("x") == "<pre>x</pre>"

    def test_empty_block_is_not_empty(self):
        assert code_block("") == "<pre>\u200b</pre>"


class TestReply:
    """Test rendering and measuring replies."""

    def test_html_with_body(self):
        reply = Reply(diagnostics="invalid edition `2021`\n", body="Vec<u8>")
        assert reply.to_html() == (
            'invalid edition `2021`\n<pre><code class="language-rust">Vec&lt;u8&gt;</code></pre>'
        )

    def test_html_with_link(self):
        reply = Reply(link="https://play.rust-lang.org/?version=nightly&gist=1")
        html = reply.to_html()
        assert html.startswith("Output too large. Playground link: ")
        assert 'href="https://play.rust-lang.org/?version=nightly&amp;gist=1"' in html

    def test_text(self):
        assert Reply(diagnostics="d\n", body="out").to_text() == "d\n```rust\nout\n```"
        assert Reply(link="https://x").to_text() == "Output too large. Playground link: https://x"

    def test_visible_length_ignores_markup(self):
        reply = Reply(diagnostics="ab", body="<<>>")
        assert reply.visible_length == 6
        assert len(reply.to_html()) > reply.visible_length

    def test_visible_length_of_empty_body(self):
        assert Reply(diagnostics="ab").visible_length == 3

    def test_visible_length_with_link(self):
        reply = Reply(diagnostics="ab", body="ignored", link="https://x")
        assert reply.visible_length == 2 + len("Output too large. Playground link: https://x")


class TestHelpHtml:
    def test_indented_lines_become_code(self):
        text = "Format code.\n    /fmt edition={} ```code```\nOptional arguments:"
        assert help_html(text) == (
            "Format code.\n<code>/fmt edition={} ```code```</code>\nOptional arguments:"
        )

    def test_escapes(self):
        assert help_html("/ban <member>") == "/ban &lt;member&gt;"


class TestUtf16Length:
    def test_bmp_characters_count_once(self):
        assert utf16_length("abc ä €") == 7

    def test_astral_characters_count_twice(self):
        assert utf16_length("🦀") == 2
        assert Reply(body="🦀🦀").visible_length == 4
