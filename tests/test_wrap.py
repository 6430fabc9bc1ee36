"""Tests for fn main wrapping."""

from playbot.playground.models import ResultHandling
from playbot.playground.wrap import maybe_wrap, strip_main_boilerplate


class TestMaybeWrap:
    """Test wrapping bare snippets."""

    def test_existing_main_is_untouched(self):
        code = 'fn main() {\n    println!("hi");\n}\n'
        for handling in ResultHandling:
            wrapped, was_wrapped = maybe_wrap(code, handling)
            assert wrapped == code
            assert was_wrapped is False

    def test_no_wrap(self):
        wrapped, was_wrapped = maybe_wrap('println!("hi");', ResultHandling.NONE)
        assert wrapped == 'fn main() {\nprintln!("hi");\n}'
        assert was_wrapped is True

    def test_discard(self):
        wrapped, _ = maybe_wrap("let x = 1;\nx + 1", ResultHandling.DISCARD)
        assert wrapped == "fn main() { let _ = {\nlet x = 1;\nx + 1\n}; }"

    def test_print(self):
        wrapped, _ = maybe_wrap("1 + 2", ResultHandling.PRINT)
        assert wrapped == 'fn main() { println!("{:?}", {\n1 + 2\n}); }'

    def test_leading_attributes_are_hoisted_in_order(self):
        code = "#![allow(unused)]\n\n  #![feature(test)]\nlet x = 1;\nx"
        wrapped, was_wrapped = maybe_wrap(code, ResultHandling.DISCARD)
        assert was_wrapped is True
        assert wrapped == (
            "#![allow(unused)]\n"
            "#![feature(test)]\n"
            "fn main() { let _ = {\n"
            "let x = 1;\n"
            "x\n"
            "}; }"
        )

    def test_later_attributes_stay_in_place(self):
        wrapped, _ = maybe_wrap("let a = 1;\n#![allow(unused)]", ResultHandling.NONE)
        assert wrapped == "fn main() {\nlet a = 1;\n#![allow(unused)]\n}"

    def test_item_attributes_are_not_hoisted(self):
        wrapped, _ = maybe_wrap("#[derive(Debug)]\nstruct A;", ResultHandling.NONE)
        assert wrapped.startswith("fn main() {\n#[derive(Debug)]\n")

    def test_empty_snippet(self):
        wrapped, was_wrapped = maybe_wrap("", ResultHandling.NONE)
        assert wrapped == "fn main() {\n}"
        assert was_wrapped is True

    def test_main_in_comment_counts_as_entry_point(self):
        """Detection is a substring check, not a parser."""
        code = "// no fn main here\nlet x = 1;"
        assert maybe_wrap(code, ResultHandling.NONE) == (code, False)


class TestStripBoilerplate:
    """Test removing a generated fn main again."""

    def test_roundtrip_no_wrap(self):
        code = 'let v = vec![1, 2];\nprintln!("{:?}", v);'
        wrapped, was_wrapped = maybe_wrap(code, ResultHandling.NONE)
        assert was_wrapped
        assert strip_main_boilerplate(wrapped) == code + "\n"

    def test_roundtrip_discard(self):
        code = "let x = 1;\nx + 1"
        wrapped, _ = maybe_wrap(code, ResultHandling.DISCARD)
        assert strip_main_boilerplate(wrapped) == code + "\n"

    def test_roundtrip_drops_attributes(self):
        wrapped, _ = maybe_wrap("#![allow(unused)]\nlet x = 1;", ResultHandling.NONE)
        assert strip_main_boilerplate(wrapped) == "let x = 1;\n"

    def test_undoes_rustfmt_indent(self):
        formatted = (
            "fn main() {\n"
            "    let x = 1;\n"
            "    if x > 0 {\n"
            '        println!("{}", x);\n'
            "    }\n"
            "}\n"
        )
        assert strip_main_boilerplate(formatted) == (
            "let x = 1;\n"
            "if x > 0 {\n"
            '    println!("{}", x);\n'
            "}\n"
        )

    def test_empty_input(self):
        assert strip_main_boilerplate("") == ""


class TestLineSplitting:
    """Only \\n and \\r\\n end a line."""

    def test_form_feed_in_literal_is_kept(self):
        code = 'let s = "a\x0cb c";'
        wrapped, _ = maybe_wrap(code, ResultHandling.NONE)
        assert wrapped == "fn main() {\n" + code + "\n}"

    def test_crlf_line_endings(self):
        wrapped, _ = maybe_wrap("#![allow(unused)]\r\nlet x = 1;\r\n", ResultHandling.NONE)
        assert wrapped == "#![allow(unused)]\nfn main() {\nlet x = 1;\n}"
