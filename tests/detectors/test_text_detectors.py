"""
Tests for markdown, URL, code-snippet and plain-text detection.
"""

from __future__ import annotations

import pytest

from clipsense.detectors import detect_content
from clipsense.detectors.code_snippet import guess_language, wrap_markdown
from clipsense.detectors.markdown import (
    extract_headings,
    extract_links,
    is_markdown,
    markdown_to_html,
    strip_formatting,
)
from clipsense.detectors.plain_text import (
    PLAIN_TEXT_ACTIONS,
    dedupe_lines,
    number_lines,
    plain_text_actions,
    sort_lines,
    to_sentence_case,
    to_title_case,
    word_count,
)
from clipsense.detectors.url import (
    decode_url,
    encode_url,
    is_url,
    parse_url,
    to_markdown_link,
)


class TestMarkdown:
    DOC = "# Title\n\nSome **bold** and *soft* text with `code`.\n- one\n- two"

    def test_detect(self):
        assert is_markdown(self.DOC)
        result = detect_content(self.DOC)
        assert result.detector_id == "markdown"
        assert result.suggested_language == "markdown"

    def test_single_signal_is_not_markdown(self):
        assert not is_markdown("# just a heading")

    def test_to_html(self):
        assert markdown_to_html(self.DOC) == (
            "<h1>Title</h1>\n"
            "\n"
            "<p>Some <strong>bold</strong> and <em>soft</em> text with <code>code</code>.</p>\n"
            "<li>one</li>\n"
            "<li>two</li>"
        )

    def test_headers_by_level(self):
        html = markdown_to_html("### Three\n# One")
        assert html == "<h3>Three</h3>\n<h1>One</h1>"

    def test_escapes_html(self):
        assert markdown_to_html("a < b & c") == "<p>a &lt; b &amp; c</p>"

    def test_nul_rendered_as_replacement_character(self):
        text = "# Title\n- item\n\x00CODE3\x00"
        assert detect_content(text).detector_id == "markdown"
        assert markdown_to_html(text) == (
            "<h1>Title</h1>\n<li>item</li>\n<p>\ufffdCODE3\ufffd</p>"
        )

    def test_nul_next_to_fenced_block(self):
        html = markdown_to_html("```\nx\n```\n\x00CODE0\x00 and **b**")
        assert html == (
            "<pre><code>x\n</code></pre>\n"
            "<p>\ufffdCODE0\ufffd and <strong>b</strong></p>"
        )

    def test_fenced_code_untouched(self):
        html = markdown_to_html("```python\nx = 2 * 3 * 4\n# not a header\n```")
        assert html == (
            '<pre><code class="language-python">x = 2 * 3 * 4\n# not a header\n</code></pre>'
        )

    def test_links_images_blockquote_rule(self):
        html = markdown_to_html("> quoted\n---\n![logo](/logo.png) [home](https://a.io)")
        assert "<blockquote>quoted</blockquote>" in html
        assert "<hr>" in html
        assert '<img src="/logo.png" alt="logo">' in html
        assert '<a href="https://a.io">home</a>' in html

    def test_intraword_underscores_kept(self):
        assert markdown_to_html("call snake_case_name now") == (
            "<p>call snake_case_name now</p>"
        )

    def test_extract_links(self):
        text = "[site](https://a.com) and https://b.com and again https://b.com"
        assert extract_links(text) == "site: https://a.com\nhttps://b.com"

    def test_extract_links_none(self):
        assert extract_links("**bold** only") == "No links found"

    def test_strip_formatting(self):
        assert strip_formatting(self.DOC) == (
            "Title\n\nSome bold and soft text with code.\none\ntwo"
        )

    def test_extract_headings(self):
        assert extract_headings("# A\ntext\n## B\n### C\n## D") == (
            "- A\n  - B\n    - C\n  - D"
        )

    def test_extract_headings_none(self):
        assert extract_headings("plain") == "No headings found"


class TestUrl:
    URL = "https://example.com:8080/api/v1?name=John%20Doe&x=1#top"

    def test_detect(self):
        result = detect_content(f"see {self.URL}")
        assert result.detector_id == "url"
        assert result.toast_message == "URL detected (example.com)"

    def test_invalid_port_rejected(self):
        assert not is_url("http://example.com:99999/")

    def test_parse(self):
        assert parse_url(self.URL) == "\n".join(
            [
                "Protocol: https",
                "Host: example.com",
                "Port: 8080",
                "Path: /api/v1",
                "Query Parameters:",
                "  - name: John Doe",
                "  - x: 1",
                "Fragment: top",
                f"Full URL: {self.URL}",
            ]
        )

    def test_parse_without_url_is_unchanged(self):
        assert parse_url("no link here") == "no link here"

    def test_decode(self):
        assert decode_url("a%20b%2Fc") == "a b/c"

    def test_encode_reencodes_query(self):
        assert encode_url("go https://example.com/?msg=hello! now") == (
            "go https://example.com/?msg=hello%21 now"
        )

    def test_encode_bare_text(self):
        assert encode_url("a b/c") == "a%20b%2Fc"

    def test_to_markdown_link(self):
        assert to_markdown_link("Docs: https://docs.python.org/3/") == (
            "Docs: [docs.python.org](https://docs.python.org/3/)"
        )


class TestCodeSnippet:
    @pytest.mark.parametrize(
        ("text", "language"),
        [
            ("const add = (a, b) => {\n  return a + b;\n};", "typescript"),
            ("def greet(name):\n    return name", "python"),
            ("pub fn main() {\n    println!(\"hi\");\n}", "rust"),
            ("package main\n\nfunc main() {\n}", "go"),
            ("public static void main(String[] args) {\n}", "java"),
            ("class Widget {\n}", "code"),
        ],
    )
    def test_guess_language(self, text, language):
        assert guess_language(text) == language

    def test_detect_python(self):
        result = detect_content("def greet(name):\n    return name")
        assert result.detector_id == "code-snippet"
        assert result.suggested_language == "python"
        assert [a.id for a in result.actions] == ["wrap-markdown", "switch-language:python"]

    def test_generic_code_has_no_language(self):
        result = detect_content("class Widget {\n}")
        assert result.detector_id == "code-snippet"
        assert result.suggested_language is None
        assert result.actions[1].id == "switch-language:code"

    def test_wrap_markdown(self):
        assert wrap_markdown("def f():\n    pass") == "```python\ndef f():\n    pass\n```"

    def test_switch_language_is_noop(self):
        result = detect_content("def greet(name):\n    return name")
        assert result.actions[1].execute("anything") == "anything"


class TestPlainText:
    def _ids(self, text):
        return [a.id for a in plain_text_actions(text)]

    def test_lowercase_text(self):
        assert self._ids("hello world") == [
            "uppercase",
            "titlecase",
            "word-count",
            "sentencecase",
            "number-lines",
        ]

    def test_uppercase_text(self):
        assert self._ids("HELLO WORLD")[:2] == ["lowercase", "titlecase"]
        assert "uppercase" not in self._ids("HELLO WORLD")

    def test_shape_actions(self):
        assert self._ids("banana\napple\nbanana\n") == [
            "uppercase",
            "titlecase",
            "dedupe-lines",
            "remove-empty",
            "sort-lines",
        ]

    def test_no_letters(self):
        ids = self._ids("12345 67890")
        assert ids[0] == "word-count"
        assert not {"uppercase", "lowercase", "titlecase", "sentencecase"} & set(ids)

    def test_capped_at_five(self):
        assert len(self._ids("  Mixed Case\n\nMixed Case\nlast line ")) == 5

    def test_catalogue_has_reverse_sort(self):
        assert "sort-lines-reverse" in PLAIN_TEXT_ACTIONS
        assert "shuffle-lines" not in PLAIN_TEXT_ACTIONS

    def test_detector_fallback(self):
        result = detect_content("nothing special here")
        assert result.detector_id == "plain-text"
        assert result.toast_message == "Plain text"
        assert 0 < len(result.actions) <= 5

    def test_word_count(self):
        assert word_count("One two. Three!\n\nFour") == "\n".join(
            [
                "Words: 4",
                "Characters: 21",
                "Characters (no spaces): 17",
                "Lines: 3",
                "Sentences: 3",
                "Paragraphs: 2",
            ]
        )

    def test_case_helpers(self):
        assert to_title_case("hello big world") == "Hello Big World"
        assert to_sentence_case("HELLO THERE. how are you?") == "Hello there. How are you?"

    def test_line_helpers(self):
        assert sort_lines("b\nA\nc") == "A\nb\nc"
        assert dedupe_lines("a\nb\na") == "a\nb"
        assert number_lines("\n".join("x" * 10)).split("\n")[0] == " 1. x"
