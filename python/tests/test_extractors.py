"""
Extractor Tests - Verify per-format text extraction.

Tests:
- HTML: script/style removal, body text, whitespace normalization
- LaTeX: comment, command, environment and math stripping
- Plain text: content returned unmodified
- Dispatch by extension and failure handling
"""

from pathlib import Path

import pytest

from extractors import HtmlExtractor, TexExtractor, PlainTextExtractor
from docsearch.extractor import FileTextExtractor


class TestHtmlExtractor:
    """Tests for HtmlExtractor."""

    @pytest.fixture
    def extractor(self):
        return HtmlExtractor()

    def test_extracts_body_text(self, extractor):
        """Body text is returned without markup."""
        text = extractor.extract(b"<html><body><p>Hello WORLD</p></body></html>")
        assert text == "Hello WORLD"

    def test_drops_script_and_style(self, extractor):
        """Script and style content is never searchable."""
        html = (
            b"<html><head><style>p { color: blue; }</style></head>"
            b"<body><p>visible</p><script>var hiddenValue = 42;</script></body></html>"
        )
        text = extractor.extract(html)
        assert "visible" in text
        assert "hiddenValue" not in text
        assert "color" not in text

    def test_ignores_head_when_body_present(self, extractor):
        """Only the body is used when there is one."""
        text = extractor.extract(b"<html><head><title>Title</title></head><body>Body</body></html>")
        assert text == "Body"

    def test_falls_back_to_document_without_body(self, extractor):
        """Fragments without a body use the whole document."""
        text = extractor.extract(b"<div>fragment <b>text</b></div>")
        assert text == "fragment text"

    def test_collapses_whitespace(self, extractor):
        """Whitespace runs become single spaces and ends are trimmed."""
        text = extractor.extract(b"<body>\n\n  one\n\t two   three \n</body>")
        assert text == "one two three"

    def test_supported_extensions(self, extractor):
        assert extractor.can_handle(".html")
        assert extractor.can_handle(".HTM")
        assert not extractor.can_handle(".tex")


class TestTexExtractor:
    """Tests for TexExtractor."""

    @pytest.fixture
    def extractor(self):
        return TexExtractor()

    def test_strips_comment_and_command(self, extractor):
        """Commands and their argument are removed along with comments."""
        text = extractor.extract(b"% comment\nThis is \\textbf{bold} text.")
        assert text == "This is text."
        assert "comment" not in text
        assert "bold" not in text

    def test_keeps_escaped_percent(self, extractor):
        """An escaped percent sign is not a comment."""
        text = extractor.extract(b"about 50\\% done % trailing remark")
        assert "done" in text
        assert "trailing" not in text

    def test_comment_after_line_break(self, extractor):
        """A % right after a \\\\ line break still starts a comment."""
        text = extractor.extract(b"first line\\\\% note to self\nsecond line")
        assert "note" not in text
        assert "first line" in text
        assert "second line" in text

    def test_keeps_percent_after_escaped_backslash_pair(self, extractor):
        """Three backslashes: a line break followed by an escaped percent."""
        text = extractor.extract(b"rate 5\\\\\\% kept")
        assert "kept" in text

    def test_strips_optional_argument(self, extractor):
        """A command's bracket argument after its brace argument is removed."""
        text = extractor.extract(b"before \\cite{key}[p. 4] after")
        assert text == "before after"

    def test_strips_environments(self, extractor):
        """Environment bodies are removed entirely."""
        tex = b"Intro.\n\\begin{equation*}\nE = mc^2\n\\end{equation*}\nOutro."
        text = extractor.extract(tex)
        assert text == "Intro. Outro."

    def test_environment_match_is_non_greedy(self, extractor):
        """Text between two environments survives."""
        tex = b"\\begin{a}x\\end{a} keep me \\begin{b}y\\end{b}"
        assert extractor.extract(tex) == "keep me"

    def test_strips_inline_math(self, extractor):
        text = extractor.extract(b"energy $E_0 + \\alpha$ level")
        assert text == "energy level"

    def test_strips_display_math(self, extractor):
        text = extractor.extract(b"before $$\nx^2 + y^2\n$$ after")
        assert text == "before after"

    def test_strips_bracket_math(self, extractor):
        text = extractor.extract(b"before \\[ \\int f \\] after")
        assert text == "before after"


class TestPlainTextExtractor:
    """Tests for PlainTextExtractor."""

    def test_returns_content_unmodified(self):
        """No whitespace normalization for plain-text formats."""
        content = "RUN-SECTION\n  propagation\n\nend-run-section\n"
        assert PlainTextExtractor().extract(content.encode()) == content

    def test_replaces_undecodable_bytes(self):
        """Invalid UTF-8 does not raise."""
        text = PlainTextExtractor().extract(b"abc\xff\xfedef")
        assert text.startswith("abc")
        assert text.endswith("def")


class TestFileTextExtractor:
    """Tests for extension dispatch."""

    @pytest.fixture
    def extractor(self):
        return FileTextExtractor()

    def test_routes_by_extension(self, extractor):
        assert isinstance(extractor.extractor_for(".html"), HtmlExtractor)
        assert isinstance(extractor.extractor_for(".htm"), HtmlExtractor)
        assert isinstance(extractor.extractor_for(".tex"), TexExtractor)
        assert isinstance(extractor.extractor_for(".op"), PlainTextExtractor)

    def test_routes_case_insensitively(self, extractor):
        assert isinstance(extractor.extractor_for(".HTML"), HtmlExtractor)

    def test_unknown_extension_reads_plain_text(self, extractor, temp_dir):
        """Other targeted extensions are read as plain text."""
        path = temp_dir / "notes.md"
        path.write_text("# Heading\n\nsome *markdown*")
        assert extractor.extract(path) == "# Heading\n\nsome *markdown*"

    def test_extracts_file(self, extractor, sample_files):
        assert extractor.extract(sample_files["html"]) == "Hello WORLD"

    def test_missing_file_returns_empty(self, extractor, temp_dir):
        """Read errors yield empty text instead of raising."""
        assert extractor.extract(temp_dir / "missing.tex") == ""

    def test_parser_error_returns_empty(self, temp_dir):
        """A failing extractor yields empty text instead of raising."""

        class BrokenExtractor(HtmlExtractor):
            def extract(self, data: bytes) -> str:
                raise ValueError("malformed")

        path = temp_dir / "broken.html"
        path.write_text("<body>anything</body>")

        extractor = FileTextExtractor([BrokenExtractor()])
        assert extractor.extract(path) == ""
