"""Tests for HTML sanitization."""

import pytest
from bs4 import BeautifulSoup

from lingoweb.ingestion.sanitizer import (
    EXCLUDED_TAGS,
    extract_title,
    remove_excluded_elements,
    sanitize_html,
    strip_active_attributes,
)


def _tags(html: str) -> set[str]:
    return {tag.name for tag in BeautifulSoup(html, "html.parser").find_all(True)}


class TestSanitizeHtml:
    """Tests for sanitize_html."""

    def test_simple_fragment_unchanged(self):
        """A fragment without excluded markup comes back as is."""
        assert sanitize_html("<h1>Hello</h1>") == "<h1>Hello</h1>"

    def test_returns_body_content_only(self):
        """Should return the inner HTML of <body>, not the document."""
        html = "<html><head><title>T</title></head><body><p>Text</p></body></html>"
        assert sanitize_html(html) == "<p>Text</p>"

    def test_removes_all_excluded_tags(self, sample_html):
        """No excluded element survives anywhere in a full page."""
        result = sanitize_html(sample_html)
        assert not _tags(result) & set(EXCLUDED_TAGS)
        assert "<h1>Hello</h1>" in result
        assert "window.tracking" not in result

    @pytest.mark.parametrize("tag", EXCLUDED_TAGS)
    def test_removes_each_excluded_tag(self, tag):
        """Each excluded tag is removed together with its content."""
        html = f"<p>keep</p><{tag}>secret</{tag}>"
        result = sanitize_html(html)
        assert result == "<p>keep</p>"

    def test_removes_deeply_nested_elements(self):
        """Excluded elements are removed at any depth."""
        html = (
            "<div><section><article><ul><li><span>"
            "<script>deep()</script>visible"
            "</span></li></ul></article></section></div>"
        )
        result = sanitize_html(html)
        assert "deep()" not in result
        assert "visible" in result
        assert "script" not in _tags(result)

    def test_removes_excluded_inside_excluded(self):
        """An excluded element nested in another excluded element is handled."""
        html = "<noscript><iframe src='https://x.example'></iframe></noscript><p>a</p>"
        assert sanitize_html(html) == "<p>a</p>"

    def test_malformed_markup_does_not_raise(self):
        """Unclosed and invalid tags are tolerated."""
        html = "<div><p>Unclosed <b>bold <script>bad()"
        result = sanitize_html(html)
        assert "Unclosed" in result
        assert "bad()" not in result

    def test_uppercase_tags_removed(self):
        """Tag matching is case-insensitive."""
        result = sanitize_html("<P>ok</P><SCRIPT>alert(1)</SCRIPT>")
        assert "alert" not in result
        assert "ok" in result

    def test_fragment_head_is_dropped(self):
        """A fragment's <head> is not part of the visible content."""
        html = "<head><title>Title</title></head><p>Body</p>"
        assert sanitize_html(html) == "<p>Body</p>"

    def test_empty_input(self):
        """Empty input yields an empty string."""
        assert sanitize_html("") == ""

    def test_only_excluded_content_yields_empty(self):
        """A page made only of scripts has nothing to display."""
        assert sanitize_html("<body><script>x()</script><style>p{}</style></body>") == ""

    def test_idempotent(self, sample_html):
        """Sanitizing twice gives the same result as sanitizing once."""
        once = sanitize_html(sample_html)
        assert sanitize_html(once) == once

    @pytest.mark.parametrize(
        "html",
        [
            "<p>a</p><!--><script>alert(1)</script>-->",
            "<p>a</p><![CDATA[><script>alert(2)</script>]]>",
            "<p>a</p><!---><iframe src=//evil></iframe>-->",
            "<p>a</p><!x><script>alert(3)</script>",
            "<p>a</p><?x><script>alert(4)</script>?>",
        ],
    )
    def test_markup_hidden_in_comment_like_nodes_removed(self, html):
        """Comments and declarations parsed differently by browsers cannot smuggle markup."""
        result = sanitize_html(html)
        assert result.startswith("<p>a</p>")
        assert "<script" not in result.lower()
        assert "<iframe" not in result.lower()
        assert "<!" not in result
        assert "<?" not in result
        assert sanitize_html(result) == result

    def test_comments_removed(self):
        """Plain comments are dropped."""
        assert sanitize_html("<p>a<!-- note --></p>") == "<p>a</p>"

    def test_strips_event_handlers(self, sample_html):
        """Inline event handler attributes are removed."""
        result = sanitize_html(sample_html)
        assert "onclick" not in result
        assert "track()" not in result

    def test_strips_javascript_urls(self, sample_html):
        """javascript: URLs are removed while normal links are kept."""
        result = sanitize_html(sample_html)
        assert "javascript:" not in result
        assert 'href="https://example.com/about"' in result

    def test_keeps_classes_and_ids(self):
        """Presentational attributes are untouched."""
        html = '<div id="main" class="content wide"><p>x</p></div>'
        result = sanitize_html(html)
        assert 'id="main"' in result
        assert 'class="content wide"' in result


class TestRemoveExcludedElements:
    """Tests for remove_excluded_elements."""

    def test_counts_removed_elements(self):
        """Should report how many elements were removed."""
        soup = BeautifulSoup(
            "<script>a</script><style>b</style><p>c</p><iframe></iframe>",
            "html.parser",
        )
        assert remove_excluded_elements(soup) == 3
        assert soup.find(EXCLUDED_TAGS) is None


class TestStripActiveAttributes:
    """Tests for strip_active_attributes."""

    def test_obfuscated_script_url(self):
        """Whitespace and case tricks in script URLs are caught."""
        soup = BeautifulSoup('<a href=" JaVa\tScript:alert(1)">x</a>', "html.parser")
        assert strip_active_attributes(soup) == 1
        assert soup.a.get("href") is None

    def test_vbscript_url(self):
        soup = BeautifulSoup('<img src="vbscript:msgbox(1)">', "html.parser")
        strip_active_attributes(soup)
        assert soup.img.get("src") is None


class TestExtractTitle:
    """Tests for extract_title."""

    def test_prefers_title_tag(self):
        html = "<html><head><title>Page Title</title></head><body><h1>Heading</h1></body></html>"
        assert extract_title(html) == "Page Title"

    def test_falls_back_to_h1(self):
        assert extract_title("<body><h1> Heading </h1></body>") == "Heading"

    def test_falls_back_to_og_title(self):
        html = '<head><meta property="og:title" content="Social Title"></head><p>x</p>'
        assert extract_title(html) == "Social Title"

    def test_untitled(self):
        assert extract_title("<p>No title here</p>") == "Untitled Page"
