"""Tests for the markdown-lite renderer."""

import pytest

from portfolio_cms.content.markdown import render_inline, render_markdown_lite, safe_href


class TestSafeHref:
    @pytest.mark.parametrize(
        "url",
        ["https://x.example", "http://x.example/a?b=c", "mailto:me@x.example", " HTTPS://X.EXAMPLE "],
    )
    def test_allowed(self, url):
        assert safe_href(url) == url.strip()

    @pytest.mark.parametrize("url", ["javascript:alert(1)", "data:text/html,hi", "//x.example", "ftp://x", "", None])
    def test_rejected(self, url):
        assert safe_href(url) == ""


class TestBlocks:
    def test_empty(self):
        assert render_markdown_lite("") == ""
        assert render_markdown_lite("   \n  ") == ""
        assert render_markdown_lite(None) == ""

    def test_paragraphs(self):
        assert render_markdown_lite("one\ntwo") == "<p>one</p><p>two</p>"

    def test_headings_shift_down_one_level(self):
        assert render_markdown_lite("# A\n## B\n### C") == "<h2>A</h2><h3>B</h3><h4>C</h4>"

    def test_heading_needs_space(self):
        assert render_markdown_lite("#tag") == "<p>#tag</p>"

    def test_list(self):
        assert render_markdown_lite("- a\n* b") == "<ul><li>a</li><li>b</li></ul>"

    def test_blank_line_closes_list(self):
        assert render_markdown_lite("- a\n\n- b") == "<ul><li>a</li></ul><ul><li>b</li></ul>"

    def test_paragraph_closes_list(self):
        assert render_markdown_lite("- a\ntext") == "<ul><li>a</li></ul><p>text</p>"

    def test_heading_closes_list(self):
        assert render_markdown_lite("- a\n# H") == "<ul><li>a</li></ul><h2>H</h2>"

    def test_crlf_and_indentation(self):
        assert render_markdown_lite("  # H\r\n   - a\r\n") == "<h2>H</h2><ul><li>a</li></ul>"

    def test_docstring_example(self):
        html = render_markdown_lite("# Hi\n- **one**\n- [two](https://x.com)")
        assert html == (
            '<h2>Hi</h2><ul><li><strong>one</strong></li>'
            '<li><a href="https://x.com" target="_blank" rel="noopener">two</a></li></ul>'
        )


class TestInline:
    def test_bold(self):
        assert render_markdown_lite("a **b** c") == "<p>a <strong>b</strong> c</p>"

    def test_link(self):
        assert render_markdown_lite("[site](https://x.example/?a=1&b=2)") == (
            '<p><a href="https://x.example/?a=1&amp;b=2" target="_blank" rel="noopener">site</a></p>'
        )

    def test_mailto_link(self):
        assert 'href="mailto:me@x.example"' in render_markdown_lite("[mail](mailto:me@x.example)")

    def test_unsafe_link_degrades_to_text(self):
        assert render_markdown_lite("[click](javascript:void)") == "<p>click</p>"

    def test_unbalanced_patterns_left_alone(self):
        assert render_markdown_lite("**open and [text](") == "<p>**open and [text](</p>"

    def test_bold_inside_link_text(self):
        html = render_markdown_lite("[**go**](https://x.example)")
        assert html == '<p><a href="https://x.example" target="_blank" rel="noopener"><strong>go</strong></a></p>'

    def test_render_inline_on_escaped_text(self):
        assert render_inline("&lt;b&gt; **x**") == "&lt;b&gt; <strong>x</strong>"


class TestEscaping:
    def test_html_is_escaped(self):
        assert render_markdown_lite("<script>alert('x')</script>") == (
            "<p>&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;</p>"
        )

    def test_quotes_in_link_text_escaped(self):
        html = render_markdown_lite('[say "hi"](https://x.example)')
        assert ">say &quot;hi&quot;</a>" in html

    def test_attribute_breakout_in_url_escaped(self):
        html = render_markdown_lite('[x](https://x.example/"onmouseover="alert)')
        assert 'href="https://x.example/&quot;onmouseover=&quot;alert"' in html

    def test_only_emitted_tags(self):
        html = render_markdown_lite("# <img src=x onerror=alert(1)>\n- <a href='javascript:1'>x</a>")
        assert "<img" not in html
        assert "<a href='" not in html
        assert html.startswith("<h2>&lt;img")
