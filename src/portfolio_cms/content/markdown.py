"""
Markdown-lite renderer for tile bodies.

Supports a deliberately small subset: ``#``/``##``/``###`` headings, ``**bold**``,
``[text](url)`` links, ``-``/``*`` bullet lists and plain paragraphs.

The whole source is HTML-escaped before any pattern runs, so the only markup
in the output is the markup emitted here. Links are kept only for http, https
and mailto targets; any other scheme degrades to the link text.

Example:
    >>> render_markdown_lite("# Hi\\n- **one**\\n- [two](https://x.com)")
    '<h2>Hi</h2><ul><li><strong>one</strong></li><li><a href="https://x.com" target="_blank" rel="noopener">two</a></li></ul>'
"""

import html
import re

SAFE_SCHEMES = ("http://", "https://", "mailto:")

_LINK = re.compile(r"\[([^\]\n]+)\]\(([^)\n]+)\)")
_BOLD = re.compile(r"\*\*([^*\n]+)\*\*")

# Line prefix -> tag, longest prefix first
_HEADINGS = (("### ", "h4"), ("## ", "h3"), ("# ", "h2"))
_BULLETS = ("- ", "* ")


def safe_href(url: str | None) -> str:
    """Return the trimmed URL if its scheme is http, https or mailto, else ""."""
    candidate = (url or "").strip()
    if candidate.lower().startswith(SAFE_SCHEMES):
        return candidate
    return ""


def _render_link(match: re.Match) -> str:
    text, escaped_url = match.group(1), match.group(2)
    href = safe_href(html.unescape(escaped_url))
    if not href:
        return text
    return f'<a href="{html.escape(href)}" target="_blank" rel="noopener">{text}</a>'


def render_inline(escaped: str) -> str:
    """Apply link and bold patterns to already-escaped text."""
    escaped = _LINK.sub(_render_link, escaped)
    return _BOLD.sub(r"<strong>\1</strong>", escaped)


def render_markdown_lite(source: str | None) -> str:
    """Render markdown-lite source to an HTML fragment."""
    raw = (source or "").strip()
    if not raw:
        return ""

    text = render_inline(html.escape(raw).replace("\r\n", "\n"))

    out: list[str] = []
    in_list = False

    def close_list() -> None:
        nonlocal in_list
        if in_list:
            out.append("</ul>")
            in_list = False

    for line in text.split("\n"):
        line = line.strip()
        if not line:
            close_list()
            continue

        heading = next(((prefix, tag) for prefix, tag in _HEADINGS if line.startswith(prefix)), None)
        if heading:
            prefix, tag = heading
            close_list()
            out.append(f"<{tag}>{line[len(prefix):]}</{tag}>")
            continue

        if line.startswith(_BULLETS):
            if not in_list:
                out.append("<ul>")
                in_list = True
            out.append(f"<li>{line[2:]}</li>")
            continue

        close_list()
        out.append(f"<p>{line}</p>")

    close_list()
    return "".join(out)
