"""Render markdown page content into HTML after a build.

The build core leaves ``page.content`` empty; the CLI fills it with
:func:`render_pages`, which runs markdown sources through
:class:`MarkdownRenderer`, renders ``.jinja``/``.html`` sources as Jinja
templates with the page data as context, and passes every other page's
``content`` through unchanged.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment

    from .pages import Page

MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown"})
TEMPLATE_EXTENSIONS = frozenset({".jinja", ".html"})
CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


class MarkdownRenderer:
    """Render markdown with highlighted code blocks."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style

    def markdown(self, text: str) -> str:
        """Render markdown into HTML."""
        normalized = FENCE_LABEL_PATTERN.sub(_strip_fence_extras, text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return _annotate_codehilite(md.convert(normalized), normalized)


def _strip_fence_extras(match: re.Match[str]) -> str:
    fence, language, _extras = match.groups()
    return f"{fence}{language or ''}"


def _annotate_codehilite(html: str, source_markdown: str) -> str:
    """Attach a ``data-language`` attribute to each highlighted block."""
    languages = [
        match.group(1) or "text"
        for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
    ]
    if not languages:
        return html
    lang_iter = iter(languages)

    def _repl(_match: re.Match[str]) -> str:
        lang = next(lang_iter, "text")
        return f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'

    return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))


def render_pages(
    pages: cabc.Iterable[Page],
    renderer: MarkdownRenderer,
    templates: Environment | None = None,
) -> None:
    """Fill ``page.content`` for every page that has none yet.

    Parameters
    ----------
    pages : Iterable[Page]
        Built pages; pages with ``content`` already set are left alone.
    renderer : MarkdownRenderer
        Renderer for markdown sources.
    templates : jinja2.Environment, optional
        Environment compiling ``.jinja``/``.html`` sources. Without one those
        sources are written as they are.
    """
    for page in pages:
        if page.content is not None:
            continue
        content = page.data.get("content", "")
        ext = page.src.ext.lower()
        if ext in MARKDOWN_EXTENSIONS:
            page.content = renderer.markdown(str(content))
        elif ext in TEMPLATE_EXTENSIONS and templates is not None:
            page.content = templates.from_string(str(content)).render(page.data)
        elif isinstance(content, str | bytes):
            page.content = content
        else:
            page.content = ""


__all__ = ["CODE_BLOCK_PATTERN", "MarkdownRenderer", "TEMPLATE_EXTENSIONS", "render_pages"]
