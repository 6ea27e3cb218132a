"""Utilities for rendering prose Markdown and syntax-highlighted code blocks."""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
PROSE_EXTENSIONS: tuple[str, ...] = ("fenced_code", "codehilite", "tables", "sane_lists")


class HtmlContentRenderer:
    """Render prose and code snippets with consistent styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer with the Pygments style used for code.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str, link_extension: Extension | None = None) -> str:
        """Render prose Markdown into HTML.

        ``link_extension`` is added per call because page links resolve
        differently on every page.
        """
        if not text.strip():
            return ""
        extensions: list[Extension | str] = list(PROSE_EXTENSIONS)
        if link_extension is not None:
            extensions.append(link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
            output_format="html",
        )
        return md.convert(text)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML without altering whitespace.

        Parameters
        ----------
        code : str
            Snippet to highlight.
        language : str, optional
            Pygments lexer name; falls back to ``"text"`` when missing or
            unknown to Pygments.

        Returns
        -------
        str
            A ``div.codehilite`` block carrying a ``data-language`` attribute.
            The text content of its ``<pre>`` is ``code`` plus one newline.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang, stripnl=False, stripall=False)
        except ClassNotFound:
            lexer = get_lexer_by_name("text", stripnl=False, stripall=False)
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang)

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(_match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)


__all__ = ["HtmlContentRenderer"]
