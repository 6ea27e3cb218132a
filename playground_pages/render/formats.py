"""Output-format renderers turning linked pages into documents.

Each renderer turns one :class:`~playground_pages.models.Page` (already
carrying its navigation links) into a complete document string, and the
:class:`~playground_pages.models.TableOfContents` into the index document.
Code blocks are only ever rendered as text; nothing is executed.

Example
-------
>>> from playground_pages.config import BookConfig
>>> from playground_pages.render.formats import get_renderer
>>> renderer = get_renderer("text", BookConfig(title="Demo"))
>>> renderer.extension
'txt'
"""

from __future__ import annotations

import abc
import collections.abc as cabc
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError

from playground_pages._constants import INDEX_SLUG, OUTPUT_EXTENSIONS
from playground_pages.markup import (
    FENCE_OPEN_PATTERN,
    longest_backtick_run,
    split_lines,
)
from playground_pages.models import (
    CodeBlock,
    NavLink,
    Page,
    ProseBlock,
    RenderError,
    TableOfContents,
)
from playground_pages.render.link_rewriter import PageLinkExtension
from playground_pages.render.models import PageModel
from playground_pages.render.renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from playground_pages.config import BookConfig

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


class PageRenderer(abc.ABC):
    """Shared template plumbing for every output format."""

    format_name: typ.ClassVar[str]
    page_template: typ.ClassVar[str]
    index_template: typ.ClassVar[str]
    autoescape: typ.ClassVar[bool]

    def __init__(self, config: BookConfig, *, templates_dir: Path | None = None) -> None:
        """Initialize the renderer and eagerly load its templates.

        Parameters
        ----------
        config : BookConfig
            Book configuration supplying titles, theme copy, and styles.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.

        Raises
        ------
        RenderError
            If a template is missing or fails to compile.
        """
        self.config = config
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=self.autoescape,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        try:
            self._page_template = self.env.get_template(self.page_template)
            self._index_template = self.env.get_template(self.index_template)
        except TemplateError as exc:
            msg = f"cannot load {self.format_name} templates ({exc})"
            raise RenderError(config.title, msg) from exc

    @property
    def extension(self) -> str:
        """File extension used for documents in this format."""
        return OUTPUT_EXTENSIONS[self.format_name]

    @property
    def index_filename(self) -> str:
        return f"{INDEX_SLUG}.{self.extension}"

    def render_page(
        self,
        page: Page,
        toc: TableOfContents,
        slugs_by_name: cabc.Mapping[str, str],
    ) -> str:
        """Render ``page`` into a complete document.

        Raises
        ------
        RenderError
            If the template fails while rendering this page.
        """
        model = PageModel(
            title=page.title,
            slug=page.slug,
            position=_position(page, toc),
            total=len(toc),
            blocks=[self._render_block(block, page, slugs_by_name) for block in page.blocks],
            previous=self._nav_link(page.previous),
            next=self._nav_link(page.next),
            index_href=self.index_filename,
        )
        context = {
            "page": model,
            "book": self.config,
            "theme": self.config.theme,
            "toc": toc,
            **self.extra_context(),
        }
        return self._render(self._page_template, context, page.name)

    def render_index(self, toc: TableOfContents) -> str:
        """Render the index document listing every page in order."""
        context = {
            "toc": toc,
            "book": self.config,
            "theme": self.config.theme,
            **self.extra_context(),
        }
        return self._render(self._index_template, context, INDEX_SLUG)

    def extra_context(self) -> dict[str, typ.Any]:
        """Return format-specific template variables."""
        return {}

    def _nav_link(self, link: NavLink | None) -> dict[str, str] | None:
        if link is None:
            return None
        return {"title": link.title, "href": f"{link.slug}.{self.extension}"}

    def _render_block(
        self,
        block: ProseBlock | CodeBlock,
        page: Page,
        slugs_by_name: cabc.Mapping[str, str],
    ) -> dict[str, str]:
        match block:
            case ProseBlock(text=text):
                content = self.render_prose(text, page, slugs_by_name)
                return {"kind": "prose", "content": content, "language": ""}
            case CodeBlock(source=source, language=language):
                content = self.render_code(source, language)
                return {"kind": "code", "content": content, "language": language}
            case _:  # pragma: no cover - exhaustive over Block
                msg = f"unsupported block {block!r}"
                raise RenderError(page.name, msg)

    @staticmethod
    def _render(template: typ.Any, context: dict[str, typ.Any], page_id: str) -> str:
        try:
            document = template.render(**context)
        except TemplateError as exc:
            raise RenderError(page_id, f"template rendering failed ({exc})") from exc
        if not document.endswith("\n"):
            document += "\n"
        return document

    @abc.abstractmethod
    def render_prose(
        self, text: str, page: Page, slugs_by_name: cabc.Mapping[str, str]
    ) -> str:
        """Return the formatted representation of a prose block."""

    @abc.abstractmethod
    def render_code(self, source: str, language: str) -> str:
        """Return ``source`` wrapped in a container that keeps its whitespace."""


class HtmlPageRenderer(PageRenderer):
    """Render pages as standalone HTML with highlighted code."""

    format_name = "html"
    page_template = "page.html.jinja"
    index_template = "index.html.jinja"
    autoescape = True

    def __init__(self, config: BookConfig, *, templates_dir: Path | None = None) -> None:
        super().__init__(config, templates_dir=templates_dir)
        self.content = HtmlContentRenderer(config.pygments_style)

    def extra_context(self) -> dict[str, typ.Any]:
        return {"pygments_css": self.content.stylesheet}

    def render_prose(
        self, text: str, page: Page, slugs_by_name: cabc.Mapping[str, str]
    ) -> str:
        extension = PageLinkExtension(page, slugs_by_name, self.extension)
        return self.content.markdown(text, link_extension=extension)

    def render_code(self, source: str, language: str) -> str:
        return self.content.code_block(source, language)


class TextPageRenderer(PageRenderer):
    """Render pages as plain text with fenced code.

    Code fences are longer than any backtick run inside the code, so the
    output can be split again with
    :data:`~playground_pages.markup.FENCED_SYNTAX`. Fence lines inside prose
    are indented four spaces so they read as text on re-extraction.
    """

    format_name = "text"
    page_template = "page.txt.jinja"
    index_template = "index.txt.jinja"
    autoescape = False

    def render_prose(
        self, text: str, page: Page, slugs_by_name: cabc.Mapping[str, str]
    ) -> str:
        # Fence lines in prose are indented so they cannot open a code block.
        return "\n".join(
            f"    {line}" if FENCE_OPEN_PATTERN.match(line) else line
            for line in split_lines(text)
        )

    def render_code(self, source: str, language: str) -> str:
        fence = "`" * max(3, longest_backtick_run(source) + 1)
        return f"{fence}{language}\n{source}\n{fence}"


RENDERERS: dict[str, type[PageRenderer]] = {
    HtmlPageRenderer.format_name: HtmlPageRenderer,
    TextPageRenderer.format_name: TextPageRenderer,
}


def get_renderer(
    fmt: str, config: BookConfig, *, templates_dir: Path | None = None
) -> PageRenderer:
    """Return the renderer for ``fmt``.

    Raises
    ------
    RenderError
        If ``fmt`` is not a supported output format.
    """
    renderer_cls = RENDERERS.get(fmt.lower())
    if renderer_cls is None:
        known = ", ".join(sorted(RENDERERS))
        msg = f"unsupported output format '{fmt}' (expected one of: {known})"
        raise RenderError(config.title, msg)
    return renderer_cls(config, templates_dir=templates_dir)


def _position(page: Page, toc: TableOfContents) -> int:
    for idx, entry in enumerate(toc.entries, start=1):
        if entry.slug == page.slug:
            return idx
    return 0


__all__ = [
    "RENDERERS",
    "HtmlPageRenderer",
    "PageRenderer",
    "TextPageRenderer",
    "get_renderer",
]
