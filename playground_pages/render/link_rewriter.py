"""Markdown extension that points in-prose page links at rendered files."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from playground_pages.navigation import resolve_page_reference

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from playground_pages.models import Page
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any
    Page = typ.Any


class PageLinkExtension(Extension):
    """Rewrite playground page links to the rendered output documents.

    Playground prose links to neighbours with ``@next``/``@previous`` and to
    other pages by (URL-encoded) page name. Register this extension on a
    ``markdown.Markdown`` instance to turn those targets into
    ``<slug>.<extension>`` hrefs. Links whose target does not exist, such as
    ``@next`` on the last page, lose their ``href`` and become plain spans.
    """

    def __init__(
        self, page: Page, slugs_by_name: cabc.Mapping[str, str], extension: str
    ) -> None:
        super().__init__()
        self.page = page
        self.slugs_by_name = slugs_by_name
        self.extension = extension

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the page-link treeprocessor on the Markdown instance."""
        processor = PageLinkTreeprocessor(
            md, self.page, self.slugs_by_name, self.extension
        )
        md.treeprocessors.register(processor, "playground_page_links", 15)


class PageLinkTreeprocessor(Treeprocessor):
    """Resolve ``<a>`` targets against the book's page order."""

    def __init__(
        self,
        md: Markdown,
        page: Page,
        slugs_by_name: cabc.Mapping[str, str],
        extension: str,
    ) -> None:
        super().__init__(md)
        self.page = page
        self.slugs_by_name = slugs_by_name
        self.extension = extension

    def run(self, root: Element) -> Element:
        """Rewrite page references in the parsed markdown tree."""
        for element in list(root.iter("a")):
            self._rewrite(element)
        return root

    def _rewrite(self, element: Element) -> None:
        reference = resolve_page_reference(
            element.get("href"), self.page, self.slugs_by_name
        )
        if reference is None:
            return
        if reference.slug is None:
            element.tag = "span"
            element.attrib.pop("href", None)
            element.set("class", "page-link-missing")
            return
        href = f"{reference.slug}.{self.extension}"
        if reference.fragment:
            href = f"{href}#{reference.fragment}"
        element.set("href", href)


__all__ = ["PageLinkExtension", "PageLinkTreeprocessor"]
