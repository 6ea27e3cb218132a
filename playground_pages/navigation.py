"""Compute previous/next links and the table of contents for a book.

Navigation is derived purely from list order, so manual cross-references in
page prose never drift from the real sequence. In-prose references such as
``[Next](@next)`` or ``[Home](Introduction)`` are resolved against the same
order by :func:`resolve_page_reference`.

Example
-------
>>> from playground_pages.models import Page
>>> pages = link_pages([Page("Intro", "intro", "Intro", ()),
...                     Page("Details", "details", "Details", ())])
>>> pages[0].next.slug, pages[1].previous.slug
('details', 'intro')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
from urllib.parse import unquote, urlsplit

from .models import NavLink, Page, TableOfContents, TocEntry

NEXT_REFERENCE = "@next"
PREVIOUS_REFERENCE = "@previous"


@dc.dataclass(frozen=True, slots=True)
class PageReference:
    """A resolved in-prose page link; ``slug`` is None when it has no target."""

    slug: str | None
    fragment: str = ""


def link_pages(pages: cabc.Sequence[Page]) -> list[Page]:
    """Return copies of ``pages`` with previous/next links set from order.

    The first page never has a ``previous`` link and the last never has a
    ``next`` link; a single page has neither.
    """
    links = [NavLink(slug=page.slug, title=page.title) for page in pages]
    linked: list[Page] = []
    for idx, page in enumerate(pages):
        previous = links[idx - 1] if idx > 0 else None
        following = links[idx + 1] if idx + 1 < len(pages) else None
        linked.append(dc.replace(page, previous=previous, next=following))
    return linked


def build_table_of_contents(
    pages: cabc.Sequence[Page], title: str, extension: str
) -> TableOfContents:
    """Return the ordered index of ``pages`` with hrefs using ``extension``."""
    entries = tuple(
        TocEntry(slug=page.slug, title=page.title, href=f"{page.slug}.{extension}")
        for page in pages
    )
    return TableOfContents(title=title, entries=entries)


def resolve_page_reference(
    target: str | None, page: Page, slugs_by_name: cabc.Mapping[str, str]
) -> PageReference | None:
    """Resolve a link target written in page prose.

    Parameters
    ----------
    target : str or None
        Raw ``href`` as written in the Markdown source.
    page : Page
        The page containing the link; supplies ``@next``/``@previous``.
    slugs_by_name : Mapping[str, str]
        Page names (as used in the manifest) mapped to slugs.

    Returns
    -------
    PageReference or None
        ``None`` when ``target`` is not a page reference (external URL,
        fragment-only link, unknown relative path). A reference whose target
        does not exist, such as ``@next`` on the last page, resolves to a
        ``PageReference`` with ``slug=None``.
    """
    if not target or target.startswith(("#", "//")) or "://" in target:
        return None
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc:
        return None

    path = unquote(parsed.path)
    if path == NEXT_REFERENCE:
        return PageReference(page.next.slug if page.next else None, parsed.fragment)
    if path == PREVIOUS_REFERENCE:
        slug = page.previous.slug if page.previous else None
        return PageReference(slug, parsed.fragment)
    if path in slugs_by_name:
        return PageReference(slugs_by_name[path], parsed.fragment)
    return None


__all__ = [
    "NEXT_REFERENCE",
    "PREVIOUS_REFERENCE",
    "PageReference",
    "build_table_of_contents",
    "link_pages",
    "resolve_page_reference",
]
