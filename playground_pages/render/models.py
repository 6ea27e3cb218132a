"""Template-facing dataclasses used by the page renderers."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class PageModel:
    """Structured data passed to the page templates.

    Attributes
    ----------
    title : str
        Page title.
    slug : str
        Output identifier of the page.
    position : int
        1-based position of the page in the book.
    total : int
        Number of pages in the book.
    blocks : list[dict[str, str]]
        Rendered blocks in source order; each has ``kind`` (``"prose"`` or
        ``"code"``), ``content`` (HTML or text) and ``language``.
    previous, next : dict[str, str] or None
        Neighbour links with ``title`` and ``href``.
    index_href : str
        Link to the index document.
    """

    title: str
    slug: str
    position: int
    total: int
    blocks: list[dict[str, str]]
    previous: dict[str, str] | None
    next: dict[str, str] | None
    index_href: str


__all__ = ["PageModel"]
