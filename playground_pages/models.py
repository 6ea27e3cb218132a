"""Dataclasses and errors shared across the playground rendering pipeline.

Pages are created once by the loader and never mutated afterwards; the
navigation linker produces new :class:`Page` values via
:func:`dataclasses.replace` instead of annotating in place.

Example
-------
>>> from playground_pages.models import CodeBlock, Page, ProseBlock
>>> page = Page(
...     name="Intro",
...     slug="intro",
...     title="Intro",
...     blocks=(ProseBlock("Hello"), CodeBlock("print(1)", "python")),
... )
>>> [type(block).__name__ for block in page.blocks]
['ProseBlock', 'CodeBlock']
"""

from __future__ import annotations

import dataclasses as dc


class PlaygroundPagesError(Exception):
    """Base class for failures tied to a specific page."""

    def __init__(self, page: str, reason: str) -> None:
        super().__init__(f"{page}: {reason}")
        self.page = page
        self.reason = reason


class LoadError(PlaygroundPagesError):
    """Raised when a page is missing or its source is malformed."""


class RenderError(PlaygroundPagesError):
    """Raised when a page cannot be rendered or written."""


class BookConfigError(ValueError):
    """Raised when the book manifest is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class ProseBlock:
    """Narrative Markdown text between code snippets."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class CodeBlock:
    """A code snippet with its exact whitespace and a language tag.

    Attributes
    ----------
    source : str
        Snippet text; indentation and interior blank lines are preserved.
    language : str
        Pygments lexer name used when highlighting (``"text"`` if unknown).
    """

    source: str
    language: str = "text"


Block = ProseBlock | CodeBlock


@dc.dataclass(frozen=True, slots=True)
class NavLink:
    """Reference to a neighbouring page."""

    slug: str
    title: str


@dc.dataclass(frozen=True, slots=True)
class Page:
    """One tutorial unit: a title and its ordered blocks.

    Attributes
    ----------
    name : str
        Identifier used by the manifest and by in-prose page links.
    slug : str
        Unique filesystem-safe identifier; output files are ``<slug>.<ext>``.
    title : str
        Display title.
    blocks : tuple[Block, ...]
        Prose and code blocks in source order.
    previous, next : NavLink or None
        Neighbours assigned by :func:`playground_pages.navigation.link_pages`.
    """

    name: str
    slug: str
    title: str
    blocks: tuple[Block, ...]
    previous: NavLink | None = None
    next: NavLink | None = None

    @property
    def code_blocks(self) -> list[CodeBlock]:
        """Return the page's code blocks in order."""
        return [block for block in self.blocks if isinstance(block, CodeBlock)]


@dc.dataclass(frozen=True, slots=True)
class TocEntry:
    slug: str
    title: str
    href: str


@dc.dataclass(frozen=True, slots=True)
class TableOfContents:
    """Ordered index of every page in a book."""

    title: str
    entries: tuple[TocEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)


@dc.dataclass(frozen=True, slots=True)
class SourceDocument:
    """In-memory page source accepted by the loader in place of a directory."""

    name: str
    text: str
    title: str | None = None
    language: str | None = None


__all__ = [
    "Block",
    "BookConfigError",
    "CodeBlock",
    "LoadError",
    "NavLink",
    "Page",
    "PlaygroundPagesError",
    "ProseBlock",
    "RenderError",
    "SourceDocument",
    "TableOfContents",
    "TocEntry",
]
