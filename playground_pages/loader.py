"""Load playground pages from a book directory or in-memory documents.

The loader resolves the manifest order, reads each page source, runs the
snippet extractor over it, and returns immutable :class:`Page` values in
navigation order. It only ever reads from the source.

Page sources are looked up under the book's pages directory as either an
Xcode bundle (``<name>.xcplaygroundpage/Contents.swift``) or a flat file
(``<name>.swift``, ``<name>.md``...).

Example
-------
>>> from playground_pages.loader import load_pages
>>> from playground_pages.models import SourceDocument
>>> result = load_pages([SourceDocument("Intro", "/*:\\n# Intro\\n*/\\nlet a = 1")])
>>> [page.slug for page in result.pages]
['intro']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import glob
import logging
import re
import unicodedata
from pathlib import Path

from ._constants import (
    BOOK_MANIFEST,
    INDEX_SLUG,
    PAGE_BUNDLE_CONTENTS,
    PAGE_BUNDLE_SUFFIX,
    PLAYGROUND_MANIFEST,
)
from .config import BookConfig, discover_book_config
from .markup import MarkupSyntax, get_syntax, scan_blocks
from .models import BookConfigError, LoadError, Page, ProseBlock, SourceDocument

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^[ ]{0,3}#{1,6}[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
MANIFEST_NAMES = frozenset({BOOK_MANIFEST, PLAYGROUND_MANIFEST})


@dc.dataclass(slots=True)
class LoadResult:
    """Pages loaded in order plus the errors skipped in keep-going mode."""

    pages: list[Page]
    errors: list[LoadError] = dc.field(default_factory=list)


def load_pages(
    source: Path | cabc.Iterable[SourceDocument],
    config: BookConfig | None = None,
    *,
    strict: bool = False,
    keep_going: bool = False,
) -> LoadResult:
    """Load every page of a book in navigation order.

    Parameters
    ----------
    source : Path or Iterable[SourceDocument]
        Book directory, or documents already in memory (used in the given
        order).
    config : BookConfig, optional
        Book configuration; discovered from ``source`` when omitted.
    strict : bool, optional
        Reject pages whose delimiters are left open instead of closing them
        implicitly.
    keep_going : bool, optional
        Record failing pages in :attr:`LoadResult.errors` and skip them
        rather than raising the first :class:`LoadError`.

    Returns
    -------
    LoadResult
        Loaded pages and, in keep-going mode, the skipped failures.

    Raises
    ------
    LoadError
        If the source directory is missing, or (without ``keep_going``) a
        page is missing or malformed.
    """
    if isinstance(source, Path):
        if not source.is_dir():
            raise LoadError(str(source), "content source directory not found")
        config = config or discover_book_config(source)
        documents = _iter_directory(source, config)
    else:
        config = config or BookConfig(title="Playground")
        documents = iter(source)

    try:
        syntax = get_syntax(config.syntax)
    except ValueError as exc:
        raise BookConfigError(str(exc)) from exc

    used_slugs = {INDEX_SLUG}
    seen_names: set[str] = set()
    pages: list[Page] = []
    errors: list[LoadError] = []
    for document in documents:
        try:
            if isinstance(document, LoadError):
                raise document
            if document.name in seen_names:
                raise LoadError(document.name, "duplicate page name")
            seen_names.add(document.name)
            page = _build_page(
                document, config, syntax, strict=strict, used_slugs=used_slugs
            )
        except LoadError as exc:
            if not keep_going:
                raise
            logger.warning("skipping page %s", exc)
            errors.append(exc)
            continue
        logger.debug("loaded page %s (%d blocks)", page.name, len(page.blocks))
        pages.append(page)
    return LoadResult(pages=pages, errors=errors)


def _iter_directory(
    root: Path, config: BookConfig
) -> cabc.Iterator[SourceDocument | LoadError]:
    """Yield documents for each manifest entry, or a LoadError in its place."""
    pages_dir = root / config.pages_dir
    if not pages_dir.is_dir():
        pages_dir = root
    names = [entry.name for entry in config.pages] or _discover_page_names(pages_dir)
    for name in names:
        entry = config.entry(name)
        try:
            text = _read_source(name, _resolve_source_path(pages_dir, name))
        except LoadError as exc:
            yield exc
            continue
        yield SourceDocument(
            name=name,
            text=text,
            title=entry.title if entry else None,
            language=entry.language if entry else None,
        )


def _discover_page_names(pages_dir: Path) -> list[str]:
    """Return page names found in ``pages_dir``, ordered case-insensitively.

    Files without an extension (``LICENSE``, ``Makefile``) are not pages.
    """
    names: set[str] = set()
    for child in pages_dir.iterdir():
        if child.name.startswith(".") or child.name in MANIFEST_NAMES:
            continue
        if child.is_dir() and child.name.endswith(PAGE_BUNDLE_SUFFIX):
            names.add(child.name[: -len(PAGE_BUNDLE_SUFFIX)])
        elif child.is_file() and child.suffix:
            names.add(child.stem)
    return sorted(names, key=str.casefold)


def _resolve_source_path(pages_dir: Path, name: str) -> Path:
    """Return the file holding page ``name`` or raise LoadError."""
    bundle = pages_dir / f"{name}{PAGE_BUNDLE_SUFFIX}"
    if bundle.is_dir():
        candidates = sorted(bundle.glob(f"{PAGE_BUNDLE_CONTENTS}.*"))
    else:
        candidates = sorted(
            path
            for path in pages_dir.glob(f"{glob.escape(name)}.*")
            if path.is_file()
        )
    if not candidates:
        raise LoadError(name, "page source not found")
    return candidates[0]


def _read_source(name: str, path: Path) -> str:
    """Read a page source as UTF-8 text, wrapping IO and decode failures."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise LoadError(name, f"cannot read {path} ({exc.strerror or exc})") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise LoadError(name, f"{path.name} is not valid UTF-8") from exc


def _build_page(
    document: SourceDocument,
    config: BookConfig,
    syntax: MarkupSyntax,
    *,
    strict: bool,
    used_slugs: set[str],
) -> Page:
    """Extract blocks from ``document`` and wrap them in a Page."""
    if not document.text.strip():
        raise LoadError(document.name, "page is empty")
    language = document.language or config.language
    extraction = scan_blocks(document.text, syntax, language)
    if strict and extraction.unterminated_line is not None:
        reason = f"unterminated block marker opened on line {extraction.unterminated_line}"
        raise LoadError(document.name, reason)
    blocks = tuple(extraction.blocks)
    title = document.title or _first_heading(blocks) or document.name
    return Page(
        name=document.name,
        slug=_unique_slug(slugify(document.name), used_slugs),
        title=title,
        blocks=blocks,
    )


def _first_heading(blocks: cabc.Iterable[object]) -> str | None:
    """Return the first Markdown heading found in the prose blocks."""
    for block in blocks:
        if isinstance(block, ProseBlock):
            match = HEADING_PATTERN.search(block.text)
            if match:
                return match.group(1).strip()
    return None


def slugify(name: str) -> str:
    """Convert a page name into a lowercase ASCII hyphen-separated slug."""
    ascii_name = (
        unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    return slug or "page"


def _unique_slug(base: str, used: set[str]) -> str:
    """Generate a unique slug, appending numeric suffixes when needed."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


__all__ = ["LoadResult", "load_pages", "slugify"]
