"""Load book manifests into typed dataclasses.

A book directory is described by ``book.yaml``; Xcode playground bundles
that only carry a ``contents.xcplayground`` manifest are accepted as well,
and a directory with neither falls back to discovering pages by name.
:func:`discover_book_config` applies that precedence and always returns a
:class:`BookConfig` that the loader and renderers consume.

Examples
--------
>>> from pathlib import Path
>>> from playground_pages.config import load_book_config
>>> book = load_book_config(Path("book/book.yaml"))  # doctest: +SKIP
>>> [entry.name for entry in book.pages][:1]  # doctest: +SKIP
['Introduction']
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
import xml.etree.ElementTree as ET
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import (
    BOOK_MANIFEST,
    DEFAULT_FORMAT,
    DEFAULT_LANGUAGE,
    DEFAULT_PAGES_DIR,
    DEFAULT_PYGMENTS_STYLE,
    DEFAULT_SYNTAX,
    PLAYGROUND_MANIFEST,
)
from .models import BookConfigError


@dc.dataclass(slots=True)
class ThemeConfig:
    """Visual copy applied to generated documents."""

    site_name: str = "Playground"
    tagline: str = "Annotated code playground"
    footer_note: str = ""


@dc.dataclass(slots=True)
class PageEntry:
    """A manifest entry naming one page in navigation order."""

    name: str
    title: str | None = None
    language: str | None = None


@dc.dataclass(slots=True)
class BookConfig:
    """A fully resolved book definition.

    Attributes
    ----------
    title : str
        Book title shown on the index document.
    pages : list[PageEntry]
        Ordered page entries; empty when pages are discovered from disk.
    language : str
        Default language tag for code blocks.
    syntax : str
        Markup syntax name (``"playground"`` or ``"fenced"``).
    format : str
        Default output format (``"html"`` or ``"text"``).
    pygments_style : str
        Pygments style used for HTML highlighting.
    pages_dir : str
        Directory, relative to the book root, holding page sources.
    theme : ThemeConfig
        Copy used by the templates.
    """

    title: str
    pages: list[PageEntry] = dc.field(default_factory=list)
    language: str = DEFAULT_LANGUAGE
    syntax: str = DEFAULT_SYNTAX
    format: str = DEFAULT_FORMAT
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    pages_dir: str = DEFAULT_PAGES_DIR
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)

    def entry(self, name: str) -> PageEntry | None:
        """Return the manifest entry for ``name`` if one exists."""
        for candidate in self.pages:
            if candidate.name == name:
                return candidate
        return None


def discover_book_config(root: Path) -> BookConfig:
    """Return the configuration for the book rooted at ``root``.

    ``book.yaml`` wins over ``contents.xcplayground``; with neither present a
    default configuration with no explicit page order is returned.
    """
    book_manifest = root / BOOK_MANIFEST
    if book_manifest.exists():
        return load_book_config(book_manifest)
    playground_manifest = root / PLAYGROUND_MANIFEST
    if playground_manifest.exists():
        return load_playground_manifest(playground_manifest)
    return BookConfig(title=_default_title(root))


def load_book_config(path: Path) -> BookConfig:
    """Load ``book.yaml`` into a :class:`BookConfig`.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML manifest.

    Returns
    -------
    BookConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    BookConfigError
        If the YAML cannot be parsed or is not a mapping, no pages are
        listed, or an entry is malformed.
    """
    if not path.exists():
        msg = f"Book manifest '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"{path}: invalid YAML ({exc})."
        raise BookConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"{path}: top-level YAML structure must be a mapping."
        raise BookConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    pages_raw = raw.get("pages") or []
    if not isinstance(pages_raw, list) or not pages_raw:
        msg = f"{path}: no pages listed in book manifest."
        raise BookConfigError(msg)

    return BookConfig(
        title=str(raw.get("title") or _default_title(path.parent)),
        pages=[_build_page_entry(item, path) for item in pages_raw],
        language=str(raw.get("language", DEFAULT_LANGUAGE)).lower(),
        syntax=str(raw.get("syntax", DEFAULT_SYNTAX)),
        format=str(raw.get("format", DEFAULT_FORMAT)),
        pygments_style=str(raw.get("pygments_style", DEFAULT_PYGMENTS_STYLE)),
        pages_dir=str(raw.get("pages_dir", DEFAULT_PAGES_DIR)),
        theme=_build_theme_config(raw.get("theme") or {}),
    )


def load_playground_manifest(path: Path) -> BookConfig:
    """Build a :class:`BookConfig` from an Xcode ``contents.xcplayground`` file.

    Only the ``<pages>`` ordering is read; playground code is always Swift.
    """
    try:
        root = ET.parse(path).getroot()  # noqa: S314 - local trusted manifest
    except ET.ParseError as exc:
        msg = f"{path}: malformed playground manifest ({exc})."
        raise BookConfigError(msg) from exc

    entries = [
        PageEntry(name=name)
        for element in root.iter("page")
        if (name := (element.get("name") or "").strip())
    ]
    if not entries:
        msg = f"{path}: no pages listed in playground manifest."
        raise BookConfigError(msg)
    return BookConfig(
        title=_default_title(path.parent),
        pages=entries,
        language="swift",
    )


def _build_page_entry(item: object, path: Path) -> PageEntry:
    """Build a PageEntry from a manifest string or mapping."""
    match item:
        case str() as name if name.strip():
            return PageEntry(name=name.strip())
        case dict() if str(item.get("name") or "").strip():
            language = item.get("language")
            return PageEntry(
                name=str(item["name"]).strip(),
                title=_optional_str(item.get("title")),
                language=language.lower() if isinstance(language, str) else None,
            )
        case _:
            msg = f"{path}: invalid page entry {item!r}; expected a name or mapping."
            raise BookConfigError(msg)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig from the provided mapping."""
    base = ThemeConfig()
    return ThemeConfig(
        site_name=payload.get("site_name", base.site_name),
        tagline=payload.get("tagline", base.tagline),
        footer_note=payload.get("footer_note", base.footer_note),
    )


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _default_title(root: Path) -> str:
    """Derive a title from a book directory such as ``Whats-New.playground``."""
    stem = root.resolve().name
    if stem.endswith(".playground"):
        stem = stem[: -len(".playground")]
    return stem.replace("-", " ").replace("_", " ").strip() or "Playground"


__all__ = [
    "BookConfig",
    "PageEntry",
    "ThemeConfig",
    "discover_book_config",
    "load_book_config",
    "load_playground_manifest",
]
