"""High-level orchestration for rendering a playground book to disk.

:class:`SiteBuilder` runs the whole pipeline in one linear pass: load the
pages (which extracts their blocks), link neighbours, render every page in the
requested format, and write one document per page plus ``index.<ext>``.

Pages are independent once linked, so rendering can be spread over a thread
pool; the written files are the same whatever the worker count.

Example
-------
>>> from pathlib import Path
>>> from playground_pages.render import SiteBuilder
>>> report = SiteBuilder(Path("book"), Path("public")).run()  # doctest: +SKIP
>>> [path.name for path in report.written]  # doctest: +SKIP
['introduction.html', 'raw-strings.html', 'index.html']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from playground_pages._constants import INDEX_SLUG
from playground_pages.config import BookConfig, discover_book_config
from playground_pages.loader import load_pages
from playground_pages.models import (
    LoadError,
    Page,
    PlaygroundPagesError,
    RenderError,
    SourceDocument,
    TableOfContents,
)
from playground_pages.navigation import build_table_of_contents, link_pages
from playground_pages.render.formats import PageRenderer, get_renderer

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildReport:
    """Files written by a build and the page failures it skipped."""

    written: list[Path] = dc.field(default_factory=list)
    errors: list[PlaygroundPagesError] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class SiteBuilder:
    """Render a book's pages and index into an output directory."""

    def __init__(
        self,
        source: Path | cabc.Iterable[SourceDocument],
        output_dir: Path,
        *,
        config: BookConfig | None = None,
        fmt: str | None = None,
        strict: bool = False,
        keep_going: bool = False,
        jobs: int = 1,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        source : Path or Iterable[SourceDocument]
            Book directory or in-memory page documents.
        output_dir : Path
            Directory receiving the rendered documents; created if missing.
        config : BookConfig, optional
            Book configuration; discovered from ``source`` when omitted.
        fmt : str, optional
            Output format overriding ``config.format``.
        strict : bool, optional
            Reject pages with unterminated block markers.
        keep_going : bool, optional
            Continue past per-page failures and report them instead of
            aborting on the first one.
        jobs : int, optional
            Number of rendering threads.
        templates_dir : Path, optional
            Override for the Jinja templates directory.
        """
        if config is None:
            if isinstance(source, Path):
                config = discover_book_config(source) if source.is_dir() else None
            config = config or BookConfig(title="Playground")
        self.source = source
        self.output_dir = output_dir
        self.config = config
        self.fmt = fmt or config.format
        self.strict = strict
        self.keep_going = keep_going
        self.jobs = max(1, jobs)
        self.templates_dir = templates_dir

    def run(self) -> BuildReport:
        """Render every page and the index, returning what was written.

        Returns
        -------
        BuildReport
            Written paths in page order with the index last, plus the
            failures skipped in keep-going mode.

        Raises
        ------
        RenderError
            If the output format is unsupported, or (without ``keep_going``)
            a page cannot be rendered or written.
        LoadError
            If the source has no pages, or (without ``keep_going``) a page is
            missing or malformed.
        """
        renderer = get_renderer(self.fmt, self.config, templates_dir=self.templates_dir)
        loaded = load_pages(
            self.source, self.config, strict=self.strict, keep_going=self.keep_going
        )
        report = BuildReport(errors=list(loaded.errors))
        if not loaded.pages and not loaded.errors:
            raise LoadError(self._source_label(), "no pages found")

        pages = link_pages(loaded.pages)
        toc = build_table_of_contents(pages, self.config.title, renderer.extension)
        slugs_by_name = {page.name: page.slug for page in pages}
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            reason = f"cannot create {self.output_dir} ({exc.strerror or exc})"
            raise RenderError(INDEX_SLUG, reason) from exc

        def _render(page: Page) -> Path | RenderError:
            try:
                return self._write_page(renderer, page, toc, slugs_by_name)
            except RenderError as exc:
                if not self.keep_going:
                    raise
                logger.warning("skipping page %s", exc)
                return exc

        if self.jobs > 1 and len(pages) > 1:
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                outcomes = list(executor.map(_render, pages))
        else:
            outcomes = [_render(page) for page in pages]

        for outcome in outcomes:
            if isinstance(outcome, RenderError):
                report.errors.append(outcome)
            else:
                report.written.append(outcome)

        index_path = self.output_dir / renderer.index_filename
        self._write(index_path, renderer.render_index(toc), INDEX_SLUG)
        report.written.append(index_path)
        rendered = len(report.written) - 1
        logger.info("rendered %d of %d pages to %s", rendered, len(pages), self.output_dir)
        return report

    def _write_page(
        self,
        renderer: PageRenderer,
        page: Page,
        toc: TableOfContents,
        slugs_by_name: cabc.Mapping[str, str],
    ) -> Path:
        document = renderer.render_page(page, toc, slugs_by_name)
        path = self.output_dir / f"{page.slug}.{renderer.extension}"
        self._write(path, document, page.name)
        logger.debug("wrote page %s to %s", page.name, path)
        return path

    @staticmethod
    def _write(path: Path, document: str, page_id: str) -> None:
        try:
            path.write_text(document, encoding="utf-8")
        except OSError as exc:
            reason = f"cannot write {path} ({exc.strerror or exc})"
            raise RenderError(page_id, reason) from exc

    def _source_label(self) -> str:
        if isinstance(self.source, Path):
            return str(self.source)
        return self.config.title


__all__ = ["BuildReport", "SiteBuilder"]
