"""Cyclopts CLI entrypoint for rendering playground books.

The ``playground-pages`` console script renders a book directory into one
document per page plus an index, in HTML or plain text. Options can also be
supplied through ``PLAYGROUND_PAGES_*`` environment variables, which keeps CI
invocations short.

Examples
--------
Render a playground into ``public`` as HTML:

>>> from playground_pages.cli import app
>>> app(["Whats-New.playground", "public"])  # doctest: +SKIP

Render plain text, continuing past broken pages:

>>> app(["book", "dist", "--format", "text", "--keep-going"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .models import BookConfigError, PlaygroundPagesError
from .render import SiteBuilder

app = App(
    name="playground-pages",
    help="Render annotated code playground pages into static documents.",
    config=cyclopts.config.Env("PLAYGROUND_PAGES_", command=False),  # type: ignore[unknown-argument]
)


def setup_logging(*, verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _fail(errors: typ.Iterable[object]) -> typ.NoReturn:
    for error in errors:
        print(f"error: {error}", file=sys.stderr)
    raise SystemExit(1)


@app.default
def build(
    input_path: typ.Annotated[
        Path, Parameter(help="Book directory containing the pages")
    ],
    output_dir: typ.Annotated[
        Path, Parameter(help="Directory receiving the rendered documents")
    ],
    /,
    *,
    format: typ.Annotated[  # noqa: A002
        str | None, Parameter(help="Output format: html or text")
    ] = None,
    strict: typ.Annotated[
        bool, Parameter(help="Reject pages with unterminated block markers")
    ] = False,
    keep_going: typ.Annotated[
        bool, Parameter(help="Render remaining pages after a page fails")
    ] = False,
    jobs: typ.Annotated[int, Parameter(help="Number of rendering threads")] = 1,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Render every page of a book plus its index.

    Parameters
    ----------
    input_path : Path
        Book directory (``book.yaml``, ``contents.xcplayground``, or bare
        page sources).
    output_dir : Path
        Destination directory; created when missing.
    format : str or None, optional
        ``html`` or ``text``; defaults to the book's configured format.
    strict : bool, optional
        Treat an unclosed block delimiter as a load error.
    keep_going : bool, optional
        Report per-page failures at the end instead of stopping at the first.
    jobs : int, optional
        Render pages on this many threads.
    verbose : bool, optional
        Log debug detail for every loaded and written page.

    Raises
    ------
    SystemExit
        With status 1 when any page fails to load or render, or the book
        manifest is invalid.
    """
    setup_logging(verbose=verbose)
    try:
        report = SiteBuilder(
            input_path,
            output_dir,
            fmt=format,
            strict=strict,
            keep_going=keep_going,
            jobs=jobs,
        ).run()
    except (PlaygroundPagesError, BookConfigError, FileNotFoundError) as exc:
        _fail([exc])

    for path in report.written:
        print(f"wrote {_format_path(path)}")
    if not report.ok:
        _fail(report.errors)


def main() -> None:
    """Invoke the Cyclopts application behind the ``playground-pages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
