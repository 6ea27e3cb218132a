"""Render annotated code playground books into static documents.

A book is an ordered set of pages that interleave Markdown prose with code
snippets. This package loads the pages, splits them into prose and code
blocks, links every page to its neighbours, and writes HTML or plain-text
documents plus an index.

Exports
-------
- ``app``: Cyclopts application behind the ``playground-pages`` command.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from playground_pages import app
>>> app(["book", "public", "--format", "text"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
