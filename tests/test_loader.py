"""Tests for loading playground pages from directories and documents."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from playground_pages.config import BookConfig
from playground_pages.loader import load_pages, slugify
from playground_pages.models import (
    BookConfigError,
    CodeBlock,
    LoadError,
    ProseBlock,
    SourceDocument,
)


def test_manifest_order_is_kept(playground_book: Path) -> None:
    """Pages follow contents.xcplayground rather than directory order."""
    result = load_pages(playground_book)
    assert [page.name for page in result.pages] == ["Intro", "Details"]
    assert [page.slug for page in result.pages] == ["intro", "details"]
    assert result.errors == []


def test_titles_come_from_first_heading(playground_book: Path) -> None:
    result = load_pages(playground_book)
    assert [page.title for page in result.pages] == ["Intro", "Details"]


def test_blocks_keep_source_order(playground_book: Path) -> None:
    details = load_pages(playground_book).pages[1]
    assert [type(block) for block in details.blocks] == [
        ProseBlock,
        CodeBlock,
        ProseBlock,
    ]
    assert details.code_blocks[0].language == "swift"
    assert details.code_blocks[0].source.startswith("    let rain = ")


def test_book_yaml_overrides_titles_and_reads_flat_files(tmp_path: Path) -> None:
    """book.yaml supplies order, titles, and language for flat page files."""
    pages_dir = tmp_path / "Pages"
    pages_dir.mkdir()
    (pages_dir / "first.py").write_text("//: # Heading\nprint(1)\n", encoding="utf-8")
    (pages_dir / "second.py").write_text("print(2)\n", encoding="utf-8")
    (tmp_path / "book.yaml").write_text(
        "title: Python Tour\n"
        "language: python\n"
        "pages:\n"
        "  - second\n"
        "  - name: first\n"
        "    title: The First Page\n",
        encoding="utf-8",
    )
    result = load_pages(tmp_path)
    assert [page.title for page in result.pages] == ["second", "The First Page"]
    assert result.pages[0].blocks == (CodeBlock("print(2)", "python"),)


def test_pages_are_discovered_without_manifest(
    tmp_path: Path, make_playground: typ.Callable[..., Path]
) -> None:
    """Without a manifest, bundles are ordered by name."""
    make_playground(tmp_path, {"beta": "let b = 2", "Alpha": "let a = 1"})
    result = load_pages(tmp_path)
    assert [page.name for page in result.pages] == ["Alpha", "beta"]


def test_page_names_with_glob_characters(tmp_path: Path) -> None:
    """Names such as ``try?`` resolve to their own flat files."""
    (tmp_path / "Flattening try?.swift").write_text("let x = try? f()", encoding="utf-8")
    (tmp_path / "book.yaml").write_text(
        "pages:\n  - 'Flattening try?'\n", encoding="utf-8"
    )
    result = load_pages(tmp_path)
    assert result.pages[0].slug == "flattening-try"


def test_missing_page_raises_load_error(
    playground_book: Path, make_playground: typ.Callable[..., Path]
) -> None:
    """A manifest entry without a source names the page in the error."""
    make_playground(playground_book, {}, order=["Intro", "Missing", "Details"])
    with pytest.raises(LoadError) as excinfo:
        load_pages(playground_book)
    assert excinfo.value.page == "Missing"
    assert str(excinfo.value) == "Missing: page source not found"


def test_keep_going_skips_failed_pages(
    playground_book: Path, make_playground: typ.Callable[..., Path]
) -> None:
    make_playground(playground_book, {}, order=["Intro", "Missing", "Details"])
    result = load_pages(playground_book, keep_going=True)
    assert [page.name for page in result.pages] == ["Intro", "Details"]
    assert [error.page for error in result.errors] == ["Missing"]


def test_missing_source_directory(tmp_path: Path) -> None:
    with pytest.raises(LoadError, match="content source directory not found"):
        load_pages(tmp_path / "nope")


def test_strict_mode_rejects_unterminated_markers() -> None:
    document = SourceDocument("Broken", "let a = 1\n\n/*:\n dangling prose\n")
    lenient = load_pages([document])
    assert isinstance(lenient.pages[0].blocks[-1], ProseBlock)
    with pytest.raises(LoadError) as excinfo:
        load_pages([document], strict=True)
    assert excinfo.value.page == "Broken"
    assert "unterminated block marker opened on line 3" in str(excinfo.value)


def test_empty_page_is_malformed() -> None:
    with pytest.raises(LoadError, match="Blank: page is empty"):
        load_pages([SourceDocument("Blank", "  \n\n")])


def test_invalid_utf8_is_malformed(tmp_path: Path) -> None:
    (tmp_path / "Bad.swift").write_bytes(b"let a = \xff\xfe\n")
    with pytest.raises(LoadError, match="not valid UTF-8"):
        load_pages(tmp_path)


def test_duplicate_names_are_rejected() -> None:
    documents = [SourceDocument("A", "let a = 1"), SourceDocument("A", "let b = 2")]
    with pytest.raises(LoadError, match="A: duplicate page name"):
        load_pages(documents)


def test_unknown_syntax_is_a_config_error() -> None:
    config = BookConfig(title="Book", syntax="rst")
    with pytest.raises(BookConfigError):
        load_pages([SourceDocument("A", "text")], config)


def test_slugs_are_unique_and_reserve_index() -> None:
    documents = [
        SourceDocument("Index", "let a = 1"),
        SourceDocument("A b", "let b = 2"),
        SourceDocument("A-b", "let c = 3"),
    ]
    slugs = [page.slug for page in load_pages(documents).pages]
    assert slugs == ["index-2", "a-b", "a-b-2"]


def test_title_falls_back_to_name() -> None:
    page = load_pages([SourceDocument("Plain Page", "let a = 1")]).pages[0]
    assert page.title == "Plain Page"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Raw strings", "raw-strings"),
        ("Introdução", "introducao"),
        ("Flattening nested optionals resulting from try?", "flattening-nested-optionals-resulting-from-try"),
        ("???", "page"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected


def test_discovery_skips_files_without_extension(tmp_path: Path) -> None:
    """Files such as ``LICENSE`` beside flat pages are not treated as pages."""
    (tmp_path / "Intro.swift").write_text("let a = 1\n", encoding="utf-8")
    (tmp_path / "LICENSE").write_text("MIT License\n", encoding="utf-8")
    result = load_pages(tmp_path)
    assert [page.name for page in result.pages] == ["Intro"]
    assert result.errors == []
