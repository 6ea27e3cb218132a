"""Behaviour tests for previous/next navigation between rendered pages.

The scenarios in ``page_navigation.feature`` build a two-page playground on
disk, render it through :class:`SiteBuilder`, and inspect the navigation
anchors of each written document with BeautifulSoup.

Usage
-----
Run ``pytest tests/bdd/test_page_navigation.py -v`` after installing the test
extra (``pip install -e .[test]``).
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from playground_pages.render import SiteBuilder

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "page_navigation.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _soup(scenario_state: dict[str, object], slug: str) -> BeautifulSoup:
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    html = (output_dir / f"{slug}.html").read_text(encoding="utf-8")
    return BeautifulSoup(html, "html.parser")


@given(parsers.parse('a playground with pages "{first}" and "{second}"'))
def given_playground(
    tmp_path: Path,
    make_playground: typ.Callable[..., Path],
    scenario_state: dict[str, object],
    first: str,
    second: str,
) -> None:
    """Write a playground bundle listing ``first`` then ``second``."""
    book = make_playground(
        tmp_path / "Nav.playground",
        {
            first: f"/*:\n # {first}\n */\nlet one = 1\n",
            second: f"//: # {second}\nlet two = 2\n",
        },
        order=[first, second],
    )
    scenario_state["book"] = book


@when("I render the playground as html")
def when_render(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Render the playground into a fresh output directory."""
    output_dir = tmp_path / "public"
    book = typ.cast("Path", scenario_state["book"])
    report = SiteBuilder(book, output_dir, fmt="html").run()
    assert report.ok
    scenario_state["output_dir"] = output_dir


@then(parsers.parse('the "{slug}" page links next to "{href}"'))
def then_next_link(scenario_state: dict[str, object], slug: str, href: str) -> None:
    anchor = _soup(scenario_state, slug).select_one('a[rel="next"]')
    assert anchor is not None, f"expected a next link on {slug}"
    assert anchor["href"] == href


@then(parsers.parse('the "{slug}" page links previous to "{href}"'))
def then_previous_link(scenario_state: dict[str, object], slug: str, href: str) -> None:
    anchor = _soup(scenario_state, slug).select_one('a[rel="prev"]')
    assert anchor is not None, f"expected a previous link on {slug}"
    assert anchor["href"] == href


@then(parsers.parse('the "{slug}" page has no previous link'))
def then_no_previous(scenario_state: dict[str, object], slug: str) -> None:
    assert _soup(scenario_state, slug).select_one('a[rel="prev"]') is None


@then(parsers.parse('the "{slug}" page has no next link'))
def then_no_next(scenario_state: dict[str, object], slug: str) -> None:
    assert _soup(scenario_state, slug).select_one('a[rel="next"]') is None


@then(parsers.parse('the index lists "{first}" before "{second}"'))
def then_index_order(scenario_state: dict[str, object], first: str, second: str) -> None:
    """Verify the table of contents keeps manifest order."""
    titles = [a.get_text(strip=True) for a in _soup(scenario_state, "index").select("ol.toc a")]
    assert titles == [first, second]
