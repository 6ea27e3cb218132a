"""Shared fixtures building small playground books on disk."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

INTRO_SOURCE = """/*:
 # Intro

 Welcome to the playground. Start with the [details](Details).

 [Next >](@next)
 */
let greeting = "Hello"
print(greeting)
"""

DETAILS_SOURCE = """/*:
 [< Previous](@previous)           [Home](Intro)           [Next >](@next)

 ## Details
 Raw strings keep quotes as-is:
*/
    let rain = #"The "rain" in "Spain" & <more>"#

    let answer = 42
/*:
 Done. See the [Swift site](https://swift.org).
*/
"""


def write_playground(
    root: Path,
    pages: typ.Mapping[str, str],
    *,
    order: typ.Sequence[str] | None = None,
) -> Path:
    """Write an Xcode-style playground bundle and return its root.

    Parameters
    ----------
    root : Path
        Directory that becomes the playground root.
    pages : Mapping[str, str]
        Page names mapped to ``Contents.swift`` text.
    order : Sequence[str], optional
        Names listed in ``contents.xcplayground``; no manifest is written when
        ``None``.
    """
    pages_dir = root / "Pages"
    pages_dir.mkdir(parents=True, exist_ok=True)
    for name, text in pages.items():
        bundle = pages_dir / f"{name}.xcplaygroundpage"
        bundle.mkdir()
        (bundle / "Contents.swift").write_text(text, encoding="utf-8")
    if order is not None:
        entries = "\n".join(f"        <page name='{name}'/>" for name in order)
        (root / "contents.xcplayground").write_text(
            "<?xml version='1.0' encoding='UTF-8' standalone='yes'?>\n"
            "<playground version='6.0' target-platform='ios'>\n"
            "    <pages>\n"
            f"{entries}\n"
            "    </pages>\n"
            "</playground>\n",
            encoding="utf-8",
        )
    return root


@pytest.fixture
def make_playground() -> typ.Callable[..., Path]:
    """Return the playground writer so tests can build custom books."""
    return write_playground


@pytest.fixture
def playground_book(tmp_path: Path) -> Path:
    """Return a two-page playground ordered Intro, Details."""
    return write_playground(
        tmp_path / "Demo.playground",
        {"Details": DETAILS_SOURCE, "Intro": INTRO_SOURCE},
        order=["Intro", "Details"],
    )
