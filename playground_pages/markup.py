r"""Split raw page text into ordered prose and code blocks.

Two delimiter syntaxes are understood. Playground pages keep code as the
default region and mark prose with ``/*: ... */`` comments or ``//:`` lines.
Fenced pages are the reverse: prose by default, with code between Markdown
backtick fences.

Extraction is lenient. A delimiter left open at the end of the input closes
implicitly and whatever follows it becomes a final :class:`ProseBlock`;
:func:`scan_blocks` reports the line of the dangling delimiter so callers that
want strictness can reject the page.

Example
-------
>>> from playground_pages.markup import PLAYGROUND_SYNTAX, extract_blocks
>>> blocks = extract_blocks("/*:\n ## Intro\n*/\nlet x = 1\n", PLAYGROUND_SYNTAX)
>>> [type(block).__name__ for block in blocks]
['ProseBlock', 'CodeBlock']
>>> blocks[1].source
'let x = 1'
"""

from __future__ import annotations

import dataclasses as dc
import re
import textwrap

from .models import Block, CodeBlock, ProseBlock

FENCE_OPEN_PATTERN = re.compile(r"^[ ]{0,3}(`{3,})[ \t]*([A-Za-z0-9_+#.-]*)[^`]*$")
FENCE_CLOSE_PATTERN = re.compile(r"^[ ]{0,3}(`{3,})[ \t]*$")


@dc.dataclass(frozen=True, slots=True)
class MarkupSyntax:
    """Delimiters that toggle a page between prose and code regions.

    Attributes
    ----------
    name : str
        Identifier used in ``book.yaml`` (``syntax: playground``).
    prose_open, prose_close : str or None
        Markers around a multi-line prose region (playground syntax).
    prose_line : str or None
        Prefix that turns a single line into prose (playground syntax).
    code_fence : str or None
        Fence character for code regions (fenced syntax).
    """

    name: str
    prose_open: str | None = None
    prose_close: str | None = None
    prose_line: str | None = None
    code_fence: str | None = None


PLAYGROUND_SYNTAX = MarkupSyntax(
    name="playground", prose_open="/*:", prose_close="*/", prose_line="//:"
)
FENCED_SYNTAX = MarkupSyntax(name="fenced", code_fence="`")
SYNTAXES: dict[str, MarkupSyntax] = {
    PLAYGROUND_SYNTAX.name: PLAYGROUND_SYNTAX,
    FENCED_SYNTAX.name: FENCED_SYNTAX,
}


@dc.dataclass(slots=True)
class Extraction:
    """Blocks found in a page plus the line of any unclosed delimiter."""

    blocks: list[Block]
    unterminated_line: int | None = None


def get_syntax(name: str) -> MarkupSyntax:
    """Return the syntax registered under ``name``."""
    try:
        return SYNTAXES[name]
    except KeyError as exc:
        available = ", ".join(sorted(SYNTAXES))
        msg = f"Unknown markup syntax '{name}'. Known syntaxes: {available}"
        raise ValueError(msg) from exc


def extract_blocks(
    text: str, syntax: MarkupSyntax, language: str = "text"
) -> list[Block]:
    """Return the ordered blocks of ``text`` without reporting leniency."""
    return scan_blocks(text, syntax, language).blocks


def scan_blocks(text: str, syntax: MarkupSyntax, language: str = "text") -> Extraction:
    """Split ``text`` into blocks according to ``syntax``.

    Parameters
    ----------
    text : str
        Raw page source.
    syntax : MarkupSyntax
        Delimiter rules to apply.
    language : str, optional
        Language tag for code blocks that do not declare their own.

    Returns
    -------
    Extraction
        Blocks in source order. ``unterminated_line`` holds the 1-based line
        number of a delimiter that was never closed, otherwise ``None``.
    """
    lines = split_lines(text)
    if syntax.code_fence:
        return _scan_fenced(lines, syntax.code_fence, language)
    return _scan_playground(lines, syntax, language)


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` and ``\\r\\n`` only.

    Other characters :meth:`str.splitlines` treats as breaks (form feed,
    U+2028 and friends) stay inside their line.
    """
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and not lines[-1]:
        lines.pop()
    return lines


def _prose(lines: list[str]) -> ProseBlock | None:
    body = textwrap.dedent("\n".join(lines)).strip()
    return ProseBlock(body) if body else None


def _code(lines: list[str], language: str) -> CodeBlock | None:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    if start == end:
        return None
    return CodeBlock("\n".join(lines[start:end]), language or "text")


class _BlockSink:
    """Collect blocks, skipping empty regions."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []

    def prose(self, lines: list[str]) -> None:
        block = _prose(lines)
        if block is not None:
            self.blocks.append(block)
        lines.clear()

    def code(self, lines: list[str], language: str) -> None:
        block = _code(lines, language)
        if block is not None:
            self.blocks.append(block)
        lines.clear()


def _scan_playground(
    lines: list[str], syntax: MarkupSyntax, language: str
) -> Extraction:
    opener = syntax.prose_open or "/*:"
    closer = syntax.prose_close or "*/"
    line_marker = syntax.prose_line
    sink = _BlockSink()
    code: list[str] = []
    prose: list[str] = []
    state = "code"
    open_line: int | None = None

    for number, line in enumerate(lines, start=1):
        stripped = line.lstrip()
        if state == "prose":
            if closer in line:
                head, _, tail = line.partition(closer)
                prose.append(head)
                sink.prose(prose)
                state = "code"
                open_line = None
                if tail.strip():
                    code.append(tail)
            else:
                prose.append(line)
            continue

        if state == "line" and not (line_marker and stripped.startswith(line_marker)):
            sink.prose(prose)
            state = "code"

        if line_marker and stripped.startswith(line_marker):
            if state == "code":
                sink.code(code, language)
                state = "line"
            prose.append(stripped[len(line_marker) :])
        elif stripped.startswith(opener):
            sink.code(code, language)
            rest = stripped[len(opener) :]
            if closer in rest:
                head, _, tail = rest.partition(closer)
                sink.prose([head])
                if tail.strip():
                    code.append(tail)
            else:
                prose.append(rest)
                state = "prose"
                open_line = number
        else:
            code.append(line)

    if prose:
        sink.prose(prose)
    sink.code(code, language)
    return Extraction(blocks=sink.blocks, unterminated_line=open_line)


def _scan_fenced(lines: list[str], fence_char: str, language: str) -> Extraction:
    sink = _BlockSink()
    prose: list[str] = []
    code: list[str] = []
    fence_len = 0
    code_language = language
    open_line: int | None = None

    for number, line in enumerate(lines, start=1):
        if open_line is None:
            match = FENCE_OPEN_PATTERN.match(line)
            if match and match.group(1)[0] == fence_char:
                sink.prose(prose)
                fence_len = len(match.group(1))
                code_language = match.group(2) or language
                open_line = number
                code.append(line)
            else:
                prose.append(line)
            continue

        match = FENCE_CLOSE_PATTERN.match(line)
        if match and len(match.group(1)) >= fence_len:
            sink.code(code[1:], code_language)
            code.clear()
            open_line = None
        else:
            code.append(line)

    if open_line is not None:
        # Unclosed fence: the fence line and everything after it stay prose.
        prose.extend(code)
    sink.prose(prose)
    return Extraction(blocks=sink.blocks, unterminated_line=open_line)


def longest_backtick_run(text: str) -> int:
    """Return the length of the longest run of backticks in ``text``."""
    runs = re.findall(r"`+", text)
    return max((len(run) for run in runs), default=0)


__all__ = [
    "FENCED_SYNTAX",
    "PLAYGROUND_SYNTAX",
    "FENCE_OPEN_PATTERN",
    "SYNTAXES",
    "Extraction",
    "MarkupSyntax",
    "extract_blocks",
    "get_syntax",
    "longest_backtick_run",
    "scan_blocks",
    "split_lines",
]
