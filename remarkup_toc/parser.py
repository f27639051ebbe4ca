"""Header block recognition for remarkup documents."""

from __future__ import annotations

from .constants import (
    BLANK_CHARACTERS,
    MAX_HEADER_LEVEL,
    SETEXT_HEADER_PATTERN,
    SINGLE_LINE_HEADER_PATTERN,
)
from .models import Heading, HeaderState, HeadingMatch
from .text import split_lines


def _is_blank(line: str) -> bool:
    return not line.strip(BLANK_CHARACTERS)


def match_header(lines: list[str], cursor: int) -> HeadingMatch:
    """Determine whether the lines at `cursor` form a header.

    A header is either one line starting with one to five ``=`` characters,
    or a title line followed by an underline of two or more ``=`` or ``-``
    characters. Blank lines directly after a header belong to it.

    Args:
        lines: Document lines with their line endings retained, as produced
            by `split_lines`.
        cursor: Zero-based index of the first candidate line.

    Returns:
        HeadingMatch: The matched form and the number of lines consumed,
            including absorbed blank lines. ``line_count`` is 0 when the
            lines do not form a header.

    Examples:
        match_header(["== Usage\\n", "\\n", "text\\n"], 0)  # SINGLE_LINE, 2 lines
        match_header(["Title\\n", "-----\\n"], 0)  # SETEXT, 2 lines
    """
    if not 0 <= cursor < len(lines):
        return HeadingMatch()

    if SINGLE_LINE_HEADER_PATTERN.match(lines[cursor]):
        state = HeaderState.SINGLE_LINE
        line_count = 1
    elif cursor + 1 < len(lines) and SETEXT_HEADER_PATTERN.match(
        lines[cursor] + lines[cursor + 1]
    ):
        state = HeaderState.SETEXT
        line_count = 2
    else:
        return HeadingMatch()

    cursor += line_count
    while cursor < len(lines) and _is_blank(lines[cursor]):
        line_count += 1
        cursor += 1

    return HeadingMatch(state=state, line_count=line_count)


def get_matching_line_count(lines: list[str], cursor: int) -> int:
    """Return how many lines the header rule claims at `cursor` (0 for none)."""
    return match_header(lines, cursor).line_count


def parse_heading(text: str) -> Heading:
    """Split a matched header block into its level and body text.

    Underlined headers are level 1 for ``=`` and level 2 for ``-``. Single
    line headers take their level from the number of leading ``=``
    characters, at most five, and lose their ``=`` decoration on both ends.

    Examples:
        parse_heading("=== Install ===")  # Heading(level=3, text="Install", ...)
        parse_heading("Title\\n-----\\n\\n")  # Heading(level=2, text="Title", ...)
    """
    text = text.strip(BLANK_CHARACTERS)
    lines = split_lines(text)

    if len(lines) > 1:
        level = 1 if lines[1].startswith("=") else 2
        return Heading(level=level, text=lines[0].strip(BLANK_CHARACTERS), state=HeaderState.SETEXT)

    level = 0
    for character in text[:MAX_HEADER_LEVEL]:
        if character != "=":
            break
        level += 1

    return Heading(level=level, text=text.strip(" ="), state=HeaderState.SINGLE_LINE)


def find_headings(content: str) -> list[Heading]:
    """Walk a document and return every header in order.

    Lines that do not start a header are skipped one at a time.

    Examples:
        find_headings("= Title =\\n\\nBody\\n\\n== Usage ==\\n")
    """
    lines = split_lines(content)
    headings = []
    cursor = 0
    while cursor < len(lines):
        line_count = get_matching_line_count(lines, cursor)
        if line_count:
            headings.append(parse_heading("".join(lines[cursor : cursor + line_count])))
            cursor += line_count
        else:
            cursor += 1
    return headings
