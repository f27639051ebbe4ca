"""Data models for remarkup-toc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class HeaderState(Enum):
    """Outcome of matching a run of lines against the header syntax.

    Attributes:
        NO_MATCH: The lines do not start a header.
        SINGLE_LINE: A ``== Title`` header on one line.
        SETEXT: A title line underlined with ``=`` or ``-`` on the next line.
    """

    NO_MATCH = auto()
    SINGLE_LINE = auto()
    SETEXT = auto()


class RenderMode(Enum):
    """Output flavour of a render.

    Attributes:
        TEXT: Plain text, headers underlined, no anchors.
        HTML: Structured HTML with anchors and a table of contents.
    """

    TEXT = auto()
    HTML = auto()


@dataclass(frozen=True)
class HeadingMatch:
    """Result of recognizing a header at a cursor.

    Attributes:
        state: Which header form matched, if any.
        line_count: Lines consumed, including trailing blank lines; 0 when
            nothing matched.
    """

    state: HeaderState = HeaderState.NO_MATCH
    line_count: int = 0


@dataclass(frozen=True)
class Heading:
    """A parsed header block.

    Attributes:
        level: Header level, 1 being the most prominent.
        text: Header body with markers and surrounding whitespace removed.
        state: Header form the block was written in.
    """

    level: int
    text: str
    state: HeaderState


@dataclass(frozen=True)
class TocEntry:
    """Table-of-contents record stored per anchor.

    Attributes:
        level: Header level of the entry.
        name: Display name, rendered in ``toc`` state and restored to text.
    """

    level: int
    name: str


@dataclass
class RenderResult:
    """Output of rendering one document.

    Attributes:
        output: Rendered document body.
        toc: Rendered table of contents, or None when none was produced.
        headings: Headings found in the document, in order.
    """

    output: str
    toc: str | None = None
    headings: list[Heading] = field(default_factory=list)
