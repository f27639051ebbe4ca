"""Header rendering, anchor generation and table of contents output."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .constants import GENERATE_TOC_OPTION, KEY_HEADER_TOC, MIN_TOC_ENTRIES, TOC_STATE
from .engine import MarkupEngine, SafeHtml, Tag, escape_html, pushed_state
from .models import Heading, RenderMode, TocEntry
from .parser import parse_heading
from .slugify import generate_slug, unique_anchor
from .text import character_length

logger = logging.getLogger(__name__)


def render_text_header(heading: Heading, engine: MarkupEngine) -> str:
    """Render a header as plain text, underlined to the width of its title.

    Level 1 headers are underlined with ``=``, all others with ``-``.

    Examples:
        render_text_header(Heading(1, "Intro", HeaderState.SETEXT), context)
        # "Intro\\n====="
    """
    char = "=" if heading.level == 1 else "-"
    return f"{heading.text}\n{char * character_length(heading.text)}"


def render_html_header(heading: Heading, engine: MarkupEngine) -> Tag:
    """Render a header as an ``h2``-``h6`` element.

    When the ``header.generate-toc`` option is set, the element starts with an
    empty named anchor and the header is recorded for the table of contents.
    """
    anchor = None
    if engine.get_config(GENERATE_TOC_OPTION):
        anchor = generate_anchor(heading.level, heading.text, engine)

    return engine.build_tag(
        f"h{heading.level + 1}",
        {},
        [anchor, engine.apply_rules(heading.text)],
    )


HEADER_RENDERERS: dict[RenderMode, Callable[[Heading, MarkupEngine], str | Tag]] = {
    RenderMode.TEXT: render_text_header,
    RenderMode.HTML: render_html_header,
}


def render_header(text: str, engine: MarkupEngine) -> str | Tag:
    """Render a header block claimed by `remarkup_toc.parser.match_header`.

    Args:
        text: Raw header block, including any absorbed blank lines.
        engine: Engine of the current render.

    Returns:
        str | Tag: Underlined text in text mode, an HTML heading otherwise.
    """
    heading = parse_heading(text)
    mode = RenderMode.TEXT if engine.is_text_mode() else RenderMode.HTML
    return HEADER_RENDERERS[mode](heading, engine)


def generate_anchor(level: int, text: str, engine: MarkupEngine) -> Tag:
    """Assign a document-unique anchor to a header and record it for the TOC.

    The header text is rendered in the ``toc`` state, where link rules emit
    only link names, then restored to plain text and stored with the header
    level under the anchor. Anchors are unique within one render: repeats get
    ``-1``, ``-2``, ... suffixes in document order.

    Args:
        level: Header level.
        text: Header body text.
        engine: Engine of the current render.

    Returns:
        Tag: An empty ``<a name="...">`` marker for the anchor.

    Examples:
        generate_anchor(1, "Intro", context)  # <a name="intro"></a>
        generate_anchor(2, "Intro", context)  # <a name="intro-1"></a>
    """
    base = generate_slug(text)
    anchors: dict[str, TocEntry] = engine.get_text_metadata(KEY_HEADER_TOC, {})
    anchor = unique_anchor(base, anchors)
    if anchor != base:
        logger.debug("Anchor %r already taken, using %r", base, anchor)

    with pushed_state(engine, TOC_STATE):
        name = engine.restore_text(engine.apply_rules(text))
        anchors[anchor] = TocEntry(level=level, name=name)

    engine.set_text_metadata(KEY_HEADER_TOC, anchors)

    return engine.build_tag("a", {"name": anchor}, "")


def render_table_of_contents(engine: MarkupEngine) -> SafeHtml | None:
    """Render the headers recorded during a render as nested lists.

    Args:
        engine: Engine of the render whose headers should be listed.

    Returns:
        SafeHtml | None: ``<ul>`` lists nested to match header levels, one
            line per opening tag, closing tag or entry. None when fewer than two
            headers were recorded, since such a table would be pointless.

    Examples:
        render_table_of_contents(context)
        # <ul>
        # <li><a href="#intro">Intro</a></li>
        # <ul>
        # <li><a href="#usage">Usage</a></li>
        # </ul>
        # </ul>
    """
    anchors: dict[str, TocEntry] = engine.get_text_metadata(KEY_HEADER_TOC, {})
    if len(anchors) < MIN_TOC_ENTRIES:
        logger.debug("Skipping table of contents for %d header(s)", len(anchors))
        return None

    depth = 0
    toc = []
    for anchor, entry in anchors.items():
        while depth < entry.level:
            toc.append("<ul>")
            depth += 1
        while depth > entry.level:
            toc.append("</ul>")
            depth -= 1

        link = engine.build_tag("a", {"href": f"#{anchor}"}, entry.name)
        toc.append(escape_html(engine.build_tag("li", {}, link)))

    while depth > 0:
        toc.append("</ul>")
        depth -= 1

    return SafeHtml("\n".join(toc))
