"""Document rendering entry point."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import RemarkupConfig
from .constants import BLANK_CHARACTERS
from .engine import DEFAULT_INLINE_RULES, InlineRule, RenderContext
from .generator import render_header, render_table_of_contents
from .models import RenderMode, RenderResult
from .parser import get_matching_line_count, parse_heading
from .text import split_lines
from .utf8 import utf8ize

logger = logging.getLogger(__name__)


class RemarkupEngine:
    """Render remarkup documents with header anchors and a table of contents.

    The engine only holds settings; every call to `render` gets its own
    `RenderContext`, so one engine may render many documents.

    Only header blocks are recognized. Every other run of non-blank lines is
    emitted as a paragraph with the inline rules applied.

    Attributes:
        config: Rendering configuration.
        mode: Output flavour, derived from ``config.text_mode`` unless given.
        inline_rules: Inline rules applied to header and paragraph text.

    Examples:
        result = RemarkupEngine().render("= Intro =\\n\\nHello.\\n\\n== Usage ==\\n")
        result.output  # '<h2><a name="intro"></a>Intro</h2>\\n<p>Hello.</p>\\n...'
        result.toc  # '<ul>\\n<li><a href="#intro">Intro</a></li>\\n...'
    """

    def __init__(
        self,
        config: RemarkupConfig | None = None,
        mode: RenderMode | None = None,
        inline_rules: Iterable[InlineRule] = DEFAULT_INLINE_RULES,
    ):
        self.config = config or RemarkupConfig()
        if mode is None:
            mode = RenderMode.TEXT if self.config.text_mode else RenderMode.HTML
        self.mode = mode
        self.inline_rules = tuple(inline_rules)

    def new_context(self) -> RenderContext:
        """Create the state for a single render."""
        return RenderContext(
            mode=self.mode,
            options=self.config.engine_options(),
            inline_rules=self.inline_rules,
        )

    def render(self, content: str | bytes) -> RenderResult:
        """Render a whole document.

        Args:
            content: Document text. Bytes are repaired with `utf8ize` and
                decoded as UTF-8.

        Returns:
            RenderResult: Rendered body, table of contents (HTML mode with
                ``generate_toc`` only), and the headings found.
        """
        if isinstance(content, bytes):
            content = utf8ize(content).decode("utf-8", "surrogateescape")

        context = self.new_context()
        lines = split_lines(content)
        blocks = []
        headings = []
        paragraph: list[str] = []

        def flush_paragraph() -> None:
            if paragraph:
                blocks.append(self._render_paragraph("".join(paragraph), context))
                paragraph.clear()

        cursor = 0
        while cursor < len(lines):
            line_count = get_matching_line_count(lines, cursor)
            if line_count:
                flush_paragraph()
                block = "".join(lines[cursor : cursor + line_count])
                headings.append(parse_heading(block))
                rendered = render_header(block, context)
                blocks.append(rendered if isinstance(rendered, str) else rendered.render())
                cursor += line_count
                continue

            line = lines[cursor]
            if line.strip(BLANK_CHARACTERS):
                paragraph.append(line)
            else:
                flush_paragraph()
            cursor += 1
        flush_paragraph()

        toc = None
        if not context.is_text_mode() and self.config.generate_toc:
            toc = render_table_of_contents(context)
            if toc is not None:
                toc = str(toc)

        logger.debug("Rendered %d block(s), %d heading(s)", len(blocks), len(headings))
        separator = "\n\n" if context.is_text_mode() else "\n"
        return RenderResult(output=separator.join(blocks), toc=toc, headings=headings)

    def _render_paragraph(self, text: str, context: RenderContext) -> str:
        text = text.strip(BLANK_CHARACTERS)
        if context.is_text_mode():
            return text
        return f"<p>{context.apply_rules(text)}</p>"
