"""
remarkup-toc: UTF-8 text utilities and remarkup header rendering.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    remarkup-toc render guide.remarkup
    remarkup-toc width "你好"

Library Usage:
    from remarkup_toc import RemarkupEngine, console_width, shorten

    result = RemarkupEngine().render("= Intro =\\n\\n== Usage ==\\n")
    print(result.toc)
    shorten("Hello, world! Extra.", 13)  # "Hello, world!"
"""

from .config import RemarkupConfig
from .engine import MarkupEngine, RenderContext, SafeHtml, Tag, build_tag, pushed_state
from .exceptions import (
    ConversionFailedError,
    InvalidEncodingError,
    RemarkupError,
    RenderStateError,
    UnsupportedEncodingError,
)
from .generator import generate_anchor, render_header, render_table_of_contents
from .glyphs import is_combining_character, split_glyphs
from .models import Heading, HeaderState, HeadingMatch, RenderMode, RenderResult, TocEntry
from .parser import find_headings, get_matching_line_count, match_header, parse_heading
from .renderer import RemarkupEngine
from .slugify import generate_slug, unique_anchor
from .text import (
    character_length,
    console_width,
    convert_encoding,
    hard_wrap,
    hard_wrap_html,
    shorten,
    split_lines,
    title_case,
    to_lower,
    to_upper,
    translate,
)
from .utf8 import (
    codepoints,
    decode_sequence,
    is_utf8,
    is_utf8_with_only_bmp_characters,
    split_sequences,
    to_codepoint,
    utf8ize,
)

__version__ = "0.1.0"

__all__ = [
    # Codec
    "decode_sequence",
    "split_sequences",
    "to_codepoint",
    "codepoints",
    "is_utf8",
    "is_utf8_with_only_bmp_characters",
    "utf8ize",
    # Segmentation
    "is_combining_character",
    "split_glyphs",
    # Text utilities
    "console_width",
    "character_length",
    "shorten",
    "hard_wrap",
    "hard_wrap_html",
    "convert_encoding",
    "title_case",
    "to_lower",
    "to_upper",
    "translate",
    "split_lines",
    # Headers
    "match_header",
    "get_matching_line_count",
    "parse_heading",
    "find_headings",
    "generate_slug",
    "unique_anchor",
    "render_header",
    "generate_anchor",
    "render_table_of_contents",
    # Engine
    "RemarkupEngine",
    "RemarkupConfig",
    "RenderContext",
    "MarkupEngine",
    "Tag",
    "SafeHtml",
    "build_tag",
    "pushed_state",
    # Data models
    "Heading",
    "HeaderState",
    "HeadingMatch",
    "RenderMode",
    "RenderResult",
    "TocEntry",
    # Exceptions
    "RemarkupError",
    "InvalidEncodingError",
    "UnsupportedEncodingError",
    "ConversionFailedError",
    "RenderStateError",
    # Version
    "__version__",
]
