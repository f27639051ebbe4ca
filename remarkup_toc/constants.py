"""Constants used across the remarkup-toc package."""

from __future__ import annotations

import re

# Header syntax
MAX_HEADER_LEVEL = 5
SINGLE_LINE_HEADER_PATTERN = re.compile(rf"^(={{1,{MAX_HEADER_LEVEL}}}).*$")
SETEXT_HEADER_PATTERN = re.compile(r"^([^\n]+)\n[-=]{2,}\s*$")
BLANK_CHARACTERS = " \t\n\r\x00\x0b"

# Anchors and table of contents
KEY_HEADER_TOC = "headers.toc"
TOC_STATE = "toc"
GENERATE_TOC_OPTION = "header.generate-toc"
ANCHOR_MAX_LENGTH = 24
MIN_TOC_ENTRIES = 2

# Text utilities
DEFAULT_TERMINAL = "…"
DEFAULT_WRAP_WIDTH = 80
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
