"""Anchor slug generation for remarkup headers."""

from __future__ import annotations

import re
import string
from collections.abc import Container

from .constants import ANCHOR_MAX_LENGTH
from .text import translate

_ASCII_LOWERCASE_MAP = dict(zip(string.ascii_uppercase, string.ascii_lowercase))


def generate_slug(title: str, max_length: int = ANCHOR_MAX_LENGTH) -> str:
    """Generate an anchor slug from a header title.

    Lowercases ASCII letters only, turns every other character that is not
    ``a``-``z`` or ``0``-``9`` into a hyphen, collapses hyphen runs, trims
    hyphens from both ends, and truncates to `max_length` characters
    (trimming again afterwards).

    Args:
        title: Header text to convert.
        max_length: Maximum slug length.

    Returns:
        str: The slug. May be empty when the title has no ASCII letters or
            digits; `unique_anchor` turns that into a numbered anchor.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("Café au lait")  # "caf-au-lait"
        generate_slug("你好")  # ""
    """
    slug = translate(title, _ASCII_LOWERCASE_MAP)
    slug = re.sub(r"[^a-z0-9]", "-", slug)
    slug = re.sub(r"--+", "-", slug)
    slug = slug.strip("-")
    slug = slug[:max_length]
    return slug.strip("-")


def unique_anchor(base: str, used: Container[str]) -> str:
    """Return `base`, or the first numbered variant of it not in `used`.

    Numbered variants are ``base-1``, ``base-2``, and so on. An empty `base`
    yields ``1``, ``2``, and so on.

    Examples:
        unique_anchor("intro", set())  # "intro"
        unique_anchor("intro", {"intro"})  # "intro-1"
        unique_anchor("", set())  # "1"
    """
    anchor = base
    suffix = 1
    while not anchor or anchor in used:
        anchor = f"{base}-{suffix}".strip("-")
        suffix += 1
    return anchor
