"""Grouping of UTF-8 characters into display glyphs."""

from __future__ import annotations

from .utf8 import split_sequences, to_bytes, to_codepoint

# Combining Diacritical Marks, Combining Diacritical Marks Supplement,
# Combining Diacritical Marks for Symbols, Combining Half Marks.
COMBINING_RANGES = (
    (0x0300, 0x036F),
    (0x1DC0, 0x1DFF),
    (0x20D0, 0x20FF),
    (0xFE20, 0xFE2F),
)


def is_combining_character(codepoint: int) -> bool:
    """Determine whether a codepoint attaches to the preceding character.

    Examples:
        is_combining_character(0x0301)  # True, combining acute accent
        is_combining_character(ord("a"))  # False
    """
    return any(start <= codepoint <= end for start, end in COMBINING_RANGES)


def is_combining_sequence(sequence: bytes) -> bool:
    """Determine whether one encoded character is a combining mark."""
    return is_combining_character(to_codepoint(sequence))


def split_glyphs(data: str | bytes) -> list[bytes]:
    """Split a UTF-8 string into glyphs, keeping combining marks attached.

    Each glyph is a base character followed by any combining marks that
    trail it. When the string starts with a combining mark, a space is
    prepended so the mark has something to attach to.

    Args:
        data: A valid UTF-8 string.

    Returns:
        list[bytes]: Encoded glyphs in order.

    Raises:
        InvalidEncodingError: If `data` is not valid UTF-8.

    Examples:
        split_glyphs("e\\u0301x")  # [b"e\\xcc\\x81", b"x"]
        split_glyphs("\\u0301")  # [b" \\xcc\\x81"]
    """
    sequences = split_sequences(to_bytes(data))
    if sequences and is_combining_sequence(sequences[0]):
        sequences.insert(0, b" ")

    glyphs: list[bytes] = []
    for sequence in sequences:
        if glyphs and is_combining_sequence(sequence):
            glyphs[-1] += sequence
        else:
            glyphs.append(sequence)
    return glyphs
