"""UTF-8 aware measuring, truncation, wrapping and case conversion.

Every function accepts ``str`` or ``bytes`` and returns results of the type it
was given. Input must be valid UTF-8; run untrusted bytes through
`remarkup_toc.utf8.utf8ize` first.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from .constants import DEFAULT_TERMINAL
from .exceptions import ConversionFailedError, UnsupportedEncodingError
from .glyphs import split_glyphs
from .utf8 import from_bytes, split_sequences, to_bytes, to_codepoint

# Ambiguous East-Asian characters are always measured as one column.
AMBIGUOUS_WIDTH = 1

ANSI_FORMAT_PATTERN = re.compile(rb"\x1b\[\d*m")
_ASCII_PATTERN = re.compile(rb"[\x01-\x7F]*")

_LINE_SPLIT_KEEP = {str: re.compile(r"(?<=\n)"), bytes: re.compile(rb"(?<=\n)")}
_LINE_SPLIT_DROP = {str: re.compile(r"\r?\n"), bytes: re.compile(rb"\r?\n")}

# Preferred places to cut a string before appending the terminal.
BREAK_CHARACTERS = frozenset((b" ", b"\n", b";", b":", b"[", b"(", b",", b"-"))
# Places to cut a string exactly, without appending the terminal.
STOP_CHARACTERS = frozenset((b".", b"!", b"?"))


def split_lines(text: str | bytes, keep_endings: bool = True) -> list:
    """Split text into lines on ``\\n`` or ``\\r\\n``.

    Args:
        text: Text to split.
        keep_endings: Keep the line endings attached to each line.

    Returns:
        list: Lines of `text`. Empty input yields a single empty line; a
            trailing line ending does not produce an extra empty line.

    Examples:
        split_lines("a\\nb\\n")  # ["a\\n", "b\\n"]
        split_lines("a\\r\\nb", keep_endings=False)  # ["a", "b"]
    """
    if not text:
        return [text[:0]]

    patterns = _LINE_SPLIT_KEEP if keep_endings else _LINE_SPLIT_DROP
    lines = patterns[bytes if isinstance(text, bytes) else str].split(text)
    if not lines[-1]:
        lines.pop()
    return lines


def _is_wide(codepoint: int) -> bool:
    return codepoint >= 0x1100 and (
        codepoint <= 0x115F  # Hangul Jamo initial consonants
        or codepoint in (0x2329, 0x232A)
        or (0x2E80 <= codepoint <= 0xA4CF and codepoint != 0x303F)  # CJK ... Yi
        or 0xAC00 <= codepoint <= 0xD7A3  # Hangul Syllables
        or 0xF900 <= codepoint <= 0xFAFF  # CJK Compatibility Ideographs
        or 0xFE10 <= codepoint <= 0xFE19  # Vertical forms
        or 0xFE30 <= codepoint <= 0xFE6F  # CJK Compatibility Forms
        or 0xFF00 <= codepoint <= 0xFF60  # Fullwidth Forms
        or 0xFFE0 <= codepoint <= 0xFFE6
        or 0x20000 <= codepoint <= 0x2FFFD
        or 0x30000 <= codepoint <= 0x3FFFD
    )


def glyph_width(glyph: bytes) -> int:
    """Return the console columns used by one glyph.

    Only the base character is measured; combining marks add nothing.
    """
    codepoint = to_codepoint(glyph)
    if codepoint == 0:
        return 0
    return 2 if _is_wide(codepoint) else AMBIGUOUS_WIDTH


def console_width(text: str | bytes) -> int:
    """Find the console display width of a UTF-8 string.

    Differs from the character length when the string holds double-width
    characters (most CJK text) or combining marks. ANSI color and format
    escapes are ignored. This is slow for long non-ASCII input.

    Raises:
        InvalidEncodingError: If `text` is not valid UTF-8.

    Examples:
        console_width("hello")  # 5
        console_width("你好")  # 4
        console_width("\\x1b[1mbold\\x1b[0m")  # 4
    """
    data = ANSI_FORMAT_PATTERN.sub(b"", to_bytes(text))
    if _ASCII_PATTERN.fullmatch(data):
        return len(data)
    return sum(glyph_width(glyph) for glyph in split_glyphs(data))


def character_length(text: str | bytes) -> int:
    """Count the encoded characters in a UTF-8 string.

    Combining marks count as characters of their own.
    """
    return len(split_sequences(to_bytes(text)))


def shorten(text: str | bytes, length: int, terminal: str | bytes = DEFAULT_TERMINAL):
    """Shorten a string to at most `length` glyphs, preferring word boundaries.

    The string is cut right after a ``.``, ``!`` or ``?`` when one sits before
    the limit, without adding the terminal. Otherwise it is cut at a space or
    punctuation break that leaves room for the terminal, and the terminal is
    appended. When no usable break exists the string is cut hard.

    Args:
        text: UTF-8 string to shorten.
        length: Maximum length of the result, in glyphs.
        terminal: Appended when the string is shortened at a break or cut
            hard. Defaults to a horizontal ellipsis.

    Returns:
        The shortened string, or `text` unchanged when it already fits.

    Raises:
        ValueError: If `length` is negative.
        InvalidEncodingError: If `text` is not valid UTF-8.

    Examples:
        shorten("Hello, world! Extra.", 13)  # "Hello, world!"
        shorten("abcdefghij", 5, "...")  # "ab..."
    """
    if length < 0:
        raise ValueError("`length` must not be negative")

    data = to_bytes(text)
    if len(data) <= length:
        return text

    glyphs = split_glyphs(data)
    if len(glyphs) <= length:
        return text

    # A terminal longer than the limit leaves no room to search for breaks.
    terminal_area = length - min(length, character_length(terminal))

    word_boundary = None
    stop_boundary = None
    for index in range(length, -1, -1):
        glyph = glyphs[index]
        if glyph in BREAK_CHARACTERS and index <= terminal_area:
            word_boundary = index
        elif glyph in STOP_CHARACTERS and index < length:
            stop_boundary = index + 1
            break
        elif word_boundary is not None:
            break

    if stop_boundary is not None:
        return from_bytes(b"".join(glyphs[:stop_boundary]), text)

    # No break at all, or nothing but breaks before the cut.
    if not word_boundary:
        word_boundary = terminal_area

    return from_bytes(b"".join(glyphs[:word_boundary]) + to_bytes(terminal), text)


def _skip_to(vector: list[bytes], index: int, closer: bytes) -> int:
    index += 1
    while index < len(vector) and vector[index] != closer:
        index += 1
    return min(index, len(vector) - 1)


def hard_wrap_html(text: str | bytes, width: int) -> list:
    """Hard-wrap UTF-8 text with embedded HTML tags and entities.

    Tags take no width and each entity counts as one character. Lines are
    never broken inside a tag or entity. A tag or entity missing its closing
    ``>`` or ``;`` extends to the end of the input.

    Raises:
        ValueError: If `width` is not positive.

    Examples:
        hard_wrap_html("<b>abcd</b>", 2)  # ["<b>ab", "cd", "</b>"]
        hard_wrap_html("a&amp;b", 2)  # ["a&amp;", "b"]
    """
    if width <= 0:
        raise ValueError("`width` must be a positive integer")

    vector = split_sequences(to_bytes(text))
    break_after = set()
    char_pos = 0
    index = 0
    while index < len(vector):
        character = vector[index]
        if character == b"&":
            index = _skip_to(vector, index, b";")
            char_pos += 1
        elif character == b"<":
            index = _skip_to(vector, index, b">")
        else:
            char_pos += 1

        if char_pos == width:
            break_after.add(index)
            char_pos = 0
        index += 1

    result = []
    buffer = b""
    for index, character in enumerate(vector):
        buffer += character
        if index in break_after:
            result.append(from_bytes(buffer, text))
            buffer = b""

    if buffer:
        result.append(from_bytes(buffer, text))
    return result


def hard_wrap(text: str | bytes, width: int) -> list:
    """Hard-wrap UTF-8 text with no embedded HTML.

    Each input line is cut into chunks of `width` glyphs; line endings are
    dropped and empty lines produce no output.

    Raises:
        ValueError: If `width` is not positive.

    Examples:
        hard_wrap("abcdef\\ngh", 4)  # ["abcd", "ef", "gh"]
    """
    if width <= 0:
        raise ValueError("`width` must be a positive integer")

    result = []
    for line in split_lines(to_bytes(text), keep_endings=False):
        glyphs = split_glyphs(line)
        for start in range(0, len(glyphs), width):
            result.append(from_bytes(b"".join(glyphs[start : start + width]), text))
    return result


def _normalize_encoding_name(name: str) -> str:
    return name.replace("-", "").upper()


def convert_encoding(data: bytes, from_encoding: str, to_encoding: str) -> bytes:
    """Convert a byte string from one encoding (like ISO-8859-1) to another.

    Conversions between names that only differ in case or hyphens (``utf-8``
    and ``UTF8``) return `data` unchanged. The input is assumed to really be
    in `from_encoding`; pair this with `utf8ize` for a hard conversion to
    UTF-8.

    Raises:
        UnsupportedEncodingError: If the source or target encoding is missing.
        ConversionFailedError: If the codec is unknown or cannot convert
            `data`; the codec's message is attached.

    Examples:
        convert_encoding(b"caf\\xe9", "ISO-8859-1", "UTF-8")  # b"caf\\xc3\\xa9"
    """
    if not from_encoding:
        raise UnsupportedEncodingError("source")
    if not to_encoding:
        raise UnsupportedEncodingError("target")

    if _normalize_encoding_name(from_encoding) == _normalize_encoding_name(to_encoding):
        return data

    try:
        return bytes(data).decode(from_encoding).encode(to_encoding)
    except (LookupError, UnicodeError) as error:
        raise ConversionFailedError(from_encoding, to_encoding, str(error)) from error


def title_case(text: str | bytes):
    """Convert a string to title case without damaging multi-byte characters.

    Only ASCII ``a``-``z`` letters that start the string or follow a space are
    uppercased. The rest of each word is left alone, so ``"AAA"`` stays
    ``"AAA"``.

    Examples:
        title_case("hello wORLD ñu")  # "Hello WORLD ñu"
    """
    result = []
    last = None
    for sequence in split_sequences(to_bytes(text)):
        if last in (None, b" ") and len(sequence) == 1 and 0x61 <= sequence[0] <= 0x7A:
            result.append(sequence.upper())
        else:
            result.append(sequence)
        last = sequence
    return from_bytes(b"".join(result), text)


def _convert_case(text: str | bytes, upper: bool):
    data = to_bytes(text)
    if data.isascii():
        return from_bytes(data.upper() if upper else data.lower(), text)

    result = []
    for sequence in split_sequences(data):
        try:
            character = sequence.decode("utf-8")
        except UnicodeDecodeError:
            # Legacy and surrogate forms have no case mapping.
            result.append(sequence)
            continue
        converted = character.upper() if upper else character.lower()
        result.append(converted.encode("utf-8"))
    return from_bytes(b"".join(result), text)


def to_lower(text: str | bytes):
    """Convert a string to lower case one character at a time.

    Examples:
        to_lower("ÀB")  # "àb"
    """
    return _convert_case(text, upper=False)


def to_upper(text: str | bytes):
    """Convert a string to upper case one character at a time."""
    return _convert_case(text, upper=True)


def translate(text: str | bytes, mapping: Mapping) -> str | bytes:
    """Replace characters in a UTF-8 string.

    Args:
        text: UTF-8 input string.
        mapping: Map of single characters to replacement strings. Keys and
            values may be ``str`` or ``bytes``.

    Returns:
        `text` with every mapped character replaced.

    Examples:
        translate("naïve", {"ï": "i"})  # "naive"
    """
    table = {to_bytes(key): to_bytes(value) for key, value in mapping.items()}
    result = [table.get(sequence, sequence) for sequence in split_sequences(to_bytes(text))]
    return from_bytes(b"".join(result), text)
