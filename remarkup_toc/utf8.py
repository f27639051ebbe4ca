"""UTF-8 validation, decoding and repair over raw bytes."""

from __future__ import annotations

import logging
import re

from .exceptions import InvalidEncodingError

logger = logging.getLogger(__name__)

REPLACEMENT_CHARACTER = b"\xef\xbf\xbd"

# Legacy 5 and 6 byte forms are accepted by the decoder unless `strict` is set.
# They are not valid modern UTF-8 and are never produced by `utf8ize`.
LEGACY_MAX_LEAD_BYTE = 0xFD
STRICT_MAX_LEAD_BYTE = 0xF4

_WELL_FORMED_PATTERN = re.compile(
    rb"\A(?:[\x01-\x7F]"
    rb"|[\xC2-\xDF][\x80-\xBF]"
    rb"|[\xE0-\xEF][\x80-\xBF]{2}"
    rb"|[\xF0-\xF4][\x80-\xBF]{3})*\Z"
)

_REPAIR_PATTERN = re.compile(
    rb"([\x01-\x7F]"
    rb"|[\xC2-\xDF][\x80-\xBF]"
    rb"|[\xE0-\xEF][\x80-\xBF]{2}"
    rb"|[\xF0-\xF4][\x80-\xBF]{3})"
    rb"|(.)",
    re.DOTALL,
)


def to_bytes(text: str | bytes) -> bytes:
    """Return `text` as UTF-8 bytes.

    Strings are encoded with ``surrogateescape`` so that text decoded with the
    same handler round-trips byte for byte.

    Raises:
        InvalidEncodingError: If `text` holds a lone surrogate that has no
            UTF-8 encoding.
    """
    if isinstance(text, (bytes, bytearray)):
        return bytes(text)
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError as error:
        raise InvalidEncodingError(error.start, "unencodable surrogate") from error


def from_bytes(data: bytes, like: str | bytes) -> str | bytes:
    """Convert `data` back to the type of `like`."""
    if isinstance(like, (bytes, bytearray)):
        return data
    return data.decode("utf-8", "surrogateescape")


def _sequence_length(lead: int, strict: bool) -> int | None:
    if lead <= 0x7F:
        return 1
    if lead < 0xC2:
        # Stray continuation byte, or an overlong 0xC0/0xC1 lead.
        return None
    if lead <= 0xDF:
        return 2
    if lead <= 0xEF:
        return 3
    if lead <= STRICT_MAX_LEAD_BYTE:
        return 4
    if strict:
        return None
    if 0xF8 <= lead <= 0xFB:
        return 5
    if 0xFC <= lead <= LEGACY_MAX_LEAD_BYTE:
        return 6
    return None


def decode_sequence(data: bytes, offset: int = 0, strict: bool = False) -> bytes:
    """Read the single UTF-8 sequence that starts at `offset`.

    The lead byte determines how many bytes the sequence declares; every
    following byte must be a continuation byte (``0x80``-``0xBF``) and the
    sequence must not run past the end of `data`.

    Args:
        data: Raw bytes to read from.
        offset: Zero-based position of the lead byte.
        strict: Reject the legacy 5 and 6 byte forms (lead bytes above
            ``0xF4``).

    Returns:
        bytes: The encoded sequence, one to six bytes long.

    Raises:
        InvalidEncodingError: If the sequence is malformed or truncated.

    Examples:
        decode_sequence(b"a\\xc3\\xa9", 1)  # b"\\xc3\\xa9"
    """
    if offset >= len(data):
        raise InvalidEncodingError(offset, "unexpected end of input")

    seq_len = _sequence_length(data[offset], strict)
    if seq_len is None:
        raise InvalidEncodingError(offset, f"unexpected lead byte 0x{data[offset]:02X}")

    if offset + seq_len > len(data):
        raise InvalidEncodingError(offset, "truncated sequence")

    for index in range(offset + 1, offset + seq_len):
        if not 0x80 <= data[index] <= 0xBF:
            raise InvalidEncodingError(index, f"bad continuation byte 0x{data[index]:02X}")

    return bytes(data[offset : offset + seq_len])


def split_sequences(data: str | bytes, strict: bool = False) -> list[bytes]:
    """Split a UTF-8 string into its encoded characters.

    Combining characters are returned as separate sequences; see
    `remarkup_toc.glyphs.split_glyphs` for the combined form.

    Raises:
        InvalidEncodingError: On the first malformed sequence. No partial
            result is returned.

    Examples:
        split_sequences("añb")  # [b"a", b"\\xc3\\xb1", b"b"]
    """
    data = to_bytes(data)
    sequences = []
    offset = 0
    while offset < len(data):
        sequence = decode_sequence(data, offset, strict)
        sequences.append(sequence)
        offset += len(sequence)
    return sequences


def to_codepoint(sequence: bytes) -> int:
    """Decode one encoded sequence into its integer codepoint.

    Examples:
        to_codepoint(b"\\xe2\\x82\\xac")  # 0x20AC
    """
    lead = sequence[0]
    if lead & 0x80 == 0:
        return lead
    if lead & 0xE0 == 0xC0:
        return ((lead & 0x1F) << 6) + (sequence[1] & 0x3F)
    if lead & 0xF0 == 0xE0:
        return ((lead & 0x0F) << 12) + ((sequence[1] & 0x3F) << 6) + (sequence[2] & 0x3F)
    if lead & 0xF8 == 0xF0:
        return (
            ((lead & 0x07) << 18)
            + ((sequence[1] & 0x3F) << 12)
            + ((sequence[2] & 0x3F) << 6)
            + (sequence[3] & 0x3F)
        )
    if lead & 0xFC == 0xF8:
        return (
            ((lead & 0x03) << 24)
            + ((sequence[1] & 0x3F) << 18)
            + ((sequence[2] & 0x3F) << 12)
            + ((sequence[3] & 0x3F) << 6)
            + (sequence[4] & 0x3F)
        )
    return (
        ((lead & 0x01) << 30)
        + ((sequence[1] & 0x3F) << 24)
        + ((sequence[2] & 0x3F) << 18)
        + ((sequence[3] & 0x3F) << 12)
        + ((sequence[4] & 0x3F) << 6)
        + (sequence[5] & 0x3F)
    )


def codepoints(data: str | bytes) -> list[int]:
    """Split a UTF-8 string into a list of integer codepoints."""
    return [to_codepoint(sequence) for sequence in split_sequences(data)]


def is_utf8(data: str | bytes) -> bool:
    """Determine whether `data` is well-formed UTF-8.

    Accepts only one to four byte sequences with lead bytes ``0x01``-``0x7F``,
    ``0xC2``-``0xDF``, ``0xE0``-``0xEF`` and ``0xF0``-``0xF4``. NUL bytes are
    rejected.

    Examples:
        is_utf8(b"caf\\xc3\\xa9")  # True
        is_utf8(b"\\xff")  # False
    """
    if isinstance(data, str):
        try:
            data = to_bytes(data)
        except InvalidEncodingError:
            return False
    return _WELL_FORMED_PATTERN.match(data) is not None


def is_utf8_with_only_bmp_characters(data: bytes) -> bool:
    """Determine whether `data` is UTF-8 holding only Basic Multilingual Plane characters.

    Some storage backends silently truncate strings containing four byte
    sequences, so callers persisting text there need this stricter check.
    Non-minimal three byte forms (``0xE0`` followed by ``0x80``-``0x9F``) are
    rejected as well.
    """
    length = len(data)
    index = 0
    while index < length:
        lead = data[index]
        if 0x01 <= lead <= 0x7F:
            index += 1
            continue
        if 0xC2 <= lead <= 0xDF:
            tail = data[index + 1 : index + 2]
            if len(tail) != 1 or not 0x80 <= tail[0] <= 0xBF:
                return False
            index += 2
            continue
        if 0xE0 <= lead <= 0xEF:
            tail = data[index + 1 : index + 3]
            if len(tail) != 2:
                return False
            first_min = 0xA0 if lead == 0xE0 else 0x80
            if not first_min <= tail[0] <= 0xBF or not 0x80 <= tail[1] <= 0xBF:
                return False
            index += 3
            continue
        return False
    return True


def utf8ize(data: str | bytes) -> str | bytes:
    """Convert a string into valid UTF-8.

    Valid one to four byte sequences are kept verbatim; every byte that cannot
    start one is replaced with U+FFFD. Input that is already well formed is
    returned unchanged; a `bytearray` always comes back as `bytes`. This is
    slow on large invalid inputs.

    Examples:
        utf8ize(b"ab\\xffc")  # b"ab\\xef\\xbf\\xbdc"
    """
    raw = to_bytes(data)
    if is_utf8(raw):
        return raw if isinstance(data, bytearray) else data

    result = []
    replaced = 0
    for match in _REPAIR_PATTERN.finditer(raw):
        if match.group(2) is None:
            result.append(match.group(1))
        else:
            result.append(REPLACEMENT_CHARACTER)
            replaced += 1

    logger.debug("Replaced %d invalid byte(s) with U+FFFD", replaced)
    return from_bytes(b"".join(result), data)
