"""Package-specific exception types."""

from __future__ import annotations


class RemarkupError(ValueError):
    """Base class for errors raised by remarkup-toc."""


class InvalidEncodingError(RemarkupError):
    """Raised when a byte string is not a valid UTF-8 sequence.

    Args:
        offset: Zero-based byte offset of the first invalid subsequence.
        reason: Short description of what was wrong at `offset`.
    """

    def __init__(self, offset: int, reason: str = "invalid UTF-8 sequence"):
        self.offset = offset
        self.reason = reason
        super().__init__(f"Invalid UTF-8 string: {reason} at byte {offset}")


class UnsupportedEncodingError(RemarkupError):
    """Raised when an encoding conversion is missing its source or target.

    Args:
        role: Which side of the conversion is missing, ``"source"`` or ``"target"``.
    """

    def __init__(self, role: str):
        self.role = role
        super().__init__(
            f"Attempting to convert a string encoding, but no {role} encoding was "
            f"provided. Explicitly provide the {role} encoding."
        )


class ConversionFailedError(RemarkupError):
    """Raised when the underlying codec cannot convert a string.

    Args:
        from_encoding: Name of the source encoding.
        to_encoding: Name of the target encoding.
        reason: Message reported by the underlying codec.
    """

    def __init__(self, from_encoding: str, to_encoding: str, reason: str):
        self.from_encoding = from_encoding
        self.to_encoding = to_encoding
        self.reason = reason
        super().__init__(
            f"String conversion from encoding '{from_encoding}' to encoding "
            f"'{to_encoding}' failed: {reason}"
        )


class RenderStateError(RemarkupError):
    """Raised when render states are popped out of order.

    Args:
        expected: State name the caller tried to pop.
        actual: State currently on top of the stack, or None when empty.
    """

    def __init__(self, expected: str, actual: str | None):
        self.expected = expected
        self.actual = actual
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.actual is None:
            return f"Cannot pop state '{self.expected}': no state is active"
        return f"Cannot pop state '{self.expected}': current state is '{self.actual}'"
