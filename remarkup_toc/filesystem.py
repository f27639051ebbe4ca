"""Checks applied before the CLI reads a document from disk.

Only regular files under the working directory are read, never through a
symlink, and never past the configured size limit. Documents are returned as
raw bytes; decoding is left to `remarkup_toc.utf8.utf8ize`.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "REMARKUP_TOC_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the document size limit in bytes.

    ``REMARKUP_TOC_MAX_FILE_SIZE`` wins over `default` when it is set.

    Raises:
        ValueError: If the variable holds anything but a positive byte count.
    """
    raw_limit = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_limit is None:
        return default

    try:
        limit = int(raw_limit)
    except ValueError as error:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR}={raw_limit!r} is not a byte count") from error

    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} needs a positive byte count, got {limit}")
    return limit


def _is_symlink(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError:
        return False


def contains_symlink(path: Path) -> bool:
    """Report whether `path` or any of its ancestors is a symlink.

    Ancestors that cannot be inspected are skipped.
    """
    return any(_is_symlink(candidate) for candidate in (path, *path.parents))


def resolve_document_path(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied path into the absolute path of a readable document.

    Args:
        raw_path: Absolute or relative path; ``~`` is expanded.
        base_dir: Resolved working directory the document must live under.

    Returns:
        Path: The resolved document path.

    Raises:
        ValueError: If the path goes through a symlink, does not exist, names
            something other than a regular file, or leaves `base_dir`.

    Examples:
        resolve_document_path("docs/guide.remarkup", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()
    if contains_symlink(path):
        raise ValueError(f"Refusing to follow symlinks: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"No such document: {path}") from error
    except OSError as error:
        raise ValueError(f"Cannot resolve {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"Not a regular file: {resolved}")

    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} lies outside the working directory {base_dir}")

    return resolved


def stat_document(filepath: Path) -> os.stat_result:
    """Stat a document without following symlinks.

    Raises:
        OSError: If the path cannot be inspected or is not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise OSError(f"Cannot stat {filepath}: {error}") from error

    if stat.S_ISLNK(stat_result.st_mode):
        raise OSError(f"Refusing to follow symlinks: {filepath}")
    if not stat.S_ISREG(stat_result.st_mode):
        raise OSError(f"Not a regular file: {filepath}")
    return stat_result


def check_document_size(size: int, max_size: int, filepath: Path) -> None:
    """Raise `OSError` when a `size`-byte document is over `max_size` bytes."""
    if size > max_size:
        raise OSError(f"{filepath} is {size} bytes, over the {max_size} byte limit")


def read_document(filepath: Path, max_size: int) -> bytes:
    """Read a document as raw bytes once it passes the type and size checks.

    Raises:
        OSError: If the document is missing, unreadable, not a regular file,
            or larger than `max_size` bytes.

    Examples:
        raw = read_document(Path("guide.remarkup"), 102400)
    """
    check_document_size(stat_document(filepath).st_size, max_size, filepath)
    try:
        return filepath.read_bytes()
    except OSError as error:
        raise OSError(f"Cannot read {filepath}: {error}") from error
