from __future__ import annotations

import os
import socket
from pathlib import Path

import pytest

from remarkup_toc.filesystem import (
    MAX_FILE_SIZE_ENV_VAR,
    check_document_size,
    contains_symlink,
    get_max_file_size,
    read_document,
    resolve_document_path,
    stat_document,
)


def test_get_max_file_size_defaults_when_unset(monkeypatch):
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)
    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "2048")
    assert get_max_file_size() == 2048


def test_get_max_file_size_rejects_non_integer(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "invalid")
    with pytest.raises(ValueError, match="is not a byte count"):
        get_max_file_size()


def test_get_max_file_size_rejects_non_positive(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "0")
    with pytest.raises(ValueError, match="needs a positive byte count, got 0"):
        get_max_file_size()


def test_resolve_document_path_accepts_document(tmp_path: Path):
    target = tmp_path / "guide.remarkup"
    target.write_text("= Intro =\n", encoding="utf-8")

    assert resolve_document_path(str(target), tmp_path.resolve()) == target.resolve()


def test_resolve_document_path_missing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="No such document"):
        resolve_document_path(str(tmp_path / "missing.remarkup"), tmp_path)


def test_resolve_document_path_handles_oserror(monkeypatch, tmp_path: Path):
    target = tmp_path / "doc.remarkup"
    target.write_text("= Heading\n", encoding="utf-8")
    original_resolve = Path.resolve

    def _raise_oserror(self, strict=True):
        if self == target:
            raise OSError("resolve boom")
        return original_resolve(self, strict=strict)

    monkeypatch.setattr(Path, "resolve", _raise_oserror)
    with pytest.raises(ValueError, match="resolve boom"):
        resolve_document_path(str(target), tmp_path)


def test_resolve_document_path_rejects_directory(tmp_path: Path):
    folder = tmp_path / "folder"
    folder.mkdir()
    with pytest.raises(ValueError, match="Not a regular file"):
        resolve_document_path(str(folder), tmp_path.resolve())


def test_resolve_document_path_rejects_outside_base(tmp_path: Path):
    base = tmp_path / "base"
    base.mkdir()
    outside = tmp_path / "outside.remarkup"
    outside.write_text("= Heading\n", encoding="utf-8")

    with pytest.raises(ValueError, match="lies outside the working directory"):
        resolve_document_path(str(outside), base.resolve())


def test_resolve_document_path_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.remarkup"
    target.write_text("= Heading\n", encoding="utf-8")
    link = tmp_path / "alias.remarkup"
    os.symlink(target, link)

    with pytest.raises(ValueError, match="Refusing to follow symlinks"):
        resolve_document_path(str(link), tmp_path.resolve())


def test_contains_symlink_handles_oserror(monkeypatch, tmp_path: Path):
    document = tmp_path / "document.remarkup"
    document.write_text("= Heading\n", encoding="utf-8")
    original_is_symlink = Path.is_symlink
    call_count = {"count": 0}

    def _flaky_is_symlink(self):
        if self == document and call_count["count"] == 0:
            call_count["count"] += 1
            raise OSError("stat boom")
        return original_is_symlink(self)

    monkeypatch.setattr(Path, "is_symlink", _flaky_is_symlink)
    assert contains_symlink(document) is False


def test_stat_document_handles_missing_file(tmp_path: Path):
    with pytest.raises(IOError):
        stat_document(tmp_path / "missing.remarkup")


def test_stat_document_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.remarkup"
    target.write_text("= Heading\n", encoding="utf-8")
    link = tmp_path / "alias.remarkup"
    os.symlink(target, link)

    with pytest.raises(IOError):
        stat_document(link)


def test_stat_document_rejects_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()
    with pytest.raises(IOError):
        stat_document(directory)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo not available")
def test_stat_document_rejects_fifo(tmp_path: Path):
    """Test that FIFOs are rejected by stat_document."""
    fifo = tmp_path / "pipe.remarkup"
    try:
        os.mkfifo(fifo)
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create FIFO")

    with pytest.raises(IOError) as exc_info:
        stat_document(fifo)
    assert "Not a regular file" in str(exc_info.value)


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="Unix sockets not available")
def test_stat_document_rejects_socket(tmp_path: Path):
    """Test that Unix sockets are rejected by stat_document."""
    socket_path = tmp_path / "s.sock"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(socket_path))
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create socket")
    finally:
        sock.close()

    with pytest.raises(IOError) as exc_info:
        stat_document(socket_path)
    assert "Not a regular file" in str(exc_info.value)


def test_check_document_size(tmp_path: Path):
    target = tmp_path / "big.remarkup"

    check_document_size(10, 10, target)
    with pytest.raises(OSError, match="is 10 bytes, over the 9 byte limit"):
        check_document_size(10, 9, target)


def test_read_document_returns_raw_bytes(tmp_path: Path):
    target = tmp_path / "doc.remarkup"
    target.write_bytes(b"= Caf\xe9 =\n")

    assert read_document(target, 1024) == b"= Caf\xe9 =\n"


def test_read_document_rejects_large_file(tmp_path: Path):
    target = tmp_path / "doc.remarkup"
    target.write_bytes(b"= Title =\n" * 10)

    with pytest.raises(IOError):
        read_document(target, 5)


def test_read_document_raises_for_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()

    with pytest.raises(IOError):
        read_document(directory, 1024)
