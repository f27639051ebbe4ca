from __future__ import annotations

import os

import pytest

from remarkup_toc.renderer import RemarkupEngine
from remarkup_toc.slugify import generate_slug
from remarkup_toc.text import console_width, shorten
from remarkup_toc.utf8 import is_utf8, utf8ize

atheris = pytest.importorskip("atheris")


def test_utf8ize_with_fuzzed_bytes():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)

    for _ in range(128):
        if provider.remaining_bytes() == 0:
            break
        chunk = provider.ConsumeBytes(64)
        repaired = utf8ize(chunk)
        assert is_utf8(repaired)
        assert console_width(repaired) >= 0
        shorten(repaired, 10)


def test_generate_slug_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    generated = set()

    for _ in range(128):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(64)
        slug = generate_slug(text)
        slug.encode("ascii")
        assert slug == slug.lower()
        generated.add(slug)

    assert generated  # ensure we exercised the loop


def test_render_with_fuzzed_headers():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    lines: list[str] = []

    while provider.remaining_bytes() > 0 and len(lines) < 32:
        level = provider.ConsumeIntInRange(1, 5)
        title = provider.ConsumeUnicodeNoSurrogates(32) or "Section"
        lines.append(f"{'=' * level} {title}\n")

    result = RemarkupEngine().render("".join(lines).encode("utf-8"))
    assert result.output
