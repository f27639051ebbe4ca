from __future__ import annotations

import pytest

from remarkup_toc.config import RemarkupConfig
from remarkup_toc.constants import TOC_STATE
from remarkup_toc.engine import (
    RenderContext,
    SafeHtml,
    build_tag,
    escape_html,
    is_safe_link,
    pushed_state,
)
from remarkup_toc.exceptions import RenderStateError
from remarkup_toc.models import HeaderState, RenderMode
from remarkup_toc.renderer import RemarkupEngine

DOCUMENT = """= Intro =

Welcome to **remarkup**.

Usage
-----

See [[ /docs | the docs ]].
== Intro ==
"""


def test_escape_html_leaves_rendered_markup_alone():
    assert escape_html("<b>&") == "&lt;b&gt;&amp;"
    assert escape_html(SafeHtml("<b>")) == "<b>"
    assert escape_html(build_tag("i", {}, "x")) == "<i>x</i>"


def test_build_tag_renders_attributes_and_children():
    tag = build_tag("a", {"href": '/q?a="1"', "title": None}, ["x < y", None, [build_tag("b", {}, "z")]])

    assert tag.render() == '<a href="/q?a=&quot;1&quot;">x &lt; y<b>z</b></a>'
    assert str(tag) == tag.render()


def test_build_tag_wraps_single_child():
    assert build_tag("p", None, "text").children == ["text"]
    assert build_tag("br").render() == "<br></br>"


def test_state_stack_push_and_pop():
    context = RenderContext()

    context.push_state("outer")
    context.push_state(TOC_STATE)
    assert context.is_state(TOC_STATE)
    assert context.states == ("outer", TOC_STATE)

    context.pop_state(TOC_STATE)
    assert not context.is_state(TOC_STATE)


def test_pop_state_rejects_wrong_name():
    context = RenderContext()
    context.push_state("outer")

    with pytest.raises(RenderStateError, match="current state is 'outer'") as excinfo:
        context.pop_state(TOC_STATE)

    assert excinfo.value.expected == TOC_STATE
    assert context.states == ("outer",)


def test_pop_state_rejects_empty_stack():
    with pytest.raises(RenderStateError, match="no state is active"):
        RenderContext().pop_state(TOC_STATE)


def test_pushed_state_pops_on_error():
    context = RenderContext()

    with pytest.raises(KeyError):
        with pushed_state(context, TOC_STATE):
            assert context.is_state(TOC_STATE)
            raise KeyError("boom")

    assert context.states == ()


def test_apply_rules_escapes_before_rules():
    context = RenderContext()

    assert context.apply_rules("a < b **c**") == "a &lt; b <strong>c</strong>"
    assert isinstance(context.apply_rules("x"), SafeHtml)


def test_link_rule_keeps_name_in_toc_state():
    context = RenderContext()

    assert context.apply_rules("[[ /x | X ]]") == '<a href="/x">X</a>'
    with pushed_state(context, TOC_STATE):
        assert context.apply_rules("[[ /x | X ]]") == "X"
        assert context.apply_rules("[[ /bare ]]") == "/bare"


@pytest.mark.parametrize(
    ("uri", "expected"),
    [
        ("https://example.com", True),
        ("http://example.com/a?b=c", True),
        ("mailto:someone@example.com", True),
        ("/docs", True),
        ("#intro", True),
        ("javascript:alert(1)", False),
        ("JavaScript:alert(1)", False),
        ("java\tscript:alert(1)", False),
        ("data:text/html,x", False),
        ("vbscript:msgbox", False),
    ],
)
def test_is_safe_link(uri: str, expected: bool):
    assert is_safe_link(uri) is expected


def test_link_rule_renders_unsafe_scheme_as_text():
    context = RenderContext()

    assert context.apply_rules("[[ javascript:alert(1) | here ]]") == "here"
    assert context.apply_rules("[[ javascript:alert(1) ]]") == "javascript:alert(1)"
    assert context.apply_rules("[[ https://example.com | ok ]]") == '<a href="https://example.com">ok</a>'


def test_render_drops_javascript_links():
    result = RemarkupEngine().render("Click [[ javascript:alert(1) | here ]]\n")

    assert result.output == "<p>Click here</p>\n"
    assert "href" not in result.output


def test_restore_text_strips_tags_and_entities():
    assert RenderContext().restore_text('<a href="#">Fish &amp; <b>Chips</b></a>') == "Fish & Chips"


def test_get_config_and_text_mode():
    context = RenderContext(mode=RenderMode.TEXT, options={"header.generate-toc": False})

    assert context.is_text_mode()
    assert context.get_config("header.generate-toc") is False
    assert context.get_config("missing", 3) == 3


def test_render_html_document():
    result = RemarkupEngine().render(DOCUMENT)

    assert result.output.split("\n") == [
        '<h2><a name="intro"></a>Intro</h2>',
        "<p>Welcome to <strong>remarkup</strong>.</p>",
        '<h3><a name="usage"></a>Usage</h3>',
        '<p>See <a href="/docs">the docs</a>.</p>',
        '<h3><a name="intro-1"></a>Intro</h3>',
    ]
    assert result.toc.split("\n") == [
        "<ul>",
        '<li><a href="#intro">Intro</a></li>',
        "<ul>",
        '<li><a href="#usage">Usage</a></li>',
        '<li><a href="#intro-1">Intro</a></li>',
        "</ul>",
        "</ul>",
    ]
    assert [heading.state for heading in result.headings] == [
        HeaderState.SINGLE_LINE,
        HeaderState.SETEXT,
        HeaderState.SINGLE_LINE,
    ]


def test_render_starts_fresh_for_every_document():
    engine = RemarkupEngine()

    first = engine.render(DOCUMENT)
    second = engine.render(DOCUMENT)

    assert first == second


def test_render_text_mode():
    result = RemarkupEngine(RemarkupConfig(text_mode=True)).render(DOCUMENT)

    assert result.output == (
        "Intro\n=====\n\nWelcome to **remarkup**.\n\nUsage\n-----\n\n"
        "See [[ /docs | the docs ]].\n\nIntro\n-----"
    )
    assert result.toc is None


def test_render_without_toc():
    result = RemarkupEngine(RemarkupConfig(generate_toc=False)).render(DOCUMENT)

    assert result.toc is None
    assert result.output.startswith("<h2>Intro</h2>")


def test_render_single_header_has_no_toc():
    result = RemarkupEngine().render("= Only =\n\nBody\n")

    assert result.toc is None
    assert len(result.headings) == 1


def test_render_repairs_invalid_bytes():
    result = RemarkupEngine().render(b"= Caf\xe9 =\n")

    assert result.output == '<h2><a name="caf"></a>Caf\ufffd</h2>'


def test_explicit_mode_overrides_config():
    engine = RemarkupEngine(RemarkupConfig(text_mode=True), mode=RenderMode.HTML)

    assert engine.new_context().mode is RenderMode.HTML
