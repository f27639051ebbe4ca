"""Render context and output nodes shared by the header rule and its callers.

The header rule only talks to the engine through `MarkupEngine`. `RenderContext`
is the implementation used by `remarkup_toc.renderer`; a fresh one is created
for every document so metadata and states never leak between renders.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .constants import TOC_STATE
from .exceptions import RenderStateError
from .models import RenderMode

_LINK_PATTERN = re.compile(
    r"\[\[\s*(?P<uri>[^|\]]+?)\s*(?:\|\s*(?P<name>[^\]]+?)\s*)?\]\]"
)
_BOLD_PATTERN = re.compile(r"\*\*(?P<text>.+?)\*\*")

# Links to any other scheme are rendered as plain text.
ALLOWED_LINK_SCHEMES = frozenset(("", "http", "https", "mailto", "tel"))


class SafeHtml(str):
    """A string of already-rendered markup that must not be escaped again."""

    def __html__(self) -> str:
        return str(self)


def escape_html(value: Any) -> str:
    """Escape `value` for HTML unless it is already rendered markup."""
    if hasattr(value, "__html__"):
        return value.__html__()
    return html.escape(str(value), quote=True)


@dataclass
class Tag:
    """An HTML element with attributes and children.

    Children may be strings (escaped on render), other tags, `SafeHtml`, nested
    lists of those, or None (skipped). Attributes set to None are omitted.
    """

    name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)

    def render(self) -> str:
        attributes = "".join(
            f' {key}="{escape_html(value)}"'
            for key, value in self.attributes.items()
            if value is not None
        )
        return f"<{self.name}{attributes}>{_render_children(self.children)}</{self.name}>"

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()


def _render_children(children: Any) -> str:
    if children is None:
        return ""
    if isinstance(children, (list, tuple)):
        return "".join(_render_children(child) for child in children)
    return escape_html(children)


def build_tag(
    name: str, attributes: Mapping[str, Any] | None = None, children: Any = None
) -> Tag:
    """Build an output node from a tag name, attributes and children."""
    if children is None:
        children = []
    elif not isinstance(children, list):
        children = [children]
    return Tag(name=name, attributes=dict(attributes or {}), children=children)


class MarkupEngine(Protocol):
    """Engine operations the header rule relies on."""

    def get_text_metadata(self, key: str, default: Any = None) -> Any: ...

    def set_text_metadata(self, key: str, value: Any) -> None: ...

    def push_state(self, name: str) -> None: ...

    def pop_state(self, name: str) -> None: ...

    def apply_rules(self, text: str) -> SafeHtml: ...

    def restore_text(self, rendered: str) -> str: ...

    def is_text_mode(self) -> bool: ...

    def get_config(self, name: str, default: Any = None) -> Any: ...

    def build_tag(
        self, name: str, attributes: Mapping[str, Any] | None = None, children: Any = None
    ) -> Tag: ...


@contextmanager
def pushed_state(engine: MarkupEngine, name: str) -> Iterator[MarkupEngine]:
    """Keep state `name` pushed on `engine` for the duration of a ``with`` block.

    The state is popped on every exit path, including exceptions.

    Examples:
        with pushed_state(context, "toc"):
            name = context.restore_text(context.apply_rules(text))
    """
    engine.push_state(name)
    try:
        yield engine
    finally:
        engine.pop_state(name)


InlineRule = Callable[[str, "RenderContext"], str]


def is_safe_link(uri: str) -> bool:
    """Determine whether `uri` is relative or uses an allowed scheme."""
    try:
        scheme = urlsplit(html.unescape(uri)).scheme
    except ValueError:
        return False
    return scheme.lower() in ALLOWED_LINK_SCHEMES


def link_rule(text: str, context: RenderContext) -> str:
    """Render ``[[ uri | name ]]`` links.

    Inside the ``toc`` state only the link name is kept, so table-of-contents
    entries do not nest links. URIs with a scheme outside
    `ALLOWED_LINK_SCHEMES`, such as ``javascript:``, also render as the bare
    name.
    """

    def _replace(match: re.Match) -> str:
        uri = match.group("uri")
        name = match.group("name") or uri
        if context.is_state(TOC_STATE) or not is_safe_link(uri):
            return name
        return f'<a href="{uri}">{name}</a>'

    return _LINK_PATTERN.sub(_replace, text)


def bold_rule(text: str, context: RenderContext) -> str:
    """Render ``**text**`` as strong emphasis."""
    return _BOLD_PATTERN.sub(r"<strong>\g<text></strong>", text)


DEFAULT_INLINE_RULES: tuple[InlineRule, ...] = (link_rule, bold_rule)


class RenderContext:
    """Per-document render state implementing `MarkupEngine`.

    Holds the document metadata store and the state stack. Create one per
    render and drop it when the render returns.

    Attributes:
        mode: Output flavour of this render.
        options: Engine options, such as ``header.generate-toc``.
        inline_rules: Rules applied, in order, by `apply_rules`.
    """

    def __init__(
        self,
        mode: RenderMode = RenderMode.HTML,
        options: Mapping[str, Any] | None = None,
        inline_rules: Iterable[InlineRule] = DEFAULT_INLINE_RULES,
    ):
        self.mode = mode
        self.options = dict(options or {})
        self.inline_rules = tuple(inline_rules)
        self._metadata: dict[str, Any] = {}
        self._states: list[str] = []

    def get_text_metadata(self, key: str, default: Any = None) -> Any:
        return self._metadata.get(key, default)

    def set_text_metadata(self, key: str, value: Any) -> None:
        self._metadata[key] = value

    @property
    def states(self) -> tuple[str, ...]:
        return tuple(self._states)

    def push_state(self, name: str) -> None:
        self._states.append(name)

    def pop_state(self, name: str) -> None:
        """Pop `name` off the state stack.

        Raises:
            RenderStateError: If `name` is not the innermost active state.
        """
        if not self._states or self._states[-1] != name:
            raise RenderStateError(name, self._states[-1] if self._states else None)
        self._states.pop()

    def is_state(self, name: str) -> bool:
        return name in self._states

    def is_text_mode(self) -> bool:
        return self.mode is RenderMode.TEXT

    def get_config(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)

    def apply_rules(self, text: str) -> SafeHtml:
        """Escape `text` and run the inline rules over it."""
        rendered = html.escape(text, quote=True)
        for rule in self.inline_rules:
            rendered = rule(rendered, self)
        return SafeHtml(rendered)

    def restore_text(self, rendered: str) -> str:
        """Collapse rendered markup back to plain text."""
        return BeautifulSoup(str(rendered), "html.parser").get_text()

    def build_tag(
        self, name: str, attributes: Mapping[str, Any] | None = None, children: Any = None
    ) -> Tag:
        return build_tag(name, attributes, children)
