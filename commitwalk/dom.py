"""Minimal immutable HTML tree and the BeautifulSoup adapter that builds it.

The extractors only need node kind, tag, attributes, children and text, so
they work on these two node types instead of a parser's own classes. Tests
can build fixture trees by hand.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

from bs4 import BeautifulSoup, NavigableString, ParserRejectedMarkup, Tag
from bs4.element import PreformattedString

from commitwalk.errors import ParseError

# Standard library parser; no lxml/html5lib install needed.
_BS_PARSER = "html.parser"

_LEADING_NEWLINE_TAGS = frozenset({"pre", "listing", "textarea"})


@dataclass(frozen=True)
class Text:
    data: str


@dataclass(frozen=True)
class Element:
    tag: str
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple[Node, ...] = field(default_factory=tuple)

    def get(self, name: str) -> str | None:
        """Return the first value of attribute *name*, or None."""
        for key, value in self.attrs:
            if key == name:
                return value
        return None

    def next_element_after(self, child: Node) -> Element | None:
        """Return the first element sibling following *child* (by identity)."""
        found = False
        for node in self.children:
            if found and isinstance(node, Element):
                return node
            if node is child:
                found = True
        return None


Node = Union[Element, Text]


def el(tag: str, *children: Node | str, **attrs: str) -> Element:
    """Shorthand for hand-built trees: strings become :class:`Text` nodes.

    Attribute names ending in ``_`` lose it, so ``class_="x"`` gives ``class``.
    """
    return Element(
        tag=tag,
        attrs=tuple((k.rstrip("_"), v) for k, v in attrs.items()),
        children=tuple(Text(c) if isinstance(c, str) else c for c in children),
    )


def walk(node: Node, ancestors: tuple[Element, ...] = ()) -> Iterator[tuple[Node, tuple[Element, ...]]]:
    """Depth-first pre-order traversal yielding ``(node, ancestors)``.

    *ancestors* runs from the root down to the node's direct parent.
    """
    yield node, ancestors
    if isinstance(node, Element):
        path = ancestors + (node,)
        for child in node.children:
            yield from walk(child, path)


def parse_document(markup: str) -> Element:
    """Parse *markup* into an :class:`Element` rooted at a ``#document`` node."""
    try:
        soup = BeautifulSoup(markup, _BS_PARSER)
    except ParserRejectedMarkup as exc:
        raise ParseError(f"parser rejected markup: {exc}") from exc
    return Element(tag="#document", children=_convert_children(soup))


def _convert_children(tag: Tag) -> tuple[Node, ...]:
    out: list[Node] = []
    _collect(tag, out)
    # HTML5 drops one newline right after these start tags; html.parser keeps it
    if tag.name in _LEADING_NEWLINE_TAGS and out and isinstance(out[0], Text) and out[0].data.startswith("\n"):
        rest = out[0].data[1:]
        out[:1] = [Text(rest)] if rest else []
    return tuple(out)


def _collect(tag: Tag, out: list[Node]) -> None:
    for child in tag.children:
        if isinstance(child, Tag):
            out.append(
                Element(
                    tag=child.name,
                    attrs=tuple((k, _attr_value(v)) for k, v in child.attrs.items()),
                    children=_convert_children(child),
                )
            )
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # comments, doctypes, CDATA and PIs are not text
            out.append(Text(str(child)))


def _attr_value(value) -> str:
    # multi-valued attributes such as class come back as lists
    if isinstance(value, list):
        return " ".join(value)
    return value
