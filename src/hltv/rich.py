"""Chainable handle over a node of a parsed HTML document.

A RichNode pairs an element (or None) with the document it belongs to so
lookups read as a pipeline::

    name = root.find("team1-gradient").find("teamName").text()

Absence propagates: ``find`` on a missing node yields another missing
node, ``text``/``attr`` yield None and ``find_all`` yields an empty list.
Navigation never raises. Only the typed accessors (``attr_as``,
``text_as``) raise, and only when a value is present but malformed.
"""

import re
from dataclasses import dataclass
from typing import Callable, TypeVar

from bs4 import BeautifulSoup, Tag

from hltv import dom
from hltv.exceptions import ValueParseFailure

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class RichNode:
    """A possibly-absent element plus its owning document."""

    document: BeautifulSoup
    node: Tag | None = None

    @classmethod
    def root(cls, document: BeautifulSoup) -> "RichNode":
        """Wrap the document itself so searches cover the whole tree."""
        return cls(document, document)

    @property
    def exists(self) -> bool:
        return self.node is not None

    def _wrap(self, node: Tag | None) -> "RichNode":
        return RichNode(self.document, node)

    def find_where(self, predicate: dom.Predicate) -> "RichNode":
        """First node in this subtree (self included) matching ``predicate``."""
        if self.node is None:
            return self._wrap(None)
        return self._wrap(dom.find_first(self.node, predicate))

    def find(self, class_name: str) -> "RichNode":
        """First node in this subtree carrying the class token."""
        return self.find_where(dom.has_class(class_name))

    def find_all(self, class_name: str) -> list["RichNode"]:
        """All nodes in this subtree carrying the class token."""
        return [self._wrap(n) for n in dom.find_all(self.node, dom.has_class(class_name))]

    def find_tags(self, tag_name: str) -> list["RichNode"]:
        """All nodes in this subtree with the given tag name."""
        return [self._wrap(n) for n in dom.find_all(self.node, dom.tag_is(tag_name))]

    def child(self, index: int) -> "RichNode":
        """The ``index``-th element child (0-based), text nodes skipped."""
        if self.node is None or index < 0:
            return self._wrap(None)
        children = dom.element_children(self.node)
        if index >= len(children):
            return self._wrap(None)
        return self._wrap(children[index])

    def has_class(self, class_name: str) -> bool | None:
        if self.node is None:
            return None
        return class_name in dom.class_tokens(self.node)

    def text(self) -> str | None:
        """Concatenated text of the subtree with whitespace collapsed."""
        if self.node is None:
            return None
        return _WHITESPACE.sub(" ", self.node.get_text()).strip()

    def attr(self, name: str) -> str | None:
        if self.node is None:
            return None
        value = self.node.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            # bs4 returns multi-valued attributes (class, rel) as lists
            return " ".join(value)
        return value

    def attr_as(self, name: str, convert: Callable[[str], T]) -> T | None:
        """Attribute coerced with ``convert``; None if absent.

        Raises:
            ValueParseFailure: If the attribute is present but ``convert``
                rejects it.
        """
        raw = self.attr(name)
        if raw is None:
            return None
        try:
            return convert(raw.strip())
        except (TypeError, ValueError) as exc:
            raise ValueParseFailure(
                f"Attribute {name}={raw!r} could not be converted with {_type_name(convert)}"
            ) from exc

    def text_as(self, convert: Callable[[str], T]) -> T | None:
        """Text content coerced with ``convert``; None if the node is absent.

        Raises:
            ValueParseFailure: If the text is present but ``convert`` rejects it.
        """
        raw = self.text()
        if raw is None:
            return None
        try:
            return convert(raw)
        except (TypeError, ValueError) as exc:
            raise ValueParseFailure(
                f"Text {raw!r} could not be converted with {_type_name(convert)}"
            ) from exc


def _type_name(convert: Callable) -> str:
    return getattr(convert, "__name__", repr(convert))
