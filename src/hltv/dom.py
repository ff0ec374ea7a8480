"""Subtree queries over a parsed HTML document.

Provides:
- parse_document: build the BeautifulSoup tree the converters walk
- find_first / find_all: pre-order depth-first search with a predicate
- has_class / tag_is: the only two predicates the page layouts need

The search uses an explicit stack instead of recursion so pathologically
deep documents cannot hit the interpreter's recursion limit. Only element
nodes are visited; text, comments and doctype nodes are skipped.
"""

from typing import Callable

from bs4 import BeautifulSoup, Tag

Predicate = Callable[[Tag], bool]


def parse_document(html: str) -> BeautifulSoup:
    """Parse raw HTML into the document the converters operate on."""
    return BeautifulSoup(html, "lxml")


def class_tokens(element: Tag) -> list[str]:
    """Return the space-separated tokens of an element's class attribute."""
    value = element.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def element_children(element: Tag) -> list[Tag]:
    """Return the element children of a node in document order."""
    return [c for c in element.children if isinstance(c, Tag)]


def has_class(token: str) -> Predicate:
    """Predicate: the element's class list contains ``token``."""
    return lambda element: token in class_tokens(element)


def tag_is(name: str) -> Predicate:
    """Predicate: the element's tag name equals ``name``."""
    name = name.lower()
    return lambda element: element.name == name


def find_first(root: Tag | None, predicate: Predicate) -> Tag | None:
    """Return the first element in ``root``'s subtree matching ``predicate``.

    Pre-order, document order, and ``root`` itself is tested. Returns None
    when ``root`` is not an element or nothing matches.
    """
    if not isinstance(root, Tag):
        return None
    stack = [root]
    while stack:
        element = stack.pop()
        if predicate(element):
            return element
        # Reversed so the leftmost child is popped first.
        stack.extend(reversed(element_children(element)))
    return None


def find_all(root: Tag | None, predicate: Predicate) -> list[Tag]:
    """Return every element in ``root``'s subtree matching ``predicate``.

    Same traversal as find_first; matches nested inside other matches are
    included. Empty list when nothing matches.
    """
    if not isinstance(root, Tag):
        return []
    found: list[Tag] = []
    stack = [root]
    while stack:
        element = stack.pop()
        if predicate(element):
            found.append(element)
        stack.extend(reversed(element_children(element)))
    return found
