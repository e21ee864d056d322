"""Minimal lookups over a parsed BeautifulSoup tree."""

from __future__ import annotations

from typing import Iterable

from bs4 import BeautifulSoup, Tag


def class_string(tag: Tag) -> str:
    """The ``class`` attribute as written, whether bs4 split it or not."""

    value = tag.get("class")
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(value)


def find_by_tag(root: BeautifulSoup | Tag, name: str) -> Tag | None:
    """First element named *name* in document order."""

    found = root.find(name)
    return found if isinstance(found, Tag) else None


def find_by_class_substring(root: BeautifulSoup | Tag, needle: str) -> Tag | None:
    """First element whose class attribute contains *needle* as a substring."""

    found = root.find(lambda tag: needle in class_string(tag))
    return found if isinstance(found, Tag) else None


def find_all_by_class_substring(root: BeautifulSoup | Tag, needle: str) -> list[Tag]:
    """Every element whose class attribute contains *needle*, in document order."""

    return [tag for tag in root.find_all(lambda tag: needle in class_string(tag)) if isinstance(tag, Tag)]


def first_nth_child(candidates: Iterable[Tag], name: str, position: int) -> Tag | None:
    """The *position*-th direct *name* child of the first candidate that has one."""

    for candidate in candidates:
        child = nth_child(candidate, name, position)
        if child is not None:
            return child
    return None


def nth_child(parent: Tag, name: str, position: int) -> Tag | None:
    """The *position*-th (1-based) direct child element named *name*."""

    if position < 1:
        raise ValueError("position is 1-based")
    children = parent.find_all(name, recursive=False)
    if len(children) < position:
        return None
    return children[position - 1]


def inner_html(tag: Tag) -> str:
    """Concatenated serialized form of every child node, tags preserved."""

    return tag.decode_contents()
