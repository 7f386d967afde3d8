"""Minimal HTML tree for scraping reference pages.

Builds a lightweight element tree with :class:`html.parser.HTMLParser` and
offers the handful of queries the JEP and JVM scrapers need: find by tag,
class or id, adjacent siblings and normalized text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, Iterator, List, Optional, Union

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)
# Elements whose end tag HTML lets authors omit when a sibling of the same kind opens.
IMPLIED_END = {
    "p": {"p"},
    "li": {"li"},
    "tr": {"tr", "td", "th"},
    "td": {"td", "th"},
    "th": {"td", "th"},
}

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Collapse whitespace and drop thin spaces from scraped text."""
    return _WHITESPACE.sub(" ", text.replace("\u2009", "")).strip()


@dataclass(eq=False)
class Element:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    parent: Optional["Element"] = field(default=None, repr=False)
    children: List[Union["Element", str]] = field(default_factory=list)

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get("id")

    @property
    def classes(self) -> List[str]:
        return self.attrs.get("class", "").split()

    def iter(self) -> Iterator["Element"]:
        """Yield every descendant element in document order."""
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter()

    def find_all(self, tag: str, class_: Optional[str] = None) -> List["Element"]:
        return [
            el for el in self.iter()
            if el.tag == tag and (class_ is None or class_ in el.classes)
        ]

    def find(self, tag: str) -> Optional["Element"]:
        return next((el for el in self.iter() if el.tag == tag), None)

    def find_by_id(self, element_id: str) -> Optional["Element"]:
        return next((el for el in self.iter() if el.id == element_id), None)

    def text(self) -> str:
        parts: List[str] = []
        for child in self.children:
            parts.append(child.text() if isinstance(child, Element) else child)
        return "".join(parts)

    def clean_text(self) -> str:
        return clean_text(self.text())

    def hrefs(self) -> List[str]:
        return [el.attrs["href"] for el in self.iter() if el.tag == "a" and "href" in el.attrs]

    def next_element_sibling(self) -> Optional["Element"]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        index = next(i for i, child in enumerate(siblings) if child is self)
        for candidate in siblings[index + 1:]:
            if isinstance(candidate, Element):
                return candidate
        return None

    def adjacent(self, *tags: str) -> Optional["Element"]:
        """Follow ``tags`` as a chain of adjacent siblings (CSS ``a + b + c``)."""
        current: Optional[Element] = self
        for tag in tags:
            current = current.next_element_sibling() if current else None
            if current is None or current.tag != tag:
                return None
        return current


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Element("#document")
        self._stack: List[Element] = [self.root]

    def handle_starttag(self, tag, attrs):
        closes = IMPLIED_END.get(tag, ())
        while len(self._stack) > 1 and self._stack[-1].tag in closes:
            if self._stack.pop().tag == tag:
                break
        element = Element(tag, {k: v or "" for k, v in attrs}, parent=self._stack[-1])
        self._stack[-1].children.append(element)
        if tag not in VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        element = Element(tag, {k: v or "" for k, v in attrs}, parent=self._stack[-1])
        self._stack[-1].children.append(element)

    def handle_endtag(self, tag):
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data):
        self._stack[-1].children.append(data)


def parse_html(markup: str) -> Element:
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return builder.root
