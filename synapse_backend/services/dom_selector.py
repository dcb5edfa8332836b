"""
DOM Selector - Selector paths and snippets for elements of a previewed page

Mirrors the selector rules of static/inspector.js (same constants) so the
locator can describe an element from the page source when a click arrives
without a selector or snippet.
"""

from __future__ import annotations

import html
from html.parser import HTMLParser
from typing import Iterator, Union

MAX_SELECTOR_DEPTH = 4
MAX_CLASSES = 2
MAX_SNIPPET_LENGTH = 500

VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}
# Classes and inline styles the inspector itself adds to hovered elements
INSPECTOR_CLASSES = {"outline-amber-600"}
INSPECTOR_STYLE_PROPERTIES = {"outline", "cursor"}

Node = Union["DomElement", str]


class DomElement:
    """Minimal element tree node: tag, attributes and ordered child nodes"""

    def __init__(
        self,
        tag: str,
        attrs: list[tuple[str, str | None]] | None = None,
        parent: DomElement | None = None,
        line: int | None = None,
    ):
        self.tag = tag
        self.line = line
        self.attrs: dict[str, str] = {k: (v if v is not None else "") for k, v in attrs or []}
        self.parent = parent
        self.nodes: list[Node] = []

    def __repr__(self) -> str:
        return f"<DomElement {self.tag} {self.attrs}>"

    @property
    def children(self) -> list[DomElement]:
        return [n for n in self.nodes if isinstance(n, DomElement)]

    @property
    def id(self) -> str | None:
        return self.attrs.get("id") or None

    @property
    def class_name(self) -> str | None:
        return self.attrs.get("class") or None

    @property
    def classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    def iter(self) -> Iterator[DomElement]:
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, tag: str) -> list[DomElement]:
        return [el for el in self.iter() if el.tag == tag]

    def outer_html(self, strip_inspector: bool = True) -> str:
        attrs = dict(self.attrs)
        if strip_inspector and "style" in attrs:
            style = _strip_inspector_style(attrs["style"])
            if style:
                attrs["style"] = style
            else:
                del attrs["style"]
        rendered = "".join(f' {k}="{html.escape(v, quote=True)}"' for k, v in attrs.items())
        if self.tag in VOID_ELEMENTS:
            return f"<{self.tag}{rendered}>"
        inner = "".join(
            n.outer_html(strip_inspector) if isinstance(n, DomElement) else html.escape(n, quote=False)
            for n in self.nodes
        )
        return f"<{self.tag}{rendered}>{inner}</{self.tag}>"


def _strip_inspector_style(style: str) -> str:
    kept = []
    for declaration in style.split(";"):
        prop = declaration.split(":", 1)[0].strip().lower()
        if declaration.strip() and prop not in INSPECTOR_STYLE_PROPERTIES:
            kept.append(declaration.strip())
    return "; ".join(kept)


class _TreeBuilder(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root = DomElement("#document")
        self.current = self.root

    def handle_starttag(self, tag, attrs):
        element = DomElement(tag, attrs, parent=self.current, line=self.getpos()[0])
        self.current.nodes.append(element)
        if tag not in VOID_ELEMENTS:
            self.current = element

    def handle_startendtag(self, tag, attrs):
        self.current.nodes.append(DomElement(tag, attrs, parent=self.current, line=self.getpos()[0]))

    def handle_endtag(self, tag):
        node = self.current
        while node is not None and node.tag != tag:
            node = node.parent
        # Stray end tags are ignored like a browser would
        if node is not None and node.parent is not None:
            self.current = node.parent

    def handle_data(self, data):
        self.current.nodes.append(data)


def parse_document(markup: str) -> DomElement:
    """Parse markup into a tree rooted at a ``#document`` node"""
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return builder.root


def _is_element(node: DomElement | None) -> bool:
    return node is not None and node.tag != "#document"


def element_selector(el: DomElement) -> str:
    """Selector for one level: tag#id, or tag.class1.class2, plus nth-of-type"""
    if el.tag in ("html", "body"):
        return el.tag
    if el.id:
        return f"{el.tag}#{el.id}"

    selector = el.tag
    classes = [c for c in el.classes if c not in INSPECTOR_CLASSES and not c.startswith("hover:")]
    if classes:
        selector += "." + ".".join(classes[:MAX_CLASSES])

    # Fragments without <body> count top-level siblings, as a browser would under body
    if el.parent is not None:
        siblings = [child for child in el.parent.children if child.tag == el.tag]
        if len(siblings) > 1:
            index = next(i for i, s in enumerate(siblings, start=1) if s is el)
            selector += f":nth-of-type({index})"
    return selector


def compute_selector(el: DomElement, max_depth: int = MAX_SELECTOR_DEPTH) -> str:
    """Path from up to ``max_depth`` ancestors down to ``el``.

    The walk stops early at an element with an id or at ``body``.
    """
    path: list[str] = []
    current: DomElement | None = el
    depth = 0
    while _is_element(current) and depth < max_depth:
        path.insert(0, element_selector(current))
        if current.id or current.tag == "body":
            break
        current = current.parent
        depth += 1
    return " > ".join(path)


def capture_snippet(el: DomElement, limit: int = MAX_SNIPPET_LENGTH) -> str:
    return el.outer_html(strip_inspector=True)[:limit]


def describe_element_at(markup: str, tag: str, line_number: int) -> tuple[str, str] | None:
    """Selector and snippet of the first ``tag`` element whose start tag is on ``line_number``"""
    for el in parse_document(markup).find_all(tag.lower()):
        if el.line == line_number:
            return compute_selector(el), capture_snippet(el)
    return None
