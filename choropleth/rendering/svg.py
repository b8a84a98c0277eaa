"""In-memory SVG scene.

Renderers build a tree of :class:`Element` nodes instead of writing markup
directly, so the drawn shapes and their attributes can be inspected (and
mutated by the interaction handlers) before the tree is serialized.
"""

from __future__ import annotations

import html
import math
from typing import Any, Iterator

SVG_NS = "http://www.w3.org/2000/svg"


def format_number(value: Any) -> str:
    """Render a number the way it reads in a browser: ``10`` not ``10.0``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


class Element:
    """A node of the drawing surface."""

    def __init__(self, tag: str, attrs: dict[str, Any] | None = None, text: str | None = None):
        self.tag = tag
        self.attrs: dict[str, Any] = {}
        self.children: list[Element] = []
        self.text = text
        self.datum: Any = None
        for name, value in (attrs or {}).items():
            self.set(name, value)

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attrs.get('id') or self.attrs.get('class') or ''}>"

    # -- attributes -------------------------------------------------------

    def set(self, name: str, value: Any) -> Element:
        """Set an attribute; a ``None`` value removes it."""
        if value is None:
            self.attrs.pop(name, None)
        else:
            self.attrs[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    def has_class(self, name: str) -> bool:
        return name in str(self.attrs.get("class", "")).split()

    def classed(self, name: str, enabled: bool) -> Element:
        classes = [c for c in str(self.attrs.get("class", "")).split() if c != name]
        if enabled:
            classes.append(name)
        return self.set("class", " ".join(classes) or None)

    # -- tree -------------------------------------------------------------

    def append(self, tag: str, attrs: dict[str, Any] | None = None, text: str | None = None) -> Element:
        child = Element(tag, attrs, text)
        self.children.append(child)
        return child

    def clear(self) -> None:
        self.children.clear()

    def iter(self) -> Iterator[Element]:
        """Depth-first walk over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter()

    def select_all(self, tag: str | None = None, class_: str | None = None) -> list[Element]:
        return [
            el for el in self.iter()
            if el is not self
            and (tag is None or el.tag == tag)
            and (class_ is None or el.has_class(class_))
        ]

    def find(self, element_id: str) -> Element | None:
        for el in self.iter():
            if el.attrs.get("id") == element_id:
                return el
        return None

    # -- serialization ----------------------------------------------------

    def to_markup(self, indent: int = 0) -> str:
        pad = "  " * indent
        attrs = "".join(
            f' {name}="{html.escape(format_number(value), quote=True)}"'
            for name, value in self.attrs.items()
        )
        if not self.children and self.text is None:
            return f"{pad}<{self.tag}{attrs}/>"
        if not self.children:
            return f"{pad}<{self.tag}{attrs}>{html.escape(self.text)}</{self.tag}>"
        inner = "\n".join(child.to_markup(indent + 1) for child in self.children)
        text = html.escape(self.text) if self.text else ""
        return f"{pad}<{self.tag}{attrs}>{text}\n{inner}\n{pad}</{self.tag}>"


class Surface(Element):
    """The root ``<svg>`` element of a map."""

    def __init__(self, width: int, height: int, element_id: str = "plot"):
        super().__init__("svg", {
            "xmlns": SVG_NS,
            "id": element_id,
            "viewBox": f"0 0 {width} {height}",
        })
        self.width = width
        self.height = height

    @property
    def is_empty(self) -> bool:
        return not self.children

    def to_svg(self) -> str:
        return self.to_markup() + "\n"
