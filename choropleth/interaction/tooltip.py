"""The single tooltip overlay shown while hovering a county."""

from __future__ import annotations

from typing import Any

from choropleth.interaction.events import PointerEvent
from choropleth.rendering.svg import Element, format_number

MISSING = "n/a"


def _field(value: Any) -> str:
    return MISSING if value is None else format_number(value)


def tooltip_text(feature: Any) -> str:
    """``"{area}, {state}: {percentage}"`` for a joined feature."""
    return (
        f"{_field(feature.area_name)}, {_field(feature.state_name)}: "
        f"{_field(feature.percentage)}"
    )


class Tooltip:
    """Shown next to the pointer, offset so it never sits under it."""

    def __init__(self, offset: int = 10):
        self.offset = offset
        self.element = Element("div", {"class": "tooltip hidden", "id": "tooltip"}, text="")
        self.top: float | None = None
        self.left: float | None = None

    @property
    def hidden(self) -> bool:
        return self.element.has_class("hidden")

    @property
    def text(self) -> str | None:
        return self.element.text

    def show(self, event: PointerEvent, feature: Any) -> None:
        self.top = event.client_y + self.offset
        self.left = event.client_x + self.offset
        self.element.text = tooltip_text(feature)
        self.element.set("style", f"top: {format_number(self.top)}px; left: {format_number(self.left)}px")
        self.element.set("data-education", feature.percentage)
        self.element.classed("hidden", False)

    def hide(self, event: PointerEvent | None = None) -> None:
        self.element.classed("hidden", True)
