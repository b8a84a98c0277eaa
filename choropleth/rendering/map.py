"""Map renderer: one filled path per county plus the state borders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from choropleth.interaction.events import (
    POINTER_ENTER,
    POINTER_LEAVE,
    TRANSFORM_CHANGED,
    EventDispatcher,
    PointerEvent,
    TransformEvent,
)
from choropleth.interaction.tooltip import Tooltip
from choropleth.interaction.zoom import ZoomBehavior
from choropleth.processing.joiner import JoinedFeature
from choropleth.processing.scale import QuantizeScale
from choropleth.processing.topology import interior_borders, mesh
from choropleth.rendering.geo_path import path_data
from choropleth.rendering.svg import Element, Surface

logger = logging.getLogger(__name__)


def render_counties(
    wrapper: Element,
    features: list[JoinedFeature],
    color_scale: QuantizeScale,
) -> list[Element]:
    """Draw one ``path.county`` per feature into *wrapper*.

    Attributes whose value is unknown (fill and statistics of unmatched
    counties) are left off the element.
    """
    shapes = []
    for feat in features:
        shape = wrapper.append("path", {
            "d": path_data(feat.geometry),
            "fill": color_scale(feat.percentage),
            "class": "county",
            "data-fips": feat.id,
            "data-education": feat.percentage,
            "data-area-name": feat.area_name,
            "data-state": feat.state_name,
        })
        shape.datum = feat
        shapes.append(shape)
    return shapes


def render_state_borders(wrapper: Element, topology: dict) -> Element:
    """Draw the borders between distinct states as a single path."""
    borders = mesh(topology, topology["objects"]["states"], interior_borders)
    return wrapper.append("path", {"class": "states", "d": path_data(borders)})


def apply_transform(wrapper: Element, event: TransformEvent) -> None:
    """Move the wrapper and keep outlines the same on-screen width."""
    t = event.transform
    wrapper.set("transform", str(t))
    wrapper.set("stroke-width", 1 / t.k)


@dataclass
class ChoroplethMap:
    """A rendered map and the handles needed to interact with it."""

    surface: Surface
    wrapper: Element
    legend: Element
    axis: Element
    features: list[JoinedFeature]
    color_scale: QuantizeScale
    tooltip: Tooltip
    zoom: ZoomBehavior
    dispatcher: EventDispatcher
    _shapes: dict[Any, Element] = field(default_factory=dict, repr=False)

    @property
    def shapes(self) -> list[Element]:
        return self.wrapper.select_all("path", "county")

    def shape(self, feature_id: Any) -> Element | None:
        if not self._shapes:
            self._shapes = {el.get("data-fips"): el for el in self.shapes}
        return self._shapes.get(feature_id)

    def pointer_enter(self, feature_id: Any, client_x: float, client_y: float) -> None:
        target = self.shape(feature_id)
        if target is None:
            raise KeyError(f"No shape drawn for feature {feature_id!r}")
        self.dispatcher.dispatch(POINTER_ENTER, PointerEvent(client_x, client_y, target))

    def pointer_leave(self, feature_id: Any, client_x: float = 0, client_y: float = 0) -> None:
        self.dispatcher.dispatch(POINTER_LEAVE, PointerEvent(client_x, client_y, self.shape(feature_id)))

    def to_svg(self) -> str:
        return self.surface.to_svg()


def bind_handlers(wrapper: Element, dispatcher: EventDispatcher, tooltip: Tooltip) -> None:
    dispatcher.on(POINTER_ENTER, lambda event: tooltip.show(event, event.target.datum))
    dispatcher.on(POINTER_LEAVE, tooltip.hide)
    dispatcher.on(TRANSFORM_CHANGED, lambda event: apply_transform(wrapper, event))


def render_map(
    surface: Surface,
    topology: dict,
    features: list[JoinedFeature],
    color_scale: QuantizeScale,
    dispatcher: EventDispatcher,
    tooltip: Tooltip,
) -> Element:
    """Draw counties and state borders in a zoomable wrapper group."""
    wrapper = surface.append("g", {"class": "map"})
    shapes = render_counties(wrapper, features, color_scale)
    render_state_borders(wrapper, topology)
    bind_handlers(wrapper, dispatcher, tooltip)
    logger.info("Rendered %d county shapes", len(shapes))
    return wrapper
