"""Legend renderer: stacked color swatches with a value axis on their left."""

from __future__ import annotations

import logging
import math

from choropleth.config import MapConfig
from choropleth.processing.scale import LinearScale, QuantizeScale, arange
from choropleth.rendering.svg import Element, Surface

logger = logging.getLogger(__name__)

TICK_SIZE = 6
TICK_PADDING = 3
# Half-pixel offset keeps 1px axis lines crisp
AXIS_OFFSET = 0.5


def legend_ticks(color_scale: QuantizeScale) -> list[float]:
    """One tick per swatch boundary, plus the domain maximum."""
    lo, hi = color_scale.domain()
    cells = len(color_scale.range())
    return arange(lo, hi, (hi - lo) / cells) + [hi]


def format_tick(tick: float) -> str:
    if math.isnan(tick):
        return "NaN%"
    # halves round up, as in browsers
    return f"{math.floor(tick + 0.5)}%"


def render_swatches(surface: Surface, colors: list[str], config: MapConfig) -> Element:
    cell = config.legend_cell_size
    legend = surface.append("g", {"id": "legend"})
    for index, color in enumerate(colors):
        legend.append("rect", {
            "x": config.width - config.padding,
            "y": config.height - config.padding - cell * index,
            "width": cell,
            "height": cell,
            "fill": color,
        })
    return legend


def render_axis_left(parent: Element, scale: LinearScale, ticks: list[float], attrs: dict) -> Element:
    """Draw a left-oriented axis: domain line, tick marks and labels."""
    axis = parent.append("g", {
        **attrs,
        "fill": "none",
        "font-size": 10,
        "font-family": "sans-serif",
        "text-anchor": "end",
    })
    r0, r1 = scale.range()
    axis.append("path", {
        "class": "domain",
        "stroke": "currentColor",
        "d": f"M{-TICK_SIZE},{r0 + AXIS_OFFSET}H{AXIS_OFFSET}V{r1 + AXIS_OFFSET}H{-TICK_SIZE}",
    })
    for tick in ticks:
        g = axis.append("g", {
            "class": "tick",
            "opacity": 1,
            "transform": f"translate(0,{scale(tick) + AXIS_OFFSET})",
        })
        g.append("line", {"stroke": "currentColor", "x2": -TICK_SIZE})
        g.append(
            "text",
            {"fill": "currentColor", "x": -(TICK_SIZE + TICK_PADDING), "dy": "0.32em"},
            text=format_tick(tick),
        )
    return axis


def render_legend(surface: Surface, color_scale: QuantizeScale, config: MapConfig) -> tuple[Element, Element]:
    """Draw the swatches and their axis at the bottom right of the surface.

    The first palette color sits at the bottom; the axis maps the scale
    domain onto the height of the swatch stack.
    """
    colors = color_scale.range()
    cell = config.legend_cell_size
    legend_height = cell * len(colors)

    legend = render_swatches(surface, colors, config)

    lo, hi = color_scale.domain()
    y_scale = LinearScale((lo, hi), (legend_height, 0))
    ticks = legend_ticks(color_scale)
    axis = render_axis_left(surface, y_scale, ticks, {
        "id": "legend-x-axis",
        "transform": (
            f"translate({config.width - config.padding}, "
            f"{config.height - config.padding - legend_height + cell})"
        ),
    })
    logger.info("Rendered legend: %d swatches, %d ticks", len(colors), len(ticks))
    return legend, axis
