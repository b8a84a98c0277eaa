"""Pan/zoom behavior for the drawing surface."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from choropleth.interaction.events import TRANSFORM_CHANGED, EventDispatcher, TransformEvent
from choropleth.rendering.svg import format_number

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Extent = tuple[Point, Point]

# Wheel delta (in pixels) to log2 of the zoom factor
WHEEL_SENSITIVITY = 0.002


@dataclass(frozen=True)
class ZoomTransform:
    """``screen = content * k + (x, y)``."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def __str__(self) -> str:
        return (
            f"translate({format_number(float(self.x))},{format_number(float(self.y))}) "
            f"scale({format_number(float(self.k))})"
        )

    def apply(self, point: Point) -> Point:
        return point[0] * self.k + self.x, point[1] * self.k + self.y

    def invert(self, point: Point) -> Point:
        return self.invert_x(point[0]), self.invert_y(point[1])

    def invert_x(self, x: float) -> float:
        return (x - self.x) / self.k

    def invert_y(self, y: float) -> float:
        return (y - self.y) / self.k

    def translate(self, x: float, y: float) -> ZoomTransform:
        """Translate by content-space units."""
        return ZoomTransform(self.k, self.x + self.k * x, self.y + self.k * y)

    def scale(self, k: float) -> ZoomTransform:
        return ZoomTransform(self.k * k, self.x, self.y)


IDENTITY = ZoomTransform()


def constrain(transform: ZoomTransform, extent: Extent, translate_extent: Extent) -> ZoomTransform:
    """Shift *transform* so the viewport stays within *translate_extent*.

    When the viewport is larger than the translate extent on an axis, the
    content is centered on that axis instead.
    """
    (ex0, ey0), (ex1, ey1) = extent
    (tx0, ty0), (tx1, ty1) = translate_extent
    dx0 = transform.invert_x(ex0) - tx0
    dx1 = transform.invert_x(ex1) - tx1
    dy0 = transform.invert_y(ey0) - ty0
    dy1 = transform.invert_y(ey1) - ty1
    return transform.translate(
        (dx0 + dx1) / 2 if dx1 > dx0 else (min(0.0, dx0) or max(0.0, dx1)),
        (dy0 + dy1) / 2 if dy1 > dy0 else (min(0.0, dy0) or max(0.0, dy1)),
    )


class ZoomBehavior:
    """Holds the current transform and enforces the scale and pan limits.

    Every gesture goes through :meth:`transform_to`, which clamps the scale
    factor to ``scale_extent``, constrains the translation and dispatches a
    ``transformChanged`` event when the result differs from the current one.
    """

    def __init__(
        self,
        extent: Extent,
        scale_extent: tuple[float, float] = (1.0, 12.0),
        translate_extent: Extent | None = None,
        dispatcher: EventDispatcher | None = None,
    ):
        self.extent = extent
        self.scale_extent = scale_extent
        self.translate_extent = translate_extent or extent
        self.dispatcher = dispatcher or EventDispatcher()
        self.transform = IDENTITY

    def clamp_scale(self, k: float) -> float:
        k0, k1 = self.scale_extent
        return max(k0, min(k1, k))

    def _center(self) -> Point:
        (x0, y0), (x1, y1) = self.extent
        return (x0 + x1) / 2, (y0 + y1) / 2

    def transform_to(self, transform: ZoomTransform) -> ZoomTransform:
        k = self.clamp_scale(transform.k)
        if k != transform.k:
            transform = ZoomTransform(k, transform.x, transform.y)
        transform = constrain(transform, self.extent, self.translate_extent)
        previous = self.transform
        if transform != previous:
            self.transform = transform
            logger.debug("Zoom transform changed to %s", transform)
            self.dispatcher.dispatch(TRANSFORM_CHANGED, TransformEvent(transform, previous))
        return self.transform

    def scale_to(self, k: float, point: Point | None = None) -> ZoomTransform:
        """Zoom to factor *k*, keeping *point* (screen units) fixed."""
        p0 = point or self._center()
        p1 = self.transform.invert(p0)
        k = self.clamp_scale(k)
        return self.transform_to(ZoomTransform(k, p0[0] - p1[0] * k, p0[1] - p1[1] * k))

    def scale_by(self, factor: float, point: Point | None = None) -> ZoomTransform:
        return self.scale_to(self.transform.k * factor, point)

    def wheel(self, delta_y: float, point: Point | None = None) -> ZoomTransform:
        """Zoom in response to a wheel gesture; negative deltas zoom in."""
        return self.scale_by(2 ** (-delta_y * WHEEL_SENSITIVITY), point)

    def pan_by(self, dx: float, dy: float) -> ZoomTransform:
        """Drag the content by (dx, dy) screen units."""
        t = self.transform
        return self.transform_to(ZoomTransform(t.k, t.x + dx, t.y + dy))

    def reset(self) -> ZoomTransform:
        return self.transform_to(IDENTITY)
