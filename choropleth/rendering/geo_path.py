"""GeoJSON geometry to SVG path data, with an identity projection.

The topology is already projected to screen coordinates, so positions are
written as-is. Polygon rings drop their closing position and end with ``Z``.
"""

from __future__ import annotations

from typing import Any

DIGITS = 3


def _num(value: float, digits: int) -> str:
    text = f"{value:.{digits}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


class _PathWriter:
    def __init__(self, digits: int, radius: float):
        self.digits = digits
        self.radius = radius
        self.parts: list[str] = []

    def xy(self, p: list[float]) -> str:
        return f"{_num(p[0], self.digits)},{_num(p[1], self.digits)}"

    def point(self, p: list[float]) -> None:
        r = _num(self.radius, self.digits)
        d = _num(2 * self.radius, self.digits)
        self.parts.append(
            f"M{self.xy(p)}m0,{r}a{r},{r} 0 1,1 0,-{d}a{r},{r} 0 1,1 0,{d}z"
        )

    def line(self, positions: list[list[float]], closed: bool = False) -> None:
        if closed:
            positions = positions[:-1]
        if not positions:
            return
        self.parts.append("M" + "L".join(self.xy(p) for p in positions))
        if closed:
            self.parts.append("Z")

    def geometry(self, geom: dict | None) -> None:
        if geom is None:
            return
        kind = geom.get("type")
        coords: Any = geom.get("coordinates")
        if kind == "Point":
            self.point(coords)
        elif kind == "MultiPoint":
            for p in coords:
                self.point(p)
        elif kind == "LineString":
            self.line(coords)
        elif kind == "MultiLineString":
            for line in coords:
                self.line(line)
        elif kind == "Polygon":
            for ring in coords:
                self.line(ring, closed=True)
        elif kind == "MultiPolygon":
            for polygon in coords:
                for ring in polygon:
                    self.line(ring, closed=True)
        elif kind == "GeometryCollection":
            for g in geom["geometries"]:
                self.geometry(g)
        elif kind == "Feature":
            self.geometry(geom.get("geometry"))
        elif kind == "FeatureCollection":
            for f in geom["features"]:
                self.geometry(f.get("geometry"))


def path_data(geom: dict | None, digits: int = DIGITS, point_radius: float = 4.5) -> str | None:
    """SVG ``d`` attribute for *geom*; None when there is nothing to draw."""
    writer = _PathWriter(digits, point_radius)
    writer.geometry(geom)
    return "".join(writer.parts) or None
