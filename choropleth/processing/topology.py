"""TopoJSON decoding: topology objects to GeoJSON features and border meshes.

A topology stores every boundary once, as an *arc*, and geometries reference
arcs by index; a negative index ``~i`` means arc ``i`` traversed backwards.
When the topology is quantized, arc positions are delta-encoded integers that
must be accumulated and mapped through ``transform`` (``scale``/``translate``).
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

Position = list[float]
MeshFilter = Callable[[dict, dict], bool]


# ---------------------------------------------------------------------------
# Position transforms
# ---------------------------------------------------------------------------


class _Dequantizer:
    """Maps quantized positions back to coordinates.

    For arcs the positions are deltas: call :meth:`reset` at the start of
    each arc and feed the positions in order.
    """

    def __init__(self, transform: dict | None):
        if transform is None:
            self.kx = self.ky = 1.0
            self.dx = self.dy = 0.0
            self.identity = True
        else:
            self.kx, self.ky = transform["scale"]
            self.dx, self.dy = transform["translate"]
            self.identity = False
        self.x0 = self.y0 = 0.0

    def reset(self) -> None:
        self.x0 = self.y0 = 0.0

    def delta(self, p: Position) -> Position:
        if self.identity:
            return list(p)
        self.x0 += p[0]
        self.y0 += p[1]
        return [self.x0 * self.kx + self.dx, self.y0 * self.ky + self.dy, *p[2:]]

    def absolute(self, p: Position) -> Position:
        if self.identity:
            return list(p)
        return [p[0] * self.kx + self.dx, p[1] * self.ky + self.dy, *p[2:]]


def _arc_index(i: int) -> int:
    return ~i if i < 0 else i


# ---------------------------------------------------------------------------
# Geometry decoding
# ---------------------------------------------------------------------------


class _GeometryDecoder:
    def __init__(self, topology: dict):
        self.arcs = topology["arcs"]
        self.transform = _Dequantizer(topology.get("transform"))

    def arc(self, i: int, points: list[Position]) -> None:
        # Consecutive arcs share their junction position
        if points:
            points.pop()
        start = len(points)
        self.transform.reset()
        for p in self.arcs[_arc_index(i)]:
            points.append(self.transform.delta(p))
        if i < 0:
            points[start:] = points[start:][::-1]

    def point(self, p: Position) -> Position:
        return self.transform.absolute(p)

    def line(self, arcs: list[int]) -> list[Position]:
        points: list[Position] = []
        for i in arcs:
            self.arc(i, points)
        if len(points) < 2:
            points.append(list(points[0]))
        return points

    def ring(self, arcs: list[int]) -> list[Position]:
        points = self.line(arcs)
        while len(points) < 4:
            points.append(list(points[0]))
        return points

    def polygon(self, arcs: list[list[int]]) -> list[list[Position]]:
        return [self.ring(r) for r in arcs]

    def geometry(self, o: dict) -> dict | None:
        kind = o.get("type")
        if kind == "GeometryCollection":
            return {"type": kind, "geometries": [self.geometry(g) for g in o["geometries"]]}
        if kind == "Point":
            coordinates: Any = self.point(o["coordinates"])
        elif kind == "MultiPoint":
            coordinates = [self.point(p) for p in o["coordinates"]]
        elif kind == "LineString":
            coordinates = self.line(o["arcs"])
        elif kind == "MultiLineString":
            coordinates = [self.line(a) for a in o["arcs"]]
        elif kind == "Polygon":
            coordinates = self.polygon(o["arcs"])
        elif kind == "MultiPolygon":
            coordinates = [self.polygon(a) for a in o["arcs"]]
        else:
            return None
        return {"type": kind, "coordinates": coordinates}


def decode_geometry(topology: dict, obj: dict) -> dict | None:
    """Decode a single topology object into a GeoJSON geometry."""
    return _GeometryDecoder(topology).geometry(obj)


def _feature(decoder: _GeometryDecoder, obj: dict) -> dict:
    feat: dict[str, Any] = {"type": "Feature"}
    if obj.get("id") is not None:
        feat["id"] = obj["id"]
    if obj.get("bbox") is not None:
        feat["bbox"] = obj["bbox"]
    feat["properties"] = obj.get("properties") or {}
    feat["geometry"] = decoder.geometry(obj)
    return feat


def feature(topology: dict, obj: dict | str) -> dict:
    """Convert a topology object to a GeoJSON Feature or FeatureCollection.

    *obj* may be the object itself or its name under ``topology["objects"]``.
    A GeometryCollection becomes a FeatureCollection with one feature per
    member geometry, in order.
    """
    if isinstance(obj, str):
        obj = topology["objects"][obj]
    decoder = _GeometryDecoder(topology)
    if obj.get("type") == "GeometryCollection":
        return {
            "type": "FeatureCollection",
            "features": [_feature(decoder, g) for g in obj["geometries"]],
        }
    return _feature(decoder, obj)


# ---------------------------------------------------------------------------
# Mesh
# ---------------------------------------------------------------------------


class _Fragment(list):
    """A run of arc indices with its start and end positions."""

    start: tuple
    end: tuple


def _extract_arcs(topology: dict, obj: dict, mesh_filter: MeshFilter | None) -> list[int]:
    """Select arcs of *obj*, keyed by the geometries that share them."""
    geoms_by_arc: dict[int, list[tuple[int, dict]]] = {}

    def walk(o: dict) -> None:
        kind = o.get("type")
        if kind == "GeometryCollection":
            for g in o["geometries"]:
                walk(g)
            return
        if kind == "LineString":
            groups = [o["arcs"]]
        elif kind in ("MultiLineString", "Polygon"):
            groups = o["arcs"]
        elif kind == "MultiPolygon":
            groups = [ring for polygon in o["arcs"] for ring in polygon]
        else:
            return
        for group in groups:
            for i in group:
                geoms_by_arc.setdefault(_arc_index(i), []).append((i, o))

    walk(obj)

    selected = []
    for j in sorted(geoms_by_arc):
        geoms = geoms_by_arc[j]
        first_i, first_geom = geoms[0]
        if mesh_filter is None or mesh_filter(first_geom, geoms[-1][1]):
            selected.append(first_i)
    return selected


def stitch(topology: dict, arcs: list[int]) -> list[list[int]]:
    """Join arcs sharing end points into maximal connected fragments."""
    arcs = list(arcs)
    topo_arcs = topology["arcs"]
    quantized = topology.get("transform") is not None

    def ends(i: int) -> tuple[tuple, tuple]:
        arc = topo_arcs[_arc_index(i)]
        p0 = arc[0]
        if quantized:
            p1 = [sum(dp[0] for dp in arc), sum(dp[1] for dp in arc)]
        else:
            p1 = arc[-1]
        start, end = (p0[0], p0[1]), (p1[0], p1[1])
        return (end, start) if i < 0 else (start, end)

    # Degenerate arcs go first, since longer arcs may subsume them
    empty_index = -1
    for j, i in enumerate(arcs):
        arc = topo_arcs[_arc_index(i)]
        if len(arc) < 3 and not arc[1][0] and not arc[1][1]:
            empty_index += 1
            arcs[empty_index], arcs[j] = i, arcs[empty_index]

    by_start: dict[tuple, _Fragment] = {}
    by_end: dict[tuple, _Fragment] = {}

    def register(f: _Fragment) -> None:
        by_start[f.start] = f
        by_end[f.end] = f

    for i in arcs:
        start, end = ends(i)
        f = by_end.get(start)
        if f is not None:
            del by_end[f.end]
            f.append(i)
            f.end = end
            g = by_start.get(end)
            if g is not None:
                del by_start[g.start]
                fg = f if g is f else _Fragment(f + g)
                fg.start, fg.end = f.start, g.end
                register(fg)
            else:
                register(f)
            continue

        f = by_start.get(end)
        if f is not None:
            del by_start[f.start]
            f.insert(0, i)
            f.start = start
            g = by_end.get(start)
            if g is not None:
                del by_end[g.end]
                gf = f if g is f else _Fragment(g + f)
                gf.start, gf.end = g.start, f.end
                register(gf)
            else:
                register(f)
            continue

        f = _Fragment([i])
        f.start, f.end = start, end
        register(f)

    fragments: list[list[int]] = []
    stitched: set[int] = set()

    def flush(primary: dict[tuple, _Fragment], secondary: dict[tuple, _Fragment]) -> None:
        for f in list(primary.values()):
            secondary.pop(f.start, None)
            stitched.update(_arc_index(i) for i in f)
            fragments.append(list(f))
        primary.clear()

    flush(by_end, by_start)
    flush(by_start, by_end)
    for i in arcs:
        if _arc_index(i) not in stitched:
            fragments.append([i])
    return fragments


def mesh_arcs(
    topology: dict,
    obj: dict | str | None = None,
    mesh_filter: MeshFilter | None = None,
) -> dict:
    """Topology-level MultiLineString of the selected, stitched arcs."""
    if obj is None:
        arcs: Iterable[int] = range(len(topology["arcs"]))
    else:
        if isinstance(obj, str):
            obj = topology["objects"][obj]
        arcs = _extract_arcs(topology, obj, mesh_filter)
    return {"type": "MultiLineString", "arcs": stitch(topology, list(arcs))}


def mesh(
    topology: dict,
    obj: dict | str | None = None,
    mesh_filter: MeshFilter | None = None,
) -> dict:
    """Decoded MultiLineString of the borders of *obj*.

    *mesh_filter(a, b)* receives the first and last geometries sharing an
    arc; an arc used by a single geometry is passed as ``(a, a)``. Without a
    filter every arc is kept once.
    """
    return decode_geometry(topology, mesh_arcs(topology, obj, mesh_filter))


def interior_borders(a: dict, b: dict) -> bool:
    """Mesh filter keeping only arcs shared by two distinct geometries."""
    return a is not b
