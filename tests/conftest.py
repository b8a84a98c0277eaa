"""Shared fixtures: a two-county topology and its statistics.

County 1001 is the square (0,0)-(10,10), county 1002 the square
(10,0)-(20,10); they share the edge x=10 (arc 0). Each county is also its
own state, so the only interior state border is arc 0.
"""

from __future__ import annotations

import copy

import pytest

from choropleth.schemas import parse_statistics

TWO_COUNTY_TOPOLOGY = {
    "type": "Topology",
    "arcs": [
        [[10, 0], [10, 10]],
        [[10, 10], [0, 10], [0, 0], [10, 0]],
        [[10, 0], [20, 0], [20, 10], [10, 10]],
    ],
    "objects": {
        "counties": {
            "type": "GeometryCollection",
            "geometries": [
                {"type": "Polygon", "id": 1001, "arcs": [[0, 1]]},
                {"type": "Polygon", "id": 1002, "arcs": [[2, -1]]},
            ],
        },
        "states": {
            "type": "GeometryCollection",
            "geometries": [
                {"type": "Polygon", "id": "01", "arcs": [[0, 1]]},
                {"type": "Polygon", "id": "02", "arcs": [[2, -1]]},
            ],
        },
    },
}

TWO_COUNTY_STATISTICS = [
    {"fips": 1001, "state": "X", "area_name": "A", "bachelorsOrHigher": 10},
    {"fips": 1002, "state": "Y", "area_name": "B", "bachelorsOrHigher": 90},
]


@pytest.fixture
def topology() -> dict:
    return copy.deepcopy(TWO_COUNTY_TOPOLOGY)


@pytest.fixture
def raw_statistics() -> list[dict]:
    return copy.deepcopy(TWO_COUNTY_STATISTICS)


@pytest.fixture
def records(raw_statistics):
    return parse_statistics(raw_statistics)
