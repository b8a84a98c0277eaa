"""Join of county geometries with their education statistics."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from choropleth.processing.topology import feature

logger = logging.getLogger(__name__)


@dataclass
class JoinedFeature:
    """A county geometry merged with its statistic record, if any."""

    id: Any
    geometry: dict | None
    properties: dict = field(default_factory=dict)
    area_name: str | None = None
    state_name: str | None = None
    percentage: float | None = None
    matched: bool = False

    def to_geojson(self) -> dict:
        return {
            "type": "Feature",
            "id": self.id,
            "properties": {
                **self.properties,
                "area_name": self.area_name,
                "state_name": self.state_name,
                "percentage": self.percentage,
            },
            "geometry": self.geometry,
        }


def _present(value: Any) -> Any:
    """``None`` for the NaN pandas leaves in place of a null value."""
    return None if value is None or (isinstance(value, float) and math.isnan(value)) else value


def _lookup_table(statistics: pd.DataFrame) -> dict[Any, dict]:
    if statistics.empty:
        return {}
    first = statistics.drop_duplicates(subset=["id"], keep="first")
    return first.set_index("id")[["area_name", "state_name", "percentage"]].to_dict("index")


def join_features(
    topology: dict,
    statistics: pd.DataFrame,
    object_name: str = "counties",
) -> list[JoinedFeature]:
    """Merge every geometry of *object_name* with the record sharing its id.

    Returns one feature per geometry, in topology order. Geometries without
    a record keep ``None`` statistic fields; records without a geometry are
    dropped.
    """
    collection = feature(topology, topology["objects"][object_name])
    lookup = _lookup_table(statistics)

    joined = []
    matched_ids = set()
    unmatched = 0
    for feat in collection["features"]:
        fid = feat.get("id")
        row = lookup.get(fid)
        if row is None:
            unmatched += 1
            joined.append(JoinedFeature(id=fid, geometry=feat["geometry"], properties=feat["properties"]))
            continue
        matched_ids.add(fid)
        pct = _present(row["percentage"])
        joined.append(JoinedFeature(
            id=fid,
            geometry=feat["geometry"],
            properties=feat["properties"],
            area_name=_present(row["area_name"]),
            state_name=_present(row["state_name"]),
            percentage=None if pct is None else float(pct),
            matched=True,
        ))

    orphans = len(lookup) - len(matched_ids)
    if unmatched:
        logger.info("%d of %d geometries have no statistics record", unmatched, len(joined))
    if orphans:
        logger.debug("%d statistics records match no geometry", orphans)
    logger.info("Joined %d features", len(joined))
    return joined


def features_to_frame(features: list[JoinedFeature]) -> pd.DataFrame:
    """Tabular view of the joined features, without geometry."""
    return pd.DataFrame(
        [
            {
                "id": f.id,
                "area_name": f.area_name,
                "state_name": f.state_name,
                "percentage": f.percentage,
            }
            for f in features
        ],
        columns=["id", "area_name", "state_name", "percentage"],
    )
