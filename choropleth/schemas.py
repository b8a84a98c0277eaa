"""Pydantic schemas for the fetched documents."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter

# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class StatisticRecord(BaseModel):
    """One county row of the education statistics document.

    The wire names (``fips``, ``state``, ``bachelorsOrHigher``) are accepted
    as aliases; the attributes use the names the rest of the code expects.
    Only the id is required: a record with a null or absent value still
    identifies its county, which is then drawn without that value.
    """

    id: int = Field(alias="fips")
    area_name: str | None = None
    state_name: str | None = Field(default=None, alias="state")
    percentage: float | None = Field(default=None, alias="bachelorsOrHigher")

    model_config = {"populate_by_name": True, "frozen": True}


StatisticsDocument = TypeAdapter(list[StatisticRecord])


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------


class QuantizeTransform(BaseModel):
    scale: tuple[float, float]
    translate: tuple[float, float]


class TopologyDocument(BaseModel):
    """Minimal structural check of a TopoJSON topology.

    Only the keys the joiner and the mesh rely on are validated; geometry
    objects are kept as plain dicts.
    """

    type: str = Field(pattern="^Topology$")
    objects: dict[str, dict[str, Any]]
    arcs: list[list[list[float]]]
    transform: QuantizeTransform | None = None
    bbox: list[float] | None = None


def parse_statistics(payload: Any) -> list[StatisticRecord]:
    """Validate a raw statistics payload. Raises ``pydantic.ValidationError``."""
    return StatisticsDocument.validate_python(payload)


def parse_topology(payload: Any) -> dict[str, Any]:
    """Validate a raw topology payload and return it unchanged.

    Raises ``pydantic.ValidationError`` when the document is not a topology
    and ``ValueError`` when it lacks the ``counties``/``states`` objects.
    """
    TopologyDocument.model_validate(payload)
    for name in ("counties", "states"):
        if name not in payload["objects"]:
            raise ValueError(f"Topology has no '{name}' object")
    return payload
