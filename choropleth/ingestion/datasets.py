"""Registry of the source documents and where they are fetched from."""

from __future__ import annotations

from dataclasses import dataclass

CDN_BASE_URL = "https://cdn.freecodecamp.org/testable-projects-fcc/data/choropleth_map"


@dataclass
class DatasetConfig:
    name: str
    url: str
    description: str
    source: str = "freeCodeCamp"


DATASET_REGISTRY: dict[str, DatasetConfig] = {
    "counties": DatasetConfig(
        name="US counties topology",
        url=f"{CDN_BASE_URL}/counties.json",
        description="TopoJSON of US counties and states, pre-projected to screen coordinates.",
        source="US Census Bureau (via freeCodeCamp)",
    ),
    "education": DatasetConfig(
        name="Educational attainment by county",
        url=f"{CDN_BASE_URL}/for_user_education.json",
        description="Share of adults aged 25+ with a bachelor's degree or higher, per county.",
        source="USDA Economic Research Service (via freeCodeCamp)",
    ),
}
