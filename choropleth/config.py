"""Map configuration.

Every value can be overridden through a ``CHOROPLETH_*`` environment variable
when the config is built with :meth:`MapConfig.from_env`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from choropleth.ingestion.datasets import DATASET_REGISTRY

# Palette sizes available in the sequential Greens scheme
MIN_GRADES = 3
MAX_GRADES = 9


@dataclass(frozen=True)
class MapConfig:
    width: int = 1000
    height: int = 600
    padding: int = 60
    grades_count: int = 8
    legend_cell_size: int = 25
    scale_extent: tuple[float, float] = (1.0, 12.0)
    tooltip_offset: int = 10
    topology_url: str = field(default_factory=lambda: DATASET_REGISTRY["counties"].url)
    statistics_url: str = field(default_factory=lambda: DATASET_REGISTRY["education"].url)
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Plot size must be positive, got {self.width}x{self.height}")
        if self.padding < 0:
            raise ValueError(f"Padding must not be negative, got {self.padding}")
        if not MIN_GRADES <= self.grades_count <= MAX_GRADES:
            raise ValueError(
                f"grades_count must be between {MIN_GRADES} and {MAX_GRADES}, got {self.grades_count}"
            )
        if self.legend_cell_size <= 0:
            raise ValueError(f"legend_cell_size must be positive, got {self.legend_cell_size}")
        k0, k1 = self.scale_extent
        if k0 <= 0 or k0 > k1:
            raise ValueError(f"Invalid scale extent: {self.scale_extent}")

    @property
    def extent(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Viewport corners of the drawing surface."""
        return (0.0, 0.0), (float(self.width), float(self.height))

    @property
    def view_box(self) -> str:
        return f"0 0 {self.width} {self.height}"

    @classmethod
    def from_env(cls) -> MapConfig:
        """Build a config from ``CHOROPLETH_*`` environment variables."""
        kwargs: dict = {}
        int_vars = {
            "width": "CHOROPLETH_WIDTH",
            "height": "CHOROPLETH_HEIGHT",
            "padding": "CHOROPLETH_PADDING",
            "grades_count": "CHOROPLETH_GRADES",
            "legend_cell_size": "CHOROPLETH_LEGEND_CELL_SIZE",
            "tooltip_offset": "CHOROPLETH_TOOLTIP_OFFSET",
        }
        for name, var in int_vars.items():
            value = os.getenv(var)
            if value:
                kwargs[name] = int(value)

        max_zoom = os.getenv("CHOROPLETH_MAX_ZOOM")
        if max_zoom:
            kwargs["scale_extent"] = (1.0, float(max_zoom))

        timeout = os.getenv("CHOROPLETH_TIMEOUT")
        if timeout:
            kwargs["timeout"] = float(timeout)

        topology_url = os.getenv("CHOROPLETH_TOPOLOGY_URL")
        if topology_url:
            kwargs["topology_url"] = topology_url
        statistics_url = os.getenv("CHOROPLETH_STATISTICS_URL")
        if statistics_url:
            kwargs["statistics_url"] = statistics_url

        return cls(**kwargs)
