"""Full map pipeline: fetch → clean → join → scale → render.

Run with:  python -m choropleth.pipeline --output map.html
"""

from __future__ import annotations

import argparse
import asyncio
import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from choropleth.config import MapConfig
from choropleth.ingestion.sources import DataAcquisitionError, fetch_documents
from choropleth.interaction.events import EventDispatcher
from choropleth.interaction.tooltip import Tooltip
from choropleth.interaction.zoom import ZoomBehavior
from choropleth.processing.cleaner import clean_statistics
from choropleth.processing.joiner import join_features
from choropleth.processing.scale import build_color_scale
from choropleth.rendering.legend import render_legend
from choropleth.rendering.map import ChoroplethMap, render_map
from choropleth.rendering.page import render_page
from choropleth.rendering.svg import Surface
from choropleth.schemas import StatisticRecord

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass
class AcquisitionResult:
    """Outcome of the fetch stage: both documents, or the error."""

    topology: dict[str, Any] | None = None
    records: list[StatisticRecord] | None = None
    error: DataAcquisitionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MapInstance:
    """One map on one drawing surface, as seen by its host."""

    config: MapConfig
    surface: Surface
    state: PipelineState = PipelineState.IDLE
    map: ChoroplethMap | None = None
    error: Exception | None = field(default=None, repr=False)

    @classmethod
    def create(cls, config: MapConfig) -> MapInstance:
        return cls(config=config, surface=Surface(config.width, config.height))


# ---------------------------------------------------------------------------
# Stage 1: acquisition
# ---------------------------------------------------------------------------


async def acquire(config: MapConfig, client: httpx.AsyncClient | None = None) -> AcquisitionResult:
    """Fetch both documents; never raises for fetch or parse failures."""
    try:
        topology, records = await fetch_documents(config, client)
    except DataAcquisitionError as exc:
        return AcquisitionResult(error=exc)
    return AcquisitionResult(topology=topology, records=records)


# ---------------------------------------------------------------------------
# Stage 2: transform and render
# ---------------------------------------------------------------------------


def build_map(
    topology: dict[str, Any],
    records: list[StatisticRecord],
    config: MapConfig,
    surface: Surface | None = None,
) -> ChoroplethMap:
    """Join, scale and draw. Pure: no I/O, no global state."""
    surface = surface or Surface(config.width, config.height)

    logger.info("=== Cleaning statistics ===")
    statistics = clean_statistics(records)

    logger.info("=== Joining features ===")
    features = join_features(topology, statistics)
    color_scale = build_color_scale((r.percentage for r in records), config.grades_count)

    logger.info("=== Rendering ===")
    dispatcher = EventDispatcher()
    tooltip = Tooltip(offset=config.tooltip_offset)
    wrapper = render_map(surface, topology, features, color_scale, dispatcher, tooltip)
    legend, axis = render_legend(surface, color_scale, config)
    zoom = ZoomBehavior(config.extent, config.scale_extent, dispatcher=dispatcher)

    return ChoroplethMap(
        surface=surface,
        wrapper=wrapper,
        legend=legend,
        axis=axis,
        features=features,
        color_scale=color_scale,
        tooltip=tooltip,
        zoom=zoom,
        dispatcher=dispatcher,
    )


async def run_pipeline(
    config: MapConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> MapInstance:
    """Execute the full pipeline once.

    Failures are logged once and leave the instance in the ``failed`` state
    with an empty surface; nothing is raised.
    """
    config = config or MapConfig.from_env()
    instance = MapInstance.create(config)
    instance.state = PipelineState.LOADING

    try:
        result = await acquire(config, client)
        if not result.ok:
            raise result.error
        instance.map = build_map(result.topology, result.records, config)
    except Exception as exc:
        instance.state = PipelineState.FAILED
        instance.error = exc
        logger.error("rendering failed: %s", exc)
        return instance

    instance.surface = instance.map.surface
    instance.state = PipelineState.RENDERED
    logger.info("=== Pipeline complete ===")
    return instance


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render the county education choropleth.")
    parser.add_argument("--output", "-o", default="choropleth.html", help="output file")
    parser.add_argument("--svg", action="store_true", help="write the bare SVG instead of an HTML page")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    instance = asyncio.run(run_pipeline(MapConfig.from_env()))
    if instance.state is PipelineState.FAILED:
        return 1

    out = Path(args.output)
    out.write_text(instance.map.to_svg() if args.svg else render_page(instance.map), encoding="utf-8")
    logger.info("Wrote %s", out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
