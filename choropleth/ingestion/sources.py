"""Ingestion of the topology and education statistics documents.

Both documents are plain JSON served over HTTP. They are requested
concurrently and validated before anything downstream touches them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from choropleth.config import MapConfig
from choropleth.schemas import StatisticRecord, parse_statistics, parse_topology

logger = logging.getLogger(__name__)


class DataAcquisitionError(Exception):
    """A source document could not be fetched or parsed."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(f"{source}: {cause}")
        self.source = source
        self.cause = cause


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    """GET *url* and decode the body as JSON.

    Raises ``httpx.HTTPError`` on transport failure or non-2xx status and
    ``ValueError`` when the body is not JSON.
    """
    logger.info("Fetching %s", url)
    resp = await client.get(url, follow_redirects=True)
    resp.raise_for_status()
    return resp.json()


async def fetch_topology(client: httpx.AsyncClient, url: str) -> dict[str, Any]:
    payload = await fetch_json(client, url)
    topology = parse_topology(payload)
    logger.info(
        "Topology loaded: %d arcs, objects=%s",
        len(topology["arcs"]),
        sorted(topology["objects"]),
    )
    return topology


async def fetch_statistics(client: httpx.AsyncClient, url: str) -> list[StatisticRecord]:
    payload = await fetch_json(client, url)
    records = parse_statistics(payload)
    logger.info("Statistics loaded: %d records", len(records))
    return records


async def fetch_documents(
    config: MapConfig,
    client: httpx.AsyncClient | None = None,
) -> tuple[dict[str, Any], list[StatisticRecord]]:
    """Fetch the topology and the statistics concurrently.

    Both requests always run to completion; if either fails the first
    failure is raised as :class:`DataAcquisitionError`. When *client* is
    None a client is created for the call and closed afterwards.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=httpx.Timeout(config.timeout))

    try:
        topology, records = await asyncio.gather(
            fetch_topology(client, config.topology_url),
            fetch_statistics(client, config.statistics_url),
            return_exceptions=True,
        )
    finally:
        if owns_client:
            await client.aclose()

    for source, result in (("topology", topology), ("statistics", records)):
        if isinstance(result, (httpx.HTTPError, ValueError)):
            raise DataAcquisitionError(source, result)
        if isinstance(result, BaseException):
            raise result

    return topology, records
