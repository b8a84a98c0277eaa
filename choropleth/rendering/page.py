"""Standalone HTML page embedding a rendered map.

The browser script is only a host adapter: it turns DOM pointer and wheel
input into the same behavior the Python interaction handlers implement
(tooltip text and offset, scale extent, pan limits, constant stroke width).
"""

from __future__ import annotations

import html
import json

from choropleth.rendering.map import ChoroplethMap

D3_URL = "https://d3js.org/d3.v7.min.js"

PAGE_CSS = """
body { font-family: sans-serif; margin: 0; padding: 20px; background: #fff; }
#title { text-align: center; margin: 0 0 4px; }
#description { text-align: center; margin: 0 0 12px; color: #555; }
#plot { display: block; width: 100%; max-width: 1000px; aspect-ratio: 5 / 3; margin: 0 auto; }
.county { stroke: none; }
.county:hover { opacity: 0.8; }
.states { fill: none; stroke: #fff; stroke-linejoin: round; pointer-events: none; }
.tooltip {
  position: fixed; pointer-events: none; padding: 6px 8px; border-radius: 4px;
  background: rgba(0, 0, 0, 0.8); color: #fff; font-size: 13px;
}
.hidden { display: none; }
"""

PAGE_SCRIPT = """
(function () {
  const settings = %(settings)s;
  const plot = d3.select('#plot');
  const wrapper = plot.select('g.map');
  const tooltip = d3.select('#tooltip');
  const field = (value) => (value === undefined ? 'n/a' : value);

  plot.selectAll('path.county')
    .on('mouseover', (event) => {
      const data = event.currentTarget.dataset;
      tooltip
        .text(`${field(data.areaName)}, ${field(data.state)}: ${field(data.education)}`)
        .style('top', `${event.clientY + settings.offset}px`)
        .style('left', `${event.clientX + settings.offset}px`)
        .attr('data-education', data.education === undefined ? null : data.education)
        .classed('hidden', false);
    })
    .on('mouseout', () => tooltip.classed('hidden', true));

  plot.call(
    d3.zoom()
      .scaleExtent(settings.scaleExtent)
      .translateExtent(settings.extent)
      .on('zoom', ({ transform }) => {
        wrapper.attr('transform', transform);
        wrapper.attr('stroke-width', 1 / transform.k);
      })
  );
})();
"""


def render_page(
    choropleth: ChoroplethMap,
    title: str = "United States Educational Attainment",
    description: str = "Percentage of adults age 25 and older with a bachelor's degree or higher (2010-2014)",
) -> str:
    settings = {
        "offset": choropleth.tooltip.offset,
        "scaleExtent": list(choropleth.zoom.scale_extent),
        "extent": [list(p) for p in choropleth.zoom.translate_extent],
    }
    script = PAGE_SCRIPT % {"settings": json.dumps(settings)}
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{html.escape(title)}</title>
<script src="{D3_URL}"></script>
<style>{PAGE_CSS}</style>
</head>
<body>
<h1 id="title">{html.escape(title)}</h1>
<p id="description">{html.escape(description)}</p>
{choropleth.surface.to_markup()}
{choropleth.tooltip.element.to_markup()}
<script>{script}</script>
</body>
</html>
"""
