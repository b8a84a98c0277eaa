"""Choropleth — Streamlit host page for the county education map."""

from __future__ import annotations

import asyncio
import io

import pandas as pd
import plotly.express as px
import streamlit as st
import streamlit.components.v1 as components

from choropleth.config import MapConfig
from choropleth.pipeline import MapInstance, PipelineState, run_pipeline
from choropleth.processing.joiner import features_to_frame
from choropleth.rendering.legend import format_tick
from choropleth.rendering.page import render_page

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Educational Attainment — US Counties",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded",
)


class MapUnavailable(RuntimeError):
    """The pipeline ended in the failed state."""


@st.cache_resource(ttl=600)
def load_map() -> MapInstance:
    """Fetch and render the map (cached 10 min).

    A failed run raises so that Streamlit does not cache it and the next
    rerun fetches again.
    """
    instance = asyncio.run(run_pipeline(MapConfig.from_env()))
    if instance.state is PipelineState.FAILED:
        raise MapUnavailable(str(instance.error))
    return instance


def download_button_csv(df: pd.DataFrame, filename: str, label: str = "Download CSV"):
    """Render a CSV download button."""
    buf = io.BytesIO()
    df.to_csv(buf, index=False)
    st.download_button(label, buf.getvalue(), file_name=filename, mime="text/csv")


def download_button_excel(df: pd.DataFrame, filename: str, label: str = "Download Excel"):
    """Render an Excel download button."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name="data")
    st.download_button(label, buf.getvalue(), file_name=filename, mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

st.sidebar.title("🎓 Education map")
st.sidebar.markdown("**Bachelor's degree or higher**  \nAdults 25+, by county")
st.sidebar.markdown("---")

page = st.sidebar.radio("Navigation", ["Map", "Data", "Legend"])

st.sidebar.markdown("---")
st.sidebar.caption(
    "Source : [USDA ERS](https://www.ers.usda.gov/data-products/county-level-data-sets/)  \n"
    "Topology : US Census Bureau."
)

try:
    instance = load_map()
except MapUnavailable as exc:
    st.error(f"The map could not be rendered: {exc}")
    st.stop()

choropleth = instance.map


# ---------------------------------------------------------------------------
# Page: Map
# ---------------------------------------------------------------------------

def page_map():
    st.title("🗺️ United States Educational Attainment")
    matched = sum(f.matched for f in choropleth.features)
    c1, c2, c3 = st.columns(3)
    c1.metric("Counties drawn", f"{len(choropleth.features):,}")
    c2.metric("With statistics", f"{matched:,}")
    lo, hi = choropleth.color_scale.domain()
    c3.metric("Range", f"{lo:g}% – {hi:g}%")

    components.html(render_page(choropleth), height=instance.config.height + 160, scrolling=False)


# ---------------------------------------------------------------------------
# Page: Data
# ---------------------------------------------------------------------------

def page_data():
    st.title("📋 County data")
    data = features_to_frame(choropleth.features)
    data["color"] = [choropleth.color_scale(p) for p in data["percentage"]]

    states = sorted(data["state_name"].dropna().unique())
    selected = st.selectbox("State", ["All states"] + states)
    if selected != "All states":
        data = data[data["state_name"] == selected]

    st.dataframe(data.sort_values("percentage", ascending=False), use_container_width=True, hide_index=True)
    col1, col2 = st.columns(2)
    with col1:
        download_button_csv(data, "education_by_county.csv")
    with col2:
        download_button_excel(data, "education_by_county.xlsx")


# ---------------------------------------------------------------------------
# Page: Legend
# ---------------------------------------------------------------------------

def page_legend():
    st.title("🎨 Legend bins")
    scale = choropleth.color_scale
    bins = pd.DataFrame(
        [
            {"color": color, "from": format_tick(lo), "to": format_tick(hi)}
            for color in scale.range()
            for lo, hi in [scale.invert_extent(color)]
        ]
    )
    st.dataframe(bins, use_container_width=True, hide_index=True)

    data = features_to_frame(choropleth.features).dropna(subset=["percentage"])
    data["bin"] = [scale(p) for p in data["percentage"]]
    fig = px.histogram(
        data,
        x="percentage",
        color="bin",
        nbins=len(scale.range()) * 6,
        category_orders={"bin": scale.range()},
        color_discrete_map={c: c for c in scale.range()},
        title="Distribution of counties by percentage",
        labels={"percentage": "% with bachelor's degree or higher", "bin": ""},
    )
    fig.update_layout(template="plotly_white", showlegend=False)
    st.plotly_chart(fig, use_container_width=True)


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------

PAGES = {
    "Map": page_map,
    "Data": page_data,
    "Legend": page_legend,
}

PAGES[page]()
