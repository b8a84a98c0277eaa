"""Tests for pan/zoom, the tooltip and event dispatch."""

from __future__ import annotations

import pytest

from choropleth.config import MapConfig
from choropleth.interaction.events import (
    POINTER_ENTER,
    TRANSFORM_CHANGED,
    EventDispatcher,
    PointerEvent,
)
from choropleth.interaction.tooltip import Tooltip, tooltip_text
from choropleth.interaction.zoom import IDENTITY, ZoomBehavior, ZoomTransform, constrain
from choropleth.pipeline import build_map
from choropleth.processing.joiner import JoinedFeature

EXTENT = ((0.0, 0.0), (1000.0, 600.0))


@pytest.fixture
def zoom() -> ZoomBehavior:
    return ZoomBehavior(EXTENT, (1, 12))


def _inside_canvas(t: ZoomTransform) -> bool:
    """The zoomed content still covers the whole viewport."""
    (x0, y0), (x1, y1) = EXTENT
    return (
        t.x <= x0 and t.y <= y0
        and t.x + x1 * t.k >= x1 and t.y + y1 * t.k >= y1
    )


# ── Events ────────────────────────────────────────────────────────────────

class TestEventDispatcher:
    def test_dispatch_to_handlers(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.on(POINTER_ENTER, received.append)
        event = PointerEvent(1, 2)
        dispatcher.dispatch(POINTER_ENTER, event)
        assert received == [event]

    def test_off(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.on(POINTER_ENTER, received.append)
        dispatcher.off(POINTER_ENTER, received.append)
        dispatcher.dispatch(POINTER_ENTER, PointerEvent(1, 2))
        assert received == []

    def test_unknown_event(self):
        with pytest.raises(ValueError):
            EventDispatcher().on("click", print)


# ── Zoom ──────────────────────────────────────────────────────────────────

class TestZoomTransform:
    def test_apply_and_invert(self):
        t = ZoomTransform(2, 10, 20)
        assert t.apply((5, 5)) == (20, 30)
        assert t.invert((20, 30)) == (5, 5)

    def test_str(self):
        assert str(ZoomTransform(2, -10, 0)) == "translate(-10,0) scale(2)"
        assert str(IDENTITY) == "translate(0,0) scale(1)"

    def test_constrain_inside_is_unchanged(self):
        t = ZoomTransform(2, -100, -100)
        assert constrain(t, EXTENT, EXTENT) == t


class TestZoomBehavior:
    @pytest.mark.parametrize("factor", [1e-6, 0.5, 1.5, 11.99, 12, 50, 1e9])
    def test_scale_always_clamped(self, zoom, factor):
        t = zoom.scale_by(factor, (300, 200))
        assert 1 <= t.k <= 12
        assert _inside_canvas(t)

    def test_repeated_zoom_caps_at_max(self, zoom):
        for _ in range(20):
            zoom.scale_by(2)
        assert zoom.transform.k == 12

    def test_scale_keeps_pointer_fixed(self, zoom):
        t = zoom.scale_to(2, (500, 300))
        assert t.apply((500, 300)) == (500, 300)

    @pytest.mark.parametrize("dx,dy", [(10_000, 0), (-10_000, 0), (0, 10_000), (-5_000, -5_000)])
    def test_pan_constrained(self, zoom, dx, dy):
        zoom.scale_to(4, (500, 300))
        t = zoom.pan_by(dx, dy)
        assert _inside_canvas(t)

    def test_pan_at_identity_does_nothing(self, zoom):
        assert zoom.pan_by(250, -80) == IDENTITY

    def test_pan_within_bounds(self, zoom):
        zoom.scale_to(2, (0, 0))
        t = zoom.pan_by(-100, -50)
        assert (t.x, t.y) == (-100, -50)

    def test_wheel(self, zoom):
        assert zoom.wheel(-500).k == pytest.approx(2)
        assert zoom.wheel(10_000).k == 1

    def test_reset(self, zoom):
        zoom.scale_by(3)
        assert zoom.reset() == IDENTITY

    def test_transform_changed_dispatched_only_on_change(self, zoom):
        events = []
        zoom.dispatcher.on(TRANSFORM_CHANGED, events.append)
        zoom.scale_by(2)
        zoom.scale_to(2)
        zoom.scale_by(0.1)
        assert len(events) == 2
        assert events[0].previous == IDENTITY
        assert events[1].transform == IDENTITY


# ── Tooltip ───────────────────────────────────────────────────────────────

class TestTooltip:
    def test_text(self):
        feat = JoinedFeature(id=1, geometry=None, area_name="A", state_name="X", percentage=10.0)
        assert tooltip_text(feat) == "A, X: 10"

    def test_text_for_unmatched_feature(self):
        assert tooltip_text(JoinedFeature(id=1, geometry=None)) == "n/a, n/a: n/a"

    def test_show_and_hide(self):
        tooltip = Tooltip(offset=10)
        assert tooltip.hidden
        feat = JoinedFeature(id=1, geometry=None, area_name="A", state_name="X", percentage=12.5)
        tooltip.show(PointerEvent(100, 50), feat)
        assert not tooltip.hidden
        assert (tooltip.left, tooltip.top) == (110, 60)
        assert tooltip.element.get("data-education") == 12.5
        assert tooltip.element.get("style") == "top: 60px; left: 110px"
        tooltip.hide()
        assert tooltip.hidden


# ── Map interactions ──────────────────────────────────────────────────────

class TestMapInteractions:
    @pytest.fixture
    def choropleth(self, topology, records):
        return build_map(topology, records, MapConfig())

    def test_hover_shows_tooltip(self, choropleth):
        choropleth.pointer_enter(1001, 200, 100)
        assert choropleth.tooltip.text == "A, X: 10"
        assert not choropleth.tooltip.hidden
        choropleth.pointer_leave(1001)
        assert choropleth.tooltip.hidden

    def test_single_reusable_tooltip(self, choropleth):
        choropleth.pointer_enter(1001, 0, 0)
        choropleth.pointer_enter(1002, 0, 0)
        assert choropleth.tooltip.text == "B, Y: 90"

    def test_hover_unknown_shape(self, choropleth):
        with pytest.raises(KeyError):
            choropleth.pointer_enter(4242, 0, 0)

    def test_zoom_updates_wrapper(self, choropleth):
        choropleth.zoom.scale_to(4, (0, 0))
        assert choropleth.wrapper.get("transform") == "translate(0,0) scale(4)"
        assert choropleth.wrapper.get("stroke-width") == 0.25

    def test_states_outline_outside_hover(self, choropleth):
        assert choropleth.shape("01") is None
