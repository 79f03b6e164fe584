"""
Combined Layout Engine Tests
============================

Lane assignment for popups above and below the time axis:
greedy first-fit, anti-clustering, clamping and the zero-width fast path.
"""

import random

import pytest

from conftest import make_events
from timeline_layout.data.models import LayoutRequest
from timeline_layout.rendering.combined_layout import (
    CombinedLayoutEngine,
    calculate_combined_layout,
    container_min_height_px,
)


def lane_of(placement):
    return placement.vertical_level * 2 + (0 if placement.is_above else 1)


class TestCombinedLayoutEngine:

    def test_single_event_goes_above_on_level_zero(self):
        engine = CombinedLayoutEngine(popup_width_px=200)
        result = engine.layout(make_events(500), 1000)

        assert len(result.events) == 1
        assert result.events[0].is_above is True
        assert result.events[0].vertical_level == 0
        assert result.max_level == 0

    def test_dense_cluster_scenario(self):
        """Three events 2 px apart end up in lanes 0, 1 and 2."""
        engine = CombinedLayoutEngine(popup_width_px=200, buffer_px=10, min_separation_px=20)
        result = engine.layout(make_events(100, 102, 104), 1000)

        assert [lane_of(p) for p in result.events] == [0, 1, 2]
        assert [(p.is_above, p.vertical_level) for p in result.events] == [
            (True, 0), (False, 0), (True, 1)
        ]
        assert result.max_level == 1

    def test_zero_width_returns_empty_result(self):
        engine = CombinedLayoutEngine(popup_width_px=200)
        result = engine.layout(make_events(0, 10, 20), 0)

        assert result.events == ()
        assert result.max_level == 0

    def test_no_events_returns_empty_result(self):
        engine = CombinedLayoutEngine(popup_width_px=200)
        result = engine.layout((), 1000)

        assert result.events == ()
        assert result.max_level == 0

    def test_anti_clustering_rejects_geometrically_free_lane(self):
        engine = CombinedLayoutEngine(popup_width_px=20, buffer_px=0, min_separation_px=100)
        result = engine.layout(make_events(50, 80, 200), 1000)

        # 80 fits after 50 in lane 0 but is only 30 px from it
        assert [lane_of(p) for p in result.events] == [0, 1, 0]

    def test_first_fit_prefers_earliest_lane(self):
        """Both lanes are free for the third event; the older lane wins."""
        engine = CombinedLayoutEngine(popup_width_px=20, buffer_px=0, min_separation_px=0)
        result = engine.layout(make_events(100, 105, 200), 1000)

        assert [lane_of(p) for p in result.events] == [0, 1, 0]

    def test_lane_bookkeeping_uses_clamped_position(self):
        engine = CombinedLayoutEngine(popup_width_px=200, buffer_px=10, min_separation_px=20)
        # Event at 0 is clamped to 110, so its window reaches 220
        result = engine.layout(make_events(0, 300), 1000)

        assert [lane_of(p) for p in result.events] == [0, 1]

    def test_right_edge_is_clamped_too(self):
        engine = CombinedLayoutEngine(popup_width_px=200, buffer_px=10, min_separation_px=20)
        # 1000 is clamped to 890; its window starts at 780, overlapping 700's
        result = engine.layout(make_events(700, 1000), 1000)

        assert [lane_of(p) for p in result.events] == [0, 1]

    def test_lanes_alternate_above_and_below(self):
        engine = CombinedLayoutEngine(popup_width_px=100)
        result = engine.layout(make_events(*([400] * 6)), 1000)

        assert [p.is_above for p in result.events] == [True, False, True, False, True, False]
        assert [p.vertical_level for p in result.events] == [0, 0, 1, 1, 2, 2]
        assert result.max_level == 2

    def test_vertical_offset_follows_level(self):
        engine = CombinedLayoutEngine(popup_width_px=100, popup_vertical_spacing_px=170)
        result = engine.layout(make_events(400, 400, 400), 1000)

        assert [p.vertical_offset for p in result.events] == [0, 0, 170]

    def test_default_min_separation_is_tenth_of_popup_width(self):
        engine = CombinedLayoutEngine(popup_width_px=256)

        assert engine.min_separation_px == pytest.approx(25.6)
        assert engine.buffer_px == 10

    def test_placements_keep_input_order(self):
        engine = CombinedLayoutEngine(popup_width_px=50)
        events = make_events(10, 300, 600, 900)
        result = engine.layout(events, 1000)

        assert [p.event_id for p in result.events] == [e.id for e in events]
        assert all(lane_of(p) == 0 for p in result.events)

    def test_same_input_gives_same_layout(self):
        rng = random.Random(7)
        events = make_events(*sorted(rng.uniform(0, 2000) for _ in range(200)))
        engine = CombinedLayoutEngine(popup_width_px=256, popup_vertical_spacing_px=170)

        assert engine.layout(events, 2000) == engine.layout(events, 2000)

    def test_no_overlap_and_minimum_separation_within_lanes(self):
        rng = random.Random(42)
        width = 1500
        popup, buffer, min_sep = 120, 10, 30
        events = make_events(*sorted(rng.uniform(0, width) for _ in range(300)))
        engine = CombinedLayoutEngine(popup_width_px=popup, buffer_px=buffer,
                                      min_separation_px=min_sep)
        result = engine.layout(events, width)

        margin = popup / 2 + buffer
        last_in_lane = {}
        for event, placement in zip(events, result.events):
            clamped = max(margin, min(event.position, width - margin))
            window = (clamped - margin, clamped + margin)
            lane = lane_of(placement)
            if lane in last_in_lane:
                prev_position, prev_window = last_in_lane[lane]
                assert window[0] > prev_window[1]
                assert abs(event.position - prev_position) >= min_sep
            last_in_lane[lane] = (event.position, window)

        assert result.max_level == max(p.vertical_level for p in result.events)


class TestCalculateCombinedLayout:

    def test_uses_request_sizing(self):
        request = LayoutRequest(
            events=make_events(100, 102, 104),
            timeline_width_px=1000,
            popup_width_px=200,
            popup_vertical_spacing_px=50,
            buffer_px=10,
            min_separation_px=20
        )
        result = calculate_combined_layout(request)

        assert [p.vertical_offset for p in result.events] == [0, 0, 50]
        assert result.max_level == 1

    def test_container_height(self):
        assert container_min_height_px(0, 170) == 192
        assert container_min_height_px(2, 170, rem_px=16) == 192 + 680
