"""
Time Scale Tests
"""

import math
import random

import pytest

from timeline_layout.rendering.time_scale import TimeScale


class TestTimeScale:

    def test_maps_range_onto_width(self):
        scale = TimeScale(1000, 3000, 800)

        assert scale.to_pixel(1000) == 0
        assert scale.to_pixel(2000) == 400
        assert scale.to_pixel(3000) == 800

    def test_inverse(self):
        scale = TimeScale(1000, 3000, 800)

        assert scale.to_timestamp(0) == 1000
        assert scale.to_timestamp(200) == 1500
        assert scale.to_timestamp(scale.to_pixel(2750)) == pytest.approx(2750)

    def test_collapsed_span_maps_to_zero(self):
        scale = TimeScale(5000, 5000, 800)

        assert scale.is_degenerate
        assert scale.to_pixel(5000) == 0
        assert scale.to_pixel(9000) == 0
        assert scale.to_timestamp(400) == 5000

    def test_zero_width_maps_to_zero(self):
        scale = TimeScale(0, 1000, 0)

        assert scale.to_pixel(500) == 0
        assert not math.isnan(scale.to_timestamp(10))

    def test_from_timestamps_spans_min_to_max(self):
        scale = TimeScale.from_timestamps([300, 100, 200], 1000)

        assert scale.min_timestamp == 100
        assert scale.max_timestamp == 300

    def test_from_timestamps_ignores_non_finite(self):
        scale = TimeScale.from_timestamps([float('nan'), 100, float('inf'), 200], 1000)

        assert (scale.min_timestamp, scale.max_timestamp) == (100, 200)

    def test_empty_view_spans_one_year_around_now(self):
        scale = TimeScale.from_timestamps([], 1000, now=10 ** 12)

        assert scale.span == TimeScale.EMPTY_SPAN_MS
        assert scale.to_pixel(10 ** 12) == pytest.approx(500)

    def test_visible_range_without_transform(self):
        scale = TimeScale(0, 1000, 500)

        assert scale.visible_range() == (0, 1000)

    def test_visible_range_when_zoomed_and_panned(self):
        scale = TimeScale(0, 1000, 500)

        # 2x zoom, panned so world x = 250 is at the left edge
        start, end = scale.visible_range(offset_x=-500, zoom_k=2)

        assert start == pytest.approx(500)
        assert end == pytest.approx(1000)

    def test_positions_stay_within_width(self):
        rng = random.Random(11)

        for width in (1, 333, 1280, 4096.5):
            timestamps = [rng.uniform(-1e12, 2e12) for _ in range(rng.randint(1, 200))]
            scale = TimeScale.from_timestamps(timestamps, width)
            tolerance = width * 1e-9

            for timestamp in timestamps:
                assert -tolerance <= scale.to_pixel(timestamp) <= width + tolerance
