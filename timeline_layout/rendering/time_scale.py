"""
Time Scale - Linear mapping between timestamps and x coordinates.

This module provides the TimeScale class which:
- Maps a timestamp in [min_timestamp, max_timestamp] to [0, width]
- Inverts an x coordinate back to a timestamp
- Converts an external pan/zoom transform into a visible time range

A collapsed time span or a zero width never produces NaN or infinity;
every timestamp then maps to 0.
"""

import math
import time
from typing import Iterable, Optional, Tuple


class TimeScale:
    """
    Stateless linear time scale over a given pixel width.

    Timestamps are plain numbers (milliseconds since the epoch in the
    timeline view). The scale is immutable; build a new one when the data
    range or the width changes.
    """

    # Span used when there is nothing to show (one year, in milliseconds)
    EMPTY_SPAN_MS = 365 * 24 * 60 * 60 * 1000

    def __init__(self, min_timestamp: float, max_timestamp: float, width: float):
        """
        Initialize the time scale.

        Args:
            min_timestamp: Timestamp mapped to x = 0
            max_timestamp: Timestamp mapped to x = width
            width: Width of the time axis in pixels
        """
        self.min_timestamp = min_timestamp
        self.max_timestamp = max_timestamp
        self.width = width

    @classmethod
    def from_timestamps(cls, timestamps: Iterable[float], width: float,
                        now: Optional[float] = None) -> 'TimeScale':
        """
        Build a scale spanning the given timestamps.

        Non-finite timestamps are ignored. With no usable timestamps the
        scale spans one year centered on ``now``.

        Args:
            timestamps: Event timestamps
            width: Width of the time axis in pixels
            now: Center of the empty-view span (defaults to the current time)

        Returns:
            TimeScale: New scale
        """
        finite = [t for t in timestamps if math.isfinite(t)]
        if not finite:
            if now is None:
                now = time.time() * 1000
            half = cls.EMPTY_SPAN_MS / 2
            return cls(now - half, now + half, width)
        return cls(min(finite), max(finite), width)

    @property
    def span(self) -> float:
        return self.max_timestamp - self.min_timestamp

    @property
    def is_degenerate(self) -> bool:
        """True when the span or the width is zero."""
        return self.span == 0 or self.width == 0

    def to_pixel(self, timestamp: float) -> float:
        """
        Map a timestamp to an x coordinate.

        Args:
            timestamp: Timestamp to map

        Returns:
            float: X coordinate, or 0 for a degenerate scale
        """
        if self.is_degenerate:
            return 0.0
        return (timestamp - self.min_timestamp) / self.span * self.width

    def to_timestamp(self, x: float) -> float:
        """
        Map an x coordinate back to a timestamp.

        Args:
            x: X coordinate in pixels

        Returns:
            float: Timestamp, or min_timestamp for a degenerate scale
        """
        if self.is_degenerate:
            return self.min_timestamp
        return x / self.width * self.span + self.min_timestamp

    def visible_range(self, offset_x: float = 0.0, zoom_k: float = 1.0) -> Tuple[float, float]:
        """
        Get the time range shown through a pan/zoom transform.

        The transform is owned by the caller and maps a world x to a screen
        x as ``screen = world * zoom_k + offset_x``.

        Args:
            offset_x: Horizontal translation of the transform
            zoom_k: Scale factor of the transform (must be non-zero)

        Returns:
            tuple: (start_timestamp, end_timestamp) visible on screen
        """
        world_left = (0 - offset_x) / zoom_k
        world_right = (self.width - offset_x) / zoom_k
        return self.to_timestamp(world_left), self.to_timestamp(world_right)

    def __repr__(self):
        return (f"TimeScale(min_timestamp={self.min_timestamp}, "
                f"max_timestamp={self.max_timestamp}, width={self.width})")
