"""
Combined Layout Engine - Stacks event popups above and below the time axis.

This module provides the CombinedLayoutEngine class which assigns every
event's popup to a lane using greedy first-fit interval scheduling:
- Lanes are scanned in creation order and the first acceptable one wins
- A lane is acceptable if the popup's exclusion window starts after the
  lane's right boundary and the event is at least ``min_separation_px``
  away from the last event placed in that lane
- Even lanes open above the axis, odd lanes below; lane // 2 is the
  stacking level

Lane bookkeeping uses the position clamped so the popup fits inside the
axis. The raw position is what the marker is drawn at and what the
separation rule compares against.
"""

import logging
from typing import List, Optional, Sequence

from timeline_layout.data.models import (
    CombinedLayoutResult,
    CombinedPlacement,
    LayoutRequest,
    PositionedEvent,
)

# Configure logger
logger = logging.getLogger(__name__)


class _Lane:
    """Occupancy of one lane during a single layout pass."""

    __slots__ = ('right_boundary', 'last_position')

    def __init__(self, right_boundary: float, last_position: float):
        self.right_boundary = right_boundary
        self.last_position = last_position


class CombinedLayoutEngine:
    """
    Greedy lane assignment for combined-mode popups.

    The engine holds configuration only. Each call to ``layout`` builds its
    own lane list, so one instance may be shared between threads.
    """

    DEFAULT_BUFFER_PX = LayoutRequest.DEFAULT_BUFFER_PX
    MIN_SEPARATION_RATIO = LayoutRequest.MIN_SEPARATION_RATIO

    def __init__(
        self,
        popup_width_px: float,
        buffer_px: float = DEFAULT_BUFFER_PX,
        min_separation_px: Optional[float] = None,
        popup_vertical_spacing_px: float = 0.0
    ):
        """
        Initialize the engine.

        Args:
            popup_width_px: Width of an annotation popup
            buffer_px: Extra horizontal margin on each side of a popup
            min_separation_px: Anti-clustering threshold, or None for a
                tenth of the popup width
            popup_vertical_spacing_px: Height of one stacking level, used
                for the vertical offset of each placement
        """
        self.popup_width_px = popup_width_px
        self.buffer_px = buffer_px
        if min_separation_px is None:
            min_separation_px = popup_width_px * self.MIN_SEPARATION_RATIO
        self.min_separation_px = min_separation_px
        self.popup_vertical_spacing_px = popup_vertical_spacing_px

    @classmethod
    def from_request(cls, request: LayoutRequest) -> 'CombinedLayoutEngine':
        return cls(
            popup_width_px=request.popup_width_px,
            buffer_px=request.effective_buffer_px,
            min_separation_px=request.effective_min_separation_px,
            popup_vertical_spacing_px=request.popup_vertical_spacing_px
        )

    def layout(self, sorted_events: Sequence[PositionedEvent],
               timeline_width_px: float) -> CombinedLayoutResult:
        """
        Place every event in a lane.

        Args:
            sorted_events: Events sorted ascending by position (stable)
            timeline_width_px: Width of the time axis

        Returns:
            CombinedLayoutResult: One placement per event, in input order,
                and the highest stacking level used
        """
        if timeline_width_px == 0 or not sorted_events:
            return CombinedLayoutResult()

        half_width = self.popup_width_px / 2
        margin = half_width + self.buffer_px
        lanes: List[_Lane] = []
        max_level = 0
        placements = []

        for event in sorted_events:
            raw_position = event.position
            clamped = max(margin, min(raw_position, timeline_width_px - margin))
            window_left = clamped - margin
            window_right = clamped + margin

            lane_index = self._first_fit(lanes, window_left, raw_position)
            if lane_index is None:
                lane_index = len(lanes)
                lanes.append(_Lane(window_right, raw_position))
            else:
                lane = lanes[lane_index]
                lane.right_boundary = window_right
                lane.last_position = raw_position

            level = lane_index // 2
            if level > max_level:
                max_level = level

            placements.append(CombinedPlacement(
                event_id=event.id,
                is_above=lane_index % 2 == 0,
                vertical_level=level,
                vertical_offset=level * self.popup_vertical_spacing_px
            ))

        logger.debug(f"Combined layout: {len(placements)} events in {len(lanes)} lanes, "
                     f"max level {max_level}")

        return CombinedLayoutResult(events=tuple(placements), max_level=max_level)

    def _first_fit(self, lanes: List[_Lane], window_left: float,
                   raw_position: float) -> Optional[int]:
        """Index of the first lane accepting the event, or None."""
        for index, lane in enumerate(lanes):
            if window_left <= lane.right_boundary:
                continue
            # Geometrically free, but too close to the lane's last marker
            if abs(raw_position - lane.last_position) < self.min_separation_px:
                continue
            return index
        return None


def calculate_combined_layout(request: LayoutRequest) -> CombinedLayoutResult:
    """Run the combined engine for a layout request."""
    engine = CombinedLayoutEngine.from_request(request)
    return engine.layout(request.events, request.timeline_width_px)


def container_min_height_px(max_level: int, popup_vertical_spacing_px: float,
                            rem_px: float = 16.0) -> float:
    """
    Minimum height of the combined-mode container.

    12 rem for the axis and first level, plus two spacings (one above, one
    below) per extra level.
    """
    return 12 * rem_px + max_level * popup_vertical_spacing_px * 2
