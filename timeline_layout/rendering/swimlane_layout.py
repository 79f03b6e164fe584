"""
Swimlane Layout Engine - One fixed row per entity.

Every event is plotted once on the row of each entity it involves. Events
without entities, or whose entities are not in the row order, produce no
placements for those entities.
"""

import logging
from typing import Dict, Sequence

from timeline_layout.data.models import (
    LaneDescriptor,
    LayoutRequest,
    PositionedEvent,
    SwimlaneLayoutResult,
    SwimlanePlacement,
)

# Configure logger
logger = logging.getLogger(__name__)


class SwimlaneLayoutEngine:
    """Assigns events to per-entity horizontal rows."""

    def __init__(self, lane_height_px: float):
        """
        Initialize the engine.

        Args:
            lane_height_px: Height of one entity row in pixels
        """
        self.lane_height_px = lane_height_px

    def lane_center(self, index: int) -> float:
        return index * self.lane_height_px + self.lane_height_px / 2

    def layout(self, events: Sequence[PositionedEvent], entity_order: Sequence[str],
               timeline_width_px: float) -> SwimlaneLayoutResult:
        """
        Build the row descriptors and one placement per (event, entity) pair.

        Args:
            events: Positioned events
            entity_order: Entity ids, one row each, top to bottom
            timeline_width_px: Width of the time axis

        Returns:
            SwimlaneLayoutResult: Placements and lane descriptors; both
                empty when the width is zero or there are no events
        """
        if timeline_width_px == 0 or not events:
            return SwimlaneLayoutResult()

        half_height = self.lane_height_px / 2
        lanes = tuple(
            LaneDescriptor(entity_id, self.lane_center(index) - half_height)
            for index, entity_id in enumerate(entity_order)
        )
        # First row wins if an entity is listed twice
        lane_offsets: Dict[str, float] = {}
        for lane in lanes:
            lane_offsets.setdefault(lane.entity_id, lane.y_offset)

        placements = []
        dropped = 0
        for event in events:
            for entity_id in event.entity_ids:
                y_offset = lane_offsets.get(entity_id)
                if y_offset is None:
                    dropped += 1
                    continue
                placements.append(SwimlanePlacement(
                    placement_id=f"{event.id}-{entity_id}",
                    event_id=event.id,
                    y_offset=y_offset
                ))

        logger.debug(f"Swimlane layout: {len(placements)} placements on {len(lanes)} lanes "
                     f"({dropped} entity references without a lane)")

        return SwimlaneLayoutResult(events=tuple(placements), lanes=lanes)


def calculate_swimlane_layout(request: LayoutRequest) -> SwimlaneLayoutResult:
    """Run the swimlane engine for a layout request."""
    engine = SwimlaneLayoutEngine(request.swimlane_height_px)
    return engine.layout(request.events, request.entity_order, request.timeline_width_px)


def swimlane_container_height_px(lane_count: int, lane_height_px: float,
                                 rem_px: float = 16.0) -> float:
    """Height of the swimlane container: all rows plus 4 rem of padding."""
    return lane_count * lane_height_px + 4 * rem_px
