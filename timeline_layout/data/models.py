"""
Layout Data Model
=================

Immutable value objects exchanged between the timeline view, the layout
service and the two layout engines.

Positions and offsets are pixels. Timestamps are milliseconds since the
epoch, but the engines never look at them: only the pre-computed
``position`` matters for layout.

Author: Timeline Layout Team
Version: 1.0
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class TimestampedEvent:
    """
    An event as supplied by the data layer.

    Attributes:
        id: Unique event identifier
        timestamp: Event time in milliseconds since the epoch
        entity_ids: Entities involved in the event (may be empty)
    """
    id: str
    timestamp: float
    entity_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'entity_ids', tuple(self.entity_ids))


@dataclass(frozen=True)
class PositionedEvent:
    """
    An event with its x coordinate already computed by a TimeScale.

    Attributes:
        id: Unique event identifier
        position: X coordinate in pixels (finite)
        entity_ids: Entities involved in the event (may be empty)
    """
    id: str
    position: float
    entity_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'entity_ids', tuple(self.entity_ids))

    @classmethod
    def from_event(cls, event: TimestampedEvent, scale) -> 'PositionedEvent':
        """Position an event with the given TimeScale."""
        return cls(event.id, scale.to_pixel(event.timestamp), event.entity_ids)


@dataclass(frozen=True)
class CombinedPlacement:
    """
    Placement of one event's popup in combined mode.

    Attributes:
        event_id: Event identifier
        is_above: True if the popup opens above the axis
        vertical_level: Stacking level on its side of the axis (0 = closest)
        vertical_offset: vertical_level times the popup vertical spacing, in pixels
    """
    event_id: str
    is_above: bool
    vertical_level: int
    vertical_offset: float = 0.0


@dataclass(frozen=True)
class CombinedLayoutResult:
    """Output of the combined engine."""
    events: Tuple[CombinedPlacement, ...] = ()
    max_level: int = 0
    request_id: Optional[int] = None


@dataclass(frozen=True)
class SwimlanePlacement:
    """
    One (event, entity) pair plotted on that entity's row.

    Attributes:
        placement_id: ``"<event_id>-<entity_id>"``
        event_id: Event identifier
        y_offset: Top edge of the entity row in pixels
    """
    placement_id: str
    event_id: str
    y_offset: float


@dataclass(frozen=True)
class LaneDescriptor:
    """A swimlane row: the entity it belongs to and its top edge in pixels."""
    entity_id: str
    y_offset: float


@dataclass(frozen=True)
class SwimlaneLayoutResult:
    """Output of the swimlane engine."""
    events: Tuple[SwimlanePlacement, ...] = ()
    lanes: Tuple[LaneDescriptor, ...] = ()
    request_id: Optional[int] = None


@dataclass(frozen=True)
class LayoutRequest:
    """
    A full recomputation request for one timeline view.

    ``buffer_px`` defaults to 10 px and ``min_separation_px`` to a tenth of
    the popup width when left as None.

    Attributes:
        events: Positioned events, sorted ascending by position
        timeline_width_px: Current width of the time axis
        entity_order: Entity ids in swimlane row order
        popup_width_px: Width of an annotation popup
        popup_vertical_spacing_px: Height of one stacking level
        swimlane_height_px: Height of one swimlane row
        buffer_px: Extra horizontal margin around each popup
        min_separation_px: Anti-clustering threshold
        request_id: Sequence number assigned by the LayoutService
    """
    events: Tuple[PositionedEvent, ...]
    timeline_width_px: float
    entity_order: Tuple[str, ...] = ()
    popup_width_px: float = 256.0
    popup_vertical_spacing_px: float = 170.0
    swimlane_height_px: float = 80.0
    buffer_px: Optional[float] = None
    min_separation_px: Optional[float] = None
    request_id: Optional[int] = field(default=None, compare=False)

    DEFAULT_BUFFER_PX = 10.0
    MIN_SEPARATION_RATIO = 0.1

    def __post_init__(self):
        object.__setattr__(self, 'events', tuple(self.events))
        object.__setattr__(self, 'entity_order', tuple(self.entity_order))

    @property
    def effective_buffer_px(self) -> float:
        if self.buffer_px is None:
            return self.DEFAULT_BUFFER_PX
        return self.buffer_px

    @property
    def effective_min_separation_px(self) -> float:
        if self.min_separation_px is None:
            return self.popup_width_px * self.MIN_SEPARATION_RATIO
        return self.min_separation_px


def sort_by_position(events: Sequence[PositionedEvent]) -> Tuple[PositionedEvent, ...]:
    """Stable ascending sort by position; ties keep their original order."""
    return tuple(sorted(events, key=lambda e: e.position))
