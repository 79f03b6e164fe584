"""
Layout data model, wire messages and the background worker.
"""

from .models import (
    CombinedLayoutResult,
    CombinedPlacement,
    LaneDescriptor,
    LayoutRequest,
    PositionedEvent,
    SwimlaneLayoutResult,
    SwimlanePlacement,
    TimestampedEvent,
)

__all__ = [
    'CombinedLayoutResult',
    'CombinedPlacement',
    'LaneDescriptor',
    'LayoutRequest',
    'PositionedEvent',
    'SwimlaneLayoutResult',
    'SwimlanePlacement',
    'TimestampedEvent',
]
