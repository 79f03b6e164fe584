"""
Layout Messages
===============

Conversion between layout value objects and the dictionary messages that
cross the background-computation boundary:

- ``CALCULATE_LAYOUT``: one request per recomputation
- ``COMBINED_LAYOUT_RESULT`` and ``SWIMLANE_LAYOUT_RESULT``: two
  independent responses per request

Keys use the camelCase names of the message contract. ``requestId`` is
optional in requests and always present in responses.

Author: Timeline Layout Team
Version: 1.0
"""

import math
from typing import Any, Dict, Optional

from timeline_layout.data.models import (
    CombinedLayoutResult,
    LayoutRequest,
    PositionedEvent,
    SwimlaneLayoutResult,
)
from timeline_layout.utils.error_handler import LayoutRequestError

CALCULATE_LAYOUT = 'CALCULATE_LAYOUT'
COMBINED_LAYOUT_RESULT = 'COMBINED_LAYOUT_RESULT'
SWIMLANE_LAYOUT_RESULT = 'SWIMLANE_LAYOUT_RESULT'


def _number(payload: Dict[str, Any], key: str, required: bool = True) -> Optional[float]:
    if key not in payload or payload[key] is None:
        if required:
            raise LayoutRequestError(f"Missing field '{key}' in layout request", field_name=key)
        return None
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutRequestError(f"Field '{key}' must be a number", field_name=key)
    return float(value)


def _event(raw: Any) -> PositionedEvent:
    if not isinstance(raw, dict):
        raise LayoutRequestError("Each event must be an object", field_name='events')
    if 'id' not in raw:
        raise LayoutRequestError("Event needs an 'id'", field_name='events')
    event_id = str(raw['id'])

    position = raw.get('position')
    if isinstance(position, bool) or not isinstance(position, (int, float)):
        raise LayoutRequestError(f"Event {event_id} needs a numeric 'position'",
                                 field_name='events')
    position = float(position)
    if not math.isfinite(position):
        raise LayoutRequestError(f"Event {event_id} has a non-finite position",
                                 field_name='events')

    entity_ids = raw.get('entityIds')
    if entity_ids is None:
        entity_ids = ()
    if not isinstance(entity_ids, (list, tuple)):
        raise LayoutRequestError(f"Event {event_id} field 'entityIds' must be a list",
                                 field_name='events')
    return PositionedEvent(event_id, position, tuple(str(e) for e in entity_ids))


def parse_request(message: Dict[str, Any]) -> LayoutRequest:
    """
    Decode a ``CALCULATE_LAYOUT`` message.

    Args:
        message: Message dict with ``type`` and ``payload``

    Returns:
        LayoutRequest: Decoded request (events in the order received)

    Raises:
        LayoutRequestError: If the message type is unknown or the payload
            is malformed
    """
    if not isinstance(message, dict):
        raise LayoutRequestError("Layout message must be an object")

    message_type = message.get('type')
    if message_type != CALCULATE_LAYOUT:
        raise LayoutRequestError(f"Unsupported layout message type: {message_type!r}",
                                 field_name='type')

    payload = message.get('payload')
    if not isinstance(payload, dict):
        raise LayoutRequestError("Layout message has no payload", field_name='payload')

    raw_events = payload.get('events', [])
    if not isinstance(raw_events, (list, tuple)):
        raise LayoutRequestError("Field 'events' must be a list", field_name='events')

    entity_order = payload.get('entityOrder', [])
    if not isinstance(entity_order, (list, tuple)):
        raise LayoutRequestError("Field 'entityOrder' must be a list", field_name='entityOrder')

    request_id = message.get('requestId', payload.get('requestId'))

    return LayoutRequest(
        events=tuple(_event(raw) for raw in raw_events),
        timeline_width_px=_number(payload, 'timelineWidthPx'),
        entity_order=tuple(str(e) for e in entity_order),
        popup_width_px=_number(payload, 'popupWidthPx'),
        popup_vertical_spacing_px=_number(payload, 'popupVerticalSpacingPx'),
        swimlane_height_px=_number(payload, 'swimlaneHeightPx'),
        buffer_px=_number(payload, 'bufferPx', required=False),
        min_separation_px=_number(payload, 'minSeparationPx', required=False),
        request_id=request_id
    )


def request_message(request: LayoutRequest) -> Dict[str, Any]:
    """Encode a request as a ``CALCULATE_LAYOUT`` message."""
    payload = {
        'events': [
            {'id': e.id, 'position': e.position, 'entityIds': list(e.entity_ids)}
            for e in request.events
        ],
        'timelineWidthPx': request.timeline_width_px,
        'entityOrder': list(request.entity_order),
        'popupWidthPx': request.popup_width_px,
        'popupVerticalSpacingPx': request.popup_vertical_spacing_px,
        'swimlaneHeightPx': request.swimlane_height_px,
    }
    if request.buffer_px is not None:
        payload['bufferPx'] = request.buffer_px
    if request.min_separation_px is not None:
        payload['minSeparationPx'] = request.min_separation_px

    message = {'type': CALCULATE_LAYOUT, 'payload': payload}
    if request.request_id is not None:
        message['requestId'] = request.request_id
    return message


def combined_result_message(result: CombinedLayoutResult) -> Dict[str, Any]:
    """Encode a combined layout as a ``COMBINED_LAYOUT_RESULT`` message."""
    return {
        'type': COMBINED_LAYOUT_RESULT,
        'requestId': result.request_id,
        'payload': {
            'events': [
                {'id': p.event_id, 'isAbove': p.is_above, 'verticalOffset': p.vertical_offset}
                for p in result.events
            ],
            'maxLevel': result.max_level,
        }
    }


def swimlane_result_message(result: SwimlaneLayoutResult) -> Dict[str, Any]:
    """Encode a swimlane layout as a ``SWIMLANE_LAYOUT_RESULT`` message."""
    return {
        'type': SWIMLANE_LAYOUT_RESULT,
        'requestId': result.request_id,
        'payload': {
            'events': [
                {'placementId': p.placement_id, 'eventId': p.event_id, 'yOffset': p.y_offset}
                for p in result.events
            ],
            'lanes': [
                {'entityId': lane.entity_id, 'yOffset': lane.y_offset}
                for lane in result.lanes
            ],
        }
    }
