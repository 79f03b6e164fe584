"""
Layout Scheduler - Decides when a timeline view needs a new layout.

This module provides the LayoutScheduler class which owns the inputs of one
timeline view and talks to its LayoutService:
- Event-set and entity-order changes recompute immediately
- Width changes are debounced so a continuous resize sends one request
- Events are positioned with a TimeScale, non-finite positions dropped,
  and the rest sorted by position before submission
- The latest result of each kind is kept; switching the display mode only
  changes which one is active
"""

import logging
import math
from typing import Iterable, Optional, Sequence

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from timeline_layout.data.models import (
    CombinedLayoutResult,
    PositionedEvent,
    SwimlaneLayoutResult,
    TimestampedEvent,
    sort_by_position,
)
from timeline_layout.layout_service import LayoutService
from timeline_layout.rendering.combined_layout import container_min_height_px
from timeline_layout.rendering.swimlane_layout import swimlane_container_height_px
from timeline_layout.rendering.time_scale import TimeScale
from timeline_layout.utils.layout_config import LayoutConfig

# Configure logger
logger = logging.getLogger(__name__)


class DisplayMode:
    """Timeline display modes."""
    COMBINED = "combined"
    SWIMLANE = "swimlane"

    ALL = (COMBINED, SWIMLANE)


class LayoutScheduler(QObject):
    """
    Issues layout requests for one timeline view.

    Signals:
        combined_layout_changed: Emitted with the new CombinedLayoutResult
        swimlane_layout_changed: Emitted with the new SwimlaneLayoutResult
        display_mode_changed: Emitted with the new display mode
    """

    combined_layout_changed = pyqtSignal(object)
    swimlane_layout_changed = pyqtSignal(object)
    display_mode_changed = pyqtSignal(str)

    def __init__(self, service: Optional[LayoutService] = None,
                 config: Optional[LayoutConfig] = None, parent=None):
        """
        Initialize the scheduler.

        Args:
            service: Layout service for this view (created if omitted)
            config: Sizing constants (defaults if omitted)
            parent: Parent QObject
        """
        super().__init__(parent)

        self.service = service if service is not None else LayoutService(self)
        self.config = config if config is not None else LayoutConfig()

        # View inputs
        self.events = ()
        self.requested_entity_order = ()
        self.entity_order = ()
        self.timeline_width = 0
        self._pending_width = None
        self.time_scale = TimeScale(0, 0, 0)

        # Latest results
        self.combined_layout = CombinedLayoutResult()
        self.swimlane_layout = SwimlaneLayoutResult()
        self.display_mode = DisplayMode.COMBINED

        # Results of requests up to this id arrived after a local clear
        self._last_submitted_id = 0
        self._ignore_through_id = 0

        # Resize debounce
        self.resize_timer = QTimer(self)
        self.resize_timer.setSingleShot(True)
        self.resize_timer.timeout.connect(self.flush_pending_width)

        self.service.combined_layout_ready.connect(self._on_combined_layout)
        self.service.swimlane_layout_ready.connect(self._on_swimlane_layout)

    def set_events(self, events: Iterable[TimestampedEvent]) -> Optional[int]:
        """Replace the displayed events and recompute."""
        self.events = tuple(events)
        self._update_entity_order()
        return self.recompute()

    def set_entity_order(self, entity_order: Sequence[str]) -> Optional[int]:
        """
        Replace the swimlane row order and recompute.

        Only entities involved in the current events get a row; the given
        order is kept for those.
        """
        self.requested_entity_order = tuple(entity_order)
        self._update_entity_order()
        return self.recompute()

    def _update_entity_order(self):
        involved = {entity_id for event in self.events for entity_id in event.entity_ids}
        self.entity_order = tuple(e for e in self.requested_entity_order if e in involved)

    def set_timeline_width(self, width: float):
        """
        Record a new container width.

        The recompute happens once the width has been stable for the
        configured debounce interval.

        Args:
            width: New width of the time axis in pixels
        """
        self._pending_width = width
        self.resize_timer.stop()
        self.resize_timer.start(self.config.resize_debounce_ms)

    def flush_pending_width(self) -> Optional[int]:
        """Apply a pending width change now and recompute if it changed."""
        self.resize_timer.stop()
        if self._pending_width is None:
            return None
        width, self._pending_width = self._pending_width, None
        if width == self.timeline_width:
            return None
        self.timeline_width = width
        return self.recompute()

    def position_events(self):
        """
        Position the current events on a fresh TimeScale.

        Returns:
            tuple: PositionedEvents with finite positions, sorted by position
        """
        self.time_scale = TimeScale.from_timestamps(
            (e.timestamp for e in self.events), self.timeline_width
        )
        positioned = [PositionedEvent.from_event(e, self.time_scale) for e in self.events]
        finite = [e for e in positioned if math.isfinite(e.position)]
        if len(finite) != len(positioned):
            logger.debug(f"Skipped {len(positioned) - len(finite)} events without a finite position")
        return sort_by_position(finite)

    def recompute(self) -> Optional[int]:
        """
        Submit a layout request for the current inputs.

        With no events or a zero width both layouts are cleared locally and
        nothing is submitted.

        Returns:
            Optional[int]: Request id, or None if nothing was submitted
        """
        positioned = self.position_events()
        if self.timeline_width == 0 or not positioned:
            self._clear_layouts()
            return None

        request = self.config.build_request(positioned, self.timeline_width, self.entity_order)
        request_id = self.service.submit(request)
        self._last_submitted_id = request_id
        logger.debug(f"Submitted layout request {request_id}: {len(positioned)} events, "
                     f"width {self.timeline_width}")
        return request_id

    def set_display_mode(self, mode: str):
        """
        Switch the active display mode without recomputing.

        Raises:
            ValueError: If the mode is unknown
        """
        if mode not in DisplayMode.ALL:
            raise ValueError(f"Unknown display mode: {mode}")
        if mode != self.display_mode:
            self.display_mode = mode
            self.display_mode_changed.emit(mode)

    def active_layout(self):
        """Get the latest result for the active display mode."""
        if self.display_mode == DisplayMode.SWIMLANE:
            return self.swimlane_layout
        return self.combined_layout

    def container_height_px(self) -> float:
        """Height the view container needs for the active display mode."""
        rem_px = self.config.rem_in_px
        if self.display_mode == DisplayMode.SWIMLANE:
            return swimlane_container_height_px(
                len(self.entity_order), self.config.swimlane_height_px, rem_px
            )
        return container_min_height_px(
            self.combined_layout.max_level, self.config.popup_vertical_spacing_px, rem_px
        )

    def _clear_layouts(self):
        self._ignore_through_id = self._last_submitted_id
        self.combined_layout = CombinedLayoutResult()
        self.swimlane_layout = SwimlaneLayoutResult()
        self.combined_layout_changed.emit(self.combined_layout)
        self.swimlane_layout_changed.emit(self.swimlane_layout)

    def _on_combined_layout(self, result):
        if result.request_id <= self._ignore_through_id:
            return
        self.combined_layout = result
        self.combined_layout_changed.emit(result)

    def _on_swimlane_layout(self, result):
        if result.request_id <= self._ignore_through_id:
            return
        self.swimlane_layout = result
        self.swimlane_layout_changed.emit(result)
