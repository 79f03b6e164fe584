"""
Layout Worker Thread
====================

This module provides a QThread-based worker for computing timeline layouts
in the background without blocking the UI thread.

The LayoutWorker handles:
- Running the combined and swimlane engines for one request
- Emitting each result as soon as it is ready
- Reporting failures without letting exceptions escape the thread

The engines are pure, so ``compute_layouts`` can also be called directly.

Author: Timeline Layout Team
Version: 1.0
"""

import dataclasses
import logging
from typing import Tuple

from PyQt5.QtCore import QThread, pyqtSignal

from timeline_layout.data.models import CombinedLayoutResult, LayoutRequest, SwimlaneLayoutResult
from timeline_layout.rendering.combined_layout import calculate_combined_layout
from timeline_layout.rendering.swimlane_layout import calculate_swimlane_layout
from timeline_layout.utils.error_handler import LayoutComputationError

# Configure logger
logger = logging.getLogger(__name__)


def compute_combined(request: LayoutRequest) -> CombinedLayoutResult:
    result = calculate_combined_layout(request)
    return dataclasses.replace(result, request_id=request.request_id)


def compute_swimlane(request: LayoutRequest) -> SwimlaneLayoutResult:
    result = calculate_swimlane_layout(request)
    return dataclasses.replace(result, request_id=request.request_id)


def compute_layouts(request: LayoutRequest) -> Tuple[CombinedLayoutResult, SwimlaneLayoutResult]:
    """
    Compute both layouts for a request, tagged with its request id.

    Args:
        request: Layout request

    Returns:
        tuple: (CombinedLayoutResult, SwimlaneLayoutResult)
    """
    return compute_combined(request), compute_swimlane(request)


class LayoutWorker(QThread):
    """
    Background worker thread for one layout request.

    Both layouts are always computed, whichever display mode is active.

    Signals:
        combined_ready: Emitted with the CombinedLayoutResult
        swimlane_ready: Emitted with the SwimlaneLayoutResult
        error: Emitted when computation fails (exception, error_message)
    """

    # Signals
    combined_ready = pyqtSignal(object)  # CombinedLayoutResult
    swimlane_ready = pyqtSignal(object)  # SwimlaneLayoutResult
    error = pyqtSignal(Exception, str)  # exception, error_message

    def __init__(self, request: LayoutRequest, parent=None):
        """
        Initialize layout worker.

        Args:
            request: Layout request to compute
            parent: Parent QObject
        """
        super().__init__(parent)
        self.request = request

        logger.debug(f"LayoutWorker initialized: request {request.request_id}, "
                     f"{len(request.events)} events, width {request.timeline_width_px}")

    @property
    def request_id(self):
        return self.request.request_id

    def run(self):
        """
        Execute the layout computation in the background thread.

        The combined result is emitted before the swimlane result is
        computed.
        """
        try:
            logger.info(f"LayoutWorker started: request {self.request_id}")

            self.combined_ready.emit(compute_combined(self.request))
            self.swimlane_ready.emit(compute_swimlane(self.request))

            logger.info(f"LayoutWorker completed: request {self.request_id}")

        except Exception as e:
            logger.error(f"LayoutWorker error: {e}", exc_info=True)
            self.error.emit(LayoutComputationError(self.request_id, e),
                            f"Failed to compute timeline layout: {str(e)}")
