"""
Layout Service
==============

Asynchronous boundary between a timeline view and the layout engines.
One instance serves one timeline view.

Each request runs in its own LayoutWorker thread and always produces both
a combined and a swimlane result, so switching display mode needs no new
computation. Requests are numbered in submission order; a result older
than the newest result of the same kind already delivered is dropped.
There is no cancellation: superseded workers run to completion.

Author: Timeline Layout Team
Version: 1.0
"""

import dataclasses
import itertools
import logging
from typing import Any, Dict

from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from timeline_layout.data.layout_worker import LayoutWorker, compute_layouts
from timeline_layout.data.messages import (
    combined_result_message,
    parse_request,
    swimlane_result_message,
)
from timeline_layout.data.models import LayoutRequest
from timeline_layout.utils.error_handler import LayoutRequestError, log_error

# Configure logger
logger = logging.getLogger(__name__)

__all__ = ['LayoutService', 'LayoutServiceState', 'compute_layouts']


class LayoutServiceState:
    """Service states."""
    IDLE = "idle"
    COMPUTING = "computing"


class LayoutService(QObject):
    """
    Runs layout requests off the UI thread and relays their results.

    Signals:
        combined_layout_ready: Emitted with each fresh CombinedLayoutResult
        swimlane_layout_ready: Emitted with each fresh SwimlaneLayoutResult
        message_ready: Emitted with the result message dict of either kind
        state_changed: Emitted with the new state on Idle/Computing transitions
        layout_failed: Emitted when a worker fails (exception, error_message)
    """

    combined_layout_ready = pyqtSignal(object)
    swimlane_layout_ready = pyqtSignal(object)
    message_ready = pyqtSignal(dict)
    state_changed = pyqtSignal(str)
    layout_failed = pyqtSignal(Exception, str)

    COMBINED = 'combined'
    SWIMLANE = 'swimlane'

    def __init__(self, parent=None):
        """
        Initialize the layout service.

        Args:
            parent: Parent QObject
        """
        super().__init__(parent)

        self._request_ids = itertools.count(1)
        self._workers: Dict[int, LayoutWorker] = {}
        self._latest_delivered = {self.COMBINED: 0, self.SWIMLANE: 0}
        self._state = LayoutServiceState.IDLE

    @property
    def state(self) -> str:
        return self._state

    def is_computing(self) -> bool:
        return self._state == LayoutServiceState.COMPUTING

    def in_flight_count(self) -> int:
        return len(self._workers)

    def submit(self, request: LayoutRequest) -> int:
        """
        Start computing both layouts for a request.

        Args:
            request: Layout request; any request_id it carries is replaced

        Returns:
            int: Request id echoed in both results
        """
        request_id = next(self._request_ids)
        request = dataclasses.replace(request, request_id=request_id)

        worker = LayoutWorker(request)
        worker.combined_ready.connect(self._on_combined_ready)
        worker.swimlane_ready.connect(self._on_swimlane_ready)
        worker.error.connect(self._on_worker_error)
        worker.finished.connect(self._on_worker_finished)

        self._workers[request_id] = worker
        if len(self._workers) > 1:
            logger.debug(f"Request {request_id} submitted with {len(self._workers) - 1} "
                         f"request(s) still in flight")
        self._set_state(LayoutServiceState.COMPUTING)

        worker.start()
        return request_id

    def handle_message(self, message: Dict[str, Any]) -> int:
        """
        Submit a ``CALCULATE_LAYOUT`` message.

        Args:
            message: Request message dict

        Returns:
            int: Request id

        Raises:
            LayoutRequestError: If the message cannot be decoded
        """
        try:
            request = parse_request(message)
        except LayoutRequestError as e:
            log_error(e, "decoding layout request")
            raise
        return self.submit(request)

    def shutdown(self, timeout_ms: int = 5000) -> bool:
        """
        Wait for in-flight workers, e.g. when the timeline view closes.

        Args:
            timeout_ms: Maximum time to wait for each worker

        Returns:
            bool: True if every worker finished in time
        """
        all_finished = True
        for request_id, worker in list(self._workers.items()):
            if not worker.wait(timeout_ms):
                logger.warning(f"LayoutWorker for request {request_id} did not finish "
                               f"within {timeout_ms} ms")
                all_finished = False
        return all_finished

    def _is_stale(self, kind: str, request_id: int) -> bool:
        if request_id < self._latest_delivered[kind]:
            logger.debug(f"Dropping stale {kind} layout for request {request_id} "
                         f"(already showing {self._latest_delivered[kind]})")
            return True
        self._latest_delivered[kind] = request_id
        return False

    @pyqtSlot(object)
    def _on_combined_ready(self, result):
        if self._is_stale(self.COMBINED, result.request_id):
            return
        self.combined_layout_ready.emit(result)
        self.message_ready.emit(combined_result_message(result))

    @pyqtSlot(object)
    def _on_swimlane_ready(self, result):
        if self._is_stale(self.SWIMLANE, result.request_id):
            return
        self.swimlane_layout_ready.emit(result)
        self.message_ready.emit(swimlane_result_message(result))

    @pyqtSlot(Exception, str)
    def _on_worker_error(self, error, message):
        log_error(error, "computing timeline layout")
        self.layout_failed.emit(error, message)

    @pyqtSlot()
    def _on_worker_finished(self):
        worker = self.sender()
        if worker is None:
            return
        if self._workers.pop(worker.request_id, None) is not None:
            worker.deleteLater()
        if not self._workers:
            self._set_state(LayoutServiceState.IDLE)

    def _set_state(self, state: str):
        if state == self._state:
            return
        logger.debug(f"LayoutService state: {self._state} -> {state}")
        self._state = state
        self.state_changed.emit(state)
