"""
Timeline Layout Module

This module computes collision-free placements for event annotation popups
along a zoomable time axis, in a combined above/below-axis mode and in a
per-entity swimlane mode. Layout runs in a background thread so panning and
zooming stay smooth.
"""

__version__ = "1.0.0"
__author__ = "Timeline Layout Team"

from .layout_service import LayoutService, LayoutServiceState, compute_layouts
from .layout_scheduler import DisplayMode, LayoutScheduler

__all__ = [
    'LayoutService',
    'LayoutServiceState',
    'LayoutScheduler',
    'DisplayMode',
    'compute_layouts',
]
