"""
Timeline Layout Engines

Pure, synchronous layout computations and the time scale they rely on.
"""

from .time_scale import TimeScale
from .combined_layout import CombinedLayoutEngine
from .swimlane_layout import SwimlaneLayoutEngine

__all__ = ['TimeScale', 'CombinedLayoutEngine', 'SwimlaneLayoutEngine']
