"""Interactive graph view: playback, viewport, selection and extraction.

Provides:
- PlaybackController (scheduled cursor advance over the time range)
- ViewportController (clamped pan/zoom/drag)
- SelectionCache (detail cache with freshness window, single-flight enrich)
- ExtractionTrigger (gated extraction with auto-expiring error)
- GraphView (orchestrator wiring input to all of the above)
"""

from cerebro.view.extraction import ExtractionState, ExtractionTrigger
from cerebro.view.graph_view import GraphView
from cerebro.view.playback import PlaybackController, PlaybackState
from cerebro.view.scheduler import LoopScheduler, Scheduler, TimerHandle
from cerebro.view.selection import CacheEntry, SelectionCache
from cerebro.view.viewport import CaptureTarget, PointerCapture, ViewportController, ZoomBounds

__all__ = [
    # Scheduling
    "LoopScheduler",
    "Scheduler",
    "TimerHandle",
    # Playback
    "PlaybackController",
    "PlaybackState",
    # Viewport
    "ViewportController",
    "ZoomBounds",
    "PointerCapture",
    "CaptureTarget",
    # Selection
    "SelectionCache",
    "CacheEntry",
    # Extraction
    "ExtractionTrigger",
    "ExtractionState",
    # Orchestrator
    "GraphView",
]
