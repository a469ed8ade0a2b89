"""Graph snapshot, temporal visibility and render elements.

Provides:
- GraphSnapshotStore (one immutable snapshot + indices)
- TemporalVisibilityEngine (cursor -> visible nodes/edges)
- Render element building and the renderer contract
"""

from cerebro.graph.elements import (
    CATEGORY_COLORS,
    CATEGORY_LABELS,
    EdgeElement,
    NodeElement,
    RenderElements,
    build_elements,
    category_color,
    category_label,
    legend,
)
from cerebro.graph.renderer import GraphRenderer, HeadlessRenderer, Transform
from cerebro.graph.snapshot import GraphSnapshotStore
from cerebro.graph.visibility import TemporalVisibilityEngine, VisibilityResult

__all__ = [
    # Snapshot
    "GraphSnapshotStore",
    # Visibility
    "TemporalVisibilityEngine",
    "VisibilityResult",
    # Elements
    "CATEGORY_COLORS",
    "CATEGORY_LABELS",
    "NodeElement",
    "EdgeElement",
    "RenderElements",
    "build_elements",
    "category_color",
    "category_label",
    "legend",
    # Renderer
    "GraphRenderer",
    "HeadlessRenderer",
    "Transform",
]
