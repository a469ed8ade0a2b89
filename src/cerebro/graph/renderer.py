"""Contract with the graph-rendering collaborator.

Node placement belongs to the renderer. The core hands it a declarative
element set, pushes visibility batches and transforms, and listens for node
activation and background taps.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from cerebro.graph.elements import RenderElements
from cerebro.graph.visibility import VisibilityResult

logger = logging.getLogger(__name__)

NodeCallback = Callable[[str], None]
TapCallback = Callable[[], None]


@dataclass(frozen=True)
class Transform:
    """Viewport transform: screen = world * scale + translate."""

    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0


class GraphRenderer(Protocol):
    """What the view core needs from a 2D graph-rendering library."""

    def mount(self, elements: RenderElements) -> None:
        """Replace all elements and run the layout."""

    def apply_visibility(self, visibility: VisibilityResult) -> None:
        """Apply one complete node+edge visibility batch."""

    def set_transform(self, transform: Transform) -> None:
        """Apply the viewport transform."""

    def fit_transform(self, element_ids: Iterable[str], padding: float) -> Transform | None:
        """Transform that frames the given elements, or None if there are none."""

    def on_node_activate(self, callback: NodeCallback) -> None:
        ...

    def on_background_tap(self, callback: TapCallback) -> None:
        ...

    def destroy(self) -> None:
        """Release the renderer instance and its subscriptions."""


class HeadlessRenderer:
    """
    In-memory renderer for scripts and tests.

    Keeps the element set, the last visibility batch and transform, and a
    simple spiral placement so fit_transform has coordinates to frame.
    """

    def __init__(self, width: float = 800.0, height: float = 600.0) -> None:
        self.width = width
        self.height = height
        self.elements = RenderElements()
        self.positions: dict[str, tuple[float, float]] = {}
        self.visibility: VisibilityResult | None = None
        self.transform = Transform()
        self.visibility_batches = 0
        self.destroyed = False
        self._node_callbacks: list[NodeCallback] = []
        self._tap_callbacks: list[TapCallback] = []

    def mount(self, elements: RenderElements) -> None:
        self.elements = elements
        self.visibility = None
        self.positions = {}
        # Golden-angle spiral, most mentioned concepts nearest the center
        ranked = sorted(elements.nodes, key=lambda n: n.mention_count, reverse=True)
        for i, node in enumerate(ranked):
            angle = i * 2.4
            radius = 0.0 if i == 0 else 15 + math.sqrt(i) * 40
            self.positions[node.id] = (math.cos(angle) * radius, math.sin(angle) * radius)
        self.destroyed = False

    def apply_visibility(self, visibility: VisibilityResult) -> None:
        self.visibility = visibility
        self.visibility_batches += 1

    def set_transform(self, transform: Transform) -> None:
        self.transform = transform

    def fit_transform(self, element_ids: Iterable[str], padding: float) -> Transform | None:
        points = [self.positions[i] for i in element_ids if i in self.positions]
        if not points:
            return None

        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        box_w = max(max_x - min_x, 1.0)
        box_h = max(max_y - min_y, 1.0)

        avail_w = max(self.width - 2 * padding, 1.0)
        avail_h = max(self.height - 2 * padding, 1.0)
        scale = min(avail_w / box_w, avail_h / box_h)

        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2
        return Transform(
            scale=scale,
            x=self.width / 2 - center_x * scale,
            y=self.height / 2 - center_y * scale,
        )

    def on_node_activate(self, callback: NodeCallback) -> None:
        self._node_callbacks.append(callback)

    def on_background_tap(self, callback: TapCallback) -> None:
        self._tap_callbacks.append(callback)

    def tap_node(self, node_id: str) -> None:
        """Simulate a tap on a node."""
        for callback in list(self._node_callbacks):
            callback(node_id)

    def tap_background(self) -> None:
        """Simulate a tap on empty canvas."""
        for callback in list(self._tap_callbacks):
            callback()

    def destroy(self) -> None:
        self._node_callbacks.clear()
        self._tap_callbacks.clear()
        self.destroyed = True
        logger.debug("Headless renderer destroyed")

    @property
    def visible_node_ids(self) -> frozenset[str]:
        if self.visibility is None:
            return self.elements.node_ids
        return self.visibility.concept_ids
