"""Pan/zoom/drag transform state for a graph viewport.

Independent of graph content: the controller only knows its own transform,
its size, and its clamp bounds.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from cerebro.config import Settings, settings
from cerebro.graph.renderer import GraphRenderer, Transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoomBounds:
    """Inclusive scale clamp for one viewport."""

    min_zoom: float
    max_zoom: float

    def __post_init__(self) -> None:
        if not 0 < self.min_zoom <= self.max_zoom:
            raise ValueError(f"Invalid zoom bounds: [{self.min_zoom}, {self.max_zoom}]")

    def clamp(self, scale: float) -> float:
        return min(max(scale, self.min_zoom), self.max_zoom)


@dataclass(frozen=True)
class PointerCapture:
    """Drag state recorded on pointer-down."""

    pointer_id: int
    start_pointer_x: float
    start_pointer_y: float
    start_translate_x: float
    start_translate_y: float


class CaptureTarget(Protocol):
    """Host surface that can capture a pointer (e.g. a canvas element)."""

    def set_pointer_capture(self, pointer_id: int) -> None:
        ...

    def release_pointer_capture(self, pointer_id: int) -> None:
        ...


class ViewportController:
    """
    Scale and translate for one view, clamped to per-instance bounds.

    Every change is pushed through ``on_change`` so the renderer stays in
    sync. Pointer capture taken on pointer-down is released on pointer-up,
    cancel, leave, and teardown.
    """

    def __init__(
        self,
        bounds: ZoomBounds,
        width: float = 800.0,
        height: float = 600.0,
        wheel_zoom_in: float | None = None,
        wheel_zoom_out: float | None = None,
        button_zoom_step: float | None = None,
        on_change: Callable[[Transform], None] | None = None,
        capture_target: CaptureTarget | None = None,
    ) -> None:
        self.bounds = bounds
        self.width = width
        self.height = height
        self.wheel_zoom_in = wheel_zoom_in or settings.wheel_zoom_in
        self.wheel_zoom_out = wheel_zoom_out or settings.wheel_zoom_out
        self.button_zoom_step = button_zoom_step or settings.button_zoom_step
        self.on_change = on_change
        self.capture_target = capture_target

        self.scale = 1.0
        self.translate_x = 0.0
        self.translate_y = 0.0
        self.capture: PointerCapture | None = None

    @classmethod
    def for_graph(cls, config: Settings | None = None, **kwargs) -> "ViewportController":
        """Viewport for the interactive knowledge graph."""
        config = config or settings
        return cls(
            ZoomBounds(config.graph_min_zoom, config.graph_max_zoom),
            wheel_zoom_in=config.wheel_zoom_in,
            wheel_zoom_out=config.wheel_zoom_out,
            button_zoom_step=config.button_zoom_step,
            **kwargs,
        )

    @classmethod
    def for_diagram(cls, config: Settings | None = None, **kwargs) -> "ViewportController":
        """Viewport for a static diagram viewer (tighter zoom range)."""
        config = config or settings
        return cls(
            ZoomBounds(config.diagram_min_zoom, config.diagram_max_zoom),
            wheel_zoom_in=config.wheel_zoom_in,
            wheel_zoom_out=config.wheel_zoom_out,
            button_zoom_step=config.button_zoom_step,
            **kwargs,
        )

    @property
    def transform(self) -> Transform:
        return Transform(scale=self.scale, x=self.translate_x, y=self.translate_y)

    @property
    def is_dragging(self) -> bool:
        return self.capture is not None

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    # -- zoom ---------------------------------------------------------------

    def wheel(self, delta_y: float, anchor: tuple[float, float] | None = None) -> float:
        """Zoom one wheel notch; negative delta (scroll up) zooms in.

        With an anchor (pointer position) the world point under it stays put.
        """
        if delta_y == 0:
            return self.scale
        factor = self.wheel_zoom_in if delta_y < 0 else self.wheel_zoom_out
        return self._zoom_by(factor, anchor)

    def zoom_in(self) -> float:
        """Discrete zoom in about the visual center."""
        return self._zoom_by(self.button_zoom_step, self.center)

    def zoom_out(self) -> float:
        """Discrete zoom out about the visual center."""
        return self._zoom_by(1 / self.button_zoom_step, self.center)

    def zoom_to(self, scale: float, anchor: tuple[float, float] | None = None) -> float:
        return self._zoom_by(scale / self.scale, anchor)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def _zoom_by(self, factor: float, anchor: tuple[float, float] | None) -> float:
        old_scale = self.scale
        new_scale = self.bounds.clamp(old_scale * factor)
        if new_scale == old_scale:
            return old_scale

        if anchor is not None:
            # screen = world * scale + translate; keep world under anchor fixed
            ax, ay = anchor
            ratio = new_scale / old_scale
            self.translate_x = ax - (ax - self.translate_x) * ratio
            self.translate_y = ay - (ay - self.translate_y) * ratio

        self.scale = new_scale
        self._changed()
        return new_scale

    # -- pan ----------------------------------------------------------------

    def pan_by(self, dx: float, dy: float) -> None:
        self.translate_x += dx
        self.translate_y += dy
        self._changed()

    def pointer_down(self, pointer_id: int, x: float, y: float) -> None:
        """Start a drag and capture the pointer."""
        if self.capture is not None:
            self.release_capture()

        self.capture = PointerCapture(
            pointer_id=pointer_id,
            start_pointer_x=x,
            start_pointer_y=y,
            start_translate_x=self.translate_x,
            start_translate_y=self.translate_y,
        )
        if self.capture_target is not None:
            self.capture_target.set_pointer_capture(pointer_id)

    def pointer_move(self, pointer_id: int, x: float, y: float) -> None:
        """Follow the captured pointer; other pointers are ignored."""
        capture = self.capture
        if capture is None or capture.pointer_id != pointer_id:
            return
        self.translate_x = capture.start_translate_x + (x - capture.start_pointer_x)
        self.translate_y = capture.start_translate_y + (y - capture.start_pointer_y)
        self._changed()

    def pointer_up(self, pointer_id: int) -> None:
        if self.capture is not None and self.capture.pointer_id == pointer_id:
            self.release_capture()

    def pointer_cancel(self, pointer_id: int) -> None:
        """A cancelled pointer ends the drag like pointer-up."""
        self.pointer_up(pointer_id)

    def pointer_leave(self, pointer_id: int) -> None:
        """Leaving the viewport ends the drag even while captured; moves outside are not followed."""
        self.pointer_up(pointer_id)

    def release_capture(self) -> None:
        """Release the pointer and clear drag state."""
        capture = self.capture
        self.capture = None
        if capture is not None and self.capture_target is not None:
            self.capture_target.release_pointer_capture(capture.pointer_id)

    # -- reset / fit --------------------------------------------------------

    def reset(self) -> None:
        self.scale = 1.0
        self.translate_x = 0.0
        self.translate_y = 0.0
        self._changed()

    def fit(
        self,
        renderer: GraphRenderer,
        element_ids: Iterable[str],
        padding: float | None = None,
    ) -> Transform:
        """Frame the given elements with a padding margin.

        The renderer computes the framing; the scale is then clamped and the
        framed center kept at the viewport center.
        """
        padding = settings.fit_padding if padding is None else padding
        framed = renderer.fit_transform(element_ids, padding)
        if framed is None:
            logger.debug("Nothing to fit")
            return self.transform

        scale = self.bounds.clamp(framed.scale)
        cx, cy = self.center
        world_x = (cx - framed.x) / framed.scale
        world_y = (cy - framed.y) / framed.scale
        self.scale = scale
        self.translate_x = cx - world_x * scale
        self.translate_y = cy - world_y * scale
        self._changed()
        return self.transform

    def teardown(self) -> None:
        self.release_capture()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.transform)
