"""Graph view orchestrator.

Owns all per-view state (snapshot, cursor, playback, viewport, selection,
cache) and wires input events to the controllers. Nothing here is global:
mount() sets the view up, unmount() cancels timers, releases pointer
capture and destroys the renderer.
"""

import asyncio
import logging
from typing import Callable, Coroutine

from cerebro.client import ArchiveClient
from cerebro.config import Settings, settings
from cerebro.errors import ApiError, EnrichmentFailure, LoadFailure
from cerebro.graph.elements import build_elements, legend
from cerebro.graph.renderer import GraphRenderer, Transform
from cerebro.graph.snapshot import GraphSnapshotStore
from cerebro.graph.visibility import TemporalVisibilityEngine, VisibilityResult
from cerebro.models import ConceptDetail, Extraction, Graph
from cerebro.presentation import ConceptPanel, build_panel
from cerebro.view.extraction import ExtractionTrigger
from cerebro.view.playback import PlaybackController, PlaybackState
from cerebro.view.scheduler import LoopScheduler, Scheduler
from cerebro.view.selection import SelectionCache
from cerebro.view.viewport import CaptureTarget, ViewportController

logger = logging.getLogger(__name__)


class GraphView:
    """Interactive knowledge-graph view over one renderer instance."""

    def __init__(
        self,
        client: ArchiveClient,
        renderer: GraphRenderer,
        config: Settings | None = None,
        scheduler: Scheduler | None = None,
        width: float = 800.0,
        height: float = 600.0,
        capture_target: CaptureTarget | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config or settings
        self.client = client
        self.renderer = renderer
        self.scheduler = scheduler or LoopScheduler()

        self.store = GraphSnapshotStore()
        self.engine = TemporalVisibilityEngine(self.store)
        self.playback = PlaybackController(
            self.store,
            on_cursor_change=self._on_cursor_change,
            scheduler=self.scheduler,
            interval=self.config.playback_interval,
            ticks=self.config.playback_ticks,
        )
        self.viewport = ViewportController.for_graph(
            self.config,
            width=width,
            height=height,
            on_change=self._on_transform_change,
            capture_target=capture_target,
        )
        self.selection = SelectionCache(
            client,
            self.store,
            freshness=self.config.detail_freshness,
            max_entries=self.config.detail_cache_size,
            clock=clock,
        )
        self.extraction = ExtractionTrigger(
            client,
            self.store,
            reload=self.reload,
            scheduler=self.scheduler,
            error_ttl=self.config.extraction_error_ttl,
        )

        self.load_error: LoadFailure | None = None
        self.enrich_error: str | None = None
        self.is_loading = False
        self.mounted = False
        self.visibility: VisibilityResult | None = None
        self._tasks: set[asyncio.Task] = set()

    # -- lifecycle ----------------------------------------------------------

    async def mount(self) -> None:
        """Subscribe to renderer events and perform the initial load."""
        self.renderer.on_node_activate(self.handle_node_activate)
        self.renderer.on_background_tap(self.handle_background_tap)
        self.mounted = True
        await self.load()

    async def unmount(self) -> None:
        """Tear everything down; no timer fires after this returns."""
        self.playback.teardown()
        self.viewport.teardown()
        self.extraction.teardown()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self.renderer.destroy()
        self.mounted = False
        logger.debug("Graph view unmounted")

    async def load(self, force: bool = False) -> Graph:
        """Load the graph, reusing the in-memory snapshot unless stale or forced.

        A failed first load leaves an empty error state. A failed reload keeps
        the previous snapshot on screen and records the error.
        """
        if not force and not self.store.needs_fetch:
            return self.store.graph

        self.is_loading = True
        try:
            graph = await self.client.fetch_graph(limit=self.config.graph_limit)
        except ApiError as e:
            self.load_error = LoadFailure(e.message)
            logger.error(f"Graph load failed: {e.message}")
            if not self.store.has_snapshot:
                self.renderer.mount(build_elements(self.store))
            return self.store.graph
        finally:
            self.is_loading = False

        self.load_error = None
        # Reload cancels playback and any drag in progress
        self.playback.teardown()
        self.viewport.release_capture()
        self.store.load(graph)
        self._render_snapshot()
        logger.info(f"Graph loaded: {len(graph.concepts)} concepts, {len(graph.edges)} edges")
        return graph

    async def reload(self) -> Graph:
        return await self.load(force=True)

    def _render_snapshot(self) -> None:
        self.renderer.mount(build_elements(self.store))
        self.playback.reset()
        if self.playback.cursor is not None:
            self._on_cursor_change(self.playback.cursor)
        else:
            self.visibility = None

    # -- temporal -----------------------------------------------------------

    @property
    def temporal_enabled(self) -> bool:
        """Temporal controls are disabled when the graph has no time axis."""
        return self.engine.has_time_axis

    @property
    def time_range(self) -> tuple[float, float] | None:
        return self.store.time_range()

    @property
    def cursor(self) -> float | None:
        return self.playback.cursor

    @property
    def playback_state(self) -> PlaybackState:
        return self.playback.state

    def play(self) -> bool:
        if not self.temporal_enabled:
            return False
        self.playback.play()
        return True

    def pause(self) -> None:
        self.playback.pause()

    def toggle_playback(self) -> bool:
        if self.playback.is_playing:
            self.pause()
            return True
        return self.play()

    def scrub(self, value: float) -> float | None:
        """Slider input."""
        if not self.temporal_enabled:
            return None
        return self.playback.scrub(value)

    def _on_cursor_change(self, cursor: float) -> None:
        # One complete batch per cursor value; renderer never sees half of it
        self.visibility = self.engine.visible(cursor)
        self.renderer.apply_visibility(self.visibility)

    # -- viewport -----------------------------------------------------------

    @property
    def transform(self) -> Transform:
        return self.viewport.transform

    def _on_transform_change(self, transform: Transform) -> None:
        self.renderer.set_transform(transform)

    def handle_wheel(self, delta_y: float, x: float | None = None, y: float | None = None) -> None:
        anchor = (x, y) if x is not None and y is not None else None
        self.viewport.wheel(delta_y, anchor)

    def handle_pointer_down(self, pointer_id: int, x: float, y: float) -> None:
        self.viewport.pointer_down(pointer_id, x, y)

    def handle_pointer_move(self, pointer_id: int, x: float, y: float) -> None:
        self.viewport.pointer_move(pointer_id, x, y)

    def handle_pointer_up(self, pointer_id: int) -> None:
        self.viewport.pointer_up(pointer_id)

    def handle_pointer_leave(self, pointer_id: int) -> None:
        self.viewport.pointer_leave(pointer_id)

    def zoom_in(self) -> None:
        self.viewport.zoom_in()

    def zoom_out(self) -> None:
        self.viewport.zoom_out()

    def reset_view(self) -> None:
        self.viewport.reset()

    def fit(self) -> Transform:
        """Frame the currently visible concepts."""
        if self.visibility is not None:
            ids = self.visibility.concept_ids
        else:
            ids = build_elements(self.store).node_ids
        return self.viewport.fit(self.renderer, ids, self.config.fit_padding)

    def handle_key(self, key: str) -> bool:
        """Keyboard shortcuts. Returns True when the key was handled."""
        if key in ("+", "="):
            self.zoom_in()
        elif key == "-":
            self.zoom_out()
        elif key == "0":
            self.reset_view()
        elif key.lower() == "f":
            self.fit()
        elif key == " ":
            return self.toggle_playback()
        elif key == "Escape":
            self.handle_background_tap()
        else:
            return False
        return True

    # -- selection ----------------------------------------------------------

    @property
    def selected(self) -> ConceptDetail | None:
        return self.selection.selection

    @property
    def panel(self) -> ConceptPanel | None:
        detail = self.selection.selection
        if detail is None:
            return None
        return build_panel(
            detail,
            enriching=self.selection.is_enriching(detail.id),
            max_connections=self.config.panel_max_connections,
        )

    def handle_node_activate(self, concept_id: str) -> None:
        """Renderer callback: start loading the tapped concept."""
        self._spawn(self.selection.select(concept_id))

    def handle_background_tap(self) -> None:
        self.selection.clear_selection()

    async def select(self, concept_id: str) -> ConceptDetail | None:
        return await self.selection.select(concept_id)

    async def enrich_selected(self) -> ConceptDetail | None:
        """Enrich the selected concept; failures land in ``enrich_error``."""
        detail = self.selection.selection
        if detail is None:
            return None
        self.enrich_error = None
        try:
            return await self.selection.enrich(detail.id)
        except EnrichmentFailure as e:
            self.enrich_error = str(e)
            raise

    async def refresh(self) -> Graph:
        """Graph access: refetches only if the snapshot was invalidated."""
        return await self.load()

    # -- extraction ---------------------------------------------------------

    @property
    def extracting(self) -> bool:
        return self.extraction.is_pending

    @property
    def error_message(self) -> str | None:
        return self.extraction.error_message

    async def extract(self) -> Extraction | None:
        return await self.extraction.extract()

    def dismiss_error(self) -> None:
        self.extraction.dismiss_error()

    # -- misc ---------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return self.store.graph.is_empty

    @property
    def legend(self) -> list[tuple[str, str, str]]:
        return [] if self.is_empty else legend()

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"Background task failed: {exc!r}")
