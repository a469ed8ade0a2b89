"""Unit tests for the GraphView orchestrator."""

import asyncio
import gc
from unittest.mock import AsyncMock, MagicMock

import pytest

from cerebro.config import Settings
from cerebro.errors import ApiError, EnrichmentFailure
from cerebro.graph import HeadlessRenderer
from cerebro.models import Graph
from cerebro.view import GraphView, PlaybackState

from conftest import FakeClock, FakeScheduler, make_concept


@pytest.fixture
def renderer() -> HeadlessRenderer:
    return HeadlessRenderer()


@pytest.fixture
def target() -> MagicMock:
    return MagicMock()


@pytest.fixture
def view(
    mock_client: MagicMock,
    renderer: HeadlessRenderer,
    test_settings: Settings,
    scheduler: FakeScheduler,
    clock: FakeClock,
    target: MagicMock,
) -> GraphView:
    return GraphView(
        mock_client,
        renderer,
        config=test_settings,
        scheduler=scheduler,
        capture_target=target,
        clock=clock,
    )


class TestLoad:
    """Tests for mounting and loading."""

    @pytest.mark.asyncio
    async def test_mount_loads_and_shows_everything(
        self, view: GraphView, renderer: HeadlessRenderer, mock_client: MagicMock
    ) -> None:
        """Test initial load renders with the cursor at the end of the range."""
        await view.mount()

        mock_client.fetch_graph.assert_awaited_once_with(limit=60)
        assert view.mounted
        assert view.cursor == 600_000
        assert view.temporal_enabled
        assert renderer.visible_node_ids == {"rust", "alice", "berlin", "launch", "wasm"}
        assert len(renderer.elements.edges) == 3

    @pytest.mark.asyncio
    async def test_snapshot_reused(self, view: GraphView, mock_client: MagicMock) -> None:
        """Test graph access reuses the snapshot until invalidated."""
        await view.mount()
        await view.refresh()
        assert mock_client.fetch_graph.await_count == 1

        view.store.invalidate()
        await view.refresh()
        assert mock_client.fetch_graph.await_count == 2

    @pytest.mark.asyncio
    async def test_initial_failure_empty_state(
        self, view: GraphView, mock_client: MagicMock, renderer: HeadlessRenderer
    ) -> None:
        """Test a failed first load shows an empty error state."""
        mock_client.fetch_graph = AsyncMock(side_effect=ApiError("unreachable"))
        await view.mount()

        assert str(view.load_error) == "unreachable"
        assert view.is_empty
        assert not view.temporal_enabled
        assert renderer.elements.nodes == ()
        assert view.legend == []

    @pytest.mark.asyncio
    async def test_failed_reload_keeps_snapshot(
        self, view: GraphView, mock_client: MagicMock
    ) -> None:
        """Test a failed reload leaves the previous graph in place."""
        await view.mount()
        mock_client.fetch_graph = AsyncMock(side_effect=ApiError("timeout"))

        await view.reload()

        assert view.load_error is not None
        assert len(view.store) == 5
        assert view.cursor == 600_000

    @pytest.mark.asyncio
    async def test_empty_graph_disables_temporal(
        self, view: GraphView, mock_client: MagicMock
    ) -> None:
        """Test an empty graph has no time axis."""
        mock_client.fetch_graph = AsyncMock(return_value=Graph())
        await view.mount()

        assert view.is_empty
        assert view.cursor is None
        assert not view.play()
        assert view.scrub(5) is None
        assert view.legend == []

    @pytest.mark.asyncio
    async def test_reload_cancels_playback_and_drag(
        self, view: GraphView, scheduler: FakeScheduler, target: MagicMock
    ) -> None:
        """Test a new snapshot stops playback and releases the pointer."""
        await view.mount()
        view.play()
        view.handle_pointer_down(1, 10, 10)

        await view.reload()

        assert view.playback_state == PlaybackState.IDLE
        assert scheduler.pending == []
        target.release_pointer_capture.assert_called_once_with(1)
        assert view.cursor == 600_000


class TestTemporal:
    """Tests for playback and scrubbing through the view."""

    @pytest.mark.asyncio
    async def test_scrub_applies_one_batch(
        self, view: GraphView, renderer: HeadlessRenderer
    ) -> None:
        """Test each cursor change is one complete visibility batch."""
        await view.mount()
        batches = renderer.visibility_batches

        view.scrub(150_000)

        assert renderer.visibility_batches == batches + 1
        assert renderer.visibility.concept_ids == {"rust", "alice"}
        assert renderer.visibility.edge_ids == {"e1"}

    @pytest.mark.asyncio
    async def test_playback_grows_graph(
        self, view: GraphView, renderer: HeadlessRenderer, scheduler: FakeScheduler
    ) -> None:
        """Test playback starts with the earliest concepts and ends with all."""
        await view.mount()
        view.play()
        assert renderer.visible_node_ids == {"rust"}

        scheduler.run_all()

        assert view.playback_state == PlaybackState.IDLE
        assert len(renderer.visible_node_ids) == 5

    @pytest.mark.asyncio
    async def test_space_toggles(self, view: GraphView) -> None:
        """Test the space key toggles playback."""
        await view.mount()
        assert view.handle_key(" ")
        assert view.playback_state == PlaybackState.PLAYING
        assert view.handle_key(" ")
        assert view.playback_state == PlaybackState.IDLE


class TestViewport:
    """Tests for viewport input through the view."""

    @pytest.mark.asyncio
    async def test_transform_pushed_to_renderer(
        self, view: GraphView, renderer: HeadlessRenderer
    ) -> None:
        """Test wheel and drag reach the renderer."""
        await view.mount()
        view.handle_wheel(-1)
        assert renderer.transform.scale == pytest.approx(1.1)

        view.handle_pointer_down(1, 100, 100)
        view.handle_pointer_move(1, 150, 80)
        view.handle_pointer_up(1)
        assert renderer.transform == view.transform

    @pytest.mark.asyncio
    async def test_keys(self, view: GraphView) -> None:
        """Test zoom and reset shortcuts."""
        await view.mount()
        assert view.handle_key("+")
        assert view.transform.scale == pytest.approx(1.3)
        assert view.handle_key("-")
        assert view.transform.scale == pytest.approx(1.0)
        view.handle_key("=")
        assert view.handle_key("0")
        assert view.transform.scale == 1.0
        assert not view.handle_key("q")

    @pytest.mark.asyncio
    async def test_fit_frames_visible(self, view: GraphView) -> None:
        """Test fit stays within the graph zoom bounds."""
        await view.mount()
        view.scrub(0)
        transform = view.fit()
        assert 0.15 <= transform.scale <= 4.0


class TestSelection:
    """Tests for node activation and the panel."""

    @pytest.mark.asyncio
    async def test_node_tap_opens_panel(
        self, view: GraphView, renderer: HeadlessRenderer
    ) -> None:
        """Test tapping a node loads its detail and builds the panel."""
        await view.mount()
        renderer.tap_node("alice")
        await asyncio.gather(*view._tasks)

        assert view.selected.id == "alice"
        panel = view.panel
        assert panel.name == "alice"
        assert panel.category_label == "Person"
        assert panel.enrich_label == "Enrich with Cerebro"

    @pytest.mark.asyncio
    async def test_node_tap_unexpected_error_contained(
        self, view: GraphView, renderer: HeadlessRenderer, mock_client: MagicMock
    ) -> None:
        """Test a non-API failure in a tapped node's fetch never reaches the loop handler."""
        loop = asyncio.get_running_loop()
        reported: list[str] = []
        previous = loop.get_exception_handler()
        loop.set_exception_handler(lambda _loop, context: reported.append(context["message"]))
        try:
            await view.mount()
            mock_client.fetch_concept_detail = AsyncMock(side_effect=AttributeError("bad body"))
            renderer.tap_node("rust")
            for _ in range(5):
                await asyncio.sleep(0)
            gc.collect()
            await asyncio.sleep(0)
        finally:
            loop.set_exception_handler(previous)

        assert reported == []
        assert view._tasks == set()
        assert view.selected is None

    @pytest.mark.asyncio
    async def test_background_tap_closes_panel(
        self, view: GraphView, renderer: HeadlessRenderer
    ) -> None:
        """Test background tap and Escape clear the selection."""
        await view.mount()
        await view.select("rust")
        renderer.tap_background()
        assert view.panel is None

        await view.select("rust")
        view.handle_key("Escape")
        assert view.selected is None

    @pytest.mark.asyncio
    async def test_enrich_marks_graph_stale(
        self, view: GraphView, mock_client: MagicMock
    ) -> None:
        """Test enrichment success makes the next graph access refetch."""
        await view.mount()
        await view.select("rust")
        await view.enrich_selected()

        await view.refresh()
        assert mock_client.fetch_graph.await_count == 2

    @pytest.mark.asyncio
    async def test_enrich_failure_recorded(
        self, view: GraphView, mock_client: MagicMock
    ) -> None:
        """Test enrichment failure is reported without touching the graph."""
        await view.mount()
        await view.select("rust")
        mock_client.enrich_concept = AsyncMock(side_effect=ApiError("quota"))

        with pytest.raises(EnrichmentFailure):
            await view.enrich_selected()

        assert view.enrich_error == "quota"
        assert not view.store.is_stale

    @pytest.mark.asyncio
    async def test_enrich_without_selection(self, view: GraphView) -> None:
        await view.mount()
        assert await view.enrich_selected() is None


class TestExtractionAndTeardown:
    """Tests for extraction and unmount."""

    @pytest.mark.asyncio
    async def test_extract_reloads(self, view: GraphView, mock_client: MagicMock) -> None:
        """Test extraction success reloads the graph."""
        await view.mount()
        bigger = Graph(concepts=(make_concept("new", 700_000),))
        mock_client.fetch_graph = AsyncMock(return_value=bigger)

        await view.extract()

        assert not view.extracting
        assert view.store.concept_by_id("new") is not None
        assert view.cursor == 700_000

    @pytest.mark.asyncio
    async def test_extract_error_banner(
        self, view: GraphView, mock_client: MagicMock, scheduler: FakeScheduler
    ) -> None:
        """Test extraction error shows and clears after eight seconds."""
        await view.mount()
        mock_client.trigger_extraction = AsyncMock(side_effect=ApiError("llm down"))

        await view.extract()
        assert view.error_message == "llm down"
        assert len(view.store) == 5

        scheduler.advance(8)
        assert view.error_message is None

    @pytest.mark.asyncio
    async def test_unmount_mid_playback(
        self, view: GraphView, renderer: HeadlessRenderer, scheduler: FakeScheduler,
        target: MagicMock,
    ) -> None:
        """Test unmount cancels ticks, releases capture and destroys the renderer."""
        await view.mount()
        view.play()
        view.handle_pointer_down(2, 0, 0)

        await view.unmount()

        assert scheduler.pending == []
        assert scheduler.advance(60) == 0
        target.release_pointer_capture.assert_called_once_with(2)
        assert renderer.destroyed
        assert not view.mounted

    @pytest.mark.asyncio
    async def test_unmount_cancels_pending_selection(
        self, view: GraphView, renderer: HeadlessRenderer, mock_client: MagicMock
    ) -> None:
        """Test an in-flight detail fetch is cancelled on unmount."""
        gate = asyncio.Event()

        async def never(concept_id: str):
            await gate.wait()

        mock_client.fetch_concept_detail = AsyncMock(side_effect=never)
        await view.mount()
        renderer.tap_node("rust")
        await asyncio.sleep(0)

        await view.unmount()

        assert view._tasks == set()
        assert view.selected is None
