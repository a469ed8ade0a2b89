"""Playback of the time cursor across the graph's time range."""

import logging
from enum import Enum
from typing import Callable

from cerebro.config import settings
from cerebro.errors import NoTimeAxisError
from cerebro.graph.snapshot import GraphSnapshotStore
from cerebro.view.scheduler import LoopScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    """Playback phase."""

    IDLE = "idle"  # cursor fixed, nothing scheduled
    PLAYING = "playing"  # one tick scheduled at a time


class PlaybackController:
    """
    Drives the cursor from the start to the end of the time range.

    play() always restarts from the beginning; there is no resume. Each tick
    moves the cursor by 1/ticks of the range, so a full run takes
    ticks * interval seconds whatever the span of the data. The next tick is
    scheduled only after the current one's cursor change has been handled.

    The cursor at tick n is min + n * step: a manual scrub while playing is
    overwritten by the next tick.
    """

    def __init__(
        self,
        store: GraphSnapshotStore,
        on_cursor_change: Callable[[float], None],
        scheduler: Scheduler | None = None,
        interval: float | None = None,
        ticks: int | None = None,
    ) -> None:
        self.store = store
        self.on_cursor_change = on_cursor_change
        self.scheduler = scheduler or LoopScheduler()
        self.interval = settings.playback_interval if interval is None else interval
        self.ticks = ticks or settings.playback_ticks

        self.state = PlaybackState.IDLE
        self.cursor: float | None = None
        self.tick_count = 0
        self._handle: TimerHandle | None = None
        self._range: tuple[float, float] | None = None

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    def reset(self) -> None:
        """Stop and park the cursor at the end of the current snapshot's range."""
        self._cancel()
        time_range = self.store.time_range()
        self.cursor = time_range[1] if time_range else None

    def play(self) -> None:
        """Restart playback from the beginning of the time range."""
        time_range = self.store.time_range()
        if time_range is None:
            raise NoTimeAxisError("Graph has no concepts; playback unavailable")

        self._cancel()
        self._range = time_range
        self.tick_count = 0
        self.state = PlaybackState.PLAYING
        logger.debug(f"Playback started over [{time_range[0]}, {time_range[1]}]")
        self._set_cursor(time_range[0])
        self._schedule()

    def pause(self) -> None:
        """Stop playback, keeping the cursor where it is."""
        if self.state == PlaybackState.PLAYING:
            logger.debug(f"Playback paused at {self.cursor} after {self.tick_count} ticks")
        self._cancel()

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def scrub(self, value: float) -> float:
        """Set the cursor directly, clamped to the time range.

        Allowed while playing; the next tick overwrites it.
        """
        time_range = self.store.time_range()
        if time_range is None:
            raise NoTimeAxisError("Graph has no concepts; scrubbing unavailable")
        low, high = time_range
        value = min(max(value, low), high)
        self._set_cursor(value)
        return value

    def teardown(self) -> None:
        """Cancel any pending tick. Safe to call repeatedly."""
        self._cancel()

    def _schedule(self) -> None:
        self._handle = self.scheduler.call_later(self.interval, self._tick)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.state = PlaybackState.IDLE

    def _tick(self) -> None:
        self._handle = None
        if self.state != PlaybackState.PLAYING or self._range is None:
            return

        low, high = self._range
        step = (high - low) / self.ticks
        self.tick_count += 1
        cursor = low + step * self.tick_count
        finished = self.tick_count >= self.ticks or cursor >= high
        if finished:
            cursor = high
            self.state = PlaybackState.IDLE
            logger.debug(f"Playback finished after {self.tick_count} ticks")

        try:
            self._set_cursor(cursor)
        except Exception:
            # Consumer failed: stop rather than stay Playing with nothing scheduled
            self._cancel()
            raise

        # Consumer may have paused or restarted playback during the callback
        if self.state == PlaybackState.PLAYING and self._handle is None:
            self._schedule()

    def _set_cursor(self, value: float) -> None:
        self.cursor = value
        self.on_cursor_change(value)
