"""Extraction trigger: one gated fire-and-refresh action."""

import logging
from enum import Enum
from typing import Awaitable, Callable

from cerebro.client import ArchiveClient
from cerebro.config import settings
from cerebro.errors import ApiError, ExtractionFailure
from cerebro.graph.snapshot import GraphSnapshotStore
from cerebro.models import Extraction
from cerebro.view.scheduler import LoopScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class ExtractionState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"


class ExtractionTrigger:
    """
    Idle -> Extracting -> Idle.

    The gate reopens the same way on success and failure. Success
    invalidates the snapshot and reloads; failure leaves the graph alone and
    posts an error that clears itself after ``error_ttl`` seconds unless
    dismissed first.
    """

    def __init__(
        self,
        client: ArchiveClient,
        store: GraphSnapshotStore,
        reload: Callable[[], Awaitable[object]],
        scheduler: Scheduler | None = None,
        error_ttl: float | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.reload = reload
        self.scheduler = scheduler or LoopScheduler()
        self.error_ttl = settings.extraction_error_ttl if error_ttl is None else error_ttl

        self.state = ExtractionState.IDLE
        self.error: ExtractionFailure | None = None
        self.last_extraction: Extraction | None = None
        self._error_timer: TimerHandle | None = None

    @property
    def is_pending(self) -> bool:
        return self.state == ExtractionState.EXTRACTING

    @property
    def error_message(self) -> str | None:
        return str(self.error) if self.error is not None else None

    async def extract(self) -> Extraction | None:
        """Trigger extraction. Ignored (returns None) while one is pending."""
        if self.is_pending:
            logger.debug("Extraction already running, ignoring")
            return None

        self.dismiss_error()
        self.state = ExtractionState.EXTRACTING
        try:
            extraction = await self.client.trigger_extraction()
        except ApiError as e:
            self._post_error(ExtractionFailure(e.message or "Extraction failed"))
            return None
        finally:
            self.state = ExtractionState.IDLE

        self.last_extraction = extraction
        self.store.invalidate()
        await self.reload()
        return extraction

    def dismiss_error(self) -> None:
        """Clear the error banner now and cancel its expiry timer."""
        if self._error_timer is not None:
            self._error_timer.cancel()
            self._error_timer = None
        self.error = None

    def teardown(self) -> None:
        self.dismiss_error()

    def _post_error(self, error: ExtractionFailure) -> None:
        logger.error(f"Extraction failed: {error}")
        self.dismiss_error()
        self.error = error
        self._error_timer = self.scheduler.call_later(self.error_ttl, self._expire_error)

    def _expire_error(self) -> None:
        self._error_timer = None
        self.error = None
