"""Error taxonomy for the graph view core.

Each subsystem raises its own failure type so a fault in one (say, an
enrichment call) can be reported without touching the state of another.
Transport errors are wrapped with ``raise ... from exc``.
"""


class CerebroError(Exception):
    """Base class for all cerebro errors."""


class ApiError(CerebroError):
    """The archive API returned a non-2xx response or could not be reached."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class LoadFailure(CerebroError):
    """Graph fetch failed; no partial graph is shown."""


class DetailFetchFailure(CerebroError):
    """Concept detail fetch failed."""


class EnrichmentFailure(CerebroError):
    """Enrichment mutation failed; the cached detail is left as it was."""


class ExtractionFailure(CerebroError):
    """Extraction trigger failed; the existing graph stays loaded."""


class NoTimeAxisError(CerebroError):
    """Temporal controls were used on a graph with no concepts."""
