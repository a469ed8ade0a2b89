"""Archive API client."""

from cerebro.client.api_client import ArchiveClient

__all__ = ["ArchiveClient"]
