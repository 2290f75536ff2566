"""Exception hierarchy for catalog synchronization.

Local errors (malformed record, page failure) are absorbed and
summarized in the run report. Structural errors (baseline read,
snapshot write, cancellation, empty fetch) fail the run.
"""


class CatalogSyncError(Exception):
    """Base exception for catalog sync errors."""

    pass


class MalformedRecordError(CatalogSyncError):
    """Raised when a raw record lacks a mandatory field (id or title)."""

    def __init__(self, message: str, record_id: object = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class PageFetchError(CatalogSyncError):
    """Raised when a page of a country cannot be fetched.

    Attributes:
        country: Country whose pagination is aborted.
        page: Page number that failed.
    """

    def __init__(self, country: str, page: int, cause: Exception | None = None) -> None:
        message = f"Page {page} fetch failed for {country}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.country = country
        self.page = page


class FetchError(CatalogSyncError):
    """Raised when no country could be fetched at all."""

    pass


class SnapshotReadError(CatalogSyncError):
    """Raised when the persisted baseline exists but cannot be read."""

    pass


class PersistenceError(CatalogSyncError):
    """Raised when the new snapshot cannot be written."""

    pass


class SyncCancelledError(CatalogSyncError):
    """Raised when a run is cancelled or exceeds its deadline."""

    pass
