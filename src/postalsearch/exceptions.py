"""Custom exception hierarchy for postalsearch."""


class PostalSearchError(Exception):
    """Base exception for all postalsearch errors."""


class DatabaseNotFound(PostalSearchError):
    """The reference SQLite database file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Postal code database not found at: {path}")


class DatabaseInvalid(PostalSearchError):
    """The database exists but is missing expected tables."""

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Invalid database at {path}: {detail}")


class StoreError(PostalSearchError):
    """A query against the reference store failed."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Store query failed: {detail}")


class BatchTooLarge(PostalSearchError):
    """A batch lookup exceeded the per-call item limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Maximum {limit} searches per batch request, got {size}"
        )
