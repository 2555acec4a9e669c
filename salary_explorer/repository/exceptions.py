"""Repository exceptions.

Ingestion failures are the only errors the data core reports to its caller;
everything else (dropped rows, unknown titles, empty selections) resolves to
a defined fallback value.
"""


class RepositoryError(Exception):
    """Base exception for dataset repository errors."""

    pass


class IngestionError(RepositoryError):
    """The dataset failed to load or parse, or was not ready in time.

    Fatal for the session. There is no retry.
    """

    def __init__(self, message: str, source: str = "") -> None:
        """
        Args:
            message: Human-readable error message
            source: Dataset path or label that failed, if known
        """
        super().__init__(message)
        self.source = source


class DatasetNotLoadedError(RepositoryError):
    """Data was read from the repository before a load completed."""

    pass
