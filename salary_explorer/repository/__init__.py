"""Dataset repository, load barrier and boundary lookup."""

from .dataset import DatasetRepository, DatasetSnapshot
from .exceptions import DatasetNotLoadedError, IngestionError, RepositoryError
from .geography import BoundaryLookup, FipsBoundaryLookup

__all__ = [
    "DatasetRepository",
    "DatasetSnapshot",
    "BoundaryLookup",
    "FipsBoundaryLookup",
    "RepositoryError",
    "IngestionError",
    "DatasetNotLoadedError",
]
