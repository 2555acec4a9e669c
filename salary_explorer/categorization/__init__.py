"""Job-title and company-size categorization."""

from .rules import (
    CORE_TRACK_RULES,
    EXTENDED_TRACK_RULES,
    SIZE_RULES,
    classify_size,
    classify_track,
)

__all__ = [
    "classify_track",
    "classify_size",
    "CORE_TRACK_RULES",
    "EXTENDED_TRACK_RULES",
    "SIZE_RULES",
]
