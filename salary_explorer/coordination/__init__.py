"""Selection coordination: state machine, derived views and subscriptions."""

from .coordinator import FilterCoordinator
from .models import (
    DerivedViews,
    RegionSelected,
    SelectionChange,
    SelectionCleared,
    SelectionEvent,
    SelectionHandler,
    SelectionSnapshot,
    SizeSelected,
    TrackSelected,
    TransitionOutcome,
)
from .transitions import build_views, filtered_records, region_records, transition

__all__ = [
    "FilterCoordinator",
    "DerivedViews",
    "SelectionSnapshot",
    "SelectionChange",
    "SelectionEvent",
    "SelectionHandler",
    "RegionSelected",
    "TrackSelected",
    "SizeSelected",
    "SelectionCleared",
    "TransitionOutcome",
    "transition",
    "build_views",
    "filtered_records",
    "region_records",
]
