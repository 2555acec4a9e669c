"""Geographic boundary lookup.

The map renderer identifies shapes by boundary-feature identifiers. The data
core only needs to translate those identifiers to region codes.
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Union

from salary_explorer.domain.regions import FIPS_TO_REGION

FeatureId = Union[str, int]


class BoundaryLookup(ABC):
    """Translates boundary-feature identifiers to two-letter region codes."""

    @abstractmethod
    def lookup(self, feature_id: FeatureId) -> Optional[str]:
        """Return the region code for ``feature_id``, or None when unknown."""


class FipsBoundaryLookup(BoundaryLookup):
    """Lookup for us-atlas state features, which are identified by FIPS code.

    Accepts ``"06"``, ``"6"`` and ``6`` alike.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self.mapping = dict(mapping if mapping is not None else FIPS_TO_REGION)

    def lookup(self, feature_id: FeatureId) -> Optional[str]:
        key = str(feature_id).strip()
        if key.isdigit():
            key = key.zfill(2)
        return self.mapping.get(key)
