"""Free-text classification of job titles and company sizes.

Both classifiers are ordered substring tables over lower-cased text. Order
matters for titles: the first rule whose phrases appear in the title wins, so
"Senior Data Engineer, Analytics" is a DataEngineer and never falls through to
the looser ``analyst`` rule.

Size phrases must not start in the middle of a number: "201 to 500" contains
the text "1 to 50" but is Medium, not Small.
"""

import re
from typing import Optional, Pattern, Sequence, Tuple

from salary_explorer.domain.models import SizeBucket, Track

TitleRule = Tuple[Track, Sequence[str]]

CORE_TRACK_RULES: Tuple[TitleRule, ...] = (
    (Track.DATA_SCIENTIST, ("data scientist",)),
    (Track.DATA_ENGINEER, ("data engineer",)),
    (Track.DATA_ANALYST, ("data analyst", "analyst")),
    (Track.ML_ENGINEER, ("machine learning", "ml engineer")),
)

EXTENDED_TRACK_RULES: Tuple[TitleRule, ...] = CORE_TRACK_RULES + (
    (Track.SOFTWARE_ENGINEER, ("software engineer", "developer")),
)

SIZE_RULES: Tuple[Tuple[SizeBucket, Sequence[str]], ...] = (
    (SizeBucket.SMALL, ("1 to 50", "51 to 200")),
    (SizeBucket.MEDIUM, ("201 to 500", "501 to 1000")),
    (SizeBucket.LARGE, ("1001 to 5000", "5001 to 10000", "10000+")),
)

_SIZE_PATTERNS: Tuple[Tuple[SizeBucket, Tuple[Pattern[str], ...]], ...] = tuple(
    (bucket, tuple(re.compile(r"(?<!\d)" + re.escape(phrase)) for phrase in phrases))
    for bucket, phrases in SIZE_RULES
)

# Placeholder values the source data uses for "not reported"
SIZE_SENTINELS = frozenset({"", "-1", "unknown"})


def classify_track(title: Optional[str], extended: bool = False) -> Track:
    """Map a job title to a Track.

    Args:
        title: Free-text job title
        extended: Also recognise SoftwareEngineer titles (sunburst view)

    Returns:
        The first matching Track, or Track.OTHER
    """
    if not title:
        return Track.OTHER

    lowered = title.lower()
    rules = EXTENDED_TRACK_RULES if extended else CORE_TRACK_RULES
    for track, phrases in rules:
        if any(phrase in lowered for phrase in phrases):
            return track
    return Track.OTHER


def classify_size(text: Optional[str]) -> SizeBucket:
    """Map a company-size description such as ``"51 to 200 employees"`` to a bucket.

    No numeric parsing is attempted; only the phrasing of the source dataset
    is recognised, everything else is Unknown.
    """
    if text is None:
        return SizeBucket.UNKNOWN

    lowered = text.strip().lower()
    if lowered in SIZE_SENTINELS:
        return SizeBucket.UNKNOWN

    for bucket, patterns in _SIZE_PATTERNS:
        if any(pattern.search(lowered) for pattern in patterns):
            return bucket
    return SizeBucket.UNKNOWN
