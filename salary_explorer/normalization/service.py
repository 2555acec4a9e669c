"""Record normalization service converting raw table rows into JobRecords.

This module implements the normalization logic that:
1. Resolves column-name variance through ordered field candidates
2. Extracts the two-letter region from an explicit column or the location text
3. Parses salaries from numeric fields or "$NNK-$MMK" estimate strings
4. Fills missing min/max salaries from the average
5. Coerces skill flags to booleans

Validity (known region, positive salary) is not checked here; the repository
and the aggregation layer drop invalid records.
"""

import logging
import math
import re
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from salary_explorer.config.models import NormalizationConfig
from salary_explorer.domain.models import JobRecord, Skill
from salary_explorer.logging import get_logger

from .fields import (
    AVERAGE_SALARY_FIELDS,
    COMPANY_FIELDS,
    INDUSTRY_FIELDS,
    LOCATION_FIELDS,
    MAX_SALARY_FIELDS,
    MIN_SALARY_FIELDS,
    REGION_FIELDS,
    SALARY_TEXT_FIELDS,
    SIZE_FIELDS,
    SKILL_FIELDS,
    TITLE_FIELDS,
    TRUE_FLAG_VALUES,
)

logger = get_logger(__name__, component="normalization")

LOCATION_REGION_PATTERN = re.compile(r",\s*([A-Z]{2})\s*$")
REGION_CODE_PATTERN = re.compile(r"^[A-Za-z]{2}$")
# "$53K", "91k", "$120,000", "72.5"
AMOUNT_PATTERN = re.compile(r"(\$)?\s*(\d+(?:,\d{3})*(?:\.\d+)?)\s*([kK](?![a-zA-Z]))?")


class RecordNormalizer:
    """Normalizes raw dataset rows into canonical JobRecord instances.

    Responsibilities:
    - Pick the first populated column among known name variants
    - Extract region, salaries, skill flags and descriptive text
    - Apply the thousands-scale salary heuristic
    - Never fail on a malformed value; fall back to empty/zero instead
    """

    def __init__(
        self,
        config: Optional[NormalizationConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize RecordNormalizer.

        Args:
            config: Salary heuristics (defaults to NormalizationConfig())
            logger_instance: Logger instance (defaults to module logger)
        """
        self.config = config or NormalizationConfig()
        self.logger = logger_instance or logger

    def normalize(self, row: Mapping[str, Any]) -> JobRecord:
        """Normalize a single raw row.

        A record is always returned. Rows without a recognisable region get an
        empty region, rows without a parseable salary get 0; both are dropped
        later by aggregation.

        Args:
            row: Mapping of column name to raw value

        Returns:
            JobRecord built from the row
        """
        salary_avg, range_min, range_max = self._extract_salary(row)

        salary_min = self._first_amount(row, MIN_SALARY_FIELDS)
        if salary_min is None:
            salary_min = range_min if range_min is not None else salary_avg * self.config.min_salary_factor

        salary_max = self._first_amount(row, MAX_SALARY_FIELDS)
        if salary_max is None:
            salary_max = range_max if range_max is not None else salary_avg * self.config.max_salary_factor

        skills = {
            skill.field_name: self._as_flag(_first_present(row, fields))
            for skill, fields in SKILL_FIELDS.items()
        }

        record = JobRecord(
            region=self._extract_region(row),
            title=_clean_text(_first_present(row, TITLE_FIELDS)),
            salary_avg=salary_avg,
            salary_min=salary_min,
            salary_max=salary_max,
            size_text=_clean_text(_first_present(row, SIZE_FIELDS)),
            industry=_clean_text(_first_present(row, INDUSTRY_FIELDS)),
            company=self._extract_company(row),
            **skills,
        )

        self.logger.debug(
            "Normalized record",
            extra={
                "event": "normalization.record.normalized",
                "region": record.region,
                "salary_avg": record.salary_avg,
            },
        )
        return record

    def normalize_batch(self, rows: Iterable[Any]) -> Iterator[JobRecord]:
        """Normalize every row, skipping entries that are not mappings.

        Args:
            rows: Iterable of raw rows

        Yields:
            JobRecord for each mapping row
        """
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                self.logger.warning(
                    f"Skipping row {index}: expected a mapping, got {type(row).__name__}",
                    extra={"event": "normalization.row.skipped", "row_index": index},
                )
                continue
            yield self.normalize(row)

    def _extract_region(self, row: Mapping[str, Any]) -> str:
        """Explicit state column first, then ``..., XX`` at the end of the location."""
        explicit = _clean_text(_first_present(row, REGION_FIELDS))
        if REGION_CODE_PATTERN.match(explicit):
            return explicit.upper()

        location = _clean_text(_first_present(row, LOCATION_FIELDS))
        match = LOCATION_REGION_PATTERN.search(location)
        return match.group(1) if match else ""

    def _extract_salary(
        self, row: Mapping[str, Any]
    ) -> Tuple[float, Optional[float], Optional[float]]:
        """Return (average, range_min, range_max) from the first usable salary field.

        Range endpoints are only reported when the field held at least two amounts.
        """
        for field in AVERAGE_SALARY_FIELDS + SALARY_TEXT_FIELDS:
            if field not in row:
                continue
            amounts = [self._scale(amount) for amount in _parse_amounts(row[field])]
            amounts = [amount for amount in amounts if amount > 0]
            if not amounts:
                continue
            average = sum(amounts) / len(amounts)
            if len(amounts) >= 2:
                return average, min(amounts), max(amounts)
            return average, None, None
        return 0.0, None, None

    def _first_amount(self, row: Mapping[str, Any], fields: Sequence[str]) -> Optional[float]:
        for field in fields:
            if field not in row:
                continue
            amounts = [amount for amount in _parse_amounts(row[field]) if amount > 0]
            if amounts:
                return self._scale(amounts[0])
        return None

    def _scale(self, amount: float) -> float:
        """Read figures below the threshold as thousands ("72" means $72,000)."""
        if 0 < amount < self.config.thousands_threshold:
            return amount * 1000
        return amount

    @staticmethod
    def _extract_company(row: Mapping[str, Any]) -> str:
        # Glassdoor appends the rating on a second line: "Acme\n3.8"
        name = _clean_text(_first_present(row, COMPANY_FIELDS)).split("\n")[0].strip()
        return name or "Unknown"

    @staticmethod
    def _as_flag(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value == 1
        if isinstance(value, str):
            return value.strip().lower() in TRUE_FLAG_VALUES
        return False


def _first_present(row: Mapping[str, Any], fields: Sequence[str]) -> Any:
    """Value of the first candidate column that is present and non-blank."""
    for field in fields:
        value = row.get(field)
        if value is None:
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_amounts(value: Any) -> List[float]:
    """Extract monetary amounts from a numeric value or an estimate string.

    ``"$53K-$91K (Glassdoor est.)"`` gives ``[53000.0, 91000.0]``; ``"72.5"``
    gives ``[72.5]``. Inside an estimate string only ``$`` or ``K`` amounts
    count, so ``"4 ratings"`` adds nothing. Unparseable input gives an empty list.
    """
    if value is None or isinstance(value, bool):
        return []
    if isinstance(value, (int, float)):
        return [float(value)] if math.isfinite(value) else []

    text = str(value).strip()
    try:
        parsed = float(text)
    except ValueError:
        pass
    else:
        return [parsed] if math.isfinite(parsed) else []

    amounts = []
    for dollar, number, suffix in AMOUNT_PATTERN.findall(text):
        if not (dollar or suffix):
            continue
        amount = float(number.replace(",", ""))
        if suffix:
            amount *= 1000
        amounts.append(amount)
    return amounts
