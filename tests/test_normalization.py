"""Unit tests for record normalization."""

import pytest

from salary_explorer.config.models import NormalizationConfig
from salary_explorer.normalization import RecordNormalizer
from salary_explorer.normalization.service import _parse_amounts


@pytest.fixture
def normalizer():
    return RecordNormalizer()


class TestRegionExtraction:
    """Region comes from an explicit state column or the end of the location."""

    def test_explicit_state_column(self, normalizer):
        record = normalizer.normalize({"job_state": "NY", "avg_salary": 90})
        assert record.region == "NY"

    def test_explicit_column_wins_over_location(self, normalizer):
        record = normalizer.normalize({"job_state": "NY", "Location": "Austin, TX"})
        assert record.region == "NY"

    def test_lowercase_explicit_code_is_uppercased(self, normalizer):
        record = normalizer.normalize({"state": " ca "})
        assert record.region == "CA"

    def test_location_suffix(self, normalizer):
        record = normalizer.normalize({"Location": "Albuquerque, NM"})
        assert record.region == "NM"

    def test_blank_state_falls_back_to_location(self, normalizer):
        record = normalizer.normalize({"job_state": "  ", "Location": "Seattle, WA"})
        assert record.region == "WA"

    def test_location_without_state(self, normalizer):
        record = normalizer.normalize({"Location": "Remote"})
        assert record.region == ""
        assert record.is_valid is False

    def test_malformed_explicit_value_falls_back(self, normalizer):
        record = normalizer.normalize({"job_state": "Los Angeles", "Location": "Los Angeles, CA"})
        assert record.region == "CA"


class TestSalaryExtraction:
    """Salaries from numeric fields, estimate strings and the thousands heuristic."""

    def test_glassdoor_estimate_range(self, normalizer):
        record = normalizer.normalize({"Salary Estimate": "$53K-$91K (Glassdoor est.)"})
        assert record.salary_avg == 72000
        assert record.salary_min == 53000
        assert record.salary_max == 91000

    def test_bare_numbers_in_estimate_are_not_amounts(self, normalizer):
        record = normalizer.normalize(
            {"Location": "Austin, TX", "Salary Estimate": "$100K-$150K (Glassdoor est.) 4 ratings"}
        )
        assert record.salary_avg == 125000
        assert record.salary_min == 100000
        assert record.salary_max == 150000

    def test_thousands_heuristic(self, normalizer):
        record = normalizer.normalize({"avg_salary": "72.5"})
        assert record.salary_avg == 72500

    def test_full_amount_is_not_rescaled(self, normalizer):
        record = normalizer.normalize({"avg_salary": 120000})
        assert record.salary_avg == 120000

    def test_missing_range_derived_from_average(self, normalizer):
        record = normalizer.normalize({"avg_salary": 100})
        assert record.salary_min == pytest.approx(80000)
        assert record.salary_max == pytest.approx(120000)

    def test_range_factors_follow_config(self):
        normalizer = RecordNormalizer(NormalizationConfig(min_salary_factor=0.5, max_salary_factor=2))
        record = normalizer.normalize({"avg_salary": 100})
        assert record.salary_min == pytest.approx(50000)
        assert record.salary_max == pytest.approx(200000)

    def test_explicit_min_and_max_are_scaled(self, normalizer):
        record = normalizer.normalize({"avg_salary": 100, "min_salary": 80, "max_salary": 120})
        assert record.salary_min == 80000
        assert record.salary_max == 120000

    def test_numeric_average_preferred_over_estimate(self, normalizer):
        record = normalizer.normalize({"avg_salary": "100", "Salary Estimate": "$10K-$20K"})
        assert record.salary_avg == 100000

    def test_unusable_average_falls_through_to_estimate(self, normalizer):
        record = normalizer.normalize({"avg_salary": float("nan"), "salary": "$90K"})
        assert record.salary_avg == 90000

    def test_sentinel_salary_gives_zero(self, normalizer):
        record = normalizer.normalize({"job_state": "TX", "avg_salary": "-1", "Salary Estimate": "-1"})
        assert record.salary_avg == 0
        assert record.is_valid is False

    def test_no_salary_field(self, normalizer):
        record = normalizer.normalize({"job_state": "CA"})
        assert record.salary_avg == 0
        assert record.salary_min == 0
        assert record.salary_max == 0


class TestDescriptiveFields:
    def test_glassdoor_row(self, normalizer):
        row = {
            "Job Title": "Data Scientist",
            "Salary Estimate": "$53K-$91K (Glassdoor est.)",
            "Location": "Albuquerque, NM",
            "Company Name": "Tecolote Research\n3.8",
            "Size": "501 to 1000 employees",
            "Industry": "Aerospace & Defense",
            "python_yn": 1,
            "R_yn": 0,
            "spark": 0,
            "aws": 0,
            "excel": 1,
        }
        record = normalizer.normalize(row)

        assert record.title == "Data Scientist"
        assert record.company == "Tecolote Research"
        assert record.size_text == "501 to 1000 employees"
        assert record.industry == "Aerospace & Defense"
        assert record.python is True
        assert record.r is False
        assert record.excel is True
        assert record.is_valid is True

    def test_company_defaults_to_unknown(self, normalizer):
        assert normalizer.normalize({}).company == "Unknown"

    def test_cleaned_company_column_preferred(self, normalizer):
        record = normalizer.normalize({"company_txt": "Acme", "Company Name": "Acme\n4.1"})
        assert record.company == "Acme"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1, True),
            (1.0, True),
            ("1", True),
            ("True", True),
            ("yes", True),
            (True, True),
            (0, False),
            ("0", False),
            ("", False),
            (None, False),
            ("no", False),
        ],
    )
    def test_skill_flag_coercion(self, normalizer, value, expected):
        record = normalizer.normalize({"python_yn": value})
        assert record.python is expected


class TestNormalizeBatch:
    def test_skips_non_mapping_rows(self, normalizer):
        rows = [{"job_state": "CA", "avg_salary": 100}, "not a row", None, {"job_state": "NY"}]
        records = list(normalizer.normalize_batch(rows))

        assert [record.region for record in records] == ["CA", "NY"]

    def test_empty_input(self, normalizer):
        assert list(normalizer.normalize_batch([])) == []


class TestParseAmounts:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("$53K-$91K (Glassdoor est.)", [53000.0, 91000.0]),
            ("$120,000", [120000.0]),
            ("90K-110K", [90000.0, 110000.0]),
            ("$85K, 12 reviews", [85000.0]),
            ("72.5", [72.5]),
            (85, [85.0]),
            ("n/a", []),
            (None, []),
            (True, []),
            (float("inf"), []),
        ],
    )
    def test_parse_amounts(self, value, expected):
        assert _parse_amounts(value) == expected
