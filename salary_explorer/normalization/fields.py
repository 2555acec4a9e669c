"""Column-name candidates for the raw job-posting table.

Dataset exports disagree on naming (the Glassdoor scrape, its cleaned variant
and hand-built extracts all differ), so every field is looked up through an
ordered list of candidates and the first non-empty value wins.
"""

from salary_explorer.domain.models import Skill

REGION_FIELDS = ("state", "job_state")
LOCATION_FIELDS = ("Location", "location")

# Numeric average first, then free-text estimates that need range parsing
AVERAGE_SALARY_FIELDS = ("avg_salary", "avg", "salary_avg")
SALARY_TEXT_FIELDS = ("Salary Estimate", "salary_estimate", "salary")
MIN_SALARY_FIELDS = ("min_salary", "salary_min", "min")
MAX_SALARY_FIELDS = ("max_salary", "salary_max", "max")

TITLE_FIELDS = ("Job Title", "title", "job_title")
COMPANY_FIELDS = ("company_txt", "company", "Company Name")
SIZE_FIELDS = ("Size", "size", "size_text")
INDUSTRY_FIELDS = ("Industry", "industry")

SKILL_FIELDS = {
    Skill.PYTHON: ("python_yn", "python"),
    Skill.R: ("R_yn", "r_yn", "r"),
    Skill.SPARK: ("spark",),
    Skill.CLOUD: ("aws", "cloud"),
    Skill.EXCEL: ("excel",),
}

TRUE_FLAG_VALUES = frozenset({"1", "1.0", "true", "yes", "y", "t"})
