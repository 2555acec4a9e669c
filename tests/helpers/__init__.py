"""Test helper utilities for Salary Explorer tests."""

from .builders import load_repository, make_record, make_row, scenario_rows

__all__ = ["load_repository", "make_record", "make_row", "scenario_rows"]
