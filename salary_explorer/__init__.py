"""Salary Explorer: normalization, aggregation and selection coordination for a salary dashboard."""

__version__ = "1.0.0"
