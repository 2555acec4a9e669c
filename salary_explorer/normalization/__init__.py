"""Normalization of raw job-posting rows into JobRecord domain models."""

from .service import RecordNormalizer

__all__ = ["RecordNormalizer"]
