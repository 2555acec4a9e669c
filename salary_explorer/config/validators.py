"""Soft checks that produce warnings instead of validation failures."""

import warnings
from pathlib import Path
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect a raw configuration dictionary for suspicious settings.

    Args:
        config_dict: Raw configuration dictionary (before model validation)

    Returns:
        List of warning messages
    """
    messages = []

    dataset = config_dict.get("dataset", {})
    if isinstance(dataset, dict):
        path = dataset.get("path")
        if isinstance(path, str) and path.strip() and Path(path.strip()).suffix.lower() != ".csv":
            messages.append(f"Dataset path '{path}' does not end in .csv")

    ingestion = config_dict.get("ingestion", {})
    if isinstance(ingestion, dict):
        timeout = ingestion.get("timeout_seconds")
        if isinstance(timeout, (int, float)) and timeout > 60:
            messages.append(
                f"Long ingestion timeout ({timeout}s) delays reporting of a missing dataset"
            )

    normalization = config_dict.get("normalization", {})
    if isinstance(normalization, dict):
        threshold = normalization.get("thousands_threshold")
        if isinstance(threshold, (int, float)) and threshold > 1000:
            messages.append(
                f"thousands_threshold of {threshold} will rescale real salaries below it"
            )

    return messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
