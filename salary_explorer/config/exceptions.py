"""Exceptions raised while loading configuration."""

from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

SCALAR_TYPE_ERRORS = {
    "string_type": "string",
    "int_type": "integer",
    "int_parsing": "integer",
    "float_type": "number",
    "float_parsing": "number",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
}


def describe_validation_error(error: Dict[str, Any]) -> str:
    """One readable line for a single pydantic error entry.

    ``{"loc": ("ingestion", "timeout_seconds"), "type": "greater_than", ...}``
    becomes ``ingestion -> timeout_seconds: Input should be greater than 0``.
    """
    field_path = " -> ".join(str(part) for part in error["loc"]) or "<root>"
    error_type = error["type"]

    if error_type == "missing":
        return f"Missing required field: {field_path}"
    if error_type in SCALAR_TYPE_ERRORS:
        return (
            f"Invalid type for '{field_path}': expected {SCALAR_TYPE_ERRORS[error_type]}, "
            f"got {error.get('input')!r}"
        )
    if error_type == "enum":
        return f"Invalid value for '{field_path}': {error['msg']}"
    if error_type == "extra_forbidden":
        return f"Unknown setting: {field_path}"
    return f"{field_path}: {error['msg']}"


class ConfigurationError(Exception):
    """Configuration could not be loaded or failed validation.

    Carries the individual problems and a few hints, rendered together as one
    numbered message so the CLI can print it as is.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Iterable[str]] = None,
        suggestions: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            message: Primary error message
            errors: Individual problems, one line each
            suggestions: Hints for fixing them
        """
        self.message = message
        self.errors: List[str] = list(errors or [])
        self.suggestions: List[str] = list(suggestions or [])
        super().__init__(message)

    @classmethod
    def from_validation_error(
        cls, error: ValidationError, message: str = "Configuration validation failed"
    ) -> "ConfigurationError":
        """Wrap a pydantic ValidationError, one line per failing field."""
        return cls(
            message,
            errors=[describe_validation_error(entry) for entry in error.errors()],
            suggestions=[
                "Review config.example.yaml for correct format",
                "Only dataset.path is required; every other section has defaults",
            ],
        )

    def __str__(self) -> str:
        lines = [self.message]
        if self.errors:
            lines.append("\nValidation Errors:")
            lines.extend(f"  {number}. {error}" for number, error in enumerate(self.errors, 1))
        if self.suggestions:
            lines.append("\nSuggestions:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)
        return "\n".join(lines)
