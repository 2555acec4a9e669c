"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class DatasetConfig(BaseModel):
    """Where the job-posting table lives."""

    path: str = Field(..., min_length=1, description="Path to the job-posting CSV file")
    encoding: str = Field("utf-8", min_length=1, description="Text encoding of the CSV file")

    @field_validator("path", "encoding")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped


class IngestionConfig(BaseModel):
    """Timing of the one-time dataset load barrier."""

    timeout_seconds: float = Field(
        10.0, gt=0, le=300, description="How long to wait for the dataset before failing"
    )
    poll_interval_seconds: float = Field(
        0.1, gt=0, le=5, description="How often readiness is checked while waiting"
    )

    @model_validator(mode="after")
    def validate_poll_interval(self):
        """The poll interval must fit inside the timeout."""
        if self.poll_interval_seconds > self.timeout_seconds:
            raise ValueError(
                "poll_interval_seconds cannot exceed timeout_seconds "
                f"({self.poll_interval_seconds} > {self.timeout_seconds})"
            )
        return self


class NormalizationConfig(BaseModel):
    """Heuristics applied while turning raw rows into records."""

    thousands_threshold: float = Field(
        1000.0,
        gt=0,
        description="Salary figures below this are read as thousands and multiplied by 1000",
    )
    min_salary_factor: float = Field(
        0.8, gt=0, le=1, description="Fallback minimum salary as a fraction of the average"
    )
    max_salary_factor: float = Field(
        1.2, ge=1, le=5, description="Fallback maximum salary as a multiple of the average"
    )


class CategorizationConfig(BaseModel):
    """Job-title classification settings."""

    extended_tracks: bool = Field(
        True,
        description="Recognise SoftwareEngineer titles in the per-track skill breakdown",
    )


class InsightsConfig(BaseModel):
    """Skill-gap recommendation settings."""

    gap_threshold: float = Field(
        0.05, ge=0, le=1, description="Minimum frequency gap reported as a recommendation"
    )
    max_recommendations: int = Field(
        3, ge=1, le=5, description="Number of skill gaps listed, largest first"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the salary explorer."""

    dataset: DatasetConfig = Field(..., description="Job-posting dataset location")
    ingestion: IngestionConfig = Field(
        default_factory=IngestionConfig, description="Dataset load barrier timing"
    )
    normalization: NormalizationConfig = Field(
        default_factory=NormalizationConfig, description="Row normalization heuristics"
    )
    categorization: CategorizationConfig = Field(
        default_factory=CategorizationConfig, description="Title classification settings"
    )
    insights: InsightsConfig = Field(
        default_factory=InsightsConfig, description="Skill-gap recommendation settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def with_dataset_path(self, path: Optional[str]) -> "AppConfig":
        """Return a copy pointing at ``path``, or self when path is empty."""
        if not path:
            return self
        dataset = self.dataset.model_copy(update={"path": path})
        return self.model_copy(update={"dataset": dataset})
