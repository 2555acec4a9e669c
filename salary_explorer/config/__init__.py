"""Configuration management for the salary explorer."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    CategorizationConfig,
    DatasetConfig,
    IngestionConfig,
    InsightsConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    NormalizationConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "DatasetConfig",
    "IngestionConfig",
    "NormalizationConfig",
    "CategorizationConfig",
    "InsightsConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
