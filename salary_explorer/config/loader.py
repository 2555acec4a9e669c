"""Configuration loader for the salary explorer.

A config file is a YAML mapping validated against ``AppConfig``. Environment
variables are applied on top by ``load_config``; ``validate_config_file`` checks
the file alone.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)

COPY_EXAMPLE_HINT = "Copy config.example.yaml to config.yaml"


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load the YAML config, validate it and apply environment overrides.

    Without ``config_path`` the first existing entry of
    ``DEFAULT_CONFIG_LOCATIONS`` is used. DATASET_PATH, when set, replaces
    ``dataset.path`` after validation.

    Raises:
        ConfigurationError: If no file is found or any value is invalid
    """
    config_file = _locate(config_path)
    raw = _read_mapping(config_file)

    warnings = check_for_warnings(raw)
    if warnings:
        emit_warnings(warnings)

    app_config = _validate(raw)

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load environment configuration: {e}",
            suggestions=["Check the variables defined in your .env file"],
        )

    return app_config.with_dataset_path(env_config.dataset_path), env_config


def validate_config_file(config_path: Path) -> bool:
    """Check a config file on its own and print the outcome.

    Environment variables are not consulted. Returns True when the file is valid.
    """
    try:
        _validate(_read_mapping(config_path))
    except ConfigurationError as e:
        print(f"✗ Configuration validation failed:\n{e}")
        return False

    print(f"✓ Configuration file {config_path} is valid")
    return True


def _iter_candidates(config_path: Optional[Path]) -> Iterator[Path]:
    if config_path:
        yield config_path
    else:
        yield from DEFAULT_CONFIG_LOCATIONS


def _locate(config_path: Optional[Path] = None) -> Path:
    for candidate in _iter_candidates(config_path):
        if candidate.exists():
            return candidate

    if config_path:
        raise ConfigurationError(
            f"Specified configuration file not found: {config_path}",
            suggestions=[f"Check that {config_path} exists", COPY_EXAMPLE_HINT],
        )
    raise ConfigurationError(
        "Configuration file not found",
        errors=[f"Tried: {candidate}" for candidate in DEFAULT_CONFIG_LOCATIONS],
        suggestions=[COPY_EXAMPLE_HINT, "Or pass --config with a custom location"],
    )


def _read_mapping(config_file: Path) -> Dict[str, Any]:
    """Parse ``config_file`` and insist on a non-empty top-level mapping."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {config_file}",
            suggestions=[COPY_EXAMPLE_HINT],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=["Indent with spaces, not tabs", "Quote paths that contain ':' or '#'"],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Check the permissions on {config_file}"],
        )

    if not raw:
        raise ConfigurationError(
            "Configuration file is empty",
            suggestions=[COPY_EXAMPLE_HINT, "At minimum set dataset.path"],
        )
    if not isinstance(raw, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping at the top level",
            suggestions=["See config.example.yaml for the expected sections"],
        )
    return raw


def _validate(raw: Dict[str, Any]) -> AppConfig:
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(e)
