"""Configuration management for postcheck.

This module resolves the target API settings from defaults, an optional
TOML file, environment variables, and explicit overrides, in that order.
"""

import os
import tomllib
from pathlib import Path
from typing import Dict, Optional, Any

from pydantic import BaseModel, Field, field_validator, HttpUrl
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError

DEFAULT_BASE_URL = "http://localhost:3000"

ENV_PREFIX = "POSTCHECK_"
ENV_FIELDS = ("base_url", "timeout", "protected_prefix", "debug")


class Settings(BaseModel):
    """Settings for the API under test."""

    base_url: HttpUrl = Field(default=DEFAULT_BASE_URL, description="Base URL of the API under test")
    timeout: float = Field(default=30, description="Request timeout in seconds")
    protected_prefix: str = Field(default="664", description="Route prefix guarding write access")
    debug: bool = Field(default=False, description="Print request and response details")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout value."""
        if v < 1:
            raise ValueError("Timeout must be at least 1 second")
        if v > 300:
            raise ValueError("Timeout cannot exceed 300 seconds")
        return v

    @field_validator("protected_prefix")
    @classmethod
    def validate_protected_prefix(cls, v: str) -> str:
        """Strip slashes so the prefix can be joined into a path."""
        v = v.strip("/")
        if not v:
            raise ValueError("Protected prefix cannot be empty")
        return v

    @property
    def url(self) -> str:
        """Base URL as a string without a trailing slash."""
        return str(self.base_url).rstrip("/")

    def model_dump(self, **kwargs: Any) -> Dict[str, Any]:
        """Convert settings to dictionary with the URL as a plain string."""
        data = super().model_dump(**kwargs)
        if "base_url" in data:
            data["base_url"] = str(data["base_url"]).rstrip("/")
        return data


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read the ``[postcheck]`` table from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Raw settings from the file

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}")

    section = data.get("postcheck", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[postcheck] in {path} must be a table")

    unknown = set(section) - set(ENV_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {', '.join(sorted(unknown))}")

    return section


def get_environment_config() -> Dict[str, Any]:
    """Get settings from ``POSTCHECK_*`` environment variables.

    Returns:
        Settings found in the environment, keyed by field name
    """
    values: Dict[str, Any] = {}
    for name in ENV_FIELDS:
        value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if value is None or value == "":
            continue
        if name == "debug":
            values[name] = value.strip().lower() in ("1", "true", "yes", "on")
        else:
            values[name] = value
    return values


def load_settings(
    config_file: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Resolve settings from all sources.

    Args:
        config_file: Optional TOML file with a ``[postcheck]`` table
        overrides: Explicit values, e.g. from command-line options.
            ``None`` values are ignored.

    Returns:
        Validated settings

    Raises:
        ConfigError: If any source provides an invalid value
    """
    values: Dict[str, Any] = {}

    if config_file is not None:
        values.update(read_config_file(config_file))

    values.update(get_environment_config())

    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**values)
    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid settings: {errors}")
