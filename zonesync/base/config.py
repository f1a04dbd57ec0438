"""
Pydantic configuration model for the updater.

Validates the process configuration at startup instead of discovering a
missing API key or zone id on the first remote call.
"""

from __future__ import annotations

import os
import re
from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str | int | float) -> float:
    """Convert a duration such as ``300``, ``45s``, ``5m`` or ``1h30m`` to seconds.

    Raises:
        ValueError: If *value* is not a non-negative duration.
    """
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip()
        try:
            seconds = float(text)
        except ValueError:
            pos = 0
            seconds = 0.0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    break
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos == 0 or pos != len(text):
                raise ValueError(f"Invalid duration: {value!r}") from None
    if seconds < 0:
        raise ValueError(f"Duration must not be negative: {value!r}")
    return seconds


class UpdaterConfig(BaseModel):
    """Configuration for the dynamic DNS updater.

    Values are resolved in order:
    1. Explicit values passed in the config dict (command line flags).
    2. Environment variables (GANDI_API_KEY, GANDI_ZONE_ID, ZONESYNC_RECORD, …).
    3. Field defaults. ``api_key``, ``zone_id`` and ``record`` have none.
    """

    model_config = ConfigDict(extra="forbid")

    api_key: str = Field(min_length=1, description="Zone API key")
    zone_id: int = Field(gt=0, description="Zone identifier")
    record: str = Field(min_length=1, description="Name of the record to keep updated")
    refresh: float = Field(default=300.0, description="Seconds between public IP checks")
    test_platform: bool = Field(
        default=False, description="Talk to the test platform instead of production"
    )
    ip_source: Literal["plain", "json"] = Field(
        default="plain", description="Public IP response format"
    )
    ip_url: str | None = Field(default=None, description="Override the public IP endpoint")
    timeout: float = Field(default=30.0, gt=0, description="Per-call network timeout in seconds")
    ip_attempts: int = Field(default=1, ge=1, description="Attempts per public IP lookup")
    max_failures: int = Field(
        default=0, ge=0, description="Consecutive failed iterations before giving up (0 = never)"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing values."""
        env_map = {
            "api_key": "GANDI_API_KEY",
            "zone_id": "GANDI_ZONE_ID",
            "record": "ZONESYNC_RECORD",
            "refresh": "ZONESYNC_REFRESH",
            "test_platform": "GANDI_TEST_PLATFORM",
            "ip_source": "ZONESYNC_IP_SOURCE",
            "ip_url": "ZONESYNC_IP_URL",
            "timeout": "ZONESYNC_TIMEOUT",
            "ip_attempts": "ZONESYNC_IP_ATTEMPTS",
            "max_failures": "ZONESYNC_MAX_FAILURES",
        }
        values = dict(values)
        for field, env_var in env_map.items():
            if values.get(field) is None:
                values[field] = os.environ.get(env_var)
        # Unset values fall through to the field defaults
        return {k: v for k, v in values.items() if v is not None}

    @field_validator("refresh", mode="before")
    @classmethod
    def parse_refresh(cls, value: Any) -> float:
        return parse_duration(value)


def validate_config(config: dict) -> UpdaterConfig:
    """Validate and return a typed updater config.

    Args:
        config: Raw configuration dictionary.

    Returns:
        A validated :class:`UpdaterConfig`.

    Raises:
        pydantic.ValidationError: If a mandatory value is missing or a value is invalid.
    """
    return UpdaterConfig(**config)


__all__ = [
    "UpdaterConfig",
    "parse_duration",
    "validate_config",
]
