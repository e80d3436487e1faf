"""Process-wide settings, read from the environment.

Usage::

    from jinja_expects.config import ExpectsSettings
    settings = ExpectsSettings()            # JINJA_EXPECTS_ENABLED=0 ...
    settings = ExpectsSettings(enabled=False)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExpectsSettings(BaseSettings):
    """Flags consulted once per compiled document."""

    model_config = SettingsConfigDict(
        env_prefix="JINJA_EXPECTS_",
        frozen=True,
        extra="ignore",
    )

    enabled: bool = Field(
        default=True,
        description="Emit guard code; when false annotations are stripped",
    )
    allow_raw_code: bool = Field(
        default=True,
        description="Permit {% do %} expression statements in templates",
    )
