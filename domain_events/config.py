"""Runtime settings for the shared publisher, read from the environment."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, field_validator

ENV_ALLOW_RECURSIVE_PUBLISH = "DOMAIN_EVENTS_ALLOW_RECURSIVE_PUBLISH"
ENV_LOG_LEVEL = "DOMAIN_EVENTS_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}


class PublisherSettings(BaseModel):
    allow_recursive_publish: bool = False
    log_level: str | None = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level


def load_settings(environ: Mapping[str, str] | None = None) -> PublisherSettings:
    """Build settings from *environ* (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    raw_recursive = env.get(ENV_ALLOW_RECURSIVE_PUBLISH, "")
    raw_level = env.get(ENV_LOG_LEVEL) or None
    return PublisherSettings(
        allow_recursive_publish=raw_recursive.strip().lower() in _TRUTHY,
        log_level=raw_level,
    )


def configure_logging(settings: PublisherSettings) -> None:
    """Apply the configured level to the package logger, if one is set."""
    if settings.log_level is not None:
        logging.getLogger("domain_events").setLevel(settings.log_level)
