"""Runtime settings with typed configuration and fail-fast validation.

Examples
--------
>>> from psimod_common.settings import load_settings
>>> settings = load_settings(obo_path="data/PSI-MOD.obo")
>>> settings.encoding
'utf-8'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Final

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from psimod_common.errors import SettingsError
from psimod_common.logging import get_logger, setup_logging
from psimod_common.navmap_types import NavMap

__all__ = [
    "OntologySettings",
    "configure_logging",
    "get_settings",
    "load_settings",
]

logger = get_logger(__name__)

__navmap__: Final[NavMap] = {
    "title": "psimod_common.settings",
    "synopsis": "Typed runtime configuration with fail-fast validation",
    "exports": __all__,
    "sections": [
        {
            "id": "public-api",
            "title": "Public API",
            "symbols": __all__,
        },
    ],
    "module_meta": {
        "owner": "@psimod-common",
        "stability": "stable",
        "since": "0.1.0",
    },
}

_LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class OntologySettings(BaseSettings):
    """Where the OBO source lives and how to read it (``PSIMOD_*``)."""

    model_config = SettingsConfigDict(env_prefix="PSIMOD_", extra="forbid")

    obo_path: Path | None = Field(
        default=None, description="Path to the PSI-MOD OBO file loaded into the catalog"
    )
    encoding: str = Field(default="utf-8", description="Text encoding of the OBO file")
    log_level: str = Field(
        default="INFO", description="Root logging level applied by configure_logging"
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return level


def load_settings(**overrides: object) -> OntologySettings:
    """Load :class:`OntologySettings` with optional overrides.

    Raises
    ------
    SettingsError
        If the environment or overrides fail validation.
    """
    try:
        return OntologySettings(**overrides)  # type: ignore[arg-type]  # BaseSettings accepts Any kwargs
    except ValidationError as exc:
        msg = f"Configuration validation failed: {exc.error_count()} error(s)"
        logger.exception(
            "Settings validation failed",
            extra={"operation": "load_settings", "error_type": type(exc).__name__},
        )
        raise SettingsError(
            msg,
            errors=[
                {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
                for err in exc.errors()
            ],
            cause=exc,
        ) from exc


@lru_cache(maxsize=1)
def get_settings() -> OntologySettings:
    """Return process-wide settings, loaded once from the environment."""
    return load_settings()


def configure_logging(settings: OntologySettings | None = None) -> None:
    """Install JSON logging on the root logger at ``settings.log_level``.

    Uses the process-wide settings when ``settings`` is omitted.
    """
    resolved = settings or get_settings()
    setup_logging(resolved.log_level)
