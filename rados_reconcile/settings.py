from __future__ import annotations
"""Run settings read from the environment and an optional ``.env`` file."""
from dataclasses import dataclass
import logging
import math
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

from .errors import ConfigurationError
from .services import MAX_KEYS, REQUEST_TIMEOUT

OUTPUT_DIR_VAR = "PATH_TO_FILE_OUTPUT_DIR"
REQUEST_TIMEOUT_VAR = "RADOS_RECONCILE_REQUEST_TIMEOUT"
MAX_KEYS_VAR = "RADOS_RECONCILE_MAX_KEYS"
LOG_LEVEL_VAR = "RADOS_RECONCILE_LOG_LEVEL"


@dataclass
class AppSettings:
    """Simple container for run settings."""

    output_dir: Path
    request_timeout: float = REQUEST_TIMEOUT
    max_keys: int = MAX_KEYS
    log_level: str = "INFO"


def read_environment(environ: Mapping[str, str], env_file: str | Path | None = None) -> dict[str, str]:
    """Merge ``env_file`` values under the process environment.

    Variables already present in ``environ`` win over the file.
    """
    merged: dict[str, str] = {}
    if env_file is not None:
        path = Path(env_file)
        if path.exists():
            merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
        elif str(env_file) != ".env":
            raise ConfigurationError(f"Environment file {path} does not exist")
    merged.update(environ)
    return merged


class SettingsLoader:
    """Validates :class:`AppSettings` from environment variables."""

    def load(self, environ: Mapping[str, str]) -> AppSettings:
        output_dir = environ.get(OUTPUT_DIR_VAR, "").strip()
        if not output_dir:
            raise ConfigurationError(f"{OUTPUT_DIR_VAR} is not set")
        path = Path(output_dir)
        if not path.is_dir():
            raise ConfigurationError(f"{path} does not exist")

        return AppSettings(
            output_dir=path,
            request_timeout=self._positive(environ.get(REQUEST_TIMEOUT_VAR), REQUEST_TIMEOUT, float),
            max_keys=self._positive(environ.get(MAX_KEYS_VAR), MAX_KEYS, int),
            log_level=self._log_level(environ.get(LOG_LEVEL_VAR)),
        )

    @staticmethod
    def _positive(raw: str | None, default, cast):
        if raw is None:
            return default
        try:
            value = cast(raw)
        except (TypeError, ValueError):
            return default
        if not math.isfinite(value) or value <= 0:
            return default
        return value

    @staticmethod
    def _log_level(raw: str | None) -> str:
        level = (raw or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "INFO"
        return level
