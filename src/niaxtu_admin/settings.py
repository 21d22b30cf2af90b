from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SLOW_REQUEST_MS = 5000
DEFAULT_STATISTICS_PERIOD = "30d"
DEFAULT_ADMIN_PATH_PREFIX = "/api/v1/admin/"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
STATISTICS_PERIODS = ("7d", "30d", "90d", "6m", "1y")


class SettingsError(ValueError):
    """Raised when settings values are invalid."""


@dataclass(frozen=True)
class AppSettings:
    app_env: str
    log_level: str
    slow_request_ms: int
    default_statistics_period: str
    admin_path_prefix: str


def _read_dotenv(dotenv_path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    if not dotenv_path.exists():
        return values

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        if key:
            values[key] = value
    return values


def _get_str(values: Mapping[str, str], key: str, default: str) -> str:
    value = values.get(key, default).strip()
    if not value:
        raise SettingsError(f"{key} must not be empty.")
    return value


def _get_int(values: Mapping[str, str], key: str, default: int, *, minimum: int = 1) -> int:
    raw_value = values.get(key)
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise SettingsError(f"{key} must be integer: {raw_value}") from exc
    if value < minimum:
        raise SettingsError(f"{key} must be >= {minimum}: {value}")
    return value


def _get_choice(values: Mapping[str, str], key: str, default: str, choices: tuple[str, ...]) -> str:
    value = _get_str(values, key, default)
    normalized = value.upper() if key == "LOG_LEVEL" else value.lower()
    if normalized not in choices:
        raise SettingsError(f"{key} must be one of {', '.join(choices)}: {value}")
    return normalized


def load_settings(
    *,
    env: Mapping[str, str] | None = None,
    dotenv_path: str | Path = ".env",
) -> AppSettings:
    """Load settings from .env and environment variables.

    Priority: OS environment > .env > default.
    """

    env_values = dict(env) if env is not None else dict(os.environ)
    dotenv_values = _read_dotenv(Path(dotenv_path))
    merged: dict[str, str] = {**dotenv_values, **env_values}

    admin_path_prefix = _get_str(merged, "LOG_ADMIN_PATH_PREFIX", DEFAULT_ADMIN_PATH_PREFIX)
    if not admin_path_prefix.startswith("/"):
        raise SettingsError(f"LOG_ADMIN_PATH_PREFIX must start with '/': {admin_path_prefix}")

    return AppSettings(
        app_env=_get_str(merged, "APP_ENV", "development"),
        log_level=_get_choice(merged, "LOG_LEVEL", DEFAULT_LOG_LEVEL, LOG_LEVELS),
        slow_request_ms=_get_int(merged, "SLOW_REQUEST_MS", DEFAULT_SLOW_REQUEST_MS),
        default_statistics_period=_get_choice(
            merged,
            "DEFAULT_STATISTICS_PERIOD",
            DEFAULT_STATISTICS_PERIOD,
            STATISTICS_PERIODS,
        ),
        admin_path_prefix=admin_path_prefix,
    )
