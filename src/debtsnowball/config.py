"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MAX_PERIODS = 600  # 50 years of monthly periods


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive_int(name: str, default: int) -> int:
    """Read a strictly positive integer from the environment."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc
    if parsed < 1:
        raise ValueError(f"{name} must be a positive integer, got {parsed}.")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtSnowball"
    LOG_FILENAME = "debtsnowball.log"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTSNOWBALL_DEV_MODE", default=True)
        self.MAX_PERIODS = _env_positive_int("DEBTSNOWBALL_MAX_PERIODS", DEFAULT_MAX_PERIODS)
        self.LOG_LEVEL = os.getenv("DEBTSNOWBALL_LOG_LEVEL", "INFO").strip().upper() or "INFO"

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and exports are written."""

        data_root = os.getenv("DEBTSNOWBALL_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    @property
    def log_dir(self) -> Path:
        return Path(self.DATA_DIR) / "logs"


class DevConfig(BaseConfig):
    """Development configuration with verbose console output."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite."""

    __test__ = False  # not a pytest test class

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
