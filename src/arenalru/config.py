"""Configuration loading for arenalru.

Only reads `arenalru.toml` and performs light validation; nothing here touches
the cache itself.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from arenalru.errors import ConfigError
from arenalru.log import LEVELS

CONFIG_FILENAME = "arenalru.toml"
DEFAULT_CAPACITY = 128
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class CacheConfig:
    capacity: int


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class ArenaLruConfig:
    version: int
    cache: CacheConfig
    logging: LoggingConfig


def default_config() -> ArenaLruConfig:
    return ArenaLruConfig(
        version=1,
        cache=CacheConfig(capacity=DEFAULT_CAPACITY),
        logging=LoggingConfig(level=DEFAULT_LOG_LEVEL),
    )


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `arenalru.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise ConfigError(f"Could not find {CONFIG_FILENAME} by walking upward from start path.")


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"Expected {name} to be a string.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> ArenaLruConfig:
    """Load and validate `arenalru.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise ConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise ConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise ConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise ConfigError(f"Unsupported config version: {version_i} (expected 1).")

    cache_tbl = _as_table(data.get("cache"), name="cache")
    logging_tbl = _as_table(data.get("logging"), name="logging")

    if "capacity" in cache_tbl:
        capacity = _as_int(cache_tbl["capacity"], name="cache.capacity")
    else:
        capacity = DEFAULT_CAPACITY

    if "level" in logging_tbl:
        level = _as_str(logging_tbl["level"], name="logging.level").upper()
    else:
        level = DEFAULT_LOG_LEVEL

    # Validation
    if capacity < 0:
        raise ConfigError("Invalid config: cache.capacity must be >= 0.")

    if level not in LEVELS:
        raise ConfigError(
            f"Invalid config: logging.level must be one of {', '.join(LEVELS)} (got {level!r})."
        )

    return ArenaLruConfig(
        version=version_i,
        cache=CacheConfig(capacity=capacity),
        logging=LoggingConfig(level=level),
    )
