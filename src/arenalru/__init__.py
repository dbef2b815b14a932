from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from arenalru.cache import CacheStats, LRUCache
from arenalru.deque import ArenaDeque
from arenalru.errors import (
    ArenaLruError,
    CapacityError,
    ConfigError,
    GraphError,
    InvariantError,
    ScriptError,
)
from arenalru.graph import Graph
from arenalru.stack import Stack
from arenalru.twostack import TwoStackQueue


def _package_version() -> str:
    try:
        return version("arenalru")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "__version__",
    "ArenaDeque",
    "ArenaLruError",
    "CacheStats",
    "CapacityError",
    "ConfigError",
    "Graph",
    "GraphError",
    "InvariantError",
    "LRUCache",
    "ScriptError",
    "Stack",
    "TwoStackQueue",
]
