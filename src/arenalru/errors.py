"""arenalru exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module and by tests.
"""


class ArenaLruError(Exception):
    """Base exception for all arenalru errors."""


class ConfigError(ArenaLruError):
    """Raised for invalid user configuration."""


class CapacityError(ArenaLruError, ValueError):
    """Raised when a cache is constructed with an invalid capacity."""


class InvariantError(ArenaLruError):
    """Raised when internal bookkeeping is violated.

    This always indicates a defect in the caller or in arenalru itself
    (use after release, release while still linked, a corrupted list), never
    a condition to recover from.
    """


class GraphError(ArenaLruError):
    """Raised for invalid graph input."""


class ScriptError(ArenaLruError):
    """Raised when a replay script cannot be read or parsed."""
