"""Exceptions raised by node-autolayout.

Only programming misuse is reported as an error: unknown algorithm names,
invalid numeric options and unreadable snapshots. Malformed graph content
(dangling connections, cycles, self-loops) never raises.
"""


class LayoutError(Exception):
    """Base class for every error raised by the layout engine."""


class UnsupportedAlgorithmError(LayoutError, ValueError):
    """An algorithm name the dispatcher does not know."""


class OptionValidationError(LayoutError, ValueError):
    """A layout option outside its valid range."""


class SnapshotError(LayoutError, ValueError):
    """A graph snapshot that cannot be turned into a LayoutGraph."""
