class TransectGridError(Exception):
    """Base class for every error raised by the transect engine."""


class InvalidSiteInput(TransectGridError, ValueError):
    """A site record is missing a field or has an out-of-range value."""

    def __init__(self, message: str, name: str = None):
        self.name = name
        prefix = f"Site {name!r}: " if name else ""
        super().__init__(f"{prefix}{message}")


class InsufficientPointsError(TransectGridError, ValueError):
    """A waypoint group resolved to fewer than two vertices."""

    def __init__(self, key: str, count: int):
        self.key = key
        self.count = count
        super().__init__(f"Group {key!r} has {count} point(s); a line needs at least 2")


class DegenerateSequenceError(TransectGridError, ValueError):
    """Interval start lies beyond interval end."""
