"""Duration value type used for media lengths (stored as whole seconds)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 60 * 60


@dataclass(frozen=True, order=True)
class Duration:
    """A non-negative span of whole seconds."""

    total_seconds: int

    def __post_init__(self) -> None:
        if isinstance(self.total_seconds, bool) or not isinstance(
            self.total_seconds, int
        ):
            raise TypeError("Duration requires an integer number of seconds")
        if self.total_seconds < 0:
            raise ValueError(f"Duration cannot be negative: {self.total_seconds}")

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.total_seconds + other.total_seconds)

    def to_timedelta(self) -> timedelta:
        """Return the equivalent ``timedelta``."""
        return timedelta(seconds=self.total_seconds)

    @classmethod
    def from_timedelta(cls, value: timedelta) -> Duration:
        """Build a duration from a ``timedelta``, truncating sub-second parts."""
        return cls(int(value.total_seconds()))


def seconds(count: int) -> Duration:
    """Return a duration of ``count`` seconds."""
    return Duration(count)


def minutes(count: int) -> Duration:
    """Return a duration of ``count`` minutes."""
    return Duration(count * _SECONDS_PER_MINUTE)


def hours(count: int) -> Duration:
    """Return a duration of ``count`` hours."""
    return Duration(count * _SECONDS_PER_HOUR)
