"""Wall-clock utilities: microsecond timestamps and injectable clocks."""

import time
from datetime import datetime, timedelta, timezone

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def now_micros():
    """Current time in microseconds since Unix epoch."""
    return time.time_ns() // 1_000


def now_millis():
    """Current time in milliseconds since Unix epoch."""
    return time.time_ns() // 1_000_000


def format_timestamp(epoch_us=None):
    """Format timestamp as ISO 8601 with microseconds."""
    if epoch_us is None:
        epoch_us = now_micros()

    dt = UNIX_EPOCH + timedelta(microseconds=epoch_us)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z"


def as_utc(dt):
    """Return an aware datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_millis(dt):
    """Milliseconds between the Unix epoch and ``dt`` (exact, no float math)."""
    return (as_utc(dt) - UNIX_EPOCH) // _ONE_MS


class SystemClock:
    """Reads the system clock."""

    def now(self, utc=True):
        if utc:
            return datetime.now(timezone.utc)
        return datetime.now().astimezone()

    def millis(self):
        return now_millis()


class FixedClock:
    """A clock frozen at a point in time, advanced manually. Used by tests."""

    def __init__(self, at):
        self._at = as_utc(at)

    def now(self, utc=True):
        return self._at if utc else self._at.astimezone()

    def millis(self):
        return to_millis(self._at)

    def advance(self, **delta):
        self._at += timedelta(**delta)

    def set(self, at):
        self._at = as_utc(at)
