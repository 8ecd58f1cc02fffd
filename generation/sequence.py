"""Per-millisecond sequence numbers for time-based ids."""

import threading

from internal.logging import get_logger

SEQUENCE_BITS = 12
SEQUENCE_SIZE = 1 << SEQUENCE_BITS


class SequenceCounter:
    """Hands out 0, 1, 2, ... within a millisecond, restarting when it advances.

    Callers observing the same millisecond get distinct values in the order
    they take the lock. A caller arriving with an older millisecond than the
    last one seen keeps the count going instead of restarting it. Past 4096
    calls in one millisecond the values wrap and repeat; that is counted in
    ``wraps`` and logged, never raised.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last_millisecond = None
        self._counter = 0
        self.wraps = 0
        self._log = get_logger()

    def next_sequence(self, now_ms):
        with self._lock:
            sequence, wrapped = self._step(now_ms)
        if wrapped:
            self._log.warn("sequence wrapped", millisecond=now_ms, wraps=self.wraps)
        return sequence

    def take(self, read_ms):
        """Read the clock and take a sequence number under one lock.

        ``read_ms`` is called with the lock held, so readings reach the
        counter in the order they were made. Returns ``(now_ms, sequence)``.
        """
        with self._lock:
            now_ms = read_ms()
            sequence, wrapped = self._step(now_ms)
        if wrapped:
            self._log.warn("sequence wrapped", millisecond=now_ms, wraps=self.wraps)
        return now_ms, sequence

    def _step(self, now_ms):
        if self._last_millisecond is None or now_ms > self._last_millisecond:
            self._last_millisecond = now_ms
            self._counter = 0
        sequence = self._counter % SEQUENCE_SIZE
        wrapped = sequence == 0 and self._counter > 0
        self._counter += 1
        if wrapped:
            self.wraps += 1
        return sequence, wrapped

    @property
    def last_millisecond(self):
        return self._last_millisecond
