"""
Snowflake ids: timestamp, worker id and sequence packed into one integer.

Layout, most significant first (the sign bit stays clear)::

    | 41 bits ms since epoch | 10 bits worker id | 12 bits sequence |

Within one process and one millisecond, counter-mode ids increase with the
sequence; across milliseconds they increase with the timestamp, as long as
the clock does not run backwards. A backwards step is logged, not corrected.
"""

import threading
from datetime import timedelta
from enum import Enum
from typing import NamedTuple

from codec.alphabet import decode, encode
from config import GeneratorConfig, check_worker_id
from core.errors import DecodeError, InvalidArgument
from generation.sequence import SEQUENCE_BITS, SequenceCounter
from internal.logging import get_logger
from utils.entropy import randbelow
from utils.timestamp import SystemClock, to_millis

TIMESTAMP_BITS = 41
WORKER_BITS = 10

TIMESTAMP_MASK = (1 << TIMESTAMP_BITS) - 1
WORKER_MASK = (1 << WORKER_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1

WORKER_SHIFT = SEQUENCE_BITS
TIMESTAMP_SHIFT = WORKER_BITS + SEQUENCE_BITS


class SequenceMethod(str, Enum):
    COUNTER = "counter"
    RANDOM = "random"


class SnowflakeParts(NamedTuple):
    timestamp_ms: int
    worker_id: int
    sequence: int


def pack_int_parts(*pairs):
    """Build an integer from ``(bits, value)`` pairs, most significant first.

    Each value is masked to its width.
    """
    packed = 0
    for bits, value in pairs:
        packed = (packed << bits) | (value & ((1 << bits) - 1))
    return packed


def compose(timestamp_ms, worker_id, sequence):
    """Pack the three fields. Out-of-range values are masked, not rejected."""
    return (
        ((timestamp_ms & TIMESTAMP_MASK) << TIMESTAMP_SHIFT)
        | ((worker_id & WORKER_MASK) << WORKER_SHIFT)
        | (sequence & SEQUENCE_MASK)
    )


def decompose(value):
    """Inverse of :func:`compose`."""
    return SnowflakeParts(
        (value >> TIMESTAMP_SHIFT) & TIMESTAMP_MASK,
        (value >> WORKER_SHIFT) & WORKER_MASK,
        value & SEQUENCE_MASK,
    )


def parse_sequence_method(sequence_method):
    try:
        return SequenceMethod(sequence_method)
    except ValueError as exc:
        raise InvalidArgument(f"sequence method must be 'counter' or 'random', not {sequence_method!r}",
                              field="sequence_method", value=str(sequence_method), cause=exc) from exc


def take_sequence(sequence_method, counter, read_ms):
    """``(timestamp_ms, sequence)`` for one id.

    Counter mode reads the clock inside the counter lock; random mode reads
    it directly and draws the sequence at random.
    """
    if parse_sequence_method(sequence_method) is SequenceMethod.COUNTER:
        return counter.take(read_ms)
    return read_ms(), randbelow(SEQUENCE_MASK + 1)


class SnowflakeGenerator:
    """Issues snowflake ids for one configuration, counter and clock."""

    def __init__(self, config=None, counter=None, clock=None):
        self.config = config or GeneratorConfig()
        self.counter = counter or SequenceCounter()
        self.clock = clock or SystemClock()
        self._clock_lock = threading.Lock()
        self._last_timestamp = None
        self.regressions = 0
        self._log = get_logger()

    def elapsed_ms(self):
        """Milliseconds since the configured epoch."""
        return self.clock.millis() - self.config.epoch_ms

    def generate(self, worker_id=None, radix=10, sequence_method=SequenceMethod.COUNTER, check_digit=False):
        """New snowflake, an ``int`` for radix 10 without check digit, else a string."""
        worker_id = self.config.worker_id if worker_id is None else check_worker_id(worker_id)
        timestamp_ms, sequence = take_sequence(sequence_method, self.counter, self._read_clock)
        value = compose(timestamp_ms, worker_id, sequence)
        if radix == 10 and not check_digit:
            return value

        text = str(value) if radix == 10 else encode(value, radix)
        return self.config.check_digit.append(text, radix) if check_digit else text

    def parse(self, value, radix=10, check_digit=False):
        """Fields of an issued snowflake given as an int or rendered string."""
        if isinstance(value, int):
            return decompose(value)
        text = str(value)
        if check_digit:
            stripped = self.config.check_digit.strip(text, radix)
            if stripped is None:
                raise DecodeError("check digit does not match", text=text)
            text = stripped
        return decompose(decode(text, radix))

    def timestamp_of(self, parts):
        """Wall-clock time at which ``parts`` were issued (UTC)."""
        return self.config.epoch + timedelta(milliseconds=parts.timestamp_ms)

    def timestamp_ms_for(self, when):
        """Snowflake timestamp field for a datetime."""
        return to_millis(when) - self.config.epoch_ms

    def _read_clock(self):
        """Current timestamp field, noting any step back from the previous read."""
        with self._clock_lock:
            timestamp_ms = self.elapsed_ms()
            last = self._last_timestamp
            self._last_timestamp = timestamp_ms
            regressed = last is not None and timestamp_ms < last
            if regressed:
                self.regressions += 1

        if regressed:
            self._log.warn("clock moved backwards", last_ms=last, now_ms=timestamp_ms, behind_ms=last - timestamp_ms)
        return timestamp_ms

    @property
    def last_timestamp(self):
        return self._last_timestamp
