"""
Time-prefixed string ids that sort lexicographically by creation time.

Both formats are columnar: each calendar field takes one character of the
radix-62 alphabet (so each field must stay below 62), followed by finer
fields and a random tail::

    event_id    Y M D h m s uu rrr..[c]       (radix 62)
    request_id  Y M D h sss uu qq ww rrr      (16 chars, radix 62 date, radix 32 rest)

``request_id[3:11]`` (hour through sequence) is an 8-character form that is
sortable within a day and easier to read out.
"""

from codec.alphabet import CHARS62, alphabet_for, encode
from config import GeneratorConfig, check_worker_id
from core.errors import InvalidArgument
from generation.sequence import SequenceCounter
from generation.snowflake import SequenceMethod, take_sequence
from utils.entropy import random_string
from utils.timestamp import SystemClock

EVENT_ID_SIZE = 12
EVENT_PREFIX_SIZE = 8
REQUEST_ID_SIZE = 16
SHORT_REQUEST_SLICE = slice(3, 11)


def _column(value, field):
    if not 0 <= value < len(CHARS62):
        raise InvalidArgument(f"{field} value {value} does not fit one radix-62 character", field=field, value=value)
    return CHARS62[value]


def _fixed(value, radix, width):
    return encode(value, radix).rjust(width, alphabet_for(radix).chars[0])


def _fraction(time, steps):
    """Sub-second part of ``time`` scaled to ``[0, steps)``."""
    return time.microsecond * steps // 1_000_000


def short_request_id(request_id):
    """The hour-to-sequence slice of a request id."""
    return request_id[SHORT_REQUEST_SLICE]


class TemporalGenerator:
    """Builds event and request ids for one configuration, counter and clock."""

    def __init__(self, config=None, counter=None, clock=None):
        self.config = config or GeneratorConfig()
        self.counter = counter or SequenceCounter()
        self.clock = clock or SystemClock()

    def _elapsed_ms(self):
        return self.clock.millis() - self.config.epoch_ms

    def _date_columns(self, time):
        return [
            _column(time.year % self.config.epoch.year, "year"),
            _column(time.month, "month"),
            _column(time.day, "day"),
        ]

    def event_id(self, size=EVENT_ID_SIZE, check_digit=False, time=None):
        if size < 1:
            raise InvalidArgument("event id size must be positive", field="size", value=size)
        time = time or self.clock.now(utc=True)

        parts = self._date_columns(time) + [
            _column(time.hour, "hour"),
            _column(time.minute, "minute"),
            _column(time.second, "second"),
            _fixed(_fraction(time, 62 * 62), 62, 2),
        ]
        tail_size = size - EVENT_PREFIX_SIZE - (1 if check_digit else 0)
        if tail_size > 0:
            parts.append(random_string(tail_size, CHARS62))

        id = "".join(parts)
        if check_digit:
            id = self.config.check_digit.append(id, 62)
        return id[:size]

    def request_id(self, time=None, sequence_method=SequenceMethod.COUNTER, worker_id=None):
        time = time or self.clock.now(utc=True)
        worker_id = self.config.worker_id if worker_id is None else check_worker_id(worker_id)
        seconds_in_hour = time.minute * 60 + time.second

        # the shared counter is keyed on the clock, never on `time`
        _, sequence = take_sequence(sequence_method, self.counter, self._elapsed_ms)

        return "".join(self._date_columns(time) + [
            _column(time.hour, "hour").lower(),
            _fixed(seconds_in_hour, 32, 3),
            _fixed(_fraction(time, 32 * 32), 32, 2),
            _fixed(sequence % 1024, 32, 2),
            _fixed(worker_id, 32, 2),
            random_string(3, alphabet_for(32).chars),
        ])
