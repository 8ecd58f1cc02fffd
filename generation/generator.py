"""One entry point for every id kind, bound to a single config, counter and clock."""

import threading
from collections import Counter

from config import GeneratorConfig
from generation import ksuid, tokens, uuids
from generation.sequence import SequenceCounter
from generation.snowflake import SequenceMethod, SnowflakeGenerator
from generation.temporal import TemporalGenerator, short_request_id
from internal.logging import get_logger
from utils.timestamp import SystemClock

_generator = None
_generator_lock = threading.Lock()


class IdGenerator:
    """Issues ids of every kind.

    The snowflake and request-id paths share one :class:`SequenceCounter`, so
    both draw distinct sequence numbers within a millisecond.
    """

    def __init__(self, config=None, clock=None, counter=None):
        self.config = config or GeneratorConfig()
        self.clock = clock or SystemClock()
        self.counter = counter or SequenceCounter()
        self.snowflakes = SnowflakeGenerator(self.config, self.counter, self.clock)
        self.temporal = TemporalGenerator(self.config, self.counter, self.clock)
        self._issued = Counter()
        self._stats_lock = threading.Lock()

    def _count(self, kind):
        with self._stats_lock:
            self._issued[kind] += 1

    def snowflake(self, worker_id=None, radix=10, sequence_method=SequenceMethod.COUNTER, check_digit=False):
        self._count("snowflake")
        return self.snowflakes.generate(worker_id, radix, sequence_method, check_digit)

    def parse_snowflake(self, value, radix=10, check_digit=False):
        return self.snowflakes.parse(value, radix, check_digit)

    def event_id(self, size=12, check_digit=False, time=None):
        self._count("event")
        return self.temporal.event_id(size, check_digit, time)

    def request_id(self, time=None, sequence_method=SequenceMethod.COUNTER, worker_id=None):
        self._count("request")
        return self.temporal.request_id(time, sequence_method, worker_id)

    short_request_id = staticmethod(short_request_id)

    def nano_id(self, size=20, radix=62, check_digit=True):
        self._count("nano")
        return tokens.nano_id(size, radix, check_digit, self.config.check_digit)

    def random_id(self, nbytes=8, radix=10, check_digit=False):
        self._count("random")
        return tokens.random_id(nbytes, radix, check_digit, self.config.check_digit)

    def code(self, size=8, check_digit=True):
        self._count("code")
        return tokens.code(size, check_digit, self.config.check_digit)

    def verify_code(self, text):
        return tokens.verify_code(text, self.config.check_digit)

    def uuid(self):
        self._count("uuid")
        return uuids.uuid4()

    def datetime_uuid(self, time=None, format=True, worker_id=None, utc=True):
        self._count("datetime_uuid")
        worker_id = self.config.worker_id if worker_id is None else worker_id
        return uuids.datetime_uuid(time or self.clock.now(utc=utc), format, worker_id, utc)

    def epoch_uuid(self, time=None, format=True, worker_id=None, application_epoch=False):
        self._count("epoch_uuid")
        worker_id = self.config.worker_id if worker_id is None else worker_id
        epoch = self.config.epoch if application_epoch else None
        return uuids.epoch_uuid(time or self.clock.now(), format, worker_id, epoch, self.config.check_digit)

    def ksuid(self, time=None):
        self._count("ksuid")
        return ksuid.generate_ksuid(time or self.clock.now())

    def stats(self):
        with self._stats_lock:
            issued = dict(self._issued)
        return {
            "issued": issued,
            "sequence_wraps": self.counter.wraps,
            "clock_regressions": self.snowflakes.regressions,
            "worker_id": self.config.worker_id,
            "epoch": self.config.epoch.isoformat(),
        }


def configure(config=None, clock=None):
    """Replace the process-wide generator."""
    global _generator
    with _generator_lock:
        _generator = IdGenerator(config, clock)
        get_logger().info("id generator configured", **_generator.config.to_dict())
    return _generator


def get_generator():
    global _generator
    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = IdGenerator()
    return _generator
