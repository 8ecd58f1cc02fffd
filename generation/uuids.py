"""UUID helpers: random v4 ids and UUID-shaped, time-prefixed hex ids."""

import uuid

from codec.alphabet import encode
from codec.check_digit import DEFAULT
from config import check_worker_id
from utils.entropy import token_hex
from utils.timestamp import SystemClock, as_utc, to_millis

_clock = SystemClock()


def format_uuid(hex32):
    """8-4-4-4-12 grouping of a 32-character hex string."""
    return "-".join((hex32[0:8], hex32[8:12], hex32[12:16], hex32[16:20], hex32[20:32]))


def uuid4():
    return str(uuid.uuid4())


def uuid_to_base(value, radix=10):
    """Integer value of a UUID, rendered in ``radix`` unless it is 10."""
    number = uuid.UUID(str(value)).int
    return number if radix == 10 else encode(number, radix)


def _milliseconds(time):
    return time.microsecond // 1000


def datetime_uuid(time=None, format=True, worker_id=0, utc=True):
    """Columnar id ``yyyymmdd-hhmm-ssuu-uwww-rrrrrrrrrrrr``.

    Calendar fields are decimal except the month (hex, two digits); ``uuu`` is
    milliseconds and ``www`` the worker id, both hex.
    """
    time = time or _clock.now(utc=utc)
    if utc:
        time = as_utc(time)
    id = "".join((
        f"{time.year:04d}",
        f"{time.month:02x}",
        f"{time.day:02d}{time.hour:02d}{time.minute:02d}{time.second:02d}",
        f"{_milliseconds(time):03x}",
        f"{check_worker_id(worker_id):03x}",
        token_hex(6),
    ))
    return format_uuid(id) if format else id


def epoch_uuid(time=None, format=True, worker_id=0, epoch=None, checker=DEFAULT):
    """Id ``ssssssss-uuuw-wwrr-rrrr-rrrrrrrrrrrc`` sorted by seconds since an epoch.

    Seconds count from the Unix epoch, or from ``epoch`` when one is given.
    The final hex character is a radix-16 check digit.
    """
    time = as_utc(time or _clock.now())
    seconds = to_millis(time) // 1000
    if epoch is not None:
        seconds -= to_millis(epoch) // 1000
    body = "".join((
        f"{seconds & 0xFFFFFFFF:08x}",
        f"{_milliseconds(time):03x}",
        f"{check_worker_id(worker_id):03x}",
        token_hex(9)[:17],
    ))
    id = checker.append(body, 16).lower()
    return format_uuid(id) if format else id


def valid_epoch_uuid(text, checker=DEFAULT):
    """True when the trailing check digit of an :func:`epoch_uuid` holds."""
    id = text.replace("-", "").lower()
    if len(id) != 32:
        return False
    return checker.compute(id[:-1], 16).lower() == id[-1]
